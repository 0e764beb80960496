"""
주얼리 카탈로그 가격 센터 - 도메인 예외
가격 계산/변형 검증 오류는 code + message 형태로 API 에러 포맷에 그대로 노출됨
"""

from typing import Any, Optional


class CatalogError(Exception):
    """카탈로그 도메인 오류 기본 클래스"""

    code = "CATALOG_ERROR"

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message, "details": self.details}


# ============================================================================
# 가격 계산 오류 (입력/마스터 데이터 설정 오류)
# ============================================================================

class PricingError(CatalogError):
    """가격 계산 실패"""
    code = "PRICING_ERROR"


class MetalPurityNotFoundError(PricingError):
    """변형의 금속 순도가 마스터 데이터에 없음"""
    code = "METAL_PURITY_NOT_FOUND"

    def __init__(self, metal_purity_id: str):
        super().__init__(
            f"금속 순도를 찾을 수 없습니다: {metal_purity_id}",
            {"metal_purity_id": metal_purity_id},
        )


class InvalidOptionError(PricingError):
    """선택한 옵션이 활성 마스터 데이터에 없음"""
    code = "INVALID_OPTION"

    def __init__(self, option_kind: str, option_id: Optional[str]):
        super().__init__(
            f"유효하지 않은 {option_kind}: {option_id}",
            {"option_kind": option_kind, "option_id": option_id},
        )


class OptionMetalTypeMismatchError(PricingError):
    """금속 색상/순도가 선택한 금속 타입 소속이 아님"""
    code = "OPTION_METAL_TYPE_MISMATCH"

    def __init__(self, option_kind: str, option_id: str, metal_type_id: str):
        super().__init__(
            f"{option_kind} {option_id}은(는) 금속 타입 {metal_type_id}에 속하지 않습니다",
            {"option_kind": option_kind, "option_id": option_id, "metal_type_id": metal_type_id},
        )


class MakingChargeNotFoundError(PricingError):
    """금속 타입/중량에 해당하는 세공비 구간 없음"""
    code = "MAKING_CHARGE_NOT_FOUND"

    def __init__(self, metal_type_id: str, metal_weight):
        super().__init__(
            f"금속 타입 {metal_type_id}, 중량 {metal_weight}g에 해당하는 세공비 구간이 없습니다",
            {"metal_type_id": metal_type_id, "metal_weight": str(metal_weight)},
        )


class StonePricingNotFoundError(PricingError):
    """스톤 단가 참조를 찾을 수 없음"""
    code = "STONE_PRICING_NOT_FOUND"

    def __init__(self, stone_kind: str, pricing_id: str):
        super().__init__(
            f"{stone_kind} 스톤 단가를 찾을 수 없습니다: {pricing_id}",
            {"stone_kind": stone_kind, "pricing_id": pricing_id},
        )


class StonePricingMismatchError(PricingError):
    """스톤 단가가 연결된 항목과 속성이 불일치 (참조 무결성 위반)"""
    code = "STONE_PRICING_MISMATCH"

    def __init__(self, stone_kind: str, pricing_id: str, attribute: str):
        super().__init__(
            f"{stone_kind} 스톤 단가 {pricing_id}의 {attribute} 불일치",
            {"stone_kind": stone_kind, "pricing_id": pricing_id, "attribute": attribute},
        )


# ============================================================================
# 변형 구성 검증 오류
# ============================================================================

class VariantValidationError(CatalogError):
    """제출된 변형 목록이 예상 조합과 다름"""
    code = "VARIANT_VALIDATION_ERROR"


class VariantCountMismatchError(VariantValidationError):
    code = "VARIANT_COUNT_MISMATCH"

    def __init__(self, expected: int, received: int):
        super().__init__(
            f"변형 개수가 일치하지 않습니다. 예상 {expected}개, 수신 {received}개",
            {"expected": expected, "received": received},
        )


def _preview(keys: list[str]) -> str:
    return ", ".join(keys[:3]) + ("..." if len(keys) > 3 else "")


class MissingVariantsError(VariantValidationError):
    code = "MISSING_VARIANTS"

    def __init__(self, keys: list[str]):
        super().__init__(f"누락된 변형: {_preview(keys)}", {"variant_keys": keys})
        self.keys = keys


class UnexpectedVariantsError(VariantValidationError):
    code = "INVALID_VARIANTS"

    def __init__(self, keys: list[str]):
        super().__init__(f"유효하지 않은 변형: {_preview(keys)}", {"variant_keys": keys})
        self.keys = keys


class DefaultVariantError(VariantValidationError):
    code = "INVALID_DEFAULT_VARIANT"
