"""
주얼리 카탈로그 가격 센터 - 변형 구성 스키마
상품 등록/수정 요청의 금속 선택, 생성된 변형 목록, 가격 계산 결과
"""

from decimal import Decimal
from typing import Optional

from pydantic import Field

from app.schemas.common import CamelModel
from app.schemas.pricing import OptionRef, PricingResult, ProductStoneComposition, ProductAttributes


# ============================================================================
# 금속 선택
# ============================================================================

class MetalColorOption(CamelModel):
    color_id: str


class MetalPurityOption(CamelModel):
    purity_id: str
    weight: Decimal = Field(..., description="금속 중량 (g)")


class SelectedMetal(CamelModel):
    """금속 타입별 선택 컬러/순도"""
    metal_type_id: str
    colors: list[MetalColorOption] = []
    purities: list[MetalPurityOption] = []


# ============================================================================
# 변형 조합 / 제출 변형
# ============================================================================

class VariantOption(CamelModel):
    """선택으로부터 펼쳐진 변형 조합 1개"""
    metal_type: str
    metal_color: str
    metal_purity: str
    metal_weight: Decimal
    diamond_clarity_color: Optional[str] = None
    gemstone_color: Optional[str] = None

    @property
    def key(self) -> str:
        """변형 키: 옵션 ID를 '-'로 연결 (없는 옵션 제외)"""
        parts = (
            self.metal_type,
            self.metal_color,
            self.metal_purity,
            self.diamond_clarity_color,
            self.gemstone_color,
        )
        return "-".join(p for p in parts if p)


class SubmittedMetalPurity(OptionRef):
    weight: Optional[Decimal] = None


class SubmittedVariant(CamelModel):
    """클라이언트가 생성하여 제출한 변형"""
    id: str = Field(..., min_length=1, description="변형 키")
    metal_type: OptionRef
    metal_color: OptionRef
    metal_purity: SubmittedMetalPurity
    diamond_clarity_color: Optional[OptionRef] = None
    gemstone_color: Optional[OptionRef] = None
    is_default: bool = False


class VariantsDetails(CamelModel):
    default_variant_id: str = Field(..., min_length=1)
    generated_variants: list[SubmittedVariant] = Field(..., min_length=1)


class ValidatedVariants(CamelModel):
    variants: list[SubmittedVariant]
    default_variant_id: str


# ============================================================================
# 상품 변형 가격 계산 (등록/수정 미리보기)
# ============================================================================

class ProductVariantPricingRequest(CamelModel):
    """상품 등록/수정 시 변형 가격 계산 요청"""
    product_sku: str = Field(..., min_length=1)
    product_type: Optional[str] = None
    selected_metals: list[SelectedMetal] = Field(..., min_length=1)
    stone: ProductStoneComposition = ProductStoneComposition()
    attributes: ProductAttributes = ProductAttributes()
    variants: VariantsDetails


class StoneWeight(CamelModel):
    carat: Optional[Decimal] = None
    grams: Decimal
    count: int


class StoneWeights(CamelModel):
    """상품 단위 스톤 중량 (모든 변형 공통)"""
    diamond: Optional[StoneWeight] = None
    gemstone: Optional[StoneWeight] = None
    pearl: Optional[StoneWeight] = None

    @property
    def total_grams(self) -> Decimal:
        return sum((w.grams for w in (self.diamond, self.gemstone, self.pearl) if w), Decimal("0"))


class PricedVariant(CamelModel):
    """가격이 계산된 변형"""
    key: str
    sku: str
    metal_type: str
    metal_color: str
    metal_purity: str
    metal_weight: Decimal
    diamond_clarity_color: Optional[str] = None
    gemstone_color: Optional[str] = None
    total_weight: Decimal = Field(..., description="금속 + 스톤 총 중량 (g)")
    is_default: bool
    pricing: PricingResult

    @property
    def price(self) -> int:
        return self.pricing.selling.final_price


class ProductVariantPricing(CamelModel):
    """상품 변형 가격 계산 결과"""
    variants: list[PricedVariant]
    default_variant_id: str
    stone_weights: StoneWeights
    min_price: int
    max_price: int
