"""
주얼리 카탈로그 가격 센터 - 공통 Enum 정의
프론트엔드와 백엔드에서 동일한 의미로 사용되어야 함
"""

import enum


class ProductType(str, enum.Enum):
    """상품 타입 (가격 계산 로직 분기용 내부 타입)"""
    JEWELLERY_DEFAULT = "JEWELLERY_DEFAULT"  # 금속 + 선택적 스톤 구성의 기본 주얼리


class RecalculationJobStatus(str, enum.Enum):
    """가격 재계산 작업 상태"""
    PENDING = "pending"       # 대기 중
    RUNNING = "running"       # 실행 중
    COMPLETED = "completed"   # 완료
    CANCELLED = "cancelled"   # 취소 (새 트리거에 의해 대체됨)
    FAILED = "failed"         # 실패 (치명적 오류)


class TriggerSource(str, enum.Enum):
    """가격 재계산 트리거 출처"""
    METAL_PURITY = "metal_purity"
    DIAMOND_PRICING = "diamond_pricing"
    DIAMOND_PRICING_BULK = "diamond_pricing_bulk"
    GEMSTONE_PRICING = "gemstone_pricing"
    GEMSTONE_PRICING_BULK = "gemstone_pricing_bulk"
    MAKING_CHARGE = "making_charge"
    OTHER_CHARGE = "other_charge"
    MRP_MARKUP = "mrp_markup"
    PRICING_RULE = "pricing_rule"
    MANUAL = "manual"


class MatchType(str, enum.Enum):
    """집합 조건 매칭 방식"""
    ANY = "any"  # 하나 이상 포함
    ALL = "all"  # 모두 포함
