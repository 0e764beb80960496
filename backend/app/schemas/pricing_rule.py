"""
주얼리 카탈로그 가격 센터 - 가격 규칙 스키마
조건은 type 필드로 구분되는 태그드 유니온 (조건 종류당 모델 하나)
"""

from decimal import Decimal
from typing import Annotated, Literal, Optional, Union

from pydantic import Field, model_validator

from app.models.enums import MatchType, ProductType
from app.schemas.common import CamelModel


class _ConditionBase(CamelModel):
    """저장 포맷 {"type": ..., "value": {...}} 을 평탄화하여 검증"""

    @model_validator(mode="before")
    @classmethod
    def _unwrap_value(cls, data):
        if isinstance(data, dict) and isinstance(data.get("value"), dict):
            return {"type": data.get("type"), **data["value"]}
        return data


# ============================================================================
# 상품 속성 집합 조건 (any/all)
# ============================================================================

class CategoryCondition(_ConditionBase):
    type: Literal["category"] = "category"
    match_type: MatchType = MatchType.ANY
    category_ids: list[str] = []


class TagsCondition(_ConditionBase):
    type: Literal["tags"] = "tags"
    match_type: MatchType = MatchType.ANY
    tag_ids: list[str] = []


class BadgesCondition(_ConditionBase):
    type: Literal["badges"] = "badges"
    match_type: MatchType = MatchType.ANY
    badge_ids: list[str] = []


# ============================================================================
# 변형 옵션 포함 조건
# ============================================================================

class MetalTypeCondition(_ConditionBase):
    type: Literal["metal_type"] = "metal_type"
    metal_type_ids: list[str] = []


class MetalColorCondition(_ConditionBase):
    type: Literal["metal_color"] = "metal_color"
    metal_color_ids: list[str] = []


class MetalPurityCondition(_ConditionBase):
    type: Literal["metal_purity"] = "metal_purity"
    metal_purity_ids: list[str] = []


class DiamondClarityColorCondition(_ConditionBase):
    type: Literal["diamond_clarity_color"] = "diamond_clarity_color"
    diamond_clarity_color_ids: list[str] = []


# ============================================================================
# 범위 조건 (양 끝 포함)
# ============================================================================

class _RangeCondition(_ConditionBase):
    range_from: Decimal = Field(..., alias="from")
    range_to: Decimal = Field(..., alias="to")

    def contains(self, value: Decimal) -> bool:
        return self.range_from <= value <= self.range_to


class DiamondCaratCondition(_RangeCondition):
    type: Literal["diamond_carat"] = "diamond_carat"


class GemstoneCaratCondition(_RangeCondition):
    type: Literal["gemstone_carat"] = "gemstone_carat"


class PearlGramCondition(_RangeCondition):
    type: Literal["pearl_gram"] = "pearl_gram"


class MetalWeightCondition(_RangeCondition):
    type: Literal["metal_weight"] = "metal_weight"


PricingCondition = Annotated[
    Union[
        CategoryCondition,
        TagsCondition,
        BadgesCondition,
        MetalTypeCondition,
        MetalColorCondition,
        MetalPurityCondition,
        DiamondClarityColorCondition,
        DiamondCaratCondition,
        GemstoneCaratCondition,
        PearlGramCondition,
        MetalWeightCondition,
    ],
    Field(discriminator="type"),
]


class PricingRuleActions(CamelModel):
    """구성 요소별 마크업 % (원가 기준, 규칙 간 합산)"""
    diamond_markup: Decimal = Field(Decimal("0"), ge=0, le=100)
    making_charge_markup: Decimal = Field(Decimal("0"), ge=0, le=100)
    gemstone_markup: Decimal = Field(Decimal("0"), ge=0, le=100)
    pearl_markup: Decimal = Field(Decimal("0"), ge=0, le=100)

    def markup_for(self, component: str) -> Decimal:
        return getattr(self, f"{component}_markup")


class PricingRuleConfig(CamelModel):
    """가격 규칙 (마스터 데이터 스냅샷 구성 요소)"""
    id: str
    name: Optional[str] = None
    product_type: str = ProductType.JEWELLERY_DEFAULT.value
    conditions: list[PricingCondition] = []
    actions: PricingRuleActions = PricingRuleActions()
    is_active: bool = True
