"""
주얼리 카탈로그 가격 센터 - 마스터 데이터 스냅샷 스키마
계산 주기(요청 1회 또는 재계산 작업 1회)마다 한 번 읽는 불변 번들
"""

from decimal import Decimal
from typing import Optional

from pydantic import Field

from app.schemas.common import CamelModel
from app.schemas.pricing_rule import PricingRuleConfig


class MetalPurityRow(CamelModel):
    id: str
    metal_type_id: str
    price: int = Field(..., description="그램당 가격 (통화 최소 단위)")
    slug: Optional[str] = None


class MakingChargeRow(CamelModel):
    id: str
    metal_type_id: str
    weight_from: Decimal
    weight_to: Decimal
    is_fixed_pricing: bool
    amount: Decimal = Field(..., description="고정: 그램당 통화 단위 금액 / 비고정: 금속 원가 대비 %")

    def covers(self, metal_type_id: str, weight: Decimal) -> bool:
        return (
            self.metal_type_id == metal_type_id
            and self.weight_from <= weight <= self.weight_to
        )


class OtherChargeRow(CamelModel):
    id: str
    name: str
    amount: int = Field(..., description="통화 최소 단위")


class StonePriceRow(CamelModel):
    id: str
    stone_type_id: Optional[str] = None
    stone_shape_id: str
    stone_quality_id: str
    stone_color_id: Optional[str] = None
    ct_from: Decimal
    ct_to: Decimal
    price: int = Field(..., description="캐럿당 가격 (통화 최소 단위)")


class MrpMarkupConfig(CamelModel):
    """판매가 → 정가(compare-at) 마크업 %"""
    diamond: Decimal = Decimal("0")
    gemstone: Decimal = Decimal("0")
    pearl: Decimal = Decimal("0")
    making_charge: Decimal = Decimal("0")

    def percent_for(self, component: str) -> Decimal:
        return getattr(self, component)


class MasterOptionSets(CamelModel):
    """
    상품 옵션 선택 검증용 활성 ID 집합

    금속 순도 소속은 metal_purities, 스톤 단가 ID는 stone_prices에서 확인
    """
    metal_types: frozenset[str] = frozenset()
    metal_colors: dict[str, str] = Field({}, description="금속 색상 ID → 금속 타입 ID")
    diamond_clarity_colors: frozenset[str] = frozenset()
    stone_shapes: frozenset[str] = frozenset()
    gemstone_types: frozenset[str] = frozenset()
    gemstone_qualities: frozenset[str] = frozenset()
    gemstone_colors: frozenset[str] = frozenset()
    pearl_types: frozenset[str] = frozenset()
    pearl_qualities: frozenset[str] = frozenset()


class MasterDataSnapshot(CamelModel):
    """가격 계산 입력 마스터 데이터 (읽기 전용)"""
    metal_purities: list[MetalPurityRow] = []
    stone_prices: list[StonePriceRow] = []
    making_charges: list[MakingChargeRow] = []
    other_charges: list[OtherChargeRow] = []
    mrp_markup: MrpMarkupConfig = MrpMarkupConfig()
    pricing_rules: list[PricingRuleConfig] = []
    option_slugs: dict[str, str] = Field({}, description="옵션 ID → slug (변형 SKU 생성용)")
    options: MasterOptionSets = MasterOptionSets()

    def find_metal_purity(self, metal_purity_id: str) -> Optional[MetalPurityRow]:
        return next((p for p in self.metal_purities if p.id == metal_purity_id), None)

    def find_making_charge(self, metal_type_id: str, weight: Decimal) -> Optional[MakingChargeRow]:
        return next((m for m in self.making_charges if m.covers(metal_type_id, weight)), None)

    def find_stone_price(self, pricing_id: str) -> Optional[StonePriceRow]:
        return next((s for s in self.stone_prices if s.id == pricing_id), None)

    @property
    def total_other_charges(self) -> int:
        return sum(c.amount for c in self.other_charges)

    def slug_for(self, option_id: Optional[str]) -> Optional[str]:
        if option_id is None:
            return None
        return self.option_slugs.get(option_id)
