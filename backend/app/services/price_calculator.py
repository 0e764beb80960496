"""
주얼리 카탈로그 가격 센터 - 변형 가격 계산기
마스터 데이터 스냅샷으로 변형 1개의 원가/판매가/정가 구성 요소를 계산

상품 등록/수정, 카탈로그 전체 재계산이 모두 이 모듈만 사용하므로
반올림 위치와 순서를 바꾸면 저장된 기존 가격과 어긋남.
반올림은 중간 합계마다 "0.5는 0에서 먼 쪽으로" 정수 최소 단위로 수행.
"""

from collections.abc import Sequence
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from app.core.exceptions import (
    MetalPurityNotFoundError,
    OptionMetalTypeMismatchError,
    MakingChargeNotFoundError,
    StonePricingNotFoundError,
    StonePricingMismatchError,
)
from app.models.enums import ProductType
from app.schemas.master_data import MasterDataSnapshot
from app.schemas.pricing import (
    CurrencyConfig,
    PriceComponents,
    PricingResult,
    ProductPricingContext,
    VariantContext,
)
from app.schemas.pricing_rule import PricingRuleConfig
from app.services.rule_matcher import matches_conditions


_ONE = Decimal(1)
_HUNDRED = Decimal(100)

# 마크업 대상 구성 요소 (금속은 마크업 없음)
MARKUP_COMPONENTS = ("making_charge", "diamond", "gemstone", "pearl")


def round_subunits(value) -> int:
    """0.5는 0에서 먼 쪽으로 반올림하여 정수 최소 단위 반환"""
    return int(Decimal(value).quantize(_ONE, rounding=ROUND_HALF_UP))


def resolve_product_type(product_type: Optional[str]) -> ProductType:
    """알 수 없는 타입은 기본 주얼리 타입으로 계산"""
    try:
        return ProductType(product_type)
    except ValueError:
        return ProductType.JEWELLERY_DEFAULT


# ============================================================================
# 구성 요소별 원가
# ============================================================================

def calculate_metal_cost(variant: VariantContext, master: MasterDataSnapshot) -> int:
    purity = master.find_metal_purity(variant.metal_purity)
    if purity is None:
        raise MetalPurityNotFoundError(variant.metal_purity)
    if purity.metal_type_id != variant.metal_type:
        raise OptionMetalTypeMismatchError("금속 순도", purity.id, variant.metal_type)
    return round_subunits(purity.price * variant.metal_weight)


def calculate_making_charge_cost(
    variant: VariantContext,
    metal_cost: int,
    master: MasterDataSnapshot,
    currency: CurrencyConfig,
) -> int:
    """세공비 구간 기본 금액 + 기타 비용 합계"""
    band = master.find_making_charge(variant.metal_type, variant.metal_weight)
    if band is None:
        raise MakingChargeNotFoundError(variant.metal_type, variant.metal_weight)

    if band.is_fixed_pricing:
        base = round_subunits(variant.metal_weight * band.amount * currency.subunits)
    else:
        base = round_subunits(band.amount / _HUNDRED * metal_cost)

    return base + master.total_other_charges


def calculate_diamond_cost(
    variant: VariantContext,
    product: ProductPricingContext,
    master: MasterDataSnapshot,
) -> int:
    clarity_color_id = variant.diamond_clarity_color
    if not clarity_color_id:
        return 0

    total = 0
    for entry in product.stone.diamond_entries:
        link = entry.pricing_for(clarity_color_id)
        if link is None:
            continue

        stone_price = master.find_stone_price(link.pricing_id)
        if stone_price is None:
            raise StonePricingNotFoundError("diamond", link.pricing_id)
        if stone_price.stone_shape_id != entry.shape_id:
            raise StonePricingMismatchError("diamond", link.pricing_id, "shape")
        if stone_price.stone_quality_id != clarity_color_id:
            raise StonePricingMismatchError("diamond", link.pricing_id, "clarity/color")

        total += round_subunits(stone_price.price * entry.total_carat)
    return total


def calculate_gemstone_cost(
    variant: VariantContext,
    product: ProductPricingContext,
    master: MasterDataSnapshot,
) -> int:
    color_id = variant.gemstone_color
    gemstone = product.stone.gemstone
    if not color_id or gemstone is None:
        return 0

    total = 0
    for entry in product.stone.gemstone_entries:
        link = entry.pricing_for(color_id)
        if link is None:
            continue

        stone_price = master.find_stone_price(link.pricing_id)
        if stone_price is None:
            raise StonePricingNotFoundError("gemstone", link.pricing_id)
        if stone_price.stone_type_id != entry.type_id:
            raise StonePricingMismatchError("gemstone", link.pricing_id, "type")
        if stone_price.stone_shape_id != entry.shape_id:
            raise StonePricingMismatchError("gemstone", link.pricing_id, "shape")
        if stone_price.stone_quality_id != gemstone.quality_id:
            raise StonePricingMismatchError("gemstone", link.pricing_id, "quality")
        if stone_price.stone_color_id != color_id:
            raise StonePricingMismatchError("gemstone", link.pricing_id, "color")

        total += round_subunits(stone_price.price * entry.total_carat)
    return total


def calculate_pearl_cost(product: ProductPricingContext, currency: CurrencyConfig) -> int:
    """진주는 변형 옵션과 무관하게 상품 단위 금액 합계"""
    return sum(
        round_subunits(entry.amount * currency.subunits)
        for entry in product.stone.pearl_entries
    )


# ============================================================================
# 마크업 / 세금
# ============================================================================

def calculate_rule_markups(
    costs: dict[str, int],
    rules: Sequence[PricingRuleConfig],
    variant: VariantContext,
    product: ProductPricingContext,
) -> dict[str, int]:
    """
    매칭된 규칙별 마크업 금액 합산 (복리 아님)
    각 규칙의 금액은 원가 기준으로 개별 반올림
    """
    product_type = resolve_product_type(product.product_type).value
    markups = dict.fromkeys(costs, 0)

    for rule in rules:
        if not rule.is_active or rule.product_type != product_type:
            continue

        percents = {c: rule.actions.markup_for(c) for c in costs}
        if not any(p > 0 for p in percents.values()):
            continue
        if not matches_conditions(rule.conditions, variant, product):
            continue

        for component, percent in percents.items():
            if percent > 0:
                markups[component] += round_subunits(costs[component] * percent / _HUNDRED)

    return markups


def build_price_components(
    metal: int,
    making_charge: int,
    diamond: int,
    gemstone: int,
    pearl: int,
    currency: CurrencyConfig,
) -> PriceComponents:
    total = metal + making_charge + diamond + gemstone + pearl
    tax = round_subunits(total * currency.tax_rate_percent / _HUNDRED) if currency.include_tax else 0

    return PriceComponents(
        metal_price=metal,
        making_charge=making_charge,
        diamond_price=diamond,
        gemstone_price=gemstone,
        pearl_price=pearl,
        final_price_without_tax=total,
        tax_amount=tax,
        final_price_with_tax=total + tax,
        tax_included=currency.include_tax,
        final_price=total + tax,
    )


def compute_pricing(
    variant: VariantContext,
    product: ProductPricingContext,
    rules: Sequence[PricingRuleConfig],
    master: MasterDataSnapshot,
    currency: Optional[CurrencyConfig] = None,
) -> PricingResult:
    """
    변형 가격 계산

    1. 금속: 순도 시세 × 중량 (판매가/정가 = 원가)
    2. 세공비: 구간 기본 금액 + 기타 비용
    3. 다이아몬드/젬스톤: 옵션별 스톤 단가 × 캐럿 (참조 무결성 검증)
    4. 진주: 상품 단위 금액
    5. 판매가 = 원가 + 매칭 규칙 마크업 합계, 정가 = 판매가 × (1 + MRP%)
    6. 단계별 합계 및 세금

    Raises:
        PricingError: 세공비 구간 없음, 스톤 단가 미존재/불일치, 금속 순도 없음
    """
    currency = currency or CurrencyConfig.from_settings()

    metal_cost = calculate_metal_cost(variant, master)
    costs = {
        "making_charge": calculate_making_charge_cost(variant, metal_cost, master, currency),
        "diamond": calculate_diamond_cost(variant, product, master),
        "gemstone": calculate_gemstone_cost(variant, product, master),
        "pearl": calculate_pearl_cost(product, currency),
    }

    markups = calculate_rule_markups(costs, rules, variant, product)
    selling = {c: costs[c] + markups[c] for c in MARKUP_COMPONENTS}
    compare_at = {
        c: round_subunits(selling[c] * (_ONE + master.mrp_markup.percent_for(c) / _HUNDRED))
        for c in MARKUP_COMPONENTS
    }

    def tier(values: dict[str, int]) -> PriceComponents:
        return build_price_components(
            metal_cost,
            values["making_charge"],
            values["diamond"],
            values["gemstone"],
            values["pearl"],
            currency,
        )

    return PricingResult(
        cost=tier(costs),
        selling=tier(selling),
        compare_at=tier(compare_at),
    )
