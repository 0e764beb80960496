"""
주얼리 카탈로그 가격 센터 - 가격 규칙 조건 매칭
(변형, 상품) 컨텍스트에 대해 규칙 조건 목록을 평가하는 순수 함수 (I/O 없음)
"""

from collections.abc import Iterable, Sequence

from app.models.enums import MatchType
from app.schemas.pricing import ProductPricingContext, VariantContext
from app.schemas.pricing_rule import (
    PricingCondition,
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
)


def _match_ids(match_type: MatchType, candidate_ids: Iterable[str], attached_ids: set[str]) -> bool:
    if match_type == MatchType.ANY:
        return any(i in attached_ids for i in candidate_ids)
    return all(i in attached_ids for i in candidate_ids)


def evaluate_condition(
    condition: PricingCondition,
    variant: VariantContext,
    product: ProductPricingContext,
) -> bool:
    """단일 조건 평가"""
    stone = product.stone

    if isinstance(condition, CategoryCondition):
        return _match_ids(condition.match_type, condition.category_ids, product.attributes.category_ids)
    if isinstance(condition, TagsCondition):
        return _match_ids(condition.match_type, condition.tag_ids, product.attributes.tag_ids)
    if isinstance(condition, BadgesCondition):
        return _match_ids(condition.match_type, condition.badge_ids, product.attributes.badge_ids)

    if isinstance(condition, MetalTypeCondition):
        return variant.metal_type in condition.metal_type_ids
    if isinstance(condition, MetalColorCondition):
        return variant.metal_color in condition.metal_color_ids
    if isinstance(condition, MetalPurityCondition):
        return variant.metal_purity in condition.metal_purity_ids
    if isinstance(condition, DiamondClarityColorCondition):
        if not stone.has_diamond or not variant.diamond_clarity_color:
            return False
        return variant.diamond_clarity_color in condition.diamond_clarity_color_ids

    # 상품 단위 합계 범위 (해당 스톤이 없으면 불일치)
    if isinstance(condition, DiamondCaratCondition):
        if not stone.has_diamond:
            return False
        return condition.contains(sum((e.total_carat for e in stone.diamond_entries), 0))
    if isinstance(condition, GemstoneCaratCondition):
        if not stone.has_gemstone:
            return False
        return condition.contains(sum((e.total_carat for e in stone.gemstone_entries), 0))
    if isinstance(condition, PearlGramCondition):
        if not stone.has_pearl:
            return False
        return condition.contains(sum((e.total_grams for e in stone.pearl_entries), 0))

    if isinstance(condition, MetalWeightCondition):
        return condition.contains(variant.metal_weight)

    return False


def matches_conditions(
    conditions: Sequence[PricingCondition],
    variant: VariantContext,
    product: ProductPricingContext,
) -> bool:
    """
    규칙 조건 전체 매칭 (AND)

    조건이 비어 있으면 매칭되지 않음 (기존 저장 가격과의 호환을 위해 유지,
    의도된 정책인지 제품 담당자 확인 필요)
    """
    if not conditions:
        return False

    for condition in conditions:
        if not evaluate_condition(condition, variant, product):
            return False
    return True
