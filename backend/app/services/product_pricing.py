"""
주얼리 카탈로그 가격 센터 - 상품 변형 가격 계산
상품 등록/수정 시 제출된 변형 구성을 검증하고 변형별 가격/SKU/중량을 계산

저장은 호출자 책임. 오류는 그대로 호출자에게 전파 (아무것도 저장되지 않음)
"""

import logging
from decimal import Decimal
from typing import Optional

from app.core.exceptions import InvalidOptionError, OptionMetalTypeMismatchError
from app.schemas.master_data import MasterDataSnapshot
from app.schemas.pricing import (
    CurrencyConfig,
    ProductPricingContext,
    ProductStoneComposition,
    VariantContext,
)
from app.schemas.variant import (
    PricedVariant,
    ProductVariantPricing,
    ProductVariantPricingRequest,
    StoneWeight,
    StoneWeights,
    VariantOption,
)
from app.services.price_calculator import compute_pricing, resolve_product_type
from app.services.sku import SKU_COMPONENTS_BY_TYPE, build_sku
from app.services.variant_set import expand_variant_options, validate_variants

logger = logging.getLogger(__name__)

# 1 캐럿 = 0.2 g
CARATS_PER_GRAM = Decimal(5)


def calculate_stone_weights(stone: ProductStoneComposition) -> StoneWeights:
    """
    스톤 중량 (모든 변형 공통)
    다이아몬드/젬스톤: 캐럿 / 5 = 그램, 진주: 이미 그램 단위
    """
    diamond = gemstone = pearl = None

    if stone.has_diamond and stone.diamond:
        carat = sum((e.total_carat for e in stone.diamond.entries), Decimal("0"))
        diamond = StoneWeight(
            carat=carat,
            grams=carat / CARATS_PER_GRAM,
            count=sum(e.no_of_stones for e in stone.diamond.entries),
        )

    if stone.has_gemstone and stone.gemstone:
        carat = sum((e.total_carat for e in stone.gemstone.entries), Decimal("0"))
        gemstone = StoneWeight(
            carat=carat,
            grams=carat / CARATS_PER_GRAM,
            count=sum(e.no_of_stones for e in stone.gemstone.entries),
        )

    if stone.has_pearl and stone.pearl:
        pearl = StoneWeight(
            grams=sum((e.total_grams for e in stone.pearl.entries), Decimal("0")),
            count=sum(e.no_of_pearls for e in stone.pearl.entries),
        )

    return StoneWeights(diamond=diamond, gemstone=gemstone, pearl=pearl)


def build_variant_sku(
    option: VariantOption,
    product_sku: str,
    product_type: Optional[str],
    master: MasterDataSnapshot,
) -> str:
    """옵션 ID → slug 변환 후 상품 타입별 SKU 구성으로 조립"""
    values = {
        "metalType": master.slug_for(option.metal_type),
        "metalColor": master.slug_for(option.metal_color),
        "metalPurity": master.slug_for(option.metal_purity),
        "diamondClarityColor": master.slug_for(option.diamond_clarity_color),
        "gemstoneColor": master.slug_for(option.gemstone_color),
    }
    components = SKU_COMPONENTS_BY_TYPE[resolve_product_type(product_type)]
    return build_sku(components, values, product_sku)


def _require(option_ids, allowed, option_kind: str) -> None:
    for option_id in option_ids:
        if option_id is None or option_id not in allowed:
            raise InvalidOptionError(option_kind, option_id)


def validate_selection(request: ProductVariantPricingRequest, master: MasterDataSnapshot) -> None:
    """
    선택한 옵션 ID가 활성 마스터 데이터에 있는지 확인 (변형 전개 전)

    - 금속 타입/색상/순도 존재, 색상과 순도는 선택한 금속 타입 소속
    - 다이아몬드: 클래리티/컬러, 모양, 단가 ID
    - 젬스톤: 품질, 컬러, 종류, 모양, 단가 ID
    - 진주: 종류, 품질
    """
    options = master.options

    for metal in request.selected_metals:
        _require([metal.metal_type_id], options.metal_types, "금속 타입")

        for color in metal.colors:
            owner = options.metal_colors.get(color.color_id)
            if owner is None:
                raise InvalidOptionError("금속 색상", color.color_id)
            if owner != metal.metal_type_id:
                raise OptionMetalTypeMismatchError("금속 색상", color.color_id, metal.metal_type_id)

        for purity_option in metal.purities:
            purity = master.find_metal_purity(purity_option.purity_id)
            if purity is None:
                raise InvalidOptionError("금속 순도", purity_option.purity_id)
            if purity.metal_type_id != metal.metal_type_id:
                raise OptionMetalTypeMismatchError("금속 순도", purity.id, metal.metal_type_id)

    stone = request.stone
    stone_price_ids = {s.id for s in master.stone_prices}

    if stone.has_diamond and stone.diamond:
        _require([c.id for c in stone.diamond.clarity_colors], options.diamond_clarity_colors, "다이아몬드 클래리티/컬러")
        for entry in stone.diamond.entries:
            _require([entry.shape_id], options.stone_shapes, "스톤 모양")
            _require([p.pricing_id for p in entry.pricings], stone_price_ids, "다이아몬드 단가")

    if stone.has_gemstone and stone.gemstone:
        _require([stone.gemstone.quality_id], options.gemstone_qualities, "젬스톤 품질")
        _require([c.id for c in stone.gemstone.colors], options.gemstone_colors, "젬스톤 컬러")
        for entry in stone.gemstone.entries:
            _require([entry.type_id], options.gemstone_types, "젬스톤 종류")
            _require([entry.shape_id], options.stone_shapes, "스톤 모양")
            _require([p.pricing_id for p in entry.pricings], stone_price_ids, "젬스톤 단가")

    if stone.has_pearl and stone.pearl:
        for entry in stone.pearl.entries:
            _require([entry.type_id], options.pearl_types, "진주 종류")
            _require([entry.quality_id], options.pearl_qualities, "진주 품질")


def price_product_variants(
    request: ProductVariantPricingRequest,
    master: MasterDataSnapshot,
    currency: Optional[CurrencyConfig] = None,
) -> ProductVariantPricing:
    """
    상품 변형 가격 계산

    1. 옵션 ID 검증 (PricingError), 예상 변형 조합과 제출 변형 대조 (VariantValidationError)
    2. 변형별 가격 계산 (PricingError)
    3. SKU 생성, 스톤/총 중량 계산
    4. 상품 최소/최대 판매가
    """
    validate_selection(request, master)
    options = expand_variant_options(request.selected_metals, request.stone)
    validated = validate_variants(
        [o.key for o in options],
        request.variants.generated_variants,
        request.variants.default_variant_id,
    )

    product = ProductPricingContext(
        product_type=resolve_product_type(request.product_type).value,
        stone=request.stone,
        attributes=request.attributes,
    )
    stone_weights = calculate_stone_weights(request.stone)

    priced = []
    for option in options:
        variant = VariantContext(
            metal_type=option.metal_type,
            metal_color=option.metal_color,
            metal_purity=option.metal_purity,
            metal_weight=option.metal_weight,
            diamond_clarity_color=option.diamond_clarity_color,
            gemstone_color=option.gemstone_color,
        )
        pricing = compute_pricing(variant, product, master.pricing_rules, master, currency)

        priced.append(PricedVariant(
            key=option.key,
            sku=build_variant_sku(option, request.product_sku, product.product_type, master),
            metal_type=option.metal_type,
            metal_color=option.metal_color,
            metal_purity=option.metal_purity,
            metal_weight=option.metal_weight,
            diamond_clarity_color=option.diamond_clarity_color,
            gemstone_color=option.gemstone_color,
            total_weight=option.metal_weight + stone_weights.total_grams,
            is_default=option.key == validated.default_variant_id,
            pricing=pricing,
        ))

    prices = [v.price for v in priced]
    logger.debug(f"[Pricing] {request.product_sku}: 변형 {len(priced)}개 계산 완료")

    return ProductVariantPricing(
        variants=priced,
        default_variant_id=validated.default_variant_id,
        stone_weights=stone_weights,
        min_price=min(prices),
        max_price=max(prices),
    )
