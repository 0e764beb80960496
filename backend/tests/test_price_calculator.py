"""
test_price_calculator.py — Unit tests for the variant price calculator.

Tests cover:
  - Reference example: metal, making charge, rule markup, MRP markup, tax tiers
  - Metal is never marked up
  - Additive (non-compounding) rule markups
  - Percentage making charge bands
  - Diamond / gemstone stone pricing and reference validation
  - Pearl pricing in currency units
  - Tax excluded mode
  - Half-up rounding at intermediate points
  - Metal purity must belong to the variant metal type
"""

from decimal import Decimal

import pytest

from app.core.exceptions import (
    MakingChargeNotFoundError,
    MetalPurityNotFoundError,
    OptionMetalTypeMismatchError,
    StonePricingMismatchError,
    StonePricingNotFoundError,
)
from app.schemas.master_data import MakingChargeRow, MrpMarkupConfig, StonePriceRow
from app.schemas.pricing import ProductPricingContext, VariantContext
from app.schemas.pricing_rule import PricingRuleConfig
from app.services.price_calculator import compute_pricing, round_subunits


def _rule(rule_id, conditions, **actions):
    return PricingRuleConfig.model_validate({
        "id": rule_id,
        "productType": "JEWELLERY_DEFAULT",
        "conditions": conditions,
        "actions": actions,
    })


def _diamond_product(shape_id="round", pricing_id="sp-round-vvs", carat="0.5"):
    return ProductPricingContext.from_product("JEWELLERY_DEFAULT", {
        "stone": {
            "hasDiamond": True,
            "diamond": {
                "clarityColors": [{"id": "vvs-ef"}],
                "entries": [{
                    "shapeId": shape_id,
                    "totalCarat": carat,
                    "noOfStones": 10,
                    "pricings": [{"clarityColorId": "vvs-ef", "pricingId": pricing_id}],
                }],
            },
        },
    })


def _gemstone_product(quality_id="aaa", type_id="ruby"):
    return ProductPricingContext.from_product("JEWELLERY_DEFAULT", {
        "stone": {
            "hasGemstone": True,
            "gemstone": {
                "qualityId": quality_id,
                "colors": [{"id": "red"}],
                "entries": [{
                    "typeId": type_id,
                    "shapeId": "oval",
                    "totalCarat": "1.25",
                    "noOfStones": 1,
                    "pricings": [{"colorId": "red", "pricingId": "sp-ruby-red"}],
                }],
            },
        },
    })


# ===========================================================================
# Reference example
# ===========================================================================

class TestReferenceExample:
    """5000/g × 2.5 g gold, fixed 200/g making charge, +10% rule, 20% MRP."""

    def test_component_breakdown(self, gold_variant, plain_product, master, currency):
        result = compute_pricing(gold_variant, plain_product, master.pricing_rules, master, currency)

        assert result.cost.metal_price == 12500
        assert result.cost.making_charge == 50500
        assert result.selling.making_charge == 55550
        assert result.compare_at.making_charge == 66660

    def test_tax_tiers(self, gold_variant, plain_product, master, currency):
        result = compute_pricing(gold_variant, plain_product, master.pricing_rules, master, currency)

        assert result.cost.final_price_without_tax == 63000
        assert result.cost.tax_amount == 1890
        assert result.cost.final_price == 64890

        # 68050 × 3% = 2041.5 → 2042
        assert result.selling.final_price_without_tax == 68050
        assert result.selling.tax_amount == 2042
        assert result.selling.final_price_with_tax == 70092
        assert result.selling.final_price == 70092

        assert result.compare_at.final_price_without_tax == 79160
        assert result.compare_at.tax_amount == 2375
        assert result.compare_at.final_price == 81535

    def test_metal_never_marked_up(self, gold_variant, plain_product, master, currency):
        result = compute_pricing(gold_variant, plain_product, master.pricing_rules, master, currency)
        assert result.cost.metal_price == result.selling.metal_price == result.compare_at.metal_price

    def test_storage_format_uses_camel_case(self, gold_variant, plain_product, master, currency):
        stored = compute_pricing(
            gold_variant, plain_product, master.pricing_rules, master, currency
        ).to_storage()

        assert set(stored) == {"costPrice", "sellingPrice", "compareAtPrice"}
        assert stored["sellingPrice"]["makingCharge"] == 55550
        assert stored["sellingPrice"]["finalPriceWithoutTax"] == 68050
        assert stored["sellingPrice"]["taxIncluded"] is True


# ===========================================================================
# Rule markups
# ===========================================================================

class TestRuleMarkups:

    @pytest.fixture
    def thousand_cost_master(self, master):
        # 1 g × 5/g × 100 = 500 base + 500 other charges = 1000
        return master.model_copy(update={
            "making_charges": [MakingChargeRow(
                id="mc-small", metal_type_id="gold", weight_from=Decimal("0"),
                weight_to=Decimal("10"), is_fixed_pricing=True, amount=Decimal("5"),
            )],
            "mrp_markup": MrpMarkupConfig(),
        })

    def test_two_rules_are_additive(self, thousand_cost_master, plain_product, currency):
        variant = VariantContext(
            metal_type="gold", metal_color="yellow", metal_purity="18k", metal_weight=Decimal("1"),
        )
        condition = [{"type": "metal_type", "value": {"metalTypeIds": ["gold"]}}]
        rules = [
            _rule("r1", condition, makingChargeMarkup=10),
            _rule("r2", condition, makingChargeMarkup=10),
        ]

        result = compute_pricing(variant, plain_product, rules, thousand_cost_master, currency)

        assert result.cost.making_charge == 1000
        assert result.selling.making_charge == 1200

    def test_empty_conditions_never_match(self, gold_variant, plain_product, master, currency):
        rules = [_rule("r-empty", [], makingChargeMarkup=50)]
        result = compute_pricing(gold_variant, plain_product, rules, master, currency)
        assert result.selling.making_charge == result.cost.making_charge

    def test_inactive_and_other_product_type_rules_ignored(self, gold_variant, plain_product, master, currency):
        condition = [{"type": "metal_type", "value": {"metalTypeIds": ["gold"]}}]
        inactive = _rule("r-off", condition, makingChargeMarkup=10).model_copy(update={"is_active": False})
        other_type = _rule("r-other", condition, makingChargeMarkup=10).model_copy(
            update={"product_type": "WATCH"}
        )

        result = compute_pricing(gold_variant, plain_product, [inactive, other_type], master, currency)
        assert result.selling.making_charge == result.cost.making_charge

    def test_non_matching_rule_ignored(self, gold_variant, plain_product, master, currency):
        rules = [_rule("r-plat", [{"type": "metal_type", "value": {"metalTypeIds": ["platinum"]}}],
                       makingChargeMarkup=10)]
        result = compute_pricing(gold_variant, plain_product, rules, master, currency)
        assert result.selling.making_charge == 50500

    def test_compare_at_is_mrp_on_selling(self, gold_variant, plain_product, master, currency):
        result = compute_pricing(gold_variant, plain_product, master.pricing_rules, master, currency)
        assert result.compare_at.making_charge == round_subunits(
            result.selling.making_charge * Decimal("1.2")
        )


# ===========================================================================
# Making charge
# ===========================================================================

class TestMakingCharge:

    def test_percentage_band(self, gold_variant, plain_product, master, currency):
        snapshot = master.model_copy(update={
            "making_charges": [MakingChargeRow(
                id="mc-pct", metal_type_id="gold", weight_from=Decimal("0"),
                weight_to=Decimal("10"), is_fixed_pricing=False, amount=Decimal("10"),
            )],
        })
        result = compute_pricing(gold_variant, plain_product, [], snapshot, currency)
        # 10% of 12500 + 500 other charges
        assert result.cost.making_charge == 1750

    def test_band_bounds_inclusive(self, plain_product, master, currency):
        variant = VariantContext(
            metal_type="gold", metal_color="yellow", metal_purity="18k", metal_weight=Decimal("10"),
        )
        result = compute_pricing(variant, plain_product, [], master, currency)
        assert result.cost.making_charge == 10 * 200 * 100 + 500

    def test_missing_band_raises(self, plain_product, master, currency):
        variant = VariantContext(
            metal_type="gold", metal_color="yellow", metal_purity="18k", metal_weight=Decimal("10.5"),
        )
        with pytest.raises(MakingChargeNotFoundError):
            compute_pricing(variant, plain_product, [], master, currency)

    def test_unknown_purity_raises(self, plain_product, master, currency):
        variant = VariantContext(
            metal_type="gold", metal_color="yellow", metal_purity="24k", metal_weight=Decimal("1"),
        )
        with pytest.raises(MetalPurityNotFoundError):
            compute_pricing(variant, plain_product, [], master, currency)

    def test_purity_of_other_metal_type_raises(self, plain_product, master, currency):
        variant = VariantContext(
            metal_type="gold", metal_color="yellow", metal_purity="925", metal_weight=Decimal("2.5"),
        )
        with pytest.raises(OptionMetalTypeMismatchError) as exc_info:
            compute_pricing(variant, plain_product, [], master, currency)
        assert exc_info.value.details == {
            "option_kind": "금속 순도", "option_id": "925", "metal_type_id": "gold",
        }


# ===========================================================================
# Stones
# ===========================================================================

class TestDiamondPricing:

    def _variant(self, clarity="vvs-ef"):
        return VariantContext(
            metal_type="gold", metal_color="yellow", metal_purity="18k",
            metal_weight=Decimal("2.5"), diamond_clarity_color=clarity,
        )

    def test_price_times_carat(self, master, currency):
        result = compute_pricing(self._variant(), _diamond_product(), [], master, currency)
        assert result.cost.diamond_price == 20000
        assert result.selling.diamond_price == 20000

    def test_variant_option_without_link_contributes_nothing(self, master, currency):
        result = compute_pricing(self._variant("si-gh"), _diamond_product(), [], master, currency)
        assert result.cost.diamond_price == 0

    def test_unknown_pricing_reference(self, master, currency):
        with pytest.raises(StonePricingNotFoundError):
            compute_pricing(self._variant(), _diamond_product(pricing_id="missing"), [], master, currency)

    def test_shape_mismatch(self, master, currency):
        with pytest.raises(StonePricingMismatchError) as exc_info:
            compute_pricing(self._variant(), _diamond_product(shape_id="oval"), [], master, currency)
        assert exc_info.value.details["attribute"] == "shape"

    def test_clarity_mismatch(self, master, currency):
        snapshot = master.model_copy(update={"stone_prices": [StonePriceRow(
            id="sp-round-vvs", stone_shape_id="round", stone_quality_id="si-gh",
            ct_from=Decimal("0"), ct_to=Decimal("5"), price=40000,
        )]})
        with pytest.raises(StonePricingMismatchError):
            compute_pricing(self._variant(), _diamond_product(), [], snapshot, currency)

    def test_diamond_markup_rule(self, master, currency):
        rules = [_rule(
            "r-dia", [{"type": "diamond_clarity_color", "value": {"diamondClarityColorIds": ["vvs-ef"]}}],
            diamondMarkup=15,
        )]
        result = compute_pricing(self._variant(), _diamond_product(), rules, master, currency)
        assert result.selling.diamond_price == 23000


class TestGemstonePricing:

    def _variant(self):
        return VariantContext(
            metal_type="gold", metal_color="yellow", metal_purity="18k",
            metal_weight=Decimal("2.5"), gemstone_color="red",
        )

    def test_price_times_carat(self, master, currency):
        result = compute_pricing(self._variant(), _gemstone_product(), [], master, currency)
        assert result.cost.gemstone_price == 12500

    def test_quality_mismatch(self, master, currency):
        with pytest.raises(StonePricingMismatchError) as exc_info:
            compute_pricing(self._variant(), _gemstone_product(quality_id="aa"), [], master, currency)
        assert exc_info.value.details["attribute"] == "quality"

    def test_type_mismatch(self, master, currency):
        with pytest.raises(StonePricingMismatchError) as exc_info:
            compute_pricing(self._variant(), _gemstone_product(type_id="emerald"), [], master, currency)
        assert exc_info.value.details["attribute"] == "type"


class TestPearlPricing:

    def test_amount_converted_to_subunits(self, gold_variant, master, currency):
        product = ProductPricingContext.from_product("JEWELLERY_DEFAULT", {
            "stone": {
                "hasPearl": True,
                "pearl": {"entries": [{"totalGrams": "3", "noOfPearls": 5, "amount": "12.345"}]},
            },
        })
        result = compute_pricing(gold_variant, product, [], master, currency)
        # 1234.5 → 1235
        assert result.cost.pearl_price == 1235

    def test_pearl_ignored_without_flag(self, gold_variant, master, currency):
        product = ProductPricingContext.from_product("JEWELLERY_DEFAULT", {
            "stone": {"hasPearl": False, "pearl": {"entries": [{"amount": "100"}]}},
        })
        result = compute_pricing(gold_variant, product, [], master, currency)
        assert result.cost.pearl_price == 0


# ===========================================================================
# Tax mode / rounding
# ===========================================================================

class TestTaxAndRounding:

    def test_tax_excluded(self, gold_variant, plain_product, master, currency_without_tax):
        result = compute_pricing(gold_variant, plain_product, master.pricing_rules, master, currency_without_tax)
        for tier in (result.cost, result.selling, result.compare_at):
            assert tier.tax_included is False
            assert tier.tax_amount == 0
            assert tier.final_price == tier.final_price_without_tax

    def test_final_price_includes_tax(self, gold_variant, plain_product, master, currency):
        result = compute_pricing(gold_variant, plain_product, master.pricing_rules, master, currency)
        for tier in (result.cost, result.selling, result.compare_at):
            assert tier.final_price == tier.final_price_without_tax + tier.tax_amount

    def test_half_rounds_away_from_zero(self, plain_product, master, currency):
        snapshot = master.model_copy(update={"metal_purities": [
            master.metal_purities[0].model_copy(update={"price": 333}),
        ]})
        variant = VariantContext(
            metal_type="gold", metal_color="yellow", metal_purity="18k", metal_weight=Decimal("1.5"),
        )
        result = compute_pricing(variant, plain_product, [], snapshot, currency)
        assert result.cost.metal_price == 500

    @pytest.mark.parametrize("value, expected", [
        (Decimal("0.5"), 1),
        (Decimal("2.5"), 3),
        (Decimal("-2.5"), -3),
        (Decimal("2.49"), 2),
    ])
    def test_round_subunits(self, value, expected):
        assert round_subunits(value) == expected
