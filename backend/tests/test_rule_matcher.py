"""
test_rule_matcher.py — Unit tests for pricing rule condition matching.

Tests cover:
  - Stored {"type", "value"} condition format and discriminated union parsing
  - any / all matching for category, tags, badges
  - Variant option conditions (metal type / colour / purity, diamond clarity-colour)
  - Inclusive carat / gram / weight ranges and missing-stone behaviour
  - Empty condition list never matches
"""

from decimal import Decimal

import pytest
from pydantic import TypeAdapter, ValidationError

from app.schemas.pricing import ProductPricingContext, VariantContext
from app.schemas.pricing_rule import (
    CategoryCondition,
    DiamondCaratCondition,
    MetalWeightCondition,
    PricingCondition,
)
from app.services.rule_matcher import evaluate_condition, matches_conditions


_conditions = TypeAdapter(list[PricingCondition])


def _parse(*raw):
    return _conditions.validate_python(list(raw))


@pytest.fixture
def variant():
    return VariantContext(
        metal_type="gold",
        metal_color="rose",
        metal_purity="18k",
        metal_weight=Decimal("4.2"),
        diamond_clarity_color="vvs-ef",
    )


@pytest.fixture
def product():
    return ProductPricingContext.from_product("JEWELLERY_DEFAULT", {
        "stone": {
            "hasDiamond": True,
            "diamond": {
                "clarityColors": [{"id": "vvs-ef"}],
                "entries": [
                    {"shapeId": "round", "totalCarat": "0.30", "noOfStones": 12, "pricings": []},
                    {"shapeId": "pear", "totalCarat": "0.20", "noOfStones": 2, "pricings": []},
                ],
            },
        },
        "attributes": {
            "categories": [{"id": "rings"}, {"id": "bridal"}],
            "tags": [{"id": "new"}],
            "badges": [],
        },
    })


class TestConditionParsing:

    def test_stored_format_is_unwrapped(self):
        (condition,) = _parse({"type": "category", "value": {"matchType": "all", "categoryIds": ["rings"]}})
        assert isinstance(condition, CategoryCondition)
        assert condition.category_ids == ["rings"]

    def test_range_aliases(self):
        (condition,) = _parse({"type": "diamond_carat", "value": {"from": "0.1", "to": "1"}})
        assert isinstance(condition, DiamondCaratCondition)
        assert condition.range_from == Decimal("0.1")

    def test_unknown_type_rejected(self):
        with pytest.raises(ValidationError):
            _parse({"type": "moon_phase", "value": {}})


class TestAttributeSets:

    @pytest.mark.parametrize("match_type, ids, expected", [
        ("any", ["rings", "earrings"], True),
        ("any", ["earrings"], False),
        ("all", ["rings", "bridal"], True),
        ("all", ["rings", "earrings"], False),
    ])
    def test_category_match_type(self, variant, product, match_type, ids, expected):
        conditions = _parse({"type": "category", "value": {"matchType": match_type, "categoryIds": ids}})
        assert matches_conditions(conditions, variant, product) is expected

    def test_tags_any(self, variant, product):
        conditions = _parse({"type": "tags", "value": {"matchType": "any", "tagIds": ["new"]}})
        assert matches_conditions(conditions, variant, product)

    def test_badges_with_no_attached_badges(self, variant, product):
        conditions = _parse({"type": "badges", "value": {"matchType": "any", "badgeIds": ["bestseller"]}})
        assert not matches_conditions(conditions, variant, product)


class TestVariantOptions:

    def test_metal_conditions(self, variant, product):
        conditions = _parse(
            {"type": "metal_type", "value": {"metalTypeIds": ["gold", "platinum"]}},
            {"type": "metal_color", "value": {"metalColorIds": ["rose"]}},
            {"type": "metal_purity", "value": {"metalPurityIds": ["18k"]}},
        )
        assert matches_conditions(conditions, variant, product)

    def test_all_conditions_must_hold(self, variant, product):
        conditions = _parse(
            {"type": "metal_type", "value": {"metalTypeIds": ["gold"]}},
            {"type": "metal_color", "value": {"metalColorIds": ["yellow"]}},
        )
        assert not matches_conditions(conditions, variant, product)

    def test_diamond_clarity_requires_diamond(self, variant):
        conditions = _parse(
            {"type": "diamond_clarity_color", "value": {"diamondClarityColorIds": ["vvs-ef"]}}
        )
        assert not matches_conditions(conditions, variant, ProductPricingContext())

    def test_diamond_clarity_requires_variant_option(self, product):
        plain_variant = VariantContext(
            metal_type="gold", metal_color="rose", metal_purity="18k", metal_weight=Decimal("4.2"),
        )
        conditions = _parse(
            {"type": "diamond_clarity_color", "value": {"diamondClarityColorIds": ["vvs-ef"]}}
        )
        assert not matches_conditions(conditions, plain_variant, product)


class TestRanges:

    def test_diamond_carat_sums_entries_inclusive(self, variant, product):
        (condition,) = _parse({"type": "diamond_carat", "value": {"from": 0.5, "to": 0.5}})
        assert evaluate_condition(condition, variant, product)

    def test_gemstone_carat_false_without_gemstone(self, variant, product):
        (condition,) = _parse({"type": "gemstone_carat", "value": {"from": 0, "to": 100}})
        assert not evaluate_condition(condition, variant, product)

    def test_pearl_gram_false_without_pearl(self, variant, product):
        (condition,) = _parse({"type": "pearl_gram", "value": {"from": 0, "to": 100}})
        assert not evaluate_condition(condition, variant, product)

    @pytest.mark.parametrize("low, high, expected", [
        ("4.2", "10", True),
        ("0", "4.2", True),
        ("4.21", "10", False),
    ])
    def test_metal_weight_bounds(self, variant, product, low, high, expected):
        condition = MetalWeightCondition.model_validate({"from": low, "to": high})
        assert evaluate_condition(condition, variant, product) is expected


def test_empty_conditions_never_match(variant, product):
    assert matches_conditions([], variant, product) is False
