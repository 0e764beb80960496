"""
conftest.py — Shared pytest fixtures for the pricing center backend test suite.

Pure pricing tests use an in-memory MasterDataSnapshot.  Store and scheduler
tests run against an in-memory SQLite database built from the ORM metadata
(StaticPool keeps a single connection so every Session sees the same data).

Import-path bootstrapping:
    ``backend/`` and ``worker/`` are inserted into sys.path so that ``app.*``
    and ``tasks.*`` imports resolve regardless of where pytest is invoked.
"""

import os
import sys
from datetime import datetime, timedelta
from decimal import Decimal

import pytest

_BACKEND_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
_WORKER_DIR = os.path.join(os.path.dirname(_BACKEND_DIR), "worker")
for _path in (_BACKEND_DIR, _WORKER_DIR):
    if _path not in sys.path:
        sys.path.insert(0, _path)


# ---------------------------------------------------------------------------
# Pricing inputs
#
# Reference catalog:
#   gold 18k = 5000/g, fixed making charge 200/g for 0–10 g, other charges 500,
#   one rule: +10% making charge on gold, MRP making charge markup 20%.
# ---------------------------------------------------------------------------

@pytest.fixture
def currency():
    from app.schemas.pricing import CurrencyConfig
    return CurrencyConfig(subunits=100, include_tax=True, tax_rate_percent=Decimal("3"))


@pytest.fixture
def currency_without_tax():
    from app.schemas.pricing import CurrencyConfig
    return CurrencyConfig(subunits=100, include_tax=False, tax_rate_percent=Decimal("3"))


@pytest.fixture
def gold_rule():
    from app.schemas.pricing_rule import PricingRuleConfig
    return PricingRuleConfig.model_validate({
        "id": "rule-gold",
        "name": "Gold making charge",
        "productType": "JEWELLERY_DEFAULT",
        "conditions": [{"type": "metal_type", "value": {"metalTypeIds": ["gold"]}}],
        "actions": {"makingChargeMarkup": 10},
        "isActive": True,
    })


@pytest.fixture
def master(gold_rule):
    from app.schemas.master_data import (
        MasterDataSnapshot,
        MasterOptionSets,
        MetalPurityRow,
        MakingChargeRow,
        OtherChargeRow,
        StonePriceRow,
        MrpMarkupConfig,
    )
    return MasterDataSnapshot(
        metal_purities=[
            MetalPurityRow(id="18k", metal_type_id="gold", price=5000, slug="18k"),
            MetalPurityRow(id="14k", metal_type_id="gold", price=4000, slug="14k"),
            MetalPurityRow(id="925", metal_type_id="silver", price=100, slug="925"),
        ],
        stone_prices=[
            StonePriceRow(
                id="sp-round-vvs", stone_shape_id="round", stone_quality_id="vvs-ef",
                ct_from=Decimal("0"), ct_to=Decimal("5"), price=40000,
            ),
            StonePriceRow(
                id="sp-ruby-red", stone_type_id="ruby", stone_shape_id="oval",
                stone_quality_id="aaa", stone_color_id="red",
                ct_from=Decimal("0"), ct_to=Decimal("5"), price=10000,
            ),
        ],
        making_charges=[
            MakingChargeRow(
                id="mc-gold", metal_type_id="gold", weight_from=Decimal("0"),
                weight_to=Decimal("10"), is_fixed_pricing=True, amount=Decimal("200"),
            ),
        ],
        other_charges=[OtherChargeRow(id="oc-hallmark", name="Hallmark", amount=500)],
        mrp_markup=MrpMarkupConfig(making_charge=Decimal("20")),
        pricing_rules=[gold_rule],
        option_slugs={
            "gold": "g", "yellow": "y", "rose": "r", "18k": "18k", "14k": "14k",
            "vvs-ef": "vvsef", "red": "red",
        },
        options=MasterOptionSets(
            metal_types={"gold", "silver"},
            metal_colors={"yellow": "gold", "rose": "gold", "white": "gold", "oxidised": "silver"},
            diamond_clarity_colors={"vvs-ef"},
            stone_shapes={"round", "oval"},
            gemstone_types={"ruby"},
            gemstone_qualities={"aaa"},
            gemstone_colors={"red"},
            pearl_types={"akoya"},
            pearl_qualities={"aa"},
        ),
    )


@pytest.fixture
def gold_variant():
    from app.schemas.pricing import VariantContext
    return VariantContext(
        metal_type="gold",
        metal_color="yellow",
        metal_purity="18k",
        metal_weight=Decimal("2.5"),
    )


@pytest.fixture
def plain_product():
    from app.schemas.pricing import ProductPricingContext
    return ProductPricingContext()


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------

@pytest.fixture
def db_session():
    from sqlalchemy import create_engine
    from sqlalchemy.orm import sessionmaker
    from sqlalchemy.pool import StaticPool

    from app.core.database import Base
    import app.models  # noqa: F401

    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    session = sessionmaker(bind=engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def seeded_db(db_session):
    """Reference catalog master data persisted as ORM rows."""
    from app.models.master_data import (
        MetalType, MetalColor, MetalPurity, MakingCharge, OtherCharge, MrpMarkup, PricingRule,
    )

    db_session.add_all([
        MetalType(id="gold", name="Gold", slug="g"),
        MetalColor(id="yellow", metal_type_id="gold", name="Yellow", slug="y"),
        MetalPurity(id="18k", metal_type_id="gold", name="18K", slug="18k", price=5000),
        MakingCharge(
            id="mc-gold", metal_type_id="gold", weight_from=Decimal("0"), weight_to=Decimal("10"),
            is_fixed_pricing=True, amount=Decimal("200"),
        ),
        OtherCharge(id="oc-hallmark", name="Hallmark", amount=500),
        MrpMarkup(id="mrp", making_charge=Decimal("20")),
        PricingRule(
            id="rule-gold",
            name="Gold making charge",
            conditions=[{"type": "metal_type", "value": {"metalTypeIds": ["gold"]}}],
            actions={"makingChargeMarkup": 10},
        ),
    ])
    db_session.commit()
    return db_session


@pytest.fixture
def add_product(seeded_db):
    """Factory: one product with a single 18k yellow gold variant of the given weight."""
    from app.models.catalog import Product, ProductVariant

    created = []
    base_time = datetime(2026, 1, 1)

    def _add(weight="2.5", name=None):
        index = len(created) + 1
        product = Product(
            id=f"product-{index}",
            name=name or f"Ring {index}",
            base_sku=f"RING{index:02d}",
            product_metadata={"stone": {}, "attributes": {}},
            created_at=base_time + timedelta(minutes=index),
        )
        product.variants.append(ProductVariant(
            id=f"variant-{index}",
            sku=f"RING{index:02d}_18kyg",
            is_default=True,
            variant_metadata={
                "metalType": "gold",
                "metalColor": "yellow",
                "metalPurity": "18k",
                "metalWeight": weight,
            },
        ))
        seeded_db.add(product)
        seeded_db.commit()
        created.append(product.id)
        return product.id

    return _add
