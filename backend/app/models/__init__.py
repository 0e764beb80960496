"""
주얼리 카탈로그 가격 센터 - SQLAlchemy 모델
모든 모델을 여기서 import하여 Alembic 마이그레이션에서 인식할 수 있도록 함
"""

from app.models.catalog import Product, ProductVariant
from app.models.master_data import (
    MetalType,
    MetalColor,
    MetalPurity,
    StoneShape,
    StoneType,
    StoneQuality,
    StoneColor,
    StonePrice,
    MakingCharge,
    OtherCharge,
    MrpMarkup,
    PricingRule,
)
from app.models.price_recalculation_job import PriceRecalculationJob

__all__ = [
    "Product",
    "ProductVariant",
    # 가격 마스터 데이터
    "MetalType",
    "MetalColor",
    "MetalPurity",
    "StoneShape",
    "StoneType",
    "StoneQuality",
    "StoneColor",
    "StonePrice",
    "MakingCharge",
    "OtherCharge",
    "MrpMarkup",
    "PricingRule",
    # 재계산 작업
    "PriceRecalculationJob",
]
