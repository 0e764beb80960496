"""
주얼리 카탈로그 가격 센터 - 가격 계산 API
상품 등록/수정 화면의 변형 가격 계산 (저장하지 않음)
"""

from fastapi import APIRouter, Depends

from app.api.deps import get_master_data_snapshot, get_currency_config
from app.schemas.common import CamelModel, SuccessResponse
from app.schemas.master_data import MasterDataSnapshot
from app.schemas.pricing import (
    CurrencyConfig,
    PricingResult,
    ProductPricingContext,
    VariantContext,
)
from app.schemas.variant import ProductVariantPricing, ProductVariantPricingRequest
from app.services.price_calculator import compute_pricing
from app.services.product_pricing import price_product_variants

router = APIRouter()


class VariantPricingRequest(CamelModel):
    """단일 변형 가격 계산 요청"""
    variant: VariantContext
    product: ProductPricingContext = ProductPricingContext()


@router.post("/variants", response_model=SuccessResponse[ProductVariantPricing])
async def price_variants(
    data: ProductVariantPricingRequest,
    master: MasterDataSnapshot = Depends(get_master_data_snapshot),
    currency: CurrencyConfig = Depends(get_currency_config),
):
    """
    상품 변형 구성 검증 + 변형별 가격/SKU 계산

    변형 구성 불일치, 세공비 구간 없음, 스톤 단가 참조 오류는 400으로 반환
    """
    return SuccessResponse(data=price_product_variants(data, master, currency))


@router.post("/variant", response_model=SuccessResponse[PricingResult])
async def price_single_variant(
    data: VariantPricingRequest,
    master: MasterDataSnapshot = Depends(get_master_data_snapshot),
    currency: CurrencyConfig = Depends(get_currency_config),
):
    """단일 변형 가격 계산"""
    pricing = compute_pricing(data.variant, data.product, master.pricing_rules, master, currency)
    return SuccessResponse(data=pricing)
