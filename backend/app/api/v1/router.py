"""
주얼리 카탈로그 가격 센터 - API v1 라우터
모든 v1 엔드포인트를 여기서 통합
"""

from fastapi import APIRouter

from app.api.v1 import (
    pricing,
    price_recalculation,
)

api_router = APIRouter()

# 변형 가격 계산
api_router.include_router(
    pricing.router,
    prefix="/pricing",
    tags=["가격 계산"]
)

# 가격 재계산 작업
api_router.include_router(
    price_recalculation.router,
    prefix="/price-recalculation",
    tags=["가격 재계산"]
)
