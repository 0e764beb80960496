"""
주얼리 카탈로그 가격 센터 - API 의존성
FastAPI 의존성 주입 함수
"""

from collections.abc import Callable
from typing import Any

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.schemas.master_data import MasterDataSnapshot
from app.schemas.pricing import CurrencyConfig
from app.services.master_data import load_master_data_snapshot
from app.services.price_recalculation import enqueue_recalculation_loop


async def get_master_data_snapshot(
    db: AsyncSession = Depends(get_db)
) -> MasterDataSnapshot:
    """요청 단위 마스터 데이터 스냅샷"""
    return await db.run_sync(load_master_data_snapshot)


def get_currency_config() -> CurrencyConfig:
    """통화/세금 설정"""
    return CurrencyConfig.from_settings()


def get_recalculation_launcher() -> Callable[[], Any]:
    """재계산 처리 루프 시작 함수 (기본: RQ enqueue)"""
    return enqueue_recalculation_loop
