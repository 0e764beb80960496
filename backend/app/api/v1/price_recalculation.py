"""
주얼리 카탈로그 가격 센터 - 가격 재계산 API
재계산 작업 이력 조회 및 수동 트리거
"""

from collections.abc import Callable
from typing import Any, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

from app.api.deps import get_recalculation_launcher
from app.core.database import get_db
from app.schemas.common import SuccessResponse
from app.schemas.price_recalculation import (
    PriceRecalculationJobResponse,
    PriceRecalculationJobListResponse,
    PriceRecalculationTriggerRequest,
    PriceRecalculationTriggerResponse,
)
from app.services.price_recalculation import build_recalculation_service
from app.services.recalculation_store import CatalogRecalculationStore

router = APIRouter()


@router.get("/jobs", response_model=SuccessResponse[PriceRecalculationJobListResponse])
async def list_recalculation_jobs(
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db)
):
    """재계산 작업 목록 (최신순)"""

    def _list(session: Session) -> PriceRecalculationJobListResponse:
        store = CatalogRecalculationStore(session)
        jobs = store.list_recent_jobs(limit)
        return PriceRecalculationJobListResponse(
            jobs=[PriceRecalculationJobResponse.model_validate(j) for j in jobs],
            total=store.count_jobs(),
        )

    return SuccessResponse(data=await db.run_sync(_list))


@router.get("/jobs/{job_id}", response_model=SuccessResponse[PriceRecalculationJobResponse])
async def get_recalculation_job(
    job_id: UUID,
    db: AsyncSession = Depends(get_db)
):
    """재계산 작업 상세"""

    def _get(session: Session) -> Optional[PriceRecalculationJobResponse]:
        job = CatalogRecalculationStore(session).get_job(job_id)
        return PriceRecalculationJobResponse.model_validate(job) if job else None

    job = await db.run_sync(_get)

    if job is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"code": "JOB_NOT_FOUND", "message": "재계산 작업을 찾을 수 없습니다"}
        )

    return SuccessResponse(data=job)


@router.post(
    "/trigger",
    response_model=SuccessResponse[PriceRecalculationTriggerResponse],
    status_code=status.HTTP_202_ACCEPTED
)
async def trigger_recalculation(
    data: PriceRecalculationTriggerRequest,
    db: AsyncSession = Depends(get_db),
    launcher: Callable[[], Any] = Depends(get_recalculation_launcher),
):
    """
    카탈로그 전체 가격 재계산 요청

    작업은 백그라운드 워커에서 처리되며, 실행 중인 작업이 있으면
    해당 작업이 다음 체크포인트에서 양보하고 새 작업이 이어서 실행됨
    """
    result = await db.run_sync(
        lambda session: build_recalculation_service(session, launcher).trigger(
            data.trigger_source, data.triggered_by
        )
    )

    return SuccessResponse(
        data=PriceRecalculationTriggerResponse(job_id=result.job_id, loop_started=result.loop_started)
    )
