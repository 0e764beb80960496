"""
주얼리 카탈로그 가격 센터 - 가격 재계산 스키마
재계산 작업 응답, 트리거 요청, 배치 처리용 상품/변형 행
"""

from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from app.models.enums import RecalculationJobStatus, TriggerSource
from app.schemas.common import CamelModel


class PriceRecalculationJobResponse(BaseModel):
    """재계산 작업 응답"""
    id: UUID
    status: RecalculationJobStatus
    trigger_source: TriggerSource
    triggered_by: Optional[str] = None
    total_products: int
    processed_products: int
    failed_products: int
    error_details: Optional[list[dict[str, Any]]] = None
    created_at: datetime
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PriceRecalculationJobListResponse(BaseModel):
    """재계산 작업 목록 응답"""
    jobs: list[PriceRecalculationJobResponse]
    total: int


class PriceRecalculationTriggerRequest(BaseModel):
    """수동 재계산 트리거 요청"""
    trigger_source: TriggerSource = Field(TriggerSource.MANUAL, description="트리거 출처")
    triggered_by: Optional[str] = Field(None, max_length=64, description="트리거한 사용자 ID")


class PriceRecalculationTriggerResponse(BaseModel):
    """트리거 접수 응답 (처리는 백그라운드)"""
    job_id: UUID
    loop_started: bool = Field(..., description="새 처리 루프 시작 여부 (실행 중 루프가 있으면 False)")


# ============================================================================
# 배치 처리 행
# ============================================================================

class ProductFailure(CamelModel):
    """작업 error_details 항목"""
    product_id: str
    product_name: str
    error: str


class CatalogVariantRow(BaseModel):
    id: str
    metadata: dict[str, Any] = {}


class CatalogProductRow(BaseModel):
    """재계산 대상 상품 (변형 메타데이터 포함)"""
    id: str
    name: Optional[str] = None
    base_sku: str
    product_type: Optional[str] = None
    metadata: dict[str, Any] = {}
    variants: list[CatalogVariantRow] = []

    @property
    def display_name(self) -> str:
        return self.name or self.base_sku


class VariantPriceUpdate(BaseModel):
    variant_id: str
    price: int
    compare_at_price: int
    cost_price: int
    price_components: dict[str, Any]


class ProductPriceRangeUpdate(BaseModel):
    product_id: str
    min_price: int
    max_price: int
