"""
주얼리 카탈로그 가격 센터 - PriceRecalculationJob 모델
카탈로그 전체 가격 재계산 작업 상태 및 결과 관리 (감사 이력이므로 삭제하지 않음)
"""

import uuid
from datetime import datetime

from sqlalchemy import String, Integer, DateTime, Uuid, Enum as SQLEnum, Index
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base, JSONVariant
from app.models.enums import RecalculationJobStatus, TriggerSource


class PriceRecalculationJob(Base):
    """가격 재계산 작업 테이블"""

    __tablename__ = "price_recalculation_jobs"

    # 기본 키
    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4
    )

    # 작업 상태
    status: Mapped[RecalculationJobStatus] = mapped_column(
        SQLEnum(
            RecalculationJobStatus,
            name="recalculation_job_status",
            values_callable=lambda e: [m.value for m in e],
        ),
        default=RecalculationJobStatus.PENDING,
        nullable=False,
        comment="작업 상태: pending, running, completed, cancelled, failed"
    )

    # 트리거 정보
    trigger_source: Mapped[TriggerSource] = mapped_column(
        SQLEnum(
            TriggerSource,
            name="recalculation_trigger_source",
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
        comment="트리거 출처 (마스터 데이터 종류 또는 manual)"
    )
    triggered_by: Mapped[str | None] = mapped_column(
        String(64),
        nullable=True,
        comment="트리거한 사용자 ID (시스템 트리거 시 NULL)"
    )

    # 진행 카운터 (체크포인트마다 갱신)
    total_products: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
        comment="전체 상품 수"
    )
    processed_products: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
        comment="처리된 상품 수 (실패 포함)"
    )
    failed_products: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
        comment="가격 계산 실패 상품 수"
    )
    error_details: Mapped[list | None] = mapped_column(
        JSONVariant,
        nullable=True,
        comment="상품별 오류 목록 [{productId, productName, error}]"
    )

    # 타임스탬프
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        nullable=False,
        comment="생성 일시"
    )
    started_at: Mapped[datetime | None] = mapped_column(
        DateTime,
        nullable=True,
        comment="시작 일시"
    )
    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime,
        nullable=True,
        comment="종료 일시 (완료/취소/실패)"
    )

    __table_args__ = (
        Index("ix_price_recalculation_jobs_status_created", "status", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<PriceRecalculationJob(id={self.id}, status={self.status}, source={self.trigger_source})>"
