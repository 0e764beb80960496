"""
주얼리 카탈로그 가격 센터 - 가격 재계산 저장소
재계산 스케줄러가 사용하는 작업 상태 CRUD 및 카탈로그 배치 읽기/쓰기 (동기 Session)

모든 메서드는 호출 단위로 커밋됨. 상태 전이는 조건부 UPDATE 한 번으로 수행
"""

import logging
from collections.abc import Sequence
from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session, selectinload

from app.models.catalog import Product, ProductVariant
from app.models.enums import RecalculationJobStatus, TriggerSource
from app.models.price_recalculation_job import PriceRecalculationJob
from app.schemas.master_data import MasterDataSnapshot
from app.schemas.price_recalculation import (
    CatalogProductRow,
    CatalogVariantRow,
    ProductPriceRangeUpdate,
    VariantPriceUpdate,
)
from app.services.master_data import load_master_data_snapshot

logger = logging.getLogger(__name__)


class CatalogRecalculationStore:
    """SQLAlchemy 기반 재계산 저장소"""

    def __init__(self, session: Session, variant_update_batch: int = 50):
        self.session = session
        self.variant_update_batch = variant_update_batch

    def _update_status(self, *criteria, **values) -> int:
        result = self.session.execute(
            update(PriceRecalculationJob)
            .where(*criteria)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        self.session.commit()
        return result.rowcount

    def rollback(self) -> None:
        self.session.rollback()

    # ========================================================================
    # 작업 상태
    # ========================================================================

    def insert_job(self, source: TriggerSource, triggered_by: Optional[str] = None) -> UUID:
        job = PriceRecalculationJob(
            status=RecalculationJobStatus.PENDING,
            trigger_source=source,
            triggered_by=triggered_by,
        )
        self.session.add(job)
        self.session.commit()
        return job.id

    def cancel_running_jobs(self) -> int:
        """실행 중 작업 취소, 취소된 행 수 반환"""
        return self._update_status(
            PriceRecalculationJob.status == RecalculationJobStatus.RUNNING,
            status=RecalculationJobStatus.CANCELLED,
            completed_at=datetime.utcnow(),
        )

    def fetch_latest_pending_job(self) -> Optional[PriceRecalculationJob]:
        job = self.session.execute(
            select(PriceRecalculationJob)
            .where(PriceRecalculationJob.status == RecalculationJobStatus.PENDING)
            .order_by(PriceRecalculationJob.created_at.desc())
            .limit(1)
        ).scalar_one_or_none()
        self.session.commit()
        return job

    def cancel_other_pending_jobs(self, job_id: UUID) -> int:
        return self._update_status(
            PriceRecalculationJob.status == RecalculationJobStatus.PENDING,
            PriceRecalculationJob.id != job_id,
            status=RecalculationJobStatus.CANCELLED,
            completed_at=datetime.utcnow(),
        )

    def claim_pending_job(self, job_id: UUID) -> bool:
        """pending → running (다른 루프가 먼저 가져갔으면 False)"""
        claimed = self._update_status(
            PriceRecalculationJob.id == job_id,
            PriceRecalculationJob.status == RecalculationJobStatus.PENDING,
            status=RecalculationJobStatus.RUNNING,
            started_at=datetime.utcnow(),
        )
        return claimed == 1

    def has_pending_job(self) -> bool:
        found = self.session.execute(
            select(PriceRecalculationJob.id)
            .where(PriceRecalculationJob.status == RecalculationJobStatus.PENDING)
            .limit(1)
        ).first()
        self.session.commit()
        return found is not None

    def get_job(self, job_id: UUID) -> Optional[PriceRecalculationJob]:
        job = self.session.get(PriceRecalculationJob, job_id, populate_existing=True)
        self.session.commit()
        return job

    def list_recent_jobs(self, limit: int) -> list[PriceRecalculationJob]:
        """최신순 작업 목록"""
        jobs = self.session.execute(
            select(PriceRecalculationJob)
            .order_by(PriceRecalculationJob.created_at.desc())
            .limit(limit)
            .execution_options(populate_existing=True)
        ).scalars().all()
        self.session.commit()
        return list(jobs)

    def count_jobs(self) -> int:
        total = self.session.execute(select(func.count(PriceRecalculationJob.id))).scalar_one()
        self.session.commit()
        return total

    def set_total_products(self, job_id: UUID, total: int) -> None:
        self._update_status(PriceRecalculationJob.id == job_id, total_products=total)

    def update_job_progress(self, job_id: UUID, processed: int, failed: int) -> None:
        self._update_status(
            PriceRecalculationJob.id == job_id,
            processed_products=processed,
            failed_products=failed,
        )

    def cancel_job(self, job_id: UUID, processed: int, failed: int) -> None:
        self._update_status(
            PriceRecalculationJob.id == job_id,
            status=RecalculationJobStatus.CANCELLED,
            processed_products=processed,
            failed_products=failed,
            completed_at=datetime.utcnow(),
        )

    def complete_job(
        self,
        job_id: UUID,
        processed: int,
        failed: int,
        errors: list[dict[str, Any]],
    ) -> bool:
        """실행 중인 경우에만 완료 처리 (그 사이 취소되었으면 False)"""
        completed = self._update_status(
            PriceRecalculationJob.id == job_id,
            PriceRecalculationJob.status == RecalculationJobStatus.RUNNING,
            status=RecalculationJobStatus.COMPLETED,
            processed_products=processed,
            failed_products=failed,
            error_details=errors,
            completed_at=datetime.utcnow(),
        )
        return completed == 1

    def fail_job(self, job_id: UUID, errors: list[dict[str, Any]]) -> None:
        self._update_status(
            PriceRecalculationJob.id == job_id,
            status=RecalculationJobStatus.FAILED,
            error_details=errors,
            completed_at=datetime.utcnow(),
        )

    # ========================================================================
    # 카탈로그
    # ========================================================================

    def load_master_data_snapshot(self) -> MasterDataSnapshot:
        snapshot = load_master_data_snapshot(self.session)
        self.session.commit()
        return snapshot

    def count_catalog_products(self) -> int:
        total = self.session.execute(select(func.count(Product.id))).scalar()
        self.session.commit()
        return total or 0

    def fetch_product_page(self, offset: int, limit: int) -> list[CatalogProductRow]:
        products = self.session.execute(
            select(Product)
            .options(selectinload(Product.variants))
            .order_by(Product.created_at, Product.id)
            .offset(offset)
            .limit(limit)
        ).scalars().all()

        rows = [
            CatalogProductRow(
                id=p.id,
                name=p.name,
                base_sku=p.base_sku,
                product_type=p.product_type,
                metadata=p.product_metadata or {},
                variants=[
                    CatalogVariantRow(id=v.id, metadata=v.variant_metadata or {})
                    for v in p.variants
                ],
            )
            for p in products
        ]
        self.session.commit()
        return rows

    def persist_variant_prices(self, updates: Sequence[VariantPriceUpdate]) -> None:
        """변형 가격 일괄 갱신 (variant_update_batch 단위로 나눠 실행)"""
        for i in range(0, len(updates), self.variant_update_batch):
            chunk = updates[i:i + self.variant_update_batch]
            self.session.execute(
                update(ProductVariant),
                [
                    {
                        "id": u.variant_id,
                        "price": u.price,
                        "compare_at_price": u.compare_at_price,
                        "cost_price": u.cost_price,
                        "price_components": u.price_components,
                    }
                    for u in chunk
                ],
            )
            self.session.commit()

    def persist_product_price_ranges(self, updates: Sequence[ProductPriceRangeUpdate]) -> None:
        if not updates:
            return
        now = datetime.utcnow()
        self.session.execute(
            update(Product),
            [
                {"id": u.product_id, "min_price": u.min_price, "max_price": u.max_price, "updated_at": now}
                for u in updates
            ],
        )
        self.session.commit()
