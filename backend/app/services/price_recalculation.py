"""
주얼리 카탈로그 가격 센터 - 가격 재계산 스케줄러
마스터 데이터 변경 시 카탈로그 전체 변형 가격을 백그라운드에서 재계산

상태 전이: pending → running → completed | cancelled | failed, pending → cancelled
- 한 번에 하나의 작업만 실행 (pending → running 조건부 UPDATE가 유일한 상호 배제 지점)
- 연속 트리거는 가장 최근 pending 작업 하나로 합쳐짐
- 실행 중 작업은 CHECK_INTERVAL 상품마다 새 pending 작업을 확인하고 양보 (협조적 취소)
"""

import logging
import time
from collections.abc import Callable
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, ValidationError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import CatalogError
from app.models.enums import TriggerSource
from app.schemas.master_data import MasterDataSnapshot
from app.schemas.price_recalculation import (
    CatalogProductRow,
    ProductFailure,
    ProductPriceRangeUpdate,
    VariantPriceUpdate,
)
from app.schemas.pricing import CurrencyConfig, ProductPricingContext, VariantContext
from app.services.price_calculator import compute_pricing
from app.services.recalculation_store import CatalogRecalculationStore

logger = logging.getLogger(__name__)

# 워커가 import 경로로 실행하는 태스크
RECALCULATION_LOOP_TASK = "tasks.price_recalculation.run_recalculation_loop"


class TriggerResult(BaseModel):
    job_id: UUID
    loop_started: bool


def enqueue_recalculation_loop() -> None:
    """RQ 큐에 재계산 처리 루프 등록"""
    from rq import Queue
    import redis as sync_redis_lib

    sync_redis_conn = sync_redis_lib.Redis.from_url(settings.REDIS_URL)
    q = Queue(settings.PRICE_RECALC_QUEUE, connection=sync_redis_conn)
    q.enqueue(RECALCULATION_LOOP_TASK, job_timeout=settings.PRICE_RECALC_JOB_TIMEOUT)
    logger.info(f"[PriceRecalc] 처리 루프 → RQ 큐({settings.PRICE_RECALC_QUEUE}) enqueue 완료")


class PriceRecalculationService:
    """카탈로그 가격 재계산 작업 스케줄러"""

    def __init__(
        self,
        store: CatalogRecalculationStore,
        launcher: Callable[[], Any] = enqueue_recalculation_loop,
        batch_size: Optional[int] = None,
        check_interval: Optional[int] = None,
        currency: Optional[CurrencyConfig] = None,
    ):
        self.store = store
        self.launcher = launcher
        self.batch_size = batch_size or settings.PRICE_RECALC_BATCH_SIZE
        self.check_interval = check_interval or settings.PRICE_RECALC_CHECK_INTERVAL
        self.currency = currency or CurrencyConfig.from_settings()

    # ========================================================================
    # 트리거 / 처리 루프
    # ========================================================================

    def trigger(self, source: TriggerSource, triggered_by: Optional[str] = None) -> TriggerResult:
        """
        재계산 요청

        새 pending 작업을 만들고 실행 중 작업을 취소 표시.
        실행 중 작업이 없었을 때만 새 처리 루프를 시작하고, 있었으면
        그 루프가 체크포인트에서 새 작업을 발견하고 넘겨줌
        """
        job_id = self.store.insert_job(source, triggered_by)
        cancelled = self.store.cancel_running_jobs()

        logger.info(
            f"[PriceRecalc] 트리거: job={job_id}, source={source.value}, "
            f"user={triggered_by or 'system'}, 실행 중 취소={cancelled}"
        )

        if cancelled:
            return TriggerResult(job_id=job_id, loop_started=False)

        try:
            self.launcher()
        except Exception as enq_err:
            # pending 작업은 남아 있으므로 다음 트리거의 루프가 흡수함
            logger.error(f"[PriceRecalc] 처리 루프 시작 실패 (job={job_id}): {enq_err}")
            return TriggerResult(job_id=job_id, loop_started=False)
        return TriggerResult(job_id=job_id, loop_started=True)

    def process_loop(self) -> int:
        """
        pending 작업이 없을 때까지 처리, 실행한 작업 수 반환

        1. 가장 최근 pending 작업 조회 (없으면 종료)
        2. 나머지 pending 작업 취소
        3. pending → running 선점 (실패 시 1부터 재시도)
        4. 작업 실행 후 반복
        """
        executed = 0
        while True:
            job = self.store.fetch_latest_pending_job()
            if job is None:
                return executed

            job_id, source, triggered_by = job.id, job.trigger_source, job.triggered_by
            self.store.cancel_other_pending_jobs(job_id)

            if not self.store.claim_pending_job(job_id):
                logger.info(f"[PriceRecalc] Job {job_id} 선점 실패, 다시 조회")
                continue

            self.run_job(job_id, source, triggered_by)
            executed += 1

    def run_job(self, job_id: UUID, source: TriggerSource, triggered_by: Optional[str] = None) -> None:
        """작업 실행 (치명적 오류는 failed로 기록하고 전파하지 않음)"""
        started = time.monotonic()
        logger.info(f"[PriceRecalc] Job {job_id} 시작 (trigger: {source.value}, user: {triggered_by or 'system'})")

        try:
            self._process_all_products(job_id)
        except Exception as e:
            logger.exception(f"[PriceRecalc] Job {job_id} 치명적 오류: {e}")
            self.store.rollback()
            try:
                self.store.fail_job(job_id, [
                    ProductFailure(product_id="N/A", product_name="N/A", error=str(e)).model_dump(by_alias=True)
                ])
            except Exception as mark_err:
                logger.error(f"[PriceRecalc] Job {job_id} 실패 상태 기록 실패: {mark_err}")
        finally:
            logger.info(f"[PriceRecalc] Job {job_id} 종료 ({time.monotonic() - started:.2f}s)")

    # ========================================================================
    # 작업 본문
    # ========================================================================

    def _process_all_products(self, job_id: UUID) -> None:
        total = self.store.count_catalog_products()
        self.store.set_total_products(job_id, total)

        if total == 0:
            self.store.complete_job(job_id, 0, 0, [])
            logger.info(f"[PriceRecalc] Job {job_id} 완료: 상품 없음")
            return

        master = self.store.load_master_data_snapshot()

        processed = 0
        failed = 0
        errors: list[dict[str, Any]] = []
        offset = 0

        while offset < total:
            products = self.store.fetch_product_page(offset, self.batch_size)
            if not products:
                break

            variant_updates: list[VariantPriceUpdate] = []
            range_updates: list[ProductPriceRangeUpdate] = []

            for product in products:
                if processed > 0 and processed % self.check_interval == 0:
                    if self.store.has_pending_job():
                        self.store.cancel_job(job_id, processed, failed)
                        logger.info(
                            f"[PriceRecalc] Job {job_id} 취소: {processed}/{total} 처리 후 새 트리거 대기 중"
                        )
                        return
                    self.store.update_job_progress(job_id, processed, failed)

                try:
                    updates = self._recalculate_product(product, master)
                except (CatalogError, ValidationError) as e:
                    failed += 1
                    errors.append(ProductFailure(
                        product_id=product.id,
                        product_name=product.display_name,
                        error=str(e),
                    ).model_dump(by_alias=True))
                    logger.warning(f"[PriceRecalc] 상품 {product.id} 가격 계산 실패: {e}")
                else:
                    if updates:
                        variant_updates.extend(updates)
                        prices = [u.price for u in updates]
                        range_updates.append(ProductPriceRangeUpdate(
                            product_id=product.id,
                            min_price=min(prices),
                            max_price=max(prices),
                        ))
                processed += 1

            self.store.persist_variant_prices(variant_updates)
            self.store.persist_product_price_ranges(range_updates)
            offset += self.batch_size

        if self.store.complete_job(job_id, processed, failed, errors):
            logger.info(f"[PriceRecalc] Job {job_id} 완료: {processed}개 처리, {failed}개 실패")
        else:
            logger.info(f"[PriceRecalc] Job {job_id} 완료 기록 생략 (실행 중 상태 아님)")

    def _recalculate_product(
        self,
        product: CatalogProductRow,
        master: MasterDataSnapshot,
    ) -> list[VariantPriceUpdate]:
        """상품의 모든 변형 가격 계산 (하나라도 실패하면 상품 전체 실패)"""
        context = ProductPricingContext.from_product(product.product_type, product.metadata)

        updates = []
        for variant in product.variants:
            pricing = compute_pricing(
                VariantContext.model_validate(variant.metadata),
                context,
                master.pricing_rules,
                master,
                self.currency,
            )
            updates.append(VariantPriceUpdate(
                variant_id=variant.id,
                price=pricing.selling.final_price,
                compare_at_price=pricing.compare_at.final_price,
                cost_price=pricing.cost.final_price,
                price_components=pricing.to_storage(),
            ))
        return updates


# ============================================================================
# 생성 헬퍼
# ============================================================================

def build_recalculation_service(
    session: Session,
    launcher: Callable[[], Any] = enqueue_recalculation_loop,
) -> PriceRecalculationService:
    store = CatalogRecalculationStore(session, settings.PRICE_RECALC_VARIANT_UPDATE_BATCH)
    return PriceRecalculationService(store, launcher)
