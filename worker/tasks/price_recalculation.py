"""
주얼리 카탈로그 가격 센터 - 가격 재계산 태스크
API 트리거가 RQ 큐에 등록한 처리 루프를 워커 프로세스에서 실행
"""

import logging

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.core.config import settings

logger = logging.getLogger(__name__)

# 데이터베이스 연결 (워커는 동기 드라이버 사용)
engine = create_engine(settings.sync_database_url, pool_pre_ping=True)
SessionLocal = sessionmaker(bind=engine)


def run_recalculation_loop() -> dict:
    """
    가격 재계산 처리 루프

    pending 작업이 없어질 때까지 최신 작업을 선점하여 실행.
    루프 실행 중 들어온 트리거는 새 루프를 만들지 않고 이 루프가 이어서 처리함
    """
    from app.services.price_recalculation import build_recalculation_service

    session = SessionLocal()

    try:
        service = build_recalculation_service(session)
        executed = service.process_loop()
        logger.info(f"[Worker] 가격 재계산 루프 종료: {executed}개 작업 실행")
        return {"executed_jobs": executed}
    finally:
        session.close()
