"""
주얼리 카탈로그 가격 센터 - Worker 메인
Redis Queue Worker 실행 (가격 재계산 처리 루프)
"""

from redis import Redis
from rq import Worker, Queue

from app.core.config import settings
from app.core.logging import setup_logging


def main():
    """Worker 실행"""
    setup_logging(settings.LOG_LEVEL)
    redis_conn = Redis.from_url(settings.REDIS_URL)

    worker = Worker(
        queues=[Queue(settings.PRICE_RECALC_QUEUE, connection=redis_conn)],
        connection=redis_conn,
    )
    worker.work()


if __name__ == "__main__":
    main()
