"""
주얼리 카탈로그 가격 센터 - 로깅 설정
API 프로세스와 RQ Worker가 동일한 포맷으로 stdout에 기록
"""

import logging
import sys


def setup_logging(level: str = "INFO") -> None:
    """루트 로거 설정"""
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(
        "%(asctime)s [%(name)s] %(levelname)s: %(message)s"
    ))
    root.handlers = [handler]

    # 소음이 많은 로거 억제
    for name in ["uvicorn.access", "sqlalchemy.engine"]:
        logging.getLogger(name).setLevel(logging.WARNING)
