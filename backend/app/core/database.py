"""
주얼리 카탈로그 가격 센터 - 데이터베이스 연결 설정
SQLAlchemy 비동기 세션 및 Base 모델 정의
"""

from typing import AsyncGenerator

from sqlalchemy import JSON
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase

from app.core.config import settings


# 비동기 엔진 생성
engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,  # DEBUG 모드에서만 SQL 로깅
    pool_pre_ping=True,   # 연결 상태 확인
    pool_size=10,         # 커넥션 풀 크기
    max_overflow=20,      # 추가 연결 허용 수
)

# 비동기 세션 팩토리
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


class Base(DeclarativeBase):
    """SQLAlchemy Base 모델 클래스"""
    pass


# PostgreSQL에서는 JSONB, 그 외(테스트용 SQLite 등)에서는 JSON
JSONVariant = JSON().with_variant(JSONB(), "postgresql")


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    데이터베이스 세션 의존성 주입
    FastAPI의 Depends()에서 사용
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def init_db() -> None:
    """데이터베이스 테이블 초기화 (개발용)"""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
