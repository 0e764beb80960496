"""
주얼리 카탈로그 가격 센터 - FastAPI 메인 애플리케이션
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from app.core.config import settings
from app.core.database import init_db
from app.core.exceptions import CatalogError
from app.core.logging import setup_logging
from app.schemas.common import ErrorDetail, ErrorResponse
from app.api.v1.router import api_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """애플리케이션 시작/종료 이벤트"""
    # 시작 시
    setup_logging(settings.LOG_LEVEL)
    await init_db()

    yield


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="주얼리 상품 변형 가격을 마스터 데이터 기반으로 계산하고, 카탈로그 전체 가격 재계산 작업을 관리하는 시스템",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS 설정
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error_response(
    status_code: int,
    code: str,
    message: str,
    details: Optional[dict[str, Any]] = None,
) -> JSONResponse:
    body = ErrorResponse(error=ErrorDetail(code=code, message=message, details=details))
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


# 예외 핸들러
@app.exception_handler(CatalogError)
async def catalog_exception_handler(request: Request, exc: CatalogError):
    """가격 계산/변형 검증 오류 (입력 또는 마스터 데이터 설정 문제)"""
    return _error_response(status.HTTP_400_BAD_REQUEST, exc.code, exc.message, exc.details)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """유효성 검증 예외 핸들러"""
    errors = []
    for error in exc.errors():
        errors.append({
            "field": ".".join(str(loc) for loc in error["loc"]),
            "message": error["msg"],
        })

    return _error_response(
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "VALIDATION_ERROR",
        "입력값 검증에 실패했습니다",
        {"errors": errors},
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """일반 예외 핸들러"""
    logger.exception(f"처리되지 않은 예외: {request.method} {request.url.path}")
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "INTERNAL_ERROR",
        "서버 내부 오류가 발생했습니다",
        {"error": str(exc)} if settings.DEBUG else None,
    )


# API 라우터 등록
app.include_router(api_router, prefix="/api/v1")


# 헬스 체크
@app.get("/health")
async def health_check():
    """헬스 체크"""
    return {"status": "healthy", "version": settings.APP_VERSION}
