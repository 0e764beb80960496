"""
주얼리 카탈로그 가격 센터 - 공통 스키마
API 응답 포맷 및 공통 타입 정의
"""

from typing import Any, Generic, TypeVar, Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


# 제네릭 타입 변수
T = TypeVar("T")


class ResponseMeta(BaseModel):
    """응답 메타 정보"""
    total: Optional[int] = None


class SuccessResponse(BaseModel, Generic[T]):
    """성공 응답 포맷"""
    data: T
    meta: Optional[ResponseMeta] = None


class ErrorDetail(BaseModel):
    """에러 상세 정보"""
    code: str = Field(..., description="에러 코드")
    message: str = Field(..., description="에러 메시지")
    details: Optional[dict[str, Any]] = Field(None, description="추가 상세 정보")


class ErrorResponse(BaseModel):
    """에러 응답 포맷"""
    error: ErrorDetail


class CamelModel(BaseModel):
    """
    저장된 JSON 메타데이터(camelCase)와 호환되는 불변 모델
    snake_case 필드명으로도 생성 가능
    """

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        frozen = True
