"""
주얼리 카탈로그 가격 센터 - 가격 마스터 데이터 모델
금속 시세, 세공비 구간, 스톤 단가, 기타 비용, MRP 마크업, 가격 규칙
(관리 화면 CRUD는 외부 모듈 소관이며 가격 엔진은 읽기만 함)
"""

import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import String, Integer, Boolean, DateTime, Numeric
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base, JSONVariant
from app.models.enums import ProductType


def _new_id() -> str:
    return str(uuid.uuid4())


class MetalType(Base):
    """금속 타입 (Gold, Platinum 등)"""

    __tablename__ = "metal_types"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    slug: Mapped[str] = mapped_column(String(100), nullable=False, comment="SKU 구성 요소")
    status: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)


class MetalColor(Base):
    """금속 색상 (Yellow, Rose 등)"""

    __tablename__ = "metal_colors"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_id)
    metal_type_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    slug: Mapped[str] = mapped_column(String(100), nullable=False)
    status: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)


class MetalPurity(Base):
    """금속 순도별 그램당 시세"""

    __tablename__ = "metal_purities"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_id)
    metal_type_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    slug: Mapped[str] = mapped_column(String(100), nullable=False)
    price: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="그램당 가격 (통화 최소 단위)"
    )
    status: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)


class StoneShape(Base):
    """스톤 모양 (Round, Oval 등)"""

    __tablename__ = "stone_shapes"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    slug: Mapped[str] = mapped_column(String(100), nullable=False)
    status: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)


class StoneType(Base):
    """스톤 종류 (젬스톤: Ruby 등, 진주: Akoya 등)"""

    __tablename__ = "stone_types"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_id)
    stone_group: Mapped[str] = mapped_column(String(20), nullable=False, comment="diamond, gemstone, pearl")
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    slug: Mapped[str] = mapped_column(String(100), nullable=False)
    status: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)


class StoneQuality(Base):
    """스톤 품질 (다이아몬드 클래리티/컬러, 젬스톤 품질)"""

    __tablename__ = "stone_qualities"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_id)
    stone_group: Mapped[str] = mapped_column(String(20), nullable=False, comment="diamond, gemstone, pearl")
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    slug: Mapped[str] = mapped_column(String(100), nullable=False)
    status: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)


class StoneColor(Base):
    """스톤 색상 (젬스톤 변형 옵션)"""

    __tablename__ = "stone_colors"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_id)
    stone_group: Mapped[str] = mapped_column(String(20), nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    slug: Mapped[str] = mapped_column(String(100), nullable=False)
    status: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)


class StonePrice(Base):
    """스톤 캐럿당 단가표"""

    __tablename__ = "stone_prices"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_id)
    stone_type_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    stone_shape_id: Mapped[str] = mapped_column(String(64), nullable=False)
    stone_quality_id: Mapped[str] = mapped_column(String(64), nullable=False)
    stone_color_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    ct_from: Mapped[Decimal] = mapped_column(Numeric(10, 4), nullable=False)
    ct_to: Mapped[Decimal] = mapped_column(Numeric(10, 4), nullable=False)
    price: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="캐럿당 가격 (통화 최소 단위)"
    )
    status: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)


class MakingCharge(Base):
    """세공비 구간 (금속 타입 + 중량 범위)"""

    __tablename__ = "making_charges"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_id)
    metal_type_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    weight_from: Mapped[Decimal] = mapped_column("from", Numeric(10, 4), nullable=False)
    weight_to: Mapped[Decimal] = mapped_column("to", Numeric(10, 4), nullable=False)
    is_fixed_pricing: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        comment="True: 그램당 고정 금액, False: 금속 원가 대비 %"
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 4), nullable=False)
    status: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)


class OtherCharge(Base):
    """기타 비용 (모든 변형의 세공비에 합산)"""

    __tablename__ = "other_charges"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    amount: Mapped[int] = mapped_column(Integer, nullable=False, comment="통화 최소 단위")
    status: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)


class MrpMarkup(Base):
    """MRP 마크업 (판매가 → 정가 산출 비율, 단일 행)"""

    __tablename__ = "mrp_markup"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_id)
    diamond: Mapped[Decimal] = mapped_column(Numeric(6, 2), default=0, nullable=False)
    gemstone: Mapped[Decimal] = mapped_column(Numeric(6, 2), default=0, nullable=False)
    pearl: Mapped[Decimal] = mapped_column(Numeric(6, 2), default=0, nullable=False)
    making_charge: Mapped[Decimal] = mapped_column(Numeric(6, 2), default=0, nullable=False)


class PricingRule(Base):
    """가격 규칙 (조건 충족 시 구성 요소별 마크업 %)"""

    __tablename__ = "pricing_rules"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(150), nullable=False)
    product_type: Mapped[str] = mapped_column(
        String(50),
        default=ProductType.JEWELLERY_DEFAULT.value,
        nullable=False
    )
    conditions: Mapped[list] = mapped_column(JSONVariant, nullable=False, default=list)
    actions: Mapped[dict] = mapped_column(JSONVariant, nullable=False, default=dict)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)
