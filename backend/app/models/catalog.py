"""
주얼리 카탈로그 가격 센터 - 상품/변형 모델
가격 엔진이 읽고(메타데이터) 쓰는(가격 컬럼) 카탈로그 테이블
"""

import uuid
from datetime import datetime

from sqlalchemy import String, Integer, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base, JSONVariant
from app.models.enums import ProductType


def _new_id() -> str:
    return str(uuid.uuid4())


class Product(Base):
    """상품 테이블"""

    __tablename__ = "products"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False, comment="상품명")
    base_sku: Mapped[str] = mapped_column(String(100), nullable=False, comment="기본 SKU")
    product_type: Mapped[str] = mapped_column(
        String(50),
        default=ProductType.JEWELLERY_DEFAULT.value,
        nullable=False,
        comment="가격 계산 로직 타입"
    )

    # 스톤 구성 + 카테고리/태그/뱃지 (가격 규칙 매칭 입력)
    product_metadata: Mapped[dict | None] = mapped_column(
        "metadata",
        JSONVariant,
        nullable=True,
        comment="상품 메타데이터 {stone, attributes}"
    )

    # 변형 판매가 범위 (재계산 시 갱신)
    min_price: Mapped[int | None] = mapped_column(Integer, nullable=True, comment="최저 판매가")
    max_price: Mapped[int | None] = mapped_column(Integer, nullable=True, comment="최고 판매가")

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False
    )

    variants = relationship(
        "ProductVariant",
        back_populates="product",
        order_by="ProductVariant.sku",
    )

    def __repr__(self) -> str:
        return f"<Product(id={self.id}, sku={self.base_sku})>"


class ProductVariant(Base):
    """상품 변형 테이블 (금속 타입 × 색상 × 순도 × 스톤 옵션 조합)"""

    __tablename__ = "product_variants"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_id)
    product_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    sku: Mapped[str] = mapped_column(String(150), nullable=False, comment="변형 SKU")
    is_default: Mapped[bool] = mapped_column(default=False, nullable=False)

    # 선택 옵션 {metalType, metalColor, metalPurity, metalWeight, diamondClarityColor, gemstoneColor}
    variant_metadata: Mapped[dict | None] = mapped_column(
        "metadata",
        JSONVariant,
        nullable=True,
        comment="변형 옵션 메타데이터"
    )

    # 가격 (통화 최소 단위 정수)
    price: Mapped[int | None] = mapped_column(Integer, nullable=True, comment="판매가")
    compare_at_price: Mapped[int | None] = mapped_column(Integer, nullable=True, comment="정가(MRP)")
    cost_price: Mapped[int | None] = mapped_column(Integer, nullable=True, comment="원가")
    price_components: Mapped[dict | None] = mapped_column(
        JSONVariant,
        nullable=True,
        comment="가격 구성 요소 {costPrice, sellingPrice, compareAtPrice}"
    )

    product = relationship("Product", back_populates="variants")

    def __repr__(self) -> str:
        return f"<ProductVariant(id={self.id}, sku={self.sku})>"
