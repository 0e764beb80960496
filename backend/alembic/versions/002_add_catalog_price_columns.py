"""add catalog price columns

Revision ID: 002_add_catalog_price_columns
Revises: 001_add_price_recalculation_jobs
Create Date: 2026-10-18

가격 엔진이 쓰는 컬럼 추가
- product_variants: price, compare_at_price, cost_price, price_components
- products: min_price, max_price
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "002_add_catalog_price_columns"
down_revision: Union[str, None] = "001_add_price_recalculation_jobs"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


PRICE_COLUMNS = {
    "product_variants": [
        ("price", sa.Integer, "판매가"),
        ("compare_at_price", sa.Integer, "정가(MRP)"),
        ("cost_price", sa.Integer, "원가"),
        ("price_components", postgresql.JSONB, "가격 구성 요소 {costPrice, sellingPrice, compareAtPrice}"),
    ],
    "products": [
        ("min_price", sa.Integer, "최저 판매가"),
        ("max_price", sa.Integer, "최고 판매가"),
    ],
}


def upgrade() -> None:
    conn = op.get_bind()

    # 카탈로그 테이블은 기존에 존재하므로 없는 컬럼만 추가
    for table, columns in PRICE_COLUMNS.items():
        for name, type_, comment in columns:
            col_check = conn.execute(sa.text(
                "SELECT 1 FROM information_schema.columns "
                f"WHERE table_name='{table}' AND column_name='{name}'"
            ))
            if not col_check.fetchone():
                op.add_column(table, sa.Column(name, type_, nullable=True, comment=comment))


def downgrade() -> None:
    for table, columns in PRICE_COLUMNS.items():
        for name, _, _ in columns:
            op.drop_column(table, name)
