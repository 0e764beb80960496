"""add price_recalculation_jobs table

카탈로그 전체 가격 재계산 작업 이력 테이블
- 상태: pending → running → completed | cancelled | failed
- (status, created_at) 인덱스: 최신 pending 조회 / 실행 중 작업 취소용

Revision ID: 001_add_price_recalculation_jobs
Revises:
Create Date: 2026-10-18
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = '001_add_price_recalculation_jobs'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


JOB_STATUSES = ('pending', 'running', 'completed', 'cancelled', 'failed')
TRIGGER_SOURCES = (
    'metal_purity',
    'diamond_pricing',
    'diamond_pricing_bulk',
    'gemstone_pricing',
    'gemstone_pricing_bulk',
    'making_charge',
    'other_charge',
    'mrp_markup',
    'pricing_rule',
    'manual',
)


def upgrade() -> None:
    job_status = postgresql.ENUM(*JOB_STATUSES, name='recalculation_job_status')
    trigger_source = postgresql.ENUM(*TRIGGER_SOURCES, name='recalculation_trigger_source')

    op.create_table(
        'price_recalculation_jobs',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True,
                  server_default=sa.text('gen_random_uuid()')),
        sa.Column('status', job_status, nullable=False, server_default='pending',
                  comment='작업 상태: pending, running, completed, cancelled, failed'),
        sa.Column('trigger_source', trigger_source, nullable=False,
                  comment='트리거 출처 (마스터 데이터 종류 또는 manual)'),
        sa.Column('triggered_by', sa.String(64), nullable=True,
                  comment='트리거한 사용자 ID (시스템 트리거 시 NULL)'),
        sa.Column('total_products', sa.Integer, nullable=False, server_default='0'),
        sa.Column('processed_products', sa.Integer, nullable=False, server_default='0'),
        sa.Column('failed_products', sa.Integer, nullable=False, server_default='0'),
        sa.Column('error_details', postgresql.JSONB, nullable=True,
                  comment='상품별 오류 목록 [{productId, productName, error}]'),
        sa.Column('created_at', sa.DateTime, nullable=False,
                  server_default=sa.text('NOW()')),
        sa.Column('started_at', sa.DateTime, nullable=True),
        sa.Column('completed_at', sa.DateTime, nullable=True),
    )
    op.create_index('ix_price_recalculation_jobs_status_created',
                    'price_recalculation_jobs', ['status', 'created_at'])


def downgrade() -> None:
    op.drop_index('ix_price_recalculation_jobs_status_created',
                  table_name='price_recalculation_jobs')
    op.drop_table('price_recalculation_jobs')
    op.execute('DROP TYPE IF EXISTS recalculation_trigger_source')
    op.execute('DROP TYPE IF EXISTS recalculation_job_status')
