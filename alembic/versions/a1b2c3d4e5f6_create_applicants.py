"""create_applicants

Revision ID: a1b2c3d4e5f6
Revises:
Create Date: 2025-10-20 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision = 'a1b2c3d4e5f6'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    meal_checkins_type = sa.JSON().with_variant(postgresql.JSONB(), 'postgresql')

    op.create_table(
        'applicants',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('email', sa.String(length=320), nullable=False),
        sa.Column('full_name', sa.String(length=200), nullable=True),
        sa.Column('university', sa.String(length=200), nullable=True),
        sa.Column('shirt_size', sa.String(length=10), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='pending'),
        sa.Column('decision_note', sa.Text(), nullable=True),
        sa.Column('qr_token', sa.String(length=64), nullable=True),
        sa.Column('checked_in_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('meal_checkins', meal_checkins_type, nullable=False, server_default='{}'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.func.now()),
        # One applicant per token; NULLs (not yet accepted) do not collide
        sa.UniqueConstraint('qr_token', name='uq_applicants_qr_token'),
    )
    op.create_index('ix_applicants_email', 'applicants', ['email'])
    op.create_index('idx_applicants_created_at', 'applicants', ['created_at'])


def downgrade():
    op.drop_index('idx_applicants_created_at', table_name='applicants')
    op.drop_index('ix_applicants_email', table_name='applicants')
    op.drop_table('applicants')
