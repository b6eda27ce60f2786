"""Initial migration

Revision ID: 001_initial
Revises:
Create Date: 2024-01-01 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '001_initial'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Append-only price observations
    op.create_table(
        'precios',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('ean', sa.String(length=32), nullable=False),
        sa.Column('fetched_at', sa.DateTime(), nullable=False),
        sa.Column('precio_centavos', sa.Integer(), nullable=True),
        sa.Column('in_stock', sa.Boolean(), nullable=True),
        sa.Column('url', sa.Text(), nullable=True),
        sa.Column('name', sa.Text(), nullable=True),
        sa.Column('image_url', sa.Text(), nullable=True),
        sa.Column('parser_version', sa.Integer(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(
        'ix_precios_ean_fetched_at', 'precios', ['ean', 'fetched_at', 'id']
    )


def downgrade() -> None:
    op.drop_index('ix_precios_ean_fetched_at', table_name='precios')
    op.drop_table('precios')
