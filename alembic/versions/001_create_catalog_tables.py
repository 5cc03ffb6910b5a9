"""Create categories and products tables.

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create categories and products tables and seed reserved categories."""
    # Categories table
    categories = op.create_table(
        'categories',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('title', sa.String(255), nullable=False, index=True),
        sa.Column('image_url', sa.String(1000), nullable=True),
        sa.Column('parent_id', sa.Integer(),
                  sa.ForeignKey('categories.id'), nullable=True, index=True),
        sa.Column('kind', sa.String(20), nullable=False, server_default='normal', index=True),
    )

    # Products table
    op.create_table(
        'products',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('title', sa.String(500), nullable=False),
        sa.Column('image_url', sa.String(1000), nullable=False),
        sa.Column('sku', sa.String(100), nullable=False),
        sa.Column('unit_price', sa.Float(), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('category_id', sa.Integer(),
                  sa.ForeignKey('categories.id'), nullable=False, index=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    )

    # Create unique constraint on sku
    op.create_unique_constraint(
        'uq_products_sku',
        'products',
        ['sku'],
    )

    # Reserved categories
    op.bulk_insert(
        categories,
        [
            {'title': 'Deleted', 'image_url': '', 'kind': 'deleted'},
            {'title': 'No category', 'image_url': '', 'kind': 'uncategorized'},
        ],
    )


def downgrade() -> None:
    """Drop products and categories tables."""
    op.drop_table('products')
    op.drop_table('categories')
