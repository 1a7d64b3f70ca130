"""Create users and properties tables

Revision ID: 3f2a9c1d7b4e
Revises: 
Create Date: 2026-10-17 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f2a9c1d7b4e'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create users and properties"""

    op.create_table('users',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('email', sa.String(length=320), nullable=False),
        sa.Column('hashed_password', sa.String(), nullable=True),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=False),
        sa.Column('name', sa.String(length=201), nullable=False),
        sa.Column('isadmin', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('isactive', sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.text('now()'), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    # Unique index is what rejects duplicate emails under concurrent sign-ups
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)

    op.create_table('properties',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('owner_id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('type', sa.String(length=50), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('location_street', sa.String(length=255), nullable=True),
        sa.Column('location_city', sa.String(length=100), nullable=True),
        sa.Column('location_state', sa.String(length=100), nullable=True),
        sa.Column('location_zipcode', sa.String(length=20), nullable=True),
        sa.Column('beds', sa.Integer(), nullable=False),
        sa.Column('baths', sa.Integer(), nullable=False),
        sa.Column('square_feet', sa.Integer(), nullable=False),
        sa.Column('amenities', sa.JSON(), nullable=False),
        sa.Column('rate_nightly', sa.Float(), nullable=True),
        sa.Column('rate_weekly', sa.Float(), nullable=True),
        sa.Column('rate_monthly', sa.Float(), nullable=True),
        sa.Column('seller_name', sa.String(length=255), nullable=True),
        sa.Column('seller_email', sa.String(length=320), nullable=True),
        sa.Column('seller_phone', sa.String(length=50), nullable=True),
        sa.Column('images', sa.JSON(), nullable=False),
        sa.Column('is_featured', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.text('now()'), nullable=True),
        sa.ForeignKeyConstraint(['owner_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_properties_owner_id'), 'properties', ['owner_id'], unique=False)
    op.create_index(op.f('ix_properties_type'), 'properties', ['type'], unique=False)
    op.create_index(op.f('ix_properties_is_featured'), 'properties', ['is_featured'], unique=False)
    op.create_index(op.f('ix_properties_created_at'), 'properties', ['created_at'], unique=False)


def downgrade() -> None:
    """Drop properties and users"""
    op.drop_index(op.f('ix_properties_created_at'), table_name='properties')
    op.drop_index(op.f('ix_properties_is_featured'), table_name='properties')
    op.drop_index(op.f('ix_properties_type'), table_name='properties')
    op.drop_index(op.f('ix_properties_owner_id'), table_name='properties')
    op.drop_table('properties')
    op.drop_index(op.f('ix_users_email'), table_name='users')
    op.drop_table('users')
