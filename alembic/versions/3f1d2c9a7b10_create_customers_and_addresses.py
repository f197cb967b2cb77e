"""create_customers_and_addresses

Revision ID: 3f1d2c9a7b10
Revises:
Create Date: 2026-10-18 10:12:41.204518

"""
from alembic import op
import sqlalchemy as sa


revision = '3f1d2c9a7b10'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'customers',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('first_name', sa.String(length=255), nullable=False),
        sa.Column('last_name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=50), nullable=False),
        sa.Column('phone_digits', sa.String(length=50), nullable=False),
        sa.Column('first_name_folded', sa.String(length=255), nullable=False),
        sa.Column('last_name_folded', sa.String(length=255), nullable=False),
        sa.Column('email_folded', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_customers_first_name'), 'customers', ['first_name'], unique=False)
    op.create_index(op.f('ix_customers_last_name'), 'customers', ['last_name'], unique=False)
    op.create_index(op.f('ix_customers_email'), 'customers', ['email'], unique=False)
    op.create_index(op.f('ix_customers_phone_digits'), 'customers', ['phone_digits'], unique=False)
    op.create_index(op.f('ix_customers_first_name_folded'), 'customers', ['first_name_folded'], unique=False)
    op.create_index(op.f('ix_customers_last_name_folded'), 'customers', ['last_name_folded'], unique=False)
    op.create_index(op.f('ix_customers_email_folded'), 'customers', ['email_folded'], unique=False)

    op.create_table(
        'addresses',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('customer_id', sa.String(length=32), nullable=False),
        sa.Column('label', sa.String(length=255), nullable=True),
        sa.Column('line1', sa.String(length=50), nullable=False),
        sa.Column('line2', sa.String(length=50), nullable=True),
        sa.Column('city', sa.String(length=20), nullable=False),
        sa.Column('state', sa.String(length=20), nullable=False),
        sa.Column('postal_code', sa.String(length=20), nullable=False),
        sa.Column('city_folded', sa.String(length=80), nullable=False),
        sa.Column('state_folded', sa.String(length=80), nullable=False),
        sa.Column('postal_code_digits', sa.String(length=20), nullable=False),
        sa.Column('country', sa.String(length=30), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_addresses_customer_id'), 'addresses', ['customer_id'], unique=False)
    op.create_index(op.f('ix_addresses_city_folded'), 'addresses', ['city_folded'], unique=False)
    op.create_index(op.f('ix_addresses_state_folded'), 'addresses', ['state_folded'], unique=False)
    op.create_index(op.f('ix_addresses_postal_code_digits'), 'addresses', ['postal_code_digits'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_addresses_postal_code_digits'), table_name='addresses')
    op.drop_index(op.f('ix_addresses_state_folded'), table_name='addresses')
    op.drop_index(op.f('ix_addresses_city_folded'), table_name='addresses')
    op.drop_index(op.f('ix_addresses_customer_id'), table_name='addresses')
    op.drop_table('addresses')

    op.drop_index(op.f('ix_customers_email_folded'), table_name='customers')
    op.drop_index(op.f('ix_customers_last_name_folded'), table_name='customers')
    op.drop_index(op.f('ix_customers_first_name_folded'), table_name='customers')
    op.drop_index(op.f('ix_customers_phone_digits'), table_name='customers')
    op.drop_index(op.f('ix_customers_email'), table_name='customers')
    op.drop_index(op.f('ix_customers_last_name'), table_name='customers')
    op.drop_index(op.f('ix_customers_first_name'), table_name='customers')
    op.drop_table('customers')
