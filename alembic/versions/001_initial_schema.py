"""Initial schema: profiles, agents, catalog, quotes, deals, circuit quotes

Revision ID: 001_initial
Revises:
Create Date: 2026-10-19
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    ]


def upgrade() -> None:
    # profiles (one per Supabase auth user)
    op.create_table('profiles',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('email', sa.Text(), nullable=True),
        sa.Column('full_name', sa.Text(), nullable=True),
        sa.Column('role', sa.String(length=20), server_default='user', nullable=False),
        sa.Column('associated_agent_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('is_associated', sa.Boolean(), server_default='false', nullable=False),
        sa.Column('timezone', sa.String(length=64), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )

    # agents
    op.create_table('agents',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('first_name', sa.Text(), nullable=False),
        sa.Column('last_name', sa.Text(), nullable=False),
        sa.Column('email', sa.Text(), nullable=False),
        sa.Column('company_name', sa.Text(), nullable=True),
        sa.Column('commission_rate', sa.DECIMAL(precision=5, scale=2), nullable=True),
        sa.Column('maximum_commission_rate', sa.DECIMAL(precision=5, scale=2), server_default='15.00', nullable=False),
        sa.Column('total_earnings', sa.DECIMAL(precision=12, scale=2), nullable=True),
        sa.Column('last_payment', sa.DateTime(timezone=True), nullable=True),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_agents_user_id', 'agents', ['user_id'])

    # categories
    op.create_table('categories',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('type', sa.String(length=50), nullable=True),
        sa.Column('minimum_markup', sa.DECIMAL(precision=6, scale=2), nullable=True),
        sa.Column('is_active', sa.Boolean(), server_default='true', nullable=False),
        sa.Column('default_selected', sa.Boolean(), server_default='false', nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_categories_user_id', 'categories', ['user_id'])

    # client_info
    op.create_table('client_info',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('company_name', sa.Text(), nullable=False),
        sa.Column('agent_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('commission_override', sa.DECIMAL(precision=5, scale=2), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('revio_id', sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['agent_id'], ['agents.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_client_info_user_id', 'client_info', ['user_id'])
    op.create_index('ix_client_info_agent_id', 'client_info', ['agent_id'])

    # items (catalog)
    op.create_table('items',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('sku', sa.String(length=100), nullable=True),
        sa.Column('price', sa.DECIMAL(precision=12, scale=2), server_default='0', nullable=False),
        sa.Column('cost', sa.DECIMAL(precision=12, scale=2), server_default='0', nullable=False),
        sa.Column('charge_type', sa.String(length=3), nullable=True),
        sa.Column('category_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('vendor_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('is_active', sa.Boolean(), server_default='true', nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['category_id'], ['categories.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_items_user_id', 'items', ['user_id'])
    op.create_index('ix_items_category_id', 'items', ['category_id'])

    # quotes
    op.create_table('quotes',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('client_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('client_info_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('quote_number', sa.String(length=50), nullable=True),
        sa.Column('quote_month', sa.String(length=2), nullable=True),
        sa.Column('quote_year', sa.String(length=4), nullable=True),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('amount', sa.DECIMAL(precision=12, scale=2), server_default='0', nullable=False),
        sa.Column('commission', sa.DECIMAL(precision=12, scale=2), nullable=True),
        sa.Column('commission_override', sa.DECIMAL(precision=5, scale=2), nullable=True),
        sa.Column('status', sa.String(length=20), server_default='pending', nullable=False),
        sa.Column('expires_at', sa.Date(), nullable=True),
        sa.Column('archived', sa.Boolean(), server_default='false', nullable=False),
        sa.Column('accepted_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('accepted_by', sa.Text(), nullable=True),
        sa.Column('billing_address', sa.Text(), nullable=True),
        sa.Column('service_address', sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['client_id'], ['agents.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['client_info_id'], ['client_info.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_quotes_user_id', 'quotes', ['user_id'])
    op.create_index('ix_quotes_client_id', 'quotes', ['client_id'])
    op.create_index('ix_quotes_client_info_id', 'quotes', ['client_info_id'])

    # quote_items
    op.create_table('quote_items',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('quote_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('item_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('quantity', sa.Integer(), server_default='1', nullable=False),
        sa.Column('unit_price', sa.DECIMAL(precision=12, scale=2), server_default='0', nullable=False),
        sa.Column('total_price', sa.DECIMAL(precision=12, scale=2), server_default='0', nullable=False),
        sa.Column('charge_type', sa.String(length=3), server_default='MRC', nullable=False),
        sa.Column('address_id', postgresql.UUID(as_uuid=True), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['quote_id'], ['quotes.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['item_id'], ['items.id'], ondelete='RESTRICT'),
        sa.CheckConstraint("charge_type IN ('MRC', 'NRC')", name='ck_quote_items_charge_type'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_quote_items_quote_id', 'quote_items', ['quote_id'])

    # quote_number_sequences (single global counter)
    op.create_table('quote_number_sequences',
        sa.Column('id', sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column('last_quote_number', sa.Integer(), server_default='0', nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )

    # deal_registrations
    op.create_table('deal_registrations',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('deal_name', sa.Text(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('deal_value', sa.DECIMAL(precision=12, scale=2), server_default='0', nullable=False),
        sa.Column('stage', sa.String(length=30), server_default='prospecting', nullable=False),
        sa.Column('status', sa.String(length=20), server_default='active', nullable=False),
        sa.Column('probability', sa.Integer(), nullable=True),
        sa.Column('expected_close_date', sa.Date(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('agent_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('client_info_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('archived', sa.Boolean(), server_default='false', nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['agent_id'], ['agents.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['client_info_id'], ['client_info.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_deal_registrations_user_id', 'deal_registrations', ['user_id'])

    # circuit_quotes
    op.create_table('circuit_quotes',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('client_name', sa.Text(), nullable=False),
        sa.Column('client_info_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('deal_registration_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('location', sa.Text(), nullable=False),
        sa.Column('suite', sa.Text(), nullable=True),
        sa.Column('status', sa.String(length=30), server_default='new_pricing', nullable=False),
        sa.Column('static_ip', sa.Boolean(), server_default='false', nullable=False),
        sa.Column('slash_29', sa.Boolean(), server_default='false', nullable=False),
        sa.Column('dhcp', sa.Boolean(), server_default='false', nullable=False),
        sa.Column('mikrotik_required', sa.Boolean(), server_default='false', nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['client_info_id'], ['client_info.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['deal_registration_id'], ['deal_registrations.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_circuit_quotes_user_id', 'circuit_quotes', ['user_id'])

    op.create_table('circuit_quote_categories',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('circuit_quote_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('category_name', sa.Text(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['circuit_quote_id'], ['circuit_quotes.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_circuit_quote_categories_circuit_quote_id', 'circuit_quote_categories', ['circuit_quote_id'])

    op.create_table('carrier_quotes',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('circuit_quote_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('carrier', sa.Text(), nullable=False),
        sa.Column('type', sa.Text(), nullable=False),
        sa.Column('speed', sa.Text(), nullable=False),
        sa.Column('price', sa.DECIMAL(precision=12, scale=2), server_default='0', nullable=False),
        sa.Column('term', sa.Text(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('color', sa.String(length=20), server_default='#3B82F6', nullable=False),
        sa.Column('install_fee', sa.Boolean(), server_default='false', nullable=False),
        sa.Column('install_fee_amount', sa.DECIMAL(precision=12, scale=2), nullable=True),
        sa.Column('site_survey_needed', sa.Boolean(), server_default='false', nullable=False),
        sa.Column('no_service', sa.Boolean(), server_default='false', nullable=False),
        sa.Column('static_ip', sa.Boolean(), server_default='false', nullable=False),
        sa.Column('static_ip_fee_amount', sa.DECIMAL(precision=12, scale=2), nullable=True),
        sa.Column('static_ip_5', sa.Boolean(), server_default='false', nullable=False),
        sa.Column('static_ip_5_fee_amount', sa.DECIMAL(precision=12, scale=2), nullable=True),
        sa.Column('other_costs', sa.DECIMAL(precision=12, scale=2), nullable=True),
        sa.Column('display_order', sa.Integer(), server_default='0', nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['circuit_quote_id'], ['circuit_quotes.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_carrier_quotes_circuit_quote_id', 'carrier_quotes', ['circuit_quote_id'])


def downgrade() -> None:
    op.drop_table('carrier_quotes')
    op.drop_table('circuit_quote_categories')
    op.drop_table('circuit_quotes')
    op.drop_table('deal_registrations')
    op.drop_table('quote_number_sequences')
    op.drop_table('quote_items')
    op.drop_table('quotes')
    op.drop_table('items')
    op.drop_table('client_info')
    op.drop_table('categories')
    op.drop_table('agents')
    op.drop_table('profiles')
