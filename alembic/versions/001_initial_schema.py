"""Initial schema - Create all tables

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '001_initial_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


PACKAGE_STATUSES = (
    'received', 'in_processing', 'ready_to_ship', 'shipped', 'in_transit',
    'customs_pending', 'ready_for_delivery', 'out_for_delivery', 'delivered',
    'unknown', 'returned',
)


def _enum(name, *values):
    return postgresql.ENUM(*values, name=name, create_type=False)


def upgrade() -> None:
    # Create enum types
    op.execute("CREATE TYPE packagestatus AS ENUM (%s)" % ", ".join(f"'{s}'" for s in PACKAGE_STATUSES))
    op.execute("CREATE TYPE weightunit AS ENUM ('kg', 'lb')")
    op.execute("CREATE TYPE servicemode AS ENUM ('air', 'ocean', 'local')")
    op.execute("CREATE TYPE paymentstatus AS ENUM ('pending', 'partially_paid', 'paid')")
    op.execute("CREATE TYPE customsstatus AS ENUM ('not_required', 'pending', 'cleared')")
    op.execute("CREATE TYPE prealertstatus AS ENUM ('submitted', 'approved', 'rejected')")
    op.execute("CREATE TYPE invoicestatus AS ENUM ('unpaid', 'partially_paid', 'paid')")
    op.execute("CREATE TYPE role AS ENUM ('admin', 'warehouse_staff', 'customer_support', 'customer')")

    # Create customers table
    op.create_table(
        'customers',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('user_code', sa.String(50), nullable=False),
        sa.Column('first_name', sa.String(100), nullable=False, server_default=''),
        sa.Column('last_name', sa.String(100), nullable=False, server_default=''),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('phone', sa.String(30), nullable=True),
        sa.Column('address_street', sa.String(255), nullable=True),
        sa.Column('address_city', sa.String(100), nullable=True),
        sa.Column('address_country', sa.String(100), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_customers_user_code', 'customers', ['user_code'], unique=True)

    # Create packages table; the unique index on tracking_number rejects duplicates
    op.create_table(
        'packages',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('tracking_number', sa.String(50), nullable=False),
        sa.Column('customer_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('customers.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('user_code', sa.String(50), nullable=False),
        sa.Column('mailbox_number', sa.String(50), nullable=True),
        sa.Column('weight', sa.Float(), nullable=False, server_default='0.0'),
        sa.Column('weight_unit', _enum('weightunit', 'kg', 'lb'), nullable=False, server_default='kg'),
        sa.Column('length', sa.Float(), nullable=True),
        sa.Column('width', sa.Float(), nullable=True),
        sa.Column('height', sa.Float(), nullable=True),
        sa.Column('dimension_unit', sa.String(10), nullable=False, server_default='cm'),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('shipper', sa.String(255), nullable=True),
        sa.Column('item_value_usd', sa.Float(), nullable=False, server_default='0.0'),
        sa.Column('sender_name', sa.String(255), nullable=True),
        sa.Column('sender_country', sa.String(100), nullable=True),
        sa.Column('receiver_name', sa.String(255), nullable=True),
        sa.Column('receiver_phone', sa.String(30), nullable=True),
        sa.Column('receiver_email', sa.String(255), nullable=True),
        sa.Column('receiver_address', sa.Text(), nullable=True),
        sa.Column('service_mode', _enum('servicemode', 'air', 'ocean', 'local'), nullable=False, server_default='air'),
        sa.Column('current_location', sa.String(255), nullable=True),
        sa.Column('warehouse_location', sa.String(255), nullable=True),
        sa.Column('customs_required', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('customs_status', _enum('customsstatus', 'not_required', 'pending', 'cleared'), nullable=False, server_default='not_required'),
        sa.Column('status', _enum('packagestatus', *PACKAGE_STATUSES), nullable=False, server_default='received'),
        sa.Column('status_reason', sa.Text(), nullable=True),
        sa.Column('delivery_fee_jmd', sa.Float(), nullable=False, server_default='0.0'),
        sa.Column('additional_fees', postgresql.JSON(), nullable=False, server_default='[]'),
        sa.Column('amount_paid_jmd', sa.Float(), nullable=False, server_default='0.0'),
        sa.Column('payment_status', _enum('paymentstatus', 'pending', 'partially_paid', 'paid'), nullable=False, server_default='pending'),
        sa.Column('date_received', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_packages_tracking_number', 'packages', ['tracking_number'], unique=True)
    op.create_index('uq_packages_tracking_number_upper', 'packages', [sa.text('upper(tracking_number)')], unique=True)
    op.create_index('ix_packages_customer_id', 'packages', ['customer_id'])
    op.create_index('ix_packages_user_code', 'packages', ['user_code'])
    op.create_index('ix_packages_status', 'packages', ['status'])
    op.create_index('ix_packages_created_at', 'packages', ['created_at'])

    # Create package_events table
    op.create_table(
        'package_events',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('package_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('packages.id', ondelete='CASCADE'), nullable=False),
        sa.Column('status', _enum('packagestatus', *PACKAGE_STATUSES), nullable=False),
        sa.Column('note', sa.Text(), nullable=True),
        sa.Column('actor', sa.String(100), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_package_events_package_id', 'package_events', ['package_id'])

    # Create pre_alerts table
    op.create_table(
        'pre_alerts',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('user_code', sa.String(50), nullable=False),
        sa.Column('tracking_number', sa.String(50), nullable=False),
        sa.Column('carrier', sa.String(100), nullable=True),
        sa.Column('origin', sa.String(255), nullable=True),
        sa.Column('expected_date', sa.Date(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('status', _enum('prealertstatus', 'submitted', 'approved', 'rejected'), nullable=False, server_default='submitted'),
        sa.Column('decision_note', sa.Text(), nullable=True),
        sa.Column('decided_by', sa.String(100), nullable=True),
        sa.Column('decided_at', sa.DateTime(), nullable=True),
        sa.Column('package_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('packages.id', ondelete='SET NULL'), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_pre_alerts_user_code', 'pre_alerts', ['user_code'])
    op.create_index('ix_pre_alerts_tracking_number', 'pre_alerts', ['tracking_number'])

    # Create billing_invoices table
    op.create_table(
        'billing_invoices',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('invoice_number', sa.String(80), nullable=False),
        sa.Column('package_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('packages.id', ondelete='CASCADE'), unique=True, nullable=False),
        sa.Column('user_code', sa.String(50), nullable=False),
        sa.Column('currency', sa.String(3), nullable=False, server_default='JMD'),
        sa.Column('items', postgresql.JSON(), nullable=False, server_default='[]'),
        sa.Column('total_jmd', sa.Float(), nullable=False, server_default='0.0'),
        sa.Column('amount_paid_jmd', sa.Float(), nullable=False, server_default='0.0'),
        sa.Column('balance_due_jmd', sa.Float(), nullable=False, server_default='0.0'),
        sa.Column('status', _enum('invoicestatus', 'unpaid', 'partially_paid', 'paid'), nullable=False, server_default='unpaid'),
        sa.Column('issued_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('due_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_billing_invoices_invoice_number', 'billing_invoices', ['invoice_number'], unique=True)
    op.create_index('ix_billing_invoices_user_code', 'billing_invoices', ['user_code'])

    # Create payments table
    op.create_table(
        'payments',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('package_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('packages.id', ondelete='CASCADE'), nullable=False),
        sa.Column('amount_jmd', sa.Float(), nullable=False),
        sa.Column('method', sa.String(30), nullable=False, server_default='cash'),
        sa.Column('reference', sa.String(100), nullable=True),
        sa.Column('recorded_by', sa.String(100), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_payments_package_id', 'payments', ['package_id'])

    # Create messages table
    op.create_table(
        'messages',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('user_code', sa.String(50), nullable=False),
        sa.Column('subject', sa.String(255), nullable=False),
        sa.Column('body', sa.Text(), nullable=False, server_default=''),
        sa.Column('sender', sa.String(100), nullable=False, server_default='system'),
        sa.Column('read', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_messages_user_code', 'messages', ['user_code'])

    # Create api_keys table
    op.create_table(
        'api_keys',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('key_prefix', sa.String(16), nullable=False),
        sa.Column('key_hash', sa.String(64), nullable=False),
        sa.Column('role', _enum('role', 'admin', 'warehouse_staff', 'customer_support', 'customer'), nullable=False),
        sa.Column('user_code', sa.String(50), nullable=True),
        sa.Column('label', sa.String(100), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_api_keys_key_hash', 'api_keys', ['key_hash'], unique=True)


def downgrade() -> None:
    # Drop indexes
    op.drop_index('ix_api_keys_key_hash', table_name='api_keys')
    op.drop_index('ix_messages_user_code', table_name='messages')
    op.drop_index('ix_payments_package_id', table_name='payments')
    op.drop_index('ix_billing_invoices_user_code', table_name='billing_invoices')
    op.drop_index('ix_billing_invoices_invoice_number', table_name='billing_invoices')
    op.drop_index('ix_pre_alerts_tracking_number', table_name='pre_alerts')
    op.drop_index('ix_pre_alerts_user_code', table_name='pre_alerts')
    op.drop_index('ix_package_events_package_id', table_name='package_events')
    op.drop_index('ix_packages_created_at', table_name='packages')
    op.drop_index('ix_packages_status', table_name='packages')
    op.drop_index('ix_packages_user_code', table_name='packages')
    op.drop_index('ix_packages_customer_id', table_name='packages')
    op.drop_index('uq_packages_tracking_number_upper', table_name='packages')
    op.drop_index('ix_packages_tracking_number', table_name='packages')
    op.drop_index('ix_customers_user_code', table_name='customers')

    # Drop tables in reverse order (respecting foreign keys)
    op.drop_table('api_keys')
    op.drop_table('messages')
    op.drop_table('payments')
    op.drop_table('billing_invoices')
    op.drop_table('pre_alerts')
    op.drop_table('package_events')
    op.drop_table('packages')
    op.drop_table('customers')

    # Drop enum types
    op.execute("DROP TYPE IF EXISTS role")
    op.execute("DROP TYPE IF EXISTS invoicestatus")
    op.execute("DROP TYPE IF EXISTS prealertstatus")
    op.execute("DROP TYPE IF EXISTS customsstatus")
    op.execute("DROP TYPE IF EXISTS paymentstatus")
    op.execute("DROP TYPE IF EXISTS servicemode")
    op.execute("DROP TYPE IF EXISTS weightunit")
    op.execute("DROP TYPE IF EXISTS packagestatus")
