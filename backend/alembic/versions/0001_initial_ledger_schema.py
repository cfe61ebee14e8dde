"""initial ledger schema

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '0001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _audit_columns():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_by', sa.String(), nullable=True),
        sa.Column('updated_by', sa.String(), nullable=True),
    ]


def _money(name):
    return sa.Column(name, sa.Numeric(18, 2), nullable=False, server_default='0')


def upgrade() -> None:
    """Create the chart of accounts, ledger, inventory and order tables."""
    op.create_table(
        'accounts',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('code', sa.String(20), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('account_type', sa.Enum('ASSET', 'LIABILITY', 'EQUITY', 'REVENUE', 'EXPENSE', name='accounttype'), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        _money('balance'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('parent_id', sa.Integer(), sa.ForeignKey('accounts.id'), nullable=True),
        *_audit_columns(),
    )
    op.create_index('ix_accounts_id', 'accounts', ['id'])
    op.create_index('ix_accounts_code', 'accounts', ['code'], unique=True)

    op.create_table(
        'journal_entries',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('entry_number', sa.String(20), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('description', sa.String(), nullable=False),
        sa.Column('entry_type', sa.Enum('JOURNAL', 'SALE', 'PURCHASE', 'PAYMENT', 'ADJUSTMENT', name='journalentrytype'), nullable=False),
        sa.Column('reference_id', sa.String(), nullable=True),
        sa.Column('user_id', sa.String(), nullable=True),
        *_audit_columns(),
    )
    op.create_index('ix_journal_entries_id', 'journal_entries', ['id'])
    op.create_index('ix_journal_entries_entry_number', 'journal_entries', ['entry_number'], unique=True)
    op.create_index('ix_journal_entries_reference_id', 'journal_entries', ['reference_id'])

    op.create_table(
        'journal_entry_lines',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('journal_entry_id', sa.Integer(), sa.ForeignKey('journal_entries.id'), nullable=False),
        sa.Column('account_id', sa.Integer(), sa.ForeignKey('accounts.id'), nullable=False),
        sa.Column('debit', sa.Numeric(18, 2), sa.CheckConstraint('debit >= 0'), nullable=False, server_default='0'),
        sa.Column('credit', sa.Numeric(18, 2), sa.CheckConstraint('credit >= 0'), nullable=False, server_default='0'),
        sa.Column('description', sa.String(), nullable=True),
        sa.CheckConstraint(
            '(debit > 0 AND credit = 0) OR (debit = 0 AND credit > 0)',
            name='check_debit_or_credit_exclusive'
        ),
    )
    op.create_index('ix_journal_entry_lines_id', 'journal_entry_lines', ['id'])
    op.create_index('ix_journal_entry_lines_journal_entry_id', 'journal_entry_lines', ['journal_entry_id'])
    op.create_index('ix_journal_entry_lines_account_id', 'journal_entry_lines', ['account_id'])

    op.create_table(
        'categories',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False, unique=True),
        sa.Column('description', sa.Text(), nullable=True),
        *_audit_columns(),
    )

    op.create_table(
        'products',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('sku', sa.String(64), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('category_id', sa.Integer(), sa.ForeignKey('categories.id'), nullable=True),
        _money('cost_price'),
        _money('selling_price'),
        sa.Column('reorder_level', sa.Integer(), nullable=False, server_default='10'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_audit_columns(),
    )
    op.create_index('ix_products_id', 'products', ['id'])
    op.create_index('ix_products_sku', 'products', ['sku'], unique=True)

    op.create_table(
        'warehouses',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False, unique=True),
        sa.Column('location', sa.String(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_audit_columns(),
    )

    op.create_table(
        'stocks',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('product_id', sa.Integer(), sa.ForeignKey('products.id'), nullable=False),
        sa.Column('warehouse_id', sa.Integer(), sa.ForeignKey('warehouses.id'), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False, server_default='0'),
        *_audit_columns(),
        sa.UniqueConstraint('product_id', 'warehouse_id', name='_stock_product_warehouse_uc'),
        sa.CheckConstraint('quantity >= 0', name='check_stock_quantity_non_negative'),
    )
    op.create_index('ix_stocks_product_id', 'stocks', ['product_id'])
    op.create_index('ix_stocks_warehouse_id', 'stocks', ['warehouse_id'])

    op.create_table(
        'stock_movements',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('product_id', sa.Integer(), sa.ForeignKey('products.id'), nullable=False),
        sa.Column('from_warehouse_id', sa.Integer(), sa.ForeignKey('warehouses.id'), nullable=True),
        sa.Column('to_warehouse_id', sa.Integer(), sa.ForeignKey('warehouses.id'), nullable=True),
        sa.Column('movement_type', sa.Enum('IN', 'OUT', 'TRANSFER', 'ADJUSTMENT', name='movementtype'), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('user_id', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_stock_movements_product_id', 'stock_movements', ['product_id'])
    op.create_index('ix_stock_movements_created_at', 'stock_movements', ['created_at'])

    op.create_table(
        'customers',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=True),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        _money('credit_limit'),
        _money('balance'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_audit_columns(),
    )

    op.create_table(
        'suppliers',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=True),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        _money('balance'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_audit_columns(),
    )

    op.create_table(
        'sales_orders',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('order_number', sa.String(20), nullable=False),
        sa.Column('customer_id', sa.Integer(), sa.ForeignKey('customers.id'), nullable=False),
        sa.Column('user_id', sa.String(), nullable=True),
        sa.Column('order_date', sa.Date(), nullable=False),
        _money('total_amount'),
        _money('discount'),
        _money('tax'),
        _money('grand_total'),
        _money('paid_amount'),
        _money('balance'),
        sa.Column('status', sa.Enum('PENDING', 'COMPLETED', 'CANCELLED', name='salesorderstatus'), nullable=False),
        sa.Column('payment_method', sa.Enum('CASH', 'CARD', 'BANK_TRANSFER', 'CREDIT', name='paymentmethod'), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        *_audit_columns(),
    )
    op.create_index('ix_sales_orders_order_number', 'sales_orders', ['order_number'], unique=True)
    op.create_index('ix_sales_orders_customer_id', 'sales_orders', ['customer_id'])

    op.create_table(
        'sales_order_items',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('sales_order_id', sa.Integer(), sa.ForeignKey('sales_orders.id'), nullable=False),
        sa.Column('product_id', sa.Integer(), sa.ForeignKey('products.id'), nullable=False),
        sa.Column('quantity', sa.Integer(), sa.CheckConstraint('quantity > 0'), nullable=False),
        sa.Column('unit_price', sa.Numeric(18, 2), nullable=False),
        sa.Column('line_total', sa.Numeric(18, 2), nullable=False),
    )
    op.create_index('ix_sales_order_items_sales_order_id', 'sales_order_items', ['sales_order_id'])

    op.create_table(
        'purchase_orders',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('order_number', sa.String(20), nullable=False),
        sa.Column('supplier_id', sa.Integer(), sa.ForeignKey('suppliers.id'), nullable=False),
        sa.Column('user_id', sa.String(), nullable=True),
        sa.Column('order_date', sa.Date(), nullable=False),
        _money('total_amount'),
        _money('discount'),
        _money('tax'),
        _money('grand_total'),
        _money('paid_amount'),
        _money('balance'),
        sa.Column('status', sa.Enum('PENDING', 'RECEIVED', 'CANCELLED', name='purchaseorderstatus'), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('received_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('received_warehouse_id', sa.Integer(), sa.ForeignKey('warehouses.id'), nullable=True),
        *_audit_columns(),
    )
    op.create_index('ix_purchase_orders_order_number', 'purchase_orders', ['order_number'], unique=True)
    op.create_index('ix_purchase_orders_supplier_id', 'purchase_orders', ['supplier_id'])

    op.create_table(
        'purchase_order_items',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('purchase_order_id', sa.Integer(), sa.ForeignKey('purchase_orders.id'), nullable=False),
        sa.Column('product_id', sa.Integer(), sa.ForeignKey('products.id'), nullable=False),
        sa.Column('quantity', sa.Integer(), sa.CheckConstraint('quantity > 0'), nullable=False),
        sa.Column('unit_price', sa.Numeric(18, 2), nullable=False),
        sa.Column('line_total', sa.Numeric(18, 2), nullable=False),
    )
    op.create_index('ix_purchase_order_items_purchase_order_id', 'purchase_order_items', ['purchase_order_id'])

    op.create_table(
        'document_sequences',
        sa.Column('prefix', sa.String(10), primary_key=True),
        sa.Column('last_value', sa.Integer(), nullable=False, server_default='0'),
    )

    op.create_table(
        'activity_log',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.String(), nullable=True),
        sa.Column('action', sa.String(), nullable=False),
        sa.Column('entity', sa.String(), nullable=False),
        sa.Column('entity_id', sa.String(), nullable=True),
        sa.Column('details', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
    )


def downgrade() -> None:
    """Drop every table in reverse dependency order, then the enum types."""
    for table in (
        'activity_log',
        'document_sequences',
        'purchase_order_items',
        'purchase_orders',
        'sales_order_items',
        'sales_orders',
        'suppliers',
        'customers',
        'stock_movements',
        'stocks',
        'warehouses',
        'products',
        'categories',
        'journal_entry_lines',
        'journal_entries',
        'accounts',
    ):
        op.drop_table(table)

    bind = op.get_bind()
    for enum_name in (
        'purchaseorderstatus',
        'paymentmethod',
        'salesorderstatus',
        'movementtype',
        'journalentrytype',
        'accounttype',
    ):
        sa.Enum(name=enum_name).drop(bind, checkfirst=True)
