from alembic import op
import sqlalchemy as sa

revision = "20251018090000"
down_revision = None

NOW = sa.text("(now() at time zone 'utc')")

def _audit():
    return [
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=NOW),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=NOW),
        sa.Column('created_by', sa.Integer(), nullable=True),
        sa.Column('updated_by', sa.Integer(), nullable=True),
    ]

def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('email', sa.String(length=255), nullable=False, unique=True, index=True),
        sa.Column('role', sa.String(length=32), nullable=False, server_default='customer'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=NOW),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=NOW),
    )
    op.create_table(
        'profiles',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), unique=True),
        sa.Column('full_name', sa.String(length=120), nullable=True),
        sa.Column('phone_number', sa.String(length=32), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('profile_photo', sa.String(length=1024), nullable=True),
    )
    op.create_table(
        'products',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=240), nullable=False),
        sa.Column('description', sa.Text(), nullable=False, server_default=''),
        sa.Column('price', sa.Numeric(12, 2), nullable=False),
        sa.Column('discount_percent', sa.Numeric(5, 2), nullable=False, server_default='0'),
        sa.Column('is_flash_sale', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('stock', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=NOW),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=NOW),
    )
    op.create_table(
        'sizes',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=64), nullable=False),
        sa.Column('size_cost', sa.Numeric(12, 2), nullable=False, server_default='0'),
    )
    op.create_table(
        'variants',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=64), nullable=False),
        sa.Column('variant_cost', sa.Numeric(12, 2), nullable=False, server_default='0'),
    )
    op.create_table(
        'carts',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('product_id', sa.Integer(), sa.ForeignKey('products.id', ondelete='CASCADE'), nullable=False),
        sa.Column('size_id', sa.Integer(), sa.ForeignKey('sizes.id'), nullable=False),
        sa.Column('variant_id', sa.Integer(), sa.ForeignKey('variants.id'), nullable=False),
        sa.Column('amount', sa.Integer(), nullable=False),
        sa.Column('subtotal', sa.Numeric(12, 2), nullable=False),
        *_audit(),
    )
    op.create_table(
        'order_methods',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=64), nullable=False),
        sa.Column('delivery_fee', sa.Numeric(12, 2), nullable=True),
    )
    op.create_table(
        'payment_methods',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=64), nullable=False),
        sa.Column('admin_fee', sa.Numeric(12, 2), nullable=True),
    )
    op.create_table(
        'transactions',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False, index=True),
        sa.Column('no_invoice', sa.String(length=32), nullable=False, unique=True),
        sa.Column('date_transaction', sa.DateTime(), nullable=False),
        sa.Column('full_name', sa.String(length=120), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('address', sa.Text(), nullable=False),
        sa.Column('phone', sa.String(length=32), nullable=False),
        sa.Column('payment_method_id', sa.Integer(), sa.ForeignKey('payment_methods.id'), nullable=False),
        sa.Column('order_method_id', sa.Integer(), sa.ForeignKey('order_methods.id'), nullable=False),
        sa.Column('delivery_fee', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('admin_fee', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('tax', sa.Numeric(12, 2), nullable=False),
        sa.Column('total_transaction', sa.Numeric(12, 2), nullable=False),
        sa.Column('status', sa.Enum('IN_PROGRESS', 'SENDING', 'FINISHED', 'CANCELLED', name='transactionstatus'),
                  nullable=False, server_default='IN_PROGRESS'),
        *_audit(),
    )
    op.create_table(
        'transaction_items',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('transaction_id', sa.Integer(), sa.ForeignKey('transactions.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('product_id', sa.Integer(), sa.ForeignKey('products.id'), nullable=False),
        sa.Column('product_name', sa.String(length=240), nullable=False),
        sa.Column('product_price', sa.Numeric(12, 2), nullable=False),
        sa.Column('discount_percent', sa.Numeric(5, 2), nullable=False, server_default='0'),
        sa.Column('discount_price', sa.Numeric(12, 2), nullable=False),
        sa.Column('size', sa.String(length=64), nullable=True),
        sa.Column('size_cost', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('variant', sa.String(length=64), nullable=True),
        sa.Column('variant_cost', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('amount', sa.Integer(), nullable=False),
        sa.Column('subtotal', sa.Numeric(12, 2), nullable=False),
        *_audit(),
    )

def downgrade():
    op.drop_table('transaction_items')
    op.drop_table('transactions')
    sa.Enum(name='transactionstatus').drop(op.get_bind(), checkfirst=True)
    op.drop_table('payment_methods')
    op.drop_table('order_methods')
    op.drop_table('carts')
    op.drop_table('variants')
    op.drop_table('sizes')
    op.drop_table('products')
    op.drop_table('profiles')
    op.drop_table('users')
