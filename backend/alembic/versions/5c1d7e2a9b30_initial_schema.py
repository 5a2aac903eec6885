"""initial_schema

Revision ID: 5c1d7e2a9b30
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "5c1d7e2a9b30"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    ]


def _tenant_fk():
    return sa.Column("tenant_id", sa.String(length=64), sa.ForeignKey("tenants.id"), nullable=False)


def _indexes(table, *columns):
    op.create_index(op.f(f"ix_{table}_id"), table, ["id"], unique=False)
    for col in columns:
        op.create_index(op.f(f"ix_{table}_{col}"), table, [col], unique=False)


def upgrade() -> None:
    op.create_table(
        "tenants",
        sa.Column("id", sa.String(length=64), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("phone", sa.String(length=20), nullable=True),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("gstin", sa.String(length=15), nullable=True),
        sa.Column("sender_id", sa.String(length=10), nullable=True),
        sa.Column("sms_enabled", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_tenants_id"), "tenants", ["id"], unique=False)

    op.create_table(
        "customers",
        sa.Column("id", sa.Integer(), nullable=False),
        _tenant_fk(),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("phone", sa.String(length=20), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("gender", sa.String(length=10), nullable=True),
        sa.Column("date_of_birth", sa.Date(), nullable=True),
        sa.Column("date_of_anniversary", sa.Date(), nullable=True),
        sa.Column("lead_source", sa.String(length=50), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("loyalty_enrolled", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("loyalty_enrolled_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("total_visits", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_spent", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("last_visit", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("tenant_id", "phone", name="uq_customers_tenant_phone"),
    )
    _indexes("customers", "tenant_id", "phone")

    op.create_table(
        "staff",
        sa.Column("id", sa.Integer(), nullable=False),
        _tenant_fk(),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("phone", sa.String(length=20), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("role", sa.String(length=12), nullable=False),
        sa.Column("commission_percentage", sa.Numeric(5, 2), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("joining_date", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    _indexes("staff", "tenant_id")

    op.create_table(
        "services",
        sa.Column("id", sa.Integer(), nullable=False),
        _tenant_fk(),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("category", sa.String(length=100), nullable=True),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("duration_minutes", sa.Integer(), nullable=True),
        sa.Column("gst_rate_id", sa.Integer(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    _indexes("services", "tenant_id")

    op.create_table(
        "products",
        sa.Column("id", sa.Integer(), nullable=False),
        _tenant_fk(),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("sku", sa.String(length=64), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("stock_quantity", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("gst_rate_id", sa.Integer(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    _indexes("products", "tenant_id")

    op.create_table(
        "bookings",
        sa.Column("id", sa.Integer(), nullable=False),
        _tenant_fk(),
        sa.Column("booking_number", sa.String(length=50), nullable=False),
        sa.Column("customer_id", sa.Integer(), sa.ForeignKey("customers.id"), nullable=False),
        sa.Column("staff_id", sa.Integer(), sa.ForeignKey("staff.id"), nullable=True),
        sa.Column("booking_date", sa.Date(), nullable=False),
        sa.Column("booking_time", sa.String(length=5), nullable=False),
        sa.Column("status", sa.String(length=9), nullable=False),
        sa.Column("total_amount", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("tenant_id", "booking_number", name="uq_bookings_tenant_number"),
    )
    _indexes("bookings", "tenant_id", "booking_number", "customer_id", "staff_id", "booking_date")

    op.create_table(
        "booking_services",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("booking_id", sa.Integer(), sa.ForeignKey("bookings.id"), nullable=False),
        sa.Column("service_id", sa.Integer(), sa.ForeignKey("services.id"), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    _indexes("booking_services", "booking_id", "service_id")

    op.create_table(
        "invoices",
        sa.Column("id", sa.Integer(), nullable=False),
        _tenant_fk(),
        sa.Column("invoice_number", sa.String(length=50), nullable=False),
        sa.Column("customer_id", sa.Integer(), sa.ForeignKey("customers.id"), nullable=False),
        sa.Column("booking_id", sa.Integer(), sa.ForeignKey("bookings.id"), nullable=True),
        sa.Column("invoice_date", sa.Date(), nullable=False),
        sa.Column("due_date", sa.Date(), nullable=True),
        sa.Column("subtotal", sa.Numeric(12, 2), nullable=False),
        sa.Column("discount_amount", sa.Numeric(12, 2), nullable=True),
        sa.Column("gst_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("total_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("payment_method", sa.String(length=13), nullable=False),
        sa.Column("status", sa.String(length=4), nullable=False),
        sa.Column("breakdown", sa.JSON(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("share_token", sa.String(length=64), nullable=True),
        sa.Column("idempotency_key", sa.String(length=100), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("booking_id"),
        sa.UniqueConstraint("tenant_id", "invoice_number", name="uq_invoices_tenant_number"),
        sa.UniqueConstraint("tenant_id", "idempotency_key", name="uq_invoices_tenant_idempotency_key"),
    )
    _indexes("invoices", "tenant_id", "invoice_number", "customer_id", "invoice_date")
    op.create_index(op.f("ix_invoices_share_token"), "invoices", ["share_token"], unique=True)

    op.create_table(
        "invoice_items",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("invoice_id", sa.Integer(), sa.ForeignKey("invoices.id"), nullable=False),
        sa.Column("item_type", sa.String(length=10), nullable=False),
        sa.Column("reference_id", sa.Integer(), nullable=True),
        sa.Column("staff_id", sa.Integer(), sa.ForeignKey("staff.id"), nullable=True),
        sa.Column("description", sa.String(length=255), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("unit_price", sa.Numeric(10, 2), nullable=False),
        sa.Column("total_amount", sa.Numeric(10, 2), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    _indexes("invoice_items", "invoice_id")

    op.create_table(
        "membership_plans",
        sa.Column("id", sa.Integer(), nullable=False),
        _tenant_fk(),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("duration_months", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("benefits", sa.JSON(), nullable=True),
        sa.Column("discount_percentage", sa.Numeric(5, 2), nullable=True),
        sa.Column("max_bookings_per_month", sa.Integer(), nullable=True),
        sa.Column("status", sa.String(length=8), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    _indexes("membership_plans", "tenant_id")

    op.create_table(
        "customer_memberships",
        sa.Column("id", sa.Integer(), nullable=False),
        _tenant_fk(),
        sa.Column("customer_id", sa.Integer(), sa.ForeignKey("customers.id"), nullable=False),
        sa.Column("plan_id", sa.Integer(), sa.ForeignKey("membership_plans.id"), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("status", sa.String(length=9), nullable=False),
        sa.Column("amount_paid", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("bookings_used", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("invoice_id", sa.Integer(), sa.ForeignKey("invoices.id"), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    _indexes("customer_memberships", "tenant_id", "customer_id", "plan_id", "end_date")

    op.create_table(
        "loyalty_settings",
        sa.Column("id", sa.Integer(), nullable=False),
        _tenant_fk(),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("earn_on_purchase_enabled", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("points_per_rupee", sa.Numeric(8, 2), nullable=False, server_default="1"),
        sa.Column("max_redemption_percent", sa.Integer(), nullable=False, server_default="50"),
        sa.Column("minimum_order_amount", sa.Numeric(10, 2), nullable=False, server_default="100"),
        sa.Column("cashback_percentage", sa.Numeric(5, 2), nullable=False, server_default="0"),
        sa.Column("welcome_bonus", sa.Integer(), nullable=False, server_default="100"),
        sa.Column("referral_bonus", sa.Integer(), nullable=False, server_default="50"),
        sa.Column("points_validity_days", sa.Integer(), nullable=False, server_default="45"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_loyalty_settings_id"), "loyalty_settings", ["id"], unique=False)
    op.create_index(op.f("ix_loyalty_settings_tenant_id"), "loyalty_settings", ["tenant_id"], unique=True)

    op.create_table(
        "loyalty_transactions",
        sa.Column("id", sa.Integer(), nullable=False),
        _tenant_fk(),
        sa.Column("customer_id", sa.Integer(), sa.ForeignKey("customers.id"), nullable=False),
        sa.Column("transaction_type", sa.String(length=8), nullable=False),
        sa.Column("points", sa.Integer(), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("invoice_id", sa.Integer(), sa.ForeignKey("invoices.id"), nullable=True),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    _indexes("loyalty_transactions", "tenant_id", "customer_id", "transaction_type", "created_at")

    op.create_table(
        "customer_loyalty",
        sa.Column("id", sa.Integer(), nullable=False),
        _tenant_fk(),
        sa.Column("customer_id", sa.Integer(), sa.ForeignKey("customers.id"), nullable=False),
        sa.Column("points", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("tier", sa.String(length=20), nullable=False, server_default="bronze"),
        sa.Column("lifetime_spending", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("total_earned", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_redeemed", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("join_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("last_activity", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("tenant_id", "customer_id", name="uq_customer_loyalty_tenant_customer"),
    )
    _indexes("customer_loyalty", "tenant_id", "customer_id")

    op.create_table(
        "coupons",
        sa.Column("id", sa.Integer(), nullable=False),
        _tenant_fk(),
        sa.Column("code", sa.String(length=50), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("discount_type", sa.String(length=10), nullable=False),
        sa.Column("discount_value", sa.Numeric(10, 2), nullable=False),
        sa.Column("min_order_amount", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("max_discount", sa.Numeric(10, 2), nullable=True),
        sa.Column("valid_from", sa.Date(), nullable=False),
        sa.Column("valid_until", sa.Date(), nullable=False),
        sa.Column("usage_limit", sa.Integer(), nullable=True),
        sa.Column("used_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("tenant_id", "code", name="uq_coupons_tenant_code"),
    )
    _indexes("coupons", "tenant_id", "code")

    op.create_table(
        "gift_cards",
        sa.Column("id", sa.Integer(), nullable=False),
        _tenant_fk(),
        sa.Column("code", sa.String(length=20), nullable=False),
        sa.Column("initial_amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("balance", sa.Numeric(10, 2), nullable=False),
        sa.Column("status", sa.String(length=7), nullable=False),
        sa.Column("customer_name", sa.String(length=255), nullable=True),
        sa.Column("customer_phone", sa.String(length=20), nullable=True),
        sa.Column("issued_to", sa.Integer(), sa.ForeignKey("customers.id"), nullable=True),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("tenant_id", "code", name="uq_gift_cards_tenant_code"),
    )
    _indexes("gift_cards", "tenant_id", "code")

    op.create_table(
        "gift_card_transactions",
        sa.Column("id", sa.Integer(), nullable=False),
        _tenant_fk(),
        sa.Column("gift_card_id", sa.Integer(), sa.ForeignKey("gift_cards.id"), nullable=False),
        sa.Column("invoice_id", sa.Integer(), sa.ForeignKey("invoices.id"), nullable=True),
        sa.Column("amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("balance_after", sa.Numeric(10, 2), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    _indexes("gift_card_transactions", "tenant_id", "gift_card_id")

    op.create_table(
        "cash_registers",
        sa.Column("id", sa.Integer(), nullable=False),
        _tenant_fk(),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("location", sa.String(length=255), nullable=True),
        sa.Column("opening_balance", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("current_balance", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("status", sa.String(length=6), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    _indexes("cash_registers", "tenant_id")

    op.create_table(
        "cash_transactions",
        sa.Column("id", sa.Integer(), nullable=False),
        _tenant_fk(),
        sa.Column("register_id", sa.Integer(), sa.ForeignKey("cash_registers.id"), nullable=False),
        sa.Column("type", sa.String(length=8), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("category", sa.String(length=100), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("reference", sa.String(length=100), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    _indexes("cash_transactions", "tenant_id", "register_id")

    op.create_table(
        "expenses",
        sa.Column("id", sa.Integer(), nullable=False),
        _tenant_fk(),
        sa.Column("category", sa.String(length=100), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("expense_date", sa.Date(), nullable=False),
        sa.Column("payment_method", sa.String(length=30), nullable=True),
        sa.Column("vendor", sa.String(length=255), nullable=True),
        sa.Column("receipt_reference", sa.String(length=255), nullable=True),
        sa.Column("status", sa.String(length=8), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    _indexes("expenses", "tenant_id", "category", "expense_date")

    op.create_table(
        "campaigns",
        sa.Column("id", sa.Integer(), nullable=False),
        _tenant_fk(),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("type", sa.String(length=8), nullable=False),
        sa.Column("subject", sa.String(length=255), nullable=True),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("segment", sa.String(length=20), nullable=False, server_default="all"),
        sa.Column("scheduled_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("budget", sa.Numeric(12, 2), nullable=True),
        sa.Column("status", sa.String(length=9), nullable=False),
        sa.Column("sent_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("opened_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("clicked_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("revenue", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("sent_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    _indexes("campaigns", "tenant_id")


def downgrade() -> None:
    for table in (
        "campaigns",
        "expenses",
        "cash_transactions",
        "cash_registers",
        "gift_card_transactions",
        "gift_cards",
        "coupons",
        "customer_loyalty",
        "loyalty_transactions",
        "loyalty_settings",
        "customer_memberships",
        "membership_plans",
        "invoice_items",
        "invoices",
        "booking_services",
        "bookings",
        "products",
        "services",
        "staff",
        "customers",
        "tenants",
    ):
        op.drop_table(table)
