"""init schema

Revision ID: 0001_init
Revises:
Create Date: 2026-10-16

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql as pg


# revision identifiers, used by Alembic.
revision = "0001_init"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # users
    op.create_table(
        "users",
        sa.Column("id", pg.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("email", sa.Text(), nullable=False),
        sa.Column("password_hash", sa.Text(), nullable=False),
        sa.Column("verified", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("reset_password_token", sa.Text(), nullable=True),
        sa.Column("reset_password_expires_at", pg.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("created_at", pg.TIMESTAMP(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
    )
    op.create_unique_constraint("uq_users_email", "users", ["email"])

    # contacts
    op.create_table(
        "contacts",
        sa.Column("id", pg.UUID(as_uuid=True), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("email", sa.Text(), nullable=False),
        sa.Column("phone", sa.Text(), nullable=True),
        sa.Column("subject", sa.Text(), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("longitude", sa.Float(), nullable=False),
        sa.Column("latitude", sa.Float(), nullable=False),
        sa.Column("ip_address", sa.Text(), nullable=True),
        sa.Column("created_at", pg.TIMESTAMP(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.PrimaryKeyConstraint("id", name="pk_contacts"),
        sa.CheckConstraint("longitude >= -180 AND longitude <= 180", name="ck_contacts_contacts_longitude_range"),
        sa.CheckConstraint("latitude >= -90 AND latitude <= 90", name="ck_contacts_contacts_latitude_range"),
    )
    op.create_index("ix_contacts_location", "contacts", ["longitude", "latitude"], unique=False)

    # cancellation_requests
    op.create_table(
        "cancellation_requests",
        sa.Column("id", pg.UUID(as_uuid=True), nullable=False),
        sa.Column("payment_id", sa.Text(), nullable=False),
        sa.Column("destination", sa.Text(), nullable=False),
        sa.Column("contact_number", sa.Text(), nullable=False),
        sa.Column("reason", sa.Text(), nullable=False, server_default=sa.text("'Not specified'")),
        sa.Column("status", sa.Text(), nullable=False, server_default=sa.text("'pending'")),
        sa.Column("created_at", pg.TIMESTAMP(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.PrimaryKeyConstraint("id", name="pk_cancellation_requests"),
        sa.CheckConstraint(
            "status in ('pending','completed','rejected')",
            name="ck_cancellation_requests_cancellation_requests_status",
        ),
    )
    op.create_index(
        "ix_cancellation_requests_created_at", "cancellation_requests", ["created_at"], unique=False
    )

    # bookings
    op.create_table(
        "bookings",
        sa.Column("id", pg.UUID(as_uuid=True), nullable=False),
        sa.Column("booking_id", sa.Text(), nullable=False),
        sa.Column("user_id", sa.Text(), nullable=True),
        sa.Column("destination", sa.Text(), nullable=True),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("package_type", sa.Text(), nullable=True),
        sa.Column("duration", sa.Integer(), nullable=True),
        sa.Column("travelers", sa.Integer(), nullable=True),
        sa.Column("traveler_info", pg.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("addons", pg.JSONB(astext_type=sa.Text()), nullable=False, server_default=sa.text("'{}'::jsonb")),
        sa.Column("items", pg.JSONB(astext_type=sa.Text()), nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.Column("payment_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("payment_status", sa.Text(), nullable=False),
        sa.Column("razorpay_order_id", sa.Text(), nullable=True),
        sa.Column("razorpay_payment_id", sa.Text(), nullable=True),
        sa.Column("razorpay_signature", sa.Text(), nullable=True),
        sa.Column("payment_receipt", pg.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column("cancelled_at", pg.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("cancellation_reason", sa.Text(), nullable=True),
        sa.Column("refund_amount", sa.Numeric(12, 2), nullable=True),
        sa.Column("refund_id", sa.Text(), nullable=True),
        sa.Column("refund_status", sa.Text(), nullable=True),
        sa.Column("created_at", pg.TIMESTAMP(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.PrimaryKeyConstraint("id", name="pk_bookings"),
        sa.CheckConstraint("payment_amount >= 0", name="ck_bookings_bookings_amount_nonneg"),
    )
    op.create_unique_constraint("uq_bookings_booking_id", "bookings", ["booking_id"])
    op.create_index("ix_bookings_user_id", "bookings", ["user_id"], unique=False)
    op.create_index("ix_bookings_razorpay_payment_id", "bookings", ["razorpay_payment_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_bookings_razorpay_payment_id", table_name="bookings")
    op.drop_index("ix_bookings_user_id", table_name="bookings")
    op.drop_table("bookings")
    op.drop_index("ix_cancellation_requests_created_at", table_name="cancellation_requests")
    op.drop_table("cancellation_requests")
    op.drop_index("ix_contacts_location", table_name="contacts")
    op.drop_table("contacts")
    op.drop_table("users")
