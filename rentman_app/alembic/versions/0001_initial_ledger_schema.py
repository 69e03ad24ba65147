"""initial ledger schema

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001_initial"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    ]


def _owner():
    return sa.Column(
        "user_id",
        sa.Uuid(),
        sa.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )


def upgrade():
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("email", sa.String(255), nullable=True, unique=True),
        sa.Column("phone_number", sa.String(20), nullable=True, unique=True),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint(
            "email IS NOT NULL OR phone_number IS NOT NULL",
            name="ck_users_email_or_phone",
        ),
    )

    op.create_table(
        "tenants",
        sa.Column("id", sa.Uuid(), primary_key=True),
        _owner(),
        sa.Column("name", sa.String(120), nullable=False, index=True),
        sa.Column("property_name", sa.String(255), nullable=False),
        sa.Column("monthly_rent", sa.Numeric(12, 2), nullable=False),
        sa.Column("security_deposit", sa.Numeric(12, 2), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("start_meter_reading", sa.Numeric(12, 2), nullable=False),
        sa.Column(
            "property_type",
            sa.Enum("residential", "commercial", name="propertytype", native_enum=False),
            nullable=False,
        ),
        sa.Column("phone_number", sa.String(20), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("is_archived", sa.Boolean(), nullable=False, index=True),
        sa.Column("closing_date", sa.Date(), nullable=True),
        sa.Column("closing_notes", sa.Text(), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "rent_logs",
        sa.Column("id", sa.Uuid(), primary_key=True),
        _owner(),
        sa.Column(
            "tenant_id",
            sa.Uuid(),
            sa.ForeignKey("tenants.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column("tenant_name", sa.String(120), nullable=False, index=True),
        sa.Column("date", sa.Date(), nullable=False, index=True),
        sa.Column("rent_paid", sa.Numeric(12, 2), nullable=False),
        sa.Column("previous_meter_reading", sa.Numeric(12, 2), nullable=False),
        sa.Column("current_meter_reading", sa.Numeric(12, 2), nullable=False),
        sa.Column("units", sa.Numeric(12, 2), nullable=False),
        sa.Column("unit_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("meter_bill", sa.Numeric(12, 2), nullable=False),
        sa.Column("total", sa.Numeric(12, 2), nullable=False),
        sa.Column("collector", sa.String(120), nullable=False, index=True),
        sa.Column(
            "payment_mode",
            sa.Enum("online", "cash", name="paymentmode", native_enum=False),
            nullable=False,
        ),
        sa.Column("notes", sa.Text(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint(
            "current_meter_reading >= previous_meter_reading",
            name="ck_rent_logs_meter_forward",
        ),
    )
    op.create_index("ix_rent_logs_user_date", "rent_logs", ["user_id", "date"])

    op.create_table(
        "rent_collectors",
        sa.Column("id", sa.Uuid(), primary_key=True),
        _owner(),
        sa.Column("name", sa.String(120), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "app_settings",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "user_id",
            sa.Uuid(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
            unique=True,
        ),
        sa.Column("default_unit_price", sa.Numeric(12, 2), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "uploaded_files",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("type", sa.String(120), nullable=False),
        sa.Column("size", sa.Integer(), nullable=False),
        sa.Column("data", sa.Text(), nullable=False),
        sa.Column("uploaded_at", sa.DateTime(), nullable=False),
        sa.Column(
            "tenant_id",
            sa.Uuid(),
            sa.ForeignKey("tenants.id", ondelete="CASCADE"),
            nullable=True,
            index=True,
        ),
        sa.Column(
            "rent_log_id",
            sa.Uuid(),
            sa.ForeignKey("rent_logs.id", ondelete="CASCADE"),
            nullable=True,
            index=True,
        ),
    )


def downgrade():
    op.drop_table("uploaded_files")
    op.drop_table("app_settings")
    op.drop_table("rent_collectors")
    op.drop_index("ix_rent_logs_user_date", table_name="rent_logs")
    op.drop_table("rent_logs")
    op.drop_table("tenants")
    op.drop_table("users")
