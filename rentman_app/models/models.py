import uuid
import datetime as dt
from decimal import Decimal
from typing import List, Optional
from uuid import uuid4

from bcrypt import checkpw, gensalt, hashpw
from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from core.get_db import Base

from .enums import PaymentMode, PropertyType
from .utils import utcnow


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    email: Mapped[Optional[str]] = mapped_column(
        String(255), unique=True, nullable=True
    )
    phone_number: Mapped[Optional[str]] = mapped_column(
        String(20), unique=True, nullable=True
    )
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime, default=utcnow, nullable=False
    )

    tenants: Mapped[List["Tenant"]] = relationship(
        "Tenant", back_populates="user", cascade="all, delete-orphan", passive_deletes=True
    )
    settings: Mapped[Optional["AppSettings"]] = relationship(
        "AppSettings",
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        CheckConstraint(
            "email IS NOT NULL OR phone_number IS NOT NULL",
            name="ck_users_email_or_phone",
        ),
    )

    def set_password(self, raw_password: str):
        salt = gensalt()
        self.hashed_password = hashpw(raw_password.encode("utf-8"), salt).decode(
            "utf-8"
        )

    def check_password(self, raw_password: str) -> bool:
        return checkpw(
            raw_password.encode("utf-8"), self.hashed_password.encode("utf-8")
        )


class Tenant(Base):
    __tablename__ = "tenants"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user: Mapped["User"] = relationship("User", back_populates="tenants")

    name: Mapped[str] = mapped_column(String(120), nullable=False, index=True)
    property_name: Mapped[str] = mapped_column(String(255), nullable=False)
    monthly_rent: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    security_deposit: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    start_date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    start_meter_reading: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False
    )
    property_type: Mapped[PropertyType] = mapped_column(
        Enum(PropertyType, native_enum=False, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    phone_number: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    is_archived: Mapped[bool] = mapped_column(Boolean, default=False, index=True)
    closing_date: Mapped[Optional[dt.date]] = mapped_column(Date, nullable=True)
    closing_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime, default=utcnow, nullable=False
    )
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime, default=utcnow, onupdate=utcnow, nullable=False
    )

    documents: Mapped[List["UploadedFile"]] = relationship(
        "UploadedFile",
        back_populates="tenant",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
        order_by="UploadedFile.uploaded_at",
    )
    rent_logs: Mapped[List["RentLog"]] = relationship(
        "RentLog",
        back_populates="tenant",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="RentLog.date",
    )

    @validates("monthly_rent", "security_deposit", "start_meter_reading")
    def validate_non_negative(self, key, value):
        if value is not None and Decimal(str(value)) < 0:
            raise ValueError(f"{key} cannot be negative.")
        return value


class RentLog(Base):
    __tablename__ = "rent_logs"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    tenant_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True
    )
    tenant: Mapped["Tenant"] = relationship("Tenant", back_populates="rent_logs")

    # snapshot of the tenant's name when the payment was recorded
    tenant_name: Mapped[str] = mapped_column(String(120), nullable=False, index=True)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    rent_paid: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    previous_meter_reading: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False
    )
    current_meter_reading: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False
    )
    units: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    unit_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    meter_bill: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    total: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    collector: Mapped[str] = mapped_column(String(120), nullable=False, index=True)
    payment_mode: Mapped[PaymentMode] = mapped_column(
        Enum(PaymentMode, native_enum=False, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    notes: Mapped[str] = mapped_column(Text, nullable=False, default="")

    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime, default=utcnow, nullable=False
    )
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime, default=utcnow, onupdate=utcnow, nullable=False
    )

    attachments: Mapped[List["UploadedFile"]] = relationship(
        "UploadedFile",
        back_populates="rent_log",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
        order_by="UploadedFile.uploaded_at",
    )

    __table_args__ = (
        Index("ix_rent_logs_user_date", "user_id", "date"),
        CheckConstraint(
            "current_meter_reading >= previous_meter_reading",
            name="ck_rent_logs_meter_forward",
        ),
    )


class RentCollector(Base):
    __tablename__ = "rent_collectors"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime, default=utcnow, nullable=False
    )
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime, default=utcnow, onupdate=utcnow, nullable=False
    )


class AppSettings(Base):
    __tablename__ = "app_settings"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    user: Mapped["User"] = relationship("User", back_populates="settings")
    default_unit_price: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=Decimal("8")
    )
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime, default=utcnow, nullable=False
    )
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime, default=utcnow, onupdate=utcnow, nullable=False
    )


class UploadedFile(Base):
    __tablename__ = "uploaded_files"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[str] = mapped_column(String(120), nullable=False)
    size: Mapped[int] = mapped_column(Integer, nullable=False)
    data: Mapped[str] = mapped_column(Text, nullable=False)
    uploaded_at: Mapped[dt.datetime] = mapped_column(
        DateTime, default=utcnow, nullable=False
    )

    tenant_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("tenants.id", ondelete="CASCADE"), nullable=True, index=True
    )
    rent_log_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("rent_logs.id", ondelete="CASCADE"), nullable=True, index=True
    )
    tenant: Mapped[Optional["Tenant"]] = relationship(
        "Tenant", back_populates="documents"
    )
    rent_log: Mapped[Optional["RentLog"]] = relationship(
        "RentLog", back_populates="attachments"
    )
