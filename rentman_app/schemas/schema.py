import base64
import binascii
import uuid
import datetime as dt
from decimal import Decimal
from typing import Generic, List, Optional, TypeVar

from pydantic import (
    BaseModel,
    EmailStr,
    Field,
    PlainSerializer,
    field_validator,
    model_validator,
)
from typing_extensions import Annotated

from core.settings import settings
from models.enums import DateFilter, PaymentMode, PropertyType
from models.utils import normalize_email, normalize_phone
from services.ledger_rules import verify_charges

T = TypeVar("T")

Money = Annotated[
    Decimal, PlainSerializer(float, return_type=float, when_used="json")
]
# columns are Numeric(12, 2), so inputs are held to cents
NonNegative = Annotated[Decimal, Field(ge=0, decimal_places=2)]


class ApiResponse(BaseModel, Generic[T]):
    success: bool = True
    data: Optional[T] = None
    message: Optional[str] = None


def ok(data=None, message: str | None = None) -> dict:
    return {"success": True, "data": data, "message": message}


def _strip_required(value: str, field: str) -> str:
    if value is None:
        raise ValueError(f"{field} is required.")
    value = value.strip()
    if not value:
        raise ValueError(f"{field} cannot be empty.")
    return value


def _reject_nulls(values: dict, fields: tuple[str, ...]) -> None:
    for name in fields:
        if name in values and values[name] is None:
            raise ValueError(f"{name} cannot be null.")


# ---------------------------------------------------------------- auth


class UserCreate(BaseModel):
    email: Optional[EmailStr] = None
    phone_number: Optional[str] = None
    password: str = Field(
        ..., min_length=6, json_schema_extra={"type": "string", "format": "password"}
    )
    confirm_password: Optional[str] = None

    @field_validator("email", mode="before")
    @classmethod
    def clean_email(cls, value):
        if value is None or not str(value).strip():
            return None
        return normalize_email(str(value))

    @field_validator("phone_number", mode="before")
    @classmethod
    def validate_phone(cls, value):
        if value is None or not str(value).strip():
            return None
        return normalize_phone(str(value), settings.DEFAULT_PHONE_REGION)

    @model_validator(mode="after")
    def check_identity_and_password(self):
        if not self.email and not self.phone_number:
            raise ValueError("Either email or phone number is required")
        if self.confirm_password is not None and self.confirm_password != self.password:
            raise ValueError("Passwords do not match")
        return self


class UserLoginInput(BaseModel):
    email: Optional[str] = None
    phone_number: Optional[str] = None
    password: str = Field(..., min_length=1)

    @model_validator(mode="after")
    def check_identity(self):
        if not (self.email or "").strip() and not (self.phone_number or "").strip():
            raise ValueError("Either email or phone number is required")
        return self


class UserOut(BaseModel):
    id: uuid.UUID
    email: Optional[str] = None
    phone_number: Optional[str] = None
    created_at: dt.datetime

    model_config = {"from_attributes": True}


class AuthOut(BaseModel):
    success: bool = True
    user: UserOut
    token: str
    message: Optional[str] = None


# ---------------------------------------------------------------- files


class UploadedFileIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    type: str = Field(..., min_length=1, max_length=120)
    size: int = Field(..., ge=0)
    data: str

    @field_validator("data")
    @classmethod
    def validate_base64(cls, value: str):
        payload = value.split(",", 1)[1] if value.startswith("data:") else value
        try:
            base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError):
            raise ValueError("File data must be base64 encoded.")
        return value


class UploadedFileOut(BaseModel):
    id: uuid.UUID
    name: str
    type: str
    size: int
    data: str
    uploaded_at: dt.datetime

    model_config = {"from_attributes": True}


# ---------------------------------------------------------------- tenants


class TenantCreate(BaseModel):
    name: str = Field(..., max_length=120)
    property_name: str = Field(..., max_length=255)
    monthly_rent: NonNegative
    security_deposit: NonNegative
    start_date: dt.date
    start_meter_reading: NonNegative
    property_type: PropertyType
    phone_number: Optional[str] = None
    notes: Optional[str] = None
    documents: List[UploadedFileIn] = []

    @field_validator("name", "property_name")
    @classmethod
    def strip_names(cls, value: str, info):
        return _strip_required(value, info.field_name)


class TenantUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=120)
    property_name: Optional[str] = Field(None, max_length=255)
    monthly_rent: Optional[NonNegative] = None
    security_deposit: Optional[NonNegative] = None
    start_date: Optional[dt.date] = None
    start_meter_reading: Optional[NonNegative] = None
    property_type: Optional[PropertyType] = None
    phone_number: Optional[str] = None
    notes: Optional[str] = None
    documents: Optional[List[UploadedFileIn]] = None

    @field_validator("name", "property_name")
    @classmethod
    def strip_names(cls, value, info):
        if value is None:
            return value
        return _strip_required(value, info.field_name)

    @model_validator(mode="before")
    @classmethod
    def reject_nulls(cls, data):
        if isinstance(data, dict):
            _reject_nulls(
                data,
                (
                    "name",
                    "property_name",
                    "monthly_rent",
                    "security_deposit",
                    "start_date",
                    "start_meter_reading",
                    "property_type",
                    "documents",
                ),
            )
        return data


class TenantArchive(BaseModel):
    closing_date: dt.date
    closing_notes: str = ""

    @field_validator("closing_notes", mode="before")
    @classmethod
    def default_notes(cls, value):
        return value if value is not None else ""


class TenantOut(BaseModel):
    id: uuid.UUID
    name: str
    property_name: str
    monthly_rent: Money
    security_deposit: Money
    start_date: dt.date
    start_meter_reading: Money
    property_type: PropertyType
    phone_number: Optional[str] = None
    notes: Optional[str] = None
    documents: List[UploadedFileOut] = []
    is_archived: bool
    closing_date: Optional[dt.date] = None
    closing_notes: Optional[str] = None
    created_at: dt.datetime
    updated_at: dt.datetime

    model_config = {"from_attributes": True}


class TenantFinancialSummaryOut(BaseModel):
    tenant_id: uuid.UUID
    total_rent_paid: Money
    total_electricity_bill: Money
    total_amount_paid: Money
    total_months_occupied: int
    total_logs: int

    model_config = {"from_attributes": True}


class LastMeterReadingOut(BaseModel):
    tenant_id: uuid.UUID
    reading: Money
    source: str


# ---------------------------------------------------------------- rent logs


class RentLogCreate(BaseModel):
    tenant_id: uuid.UUID
    tenant_name: Optional[str] = Field(None, max_length=120)
    date: dt.date
    rent_paid: NonNegative
    previous_meter_reading: NonNegative
    current_meter_reading: NonNegative
    units: NonNegative
    unit_price: NonNegative
    meter_bill: NonNegative
    total: NonNegative
    collector: str = Field(..., max_length=120)
    payment_mode: PaymentMode
    notes: str = ""
    attachments: List[UploadedFileIn] = []

    @field_validator("collector")
    @classmethod
    def strip_names(cls, value: str, info):
        return _strip_required(value, info.field_name)

    @field_validator("notes", mode="before")
    @classmethod
    def default_notes(cls, value):
        return value if value is not None else ""

    @model_validator(mode="after")
    def check_charges(self):
        verify_charges(
            previous_meter_reading=self.previous_meter_reading,
            current_meter_reading=self.current_meter_reading,
            unit_price=self.unit_price,
            rent_paid=self.rent_paid,
            units=self.units,
            meter_bill=self.meter_bill,
            total=self.total,
        )
        return self


class RentLogUpdate(BaseModel):
    tenant_id: Optional[uuid.UUID] = None
    tenant_name: Optional[str] = Field(None, max_length=120)
    date: Optional[dt.date] = None
    rent_paid: Optional[NonNegative] = None
    previous_meter_reading: Optional[NonNegative] = None
    current_meter_reading: Optional[NonNegative] = None
    units: Optional[NonNegative] = None
    unit_price: Optional[NonNegative] = None
    meter_bill: Optional[NonNegative] = None
    total: Optional[NonNegative] = None
    collector: Optional[str] = Field(None, max_length=120)
    payment_mode: Optional[PaymentMode] = None
    notes: Optional[str] = None
    attachments: Optional[List[UploadedFileIn]] = None

    @field_validator("tenant_name", "collector")
    @classmethod
    def strip_names(cls, value, info):
        if value is None:
            return value
        return _strip_required(value, info.field_name)

    @model_validator(mode="before")
    @classmethod
    def reject_nulls(cls, data):
        if isinstance(data, dict):
            _reject_nulls(
                data,
                (
                    "tenant_id",
                    "tenant_name",
                    "date",
                    "rent_paid",
                    "previous_meter_reading",
                    "current_meter_reading",
                    "units",
                    "unit_price",
                    "meter_bill",
                    "total",
                    "collector",
                    "payment_mode",
                    "attachments",
                ),
            )
        return data


class RentLogOut(BaseModel):
    id: uuid.UUID
    tenant_id: uuid.UUID
    tenant_name: str
    date: dt.date
    rent_paid: Money
    previous_meter_reading: Money
    current_meter_reading: Money
    units: Money
    unit_price: Money
    meter_bill: Money
    total: Money
    collector: str
    payment_mode: PaymentMode
    notes: str
    attachments: List[UploadedFileOut] = []
    created_at: dt.datetime
    updated_at: dt.datetime

    model_config = {"from_attributes": True}


# ---------------------------------------------------------------- analytics


class DateRangeIn(BaseModel):
    start: dt.date
    end: dt.date


class DashboardStatsOut(BaseModel):
    total_rent_collected: Money
    total_electricity_bill: Money
    total_logs: int

    model_config = {"from_attributes": True}


class MonthlyStatOut(BaseModel):
    month: str
    rent: Money
    electricity: Money

    model_config = {"from_attributes": True}


class PendingPayerOut(BaseModel):
    tenant_id: uuid.UUID
    name: str
    property_name: str
    monthly_rent: Money

    model_config = {"from_attributes": True}


class PendingPaymentsOut(BaseModel):
    month: str
    tenants: List[PendingPayerOut]
    total_pending: Money
    count: int

    model_config = {"from_attributes": True}


class DashboardOut(BaseModel):
    filter: DateFilter
    start: dt.date
    end: dt.date
    stats: DashboardStatsOut
    monthly: List[MonthlyStatOut]
    pending: PendingPaymentsOut
    total_tenants: int
    tenants_with_dues: int
    recent_logs: List[RentLogOut]


# ---------------------------------------------------------------- collectors / settings


class RentCollectorIn(BaseModel):
    name: str = Field(..., max_length=120)

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str):
        return _strip_required(value, "name")


class RentCollectorOut(BaseModel):
    id: uuid.UUID
    name: str
    created_at: dt.datetime
    updated_at: dt.datetime

    model_config = {"from_attributes": True}


class AppSettingsUpdate(BaseModel):
    default_unit_price: NonNegative


class AppSettingsOut(BaseModel):
    id: uuid.UUID
    default_unit_price: Money
    created_at: dt.datetime
    updated_at: dt.datetime

    model_config = {"from_attributes": True}
