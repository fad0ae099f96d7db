"""Pydantic schemas for API models."""

from datetime import date, datetime, timezone
from typing import Any, List, Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator


# Dental offices

class OfficeBase(BaseModel):
    """Base office schema."""
    name: str = Field(..., min_length=1, max_length=255)
    npi_id: str = Field(..., min_length=1, max_length=20)
    state: Optional[str] = Field(None, max_length=100)
    town: Optional[str] = Field(None, max_length=100)
    address: Optional[str] = None
    phone_number: Optional[str] = Field(None, max_length=50)
    email: Optional[str] = Field(None, max_length=255)


class OfficeCreate(OfficeBase):
    """Request schema for creating an office."""
    pass


class OfficeUpdate(BaseModel):
    """Partial update; omitted fields are left unchanged."""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    npi_id: Optional[str] = Field(None, min_length=1, max_length=20)
    state: Optional[str] = Field(None, max_length=100)
    town: Optional[str] = Field(None, max_length=100)
    address: Optional[str] = None
    phone_number: Optional[str] = Field(None, max_length=50)
    email: Optional[str] = Field(None, max_length=255)

    @field_validator("name", "npi_id")
    @classmethod
    def reject_null(cls, value: Optional[str]) -> str:
        # Only reached when the field is sent; omitting it leaves it unchanged
        if value is None:
            raise ValueError("Field cannot be null")
        return value


class OfficeResponse(OfficeBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    is_deleted: bool
    created_at: datetime
    updated_at: datetime


# Lune machines

class MachineCreate(BaseModel):
    serial_number: str = Field(..., min_length=1, max_length=100)
    office_id: int = Field(
        ..., ge=1, validation_alias=AliasChoices("office_id", "officeId", "dental_office_id")
    )
    purchase_date: date

    @field_validator("serial_number")
    @classmethod
    def strip_serial(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Serial number is required")
        return value


class MachineResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    serial_number: str
    office_id: int
    office_name: Optional[str] = None
    purchase_date: Optional[date] = None
    is_deleted: bool
    created_at: datetime
    updated_at: datetime


# Button usage

class UsageCreate(BaseModel):
    """Request schema for recording one button press."""
    machine_id: int = Field(..., ge=1, validation_alias=AliasChoices("machine_id", "machineId"))
    button_number: int = Field(..., ge=1, validation_alias=AliasChoices("button_number", "buttonNumber"))
    start_time: datetime = Field(..., validation_alias=AliasChoices("start_time", "startTime"))
    end_time: datetime = Field(..., validation_alias=AliasChoices("end_time", "endTime"))
    usage_date: Optional[date] = Field(None, validation_alias=AliasChoices("usage_date", "usageDate"))

    @field_validator("start_time", "end_time")
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @model_validator(mode="after")
    def check_interval(self) -> "UsageCreate":
        if self.end_time < self.start_time:
            raise ValueError("end_time must not be earlier than start_time")
        return self


class UsageRecordResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    machine_id: int
    button_number: int
    start_time: datetime
    end_time: datetime
    duration_seconds: int
    usage_date: date


class ButtonSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    button_number: int
    press_count: int
    total_duration_seconds: int
    avg_duration_seconds: float
    min_duration_seconds: int
    max_duration_seconds: int


class MonthlyUsageResponse(BaseModel):
    machine: MachineResponse
    year: int
    month: int
    summary: List[ButtonSummary]
    details: List[UsageRecordResponse]


class UsageMonthResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    year: int
    month: int
    usage_count: int


# Invoices

class GenerateInvoiceRequest(BaseModel):
    """Request schema for invoice generation."""
    office_id: int = Field(
        ..., ge=1, validation_alias=AliasChoices("office_id", "officeId", "dental_office_id")
    )
    month: int = Field(..., ge=1, le=12)
    year: int = Field(..., le=date.max.year)


class GeneratedInvoiceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    invoice_number: str
    total_amount: float


class InvoiceStatusUpdate(BaseModel):
    status: Literal["paid", "unpaid"]


class InvoiceSummary(BaseModel):
    """Invoice list item."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    office_id: int
    office_name: Optional[str] = None
    invoice_number: str
    month: int
    year: int
    total_amount: float
    status: str
    generated_at: datetime
    paid_at: Optional[datetime] = None

    @field_validator("status", mode="before")
    @classmethod
    def status_value(cls, value: Any) -> str:
        return getattr(value, "value", value)


class InvoiceDetail(InvoiceSummary):
    """Full invoice including the nested per-machine breakdown."""
    invoice_data: dict


# Health and errors

class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str
    timestamp: datetime


class ReadinessResponse(BaseModel):
    """Readiness check response."""
    status: str
    service: str
    version: str
    timestamp: datetime
    checks: dict


class ErrorResponse(BaseModel):
    """Error response schema."""
    error: str
    message: str
    request_id: Optional[str] = None
    timestamp: datetime


class ValidationErrorResponse(BaseModel):
    """Validation error response schema."""
    error: str
    message: str
    details: List[dict]
    request_id: Optional[str] = None
    timestamp: datetime
