from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from randevu.schemas.working_hours_schema import TIME_PATTERN


class AppointmentStatus(str, Enum):
    pending = "pending"
    confirmed = "confirmed"
    rejected = "rejected"
    cancelled = "cancelled"
    completed = "completed"


TERMINAL_STATUSES = frozenset(
    {AppointmentStatus.rejected, AppointmentStatus.cancelled, AppointmentStatus.completed}
)
# Statuses that hold a slot
ACTIVE_STATUSES = frozenset({AppointmentStatus.pending, AppointmentStatus.confirmed})


def validate_date_string(v: str) -> str:
    try:
        datetime.strptime(v, "%Y-%m-%d")
    except ValueError:
        raise ValueError('date must be in YYYY-MM-DD format')
    return v


def validate_time_string(v: str) -> str:
    if not TIME_PATTERN.match(v):
        raise ValueError('time must be in HH:mm format')
    return v


class ServiceSnapshot(BaseModel):
    """Service details copied onto the appointment at booking time."""
    name: str
    price: Decimal
    duration_minutes: int


class AppointmentCreate(BaseModel):
    barber_id: str = Field(..., description="Provider being booked")
    employee_id: Optional[str] = Field(None, description="Specific staff member, if any")
    service_id: str = Field(..., description="Service of the barber being booked")
    date: str = Field(..., examples=["2025-03-01"])
    time: str = Field(..., examples=["14:00"])
    notes: Optional[str] = Field(None, max_length=500)

    @field_validator('date')
    @classmethod
    def date_must_be_iso(cls, v):
        return validate_date_string(v)

    @field_validator('time')
    @classmethod
    def time_must_be_hh_mm(cls, v):
        return validate_time_string(v)


class AppointmentStatusUpdate(BaseModel):
    status: AppointmentStatus


class AppointmentResponse(BaseModel):
    id: str
    customer_id: str
    barber_id: str
    employee_id: Optional[str] = None
    service_name: str
    service_price: Decimal
    service_duration: int
    date: str
    time: str
    status: AppointmentStatus
    notes: Optional[str] = None
    is_reviewed: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class AvailabilityResponse(BaseModel):
    barber_id: str
    employee_id: Optional[str] = None
    date: str
    time: str
    available: bool


class AvailableSlotsResponse(BaseModel):
    barber_id: str
    employee_id: Optional[str] = None
    date: str
    duration_minutes: int
    slots: List[str]
