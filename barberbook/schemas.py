# barberbook/schemas.py

from datetime import date, datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from barberbook.core import format_hhmm, parse_hhmm


class AppointmentStatus(str, Enum):
    pending = "pending"
    confirmed = "confirmed"
    completed = "completed"
    canceled = "canceled"

    @classmethod
    def normalize(cls, raw) -> "AppointmentStatus":
        """Map legacy spellings onto the canonical vocabulary."""
        if isinstance(raw, cls):
            return raw
        value = str(raw).strip().lower()
        value = _STATUS_ALIASES.get(value, value)
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"Unknown appointment status: {raw!r}") from None

    @property
    def blocks_slot(self) -> bool:
        return self is not AppointmentStatus.canceled


_STATUS_ALIASES = {
    "scheduled": "pending",
    "booked": "pending",
    "done": "completed",
    "cancelled": "canceled",
}


def _normalize_hhmm(value) -> str:
    # ParseError is a ValueError, so pydantic reports it as a field error
    return format_hhmm(parse_hhmm(value))


class WorkingHourWindow(BaseModel):
    """A recurring weekly interval in which a barber can be booked.

    barber_id None means the window applies to every barber of the shop.
    """

    barbershop_id: int
    barber_id: Optional[int] = None
    weekday: int = Field(ge=0, le=6)  # 0=Sun, 1=Mon ... 6=Sat
    start_time: str
    end_time: str

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def _normalize_times(cls, value):
        return _normalize_hhmm(value)

    @model_validator(mode="after")
    def _check_order(self):
        if parse_hhmm(self.start_time) >= parse_hhmm(self.end_time):
            raise ValueError("start_time must be earlier than end_time")
        return self

    @property
    def start_minute(self) -> int:
        return parse_hhmm(self.start_time)

    @property
    def end_minute(self) -> int:
        return parse_hhmm(self.end_time)


class AppointmentInterval(BaseModel):
    """Minutes-since-midnight span an appointment holds on its date."""

    start_minute: int = Field(ge=0, lt=24 * 60)
    end_minute: int = Field(gt=0, le=24 * 60)
    status: AppointmentStatus = AppointmentStatus.pending

    @field_validator("status", mode="before")
    @classmethod
    def _normalize_status(cls, value):
        return AppointmentStatus.normalize(value)

    @model_validator(mode="after")
    def _check_order(self):
        if self.start_minute >= self.end_minute:
            raise ValueError("start_minute must be earlier than end_minute")
        return self

    @classmethod
    def from_times(cls, start_time, end_time, status=AppointmentStatus.pending) -> "AppointmentInterval":
        return cls(
            start_minute=parse_hhmm(start_time),
            end_minute=parse_hhmm(end_time),
            status=status,
        )


class ServiceInfo(BaseModel):
    id: int
    barbershop_id: int
    name: str
    duration_minutes: Optional[int] = None


class WorkingHourCreate(BaseModel):
    barber_id: Optional[int] = None
    weekday: int = Field(ge=0, le=6)
    start_time: str
    end_time: str


class WorkingHourPublic(BaseModel):
    id: int
    barbershop_id: int
    barber_id: Optional[int]
    weekday: int
    start_time: str
    end_time: str


class ReservationCreate(BaseModel):
    barber_id: int
    service_id: int
    date: str
    start_time: str
    client_name: str
    client_phone: str


class RescheduleRequest(BaseModel):
    date: str
    start_time: str


class AppointmentPublic(BaseModel):
    id: int
    barbershop_id: int
    barber_id: int
    service_id: int
    date: date
    start_time: str
    end_time: str
    status: AppointmentStatus
    client_name: str
    client_phone: str
    created_at: datetime


class AvailabilityResponse(BaseModel):
    barber_id: int
    service_id: int
    date: date
    slot_minutes: int
    available_starts: List[str]
