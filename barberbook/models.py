# barberbook/models.py

from typing import Optional
from datetime import datetime, timezone, date as Date, time

from sqlalchemy import DDL, Index, event, text
from sqlmodel import SQLModel, Field

from barberbook.schemas import AppointmentStatus


class Barbershop(SQLModel, table=True):
    __tablename__ = "barbershops"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    slug: str = Field(index=True, unique=True)
    is_active: bool = True


class Barber(SQLModel, table=True):
    __tablename__ = "barbers"

    id: Optional[int] = Field(default=None, primary_key=True)
    barbershop_id: int = Field(foreign_key="barbershops.id", index=True)
    name: str
    active: bool = True


class Service(SQLModel, table=True):
    __tablename__ = "services"

    id: Optional[int] = Field(default=None, primary_key=True)
    barbershop_id: int = Field(foreign_key="barbershops.id", index=True)
    name: str
    duration_minutes: Optional[int] = None  # unset or <= 0 means the default slot length
    price: Optional[float] = None


class WorkingHour(SQLModel, table=True):
    __tablename__ = "working_hours"

    id: Optional[int] = Field(default=None, primary_key=True)
    barbershop_id: int = Field(foreign_key="barbershops.id", index=True)
    barber_id: Optional[int] = Field(default=None, foreign_key="barbers.id", index=True)  # None: whole shop
    weekday: int = Field(index=True)  # 0=Sun ... 6=Sat
    start_time: time
    end_time: time


class Appointment(SQLModel, table=True):
    __tablename__ = "appointments"
    __table_args__ = (
        # one live reservation per barber, day and start; canceled rows free the slot
        Index(
            "uq_appointments_barber_slot",
            "barber_id",
            "date",
            "start_time",
            unique=True,
            sqlite_where=text("status != 'canceled'"),
            postgresql_where=text("status != 'canceled'"),
        ),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    barbershop_id: int = Field(foreign_key="barbershops.id", index=True)
    barber_id: int = Field(foreign_key="barbers.id", index=True)
    service_id: int = Field(foreign_key="services.id")

    date: Date = Field(index=True)
    start_time: time
    end_time: time
    status: AppointmentStatus = AppointmentStatus.pending

    client_name: str
    client_phone: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


# Overlap guard at the store: start-time uniqueness alone does not stop
# 09:00-10:00 and 09:30-10:00 from coexisting.
_SQLITE_NO_OVERLAP = DDL(
    """
    CREATE TRIGGER IF NOT EXISTS appointments_no_overlap
    BEFORE INSERT ON appointments
    WHEN NEW.status != 'canceled' AND EXISTS (
        SELECT 1 FROM appointments a
        WHERE a.barber_id = NEW.barber_id
          AND a.date = NEW.date
          AND a.status != 'canceled'
          AND a.start_time < NEW.end_time
          AND NEW.start_time < a.end_time
    )
    BEGIN
        SELECT RAISE(ABORT, 'appointment overlaps an existing reservation');
    END
    """
)

# Same guard for moves; the row being moved never conflicts with itself.
_SQLITE_NO_OVERLAP_ON_MOVE = DDL(
    """
    CREATE TRIGGER IF NOT EXISTS appointments_no_overlap_on_move
    BEFORE UPDATE OF date, start_time, end_time ON appointments
    WHEN NEW.status != 'canceled' AND EXISTS (
        SELECT 1 FROM appointments a
        WHERE a.id != NEW.id
          AND a.barber_id = NEW.barber_id
          AND a.date = NEW.date
          AND a.status != 'canceled'
          AND a.start_time < NEW.end_time
          AND NEW.start_time < a.end_time
    )
    BEGIN
        SELECT RAISE(ABORT, 'appointment overlaps an existing reservation');
    END
    """
)

_POSTGRES_BTREE_GIST = DDL("CREATE EXTENSION IF NOT EXISTS btree_gist")

_POSTGRES_NO_OVERLAP = DDL(
    """
    ALTER TABLE appointments ADD CONSTRAINT ex_appointments_no_overlap
    EXCLUDE USING gist (
        barber_id WITH =,
        tsrange(date + start_time, date + end_time) WITH &&
    ) WHERE (status <> 'canceled')
    """
)

event.listen(Appointment.__table__, "after_create", _SQLITE_NO_OVERLAP.execute_if(dialect="sqlite"))
event.listen(Appointment.__table__, "after_create", _SQLITE_NO_OVERLAP_ON_MOVE.execute_if(dialect="sqlite"))
event.listen(Appointment.__table__, "before_create", _POSTGRES_BTREE_GIST.execute_if(dialect="postgresql"))
event.listen(Appointment.__table__, "after_create", _POSTGRES_NO_OVERLAP.execute_if(dialect="postgresql"))
