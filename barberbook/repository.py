# barberbook/repository.py
"""
Data access for the booking core.

Rows come out of here as typed records (WorkingHourWindow,
AppointmentInterval, ServiceInfo) so the availability engine never sees a
query shape. Status spellings are normalized here and nowhere else.
"""

import logging
from datetime import date
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from barberbook.core import format_hhmm, overlaps, parse_hhmm, to_time
from barberbook.exceptions import NotFound, StoreError, ValidationError
from barberbook.models import Appointment, Barber, Barbershop, Service, WorkingHour
from barberbook.schemas import (
    AppointmentInterval,
    AppointmentStatus,
    ServiceInfo,
    WorkingHourWindow,
)

logger = logging.getLogger(__name__)


def get_barbershop_by_slug(session: Session, slug: str) -> Optional[Barbershop]:
    return session.exec(
        select(Barbershop).where(Barbershop.slug == slug)
    ).first()


def get_barber(session: Session, barber_id: int) -> Optional[Barber]:
    return session.get(Barber, barber_id)


def get_service(session: Session, service_id: int) -> Optional[ServiceInfo]:
    row = session.get(Service, service_id)
    if row is None:
        return None
    return ServiceInfo(
        id=row.id,
        barbershop_id=row.barbershop_id,
        name=row.name,
        duration_minutes=row.duration_minutes,
    )


def _to_window(row: WorkingHour) -> WorkingHourWindow:
    return WorkingHourWindow(
        barbershop_id=row.barbershop_id,
        barber_id=row.barber_id,
        weekday=row.weekday,
        start_time=row.start_time.strftime("%H:%M"),
        end_time=row.end_time.strftime("%H:%M"),
    )


def list_working_hours(
    session: Session,
    barbershop_id: int,
    weekday: Optional[int] = None,
    barber_id: Optional[int] = None,
) -> List[WorkingHourWindow]:
    """Windows of a shop, optionally for one weekday and one barber.

    With a barber_id, shop-wide windows (barber_id NULL) are included.
    """
    stmt = select(WorkingHour).where(WorkingHour.barbershop_id == barbershop_id)
    if weekday is not None:
        stmt = stmt.where(WorkingHour.weekday == weekday)
    if barber_id is not None:
        stmt = stmt.where(
            or_(WorkingHour.barber_id.is_(None), WorkingHour.barber_id == barber_id)
        )
    stmt = stmt.order_by(WorkingHour.weekday, WorkingHour.start_time)

    return [_to_window(row) for row in session.exec(stmt).all()]


def list_working_hour_rows(session: Session, barbershop_id: int) -> List[WorkingHour]:
    stmt = (
        select(WorkingHour)
        .where(WorkingHour.barbershop_id == barbershop_id)
        .order_by(WorkingHour.weekday, WorkingHour.start_time)
    )
    return list(session.exec(stmt).all())


def add_working_hour(session: Session, window: WorkingHourWindow) -> WorkingHour:
    """Persist a window after checking it does not overlap a sibling.

    Siblings are windows on the same weekday for the same barber, plus the
    shop-wide ones (or every window of that weekday when the new one is
    shop-wide).
    """
    if window.barber_id is not None:
        barber = session.get(Barber, window.barber_id)
        if barber is None or barber.barbershop_id != window.barbershop_id:
            raise ValidationError(
                "Barber does not belong to this barbershop",
                details={"barber_id": window.barber_id},
            )

    stmt = (
        select(WorkingHour)
        .where(WorkingHour.barbershop_id == window.barbershop_id)
        .where(WorkingHour.weekday == window.weekday)
    )
    if window.barber_id is not None:
        stmt = stmt.where(
            or_(WorkingHour.barber_id.is_(None), WorkingHour.barber_id == window.barber_id)
        )

    for existing in session.exec(stmt).all():
        if overlaps(
            window.start_minute,
            window.end_minute,
            parse_hhmm(existing.start_time),
            parse_hhmm(existing.end_time),
        ):
            raise ValidationError(
                "Working hours overlap an existing window",
                details={"weekday": window.weekday, "existing_id": existing.id},
            )

    row = WorkingHour(
        barbershop_id=window.barbershop_id,
        barber_id=window.barber_id,
        weekday=window.weekday,
        start_time=to_time(window.start_minute),
        end_time=to_time(window.end_minute),
    )
    session.add(row)
    try:
        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        logger.error("Working hours write failed for shop=%s: %s", window.barbershop_id, exc)
        raise StoreError(str(exc)) from exc
    session.refresh(row)
    logger.info(
        "Working hours added: shop=%s barber=%s weekday=%s %s-%s",
        row.barbershop_id, row.barber_id, row.weekday, window.start_time, window.end_time,
    )
    return row


def delete_working_hour(session: Session, barbershop_id: int, working_hour_id: int) -> None:
    row = session.get(WorkingHour, working_hour_id)
    if row is None or row.barbershop_id != barbershop_id:
        raise NotFound("Working hours not found", details={"working_hour_id": working_hour_id})

    session.delete(row)
    try:
        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        logger.error("Working hours delete failed for id=%s: %s", working_hour_id, exc)
        raise StoreError(str(exc)) from exc
    logger.info("Working hours %s removed from shop=%s", working_hour_id, barbershop_id)


def list_busy_intervals(
    session: Session,
    barber_id: int,
    on_date: date,
    exclude_appointment_id: Optional[int] = None,
) -> List[AppointmentInterval]:
    """Intervals held by non-canceled appointments of a barber on a day.

    ``exclude_appointment_id`` leaves one appointment out, so a booking
    being moved does not block its own new time.
    """
    stmt = (
        select(Appointment)
        .where(Appointment.barber_id == barber_id)
        .where(Appointment.date == on_date)
        .where(Appointment.status != AppointmentStatus.canceled)
        .order_by(Appointment.start_time)
    )
    if exclude_appointment_id is not None:
        stmt = stmt.where(Appointment.id != exclude_appointment_id)
    return [
        AppointmentInterval.from_times(a.start_time, a.end_time, a.status)
        for a in session.exec(stmt).all()
    ]


def list_appointments(
    session: Session,
    barber_id: int,
    on_date: Optional[date] = None,
    status: Optional[str] = None,
) -> List[Appointment]:
    stmt = select(Appointment).where(Appointment.barber_id == barber_id)

    if on_date is not None:
        stmt = stmt.where(Appointment.date == on_date)

    if status is not None:
        try:
            canonical = AppointmentStatus.normalize(status)
        except ValueError as exc:
            raise ValidationError(str(exc), details={"status": status}) from None
        stmt = stmt.where(Appointment.status == canonical)

    stmt = stmt.order_by(Appointment.date, Appointment.start_time)
    return list(session.exec(stmt).all())


def appointment_to_public(appt: Appointment) -> dict:
    return {
        "id": appt.id,
        "barbershop_id": appt.barbershop_id,
        "barber_id": appt.barber_id,
        "service_id": appt.service_id,
        "date": appt.date,
        "start_time": format_hhmm(parse_hhmm(appt.start_time)),
        "end_time": format_hhmm(parse_hhmm(appt.end_time)),
        "status": appt.status,
        "client_name": appt.client_name,
        "client_phone": appt.client_phone,
        "created_at": appt.created_at,
    }


def working_hour_to_public(row: WorkingHour) -> dict:
    return {
        "id": row.id,
        "barbershop_id": row.barbershop_id,
        "barber_id": row.barber_id,
        "weekday": row.weekday,
        "start_time": row.start_time.strftime("%H:%M"),
        "end_time": row.end_time.strftime("%H:%M"),
    }
