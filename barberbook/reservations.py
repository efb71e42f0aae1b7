# barberbook/reservations.py
"""
Reservation writer and appointment status transitions.

Two separate guarantees protect a slot:

* an optimistic re-check against freshly fetched appointments, which
  turns the common case into a clean ``SlotTaken`` before any write;
* the store itself (partial unique index plus overlap guard, see
  barberbook.models), which is the one that actually holds when two
  callers pass the re-check at the same time.
"""

import logging
from datetime import date
from typing import List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session

from barberbook import repository
from barberbook.availability import candidate_starts, effective_slot_minutes, is_slot_free, windows_for_day
from barberbook.config import settings
from barberbook.core import MINUTES_PER_DAY, ParseError, format_hhmm, parse_date, parse_hhmm, to_time, weekday_of
from barberbook.exceptions import InvalidTransition, NotFound, SlotTaken, StoreError, ValidationError
from barberbook.models import Appointment
from barberbook.schemas import AppointmentInterval, AppointmentStatus
from barberbook.utils import clean_client_phone, phone_is_digits

logger = logging.getLogger(__name__)


def validate_client(client_name: Optional[str], client_phone: Optional[str]) -> tuple:
    """Return the cleaned (name, phone) or raise ValidationError."""
    rules = settings.booking

    name = (client_name or "").strip()
    if not name:
        raise ValidationError("Client name is required", details={"field": "client_name"})
    if len(name) > rules.client_name_max_length:
        raise ValidationError(
            f"Client name must be at most {rules.client_name_max_length} characters",
            details={"field": "client_name"},
        )

    phone = clean_client_phone(client_phone or "")
    digits = len(phone.lstrip("+"))
    if not phone_is_digits(phone) or not rules.phone_min_digits <= digits <= rules.phone_max_digits:
        raise ValidationError(
            f"Client phone must have between {rules.phone_min_digits} "
            f"and {rules.phone_max_digits} digits",
            details={"field": "client_phone", "digits": digits},
        )
    return name, phone


def _parse_request(on_date, chosen_time) -> tuple:
    try:
        return parse_date(on_date), parse_hhmm(chosen_time)
    except ParseError as exc:
        raise ValidationError(str(exc), details={"date": str(on_date), "start_time": str(chosen_time)}) from None


def create_reservation(
    session: Session,
    barber_id: int,
    service_id: int,
    on_date,
    chosen_time,
    client_name: str,
    client_phone: str,
    busy: Optional[List[AppointmentInterval]] = None,
) -> int:
    """Book ``chosen_time`` for a client and return the new appointment id.

    ``busy`` is the caller's in-memory view of the day; on success the new
    interval is appended to it so the slot is not offered again.

    Raises ValidationError, SlotTaken or StoreError. Nothing is written
    unless the call returns.
    """
    name, phone = validate_client(client_name, client_phone)
    day, start = _parse_request(on_date, chosen_time)

    try:
        barber = repository.get_barber(session, barber_id)
        service = repository.get_service(session, service_id)
    except SQLAlchemyError as exc:
        logger.error("Store read failed for barber=%s service=%s: %s", barber_id, service_id, exc)
        raise StoreError(str(exc)) from exc

    if barber is None or not barber.active:
        raise ValidationError("Unknown or inactive barber", details={"barber_id": barber_id})
    if service is None or service.barbershop_id != barber.barbershop_id:
        raise ValidationError("Unknown service for this barbershop", details={"service_id": service_id})

    slot_minutes = effective_slot_minutes(service.duration_minutes)
    end = start + slot_minutes
    if end >= MINUTES_PER_DAY:
        raise ValidationError("Appointment must end before midnight", details={"start_time": str(chosen_time)})

    _recheck_slot(session, barber.barbershop_id, barber_id, day, start, slot_minutes)

    appt = Appointment(
        barbershop_id=barber.barbershop_id,
        barber_id=barber_id,
        service_id=service_id,
        date=day,
        start_time=to_time(start),
        end_time=to_time(end),
        status=AppointmentStatus.pending,
        client_name=name,
        client_phone=phone,
    )

    session.add(appt)
    try:
        session.commit()
    except IntegrityError as exc:
        session.rollback()
        logger.warning(
            "Store rejected overlapping booking barber=%s date=%s time=%s",
            barber_id, day, format_hhmm(start),
        )
        raise SlotTaken(
            "Slot was booked by someone else; pick another time",
            details={"barber_id": barber_id, "date": day.isoformat(), "start_time": format_hhmm(start)},
        ) from exc
    except SQLAlchemyError as exc:
        session.rollback()
        logger.error("Store write failed for barber=%s date=%s: %s", barber_id, day, exc)
        raise StoreError(str(exc)) from exc

    session.refresh(appt)

    if busy is not None:
        busy.append(AppointmentInterval(start_minute=start, end_minute=end))

    logger.info(
        "Appointment %s created: barber=%s date=%s %s-%s",
        appt.id, barber_id, day, format_hhmm(start), format_hhmm(end),
    )
    return appt.id


def _recheck_slot(
    session: Session,
    barbershop_id: int,
    barber_id: int,
    day: date,
    start: int,
    slot_minutes: int,
    exclude_appointment_id: Optional[int] = None,
) -> None:
    try:
        windows = repository.list_working_hours(session, barbershop_id, weekday_of(day), barber_id)
        intervals = repository.list_busy_intervals(session, barber_id, day, exclude_appointment_id)
    except SQLAlchemyError as exc:
        logger.error("Store read failed during re-check for barber=%s: %s", barber_id, exc)
        raise StoreError(str(exc)) from exc

    details = {"barber_id": barber_id, "date": day.isoformat(), "start_time": format_hhmm(start)}

    if not is_slot_free(start, slot_minutes, intervals):
        logger.warning("Re-check found slot taken: %s", details)
        raise SlotTaken("Slot is no longer available; pick another time", details=details)

    todays = windows_for_day(windows, day, barber_id)
    if start not in candidate_starts(todays, slot_minutes):
        raise ValidationError("Not a bookable slot for this barber and service", details=details)


_TRANSITIONS = {
    AppointmentStatus.confirmed: {AppointmentStatus.pending},
    AppointmentStatus.completed: {AppointmentStatus.confirmed},
    AppointmentStatus.canceled: {AppointmentStatus.pending, AppointmentStatus.confirmed},
}

_MOVABLE = {AppointmentStatus.pending, AppointmentStatus.confirmed}


def transition_appointment(session: Session, appointment_id: int, new_status) -> Appointment:
    target_status = AppointmentStatus.normalize(new_status)
    allowed_from = _TRANSITIONS.get(target_status)
    if allowed_from is None:
        raise InvalidTransition(f"Cannot move an appointment to {target_status.value}")

    try:
        target = session.get(Appointment, appointment_id)
    except SQLAlchemyError as exc:
        raise StoreError(str(exc)) from exc
    if target is None:
        raise NotFound("Appointment not found", details={"appointment_id": appointment_id})

    if target.status not in allowed_from:
        raise InvalidTransition(
            f"Appointment is {target.status.value}; cannot become {target_status.value}",
            details={"appointment_id": appointment_id, "status": target.status.value},
        )

    previous = target.status
    target.status = target_status
    session.add(target)
    try:
        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        logger.error("Status update failed for appointment %s: %s", appointment_id, exc)
        raise StoreError(str(exc)) from exc
    session.refresh(target)

    logger.info("Appointment %s: %s -> %s", appointment_id, previous.value, target_status.value)
    return target


def confirm_appointment(session: Session, appointment_id: int) -> Appointment:
    return transition_appointment(session, appointment_id, AppointmentStatus.confirmed)


def complete_appointment(session: Session, appointment_id: int) -> Appointment:
    return transition_appointment(session, appointment_id, AppointmentStatus.completed)


def cancel_appointment(session: Session, appointment_id: int) -> Appointment:
    return transition_appointment(session, appointment_id, AppointmentStatus.canceled)


def reschedule_appointment(session: Session, appointment_id: int, on_date, chosen_time) -> Appointment:
    """Move a live appointment to another bookable slot of the same barber.

    The appointment's own interval is ignored by the re-check, so moving it
    onto an overlapping time of itself is allowed. The moved appointment
    goes back to pending until the barber confirms the new time.

    Raises NotFound, InvalidTransition, ValidationError, SlotTaken or
    StoreError.
    """
    day, start = _parse_request(on_date, chosen_time)

    try:
        target = session.get(Appointment, appointment_id)
        service = repository.get_service(session, target.service_id) if target is not None else None
    except SQLAlchemyError as exc:
        raise StoreError(str(exc)) from exc
    if target is None:
        raise NotFound("Appointment not found", details={"appointment_id": appointment_id})

    if target.status not in _MOVABLE:
        raise InvalidTransition(
            f"Appointment is {target.status.value}; only pending or confirmed ones can be moved",
            details={"appointment_id": appointment_id, "status": target.status.value},
        )

    slot_minutes = effective_slot_minutes(service.duration_minutes if service is not None else None)
    end = start + slot_minutes
    if end >= MINUTES_PER_DAY:
        raise ValidationError("Appointment must end before midnight", details={"start_time": str(chosen_time)})

    _recheck_slot(
        session, target.barbershop_id, target.barber_id, day, start, slot_minutes,
        exclude_appointment_id=appointment_id,
    )

    previous = (target.date, format_hhmm(parse_hhmm(target.start_time)))
    target.date = day
    target.start_time = to_time(start)
    target.end_time = to_time(end)
    target.status = AppointmentStatus.pending
    session.add(target)
    try:
        session.commit()
    except IntegrityError as exc:
        session.rollback()
        logger.warning(
            "Store rejected move of appointment %s to %s %s", appointment_id, day, format_hhmm(start),
        )
        raise SlotTaken(
            "Slot was booked by someone else; pick another time",
            details={"appointment_id": appointment_id, "date": day.isoformat(), "start_time": format_hhmm(start)},
        ) from exc
    except SQLAlchemyError as exc:
        session.rollback()
        logger.error("Move failed for appointment %s: %s", appointment_id, exc)
        raise StoreError(str(exc)) from exc
    session.refresh(target)

    logger.info(
        "Appointment %s moved: %s %s -> %s %s",
        appointment_id, previous[0], previous[1], day, format_hhmm(start),
    )
    return target
