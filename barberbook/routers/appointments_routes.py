# barberbook/routers/appointments_routes.py

from fastapi import APIRouter, Depends
from sqlmodel import Session

from barberbook import repository
from barberbook.db import get_session
from barberbook.reservations import (
    cancel_appointment,
    complete_appointment,
    confirm_appointment,
    reschedule_appointment,
)
from barberbook.schemas import AppointmentPublic, RescheduleRequest

router = APIRouter(
    prefix="/appointments",
    tags=["appointments"],
)


@router.patch("/{appt_id}/confirm", response_model=AppointmentPublic)
def confirm(appt_id: int, session: Session = Depends(get_session)):
    return repository.appointment_to_public(confirm_appointment(session, appt_id))


@router.patch("/{appt_id}/complete", response_model=AppointmentPublic)
def complete(appt_id: int, session: Session = Depends(get_session)):
    return repository.appointment_to_public(complete_appointment(session, appt_id))


@router.patch("/{appt_id}/cancel", response_model=AppointmentPublic)
def cancel(appt_id: int, session: Session = Depends(get_session)):
    return repository.appointment_to_public(cancel_appointment(session, appt_id))


@router.patch("/{appt_id}/reschedule", response_model=AppointmentPublic)
def reschedule(appt_id: int, payload: RescheduleRequest, session: Session = Depends(get_session)):
    moved = reschedule_appointment(session, appt_id, on_date=payload.date, chosen_time=payload.start_time)
    return repository.appointment_to_public(moved)
