# barberbook/routers/shops_routes.py

from datetime import date
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlmodel import Session

from barberbook import repository
from barberbook.availability import compute_available_slots, effective_slot_minutes
from barberbook.core import weekday_of
from barberbook.db import get_session
from barberbook.deps import get_active_shop, require_shop_barber
from barberbook.exceptions import ValidationError
from barberbook.models import Appointment, Barbershop
from barberbook.reservations import create_reservation
from barberbook.schemas import (
    AppointmentPublic,
    AvailabilityResponse,
    ReservationCreate,
    WorkingHourCreate,
    WorkingHourPublic,
    WorkingHourWindow,
)

router = APIRouter(
    prefix="/shops",
    tags=["shops"],
)


@router.get("/{slug}/availability", response_model=AvailabilityResponse)
def shop_availability(
    barber_id: int,
    service_id: int,
    date: date,
    shop: Barbershop = Depends(get_active_shop),
    session: Session = Depends(get_session),
):
    # 1) Barber and service must belong to this shop
    require_shop_barber(session, shop, barber_id)
    service = repository.get_service(session, service_id)
    if service is None or service.barbershop_id != shop.id:
        raise ValidationError("Unknown service for this barbershop", details={"service_id": service_id})

    # 2) Windows for that weekday + live appointments for that day
    windows = repository.list_working_hours(session, shop.id, weekday_of(date), barber_id)
    busy = repository.list_busy_intervals(session, barber_id, date)

    # 3) Slots
    available = compute_available_slots(date, barber_id, service.duration_minutes, windows, busy)

    return {
        "barber_id": barber_id,
        "service_id": service_id,
        "date": date,
        "slot_minutes": effective_slot_minutes(service.duration_minutes),
        "available_starts": available,
    }


@router.post("/{slug}/appointments", response_model=AppointmentPublic, status_code=201)
def book_appointment(
    booking: ReservationCreate,
    shop: Barbershop = Depends(get_active_shop),
    session: Session = Depends(get_session),
):
    require_shop_barber(session, shop, booking.barber_id)

    appt_id = create_reservation(
        session,
        barber_id=booking.barber_id,
        service_id=booking.service_id,
        on_date=booking.date,
        chosen_time=booking.start_time,
        client_name=booking.client_name,
        client_phone=booking.client_phone,
    )

    return repository.appointment_to_public(session.get(Appointment, appt_id))


@router.get("/{slug}/working-hours", response_model=List[WorkingHourPublic])
def list_shop_working_hours(
    shop: Barbershop = Depends(get_active_shop),
    session: Session = Depends(get_session),
):
    rows = repository.list_working_hour_rows(session, shop.id)
    return [repository.working_hour_to_public(row) for row in rows]


@router.post("/{slug}/working-hours", response_model=WorkingHourPublic, status_code=201)
def add_shop_working_hours(
    payload: WorkingHourCreate,
    shop: Barbershop = Depends(get_active_shop),
    session: Session = Depends(get_session),
):
    try:
        window = WorkingHourWindow(barbershop_id=shop.id, **payload.model_dump())
    except ValueError as exc:
        # pydantic's ValidationError is a ValueError
        raise HTTPException(status_code=422, detail=str(exc)) from None

    row = repository.add_working_hour(session, window)
    return repository.working_hour_to_public(row)


@router.delete("/{slug}/working-hours/{working_hour_id}", status_code=204)
def delete_shop_working_hours(
    working_hour_id: int,
    shop: Barbershop = Depends(get_active_shop),
    session: Session = Depends(get_session),
):
    repository.delete_working_hour(session, shop.id, working_hour_id)
    return Response(status_code=204)
