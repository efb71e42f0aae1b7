# barberbook/routers/barbers_routes.py

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session

from barberbook import repository
from barberbook.db import get_session
from barberbook.schemas import AppointmentPublic

router = APIRouter(
    prefix="/barbers",
    tags=["barbers"],
)


@router.get("/{barber_id}/appointments", response_model=List[AppointmentPublic])
def list_barber_appointments(
    barber_id: int,
    on_date: Optional[date] = None,
    status: Optional[str] = None,
    session: Session = Depends(get_session),
):
    if repository.get_barber(session, barber_id) is None:
        raise HTTPException(status_code=404, detail="Barber not found")

    # "all" or no status: every appointment; legacy spellings are accepted
    if status == "all":
        status = None

    appts = repository.list_appointments(session, barber_id, on_date=on_date, status=status)
    return [repository.appointment_to_public(a) for a in appts]
