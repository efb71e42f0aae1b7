# barberbook/deps.py

from fastapi import Depends, HTTPException
from sqlmodel import Session

from barberbook import repository
from barberbook.db import get_session
from barberbook.models import Barber, Barbershop


def get_active_shop(slug: str, session: Session = Depends(get_session)) -> Barbershop:
    shop = repository.get_barbershop_by_slug(session, slug)
    if shop is None or not shop.is_active:
        raise HTTPException(status_code=404, detail="Barbershop not found")
    return shop


def require_shop_barber(session: Session, shop: Barbershop, barber_id: int) -> Barber:
    barber = repository.get_barber(session, barber_id)
    if barber is None or barber.barbershop_id != shop.id or not barber.active:
        raise HTTPException(status_code=404, detail="Barber not found")
    return barber
