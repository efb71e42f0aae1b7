"""Shared test fixtures and helpers."""

from datetime import time
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

import barberbook.models  # noqa: F401  registers the tables
from barberbook.db import get_session
from barberbook.main import app
from barberbook.models import Barber, Barbershop, Service, WorkingHour
from barberbook.schemas import AppointmentInterval, WorkingHourWindow

MONDAY = "2030-01-07"
TUESDAY = "2030-01-08"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def file_engine(tmp_path):
    """A file-backed store, so separate sessions get separate connections."""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'barber.db'}",
        connect_args={"check_same_thread": False, "timeout": 5},
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


def seed_shop(engine) -> SimpleNamespace:
    """One shop, two barbers, three services and Monday hours.

    Barber "ana" works Monday 09:00-12:00; the whole shop works Monday
    14:00-16:00.
    """
    with Session(engine) as session:
        shop = Barbershop(name="Navalha de Ouro", slug="navalha")
        other_shop = Barbershop(name="Outra", slug="outra")
        session.add(shop)
        session.add(other_shop)
        session.commit()

        ana = Barber(barbershop_id=shop.id, name="Ana")
        bruno = Barber(barbershop_id=shop.id, name="Bruno")
        stranger = Barber(barbershop_id=other_shop.id, name="Carla")
        haircut = Service(barbershop_id=shop.id, name="Corte", duration_minutes=60, price=50.0)
        beard = Service(barbershop_id=shop.id, name="Barba", duration_minutes=45, price=30.0)
        no_duration = Service(barbershop_id=shop.id, name="Avaliação", duration_minutes=None)
        foreign = Service(barbershop_id=other_shop.id, name="Corte", duration_minutes=30)
        session.add_all([ana, bruno, stranger, haircut, beard, no_duration, foreign])
        session.commit()

        session.add_all([
            WorkingHour(barbershop_id=shop.id, barber_id=ana.id, weekday=1,
                        start_time=time(9, 0), end_time=time(12, 0)),
            WorkingHour(barbershop_id=shop.id, barber_id=None, weekday=1,
                        start_time=time(14, 0), end_time=time(16, 0)),
        ])
        session.commit()

        return SimpleNamespace(
            shop_id=shop.id,
            other_shop_id=other_shop.id,
            ana=ana.id,
            bruno=bruno.id,
            stranger=stranger.id,
            haircut=haircut.id,
            beard=beard.id,
            no_duration=no_duration.id,
            foreign=foreign.id,
        )


@pytest.fixture
def seeded(engine):
    return seed_shop(engine)


@pytest.fixture
def session(engine, seeded):
    with Session(engine) as session:
        yield session


@pytest.fixture
def client(engine, seeded):
    def _get_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = _get_session
    yield TestClient(app)
    app.dependency_overrides.clear()


def window(weekday: int, start: str, end: str, barber_id=None, barbershop_id: int = 1) -> WorkingHourWindow:
    return WorkingHourWindow(
        barbershop_id=barbershop_id,
        barber_id=barber_id,
        weekday=weekday,
        start_time=start,
        end_time=end,
    )


def busy(start: str, end: str, status: str = "pending") -> AppointmentInterval:
    return AppointmentInterval.from_times(start, end, status)
