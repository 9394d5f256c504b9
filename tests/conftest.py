"""Shared fixtures: in-memory database, API client, auth headers and seed records."""

import os

# Configure before the application modules read the environment
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
from fastapi.testclient import TestClient

from hotel_backoffice.auth import create_access_token
from hotel_backoffice.database import Base, SessionLocal, engine
from hotel_backoffice.main import app
from hotel_backoffice.models import Guest
from hotel_backoffice.models_spa import SpaRoom, SpaService, Therapist


@pytest.fixture(autouse=True)
def fresh_database():
    """Every test starts with empty tables."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def auth_token():
    return create_access_token({"sub": "staff-1", "email": "frontdesk@lushhotel.test", "role": "admin"})


@pytest.fixture
def auth_headers(auth_token):
    """Valid auth headers."""
    return {"Authorization": f"Bearer {auth_token}"}


@pytest.fixture
def guest(db):
    record = Guest(
        first_name="Amara",
        last_name="Perera",
        email="amara@example.com",
        phone="+94 77 123 4567",
        room_number="204",
    )
    db.add(record)
    db.commit()
    db.refresh(record)
    return record


@pytest.fixture
def spa_service(db):
    record = SpaService(
        service_name="Deep Tissue Massage",
        category="massage",
        description="Full body deep tissue massage",
        duration=60,
        base_price=100.0,
        benefits=["Relieves tension"],
    )
    db.add(record)
    db.commit()
    db.refresh(record)
    return record


@pytest.fixture
def therapist(db):
    record = Therapist(
        name="Nadia Silva",
        email="nadia@lushhotel.test",
        phone="+94 71 000 0000",
        specializations=["massage"],
        hourly_rate=50.0,
    )
    db.add(record)
    db.commit()
    db.refresh(record)
    return record


@pytest.fixture
def spa_room(db):
    record = SpaRoom(room_number="S-101", room_type="single", capacity=1, hourly_rate=30.0)
    db.add(record)
    db.commit()
    db.refresh(record)
    return record


@pytest.fixture
def appointment_payload(guest, spa_service, therapist):
    """Scenario baseline: service 100, therapist 50, no room, no discount."""
    return {
        "guestId": guest.id,
        "service": spa_service.id,
        "therapist": therapist.id,
        "appointmentDate": "2026-03-14T00:00:00",
        "startTime": "10:00",
        "endTime": "11:00",
        "duration": 60,
        "servicePrice": 100,
        "therapistPrice": 50,
        "roomPrice": 0,
        "discount": 0,
        "totalPrice": 150,
    }


@pytest.fixture
def create_appointment(client, auth_headers, appointment_payload):
    """Factory booking an appointment through the API."""

    def _create(**overrides):
        response = client.post(
            "/spa/appointments", json={**appointment_payload, **overrides}, headers=auth_headers
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _create
