from datetime import datetime, timezone

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlmodel import Session, select

from telecare.config import settings
from telecare.database import get_session
from telecare.db.models import AppointmentReminder, Notification
from telecare.exceptions import ReminderStoreError
from telecare.main import app
from telecare.middleware import PathExemptCORSMiddleware
from telecare.routers import reminders_router

from conftest import seed_appointment, seed_reminder

NOW = datetime(2025, 1, 1, 11, 2, tzinfo=timezone.utc)


@pytest.fixture
def client(engine):
    def override_session():
        with Session(engine) as s:
            yield s

    app.dependency_overrides[get_session] = override_session
    app.dependency_overrides[reminders_router.get_now] = lambda: NOW
    yield TestClient(app)
    app.dependency_overrides.clear()


PREFLIGHT_HEADERS = {
    "Origin": "https://app.example",
    "Access-Control-Request-Method": "POST",
    "Access-Control-Request-Headers": "authorization, content-type",
}


def test_preflight_returns_cors_headers(client):
    resp = client.options("/functions/send-appointment-reminders", headers=PREFLIGHT_HEADERS)
    assert resp.status_code == 200
    assert resp.content == b""
    assert resp.headers["access-control-allow-origin"] == "*"
    assert resp.headers["access-control-allow-headers"] == reminders_router.CORS_HEADERS["Access-Control-Allow-Headers"]


def test_preflight_ignores_restricted_allowed_origins():
    restricted = FastAPI()
    restricted.add_middleware(
        PathExemptCORSMiddleware,
        exempt_paths=[reminders_router.DISPATCH_PATH],
        allow_origins=["https://admin.example"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    restricted.include_router(reminders_router.router)

    @restricted.get("/other")
    def other():
        return {"ok": True}

    client = TestClient(restricted)
    resp = client.options(reminders_router.DISPATCH_PATH, headers=PREFLIGHT_HEADERS)
    assert resp.status_code == 200
    assert resp.content == b""
    assert resp.headers["access-control-allow-origin"] == "*"

    # other paths are still checked against ALLOWED_ORIGINS
    assert client.options("/other", headers=PREFLIGHT_HEADERS).status_code == 400


def test_dispatch_sends_due_reminders(client, session):
    appt = seed_appointment(session, datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc))
    due = seed_reminder(session, appt.id, "1_hour")
    later = seed_reminder(session, appt.id, "24_hours")

    resp = client.post("/functions/send-appointment-reminders", json={"ignored": True})

    assert resp.status_code == 200
    assert resp.json() == {"success": True, "processed": 2}
    assert resp.headers["access-control-allow-origin"] == "*"

    session.expire_all()
    statuses = {r.id: r.status for r in session.exec(select(AppointmentReminder)).all()}
    assert statuses == {due.id: "sent", later.id: "pending"}
    notes = session.exec(select(Notification)).all()
    assert len(notes) == 1
    assert notes[0].user_id == appt.patient_id
    assert notes[0].message == "Reminder: Your appointment with Jane Doe is in 1 hour!"


def test_dispatch_accepts_get(client):
    resp = client.get("/functions/send-appointment-reminders")
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "processed": 0}


def test_dispatch_fetch_failure_returns_500(client):
    class BrokenDispatcher:
        def run_dispatch_cycle(self, now):
            raise ReminderStoreError("connection refused")

    app.dependency_overrides[reminders_router.get_reminder_dispatcher] = lambda: BrokenDispatcher()
    resp = client.post("/functions/send-appointment-reminders")
    assert resp.status_code == 500
    assert resp.json() == {"error": "connection refused"}
    assert resp.headers["access-control-allow-origin"] == "*"


def test_schedule_reminders_endpoint(client, session):
    appt = seed_appointment(session, datetime(2025, 1, 2, 10, 0, tzinfo=timezone.utc))

    resp = client.post(f"/appointments/{appt.id}/reminders")
    assert resp.status_code == 201
    body = resp.json()
    assert body["appointment_id"] == appt.id
    assert sorted(r["reminder_type"] for r in body["created"]) == ["1_hour", "24_hours"]

    again = client.post(f"/appointments/{appt.id}/reminders")
    assert again.status_code == 201
    assert again.json()["created"] == []


def test_schedule_reminders_unknown_appointment(client):
    resp = client.post("/appointments/missing/reminders")
    assert resp.status_code == 404
    assert resp.json() == {"success": False, "data": None, "error": "Appointment not found"}


def test_schedule_reminders_requires_service_key(client, session, monkeypatch):
    monkeypatch.setattr(settings, "SERVICE_ROLE_KEY", "secret-key")
    appt = seed_appointment(session, datetime(2025, 1, 2, 10, 0, tzinfo=timezone.utc))

    assert client.post(f"/appointments/{appt.id}/reminders").status_code == 401
    bad = client.post(f"/appointments/{appt.id}/reminders", headers={"Authorization": "Bearer nope"})
    assert bad.status_code == 401
    ok = client.post(f"/appointments/{appt.id}/reminders", headers={"Authorization": "Bearer secret-key"})
    assert ok.status_code == 201


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"
