from datetime import datetime
from typing import Optional

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

from telecare.db.models import Appointment, AppointmentReminder, Profile


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
def session(engine):
    with Session(engine) as s:
        yield s


def seed_appointment(session: Session, when: datetime, first_name: Optional[str] = "Jane", last_name: Optional[str] = "Doe", status: str = "scheduled") -> Appointment:
    doctor = Profile(first_name=first_name, last_name=last_name, role="doctor")
    patient = Profile(first_name="Pat", last_name="Ient", role="patient")
    session.add(doctor)
    session.add(patient)
    session.commit()
    appt = Appointment(patient_id=patient.id, doctor_id=doctor.id, appointment_date=when, status=status)
    session.add(appt)
    session.commit()
    session.refresh(appt)
    return appt


def seed_reminder(session: Session, appointment_id: str, reminder_type: str) -> AppointmentReminder:
    r = AppointmentReminder(appointment_id=appointment_id, reminder_type=reminder_type)
    session.add(r)
    session.commit()
    session.refresh(r)
    return r
