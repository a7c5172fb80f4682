"""Shared test fixtures."""

from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel, create_engine
from sqlmodel.pool import StaticPool

from upevents.core.database import get_session
from upevents.main import app
from upevents.models import Attendance, Event, Participant, Registration


@pytest.fixture(name="engine")
def engine_fixture():
    """Create an in-memory SQLite database for testing."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="session")
def session_fixture(engine):
    """Create a new database session for each test."""
    with Session(engine) as session:
        yield session


@pytest.fixture(name="client")
def client_fixture(session: Session):
    """Create a test client with the test database session."""

    def get_session_override():
        return session

    app.dependency_overrides[get_session] = get_session_override
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


def make_event(session: Session, title: str, days_from_now: int, code: str) -> Event:
    event = Event(
        title=title,
        event_date=datetime.now(UTC) + timedelta(days=days_from_now),
        registration_code=f"reg_{code}",
        attendance_code=f"att_{code}",
    )
    session.add(event)
    session.commit()
    session.refresh(event)
    return event


def make_registration(
    session: Session,
    event: Event,
    email: str,
    attended: bool = False,
    cancelled: bool = False,
    first_name: str = "Ada",
    last_name: str = "Lovelace",
) -> Registration:
    registration = Registration(
        event_id=event.id,
        first_name=first_name,
        last_name=last_name,
        email=email,
        qr_code=uuid4().hex,
        cancelled=cancelled,
    )
    session.add(registration)
    session.flush()
    if attended:
        session.add(Attendance(registration_id=registration.id))
    session.commit()
    session.refresh(registration)
    return registration


@pytest.fixture(name="sample_event")
def sample_event_fixture(session: Session) -> Event:
    """Create a sample event for testing."""
    return make_event(session, "Meetup", 7, "sample")


@pytest.fixture(name="participant")
def participant_fixture(session: Session) -> Participant:
    """A participant one attendance away from the perfect_attendance badge."""
    participant = Participant(
        email="ada@example.com",
        first_name="Ada",
        last_name="Lovelace",
        total_points=0,
        level=1,
        events_attended=4,
    )
    session.add(participant)
    session.commit()
    session.refresh(participant)
    return participant


@pytest.fixture(name="checked_in")
def checked_in_fixture(session: Session, sample_event: Event, participant: Participant) -> Registration:
    """A registration for the participant with an attendance row not yet credited."""
    return make_registration(session, sample_event, participant.email, attended=True)


@pytest.fixture(name="event_factory")
def event_factory_fixture(session: Session):
    """Create events: event_factory(title, days_from_now, code)."""

    def factory(title: str, days_from_now: int = 7, code: str | None = None) -> Event:
        return make_event(session, title, days_from_now, code or title.lower().replace(" ", "_"))

    return factory


@pytest.fixture(name="registration_factory")
def registration_factory_fixture(session: Session):
    """Create registrations: registration_factory(event, email, attended=..., cancelled=...)."""

    def factory(event: Event, email: str, **kwargs) -> Registration:
        return make_registration(session, event, email, **kwargs)

    return factory
