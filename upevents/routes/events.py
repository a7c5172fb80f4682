"""Event routes."""
import secrets
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select

from upevents.core.database import get_session
from upevents.models import Event
from upevents.schemas import EventCreate

router = APIRouter(prefix="/api/events", tags=["events"])


def generate_code(length: int = 10) -> str:
    """Random URL-safe code for registration and attendance links."""
    return secrets.token_urlsafe(length)[:length]


@router.get("", response_model=list[Event])
async def list_events(include_closed: bool = False, session: Session = Depends(get_session)):
    """List events, most recent date first. Closed events are hidden unless requested."""
    statement = select(Event).order_by(Event.event_date.desc())
    if not include_closed:
        statement = statement.where(Event.is_closed == False)  # noqa: E712
    return session.exec(statement).all()


@router.get("/by-registration-code/{code}", response_model=Event)
async def event_by_registration_code(code: str, session: Session = Depends(get_session)):
    """Resolve the event behind a public registration link."""
    event = session.exec(select(Event).where(Event.registration_code == code)).first()
    if not event:
        raise HTTPException(status_code=404, detail="Event not found")
    return event


@router.get("/by-attendance-code/{code}", response_model=Event)
async def event_by_attendance_code(code: str, session: Session = Depends(get_session)):
    """Resolve the event behind an on-site attendance (QR) link."""
    event = session.exec(select(Event).where(Event.attendance_code == code)).first()
    if not event:
        raise HTTPException(status_code=404, detail="Event not found")
    return event


# Fixed paths above must stay before /{event_id}, which would otherwise capture them.
@router.get("/{event_id}", response_model=Event)
async def get_event(event_id: UUID, session: Session = Depends(get_session)):
    event = session.get(Event, event_id)
    if not event:
        raise HTTPException(status_code=404, detail="Event not found")
    return event


@router.post("", response_model=Event, status_code=201)
async def create_event(payload: EventCreate, session: Session = Depends(get_session)):
    """
    Create an event.

    New events start inactive, with fresh registration and attendance codes.
    """
    event = Event(
        **payload.model_dump(),
        registration_code=generate_code(),
        attendance_code=generate_code(),
    )
    session.add(event)
    session.commit()
    session.refresh(event)
    return event


@router.patch("/{event_id}/toggle-status", response_model=Event)
async def toggle_event_status(event_id: UUID, session: Session = Depends(get_session)):
    """Open or pause registration by flipping is_active."""
    event = session.get(Event, event_id)
    if not event:
        raise HTTPException(status_code=404, detail="Event not found")

    event.is_active = not event.is_active
    session.add(event)
    session.commit()
    session.refresh(event)
    return event


@router.patch("/{event_id}/close", response_model=Event)
async def close_event(event_id: UUID, session: Session = Depends(get_session)):
    """
    Close an event.

    Closed events are hidden from the default listing but keep their
    registrations and attendance for statistics.
    """
    event = session.get(Event, event_id)
    if not event:
        raise HTTPException(status_code=404, detail="Event not found")

    event.is_closed = True
    session.add(event)
    session.commit()
    session.refresh(event)
    return event
