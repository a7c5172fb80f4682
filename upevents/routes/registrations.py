"""Registration routes."""
import secrets
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select

from upevents.core.database import get_session, scoped_transaction
from upevents.gamification.ledger import get_or_create_participant
from upevents.gamification.rules import GamificationConfig, get_gamification_config
from upevents.models import Event, Registration
from upevents.schemas import RegistrationCreate

router = APIRouter(prefix="/api/registrations", tags=["registrations"])


@router.get("/by-event/{event_id}", response_model=list[Registration])
async def registrations_for_event(event_id: UUID, session: Session = Depends(get_session)):
    """Registrations for an event, newest first."""
    statement = (
        select(Registration)
        .where(Registration.event_id == event_id)
        .order_by(Registration.registered_at.desc())
    )
    return session.exec(statement).all()


@router.get("/by-qr/{qr_code}", response_model=Registration)
async def registration_by_qr(qr_code: str, session: Session = Depends(get_session)):
    """Resolve a scanned attendee QR code to its registration."""
    registration = session.exec(select(Registration).where(Registration.qr_code == qr_code)).first()
    if not registration:
        raise HTTPException(status_code=404, detail="Registration not found")
    return registration


@router.post("", response_model=Registration, status_code=201)
async def create_registration(
    payload: RegistrationCreate,
    session: Session = Depends(get_session),
    config: GamificationConfig = Depends(get_gamification_config),
):
    """
    Register a person for an event.

    Generates the QR token for the attendance check-in. The person's
    participant record is created on first registration, which grants the
    registration points and the first_event badge.

    The participant is ensured before the registration is written, so a
    stored registration always has a participant behind its email.
    """
    if not session.get(Event, payload.event_id):
        raise HTTPException(status_code=404, detail="Event not found")

    get_or_create_participant(
        session, payload.email, payload.first_name, payload.last_name, config
    )

    registration = Registration(**payload.model_dump(), qr_code=secrets.token_urlsafe(15))
    with scoped_transaction(session):
        session.add(registration)
    session.refresh(registration)
    return registration


@router.patch("/{registration_id}/cancel", response_model=Registration)
async def cancel_registration(registration_id: UUID, session: Session = Depends(get_session)):
    """Cancel a registration. Cancelled registrations drop out of all statistics."""
    registration = session.get(Registration, registration_id)
    if not registration:
        raise HTTPException(status_code=404, detail="Registration not found")

    registration.cancelled = True
    session.add(registration)
    session.commit()
    session.refresh(registration)
    return registration
