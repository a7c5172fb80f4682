"""Statistics routes for the dashboard."""
from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session

from upevents.core.database import get_session
from upevents.reporting import statistics
from upevents.schemas import EventStats, ParticipantDetail, ParticipantStats

router = APIRouter(prefix="/api/statistics", tags=["statistics"])


@router.get("/events", response_model=EventStats)
async def event_statistics(session: Session = Depends(get_session)):
    """Max, min and average registrations and attendance per event."""
    return statistics.get_event_statistics(session)


@router.get("/participants", response_model=list[ParticipantStats])
async def participant_statistics(session: Session = Depends(get_session)):
    """Registration and attendance totals per person, most registrations first."""
    return statistics.get_participant_statistics(session)


@router.get("/participants/{email}", response_model=ParticipantDetail)
async def participant_details(email: str, session: Session = Depends(get_session)):
    """
    Registration history for one person.

    Lists each non-cancelled registration with its event and whether the
    person attended. Returns 404 if the email has no active registration.
    """
    details = statistics.get_participant_details(session, email)
    if not details:
        raise HTTPException(status_code=404, detail="Participant not found")
    return details
