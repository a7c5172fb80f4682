"""Attendance routes for on-site check-in."""
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select

from upevents.core.database import get_session
from upevents.models import Attendance, Registration
from upevents.schemas import AttendanceCreate

router = APIRouter(prefix="/api/attendance", tags=["attendance"])


@router.get("/by-registration/{registration_id}", response_model=Attendance | None)
async def attendance_for_registration(
    registration_id: UUID, session: Session = Depends(get_session)
):
    """Attendance record for a registration, or null if the person has not checked in."""
    return session.exec(
        select(Attendance).where(Attendance.registration_id == registration_id)
    ).first()


@router.post("", response_model=Attendance, status_code=201)
async def record_attendance(payload: AttendanceCreate, session: Session = Depends(get_session)):
    """
    Record a check-in.

    Only one attendance may exist per registration; a second check-in is
    rejected with 400 so attendance points can never be awarded twice for
    the same registration.
    """
    registration = session.get(Registration, payload.registration_id)
    if not registration:
        raise HTTPException(status_code=404, detail="Registration not found")
    if registration.cancelled:
        raise HTTPException(status_code=400, detail="Registration is cancelled")

    existing = session.exec(
        select(Attendance).where(Attendance.registration_id == payload.registration_id)
    ).first()
    if existing:
        raise HTTPException(status_code=400, detail="Attendance already recorded")

    attendance = Attendance(registration_id=payload.registration_id, notes=payload.notes)
    session.add(attendance)
    session.commit()
    session.refresh(attendance)
    return attendance
