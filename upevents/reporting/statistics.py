"""Registration and attendance statistics.

Every report is computed from committed rows on each call; nothing is
cached. Cancelled registrations are excluded everywhere, and attendance
is only counted through a non-cancelled registration.
"""
from collections import Counter
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy import func
from sqlmodel import Session, select

from upevents.models import Attendance, Event, Registration
from upevents.schemas import (
    CountSummary,
    EventStats,
    ParticipantDetail,
    ParticipantEventDetail,
    ParticipantStats,
)


def round_half_up(value: float, digits: int = 0) -> float:
    """Round halves away from zero (12.25 -> 12.3, 62.5 -> 63)."""
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def attendance_rate(attendances: int, registrations: int) -> int:
    """Whole-number percentage of registrations that were attended."""
    if registrations == 0:
        return 0
    return int(round_half_up(attendances / registrations * 100))


def _summarize(counts: list[int]) -> CountSummary:
    return CountSummary(
        max=max(counts),
        min=min(counts),
        average=round_half_up(sum(counts) / len(counts), 1),
    )


def get_event_statistics(session: Session) -> EventStats:
    """
    Spread of registrations and attendance across all events.

    Events with no registrations count as zero, so they pull the minimum
    and the average down.
    """
    event_ids = session.exec(select(Event.id)).all()
    if not event_ids:
        return EventStats()

    registration_counts = dict(
        session.exec(
            select(Registration.event_id, func.count(Registration.id))
            .where(Registration.cancelled == False)  # noqa: E712
            .group_by(Registration.event_id)
        ).all()
    )
    attendance_counts = dict(
        session.exec(
            select(Registration.event_id, func.count(Attendance.id))
            .join(Attendance, Attendance.registration_id == Registration.id)
            .where(Registration.cancelled == False)  # noqa: E712
            .group_by(Registration.event_id)
        ).all()
    )

    registrations = [registration_counts.get(event_id, 0) for event_id in event_ids]
    attendance = [attendance_counts.get(event_id, 0) for event_id in event_ids]

    return EventStats(
        total_events=len(event_ids),
        registrations=_summarize(registrations),
        attendance=_summarize(attendance),
    )


def get_participant_statistics(session: Session) -> list[ParticipantStats]:
    """
    Per-person registration and attendance totals.

    People are identified by registration email; the name shown is the one
    on their earliest registration. Sorted by registration count, highest
    first.
    """
    rows = session.exec(
        select(Registration, Attendance.id)
        .outerjoin(Attendance, Attendance.registration_id == Registration.id)
        .where(Registration.cancelled == False)  # noqa: E712
        .order_by(Registration.registered_at)
    ).all()

    names: dict[str, tuple[str, str]] = {}
    registered: Counter[str] = Counter()
    attended: Counter[str] = Counter()
    for registration, attendance_id in rows:
        names.setdefault(registration.email, (registration.first_name, registration.last_name))
        registered[registration.email] += 1
        if attendance_id is not None:
            attended[registration.email] += 1

    stats = [
        ParticipantStats(
            email=email,
            first_name=first_name,
            last_name=last_name,
            total_registrations=registered[email],
            total_attendances=attended[email],
            attendance_rate=attendance_rate(attended[email], registered[email]),
        )
        for email, (first_name, last_name) in names.items()
    ]
    stats.sort(key=lambda s: s.total_registrations, reverse=True)
    return stats


def get_participant_details(session: Session, email: str) -> ParticipantDetail | None:
    """
    One person's registrations with attendance flags, newest event first.

    Returns None if the email has no non-cancelled registration.
    """
    rows = session.exec(
        select(Registration, Event, Attendance.id)
        .join(Event, Event.id == Registration.event_id)
        .outerjoin(Attendance, Attendance.registration_id == Registration.id)
        .where(Registration.email == email)
        .where(Registration.cancelled == False)  # noqa: E712
        .order_by(Event.event_date.desc())
    ).all()
    if not rows:
        return None

    first_registration = rows[0][0]
    events = [
        ParticipantEventDetail(
            event_id=event.id,
            event_title=event.title,
            event_date=event.event_date,
            attended=attendance_id is not None,
        )
        for _, event, attendance_id in rows
    ]
    total_attendances = sum(1 for e in events if e.attended)

    return ParticipantDetail(
        email=email,
        first_name=first_registration.first_name,
        last_name=first_registration.last_name,
        total_registrations=len(events),
        total_attendances=total_attendances,
        attendance_rate=attendance_rate(total_attendances, len(events)),
        events=events,
    )
