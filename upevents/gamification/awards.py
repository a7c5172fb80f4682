"""Attendance award protocol.

Granting attendance points touches the participant, the registration, the
attendance row and possibly several badges. All of it happens in one
transaction: either every write lands or none does.

Callers must invoke the protocol at most once per attendance. The
attendance table allows a single row per registration, and the attendance
route refuses duplicates before any award is attempted; the protocol
itself does not re-check whether a registration was already credited.
"""
import logging
from dataclasses import dataclass, field
from uuid import UUID

from sqlmodel import Session, select

from upevents.core.database import scoped_transaction
from upevents.gamification import ledger
from upevents.gamification.rules import (
    DEFAULT_CONFIG,
    TRIGGER_EVENTS_ATTENDED,
    TRIGGER_LEVEL,
    TRIGGER_TOTAL_POINTS,
    GamificationConfig,
    LevelTier,
    badges_for_trigger,
    get_level_info,
)
from upevents.models import Attendance, Participant, Registration

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AwardResult:
    points: int
    new_total: int
    level: LevelTier
    new_badges: list[str] = field(default_factory=list)


class AttendanceAwarder:
    """Grants attendance points and evaluates badge rules."""

    def __init__(self, config: GamificationConfig = DEFAULT_CONFIG):
        self.config = config

    def award(
        self, session: Session, participant_id: UUID, registration_id: UUID
    ) -> AwardResult | None:
        """
        Credit one attendance to a participant.

        Returns None if the participant does not exist; nothing is written
        in that case. Any database error rolls back every write made by
        this call and propagates to the caller.
        """
        points = self.config.points

        with scoped_transaction(session):
            # Lock the participant row so concurrent awards serialize on it.
            participant = session.exec(
                select(Participant)
                .where(Participant.id == participant_id)
                .with_for_update()
            ).first()
            if participant is None:
                logger.warning(f"Award skipped: participant {participant_id} not found")
                return None

            new_points = participant.total_points + points.attendance
            new_events_attended = participant.events_attended + 1
            level = get_level_info(new_points, self.config).current

            participant.total_points = new_points
            participant.events_attended = new_events_attended
            participant.level = level.level
            session.add(participant)

            self._mark_bookkeeping(session, registration_id)

            new_badges = []
            checks = [
                (TRIGGER_EVENTS_ATTENDED, new_events_attended),
                (TRIGGER_TOTAL_POINTS, new_points),
                (TRIGGER_LEVEL, new_points),
            ]
            for trigger, value in checks:
                for badge_type in badges_for_trigger(trigger, self.config):
                    badge = ledger.check_and_award_badge(
                        session, participant_id, badge_type, value, self.config
                    )
                    if badge:
                        new_badges.append(badge.badge_type)

        logger.info(
            f"Awarded {points.attendance} points to {participant_id} "
            f"(total {new_points}, level {level.level})"
        )
        if new_badges:
            logger.info(f"New badges for {participant_id}: {', '.join(new_badges)}")

        return AwardResult(
            points=points.attendance,
            new_total=new_points,
            level=level,
            new_badges=new_badges,
        )

    def _mark_bookkeeping(self, session: Session, registration_id: UUID) -> None:
        """Record the display point values on the registration and attendance rows."""
        registration = session.get(Registration, registration_id)
        if registration:
            registration.points_earned = self.config.points.registration
            session.add(registration)

        attendance = session.exec(
            select(Attendance).where(Attendance.registration_id == registration_id)
        ).first()
        if attendance:
            attendance.points_awarded = self.config.points.attendance
            session.add(attendance)


def award_attendance_points(
    session: Session,
    participant_id: UUID,
    registration_id: UUID,
    config: GamificationConfig = DEFAULT_CONFIG,
) -> AwardResult | None:
    """Convenience wrapper around AttendanceAwarder.award."""
    return AttendanceAwarder(config).award(session, participant_id, registration_id)
