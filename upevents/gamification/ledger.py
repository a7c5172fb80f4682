"""Participant ledger: lookups, creation and badge bookkeeping."""
import logging
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from upevents.core.database import scoped_transaction
from upevents.gamification.rules import (
    DEFAULT_CONFIG,
    FIRST_EVENT,
    GamificationConfig,
    is_badge_eligible,
)
from upevents.models import Participant, ParticipantBadge

logger = logging.getLogger(__name__)


def get_participant_by_email(session: Session, email: str) -> Participant | None:
    return session.exec(select(Participant).where(Participant.email == email)).first()


def get_participant_badges(session: Session, participant_id: UUID) -> list[ParticipantBadge]:
    """Badges earned by a participant, most recent first."""
    statement = (
        select(ParticipantBadge)
        .where(ParticipantBadge.participant_id == participant_id)
        .order_by(ParticipantBadge.earned_at.desc())
    )
    return list(session.exec(statement).all())


def get_leaderboard(session: Session, limit: int = 10) -> list[Participant]:
    """Top participants by total points."""
    statement = (
        select(Participant)
        .order_by(Participant.total_points.desc(), Participant.created_at)
        .limit(limit)
    )
    return list(session.exec(statement).all())


def has_badge(session: Session, participant_id: UUID, badge_type: str) -> bool:
    statement = (
        select(ParticipantBadge.id)
        .where(ParticipantBadge.participant_id == participant_id)
        .where(ParticipantBadge.badge_type == badge_type)
    )
    return session.exec(statement).first() is not None


def grant_badge(
    session: Session,
    participant_id: UUID,
    badge_type: str,
    config: GamificationConfig = DEFAULT_CONFIG,
) -> ParticipantBadge:
    """Insert a badge row and flush it.

    Flushing surfaces a uniqueness violation inside the caller's
    transaction instead of at commit time.
    """
    definition = config.badges[badge_type]
    badge = ParticipantBadge(
        participant_id=participant_id,
        badge_type=definition.type,
        badge_name=definition.name,
    )
    session.add(badge)
    session.flush()
    return badge


def check_and_award_badge(
    session: Session,
    participant_id: UUID,
    badge_type: str,
    value: int = 0,
    config: GamificationConfig = DEFAULT_CONFIG,
) -> ParticipantBadge | None:
    """
    Award ``badge_type`` if the participant is eligible and lacks it.

    Must run inside the caller's transaction. The existence check is a fast
    path; the (participant_id, badge_type) unique constraint is what
    actually prevents duplicates when two transactions race.

    Returns the new badge, or None when nothing was awarded.
    """
    if has_badge(session, participant_id, badge_type):
        return None
    if not is_badge_eligible(badge_type, value, config):
        return None
    return grant_badge(session, participant_id, badge_type, config)


def get_or_create_participant(
    session: Session,
    email: str,
    first_name: str,
    last_name: str,
    config: GamificationConfig = DEFAULT_CONFIG,
) -> Participant:
    """
    Return the participant for ``email``, creating it on first contact.

    A new participant starts with the registration points at level 1 and
    receives the first_event badge in the same transaction.
    """
    participant = get_participant_by_email(session, email)
    if participant:
        return participant

    try:
        with scoped_transaction(session):
            participant = Participant(
                email=email,
                first_name=first_name,
                last_name=last_name,
                total_points=config.points.registration,
                level=1,
                events_attended=0,
                streak=0,
            )
            session.add(participant)
            session.flush()
            check_and_award_badge(session, participant.id, FIRST_EVENT, config=config)
    except IntegrityError:
        # Another request created the same email first; its row is the answer.
        participant = get_participant_by_email(session, email)
        if participant is None:
            raise
        return participant

    session.refresh(participant)
    logger.info(f"Created participant {email} with {participant.total_points} points")
    return participant
