"""Participant model for the gamification ledger.

A participant is a person identified by email who accrues points, levels
and badges across events. Participants are created the first time someone
registers and are only mutated by the attendance award protocol.
"""

from datetime import UTC, datetime
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from upevents.models.badge import ParticipantBadge


class Participant(SQLModel, table=True):
    """A person accruing points and badges.

    Attributes:
        id: Unique identifier (UUID).
        email: Natural key, unique across participants.
        first_name: Given name captured at first registration.
        last_name: Family name captured at first registration.
        total_points: Cumulative points. Never decreases.
        level: Level number derived from total_points, stored so the
            leaderboard can display it without recomputing.
        events_attended: Number of attendances that were awarded points.
        streak: Reserved for streak bonuses; not updated by any rule yet.
        created_at: When the participant was first seen.
        badges: Badges earned by this participant.
    """
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(index=True, unique=True)
    first_name: str
    last_name: str
    total_points: int = Field(default=0, ge=0)
    level: int = Field(default=1)
    events_attended: int = Field(default=0)
    streak: int = Field(default=0)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    # Relationship
    badges: list["ParticipantBadge"] = Relationship(back_populates="participant")
