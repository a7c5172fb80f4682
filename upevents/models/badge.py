"""Badge award model.

A row in this table is the sole record that a participant has earned a
given badge type. The (participant_id, badge_type) pair is unique at the
database level, so a badge can be awarded at most once per participant
even when two awards race.
"""

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Optional
from uuid import UUID, uuid4

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from upevents.models.participant import Participant


class ParticipantBadge(SQLModel, table=True):
    """A badge earned by a participant.

    Attributes:
        id: Unique identifier (UUID).
        participant_id: Foreign key to the Participant who earned it.
        badge_type: Rule identifier, e.g. "perfect_attendance".
        badge_name: Display label copied from the badge definition at
            award time.
        earned_at: When the badge was awarded.
        participant: Reference to the owning Participant.
    """
    __table_args__ = (
        UniqueConstraint("participant_id", "badge_type", name="uq_participant_badge_type"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    participant_id: UUID = Field(foreign_key="participant.id", index=True)
    badge_type: str
    badge_name: str
    earned_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    # Relationship
    participant: Optional["Participant"] = Relationship(back_populates="badges")
