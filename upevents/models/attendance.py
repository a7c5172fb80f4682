"""Attendance model recording an on-site check-in."""

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Optional
from uuid import UUID, uuid4

from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from upevents.models.registration import Registration


class Attendance(SQLModel, table=True):
    """A check-in for a registration.

    At most one attendance exists per registration (unique registration_id).

    Attributes:
        id: Unique identifier (UUID).
        registration_id: Foreign key to the Registration, unique.
        notes: Free-form notes entered by staff at check-in.
        points_awarded: Display copy of the attendance points, written by
            the award protocol.
        checked_in_at: When the check-in happened.
        registration: Reference to the Registration.
    """
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    registration_id: UUID = Field(foreign_key="registration.id", unique=True)
    notes: str = ""
    points_awarded: int = Field(default=0)
    checked_in_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    # Relationship
    registration: Optional["Registration"] = Relationship(back_populates="attendance")
