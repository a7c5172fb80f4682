"""Registration model linking a person to an event."""

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Optional
from uuid import UUID, uuid4

from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from upevents.models.attendance import Attendance
    from upevents.models.event import Event


class Registration(SQLModel, table=True):
    """A person's registration for one event.

    Registrations are keyed by email rather than by participant id; the
    statistics reports group on email directly.

    Attributes:
        id: Unique identifier (UUID).
        event_id: Foreign key to the Event.
        first_name: Given name as entered on the form.
        last_name: Family name as entered on the form.
        email: Email address as entered on the form.
        company: Optional organisation.
        qr_code: Random token printed in the attendee's QR code.
        cancelled: Cancelled registrations are ignored by all reports.
        points_earned: Display copy of the registration points, written by
            the award protocol. Not used in point arithmetic.
        registered_at: When the registration was created.
        event: Reference to the Event.
        attendance: The attendance record, if the person checked in.
    """
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    event_id: UUID = Field(foreign_key="event.id", index=True)
    first_name: str
    last_name: str
    email: str = Field(index=True)
    company: str = ""
    qr_code: str = Field(index=True, unique=True)
    cancelled: bool = Field(default=False)
    points_earned: int = Field(default=0)
    registered_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    # Relationships
    event: Optional["Event"] = Relationship(back_populates="registrations")
    attendance: Optional["Attendance"] = Relationship(
        back_populates="registration",
        sa_relationship_kwargs={"uselist": False},
    )
