"""Event model.

Events are created by administrators. Each event carries two short codes:
one embedded in the public registration link and one in the on-site
attendance link encoded in the QR code.
"""

from datetime import UTC, datetime
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from upevents.models.registration import Registration


class Event(SQLModel, table=True):
    """An event participants can register for and attend.

    Attributes:
        id: Unique identifier (UUID).
        title: Event title.
        description: Free-form description.
        location: Where the event takes place.
        event_date: When the event starts.
        registration_code: Code used in the public registration link.
        attendance_code: Code used in the attendance (QR) link.
        is_active: Whether registration is currently open.
        is_closed: Closed events are hidden from the default listing.
        created_at: When the event was created.
        registrations: Registrations for this event.
    """
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    title: str
    description: str = ""
    location: str = ""
    event_date: datetime = Field(index=True)
    registration_code: str = Field(index=True, unique=True)
    attendance_code: str = Field(index=True, unique=True)
    is_active: bool = Field(default=False)
    is_closed: bool = Field(default=False)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    # Relationship
    registrations: list["Registration"] = Relationship(back_populates="event")
