"""Request and response schemas for the JSON API.

Response models serialize with camelCase keys, which is what the
dashboard's API client expects.
"""
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Gamification

class AwardAttendanceRequest(BaseModel):
    participant_id: UUID
    registration_id: UUID


class LevelTierOut(CamelModel):
    level: int
    min_points: int
    name: str
    icon: str
    color: str


class LevelInfoOut(CamelModel):
    current: LevelTierOut
    next: LevelTierOut | None
    progress: float


class AwardAttendanceResponse(CamelModel):
    points: int
    new_total: int
    level: LevelTierOut
    new_badges: list[str] = []


class ParticipantOut(BaseModel):
    """Participant row as stored; keys match the column names."""

    id: UUID
    email: str
    first_name: str
    last_name: str
    total_points: int
    level: int
    events_attended: int
    streak: int
    created_at: datetime


class ParticipantWithLevel(ParticipantOut):
    model_config = ConfigDict(populate_by_name=True)

    level_info: LevelInfoOut = Field(alias="levelInfo")


class BadgeOut(BaseModel):
    id: UUID
    participant_id: UUID
    badge_type: str
    badge_name: str
    earned_at: datetime


class BadgeDefinitionOut(BaseModel):
    type: str
    name: str
    icon: str
    description: str


class PointsTableOut(BaseModel):
    REGISTRATION: int
    ATTENDANCE: int
    EARLY_BIRD: int
    STREAK_BONUS: int


class GamificationConfigOut(BaseModel):
    points: PointsTableOut
    levels: list[LevelTierOut]
    badges: list[BadgeDefinitionOut]


# Statistics

class CountSummary(CamelModel):
    max: int = 0
    min: int = 0
    average: float = 0


class EventStats(CamelModel):
    total_events: int = 0
    registrations: CountSummary = CountSummary()
    attendance: CountSummary = CountSummary()


class ParticipantStats(CamelModel):
    email: str
    first_name: str
    last_name: str
    total_registrations: int
    total_attendances: int
    attendance_rate: int


class ParticipantEventDetail(CamelModel):
    event_id: UUID
    event_title: str
    event_date: datetime
    registered: bool = True
    attended: bool


class ParticipantDetail(ParticipantStats):
    events: list[ParticipantEventDetail]


# Collaborators

class EventCreate(BaseModel):
    title: str = Field(min_length=1)
    description: str = ""
    location: str = ""
    event_date: datetime


class RegistrationCreate(BaseModel):
    event_id: UUID
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    email: str = Field(min_length=3)
    company: str = ""


class AttendanceCreate(BaseModel):
    registration_id: UUID
    notes: str = ""
