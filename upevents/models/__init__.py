from upevents.models.attendance import Attendance
from upevents.models.badge import ParticipantBadge
from upevents.models.event import Event
from upevents.models.participant import Participant
from upevents.models.registration import Registration

__all__ = ["Event", "Registration", "Attendance", "Participant", "ParticipantBadge"]
