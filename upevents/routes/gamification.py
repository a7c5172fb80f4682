"""Gamification routes: awards, participants, badges and leaderboard."""
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlmodel import Session

from upevents.core.config import settings
from upevents.core.database import get_session
from upevents.gamification import ledger
from upevents.gamification.awards import AttendanceAwarder
from upevents.gamification.rules import (
    GamificationConfig,
    LevelInfo,
    get_gamification_config,
    get_level_info,
)
from upevents.schemas import (
    AwardAttendanceRequest,
    AwardAttendanceResponse,
    BadgeDefinitionOut,
    BadgeOut,
    GamificationConfigOut,
    LevelInfoOut,
    LevelTierOut,
    ParticipantOut,
    ParticipantWithLevel,
    PointsTableOut,
)

router = APIRouter(prefix="/api/gamification", tags=["gamification"])


def level_info_out(info: LevelInfo) -> LevelInfoOut:
    return LevelInfoOut(
        current=LevelTierOut.model_validate(info.current, from_attributes=True),
        next=LevelTierOut.model_validate(info.next, from_attributes=True) if info.next else None,
        progress=info.progress,
    )


@router.get("/leaderboard", response_model=list[ParticipantOut])
async def leaderboard(
    limit: int = Query(settings.leaderboard_default_limit, ge=1, le=100),
    session: Session = Depends(get_session),
):
    """Top participants by total points, highest first."""
    return ledger.get_leaderboard(session, limit)


@router.get("/participant/{email}", response_model=ParticipantWithLevel)
async def participant_by_email(
    email: str,
    session: Session = Depends(get_session),
    config: GamificationConfig = Depends(get_gamification_config),
):
    """
    Get a participant by email.

    The stored record is returned together with level info computed from
    the current point total: current tier, next tier and progress.
    """
    participant = ledger.get_participant_by_email(session, email)
    if not participant:
        raise HTTPException(status_code=404, detail="Participant not found")

    return ParticipantWithLevel(
        **participant.model_dump(),
        level_info=level_info_out(get_level_info(participant.total_points, config)),
    )


@router.get("/badges/{participant_id}", response_model=list[BadgeOut])
async def participant_badges(participant_id: UUID, session: Session = Depends(get_session)):
    """Badges earned by a participant, most recent first."""
    return ledger.get_participant_badges(session, participant_id)


@router.post("/award-attendance", response_model=AwardAttendanceResponse)
async def award_attendance(
    payload: AwardAttendanceRequest,
    session: Session = Depends(get_session),
    config: GamificationConfig = Depends(get_gamification_config),
):
    """
    Award attendance points to a participant.

    Adds the attendance points, bumps the attended count, recomputes the
    level and grants any newly earned badges in one transaction. Returns
    404 if the participant does not exist.
    """
    result = AttendanceAwarder(config).award(
        session, payload.participant_id, payload.registration_id
    )
    if result is None:
        raise HTTPException(status_code=404, detail="Participant not found")

    return AwardAttendanceResponse(
        points=result.points,
        new_total=result.new_total,
        level=LevelTierOut.model_validate(result.level, from_attributes=True),
        new_badges=result.new_badges,
    )


@router.get("/config", response_model=GamificationConfigOut)
async def gamification_config(config: GamificationConfig = Depends(get_gamification_config)):
    """Points table, level tiers and badge list for client display."""
    points = config.points
    return GamificationConfigOut(
        points=PointsTableOut(
            REGISTRATION=points.registration,
            ATTENDANCE=points.attendance,
            EARLY_BIRD=points.early_bird,
            STREAK_BONUS=points.streak_bonus,
        ),
        levels=[LevelTierOut.model_validate(tier, from_attributes=True) for tier in config.levels],
        badges=[
            BadgeDefinitionOut.model_validate(badge, from_attributes=True)
            for badge in config.badges.values()
        ],
    )
