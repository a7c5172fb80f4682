"""Level and badge rules.

Pure functions over an immutable GamificationConfig. Nothing here touches
the database, so the same rules drive the award protocol, the participant
endpoint's level info, and the published configuration.
"""
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

# Counters a badge rule can be evaluated against.
TRIGGER_ALWAYS = "always"
TRIGGER_EVENTS_ATTENDED = "events_attended"
TRIGGER_TOTAL_POINTS = "total_points"
TRIGGER_LEVEL = "level"


@dataclass(frozen=True)
class LevelTier:
    """A named point bracket."""

    level: int
    min_points: int
    name: str
    icon: str
    color: str


@dataclass(frozen=True)
class BadgeDefinition:
    """Display metadata for a badge type."""

    type: str
    name: str
    icon: str
    description: str


@dataclass(frozen=True)
class BadgeRule:
    """When a badge is earned.

    ``trigger`` names the counter the threshold applies to. For
    TRIGGER_LEVEL the value passed in is a point total and the level is
    derived from it before comparing.
    """

    badge_type: str
    trigger: str
    threshold: int = 0


@dataclass(frozen=True)
class PointsTable:
    registration: int = 10
    attendance: int = 50
    early_bird: int = 20
    streak_bonus: int = 30


@dataclass(frozen=True)
class LevelInfo:
    current: LevelTier
    next: LevelTier | None
    progress: float


@dataclass(frozen=True)
class GamificationConfig:
    """Points, levels and badges used by the award protocol.

    Tiers must be listed in strictly ascending threshold order and the
    first tier must start at 0 points, so every point total maps to a tier.
    """

    points: PointsTable = field(default_factory=PointsTable)
    levels: tuple[LevelTier, ...] = ()
    badges: Mapping[str, BadgeDefinition] = field(default_factory=dict)
    rules: Mapping[str, BadgeRule] = field(default_factory=dict)

    def __post_init__(self):
        if not self.levels:
            raise ValueError("At least one level tier is required")
        if self.levels[0].min_points != 0:
            raise ValueError("The first level tier must start at 0 points")
        thresholds = [tier.min_points for tier in self.levels]
        if any(a >= b for a, b in zip(thresholds, thresholds[1:])):
            raise ValueError("Level thresholds must be strictly ascending")
        for badge_type in self.rules:
            if badge_type not in self.badges:
                raise ValueError(f"Badge rule without definition: {badge_type}")
        object.__setattr__(self, "levels", tuple(self.levels))
        object.__setattr__(self, "badges", MappingProxyType(dict(self.badges)))
        object.__setattr__(self, "rules", MappingProxyType(dict(self.rules)))


FIRST_EVENT = "first_event"
EARLY_BIRD = "early_bird"
PERFECT_ATTENDANCE = "perfect_attendance"
SOCIAL_BUTTERFLY = "social_butterfly"
NETWORKING_PRO = "networking_pro"
POINT_COLLECTOR = "point_collector"
LEVEL_5 = "level_5"

DEFAULT_CONFIG = GamificationConfig(
    points=PointsTable(),
    levels=(
        LevelTier(1, 0, "Débutant", "🌱", "slate"),
        LevelTier(2, 50, "Novice", "⭐", "blue"),
        LevelTier(3, 150, "Habitué", "🎯", "green"),
        LevelTier(4, 300, "Expert", "💎", "purple"),
        LevelTier(5, 500, "Maître", "👑", "yellow"),
        LevelTier(6, 800, "Légende", "🏆", "orange"),
    ),
    badges={
        FIRST_EVENT: BadgeDefinition(FIRST_EVENT, "Premier Pas", "🎉", "Premier événement"),
        EARLY_BIRD: BadgeDefinition(EARLY_BIRD, "Lève-tôt", "🌅", "Inscription anticipée"),
        PERFECT_ATTENDANCE: BadgeDefinition(
            PERFECT_ATTENDANCE, "Présence Parfaite", "✨", "5 présences consécutives"
        ),
        SOCIAL_BUTTERFLY: BadgeDefinition(
            SOCIAL_BUTTERFLY, "Papillon Social", "🦋", "10 événements assistés"
        ),
        NETWORKING_PRO: BadgeDefinition(
            NETWORKING_PRO, "Pro du Réseau", "🤝", "20 événements assistés"
        ),
        POINT_COLLECTOR: BadgeDefinition(POINT_COLLECTOR, "Collectionneur", "💰", "500 points"),
        LEVEL_5: BadgeDefinition(LEVEL_5, "Niveau 5", "👑", "Atteindre le niveau 5"),
    },
    rules={
        FIRST_EVENT: BadgeRule(FIRST_EVENT, TRIGGER_ALWAYS),
        PERFECT_ATTENDANCE: BadgeRule(PERFECT_ATTENDANCE, TRIGGER_EVENTS_ATTENDED, 5),
        SOCIAL_BUTTERFLY: BadgeRule(SOCIAL_BUTTERFLY, TRIGGER_EVENTS_ATTENDED, 10),
        NETWORKING_PRO: BadgeRule(NETWORKING_PRO, TRIGGER_EVENTS_ATTENDED, 20),
        POINT_COLLECTOR: BadgeRule(POINT_COLLECTOR, TRIGGER_TOTAL_POINTS, 500),
        LEVEL_5: BadgeRule(LEVEL_5, TRIGGER_LEVEL, 5),
    },
)


def get_level_info(points: int, config: GamificationConfig = DEFAULT_CONFIG) -> LevelInfo:
    """
    Resolve the level tier for a point total.

    The current tier is the highest tier whose threshold is at or below
    ``points``. Progress is the percentage of the way to the next tier,
    clamped to 0-100, and 100 once the last tier is reached.
    """
    levels = config.levels
    index = 0
    # Keep the last match; thresholds are ascending so the final match is the highest.
    for i, tier in enumerate(levels):
        if points >= tier.min_points:
            index = i

    current = levels[index]
    next_tier = levels[index + 1] if index + 1 < len(levels) else None
    if next_tier is None:
        progress = 100.0
    else:
        span = next_tier.min_points - current.min_points
        progress = (points - current.min_points) / span * 100

    return LevelInfo(current=current, next=next_tier, progress=min(max(progress, 0.0), 100.0))


def is_badge_eligible(
    badge_type: str, value: int = 0, config: GamificationConfig = DEFAULT_CONFIG
) -> bool:
    """Check whether ``value`` satisfies the rule for ``badge_type``.

    Badge types without a rule (e.g. early_bird) are never eligible.
    """
    rule = config.rules.get(badge_type)
    if rule is None:
        return False
    if rule.trigger == TRIGGER_ALWAYS:
        return True
    if rule.trigger == TRIGGER_LEVEL:
        return get_level_info(value, config).current.level >= rule.threshold
    return value >= rule.threshold


def badges_for_trigger(trigger: str, config: GamificationConfig = DEFAULT_CONFIG) -> list[str]:
    """Badge types evaluated against a counter, in configuration order."""
    return [badge_type for badge_type, rule in config.rules.items() if rule.trigger == trigger]


def get_gamification_config() -> GamificationConfig:
    """Dependency for the active gamification configuration."""
    return DEFAULT_CONFIG
