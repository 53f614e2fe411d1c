"""Achievement milestones unlocked by session history."""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, Sequence

from core.session.snapshot import SessionRecord


class MilestoneTier(Enum):
    BRONZE = "bronze"
    SILVER = "silver"
    GOLD = "gold"


@dataclass(frozen=True)
class MilestoneProgress:
    is_complete: bool
    current: float
    target: float


# (history, practice streak in days) -> progress
MilestoneCheck = Callable[[Sequence[SessionRecord], int], MilestoneProgress]


@dataclass(frozen=True)
class Milestone:
    id: str
    tier: MilestoneTier
    label: str
    description: str
    check: MilestoneCheck


def _best_accuracy(records: Sequence[SessionRecord]) -> float:
    return max((r.summary.accuracy for r in records), default=0.0)


def _best_streak(records: Sequence[SessionRecord]) -> int:
    return max((r.summary.longest_correct_streak for r in records), default=0)


def _best_speed(records: Sequence[SessionRecord]) -> float:
    """Fastest average response in ms; infinite with no timed prompts."""
    return min(
        (r.summary.avg_response_ms for r in records if r.summary.total_prompts > 0),
        default=float("inf"),
    )


def _accuracy(target: float) -> MilestoneCheck:
    def check(records: Sequence[SessionRecord], _streak: int) -> MilestoneProgress:
        current = _best_accuracy(records)
        return MilestoneProgress(current >= target, current, target)

    return check


def _correct_streak(target: int) -> MilestoneCheck:
    def check(records: Sequence[SessionRecord], _streak: int) -> MilestoneProgress:
        current = _best_streak(records)
        return MilestoneProgress(current >= target, current, target)

    return check


def _speed(target_ms: int) -> MilestoneCheck:
    def check(records: Sequence[SessionRecord], _streak: int) -> MilestoneProgress:
        current = _best_speed(records)
        return MilestoneProgress(current < target_ms, current, target_ms)

    return check


def _practice_days(target: int) -> MilestoneCheck:
    def check(_records: Sequence[SessionRecord], streak: int) -> MilestoneProgress:
        return MilestoneProgress(streak >= target, streak, target)

    return check


def _sessions(target: int, cap: bool = False) -> MilestoneCheck:
    def check(records: Sequence[SessionRecord], _streak: int) -> MilestoneProgress:
        current = min(len(records), target) if cap else len(records)
        return MilestoneProgress(len(records) >= target, current, target)

    return check


MILESTONES: tuple[Milestone, ...] = (
    Milestone("first_session", MilestoneTier.BRONZE, "First Steps", "Complete your first session", _sessions(1, cap=True)),
    Milestone("accuracy_80", MilestoneTier.BRONZE, "Counting Basics", "Achieve 80% accuracy in a session", _accuracy(80)),
    Milestone("streak_10", MilestoneTier.BRONZE, "On a Roll", "Get 10 correct in a row", _correct_streak(10)),
    Milestone("speed_5s", MilestoneTier.BRONZE, "Quick Thinker", "Average response under 5 seconds", _speed(5000)),
    Milestone("accuracy_90", MilestoneTier.SILVER, "Sharp Counter", "Achieve 90% accuracy in a session", _accuracy(90)),
    Milestone("streak_25", MilestoneTier.SILVER, "Flow State", "Get 25 correct in a row", _correct_streak(25)),
    Milestone("speed_3s", MilestoneTier.SILVER, "Fast Hands", "Average response under 3 seconds", _speed(3000)),
    Milestone("practice_7d", MilestoneTier.SILVER, "Dedicated", "7-day practice streak", _practice_days(7)),
    Milestone("accuracy_95", MilestoneTier.GOLD, "Card Sharp", "Achieve 95% accuracy in a session", _accuracy(95)),
    Milestone("streak_50", MilestoneTier.GOLD, "Machine", "Get 50 correct in a row", _correct_streak(50)),
    Milestone("speed_2s", MilestoneTier.GOLD, "Lightning", "Average response under 2 seconds", _speed(2000)),
    Milestone("practice_30d", MilestoneTier.GOLD, "Iron Will", "30-day practice streak", _practice_days(30)),
    Milestone("sessions_50", MilestoneTier.GOLD, "Veteran", "Complete 50 sessions", _sessions(50)),
)


def check_milestones(
    records: Sequence[SessionRecord],
    practice_streak: int,
    already_unlocked: Iterable[str] = (),
) -> tuple[list[str], dict[str, MilestoneProgress]]:
    """
    Evaluate every milestone against the history.

    Args:
        records: Completed session records
        practice_streak: Current run of consecutive practice days
        already_unlocked: Ids unlocked earlier

    Returns:
        Ids unlocked by this check, in definition order, and the progress of
        every milestone keyed by id
    """
    unlocked = set(already_unlocked)
    newly_unlocked: list[str] = []
    progress: dict[str, MilestoneProgress] = {}

    for milestone in MILESTONES:
        result = milestone.check(records, practice_streak)
        progress[milestone.id] = result
        if result.is_complete and milestone.id not in unlocked:
            newly_unlocked.append(milestone.id)

    return newly_unlocked, progress
