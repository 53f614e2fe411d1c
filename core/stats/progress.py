"""Progress across completed sessions: trends, streaks and personal records."""

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Iterable

from core.session.snapshot import SessionRecord

# Sessions that count as "recent" when comparing against the overall average
RECENT_WINDOW = 5


@dataclass(frozen=True)
class TrendPoint:
    """One completed session, as plotted on a progress chart."""

    date: str
    accuracy: float
    avg_response_ms: int
    hands: int
    total_prompts: int


@dataclass(frozen=True)
class PersonalRecord:
    value: float = 0
    session_id: str = ""
    date: str = ""


@dataclass(frozen=True)
class PersonalRecords:
    best_accuracy: PersonalRecord = field(default_factory=PersonalRecord)
    fastest_speed: PersonalRecord = field(default_factory=PersonalRecord)
    longest_correct_streak: PersonalRecord = field(default_factory=PersonalRecord)
    most_hands: PersonalRecord = field(default_factory=PersonalRecord)


@dataclass(frozen=True)
class Progress:
    """
    Progress report over the session history.

    Speeds are average prompt response times in milliseconds and only
    sessions with at least one prompt contribute to them. ``speed_delta`` is
    positive when recent sessions are faster than the overall average.
    """

    sessions: tuple[TrendPoint, ...] = ()
    recent_accuracy: float = 0.0
    overall_accuracy: float = 0.0
    recent_speed: float = 0.0
    overall_speed: float = 0.0
    accuracy_delta: float = 0.0
    speed_delta: float = 0.0
    current_streak: int = 0
    longest_streak: int = 0
    records: PersonalRecords = field(default_factory=PersonalRecords)
    total_sessions: int = 0


def _mean(values: list[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def session_time(record: SessionRecord) -> datetime:
    """When a session started, falling back to when it ended."""
    moment = datetime.fromisoformat(record.started_at or record.ended_at)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


def session_date(record: SessionRecord) -> date:
    return session_time(record).astimezone(timezone.utc).date()


def practice_streaks(days: Iterable[date], today: date) -> tuple[int, int]:
    """
    Count consecutive practice days.

    Args:
        days: Days on which at least one session was played, in any order
        today: The current day

    Returns:
        (current, longest). The current streak must end today or yesterday,
        otherwise it is 0.
    """
    ordered = sorted(set(days))
    if not ordered:
        return 0, 0

    longest = streak = 1
    for earlier, later in zip(ordered, ordered[1:]):
        streak = streak + 1 if (later - earlier).days == 1 else 1
        longest = max(longest, streak)

    if (today - ordered[-1]).days > 1:
        return 0, longest

    current = 1
    for earlier, later in zip(reversed(ordered[:-1]), reversed(ordered)):
        if (later - earlier).days != 1:
            break
        current += 1
    return current, max(longest, current)


def compute_progress(records: Iterable[SessionRecord], today: date | None = None) -> Progress:
    """
    Build a progress report from completed sessions.

    Args:
        records: Completed session records, in any order
        today: Day used for the current practice streak (defaults to today, UTC)
    """
    ordered = sorted(records, key=session_time)
    if not ordered:
        return Progress()
    today = today or datetime.now(timezone.utc).date()

    points = tuple(
        TrendPoint(
            date=session_date(r).isoformat(),
            accuracy=r.summary.accuracy,
            avg_response_ms=r.summary.avg_response_ms,
            hands=r.hands_played,
            total_prompts=r.summary.total_prompts,
        )
        for r in ordered
    )

    overall_accuracy = _mean([r.summary.accuracy for r in ordered])
    recent_accuracy = _mean([r.summary.accuracy for r in ordered[-RECENT_WINDOW:]])

    timed = [r for r in ordered if r.summary.total_prompts > 0]
    overall_speed = _mean([r.summary.avg_response_ms for r in timed])
    recent_speed = _mean([r.summary.avg_response_ms for r in timed[-RECENT_WINDOW:]])

    current, longest = practice_streaks((session_date(r) for r in ordered), today)

    return Progress(
        sessions=points,
        recent_accuracy=recent_accuracy,
        overall_accuracy=overall_accuracy,
        recent_speed=recent_speed,
        overall_speed=overall_speed,
        accuracy_delta=recent_accuracy - overall_accuracy,
        speed_delta=overall_speed - recent_speed if timed else 0.0,
        current_streak=current,
        longest_streak=longest,
        records=personal_records(ordered),
        total_sessions=len(ordered),
    )


def personal_records(records: list[SessionRecord]) -> PersonalRecords:
    """Best values across sessions; the earliest session wins a tie."""
    best_accuracy = fastest = streak = most_hands = PersonalRecord()

    for r in records:
        day = session_date(r).isoformat()
        summary = r.summary

        if summary.accuracy > best_accuracy.value:
            best_accuracy = PersonalRecord(summary.accuracy, r.session_id, day)
        # Lower is better for speed
        if summary.total_prompts > 0 and (
            not fastest.session_id or summary.avg_response_ms < fastest.value
        ):
            fastest = PersonalRecord(summary.avg_response_ms, r.session_id, day)
        if summary.longest_correct_streak > streak.value:
            streak = PersonalRecord(summary.longest_correct_streak, r.session_id, day)
        if r.hands_played > most_hands.value:
            most_hands = PersonalRecord(r.hands_played, r.session_id, day)

    return PersonalRecords(
        best_accuracy=best_accuracy,
        fastest_speed=fastest,
        longest_correct_streak=streak,
        most_hands=most_hands,
    )
