"""Replay drill over count checks the player got wrong."""

from dataclasses import dataclass
from typing import Iterable

from core.session.models import CountCheck


@dataclass(frozen=True)
class MissedCheck:
    """A count check to be answered again."""

    hand_number: int
    expected_count: int
    previous_answer: int
    delta: int


@dataclass(frozen=True)
class ReplayAnswer:
    problem: MissedCheck
    answer: int
    response_ms: int

    @property
    def is_correct(self) -> bool:
        return self.answer == self.problem.expected_count


@dataclass(frozen=True)
class ReplaySummary:
    total: int
    correct: int
    accuracy: float
    avg_response_ms: float


class MissReplay:
    """
    Walks the player back through their missed count checks, in the order
    they were missed. Each problem is answered once.
    """

    def __init__(self, problems: Iterable[MissedCheck]) -> None:
        self.problems = tuple(problems)
        self.answers: list[ReplayAnswer] = []

    @classmethod
    def from_checks(cls, checks: Iterable[CountCheck]) -> "MissReplay | None":
        """Build a replay of the incorrect checks, or None when there were none."""
        problems = [
            MissedCheck(
                hand_number=c.hand_number,
                expected_count=c.expected_count,
                previous_answer=c.entered_count,
                delta=c.delta,
            )
            for c in checks
            if not c.is_correct
        ]
        return cls(problems) if problems else None

    @property
    def current(self) -> MissedCheck | None:
        if self.is_finished:
            return None
        return self.problems[len(self.answers)]

    @property
    def is_finished(self) -> bool:
        return len(self.answers) >= len(self.problems)

    def submit(self, answer: int, response_ms: int = 0) -> ReplayAnswer | None:
        """Answer the current problem; None once every problem is answered."""
        problem = self.current
        if problem is None:
            return None
        graded = ReplayAnswer(problem=problem, answer=answer, response_ms=max(0, response_ms))
        self.answers.append(graded)
        return graded

    def summary(self) -> ReplaySummary:
        total = len(self.answers)
        if not total:
            return ReplaySummary(total=0, correct=0, accuracy=0.0, avg_response_ms=0.0)
        correct = sum(1 for a in self.answers if a.is_correct)
        return ReplaySummary(
            total=total,
            correct=correct,
            accuracy=round(correct / total * 100, 2),
            avg_response_ms=sum(a.response_ms for a in self.answers) / total,
        )
