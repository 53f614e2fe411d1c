"""Count-check prompt scheduling."""

from dataclasses import dataclass
from random import Random
from typing import Protocol, Sequence

DEFAULT_THRESHOLDS: tuple[int, ...] = (4, 5)


@dataclass(frozen=True)
class PromptSchedulerState:
    """Serializable scheduler position."""

    hands_since_prompt: int
    next_threshold: int
    thresholds: tuple[int, ...] = DEFAULT_THRESHOLDS


class PromptPolicy(Protocol):
    """Decides when a count check is due."""

    def on_hand_resolved(self) -> bool:
        """Record a resolved hand; return True if a count prompt is due."""
        ...

    def on_prompt_submitted(self) -> None:
        """Record that the player answered a prompt."""
        ...

    def serialize(self) -> PromptSchedulerState:
        ...

    def restore(self, state: PromptSchedulerState) -> None:
        """Continue from a position saved by ``serialize``."""
        ...


class PromptScheduler:
    """
    Prompts for the running count every few hands.

    After each prompt the next interval is drawn from ``thresholds``, so the
    default of (4, 5) keeps the player from anticipating the check. A single
    threshold gives a fixed "every N hands" cadence.
    """

    def __init__(
        self,
        thresholds: Sequence[int] = DEFAULT_THRESHOLDS,
        rng: Random | None = None,
        hands_since_prompt: int = 0,
        next_threshold: int | None = None,
    ) -> None:
        if not thresholds or any(t < 1 for t in thresholds):
            raise ValueError("thresholds must be positive hand counts")

        self._thresholds = tuple(thresholds)
        self._rng = rng or Random()
        self._hands_since_prompt = max(0, int(hands_since_prompt))
        if next_threshold in self._thresholds:
            self._next_threshold = next_threshold
        else:
            self._next_threshold = self._pick_threshold()

    @classmethod
    def from_state(cls, state: PromptSchedulerState, rng: Random | None = None) -> "PromptScheduler":
        """Rebuild a scheduler from a saved position."""
        return cls(
            thresholds=state.thresholds,
            rng=rng,
            hands_since_prompt=state.hands_since_prompt,
            next_threshold=state.next_threshold,
        )

    def _pick_threshold(self) -> int:
        return self._rng.choice(self._thresholds)

    def on_hand_resolved(self) -> bool:
        self._hands_since_prompt += 1
        return self._hands_since_prompt >= self._next_threshold

    def on_prompt_submitted(self) -> None:
        self._hands_since_prompt = 0
        self._next_threshold = self._pick_threshold()

    def reset(self) -> None:
        self.on_prompt_submitted()

    @property
    def hands_since_prompt(self) -> int:
        return self._hands_since_prompt

    @property
    def next_threshold(self) -> int:
        return self._next_threshold

    def serialize(self) -> PromptSchedulerState:
        return PromptSchedulerState(
            hands_since_prompt=self._hands_since_prompt,
            next_threshold=self._next_threshold,
            thresholds=self._thresholds,
        )

    def restore(self, state: PromptSchedulerState) -> None:
        restored = PromptScheduler.from_state(state, rng=self._rng)
        self._thresholds = restored._thresholds
        self._hands_since_prompt = restored._hands_since_prompt
        self._next_threshold = restored._next_threshold
