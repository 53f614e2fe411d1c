"""Onboarding checklist for new trainees."""

import json
import logging
from dataclasses import dataclass
from enum import Enum

from core.persistence.repository import ONBOARDING_KEY, SessionRepository
from core.persistence.store import KeyValueStore, StorageError

logger = logging.getLogger(__name__)


class OnboardingStep(Enum):
    """Onboarding steps, in the order they are taught."""

    DECK_COUNTDOWN = "deck_countdown"
    COUNTING_DRILL = "counting_drill"
    TRUE_COUNT = "true_count"
    PLAY_AND_COUNT = "play_and_count"

    @property
    def label(self) -> str:
        return _STEP_META[self][0]

    @property
    def description(self) -> str:
        return _STEP_META[self][1]


STEP_ORDER: tuple[OnboardingStep, ...] = tuple(OnboardingStep)

_STEP_META: dict[OnboardingStep, tuple[str, str]] = {
    OnboardingStep.DECK_COUNTDOWN: (
        "Card Values",
        "Learn Hi-Lo card values by counting through a full deck",
    ),
    OnboardingStep.COUNTING_DRILL: (
        "Running Count",
        "Practice keeping the running count as cards are dealt",
    ),
    OnboardingStep.TRUE_COUNT: (
        "True Count",
        "Convert running count to true count with deck estimation",
    ),
    OnboardingStep.PLAY_AND_COUNT: (
        "Full Simulation",
        "Play hands and maintain the count in real time",
    ),
}


@dataclass(frozen=True)
class OnboardingProgress:
    completed_steps: tuple[OnboardingStep, ...]
    current_step: OnboardingStep
    is_complete: bool


class OnboardingTracker:
    """Stores which onboarding steps are done, in completion order."""

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    def _load(self) -> list[OnboardingStep]:
        try:
            raw = self._store.get(ONBOARDING_KEY)
        except StorageError as e:
            logger.warning(f"Storage unavailable reading onboarding: {e}")
            return []
        if not raw:
            return []
        try:
            values = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Discarding unreadable onboarding progress")
            return []
        if not isinstance(values, list):
            return []

        # Unknown entries are dropped
        known = {step.value: step for step in OnboardingStep}
        steps: list[OnboardingStep] = []
        for value in values:
            step = known.get(value) if isinstance(value, str) else None
            if step is not None and step not in steps:
                steps.append(step)
        return steps

    def _save(self, steps: list[OnboardingStep]) -> None:
        try:
            self._store.set(ONBOARDING_KEY, json.dumps([s.value for s in steps]))
        except StorageError as e:
            logger.warning(f"Storage unavailable writing onboarding: {e}")

    def get_progress(self) -> OnboardingProgress:
        completed = self._load()
        current = next((s for s in STEP_ORDER if s not in completed), STEP_ORDER[-1])
        return OnboardingProgress(
            completed_steps=tuple(completed),
            current_step=current,
            is_complete=len(completed) >= len(STEP_ORDER),
        )

    def complete_step(self, step: OnboardingStep) -> OnboardingProgress:
        """Mark a step done; completing it again changes nothing."""
        completed = self._load()
        if step not in completed:
            completed.append(step)
            self._save(completed)
        return self.get_progress()

    def reset(self) -> None:
        try:
            self._store.delete(ONBOARDING_KEY)
        except StorageError as e:
            logger.warning(f"Storage unavailable clearing onboarding: {e}")


def is_new_user(tracker: OnboardingTracker, repository: SessionRepository) -> bool:
    """A user is new until they finish a step or a session."""
    progress = tracker.get_progress()
    return not progress.completed_steps and not repository.load_history()
