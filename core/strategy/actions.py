"""Player actions."""

from enum import Enum


class Action(Enum):
    """Possible player actions."""

    HIT = "hit"
    STAND = "stand"
    DOUBLE = "double"
    SPLIT = "split"
    SURRENDER = "surrender"

    def __str__(self) -> str:
        return self.value
