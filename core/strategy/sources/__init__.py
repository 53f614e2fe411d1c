"""Published strategy charts."""

from core.strategy.sources.bja_h17_2019 import BJA_H17_2019, BJA_H17_2019_DATA

__all__ = ["BJA_H17_2019", "BJA_H17_2019_DATA"]
