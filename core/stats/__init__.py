"""Training statistics: progress, milestones and miss replay."""

from core.stats.milestones import MILESTONES, Milestone, MilestoneProgress, MilestoneTier, check_milestones
from core.stats.progress import (
    RECENT_WINDOW,
    PersonalRecord,
    PersonalRecords,
    Progress,
    TrendPoint,
    compute_progress,
    practice_streaks,
)
from core.stats.replay import MissedCheck, MissReplay, ReplayAnswer, ReplaySummary

__all__ = [
    "MILESTONES",
    "Milestone",
    "MilestoneProgress",
    "MilestoneTier",
    "check_milestones",
    "RECENT_WINDOW",
    "PersonalRecord",
    "PersonalRecords",
    "Progress",
    "TrendPoint",
    "compute_progress",
    "practice_streaks",
    "MissedCheck",
    "MissReplay",
    "ReplayAnswer",
    "ReplaySummary",
]
