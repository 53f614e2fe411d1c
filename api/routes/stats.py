"""Statistics API endpoints."""

import logging
import math
from dataclasses import asdict
from datetime import datetime, timezone
from typing import Annotated

from fastapi import APIRouter, Header, HTTPException, Query

from api.schemas import (
    HistoryResponse,
    MilestoneResponse,
    MilestonesResponse,
    MissedCheckResponse,
    MissReplayResponse,
    ProgressResponse,
    ReplayGradeRequest,
    ReplayGradeResponse,
    ReplayResultResponse,
)
from api.session import get_repository, require_session_id
from core.persistence import SessionRepository
from core.session.snapshot import PersistedMilestones, SessionRecord, UnlockedMilestone
from core.stats import MILESTONES, MissReplay, check_milestones, compute_progress

logger = logging.getLogger(__name__)

router = APIRouter()

SessionToken = Annotated[str, Header(alias="X-Session-ID")]


def _find_record(repository: SessionRepository, session_id: str | None) -> SessionRecord:
    """A completed session by id, or the most recent one."""
    history = repository.load_history()
    if session_id is None:
        if history:
            return history[-1]
    else:
        for record in history:
            if record.session_id == session_id:
                return record
    raise HTTPException(status_code=404, detail="No such completed session")


def _replay_for(record: SessionRecord) -> MissReplay:
    return MissReplay.from_checks(c.to_check() for c in record.count_checks) or MissReplay(())


@router.get("/history")
async def history(
    token: SessionToken,
    limit: Annotated[int | None, Query(ge=1, le=100)] = None,
) -> HistoryResponse:
    """Completed sessions, oldest first."""
    records = get_repository(require_session_id(token)).load_history()
    if limit is not None:
        records = records[-limit:]
    return HistoryResponse(sessions=records)


@router.get("/progress")
async def progress(token: SessionToken) -> ProgressResponse:
    """Accuracy and speed trends, practice streaks and personal records."""
    report = compute_progress(get_repository(require_session_id(token)).load_history())
    return ProgressResponse.model_validate(asdict(report))


@router.get("/milestones")
async def milestones(token: SessionToken) -> MilestonesResponse:
    """
    Check every milestone against the history.

    Newly completed milestones are recorded as unlocked and stay unlocked.
    """
    repository = get_repository(require_session_id(token))
    records = repository.load_history()
    streak = compute_progress(records).current_streak
    saved = repository.load_milestones()

    newly_unlocked, results = check_milestones(records, streak, saved.ids)
    if newly_unlocked:
        now = datetime.now(timezone.utc).isoformat()
        saved = PersistedMilestones(
            unlocked=saved.unlocked + [UnlockedMilestone(id=m, unlocked_at=now) for m in newly_unlocked]
        )
        repository.save_milestones(saved)
        logger.info(f"Unlocked milestones: {', '.join(newly_unlocked)}")

    unlocked_at = {m.id: m.unlocked_at for m in saved.unlocked}
    return MilestonesResponse(
        milestones=[
            MilestoneResponse(
                id=m.id,
                tier=m.tier.value,
                label=m.label,
                description=m.description,
                is_complete=results[m.id].is_complete,
                current=None if math.isinf(results[m.id].current) else results[m.id].current,
                target=results[m.id].target,
                unlocked_at=unlocked_at.get(m.id),
            )
            for m in MILESTONES
        ],
        newly_unlocked=newly_unlocked,
    )


@router.get("/replay")
async def replay(
    token: SessionToken,
    session_id: str | None = None,
) -> MissReplayResponse:
    """Count checks missed in a completed session (the latest by default)."""
    record = _find_record(get_repository(require_session_id(token)), session_id)
    drill = _replay_for(record)
    return MissReplayResponse(
        session_id=record.session_id,
        problems=[MissedCheckResponse(**asdict(p)) for p in drill.problems],
    )


@router.post("/replay")
async def grade_replay(token: SessionToken, request: ReplayGradeRequest) -> ReplayGradeResponse:
    """Grade answers to a miss replay; answers past the last problem are ignored."""
    record = _find_record(get_repository(require_session_id(token)), request.session_id)
    drill = _replay_for(record)
    if drill.is_finished:
        raise HTTPException(status_code=409, detail="Nothing to replay: no missed count checks")

    for answer in request.answers:
        if drill.submit(answer.answer, answer.response_ms) is None:
            break

    summary = drill.summary()
    return ReplayGradeResponse(
        results=[
            ReplayResultResponse(
                hand_number=a.problem.hand_number,
                expected_count=a.problem.expected_count,
                answer=a.answer,
                is_correct=a.is_correct,
            )
            for a in drill.answers
        ],
        **asdict(summary),
    )
