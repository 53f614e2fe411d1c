"""Onboarding API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Header

from api.schemas import NewUserResponse, OnboardingResponse, OnboardingStepRequest
from api.session import get_onboarding, get_repository, require_session_id
from core.onboarding import OnboardingProgress, is_new_user

router = APIRouter()

SessionToken = Annotated[str, Header(alias="X-Session-ID")]


def _progress_response(progress: OnboardingProgress) -> OnboardingResponse:
    return OnboardingResponse(
        completed_steps=list(progress.completed_steps),
        current_step=progress.current_step,
        current_label=progress.current_step.label,
        is_complete=progress.is_complete,
    )


@router.get("")
async def get_progress(token: SessionToken) -> OnboardingResponse:
    tracker = get_onboarding(require_session_id(token))
    return _progress_response(tracker.get_progress())


@router.post("/complete")
async def complete_step(request: OnboardingStepRequest, token: SessionToken) -> OnboardingResponse:
    tracker = get_onboarding(require_session_id(token))
    return _progress_response(tracker.complete_step(request.step))


@router.post("/reset")
async def reset(token: SessionToken) -> OnboardingResponse:
    tracker = get_onboarding(require_session_id(token))
    tracker.reset()
    return _progress_response(tracker.get_progress())


@router.get("/new-user")
async def new_user(token: SessionToken) -> NewUserResponse:
    session_id = require_session_id(token)
    return NewUserResponse(
        is_new_user=is_new_user(get_onboarding(session_id), get_repository(session_id))
    )
