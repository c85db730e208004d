# onboarding.py
from typing import Any

from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from headhuntd.database import get_db
from headhuntd.models.user import User
from headhuntd.routers.dependencies import get_current_user
from headhuntd.schemas.profile import OnboardingStepList, OnboardingStepResult, ProfileProjection
from headhuntd.services import flows, onboarding


router = APIRouter(prefix="/onboarding", tags=["onboarding"])


@router.get("/steps", response_model=OnboardingStepList)
def read_onboarding_steps(current_user: User = Depends(get_current_user)):
    flow = current_user.onboarding_flow
    steps = flows.steps_for(flow)
    return OnboardingStepList(flow=flow, steps=list(steps), first_step=flows.first_step(flow), total_steps=len(steps))


@router.get("/profile", response_model=ProfileProjection)
def read_onboarding_profile(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return onboarding.get_profile_projection(db, current_user.id)


@router.put("/{step}", response_model=OnboardingStepResult)
def save_onboarding_step(
    step: str,
    payload: Any = Body(default=None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return onboarding.save_onboarding_step(db, current_user.id, step, payload)
