"""
Career endpoints built on the stored profile.

These mirror the pages of the app: the dashboard (assessment and
recommendations at once), recommendations, the per-path detail view
(skills gap then learning resources) and curriculum guidance.
"""

import logging
from fastapi import APIRouter, Depends

from ..dependencies.services import get_actions, get_orchestrator, get_profile_store
from ..models.careers import CareerDetailsRequest, CurriculumRequest
from pallavi.flows.actions import ActionResult, CareerActions
from pallavi.flows.orchestration import CareerOrchestrator, CareerPathDetails, DashboardOverview
from pallavi.flows.schemas import CurriculumGuidanceOutput, RecommendCareerPathsOutput
from pallavi.profile import ProfileStore

logger = logging.getLogger(__name__)

router = APIRouter()

INCOMPLETE_PROFILE = "Please complete your profile to get recommendations."


@router.get("/dashboard", response_model=DashboardOverview)
async def dashboard(
    store: ProfileStore = Depends(get_profile_store),
    orchestrator: CareerOrchestrator = Depends(get_orchestrator)
):
    """Skill assessment and career recommendations for the stored profile, run concurrently."""
    return await orchestrator.dashboard_overview(store.get())


@router.get("/recommendations", response_model=ActionResult[RecommendCareerPathsOutput])
async def recommendations(
    store: ProfileStore = Depends(get_profile_store),
    actions: CareerActions = Depends(get_actions)
):
    profile = store.get()
    if not profile.is_complete:
        return ActionResult.fail(INCOMPLETE_PROFILE, "validation_error")
    return await actions.recommend_career_paths({"skills": profile.skills, "interests": profile.interests})


@router.post("/details", response_model=CareerPathDetails)
async def career_details(
    request: CareerDetailsRequest,
    store: ProfileStore = Depends(get_profile_store),
    orchestrator: CareerOrchestrator = Depends(get_orchestrator)
):
    """Skills gap for the chosen path, then learning resources for that gap."""
    return await orchestrator.career_path_details(store.get().skills, request.career_path)


@router.post("/curriculum", response_model=ActionResult[CurriculumGuidanceOutput])
async def curriculum(
    request: CurriculumRequest,
    store: ProfileStore = Depends(get_profile_store),
    orchestrator: CareerOrchestrator = Depends(get_orchestrator)
):
    return await orchestrator.curriculum_guidance(store.get(), request.target_career_paths)
