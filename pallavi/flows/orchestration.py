"""
Compositions of more than one flow.

`career_path_details` runs skills-gap then learning-resources and stops at
the first failure. `dashboard_overview` runs skill assessment and career
recommendation concurrently and reports both outcomes whatever happens to
the other.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Hashable, List, Optional

from pydantic import Field

from ..profile import UserProfile
from . import schemas as s
from .actions import ActionResult, CareerActions
from .sequencing import RequestSequencer

logger = logging.getLogger(__name__)

INCOMPLETE_PROFILE_MESSAGE = "Please complete your profile to unlock your personalized career dashboard."


class OrchestrationResult(s.FlowModel):
    request_id: int = Field(..., description="Increasing id of the request that produced this result")
    stale: bool = Field(False, description="A newer request for the same key started before this one finished")
    errors: List[str] = Field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors


class CareerPathDetails(OrchestrationResult):
    career_path: str
    skills_gap: Optional[s.SkillsGapAnalysisOutput] = None
    learning_resources: Optional[s.LearningResourcesOutput] = None


class DashboardOverview(OrchestrationResult):
    assessment: Optional[s.SkillAssessmentOutput] = None
    recommendations: Optional[s.RecommendCareerPathsOutput] = None


class CareerOrchestrator:
    def __init__(self, actions: CareerActions, sequencer: Optional[RequestSequencer] = None):
        self.actions = actions
        self.sequencer = sequencer or RequestSequencer()

    def _finish(self, key: Hashable, result: OrchestrationResult) -> OrchestrationResult:
        if not self.sequencer.is_current(key, result.request_id):
            result.stale = True
            logger.warning(f"Discarding stale result for {key!r}: request {result.request_id} superseded by {self.sequencer.latest(key)}")
        return result

    async def career_path_details(self, student_skills: str, career_path: str) -> CareerPathDetails:
        key = ("details", career_path)
        details = CareerPathDetails(request_id=self.sequencer.begin(key), career_path=career_path)

        gap = await self.actions.analyze_skills_gap({"student_skills": student_skills, "career_path": career_path})
        if not gap.success:
            details.errors.append(f"Could not analyze skills gap: {gap.error}")
            return self._finish(key, details)
        details.skills_gap = gap.data

        resources = await self.actions.suggest_learning_resources({"skills_gap": gap.data.skills_gap, "career_path": career_path})
        if resources.success:
            details.learning_resources = resources.data
        else:
            details.errors.append(f"Could not fetch learning resources: {resources.error}")
        return self._finish(key, details)

    async def dashboard_overview(self, profile: UserProfile) -> DashboardOverview:
        key = "dashboard"
        overview = DashboardOverview(request_id=self.sequencer.begin(key))
        if not profile.is_complete:
            overview.errors.append(INCOMPLETE_PROFILE_MESSAGE)
            return self._finish(key, overview)

        assessment, recommendations = await asyncio.gather(
            self.actions.assess_skills({"questionnaire_answers": profile.questionnaire()}),
            self.actions.recommend_career_paths({"skills": profile.skills, "interests": profile.interests}),
        )

        if assessment.success:
            overview.assessment = assessment.data
        else:
            overview.errors.append(assessment.error)

        if recommendations.success:
            overview.recommendations = recommendations.data
        else:
            overview.errors.append(recommendations.error)

        return self._finish(key, overview)

    async def curriculum_guidance(self, profile: UserProfile, target_career_paths: str) -> ActionResult[s.CurriculumGuidanceOutput]:
        return await self.actions.get_curriculum_recommendations({
            "student_profile": profile.summary(),
            "target_career_paths": target_career_paths,
        })
