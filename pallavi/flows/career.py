from __future__ import annotations

from ..models.manager import ModelManager
from . import definitions as d
from . import schemas as s
from .flow import FlowInput, FlowPipeline


class CareerFlows:
    """The nine career guidance flows as coroutines. Each raises a FlowError on failure."""

    def __init__(self, model_manager: ModelManager):
        self.pipeline = FlowPipeline(model_manager)

    async def recommend_career_paths(self, payload: FlowInput) -> s.RecommendCareerPathsOutput:
        return await self.pipeline.run(d.RECOMMEND_CAREER_PATHS, payload)

    async def analyze_skills_gap(self, payload: FlowInput) -> s.SkillsGapAnalysisOutput:
        return await self.pipeline.run(d.ANALYZE_SKILLS_GAP, payload)

    async def suggest_learning_resources(self, payload: FlowInput) -> s.LearningResourcesOutput:
        return await self.pipeline.run(d.SUGGEST_LEARNING_RESOURCES, payload)

    async def get_job_market_insights(self, payload: FlowInput) -> s.JobMarketInsightsOutput:
        return await self.pipeline.run(d.GET_JOB_MARKET_INSIGHTS, payload)

    async def get_curriculum_recommendations(self, payload: FlowInput) -> s.CurriculumGuidanceOutput:
        return await self.pipeline.run(d.GET_CURRICULUM_RECOMMENDATIONS, payload)

    async def assess_skills(self, payload: FlowInput) -> s.SkillAssessmentOutput:
        return await self.pipeline.run(d.ASSESS_SKILLS, payload)

    async def generate_resume(self, payload: FlowInput) -> s.ResumeBuilderOutput:
        return await self.pipeline.run(d.GENERATE_RESUME, payload)

    async def generate_interview_questions(self, payload: FlowInput) -> s.MockInterviewOutput:
        return await self.pipeline.run(d.GENERATE_INTERVIEW_QUESTIONS, payload)

    async def evaluate_answer(self, payload: FlowInput) -> s.EvaluateAnswerOutput:
        return await self.pipeline.run(d.EVALUATE_ANSWER, payload)

    async def run(self, flow_name: str, payload: FlowInput):
        return await self.pipeline.run(d.get_flow(flow_name), payload)
