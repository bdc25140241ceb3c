from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Type

from pydantic import BaseModel

from . import schemas


@dataclass(frozen=True)
class FlowDefinition:
    """A named prompt call: input shape, output shape, template and model task."""
    name: str
    task: str #key under `tasks` in config.yaml
    prompt_ref: str
    input_model: Type[BaseModel]
    output_model: Type[BaseModel]
    attachment_field: Optional[str] = None #input field holding a data URI to send with the prompt
    description: str = ""


RECOMMEND_CAREER_PATHS = FlowDefinition(
    name="recommend_career_paths",
    task="recommend_career_paths",
    prompt_ref="career/recommend_paths@v1",
    input_model=schemas.RecommendCareerPathsInput,
    output_model=schemas.RecommendCareerPathsOutput,
    description="Recommends up to 3 ranked career paths with a summary.",
)

ANALYZE_SKILLS_GAP = FlowDefinition(
    name="analyze_skills_gap",
    task="analyze_skills_gap",
    prompt_ref="career/skills_gap@v1",
    input_model=schemas.SkillsGapAnalysisInput,
    output_model=schemas.SkillsGapAnalysisOutput,
    description="Describes the gap between current skills and a career path.",
)

SUGGEST_LEARNING_RESOURCES = FlowDefinition(
    name="suggest_learning_resources",
    task="suggest_learning_resources",
    prompt_ref="career/learning_resources@v1",
    input_model=schemas.LearningResourcesInput,
    output_model=schemas.LearningResourcesOutput,
    description="Suggests courses and resources that close a skills gap.",
)

GET_JOB_MARKET_INSIGHTS = FlowDefinition(
    name="get_job_market_insights",
    task="get_job_market_insights",
    prompt_ref="market/insights@v1",
    input_model=schemas.JobMarketInsightsInput,
    output_model=schemas.JobMarketInsightsOutput,
    description="Answers a query about emerging roles and in-demand skills.",
)

GET_CURRICULUM_RECOMMENDATIONS = FlowDefinition(
    name="get_curriculum_recommendations",
    task="get_curriculum_recommendations",
    prompt_ref="education/curriculum@v1",
    input_model=schemas.CurriculumGuidanceInput,
    output_model=schemas.CurriculumGuidanceOutput,
    description="Suggests curriculum and educational tracks for target careers.",
)

ASSESS_SKILLS = FlowDefinition(
    name="assess_skills",
    task="assess_skills",
    prompt_ref="assessment/skills@v1",
    input_model=schemas.SkillAssessmentInput,
    output_model=schemas.SkillAssessmentOutput,
    attachment_field="transcript_data_uri",
    description="Scores skills and lists strengths and weaknesses from questionnaire answers and an optional transcript.",
)

GENERATE_RESUME = FlowDefinition(
    name="generate_resume",
    task="generate_resume",
    prompt_ref="resume/build@v1",
    input_model=schemas.ResumeBuilderInput,
    output_model=schemas.ResumeBuilderOutput,
    description="Writes a one-page Markdown resume.",
)

GENERATE_INTERVIEW_QUESTIONS = FlowDefinition(
    name="generate_interview_questions",
    task="generate_interview_questions",
    prompt_ref="interview/questions@v1",
    input_model=schemas.MockInterviewInput,
    output_model=schemas.MockInterviewOutput,
    description="Generates 1-10 mock interview questions for a role.",
)

EVALUATE_ANSWER = FlowDefinition(
    name="evaluate_answer",
    task="evaluate_answer",
    prompt_ref="interview/evaluate@v1",
    input_model=schemas.EvaluateAnswerInput,
    output_model=schemas.EvaluateAnswerOutput,
    description="Gives feedback on an answer to an interview question.",
)


FLOWS: Dict[str, FlowDefinition] = {
    flow.name: flow
    for flow in (
        RECOMMEND_CAREER_PATHS,
        ANALYZE_SKILLS_GAP,
        SUGGEST_LEARNING_RESOURCES,
        GET_JOB_MARKET_INSIGHTS,
        GET_CURRICULUM_RECOMMENDATIONS,
        ASSESS_SKILLS,
        GENERATE_RESUME,
        GENERATE_INTERVIEW_QUESTIONS,
        EVALUATE_ANSWER,
    )
}


def get_flow(name: str) -> FlowDefinition:
    try:
        return FLOWS[name]
    except KeyError:
        raise KeyError(f"Unknown flow: {name}") from None
