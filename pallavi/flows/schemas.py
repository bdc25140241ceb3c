"""
Input and output shapes for every flow.

Each model is the single declaration used for three things: validating the
caller's input before any model call, describing the expected output to the
model (the JSON schema, descriptions included, is rendered into the prompt),
and parsing the model's reply. Field names are snake_case in Python and
camelCase on the wire.
"""
from __future__ import annotations

import logging
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from ..utils.data_uri import parse_data_uri

logger = logging.getLogger(__name__)


class FlowModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _warn_out_of_range(value: float, low: float, high: float, field: str) -> float:
    # bounds are instructions to the model, not enforced here
    if value < low or value > high:
        logger.warning(f"Model returned {field}={value}, outside the declared range {low}-{high}; passing through")
    return value


# ============ Career path recommendation ============

class RecommendCareerPathsInput(FlowModel):
    skills: str = Field(..., min_length=5, description="A comma separated list of skills that the student possesses.")
    interests: str = Field(..., min_length=5, description="A comma separated list of interests that the student has.")

    model_config = ConfigDict(json_schema_extra={"example": {"skills": "Python, SQL", "interests": "Data, AI"}})


class CareerPath(FlowModel):
    path: str = Field(..., description="The name of the career path.")
    rating: float = Field(..., description="A rating of how good a fit this path is, from 1 (poor fit) to 5 (excellent fit).",
                          json_schema_extra={"minimum": 1, "maximum": 5})
    reasoning: str = Field(..., description="The reasoning behind this specific career path recommendation.")

    @field_validator("rating")
    @classmethod
    def _rating_range(cls, v: float) -> float:
        return _warn_out_of_range(v, 1, 5, "rating")


class RecommendCareerPathsOutput(FlowModel):
    career_paths: List[CareerPath] = Field(..., description="A list of at most 3 recommended career paths, best fit first.")
    summary: str = Field(..., description="A summary of the reasoning behind the career path recommendations.")


# ============ Skills gap analysis ============

class SkillsGapAnalysisInput(FlowModel):
    student_skills: str = Field(..., min_length=1, description="A list of skills that the student possesses.")
    career_path: str = Field(..., min_length=1, description="The desired career path for the student.")


class SkillsGapAnalysisOutput(FlowModel):
    skills_gap: str = Field(..., description="A description of the skills gap between the student skills and the skills required for the desired career path.")
    suggested_skills_to_learn: str = Field(..., description="A list of skills that the student should learn to bridge the skills gap.")


# ============ Learning resources ============

class LearningResourcesInput(FlowModel):
    skills_gap: str = Field(..., min_length=1, description="The gap between current skills and skills required for the target career path.")
    career_path: str = Field(..., min_length=1, description="The target career path.")


class LearningResourcesOutput(FlowModel):
    resources: List[str] = Field(..., description="A list of relevant online courses, workshops, and resources.")


# ============ Job market insights ============

class JobMarketInsightsInput(FlowModel):
    query: str = Field(..., min_length=10, description='A query describing the insights requested, e.g. "emerging tech jobs in Bangalore".')


class JobMarketInsightsOutput(FlowModel):
    insights: str = Field(..., description="Insights into emerging job roles and required skills in the Indian job market.")


# ============ Curriculum guidance ============

class CurriculumGuidanceInput(FlowModel):
    student_profile: str = Field(..., min_length=1, description="The student's profile, including their skills, interests, and career preferences.")
    target_career_paths: str = Field(..., min_length=5, description="The target career paths for which curriculum guidance is needed.")


class CurriculumGuidanceOutput(FlowModel):
    recommended_curriculum: str = Field(..., description="A list of recommended curriculum or educational tracks to achieve fluency in the target career paths.")


# ============ Skill assessment ============

class SkillAssessmentInput(FlowModel):
    questionnaire_answers: str = Field(..., min_length=20, description="The student's answers to the skill assessment questionnaire.")
    transcript_data_uri: Optional[str] = Field(
        None,
        description="The student's transcript, as a data URI with a MIME type and Base64 encoding: 'data:<mimetype>;base64,<encoded_data>'.",
    )

    @field_validator("transcript_data_uri")
    @classmethod
    def _check_data_uri(cls, v: Optional[str]) -> Optional[str]:
        if not v:
            return None
        parse_data_uri(v)
        return v


class SkillScore(FlowModel):
    skill: str = Field(..., description="The name of the skill.")
    score: float = Field(..., description="The proficiency score for the skill, from 1 (beginner) to 10 (expert).",
                         json_schema_extra={"minimum": 1, "maximum": 10})

    @field_validator("score")
    @classmethod
    def _score_range(cls, v: float) -> float:
        return _warn_out_of_range(v, 1, 10, "score")


class SkillAssessmentOutput(FlowModel):
    strengths: List[str] = Field(..., description="A list of the student's identified strengths.")
    weaknesses: List[str] = Field(..., description="A list of the student's identified weaknesses.")
    summary: str = Field(..., description="A brief summary of the skill assessment.")
    skill_scores: List[SkillScore] = Field(..., description="An array of 5-7 key skills and their proficiency scores (1-10).")


# ============ Resume builder ============

class ResumeBuilderInput(FlowModel):
    name: str = Field(..., min_length=2, max_length=50, description="The student's full name.")
    skills: str = Field(..., min_length=5, description="A comma-separated list of the student's skills.")
    interests: str = Field(..., min_length=5, description="A comma-separated list of the student's interests.")
    career_preferences: Optional[str] = Field(None, description="A brief description of the student's career preferences.")


class ResumeBuilderOutput(FlowModel):
    resume: str = Field(..., description="The generated resume content in Markdown format.")


# ============ Mock interview ============

class MockInterviewInput(FlowModel):
    career_path: str = Field(..., min_length=3, description="The career path for which to conduct a mock interview.")
    question_count: int = Field(3, ge=1, le=10, description="The number of interview questions to generate.")


class MockInterviewOutput(FlowModel):
    questions: List[str] = Field(..., description="A list of generated interview questions.")


class EvaluateAnswerInput(FlowModel):
    question: str = Field(..., min_length=1, description="The interview question that was asked.")
    answer: str = Field(..., min_length=1, description="The user's answer to the question.")


class EvaluateAnswerOutput(FlowModel):
    feedback: str = Field(..., description="Constructive feedback on the user's answer.")
