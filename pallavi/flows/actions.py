"""
Error boundary between flows and the code that displays their results.

Every action returns an ActionResult and never raises: callers branch on
`success` instead of catching exceptions.
"""
import logging
from typing import Any, Awaitable, Callable, Generic, Optional, TypeVar

from pydantic import BaseModel, Field, model_validator

from . import schemas as s
from .career import CareerFlows
from .definitions import FLOWS
from .errors import FlowError, ModelInvocationError, UnknownError, ValidationError
from .flow import FlowInput

logger = logging.getLogger(__name__)

UNKNOWN_ERROR_MESSAGE = "An unknown error occurred."

T = TypeVar("T")


class ActionResult(BaseModel, Generic[T]):
    """Exactly one of `data` (on success) or `error` (on failure) is set."""
    success: bool = Field(..., description="Whether the flow completed")
    data: Optional[T] = Field(None, description="Flow output when successful")
    error: Optional[str] = Field(None, description="Human readable failure message")
    error_type: Optional[str] = Field(None, description="validation_error, model_error or unknown_error")

    @model_validator(mode="after")
    def _one_arm(self):
        if self.success:
            if self.data is None or self.error is not None or self.error_type is not None:
                raise ValueError("A successful result carries data and no error")
        elif not self.error or self.data is not None:
            raise ValueError("A failed result carries an error message and no data")
        return self

    @classmethod
    def ok(cls, data: T) -> "ActionResult[T]":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str, error_type: str = "unknown_error") -> "ActionResult[T]":
        return cls(success=False, error=error or UNKNOWN_ERROR_MESSAGE, error_type=error_type)


def _error_type(error: FlowError) -> str:
    if isinstance(error, ValidationError):
        return "validation_error"
    if isinstance(error, ModelInvocationError):
        return "model_error"
    return "unknown_error"


async def handle_flow(flow: Callable[[Any], Awaitable[T]], payload: Any) -> ActionResult[T]:
    try:
        data = await flow(payload)
        if data is None:
            raise ModelInvocationError("The flow returned no output", flow=getattr(flow, "__name__", None))
        return ActionResult.ok(data)
    except FlowError as e:
        logger.error(f"AI flow error ({e.flow or getattr(flow, '__name__', 'flow')}): {e.message}")
        return ActionResult.fail(e.message, _error_type(e))
    except Exception as e:
        error = UnknownError(UNKNOWN_ERROR_MESSAGE)
        logger.exception(f"Unexpected error in AI flow {getattr(flow, '__name__', 'flow')}: {e}")
        return ActionResult.fail(error.message, _error_type(error))


class CareerActions:
    """CareerFlows wrapped by handle_flow, one method per flow."""

    def __init__(self, flows: CareerFlows):
        self.flows = flows

    async def recommend_career_paths(self, payload: FlowInput) -> ActionResult[s.RecommendCareerPathsOutput]:
        return await handle_flow(self.flows.recommend_career_paths, payload)

    async def analyze_skills_gap(self, payload: FlowInput) -> ActionResult[s.SkillsGapAnalysisOutput]:
        return await handle_flow(self.flows.analyze_skills_gap, payload)

    async def suggest_learning_resources(self, payload: FlowInput) -> ActionResult[s.LearningResourcesOutput]:
        return await handle_flow(self.flows.suggest_learning_resources, payload)

    async def get_job_market_insights(self, payload: FlowInput) -> ActionResult[s.JobMarketInsightsOutput]:
        return await handle_flow(self.flows.get_job_market_insights, payload)

    async def get_curriculum_recommendations(self, payload: FlowInput) -> ActionResult[s.CurriculumGuidanceOutput]:
        return await handle_flow(self.flows.get_curriculum_recommendations, payload)

    async def assess_skills(self, payload: FlowInput) -> ActionResult[s.SkillAssessmentOutput]:
        return await handle_flow(self.flows.assess_skills, payload)

    async def generate_resume(self, payload: FlowInput) -> ActionResult[s.ResumeBuilderOutput]:
        return await handle_flow(self.flows.generate_resume, payload)

    async def generate_interview_questions(self, payload: FlowInput) -> ActionResult[s.MockInterviewOutput]:
        return await handle_flow(self.flows.generate_interview_questions, payload)

    async def evaluate_answer(self, payload: FlowInput) -> ActionResult[s.EvaluateAnswerOutput]:
        return await handle_flow(self.flows.evaluate_answer, payload)

    async def run(self, flow_name: str, payload: FlowInput) -> ActionResult[Any]:
        if flow_name not in FLOWS:
            return ActionResult.fail(f"Unknown flow: {flow_name}", "validation_error")
        return await getattr(self, flow_name)(payload)
