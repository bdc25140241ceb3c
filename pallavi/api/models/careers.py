"""
Request models for the career endpoints that read the stored profile.
"""

from pydantic import Field

from pallavi.flows.schemas import FlowModel


class CareerDetailsRequest(FlowModel):
    """Request for skills gap and learning resources for one career path."""
    career_path: str = Field(..., min_length=1, description="Career path chosen from the recommendations")

    model_config = {"json_schema_extra": {"example": {"careerPath": "Data Analyst"}}}


class CurriculumRequest(FlowModel):
    """Request for curriculum guidance towards the given career paths."""
    target_career_paths: str = Field(..., min_length=5, description="Please enter at least one target career.")

    model_config = {"json_schema_extra": {"example": {"targetCareerPaths": "Machine Learning Engineer"}}}
