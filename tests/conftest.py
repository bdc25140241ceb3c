import json
from typing import Any, Dict
from unittest.mock import Mock

import pytest

from pallavi.flows.actions import CareerActions
from pallavi.flows.career import CareerFlows
from pallavi.flows.orchestration import CareerOrchestrator
from pallavi.models.manager import ModelManager
from pallavi.models.providers.base import ModelResponse


CAREER_PATHS_REPLY = {
    "careerPaths": [
        {"path": "Data Analyst", "rating": 5, "reasoning": "Python and SQL are the core of the role."},
        {"path": "Machine Learning Engineer", "rating": 4, "reasoning": "Interest in AI with a Python base."},
        {"path": "Data Engineer", "rating": 3, "reasoning": "SQL transfers to pipeline work."},
    ],
    "summary": "Data focused roles match the profile best.",
}

SKILLS_GAP_REPLY = {
    "skillsGap": "Missing statistics and data visualisation experience.",
    "suggestedSkillsToLearn": "Statistics, Tableau, Pandas",
}

RESOURCES_REPLY = {"resources": ["NPTEL Statistics for Data Science", "Coursera Google Data Analytics"]}

ASSESSMENT_REPLY = {
    "strengths": ["Problem solving"],
    "weaknesses": ["Public speaking"],
    "summary": "Solid technical base.",
    "skillScores": [{"skill": "Python", "score": 7}, {"skill": "SQL", "score": 6}],
}


@pytest.fixture
def make_response():
    """Build a ModelResponse whose content is the JSON of `payload` (or the string itself)."""
    def _make(payload: Any, **meta) -> ModelResponse:
        content = payload if isinstance(payload, str) else json.dumps(payload)
        return ModelResponse(content=content, raw=None, meta={"provider": "test", **meta})
    return _make


@pytest.fixture
def scripted_manager(make_response):
    """
    A ModelManager stand-in that answers each task from `manager.replies`.
    A reply that is an exception instance is raised instead.
    """
    manager = Mock(spec=ModelManager)
    replies: Dict[str, Any] = {}

    def call(task, prompt_ref=None, variables=None, schema=None, attachments=None, **kwargs):
        reply = replies[task]
        if isinstance(reply, Exception):
            raise reply
        return make_response(reply)

    manager.call.side_effect = call
    manager.replies = replies
    return manager


@pytest.fixture
def flows(scripted_manager):
    return CareerFlows(scripted_manager)


@pytest.fixture
def actions(flows):
    return CareerActions(flows)


@pytest.fixture
def orchestrator(actions):
    return CareerOrchestrator(actions)


def calls_for(manager: Mock, task: str) -> int:
    return sum(1 for c in manager.call.call_args_list if c.kwargs.get("task") == task)


@pytest.fixture
def count_calls():
    return calls_for


@pytest.fixture
def sample_replies():
    """Well-formed model replies keyed by task name."""
    return {
        "recommend_career_paths": CAREER_PATHS_REPLY,
        "analyze_skills_gap": SKILLS_GAP_REPLY,
        "suggest_learning_resources": RESOURCES_REPLY,
        "assess_skills": ASSESSMENT_REPLY,
        "get_curriculum_recommendations": {"recommendedCurriculum": "B.Sc. Statistics with a data science minor."},
        "get_job_market_insights": {"insights": "Cloud and data roles are growing."},
        "generate_resume": {"resume": "# Alex Doe\n\n## Skills\nPython, SQL"},
        "generate_interview_questions": {"questions": ["Tell me about a project.", "Explain a JOIN.", "Why data?"]},
        "evaluate_answer": {"feedback": "Clear answer; add a concrete example."},
    }
