"""
FastAPI dependencies that hand the services built at startup to endpoints.
"""

from pallavi.flows.actions import CareerActions
from pallavi.flows.orchestration import CareerOrchestrator
from pallavi.models.manager import ModelManager
from pallavi.profile import ProfileStore


def _state():
    from ..main import app_state
    return app_state


def get_model_manager() -> ModelManager:
    """FastAPI dependency to get the model manager from app state."""
    return _state()["model_manager"]


def get_actions() -> CareerActions:
    return _state()["actions"]


def get_orchestrator() -> CareerOrchestrator:
    return _state()["orchestrator"]


def get_profile_store() -> ProfileStore:
    """FastAPI dependency to get the shared profile store."""
    return _state()["profile_store"]
