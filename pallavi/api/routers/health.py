"""
Health check endpoints for monitoring and diagnostics.
"""

import asyncio
import time
from fastapi import APIRouter, Depends

from ..models.common import HealthStatus
from ..dependencies.services import get_model_manager, get_profile_store
from pallavi import __version__
from pallavi.models.manager import ModelManager
from pallavi.profile import ProfileStore

router = APIRouter()

# Track server start time for uptime calculation
_server_start_time = time.time()


@router.get("/", response_model=HealthStatus)
async def health_check(
    store: ProfileStore = Depends(get_profile_store),
    model_manager: ModelManager = Depends(get_model_manager)
):
    """
    Basic health check endpoint. Does not contact the model providers;
    use /health/ready for that.
    """
    uptime = time.time() - _server_start_time

    dependencies = {
        "profile_store": "complete" if store.is_complete else "incomplete",
        "model_tasks": f"{len(model_manager.config['tasks'])} configured",
    }

    packaged = set(model_manager.prompts.available())
    dependencies["prompts"] = f"{len(packaged)} templates"
    for task, task_cfg in model_manager.config["tasks"].items():
        prompt_ref = task_cfg.get("prompt_ref")
        if prompt_ref and prompt_ref not in packaged:
            dependencies[f"prompt:{task}"] = f"missing {prompt_ref}"
    for task, stats in model_manager.get_stats().items():
        dependencies[f"task:{task}"] = f"{stats['successful_calls']}/{stats['total_calls']} calls succeeded"

    return HealthStatus(
        status="healthy",
        version=__version__,
        uptime=uptime,
        dependencies=dependencies
    )


@router.get("/ready")
async def readiness_check(model_manager: ModelManager = Depends(get_model_manager)):
    """
    Readiness probe. Returns ready only when every configured provider
    answers its health check.
    """
    providers = await asyncio.to_thread(model_manager.health_check)
    unavailable = [name for name, ok in providers.items() if not ok]
    if unavailable:
        return {"ready": False, "reason": f"Providers unavailable: {', '.join(unavailable)}", "providers": providers}
    return {"ready": True, "message": "Service ready to handle requests", "providers": providers}
