"""
Generic flow endpoints.

Any registered flow can be run by name; the body is the flow's input object
(camelCase or snake_case keys) and the response is an ActionResult.
"""

import logging
from fastapi import APIRouter, Body, Depends, HTTPException
from typing import Any, Dict, List

from ..dependencies.services import get_actions
from ..models.common import FlowInfo
from pallavi.flows.actions import ActionResult, CareerActions
from pallavi.flows.definitions import FLOWS

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_model=List[FlowInfo])
async def list_flows():
    """List every flow with its input and output JSON schemas."""
    return [
        FlowInfo(
            name=flow.name,
            description=flow.description,
            prompt_ref=flow.prompt_ref,
            accepts_attachment=flow.attachment_field is not None,
            input_schema=flow.input_model.model_json_schema(),
            output_schema=flow.output_model.model_json_schema(),
        )
        for flow in FLOWS.values()
    ]


@router.post("/{flow_name}", response_model=ActionResult[Any])
async def run_flow(
    flow_name: str,
    payload: Dict[str, Any] = Body(...),
    actions: CareerActions = Depends(get_actions)
):
    """
    Run a flow through the action adapter.

    Input or model failures come back as `success: false` with an error
    message. Only an unknown flow name is an HTTP error.
    """
    if flow_name not in FLOWS:
        raise HTTPException(status_code=404, detail=f"Unknown flow: {flow_name}")

    logger.info(f"Flow request {flow_name} with fields {sorted(payload)}")
    result = await actions.run(flow_name, payload)
    if not result.success:
        logger.info(f"Flow {flow_name} returned failure: {result.error}")
    return result
