from __future__ import annotations

import asyncio
import json
import logging
import time
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..models.manager import ModelManager
from ..models.providers.base import ModelError, ModelResponse
from ..utils.data_uri import Attachment, parse_data_uri
from ..utils.json_payload import extract_json
from .definitions import FlowDefinition
from .errors import ModelInvocationError, ValidationError

logger = logging.getLogger(__name__)

FlowInput = Union[BaseModel, Mapping[str, Any]]


def _error_details(e: PydanticValidationError) -> List[Dict[str, Any]]:
    return [
        {"loc": [str(p) for p in err["loc"]], "msg": err["msg"], "type": err["type"]}
        for err in e.errors(include_url=False)
    ]


def _summarize(details: List[Dict[str, Any]]) -> str:
    return "; ".join(f"{'.'.join(d['loc']) or 'input'}: {d['msg']}" for d in details)


class FlowPipeline:
    """
    Runs a FlowDefinition: validate input, render the prompt, call the model
    with the output schema, validate the reply.

    Nothing is retried or cached here. Each run is one provider call made on a
    worker thread so callers can await several flows at once.
    """

    def __init__(self, model_manager: ModelManager):
        self.model_manager = model_manager

    def validate_input(self, flow: FlowDefinition, payload: Optional[FlowInput]) -> BaseModel:
        if isinstance(payload, flow.input_model):
            return payload
        if isinstance(payload, BaseModel):
            payload = payload.model_dump()
        if not isinstance(payload, Mapping):
            raise ValidationError(f"Invalid input for {flow.name}: expected an object, got {type(payload).__name__}", flow=flow.name)
        try:
            return flow.input_model.model_validate(dict(payload))
        except PydanticValidationError as e:
            details = _error_details(e)
            raise ValidationError(f"Invalid input for {flow.name}: {_summarize(details)}", flow=flow.name, errors=details) from e

    def build_variables(self, flow: FlowDefinition, flow_input: BaseModel) -> Dict[str, Any]:
        variables = flow_input.model_dump()
        variables["output_schema"] = json.dumps(flow.output_model.model_json_schema(), indent=2)
        return variables

    def build_attachments(self, flow: FlowDefinition, flow_input: BaseModel) -> Optional[List[Attachment]]:
        if not flow.attachment_field:
            return None
        value = getattr(flow_input, flow.attachment_field, None)
        return [parse_data_uri(value)] if value else None

    def parse_output(self, flow: FlowDefinition, response: ModelResponse) -> BaseModel:
        if isinstance(response.parsed, flow.output_model):
            return response.parsed

        content = extract_json(response.content)
        if not content:
            raise ModelInvocationError(f"The model returned no output for {flow.name}", flow=flow.name)
        try:
            return flow.output_model.model_validate_json(content)
        except PydanticValidationError as e:
            details = _error_details(e)
            raise ValidationError(f"The model's reply for {flow.name} did not match the expected shape: {_summarize(details)}",
                                  flow=flow.name, errors=details) from e

    async def run(self, flow: FlowDefinition, payload: Optional[FlowInput]) -> BaseModel:
        flow_input = self.validate_input(flow, payload)
        variables = self.build_variables(flow, flow_input)
        attachments = self.build_attachments(flow, flow_input)

        logger.info(f"Running flow {flow.name} ({flow.prompt_ref})")
        start_time = time.perf_counter()
        try:
            response = await asyncio.to_thread(
                self.model_manager.call,
                task=flow.task,
                prompt_ref=flow.prompt_ref,
                variables=variables,
                schema=flow.output_model,
                attachments=attachments,
            )
        except ModelError as e:
            raise ModelInvocationError(f"The model call for {flow.name} failed: {e}", flow=flow.name) from e

        output = self.parse_output(flow, response)
        logger.info(f"Flow {flow.name} completed in {time.perf_counter() - start_time:.2f}s")
        return output
