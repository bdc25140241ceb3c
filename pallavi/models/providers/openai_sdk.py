from __future__ import annotations
from typing import Dict, Any, Optional, List
import logging
import time
from os import getenv
from pydantic import ValidationError

from openai import OpenAI
from openai import APIError, APITimeoutError, APIConnectionError
from tenacity import Retrying, stop_after_attempt, wait_exponential_jitter, retry_if_exception

from .base import ModelProvider, ChatRequest, ModelResponse, ModelError, ModelRetryable, ModelTimeout
from ...utils.data_uri import Attachment
from ...utils.json_payload import extract_json

logger = logging.getLogger(__name__)

RETRYABLE_STATUS = {408, 409, 429, 500, 502, 503, 504}

# Define retryable OpenAI exceptions
def _is_retryable(exc: BaseException) -> bool:
    if isinstance(exc, (APITimeoutError, APIConnectionError)):
        return True
    if isinstance(exc, APIError):
        if getattr(exc, 'status_code', None) in RETRYABLE_STATUS:
            return True
    if isinstance(exc, ModelRetryable):
        return True
    return False

class OpenAIProvider(ModelProvider):
    """
    Chat completions against any OpenAI compatible endpoint (OpenAI, OpenRouter,
    Gemini's OpenAI endpoint). `api_key_env` names the environment variable
    holding the key when `api_key` isn't given directly.
    """

    def __init__(self, base_url: Optional[str] = None, api_key: Optional[str] = None, api_key_env: str = "OPENAI_API_KEY",
                 default_headers: Optional[Dict[str, str]] = None, timeout: float = 60.0, max_attempts: int = 1, **kwargs):
        self.client = OpenAI(
            base_url=base_url,
            api_key=api_key or getenv(api_key_env),
            default_headers=default_headers or {},
            timeout=timeout,
            **kwargs
        )
        self.base_url = base_url
        self.timeout = timeout
        self.max_attempts = max(1, int(max_attempts))

    def _attachment_part(self, attachment: Attachment) -> Dict[str, Any]:
        if attachment.is_image:
            return {
                "type": "image_url",
                "image_url": {"url": attachment.to_data_uri(), "detail": "high"}
            }
        if attachment.is_text:
            try:
                text = attachment.to_bytes().decode("utf-8")
            except (UnicodeDecodeError, ValueError) as e:
                raise ModelError(f"Failed to decode text attachment for OpenAI: {e}")
            return {"type": "text", "text": text}
        return {
            "type": "file",
            "file": {"filename": "attachment", "file_data": attachment.to_data_uri()}
        }

    def _format_messages(self, messages: List[Dict[str, Any]], attachments: List[Attachment]) -> List[Dict[str, Any]]:
        """Attach files to the first user message - converts it to content array format"""
        if not attachments:
            return messages

        parts = [self._attachment_part(a) for a in attachments]

        processed_messages = []
        attached = False
        for msg in messages:
            if msg.get("role") == "user" and not attached:
                processed_msg = msg.copy()
                processed_msg["content"] = [{"type": "text", "text": msg.get("content", "")}, *parts]
                processed_messages.append(processed_msg)
                attached = True
            else:
                processed_messages.append(msg)

        return processed_messages

    def chat(self, req: ChatRequest) -> ModelResponse:
        retrying = Retrying(
            reraise=True,
            wait=wait_exponential_jitter(initial=0.5, max=4),
            stop=stop_after_attempt(self.max_attempts),
            retry=retry_if_exception(_is_retryable),
        )
        return retrying(self._chat_once, req)

    def _chat_once(self, req: ChatRequest) -> ModelResponse:
        params = dict(req.params or {})

        response_format = None
        if req.schema is not None:
            response_format = {
                "type": "json_schema",
                "json_schema": {
                    "name": req.schema.__name__,
                    "schema": req.schema.model_json_schema()
                }
            }

        messages = self._format_messages(req.messages, req.attachments or [])

        completion_params = {
            "model": req.model,
            "messages": messages,
            **params
        }

        if response_format:
            completion_params["response_format"] = response_format

        t0 = time.perf_counter()
        try:
            response = self.client.chat.completions.create(**completion_params)
        except APITimeoutError as e:
            raise ModelTimeout(f"OpenAI timeout: {e}") from e
        except APIError as e:
            msg = f"OpenAI API error: {e}"
            if _is_retryable(e):
                raise ModelRetryable(msg) from e
            raise ModelError(msg) from e
        except Exception as e:
            raise ModelError(f"OpenAI provider error: {e}") from e

        dt = time.perf_counter() - t0

        try:
            content = response.choices[0].message.content or ""
        except (IndexError, AttributeError, TypeError) as e:
            raise ModelError(f"Invalid response structure from OpenAI API: {e}") from e

        meta = {
            "provider": "openai",
            "model": getattr(response, 'model', req.model),
            "latency": dt,
            "base_url": self.base_url or "https://api.openai.com/v1",
            "timeout": self.timeout
        }

        usage = getattr(response, 'usage', None)
        if usage:
            try:
                meta["usage"] = usage.model_dump()
            except AttributeError:
                meta["usage"] = {
                    "prompt_tokens": getattr(usage, 'prompt_tokens', None),
                    "completion_tokens": getattr(usage, 'completion_tokens', None),
                    "total_tokens": getattr(usage, 'total_tokens', None)
                }

        meta["finish_reason"] = getattr(response.choices[0], 'finish_reason', None)
        if hasattr(response, 'id'):
            meta["id"] = response.id

        parsed = None
        if req.schema is not None and content:
            try:
                parsed = req.schema.model_validate_json(extract_json(content))
            except ValidationError as ve:
                # the caller decides whether a schema mismatch is fatal
                meta["validation_error"] = str(ve)
                logger.debug(f"Schema validation failed for {meta['model']}: {ve}")

        return ModelResponse(content=content, raw=response, meta=meta, parsed=parsed)

    def health_check(self) -> bool:
        """SYNCHRONOUS health check - blocks until complete"""
        try:
            _ = self.client.models.list()
            return True
        except Exception:
            return False
