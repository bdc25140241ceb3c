from __future__ import annotations
from typing import Any, Dict, List, Optional
import logging
import time
import httpx
from tenacity import Retrying, stop_after_attempt, wait_exponential_jitter, retry_if_exception
from pydantic import ValidationError
from ollama import Client, ResponseError
from .base import ModelProvider, ChatRequest, ModelResponse, ModelError, ModelRetryable, ModelTimeout
from ...utils.data_uri import Attachment
from ...utils.json_payload import extract_json

logger = logging.getLogger(__name__)

RETRYABLE_STATUS = {408, 409, 429, 500, 502, 503, 504}

def _is_retryable(exc: BaseException) -> bool:
    if isinstance(exc, (httpx.ReadTimeout, httpx.ConnectTimeout, httpx.ConnectError, httpx.RemoteProtocolError)):
        return True
    if isinstance(exc, ResponseError):
        try:
            return int(getattr(exc, "status_code", 0)) in RETRYABLE_STATUS
        except (TypeError, ValueError):
            return False
    return isinstance(exc, ModelRetryable)

class OllamaProvider(ModelProvider):
    def __init__(self, host: str = "http://localhost:11434", request_timeout_s: float = 300, keep_alive: str = "5m", max_attempts: int = 1):
        self.client = Client(host=host, timeout=request_timeout_s)
        self.keep_alive = keep_alive
        self.host = host
        self.request_timeout_s = request_timeout_s
        self.max_attempts = max(1, int(max_attempts))

    def _process_messages(self, messages: List[Dict[str, Any]], attachments: Optional[List[Attachment]]) -> List[Dict[str, Any]]:
        # ollama takes raw base64 images on the message; text files are inlined, anything else is unsupported
        if not attachments: return messages
        images = []
        inline_text = []
        for attachment in attachments:
            if attachment.is_image:
                images.append(attachment.data)
            elif attachment.is_text:
                try:
                    inline_text.append(attachment.to_bytes().decode("utf-8"))
                except (UnicodeDecodeError, ValueError) as e:
                    raise ModelError(f"Failed to decode text attachment for Ollama: {e}")
            else:
                raise ModelError(f"Ollama provider cannot accept attachments of type {attachment.mime_type}")

        processed_messages = []
        attached = False
        for msg in messages:
            if msg.get("role") == "user" and not attached:
                processed_msg = msg.copy()
                if inline_text:
                    processed_msg["content"] = "\n\n".join([msg.get("content", ""), *inline_text])
                if images:
                    processed_msg["images"] = images
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
        options = dict(req.params or {})
        keep_alive = options.pop('keep_alive', self.keep_alive)

        custom_timeout = options.pop('timeout', self.request_timeout_s)
        client = Client(host=self.host, timeout=custom_timeout) if custom_timeout != self.request_timeout_s else self.client

        messages = self._process_messages(req.messages, req.attachments)
        # structured outputs: ollama accepts a json schema as the format
        output_format = req.schema.model_json_schema() if req.schema else None

        t0 = time.perf_counter()

        try:
            response = client.chat(
                model=req.model,
                messages=messages,
                options=options,
                format=output_format,
                keep_alive=keep_alive
            )
        except httpx.TimeoutException as e:
            raise ModelTimeout(f"Ollama timeout after {custom_timeout}s: {e}") from e
        except ResponseError as e:
            msg = str(e)
            if _is_retryable(e): raise ModelRetryable(msg) from e
            raise ModelError(msg) from e
        except Exception as e:
            raise ModelError(f"Ollama request failed: {e}") from e

        dt = time.perf_counter() - t0

        # the ollama client returns either a dict or a response object depending on version
        content = ""
        model_name = req.model
        raw_response_dict = {}

        if isinstance(response, dict):
            raw_response_dict = response
            if 'message' in response and isinstance(response.get('message'), dict):
                content = response['message'].get('content', '') or ''
            model_name = response.get('model', req.model)
        elif hasattr(response, 'message') and hasattr(response.message, 'content'):
            content = response.message.content or ''
            model_name = getattr(response, 'model', req.model)
            try:
                raw_response_dict = vars(response)
            except TypeError:
                raw_response_dict = {}
        else:
            raise ModelError(f"Received unexpected response structure from Ollama: {response}")

        meta = {"provider": "ollama", "model": model_name, "latency": dt}
        for key in ['total_duration', 'load_duration', 'prompt_eval_count', 'prompt_eval_duration', 'eval_count', 'eval_duration']:
            if key in raw_response_dict:
                meta[key] = raw_response_dict[key]

        parsed = None
        if req.schema and content:
            try:
                parsed = req.schema.model_validate_json(extract_json(content))
            except ValidationError as ve:
                meta["validation_error"] = f"Failed to validate JSON: {ve}. Raw content: {content[:500]}"
                logger.warning(f"Schema validation failed for model {model_name}: {ve}")

        return ModelResponse(content=content, raw=response, meta=meta, parsed=parsed)

    def health_check(self) -> bool:
        try:
            self.client.list()
            return True
        except Exception:
            return False
