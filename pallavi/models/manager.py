from __future__ import annotations
from typing import Optional, Dict, Any, List, Type, Union
from pathlib import Path
from dataclasses import dataclass
from enum import Enum
import os
import yaml
import time
import logging
from contextlib import contextmanager

from pydantic import BaseModel

from .prompts import PromptManager, DEFAULT_PROMPTS_DIR
from .providers.base import ChatRequest, ModelResponse, ModelError, ModelTimeout
from .providers.ollama import OllamaProvider
from .providers.openai_sdk import OpenAIProvider
from ..utils.data_uri import Attachment

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parents[1] / "config" / "config.yaml"


class Provider(Enum):
    OLLAMA = "ollama"
    OPENAI = "openai"

@dataclass(frozen=True)
class TaskConfig:
    provider: str
    model: str
    params: Dict[str, Any]
    prompt_ref: Optional[str] #e.g. "career/recommend_paths@v1"
    timeout: Optional[float] = None


def default_config_path() -> Path:
    return Path(os.getenv("PALLAVI_CONFIG", DEFAULT_CONFIG_PATH))


def default_prompts_dir() -> Path:
    return Path(os.getenv("PALLAVI_PROMPTS_DIR", DEFAULT_PROMPTS_DIR))


class ModelManager:
    def __init__(self, config_path: Union[Path, str, None] = None, prompts_dir: Optional[Path] = None):
        self.config_path = Path(config_path) if config_path else default_config_path()
        self.config = self._load_config()
        self._providers = {}
        self._stats = {} #performance tracking

        self.prompts = PromptManager(prompts_dir or default_prompts_dir())

    def _load_config(self) -> Dict:
        if not self.config_path.exists():
            raise FileNotFoundError(f"Config not found: {self.config_path}")
        with open(self.config_path) as f:
            config = yaml.safe_load(f) or {}

        if 'providers' not in config:
            raise ValueError("Config missing 'providers'")
        if 'tasks' not in config:
            raise ValueError("Config missing 'tasks'")

        for task_name, task_cfg in config['tasks'].items():
            if 'provider' not in task_cfg:
                raise ValueError(f"Task '{task_name}' missing provider")
            if 'model' not in task_cfg:
                raise ValueError(f"Task '{task_name}' missing model")

            provider_name = task_cfg['provider']
            if provider_name not in config['providers']:
                raise ValueError(f"Task '{task_name}' references unknown provider '{provider_name}'")

        return config

    def task_config(self, task: str) -> TaskConfig:
        if task not in self.config["tasks"]:
            raise ValueError(f"Unknown task: {task}")
        task_cfg = self.config["tasks"][task]
        return TaskConfig(
            provider=task_cfg["provider"],
            model=task_cfg["model"],
            params=dict(task_cfg.get("params") or {}),
            prompt_ref=task_cfg.get("prompt_ref"),
            timeout=task_cfg.get("timeout"),
        )

    def _get_provider(self, provider_name: str):
        if provider_name in self._providers:
            return self._providers[provider_name]
        if provider_name not in self.config['providers']:
            raise ValueError(f"Unknown provider: {provider_name}")

        provider_cfg = self.config["providers"][provider_name]
        provider_type = provider_cfg["type"]
        settings = provider_cfg.get("settings") or {}

        if provider_type == Provider.OLLAMA.value:
            provider = OllamaProvider(**settings)
        elif provider_type == Provider.OPENAI.value:
            provider = OpenAIProvider(**settings)
        else:
            raise ValueError(f"Unknown provider type: {provider_type}")
        self._providers[provider_name] = provider
        logger.info(f"initialized provider: {provider_name}")
        return provider

    def call(self, task: str, prompt_ref: Optional[str], variables: Dict[str, Any], schema: Optional[Type[BaseModel]] = None,
             attachments: Optional[List[Attachment]] = None, **params_override) -> ModelResponse:
        start_time = time.perf_counter()

        task_cfg = self.task_config(task)
        prompt_ref = prompt_ref or task_cfg.prompt_ref
        if not prompt_ref:
            raise ValueError(f"Task '{task}' has no prompt_ref and none was given")
        rendered = self.prompts.render(prompt_ref, variables)

        params = {**task_cfg.params, **params_override}
        if task_cfg.timeout:
            # a timeout in params_override takes precedence
            params.setdefault("timeout", task_cfg.timeout)

        request = ChatRequest(
            model=task_cfg.model,
            messages=rendered,
            attachments=attachments,
            params=params,
            schema=schema
        )

        provider = self._get_provider(task_cfg.provider)
        try:
            response = provider.chat(request)
        except (ModelTimeout, ModelError):
            elapsed_ms = (time.perf_counter() - start_time) * 1000
            self._track_stats(task, elapsed_ms, success=False)
            raise

        elapsed_ms = (time.perf_counter() - start_time) * 1000
        self._track_stats(task, elapsed_ms, success=True)
        return response

    def _track_stats(self, task: str, latency_ms: float, success: bool):
        if task not in self._stats:
            self._stats[task] = {
                'total_calls': 0,
                'successful_calls': 0,
                'total_latency_ms': 0
            }

        stats = self._stats[task]
        stats['total_calls'] += 1
        if success:
            stats['successful_calls'] += 1
            stats['total_latency_ms'] += latency_ms

    def get_stats(self, task: Optional[str] = None) -> Dict:
        if task:
            return self._stats.get(task, {})
        return self._stats

    def health_check(self) -> Dict[str, bool]:
        """Checks every provider referenced by a task. Blocks on network calls."""
        results = {}
        for provider_name in sorted({cfg['provider'] for cfg in self.config['tasks'].values()}):
            try:
                results[provider_name] = self._get_provider(provider_name).health_check()
            except (ValueError, TypeError) as e:
                logger.error(f"Provider {provider_name} could not be initialized: {e}")
                results[provider_name] = False
        return results

    def cleanup(self):
        for name, provider in self._providers.items():
            if hasattr(provider, 'cleanup'):
                try:
                    provider.cleanup()
                    logger.info(f"Cleaned up provider: {name}")
                except Exception as e:
                    logger.error(f"Cleanup failed for {name}: {e}")

        self._providers.clear()

    @contextmanager
    def session(self):
        try:
            yield self
        finally:
            self.cleanup()
