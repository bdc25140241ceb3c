from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Dict, Any, List, Tuple
import yaml
import jinja2
import logging

logger = logging.getLogger(__name__)

DEFAULT_PROMPTS_DIR = Path(__file__).parents[1] / "prompts"

SYSTEM_TEMPLATE = "system.j2"
USER_TEMPLATE = "user.j2"
CONFIG_FILE = "config.yaml"


def parse_ref(prompt_ref: str) -> Tuple[str, str]:
    """Split `career/recommend_paths@v1` into its name and version."""
    name, sep, version = (prompt_ref or "").rpartition("@")
    if not sep or not name or not version:
        raise ValueError(f"Invalid prompt reference: {prompt_ref}")
    return name, version


@dataclass(frozen=True)
class PromptConfig:
    name: str
    version: str
    system_template: str
    user_template: str
    description: Optional[str] = None
    stop_sequences: Optional[list[str]] = None
    #compiled once when the prompt is loaded
    system: Optional[jinja2.Template] = field(default=None, repr=False, compare=False)
    user: Optional[jinja2.Template] = field(default=None, repr=False, compare=False)

    @property
    def ref(self) -> str:
        return f"{self.name}@{self.version}"

    def to_messages(self, variables: Dict[str, Any]) -> List[Dict[str, str]]:
        return [
            {"role": "system", "content": self.system.render(**variables)},
            {"role": "user", "content": self.user.render(**variables)},
        ]


class PromptManager:
    """
    Loads versioned prompt templates laid out as `<name>/<version>/` directories
    holding `system.j2`, `user.j2` and an optional `config.yaml`, and renders
    them into chat messages. References look like `career/recommend_paths@v1`.
    """

    def __init__(self, prompts_dir: Path = DEFAULT_PROMPTS_DIR):
        self.prompts_dir = Path(prompts_dir)
        if not self.prompts_dir.is_dir():
            raise FileNotFoundError(f"Prompts dir not found: {self.prompts_dir}")

        #StrictUndefined still lets templates test `is defined`
        self.jinja_env = jinja2.Environment(
            undefined=jinja2.StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self._cache: Dict[str, PromptConfig] = {}

    def available(self) -> List[str]:
        """Every reference under prompts_dir that has a system template."""
        refs = []
        for system_path in self.prompts_dir.rglob(SYSTEM_TEMPLATE):
            version_dir = system_path.parent
            name = version_dir.parent.relative_to(self.prompts_dir).as_posix()
            if name != ".":
                refs.append(f"{name}@{version_dir.name}")
        return sorted(refs)

    def load_prompt(self, prompt_ref: str) -> PromptConfig:
        cached = self._cache.get(prompt_ref)
        if cached is not None:
            return cached

        name, version = parse_ref(prompt_ref)
        prompt_path = self.prompts_dir / name / version
        if not prompt_path.is_dir():
            raise FileNotFoundError(f"Prompt not found: {prompt_path}")

        settings = self._read_settings(prompt_path)
        system_source = self._read_template(prompt_path / SYSTEM_TEMPLATE)
        user_source = self._read_template(prompt_path / USER_TEMPLATE)

        try:
            system = self.jinja_env.from_string(system_source)
            user = self.jinja_env.from_string(user_source)
        except jinja2.TemplateSyntaxError as e:
            raise ValueError(f"Template syntax error in prompt {prompt_ref} (line {e.lineno}): {e.message}") from e

        config = PromptConfig(
            name=name,
            version=version,
            system_template=system_source,
            user_template=user_source,
            description=settings.get("description"),
            stop_sequences=settings.get("stop_sequences"),
            system=system,
            user=user,
        )
        self._cache[prompt_ref] = config
        logger.info(f"Loaded prompt: {prompt_ref}")
        return config

    def render(self, prompt_ref: str, variables: Dict[str, Any]) -> List[Dict[str, str]]:
        config = self.load_prompt(prompt_ref)
        try:
            messages = config.to_messages(variables)
        except jinja2.UndefinedError as e:
            raise ValueError(f"Missing required variable in prompt {prompt_ref}: {e}") from e

        logger.debug(f"Rendered {config.ref} from {sorted(variables)}: "
                     f"system={len(messages[0]['content'])} chars, user={len(messages[1]['content'])} chars")
        return messages

    @staticmethod
    def _read_settings(prompt_path: Path) -> dict:
        config_path = prompt_path / CONFIG_FILE
        if not config_path.exists():
            return {}
        return yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}

    @staticmethod
    def _read_template(template_path: Path) -> str:
        if not template_path.is_file():
            raise FileNotFoundError(f"Template file not found: {template_path}")
        return template_path.read_text(encoding="utf-8")

    def clear_cache(self):
        self._cache.clear()
        logger.info("Cleared prompt cache")
