from __future__ import annotations
import re


def extract_json(model_response: str) -> str:
    """
    Extracts the JSON document from a model's response, unwrapping a markdown
    block if the model added one. Returns an empty string for empty responses.
    """
    text = (model_response or "").strip()
    if not text:
        return ""

    patterns = [
        r'```json\s*\n(.*?)```',  # Tagged json block
        r'```\s*\n(.*?)```',      # Generic code block
    ]
    for pattern in patterns:
        match = re.search(pattern, text, re.DOTALL)
        if match:
            return match.group(1).strip()

    # Prose around a bare object, e.g. "Here is the result: {...}"
    if not text.startswith(("{", "[")):
        start = text.find("{")
        end = text.rfind("}")
        if start != -1 and end > start:
            return text[start:end + 1]

    return text
