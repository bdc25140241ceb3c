"""Error taxonomy for flow invocations."""
from __future__ import annotations

from typing import Any, Dict, List, Optional


class FlowError(Exception):
    """Base for every error a flow raises. The message is safe to show a user."""

    def __init__(self, message: str, flow: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.flow = flow


class ValidationError(FlowError):
    """Input or output failed the flow's declared shape or bounds."""

    def __init__(self, message: str, flow: Optional[str] = None, errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message, flow)
        self.errors = errors or []


class ModelInvocationError(FlowError):
    """The upstream model call failed, timed out or returned nothing."""


class UnknownError(FlowError):
    """Anything else; reported with a generic message."""
