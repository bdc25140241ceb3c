"""
Pydantic models for API request/response schemas.

Flow inputs and outputs are reused as-is from `pallavi.flows.schemas`; the
models here cover requests that only exist at the HTTP boundary.
"""
