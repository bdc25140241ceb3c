"""
FastAPI application layer for the Pallavi career guidance flows.

Every flow is reachable over HTTP through the action adapter, so responses
carry `success` plus either `data` or `error` rather than raising.
"""
