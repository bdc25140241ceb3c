"""
FastAPI dependencies for request processing.

Dependencies give endpoints the model manager, actions, orchestrator and
profile store created in the application lifespan.
"""
