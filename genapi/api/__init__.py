"""API Layer: operation groups, auth interception, request pipeline, documentation.

Invariants:
    - Routes are bound on FastAPI routers at registration time only
    - Every pipeline route writes exactly one response per call
"""
