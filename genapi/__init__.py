"""genapi: typed operation registration and request dispatch for FastAPI.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
    - Public entry point is genapi.api.group.OperationGroup
"""
