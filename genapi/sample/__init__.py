"""Sample Application: in-memory user store served through an operation group.

Invariants:
    - Illustrative consumer of genapi; nothing in genapi.api or genapi.core imports it
"""
