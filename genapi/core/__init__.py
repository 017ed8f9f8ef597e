"""Core Layer: contracts, classified errors, example synthesis, language strings.

Invariants:
    - No module in core/ imports from api/, infrastructure/ or sample/
    - No IO, no request handling
"""
