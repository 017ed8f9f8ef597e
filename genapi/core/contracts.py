"""Request Contract: what every request payload type must be able to do.

Invariants:
    - sanitize() is pure and total: returns a normalised copy, never raises
    - validate_request() runs exactly once per call, on the sanitized value
    - validate_request() signals failure by raising; the message reaches the caller

Design Decisions:
    - validate_request() rather than validate(): pydantic.BaseModel already owns
      a validate classmethod
"""

from typing import Protocol, runtime_checkable

from pydantic import BaseModel


@runtime_checkable
class Request(Protocol):
    """Sanitize-then-validate capability pair."""

    def sanitize(self) -> "Request": ...

    def validate_request(self) -> None: ...


class RequestModel(BaseModel):
    """Pydantic base for request payloads. Override either hook as needed."""

    def sanitize(self) -> "RequestModel":
        return self

    def validate_request(self) -> None:
        return None


def implements_request_contract(request_type: type) -> bool:
    """True when instances of request_type offer both contract methods."""
    return (
        callable(getattr(request_type, "sanitize", None))
        and callable(getattr(request_type, "validate_request", None))
    )
