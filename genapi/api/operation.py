"""Operation Descriptor: one registered endpoint and the types it was registered with.

Invariants:
    - name fully matches the configured pattern (letters only by default)
    - path defaults to name.lower(); the full route is group.base_path + "/" + path
    - requires_auth, method, types and handler never change after registration
    - example_request / example_response exist only for documentation; handlers never see them
"""

import inspect
import re
import typing
from enum import Enum
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Generic, TypeVar, Union

from genapi.api.describe import describe_operation
from genapi.core.contracts import implements_request_contract
from genapi.core.errors import ConfigurationError
from genapi.core.examples import render_example, render_response_example, zero_value

if TYPE_CHECKING:
    from genapi.api.group import OperationGroup
    from genapi.api.pipeline import RequestPipeline

SessionT = TypeVar("SessionT")
ReqT = TypeVar("ReqT")
RespT = TypeVar("RespT")

Handler = Callable[..., Union[Any, Awaitable[Any]]]


class HttpMethod(str, Enum):
    """HTTP methods an operation can be bound to."""
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"

    @property
    def reads_query(self) -> bool:
        """Methods whose payload travels in the query string."""
        return self in (HttpMethod.GET, HttpMethod.DELETE)


def parse_method(method: "str | HttpMethod") -> HttpMethod:
    try:
        return HttpMethod(method.upper() if isinstance(method, str) else method)
    except ValueError:
        raise ConfigurationError(f"unknown method '{method}'") from None


def check_name(name: str, pattern: re.Pattern) -> None:
    if not isinstance(name, str) or not pattern.fullmatch(name):
        raise ConfigurationError(
            f"invalid operation name {name!r}: must match {pattern.pattern}",
        )


def resolve_path(name: str, path: str) -> str:
    path = (path or "").strip().lstrip("/")
    return path or name.lower()


def resolve_handler_types(
    handler: Handler,
    authenticated: bool,
    request_type: Any = None,
    response_type: Any = None,
) -> tuple[Any, Any]:
    """Read request/response types off the handler's annotations.

    Explicit types win; the request type is mandatory, the response type may
    stay unknown (None).
    """
    try:
        signature = inspect.signature(handler)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"handler {handler!r} has no inspectable signature") from e

    arity = 3 if authenticated else 2
    try:
        signature.bind(*([None] * arity))
    except TypeError as e:
        raise ConfigurationError(
            f"handler {getattr(handler, '__name__', handler)!r} must accept "
            f"{arity} positional arguments: {e}",
        ) from e

    if request_type is None or response_type is None:
        hints = _type_hints(handler)
        params = list(signature.parameters.values())
        if request_type is None and len(params) >= 2:
            request_type = hints.get(params[1].name)
        if response_type is None:
            response_type = hints.get("return")

    if request_type is None:
        raise ConfigurationError(
            f"cannot determine request type of {getattr(handler, '__name__', handler)!r}; "
            f"annotate its second parameter or pass request_type",
        )
    if not implements_request_contract(request_type):
        raise ConfigurationError(
            f"request type {getattr(request_type, '__name__', request_type)!r} "
            f"must implement sanitize() and validate_request()",
        )
    return request_type, response_type


def _type_hints(handler: Handler) -> dict[str, Any]:
    target = handler
    if not (inspect.isfunction(handler) or inspect.ismethod(handler)):
        target = getattr(handler, "__call__", handler)
    try:
        return typing.get_type_hints(target)
    except (NameError, TypeError):
        return {}


class Operation(Generic[SessionT, ReqT, RespT]):
    """A single registered endpoint, exclusively owned by its group."""

    def __init__(
        self,
        group: "OperationGroup[SessionT]",
        name: str,
        path: str,
        method: HttpMethod,
        description: str,
        handler: Handler,
        request_type: Any,
        response_type: Any,
        requires_auth: bool,
    ):
        self.group = group
        self.name = name
        self.path = path
        self.method = method
        self.description = description
        self.handler = handler
        self.request_type = request_type
        self.response_type = response_type
        self.requires_auth = requires_auth

        self.example_request: ReqT = zero_value(request_type)
        self.example_response: RespT = zero_value(response_type)
        self.pipeline: "RequestPipeline | None" = None

    @property
    def url(self) -> str:
        return f"{self.group.base_path}/{self.path}"

    @property
    def route_path(self) -> str:
        """Path bound on the parent router (without the parent's own prefix)."""
        return f"/{self.group.name}/{self.path}"

    def set_example_request(self, value: ReqT) -> "Operation[SessionT, ReqT, RespT]":
        self.example_request = value
        return self

    def set_example_response(self, value: RespT) -> "Operation[SessionT, ReqT, RespT]":
        self.example_response = value
        return self

    def request_format(self) -> str:
        return render_example(self.example_request)

    def response_format(self) -> str:
        return render_response_example(self.response_type, self.example_response)

    def get_description(self, language: str = "en") -> str:
        return describe_operation(self, language)

    def __str__(self) -> str:
        return self.get_description("en")

    def __repr__(self) -> str:
        auth = ", auth" if self.requires_auth else ""
        return f"<Operation {self.name} {self.method.value} {self.url}{auth}>"
