"""Operation Group: named set of operations sharing a path prefix, auth callback and error policy.

Invariants:
    - Operation names are unique per group; duplicates raise ConfigurationError
    - Names are checked before any route is bound
    - operations keeps registration order (documentation order)
    - One session type per group, shared by every authenticated operation
    - Registration happens before traffic and before the parent router is included
      into an app; nothing is removed afterwards, so no locking

Design Decisions:
    - Routes are bound on the parent (FastAPI app or APIRouter) with the group
      name as the first path segment, so the group stays live on a FastAPI app
    - register_operation/register_authenticated_operation also exist as module
      functions taking the group first
"""

import logging
from typing import Any, Callable, Generic, Iterator, TypeVar, Union

from fastapi import APIRouter, FastAPI
from starlette.requests import Request
from starlette.responses import Response

from genapi.api.auth import AuthFunc, BearerAuthInterceptor
from genapi.api.describe import describe_group
from genapi.api.operation import (
    Handler,
    HttpMethod,
    Operation,
    check_name,
    parse_method,
    resolve_handler_types,
    resolve_path,
)
from genapi.api.pipeline import RequestPipeline
from genapi.core.dispatch_config import DEFAULT_CONFIG, DispatchConfig
from genapi.core.errors import (
    ConfigurationError,
    ErrorConverter,
    default_convert_error,
    masking_convert_error,
)
from genapi.core.language_strings import Language

logger = logging.getLogger(__name__)

SessionT = TypeVar("SessionT")

Parent = Union[FastAPI, APIRouter]


class OperationGroup(Generic[SessionT]):
    """Collection of operations living under parent.prefix + "/" + name."""

    def __init__(
        self,
        name: str,
        parent: Parent,
        description: str,
        authenticate: AuthFunc | None = None,
        convert_error: ErrorConverter | None = None,
        config: DispatchConfig | None = None,
    ):
        name = (name or "").strip("/")
        if not name:
            raise ConfigurationError("operation group name must not be empty")
        self.config = config or DEFAULT_CONFIG
        if convert_error is None:
            convert_error = (
                masking_convert_error if self.config.mask_internal_errors
                else default_convert_error
            )

        self.name = name
        self.description = description
        self.parent = parent
        self.base_path = f"{getattr(parent, 'prefix', '')}/{name}"

        self.operations: list[Operation[SessionT, Any, Any]] = []
        self._operations_by_name: dict[str, Operation[SessionT, Any, Any]] = {}
        self._bound_routes: set[tuple[HttpMethod, str]] = set()

        self.authenticate = authenticate
        self.convert_error = convert_error
        self._interceptor: BearerAuthInterceptor[SessionT] | None = (
            BearerAuthInterceptor(authenticate, self.config, name)
            if authenticate is not None else None
        )

    # ─── Registration ────────────────────────────────────────────

    def register_operation(
        self,
        name: str,
        path: str,
        method: "str | HttpMethod",
        description: str,
        handler: Handler,
        *,
        request_type: Any = None,
        response_type: Any = None,
    ) -> Operation[SessionT, Any, Any]:
        """Register an operation whose handler takes (context, request)."""
        return self._register(
            name, path, method, description, handler,
            authenticated=False,
            request_type=request_type, response_type=response_type,
        )

    def register_authenticated_operation(
        self,
        name: str,
        path: str,
        method: "str | HttpMethod",
        description: str,
        handler: Handler,
        *,
        request_type: Any = None,
        response_type: Any = None,
    ) -> Operation[SessionT, Any, Any]:
        """Register an operation whose handler takes (context, request, session)."""
        return self._register(
            name, path, method, description, handler,
            authenticated=True,
            request_type=request_type, response_type=response_type,
        )

    def operation(
        self,
        name: str,
        *,
        method: "str | HttpMethod" = HttpMethod.POST,
        path: str = "",
        description: str = "",
        auth: bool = False,
        request_type: Any = None,
        response_type: Any = None,
    ) -> Callable[[Handler], Handler]:
        """Decorator form of register_operation / register_authenticated_operation."""
        def decorator(handler: Handler) -> Handler:
            register = (
                self.register_authenticated_operation if auth
                else self.register_operation
            )
            register(
                name, path, method, description or name, handler,
                request_type=request_type, response_type=response_type,
            )
            return handler
        return decorator

    def _register(
        self,
        name: str,
        path: str,
        method: "str | HttpMethod",
        description: str,
        handler: Handler,
        *,
        authenticated: bool,
        request_type: Any,
        response_type: Any,
    ) -> Operation[SessionT, Any, Any]:
        check_name(name, self.config.name_pattern)
        if name in self._operations_by_name:
            raise ConfigurationError(
                f"operation '{name}' already exists in group '{self.name}'",
            )
        http_method = parse_method(method)
        if authenticated and self._interceptor is None:
            raise ConfigurationError(
                f"group '{self.name}' has no authenticate callback; "
                f"cannot register authenticated operation '{name}'",
            )
        request_type, response_type = resolve_handler_types(
            handler, authenticated, request_type, response_type,
        )

        op: Operation[SessionT, Any, Any] = Operation(
            self, name, resolve_path(name, path), http_method, description,
            handler, request_type, response_type, authenticated,
        )
        if (op.method, op.path) in self._bound_routes:
            raise ConfigurationError(
                f"route {op.method.value} {op.url} already bound in group '{self.name}'",
            )
        op.pipeline = RequestPipeline(
            op, self.convert_error, self._interceptor if authenticated else None,
            masked=self.config.mask_internal_errors,
        )
        self._bind(op)

        self._bound_routes.add((op.method, op.path))
        self._operations_by_name[name] = op
        self.operations.append(op)
        logger.debug(
            f"Registered {op.method.value} {op.url}",
            extra={"operation": name, "group": self.name},
        )
        return op

    def _bind(self, op: Operation[SessionT, Any, Any]) -> None:
        pipeline = op.pipeline

        async def endpoint(request: Request) -> Response:
            return await pipeline.dispatch(request)

        endpoint.__name__ = f"{self.name}_{op.name}"
        self.parent.add_api_route(
            op.route_path,
            endpoint,
            methods=[op.method.value],
            name=f"{self.name}.{op.name}",
            summary=op.description,
            response_model=None,
        )

    # ─── Lookup ──────────────────────────────────────────────────

    def lookup(self, name: str) -> Operation[SessionT, Any, Any] | None:
        return self._operations_by_name.get(name)

    def must_lookup(self, name: str) -> Operation[SessionT, Any, Any]:
        op = self._operations_by_name.get(name)
        if op is None:
            raise ConfigurationError(f"operation '{name}' not found in group '{self.name}'")
        return op

    def __contains__(self, name: object) -> bool:
        return name in self._operations_by_name

    def __len__(self) -> int:
        return len(self.operations)

    def __iter__(self) -> Iterator[Operation[SessionT, Any, Any]]:
        return iter(self.operations)

    # ─── Documentation ───────────────────────────────────────────

    def describe(self, tab: str = "", language: "str | Language | None" = None) -> str:
        return describe_group(self, tab, language)

    def get_description(self) -> str:
        return self.describe()

    def __repr__(self) -> str:
        return f"<OperationGroup {self.name} {self.base_path} ({len(self.operations)} operations)>"


def register_operation(
    group: OperationGroup[SessionT],
    name: str,
    path: str,
    method: "str | HttpMethod",
    description: str,
    handler: Handler,
    **types: Any,
) -> Operation[SessionT, Any, Any]:
    return group.register_operation(name, path, method, description, handler, **types)


def register_authenticated_operation(
    group: OperationGroup[SessionT],
    name: str,
    path: str,
    method: "str | HttpMethod",
    description: str,
    handler: Handler,
    **types: Any,
) -> Operation[SessionT, Any, Any]:
    return group.register_authenticated_operation(
        name, path, method, description, handler, **types,
    )
