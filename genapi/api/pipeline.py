"""Request Pipeline: decode, sanitize, validate, (authenticate), invoke, respond.

Invariants:
    - Exactly one response per call: 200 with the encoded result, or the classified error
    - Decode and validation failures are 400 before the group's error converter is consulted
    - The handler never runs after a failed stage
    - An authenticated operation without an AuthenticatedCall is a 500 (wiring bug)
    - A sanitize() result that breaks the request contract is a 500, not a client error
    - Every failure is logged once, at warning (4xx) or error (5xx) level

Design Decisions:
    - GET/DELETE payloads come from the query string, other methods from a JSON body
    - Sequence-typed fields read every value of their query key, so ?tags=a is ["a"]
    - Sync handlers run in Starlette's threadpool, async handlers are awaited
"""

import dataclasses
import json
import logging
import typing
from typing import Any, Generic, TypeVar

from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel, PydanticUserError, TypeAdapter, ValidationError
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from genapi.api.auth import AuthenticatedCall, BearerAuthInterceptor, call_maybe_async
from genapi.api.error_handlers import request_extra, write_error
from genapi.api.operation import Operation
from genapi.core.errors import (
    ConfigurationError,
    ErrorConverter,
    GenApiError,
    InternalServerError,
    RequestDecodeError,
    RequestValidationFailed,
    ResponseSerializationError,
    SessionUnavailableError,
    classify_error,
    request_decode_error,
)
from genapi.core.examples import accepts_sequence

logger = logging.getLogger(__name__)

SessionT = TypeVar("SessionT")
ReqT = TypeVar("ReqT")
RespT = TypeVar("RespT")


class RequestPipeline(Generic[SessionT, ReqT, RespT]):
    """Per-operation request processor bound as the route's endpoint."""

    def __init__(
        self,
        operation: Operation[SessionT, ReqT, RespT],
        convert_error: ErrorConverter,
        interceptor: BearerAuthInterceptor[SessionT] | None = None,
        masked: bool = False,
    ):
        self.operation = operation
        self.convert_error = convert_error
        self.interceptor = interceptor
        self.masked = masked
        try:
            self._adapter: TypeAdapter[ReqT] = TypeAdapter(operation.request_type)
        except PydanticUserError as e:
            raise ConfigurationError(
                f"cannot decode into request type of {operation.name}: {e}",
            ) from e
        self._list_keys = sequence_query_keys(operation.request_type)

    async def dispatch(self, request: Request) -> Response:
        """Route entry point: interceptor (when required), then the pipeline."""
        call = None
        if self.interceptor is not None:
            try:
                call = await self.interceptor.intercept(request)
            except GenApiError as e:
                return self._fail(request, e)
        return await self.run(request, call)

    async def run(
        self, request: Request, call: AuthenticatedCall[SessionT] | None = None,
    ) -> Response:
        try:
            args = await self._prepare(request, call)
        except GenApiError as e:
            return self._fail(request, e, cause=e.__cause__)

        try:
            result = await call_maybe_async(self.operation.handler, *args)
        except Exception as e:
            error = classify_error(e, self.convert_error, self.masked)
            return self._fail(request, error, cause=e)

        try:
            return JSONResponse(status_code=200, content=jsonable_encoder(result))
        except (TypeError, ValueError) as e:
            return self._fail(request, ResponseSerializationError(str(e)), cause=e)

    async def _prepare(
        self, request: Request, call: AuthenticatedCall[SessionT] | None,
    ) -> list[Any]:
        """Decode, sanitize, validate and pick up the session. Raises GenApiError."""
        payload = await self._decode(request)
        try:
            sanitized = payload.sanitize()
        except Exception as e:
            raise InternalServerError(f"request sanitization failed: {e}") from e

        validate = getattr(sanitized, "validate_request", None)
        if not callable(validate):
            raise InternalServerError(
                f"sanitize() of {type(payload).__name__} returned "
                f"{type(sanitized).__name__}, which has no validate_request()",
            )
        try:
            validate()
        except Exception as e:
            raise RequestValidationFailed(str(e) or type(e).__name__) from e

        args: list[Any] = [request, sanitized]
        if self.operation.requires_auth:
            if call is None:
                raise SessionUnavailableError()
            args.append(call.session)
        return args

    async def _decode(self, request: Request) -> ReqT:
        if self.operation.method.reads_query:
            raw = query_payload(request, self._list_keys)
        else:
            body = await request.body()
            if not body.strip():
                raw = {}
            else:
                try:
                    raw = json.loads(body)
                except ValueError as e:
                    raise RequestDecodeError(f"malformed JSON payload: {e}") from e
        try:
            return self._adapter.validate_python(raw)
        except ValidationError as e:
            raise request_decode_error(e.errors(include_url=False)) from e

    def _fail(
        self, request: Request, error: GenApiError, cause: BaseException | None = None,
    ) -> Response:
        extra = {
            "operation": self.operation.name,
            "group": self.operation.group.name,
            **request_extra(request),
        }
        return write_error(error, extra, cause if error.http_status >= 500 else None, logger)


def sequence_query_keys(request_type: Any) -> frozenset[str]:
    """Query keys (field names and aliases) whose field accepts a sequence."""
    if isinstance(request_type, type) and issubclass(request_type, BaseModel):
        fields = [
            (name, info.annotation, info.alias)
            for name, info in request_type.model_fields.items()
        ]
    elif dataclasses.is_dataclass(request_type):
        hints = typing.get_type_hints(request_type)
        fields = [(f.name, hints.get(f.name), None) for f in dataclasses.fields(request_type)]
    else:
        return frozenset()

    keys: set[str] = set()
    for name, annotation, alias in fields:
        if accepts_sequence(annotation):
            keys.add(name)
            if alias:
                keys.add(alias)
    return frozenset(keys)


def query_payload(request: Request, list_keys: frozenset[str] = frozenset()) -> dict[str, Any]:
    """Query parameters as a dict.

    Keys in list_keys always map to a list; other keys map to their value, or
    to a list when repeated.
    """
    params = request.query_params
    raw: dict[str, Any] = {}
    for key in params.keys():
        values = params.getlist(key)
        raw[key] = values if key in list_keys or len(values) > 1 else values[0]
    return raw
