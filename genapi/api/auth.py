"""Authentication Interceptor: bearer token in, resolved session out.

Invariants:
    - Runs only for operations registered with requires_auth
    - Missing header, or one not longer than the bearer prefix, is a 400 (TokenNotFoundError)
    - Any exception from the group's authenticate callback is a 401 carrying its message
    - The session travels to the handler inside an AuthenticatedCall, never via request state
"""

import inspect
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, TypeVar, Union

from starlette.concurrency import run_in_threadpool
from starlette.requests import Request

from genapi.core.dispatch_config import DispatchConfig
from genapi.core.errors import TokenNotFoundError, UnauthorizedError

logger = logging.getLogger(__name__)

SessionT = TypeVar("SessionT")

AuthFunc = Callable[[Request, str], Union[SessionT, Awaitable[SessionT]]]


@dataclass(frozen=True)
class AuthenticatedCall(Generic[SessionT]):
    """Outcome of a successful interception, handed straight to the pipeline."""
    session: SessionT
    token: str


def is_async_callable(fn: Any) -> bool:
    return inspect.iscoroutinefunction(fn) or inspect.iscoroutinefunction(
        getattr(fn, "__call__", None),
    )


async def call_maybe_async(fn: Callable[..., Any], *args: Any) -> Any:
    """Await coroutine functions; run plain callables in the threadpool.

    A plain callable that hands back an awaitable (a wrapper forwarding to an
    async service) has that awaitable awaited too.
    """
    if is_async_callable(fn):
        return await fn(*args)
    result = await run_in_threadpool(fn, *args)
    if inspect.isawaitable(result):
        result = await result
    return result


def extract_bearer_token(header: str | None, prefix: str = "Bearer ") -> str:
    """Token after the prefix, stripped. Raises TokenNotFoundError when absent."""
    if header is None or len(header) <= len(prefix):
        raise TokenNotFoundError()
    return header[len(prefix):].strip()


class BearerAuthInterceptor(Generic[SessionT]):
    """Resolves the Authorization header through a group's authenticate callback."""

    def __init__(self, authenticate: AuthFunc, config: DispatchConfig, group_name: str = ""):
        self.authenticate = authenticate
        self.config = config
        self.group_name = group_name

    async def intercept(self, request: Request) -> AuthenticatedCall[SessionT]:
        header = request.headers.get(self.config.auth_header)
        token = extract_bearer_token(header, self.config.bearer_prefix)
        try:
            session = await call_maybe_async(self.authenticate, request, token)
        except Exception as e:
            logger.info(
                f"Authentication rejected: {e}",
                extra={"group": self.group_name, "path": request.url.path},
            )
            raise UnauthorizedError(str(e) or "unauthorized") from e
        return AuthenticatedCall(session=session, token=token)
