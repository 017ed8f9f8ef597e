"""Sample Server: FastAPI app wiring the user service into the "usr" operation group.

Invariants:
    - Operations are registered on the router before it is included in the app
    - Routes: POST {api_prefix}/usr/login, GET {api_prefix}/usr/profile,
      GET {api_prefix}/description (plain text)
    - Logging configured once on startup via lifespan
"""

import logging
from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI
from fastapi.responses import PlainTextResponse

from genapi.api.error_handlers import register_error_handlers
from genapi.api.group import OperationGroup
from genapi.config import Settings, get_settings
from genapi.core.dispatch_config import DispatchConfig
from genapi.infrastructure.observability import setup_logging
from genapi.sample.schemas import Session
from genapi.sample.service import UserService

logger = logging.getLogger(__name__)


def register_operations(
    parent: APIRouter, service: UserService, config: DispatchConfig,
) -> OperationGroup[Session]:
    group: OperationGroup[Session] = OperationGroup(
        "usr", parent, "User", service.authenticate, config=config,
    )
    group.register_operation(
        "SignIn", "login", "POST", "login", service.sign_in,
    )
    group.register_authenticated_operation(
        "Profile", "", "GET", "get user profile", service.profile,
    )
    return group


def create_app(
    settings: Settings | None = None, service: UserService | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    config = DispatchConfig.from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(settings.log_level, settings.log_format)
        logger.info(f"Sample API started with {len(group)} operations")
        yield
        logger.info("Sample API shutting down")

    app = FastAPI(title="genapi sample", version="0.1.0", lifespan=lifespan)
    router = APIRouter(prefix=settings.api_prefix)
    group = register_operations(router, service or UserService(), config)

    @router.get("/description", response_class=PlainTextResponse)
    async def description() -> str:
        return group.describe()

    app.include_router(router)
    register_error_handlers(app)
    app.state.user_group = group
    return app
