"""Sample User Service: in-memory users and bearer sessions.

Invariants:
    - Session ids are 22-char URL-safe tokens from 16 random bytes
    - The session table is guarded by a lock; concurrent authenticate() calls only read
"""

import logging
import secrets
import threading
from dataclasses import dataclass

from starlette.requests import Request

from genapi.core.errors import ResourceNotFoundError
from genapi.sample.schemas import (
    ProfileRequest,
    ProfileResponse,
    Session,
    SigninRequest,
    SigninResponse,
)

logger = logging.getLogger(__name__)

SESSION_ID_BYTES = 16


@dataclass(frozen=True)
class User:
    id: int
    email: str
    password: str
    phone: str


DEFAULT_USERS = (
    User(id=1, email="john@gmail.com", password="123456", phone="11111111"),
    User(id=2, email="jim@gmail.com", password="123456", phone="22222222"),
)


class SessionNotFound(LookupError):
    pass


def gen_session_id() -> str:
    return secrets.token_urlsafe(SESSION_ID_BYTES)


class UserService:

    def __init__(self, users: tuple[User, ...] = DEFAULT_USERS):
        self._users = list(users)
        self._lock = threading.RLock()
        self._sessions: dict[str, Session] = {}

    def authenticate(self, _: Request, token: str) -> Session:
        with self._lock:
            session = self._sessions.get(token)
        if session is None:
            raise SessionNotFound("session not found")
        return session

    async def sign_in(self, _: Request, req: SigninRequest) -> SigninResponse:
        for user in self._users:
            if user.email == req.email and user.password == req.password:
                session_id = gen_session_id()
                with self._lock:
                    self._sessions[session_id] = Session(uid=user.id)
                logger.info(f"User {user.id} signed in")
                return SigninResponse(session_id=session_id)
        raise ResourceNotFoundError("User", req.email)

    async def profile(
        self, _: Request, req: ProfileRequest, session: Session,
    ) -> ProfileResponse:
        for user in self._users:
            if user.id == session.uid:
                return ProfileResponse(id=user.id, phone=user.phone, email=user.email)
        raise ResourceNotFoundError("User", str(session.uid))
