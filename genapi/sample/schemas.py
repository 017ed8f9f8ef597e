"""Sample Schemas: wire types for the user service (PascalCase JSON names).

Invariants:
    - SigninRequest.sanitize() strips surrounding whitespace from the email
    - SigninRequest.validate_request() rejects an empty email, then an empty password
    - Responses serialize by alias: {"SessionID": ...}, {"ID": ..., "Phone": ..., "Email": ...}
"""

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_pascal

from genapi.core.contracts import RequestModel


@dataclass(frozen=True)
class Session:
    uid: int


class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_pascal, populate_by_name=True)


class SigninRequest(_WireModel, RequestModel):
    email: str = ""
    password: str = ""

    def sanitize(self) -> "SigninRequest":
        return self.model_copy(update={"email": self.email.strip()})

    def validate_request(self) -> None:
        if not self.email:
            raise ValueError("email empty")
        if not self.password:
            raise ValueError("password empty")


class SigninResponse(_WireModel):
    session_id: str = Field("", alias="SessionID")


class ProfileRequest(_WireModel, RequestModel):
    pass


class ProfileResponse(_WireModel):
    id: int = Field(0, alias="ID")
    phone: str = ""
    email: str = ""
