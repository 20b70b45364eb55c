"""Pydantic models for auth domain.

Stored records and the wire format use the portal's Portuguese field
names (nome, telefone); the models expose English attribute names and
accept either on input.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class User(BaseModel):
    """A registered account. Carries its password hash; never sent to clients.

    Stored fields are taken as written at registration; the email is not
    re-validated on read.
    """

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    id: int
    name: str = Field(..., alias="nome")
    email: str
    phone: str | None = Field(default=None, alias="telefone")
    password_hash: str = Field(default="", repr=False)
    role: Literal["user", "admin"] = "user"
    created_at: datetime | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


class Session(BaseModel):
    """An active login."""

    token: str = Field(..., description="Session token (opaque string)")
    user_id: int
    created_at: datetime
    expires_at: datetime


class UserIdentity(BaseModel):
    """Public-safe projection of a User.

    Only these four fields ever leave the service. Serialize with
    ``model_dump(by_alias=True)`` to get the wire names.
    """

    model_config = ConfigDict(frozen=True)

    id: int
    name: str = Field(..., serialization_alias="nome")
    email: str
    phone: str | None = Field(default=None, serialization_alias="telefone")

    @classmethod
    def from_user(cls, user: User) -> "UserIdentity":
        return cls(id=user.id, name=user.name, email=user.email, phone=user.phone)


class MeResponse(BaseModel):
    """Body of GET /auth/me."""

    user: UserIdentity | None = None


@dataclass(frozen=True)
class AuthResult:
    """Outcome of the strict auth guard. Both None for allowed anonymous requests."""

    session: Session | None
    user: User | None
