from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class SessionUser:
    """What we store into the Flask session after firm login or PIN check."""

    user_id: str
    email: str
    name: Optional[str]
    role: Role

    def to_session(self) -> dict:
        return {"id": self.user_id, "email": self.email, "name": self.name, "role": self.role.value}

    @property
    def display_name(self) -> str:
        return self.name or self.email


@dataclass(frozen=True)
class FirmLogin:
    access_token: str
    user: SessionUser
