from __future__ import annotations

from typing import Any, Optional, Sequence

from ..api.client import ApiClient
from ..core.enums import Role
from .model import User, UserRef
from .repository import UserRepository


def to_role(value: Optional[str]) -> Role:
    try:
        return Role(value)
    except ValueError:
        return Role.WORKER


def to_user(r: dict[str, Any]) -> User:
    rate = r.get("hourlyRate")
    return User(
        user_id=str(r["id"]),
        email=r.get("email") or "",
        name=r.get("name"),
        role=to_role(r.get("role")),
        is_active=r.get("isActive", True) is not False,
        hourly_rate=float(rate) if rate is not None else None,
    )


def to_user_ref(r: Optional[dict[str, Any]]) -> Optional[UserRef]:
    if not r:
        return None
    return UserRef(user_id=str(r.get("id", "")), email=r.get("email") or "", name=r.get("name"))


class HttpUserRepository(UserRepository):
    def __init__(self, client: ApiClient):
        self._client = client

    def list_all(self) -> Sequence[User]:
        return [to_user(r) for r in self._client.get("/users") or []]

    def update_hourly_rate(self, user_id: str, hourly_rate: float) -> None:
        self._client.patch(f"/users/{user_id}", {"hourlyRate": hourly_rate})
