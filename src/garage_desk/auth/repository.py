from __future__ import annotations

from typing import Any, Optional, Protocol, Sequence

from ..users.model import User


class AuthGateway(Protocol):
    """Remote ``/auth/*`` endpoints."""

    def login(self, email: str, password: str) -> dict[str, Any]:
        raise NotImplementedError

    def register(self, *, email: str, password: str, name: Optional[str], role: Optional[str]) -> dict[str, Any]:
        raise NotImplementedError

    def logout(self, access_token: str) -> None:
        raise NotImplementedError

    def list_workers(self) -> Sequence[User]:
        raise NotImplementedError

    def verify_pin(self, *, pin: str, user_id: Optional[str]) -> User:
        raise NotImplementedError
