from __future__ import annotations

from typing import Any, Optional, Sequence

from ..api.client import ApiClient
from ..core.exceptions import AuthenticationError
from ..users.http_repository import to_user
from ..users.model import User
from .repository import AuthGateway


class HttpAuthGateway(AuthGateway):
    def __init__(self, client: ApiClient):
        self._client = client

    def login(self, email: str, password: str) -> dict[str, Any]:
        return self._client.post("/auth/login", {"email": email, "password": password}) or {}

    def register(self, *, email: str, password: str, name: Optional[str], role: Optional[str]) -> dict[str, Any]:
        body = {"email": email, "password": password, "name": name, "role": role}
        return self._client.post("/auth/register", body) or {}

    def logout(self, access_token: str) -> None:
        self._client.post("/auth/logout", {"access_token": access_token})

    def list_workers(self) -> Sequence[User]:
        # The backend exposes the worker list as POST.
        return [to_user(r) for r in self._client.post("/auth/workers") or []]

    def verify_pin(self, *, pin: str, user_id: Optional[str]) -> User:
        data = self._client.post("/auth/verify-pin", {"pin": pin, "userId": user_id}) or {}
        if not data.get("user"):
            raise AuthenticationError("Ungültiger PIN")
        return to_user(data["user"])
