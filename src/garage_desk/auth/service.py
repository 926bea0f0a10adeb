from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..common.validators import require_non_empty, require_pin
from ..core.enums import Role
from ..core.exceptions import ApiError, AuthenticationError
from ..users.model import User
from .model import FirmLogin, SessionUser
from .repository import AuthGateway

logger = logging.getLogger(__name__)


class AuthService:
    """Use cases: firm login/logout, registration and worker PIN selection."""

    def __init__(self, gateway: AuthGateway):
        self._gateway = gateway

    def login(self, email: str, password: str) -> FirmLogin:
        email = require_non_empty(email, "Bitte E-Mail eingeben")
        if not password:
            raise AuthenticationError("Bitte Passwort eingeben")

        data = self._gateway.login(email, password)
        if not data:
            raise AuthenticationError("Keine Antwort vom Server erhalten")

        access_token = data.get("access_token")
        if not access_token:
            raise AuthenticationError("Kein Zugriffstoken erhalten")

        # The firm account only unlocks worker selection; the real role
        # comes with the worker picked afterwards.
        remote_user = data.get("user") or {}
        metadata = remote_user.get("user_metadata") or {}
        user = SessionUser(
            user_id=str(remote_user.get("id") or email),
            email=email,
            name=metadata.get("name") or email.split("@")[0],
            role=Role.WORKER,
        )
        return FirmLogin(access_token=access_token, user=user)

    def register(self, *, email: str, password: str, name: Optional[str] = None, role: Optional[str] = None) -> None:
        email = require_non_empty(email, "Bitte E-Mail eingeben")
        require_non_empty(password, "Bitte Passwort eingeben")
        self._gateway.register(email=email, password=password, name=name or None, role=role or None)

    def logout(self, access_token: Optional[str]) -> None:
        if not access_token:
            return
        try:
            self._gateway.logout(access_token)
        except ApiError as e:
            logger.info("Logout call failed, session cleared anyway: %s", e)

    def list_workers(self) -> Sequence[User]:
        return [w for w in self._gateway.list_workers() if w.is_active]

    def verify_pin(self, *, pin: str, worker_id: Optional[str]) -> SessionUser:
        pin = require_pin(pin)
        verified = self._gateway.verify_pin(pin=pin, user_id=worker_id)

        if worker_id and verified.user_id != worker_id:
            raise AuthenticationError("PIN stimmt nicht überein")

        return SessionUser(
            user_id=verified.user_id,
            email=verified.email,
            name=verified.name,
            role=verified.role,
        )
