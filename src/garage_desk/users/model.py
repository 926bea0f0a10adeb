from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Mitarbeiter- oder Firmenkonto, wie es das Backend liefert."""

    user_id: str
    email: str
    name: Optional[str]
    role: Role
    is_active: bool = True
    hourly_rate: Optional[float] = None

    @property
    def display_name(self) -> str:
        return self.name or self.email


@dataclass(frozen=True)
class UserRef:
    """Embedded user reference (``user``/``createdBy`` on other resources)."""

    user_id: str
    email: str
    name: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.name or self.email
