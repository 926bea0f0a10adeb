from __future__ import annotations

from typing import Protocol, Sequence

from .model import User


class UserRepository(Protocol):
    def list_all(self) -> Sequence[User]:
        raise NotImplementedError

    def update_hourly_rate(self, user_id: str, hourly_rate: float) -> None:
        raise NotImplementedError
