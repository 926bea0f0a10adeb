from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import WorkSession


class WorkSessionRepository(Protocol):
    def get_active(self) -> Optional[WorkSession]:
        raise NotImplementedError

    def check_in(self) -> WorkSession:
        raise NotImplementedError

    def check_out(self) -> WorkSession:
        raise NotImplementedError

    def list_for_user(self, user_id: str) -> Sequence[WorkSession]:
        raise NotImplementedError

    def create_manual(self, *, check_in: datetime, check_out: datetime) -> WorkSession:
        raise NotImplementedError
