from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..users.model import UserRef


@dataclass(frozen=True)
class WorkSession:
    """Arbeitszeit-Block: Check-in bis Check-out.

    ``hours`` is computed by the backend once the session is closed.
    """

    session_id: str
    check_in: datetime
    check_out: Optional[datetime] = None
    hours: Optional[float] = None
    user: Optional[UserRef] = None

    @property
    def is_open(self) -> bool:
        return self.check_out is None
