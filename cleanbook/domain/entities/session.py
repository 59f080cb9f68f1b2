from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class SessionKind(str, Enum):
    AUTHENTICATED = "authenticated"
    GUEST = "guest"
    NONE = "none"


@dataclass(frozen=True)
class Session:
    kind: SessionKind = SessionKind.NONE
    user_id: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.kind is SessionKind.AUTHENTICATED and bool(self.user_id)

    @classmethod
    def authenticated(cls, user_id: str) -> "Session":
        return cls(kind=SessionKind.AUTHENTICATED, user_id=user_id)

    @classmethod
    def guest(cls) -> "Session":
        return cls(kind=SessionKind.GUEST)
