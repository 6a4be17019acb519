"""Explicit session value passed to every action that needs a role."""

from __future__ import annotations

import datetime
from dataclasses import dataclass
from typing import Any, Optional

from runbike.core.constants import ROLE_ADMIN, ROLE_GUEST, ROLE_MEMBER
from runbike.errors import AuthError, ForbiddenError

ROLES = (ROLE_ADMIN, ROLE_GUEST, ROLE_MEMBER)


def utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


@dataclass(frozen=True)
class Session:
    """Who is acting and until when.

    Admins and guests (holders of an admin-issued one-time code) may act for
    any team member; members may only act for themselves.
    """

    role: str
    expires_at: datetime.datetime
    person_id: Optional[str] = None

    @classmethod
    def start(
        cls, role: str, ttl_seconds: int, person_id: Optional[str] = None
    ) -> Session:
        if role not in ROLES:
            raise ValueError(f"Unknown role: {role}")
        expires_at = utcnow() + datetime.timedelta(seconds=ttl_seconds)
        return cls(role=role, expires_at=expires_at, person_id=person_id)

    def is_expired(self, now: Optional[datetime.datetime] = None) -> bool:
        return (now or utcnow()) >= self.expires_at

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    def may_act_for(self, person_id: str) -> bool:
        if self.role in (ROLE_ADMIN, ROLE_GUEST):
            return True
        return self.person_id == person_id

    def require_person(self, person_id: str) -> None:
        """Raise unless this session may change records of ``person_id``."""
        if not self.may_act_for(person_id):
            raise ForbiddenError("Members can only change their own records.")

    def to_cookie(self) -> dict[str, Any]:
        return {
            "role": self.role,
            "expires_at": self.expires_at.isoformat(),
            "person_id": self.person_id,
        }

    @classmethod
    def from_cookie(cls, data: Optional[dict[str, Any]]) -> Optional[Session]:
        """Decode a cookie payload; malformed payloads yield no session."""
        if not data:
            return None
        try:
            expires_at = datetime.datetime.fromisoformat(data["expires_at"])
            role = data["role"]
        except (KeyError, TypeError, ValueError):
            return None
        if role not in ROLES:
            return None
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=datetime.timezone.utc)
        return cls(role=role, expires_at=expires_at, person_id=data.get("person_id"))


def require_session(
    session: Optional[Session], now: Optional[datetime.datetime] = None
) -> Session:
    """Return a live session or raise AuthError."""
    if session is None or session.is_expired(now):
        raise AuthError()
    return session
