"""Service layer for admin, guest and member sign-in."""

from __future__ import annotations

import datetime
import hmac
import secrets
from typing import TYPE_CHECKING, Any, Optional, cast

from werkzeug.security import check_password_hash

from runbike.core.constants import OTP_COLLECTION, OTP_DIGITS
from runbike.core.session import utcnow
from runbike.errors import AuthError, NotFoundError
from runbike.store import RecordStore

if TYPE_CHECKING:
    from google.cloud.firestore_v1.base_document import DocumentSnapshot
    from google.cloud.firestore_v1.client import Client


class AuthService:
    """Credential checks. Sessions themselves are built by the caller."""

    @staticmethod
    def check_admin_password(expected: Optional[str], given: str) -> None:
        if not expected or not hmac.compare_digest(expected, given or ""):
            raise AuthError("Wrong admin password.")

    @staticmethod
    def generate_guest_code(db: Client, team_id: str, ttl_seconds: int) -> str:
        """Issue a fresh one-time code, replacing any earlier one."""
        code = f"{secrets.randbelow(10**OTP_DIGITS):0{OTP_DIGITS}d}"
        expires_at = utcnow() + datetime.timedelta(seconds=ttl_seconds)
        db.collection(OTP_COLLECTION).document(team_id).set(
            {"code": code, "expiresAt": expires_at.isoformat()}
        )
        return code

    @staticmethod
    def verify_guest_code(
        db: Client, team_id: str, code: str, now: Optional[datetime.datetime] = None
    ) -> None:
        doc = cast(
            "DocumentSnapshot", db.collection(OTP_COLLECTION).document(team_id).get()
        )
        data: dict[str, Any] = (doc.to_dict() or {}) if doc.exists else {}
        stored = data.get("code")
        expires_raw = data.get("expiresAt")
        if not stored or not expires_raw:
            raise AuthError("Invalid or expired code.")
        expires_at = datetime.datetime.fromisoformat(expires_raw)
        if (now or utcnow()) >= expires_at or not hmac.compare_digest(stored, code):
            raise AuthError("Invalid or expired code.")

    @staticmethod
    def verify_member(db: Client, team_id: str, person_id: str, password: str) -> None:
        try:
            data = RecordStore.get_person_data(db, team_id, person_id)
        except NotFoundError as e:
            raise AuthError("Sign-in failed: wrong member or password.") from e
        password_hash = data.get("passwordHash")
        if not password_hash or not check_password_hash(password_hash, password):
            raise AuthError("Sign-in failed: wrong member or password.")
