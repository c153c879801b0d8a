# Overview: Service-layer operations for login sessions; token minting, validation and revocation.

"""
Session Token Management

Anonymous --login--> Authenticated(staff_id) --logout/expiry--> Anonymous

- Cryptographically secure random tokens (32 bytes, hex)
- Only the SHA-256 hash of a token is stored
- Fixed absolute lifetime (SESSION_TTL_HOURS, 24h by default); no sliding renewal
- A session stops validating as soon as its staff account is disabled
"""

from __future__ import annotations

import hashlib
import secrets
from dataclasses import dataclass
from datetime import timedelta

from ..records import StaffRecord, SessionRecord
from ..store import PassStore
from ..time_utils import utcnow


DEFAULT_SESSION_TTL = timedelta(hours=24)
STALE_SESSION_RETENTION = timedelta(days=30)


@dataclass
class SessionContext:
    staff: StaffRecord
    session: SessionRecord


def generate_token() -> str:
    """64-character hex string sent to the client and never stored."""
    return secrets.token_hex(32)


def hash_token(token: str) -> str:
    """
    SHA-256 is enough here; tokens are high-entropy, unlike passwords.
    """
    return hashlib.sha256(token.encode('utf-8')).hexdigest()


def create_session(
    store: PassStore,
    staff_id: str,
    ttl: timedelta = DEFAULT_SESSION_TTL,
) -> tuple[SessionRecord, str]:
    """Returns (session_record, plaintext_token)."""
    token = generate_token()
    now = utcnow()
    session = store.add_session(
        token_hash=hash_token(token),
        staff_id=staff_id,
        created_at=now,
        expires_at=now + ttl,
    )
    return session, token


def validate_session(store: PassStore, token: str | None) -> SessionContext | None:
    """
    Resolve a token to its session and staff member.

    Returns None if the token is unknown, revoked or expired, or if the staff
    account no longer exists or has been disabled.
    """
    if not token:
        return None

    session = store.get_session(hash_token(token))
    if session is None or session.is_revoked:
        return None

    now = utcnow()
    if session.expires_at <= now:
        return None

    staff = store.get_staff(session.staff_id)
    if staff is None or not staff.is_active:
        store.revoke_session(session.token_hash, reason="Staff account unavailable", now=now)
        return None

    return SessionContext(staff=staff, session=session)


def revoke_session(store: PassStore, token: str, reason: str = "Staff logout") -> bool:
    return store.revoke_session(hash_token(token), reason=reason, now=utcnow())


def cleanup_sessions(store: PassStore, retention: timedelta = STALE_SESSION_RETENTION) -> int:
    """Delete expired or revoked sessions older than the retention window."""
    now = utcnow()
    return store.delete_stale_sessions(now=now, created_before=now - retention)
