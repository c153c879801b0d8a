from __future__ import annotations

import uuid

from ..extensions import db
from ..records import StaffRecord, SessionRecord


def _uuid() -> str:
    return str(uuid.uuid4())


class Staff(db.Model):
    """
    Staff accounts for authentication and attribution of issued passes.

    Accounts are never hard-deleted; disabling sets is_active=False so that
    passes keep a valid staff_id reference.
    """
    __tablename__ = "staff"

    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    username = db.Column(db.String(64), nullable=False, unique=True, index=True)

    # Bcrypt hashed password
    password_hash = db.Column(db.String(255), nullable=False)

    full_name = db.Column(db.String(255), nullable=False)
    designation = db.Column(db.String(255), nullable=False)
    department = db.Column(db.String(255), nullable=False)

    is_admin = db.Column(db.Boolean, nullable=False, default=False)
    is_active = db.Column(db.Boolean, nullable=False, default=True)

    created_at = db.Column(db.DateTime, nullable=False)
    updated_at = db.Column(db.DateTime, nullable=False)

    def to_record(self) -> StaffRecord:
        return StaffRecord(
            id=self.id,
            username=self.username,
            password_hash=self.password_hash,
            full_name=self.full_name,
            designation=self.designation,
            department=self.department,
            is_admin=bool(self.is_admin),
            is_active=bool(self.is_active),
            created_at=self.created_at,
            updated_at=self.updated_at,
        )


class SessionToken(db.Model):
    """
    Login sessions. Only the SHA-256 hash of the bearer token is stored.
    """
    __tablename__ = "session_tokens"
    __table_args__ = (
        db.Index("ix_session_tokens_staff", "staff_id"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    staff_id = db.Column(db.String(36), db.ForeignKey("staff.id"), nullable=False)
    token_hash = db.Column(db.String(64), nullable=False, unique=True, index=True)

    created_at = db.Column(db.DateTime, nullable=False)
    expires_at = db.Column(db.DateTime, nullable=False)

    is_revoked = db.Column(db.Boolean, nullable=False, default=False)
    revoked_at = db.Column(db.DateTime, nullable=True)
    revoked_reason = db.Column(db.String(255), nullable=True)

    def to_record(self) -> SessionRecord:
        return SessionRecord(
            token_hash=self.token_hash,
            staff_id=self.staff_id,
            created_at=self.created_at,
            expires_at=self.expires_at,
            is_revoked=bool(self.is_revoked),
            revoked_at=self.revoked_at,
            revoked_reason=self.revoked_reason,
        )
