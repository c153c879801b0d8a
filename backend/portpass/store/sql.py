# Overview: Flask-SQLAlchemy implementation of PassStore.

from __future__ import annotations

import threading
from contextlib import contextmanager

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError

from ..errors import StorageFailure
from ..extensions import db
from ..models import Staff, SessionToken, Transaction, Pass
from ..time_utils import utcnow
from .base import PassStore
from .memory import STAFF_FIELDS


class SqlAlchemyStore(PassStore):
    """
    Durable store on top of db.session.

    Outside unit_of_work() every write commits immediately. Inside it, writes
    are only flushed; the outermost block commits or rolls back. Nesting depth
    is tracked per thread because db.session is scoped per thread as well.
    """

    backend_name = "sql"

    def __init__(self, database=db):
        self.db = database
        self._local = threading.local()

    def _depth(self) -> int:
        return getattr(self._local, "depth", 0)

    @contextmanager
    def unit_of_work(self):
        self._local.depth = self._depth() + 1
        ok = False
        try:
            yield self
            ok = True
        finally:
            self._local.depth -= 1
            if self._local.depth == 0:
                if ok:
                    self._commit()
                else:
                    self.db.session.rollback()

    def _commit(self) -> None:
        try:
            self.db.session.commit()
        except IntegrityError as exc:
            self.db.session.rollback()
            raise StorageFailure("Integrity constraint violated") from exc

    def _write(self, row=None):
        session = self.db.session
        try:
            if row is not None:
                session.add(row)
            session.flush()
        except IntegrityError as exc:
            session.rollback()
            raise StorageFailure("Integrity constraint violated") from exc
        if self._depth() == 0:
            self._commit()
        return row

    # -- staff -------------------------------------------------------------

    def add_staff(self, *, username, password_hash, full_name, designation, department,
                  is_admin=False, is_active=True):
        now = utcnow()
        row = Staff(
            username=username,
            password_hash=password_hash,
            full_name=full_name,
            designation=designation,
            department=department,
            is_admin=bool(is_admin),
            is_active=bool(is_active),
            created_at=now,
            updated_at=now,
        )
        return self._write(row).to_record()

    def get_staff(self, staff_id):
        row = self.db.session.get(Staff, staff_id)
        return row.to_record() if row else None

    def get_staff_by_username(self, username):
        row = self.db.session.query(Staff).filter_by(username=username).first()
        return row.to_record() if row else None

    def list_staff(self, include_inactive=False):
        query = self.db.session.query(Staff)
        if not include_inactive:
            query = query.filter_by(is_active=True)
        return [row.to_record() for row in query.order_by(Staff.username).all()]

    def update_staff(self, staff_id, **changes):
        unknown = set(changes) - STAFF_FIELDS
        if unknown:
            raise StorageFailure(f"Unknown staff fields: {', '.join(sorted(unknown))}")
        row = self.db.session.get(Staff, staff_id)
        if row is None:
            raise StorageFailure("Staff member not found")
        for field, value in changes.items():
            setattr(row, field, value)
        row.updated_at = utcnow()
        return self._write(row).to_record()

    # -- transactions ------------------------------------------------------

    def add_transaction(self, *, payer_name, payer_email, payer_phone, total_amount, slip_filename):
        row = Transaction(
            payer_name=payer_name,
            payer_email=payer_email,
            payer_phone=payer_phone,
            total_amount=total_amount,
            slip_filename=slip_filename,
            created_at=utcnow(),
        )
        return self._write(row).to_record()

    def get_transaction(self, transaction_id):
        row = self.db.session.get(Transaction, transaction_id)
        return row.to_record() if row else None

    # -- passes ------------------------------------------------------------

    def add_pass(self, *, transaction_id, pass_number, customer_name, pass_type, id_number,
                 plate_number, valid_date, amount, qr_code, staff_id):
        next_seq = (self.db.session.query(func.max(Pass.seq)).scalar() or 0) + 1
        row = Pass(
            seq=next_seq,
            transaction_id=transaction_id,
            pass_number=pass_number,
            customer_name=customer_name,
            pass_type=pass_type,
            id_number=id_number,
            plate_number=plate_number,
            valid_date=valid_date,
            amount=amount,
            qr_code=qr_code,
            staff_id=staff_id,
            created_at=utcnow(),
        )
        return self._write(row).to_record()

    def get_pass_by_number(self, pass_number):
        row = self.db.session.query(Pass).filter_by(pass_number=pass_number).first()
        return row.to_record() if row else None

    def pass_number_exists(self, pass_number):
        query = self.db.session.query(Pass.id).filter_by(pass_number=pass_number)
        return self.db.session.query(query.exists()).scalar()

    def list_passes_for_transaction(self, transaction_id):
        rows = (
            self.db.session.query(Pass)
            .filter_by(transaction_id=transaction_id)
            .order_by(Pass.seq.asc())
            .all()
        )
        return [row.to_record() for row in rows]

    def recent_passes(self, limit):
        rows = self.db.session.query(Pass).order_by(Pass.seq.desc()).limit(limit).all()
        return [row.to_record() for row in rows]

    # -- sessions ----------------------------------------------------------

    def add_session(self, *, token_hash, staff_id, created_at, expires_at):
        row = SessionToken(
            token_hash=token_hash,
            staff_id=staff_id,
            created_at=created_at,
            expires_at=expires_at,
            is_revoked=False,
        )
        return self._write(row).to_record()

    def get_session(self, token_hash):
        row = self.db.session.query(SessionToken).filter_by(token_hash=token_hash).first()
        return row.to_record() if row else None

    def revoke_session(self, token_hash, *, reason, now):
        row = self.db.session.query(SessionToken).filter_by(
            token_hash=token_hash,
            is_revoked=False,
        ).first()
        if row is None:
            return False
        row.is_revoked = True
        row.revoked_at = now
        row.revoked_reason = reason
        self._write()
        return True

    def revoke_staff_sessions(self, staff_id, *, reason, now):
        rows = self.db.session.query(SessionToken).filter_by(
            staff_id=staff_id,
            is_revoked=False,
        ).all()
        for row in rows:
            row.is_revoked = True
            row.revoked_at = now
            row.revoked_reason = reason
        self._write()
        return len(rows)

    def delete_stale_sessions(self, *, now, created_before):
        deleted = self.db.session.query(SessionToken).filter(
            self.db.or_(
                SessionToken.expires_at < now,
                SessionToken.is_revoked.is_(True),
            ),
            SessionToken.created_at < created_before,
        ).delete(synchronize_session=False)
        self._write()
        return deleted
