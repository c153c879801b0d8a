# Overview: Dict-backed PassStore used by tests and STORE_BACKEND=memory.

from __future__ import annotations

import threading
import uuid
from contextlib import contextmanager
from dataclasses import replace

from ..errors import StorageFailure
from ..records import StaffRecord, TransactionRecord, PassRecord, SessionRecord
from ..time_utils import utcnow
from .base import PassStore


STAFF_FIELDS = {"password_hash", "full_name", "designation", "department", "is_admin", "is_active"}


class MemoryStore(PassStore):
    """
    Process-local store.

    A re-entrant lock serializes writers; unit_of_work() holds it for the whole
    block and restores a snapshot of every collection if the block raises.
    """

    backend_name = "memory"

    def __init__(self):
        self._lock = threading.RLock()
        self._staff: dict[str, StaffRecord] = {}
        self._usernames: dict[str, str] = {}
        self._transactions: dict[str, TransactionRecord] = {}
        # dicts keep insertion order, which is creation order
        self._passes: dict[str, PassRecord] = {}
        self._pass_numbers: dict[str, str] = {}
        self._sessions: dict[str, SessionRecord] = {}

    def _snapshot(self) -> tuple:
        return (
            dict(self._staff),
            dict(self._usernames),
            dict(self._transactions),
            dict(self._passes),
            dict(self._pass_numbers),
            dict(self._sessions),
        )

    def _restore(self, snapshot: tuple) -> None:
        (
            self._staff,
            self._usernames,
            self._transactions,
            self._passes,
            self._pass_numbers,
            self._sessions,
        ) = snapshot

    @contextmanager
    def unit_of_work(self):
        with self._lock:
            snapshot = self._snapshot()
            try:
                yield self
            except BaseException:
                self._restore(snapshot)
                raise

    # -- staff -------------------------------------------------------------

    def add_staff(self, *, username, password_hash, full_name, designation, department,
                  is_admin=False, is_active=True) -> StaffRecord:
        with self._lock:
            if username in self._usernames:
                raise StorageFailure(f"Duplicate username: {username}")
            now = utcnow()
            staff = StaffRecord(
                id=str(uuid.uuid4()),
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
            self._staff[staff.id] = staff
            self._usernames[username] = staff.id
            return staff

    def get_staff(self, staff_id):
        return self._staff.get(staff_id)

    def get_staff_by_username(self, username):
        staff_id = self._usernames.get(username)
        return self._staff.get(staff_id) if staff_id else None

    def list_staff(self, include_inactive=False):
        staff = [s for s in self._staff.values() if include_inactive or s.is_active]
        return sorted(staff, key=lambda s: s.username)

    def update_staff(self, staff_id, **changes):
        unknown = set(changes) - STAFF_FIELDS
        if unknown:
            raise StorageFailure(f"Unknown staff fields: {', '.join(sorted(unknown))}")
        with self._lock:
            existing = self._staff.get(staff_id)
            if existing is None:
                raise StorageFailure("Staff member not found")
            updated = replace(existing, updated_at=utcnow(), **changes)
            self._staff[staff_id] = updated
            return updated

    # -- transactions ------------------------------------------------------

    def add_transaction(self, *, payer_name, payer_email, payer_phone, total_amount,
                        slip_filename) -> TransactionRecord:
        with self._lock:
            transaction = TransactionRecord(
                id=str(uuid.uuid4()),
                payer_name=payer_name,
                payer_email=payer_email,
                payer_phone=payer_phone,
                total_amount=total_amount,
                slip_filename=slip_filename,
                created_at=utcnow(),
            )
            self._transactions[transaction.id] = transaction
            return transaction

    def get_transaction(self, transaction_id):
        return self._transactions.get(transaction_id)

    # -- passes ------------------------------------------------------------

    def add_pass(self, *, transaction_id, pass_number, customer_name, pass_type, id_number,
                 plate_number, valid_date, amount, qr_code, staff_id) -> PassRecord:
        with self._lock:
            if transaction_id not in self._transactions:
                raise StorageFailure("Transaction not found")
            if pass_number in self._pass_numbers:
                raise StorageFailure(f"Duplicate pass number: {pass_number}")
            record = PassRecord(
                id=str(uuid.uuid4()),
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
            self._passes[record.id] = record
            self._pass_numbers[pass_number] = record.id
            return record

    def get_pass_by_number(self, pass_number):
        pass_id = self._pass_numbers.get(pass_number)
        return self._passes.get(pass_id) if pass_id else None

    def list_passes_for_transaction(self, transaction_id):
        return [p for p in self._passes.values() if p.transaction_id == transaction_id]

    def recent_passes(self, limit):
        newest_first = list(reversed(list(self._passes.values())))
        return newest_first[:limit]

    # -- sessions ----------------------------------------------------------

    def add_session(self, *, token_hash, staff_id, created_at, expires_at) -> SessionRecord:
        with self._lock:
            record = SessionRecord(
                token_hash=token_hash,
                staff_id=staff_id,
                created_at=created_at,
                expires_at=expires_at,
            )
            self._sessions[token_hash] = record
            return record

    def get_session(self, token_hash):
        return self._sessions.get(token_hash)

    def revoke_session(self, token_hash, *, reason, now):
        with self._lock:
            record = self._sessions.get(token_hash)
            if record is None or record.is_revoked:
                return False
            self._sessions[token_hash] = replace(
                record, is_revoked=True, revoked_at=now, revoked_reason=reason
            )
            return True

    def revoke_staff_sessions(self, staff_id, *, reason, now):
        count = 0
        with self._lock:
            for token_hash, record in list(self._sessions.items()):
                if record.staff_id == staff_id and not record.is_revoked:
                    self._sessions[token_hash] = replace(
                        record, is_revoked=True, revoked_at=now, revoked_reason=reason
                    )
                    count += 1
        return count

    def delete_stale_sessions(self, *, now, created_before):
        with self._lock:
            stale = [
                token_hash
                for token_hash, record in self._sessions.items()
                if (record.expires_at < now or record.is_revoked) and record.created_at < created_before
            ]
            for token_hash in stale:
                del self._sessions[token_hash]
            return len(stale)
