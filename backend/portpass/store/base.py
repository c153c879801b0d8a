# Overview: Repository interface shared by every persistence backend.

"""
PassStore interface.

Services receive a store instance instead of reaching for module-level
state, so the same issuance and auth code runs against the in-memory
backend (tests, demos) and the SQLAlchemy backend (production).

All reads return immutable records from portpass.records. Writes made
inside unit_of_work() become visible together or not at all.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from datetime import datetime
from decimal import Decimal

from ..records import StaffRecord, TransactionRecord, PassRecord, SessionRecord


class PassStore(ABC):
    backend_name = "abstract"

    # -- unit of work ------------------------------------------------------

    @abstractmethod
    def unit_of_work(self) -> AbstractContextManager:
        """Group writes; commit on normal exit, roll back if the block raises."""

    # -- staff -------------------------------------------------------------

    @abstractmethod
    def add_staff(
        self,
        *,
        username: str,
        password_hash: str,
        full_name: str,
        designation: str,
        department: str,
        is_admin: bool = False,
        is_active: bool = True,
    ) -> StaffRecord: ...

    @abstractmethod
    def get_staff(self, staff_id: str) -> StaffRecord | None: ...

    @abstractmethod
    def get_staff_by_username(self, username: str) -> StaffRecord | None: ...

    @abstractmethod
    def list_staff(self, include_inactive: bool = False) -> list[StaffRecord]: ...

    @abstractmethod
    def update_staff(self, staff_id: str, **changes) -> StaffRecord:
        """Apply changes and bump updated_at. Raises StorageFailure if the staff member is missing."""

    # -- transactions ------------------------------------------------------

    @abstractmethod
    def add_transaction(
        self,
        *,
        payer_name: str,
        payer_email: str | None,
        payer_phone: str | None,
        total_amount: Decimal,
        slip_filename: str,
    ) -> TransactionRecord: ...

    @abstractmethod
    def get_transaction(self, transaction_id: str) -> TransactionRecord | None: ...

    # -- passes ------------------------------------------------------------

    @abstractmethod
    def add_pass(
        self,
        *,
        transaction_id: str,
        pass_number: str,
        customer_name: str,
        pass_type: str,
        id_number: str | None,
        plate_number: str | None,
        valid_date: str,
        amount: Decimal,
        qr_code: str,
        staff_id: str,
    ) -> PassRecord: ...

    @abstractmethod
    def get_pass_by_number(self, pass_number: str) -> PassRecord | None: ...

    def pass_number_exists(self, pass_number: str) -> bool:
        return self.get_pass_by_number(pass_number) is not None

    @abstractmethod
    def list_passes_for_transaction(self, transaction_id: str) -> list[PassRecord]:
        """Passes of one transaction in creation order."""

    @abstractmethod
    def recent_passes(self, limit: int) -> list[PassRecord]:
        """Most recently created passes, newest first."""

    # -- sessions ----------------------------------------------------------

    @abstractmethod
    def add_session(
        self,
        *,
        token_hash: str,
        staff_id: str,
        created_at: datetime,
        expires_at: datetime,
    ) -> SessionRecord: ...

    @abstractmethod
    def get_session(self, token_hash: str) -> SessionRecord | None: ...

    @abstractmethod
    def revoke_session(self, token_hash: str, *, reason: str, now: datetime) -> bool:
        """Returns False when no live session has this hash."""

    @abstractmethod
    def revoke_staff_sessions(self, staff_id: str, *, reason: str, now: datetime) -> int: ...

    @abstractmethod
    def delete_stale_sessions(self, *, now: datetime, created_before: datetime) -> int:
        """Delete sessions that are expired or revoked and were created before the cutoff."""
