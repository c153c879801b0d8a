# Overview: Plain record types returned by every PassStore backend, with JSON serializers.

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from .time_utils import to_utc_z


def format_amount(value: Decimal) -> str:
    """Render a currency amount with exactly two decimal places."""
    return f"{Decimal(value):.2f}"


@dataclass(frozen=True)
class StaffRecord:
    id: str
    username: str
    password_hash: str
    full_name: str
    designation: str
    department: str
    is_admin: bool
    is_active: bool
    created_at: datetime
    updated_at: datetime

    def summary(self) -> dict:
        """Public staff summary (never includes the password hash)."""
        return {
            "id": self.id,
            "username": self.username,
            "fullName": self.full_name,
            "designation": self.designation,
            "department": self.department,
            "isAdmin": self.is_admin,
        }

    def to_dict(self) -> dict:
        data = self.summary()
        data.update({
            "isActive": self.is_active,
            "createdAt": to_utc_z(self.created_at),
            "updatedAt": to_utc_z(self.updated_at),
        })
        return data


@dataclass(frozen=True)
class TransactionRecord:
    id: str
    payer_name: str
    payer_email: str | None
    payer_phone: str | None
    total_amount: Decimal
    slip_filename: str
    created_at: datetime

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "payerName": self.payer_name,
            "payerEmail": self.payer_email,
            "payerPhone": self.payer_phone,
            "totalAmount": format_amount(self.total_amount),
            "slipFilename": self.slip_filename,
            "createdAt": to_utc_z(self.created_at),
        }


@dataclass(frozen=True)
class PassRecord:
    id: str
    transaction_id: str
    pass_number: str
    customer_name: str
    pass_type: str
    id_number: str | None
    plate_number: str | None
    valid_date: str
    amount: Decimal
    qr_code: str
    staff_id: str
    created_at: datetime

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "transactionId": self.transaction_id,
            "passNumber": self.pass_number,
            "customerName": self.customer_name,
            "passType": self.pass_type,
            "idNumber": self.id_number,
            "plateNumber": self.plate_number,
            "validDate": self.valid_date,
            "amount": format_amount(self.amount),
            "qrCode": self.qr_code,
            "staffId": self.staff_id,
            "createdAt": to_utc_z(self.created_at),
        }


@dataclass(frozen=True)
class SessionRecord:
    """Server-held session state: token hash -> staff and expiry."""
    token_hash: str
    staff_id: str
    created_at: datetime
    expires_at: datetime
    is_revoked: bool = False
    revoked_at: datetime | None = None
    revoked_reason: str | None = None

    def to_dict(self) -> dict:
        return {
            "staffId": self.staff_id,
            "createdAt": to_utc_z(self.created_at),
            "expiresAt": to_utc_z(self.expires_at),
        }
