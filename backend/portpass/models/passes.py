from __future__ import annotations

from ..extensions import db
from ..records import TransactionRecord, PassRecord
from .staff import _uuid


class Transaction(db.Model):
    """
    One payer's batch submission. Immutable once written.

    total_amount always equals the sum of the amounts of its passes.
    """
    __tablename__ = "transactions"

    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    payer_name = db.Column(db.String(255), nullable=False)
    payer_email = db.Column(db.String(255), nullable=True)
    payer_phone = db.Column(db.String(64), nullable=True)
    total_amount = db.Column(db.Numeric(10, 2), nullable=False)
    slip_filename = db.Column(db.String(255), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False)

    passes = db.relationship("Pass", backref="transaction", lazy=True, order_by="Pass.seq")

    def to_record(self) -> TransactionRecord:
        return TransactionRecord(
            id=self.id,
            payer_name=self.payer_name,
            payer_email=self.payer_email,
            payer_phone=self.payer_phone,
            total_amount=self.total_amount,
            slip_filename=self.slip_filename,
            created_at=self.created_at,
        )


class Pass(db.Model):
    """
    A single port-access credential.

    daily passes carry id_number; vehicle and crane passes carry plate_number.
    pass_number is globally unique and never changes.
    """
    __tablename__ = "passes"
    __table_args__ = (
        db.Index("ix_passes_transaction", "transaction_id"),
        db.CheckConstraint("pass_type IN ('daily', 'vehicle', 'crane')", name="ck_passes_type"),
    )

    id = db.Column(db.String(36), primary_key=True, default=_uuid)

    # Insertion counter; created_at alone does not order passes minted in the same instant
    seq = db.Column(db.Integer, nullable=False, index=True)

    transaction_id = db.Column(db.String(36), db.ForeignKey("transactions.id"), nullable=False)
    pass_number = db.Column(db.String(32), nullable=False, unique=True, index=True)
    customer_name = db.Column(db.String(255), nullable=False)
    pass_type = db.Column(db.String(16), nullable=False)
    id_number = db.Column(db.String(64), nullable=True)
    plate_number = db.Column(db.String(64), nullable=True)
    valid_date = db.Column(db.String(32), nullable=False)
    amount = db.Column(db.Numeric(10, 2), nullable=False)
    qr_code = db.Column(db.Text, nullable=False)
    staff_id = db.Column(db.String(36), db.ForeignKey("staff.id"), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False)

    staff = db.relationship("Staff", backref=db.backref("issued_passes", lazy=True))

    def to_record(self) -> PassRecord:
        return PassRecord(
            id=self.id,
            transaction_id=self.transaction_id,
            pass_number=self.pass_number,
            customer_name=self.customer_name,
            pass_type=self.pass_type,
            id_number=self.id_number,
            plate_number=self.plate_number,
            valid_date=self.valid_date,
            amount=self.amount,
            qr_code=self.qr_code,
            staff_id=self.staff_id,
            created_at=self.created_at,
        )
