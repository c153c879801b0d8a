# Overview: Service-layer operations for pass issuance; validation, pricing, minting and atomic persistence.

"""
Pass Issuance

One submission = one payer + N pass items + one bank transfer slip.

FLOW:
1. validate_submission() normalizes the payer and items, raising
   ValidationError with the first rule that fails.
2. The slip is checked (UploadError) and written to the slip directory.
3. Inside a single unit of work: the Transaction is created with the summed
   price, then each item in input order gets a unique pass number, a QR
   payload naming the issuing staff member's designation, and a Pass row.

ATOMICITY: if anything fails after the slip is written, the unit of work
rolls back every row and the slip file is removed, so a failed submission
leaves nothing behind.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP

from werkzeug.datastructures import FileStorage

from ..errors import ValidationError
from ..records import TransactionRecord, PassRecord
from ..store import PassStore
from .identifier_service import mint_pass_number
from .pricing import PASS_TYPES, PLATE_PASS_TYPES, price_of
from .qr_service import encode_payload, render_qr
from .upload_service import check_slip, store_slip, discard_slip


logger = logging.getLogger(__name__)

DEFAULT_STAFF_DESIGNATION = "Port Authority Staff"
EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
CENTS = Decimal("0.01")


@dataclass(frozen=True)
class Payer:
    name: str
    email: str | None = None
    phone: str | None = None


@dataclass(frozen=True)
class PassItem:
    customer_name: str
    pass_type: str
    valid_date: str
    id_number: str | None = None
    plate_number: str | None = None


@dataclass(frozen=True)
class IssuanceResult:
    transaction: TransactionRecord
    passes: list[PassRecord]

    def to_dict(self) -> dict:
        return {
            "transaction": self.transaction.to_dict(),
            "passes": [p.to_dict() for p in self.passes],
        }


def _text(data: dict, key: str) -> str | None:
    """Stripped string value, or None when absent/blank."""
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{key} must be a string")
    value = value.strip()
    return value or None


def _parse_payer(raw) -> Payer:
    if not isinstance(raw, dict):
        raise ValidationError("Payer details are required")

    name = _text(raw, "name")
    if not name:
        raise ValidationError("Payer name is required")

    email = _text(raw, "email")
    if email is not None and not EMAIL_RE.match(email):
        raise ValidationError("Payer email is invalid")

    return Payer(name=name, email=email, phone=_text(raw, "phone"))


def _parse_item(raw, position: int) -> PassItem:
    if not isinstance(raw, dict):
        raise ValidationError(f"Pass {position}: invalid pass details")

    customer_name = _text(raw, "customerName")
    if not customer_name:
        raise ValidationError(f"Pass {position}: Customer name is required")

    pass_type = _text(raw, "passType")
    if pass_type not in PASS_TYPES:
        raise ValidationError(f"Pass {position}: Pass type must be one of: {', '.join(PASS_TYPES)}")

    valid_date = _text(raw, "validDate")
    if not valid_date:
        raise ValidationError(f"Pass {position}: Valid date is required")

    id_number = _text(raw, "idNumber")
    plate_number = _text(raw, "plateNumber")

    if pass_type == "daily":
        if not id_number:
            raise ValidationError(f"Pass {position}: ID number is required for Daily Pass")
        if plate_number:
            raise ValidationError(f"Pass {position}: Plate number is not allowed for Daily Pass")
    elif pass_type in PLATE_PASS_TYPES:
        if not plate_number:
            raise ValidationError(
                f"Pass {position}: Vehicle plate number is required for Vehicle/Crane passes"
            )
        if id_number:
            raise ValidationError(f"Pass {position}: ID number is only allowed for Daily Pass")

    return PassItem(
        customer_name=customer_name,
        pass_type=pass_type,
        valid_date=valid_date,
        id_number=id_number,
        plate_number=plate_number,
    )


def validate_submission(payer, items) -> tuple[Payer, list[PassItem]]:
    """Normalize a raw {payer, passes} submission. Raises ValidationError."""
    parsed_payer = _parse_payer(payer)

    if not isinstance(items, list) or not items:
        raise ValidationError("At least one pass is required")

    parsed_items = [_parse_item(raw, i) for i, raw in enumerate(items, start=1)]
    return parsed_payer, parsed_items


def total_for(items: list[PassItem]) -> Decimal:
    total = sum((price_of(item.pass_type) for item in items), Decimal("0"))
    return total.quantize(CENTS, rounding=ROUND_HALF_UP)


def issue_passes(
    store: PassStore,
    payer,
    items,
    slip: FileStorage | None,
    staff_id: str,
    *,
    slip_dir: str,
    max_slip_bytes: int,
    allowed_slip_types,
) -> IssuanceResult:
    """
    Issue every pass in a submission as one all-or-nothing operation.

    Raises ValidationError / UploadError before anything is written.
    """
    parsed_payer, parsed_items = validate_submission(payer, items)
    check_slip(slip, max_bytes=max_slip_bytes, allowed_types=allowed_slip_types)

    slip_filename = store_slip(slip, slip_dir)
    try:
        with store.unit_of_work():
            transaction = store.add_transaction(
                payer_name=parsed_payer.name,
                payer_email=parsed_payer.email,
                payer_phone=parsed_payer.phone,
                total_amount=total_for(parsed_items),
                slip_filename=slip_filename,
            )

            staff = store.get_staff(staff_id)
            designation = staff.designation if staff else DEFAULT_STAFF_DESIGNATION

            passes = []
            reserved = set()
            for item in parsed_items:
                pass_number = mint_pass_number(store, reserved)
                reserved.add(pass_number)
                amount = price_of(item.pass_type)
                payload = encode_payload(
                    pass_number=pass_number,
                    customer_name=item.customer_name,
                    pass_type=item.pass_type,
                    valid_date=item.valid_date,
                    amount=amount,
                    staff_designation=designation,
                    issued_on=datetime.now(),
                )
                passes.append(store.add_pass(
                    transaction_id=transaction.id,
                    pass_number=pass_number,
                    customer_name=item.customer_name,
                    pass_type=item.pass_type,
                    id_number=item.id_number,
                    plate_number=item.plate_number,
                    valid_date=item.valid_date,
                    amount=amount,
                    qr_code=render_qr(payload),
                    staff_id=staff_id,
                ))
    except Exception:
        discard_slip(slip_dir, slip_filename)
        raise

    logger.info(
        "Issued %d pass(es) in transaction %s (total %s) by staff %s",
        len(passes), transaction.id, transaction.total_amount, staff_id,
    )
    return IssuanceResult(transaction=transaction, passes=passes)
