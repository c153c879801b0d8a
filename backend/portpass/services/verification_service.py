# Overview: Checks a scanned QR payload against the stored pass it claims to be.

"""
Pass Verification

decode_payload() only parses text; anyone can type a well-formed payload.
verify_pass() looks the pass number up in the store and compares the printed
fields with what was actually issued. Callers that need to admit someone
through the gate must use this, not the decoder.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ..records import PassRecord
from ..store import PassStore
from .qr_service import decode_payload


# decoded key -> PassRecord attribute
COMPARED_FIELDS = {
    "customer": "customer_name",
    "type": "pass_type",
    "valid": "valid_date",
}


@dataclass
class VerificationReport:
    authentic: bool
    pass_number: str | None
    decoded: dict
    record: PassRecord | None = None
    mismatches: list[str] = field(default_factory=list)
    reason: str | None = None

    def to_dict(self) -> dict:
        return {
            "authentic": self.authentic,
            "passNumber": self.pass_number,
            "data": self.decoded,
            "pass": self.record.to_dict() if self.record else None,
            "mismatches": self.mismatches,
            "reason": self.reason,
        }


def verify_pass(store: PassStore, text: str) -> VerificationReport:
    decoded = decode_payload(text)
    pass_number = decoded.get("pass") or decoded.get("passnumber") or decoded.get("passNumber")
    if not isinstance(pass_number, str) or not pass_number.strip():
        return VerificationReport(False, None, decoded, reason="No pass number in QR data")

    pass_number = pass_number.strip()
    record = store.get_pass_by_number(pass_number)
    if record is None:
        return VerificationReport(False, pass_number, decoded, reason="Pass not found")

    mismatches = [
        key
        for key, attr in COMPARED_FIELDS.items()
        if key in decoded and str(decoded[key]) != str(getattr(record, attr))
    ]
    if mismatches:
        return VerificationReport(
            False, pass_number, decoded, record, mismatches,
            reason="QR data does not match the issued pass",
        )
    return VerificationReport(True, pass_number, decoded, record)
