# Overview: Flask API routes for prices and QR checks; parses input and returns JSON responses.

# backend/portpass/routes/verify.py
"""
Public pass utilities.

/api/verify-qr only decodes the scanned text and echoes the fields back; it
never consults the store and always answers valid=true. Gate checks go
through /api/verify-pass, which compares the payload with the issued pass.
"""

from flask import Blueprint, request, jsonify

from ..errors import ValidationError
from ..extensions import get_store
from ..services import pricing, qr_service, verification_service
from ..decorators import require_auth
from ..time_utils import utcnow, to_utc_z


verify_bp = Blueprint("verify", __name__, url_prefix="/api")


def _qr_data() -> str:
    """Scanned text exactly as sent; only blank input is rejected."""
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        raise ValidationError("Invalid JSON payload")
    qr_data = data.get("qrData")
    if not isinstance(qr_data, str) or not qr_data.strip():
        raise ValidationError("QR data is required")
    return qr_data


@verify_bp.get("/pass-prices")
def pass_prices():
    return jsonify(pricing.price_table())


@verify_bp.post("/verify-qr")
def verify_qr():
    """Decode QR text for display."""
    return jsonify({
        "valid": True,
        "data": qr_service.decode_payload(_qr_data()),
        "verifiedAt": to_utc_z(utcnow()),
        "message": "Pass verified successfully",
    })


@verify_bp.post("/verify-pass")
@require_auth
def verify_pass():
    """Check QR text against the stored pass."""
    report = verification_service.verify_pass(get_store(), _qr_data())
    body = report.to_dict()
    body["verifiedAt"] = to_utc_z(utcnow())
    return jsonify(body)
