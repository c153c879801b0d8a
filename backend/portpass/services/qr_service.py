# Overview: QR payload text format for passes, its decoder, and PNG rendering.

"""
QR payload codec.

The text embedded in every printed QR code is:

    PASS:<no>|CUSTOMER:<name>|TYPE:<type>|VALID:<date>|AMOUNT:MVR <amt>|STAFF:<designation>|DATE:<m/d/yyyy>|STATUS:ACTIVE

Plain pipe-separated text scans cleanly on stock phone readers, which is why
it is not JSON.
"""

from __future__ import annotations

import base64
import json
from datetime import datetime
from decimal import Decimal
from io import BytesIO

import qrcode
from qrcode import constants

from ..time_utils import locale_date


FIELD_SEPARATOR = "|"
KEY_SEPARATOR = ":"
CURRENCY = "MVR"


def encode_payload(
    *,
    pass_number: str,
    customer_name: str,
    pass_type: str,
    valid_date: str,
    amount: Decimal,
    staff_designation: str,
    issued_on: datetime,
) -> str:
    fields = [
        ("PASS", pass_number),
        ("CUSTOMER", customer_name),
        ("TYPE", pass_type),
        ("VALID", valid_date),
        ("AMOUNT", f"{CURRENCY} {Decimal(amount):.2f}"),
        ("STAFF", staff_designation),
        ("DATE", locale_date(issued_on)),
        ("STATUS", "ACTIVE"),
    ]
    return FIELD_SEPARATOR.join(f"{key}{KEY_SEPARATOR}{value}" for key, value in fields)


def decode_payload(text: str) -> dict:
    """
    Parse scanned QR text. Never raises.

    - pipe form: KEY:VALUE segments split on the first ':', keys lower-cased
    - JSON object: returned as-is
    - anything else: {"passnumber": text}
    """
    text = "" if text is None else str(text)
    if FIELD_SEPARATOR in text:
        parsed = {}
        for segment in text.split(FIELD_SEPARATOR):
            key, _, value = segment.partition(KEY_SEPARATOR)
            key = key.strip()
            if key and value:
                parsed[key.lower()] = value
        return parsed

    try:
        parsed = json.loads(text)
    except ValueError:
        parsed = None
    if isinstance(parsed, dict):
        return parsed
    return {"passnumber": text}


def render_qr(text: str) -> str:
    """Render text as a PNG QR code and return it as a data URL."""
    qr = qrcode.QRCode(
        version=None,
        error_correction=constants.ERROR_CORRECT_M,
        box_size=8,
        border=4,
    )
    qr.add_data(text)
    qr.make(fit=True)

    image = qr.make_image(fill_color="black", back_color="white")
    buffer = BytesIO()
    image.save(buffer)
    encoded = base64.b64encode(buffer.getvalue()).decode("ascii")
    return f"data:image/png;base64,{encoded}"
