import base64
from datetime import datetime
from decimal import Decimal

import pytest

from portpass.services.qr_service import decode_payload, encode_payload, render_qr


def _payload(**overrides):
    fields = dict(
        pass_number="PP-2025-12345607",
        customer_name="Ahmed Ali",
        pass_type="daily",
        valid_date="2025-08-03",
        amount=Decimal("6.11"),
        staff_designation="Harbour Officer",
        issued_on=datetime(2025, 8, 3, 9, 30),
    )
    fields.update(overrides)
    return encode_payload(**fields)


def test_encode_exact_text():
    assert _payload() == (
        "PASS:PP-2025-12345607|CUSTOMER:Ahmed Ali|TYPE:daily|VALID:2025-08-03"
        "|AMOUNT:MVR 6.11|STAFF:Harbour Officer|DATE:8/3/2025|STATUS:ACTIVE"
    )


def test_encode_formats_amount_to_two_places():
    assert "|AMOUNT:MVR 81.50|" in _payload(amount=Decimal("81.5"))


def test_round_trip_semantic_fields():
    decoded = decode_payload(_payload(pass_type="crane", amount=Decimal("81.51")))

    assert decoded["pass"] == "PP-2025-12345607"
    assert decoded["customer"] == "Ahmed Ali"
    assert decoded["type"] == "crane"
    assert decoded["valid"] == "2025-08-03"
    assert decoded["amount"] == "MVR 81.51"
    assert decoded["status"] == "ACTIVE"
    assert all(key == key.lower() for key in decoded)


def test_decode_splits_on_first_colon_only():
    decoded = decode_payload("PASS:PP-1|DATE:10:30")
    assert decoded == {"pass": "PP-1", "date": "10:30"}


def test_decode_skips_segments_without_key_or_value():
    decoded = decode_payload("PASS:PP-1|garbage|:orphan|EMPTY:")
    assert decoded == {"pass": "PP-1"}


@pytest.mark.parametrize("text", ["PP-2025-12345607", "hello world", "12345", "[1, 2]", ""])
def test_decode_plain_text_falls_back_to_pass_number(text):
    assert decode_payload(text) == {"passnumber": text}


def test_decode_json_object():
    assert decode_payload('{"passNumber": "PP-2025-1", "type": "daily"}') == {
        "passNumber": "PP-2025-1",
        "type": "daily",
    }


def test_render_qr_returns_png_data_url():
    url = render_qr(_payload())

    prefix = "data:image/png;base64,"
    assert url.startswith(prefix)
    assert base64.b64decode(url[len(prefix):]).startswith(b"\x89PNG")
