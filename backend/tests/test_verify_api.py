from datetime import datetime

import pytest

from conftest import daily_item, multipart, submission

from portpass.services.qr_service import encode_payload


SAMPLE = (
    "PASS:PP-2025-123456|CUSTOMER:John Doe|TYPE:daily|VALID:2025-08-03"
    "|AMOUNT:MVR 6.11|STAFF:Port Authority Staff|DATE:8/3/2025|STATUS:ACTIVE"
)


class TestVerifyQr:

    def test_decodes_pipe_payload(self, client, store):
        resp = client.post("/api/verify-qr", json={"qrData": SAMPLE})

        assert resp.status_code == 200
        body = resp.get_json()
        assert body["valid"] is True
        assert body["data"] == {
            "pass": "PP-2025-123456",
            "customer": "John Doe",
            "type": "daily",
            "valid": "2025-08-03",
            "amount": "MVR 6.11",
            "staff": "Port Authority Staff",
            "date": "8/3/2025",
            "status": "ACTIVE",
        }
        assert body["verifiedAt"].endswith("Z")

    def test_plain_text_is_treated_as_pass_number(self, client, store):
        body = client.post("/api/verify-qr", json={"qrData": "PP-2025-12345607"}).get_json()

        assert body["valid"] is True
        assert body["data"] == {"passnumber": "PP-2025-12345607"}

    def test_qr_data_required(self, client, store):
        resp = client.post("/api/verify-qr", json={})

        assert resp.status_code == 400
        assert resp.get_json() == {"message": "QR data is required"}

    def test_blank_qr_data(self, client, store):
        resp = client.post("/api/verify-qr", json={"qrData": "   "})

        assert resp.status_code == 400
        assert resp.get_json() == {"message": "QR data is required"}

    @pytest.mark.parametrize("payload", [["x"], "PP-2025-12345607"])
    def test_non_object_body(self, client, store, payload):
        resp = client.post("/api/verify-qr", json=payload)

        assert resp.status_code == 400
        assert resp.get_json() == {"message": "Invalid JSON payload"}

    def test_scanned_text_echoed_unchanged(self, client, store):
        body = client.post("/api/verify-qr", json={"qrData": " PP-2025-12345607\n"}).get_json()

        assert body["data"] == {"passnumber": " PP-2025-12345607\n"}


class TestVerifyPass:

    def _issue(self, client, headers):
        resp = client.post(
            "/api/passes",
            data=multipart(submission(daily_item(name="Ahmed Ali"))),
            headers=headers,
            content_type="multipart/form-data",
        )
        return resp.get_json()["passes"][0]

    def _payload(self, issued, **overrides):
        fields = dict(
            pass_number=issued["passNumber"],
            customer_name=issued["customerName"],
            pass_type=issued["passType"],
            valid_date=issued["validDate"],
            amount=issued["amount"],
            staff_designation="Harbour Officer",
            issued_on=datetime(2025, 8, 3),
        )
        fields.update(overrides)
        return encode_payload(**fields)

    def test_issued_pass_is_authentic(self, client, clerk_headers):
        issued = self._issue(client, clerk_headers)

        resp = client.post("/api/verify-pass", json={"qrData": self._payload(issued)}, headers=clerk_headers)

        assert resp.status_code == 200
        body = resp.get_json()
        assert body["authentic"] is True
        assert body["pass"]["id"] == issued["id"]
        assert body["mismatches"] == []

    def test_tampered_payload(self, client, clerk_headers):
        issued = self._issue(client, clerk_headers)
        forged = self._payload(issued, customer_name="Someone Else", pass_type="crane")

        body = client.post("/api/verify-pass", json={"qrData": forged}, headers=clerk_headers).get_json()

        assert body["authentic"] is False
        assert sorted(body["mismatches"]) == ["customer", "type"]

    def test_unknown_pass(self, client, clerk_headers):
        body = client.post("/api/verify-pass", json={"qrData": SAMPLE}, headers=clerk_headers).get_json()

        assert body["authentic"] is False
        assert body["reason"] == "Pass not found"
        assert body["pass"] is None

    def test_bare_pass_number(self, client, clerk_headers):
        issued = self._issue(client, clerk_headers)

        body = client.post(
            "/api/verify-pass", json={"qrData": issued["passNumber"]}, headers=clerk_headers
        ).get_json()

        assert body["authentic"] is True

    def test_non_object_body(self, client, clerk_headers):
        resp = client.post("/api/verify-pass", json=["x"], headers=clerk_headers)

        assert resp.status_code == 400
        assert resp.get_json() == {"message": "Invalid JSON payload"}
