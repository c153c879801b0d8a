import os
import re

from conftest import daily_item, multipart, submission, vehicle_item


PASS_NUMBER = re.compile(r"^PP-\d{4}-\d{8}$")


def _create(client, headers, body, **kwargs):
    return client.post(
        "/api/passes",
        data=multipart(body, **kwargs),
        headers=headers,
        content_type="multipart/form-data",
    )


class TestCreatePasses:

    def test_issue_two_passes(self, app, client, clerk, clerk_headers):
        resp = _create(client, clerk_headers, submission(daily_item(), vehicle_item()))

        assert resp.status_code == 201
        body = resp.get_json()
        transaction = body["transaction"]
        passes = body["passes"]

        assert transaction["payerName"] == "Aisha"
        assert transaction["payerEmail"] == "aisha@example.mv"
        assert transaction["totalAmount"] == "17.32"
        assert [p["amount"] for p in passes] == ["6.11", "11.21"]
        assert len({p["passNumber"] for p in passes}) == 2
        assert all(PASS_NUMBER.match(p["passNumber"]) for p in passes)
        assert all(p["transactionId"] == transaction["id"] for p in passes)
        assert all(p["staffId"] == clerk.id for p in passes)
        assert all(p["qrCode"].startswith("data:image/png;base64,") for p in passes)

        slip_path = os.path.join(app.config["SLIP_UPLOAD_DIR"], transaction["slipFilename"])
        assert os.path.exists(slip_path)

    def test_wrong_identifier_combination(self, client, clerk_headers):
        item = dict(vehicle_item(), idNumber="A1", plateNumber=None)

        resp = _create(client, clerk_headers, submission(item))

        assert resp.status_code == 400
        assert "plate number is required" in resp.get_json()["message"]

    def test_missing_slip(self, client, clerk_headers):
        resp = _create(client, clerk_headers, submission(daily_item()), slip=None)

        assert resp.status_code == 400
        assert resp.get_json() == {"message": "Bank transfer slip is required"}

    def test_wrong_slip_type(self, client, clerk_headers):
        resp = _create(
            client, clerk_headers, submission(daily_item()),
            slip=(b"GIF89a", "slip.gif", "image/gif"),
        )

        assert resp.status_code == 400
        assert resp.get_json()["message"].startswith("Invalid file type")

    def test_oversized_slip(self, app, client, clerk_headers):
        big = b"\xff\xd8" + b"0" * app.config["MAX_SLIP_BYTES"]

        resp = _create(client, clerk_headers, submission(daily_item()), slip=(big, "slip.jpg", "image/jpeg"))

        assert resp.status_code == 400
        assert resp.get_json()["message"].startswith("File too large")

    def test_data_must_be_json(self, client, clerk_headers):
        resp = client.post(
            "/api/passes",
            data={"data": "{not json"},
            headers=clerk_headers,
            content_type="multipart/form-data",
        )

        assert resp.status_code == 400
        assert resp.get_json() == {"message": "Submission data must be valid JSON"}

    def test_empty_pass_list(self, client, clerk_headers):
        resp = _create(client, clerk_headers, submission())

        assert resp.status_code == 400
        assert resp.get_json() == {"message": "At least one pass is required"}


class TestRecentPasses:

    def test_newest_first_default_five(self, client, clerk_headers):
        for i in range(3):
            _create(client, clerk_headers, submission(daily_item(name=f"First {i}")))
        _create(client, clerk_headers, submission(*[daily_item(name=f"Second {i}") for i in range(4)]))

        resp = client.get("/api/passes/recent", headers=clerk_headers)

        assert resp.status_code == 200
        names = [p["customerName"] for p in resp.get_json()]
        assert names == ["Second 3", "Second 2", "Second 1", "Second 0", "First 2"]

    def test_limit_param(self, client, clerk_headers):
        _create(client, clerk_headers, submission(daily_item(), daily_item(), daily_item()))

        resp = client.get("/api/passes/recent?limit=2", headers=clerk_headers)

        assert len(resp.get_json()) == 2

    def test_empty(self, client, clerk_headers):
        assert client.get("/api/passes/recent", headers=clerk_headers).get_json() == []


class TestTransactionLookup:

    def test_public_lookup(self, client, clerk_headers):
        created = _create(client, clerk_headers, submission(daily_item(), vehicle_item())).get_json()
        transaction_id = created["transaction"]["id"]

        anonymous = client.application.test_client()
        resp = anonymous.get(f"/api/passes/transaction/{transaction_id}")

        assert resp.status_code == 200
        body = resp.get_json()
        assert body["transaction"] == created["transaction"]
        assert [p["passNumber"] for p in body["passes"]] == [
            p["passNumber"] for p in created["passes"]
        ]

    def test_unknown_transaction(self, client, store):
        resp = client.get("/api/passes/transaction/does-not-exist")

        assert resp.status_code == 404
        assert resp.get_json() == {"message": "Transaction not found"}
