from conftest import TEST_PASSWORD, make_staff


def _new_staff(**overrides):
    body = {
        "username": "fathmath",
        "password": "secret123",
        "fullName": "Fathmath Shifa",
        "designation": "Gate Clerk",
        "department": "Security",
        "isAdmin": False,
    }
    body.update(overrides)
    return body


class TestCreateStaff:

    def test_admin_creates_staff(self, client, admin_headers):
        resp = client.post("/api/admin/staff", json=_new_staff(), headers=admin_headers)

        assert resp.status_code == 201
        staff = resp.get_json()["staff"]
        assert staff["username"] == "fathmath"
        assert staff["designation"] == "Gate Clerk"
        assert staff["isAdmin"] is False
        assert "passwordHash" not in staff

        login = client.post(
            "/api/auth/login", json={"username": "fathmath", "password": "secret123"}
        )
        assert login.status_code == 200

    def test_username_taken(self, client, admin_headers, clerk):
        resp = client.post("/api/admin/staff", json=_new_staff(username="clerk"), headers=admin_headers)

        assert resp.status_code == 400
        assert resp.get_json() == {"message": "Username already exists"}

    def test_validation_error(self, client, admin_headers):
        resp = client.post("/api/admin/staff", json=_new_staff(password="123"), headers=admin_headers)

        assert resp.status_code == 400
        assert resp.get_json()["message"] == "Password must be at least 6 characters"

    def test_missing_body(self, client, admin_headers):
        resp = client.post("/api/admin/staff", data="not json", headers=admin_headers)

        assert resp.status_code == 400


class TestListStaff:

    def test_lists_active_staff_only(self, client, store, admin, clerk, admin_headers):
        retired = make_staff(store, "retired")
        store.update_staff(retired.id, is_active=False)

        resp = client.get("/api/admin/staff", headers=admin_headers)

        assert resp.status_code == 200
        usernames = [s["username"] for s in resp.get_json()]
        assert usernames == ["chief", "clerk"]
        assert all("isActive" in s and "createdAt" in s for s in resp.get_json())

    def test_include_inactive(self, client, store, admin, admin_headers):
        retired = make_staff(store, "retired")
        store.update_staff(retired.id, is_active=False)

        resp = client.get("/api/admin/staff?include_inactive=true", headers=admin_headers)

        assert [s["username"] for s in resp.get_json()] == ["chief", "retired"]


class TestUpdateAndDeactivate:

    def test_patch_staff(self, client, clerk, admin_headers):
        resp = client.patch(
            f"/api/admin/staff/{clerk.id}",
            json={"designation": "Senior Officer", "isAdmin": True},
            headers=admin_headers,
        )

        assert resp.status_code == 200
        staff = resp.get_json()["staff"]
        assert staff["designation"] == "Senior Officer"
        assert staff["isAdmin"] is True

    def test_patch_unknown(self, client, admin_headers):
        resp = client.patch("/api/admin/staff/missing", json={"designation": "x"}, headers=admin_headers)

        assert resp.status_code == 404
        assert resp.get_json() == {"message": "Staff member not found"}

    def test_deactivate_blocks_login_and_sessions(self, client, clerk, clerk_headers, admin_headers):
        resp = client.delete(f"/api/admin/staff/{clerk.id}", headers=admin_headers)

        assert resp.status_code == 200
        assert resp.get_json()["staff"]["isActive"] is False
        assert client.get("/api/auth/me", headers=clerk_headers).status_code == 401
        login = client.post("/api/auth/login", json={"username": "clerk", "password": TEST_PASSWORD})
        assert login.status_code == 401

    def test_cannot_deactivate_self(self, client, admin, admin_headers):
        resp = client.delete(f"/api/admin/staff/{admin.id}", headers=admin_headers)

        assert resp.status_code == 400

    def test_cannot_demote_self(self, client, admin, admin_headers):
        resp = client.patch(f"/api/admin/staff/{admin.id}", json={"isAdmin": False}, headers=admin_headers)

        assert resp.status_code == 400

    def test_deactivate_unknown(self, client, admin_headers):
        assert client.delete("/api/admin/staff/missing", headers=admin_headers).status_code == 404
