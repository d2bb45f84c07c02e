"""
test_routers_crm.py — Tests for CRM Router Endpoints

Tests company CRUD, notes, employees (admin-only delete), activities,
and dashboard stats through the HTTP layer.

Called by: pytest
Depends on: conftest.py (client, db_session, test_company, test_employee)
"""

from dfscrm.models import Activity, Company


# ── Companies ────────────────────────────────────────────────────────


class TestCompanyEndpoints:
    def test_list(self, client, test_company):
        resp = client.get("/api/companies")
        assert resp.status_code == 200
        [row] = resp.json()
        assert row["id"] == "co-acme"
        assert row["tags"] == ["commercial", "vinyl"]
        assert row["notes"] == []

    def test_get_missing_uses_error_envelope(self, client):
        resp = client.get("/api/companies/ghost")
        assert resp.status_code == 404
        assert resp.json()["error"]["code"] == "not_found"

    def test_create(self, client, db_session):
        resp = client.post("/api/companies", json={
            "name": "  New Fence LLC ",
            "tags": ["wood", "wood", " "],
        })
        assert resp.status_code == 201
        body = resp.json()
        assert body["name"] == "New Fence LLC"
        assert body["tags"] == ["wood"]
        assert db_session.get(Company, body["id"]) is not None

    def test_create_blank_name(self, client):
        resp = client.post("/api/companies", json={"name": "   "})
        assert resp.status_code == 422

    def test_update(self, client, test_company):
        resp = client.put(f"/api/companies/{test_company.id}", json={"city": "Dover", "is_customer": True})
        assert resp.status_code == 200
        assert resp.json()["city"] == "Dover"
        assert resp.json()["is_customer"] is True
        assert resp.json()["name"] == "Acme Fence Co"

    def test_update_null_name_422(self, client, test_company):
        resp = client.put(f"/api/companies/{test_company.id}", json={"name": None})
        assert resp.status_code == 422
        assert client.get(f"/api/companies/{test_company.id}").json()["name"] == "Acme Fence Co"

    def test_update_without_name_keeps_it(self, client, test_company):
        resp = client.put(f"/api/companies/{test_company.id}", json={"phone": None})
        assert resp.status_code == 200
        assert resp.json()["name"] == "Acme Fence Co"
        assert resp.json()["phone"] is None

    def test_add_note_defaults_author(self, client, test_company):
        client.post(f"/api/companies/{test_company.id}/notes", json={"text": "older"})
        resp = client.post(f"/api/companies/{test_company.id}/notes", json={"text": "newer"})
        assert resp.status_code == 201
        notes = resp.json()["notes"]
        assert [n["text"] for n in notes] == ["newer", "older"]
        assert notes[0]["author"] == "Jane Smith"

    def test_delete_cascades(self, client, db_session, test_activity):
        resp = client.delete("/api/companies/co-acme")
        assert resp.status_code == 200
        assert resp.json() == {"ok": True, "activities_removed": 1}
        assert db_session.query(Activity).count() == 0


# ── Employees ────────────────────────────────────────────────────────


class TestEmployeeEndpoints:
    def test_create_and_list(self, client):
        resp = client.post("/api/employees", json={"name": "Sam Seller", "role": "Sales"})
        assert resp.status_code == 201
        assert resp.json()["active"] is True
        names = [e["name"] for e in client.get("/api/employees").json()]
        assert names == ["Sam Seller"]

    def test_update(self, client, test_employee):
        resp = client.put(f"/api/employees/{test_employee.id}", json={"active": False})
        assert resp.status_code == 200
        assert resp.json()["active"] is False

    def test_update_null_fields_422(self, client, test_employee):
        assert client.put(f"/api/employees/{test_employee.id}", json={"name": None}).status_code == 422
        assert client.put(f"/api/employees/{test_employee.id}", json={"active": None}).status_code == 422

    def test_delete_requires_admin(self, client, test_employee):
        resp = client.delete(f"/api/employees/{test_employee.id}")
        assert resp.status_code == 403

    def test_delete_as_admin(self, client, test_employee, admin_user):
        from dfscrm.dependencies import require_user
        from dfscrm.main import app

        app.dependency_overrides[require_user] = lambda: admin_user
        resp = client.delete(f"/api/employees/{test_employee.id}")
        assert resp.status_code == 200


# ── Activities ───────────────────────────────────────────────────────


class TestActivityEndpoints:
    def test_create(self, client, test_company, test_employee):
        resp = client.post("/api/activities", json={
            "company_id": test_company.id,
            "employee_id": test_employee.id,
            "type": "call",
            "answered": True,
            "date": "2024-03-05",
        })
        assert resp.status_code == 201
        assert resp.json()["date"] == "2024-03-05"

    def test_create_unknown_company(self, client, test_employee):
        resp = client.post("/api/activities", json={
            "company_id": "ghost",
            "employee_id": test_employee.id,
            "type": "email",
            "date": "2024-03-05",
        })
        assert resp.status_code == 404

    def test_create_bad_type(self, client, test_company, test_employee):
        resp = client.post("/api/activities", json={
            "company_id": test_company.id,
            "employee_id": test_employee.id,
            "type": "fax",
            "date": "2024-03-05",
        })
        assert resp.status_code == 422

    def test_list_filters(self, client, test_activity):
        assert len(client.get("/api/activities", params={"company_id": "co-acme"}).json()) == 1
        assert client.get("/api/activities", params={"start": "2024-04-01"}).json() == []

    def test_update(self, client, test_activity):
        resp = client.put("/api/activities/act-1", json={"interested": True, "notes": "wants a quote"})
        assert resp.status_code == 200
        body = resp.json()
        assert body["interested"] is True
        assert body["answered"] is True
        assert body["notes"] == "wants a quote"
        assert body["date"] == "2024-03-05"

    def test_update_moves_pipeline_status(self, client, test_activity):
        assert client.get("/api/reports/pipeline").json()["by_status"]["contacted"] == 1
        client.put("/api/activities/act-1", json={"interested": True})
        by_status = client.get("/api/reports/pipeline").json()["by_status"]
        assert by_status["interested"] == 1
        assert by_status["contacted"] == 0

    def test_update_missing_404(self, client):
        resp = client.put("/api/activities/ghost", json={"type": "call"})
        assert resp.status_code == 404
        assert resp.json()["error"]["code"] == "not_found"

    def test_update_bad_values_422(self, client, test_activity):
        assert client.put("/api/activities/act-1", json={"type": "fax"}).status_code == 422
        assert client.put("/api/activities/act-1", json={"answered": None}).status_code == 422

    def test_delete(self, client, test_activity):
        assert client.delete("/api/activities/act-1").status_code == 200
        assert client.delete("/api/activities/act-1").status_code == 404


class TestDashboard:
    def test_stats(self, client, test_activity):
        resp = client.get("/api/stats")
        assert resp.status_code == 200
        assert resp.json()["total_companies"] == 1
        assert resp.json()["total_calls"] == 1
        assert resp.json()["contacted"] == 1


class TestAuth:
    def test_unauthenticated_is_401(self, client):
        from dfscrm.dependencies import require_user
        from dfscrm.main import app

        app.dependency_overrides.pop(require_user)
        resp = client.get("/api/companies")
        assert resp.status_code == 401

    def test_health_is_public(self, client):
        assert client.get("/health").json()["status"] == "ok"
