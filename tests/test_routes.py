from estateledger_backend.models import (
    Expense,
    MaintenanceRequest,
    Notification,
    PasswordResetRequest,
    Payment,
    RentBill,
    Room,
    User,
    UtilityBill,
)
from estateledger_backend.services import bill_ledger, queries, reconciliation

UTILITY_PAYLOAD = {
    "billing_month_bs": "Baisakh 2081",
    "electricity": {"previous_reading": 100, "current_reading": 150, "rate_per_unit": 12},
    "water": {"previous_reading": 20, "current_reading": 60, "rate_per_unit": 5},
    "include_service_charge": True,
    "include_security_charge": True,
}


def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.get_json()["status"] == "ok"


class TestAuth:
    def test_login_returns_token_and_cookie(self, client, tenant):
        resp = client.post("/api/auth/login", json={"email": "SITA@example.com", "password": "secret123"})
        body = resp.get_json()
        assert resp.status_code == 200
        assert body["success"] is True
        assert body["token"]
        assert "token=" in resp.headers.get("Set-Cookie", "")

    def test_login_with_wrong_password(self, client, tenant):
        resp = client.post("/api/auth/login", json={"email": "sita@example.com", "password": "nope"})
        assert resp.status_code == 401
        assert resp.get_json() == {"success": False, "message": "Invalid credentials"}

    def test_missing_token_is_401(self, client):
        resp = client.get("/api/rent-bills")
        assert resp.status_code == 401
        assert resp.get_json()["success"] is False

    def test_garbage_token_is_401(self, client):
        resp = client.get("/api/rent-bills", headers={"Authorization": "Bearer not-a-jwt"})
        assert resp.status_code == 401

    def test_wrong_role_is_403(self, client, tenant, auth_headers):
        resp = client.get("/api/rent-bills", headers=auth_headers(tenant))
        assert resp.status_code == 403
        assert resp.get_json()["success"] is False

    def test_me(self, client, tenant, auth_headers):
        resp = client.get("/api/auth/me", headers=auth_headers(tenant))
        assert resp.status_code == 200
        assert resp.get_json()["data"]["email"] == "sita@example.com"

    def test_admin_registers_tenant(self, client, admin, auth_headers):
        payload = {
            "full_name": "Hari Thapa",
            "email": "hari@example.com",
            "password": "secret123",
            "role": "TENANT",
            "lease_start_date": "2024-04-14",
        }
        resp = client.post("/api/auth/register", json=payload, headers=auth_headers(admin))
        assert resp.status_code == 201
        assert resp.get_json()["data"]["lease_start_date"] == "2024-04-14"

        again = client.post("/api/auth/register", json=payload, headers=auth_headers(admin))
        assert again.status_code == 400

    def test_register_rejects_admin_role(self, client, admin, auth_headers):
        payload = {"full_name": "X", "email": "x@example.com", "password": "pw", "role": "ADMIN"}
        resp = client.post("/api/auth/register", json=payload, headers=auth_headers(admin))
        assert resp.status_code == 400


class TestBillingFlow:
    def _bill_tenant(self, client, admin, tenant, room, auth_headers):
        rent = client.post(
            "/api/rent-bills",
            json={"tenant_id": tenant.id, "room_id": room.id, "rent_for_period": "Baisakh 2081", "amount": 15000},
            headers=auth_headers(admin),
        )
        assert rent.status_code == 201
        utility = client.post(
            "/api/utility-bills",
            json={"tenant_id": tenant.id, "room_id": room.id, **UTILITY_PAYLOAD},
            headers=auth_headers(admin),
        )
        assert utility.status_code == 201
        assert utility.get_json()["data"]["total_amount"] == 2300

    def test_confirm_then_verify(self, client, admin, tenant, room, auth_headers):
        self._bill_tenant(client, admin, tenant, room, auth_headers)

        confirm = client.post("/api/payments/confirm", headers=auth_headers(tenant))
        assert confirm.status_code == 201
        payment = confirm.get_json()["data"]
        assert payment["amount"] == 17300
        assert payment["status"] == "PENDING"

        pending = client.get("/api/my-pending-payment", headers=auth_headers(tenant)).get_json()
        assert pending["has_pending_payment"] is True

        duplicate = client.post("/api/payments/confirm", headers=auth_headers(tenant))
        assert duplicate.status_code == 400

        listed = client.get("/api/payments", headers=auth_headers(admin)).get_json()["data"]
        assert [p["tenant_name"] for p in listed] == ["Sita Sharma"]

        verify = client.patch(f"/api/payments/{payment['id']}/verify", headers=auth_headers(admin))
        assert verify.status_code == 200
        data = verify.get_json()["data"]
        assert data["rent_bills_paid"] == 1
        assert data["utility_bills_paid"] == 1
        assert data["payment"]["status"] == "VERIFIED"

        again = client.patch(f"/api/payments/{payment['id']}/verify", headers=auth_headers(admin))
        assert again.status_code == 400
        assert again.get_json()["message"] == "This payment has already been verified."

        rent_bills = client.get("/api/my-bills/rent", headers=auth_headers(tenant)).get_json()["data"]
        assert [b["status"] for b in rent_bills] == ["PAID"]
        assert rent_bills[0]["room_number"] == "101"
        utility_bills = client.get("/api/my-bills/utility", headers=auth_headers(tenant)).get_json()["data"]
        assert [b["status"] for b in utility_bills] == ["PAID"]

        notifications = client.get("/api/notifications", headers=auth_headers(tenant)).get_json()
        titles = [n["title"] for n in notifications["data"]]
        assert titles.count("Payment Verified!") == 1
        assert notifications["unread_count"] == 3

        client.patch("/api/notifications", headers=auth_headers(tenant))
        after = client.get("/api/notifications", headers=auth_headers(tenant)).get_json()
        assert after["unread_count"] == 0

    def test_confirm_with_nothing_due(self, client, admin, tenant, auth_headers):
        resp = client.post("/api/payments/confirm", headers=auth_headers(tenant))
        assert resp.status_code == 400
        assert resp.get_json()["message"] == "No pending bills to pay."

    def test_verify_unknown_payment(self, client, admin, auth_headers):
        resp = client.patch("/api/payments/999/verify", headers=auth_headers(admin))
        assert resp.status_code == 404
        assert resp.get_json() == {"success": False, "message": "Payment record not found."}

    def test_last_utility_bill_prefills_readings(self, client, admin, tenant, room, auth_headers):
        self._bill_tenant(client, admin, tenant, room, auth_headers)
        resp = client.get(f"/api/tenants/{tenant.id}/last-utility-bill", headers=auth_headers(admin))
        assert resp.status_code == 200
        assert resp.get_json()["data"]["electricity"]["current_reading"] == 150

    def test_mark_paid_and_delete_rent_bill(self, client, admin, tenant, room, auth_headers):
        self._bill_tenant(client, admin, tenant, room, auth_headers)
        bill_id = client.get("/api/rent-bills", headers=auth_headers(admin)).get_json()["data"][0]["id"]

        paid = client.patch(f"/api/rent-bills/{bill_id}", json={"payment_method": "cash"}, headers=auth_headers(admin))
        assert paid.status_code == 200
        assert paid.get_json()["data"]["status"] == "PAID"

        deleted = client.delete(f"/api/rent-bills/{bill_id}", headers=auth_headers(admin))
        assert deleted.status_code == 200
        assert client.get("/api/rent-bills", headers=auth_headers(admin)).get_json()["data"] == []

    def test_rent_bill_validation(self, client, admin, tenant, room, auth_headers):
        resp = client.post(
            "/api/rent-bills",
            json={"tenant_id": tenant.id, "room_id": room.id, "rent_for_period": "Baisakh 2081", "amount": -5},
            headers=auth_headers(admin),
        )
        assert resp.status_code == 400

    def test_mark_overdue_rejects_bad_days(self, client, admin, auth_headers):
        resp = client.post("/api/rent-bills/mark-overdue", json={"older_than_days": "soon"}, headers=auth_headers(admin))
        assert resp.status_code == 400


class TestRooms:
    def test_create_and_filter_vacant(self, client, admin, tenant, auth_headers):
        resp = client.post(
            "/api/rooms", json={"room_number": "202", "floor": "2", "rent_amount": 12000}, headers=auth_headers(admin)
        )
        assert resp.status_code == 201

        vacant = client.get("/api/rooms?status=vacant", headers=auth_headers(admin)).get_json()["data"]
        assert [r["room_number"] for r in vacant] == ["202"]

        duplicate = client.post(
            "/api/rooms", json={"room_number": "202", "floor": "2", "rent_amount": 12000}, headers=auth_headers(admin)
        )
        assert duplicate.status_code == 400

    def test_assign_room_moves_tenant(self, client, db, admin, tenant, room, make_room, auth_headers):
        new_room = make_room(room_number="303", floor="3")
        old_room_id, new_room_id = room.id, new_room.id

        resp = client.patch(
            f"/api/tenants/{tenant.id}/assign-room", json={"room_id": new_room_id}, headers=auth_headers(admin)
        )
        assert resp.status_code == 200

        db.session.expire_all()
        assert db.session.get(User, tenant.id).room_id == new_room_id
        assert db.session.get(Room, new_room_id).tenant_id == tenant.id
        assert db.session.get(Room, old_room_id).tenant_id is None

    def test_assign_occupied_room(self, client, db, admin, tenant, room, auth_headers):
        other = User(full_name="Hari Thapa", email="hari@example.com", role="TENANT")
        other.set_password("secret123")
        db.session.add(other)
        db.session.commit()

        resp = client.patch(f"/api/tenants/{other.id}/assign-room", json={"room_id": room.id}, headers=auth_headers(admin))
        assert resp.status_code == 400
        assert resp.get_json()["message"] == "Room is already occupied."

    def test_tenant_list_includes_room_number(self, client, admin, tenant, auth_headers):
        data = client.get("/api/tenants", headers=auth_headers(admin)).get_json()["data"]
        assert [(t["full_name"], t["room_number"]) for t in data] == [("Sita Sharma", "101")]


class TestMaintenance:
    def _create(self, client, tenant, auth_headers):
        resp = client.post(
            "/api/maintenance",
            json={"issue": "Leaking tap", "description": "Kitchen tap drips all night"},
            headers=auth_headers(tenant),
        )
        assert resp.status_code == 201
        return resp.get_json()["data"]["id"]

    def test_status_only_moves_forward(self, client, db, admin, security, tenant, auth_headers):
        request_id = self._create(client, tenant, auth_headers)

        started = client.patch(
            f"/api/maintenance/{request_id}", json={"status": "IN_PROGRESS"}, headers=auth_headers(security)
        )
        assert started.status_code == 200
        assert Notification.query.filter_by(user_id=admin.id, title="Maintenance Update").count() == 1

        backwards = client.patch(
            f"/api/maintenance/{request_id}", json={"status": "PENDING"}, headers=auth_headers(admin)
        )
        assert backwards.status_code == 400

        done = client.patch(
            f"/api/maintenance/{request_id}", json={"status": "COMPLETED", "priority": "HIGH"}, headers=auth_headers(admin)
        )
        assert done.status_code == 200
        db.session.expire_all()
        req = db.session.get(MaintenanceRequest, request_id)
        assert req.status == "COMPLETED"
        assert req.priority == "HIGH"
        assert req.completed_at is not None

        active = client.get("/api/maintenance?active=true", headers=auth_headers(admin)).get_json()["data"]
        assert active == []

    def test_tenant_without_room_cannot_file_request(self, client, db, auth_headers):
        roomless = User(full_name="Hari Thapa", email="hari@example.com", role="TENANT")
        roomless.set_password("secret123")
        db.session.add(roomless)
        db.session.commit()

        resp = client.post(
            "/api/maintenance", json={"issue": "Door", "description": "Stuck"}, headers=auth_headers(roomless)
        )
        assert resp.status_code == 400

    def test_my_maintenance_lists_own_requests(self, client, tenant, auth_headers):
        self._create(client, tenant, auth_headers)
        data = client.get("/api/my-maintenance", headers=auth_headers(tenant)).get_json()["data"]
        assert [(r["issue"], r["room_number"]) for r in data] == [("Leaking tap", "101")]


class TestSecurityAndFinancials:
    def test_admin_pays_guard_and_guard_sees_dashboard(self, client, admin, security, auth_headers):
        for payload in (
            {"type": "SALARY", "amount": 15000, "month": "Baisakh 2081"},
            {"type": "ADVANCE", "amount": 3000},
        ):
            resp = client.post("/api/admin/security/pay", json=payload, headers=auth_headers(admin))
            assert resp.status_code == 201

        ledger = client.get("/api/admin/security/pay", headers=auth_headers(admin)).get_json()["data"]
        assert ledger["net_balance"] == 12000

        logged = client.post(
            "/api/security/dashboard", json={"cost": 1500, "volume_liters": 6000}, headers=auth_headers(security)
        )
        assert logged.status_code == 201

        dashboard = client.get("/api/security/dashboard", headers=auth_headers(security)).get_json()["data"]
        assert dashboard["user_role"] == "SECURITY"
        assert dashboard["net_balance"] == 12000
        assert [w["added_by_name"] for w in dashboard["recent_water"]] == ["Ram Guard"]

        tankers = client.get("/api/admin/water-tankers", headers=auth_headers(admin)).get_json()["data"]
        assert len(tankers) == 1

        summary = client.get("/api/financials/summary", headers=auth_headers(admin)).get_json()["data"]
        assert summary["total_expense"] == 19500
        assert summary["net_profit"] == -19500

    def test_tenant_cannot_open_security_dashboard(self, client, tenant, auth_headers):
        assert client.get("/api/security/dashboard", headers=auth_headers(tenant)).status_code == 403

    def test_manual_expenses_feed_summary(self, client, admin, auth_headers):
        for payload in (
            {"type": "INCOME", "category": "RENT_INCOME", "amount": 20000, "description": "Parking rent"},
            {"type": "EXPENSE", "category": "MAINTENANCE", "amount": 5000, "description": "Plumber"},
        ):
            assert client.post("/api/expenses", json=payload, headers=auth_headers(admin)).status_code == 201

        bad = client.post(
            "/api/expenses",
            json={"type": "EXPENSE", "category": "PARTY", "amount": 5, "description": "x"},
            headers=auth_headers(admin),
        )
        assert bad.status_code == 400

        summary = client.get("/api/financials/summary", headers=auth_headers(admin)).get_json()["data"]
        assert summary == {"total_income": 20000, "total_expense": 5000, "net_profit": 15000}
        assert len(client.get("/api/expenses", headers=auth_headers(admin)).get_json()["data"]) == 2

    def test_dashboard_summary(self, client, admin, tenant, room, auth_headers):
        client.post(
            "/api/rent-bills",
            json={"tenant_id": tenant.id, "room_id": room.id, "rent_for_period": "Baisakh 2081", "amount": 15000},
            headers=auth_headers(admin),
        )
        data = client.get("/api/dashboard/summary", headers=auth_headers(admin)).get_json()["data"]
        assert data["total_rent_due"] == 15000
        assert data["active_tenants"] == 1
        assert data["last_payment"] == {"amount": 0, "date": "N/A"}


def test_unexpected_error_returns_generic_500(client, admin, auth_headers, monkeypatch):
    def explode(session):
        raise RuntimeError("connection string with password=hunter2")

    monkeypatch.setattr(queries, "financial_summary", explode)
    resp = client.get("/api/financials/summary", headers=auth_headers(admin))
    assert resp.status_code == 500
    assert resp.get_json() == {"success": False, "message": "An unexpected error occurred."}


def test_unknown_route_uses_envelope(client):
    resp = client.get("/api/does-not-exist")
    assert resp.status_code == 404
    assert resp.get_json()["success"] is False


def test_mark_overdue_cli(app):
    result = app.test_cli_runner().invoke(args=["mark-overdue", "--older-than-days", "30"])
    assert result.exit_code == 0
    assert "Marked 0 rent bill(s) overdue" in result.output


def test_create_admin_cli(app, db):
    result = app.test_cli_runner().invoke(
        args=["create-admin", "--email", "Boss@Example.com", "--password", "secret123", "--full-name", "Boss"]
    )
    assert result.exit_code == 0
    user = User.query.filter_by(email="boss@example.com").one()
    assert user.role == "ADMIN"
    assert user.check_password("secret123")


def _bill(db, tenant, room, notifier):
    rent = bill_ledger.create_rent_bill(db.session, tenant.id, room.id, "Baisakh 2081", 15000, None, notifier)
    utility = bill_ledger.create_utility_bill(
        db.session,
        tenant.id,
        room.id,
        UTILITY_PAYLOAD["billing_month_bs"],
        UTILITY_PAYLOAD["electricity"],
        UTILITY_PAYLOAD["water"],
        notifier,
        include_service_charge=True,
        include_security_charge=True,
    )
    return rent, utility


class TestTenantAdmin:
    def test_tenant_details_include_room_and_bills(self, client, db, admin, tenant, room, notifier, auth_headers):
        _bill(db, tenant, room, notifier)
        resp = client.get(f"/api/admin/tenants/{tenant.id}", headers=auth_headers(admin))
        assert resp.status_code == 200
        data = resp.get_json()["data"]
        assert data["tenant_details"]["full_name"] == "Sita Sharma"
        assert data["tenant_details"]["room"]["room_number"] == "101"
        assert [b["amount"] for b in data["rent_bills"]] == [15000]
        assert [b["total_amount"] for b in data["utility_bills"]] == [2300]

    def test_tenant_details_for_non_tenant(self, client, admin, security, auth_headers):
        resp = client.get(f"/api/admin/tenants/{security.id}", headers=auth_headers(admin))
        assert resp.status_code == 404

    def test_delete_tenant_releases_room_and_drops_bills(
        self, client, db, admin, tenant, room, notifier, auth_headers
    ):
        _bill(db, tenant, room, notifier)
        reconciliation.request_payment_verification(db.session, tenant.id, "Sita Sharma", notifier)
        tenant_id, room_id = tenant.id, room.id

        resp = client.delete(f"/api/tenants/{tenant_id}", headers=auth_headers(admin))
        assert resp.status_code == 200
        assert resp.get_json()["message"] == "Tenant and all associated data deleted successfully."

        db.session.expire_all()
        assert db.session.get(User, tenant_id) is None
        assert db.session.get(Room, room_id).tenant_id is None
        assert RentBill.query.count() == 0
        assert UtilityBill.query.count() == 0
        assert Payment.query.count() == 0
        assert Notification.query.filter_by(user_id=tenant_id).count() == 0
        # the admin's copy of the payment notice stays
        assert Notification.query.filter_by(user_id=admin.id).count() == 1

    def test_delete_unknown_tenant(self, client, admin, auth_headers):
        resp = client.delete("/api/tenants/999", headers=auth_headers(admin))
        assert resp.status_code == 404
        assert resp.get_json()["message"] == "Tenant not found."


class TestExpenseEdits:
    def _expense(self, client, admin, auth_headers):
        resp = client.post(
            "/api/expenses",
            json={"type": "EXPENSE", "category": "MAINTENANCE", "amount": 1200, "description": "Plumber"},
            headers=auth_headers(admin),
        )
        assert resp.status_code == 201
        return resp.get_json()["data"]["id"]

    def test_update_expense(self, client, admin, auth_headers):
        expense_id = self._expense(client, admin, auth_headers)
        resp = client.patch(
            f"/api/expenses/{expense_id}",
            json={"amount": "1500.50", "description": "Plumber and parts"},
            headers=auth_headers(admin),
        )
        assert resp.status_code == 200
        data = resp.get_json()["data"]
        assert data["amount"] == 1500.5
        assert data["description"] == "Plumber and parts"
        assert data["category"] == "MAINTENANCE"

    def test_update_rejects_unknown_category(self, client, admin, auth_headers):
        expense_id = self._expense(client, admin, auth_headers)
        resp = client.patch(f"/api/expenses/{expense_id}", json={"category": "TAXES"}, headers=auth_headers(admin))
        assert resp.status_code == 400

    def test_delete_expense(self, client, admin, auth_headers):
        expense_id = self._expense(client, admin, auth_headers)
        resp = client.delete(f"/api/expenses/{expense_id}", headers=auth_headers(admin))
        assert resp.status_code == 200
        assert Expense.query.count() == 0

    def test_missing_expense(self, client, admin, auth_headers):
        assert client.patch("/api/expenses/999", json={}, headers=auth_headers(admin)).status_code == 404
        assert client.delete("/api/expenses/999", headers=auth_headers(admin)).status_code == 404


class TestAccounts:
    def test_change_password(self, client, tenant, auth_headers):
        resp = client.patch(
            "/api/users/change-password",
            json={"old_password": "secret123", "new_password": "n3w-secret"},
            headers=auth_headers(tenant),
        )
        assert resp.status_code == 200
        login = client.post("/api/auth/login", json={"email": "sita@example.com", "password": "n3w-secret"})
        assert login.status_code == 200

    def test_change_password_requires_both_fields(self, client, tenant, auth_headers):
        resp = client.patch(
            "/api/users/change-password", json={"old_password": "secret123"}, headers=auth_headers(tenant)
        )
        assert resp.status_code == 400
        assert resp.get_json()["message"] == "Old and new passwords are required."

    def test_change_password_with_wrong_old_password(self, client, tenant, auth_headers):
        resp = client.patch(
            "/api/users/change-password",
            json={"old_password": "guess", "new_password": "n3w-secret"},
            headers=auth_headers(tenant),
        )
        assert resp.status_code == 403
        assert resp.get_json()["message"] == "Incorrect old password."

    def test_admin_adds_and_lists_staff(self, client, admin, security, auth_headers):
        payload = {"full_name": "Hari Thapa", "email": "Hari@example.com", "password": "secret123"}
        resp = client.post("/api/admin/staff", json=payload, headers=auth_headers(admin))
        assert resp.status_code == 201
        assert resp.get_json()["data"]["role"] == "SECURITY"
        assert resp.get_json()["data"]["email"] == "hari@example.com"

        listed = client.get("/api/admin/staff", headers=auth_headers(admin)).get_json()["data"]
        assert {s["full_name"] for s in listed} == {"Ram Guard", "Hari Thapa"}

    def test_staff_with_existing_email(self, client, admin, security, auth_headers):
        payload = {"full_name": "Ram Again", "email": "guard@example.com", "password": "secret123"}
        resp = client.post("/api/admin/staff", json=payload, headers=auth_headers(admin))
        assert resp.status_code == 400
        assert resp.get_json()["message"] == "Email already exists"

    def test_staff_routes_are_admin_only(self, client, security, auth_headers):
        assert client.get("/api/admin/staff", headers=auth_headers(security)).status_code == 403


class TestPasswordResetRequests:
    SENT = "Request sent. Admin will be notified."

    def test_unknown_or_non_tenant_email_gets_same_answer(self, client, admin):
        for email in ("nobody@example.com", "admin@example.com"):
            resp = client.post("/api/auth/request-admin-reset", json={"email": email})
            assert resp.status_code == 200
            assert resp.get_json() == {"success": True, "message": self.SENT}
        assert PasswordResetRequest.query.count() == 0

    def test_admin_resets_tenant_password(self, client, admin, tenant, auth_headers):
        resp = client.post("/api/auth/request-admin-reset", json={"email": "sita@example.com"})
        assert resp.status_code == 200
        assert resp.get_json()["message"] == self.SENT
        note = Notification.query.filter_by(user_id=admin.id, title="Password Reset Requested").one()
        assert "Sita Sharma (Room 101)" in note.message

        queue = client.get("/api/admin/password-requests", headers=auth_headers(admin)).get_json()["data"]
        assert len(queue) == 1
        assert queue[0]["user_name"] == "Sita Sharma"
        assert queue[0]["user_email"] == "sita@example.com"
        assert queue[0]["room"] == "101"
        request_id = queue[0]["id"]

        short = client.patch(
            f"/api/admin/password-requests/{request_id}", json={"new_password": "abc"}, headers=auth_headers(admin)
        )
        assert short.status_code == 400
        assert short.get_json()["message"] == "Password must be at least 6 characters."

        done = client.patch(
            f"/api/admin/password-requests/{request_id}", json={"new_password": "fresh-pass"}, headers=auth_headers(admin)
        )
        assert done.status_code == 200
        login = client.post("/api/auth/login", json={"email": "sita@example.com", "password": "fresh-pass"})
        assert login.status_code == 200
        assert client.get("/api/admin/password-requests", headers=auth_headers(admin)).get_json()["data"] == []

        again = client.patch(
            f"/api/admin/password-requests/{request_id}", json={"new_password": "other-pass"}, headers=auth_headers(admin)
        )
        assert again.status_code == 404
        assert again.get_json()["message"] == "Request not found or already completed."

    def test_second_pending_request_is_rejected(self, client, admin, tenant):
        client.post("/api/auth/request-admin-reset", json={"email": "sita@example.com"})
        resp = client.post("/api/auth/request-admin-reset", json={"email": "sita@example.com"})
        assert resp.status_code == 400
        assert resp.get_json()["message"] == "A reset request is already pending for this user."

    def test_tenant_without_room_is_recorded_as_na(self, client, make_user):
        make_user("Hari Thapa", "hari@example.com", "TENANT")
        client.post("/api/auth/request-admin-reset", json={"email": "hari@example.com"})
        assert PasswordResetRequest.query.one().room == "N/A"

    def test_queue_is_admin_only(self, client, tenant, auth_headers):
        assert client.get("/api/admin/password-requests", headers=auth_headers(tenant)).status_code == 403


class TestPublicBill:
    def test_rent_bill_with_total_outstanding(self, client, db, tenant, room, notifier):
        rent, _ = _bill(db, tenant, room, notifier)
        resp = client.get(f"/api/public/bills/rent/{rent.id}")
        assert resp.status_code == 200
        data = resp.get_json()["data"]
        assert data["type"] == "Rent"
        assert data["tenant_name"] == "Sita Sharma"
        assert data["total_outstanding_due"] == 17300

    def test_paid_bill_is_left_out_of_outstanding(self, client, db, admin, tenant, room, notifier):
        rent, utility = _bill(db, tenant, room, notifier)
        bill_ledger.mark_bill_paid(db.session, RentBill, rent.id, admin.id, notifier)

        data = client.get(f"/api/public/bills/rent/{rent.id}").get_json()["data"]
        assert data["status"] == "PAID"
        assert data["total_outstanding_due"] == 2300

        data = client.get(f"/api/public/bills/utility/{utility.id}").get_json()["data"]
        assert data["type"] == "Utility"
        assert data["total_outstanding_due"] == 2300

    def test_bare_id_prefers_rent_bill(self, client, db, tenant, room, notifier):
        rent, utility = _bill(db, tenant, room, notifier)
        assert rent.id == utility.id
        assert client.get(f"/api/public/bills/{rent.id}").get_json()["data"]["type"] == "Rent"

    def test_unknown_bill(self, client, db):
        assert client.get("/api/public/bills/999").status_code == 404
        assert client.get("/api/public/bills/water/1").status_code == 404
