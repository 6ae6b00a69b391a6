from flask import Blueprint, jsonify, request
from flask_jwt_extended import create_access_token, set_access_cookies, unset_jwt_cookies

from estateledger_backend.errors import NotFound, ValidationFailed, envelope
from estateledger_backend.extensions import db
from estateledger_backend.models import User, ROLE_ADMIN, ROLE_SECURITY, ROLE_TENANT
from estateledger_backend.services import accounts, queries
from estateledger_backend.services.notifications import Notifier
from estateledger_backend.utils.auth_utils import current_identity, login_required, roles_required
from estateledger_backend.utils.dates import parse_iso_date

bp = Blueprint("auth", __name__)


def issue_token(user):
    # identity MUST be a string (PyJWT wants 'sub' as str)
    return create_access_token(
        identity=str(user.id),
        additional_claims={"role": user.role, "email": user.email, "full_name": user.full_name},
    )


@bp.post("/auth/login")
def login():
    data = request.get_json(silent=True) or {}
    email = (data.get("email") or "").strip().lower()
    password = data.get("password") or ""

    user = User.query.filter_by(email=email).first()
    if not user or not user.check_password(password):
        return jsonify(envelope(False, "Invalid credentials")), 401

    token = issue_token(user)
    resp = jsonify(envelope(True, "Login successful", token=token))
    set_access_cookies(resp, token)
    return resp, 200


@bp.post("/auth/logout")
def logout():
    resp = jsonify(envelope(True, "Logged out"))
    unset_jwt_cookies(resp)
    return resp, 200


@bp.get("/auth/me")
@login_required
def me():
    user_id, _, _ = current_identity()
    user = db.session.get(User, user_id)
    if not user:
        raise NotFound("User not found")
    return jsonify(envelope(True, data=user.serialize())), 200


@bp.post("/auth/register")
@roles_required(ROLE_ADMIN)
def register():
    """Admin creates a tenant or security staff account."""
    data = request.get_json(silent=True) or {}
    role = data.get("role", ROLE_TENANT)
    if role not in (ROLE_TENANT, ROLE_SECURITY):
        raise ValidationFailed("role must be TENANT or SECURITY")

    lease_start = parse_iso_date(data.get("lease_start_date"), "lease_start_date")
    lease_end = parse_iso_date(data.get("lease_end_date"), "lease_end_date")
    user = accounts.create_user(
        db.session,
        data.get("full_name"),
        data.get("email"),
        data.get("password"),
        role,
        phone_number=data.get("phone_number"),
        lease_start=lease_start.date() if lease_start else None,
        lease_end=lease_end.date() if lease_end else None,
    )
    return jsonify(envelope(True, "User registered successfully", data=user.serialize())), 201


@bp.patch("/users/change-password")
@login_required
def change_password():
    user_id, _, _ = current_identity()
    data = request.get_json(silent=True) or {}
    accounts.change_password(db.session, user_id, data.get("old_password"), data.get("new_password"))
    return jsonify(envelope(True, "Password changed successfully.")), 200


# ============= ADMIN-ASSISTED PASSWORD RESET =============


@bp.post("/auth/request-admin-reset")
def request_admin_reset():
    data = request.get_json(silent=True) or {}
    accounts.request_admin_reset(db.session, data.get("email"), Notifier(db.session))
    return jsonify(envelope(True, accounts.RESET_REQUEST_SENT)), 200


@bp.get("/admin/password-requests")
@roles_required(ROLE_ADMIN)
def list_password_requests():
    rows = queries.pending_reset_requests(db.session)
    return jsonify(envelope(True, data=queries.serialize_rows(rows))), 200


@bp.patch("/admin/password-requests/<int:request_id>")
@roles_required(ROLE_ADMIN)
def complete_password_request(request_id):
    data = request.get_json(silent=True) or {}
    accounts.complete_reset_request(db.session, request_id, data.get("new_password"), Notifier(db.session))
    return jsonify(envelope(True, "Password has been reset successfully.")), 200
