from flask import Blueprint, jsonify, request

from estateledger_backend.errors import envelope
from estateledger_backend.extensions import db
from estateledger_backend.models import ROLE_ADMIN, ROLE_SECURITY
from estateledger_backend.services import accounts, payroll, queries
from estateledger_backend.services.notifications import Notifier
from estateledger_backend.utils.auth_utils import current_identity, roles_required
from estateledger_backend.utils.dates import parse_iso_date

bp = Blueprint("security", __name__)

# ============= STAFF ACCOUNTS =============


@bp.get("/admin/staff")
@roles_required(ROLE_ADMIN)
def list_staff():
    staff = queries.staff_members(db.session)
    return jsonify(envelope(True, data=[s.serialize() for s in staff])), 200


@bp.post("/admin/staff")
@roles_required(ROLE_ADMIN)
def create_staff():
    data = request.get_json(silent=True) or {}
    staff = accounts.create_user(
        db.session,
        data.get("full_name"),
        data.get("email"),
        data.get("password"),
        ROLE_SECURITY,
        phone_number=data.get("phone_number"),
    )
    return jsonify(envelope(True, "Staff member added successfully", data=staff.serialize())), 201


# ============= STAFF PAYROLL (ADMIN) =============


@bp.get("/admin/security/pay")
@roles_required(ROLE_ADMIN)
def list_staff_payments():
    """Staff payments plus net balance; filter with ?staff_id= or omit for all staff"""
    staff_id = request.args.get("staff_id", type=int)
    summary = payroll.staff_ledger(db.session, staff_id=staff_id)
    return jsonify(
        envelope(True, data={"payments": summary.payments, "net_balance": float(summary.net_balance)})
    ), 200


@bp.post("/admin/security/pay")
@roles_required(ROLE_ADMIN)
def pay_staff():
    data = request.get_json(silent=True) or {}
    payment = payroll.record_staff_payment(
        db.session,
        payment_type=data.get("type"),
        amount=data.get("amount"),
        notifier=Notifier(db.session),
        staff_id=data.get("staff_id"),
        month=data.get("month"),
        remarks=data.get("remarks"),
        date=parse_iso_date(data.get("date")),
    )
    return jsonify(envelope(True, "Payment recorded", data=payment.serialize())), 201


@bp.get("/admin/water-tankers")
@roles_required(ROLE_ADMIN)
def list_water_tankers():
    rows = queries.water_tankers(db.session)
    return jsonify(envelope(True, data=queries.serialize_rows(rows))), 200


# ============= SECURITY DASHBOARD =============


@bp.get("/security/dashboard")
@roles_required(ROLE_ADMIN, ROLE_SECURITY)
def security_dashboard():
    """Recent water logs, payroll (own for guards, everyone's for admins) and open maintenance"""
    user_id, role, _ = current_identity()
    summary = payroll.staff_ledger(db.session, staff_id=None if role == ROLE_ADMIN else user_id)
    active = queries.maintenance_requests(db.session, active_only=True)
    return jsonify(
        envelope(
            True,
            data={
                "recent_water": queries.serialize_rows(queries.water_tankers(db.session, limit=10)),
                "finances": summary.payments,
                "net_balance": float(summary.net_balance),
                "active_maintenance": queries.serialize_rows(active),
                "user_role": role,
            },
        )
    ), 200


@bp.post("/security/dashboard")
@roles_required(ROLE_ADMIN, ROLE_SECURITY)
def log_water_tanker():
    user_id, _, _ = current_identity()
    data = request.get_json(silent=True) or {}
    tanker = payroll.log_water_tanker(
        db.session,
        added_by=user_id,
        cost=data.get("cost"),
        volume_liters=data.get("volume_liters"),
    )
    return jsonify(envelope(True, "Water Tanker & Expense Logged", data=tanker.serialize())), 201
