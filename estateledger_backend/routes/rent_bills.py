from flask import Blueprint, current_app, jsonify, request

from estateledger_backend.errors import ValidationFailed, envelope
from estateledger_backend.extensions import db
from estateledger_backend.models import RentBill, ROLE_ADMIN, ROLE_TENANT
from estateledger_backend.services import bill_ledger, queries
from estateledger_backend.services.notifications import Notifier
from estateledger_backend.utils.auth_utils import current_identity, roles_required

bp = Blueprint("rent_bills", __name__)

# ============= RENT BILLS (ADMIN) =============


@bp.get("/rent-bills")
@roles_required(ROLE_ADMIN)
def list_rent_bills():
    """All rent bills, newest first, with tenant name and room number"""
    return jsonify(envelope(True, data=queries.serialize_rows(queries.rent_bills(db.session)))), 200


@bp.post("/rent-bills")
@roles_required(ROLE_ADMIN)
def create_rent_bill():
    data = request.get_json(silent=True) or {}
    bill = bill_ledger.create_rent_bill(
        db.session,
        tenant_id=data.get("tenant_id"),
        room_id=data.get("room_id"),
        period=data.get("rent_for_period"),
        amount=data.get("amount"),
        remarks=data.get("remarks"),
        notifier=Notifier(db.session),
    )
    return jsonify(envelope(True, "Rent bill created successfully", data=bill.serialize())), 201


@bp.patch("/rent-bills/<int:bill_id>")
@roles_required(ROLE_ADMIN)
def mark_rent_bill_paid(bill_id):
    admin_id, _, _ = current_identity()
    data = request.get_json(silent=True) or {}
    bill = bill_ledger.mark_bill_paid(
        db.session,
        RentBill,
        bill_id,
        acting_admin_id=admin_id,
        notifier=Notifier(db.session),
        payment_method=data.get("payment_method"),
    )
    return jsonify(envelope(True, "Bill marked as paid", data=bill.serialize())), 200


@bp.delete("/rent-bills/<int:bill_id>")
@roles_required(ROLE_ADMIN)
def delete_rent_bill(bill_id):
    bill_ledger.delete_bill(db.session, RentBill, bill_id)
    return jsonify(envelope(True, "Bill deleted successfully.")), 200


@bp.post("/rent-bills/mark-overdue")
@roles_required(ROLE_ADMIN)
def mark_overdue():
    """Age DUE rent bills past the configured window into OVERDUE"""
    data = request.get_json(silent=True) or {}
    try:
        days = int(data.get("older_than_days", current_app.config["RENT_OVERDUE_AFTER_DAYS"]))
    except (TypeError, ValueError):
        raise ValidationFailed("older_than_days must be a whole number")
    updated = bill_ledger.mark_overdue_rent_bills(db.session, days)
    return jsonify(envelope(True, f"{updated} rent bills marked overdue", data={"updated_count": updated})), 200


@bp.get("/tenants/<int:tenant_id>/last-rent-bill")
@roles_required(ROLE_ADMIN)
def last_rent_bill(tenant_id):
    bill = bill_ledger.last_bill_for_tenant(db.session, RentBill, tenant_id)
    return jsonify(envelope(True, data=bill.serialize())), 200


# ============= TENANT VIEW =============


@bp.get("/my-bills/rent")
@roles_required(ROLE_TENANT)
def my_rent_bills():
    tenant_id, _, _ = current_identity()
    rows = queries.rent_bills(db.session, tenant_id=tenant_id)
    return jsonify(envelope(True, data=queries.serialize_rows(rows))), 200
