from flask import Blueprint, current_app, jsonify, request

from estateledger_backend.errors import envelope
from estateledger_backend.extensions import db
from estateledger_backend.models import UtilityBill, ROLE_ADMIN, ROLE_TENANT
from estateledger_backend.services import bill_ledger, queries
from estateledger_backend.services.notifications import Notifier
from estateledger_backend.utils.auth_utils import current_identity, roles_required

bp = Blueprint("utility_bills", __name__)


@bp.get("/utility-bills")
@roles_required(ROLE_ADMIN)
def list_utility_bills():
    rows = queries.utility_bills(db.session)
    return jsonify(envelope(True, data=queries.serialize_rows(rows))), 200


@bp.post("/utility-bills")
@roles_required(ROLE_ADMIN)
def create_utility_bill():
    """Create a utility bill; consumption, charges and total are computed here, not trusted from the client"""
    data = request.get_json(silent=True) or {}
    bill = bill_ledger.create_utility_bill(
        db.session,
        tenant_id=data.get("tenant_id"),
        room_id=data.get("room_id"),
        month=data.get("billing_month_bs"),
        electricity=data.get("electricity"),
        water=data.get("water"),
        notifier=Notifier(db.session),
        include_service_charge=bool(data.get("include_service_charge")),
        include_security_charge=bool(data.get("include_security_charge")),
        service_charge_amount=current_app.config["SERVICE_CHARGE_AMOUNT"],
        security_charge_amount=current_app.config["SECURITY_CHARGE_AMOUNT"],
        remarks=data.get("remarks"),
    )
    return jsonify(envelope(True, "Utility bill created successfully", data=bill.serialize())), 201


@bp.patch("/utility-bills/<int:bill_id>")
@roles_required(ROLE_ADMIN)
def mark_utility_bill_paid(bill_id):
    admin_id, _, _ = current_identity()
    bill = bill_ledger.mark_bill_paid(
        db.session, UtilityBill, bill_id, acting_admin_id=admin_id, notifier=Notifier(db.session)
    )
    return jsonify(envelope(True, "Bill marked as paid", data=bill.serialize())), 200


@bp.delete("/utility-bills/<int:bill_id>")
@roles_required(ROLE_ADMIN)
def delete_utility_bill(bill_id):
    bill_ledger.delete_bill(db.session, UtilityBill, bill_id)
    return jsonify(envelope(True, "Bill deleted successfully")), 200


@bp.get("/tenants/<int:tenant_id>/last-utility-bill")
@roles_required(ROLE_ADMIN)
def last_utility_bill(tenant_id):
    """Most recent utility bill, used to pre-fill previous meter readings"""
    bill = bill_ledger.last_bill_for_tenant(db.session, UtilityBill, tenant_id)
    return jsonify(envelope(True, data=bill.serialize())), 200


@bp.get("/my-bills/utility")
@roles_required(ROLE_TENANT)
def my_utility_bills():
    tenant_id, _, _ = current_identity()
    rows = queries.utility_bills(db.session, tenant_id=tenant_id)
    return jsonify(envelope(True, data=queries.serialize_rows(rows))), 200
