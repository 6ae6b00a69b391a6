from flask import Blueprint, current_app, jsonify

from estateledger_backend.errors import envelope
from estateledger_backend.extensions import db
from estateledger_backend.models import ROLE_ADMIN, ROLE_TENANT
from estateledger_backend.services import queries, reconciliation
from estateledger_backend.services.notifications import Notifier
from estateledger_backend.utils.auth_utils import current_identity, roles_required

bp = Blueprint("payments", __name__)


@bp.get("/payments")
@roles_required(ROLE_ADMIN)
def list_pending_payments():
    """Payments awaiting verification, newest first"""
    rows = queries.pending_payments(db.session)
    return jsonify(envelope(True, data=queries.serialize_rows(rows))), 200


@bp.patch("/payments/<int:payment_id>/verify")
@roles_required(ROLE_ADMIN)
def verify_payment(payment_id):
    result = reconciliation.verify_payment(
        db.session,
        payment_id,
        notifier=Notifier(db.session),
        include_overdue=current_app.config["RECONCILE_INCLUDE_OVERDUE"],
    )
    return jsonify(
        envelope(
            True,
            "Payment verified successfully.",
            data={
                "payment": result.payment.serialize(),
                "rent_bills_paid": result.rent_bills_paid,
                "utility_bills_paid": result.utility_bills_paid,
                "paid_on_bs": result.paid_on_bs,
            },
        )
    ), 200


@bp.post("/payments/confirm")
@roles_required(ROLE_TENANT)
def confirm_payment():
    """Tenant asks the admins to verify that everything due has been paid"""
    tenant_id, _, full_name = current_identity()
    payment = reconciliation.request_payment_verification(
        db.session,
        tenant_id,
        full_name,
        notifier=Notifier(db.session),
        include_overdue=current_app.config["RECONCILE_INCLUDE_OVERDUE"],
    )
    return jsonify(
        envelope(True, "Payment verification request sent successfully.", data=payment.serialize())
    ), 201


@bp.get("/my-pending-payment")
@roles_required(ROLE_TENANT)
def my_pending_payment():
    tenant_id, _, _ = current_identity()
    return jsonify(
        envelope(True, has_pending_payment=reconciliation.has_pending_payment(db.session, tenant_id))
    ), 200
