from flask import Blueprint, jsonify

from estateledger_backend.errors import NotFound, envelope
from estateledger_backend.extensions import db
from estateledger_backend.models import RentBill, UtilityBill
from estateledger_backend.services import queries

bp = Blueprint("public", __name__)

BILL_KINDS = {RentBill.kind: RentBill, UtilityBill.kind: UtilityBill}

# ============= SHAREABLE BILL PAGE (no login) =============


@bp.get("/public/bills/<int:bill_id>")
def public_bill(bill_id):
    """Rent bill with this id, else the utility bill with it"""
    return jsonify(envelope(True, data=queries.public_bill(db.session, bill_id).serialize())), 200


@bp.get("/public/bills/<kind>/<int:bill_id>")
def public_bill_of_kind(kind, bill_id):
    model = BILL_KINDS.get(kind)
    if model is None:
        raise NotFound("Bill not found.")
    return jsonify(envelope(True, data=queries.public_bill(db.session, bill_id, model).serialize())), 200
