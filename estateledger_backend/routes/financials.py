from flask import Blueprint, jsonify, request

from estateledger_backend.errors import NotFound, ValidationFailed, envelope
from estateledger_backend.extensions import db
from estateledger_backend.models import Expense, ROLE_ADMIN
from estateledger_backend.services import queries
from estateledger_backend.utils.auth_utils import roles_required
from estateledger_backend.utils.dates import parse_iso_date
from estateledger_backend.utils.money import to_decimal

bp = Blueprint("financials", __name__)


@bp.get("/expenses")
@roles_required(ROLE_ADMIN)
def list_expenses():
    expenses = Expense.query.order_by(Expense.date.desc(), Expense.id.desc()).all()
    return jsonify(envelope(True, data=[e.serialize() for e in expenses])), 200


@bp.post("/expenses")
@roles_required(ROLE_ADMIN)
def create_expense():
    data = request.get_json(silent=True) or {}
    if data.get("type") not in Expense.TYPES:
        raise ValidationFailed("type must be INCOME or EXPENSE")
    if data.get("category") not in Expense.CATEGORIES:
        raise ValidationFailed(f"category must be one of {', '.join(Expense.CATEGORIES)}")
    description = (data.get("description") or "").strip()
    if not description:
        raise ValidationFailed("Missing required field: description")

    expense = Expense(
        type=data["type"],
        category=data["category"],
        amount=to_decimal(data.get("amount")),
        description=description,
    )
    date = parse_iso_date(data.get("date"))
    if date:
        expense.date = date
    db.session.add(expense)
    db.session.commit()
    return jsonify(envelope(True, data=expense.serialize())), 201


@bp.get("/financials/summary")
@roles_required(ROLE_ADMIN)
def financial_summary():
    return jsonify(envelope(True, data=queries.financial_summary(db.session).serialize())), 200


@bp.get("/dashboard/summary")
@roles_required(ROLE_ADMIN)
def dashboard_summary():
    return jsonify(envelope(True, data=queries.dashboard_summary(db.session).serialize())), 200


@bp.patch("/expenses/<int:expense_id>")
@roles_required(ROLE_ADMIN)
def update_expense(expense_id):
    expense = db.session.get(Expense, expense_id)
    if not expense:
        raise NotFound("Record not found")
    data = request.get_json(silent=True) or {}

    if "type" in data:
        if data["type"] not in Expense.TYPES:
            raise ValidationFailed("type must be INCOME or EXPENSE")
        expense.type = data["type"]
    if "category" in data:
        if data["category"] not in Expense.CATEGORIES:
            raise ValidationFailed(f"category must be one of {', '.join(Expense.CATEGORIES)}")
        expense.category = data["category"]
    if "amount" in data:
        expense.amount = to_decimal(data["amount"])
    if "description" in data:
        description = (data["description"] or "").strip()
        if not description:
            raise ValidationFailed("Missing required field: description")
        expense.description = description
    if "date" in data:
        date = parse_iso_date(data["date"])
        if not date:
            raise ValidationFailed("Missing required field: date")
        expense.date = date

    db.session.commit()
    return jsonify(envelope(True, data=expense.serialize())), 200


@bp.delete("/expenses/<int:expense_id>")
@roles_required(ROLE_ADMIN)
def delete_expense(expense_id):
    expense = db.session.get(Expense, expense_id)
    if not expense:
        raise NotFound("Record not found")
    db.session.delete(expense)
    db.session.commit()
    return jsonify(envelope(True, "Record deleted.")), 200
