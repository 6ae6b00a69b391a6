"""
Security staff payroll and water tanker log.

Both write a second, mirrored row into the income/expense ledger, and both do
it in one unit of work so the ledger never disagrees with the source record.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, InvalidOperation

from estateledger_backend.errors import NotFound, ValidationFailed
from estateledger_backend.models import Expense, StaffPayment, User, WaterTanker, ROLE_SECURITY
from estateledger_backend.models.expense import TYPE_EXPENSE
from estateledger_backend.models.staff_payment import TYPE_SALARY
from estateledger_backend.services.unit_of_work import unit_of_work
from estateledger_backend.utils.money import format_rupees, to_decimal

logger = logging.getLogger(__name__)


@dataclass
class PayrollSummary:
    payments: list = field(default_factory=list)
    net_balance: Decimal = Decimal("0.00")


def net_balance(payments) -> Decimal:
    """SALARY + BONUS - ADVANCE, folded over every row given."""
    return sum((p.signed_amount for p in payments), Decimal("0.00"))


def resolve_staff(session, staff_id=None):
    """The given SECURITY user, or the first one on record when no id is passed."""
    if staff_id:
        staff = session.get(User, staff_id)
        if not staff or staff.role != ROLE_SECURITY:
            raise NotFound("Staff member not found.")
        return staff
    staff = session.query(User).filter(User.role == ROLE_SECURITY).order_by(User.id).first()
    if not staff:
        raise NotFound("No security guard account found.")
    return staff


def record_staff_payment(
    session,
    payment_type,
    amount,
    notifier,
    staff_id=None,
    month=None,
    remarks=None,
    date=None,
    mirror_expense=True,
):
    if payment_type not in StaffPayment.TYPES:
        raise ValidationFailed(f"Invalid type: must be one of {', '.join(StaffPayment.TYPES)}")
    amount = to_decimal(amount)
    staff = resolve_staff(session, staff_id)
    paid_on = date or datetime.utcnow()
    month = month if payment_type == TYPE_SALARY else None
    remarks = remarks or ""
    label = f"{payment_type} ({month})" if month else payment_type

    with unit_of_work(session):
        payment = StaffPayment(
            staff_id=staff.id,
            type=payment_type,
            amount=amount,
            month=month,
            date=paid_on,
            remarks=remarks,
        )
        session.add(payment)
        if mirror_expense:
            # Advances are grouped under SALARY with the rest of staff pay
            session.add(
                Expense(
                    type=TYPE_EXPENSE,
                    category="SALARY",
                    amount=amount,
                    date=paid_on,
                    description=f"Security Guard - {label}. {remarks}".strip(),
                )
            )
    logger.info("Staff payment %s: %s Rs %s to staff %s", payment.id, payment_type, amount, staff.id)

    notifier.notify(
        staff.id,
        f"Payment Received: {payment_type}",
        f"You received Rs {format_rupees(amount)} ({remarks or 'No remarks'})",
        "/dashboard/security",
    )
    return payment


def staff_ledger(session, staff_id=None) -> PayrollSummary:
    """One staff member's payments, or every staff payment when ``staff_id`` is None."""
    query = session.query(StaffPayment, User.full_name).join(User, StaffPayment.staff_id == User.id)
    if staff_id is not None:
        query = query.filter(StaffPayment.staff_id == staff_id)
    rows = query.order_by(StaffPayment.date.desc(), StaffPayment.id.desc()).all()
    payments = [p for p, _ in rows]
    return PayrollSummary(
        payments=[p.serialize(staff_name=name) for p, name in rows],
        net_balance=net_balance(payments),
    )


def _whole_liters(value) -> int:
    try:
        liters = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationFailed("Invalid volume_liters: must be a number")
    if not liters.is_finite() or liters != liters.to_integral_value():
        raise ValidationFailed("Invalid volume_liters: must be a whole number of liters")
    if liters <= 0:
        raise ValidationFailed("Invalid volume_liters: must be greater than zero")
    return int(liters)


def log_water_tanker(session, added_by, cost, volume_liters):
    if cost in (None, "") or volume_liters in (None, ""):
        raise ValidationFailed("Cost and Volume are required")
    cost = to_decimal(cost, "cost")
    volume = _whole_liters(volume_liters)
    now = datetime.utcnow()

    with unit_of_work(session):
        tanker = WaterTanker(cost=cost, volume_liters=volume, added_by=added_by, entry_date=now)
        session.add(tanker)
        session.add(
            Expense(
                type=TYPE_EXPENSE,
                category="UTILITIES",
                amount=cost,
                date=now,
                description=f"Water Tanker ({volume}L) - Logged by Security",
            )
        )
    logger.info("Water tanker %s logged by user %s: %sL for Rs %s", tanker.id, added_by, volume, cost)
    return tanker
