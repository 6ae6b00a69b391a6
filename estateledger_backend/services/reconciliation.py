"""
Payment submission and verification.

A tenant submits a claim that they have paid everything they owe
(``request_payment_verification``); an admin then verifies it
(``verify_payment``), which sweeps every DUE bill the tenant has to PAID and
flips the payment to VERIFIED in a single transaction.
"""
import logging
from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy import func, update

from estateledger_backend.errors import NotFound, ValidationFailed
from estateledger_backend.models import Payment, RentBill, User, UtilityBill, ROLE_ADMIN
from estateledger_backend.models import rent_bill, utility_bill
from estateledger_backend.models.payment import STATUS_PENDING, STATUS_VERIFIED
from estateledger_backend.services.unit_of_work import unit_of_work
from estateledger_backend.utils.dates import today_stamp
from estateledger_backend.utils.money import format_rupees, quantize

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReconciliationResult:
    payment: Payment
    rent_bills_paid: int
    utility_bills_paid: int
    paid_on_bs: str


def _rent_statuses(include_overdue):
    if include_overdue:
        return (rent_bill.STATUS_DUE, rent_bill.STATUS_OVERDUE)
    return (rent_bill.STATUS_DUE,)


def outstanding_total(session, tenant_id, include_overdue=False) -> Decimal:
    """Sum of the tenant's DUE rent amounts and DUE utility totals."""
    rent_due = (
        session.query(func.coalesce(func.sum(RentBill.amount), 0))
        .filter(RentBill.tenant_id == tenant_id, RentBill.status.in_(_rent_statuses(include_overdue)))
        .scalar()
    )
    utility_due = (
        session.query(func.coalesce(func.sum(UtilityBill.total_amount), 0))
        .filter(UtilityBill.tenant_id == tenant_id, UtilityBill.status == utility_bill.STATUS_DUE)
        .scalar()
    )
    return quantize(Decimal(str(rent_due)) + Decimal(str(utility_due)))


def has_pending_payment(session, tenant_id) -> bool:
    query = session.query(Payment.id).filter(Payment.tenant_id == tenant_id, Payment.status == STATUS_PENDING)
    return query.first() is not None


def request_payment_verification(session, tenant_id, tenant_name, notifier, include_overdue=False):
    """Record a PENDING payment for everything the tenant owes and tell the admins."""
    total_due = outstanding_total(session, tenant_id, include_overdue)
    if total_due <= 0:
        raise ValidationFailed("No pending bills to pay.")

    if has_pending_payment(session, tenant_id):
        raise ValidationFailed("A payment is already awaiting verification.")

    if not session.query(User.id).filter(User.role == ROLE_ADMIN).count():
        raise NotFound("No admin users found to notify.")

    payment = Payment(tenant_id=tenant_id, amount=total_due, status=STATUS_PENDING)
    session.add(payment)
    session.commit()
    logger.info("Payment %s of Rs %s submitted by tenant %s", payment.id, total_due, tenant_id)

    notifier.notify_admins(
        "Payment Submitted for Verification",
        f"{tenant_name or 'A tenant'} has submitted a payment of Rs {format_rupees(total_due)} for your verification.",
        "/dashboard/payments",
    )
    return payment


def _sweep_due_bills(session, tenant_id, paid_at, paid_on_bs, include_overdue):
    values = {"status": rent_bill.STATUS_PAID, "paid_on_ad": paid_at, "paid_on_bs": paid_on_bs}
    rent_paid = (
        session.query(RentBill)
        .filter(RentBill.tenant_id == tenant_id, RentBill.status.in_(_rent_statuses(include_overdue)))
        .update(values, synchronize_session=False)
    )
    utility_paid = (
        session.query(UtilityBill)
        .filter(UtilityBill.tenant_id == tenant_id, UtilityBill.status == utility_bill.STATUS_DUE)
        .update(values, synchronize_session=False)
    )
    return rent_paid, utility_paid


def _claim_payment(session, payment_id, verified_at) -> bool:
    """Flip PENDING -> VERIFIED in the database; False if someone else already did."""
    result = session.execute(
        update(Payment)
        .where(Payment.id == payment_id, Payment.status == STATUS_PENDING)
        .values(status=STATUS_VERIFIED, verified_at=verified_at)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


def verify_payment(session, payment_id, notifier, include_overdue=False) -> ReconciliationResult:
    """Flip the payment to VERIFIED and sweep the tenant's DUE bills to PAID.

    The flip and the sweep share one transaction: if either fails nothing is
    written. The flip is conditional on the row still being PENDING, so of two
    concurrent verifications only one sweeps and notifies. The tenant is
    notified only after the commit.
    """
    payment = session.get(Payment, payment_id)
    if not payment:
        raise NotFound("Payment record not found.")
    if payment.is_verified:
        raise ValidationFailed("This payment has already been verified.")

    tenant_id = payment.tenant_id
    paid_at, paid_on_bs = today_stamp()
    with unit_of_work(session):
        if not _claim_payment(session, payment_id, paid_at):
            raise ValidationFailed("This payment has already been verified.")
        rent_paid, utility_paid = _sweep_due_bills(session, tenant_id, paid_at, paid_on_bs, include_overdue)

    # bulk updates bypass the identity map
    session.expire_all()
    logger.info(
        "Payment %s verified: %d rent and %d utility bills marked paid for tenant %s",
        payment_id, rent_paid, utility_paid, tenant_id,
    )

    notifier.notify(
        tenant_id,
        "Payment Verified!",
        f"Your payment of Rs {format_rupees(payment.amount)} has been verified and your bills "
        "are now marked as paid. Thank you!",
        "/dashboard/statement",
    )
    return ReconciliationResult(
        payment=payment,
        rent_bills_paid=rent_paid,
        utility_bills_paid=utility_paid,
        paid_on_bs=paid_on_bs,
    )
