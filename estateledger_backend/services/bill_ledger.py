"""
Rent and utility bill ledger.

Bills are created DUE and move to PAID either one at a time (an admin marking a
single bill) or in bulk through payment verification (see ``reconciliation``).
Rent bills may also age into OVERDUE via ``mark_overdue_rent_bills``.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal

from estateledger_backend.errors import NotFound, ValidationFailed
from estateledger_backend.models import RentBill, Room, User, UtilityBill, ROLE_TENANT
from estateledger_backend.models.rent_bill import STATUS_DUE, STATUS_OVERDUE
from estateledger_backend.utils.dates import today_stamp
from estateledger_backend.utils.money import format_rupees, quantize, to_decimal

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MeterCharge:
    previous_reading: Decimal
    current_reading: Decimal
    units_consumed: Decimal
    rate_per_unit: Decimal
    amount: Decimal


@dataclass(frozen=True)
class UtilityTotals:
    electricity: MeterCharge
    water: MeterCharge
    service_charge: Decimal
    security_charge: Decimal
    total_amount: Decimal


def _reading(value, field):
    if value in (None, ""):
        return Decimal("0")
    return to_decimal(value, field, allow_zero=True)


def compute_meter_charge(previous, current, rate, label="meter") -> MeterCharge:
    """Units consumed are clamped at zero, so a meter reset (current < previous)
    bills nothing instead of producing a negative charge."""
    previous = _reading(previous, f"{label}.previous_reading")
    current = _reading(current, f"{label}.current_reading")
    rate = _reading(rate, f"{label}.rate_per_unit")
    units = max(Decimal("0"), current - previous)
    return MeterCharge(
        previous_reading=previous,
        current_reading=current,
        units_consumed=units,
        rate_per_unit=rate,
        amount=quantize(units * rate),
    )


def compute_utility_totals(
    electricity,
    water,
    include_service_charge=False,
    include_security_charge=False,
    service_charge_amount=Decimal("500"),
    security_charge_amount=Decimal("1000"),
) -> UtilityTotals:
    electricity = electricity or {}
    water = water or {}
    if not isinstance(electricity, dict) or not isinstance(water, dict):
        raise ValidationFailed("electricity and water must be objects of readings")
    elec = compute_meter_charge(
        electricity.get("previous_reading"),
        electricity.get("current_reading"),
        electricity.get("rate_per_unit"),
        label="electricity",
    )
    wat = compute_meter_charge(
        water.get("previous_reading"),
        water.get("current_reading"),
        water.get("rate_per_unit"),
        label="water",
    )
    service = quantize(service_charge_amount) if include_service_charge else Decimal("0.00")
    security = quantize(security_charge_amount) if include_security_charge else Decimal("0.00")
    return UtilityTotals(
        electricity=elec,
        water=wat,
        service_charge=service,
        security_charge=security,
        total_amount=quantize(elec.amount + wat.amount + service + security),
    )


def _require_tenant_and_room(session, tenant_id, room_id):
    tenant = session.get(User, tenant_id)
    if not tenant or tenant.role != ROLE_TENANT:
        raise NotFound("Tenant not found.")
    room = session.get(Room, room_id)
    if not room:
        raise NotFound("Room not found.")
    return tenant, room


def create_rent_bill(session, tenant_id, room_id, period, amount, remarks, notifier):
    """Create a DUE rent bill and tell the tenant about it.

    The room is not checked against the tenant's current room.
    """
    if not tenant_id or not room_id or not period:
        raise ValidationFailed("Missing required fields")
    amount = to_decimal(amount)
    _require_tenant_and_room(session, tenant_id, room_id)

    now, today_bs = today_stamp()
    bill = RentBill(
        tenant_id=tenant_id,
        room_id=room_id,
        rent_for_period=period,
        amount=amount,
        remarks=remarks,
        bill_date_ad=now,
        bill_date_bs=today_bs,
        status=STATUS_DUE,
    )
    session.add(bill)
    session.commit()
    logger.info("Rent bill %s created for tenant %s (Rs %s)", bill.id, tenant_id, amount)

    notifier.notify(
        tenant_id,
        "New Rent Bill Created",
        f'A new rent bill of Rs {format_rupees(amount)} for "{period}" has been added.',
        "/dashboard",
    )
    return bill


def create_utility_bill(
    session,
    tenant_id,
    room_id,
    month,
    electricity,
    water,
    notifier,
    include_service_charge=False,
    include_security_charge=False,
    service_charge_amount=Decimal("500"),
    security_charge_amount=Decimal("1000"),
    remarks=None,
):
    if not tenant_id or not room_id or not month:
        raise ValidationFailed("Missing required fields")
    totals = compute_utility_totals(
        electricity,
        water,
        include_service_charge,
        include_security_charge,
        service_charge_amount,
        security_charge_amount,
    )
    _require_tenant_and_room(session, tenant_id, room_id)

    now, today_bs = today_stamp()
    bill = UtilityBill(
        tenant_id=tenant_id,
        room_id=room_id,
        billing_month_bs=month,
        bill_date_ad=now,
        bill_date_bs=today_bs,
        service_charge=totals.service_charge,
        security_charge=totals.security_charge,
        total_amount=totals.total_amount,
        status=STATUS_DUE,
        remarks=remarks,
    )
    bill.set_meter("electricity", totals.electricity)
    bill.set_meter("water", totals.water)
    session.add(bill)
    session.commit()
    logger.info("Utility bill %s created for tenant %s (Rs %s)", bill.id, tenant_id, totals.total_amount)

    notifier.notify(
        tenant_id,
        "New Utility Bill",
        f"Your utility bill of Rs {format_rupees(totals.total_amount)} for {month} is ready.",
        "/dashboard",
    )
    return bill


def get_bill(session, model, bill_id):
    bill = session.get(model, bill_id)
    if not bill:
        raise NotFound("Bill not found")
    return bill


def mark_bill_paid(session, model, bill_id, acting_admin_id, notifier, payment_method=None):
    bill = get_bill(session, model, bill_id)
    now, today_bs = today_stamp()
    bill.mark_paid(today_bs, now)
    if payment_method and hasattr(bill, "payment_method"):
        bill.payment_method = payment_method
    session.commit()
    logger.info("%s bill %s marked paid by admin %s", model.kind, bill.id, acting_admin_id)

    label = "Rent" if model is RentBill else "Utility"
    amount = format_rupees(bill.amount_due)
    notifier.notify(
        bill.tenant_id,
        f"{label} Bill Paid!",
        f"Your {label.lower()} bill of Rs {amount} has been paid. Thank you!",
        "/dashboard",
    )
    if acting_admin_id:
        notifier.notify(
            acting_admin_id,
            "Payment Recorded",
            f"You marked a {label.lower()} bill of Rs {amount} as paid.",
            f"/dashboard/{model.kind}-bills",
        )
    return bill


def delete_bill(session, model, bill_id):
    """Hard delete; nothing else references a bill."""
    bill = get_bill(session, model, bill_id)
    session.delete(bill)
    session.commit()
    logger.info("%s bill %s deleted", model.kind, bill_id)


def mark_overdue_rent_bills(session, older_than_days, today=None):
    """Flip DUE rent bills billed more than ``older_than_days`` ago to OVERDUE."""
    today = today or datetime.utcnow()
    cutoff = today - timedelta(days=older_than_days)
    updated = (
        session.query(RentBill)
        .filter(RentBill.status == STATUS_DUE, RentBill.bill_date_ad < cutoff)
        .update({"status": STATUS_OVERDUE}, synchronize_session=False)
    )
    session.commit()
    logger.info("Marked %d rent bills overdue (cutoff %s)", updated, cutoff.date())
    return updated


def last_bill_for_tenant(session, model, tenant_id):
    bill = (
        session.query(model)
        .filter(model.tenant_id == tenant_id)
        .order_by(model.bill_date_ad.desc(), model.id.desc())
        .first()
    )
    if not bill:
        raise NotFound("No previous bill found for this tenant.")
    return bill
