import re
from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest

from estateledger_backend.errors import NotFound, ValidationFailed
from estateledger_backend.models import Notification, RentBill, UtilityBill
from estateledger_backend.services import bill_ledger
from estateledger_backend.utils.dates import to_bs, today_stamp
from estateledger_backend.utils.money import format_rupees, to_decimal

ELECTRICITY = {"previous_reading": 100, "current_reading": 150, "rate_per_unit": 12}
WATER = {"previous_reading": 20, "current_reading": 60, "rate_per_unit": 5}


def test_meter_charge_uses_reading_difference_times_rate():
    charge = bill_ledger.compute_meter_charge(100, 150, 12)
    assert charge.units_consumed == Decimal("50")
    assert charge.amount == Decimal("600.00")


def test_meter_reset_bills_zero_units():
    charge = bill_ledger.compute_meter_charge(120, 100, 12)
    assert charge.units_consumed == Decimal("0")
    assert charge.amount == Decimal("0.00")


def test_utility_totals_add_optional_charges():
    totals = bill_ledger.compute_utility_totals(
        ELECTRICITY, WATER, include_service_charge=True, include_security_charge=True
    )
    assert totals.electricity.amount == Decimal("600.00")
    assert totals.water.amount == Decimal("200.00")
    assert totals.service_charge == Decimal("500.00")
    assert totals.security_charge == Decimal("1000.00")
    assert totals.total_amount == Decimal("2300.00")


def test_utility_totals_without_charges():
    totals = bill_ledger.compute_utility_totals(ELECTRICITY, WATER)
    assert totals.service_charge == Decimal("0.00")
    assert totals.total_amount == Decimal("800.00")


def test_utility_totals_reject_non_object_readings():
    with pytest.raises(ValidationFailed):
        bill_ledger.compute_utility_totals("150", WATER)


@pytest.mark.parametrize("value", [None, "", "abc", -5, 0, True, "NaN"])
def test_to_decimal_rejects_bad_amounts(value):
    with pytest.raises(ValidationFailed):
        to_decimal(value)


def test_format_rupees():
    assert format_rupees(Decimal("17300")) == "17,300"
    assert format_rupees(Decimal("1234.5")) == "1,234.50"


def test_to_bs_formats_bikram_sambat_date():
    bs = to_bs(date(2024, 1, 1))
    assert re.fullmatch(r"\d{4}-\d{2}-\d{2}", bs)
    assert int(bs[:4]) in (2080, 2081)


def test_today_stamp_reads_one_clock():
    now, bs = today_stamp()
    assert bs == to_bs(now.date())


def test_create_rent_bill_is_due_and_notifies_tenant(db, tenant, room, notifier):
    bill = bill_ledger.create_rent_bill(
        db.session, tenant.id, room.id, "Baisakh 2081", "15000", None, notifier
    )
    assert bill.status == "DUE"
    assert bill.amount == Decimal("15000.00")
    assert re.fullmatch(r"\d{4}-\d{2}-\d{2}", bill.bill_date_bs)

    notes = Notification.query.filter_by(user_id=tenant.id).all()
    assert [n.title for n in notes] == ["New Rent Bill Created"]
    assert "Rs 15,000" in notes[0].message


def test_create_rent_bill_requires_existing_tenant(db, room, notifier):
    with pytest.raises(NotFound):
        bill_ledger.create_rent_bill(db.session, 999, room.id, "Baisakh 2081", "15000", None, notifier)
    assert RentBill.query.count() == 0


def test_create_utility_bill_stores_computed_meters(db, tenant, room, notifier):
    bill = bill_ledger.create_utility_bill(
        db.session,
        tenant.id,
        room.id,
        "Baisakh 2081",
        ELECTRICITY,
        WATER,
        notifier,
        include_service_charge=True,
        include_security_charge=True,
    )
    data = bill.serialize()
    assert data["electricity"]["units_consumed"] == 50
    assert data["water"]["amount"] == 200
    assert data["total_amount"] == 2300
    assert UtilityBill.query.count() == 1


def test_mark_bill_paid_notifies_tenant_and_admin(db, admin, tenant, room, notifier):
    bill = bill_ledger.create_rent_bill(db.session, tenant.id, room.id, "Jestha 2081", 15000, None, notifier)
    bill_ledger.mark_bill_paid(db.session, RentBill, bill.id, admin.id, notifier, payment_method="cash")

    bill = db.session.get(RentBill, bill.id)
    assert bill.status == "PAID"
    assert bill.paid_on_bs is not None
    assert bill.payment_method == "cash"
    assert Notification.query.filter_by(user_id=tenant.id, title="Rent Bill Paid!").count() == 1
    assert Notification.query.filter_by(user_id=admin.id, title="Payment Recorded").count() == 1


def test_mark_overdue_only_touches_old_due_bills(db, tenant, room, notifier):
    old = bill_ledger.create_rent_bill(db.session, tenant.id, room.id, "Old", 15000, None, notifier)
    fresh = bill_ledger.create_rent_bill(db.session, tenant.id, room.id, "Fresh", 15000, None, notifier)
    old.bill_date_ad = datetime.utcnow() - timedelta(days=40)
    db.session.commit()

    assert bill_ledger.mark_overdue_rent_bills(db.session, 30) == 1
    db.session.expire_all()
    assert db.session.get(RentBill, old.id).status == "OVERDUE"
    assert db.session.get(RentBill, fresh.id).status == "DUE"


def test_last_bill_for_tenant_without_bills(db, tenant):
    with pytest.raises(NotFound):
        bill_ledger.last_bill_for_tenant(db.session, UtilityBill, tenant.id)


def test_last_bill_for_tenant_returns_latest(db, tenant, room, notifier):
    first = bill_ledger.create_rent_bill(db.session, tenant.id, room.id, "Chaitra 2080", 15000, None, notifier)
    first.bill_date_ad = datetime.utcnow() - timedelta(days=30)
    db.session.commit()
    latest = bill_ledger.create_rent_bill(db.session, tenant.id, room.id, "Baisakh 2081", 15000, None, notifier)

    assert bill_ledger.last_bill_for_tenant(db.session, RentBill, tenant.id).id == latest.id
