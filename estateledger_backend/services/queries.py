"""Read-side listings: explicit joins instead of lazy relationship loading.

Each listing returns typed rows pairing the record with the joined display
columns; routes turn them into JSON with ``serialize()``.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional, Union

from sqlalchemy import func

from estateledger_backend.errors import NotFound
from estateledger_backend.models import (
    Expense,
    MaintenanceRequest,
    Payment,
    RentBill,
    Room,
    User,
    UtilityBill,
    WaterTanker,
    PasswordResetRequest,
    ROLE_SECURITY,
    ROLE_TENANT,
)
from estateledger_backend.models import password_reset
from estateledger_backend.models.expense import TYPE_INCOME
from estateledger_backend.models.maintenance import STATUS_COMPLETED
from estateledger_backend.models.payment import STATUS_PENDING
from estateledger_backend.models.rent_bill import STATUS_DUE, STATUS_OVERDUE, STATUS_PAID
from estateledger_backend.utils.money import quantize


@dataclass(frozen=True)
class BillRow:
    bill: Union[RentBill, UtilityBill]
    tenant_name: Optional[str]
    room_number: Optional[str]

    def serialize(self):
        return self.bill.serialize(tenant_name=self.tenant_name, room_number=self.room_number)


@dataclass(frozen=True)
class PaymentRow:
    payment: Payment
    tenant_name: Optional[str]

    def serialize(self):
        return self.payment.serialize(tenant_name=self.tenant_name)


@dataclass(frozen=True)
class RoomRow:
    room: Room
    tenant_name: Optional[str]

    def serialize(self):
        return self.room.serialize(tenant_name=self.tenant_name)


@dataclass(frozen=True)
class TenantRow:
    tenant: User
    room_number: Optional[str]

    def serialize(self):
        return self.tenant.serialize(room_number=self.room_number)


@dataclass(frozen=True)
class MaintenanceRow:
    request: MaintenanceRequest
    tenant_name: Optional[str]
    room_number: Optional[str]

    def serialize(self):
        return self.request.serialize(tenant_name=self.tenant_name, room_number=self.room_number)


@dataclass(frozen=True)
class TankerRow:
    tanker: WaterTanker
    added_by_name: Optional[str]

    def serialize(self):
        return self.tanker.serialize(added_by_name=self.added_by_name)


@dataclass(frozen=True)
class FinancialSummary:
    total_income: Decimal
    total_expense: Decimal

    @property
    def net_profit(self) -> Decimal:
        return self.total_income - self.total_expense

    def serialize(self):
        return {
            "total_income": float(self.total_income),
            "total_expense": float(self.total_expense),
            "net_profit": float(self.net_profit),
        }


@dataclass(frozen=True)
class DashboardSummary:
    total_rent_due: Decimal
    active_tenants: int
    unpaid_utility_bills: int
    last_payment_amount: Decimal
    last_payment_date: str

    def serialize(self):
        return {
            "total_rent_due": float(self.total_rent_due),
            "active_tenants": self.active_tenants,
            "unpaid_utility_bills": self.unpaid_utility_bills,
            "last_payment": {
                "amount": float(self.last_payment_amount),
                "date": self.last_payment_date,
            },
        }


def serialize_rows(rows):
    return [row.serialize() for row in rows]


def _bills(session, model, tenant_id=None) -> List[BillRow]:
    query = (
        session.query(model, User.full_name, Room.room_number)
        .outerjoin(User, model.tenant_id == User.id)
        .outerjoin(Room, model.room_id == Room.id)
    )
    if tenant_id is not None:
        query = query.filter(model.tenant_id == tenant_id)
    rows = query.order_by(model.bill_date_ad.desc(), model.id.desc()).all()
    return [BillRow(bill, name, room) for bill, name, room in rows]


def rent_bills(session, tenant_id=None) -> List[BillRow]:
    return _bills(session, RentBill, tenant_id)


def utility_bills(session, tenant_id=None) -> List[BillRow]:
    return _bills(session, UtilityBill, tenant_id)


def pending_payments(session) -> List[PaymentRow]:
    rows = (
        session.query(Payment, User.full_name)
        .outerjoin(User, Payment.tenant_id == User.id)
        .filter(Payment.status == STATUS_PENDING)
        .order_by(Payment.created_at.desc(), Payment.id.desc())
        .all()
    )
    return [PaymentRow(payment, name) for payment, name in rows]


def rooms(session, vacant_only=False) -> List[RoomRow]:
    query = session.query(Room, User.full_name).outerjoin(User, Room.tenant_id == User.id)
    if vacant_only:
        query = query.filter(Room.tenant_id.is_(None))
    return [RoomRow(room, name) for room, name in query.order_by(Room.room_number).all()]


def tenants(session) -> List[TenantRow]:
    rows = (
        session.query(User, Room.room_number)
        .outerjoin(Room, User.room_id == Room.id)
        .filter(User.role == ROLE_TENANT)
        .order_by(User.full_name)
        .all()
    )
    return [TenantRow(user, room) for user, room in rows]


def maintenance_requests(session, tenant_id=None, active_only=False) -> List[MaintenanceRow]:
    query = (
        session.query(MaintenanceRequest, User.full_name, Room.room_number)
        .outerjoin(User, MaintenanceRequest.tenant_id == User.id)
        .outerjoin(Room, MaintenanceRequest.room_id == Room.id)
    )
    if tenant_id is not None:
        query = query.filter(MaintenanceRequest.tenant_id == tenant_id)
    if active_only:
        query = query.filter(MaintenanceRequest.status != STATUS_COMPLETED)
    rows = query.order_by(MaintenanceRequest.created_at.desc(), MaintenanceRequest.id.desc()).all()
    return [MaintenanceRow(req, name, room) for req, name, room in rows]


def water_tankers(session, limit=None) -> List[TankerRow]:
    query = (
        session.query(WaterTanker, User.full_name)
        .outerjoin(User, WaterTanker.added_by == User.id)
        .order_by(WaterTanker.entry_date.desc(), WaterTanker.id.desc())
    )
    if limit:
        query = query.limit(limit)
    return [TankerRow(tanker, name) for tanker, name in query.all()]


def financial_summary(session) -> FinancialSummary:
    totals = dict(
        session.query(Expense.type, func.coalesce(func.sum(Expense.amount), 0)).group_by(Expense.type).all()
    )
    income = Decimal(str(totals.get(TYPE_INCOME, 0)))
    expense = sum((Decimal(str(v)) for k, v in totals.items() if k != TYPE_INCOME), Decimal("0"))
    return FinancialSummary(total_income=quantize(income), total_expense=quantize(expense))


def dashboard_summary(session) -> DashboardSummary:
    total_rent_due = (
        session.query(func.coalesce(func.sum(RentBill.amount), 0)).filter(RentBill.status == STATUS_DUE).scalar()
    )
    active_tenants = session.query(User).filter(User.role == ROLE_TENANT, User.room_id.isnot(None)).count()
    unpaid_utility_bills = session.query(UtilityBill).filter(UtilityBill.status == STATUS_DUE).count()

    last_rent = (
        session.query(RentBill).filter(RentBill.status == STATUS_PAID).order_by(RentBill.paid_on_ad.desc()).first()
    )
    last_utility = (
        session.query(UtilityBill)
        .filter(UtilityBill.status == STATUS_PAID)
        .order_by(UtilityBill.paid_on_ad.desc())
        .first()
    )
    candidates = [b for b in (last_rent, last_utility) if b is not None and b.paid_on_ad is not None]
    last = max(candidates, key=lambda b: b.paid_on_ad) if candidates else None

    return DashboardSummary(
        total_rent_due=quantize(Decimal(str(total_rent_due or 0))),
        active_tenants=active_tenants,
        unpaid_utility_bills=unpaid_utility_bills,
        last_payment_amount=last.amount_due if last else Decimal("0"),
        last_payment_date=last.paid_on_bs if last else "N/A",
    )


@dataclass(frozen=True)
class ResetRequestRow:
    request: PasswordResetRequest
    user_name: Optional[str]
    user_email: Optional[str]

    def serialize(self):
        return self.request.serialize(user_name=self.user_name, user_email=self.user_email)


@dataclass(frozen=True)
class TenantDetails:
    tenant: User
    room: Optional[Room]
    rent_bills: List[BillRow]
    utility_bills: List[BillRow]

    def serialize(self):
        details = self.tenant.serialize(room_number=self.room.room_number if self.room else None)
        details["room"] = self.room.serialize(tenant_name=self.tenant.full_name) if self.room else None
        return {
            "tenant_details": details,
            "rent_bills": serialize_rows(self.rent_bills),
            "utility_bills": serialize_rows(self.utility_bills),
        }


@dataclass(frozen=True)
class PublicBill:
    row: BillRow
    total_outstanding_due: Decimal

    @property
    def bill_type(self) -> str:
        return "Rent" if isinstance(self.row.bill, RentBill) else "Utility"

    def serialize(self):
        data = self.row.serialize()
        data["type"] = self.bill_type
        data["total_outstanding_due"] = float(self.total_outstanding_due)
        return data


def staff_members(session) -> List[User]:
    query = session.query(User).filter(User.role == ROLE_SECURITY)
    return query.order_by(User.created_at.desc(), User.id.desc()).all()


def pending_reset_requests(session) -> List[ResetRequestRow]:
    rows = (
        session.query(PasswordResetRequest, User.full_name, User.email)
        .outerjoin(User, PasswordResetRequest.user_id == User.id)
        .filter(PasswordResetRequest.status == password_reset.STATUS_PENDING)
        .order_by(PasswordResetRequest.created_at.asc(), PasswordResetRequest.id.asc())
        .all()
    )
    return [ResetRequestRow(req, name, email) for req, name, email in rows]


def tenant_details(session, tenant_id) -> TenantDetails:
    tenant = session.get(User, tenant_id)
    if not tenant or tenant.role != ROLE_TENANT:
        raise NotFound("Tenant not found.")
    room = session.get(Room, tenant.room_id) if tenant.room_id else None
    return TenantDetails(
        tenant=tenant,
        room=room,
        rent_bills=rent_bills(session, tenant_id),
        utility_bills=utility_bills(session, tenant_id),
    )


_BILL_AMOUNT = {RentBill: RentBill.amount, UtilityBill: UtilityBill.total_amount}


def _unpaid_total(session, model, tenant_id, exclude_id=None):
    query = session.query(func.coalesce(func.sum(_BILL_AMOUNT[model]), 0)).filter(
        model.tenant_id == tenant_id, model.status.in_((STATUS_DUE, STATUS_OVERDUE))
    )
    if exclude_id is not None:
        query = query.filter(model.id != exclude_id)
    total = query.scalar()
    return Decimal(str(total or 0))


def public_bill(session, bill_id, model=None) -> PublicBill:
    """A bill for the shareable bill page, with everything the tenant still owes.

    Without ``model`` the id is looked up as a rent bill first, then as a
    utility bill.
    """
    for candidate in (model,) if model else (RentBill, UtilityBill):
        row = (
            session.query(candidate, User.full_name, Room.room_number)
            .outerjoin(User, candidate.tenant_id == User.id)
            .outerjoin(Room, candidate.room_id == Room.id)
            .filter(candidate.id == bill_id)
            .first()
        )
        if row:
            break
    else:
        raise NotFound("Bill not found.")

    bill, tenant_name, room_number = row
    outstanding = sum(
        (_unpaid_total(session, m, bill.tenant_id, bill.id if m is type(bill) else None) for m in _BILL_AMOUNT),
        Decimal("0"),
    )
    if bill.status != STATUS_PAID:
        outstanding += bill.amount_due
    return PublicBill(row=BillRow(bill, tenant_name, room_number), total_outstanding_due=quantize(outstanding))
