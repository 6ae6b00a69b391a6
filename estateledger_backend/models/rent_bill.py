from . import db
from datetime import datetime

STATUS_DUE = "DUE"
STATUS_PAID = "PAID"
STATUS_OVERDUE = "OVERDUE"


class RentBill(db.Model):
    __tablename__ = "rent_bills"

    kind = "rent"

    id = db.Column(db.Integer, primary_key=True)

    # Foreign Keys
    tenant_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    room_id = db.Column(db.Integer, db.ForeignKey("rooms.id"), nullable=False)

    # Billing details
    rent_for_period = db.Column(db.String(100), nullable=False)
    amount = db.Column(db.Numeric(10, 2), nullable=False)

    # Dates: Gregorian internally, Bikram Sambat string for display
    bill_date_ad = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    bill_date_bs = db.Column(db.String(10), nullable=False)
    paid_on_ad = db.Column(db.DateTime, nullable=True)
    paid_on_bs = db.Column(db.String(10), nullable=True)

    # Status tracking
    status = db.Column(db.String(10), default=STATUS_DUE, nullable=False, index=True)
    payment_method = db.Column(db.String(30), nullable=True)
    remarks = db.Column(db.Text, nullable=True)

    def __repr__(self):
        return f"<RentBill {self.id}: Tenant {self.tenant_id}, Rs {self.amount}, {self.status}>"

    @property
    def amount_due(self):
        """The amount this bill contributes to a tenant's outstanding total."""
        return self.amount

    def mark_paid(self, paid_on_bs, paid_at=None):
        """Mark rent as paid"""
        self.status = STATUS_PAID
        self.paid_on_ad = paid_at or datetime.utcnow()
        self.paid_on_bs = paid_on_bs

    def serialize(self, tenant_name=None, room_number=None):
        return {
            "id": self.id,
            "tenant_id": self.tenant_id,
            "room_id": self.room_id,
            "tenant_name": tenant_name,
            "room_number": room_number,
            "rent_for_period": self.rent_for_period,
            "amount": float(self.amount),
            "status": self.status,
            "bill_date_ad": self.bill_date_ad.isoformat() if self.bill_date_ad else None,
            "bill_date_bs": self.bill_date_bs,
            "paid_on_ad": self.paid_on_ad.isoformat() if self.paid_on_ad else None,
            "paid_on_bs": self.paid_on_bs,
            "payment_method": self.payment_method,
            "remarks": self.remarks,
        }
