from . import db
from datetime import datetime

STATUS_DUE = "DUE"
STATUS_PAID = "PAID"


class UtilityBill(db.Model):
    __tablename__ = "utility_bills"

    kind = "utility"

    id = db.Column(db.Integer, primary_key=True)

    tenant_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    room_id = db.Column(db.Integer, db.ForeignKey("rooms.id"), nullable=False)

    billing_month_bs = db.Column(db.String(30), nullable=False)
    bill_date_ad = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    bill_date_bs = db.Column(db.String(10), nullable=False)

    # Electricity meter
    electricity_previous_reading = db.Column(db.Numeric(10, 2), default=0)
    electricity_current_reading = db.Column(db.Numeric(10, 2), default=0)
    electricity_units_consumed = db.Column(db.Numeric(10, 2), default=0)
    electricity_rate_per_unit = db.Column(db.Numeric(10, 2), default=0)
    electricity_amount = db.Column(db.Numeric(10, 2), default=0)

    # Water meter
    water_previous_reading = db.Column(db.Numeric(10, 2), default=0)
    water_current_reading = db.Column(db.Numeric(10, 2), default=0)
    water_units_consumed = db.Column(db.Numeric(10, 2), default=0)
    water_rate_per_unit = db.Column(db.Numeric(10, 2), default=0)
    water_amount = db.Column(db.Numeric(10, 2), default=0)

    # Fixed charges
    service_charge = db.Column(db.Numeric(10, 2), default=0)
    security_charge = db.Column(db.Numeric(10, 2), default=0)

    total_amount = db.Column(db.Numeric(10, 2), nullable=False)
    status = db.Column(db.String(10), default=STATUS_DUE, nullable=False, index=True)
    paid_on_ad = db.Column(db.DateTime, nullable=True)
    paid_on_bs = db.Column(db.String(10), nullable=True)
    remarks = db.Column(db.Text, nullable=True)

    def __repr__(self):
        return f"<UtilityBill {self.id}: Tenant {self.tenant_id}, Rs {self.total_amount}, {self.status}>"

    @property
    def amount_due(self):
        return self.total_amount

    def set_meter(self, prefix, charge):
        """Copy a computed MeterCharge onto the electricity_* or water_* columns."""
        setattr(self, f"{prefix}_previous_reading", charge.previous_reading)
        setattr(self, f"{prefix}_current_reading", charge.current_reading)
        setattr(self, f"{prefix}_units_consumed", charge.units_consumed)
        setattr(self, f"{prefix}_rate_per_unit", charge.rate_per_unit)
        setattr(self, f"{prefix}_amount", charge.amount)

    def _meter(self, prefix):
        def _f(name):
            value = getattr(self, f"{prefix}_{name}")
            return float(value) if value is not None else 0.0

        return {
            "previous_reading": _f("previous_reading"),
            "current_reading": _f("current_reading"),
            "units_consumed": _f("units_consumed"),
            "rate_per_unit": _f("rate_per_unit"),
            "amount": _f("amount"),
        }

    def mark_paid(self, paid_on_bs, paid_at=None):
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
            "billing_month_bs": self.billing_month_bs,
            "bill_date_ad": self.bill_date_ad.isoformat() if self.bill_date_ad else None,
            "bill_date_bs": self.bill_date_bs,
            "electricity": self._meter("electricity"),
            "water": self._meter("water"),
            "service_charge": float(self.service_charge or 0),
            "security_charge": float(self.security_charge or 0),
            "total_amount": float(self.total_amount),
            "status": self.status,
            "paid_on_ad": self.paid_on_ad.isoformat() if self.paid_on_ad else None,
            "paid_on_bs": self.paid_on_bs,
            "remarks": self.remarks,
        }
