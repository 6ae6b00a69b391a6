from . import db
from datetime import datetime

TYPE_SALARY = "SALARY"
TYPE_BONUS = "BONUS"
TYPE_ADVANCE = "ADVANCE"


class StaffPayment(db.Model):
    __tablename__ = "staff_payments"

    TYPES = (TYPE_SALARY, TYPE_BONUS, TYPE_ADVANCE)

    id = db.Column(db.Integer, primary_key=True)
    staff_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    type = db.Column(db.String(10), nullable=False)
    amount = db.Column(db.Numeric(10, 2), nullable=False)
    month = db.Column(db.String(30), nullable=True)  # salary context only
    date = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    remarks = db.Column(db.String(255), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<StaffPayment {self.id}: staff {self.staff_id} {self.type} Rs {self.amount}>"

    @property
    def signed_amount(self):
        """Advances are owed back; everything else is earned."""
        return -self.amount if self.type == TYPE_ADVANCE else self.amount

    def serialize(self, staff_name=None):
        return {
            "id": self.id,
            "staff_id": self.staff_id,
            "staff_name": staff_name,
            "type": self.type,
            "amount": float(self.amount),
            "month": self.month,
            "date": self.date.isoformat() if self.date else None,
            "remarks": self.remarks,
        }
