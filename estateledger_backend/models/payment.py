from . import db
from datetime import datetime

STATUS_PENDING = "PENDING"
STATUS_VERIFIED = "VERIFIED"


class Payment(db.Model):
    """A tenant's claim of having paid all of their due bills."""

    __tablename__ = "payments"

    id = db.Column(db.Integer, primary_key=True)
    tenant_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)

    # Sum of the tenant's due bills at submission time
    amount = db.Column(db.Numeric(10, 2), nullable=False)

    status = db.Column(db.String(10), default=STATUS_PENDING, nullable=False, index=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    verified_at = db.Column(db.DateTime, nullable=True)

    def __repr__(self):
        return f"<Payment {self.id}: Rs {self.amount} - {self.status}>"

    @property
    def is_verified(self):
        return self.status == STATUS_VERIFIED

    def serialize(self, tenant_name=None):
        return {
            "id": self.id,
            "tenant_id": self.tenant_id,
            "tenant_name": tenant_name,
            "amount": float(self.amount),
            "status": self.status,
            "created_at": self.created_at.isoformat(),
            "verified_at": self.verified_at.isoformat() if self.verified_at else None,
        }
