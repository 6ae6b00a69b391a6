from . import db
from datetime import datetime

TYPE_INCOME = "INCOME"
TYPE_EXPENSE = "EXPENSE"

CATEGORIES = ("MAINTENANCE", "SALARY", "UTILITIES", "RENT_INCOME", "OTHER")


class Expense(db.Model):
    __tablename__ = "expenses"

    TYPES = (TYPE_INCOME, TYPE_EXPENSE)
    CATEGORIES = CATEGORIES

    id = db.Column(db.Integer, primary_key=True)
    type = db.Column(db.String(10), nullable=False)
    category = db.Column(db.String(20), nullable=False)
    amount = db.Column(db.Numeric(10, 2), nullable=False)
    description = db.Column(db.String(255), nullable=False)
    date = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    created_at = db.Column(db.DateTime, server_default=db.func.now())

    def serialize(self):
        return {
            "id": self.id,
            "type": self.type,
            "category": self.category,
            "amount": float(self.amount),
            "description": self.description,
            "date": self.date.isoformat() if self.date else None,
        }
