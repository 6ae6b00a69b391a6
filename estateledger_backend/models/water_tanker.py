from . import db
from datetime import datetime


class WaterTanker(db.Model):
    __tablename__ = "water_tankers"

    id = db.Column(db.Integer, primary_key=True)
    entry_date = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    volume_liters = db.Column(db.Integer, nullable=False)
    cost = db.Column(db.Numeric(10, 2), nullable=False)
    added_by = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True)

    def serialize(self, added_by_name=None):
        return {
            "id": self.id,
            "entry_date": self.entry_date.isoformat() if self.entry_date else None,
            "volume_liters": self.volume_liters,
            "cost": float(self.cost),
            "added_by": self.added_by,
            "added_by_name": added_by_name,
        }
