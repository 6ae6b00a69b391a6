from . import db


class Room(db.Model):
    __tablename__ = "rooms"

    id = db.Column(db.Integer, primary_key=True)
    room_number = db.Column(db.String(20), unique=True, nullable=False)
    floor = db.Column(db.String(20), nullable=False)
    rent_amount = db.Column(db.Numeric(10, 2), nullable=False)

    # Occupancy pointer, kept in sync with User.room_id on assignment
    tenant_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True)

    def __repr__(self):
        return f"<Room {self.room_number}: floor {self.floor}>"

    @property
    def is_vacant(self):
        return self.tenant_id is None

    def serialize(self, tenant_name=None):
        return {
            "id": self.id,
            "room_number": self.room_number,
            "floor": self.floor,
            "rent_amount": float(self.rent_amount),
            "tenant_id": self.tenant_id,
            "tenant_name": tenant_name,
        }
