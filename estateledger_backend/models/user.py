from . import db
from werkzeug.security import generate_password_hash, check_password_hash
from datetime import datetime

ROLE_ADMIN = "ADMIN"
ROLE_TENANT = "TENANT"
ROLE_SECURITY = "SECURITY"

class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)

    # Basic Information
    full_name = db.Column(db.String(200), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    phone_number = db.Column(db.String(20), nullable=True)

    # Authentication
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(db.String(20), nullable=False, default=ROLE_TENANT, index=True)

    # Tenancy
    room_id = db.Column(db.Integer, db.ForeignKey("rooms.id", use_alter=True, name="fk_users_room_id"), nullable=True)
    lease_start_date = db.Column(db.Date, nullable=True)
    lease_end_date = db.Column(db.Date, nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def set_password(self, password: str) -> None:
        """Hashes and stores the user's password."""
        self.password_hash = generate_password_hash(password, method="pbkdf2:sha256")

    def check_password(self, password: str) -> bool:
        """Checks a password against the stored hash."""
        return check_password_hash(self.password_hash, password)

    def serialize(self, room_number=None):
        return {
            "id": self.id,
            "full_name": self.full_name,
            "email": self.email,
            "phone_number": self.phone_number,
            "role": self.role,
            "room_id": self.room_id,
            "room_number": room_number,
            "lease_start_date": self.lease_start_date.isoformat() if self.lease_start_date else None,
            "lease_end_date": self.lease_end_date.isoformat() if self.lease_end_date else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r} role={self.role!r}>"
