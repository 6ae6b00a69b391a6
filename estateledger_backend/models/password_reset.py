from . import db
from datetime import datetime

STATUS_PENDING = "PENDING"
STATUS_COMPLETED = "COMPLETED"


class PasswordResetRequest(db.Model):
    """A tenant asking an admin to set a new password for them."""

    __tablename__ = "password_reset_requests"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    email = db.Column(db.String(255), nullable=False)
    name = db.Column(db.String(200), nullable=False)
    room = db.Column(db.String(20), nullable=False, default="N/A")
    status = db.Column(db.String(10), nullable=False, default=STATUS_PENDING, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    @property
    def is_pending(self):
        return self.status == STATUS_PENDING

    def serialize(self, user_name=None, user_email=None):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "user_name": user_name,
            "user_email": user_email,
            "email": self.email,
            "name": self.name,
            "room": self.room,
            "status": self.status,
            "created_at": self.created_at.isoformat(),
        }
