from . import db
from datetime import datetime

STATUS_PENDING = "PENDING"
STATUS_IN_PROGRESS = "IN_PROGRESS"
STATUS_COMPLETED = "COMPLETED"

# Requests only move forward through these states
STATUS_ORDER = (STATUS_PENDING, STATUS_IN_PROGRESS, STATUS_COMPLETED)


class MaintenanceRequest(db.Model):
    __tablename__ = "maintenance_requests"


    id = db.Column(db.Integer, primary_key=True)
    tenant_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    room_id = db.Column(db.Integer, db.ForeignKey("rooms.id"), nullable=False)
    issue = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=False)
    status = db.Column(db.String(20), default=STATUS_PENDING, nullable=False, index=True)
    priority = db.Column(db.String(20), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    completed_at = db.Column(db.DateTime, nullable=True)

    def __repr__(self):
        return f"<MaintenanceRequest {self.id}: {self.issue!r} {self.status}>"

    def can_transition_to(self, status):
        if status not in STATUS_ORDER:
            return False
        return STATUS_ORDER.index(status) >= STATUS_ORDER.index(self.status)

    def transition_to(self, status):
        self.status = status
        if status == STATUS_COMPLETED and self.completed_at is None:
            self.completed_at = datetime.utcnow()

    def serialize(self, tenant_name=None, room_number=None):
        return {
            "id": self.id,
            "tenant_id": self.tenant_id,
            "room_id": self.room_id,
            "tenant_name": tenant_name,
            "room_number": room_number,
            "issue": self.issue,
            "description": self.description,
            "status": self.status,
            "priority": self.priority,
            "created_at": self.created_at.isoformat(),
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
        }
