from flask import Blueprint, jsonify

from estateledger_backend.errors import envelope
from estateledger_backend.extensions import db
from estateledger_backend.models import Notification
from estateledger_backend.services.notifications import Notifier
from estateledger_backend.utils.auth_utils import current_identity, login_required

bp = Blueprint("notifications", __name__)


@bp.get("/notifications")
@login_required
def list_notifications():
    user_id, _, _ = current_identity()
    notifications = (
        Notification.query.filter_by(user_id=user_id)
        .order_by(Notification.created_at.desc(), Notification.id.desc())
        .limit(20)
        .all()
    )
    return jsonify(
        envelope(
            True,
            data=[n.serialize() for n in notifications],
            unread_count=Notifier(db.session).unread_count(user_id),
        )
    ), 200


@bp.patch("/notifications")
@login_required
def mark_all_read():
    user_id, _, _ = current_identity()
    Notifier(db.session).mark_all_read(user_id)
    return jsonify(envelope(True, "All notifications marked as read")), 200
