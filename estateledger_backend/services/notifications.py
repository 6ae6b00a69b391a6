"""
In-app notifications.

Notifications are persisted rows that the client polls (``GET /api/notifications``).
Delivery over a realtime channel is not handled here. A failed write is logged
and reported as ``False`` so it never undoes the business operation that
triggered it, which has already been committed by then.
"""
import logging

from estateledger_backend.models import Notification, User, ROLE_ADMIN

logger = logging.getLogger(__name__)


class Notifier:
    def __init__(self, session):
        self.session = session

    def notify(self, user_id, title, message, link=None) -> bool:
        try:
            self.session.add(Notification(user_id=user_id, title=title, message=message, link=link))
            self.session.commit()
            logger.info("Notification %r sent to user %s", title, user_id)
            return True
        except Exception as e:
            self.session.rollback()
            logger.error("Failed to create notification %r for user %s: %s", title, user_id, e)
            return False

    def notify_admins(self, title, message, link=None) -> int:
        """Notify every ADMIN user; returns how many notifications were written."""
        admin_ids = [uid for (uid,) in self.session.query(User.id).filter(User.role == ROLE_ADMIN).all()]
        return sum(1 for uid in admin_ids if self.notify(uid, title, message, link))

    def unread_count(self, user_id) -> int:
        return (
            self.session.query(Notification)
            .filter(Notification.user_id == user_id, Notification.is_read.is_(False))
            .count()
        )

    def mark_all_read(self, user_id) -> int:
        updated = (
            self.session.query(Notification)
            .filter(Notification.user_id == user_id, Notification.is_read.is_(False))
            .update({"is_read": True}, synchronize_session=False)
        )
        self.session.commit()
        return updated
