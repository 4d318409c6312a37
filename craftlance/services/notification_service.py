import logging
from datetime import datetime, timezone

from sqlalchemy.exc import SQLAlchemyError

from craftlance.extensions import db
from craftlance.models.notification import Notification
from craftlance.utils.exceptions import StoreError

logger = logging.getLogger(__name__)


class NotificationEmitter:
    """Writes user-facing alerts to the notifications table."""

    def __init__(self, session):
        self.session = session

    def notify(self, user_id, notif_type, title, message, link=None):
        notif = Notification(
            user_id=user_id,
            type=notif_type,
            title=title,
            message=message,
            link=link,
        )
        try:
            self.session.add(notif)
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise StoreError() from e
        return notif


def deliver(notifier, user_id, notif_type, title, message, link=None):
    """Best-effort send. Failures are logged and never reach the caller.

    Only call this after the owning transaction has committed.
    """
    try:
        notifier.notify(user_id, notif_type, title, message, link)
        return True
    except Exception:
        logger.exception("Failed to deliver %s notification to %s", notif_type, user_id)
        return False


def get_user_notifications(user_id, notif_type=None, unread_only=False, before=None, limit=20):
    q = Notification.query.filter_by(user_id=user_id)
    if notif_type:
        q = q.filter_by(type=notif_type)
    if unread_only:
        q = q.filter(Notification.read_at.is_(None))
    if before:
        q = q.filter(Notification.created_at < before)
    return q.order_by(Notification.created_at.desc()).limit(limit).all()


def mark_notifications_read(user_id, ids):
    updated = (
        Notification.query
        .filter(Notification.id.in_(ids), Notification.user_id == user_id)
        .update({"read_at": datetime.now(timezone.utc)}, synchronize_session=False)
    )
    db.session.commit()
    return updated


def get_notifier():
    return NotificationEmitter(db.session)
