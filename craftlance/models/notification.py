from craftlance.extensions import db
from sqlalchemy.sql import func
import uuid

NOTIFICATION_TYPES = (
    "new_message",
    "order_status",
    "new_review",
    "payment_status",
    "system_alert",
)


def gen_notif_id():
    return f"notif-{str(uuid.uuid4())[:8]}"


class Notification(db.Model):
    __tablename__ = "notifications"

    __table_args__ = (
        db.Index("idx_notifications_user_created", "user_id", "created_at"),
    )

    id = db.Column(db.String(50), primary_key=True, default=gen_notif_id)
    user_id = db.Column(db.String(50), db.ForeignKey("users.id"), nullable=False)

    type = db.Column(db.String(30), nullable=False, default="system_alert")
    title = db.Column(db.String(255), nullable=False)
    message = db.Column(db.Text, nullable=False)
    link = db.Column(db.String(255), nullable=True)

    read_at = db.Column(db.DateTime(timezone=True), nullable=True)
    created_at = db.Column(db.DateTime(timezone=True), server_default=func.now())

    recipient = db.relationship("User", backref=db.backref("notifications", lazy=True))
