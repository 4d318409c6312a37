from craftlance.extensions import db
from sqlalchemy.sql import func
import uuid

REPORT_STATUSES = ("pending", "resolved", "rejected")


def gen_report_id():
    return f"REP-{str(uuid.uuid4())[:8]}"


class Report(db.Model):
    __tablename__ = "reports"

    __table_args__ = (
        db.Index("idx_reports_status", "status"),
    )

    id = db.Column(db.String(50), primary_key=True, default=gen_report_id)
    reporter_id = db.Column(db.String(50), db.ForeignKey("users.id"), nullable=False)
    reported_id = db.Column(db.String(50), db.ForeignKey("users.id"), nullable=False, index=True)

    order_id = db.Column(db.String(50), db.ForeignKey("orders.id"), nullable=True)
    message_id = db.Column(db.String(50), nullable=True)

    reason = db.Column(db.Text, nullable=False)
    status = db.Column(db.String(20), nullable=False, default="pending")

    admin_comment = db.Column(db.Text, nullable=True)
    resolved_by = db.Column(db.String(50), db.ForeignKey("users.id"), nullable=True)
    resolved_at = db.Column(db.DateTime(timezone=True), nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), server_default=func.now())

    reporter = db.relationship("User", foreign_keys=[reporter_id])
    reported = db.relationship("User", foreign_keys=[reported_id])
    order = db.relationship("Order", foreign_keys=[order_id])
