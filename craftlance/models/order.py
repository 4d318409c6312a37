from craftlance.extensions import db
from sqlalchemy.sql import func
import uuid

ORDER_STATUSES = ("open", "in_progress", "completed", "dispute")
ORDER_CATEGORIES = ("development", "design", "writing", "marketing", "other")


def gen_order_id():
    return f"ORD-{str(uuid.uuid4())[:8]}"


class Order(db.Model):
    __tablename__ = "orders"

    __table_args__ = (
        db.Index("idx_orders_status", "status"),
        db.Index("idx_orders_buyer_id", "buyer_id"),
        db.CheckConstraint("budget > 0", name="ck_orders_budget_positive"),
    )

    id = db.Column(db.String(50), primary_key=True, default=gen_order_id)

    title = db.Column(db.String(100), nullable=False)
    description = db.Column(db.Text, nullable=False)
    category = db.Column(db.String(30), nullable=False)
    budget = db.Column(db.Numeric(10, 2), nullable=False)

    status = db.Column(db.String(20), nullable=False, default="open")

    buyer_id = db.Column(db.String(50), db.ForeignKey("users.id"), nullable=False)

    # Payment is tracked beside the lifecycle status, not as a status of its own
    payment_status = db.Column(db.String(20), nullable=False, default="unpaid")
    paid_amount = db.Column(db.Numeric(10, 2), nullable=True)
    paid_at = db.Column(db.DateTime(timezone=True), nullable=True)
    payer_card = db.Column(db.String(64), nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), server_default=func.now())
    updated_at = db.Column(db.DateTime(timezone=True), onupdate=func.now())

    buyer = db.relationship("User", foreign_keys=[buyer_id], backref="orders", lazy=True)
