from craftlance.extensions import db
from sqlalchemy.sql import func
import uuid


def gen_payment_id():
    return f"PAY-{str(uuid.uuid4())[:10]}"


class PaymentEvent(db.Model):
    """One row per webhook delivery that was applied (or acknowledged)."""

    __tablename__ = "payment_events"

    __table_args__ = (
        db.UniqueConstraint("order_id", "transaction_id", name="uq_payment_events_order_tx"),
    )

    id = db.Column(db.String(50), primary_key=True, default=gen_payment_id)
    order_id = db.Column(db.String(50), db.ForeignKey("orders.id"), nullable=False, index=True)
    transaction_id = db.Column(db.String(128), nullable=False)

    amount = db.Column(db.Numeric(10, 2), nullable=False)
    payer_card = db.Column(db.String(64), nullable=True)
    applied = db.Column(db.Boolean, nullable=False, default=True)

    created_at = db.Column(db.DateTime(timezone=True), server_default=func.now())

    order = db.relationship("Order", backref="payment_events")
