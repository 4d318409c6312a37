from craftlance.extensions import db
from sqlalchemy.sql import func
import uuid

OFFER_STATUSES = ("pending", "accepted", "rejected")


def gen_offer_id():
    return f"OFF-{str(uuid.uuid4())[:8]}"


class Offer(db.Model):
    __tablename__ = "offers"

    __table_args__ = (
        # At most one accepted offer per order
        db.Index(
            "uq_offers_accepted_per_order",
            "order_id",
            unique=True,
            sqlite_where=db.text("status = 'accepted'"),
            postgresql_where=db.text("status = 'accepted'"),
        ),
        # One pending offer per seller per order
        db.Index(
            "uq_offers_pending_per_seller",
            "order_id",
            "seller_id",
            unique=True,
            sqlite_where=db.text("status = 'pending'"),
            postgresql_where=db.text("status = 'pending'"),
        ),
    )

    id = db.Column(db.String(50), primary_key=True, default=gen_offer_id)
    order_id = db.Column(db.String(50), db.ForeignKey("orders.id"), nullable=False, index=True)
    seller_id = db.Column(db.String(50), db.ForeignKey("users.id"), nullable=False, index=True)

    price = db.Column(db.Numeric(10, 2), nullable=False)
    delivery_time = db.Column(db.Integer, nullable=False)
    message = db.Column(db.Text, nullable=True)

    status = db.Column(db.String(20), nullable=False, default="pending")

    created_at = db.Column(db.DateTime(timezone=True), server_default=func.now())

    order = db.relationship("Order", backref=db.backref("offers", lazy=True))
    seller = db.relationship("User", backref=db.backref("offers", lazy=True))
