from craftlance.extensions import db
from sqlalchemy.sql import func
import uuid


def gen_uuid(prefix="rev"):
    return f"{prefix}-{str(uuid.uuid4())[:8]}"


class Review(db.Model):
    __tablename__ = "reviews"

    __table_args__ = (
        db.UniqueConstraint("order_id", "reviewer_id", name="uq_reviews_order_reviewer"),
        db.Index("idx_reviews_reviewer_id", "reviewer_id"),
        db.Index("idx_reviews_created_at", "created_at"),
    )

    id = db.Column(
        db.String(50),
        primary_key=True,
        default=lambda: gen_uuid("rev")
    )

    order_id = db.Column(
        db.String(50),
        db.ForeignKey("orders.id", ondelete="RESTRICT"),
        nullable=False
    )

    reviewer_id = db.Column(
        db.String(50),
        db.ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False
    )

    rating = db.Column(db.Integer, nullable=False)
    comment = db.Column(db.Text, nullable=True)

    created_at = db.Column(
        db.DateTime(timezone=True),
        server_default=func.now(),
        nullable=False
    )

    order = db.relationship("Order", backref=db.backref("reviews", lazy=True))
    reviewer = db.relationship("User", foreign_keys=[reviewer_id])
