"""Persistence adapter for the order lifecycle.

Workflows never touch the ORM directly; they go through ``OrderStore``. All
status changes are conditional updates (``WHERE status = <expected>``) and
report success through the affected-row count, so two concurrent callers
racing on the same record produce exactly one winner.
"""
import logging
from contextlib import contextmanager
from datetime import datetime, timezone

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from craftlance.extensions import db
from craftlance.models.admin_log import AdminLog
from craftlance.models.offer import Offer
from craftlance.models.order import Order
from craftlance.models.payment_event import PaymentEvent
from craftlance.models.report import Report
from craftlance.models.review import Review
from craftlance.models.user import User
from craftlance.utils.exceptions import Conflict, NotFound, StoreError
from craftlance.utils.pagination import paginate_query

logger = logging.getLogger(__name__)

REVIEW_SORTS = {
    "latest": Review.created_at.desc(),
    "oldest": Review.created_at.asc(),
    "highest": Review.rating.desc(),
    "lowest": Review.rating.asc(),
}


def utcnow():
    return datetime.now(timezone.utc)


class OrderStore:
    def __init__(self, session):
        self.session = session

    @contextmanager
    def transaction(self):
        """Commit on success, roll back on any error.

        Database failures surface as ``StoreError``; the driver message is
        logged and never returned to the client.
        """
        try:
            yield self
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.exception("Store transaction failed")
            raise StoreError() from e
        except Exception:
            self.session.rollback()
            raise

    def _get(self, model, entity_id, label):
        try:
            obj = self.session.get(model, entity_id)
        except SQLAlchemyError as e:
            logger.exception("Failed to load %s %s", label, entity_id)
            raise StoreError() from e
        if obj is None:
            raise NotFound(f"{label} not found")
        return obj

    def _conditional_update(self, model, filters, values):
        return (
            self.session.query(model)
            .filter_by(**filters)
            .update(values, synchronize_session="fetch")
        )

    # ---------------------------------------------------------------- users

    def get_user(self, user_id):
        return self._get(User, user_id, "User")

    def set_user_banned(self, user_id, reason):
        updated = self._conditional_update(
            User, {"id": user_id}, {"is_banned": True, "ban_reason": reason}
        )
        if not updated:
            raise NotFound("User not found")

    def user_ids_with_role(self, role):
        rows = self.session.query(User.id).filter(User.role == role).all()
        return [r.id for r in rows]

    # --------------------------------------------------------------- orders

    def get_order(self, order_id):
        return self._get(Order, order_id, "Order")

    def create_order(self, buyer_id, title, description, category, budget):
        order = Order(
            buyer_id=buyer_id,
            title=title,
            description=description,
            category=category,
            budget=budget,
            status="open",
        )
        self.session.add(order)
        self.session.flush()
        return order

    def update_order_status(self, order_id, expected_current, new_status, **extra_fields):
        values = dict(extra_fields)
        values["status"] = new_status
        return self._conditional_update(
            Order, {"id": order_id, "status": expected_current}, values
        ) == 1

    def mark_order_paid(self, order_id, amount, payer_card, paid_at=None, statuses=None):
        """Set the paid fields once; ``statuses`` limits which orders qualify."""
        q = self.session.query(Order).filter_by(id=order_id, payment_status="unpaid")
        if statuses:
            q = q.filter(Order.status.in_(statuses))
        return q.update(
            {
                "payment_status": "paid",
                "paid_amount": amount,
                "paid_at": paid_at or utcnow(),
                "payer_card": payer_card,
            },
            synchronize_session="fetch",
        ) == 1

    def list_orders(self, viewer_id, filters, page=1, limit=10):
        q = self.session.query(Order).filter(
            or_(Order.status == "open", Order.buyer_id == viewer_id)
        )
        if filters.get("q"):
            q = q.filter(Order.title.ilike(f"%{filters['q']}%"))
        if filters.get("category"):
            q = q.filter(Order.category == filters["category"])
        if filters.get("status"):
            q = q.filter(Order.status == filters["status"])
        if filters.get("min_budget") is not None:
            q = q.filter(Order.budget >= filters["min_budget"])
        if filters.get("max_budget") is not None:
            q = q.filter(Order.budget <= filters["max_budget"])
        if filters.get("date_from"):
            q = q.filter(Order.created_at >= filters["date_from"])
        if filters.get("date_to"):
            q = q.filter(Order.created_at <= filters["date_to"])
        q = q.order_by(Order.created_at.desc(), Order.id)
        return paginate_query(q, page, limit)

    def orders_with_status(self, status):
        return (
            self.session.query(Order)
            .filter(Order.status == status)
            .order_by(Order.created_at.desc())
            .all()
        )

    # --------------------------------------------------------------- offers

    def get_offer(self, offer_id):
        return self._get(Offer, offer_id, "Offer")

    def create_offer(self, order_id, seller_id, price, delivery_time, message):
        offer = Offer(
            order_id=order_id,
            seller_id=seller_id,
            price=price,
            delivery_time=delivery_time,
            message=message,
            status="pending",
        )
        self.session.add(offer)
        try:
            self.session.flush()
        except IntegrityError:
            raise Conflict("You already have a pending offer on this order")
        return offer

    def find_pending_offer(self, order_id, seller_id):
        return (
            self.session.query(Offer)
            .filter_by(order_id=order_id, seller_id=seller_id, status="pending")
            .first()
        )

    def get_accepted_offer(self, order_id):
        return (
            self.session.query(Offer)
            .filter_by(order_id=order_id, status="accepted")
            .first()
        )

    def list_offers(self, order_id, seller_id=None):
        q = self.session.query(Offer).filter(Offer.order_id == order_id)
        if seller_id:
            q = q.filter(Offer.seller_id == seller_id)
        return q.order_by(Offer.created_at.asc(), Offer.id).all()

    def update_offer_status(self, offer_id, expected_current, new_status):
        return self._conditional_update(
            Offer, {"id": offer_id, "status": expected_current}, {"status": new_status}
        ) == 1

    def reject_pending_offers(self, order_id, except_offer_id):
        """Reject every other pending offer on an order, returning them."""
        offers = (
            self.session.query(Offer)
            .filter(
                Offer.order_id == order_id,
                Offer.status == "pending",
                Offer.id != except_offer_id,
            )
            .all()
        )
        rejected = []
        for offer in offers:
            if self.update_offer_status(offer.id, "pending", "rejected"):
                rejected.append(offer)
        return rejected

    # -------------------------------------------------------------- reviews

    def find_review(self, order_id, reviewer_id):
        return (
            self.session.query(Review)
            .filter_by(order_id=order_id, reviewer_id=reviewer_id)
            .first()
        )

    def insert_review(self, order_id, reviewer_id, rating, comment):
        review = Review(
            order_id=order_id,
            reviewer_id=reviewer_id,
            rating=rating,
            comment=comment,
        )
        self.session.add(review)
        try:
            self.session.flush()
        except IntegrityError:
            # The enclosing transaction() rolls the session back
            raise Conflict("You have already reviewed this order")
        return review

    def list_reviews(self, filters, sort="latest", page=1, limit=10):
        q = self.session.query(Review)
        if filters.get("order_id"):
            q = q.filter(Review.order_id == filters["order_id"])
        if filters.get("reviewer_id"):
            q = q.filter(Review.reviewer_id == filters["reviewer_id"])
        if filters.get("min_rating") is not None:
            q = q.filter(Review.rating >= filters["min_rating"])
        if filters.get("max_rating") is not None:
            q = q.filter(Review.rating <= filters["max_rating"])
        if filters.get("has_comment"):
            q = q.filter(Review.comment.isnot(None))
        q = q.order_by(REVIEW_SORTS[sort], Review.id)
        return paginate_query(q, page, limit)

    # -------------------------------------------------------------- reports

    def get_report(self, report_id):
        return self._get(Report, report_id, "Report")

    def create_report(self, reporter_id, reported_id, reason, order_id=None, message_id=None):
        report = Report(
            reporter_id=reporter_id,
            reported_id=reported_id,
            reason=reason,
            order_id=order_id,
            message_id=message_id,
            status="pending",
        )
        self.session.add(report)
        self.session.flush()
        return report

    def resolve_report(self, report_id, outcome, comment, admin_id):
        return self._conditional_update(
            Report,
            {"id": report_id, "status": "pending"},
            {
                "status": outcome,
                "admin_comment": comment,
                "resolved_by": admin_id,
                "resolved_at": utcnow(),
            },
        ) == 1

    def list_reports(self, status=None):
        q = self.session.query(Report)
        if status:
            q = q.filter(Report.status == status)
        return q.order_by(Report.created_at.desc(), Report.id).all()

    # ------------------------------------------------------------- payments

    def find_payment_event(self, order_id, transaction_id):
        return (
            self.session.query(PaymentEvent)
            .filter_by(order_id=order_id, transaction_id=transaction_id)
            .first()
        )

    def record_payment_event(self, order_id, transaction_id, amount, payer_card, applied=True):
        event = PaymentEvent(
            order_id=order_id,
            transaction_id=transaction_id,
            amount=amount,
            payer_card=payer_card,
            applied=applied,
        )
        self.session.add(event)
        try:
            self.session.flush()
        except IntegrityError:
            raise Conflict("Payment event already recorded")
        return event

    # ---------------------------------------------------------------- audit

    def add_admin_log(self, admin_id, action, entity, entity_id, details=None):
        entry = AdminLog(
            admin_id=admin_id,
            action=action,
            entity=entity,
            entity_id=entity_id,
            details=details,
        )
        self.session.add(entry)
        return entry


def get_store():
    return OrderStore(db.session)
