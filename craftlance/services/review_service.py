import logging

from craftlance.services import status_policy
from craftlance.services.notification_service import deliver
from craftlance.services.store import REVIEW_SORTS
from craftlance.utils.exceptions import Conflict, Forbidden, InvalidTransition, ValidationError

logger = logging.getLogger(__name__)


def submit_review(store, notifier, caller, order_id, rating, comment=None):
    """Record the buyer's review and close the order.

    Submitting a review is what completes an order: an in_progress (or
    disputed) order moves to completed in the same transaction as the
    review insert. Reviewing an already completed order just adds the review.
    """
    rating = status_policy.validate_rating(rating)
    comment = status_policy.validate_review_comment(comment)

    order = store.get_order(order_id)
    if order.buyer_id != caller.id:
        raise Forbidden("Only the buyer can review this order")

    closes_order = order.status != "completed"
    if closes_order and not status_policy.can_transition(order.status, "completed"):
        raise InvalidTransition(f"Cannot review an order in status {order.status}")

    if store.find_review(order.id, caller.id):
        raise Conflict("You have already reviewed this order")

    with store.transaction():
        review = store.insert_review(order.id, caller.id, rating, comment)
        if closes_order and not store.update_order_status(order.id, order.status, "completed"):
            raise InvalidTransition("Order status changed, please retry")

    logger.info("Review %s submitted for order %s", review.id, order.id)

    accepted = store.get_accepted_offer(order.id)
    if accepted:
        deliver(
            notifier,
            accepted.seller_id,
            "new_review",
            "New review",
            f"You received a {rating}-star review for \"{order.title}\"",
            f"/orders/{order.id}",
        )
    return review


def list_reviews(store, filters, sort="latest", page=1, limit=10):
    if sort not in REVIEW_SORTS:
        raise ValidationError("Invalid sort order", {"field": "sort"})
    return store.list_reviews(filters, sort, page, limit)
