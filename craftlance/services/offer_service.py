import logging

from craftlance.services import status_policy
from craftlance.services.notification_service import deliver
from craftlance.utils.auth_utils import is_staff
from craftlance.utils.exceptions import Conflict, Forbidden, InvalidTransition, NotFound

logger = logging.getLogger(__name__)


def submit_offer(store, notifier, caller, order_id, data):
    order = store.get_order(order_id)

    if order.buyer_id == caller.id:
        raise Forbidden("You cannot make an offer on your own order")
    if order.status != "open":
        raise InvalidTransition("Offers can only be made on open orders")

    price = status_policy.validate_offer_price(data.get("price"), order.budget)
    delivery_time = status_policy.validate_delivery_time(data.get("delivery_time"))
    message = status_policy.validate_offer_message(data.get("message"))

    if store.find_pending_offer(order.id, caller.id):
        raise Conflict("You already have a pending offer on this order")

    with store.transaction():
        offer = store.create_offer(order.id, caller.id, price, delivery_time, message)

    logger.info("Offer %s submitted on order %s by %s", offer.id, order.id, caller.id)

    deliver(
        notifier,
        order.buyer_id,
        "order_status",
        "New offer",
        f"You received a new offer of {price} on \"{order.title}\"",
        f"/orders/{order.id}",
    )
    return offer


def list_offers(store, caller, order_id):
    order = store.get_order(order_id)
    if order.buyer_id == caller.id or is_staff(caller):
        return store.list_offers(order.id)
    return store.list_offers(order.id, seller_id=caller.id)


def accept_offer(store, notifier, caller, order_id, offer_id, reject_competing=False):
    """Accept a pending offer and move its order from open to in_progress.

    The order row is the serialization point: the open -> in_progress update
    is conditional, so of two concurrent accepts on one order only one
    commits and the other raises ``InvalidTransition``.
    """
    offer = store.get_offer(offer_id)
    if offer.order_id != order_id:
        raise NotFound("Offer not found")

    order = store.get_order(offer.order_id)

    if order.buyer_id != caller.id:
        raise Forbidden("Only the buyer can accept offers on this order")
    # dispute -> in_progress is a legal transition, but only for moderators
    if order.status != "open":
        raise InvalidTransition(f"Cannot transition order from {order.status} to in_progress")
    if offer.status != "pending":
        raise InvalidTransition(f"Offer is already {offer.status}")

    rejected = []
    with store.transaction():
        if not store.update_order_status(order.id, "open", "in_progress"):
            raise InvalidTransition("Order is no longer open")
        if not store.update_offer_status(offer.id, "pending", "accepted"):
            raise InvalidTransition("Offer is no longer pending")
        if reject_competing:
            rejected = store.reject_pending_offers(order.id, offer.id)

    logger.info("Offer %s accepted on order %s", offer.id, order.id)

    deliver(
        notifier,
        offer.seller_id,
        "order_status",
        "Offer accepted",
        f"Your offer on \"{order.title}\" was accepted",
        f"/orders/{order.id}",
    )
    for other in rejected:
        deliver(
            notifier,
            other.seller_id,
            "order_status",
            "Offer declined",
            f"Another offer was accepted on \"{order.title}\"",
            f"/orders/{order.id}",
        )
    return offer
