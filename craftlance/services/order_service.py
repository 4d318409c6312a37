import logging

from craftlance.models.user import STAFF_ROLES
from craftlance.services import status_policy
from craftlance.services.notification_service import deliver
from craftlance.utils.auth_utils import is_staff, require_role
from craftlance.utils.exceptions import Forbidden, InvalidTransition

logger = logging.getLogger(__name__)


def create_order(store, caller, data):
    title = status_policy.validate_title(data.get("title"))
    description = status_policy.validate_description(data.get("description"))
    category = status_policy.validate_category(data.get("category"))
    budget = status_policy.validate_price(data.get("budget"), field="budget")

    with store.transaction():
        order = store.create_order(caller.id, title, description, category, budget)

    logger.info("Order %s created by %s", order.id, caller.id)
    return order


def get_order_for(store, caller, order_id):
    """Open orders are public; others are visible to their parties and staff."""
    order = store.get_order(order_id)
    if order.status == "open" or order.buyer_id == caller.id or is_staff(caller):
        return order
    accepted = store.get_accepted_offer(order.id)
    if accepted and accepted.seller_id == caller.id:
        return order
    raise Forbidden("Access denied")


def open_dispute(store, notifier, caller, order_id, reason=None):
    order = store.get_order(order_id)
    accepted = store.get_accepted_offer(order.id)
    seller_id = accepted.seller_id if accepted else None

    if caller.id not in (order.buyer_id, seller_id):
        raise Forbidden("Only the parties of an order can open a dispute")
    if not status_policy.can_transition(order.status, "dispute"):
        raise InvalidTransition(f"Cannot transition order from {order.status} to dispute")

    with store.transaction():
        if not store.update_order_status(order.id, order.status, "dispute"):
            raise InvalidTransition("Order status changed, please retry")

    logger.info("Dispute opened on order %s by %s", order.id, caller.id)

    counterpart = seller_id if caller.id == order.buyer_id else order.buyer_id
    if counterpart:
        deliver(
            notifier,
            counterpart,
            "order_status",
            "Dispute opened",
            f"A dispute was opened on \"{order.title}\"" + (f": {reason}" if reason else ""),
            f"/orders/{order.id}",
        )
    return store.get_order(order.id)


def list_disputes(store, caller):
    require_role(caller, STAFF_ROLES)
    return store.orders_with_status("dispute")


def moderate_order_status(store, notifier, caller, order_id, new_status):
    """Staff-driven status change, used to settle disputes. Audited."""
    require_role(caller, STAFF_ROLES)
    new_status = status_policy.validate_order_status(new_status)

    order = store.get_order(order_id)
    previous = order.status
    if not status_policy.can_transition(previous, new_status):
        raise InvalidTransition(f"Cannot transition order from {previous} to {new_status}")

    with store.transaction():
        if not store.update_order_status(order.id, previous, new_status):
            raise InvalidTransition("Order status changed, please retry")
        store.add_admin_log(
            caller.id,
            "change_status",
            "order",
            order.id,
            {"from": previous, "to": new_status},
        )

    logger.info("Order %s moved %s -> %s by %s", order.id, previous, new_status, caller.id)

    deliver(
        notifier,
        order.buyer_id,
        "order_status",
        "Order status changed",
        f"Your order \"{order.title}\" is now {new_status.replace('_', ' ')}",
        f"/orders/{order.id}",
    )
    return store.get_order(order.id)
