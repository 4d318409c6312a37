import hashlib
import json
import logging
from collections import namedtuple
from decimal import Decimal

from marshmallow import ValidationError as SchemaValidationError

from craftlance.schemas.payment_schema import WebhookPayloadSchema
from craftlance.services import status_policy
from craftlance.services.notification_service import deliver
from craftlance.utils.exceptions import (
    Conflict,
    Forbidden,
    InvalidTransition,
    ServiceError,
    Unauthorized,
    ValidationError,
)

logger = logging.getLogger(__name__)

PaymentResult = namedtuple("PaymentResult", ["order_id", "applied", "replayed"])

PAYABLE_STATUSES = ("open", "in_progress")


def parse_webhook_body(raw_body):
    try:
        body = json.loads(raw_body)
    except (TypeError, ValueError):
        raise ServiceError("INVALID_PAYLOAD", "Invalid payload format")
    if not isinstance(body, dict):
        raise ServiceError("INVALID_PAYLOAD", "Invalid payload format")
    try:
        payload = WebhookPayloadSchema().load(body)
    except SchemaValidationError as err:
        raise ServiceError("INVALID_PAYLOAD", "Invalid payload format", err.messages)
    try:
        payload["amount"] = status_policy.validate_price(Decimal(payload["amount"]), field="amount")
    except ValidationError as err:
        raise ServiceError("INVALID_PAYLOAD", err.message, err.details)
    return payload


def idempotency_key(payload, raw_body):
    return payload.get("transaction_id") or hashlib.sha256(raw_body).hexdigest()


def confirm_payment(store, notifier, gateway, raw_body, signature):
    """Apply a signed payment webhook to its order, at most once.

    A repeated delivery (same order and transaction id, or the same body when
    the gateway sends no id) is acknowledged without touching the order. A
    payment is applied only to an unpaid order that is open or in progress;
    an open order moves to in_progress with it. Any other delivery is
    recorded with ``applied=False`` and leaves the order's financial state
    alone.
    """
    if not gateway.validate_hash(raw_body, signature):
        logger.warning("Rejected payment webhook with invalid signature")
        raise Unauthorized()

    payload = parse_webhook_body(raw_body)
    amount = payload["amount"]
    card = payload["card_number"]
    key = idempotency_key(payload, raw_body)

    order = store.get_order(payload["data"])

    if store.find_payment_event(order.id, key):
        logger.info("Replayed payment webhook for order %s ignored", order.id)
        return PaymentResult(order.id, False, True)

    try:
        with store.transaction():
            applied = store.mark_order_paid(order.id, amount, card, statuses=PAYABLE_STATUSES)
            if applied:
                store.update_order_status(order.id, "open", "in_progress")
            store.record_payment_event(order.id, key, amount, card, applied=applied)
    except Conflict:
        # lost the race against an identical concurrent delivery
        logger.info("Concurrent replay of payment webhook for order %s ignored", order.id)
        return PaymentResult(order.id, False, True)

    if not applied:
        logger.warning(
            "Payment %s for order %s not applied (status %s, payment %s)",
            key, order.id, order.status, order.payment_status,
        )
        return PaymentResult(order.id, False, False)

    logger.info("Payment of %s recorded for order %s", amount, order.id)
    deliver(
        notifier,
        order.buyer_id,
        "payment_status",
        "Payment received",
        f"Payment of {amount} for \"{order.title}\" was confirmed",
        f"/orders/{order.id}",
    )
    return PaymentResult(order.id, True, False)


def init_payment(store, gateway, caller, order_id, base_url):
    order = store.get_order(order_id)

    if order.buyer_id != caller.id:
        raise Forbidden("Only the buyer can pay for this order")
    if order.payment_status == "paid":
        raise Conflict("Order already paid")
    if order.status not in PAYABLE_STATUSES:
        raise InvalidTransition(f"Orders in status {order.status} cannot be paid")

    accepted = store.get_accepted_offer(order.id)
    amount = accepted.price if accepted else order.budget

    url = gateway.create_payment(
        amount,
        redirect_url=f"{base_url}/success?order={order.id}",
        webhook_url=f"{base_url}/api/v1/payments/webhook",
        data=order.id,
    )
    logger.info("Payment of %s initiated for order %s", amount, order.id)
    return {"url": url, "order_id": order.id, "amount": float(amount)}
