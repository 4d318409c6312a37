"""Order lifecycle rules and input validators.

Everything here is a pure function over its arguments. Validators return the
normalized value or raise ``ValidationError`` with a reason that can be shown
to the user as-is.
"""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from craftlance.models.order import ORDER_STATUSES, ORDER_CATEGORIES
from craftlance.utils.exceptions import ValidationError

MAX_PRICE = Decimal("1000000")

TRANSITIONS = {
    "open": frozenset({"in_progress", "dispute"}),
    "in_progress": frozenset({"completed", "dispute"}),
    "completed": frozenset({"dispute"}),
    "dispute": frozenset({"completed", "in_progress"}),
}

HAPPY_PATH = {
    "open": "in_progress",
    "in_progress": "completed",
    "completed": "completed",
    "dispute": "dispute",
}


def is_valid_status(value) -> bool:
    return isinstance(value, str) and value in ORDER_STATUSES


def validate_order_status(value) -> str:
    if not is_valid_status(value):
        raise ValidationError(
            f"Invalid order status: {value}. Must be one of: {', '.join(ORDER_STATUSES)}",
            {"field": "status"},
        )
    return value


def can_transition(current, new) -> bool:
    return new in TRANSITIONS.get(current, ())


def next_status(current) -> str:
    validate_order_status(current)
    return HAPPY_PATH[current]


def validate_category(value) -> str:
    if not isinstance(value, str) or value not in ORDER_CATEGORIES:
        raise ValidationError(
            f"Invalid order category: {value}. Must be one of: {', '.join(ORDER_CATEGORIES)}",
            {"field": "category"},
        )
    return value


def _bounded_text(value, field, label, min_len, max_len):
    if not value or not isinstance(value, str):
        raise ValidationError(f"{label} is required", {"field": field})
    value = value.strip()
    if len(value) < min_len or len(value) > max_len:
        raise ValidationError(
            f"{label} must be between {min_len} and {max_len} characters",
            {"field": field},
        )
    return value


def validate_title(value) -> str:
    return _bounded_text(value, "title", "Order title", 5, 100)


def validate_description(value) -> str:
    return _bounded_text(value, "description", "Order description", 20, 2000)


def validate_offer_message(value) -> str:
    return _bounded_text(value, "message", "Offer message", 20, 1000)


def _to_decimal(value, field, label):
    # bool is an int subclass; True is not a price
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        raise ValidationError(f"{label} must be a valid number", {"field": field})
    try:
        number = Decimal(str(value))
    except InvalidOperation:
        raise ValidationError(f"{label} must be a valid number", {"field": field})
    if not number.is_finite():
        raise ValidationError(f"{label} must be a valid number", {"field": field})
    return number


def validate_price(value, field="price") -> Decimal:
    price = _to_decimal(value, field, "Price")
    if price <= 0:
        raise ValidationError("Price must be greater than zero", {"field": field})
    if price > MAX_PRICE:
        raise ValidationError("Price cannot exceed 1,000,000", {"field": field})
    return price


def validate_offer_price(offer_price, order_price) -> Decimal:
    price = validate_price(offer_price)
    if price > Decimal(str(order_price)) * 2:
        raise ValidationError(
            "Offer price cannot be more than double the order price",
            {"field": "price"},
        )
    return price


def validate_delivery_time(value) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError("Delivery time must be a whole number of days", {"field": "delivery_time"})
    if value < 1 or value > 365:
        raise ValidationError("Delivery time must be between 1 and 365 days", {"field": "delivery_time"})
    return value


def validate_rating(value) -> int:
    """Check a rating is within 1..5 and round it half-up to an integer.

    Fractional ratings are accepted and normalized (3.7 -> 4, 4.5 -> 5);
    anything outside the range is rejected rather than clamped.
    """
    rating = _to_decimal(value, "rating", "Rating")
    if rating < 1 or rating > 5:
        raise ValidationError("Rating must be between 1 and 5", {"field": "rating"})
    return int(rating.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def validate_review_comment(value):
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ValidationError("Review comment must be a string", {"field": "comment"})
    value = value.strip()
    if len(value) > 1000:
        raise ValidationError("Review comment cannot exceed 1000 characters", {"field": "comment"})
    return value or None
