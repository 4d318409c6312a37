from flask import Blueprint
from flask_jwt_extended import jwt_required

from craftlance.schemas.order_schema import (
    DisputeSchema,
    OrderCreateSchema,
    OrderFilterSchema,
    OrderSchema,
)
from craftlance.services.notification_service import get_notifier
from craftlance.services.order_service import create_order, get_order_for, open_dispute
from craftlance.services.store import get_store
from craftlance.utils.auth_utils import current_caller
from craftlance.utils.exceptions import ValidationError
from craftlance.utils.request_utils import load_args, load_body, parse_iso_datetime
from craftlance.utils.response_formatter import success_response

bp = Blueprint("orders", __name__, url_prefix="/api/v1/orders")

order_schema = OrderSchema()
orders_schema = OrderSchema(many=True)


# ------------------------------------------------------------
#  GET /orders - Open orders plus the caller's own
# ------------------------------------------------------------
@bp.route("", methods=["GET"])
@jwt_required()
def list_orders():
    caller = current_caller()
    args = load_args(OrderFilterSchema())

    filters = dict(args)
    filters["date_from"] = parse_iso_datetime(args.get("date_from"), "date_from")
    filters["date_to"] = parse_iso_datetime(args.get("date_to"), "date_to")
    if (
        filters.get("min_budget") is not None
        and filters.get("max_budget") is not None
        and filters["min_budget"] > filters["max_budget"]
    ):
        raise ValidationError("min_budget cannot exceed max_budget", {"field": "min_budget"})

    items, pagination = get_store().list_orders(
        caller.id, filters, args["page"], args["limit"]
    )
    return success_response({
        "orders": orders_schema.dump(items),
        "pagination": pagination,
    })


# ------------------------------------------------------------
#  POST /orders - Create an order (buyer)
# ------------------------------------------------------------
@bp.route("", methods=["POST"])
@jwt_required()
def create():
    caller = current_caller()
    data = load_body(OrderCreateSchema())
    order = create_order(get_store(), caller, data)
    return success_response({"order": order_schema.dump(order)}, status=201)


# ------------------------------------------------------------
#  GET /orders/<order_id> - Order detail
# ------------------------------------------------------------
@bp.route("/<order_id>", methods=["GET"])
@jwt_required()
def get_order(order_id):
    caller = current_caller()
    order = get_order_for(get_store(), caller, order_id)
    return success_response({"order": order_schema.dump(order)})


# ------------------------------------------------------------
#  POST /orders/<order_id>/dispute - Buyer or seller disputes the order
# ------------------------------------------------------------
@bp.route("/<order_id>/dispute", methods=["POST"])
@jwt_required()
def dispute(order_id):
    caller = current_caller()
    data = load_body(DisputeSchema())
    order = open_dispute(get_store(), get_notifier(), caller, order_id, data.get("reason"))
    return success_response({"order": order_schema.dump(order)})
