from flask import Blueprint
from flask_jwt_extended import jwt_required

from craftlance.schemas.order_schema import OrderSchema, OrderStatusSchema
from craftlance.services.notification_service import get_notifier
from craftlance.services.order_service import list_disputes, moderate_order_status
from craftlance.services.store import get_store
from craftlance.utils.auth_utils import current_caller
from craftlance.utils.request_utils import load_body
from craftlance.utils.response_formatter import success_response

bp = Blueprint("admin", __name__, url_prefix="/api/v1/admin")

order_schema = OrderSchema()


# ---- Disputed orders ----
@bp.route("/orders", methods=["GET"])
@jwt_required()
def disputed_orders():
    caller = current_caller()
    orders = list_disputes(get_store(), caller)
    return success_response({"orders": order_schema.dump(orders, many=True)})


# ---- Settle a dispute / change status ----
@bp.route("/orders/<order_id>", methods=["PATCH"])
@jwt_required()
def change_order_status(order_id):
    caller = current_caller()
    data = load_body(OrderStatusSchema())
    order = moderate_order_status(
        get_store(), get_notifier(), caller, order_id, data["status"]
    )
    return success_response({"order": order_schema.dump(order)})
