from flask import Blueprint, current_app, request
from flask_jwt_extended import jwt_required

from craftlance.extensions import limiter
from craftlance.schemas.payment_schema import PaymentInitSchema
from craftlance.services.notification_service import get_notifier
from craftlance.services.payment_gateway import PaymentGateway
from craftlance.services.payment_service import confirm_payment, init_payment
from craftlance.services.store import get_store
from craftlance.utils.auth_utils import current_caller
from craftlance.utils.exceptions import Unauthorized
from craftlance.utils.request_utils import load_body
from craftlance.utils.response_formatter import success_response

bp = Blueprint("payments", __name__, url_prefix="/api/v1/payments")


def payment_limit():
    return current_app.config["PAYMENT_RATE_LIMIT"]


def get_gateway():
    return current_app.extensions["payment_gateway"]


# ------------------------------------------------------------
#  POST /payments/init - Start a gateway checkout for an order
# ------------------------------------------------------------
@bp.route("/init", methods=["POST"])
@jwt_required()
@limiter.limit(payment_limit)
def init():
    caller = current_caller()
    data = load_body(PaymentInitSchema())
    result = init_payment(
        get_store(),
        get_gateway(),
        caller,
        data["order_id"],
        current_app.config["BASE_URL"],
    )
    return success_response(result)


# ------------------------------------------------------------
#  POST /payments/webhook - Gateway payment confirmation
# ------------------------------------------------------------
@bp.route("/webhook", methods=["POST"])
@limiter.exempt
def webhook():
    try:
        result = confirm_payment(
            get_store(),
            get_notifier(),
            get_gateway(),
            request.get_data(),
            request.headers.get(PaymentGateway.SIGNATURE_HEADER),
        )
    except Unauthorized:
        return "", 403

    return success_response({
        "order_id": result.order_id,
        "applied": result.applied,
        "replayed": result.replayed,
    })
