from flask import Blueprint, current_app
from flask_jwt_extended import jwt_required

from craftlance.schemas.offer_schema import OfferCreateSchema, OfferSchema
from craftlance.services.notification_service import get_notifier
from craftlance.services.offer_service import accept_offer, list_offers, submit_offer
from craftlance.services.store import get_store
from craftlance.utils.auth_utils import current_caller
from craftlance.utils.request_utils import load_body
from craftlance.utils.response_formatter import success_response

bp = Blueprint("offers", __name__, url_prefix="/api/v1/orders")

offer_schema = OfferSchema()


# ------------------------------------------------------------
#  GET /orders/<order_id>/offers - Offers on an order
# ------------------------------------------------------------
@bp.route("/<order_id>/offers", methods=["GET"])
@jwt_required()
def get_offers(order_id):
    caller = current_caller()
    offers = list_offers(get_store(), caller, order_id)
    return success_response({"offers": offer_schema.dump(offers, many=True)})


# ------------------------------------------------------------
#  POST /orders/<order_id>/offers - Seller submits an offer
# ------------------------------------------------------------
@bp.route("/<order_id>/offers", methods=["POST"])
@jwt_required()
def create_offer(order_id):
    caller = current_caller()
    data = load_body(OfferCreateSchema())
    offer = submit_offer(get_store(), get_notifier(), caller, order_id, data)
    return success_response({"offer": offer_schema.dump(offer)}, status=201)


# ------------------------------------------------------------
#  POST /orders/<order_id>/offers/<offer_id>/accept - Buyer accepts
# ------------------------------------------------------------
@bp.route("/<order_id>/offers/<offer_id>/accept", methods=["POST"])
@jwt_required()
def accept(order_id, offer_id):
    caller = current_caller()
    offer = accept_offer(
        get_store(),
        get_notifier(),
        caller,
        order_id,
        offer_id,
        reject_competing=current_app.config["REJECT_COMPETING_OFFERS"],
    )
    return success_response({
        "offer": offer_schema.dump(offer),
        "order_status": "in_progress",
    })
