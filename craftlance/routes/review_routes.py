from flask import Blueprint
from flask_jwt_extended import jwt_required

from craftlance.schemas.review_schema import ReviewCreateSchema, ReviewFilterSchema, ReviewSchema
from craftlance.services.notification_service import get_notifier
from craftlance.services.review_service import list_reviews, submit_review
from craftlance.services.store import get_store
from craftlance.utils.auth_utils import current_caller
from craftlance.utils.request_utils import load_args, load_body
from craftlance.utils.response_formatter import success_response

bp = Blueprint("reviews", __name__, url_prefix="/api/v1")

review_schema = ReviewSchema()


# ------------------------------------------------------------
#  POST /orders/<order_id>/reviews - Buyer reviews and closes the order
# ------------------------------------------------------------
@bp.route("/orders/<order_id>/reviews", methods=["POST"])
@jwt_required()
def create_review(order_id):
    caller = current_caller()
    data = load_body(ReviewCreateSchema())
    review = submit_review(
        get_store(),
        get_notifier(),
        caller,
        order_id,
        data["rating"],
        data.get("comment"),
    )
    return success_response({"review": review_schema.dump(review)}, status=201)


# ------------------------------------------------------------
#  GET /reviews - Filtered, sorted, paginated reviews
# ------------------------------------------------------------
@bp.route("/reviews", methods=["GET"])
@jwt_required()
def get_reviews():
    current_caller()
    args = load_args(ReviewFilterSchema())
    filters = {
        k: args.get(k)
        for k in ("order_id", "reviewer_id", "min_rating", "max_rating", "has_comment")
    }
    items, pagination = list_reviews(
        get_store(), filters, args["sort"], args["page"], args["limit"]
    )
    return success_response({
        "reviews": review_schema.dump(items, many=True),
        "pagination": pagination,
    })
