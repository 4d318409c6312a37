from flask import Blueprint
from flask_jwt_extended import jwt_required

from craftlance.schemas.notification_schema import (
    MarkReadSchema,
    NotificationFilterSchema,
    NotificationSchema,
)
from craftlance.services.notification_service import (
    get_user_notifications,
    mark_notifications_read,
)
from craftlance.utils.auth_utils import current_caller
from craftlance.utils.pagination import page_params
from craftlance.utils.request_utils import load_args, load_body, parse_iso_datetime
from craftlance.utils.response_formatter import success_response

bp = Blueprint("notifications", __name__, url_prefix="/api/v1/notifications")


@bp.route("", methods=["GET"])
@jwt_required()
def get_notifications():
    caller = current_caller()
    args = load_args(NotificationFilterSchema())
    _, limit = page_params(1, args["limit"])

    items = get_user_notifications(
        caller.id,
        notif_type=args.get("type"),
        unread_only=args["unread_only"],
        before=parse_iso_datetime(args.get("before"), "before"),
        limit=limit,
    )
    return success_response({"notifications": NotificationSchema(many=True).dump(items)})


@bp.route("", methods=["PATCH"])
@jwt_required()
def mark_read():
    caller = current_caller()
    data = load_body(MarkReadSchema())
    updated = mark_notifications_read(caller.id, data["ids"])
    return success_response({"updated": updated})
