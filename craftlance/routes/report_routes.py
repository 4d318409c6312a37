from flask import Blueprint, current_app
from flask_jwt_extended import jwt_required

from craftlance.extensions import limiter
from craftlance.schemas.report_schema import (
    ReportCreateSchema,
    ReportFilterSchema,
    ReportResolveSchema,
    ReportSchema,
)
from craftlance.services.notification_service import get_notifier
from craftlance.services.report_service import create_report, list_reports, resolve_report
from craftlance.services.store import get_store
from craftlance.utils.auth_utils import current_caller
from craftlance.utils.request_utils import load_args, load_body
from craftlance.utils.response_formatter import success_response

bp = Blueprint("reports", __name__, url_prefix="/api/v1/reports")

report_schema = ReportSchema()


def api_limit():
    return current_app.config["API_RATE_LIMIT"]


# ------------------------------------------------------------
#  POST /reports - File a report against a user
# ------------------------------------------------------------
@bp.route("", methods=["POST"])
@jwt_required()
@limiter.limit(api_limit)
def file_report():
    caller = current_caller()
    data = load_body(ReportCreateSchema())
    report = create_report(get_store(), get_notifier(), caller, data)
    return success_response({"report": report_schema.dump(report)}, status=201)


# ------------------------------------------------------------
#  GET /reports - Moderation queue (staff)
# ------------------------------------------------------------
@bp.route("", methods=["GET"])
@jwt_required()
@limiter.limit(api_limit)
def get_reports():
    caller = current_caller()
    args = load_args(ReportFilterSchema())
    reports = list_reports(get_store(), caller, args.get("status"))
    return success_response({"reports": report_schema.dump(reports, many=True)})


# ------------------------------------------------------------
#  POST /reports/<report_id>/resolve - Admin approves or rejects
# ------------------------------------------------------------
@bp.route("/<report_id>/resolve", methods=["POST"])
@jwt_required()
@limiter.limit(api_limit)
def resolve(report_id):
    caller = current_caller()
    data = load_body(ReportResolveSchema())
    report = resolve_report(
        get_store(),
        get_notifier(),
        caller,
        report_id,
        data["action"],
        data.get("comment"),
    )
    return success_response({"report": report_schema.dump(report)})
