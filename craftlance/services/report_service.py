import logging

from craftlance.models.user import STAFF_ROLES
from craftlance.services.notification_service import deliver
from craftlance.utils.auth_utils import require_role
from craftlance.utils.exceptions import InvalidTransition, ValidationError

logger = logging.getLogger(__name__)

OUTCOMES = {"approve": "resolved", "reject": "rejected"}


def create_report(store, notifier, caller, data):
    reported_id = data["reported_id"]
    if reported_id == caller.id:
        raise ValidationError("You cannot report yourself", {"field": "reported_id"})

    store.get_user(reported_id)
    if data.get("order_id"):
        store.get_order(data["order_id"])

    with store.transaction():
        report = store.create_report(
            caller.id,
            reported_id,
            data["reason"].strip(),
            order_id=data.get("order_id"),
            message_id=data.get("message_id"),
        )

    logger.info("Report %s filed by %s against %s", report.id, caller.id, reported_id)

    for admin_id in store.user_ids_with_role("admin"):
        deliver(
            notifier,
            admin_id,
            "system_alert",
            "New report",
            "A user filed a new report",
            f"/admin?tab=reports&id={report.id}",
        )
    return report


def list_reports(store, caller, status=None):
    require_role(caller, STAFF_ROLES)
    return store.list_reports(status)


def resolve_report(store, notifier, caller, report_id, action, comment=None):
    """Approve (ban the reported user) or reject a pending report.

    Resolution is one-way. Two admins resolving the same report at once get
    one success and one ``InvalidTransition``; the loser never bans or
    notifies.
    """
    require_role(caller, ("admin",), "Admin privileges required")

    if action not in OUTCOMES:
        raise ValidationError("Action must be approve or reject", {"field": "action"})
    outcome = OUTCOMES[action]

    report = store.get_report(report_id)
    if report.status != "pending":
        raise InvalidTransition(f"Report is already {report.status}")

    with store.transaction():
        if not store.resolve_report(report.id, outcome, comment, caller.id):
            raise InvalidTransition("Report has already been resolved")
        if outcome == "resolved":
            store.set_user_banned(report.reported_id, comment)

    logger.info("Report %s %s by %s", report.id, outcome, caller.id)

    if outcome == "resolved":
        deliver(
            notifier,
            report.reported_id,
            "system_alert",
            "Account banned",
            f"Your account was banned. Reason: {comment or 'not specified'}",
        )
    deliver(
        notifier,
        report.reporter_id,
        "system_alert",
        "Report reviewed",
        f"Your report was {'approved' if outcome == 'resolved' else 'rejected'}",
        f"/reports/{report.id}",
    )
    return report
