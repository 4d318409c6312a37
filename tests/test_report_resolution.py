"""Tests for filing reports and the admin resolution workflow."""

from types import SimpleNamespace

import pytest

from craftlance.extensions import db
from craftlance.models.report import Report
from craftlance.models.user import User
from craftlance.services.report_service import create_report, list_reports, resolve_report
from craftlance.services.store import OrderStore
from craftlance.utils.exceptions import Forbidden, InvalidTransition, NotFound, ValidationError

from conftest import RecordingNotifier


class StaleReportStore(OrderStore):
    def __init__(self, session, snapshot):
        super().__init__(session)
        self.snapshot = snapshot

    def get_report(self, report_id):
        return self.snapshot


def _reload(model, entity_id):
    db.session.expire_all()
    return db.session.get(model, entity_id)


@pytest.fixture
def report(store, users):
    return create_report(store, RecordingNotifier(), users["buyer"], {
        "reported_id": users["seller"].id,
        "reason": "Scammed me out of diamonds",
    })


class TestCreateReport:
    def test_admins_are_notified(self, store, users) -> None:
        notifier = RecordingNotifier()
        created = create_report(store, notifier, users["buyer"], {
            "reported_id": users["seller"].id,
            "reason": "Abusive messages in chat",
        })
        assert created.status == "pending"
        assert [n["user_id"] for n in notifier.sent] == [users["admin"].id]

    def test_cannot_report_self(self, store, users) -> None:
        with pytest.raises(ValidationError):
            create_report(store, RecordingNotifier(), users["buyer"], {
                "reported_id": users["buyer"].id, "reason": "Reporting myself here",
            })

    def test_reported_user_must_exist(self, store, users) -> None:
        with pytest.raises(NotFound):
            create_report(store, RecordingNotifier(), users["buyer"], {
                "reported_id": "usr-ghost", "reason": "Nobody is here at all",
            })

    def test_listing_is_staff_only(self, store, users, report) -> None:
        assert len(list_reports(store, users["moderator"])) == 1
        assert list_reports(store, users["admin"], status="resolved") == []
        with pytest.raises(Forbidden):
            list_reports(store, users["buyer"])


class TestResolveReport:
    def test_approve_bans_and_notifies(self, store, users, report) -> None:
        notifier = RecordingNotifier()
        resolve_report(store, notifier, users["admin"], report.id, "approve", "Confirmed scam")

        resolved = _reload(Report, report.id)
        assert resolved.status == "resolved"
        assert resolved.admin_comment == "Confirmed scam"
        assert resolved.resolved_by == users["admin"].id
        assert resolved.resolved_at is not None

        banned = _reload(User, users["seller"].id)
        assert banned.is_banned is True
        assert banned.ban_reason == "Confirmed scam"

        assert notifier.to(users["seller"].id)[0]["title"] == "Account banned"
        assert "approved" in notifier.to(users["buyer"].id)[0]["message"]

    def test_reject_leaves_user_alone(self, store, users, report) -> None:
        notifier = RecordingNotifier()
        resolve_report(store, notifier, users["admin"], report.id, "reject", "Not enough evidence")

        assert _reload(Report, report.id).status == "rejected"
        assert _reload(User, users["seller"].id).is_banned is False
        assert notifier.to(users["seller"].id) == []
        assert "rejected" in notifier.to(users["buyer"].id)[0]["message"]

    @pytest.mark.parametrize("who", ["buyer", "moderator"])
    def test_non_admin_is_forbidden(self, store, users, report, who) -> None:
        with pytest.raises(Forbidden):
            resolve_report(store, RecordingNotifier(), users[who], report.id, "approve", "x")
        assert _reload(Report, report.id).status == "pending"

    def test_unknown_action(self, store, users, report) -> None:
        with pytest.raises(ValidationError):
            resolve_report(store, RecordingNotifier(), users["admin"], report.id, "ban", "x")

    def test_missing_report(self, store, users) -> None:
        with pytest.raises(NotFound):
            resolve_report(store, RecordingNotifier(), users["admin"], "REP-missing", "reject")

    def test_resolution_is_one_way(self, store, users, report) -> None:
        resolve_report(store, RecordingNotifier(), users["admin"], report.id, "reject", "no")
        with pytest.raises(InvalidTransition):
            resolve_report(store, RecordingNotifier(), users["admin"], report.id, "approve", "yes")
        assert _reload(User, users["seller"].id).is_banned is False

    def test_concurrent_resolution_has_one_winner(self, store, users, report) -> None:
        snapshot = SimpleNamespace(
            id=report.id,
            status="pending",
            reported_id=report.reported_id,
            reporter_id=report.reporter_id,
        )
        resolve_report(store, RecordingNotifier(), users["admin"], report.id, "reject", "first")

        loser = RecordingNotifier()
        with pytest.raises(InvalidTransition):
            resolve_report(StaleReportStore(db.session, snapshot), loser, users["admin"],
                           report.id, "approve", "second")

        assert loser.sent == []
        assert _reload(Report, report.id).admin_comment == "first"
        assert _reload(User, users["seller"].id).is_banned is False
