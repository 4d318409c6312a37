"""Tests for review submission closing the order lifecycle."""

import pytest

from craftlance.extensions import db
from craftlance.models.order import Order
from craftlance.models.review import Review
from craftlance.services.offer_service import accept_offer
from craftlance.services.review_service import list_reviews, submit_review
from craftlance.services.store import OrderStore
from craftlance.utils.exceptions import (
    Conflict,
    Forbidden,
    InvalidTransition,
    NotFound,
    ValidationError,
)

from conftest import RecordingNotifier


class BlindReviewStore(OrderStore):
    """Skips the duplicate pre-check, as a concurrent request would."""

    def find_review(self, order_id, reviewer_id):
        return None


def _reload(order_id):
    db.session.expire_all()
    return db.session.get(Order, order_id)


@pytest.fixture
def accepted_order(store, users, make_order, make_offer):
    order = make_order()
    offer = make_offer(order)
    accept_offer(store, RecordingNotifier(), users["buyer"], order.id, offer.id)
    return order


class TestSubmitReview:
    def test_review_completes_order(self, store, users, accepted_order) -> None:
        notifier = RecordingNotifier()
        review = submit_review(store, notifier, users["buyer"], accepted_order.id, 5, "Great build")

        assert review.rating == 5
        assert review.comment == "Great build"
        assert _reload(accepted_order.id).status == "completed"
        assert notifier.to(users["seller"].id)[0]["type"] == "new_review"

    def test_rating_is_normalized(self, store, users, accepted_order) -> None:
        review = submit_review(store, RecordingNotifier(), users["buyer"], accepted_order.id, 3.7)
        assert review.rating == 4

    def test_invalid_rating_fails_before_any_write(self, store, users, accepted_order) -> None:
        with pytest.raises(ValidationError):
            submit_review(store, RecordingNotifier(), users["buyer"], accepted_order.id, 6)
        assert Review.query.count() == 0
        assert _reload(accepted_order.id).status == "in_progress"

    def test_duplicate_review_conflicts(self, store, users, accepted_order) -> None:
        submit_review(store, RecordingNotifier(), users["buyer"], accepted_order.id, 5)
        with pytest.raises(Conflict):
            submit_review(store, RecordingNotifier(), users["buyer"], accepted_order.id, 4)
        assert Review.query.filter_by(
            order_id=accepted_order.id, reviewer_id=users["buyer"].id
        ).count() == 1

    def test_unique_constraint_closes_the_race(self, users, accepted_order) -> None:
        blind = BlindReviewStore(db.session)
        submit_review(blind, RecordingNotifier(), users["buyer"], accepted_order.id, 5)
        with pytest.raises(Conflict):
            submit_review(blind, RecordingNotifier(), users["buyer"], accepted_order.id, 2)
        assert Review.query.count() == 1
        assert _reload(accepted_order.id).status == "completed"

    def test_open_order_cannot_be_reviewed(self, store, users, make_order) -> None:
        order = make_order()
        with pytest.raises(InvalidTransition):
            submit_review(store, RecordingNotifier(), users["buyer"], order.id, 5)
        assert _reload(order.id).status == "open"

    def test_disputed_order_is_closed_by_review(self, store, users, accepted_order) -> None:
        Order.query.filter_by(id=accepted_order.id).update({"status": "dispute"})
        db.session.commit()
        submit_review(store, RecordingNotifier(), users["buyer"], accepted_order.id, 2)
        assert _reload(accepted_order.id).status == "completed"

    def test_only_buyer_reviews(self, store, users, accepted_order) -> None:
        with pytest.raises(Forbidden):
            submit_review(store, RecordingNotifier(), users["seller"], accepted_order.id, 5)

    def test_unknown_order(self, store, users) -> None:
        with pytest.raises(NotFound):
            submit_review(store, RecordingNotifier(), users["buyer"], "ORD-missing", 5)


class TestListReviews:
    def test_filters_and_sorting(self, store, users, make_order, make_offer) -> None:
        for rating, title in ((2, "First build order"), (5, "Second build order")):
            order = make_order(title=title)
            offer = make_offer(order)
            accept_offer(store, RecordingNotifier(), users["buyer"], order.id, offer.id)
            submit_review(store, RecordingNotifier(), users["buyer"], order.id, rating,
                          "ok" if rating == 5 else None)

        items, pagination = list_reviews(store, {}, sort="highest")
        assert [r.rating for r in items] == [5, 2]
        assert pagination["total"] == 2

        items, _ = list_reviews(store, {"has_comment": True})
        assert [r.rating for r in items] == [5]

        items, _ = list_reviews(store, {"max_rating": 3}, sort="lowest")
        assert [r.rating for r in items] == [2]

    def test_unknown_sort(self, store) -> None:
        with pytest.raises(ValidationError):
            list_reviews(store, {}, sort="random")
