"""Tests for the order lifecycle graph and input validators."""

from decimal import Decimal
from itertools import product

import pytest

from craftlance.models.order import ORDER_STATUSES
from craftlance.services import status_policy
from craftlance.utils.exceptions import ValidationError

ALLOWED = {
    ("open", "in_progress"),
    ("open", "dispute"),
    ("in_progress", "completed"),
    ("in_progress", "dispute"),
    ("completed", "dispute"),
    ("dispute", "completed"),
    ("dispute", "in_progress"),
}


class TestTransitions:
    def test_only_table_transitions_are_allowed(self) -> None:
        for current, new in product(ORDER_STATUSES, repeat=2):
            assert status_policy.can_transition(current, new) == ((current, new) in ALLOWED)

    def test_reflexive_transitions_are_rejected(self) -> None:
        for status in ORDER_STATUSES:
            assert not status_policy.can_transition(status, status)

    def test_unknown_statuses_never_transition(self) -> None:
        assert not status_policy.can_transition("paid", "completed")
        assert not status_policy.can_transition("open", "paid")
        assert not status_policy.can_transition(None, "open")

    def test_completed_only_reaches_dispute(self) -> None:
        reachable = {s for s in ORDER_STATUSES if status_policy.can_transition("completed", s)}
        assert reachable == {"dispute"}

    def test_is_valid_status(self) -> None:
        assert status_policy.is_valid_status("in_progress")
        assert not status_policy.is_valid_status("paid")
        assert not status_policy.is_valid_status(3)

    def test_next_status_follows_happy_path(self) -> None:
        assert status_policy.next_status("open") == "in_progress"
        assert status_policy.next_status("in_progress") == "completed"
        assert status_policy.next_status("completed") == "completed"
        assert status_policy.next_status("dispute") == "dispute"
        with pytest.raises(ValidationError):
            status_policy.next_status("cancelled")


class TestRating:
    def test_out_of_range_ratings_fail(self) -> None:
        with pytest.raises(ValidationError):
            status_policy.validate_rating(0)
        with pytest.raises(ValidationError):
            status_policy.validate_rating(6)

    def test_fractional_rating_rounds_half_up(self) -> None:
        assert status_policy.validate_rating(3.7) == 4
        assert status_policy.validate_rating(2.5) == 3
        assert status_policy.validate_rating(1.2) == 1

    def test_non_numbers_fail(self) -> None:
        for bad in ("5", None, True, float("nan")):
            with pytest.raises(ValidationError):
                status_policy.validate_rating(bad)


class TestPrices:
    def test_price_bounds(self) -> None:
        assert status_policy.validate_price(1000000) == Decimal("1000000")
        assert status_policy.validate_price(0.5) == Decimal("0.5")
        for bad in (0, -1, 1000000.01):
            with pytest.raises(ValidationError):
                status_policy.validate_price(bad)

    def test_offer_price_cannot_exceed_double_budget(self) -> None:
        assert status_policy.validate_offer_price(1000, Decimal("500")) == Decimal("1000")
        with pytest.raises(ValidationError) as exc:
            status_policy.validate_offer_price(1200, Decimal("500"))
        assert "double" in exc.value.message

    def test_delivery_time(self) -> None:
        assert status_policy.validate_delivery_time(7) == 7
        for bad in (0, 366, 2.5, True):
            with pytest.raises(ValidationError):
                status_policy.validate_delivery_time(bad)


class TestText:
    def test_title_is_trimmed_and_bounded(self) -> None:
        assert status_policy.validate_title("  Skyblock island  ") == "Skyblock island"
        with pytest.raises(ValidationError):
            status_policy.validate_title("abc")
        with pytest.raises(ValidationError):
            status_policy.validate_title("x" * 101)

    def test_description_bounds(self) -> None:
        with pytest.raises(ValidationError):
            status_policy.validate_description("too short")
        assert status_policy.validate_description("d" * 2000) == "d" * 2000

    def test_category_enum(self) -> None:
        assert status_policy.validate_category("writing") == "writing"
        with pytest.raises(ValidationError):
            status_policy.validate_category("griefing")

    def test_review_comment(self) -> None:
        assert status_policy.validate_review_comment(None) is None
        assert status_policy.validate_review_comment("   ") is None
        assert status_policy.validate_review_comment(" great ") == "great"
        with pytest.raises(ValidationError):
            status_policy.validate_review_comment("c" * 1001)
        assert status_policy.validate_review_comment("  " + "c" * 1000 + "\n") == "c" * 1000
