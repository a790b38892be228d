"""
RedLife Backend - Status Lifecycle Unit Tests
=============================================

What we test:
    ✅ Donation request edges (pending → inprogress/canceled, inprogress → done/canceled)
    ✅ Terminal statuses reject every change except a no-op
    ✅ Blog draft ⇄ published
    ✅ Unknown target status is a validation error, not a transition error
"""

import pytest

from redlife.exceptions import ConflictError, InvalidTransitionError, ValidationError
from redlife.models.blog import BLOG_LIFECYCLE
from redlife.models.donation import DONATION_LIFECYCLE
from redlife.models.lifecycle import StatusLifecycle


class TestDonationLifecycle:
    @pytest.mark.parametrize(
        "current,target",
        [
            ("pending", "inprogress"),
            ("pending", "canceled"),
            ("inprogress", "done"),
            ("inprogress", "canceled"),
        ],
    )
    def test_allowed_edges(self, current, target):
        DONATION_LIFECYCLE.check(current, target)
        assert DONATION_LIFECYCLE.can_transition(current, target)

    @pytest.mark.parametrize(
        "current,target",
        [
            ("pending", "done"),
            ("inprogress", "pending"),
            ("done", "pending"),
            ("done", "canceled"),
            ("canceled", "inprogress"),
        ],
    )
    def test_illegal_edges_raise(self, current, target):
        with pytest.raises(InvalidTransitionError) as exc_info:
            DONATION_LIFECYCLE.check(current, target)
        assert exc_info.value.status_code == 409
        assert exc_info.value.context["current"] == current
        assert exc_info.value.context["target"] == target
        assert exc_info.value.context["terminal"] == DONATION_LIFECYCLE.is_terminal(current)

    def test_leaving_a_final_status_names_it_final(self):
        with pytest.raises(InvalidTransitionError) as exc_info:
            DONATION_LIFECYCLE.check("canceled", "pending")
        assert "final" in exc_info.value.message

        with pytest.raises(InvalidTransitionError) as exc_info:
            DONATION_LIFECYCLE.check("pending", "done")
        assert "final" not in exc_info.value.message

    def test_invalid_transition_is_a_conflict(self):
        with pytest.raises(ConflictError):
            DONATION_LIFECYCLE.check("done", "pending")

    def test_same_status_is_allowed_even_when_terminal(self):
        DONATION_LIFECYCLE.check("done", "done")
        DONATION_LIFECYCLE.check("canceled", "canceled")

    def test_terminal_statuses(self):
        assert DONATION_LIFECYCLE.is_terminal("done")
        assert DONATION_LIFECYCLE.is_terminal("canceled")
        assert not DONATION_LIFECYCLE.is_terminal("pending")

    def test_initial_status_is_pending(self):
        assert DONATION_LIFECYCLE.initial == "pending"

    def test_unknown_target_is_validation_error(self):
        with pytest.raises(ValidationError) as exc_info:
            DONATION_LIFECYCLE.check("pending", "approved")
        assert "approved" in exc_info.value.message
        assert exc_info.value.context["allowed"] == sorted(DONATION_LIFECYCLE.states)


class TestBlogLifecycle:
    def test_publish_and_unpublish(self):
        BLOG_LIFECYCLE.check("draft", "published")
        BLOG_LIFECYCLE.check("published", "draft")

    def test_initial_status_is_draft(self):
        assert BLOG_LIFECYCLE.initial == "draft"
        assert BLOG_LIFECYCLE.states == frozenset({"draft", "published"})


def test_initial_must_be_a_known_status():
    with pytest.raises(ValueError):
        StatusLifecycle(resource="thing", transitions={"a": {"b"}, "b": set()}, initial="c")
