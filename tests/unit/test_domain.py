from datetime import UTC, datetime, timedelta

import pytest

from src.domain.entities import Post, Profile, User, canonical_roles, derive_display_name
from src.domain.state import approve, can_transition, review_state


def test_post_defaults():
    post = Post(title="Hello", author_id="u-1")
    assert post.is_reviewed is False
    assert post.content == ""
    assert post.id
    assert Post(title="Other", author_id="u-1").id != post.id


def test_profile_role_set_always_has_user():
    profile = Profile(id="u-1", email="a@example.com", roles=["admin"])
    assert profile.role_set == frozenset({"admin", "user"})


def test_profile_defaults_to_user_role():
    assert Profile(id="u-1", email="a@example.com").roles == ["user"]


def test_canonical_roles_orders_and_dedupes():
    assert canonical_roles(["user", "admin", "user", "writer"]) == ["admin", "writer", "user"]


@pytest.mark.parametrize(
    "full_name, email, expected",
    [
        ("Ada Lovelace", "ada@example.com", "Ada Lovelace"),
        (None, "ada@example.com", "ada"),
        (None, "", "User"),
        (None, None, "User"),
    ],
)
def test_display_name(full_name, email, expected):
    assert derive_display_name(full_name, email) == expected


def test_user_display_name():
    assert User(id="u-1", email="grace@example.com").display_name == "grace"


def test_review_states():
    assert review_state(None) == "draft"
    assert review_state(Post(title="t", author_id="a")) == "unreviewed"
    assert review_state(Post(title="t", author_id="a", is_reviewed=True)) == "reviewed"


def test_transitions():
    assert can_transition("draft", "unreviewed") is True
    assert can_transition("unreviewed", "reviewed") is True
    assert can_transition("reviewed", "unreviewed") is False
    assert can_transition("draft", "reviewed") is False
    assert can_transition("reviewed", "reviewed") is True


def test_approve_returns_new_post():
    created = datetime(2026, 1, 1, tzinfo=UTC)
    post = Post(title="t", author_id="a", created_at=created, updated_at=created)
    now = created + timedelta(hours=1)

    approved = approve(post, now)

    assert approved.is_reviewed is True
    assert approved.updated_at == now
    assert post.is_reviewed is False


def test_approve_never_moves_updated_at_backwards():
    stamp = datetime(2026, 1, 1, tzinfo=UTC)
    post = Post(title="t", author_id="a", created_at=stamp, updated_at=stamp)

    approved = approve(post, stamp - timedelta(minutes=5))

    assert approved.updated_at == stamp


def test_approve_reviewed_post_is_unchanged():
    stamp = datetime(2026, 1, 1, tzinfo=UTC)
    post = Post(title="t", author_id="a", is_reviewed=True, updated_at=stamp)

    assert approve(post, stamp + timedelta(days=1)) == post
