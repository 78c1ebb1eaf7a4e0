"""Admin statistics and account moderation."""

from __future__ import annotations

import pytest

from app.core.security import RefreshTokenError, issue_refresh_token, redeem_refresh_token
from app.schemas import AdminStats, PostCreate
from app.services import engagement, graph, moderation
from app.services.errors import InvalidOperation, NotFound


def test_collect_stats(db_session, make_user):
    admin = make_user("admin", is_admin=True)
    alice = make_user("alice")
    bob = make_user("bob", is_active=False)
    post = engagement.create_post(db_session, alice, PostCreate(content="stats"))
    engagement.like(db_session, admin, post.id)
    engagement.add_comment(db_session, admin, post.id, "noted")
    graph.follow(db_session, admin, alice.id)

    stats = AdminStats.model_validate(moderation.collect_stats(db_session, recent_limit=2))

    assert stats.total_users == 3
    assert stats.active_users == 2
    assert stats.total_posts == 1
    assert stats.posts_today == 1
    assert stats.users_active_today == 1
    assert stats.total_likes == 1
    assert stats.total_comments == 1
    assert stats.total_follows == 1
    assert [user.username for user in stats.recent_users] == [bob.username, alice.username]
    assert stats.recent_posts[0].user.username == "alice"


def test_toggle_active(db_session, make_user):
    admin = make_user("admin", is_admin=True)
    member = make_user("member")

    assert moderation.toggle_active(db_session, admin, member.id).is_active is False
    assert moderation.toggle_active(db_session, admin, member.id).is_active is True

    with pytest.raises(InvalidOperation):
        moderation.toggle_active(db_session, admin, admin.id)
    with pytest.raises(NotFound):
        moderation.toggle_active(db_session, admin, 4040)


def test_admin_listings_are_paged(db_session, make_user):
    for i in range(3):
        make_user(f"member{i}")

    first = moderation.list_users(db_session, page=1, page_size=2)
    second = moderation.list_users(db_session, page=2, page_size=2)

    assert first.has_more is True and second.has_more is False
    assert [user.username for user in first.items + second.items] == ["member2", "member1", "member0"]
    assert moderation.list_posts(db_session, page=1, page_size=2).items == []


def test_deactivation_ends_refresh_sessions(db_session, make_user):
    admin = make_user("admin", is_admin=True)
    member = make_user("member")
    token, _ = issue_refresh_token(member.id)

    moderation.toggle_active(db_session, admin, member.id)

    with pytest.raises(RefreshTokenError):
        redeem_refresh_token(token)
