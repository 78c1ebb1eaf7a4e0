"""Feed composition and page boundaries."""

from __future__ import annotations

import pytest

from app.schemas import PostCreate
from app.services import engagement, feed, graph
from app.services.errors import ValidationFailed


def _publish(db_session, author, count, prefix="post"):
    return [engagement.create_post(db_session, author, PostCreate(content=f"{prefix} {i}")) for i in range(count)]


def test_exactly_one_full_page_has_no_more(db_session, make_user):
    author = make_user("prolific")
    _publish(db_session, author, 20)

    first = feed.global_feed(db_session, page=1, page_size=20)
    assert len(first.items) == 20
    assert first.has_more is False

    second = feed.global_feed(db_session, page=2, page_size=20)
    assert second.items == []
    assert second.has_more is False


def test_partial_last_page(db_session, make_user):
    author = make_user("prolific")
    posts = _publish(db_session, author, 25)

    first = feed.global_feed(db_session, page=1, page_size=20)
    second = feed.global_feed(db_session, page=2, page_size=20)

    assert first.has_more is True
    assert len(second.items) == 5 and second.has_more is False
    assert first.items[0].id == posts[-1].id
    seen = [post.id for post in first.items + second.items]
    assert len(seen) == len(set(seen)) == 25


def test_page_must_be_positive(db_session):
    with pytest.raises(ValidationFailed):
        feed.global_feed(db_session, page=0, page_size=20)


def test_personal_feed_contains_own_and_followed_posts(db_session, make_user):
    me = make_user("me")
    friend = make_user("friend")
    stranger = make_user("stranger")
    mine = _publish(db_session, me, 1, "mine")
    theirs = _publish(db_session, friend, 2, "friend")
    _publish(db_session, stranger, 2, "stranger")

    graph.follow(db_session, me, friend.id)

    page = feed.personal_feed(db_session, me, page=1, page_size=20)
    assert {post.id for post in page.items} == {p.id for p in mine + theirs}
    assert [post.id for post in page.items] == sorted((p.id for p in mine + theirs), reverse=True)

    graph.unfollow(db_session, me, friend.id)
    page = feed.personal_feed(db_session, me, page=1, page_size=20)
    assert [post.id for post in page.items] == [mine[0].id]


def test_user_posts_only_lists_that_author(db_session, make_user):
    a = make_user("alpha")
    b = make_user("beta")
    _publish(db_session, a, 3)
    _publish(db_session, b, 1)

    page = feed.user_posts(db_session, a.id, page=1, page_size=2)
    assert len(page.items) == 2 and page.has_more is True
    assert all(post.user_id == a.id for post in page.items)
