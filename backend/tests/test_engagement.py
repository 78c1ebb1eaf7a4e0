"""Service tests for posts, likes and comments."""

from __future__ import annotations

import pytest
from sqlalchemy import func, select

from app.models import Comment, Like, Notification, NotificationType, Post, User
from app.schemas import PostCreate, PostUpdate
from app.services import engagement
from app.services.errors import Conflict, Forbidden, NotFound, ValidationFailed


def _count(db_session, model, *conditions) -> int:
    stmt = select(func.count()).select_from(model)
    if conditions:
        stmt = stmt.where(*conditions)
    return db_session.execute(stmt).scalar_one()


def test_create_post_increments_posts_count(db_session, make_user):
    author = make_user("writer")
    post = engagement.create_post(db_session, author, PostCreate(content="first"))

    db_session.refresh(author)
    assert post.like_count == 0 and post.comment_count == 0
    assert post.author.id == author.id
    assert author.posts_count == 1


def test_like_twice_is_a_conflict(db_session, make_user):
    author = make_user("author")
    fan = make_user("fan")
    post = engagement.create_post(db_session, author, PostCreate(content="likeable"))

    assert engagement.like(db_session, fan, post.id).like_count == 1
    with pytest.raises(Conflict):
        engagement.like(db_session, fan, post.id)

    db_session.refresh(post)
    assert post.like_count == 1
    assert _count(db_session, Like, Like.post_id == post.id) == 1


def test_like_notifies_owner_but_not_self(db_session, make_user):
    author = make_user("author")
    fan = make_user("fan")
    post = engagement.create_post(db_session, author, PostCreate(content="hello"))

    engagement.like(db_session, author, post.id)
    assert _count(db_session, Notification) == 0

    engagement.like(db_session, fan, post.id)
    notification = db_session.execute(select(Notification)).scalar_one()
    assert notification.user_id == author.id
    assert notification.type is NotificationType.LIKE
    assert notification.related_user_id == fan.id
    assert notification.related_post_id == post.id
    assert notification.message == "fan liked your post"
    assert notification.is_read is False


def test_unlike_is_idempotent_and_keeps_notifications(db_session, make_user):
    author = make_user("author")
    fan = make_user("fan")
    post = engagement.create_post(db_session, author, PostCreate(content="hello"))
    engagement.like(db_session, fan, post.id)

    assert engagement.unlike(db_session, fan, post.id).like_count == 0
    assert engagement.unlike(db_session, fan, post.id).like_count == 0
    assert _count(db_session, Notification) == 1


def test_like_missing_post(db_session, make_user):
    fan = make_user("fan")
    with pytest.raises(NotFound):
        engagement.like(db_session, fan, 404)
    with pytest.raises(NotFound):
        engagement.unlike(db_session, fan, 404)


def test_add_comment_counts_and_notifies(db_session, make_user):
    author = make_user("author")
    critic = make_user("critic")
    post = engagement.create_post(db_session, author, PostCreate(content="thoughts?"))

    comment = engagement.add_comment(db_session, critic, post.id, "  nice  ")
    engagement.add_comment(db_session, author, post.id, "thanks")

    db_session.refresh(post)
    assert comment.content == "nice"
    assert post.comment_count == 2
    notifications = db_session.execute(select(Notification)).scalars().all()
    assert [n.type for n in notifications] == [NotificationType.COMMENT]
    assert notifications[0].user_id == author.id


def test_add_comment_validates_length(db_session, make_user):
    author = make_user("author")
    post = engagement.create_post(db_session, author, PostCreate(content="post"))
    with pytest.raises(ValidationFailed):
        engagement.add_comment(db_session, author, post.id, "   ")
    with pytest.raises(ValidationFailed):
        engagement.add_comment(db_session, author, post.id, "z" * 501)


def test_list_comments_oldest_first(db_session, make_user):
    author = make_user("author")
    post = engagement.create_post(db_session, author, PostCreate(content="post"))
    for text in ("one", "two", "three"):
        engagement.add_comment(db_session, author, post.id, text)

    assert [c.content for c in engagement.list_comments(db_session, post.id)] == ["one", "two", "three"]
    with pytest.raises(NotFound):
        engagement.list_comments(db_session, 999)


def test_update_post_only_by_author(db_session, make_user):
    author = make_user("author")
    other = make_user("other")
    post = engagement.create_post(db_session, author, PostCreate(content="draft"))

    with pytest.raises(Forbidden):
        engagement.update_post(db_session, other, post.id, PostUpdate(content="hijacked"))
    with pytest.raises(ValidationFailed):
        engagement.update_post(db_session, author, post.id, PostUpdate())
    with pytest.raises(ValidationFailed):
        engagement.update_post(db_session, author, post.id, PostUpdate(content=None))

    updated = engagement.update_post(db_session, author, post.id, PostUpdate(content="final", category="question"))
    assert updated.content == "final"
    assert updated.category.value == "question"


def test_delete_post_cascades(db_session, make_user):
    author = make_user("author")
    fan = make_user("fan")
    admin = make_user("admin", is_admin=True)
    post = engagement.create_post(db_session, author, PostCreate(content="doomed"))
    keep = engagement.create_post(db_session, author, PostCreate(content="keeper"))
    engagement.like(db_session, fan, post.id)
    engagement.add_comment(db_session, fan, post.id, "bye")
    engagement.like(db_session, fan, keep.id)
    post_id = post.id

    with pytest.raises(Forbidden):
        engagement.delete_post(db_session, fan, post_id)

    engagement.delete_post(db_session, admin, post_id)

    assert db_session.get(Post, post_id) is None
    assert _count(db_session, Like, Like.post_id == post_id) == 0
    assert _count(db_session, Comment, Comment.post_id == post_id) == 0
    assert _count(db_session, Notification, Notification.related_post_id == post_id) == 0
    assert _count(db_session, Like, Like.post_id == keep.id) == 1
    assert db_session.get(User, author.id).posts_count == 1
    with pytest.raises(NotFound):
        engagement.get_post(db_session, post_id)


def test_like_race_maps_integrity_error_to_conflict(db_session, make_user, monkeypatch):
    author = make_user("author")
    fan = make_user("fan")
    post = engagement.create_post(db_session, author, PostCreate(content="contested"))
    engagement.like(db_session, fan, post.id)

    # a concurrent like landed between the existence check and the insert
    monkeypatch.setattr(engagement, "_like_exists", lambda db, user_id, post_id: False)

    with pytest.raises(Conflict):
        engagement.like(db_session, fan, post.id)

    assert db_session.get(Post, post.id).like_count == 1
    assert _count(db_session, Like, Like.post_id == post.id) == 1
