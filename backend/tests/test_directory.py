"""Profiles, user search and discovery."""

from __future__ import annotations

import pytest

from app.schemas import UserProfileUpdate
from app.search import UserSearchFilters, UserSearchService
from app.services import directory, graph
from app.services.errors import Conflict, NotFound


def test_update_profile_partial_fields(db_session, make_user):
    user = make_user("original")

    updated = directory.update_profile(
        db_session,
        user,
        UserProfileUpdate(bio="  Coffee and code  ", website="https://example.com/me", is_private=True),
    )
    assert updated.bio == "Coffee and code"
    assert updated.website == "https://example.com/me"
    assert updated.is_private is True
    assert updated.username == "original"

    cleared = directory.update_profile(db_session, user, UserProfileUpdate(website="", bio=None))
    assert cleared.website is None
    assert cleared.bio is None
    assert cleared.is_private is True


def test_update_profile_username_must_be_unique(db_session, make_user):
    make_user("taken")
    user = make_user("mine")
    with pytest.raises(Conflict):
        directory.update_profile(db_session, user, UserProfileUpdate(username="taken"))
    assert directory.update_profile(db_session, user, UserProfileUpdate(username="renamed")).username == "renamed"


def test_get_profile_missing(db_session):
    with pytest.raises(NotFound):
        directory.get_profile(db_session, 321)


def test_search_matches_username_and_bio_case_insensitively(db_session, make_user):
    viewer = make_user("viewer")
    painter = make_user("PaintFan")
    writer = make_user("writer")
    directory.update_profile(db_session, writer, UserProfileUpdate(bio="I paint on weekends"))
    make_user("nobody")
    graph.follow(db_session, viewer, writer.id)

    results = directory.search_users(db_session, "paint", viewer=viewer, limit=20)

    # writer has one follower so ranks first
    assert [(user.username, following) for user, following in results] == [
        ("writer", True),
        ("PaintFan", False),
    ]
    assert painter.id in {user.id for user, _ in results}
    assert directory.search_users(db_session, "   ", viewer=None, limit=20) == []


def test_search_escapes_like_wildcards(db_session, make_user):
    make_user("plain")
    make_user("under_score")
    results = UserSearchService(db_session).search("_", limit=10)
    assert [user.username for user in results] == ["under_score"]


def test_search_skips_inactive_users(db_session, make_user):
    make_user("hidden_one", is_active=False)
    assert UserSearchService(db_session).search("hidden", limit=10) == []
    found = UserSearchService(db_session).search(
        "hidden", limit=10, filters=UserSearchFilters(active_only=False)
    )
    assert [user.username for user in found] == ["hidden_one"]


def test_discover_excludes_self_and_followed(db_session, make_user):
    me = make_user("me")
    followed = make_user("followed")
    popular = make_user("popular")
    quiet = make_user("quiet")
    graph.follow(db_session, me, followed.id)
    graph.follow(db_session, followed, popular.id)

    suggestions = directory.discover_users(db_session, me, limit=10)

    assert [user.id for user in suggestions] == [popular.id, quiet.id]
