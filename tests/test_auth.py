"""Tests for the session projection and author-name derivation."""

from types import SimpleNamespace

from booknotes.auth import (
    AuthSubscription,
    SessionUser,
    display_name_for,
    session_user_from,
    session_user_from_session,
)

PLACEHOLDER = "Anonymous reader"


def test_display_name_prefers_profile_name() -> None:
    user = SessionUser(id="u1", email="alice@example.com", display_name="Alice")
    assert display_name_for(user, PLACEHOLDER) == "Alice"


def test_display_name_falls_back_to_email_local_part() -> None:
    user = SessionUser(id="u1", email="bob.smith@example.com")
    assert display_name_for(user, PLACEHOLDER) == "bob.smith"


def test_display_name_falls_back_to_placeholder() -> None:
    assert display_name_for(SessionUser(id="u1"), PLACEHOLDER) == PLACEHOLDER
    assert display_name_for(None, PLACEHOLDER) == PLACEHOLDER


def test_session_user_from_sdk_object_and_dict() -> None:
    sdk_user = SimpleNamespace(id="u1", email="a@b.c", user_metadata={"name": " Ann "})
    assert session_user_from(sdk_user) == SessionUser(id="u1", email="a@b.c", display_name="Ann")

    raw = {"id": "u2", "email": "x@y.z", "user_metadata": {}}
    assert session_user_from(raw) == SessionUser(id="u2", email="x@y.z", display_name=None)


def test_session_user_from_missing_values() -> None:
    assert session_user_from(None) is None
    assert session_user_from({"email": "no-id@example.com"}) is None
    assert session_user_from_session(None) is None


def test_auth_subscription_releases_once() -> None:
    calls = []
    handle = SimpleNamespace(unsubscribe=lambda: calls.append("released"))

    with AuthSubscription(handle) as subscription:
        assert subscription.active

    subscription.unsubscribe()

    assert calls == ["released"]
    assert not subscription.active
