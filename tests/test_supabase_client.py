"""
Unit tests for the SupabaseClient wrapper using the in-memory FakeSupabase.

These tests verify:
    - select applies equality filters and ordering
    - insert / update return the affected rows
    - SDK errors are normalized into booknotes.errors with the message intact
    - the auth surface projects SessionUser and manages the subscription
    - storage upload and public URL lookup
"""

import pytest

from booknotes.auth import SessionUser
from booknotes.errors import AuthError, DataAccessError, UploadError
from booknotes.supabase_client import SupabaseClient, _extract_data
from tests.conftest import ALICE_EMAIL, PASSWORD


# =====================================================================
# Table access
# =====================================================================


def test_select_filters_and_orders_newest_first(client, fake) -> None:
    fake.seed("notes", book="A", user_id="u1")
    fake.seed("notes", book="B", user_id="u2")
    fake.seed("notes", book="C", user_id="u1")

    rows = client.select("notes", filters={"user_id": "u1"}, order="created_at")

    assert [r["book"] for r in rows] == ["C", "A"]


def test_select_ascending(client, fake) -> None:
    fake.seed("notes", book="A")
    fake.seed("notes", book="B")

    rows = client.select("notes", order="created_at", descending=False)

    assert [r["book"] for r in rows] == ["A", "B"]


def test_insert_returns_inserted_row(client, fake) -> None:
    rows = client.insert("comments", {"note_id": 1, "author": "x", "text": "hi"})

    assert len(rows) == 1
    assert rows[0]["text"] == "hi"
    assert "id" in rows[0]
    assert fake.writes == [("insert", "comments", {"note_id": 1, "author": "x", "text": "hi"})]


def test_update_applies_patch_to_matching_rows(client, fake) -> None:
    fake.seed("notes", book="A", user_id="u1")
    fake.seed("notes", book="B", user_id="u2")

    rows = client.update("notes", {"user_id": "u1"}, {"likes": 9})

    assert [r["book"] for r in rows] == ["A"]
    assert [r["likes"] for r in fake.tables["notes"]] == [9, 0]


def test_update_refuses_empty_filter(client) -> None:
    with pytest.raises(ValueError, match="at least one filter"):
        client.update("notes", {}, {"likes": 1})


def test_query_errors_become_data_access_errors(client, fake) -> None:
    fake.failing_tables.add("notes")

    with pytest.raises(DataAccessError) as excinfo:
        client.select("notes")

    assert excinfo.value.message == 'relation "public.notes" is unavailable'


def test_extract_data_handles_dict_responses() -> None:
    assert _extract_data({"status": 200, "data": [{"id": 1}]}) == [{"id": 1}]

    with pytest.raises(DataAccessError):
        _extract_data({"status": 500, "data": None})


def test_calls_without_client_raise() -> None:
    with pytest.raises(RuntimeError, match="not configured"):
        SupabaseClient(client=None).select("notes")


# =====================================================================
# Auth
# =====================================================================


def test_sign_in_returns_session_projection(client) -> None:
    user = client.sign_in(ALICE_EMAIL, PASSWORD)

    assert user == SessionUser(id="user-1", email=ALICE_EMAIL, display_name="Alice")
    assert client.get_session_user() == user


def test_sign_in_error_message_is_verbatim(client) -> None:
    with pytest.raises(AuthError) as excinfo:
        client.sign_in(ALICE_EMAIL, "wrong")

    assert excinfo.value.message == "Invalid login credentials"


def test_sign_up_stores_display_name_in_metadata(client, fake) -> None:
    user = client.sign_up("new@example.com", "secret123", display_name="Newbie")

    assert user is not None
    assert user.display_name == "Newbie"
    assert fake.auth.users["new@example.com"]["user_metadata"] == {"display_name": "Newbie"}


def test_sign_out_clears_session(client) -> None:
    client.sign_in(ALICE_EMAIL, PASSWORD)
    client.sign_out()

    assert client.get_session_user() is None


def test_auth_subscription_receives_projection_and_unsubscribes(client, fake) -> None:
    events = []
    subscription = client.on_auth_state_change(lambda event, user: events.append((event, user)))

    client.sign_in(ALICE_EMAIL, PASSWORD)
    client.sign_out()
    subscription.unsubscribe()
    subscription.unsubscribe()  # second release is a no-op
    client.sign_in(ALICE_EMAIL, PASSWORD)

    assert [e for e, _ in events] == ["SIGNED_IN", "SIGNED_OUT"]
    assert events[0][1].id == "user-1"
    assert events[1][1] is None
    assert fake.auth.listeners == []


# =====================================================================
# Storage
# =====================================================================


def test_upload_upserts_and_public_url_is_clean(client, fake) -> None:
    client.upload("avatars", "user-1.png", b"one", content_type="image/png")
    client.upload("avatars", "user-1.png", b"two", content_type="image/png")

    data, options = fake.storage.objects["avatars"]["user-1.png"]
    assert data == b"two"
    assert options == {"upsert": "true", "content-type": "image/png"}

    url = client.get_public_url("avatars", "user-1.png")
    assert url == "https://fake.supabase.co/storage/v1/object/public/avatars/user-1.png"


def test_upload_error_message_is_verbatim(client, fake) -> None:
    fake.storage.fail_with = "Payload too large"

    with pytest.raises(UploadError) as excinfo:
        client.upload("avatars", "user-1.png", b"x")

    assert excinfo.value.message == "Payload too large"
