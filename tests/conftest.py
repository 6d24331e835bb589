"""
Shared pytest configuration for the book notes test suite.

This file centralizes the reusable testing utilities so that:
    • every test talks to the same in-memory FakeSupabase
    • boards are always started and closed (the auth subscription is a
      scoped resource and must not leak between tests)
    • seeded notes and users are deterministic
"""

import pytest
from typer.testing import CliRunner

from booknotes.board import NotesBoard
from booknotes.config import Settings
from booknotes.supabase_client import SupabaseClient
from tests.fixtures.fake_supabase import FakeSupabase

# ============================================================================
# SHARED TEST INFRASTRUCTURE
# ============================================================================

ALICE_EMAIL = "alice@example.com"
BOB_EMAIL = "bob@example.com"
PASSWORD = "correct-horse"


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provides a fresh Typer CliRunner instance for CLI tests."""
    return CliRunner()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://fake.supabase.co",
        supabase_key="anon-key",
        avatar_bucket="avatars",
        anonymous_name="Anonymous reader",
    )


@pytest.fixture
def fake() -> FakeSupabase:
    """An empty fake backend with two registered (signed-out) users."""
    db = FakeSupabase()
    db.auth.add_user(ALICE_EMAIL, PASSWORD, display_name="Alice")
    db.auth.add_user(BOB_EMAIL, PASSWORD)
    return db


@pytest.fixture
def client(fake: FakeSupabase) -> SupabaseClient:
    return SupabaseClient(fake)


@pytest.fixture
def board(client: SupabaseClient, settings: Settings):
    """A started board; closed (and unsubscribed) after the test."""
    with NotesBoard(client, settings) as b:
        yield b


@pytest.fixture
def signed_in_board(board: NotesBoard) -> NotesBoard:
    """A board signed in as Alice."""
    snapshot = board.sign_in(ALICE_EMAIL, PASSWORD)
    assert snapshot.user is not None
    return board


@pytest.fixture
def seed_notes(fake: FakeSupabase):
    """
    Seed a small feed:

        n1  Alice  "Dune"          (oldest)
        n2  Bob    "Middlemarch"
        n3  Alice  "Piranesi"      (newest)

    plus two comments on n1. Returns the seeded rows in insertion order.
    """
    alice_id = fake.auth.users[ALICE_EMAIL]["id"]
    bob_id = fake.auth.users[BOB_EMAIL]["id"]

    n1 = fake.seed(
        "notes",
        book="Dune",
        content="Spice and politics.",
        likes=2,
        user_id=alice_id,
        author_name="Alice",
        contact="@alice",
    )
    n2 = fake.seed(
        "notes",
        book="Middlemarch",
        content="Provincial life.",
        likes=0,
        user_id=bob_id,
        author_name="bob",
    )
    n3 = fake.seed(
        "notes",
        book="Piranesi",
        content="The House is infinite.",
        likes=5,
        user_id=alice_id,
        author_name="Alice L.",
    )
    fake.seed("comments", note_id=n1["id"], author="Carol", text="Great pick")
    fake.seed("comments", note_id=n1["id"], author="Dan", text="Agreed")

    return [n1, n2, n3]
