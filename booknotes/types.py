"""
booknotes/types.py

Centralized type definitions for the book notes client.

This module defines the row TypedDicts and Protocols shared by the Supabase
wrapper, the feed and command handlers, the web layer and the test doubles.
Keeping them in one place gives:

    • a single source of truth for the `notes` and `comments` row shapes
    • clear contracts between the board, the web layer and the Supabase layer
    • easy injection of in-memory fakes in tests

When a column is added to a Supabase table, update this file first.
"""

from typing import Any, Callable, List, Optional, Protocol, TypedDict


# ---------------------------------------------------------------------------
# NoteRecord
# ---------------------------------------------------------------------------
# A single row of the `notes` table.
#
# total=False allows partial construction (e.g., before Supabase assigns
# "id" and "created_at" on insert).
# ---------------------------------------------------------------------------
class NoteRecord(TypedDict, total=False):
    id: int
    book: str
    content: str
    likes: int
    user_id: Optional[str]
    author_name: Optional[str]
    contact: Optional[str]
    avatar_url: Optional[str]
    created_at: str


# ---------------------------------------------------------------------------
# CommentRecord
# ---------------------------------------------------------------------------
# A single row of the `comments` table. `author` is a free-text snapshot,
# never a foreign key to a user.
# ---------------------------------------------------------------------------
class CommentRecord(TypedDict, total=False):
    id: int
    note_id: int
    author: str
    text: str
    created_at: str


# ---------------------------------------------------------------------------
# NoteWithComments
# ---------------------------------------------------------------------------
# A note row joined client-side with its comments (newest first).
# ---------------------------------------------------------------------------
class NoteWithComments(NoteRecord, total=False):
    comments: List[CommentRecord]


# Invoked with (event_name, SessionUser | None) on every auth state change.
AuthCallback = Callable[[str, Any], None]


# ---------------------------------------------------------------------------
# SupabaseClientInterface
# ---------------------------------------------------------------------------
# Structural Protocol for the subset of the Supabase SDK this project uses:
#
#     client.table("notes").select("*").eq(...).order(...).execute()
#     client.table("notes").insert({...}).execute()
#     client.table("notes").update({...}).eq(...).execute()
#     client.auth.sign_in_with_password({...})
#     client.storage.from_("avatars").upload(path, data, file_options)
#
# The real `supabase.Client` and tests/fixtures/fake_supabase.FakeSupabase
# both satisfy it.
# ---------------------------------------------------------------------------
class SupabaseClientInterface(Protocol):
    auth: Any
    storage: Any

    def table(self, name: str) -> Any:
        """
        Return a query builder for the given table.
        The builder must support .select(), .insert(), .update(), .eq(),
        .order() and .execute().
        """
        ...
