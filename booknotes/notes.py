"""
Note writes: submission and likes.

Both functions assume validation has already happened in the view layer
and only build the row and issue the write. Errors from the collaborator
propagate as DataAccessError.
"""

import logging
from typing import Optional

from booknotes.auth import SessionUser, display_name_for
from booknotes.errors import DataAccessError
from booknotes.feed import NOTES_TABLE
from booknotes.supabase_client import SupabaseClient
from booknotes.types import NoteRecord

logger = logging.getLogger(__name__)


def build_note_record(
    user: SessionUser,
    book: str,
    content: str,
    contact: Optional[str],
    placeholder: str,
    avatar_url: Optional[str] = None,
) -> NoteRecord:
    """
    Build the `notes` row for a new submission.

    The like counter starts at zero. The contact handle is trimmed and
    stored as null when blank.
    """
    record: NoteRecord = {
        "book": book.strip(),
        "content": content.strip(),
        "likes": 0,
        "user_id": user.id,
        "author_name": display_name_for(user, placeholder),
        "contact": (contact or "").strip() or None,
    }
    if avatar_url:
        record["avatar_url"] = avatar_url
    return record


def latest_avatar_url(client: SupabaseClient, user_id: str) -> Optional[str]:
    """
    Avatar URL on the user's most recent note that has one, if any.

    A new note inherits it so the author's avatar shows on every note, not
    just the ones that existed at upload time.
    """
    try:
        rows = client.select(NOTES_TABLE, filters={"user_id": user_id}, order="created_at")
    except DataAccessError as e:
        logger.warning("Could not look up avatar for user %s: %s", user_id, e.message)
        return None
    for row in rows:
        if row.get("avatar_url"):
            return row["avatar_url"]
    return None


def submit_note(
    client: SupabaseClient,
    user: SessionUser,
    book: str,
    content: str,
    contact: Optional[str],
    placeholder: str,
) -> NoteRecord:
    record = build_note_record(
        user,
        book,
        content,
        contact,
        placeholder,
        avatar_url=latest_avatar_url(client, user.id),
    )
    rows = client.insert(NOTES_TABLE, dict(record))
    logger.info("User %s posted a note on %r", user.id, record["book"])
    return rows[0] if rows else record


def like_note(client: SupabaseClient, note_id: int, current_likes: int) -> int:
    """
    Persist `current_likes + 1` on the note and return the written value.

    This is a read-then-write, not an atomic increment: two likes computed
    from the same displayed count both write the same value, and one of them
    is lost.
    """
    new_likes = int(current_likes) + 1
    client.update(NOTES_TABLE, {"id": note_id}, {"likes": new_likes})
    logger.info("Note %s liked (likes=%d)", note_id, new_likes)
    return new_likes
