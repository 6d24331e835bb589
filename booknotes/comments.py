"""Comment writes."""

import logging
from typing import Optional

from booknotes.auth import SessionUser, display_name_for
from booknotes.feed import COMMENTS_TABLE
from booknotes.supabase_client import SupabaseClient
from booknotes.types import CommentRecord

logger = logging.getLogger(__name__)


def build_comment_record(
    note_id: int,
    text: str,
    author: Optional[str],
    user: Optional[SessionUser],
    placeholder: str,
) -> CommentRecord:
    """
    Build the `comments` row.

    `author` is free text. When blank it falls back to the signed-in user's
    derived name, then to the placeholder.
    """
    return {
        "note_id": note_id,
        "author": (author or "").strip() or display_name_for(user, placeholder),
        "text": text.strip(),
    }


def add_comment(
    client: SupabaseClient,
    note_id: int,
    text: str,
    author: Optional[str],
    user: Optional[SessionUser],
    placeholder: str,
) -> CommentRecord:
    record = build_comment_record(note_id, text, author, user, placeholder)
    rows = client.insert(COMMENTS_TABLE, dict(record))
    logger.info("Comment by %r added to note %s", record["author"], note_id)
    return rows[0] if rows else record
