"""
Note feed: read every note (optionally one author's) newest first and join
each note with its comments client-side.

The join is deliberately one comments query per note. Reads never raise:
a failed notes query yields an empty feed and a failed comments query
yields an empty comment list for that note. Failures are logged, not shown.
"""

import logging
from typing import List, Optional, cast

from booknotes.errors import DataAccessError
from booknotes.supabase_client import SupabaseClient
from booknotes.types import CommentRecord, NoteRecord, NoteWithComments

NOTES_TABLE = "notes"
COMMENTS_TABLE = "comments"

logger = logging.getLogger(__name__)


def fetch_comments(client: SupabaseClient, note_id: int) -> List[CommentRecord]:
    """Comments on `note_id`, newest first. Empty on read failure."""
    try:
        rows = client.select(
            COMMENTS_TABLE,
            filters={"note_id": note_id},
            order="created_at",
        )
    except DataAccessError as e:
        logger.warning("Could not load comments for note %s: %s", note_id, e.message)
        return []
    return cast(List[CommentRecord], rows)


def fetch_notes(
    client: SupabaseClient,
    author_id: Optional[str] = None,
) -> List[NoteWithComments]:
    """
    Fetch notes newest first, each augmented with its comments.

    Parameters
    ----------
    client : SupabaseClient
        The collaborator wrapper.
    author_id : str | None
        When given, only notes whose `user_id` equals it are returned.

    Returns
    -------
    list[NoteWithComments]
        Empty when the notes query fails.
    """
    filters = {"user_id": author_id} if author_id else None

    try:
        rows = cast(
            List[NoteRecord],
            client.select(NOTES_TABLE, filters=filters, order="created_at"),
        )
    except DataAccessError as e:
        logger.warning("Could not load notes (author=%s): %s", author_id, e.message)
        return []

    notes: List[NoteWithComments] = []
    for row in rows:
        note = cast(NoteWithComments, dict(row))
        note["comments"] = fetch_comments(client, row["id"])
        notes.append(note)

    return notes
