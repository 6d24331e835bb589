"""
Author profile view model.

A profile is derived entirely from the author's notes: there is no profile
table. Name, contact handle and avatar are the most recent non-empty values
across the notes, which arrive newest first.
"""

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from booknotes.auth import SessionUser, display_name_for
from booknotes.types import NoteWithComments


@dataclass(frozen=True)
class AuthorProfile:
    user_id: str
    display_name: str
    contact: Optional[str]
    avatar_url: Optional[str]
    notes: Tuple[NoteWithComments, ...]
    can_upload: bool


def _latest(notes: Sequence[NoteWithComments], field: str) -> Optional[str]:
    for note in notes:
        value = note.get(field)
        if value:
            return str(value)
    return None


def build_profile(
    user_id: str,
    notes: Sequence[NoteWithComments],
    session_user: Optional[SessionUser],
    placeholder: str,
) -> AuthorProfile:
    """
    Build the profile for `user_id` from that author's notes.

    Only notes whose `user_id` matches are kept. The upload control is
    offered only when the profile belongs to the signed-in user.
    """
    own_notes = tuple(note for note in notes if note.get("user_id") == user_id)
    is_own = session_user is not None and session_user.id == user_id

    display_name = _latest(own_notes, "author_name")
    if display_name is None:
        display_name = display_name_for(session_user, placeholder) if is_own else placeholder

    return AuthorProfile(
        user_id=user_id,
        display_name=display_name,
        contact=_latest(own_notes, "contact"),
        avatar_url=_latest(own_notes, "avatar_url"),
        notes=own_notes,
        can_upload=is_own,
    )
