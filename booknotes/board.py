"""
View/state layer for the book notes client.

NotesBoard is the single source of truth for what the user sees. Every
user action is an explicit command handler that:

    1. validates its input (no write on failure)
    2. issues one or more writes through the SupabaseClient wrapper
    3. re-fetches the feed (or the current author's notes)
    4. publishes and returns a new immutable BoardSnapshot

There is no incremental or optimistic update: after every successful
mutation the full fetch runs again. Failures never raise out of a handler;
they come back as a snapshot carrying an `alert` message and otherwise
identical to the previous one.

The board also owns the one scoped resource in the client: the auth state
subscription. It is acquired by start() / `with board:` and released by
close().
"""

import logging
from dataclasses import dataclass, replace
from typing import Any, Optional, Tuple

from booknotes.auth import AuthSubscription, SessionUser
from booknotes.avatar import upload_avatar
from booknotes.comments import add_comment
from booknotes.config import Settings
from booknotes.errors import AuthError, BookNotesError
from booknotes.feed import fetch_notes
from booknotes.notes import like_note, submit_note
from booknotes.profile import AuthorProfile, build_profile
from booknotes.supabase_client import SupabaseClient
from booknotes.types import NoteWithComments

SIGN_IN_PROMPT = "Please sign in first."
CONFIRM_EMAIL_PROMPT = "Account created. Confirm your email address, then sign in."

logger = logging.getLogger(__name__)


# ============================================================================
# SNAPSHOT: WHAT THE VIEW RENDERS
# ============================================================================
@dataclass(frozen=True)
class BoardSnapshot:
    """
    Immutable view state.

    notes
        Notes with comments, newest first. Only the selected author's notes
        when `author_id` is set.
    user
        The signed-in user, or None.
    author_id / profile
        Set while an author profile is being viewed.
    alert
        A message to show as a blocking notification, if any.
    auth_required
        True when the last command was refused for lack of a session.
    """

    notes: Tuple[NoteWithComments, ...] = ()
    user: Optional[SessionUser] = None
    author_id: Optional[str] = None
    profile: Optional[AuthorProfile] = None
    alert: Optional[str] = None
    auth_required: bool = False


# ============================================================================
# BOARD: COMMAND HANDLERS
# ============================================================================
class NotesBoard:
    def __init__(self, client: SupabaseClient, settings: Optional[Settings] = None) -> None:
        self.client = client
        self.settings = settings or Settings()
        self._snapshot = BoardSnapshot()
        self._subscription: Optional[AuthSubscription] = None

    @property
    def snapshot(self) -> BoardSnapshot:
        return self._snapshot

    @property
    def placeholder(self) -> str:
        return self.settings.anonymous_name

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def start(self) -> BoardSnapshot:
        """Subscribe to session changes, read the session and load the feed."""
        if self._subscription is None:
            self._subscription = self.client.on_auth_state_change(self._on_auth_change)

        self._snapshot = replace(self._snapshot, user=self.client.get_session_user())
        return self.refresh()

    def close(self) -> None:
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None

    def __enter__(self) -> "NotesBoard":
        self.start()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _on_auth_change(self, event: str, user: Optional[SessionUser]) -> None:
        logger.info("Auth state changed: %s (user=%s)", event, user.id if user else None)
        self._snapshot = replace(self._snapshot, user=user)

    # ------------------------------------------------------------------
    # Fetch + publish
    # ------------------------------------------------------------------
    def _fetch(self, author_id: Optional[str]) -> BoardSnapshot:
        user = self._snapshot.user
        notes = tuple(fetch_notes(self.client, author_id))
        profile = (
            build_profile(author_id, notes, user, self.placeholder) if author_id else None
        )
        return BoardSnapshot(notes=notes, user=user, author_id=author_id, profile=profile)

    def _publish(self, snapshot: BoardSnapshot) -> BoardSnapshot:
        # Last completed fetch wins.
        self._snapshot = snapshot
        return snapshot

    def _alert(self, message: str, auth_required: bool = False) -> BoardSnapshot:
        return self._publish(
            replace(self._snapshot, alert=message, auth_required=auth_required)
        )

    def _dismiss(self) -> BoardSnapshot:
        # Rejected input is a silent no-op; drop any alert left by an earlier command.
        return self._publish(replace(self._snapshot, alert=None, auth_required=False))

    def refresh(self) -> BoardSnapshot:
        """Re-run the full fetch for the current view."""
        return self._publish(self._fetch(self._snapshot.author_id))

    def show_feed(self) -> BoardSnapshot:
        return self._publish(self._fetch(None))

    def show_profile(self, user_id: str) -> BoardSnapshot:
        return self._publish(self._fetch(user_id))

    # ------------------------------------------------------------------
    # Notes
    # ------------------------------------------------------------------
    def submit_note(
        self,
        book: str,
        content: str,
        contact: Optional[str] = None,
    ) -> BoardSnapshot:
        user = self._snapshot.user
        if user is None:
            return self._alert(SIGN_IN_PROMPT, auth_required=True)

        if not book.strip() or not content.strip():
            return self._dismiss()

        try:
            submit_note(self.client, user, book, content, contact, self.placeholder)
        except BookNotesError as e:
            return self._alert(e.message)

        return self.refresh()

    def like(self, note_id: int, current_likes: int) -> BoardSnapshot:
        try:
            like_note(self.client, note_id, current_likes)
        except BookNotesError as e:
            return self._alert(e.message)

        return self.refresh()

    # ------------------------------------------------------------------
    # Comments
    # ------------------------------------------------------------------
    def add_comment(self, note_id: int, text: str, author: Optional[str] = None) -> BoardSnapshot:
        if not text.strip():
            return self._dismiss()

        try:
            add_comment(self.client, note_id, text, author, self._snapshot.user, self.placeholder)
        except BookNotesError as e:
            return self._alert(e.message)

        return self.refresh()

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------
    def sign_up(
        self,
        email: str,
        password: str,
        display_name: Optional[str] = None,
    ) -> BoardSnapshot:
        try:
            self.client.sign_up(email, password, display_name=(display_name or "").strip() or None)
        except AuthError as e:
            return self._alert(e.message)

        # Projects requiring email confirmation return a user but no session.
        user = self.client.get_session_user()
        self._snapshot = replace(self._snapshot, user=user)
        snapshot = self.refresh()
        if user is None:
            return self._alert(CONFIRM_EMAIL_PROMPT)
        return snapshot

    def sign_in(self, email: str, password: str) -> BoardSnapshot:
        try:
            user = self.client.sign_in(email, password)
        except AuthError as e:
            return self._alert(e.message)

        self._snapshot = replace(self._snapshot, user=user)
        return self.refresh()

    def sign_out(self) -> BoardSnapshot:
        try:
            self.client.sign_out()
        except AuthError as e:
            return self._alert(e.message)

        self._snapshot = replace(self._snapshot, user=None)
        return self.refresh()

    # ------------------------------------------------------------------
    # Avatar
    # ------------------------------------------------------------------
    def upload_avatar(
        self,
        filename: str,
        data: bytes,
        content_type: Optional[str] = None,
    ) -> BoardSnapshot:
        user = self._snapshot.user
        if user is None:
            return self._alert(SIGN_IN_PROMPT, auth_required=True)

        try:
            upload_avatar(
                self.client,
                self.settings.avatar_bucket,
                user.id,
                filename,
                data,
                content_type=content_type,
            )
        except BookNotesError as e:
            return self._alert(e.message)

        return self.refresh()
