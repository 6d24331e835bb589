"""
Command-line interface for reading and writing book notes.

The `notes` sub-application mirrors the web client's actions:

    • booknotes notes feed [--author <user_id>]
    • booknotes notes profile <user_id>
    • booknotes notes post --book ... --content ... [--contact ...]
    • booknotes notes like <note_id> <displayed_likes>
    • booknotes notes comment <note_id> <text> [--author ...]
    • booknotes notes avatar <path>

Each command opens a NotesBoard for its duration (subscribing to session
changes and releasing the subscription on exit). Commands that need a
session sign in first with --email/--password; both are prompted when
omitted and the password is never echoed.
"""

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

import typer

from booknotes.board import BoardSnapshot, NotesBoard
from booknotes.config import Settings
from booknotes.logging_utils import get_logger, log_verbose
from booknotes.supabase_client import SupabaseClient
from booknotes.types import NoteWithComments

# ---------------------------------------------------------------------------
# Sub-application definition
# ---------------------------------------------------------------------------
notes_app = typer.Typer(
    help="Read the feed, post notes, like, comment and manage your avatar."
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def build_client(settings: Settings) -> SupabaseClient:
    """Create the collaborator wrapper. Tests replace this function."""
    return SupabaseClient.from_settings(settings)


@contextmanager
def open_board(verbose: bool = False) -> Iterator[NotesBoard]:
    settings = Settings.from_env()
    get_logger("booknotes", settings.log_level)

    try:
        client = build_client(settings)
    except RuntimeError as e:
        typer.echo(f"Error: {e}")
        raise typer.Exit(code=1)

    log_verbose("Loading feed...", verbose)
    with NotesBoard(client, settings) as board:
        yield board


def check(snapshot: BoardSnapshot) -> BoardSnapshot:
    """Exit with code 1 when the command produced an alert."""
    if snapshot.alert:
        typer.echo(f"Error: {snapshot.alert}")
        raise typer.Exit(code=1)
    return snapshot


def sign_in(board: NotesBoard, email: str, password: str, verbose: bool) -> None:
    log_verbose(f"Signing in as {email}...", verbose)
    check(board.sign_in(email, password))


def echo_note(note: NoteWithComments) -> None:
    typer.echo(f"[{note.get('id')}] {note.get('book')}  by {note.get('author_name') or '-'}")
    typer.echo(f"    {note.get('content')}")
    typer.echo(f"    likes: {note.get('likes', 0)}  posted: {note.get('created_at', '')}")
    for comment in note.get("comments", []):
        typer.echo(f"      - {comment.get('author')}: {comment.get('text')}")


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------
@notes_app.command("feed")
def feed_command(
    author: Optional[str] = typer.Option(
        None,
        "--author",
        help="Only show notes by this user id.",
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Show progress messages."),
) -> None:
    """Print notes newest first, with their comments."""
    with open_board(verbose) as board:
        snapshot = board.show_profile(author) if author else board.show_feed()

    if not snapshot.notes:
        typer.echo("No notes yet.")
        return

    for note in snapshot.notes:
        echo_note(note)


@notes_app.command("profile")
def profile_command(
    user_id: str = typer.Argument(..., help="Author user id."),
    verbose: bool = typer.Option(False, "--verbose", help="Show progress messages."),
) -> None:
    """Print an author's profile and notes."""
    with open_board(verbose) as board:
        snapshot = board.show_profile(user_id)

    profile = snapshot.profile
    if profile is None:
        typer.echo(f"Error: no profile for {user_id}.")
        raise typer.Exit(code=1)

    typer.echo(profile.display_name)
    if profile.contact:
        typer.echo(f"Contact: {profile.contact}")
    if profile.avatar_url:
        typer.echo(f"Avatar: {profile.avatar_url}")
    typer.echo(f"Notes: {len(profile.notes)}")
    for note in profile.notes:
        echo_note(note)


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------
@notes_app.command("post")
def post_command(
    book: str = typer.Option(..., "--book", prompt=True, help="Book title."),
    content: str = typer.Option(..., "--content", prompt=True, help="Your note."),
    contact: str = typer.Option("", "--contact", help="Public contact handle."),
    email: str = typer.Option(..., "--email", prompt=True),
    password: str = typer.Option(..., "--password", prompt=True, hide_input=True),
    verbose: bool = typer.Option(False, "--verbose", help="Show progress messages."),
) -> None:
    """Post a new note."""
    if not book.strip() or not content.strip():
        typer.echo("Error: book and content must not be empty.")
        raise typer.Exit(code=1)

    with open_board(verbose) as board:
        sign_in(board, email, password, verbose)
        log_verbose("Posting note...", verbose)
        snapshot = check(board.submit_note(book, content, contact))

    typer.echo(f"Posted. The feed now has {len(snapshot.notes)} note(s).")


@notes_app.command("like")
def like_command(
    note_id: int = typer.Argument(..., help="Note id."),
    likes: int = typer.Argument(..., help="The like count currently displayed."),
    verbose: bool = typer.Option(False, "--verbose", help="Show progress messages."),
) -> None:
    """Like a note, writing the displayed count plus one."""
    with open_board(verbose) as board:
        check(board.like(note_id, likes))

    typer.echo(f"Note {note_id} now has {likes + 1} like(s).")


@notes_app.command("comment")
def comment_command(
    note_id: int = typer.Argument(..., help="Note id."),
    text: str = typer.Argument(..., help="Comment text."),
    author: str = typer.Option("", "--author", help="Name to show (optional)."),
    verbose: bool = typer.Option(False, "--verbose", help="Show progress messages."),
) -> None:
    """Comment on a note. No account is needed."""
    if not text.strip():
        typer.echo("Error: comment must not be empty.")
        raise typer.Exit(code=1)

    with open_board(verbose) as board:
        check(board.add_comment(note_id, text, author))

    typer.echo(f"Comment added to note {note_id}.")


@notes_app.command("avatar")
def avatar_command(
    path: Path = typer.Argument(
        ...,
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        help="Image file to upload.",
    ),
    email: str = typer.Option(..., "--email", prompt=True),
    password: str = typer.Option(..., "--password", prompt=True, hide_input=True),
    verbose: bool = typer.Option(False, "--verbose", help="Show progress messages."),
) -> None:
    """Upload an avatar and apply it to all of your notes."""
    with open_board(verbose) as board:
        sign_in(board, email, password, verbose)
        log_verbose(f"Uploading {path.name}...", verbose)
        snapshot = check(board.upload_avatar(path.name, path.read_bytes()))

    user = snapshot.user
    typer.echo(f"Avatar updated for {user.id if user else email}.")
