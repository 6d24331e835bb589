"""
Server-rendered web client.

The FastAPI app holds one NotesBoard for the lifetime of the process: it is
a local, single-session client, the same way a browser tab holds one
Supabase session. The board (and its auth subscription) is started in the
lifespan handler and closed on shutdown.

Pages are rendered with Jinja2. Every POST runs one board command and then
redirects (303) back to the page it came from; an alert produced by the
command travels as the `alert` query parameter and is shown with a
blocking browser alert().
"""

from contextlib import asynccontextmanager
from dataclasses import asdict
from datetime import datetime
from pathlib import Path
from typing import Any, AsyncIterator, Dict, Optional
from urllib.parse import urlencode

from fastapi import APIRouter, FastAPI, File, Form, Request, UploadFile
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from booknotes.board import BoardSnapshot, NotesBoard
from booknotes.config import Settings
from booknotes.logging_utils import get_logger
from booknotes.supabase_client import SupabaseClient

TEMPLATES_DIR = Path(__file__).parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def format_timestamp(value: Optional[str]) -> str:
    """Render an ISO-8601 timestamp as `YYYY-MM-DD HH:MM`; pass anything else through."""
    if not value:
        return ""
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00")).strftime("%Y-%m-%d %H:%M")
    except ValueError:
        return str(value)


templates.env.filters["timestamp"] = format_timestamp

router = APIRouter()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def get_board(request: Request) -> NotesBoard:
    return request.app.state.board


def _safe_next(next_url: Optional[str]) -> str:
    # Only same-site paths; anything else goes back to the feed.
    if next_url and next_url.startswith("/") and not next_url.startswith("//"):
        return next_url
    return "/"


def _redirect(snapshot: BoardSnapshot, next_url: Optional[str]) -> RedirectResponse:
    url = _safe_next(next_url)
    if snapshot.alert:
        separator = "&" if "?" in url else "?"
        url = f"{url}{separator}{urlencode({'alert': snapshot.alert})}"
    return RedirectResponse(url=url, status_code=303)


def _render(
    request: Request,
    template: str,
    snapshot: BoardSnapshot,
    alert: Optional[str],
) -> HTMLResponse:
    context: Dict[str, Any] = {
        "snapshot": snapshot,
        "user": snapshot.user,
        "notes": snapshot.notes,
        "profile": snapshot.profile,
        "alert": alert,
        "current_path": request.url.path,
    }
    return templates.TemplateResponse(request, template, context)


# ---------------------------------------------------------------------------
# Pages
# ---------------------------------------------------------------------------


@router.get("/", response_class=HTMLResponse)
def feed_page(request: Request, alert: Optional[str] = None) -> HTMLResponse:
    snapshot = get_board(request).show_feed()
    return _render(request, "feed.html", snapshot, alert)


@router.get("/authors/{user_id}", response_class=HTMLResponse)
def profile_page(request: Request, user_id: str, alert: Optional[str] = None) -> HTMLResponse:
    snapshot = get_board(request).show_profile(user_id)
    return _render(request, "profile.html", snapshot, alert)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@router.post("/notes")
def post_note(
    request: Request,
    book: str = Form(""),
    content: str = Form(""),
    contact: str = Form(""),
    next: str = Form("/"),
) -> RedirectResponse:
    snapshot = get_board(request).submit_note(book, content, contact)
    return _redirect(snapshot, next)


@router.post("/notes/{note_id}/like")
def post_like(
    request: Request,
    note_id: int,
    likes: int = Form(0),
    next: str = Form("/"),
) -> RedirectResponse:
    snapshot = get_board(request).like(note_id, likes)
    return _redirect(snapshot, next)


@router.post("/notes/{note_id}/comments")
def post_comment(
    request: Request,
    note_id: int,
    text: str = Form(""),
    author: str = Form(""),
    next: str = Form("/"),
) -> RedirectResponse:
    snapshot = get_board(request).add_comment(note_id, text, author)
    return _redirect(snapshot, next)


@router.post("/auth/sign-up")
def post_sign_up(
    request: Request,
    email: str = Form(...),
    password: str = Form(...),
    display_name: str = Form(""),
    next: str = Form("/"),
) -> RedirectResponse:
    snapshot = get_board(request).sign_up(email, password, display_name)
    return _redirect(snapshot, next)


@router.post("/auth/sign-in")
def post_sign_in(
    request: Request,
    email: str = Form(...),
    password: str = Form(...),
    next: str = Form("/"),
) -> RedirectResponse:
    snapshot = get_board(request).sign_in(email, password)
    return _redirect(snapshot, next)


@router.post("/auth/sign-out")
def post_sign_out(request: Request, next: str = Form("/")) -> RedirectResponse:
    snapshot = get_board(request).sign_out()
    return _redirect(snapshot, next)


@router.post("/avatar")
def post_avatar(
    request: Request,
    avatar: UploadFile = File(...),
    next: str = Form("/"),
) -> RedirectResponse:
    data = avatar.file.read()
    snapshot = get_board(request).upload_avatar(
        avatar.filename or "",
        data,
        content_type=avatar.content_type,
    )
    return _redirect(snapshot, next)


# ---------------------------------------------------------------------------
# JSON + health
# ---------------------------------------------------------------------------


@router.get("/api/notes")
def api_notes(request: Request, author_id: Optional[str] = None) -> Dict[str, Any]:
    board = get_board(request)
    snapshot = board.show_profile(author_id) if author_id else board.show_feed()
    return {
        "user": asdict(snapshot.user) if snapshot.user else None,
        "notes": list(snapshot.notes),
    }


@router.get("/health")
def health_check() -> dict:
    return {"status": "ok"}


# ---------------------------------------------------------------------------
# Application factory
# ---------------------------------------------------------------------------


def create_app(
    client: Optional[SupabaseClient] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """
    Build the web app.

    Parameters
    ----------
    client : SupabaseClient | None
        Injected collaborator wrapper (tests pass one around a fake). When
        None, one is created from settings at startup.
    settings : Settings | None
        Defaults to Settings.from_env().
    """
    settings = settings or Settings.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger = get_logger("booknotes", settings.log_level)
        supabase = client or SupabaseClient.from_settings(settings)
        with NotesBoard(supabase, settings) as board:
            app.state.board = board
            logger.info("Book notes client started")
            yield
        logger.info("Book notes client stopped")

    app = FastAPI(title="Book Notes", lifespan=lifespan)
    app.include_router(router)
    return app
