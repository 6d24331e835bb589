"""
Root entrypoint for the book notes CLI.

This module defines the top-level `booknotes` command and mounts sub-apps
from other modules under booknotes/cli/:

    • booknotes/cli/notes_cli.py  →  `booknotes notes ...`

and the `serve` command, which runs the web client with uvicorn.
"""

from dotenv import load_dotenv
import typer
import uvicorn

from .notes_cli import notes_app

# Load environment variables
load_dotenv()

# ---------------------------------------------------------------------------
# Root CLI application
# ---------------------------------------------------------------------------
cli = typer.Typer(
    help=(
        "Book notes command-line interface.\n\n"
        "  Read and write notes from the terminal:\n\n"
        "      booknotes notes feed\n\n"
        "  Run the web client:\n\n"
        "      booknotes serve --port 8000"
    )
)

# ---------------------------------------------------------------------------
# Register sub-applications
# ---------------------------------------------------------------------------
cli.add_typer(notes_app, name="notes")


@cli.command("serve")
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Interface to bind."),
    port: int = typer.Option(8000, "--port", help="Port to listen on."),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes."),
) -> None:
    """Run the web client."""
    uvicorn.run("booknotes.web.app:create_app", host=host, port=port, reload=reload, factory=True)


# ---------------------------------------------------------------------------
# Entry point for `python -m booknotes.cli.main`
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    cli()
