"""ASGI entrypoint so `uvicorn main:app` works from the project root."""

from booknotes.web import create_app

app = create_app()
