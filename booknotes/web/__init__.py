"""
Public API for the web client.

    from booknotes.web import create_app

    app = create_app()
"""

from .app import create_app

__all__ = [
    "create_app",
]
