"""
Exception types raised by the Supabase wrapper.

Every error carries the collaborator's message text unchanged so the view
layer can show it verbatim.
"""


class BookNotesError(RuntimeError):
    """Base class for errors reported by the Supabase collaborator."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class DataAccessError(BookNotesError):
    """A table read or write failed."""


class AuthError(BookNotesError):
    """Sign-up, sign-in or sign-out was rejected."""


class UploadError(BookNotesError):
    """The object store rejected an upload or public URL lookup."""
