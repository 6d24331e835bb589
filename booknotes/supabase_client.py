"""
Thin Supabase client wrapper for the book notes client.

This wrapper provides a stable, typed interface over the official Supabase
Python SDK. The rest of the code base talks to the collaborator only
through it:

    • table access   select / insert / update
    • auth           sign_up / sign_in / sign_out / get_session_user /
                     on_auth_state_change
    • storage        upload / get_public_url

The wrapper relies on the SupabaseClientInterface Protocol defined in
booknotes/types.py, so injected clients (the real SDK or the in-memory
fake used by tests) only need to expose `.table()`, `.auth` and `.storage`.

Every SDK exception and error response is normalized into one of the
booknotes.errors types, keeping the collaborator's message text intact so
it can be shown to the user verbatim.
"""

import logging
from typing import Any, Dict, List, Optional, TypeVar, cast

from booknotes.auth import (
    AuthSubscription,
    SessionUser,
    session_user_from,
    session_user_from_session,
)
from booknotes.config import Settings, create_supabase_client
from booknotes.errors import AuthError, DataAccessError, UploadError
from booknotes.types import AuthCallback, SupabaseClientInterface

T = TypeVar("T", bound=Dict[str, Any])

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Helper: normalize Supabase responses and errors
# ---------------------------------------------------------------------------


def _error_message(exc: BaseException) -> str:
    """
    Return the collaborator's message for an SDK exception.

    postgrest, auth and storage errors all carry a `.message` attribute;
    anything else (network errors, for example) falls back to str(exc).
    """
    message = getattr(exc, "message", None)
    if isinstance(message, str) and message:
        return message
    return str(exc)


def _extract_data(resp: Any) -> List[T]:
    """
    Normalize Supabase responses across:
        • real SDK objects
        • dict-style responses returned by test doubles

    Always returns a list of row dictionaries.
    Raises DataAccessError on any error carried by the response.
    """

    # Dict-style response (test doubles)
    if isinstance(resp, dict):
        status = resp.get("status", 200)
        if status >= 400 or resp.get("error"):
            raise DataAccessError(str(resp.get("error") or f"Supabase error: {resp}"))
        data = resp.get("data", [])
        return cast(List[T], data or [])

    # SDK-style response
    error = getattr(resp, "error", None)
    if error:
        raise DataAccessError(str(error))

    data = getattr(resp, "data", None)
    if data is None:
        return []

    if isinstance(data, list):
        return cast(List[T], data)

    return cast(List[T], [data])


# ---------------------------------------------------------------------------
# Main wrapper class
# ---------------------------------------------------------------------------


class SupabaseClient:
    """
    A minimal, dependency-injected wrapper around a Supabase-compatible client.

    The class forwards calls to the underlying SDK client while providing:

        • one call per table operation with equality filters and ordering
        • error normalization into booknotes.errors
        • a SessionUser projection instead of raw SDK session objects
    """

    def __init__(self, client: Optional[SupabaseClientInterface] = None) -> None:
        """
        Parameters
        ----------
        client : SupabaseClientInterface | None
            A Supabase-compatible client (real SDK or test fake). The
            Protocol is structural, so neither has to subclass it.
        """
        self.client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> "SupabaseClient":
        """Factory constructor for production usage."""
        return cls(create_supabase_client(settings))

    # -----------------------------------------------------------------------
    # Internal helper: enforce presence of a Supabase client
    # -----------------------------------------------------------------------

    def _require_client(self) -> Any:
        if self.client is None:
            raise RuntimeError("Supabase client is not configured")
        return self.client

    def _execute(self, query: Any) -> List[Dict[str, Any]]:
        try:
            resp = query.execute()
        except DataAccessError:
            raise
        except Exception as e:
            raise DataAccessError(_error_message(e)) from e
        return _extract_data(resp)

    # -----------------------------------------------------------------------
    # Table access
    # -----------------------------------------------------------------------

    def select(
        self,
        table: str,
        filters: Optional[Dict[str, Any]] = None,
        order: Optional[str] = None,
        descending: bool = True,
    ) -> List[Dict[str, Any]]:
        """
        Select all columns from `table`.

        Parameters
        ----------
        table : str
            Table name.
        filters : dict | None
            Column → value equality filters, applied with `.eq()`.
        order : str | None
            Column to sort by.
        descending : bool
            Sort direction when `order` is given. Defaults to newest first.

        Raises
        ------
        DataAccessError
            If the query fails.
        """
        client = self._require_client()

        # `.eq()` and `.order()` only exist after `.select()`.
        query = client.table(table).select("*")
        for column, value in (filters or {}).items():
            query = query.eq(column, value)
        if order:
            query = query.order(order, desc=descending)

        return self._execute(query)

    def insert(self, table: str, record: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Insert one row and return the inserted rows."""
        client = self._require_client()
        rows = self._execute(client.table(table).insert(record))
        logger.debug("Inserted into %s: %s", table, rows)
        return rows

    def update(
        self,
        table: str,
        filters: Dict[str, Any],
        patch: Dict[str, Any],
    ) -> List[Dict[str, Any]]:
        """
        Apply `patch` to every row matching `filters` and return the updated
        rows.

        An empty filter would update the whole table, so it is refused.
        """
        if not filters:
            raise ValueError("update requires at least one filter")

        client = self._require_client()
        query = client.table(table).update(patch)
        for column, value in filters.items():
            query = query.eq(column, value)

        rows = self._execute(query)
        logger.debug("Updated %d row(s) in %s with %s", len(rows), table, patch)
        return rows

    # -----------------------------------------------------------------------
    # Auth
    # -----------------------------------------------------------------------

    def sign_up(
        self,
        email: str,
        password: str,
        display_name: Optional[str] = None,
    ) -> Optional[SessionUser]:
        """
        Register a new account.

        Returns the new user's projection. Depending on the project's email
        confirmation settings the SDK may not open a session yet.

        Raises
        ------
        AuthError
            With the collaborator's message when sign-up is rejected.
        """
        credentials: Dict[str, Any] = {"email": email, "password": password}
        if display_name:
            credentials["options"] = {"data": {"display_name": display_name}}

        client = self._require_client()
        try:
            resp = client.auth.sign_up(credentials)
        except Exception as e:
            raise AuthError(_error_message(e)) from e

        return session_user_from(getattr(resp, "user", None))

    def sign_in(self, email: str, password: str) -> Optional[SessionUser]:
        """
        Sign in with email and password.

        Raises
        ------
        AuthError
            With the collaborator's message when credentials are rejected.
        """
        client = self._require_client()
        try:
            resp = client.auth.sign_in_with_password({"email": email, "password": password})
        except Exception as e:
            raise AuthError(_error_message(e)) from e

        return session_user_from(getattr(resp, "user", None))

    def sign_out(self) -> None:
        client = self._require_client()
        try:
            client.auth.sign_out()
        except Exception as e:
            raise AuthError(_error_message(e)) from e

    def get_session_user(self) -> Optional[SessionUser]:
        """
        Return the current session's user, or None when signed out.

        A failed session lookup is treated as signed out.
        """
        client = self._require_client()
        try:
            session = client.auth.get_session()
        except Exception as e:
            logger.warning("Session lookup failed: %s", _error_message(e))
            return None
        return session_user_from_session(session)

    def on_auth_state_change(self, callback: AuthCallback) -> AuthSubscription:
        """
        Subscribe to session changes.

        `callback(event, user)` receives the SDK's event name and the new
        SessionUser (None after sign-out). The returned handle must be
        released with unsubscribe() when the caller is torn down.
        """
        client = self._require_client()

        def _listener(event: Any, session: Any) -> None:
            callback(str(event), session_user_from_session(session))

        handle = client.auth.on_auth_state_change(_listener)
        return AuthSubscription(handle)

    # -----------------------------------------------------------------------
    # Storage
    # -----------------------------------------------------------------------

    def upload(
        self,
        bucket: str,
        path: str,
        data: bytes,
        content_type: Optional[str] = None,
    ) -> None:
        """
        Upload `data` to `bucket/path`, replacing any existing object.

        Raises
        ------
        UploadError
            With the collaborator's message when the upload is rejected.
        """
        file_options = {"upsert": "true"}
        if content_type:
            file_options["content-type"] = content_type

        client = self._require_client()
        try:
            client.storage.from_(bucket).upload(path=path, file=data, file_options=file_options)
        except Exception as e:
            raise UploadError(_error_message(e)) from e

        logger.info("Uploaded %d bytes to %s/%s", len(data), bucket, path)

    def get_public_url(self, bucket: str, path: str) -> str:
        client = self._require_client()
        try:
            url = client.storage.from_(bucket).get_public_url(path)
        except Exception as e:
            raise UploadError(_error_message(e)) from e

        # Some SDK versions append an empty query string.
        return str(url).rstrip("?")
