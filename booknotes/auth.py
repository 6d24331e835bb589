"""
Session projection and auth subscription helpers.

The Supabase SDK owns the session (tokens, refresh, persistence). This
module only exposes what the view layer is allowed to see:

    • SessionUser      a read-only projection of the signed-in user
    • display_name_for the author-name derivation used for notes and comments
    • AuthSubscription a scoped handle around the SDK's auth listener
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class SessionUser:
    id: str
    email: Optional[str] = None
    display_name: Optional[str] = None


def _field(obj: Any, name: str) -> Any:
    # SDK objects expose attributes; fakes and raw payloads may be dicts.
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


def session_user_from(user: Any) -> Optional[SessionUser]:
    """
    Project an SDK `User` (or a dict with the same fields) into a SessionUser.

    The display name comes from user metadata, under `display_name` or the
    `name` key some providers populate.
    """
    if user is None:
        return None

    user_id = _field(user, "id")
    if not user_id:
        return None

    metadata: Dict[str, Any] = _field(user, "user_metadata") or {}
    display_name = metadata.get("display_name") or metadata.get("name")

    return SessionUser(
        id=str(user_id),
        email=_field(user, "email"),
        display_name=(display_name or "").strip() or None,
    )


def session_user_from_session(session: Any) -> Optional[SessionUser]:
    if session is None:
        return None
    return session_user_from(_field(session, "user"))


def display_name_for(user: Optional[SessionUser], placeholder: str) -> str:
    """
    Derive an author name: profile name, then email local-part, then the
    placeholder.
    """
    if user is None:
        return placeholder
    if user.display_name:
        return user.display_name
    if user.email:
        local_part = user.email.split("@", 1)[0].strip()
        if local_part:
            return local_part
    return placeholder


class AuthSubscription:
    """
    Scoped handle for an auth state listener.

    Acquire it once when the view starts and release it with unsubscribe()
    (or by leaving the `with` block) when the view is torn down. Releasing
    twice is a no-op.
    """

    def __init__(self, handle: Any) -> None:
        self._handle = handle
        self.active = True

    def unsubscribe(self) -> None:
        if not self.active:
            return
        self.active = False
        self._handle.unsubscribe()

    def __enter__(self) -> "AuthSubscription":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.unsubscribe()
