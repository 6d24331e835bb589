"""
Avatar upload with fan-out.

An avatar is stored under a key derived from the user id and the file's
extension, so a new upload replaces the previous one in place. The public
URL is then written to `avatar_url` on every note the user has authored.
"""

import logging
import mimetypes
from pathlib import PurePosixPath
from typing import Optional

from booknotes.feed import NOTES_TABLE
from booknotes.supabase_client import SupabaseClient

DEFAULT_EXTENSION = "bin"

logger = logging.getLogger(__name__)


def avatar_storage_key(user_id: str, filename: str) -> str:
    """
    `<user_id>.<ext>`, where ext is the lower-cased extension of `filename`
    (`bin` when it has none).
    """
    suffix = PurePosixPath(filename or "").suffix.lstrip(".").lower()
    return f"{user_id}.{suffix or DEFAULT_EXTENSION}"


def upload_avatar(
    client: SupabaseClient,
    bucket: str,
    user_id: str,
    filename: str,
    data: bytes,
    content_type: Optional[str] = None,
) -> str:
    """
    Upload an avatar and fan its public URL out to all of the user's notes.

    Returns
    -------
    str
        The public URL.

    Raises
    ------
    UploadError
        If the object store rejects the upload or URL lookup.
    DataAccessError
        If the fan-out update fails.
    """
    key = avatar_storage_key(user_id, filename)
    if content_type is None:
        content_type = mimetypes.guess_type(filename or "")[0]

    client.upload(bucket, key, data, content_type=content_type)
    url = client.get_public_url(bucket, key)

    updated = client.update(NOTES_TABLE, {"user_id": user_id}, {"avatar_url": url})
    logger.info("Avatar for user %s set on %d note(s)", user_id, len(updated))
    return url
