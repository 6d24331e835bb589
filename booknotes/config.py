# booknotes/config.py

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv
from supabase import Client, create_client

# Load environment variables from the .env file into the system environment
load_dotenv()

DEFAULT_AVATAR_BUCKET = "avatars"
DEFAULT_ANONYMOUS_NAME = "Anonymous reader"
DEFAULT_LOG_LEVEL = "INFO"


@dataclass(frozen=True)
class Settings:
    """
    Runtime configuration read from the environment.

    supabase_url / supabase_key
        Project URL and anon (public) key. The client only ever acts on
        behalf of the signed-in user, so the service role key is not used.
    avatar_bucket
        Public storage bucket receiving avatar uploads.
    anonymous_name
        Placeholder author name when neither a display name nor an email
        is available.
    log_level
        Name of a `logging` level.
    """

    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None
    avatar_bucket: str = DEFAULT_AVATAR_BUCKET
    anonymous_name: str = DEFAULT_ANONYMOUS_NAME
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            supabase_url=os.getenv("SUPABASE_URL"),
            supabase_key=os.getenv("SUPABASE_KEY"),
            avatar_bucket=os.getenv("BOOKNOTES_AVATAR_BUCKET") or DEFAULT_AVATAR_BUCKET,
            anonymous_name=os.getenv("BOOKNOTES_ANONYMOUS_NAME") or DEFAULT_ANONYMOUS_NAME,
            log_level=(os.getenv("BOOKNOTES_LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper(),
        )


def create_supabase_client(settings: Settings) -> Client:
    """
    Create the official Supabase SDK client from settings.

    Raises
    ------
    RuntimeError
        If SUPABASE_URL or SUPABASE_KEY is missing.
    """
    missing = [
        name
        for name, value in (
            ("SUPABASE_URL", settings.supabase_url),
            ("SUPABASE_KEY", settings.supabase_key),
        )
        if not value
    ]
    if missing:
        raise RuntimeError(
            f"Supabase credentials not found: {', '.join(missing)}. "
            "Set them in your environment or .env file."
        )

    return create_client(settings.supabase_url, settings.supabase_key)  # type: ignore[arg-type]
