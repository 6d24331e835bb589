"""
Book notes: a small client for sharing reading notes on top of Supabase.

Callers can rely on:

    from booknotes import NotesBoard, BoardSnapshot, SupabaseClient, Settings
"""

from .board import BoardSnapshot, NotesBoard
from .config import Settings
from .supabase_client import SupabaseClient

__all__ = [
    "BoardSnapshot",
    "NotesBoard",
    "Settings",
    "SupabaseClient",
]
