"""
SQLite persistence for season saves.
"""
from .schema import get_connection, init_db
from .operations import save_snapshot, load_snapshot, list_saves, delete_save, get_transfer_history

__all__ = [
    "get_connection",
    "init_db",
    "save_snapshot",
    "load_snapshot",
    "list_saves",
    "delete_save",
    "get_transfer_history",
]
