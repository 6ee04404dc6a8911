"""TimeBank web service package."""
from __future__ import annotations

from .application import app, build_bank, create_app
from .persistence import SqlStore, init_db, make_engine

__all__ = ["SqlStore", "app", "build_bank", "create_app", "init_db", "make_engine"]
