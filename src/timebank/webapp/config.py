"""Configuration constants for the TimeBank web service."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Optional, Tuple

from dotenv import load_dotenv

from ..models import ChildProfile

load_dotenv()

DEFAULT_CHILDREN = "seoa:최서아:👧🏻,seou:최서우:👦🏻"

SQLITE_FILE_NAME = os.environ.get("TIMEBANK_SQLITE", "timebank.db")
CHILDREN_SPEC = os.environ.get("TIMEBANK_CHILDREN", DEFAULT_CHILDREN)
LOCALE = os.environ.get("TIMEBANK_LOCALE", "ko")
GEMINI_API_KEY = os.environ.get("GEMINI_API_KEY") or os.environ.get("API_KEY", "")
GEMINI_MODEL = os.environ.get("GEMINI_MODEL", "gemini-3-flash-preview")
GEMINI_TIMEOUT = float(os.environ.get("GEMINI_TIMEOUT", "6"))
_LOG_PATH = os.environ.get("TIMEBANK_LOG_PATH", "")
LOG_PATH: Optional[Path] = Path(_LOG_PATH) if _LOG_PATH else None


def parse_children(raw: str) -> Tuple[ChildProfile, ...]:
    """Parse ``id:Name[:emoji]`` entries separated by commas."""

    children = []
    for chunk in raw.split(","):
        chunk = chunk.strip()
        if not chunk:
            continue
        parts = [part.strip() for part in chunk.split(":")]
        if len(parts) < 2 or len(parts) > 3:
            raise ValueError(f"Invalid child entry {chunk!r}; expected id:Name[:emoji].")
        emoji = parts[2] if len(parts) == 3 else ""
        children.append(ChildProfile(child_id=parts[0], name=parts[1], emoji=emoji))
    return tuple(children)


__all__ = [
    "DEFAULT_CHILDREN",
    "SQLITE_FILE_NAME",
    "CHILDREN_SPEC",
    "LOCALE",
    "GEMINI_API_KEY",
    "GEMINI_MODEL",
    "GEMINI_TIMEOUT",
    "LOG_PATH",
    "parse_children",
]
