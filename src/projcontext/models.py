# src/projcontext/models.py
from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class Reason(str, Enum):
    GITIGNORED = "gitignored"
    IGNORED_EXTENSION = "ignored-extension"
    IGNORED_PATTERN = "ignored-pattern"
    TOO_LARGE = "too-large"
    NON_TEXT = "non-text"
    INCLUDED = "included"


@dataclass(frozen=True)
class Decision:
    """Outcome of running a path through the filter chain."""
    included: bool
    reason: Reason


@dataclass(frozen=True)
class FileContext:
    """Immutable data class holding file information."""
    path: Path
    rel_path: str
    content: str
    token_count: int
