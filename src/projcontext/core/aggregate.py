# src/projcontext/core/aggregate.py
import datetime
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from projcontext.models import FileContext
from projcontext.utils.tokenizer import count_tokens

FENCE = "```"
UNREADABLE_MARKER = "# [Error: File not readable]"
READ_ERROR_MARKER = "# [Error: Could not read file content]"


def read_file_content(path: Path) -> str:
    """
    Whole-file read; failures become an inline marker, never an exception.
    Text that is not valid UTF-8 is decoded as latin-1 so no byte is lost.
    """
    try:
        with open(path, "rb") as f:
            raw = f.read()
    except PermissionError:
        return UNREADABLE_MARKER
    except OSError:
        return READ_ERROR_MARKER

    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        return raw.decode("latin-1")


def format_timestamp(now: datetime.datetime) -> str:
    return now.strftime("%a %b %d %H:%M:%S %Z %Y")


@dataclass(frozen=True)
class AggregateDocument:
    text: str
    files: Tuple[FileContext, ...] = field(default_factory=tuple)
    truncated: bool = False

    @property
    def total_tokens(self) -> int:
        return sum(f.token_count for f in self.files)


def build_document(
    root_dir: Path,
    rel_paths: Sequence[str],
    tree_str: str,
    max_files: int,
    now: Optional[datetime.datetime] = None,
) -> AggregateDocument:
    """
    Assembles the header, the fenced tree and one fenced section per file.
    Files are written in sorted order; anything past max_files is replaced by
    a single warning line.
    """
    now = now or datetime.datetime.now().astimezone()

    parts: List[str] = [
        f"# Project Context: {root_dir.name}\n",
        f"Generated on: {format_timestamp(now)}\n",
        f"Directory: {root_dir}\n",
        "\n",
        "## Project Structure\n",
        f"{FENCE}\n",
        tree_str.rstrip("\n") + "\n",
        f"{FENCE}\n",
        "\n",
        "## File Contents\n",
        "\n",
    ]

    files: List[FileContext] = []
    truncated = False
    for count, rel_path in enumerate(sorted(rel_paths), start=1):
        if count > max_files:
            parts.append(f"### [Warning: Limiting output to first {max_files:,} files]\n\n")
            truncated = True
            break

        abs_path = root_dir / rel_path
        content = read_file_content(abs_path).rstrip("\n")
        files.append(FileContext(
            path=abs_path,
            rel_path=rel_path,
            content=content,
            token_count=count_tokens(content),
        ))

        parts.append(f"### {rel_path}\n\n")
        parts.append(f"{FENCE}\n{content}\n{FENCE}\n\n")

    return AggregateDocument(text="".join(parts), files=tuple(files), truncated=truncated)
