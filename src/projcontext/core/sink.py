# src/projcontext/core/sink.py
from pathlib import Path

import pyperclip

from projcontext.config import OUTPUT_SUFFIX


class SinkError(Exception): ...
class OutputError(SinkError): ...
class ClipboardError(SinkError): ...


def get_default_output_name(root_dir: Path) -> str:
    """Generates the output filename from the directory name."""
    folder_name = root_dir.name or "project"
    return f"{folder_name}{OUTPUT_SUFFIX}"


def write_output_file(output_file: Path, text: str) -> int:
    """Overwrites output_file with text and returns the size written in bytes."""
    try:
        with open(output_file, "w", encoding="utf-8", newline="\n") as f:
            f.write(text)
            f.write("\n")
        return output_file.stat().st_size
    except OSError as e:
        raise OutputError(f"Could not write '{output_file}': {e}") from e


def copy_to_clipboard(text: str) -> None:
    """
    Places text on the system clipboard. pyperclip picks the first working
    mechanism for the host (pbcopy on macOS; wl-copy, xclip or xsel on Linux).
    """
    try:
        pyperclip.copy(text)
    except pyperclip.PyperclipException as e:
        raise ClipboardError(
            "No clipboard utility found (pbcopy, xclip, xsel, or wl-copy)"
        ) from e


def format_kb(size: int) -> str:
    return f"{size // 1024}KB"
