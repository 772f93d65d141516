# src/projcontext/core/tree.py
import os
import shutil
import subprocess
from pathlib import Path
from typing import Iterable, Optional

from projcontext.core.filters import contains_ignored_pattern


def _run_tree_command(tree_command: str, root_dir: Path, patterns: Iterable[str]) -> Optional[str]:
    """Delegates to the `tree` utility; returns None if it cannot be run."""
    ignore_list = "|".join(patterns)
    try:
        result = subprocess.run(
            [tree_command, "-a", "-I", ignore_list, "."],
            cwd=str(root_dir),
            capture_output=True,
            text=True,
        )
    except OSError:
        return None
    if result.returncode != 0 or not result.stdout:
        return None
    return result.stdout.rstrip("\n")


def _list_children(dir_path: Path, root_dir: Path, patterns: Iterable[str]):
    dirs, files = [], []
    try:
        entries = list(os.scandir(dir_path))
    except OSError:
        return dirs, files

    for entry in entries:
        if entry.name.startswith("."):
            continue
        rel_path = Path(entry.path).relative_to(root_dir).as_posix()
        if contains_ignored_pattern(rel_path, patterns):
            continue
        try:
            is_dir = entry.is_dir(follow_symlinks=False)
        except OSError:
            continue
        (dirs if is_dir else files).append(entry.name)

    return sorted(dirs), sorted(files)


def render_tree(root_dir: Path, patterns: Iterable[str]) -> str:
    """Renders the directory hierarchy below root_dir, directories first."""
    patterns = tuple(patterns)
    lines = ["."]

    def _generate_lines_recursive(dir_path: Path, prefix: str):
        dirs, files = _list_children(dir_path, root_dir, patterns)
        entries = [(name, True) for name in dirs] + [(name, False) for name in files]
        for i, (name, is_dir) in enumerate(entries):
            is_last = (i == len(entries) - 1)
            connector = "└── " if is_last else "├── "
            lines.append(f"{prefix}{connector}{name}{'/' if is_dir else ''}")

            if is_dir:
                new_prefix = prefix + ("    " if is_last else "│   ")
                _generate_lines_recursive(dir_path / name, new_prefix)

    _generate_lines_recursive(root_dir, "")
    return "\n".join(lines)


def generate_project_tree(root_dir: Path, patterns: Iterable[str], use_external: bool = True) -> str:
    """Project tree via `tree` when installed, otherwise rendered in-process."""
    patterns = tuple(patterns)
    if use_external:
        tree_command = shutil.which("tree")
        if tree_command is not None:
            output = _run_tree_command(tree_command, root_dir, patterns)
            if output is not None:
                return output
    return render_tree(root_dir, patterns)
