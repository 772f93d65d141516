# src/projcontext/core/ignore.py
import shutil
import subprocess
import sys
from pathlib import Path
from typing import List, Optional

import pathspec


def read_gitignore_patterns(gitignore_file: Path) -> List[str]:
    """Returns the non-blank, non-comment lines of a .gitignore, stripped."""
    patterns = []
    try:
        with open(gitignore_file, "r", encoding="utf-8", errors="replace") as f:
            for line in f:
                line = line.strip()
                if not line or line.startswith("#"):
                    continue
                patterns.append(line)
    except OSError:
        return []
    return patterns


def naive_match(candidate: str, patterns: List[str]) -> bool:
    """
    Approximate .gitignore matching used outside of a git work tree.

    A pattern matches when it equals the candidate or occurs anywhere inside it.
    This is not gitwildmatch: "*.log" only matches a path literally containing "*.log".
    """
    for pattern in patterns:
        if candidate == pattern or pattern in candidate:
            return True
    return False


def is_git_work_tree(root_dir: Path, git: Optional[str] = None) -> bool:
    git = git or shutil.which("git")
    if git is None:
        return False
    try:
        result = subprocess.run(
            [git, "rev-parse", "--git-dir"],
            cwd=str(root_dir),
            capture_output=True,
        )
    except OSError:
        return False
    return result.returncode == 0


class GitIgnoreRules:
    """
    Answers "is this path gitignored?" for a project root.

    Rules apply only when <root>/.gitignore exists. Inside a git work tree the
    decision is delegated to `git check-ignore`; otherwise the .gitignore lines
    are matched naively against the "./"-prefixed relative path.
    """

    def __init__(self, root_dir: Path, patterns: List[str], git: Optional[str] = None, enabled: bool = True):
        self.root_dir = root_dir
        self.patterns = patterns
        self.git = git
        self.enabled = enabled

    @classmethod
    def from_root(cls, root_dir: Path) -> "GitIgnoreRules":
        gitignore_file = root_dir / ".gitignore"
        if not gitignore_file.is_file():
            return cls(root_dir, [], enabled=False)

        git = shutil.which("git")
        if git is not None and not is_git_work_tree(root_dir, git):
            git = None
        return cls(root_dir, read_gitignore_patterns(gitignore_file), git=git)

    def _check_ignore(self, rel_path: str) -> bool:
        try:
            result = subprocess.run(
                [self.git, "check-ignore", "-q", "--", rel_path],
                cwd=str(self.root_dir),
                capture_output=True,
            )
        except OSError:
            return False
        return result.returncode == 0

    def is_ignored(self, rel_path: str) -> bool:
        if not self.enabled:
            return False
        if self.git is not None:
            return self._check_ignore(rel_path)
        return naive_match(f"./{rel_path}", self.patterns)


def load_ignore_spec(ignore_file: Path, extra_patterns: Optional[List[str]] = None) -> pathspec.PathSpec:
    """
    Loads gitwildmatch rules from an optional ignore file (e.g. .contextignore).
    Includes any extra patterns (like the output filename) for runtime safety.
    """
    lines = []

    if ignore_file.is_file():
        try:
            with open(ignore_file, "r", encoding="utf-8") as f:
                lines = f.readlines()
        except (OSError, UnicodeDecodeError) as e:
            print(f"Warning: Could not read {ignore_file.name}: {e}", file=sys.stderr)

    if extra_patterns:
        lines.extend(extra_patterns)

    try:
        return pathspec.PathSpec.from_lines("gitwildmatch", lines)
    except Exception as e:
        print(f"Error parsing ignore rules: {e}", file=sys.stderr)
        return pathspec.PathSpec.from_lines("gitwildmatch", extra_patterns or [])
