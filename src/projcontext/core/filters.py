# src/projcontext/core/filters.py
import os
import shutil
import subprocess
from pathlib import Path
from typing import Iterable, Optional

import pathspec

from projcontext.config import ContextConfig
from projcontext.core.ignore import GitIgnoreRules
from projcontext.models import Decision, Reason


def extension_of(name: str) -> str:
    """Lowercased text after the final '.', or '' when the name has none."""
    if "." not in name:
        return ""
    return name.rsplit(".", 1)[1].lower()


def contains_ignored_pattern(rel_path: str, patterns: Iterable[str]) -> bool:
    return any(pattern in rel_path for pattern in patterns)


def file_size(path: Path) -> int:
    # Unknown size counts as 0, so the file is kept
    try:
        return os.path.getsize(path)
    except OSError:
        return 0


class TextDetector:
    """
    Decides whether a file is text.

    With a `file` executable, a text/* MIME type is accepted outright. Anything
    else (no tool, tool failure, non-text MIME) falls back to the extension
    allow-list; bare names like "Makefile" are compared whole.
    """

    def __init__(self, text_extensions: Iterable[str], file_command: Optional[str] = None):
        self.text_extensions = {e.lower() for e in text_extensions}
        self.file_command = file_command

    @classmethod
    def detect(cls, config: ContextConfig) -> "TextDetector":
        return cls(config.text_extensions, shutil.which("file"))

    def mime_type(self, path: Path) -> Optional[str]:
        if self.file_command is None:
            return None
        try:
            result = subprocess.run(
                [self.file_command, "-b", "--mime-type", str(path)],
                capture_output=True,
                text=True,
            )
        except OSError:
            return None
        if result.returncode != 0:
            return None
        return result.stdout.strip()

    def is_text(self, path: Path) -> bool:
        if not path.is_file():
            return False

        mime = self.mime_type(path)
        if mime is not None and mime.startswith("text/"):
            return True

        ext = extension_of(path.name) or path.name.lower()
        return ext in self.text_extensions


class FilterChain:
    """Runs the inclusion checks for one project root, in a fixed order."""

    def __init__(
        self,
        root_dir: Path,
        config: ContextConfig,
        gitignore: Optional[GitIgnoreRules] = None,
        text_detector: Optional[TextDetector] = None,
        extra_spec: Optional[pathspec.PathSpec] = None,
    ):
        self.root_dir = root_dir
        self.config = config
        self.gitignore = gitignore or GitIgnoreRules(root_dir, [], enabled=False)
        self.text_detector = text_detector or TextDetector(config.text_extensions)
        self.extra_spec = extra_spec
        self._ignored_extensions = {e.lower() for e in config.ignore_extensions}

    @classmethod
    def for_root(
        cls, root_dir: Path, config: ContextConfig, extra_spec: Optional[pathspec.PathSpec] = None
    ) -> "FilterChain":
        """Builds a chain wired to whatever git / file tooling the host has."""
        return cls(
            root_dir,
            config,
            gitignore=GitIgnoreRules.from_root(root_dir),
            text_detector=TextDetector.detect(config),
            extra_spec=extra_spec,
        )

    def _rel(self, path: Path) -> str:
        try:
            return path.relative_to(self.root_dir).as_posix()
        except ValueError:
            return path.as_posix()

    def is_ignored_path(self, rel_path: str) -> bool:
        if contains_ignored_pattern(rel_path, self.config.ignore_patterns):
            return True
        return self.extra_spec is not None and self.extra_spec.match_file(rel_path)

    def evaluate(self, path: Path) -> Decision:
        rel_path = self._rel(path)

        # 1. Version control
        if self.gitignore.is_ignored(rel_path):
            return Decision(False, Reason.GITIGNORED)

        # 2. Extension
        if extension_of(path.name) in self._ignored_extensions:
            return Decision(False, Reason.IGNORED_EXTENSION)

        # 3. Path pattern
        if self.is_ignored_path(rel_path):
            return Decision(False, Reason.IGNORED_PATTERN)

        # 4. Size
        if file_size(path) > self.config.max_file_size:
            return Decision(False, Reason.TOO_LARGE)

        # 5. Text
        if not self.text_detector.is_text(path):
            return Decision(False, Reason.NON_TEXT)

        return Decision(True, Reason.INCLUDED)

    def include(self, path: Path) -> bool:
        return self.evaluate(path).included
