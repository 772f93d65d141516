# src/projcontext/core/scanner.py
import os
import sys
from pathlib import Path
from typing import Iterator, List

from projcontext.core.filters import FilterChain, contains_ignored_pattern


class ProjectScanner:
    def __init__(self, root_dir: Path, chain: FilterChain, debug: bool = False):
        self.root_dir = root_dir
        self.chain = chain
        self.debug = debug

    def discover(self) -> Iterator[Path]:
        """
        Walks the directory tree and yields every regular file, skipping any
        path with a component that starts with '.'. Directories matching an
        ignored pattern are pruned so their contents are never visited.
        """
        patterns = self.chain.config.ignore_patterns

        # onerror=None: unreadable directories are skipped silently
        for root, dirs, files in os.walk(self.root_dir):
            root_path = Path(root)

            # Prune in place so os.walk does not descend
            for d in list(dirs):
                if d.startswith("."):
                    dirs.remove(d)
                    continue
                dir_rel_path = (root_path / d).relative_to(self.root_dir).as_posix()
                if contains_ignored_pattern(dir_rel_path, patterns):
                    dirs.remove(d)
                    self._trace(f"# DEBUG: Pruned (pattern): {dir_rel_path}/")

            for f in files:
                if f.startswith("."):
                    continue
                file_abs_path = root_path / f
                # Broken symlinks and files removed mid-walk
                try:
                    if not file_abs_path.is_file():
                        continue
                except OSError:
                    continue
                yield file_abs_path

    def _trace(self, message: str) -> None:
        if self.debug:
            print(message, file=sys.stderr)

    def scan(self) -> List[str]:
        """Returns the sorted relative (posix) paths of every included file."""
        included = []
        for path in self.discover():
            rel_path = path.relative_to(self.root_dir).as_posix()
            decision = self.chain.evaluate(path)
            if decision.included:
                self._trace(f"# DEBUG: Including: {rel_path}")
                included.append(rel_path)
            else:
                self._trace(f"# DEBUG: Skipped ({decision.reason.value}): {rel_path}")
        return sorted(included)
