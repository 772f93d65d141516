# src/projcontext/config.py
from dataclasses import dataclass
from typing import Tuple

# Binary / generated file extensions (compared lowercased, without the dot)
IGNORE_EXTENSIONS = [
    "lock", "log", "tmp", "cache", "bin", "exe", "dll", "so", "dylib", "a", "o",
    "pyc", "class", "jar", "war", "ear",
    "zip", "tar", "gz", "rar", "7z",
    "pdf", "doc", "docx", "xls", "xlsx", "ppt", "pptx",
    "img", "jpg", "jpeg", "png", "gif", "bmp", "svg", "ico",
    "mp3", "mp4", "avi", "mov", "wmv", "flv", "mkv", "webm",
    "woff", "woff2", "ttf", "otf", "eot",
]

# Substrings of generated or vendored paths
IGNORE_PATTERNS = [
    "node_modules",
    "vendor",
    "dist",
    "build",
    ".git",
    "__pycache__",
    ".DS_Store",
    "Thumbs.db",
    "package-lock.json",
    "yarn.lock",
    "composer.lock",
    "Pipfile.lock",
    "Gemfile.lock",
    ".next",
    ".nuxt",
    "coverage",
    ".nyc_output",
    ".pytest_cache",
    ".vscode",
    ".idea",
]

# Used when no MIME sniffer is available (or it does not report text/*)
TEXT_EXTENSIONS = [
    "txt", "md", "json", "yaml", "yml", "xml", "html", "htm", "css",
    "js", "ts", "jsx", "tsx", "py", "rb", "php", "java", "c", "cpp", "h", "hpp",
    "cs", "go", "rs", "sh", "bash", "zsh", "fish", "sql", "r", "scala", "kt",
    "swift", "m", "pl", "lua", "vim", "conf", "cfg", "ini", "toml", "gradle",
    "make", "makefile", "dockerfile", "license", "readme",
    "gitignore", "gitattributes", "editorconfig", "eslintrc", "prettierrc",
    "babelrc", "npmrc", "yarnrc",
]

MAX_FILE_SIZE = 1048576           # 1MB
MAX_FILES = 10000
SCAN_WARNING_THRESHOLD = 500
SCAN_WARNING_DELAY = 5            # seconds
OUTPUT_SIZE_WARNING = 10485760    # 10MB

OUTPUT_SUFFIX = "-project_context.txt"
CONTEXTIGNORE_FILE = ".contextignore"


@dataclass(frozen=True)
class ContextConfig:
    """Exclusion rules and limits, built once per run and passed explicitly."""
    ignore_extensions: Tuple[str, ...]
    ignore_patterns: Tuple[str, ...]
    text_extensions: Tuple[str, ...]
    max_file_size: int = MAX_FILE_SIZE
    max_files: int = MAX_FILES
    scan_warning_threshold: int = SCAN_WARNING_THRESHOLD
    scan_warning_delay: float = SCAN_WARNING_DELAY
    output_size_warning: int = OUTPUT_SIZE_WARNING

    @classmethod
    def default(cls) -> "ContextConfig":
        return cls(
            ignore_extensions=tuple(IGNORE_EXTENSIONS),
            ignore_patterns=tuple(IGNORE_PATTERNS),
            text_extensions=tuple(TEXT_EXTENSIONS),
        )
