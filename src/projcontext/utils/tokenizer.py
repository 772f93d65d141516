# src/projcontext/utils/tokenizer.py
from functools import lru_cache

import tiktoken

ENCODINGS = ("cl100k_base", "p50k_base")


@lru_cache(maxsize=1)
def get_encoding():
    """First encoding tiktoken can load; None when none are available (e.g. offline)."""
    for name in ENCODINGS:
        try:
            return tiktoken.get_encoding(name)
        except Exception:
            continue
    return None


def count_tokens(text: str) -> int:
    """Estimated token count for the report; not used for any filtering."""
    encoding = get_encoding()
    if encoding is None:
        return len(text) // 4
    return len(encoding.encode(text, disallowed_special=()))
