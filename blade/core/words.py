from __future__ import annotations

import re
from typing import Any, Container, List, Optional, Sequence


# First char alphanumeric, then at least one more word char. Flags never match.
_WORD_RE = re.compile(r"[^\W_][\w-]+")


def positional_arguments(args: Sequence[Any]) -> List[str]:
    """
    The positional arguments from the argument list provided by the user.

    Used to search for subcommands and categories. Options (anything starting
    with "-") and values that are not plain words (paths, key=value, ...) are
    dropped; order is preserved.
    """
    return [a for a in args if isinstance(a, str) and _WORD_RE.fullmatch(a)]


def category_words(args: Sequence[Any]) -> List[str]:
    """
    Positional words split on hyphens, for space-joined category lookups.
    """
    out: List[str] = []
    for w in positional_arguments(args):
        out.extend(p for p in w.split("-") if p)
    return out


def find_longest_key(mapping: Container[str], words: Sequence[str], sep: str = "_") -> Optional[str]:
    """
    Find the longest key in `mapping` composed of a leading run of `words`
    joined by `sep`.

    Words are dropped from the end until a key matches; None when nothing does.
    """
    candidate_words = list(words)
    while candidate_words:
        candidate = sep.join(candidate_words)
        if candidate in mapping:
            return candidate
        candidate_words.pop()
    return None
