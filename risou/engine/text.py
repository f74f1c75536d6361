# risou/engine/text.py
import re
from typing import Any, Iterable

# U+3000 ideographic space included explicitly
_WS = re.compile(r"[　\s]+")


def normalize(raw: Any) -> str:
    """
    Collapse every whitespace run (full-width space, tabs, newlines) into a
    single ASCII space and trim. Anything that is not a string becomes "".
    """
    if not raw or not isinstance(raw, str):
        return ""
    return _WS.sub(" ", raw).strip()


def contains_any(text: str, words: Iterable[str]) -> bool:
    # substring containment, not token matching
    return any(w in text for w in words)
