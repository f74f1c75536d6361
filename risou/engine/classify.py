# risou/engine/classify.py
from __future__ import annotations

from .keywords import KeywordConfig, get_keyword_config
from .text import contains_any

CATEGORIES = ("health", "study", "work", "finance", "relationship", "habit", "other")
AUTO = "auto"


class CategoryClassifier:
    def __init__(self, config: KeywordConfig | None = None):
        self.config = config or get_keyword_config()

    def classify(self, text: str, override: str | None = None) -> str:
        """
        An explicit override (anything but "auto") is returned as-is, even
        outside CATEGORIES; template lookups fall back to "other" later.
        Otherwise the first category in declaration order with a keyword hit
        wins, so health beats study when both match.
        """
        if override and override != AUTO:
            return override
        text = text or ""
        for category, words in self.config.categories.items():
            if contains_any(text, words):
                return category
        return "other"


_default = CategoryClassifier()


def classify(text: str, override: str | None = None) -> str:
    return _default.classify(text, override)
