"""
Company name normalization used as the join key between datasets.
"""

import re

_NON_WORD = re.compile(r"[^\w\s]")
_WHITESPACE = re.compile(r"\s+")


def normalize_company_name(name: str) -> str:
    """
    Lowercase, drop punctuation, collapse whitespace and trim.

    "Acme, Inc." -> "acme inc"
    """
    if not name:
        return ""
    text = _NON_WORD.sub("", name.lower())
    return _WHITESPACE.sub(" ", text).strip()


class NameNormalizer:
    """
    Join-key strategy. Two names match iff their normalized forms are equal;
    subclasses may override normalize() to change the matching rule.
    """

    def normalize(self, name: str) -> str:
        return normalize_company_name(name)

    def __call__(self, name: str) -> str:
        return self.normalize(name)
