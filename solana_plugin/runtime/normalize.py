"""Text normalization for action matching."""

from __future__ import annotations

import re

_NON_WORD_RE = re.compile(r"[^0-9a-z_\s]+", flags=re.IGNORECASE)
_MULTISPACE_RE = re.compile(r"\s+")


def normalize_text(text: str | None) -> str:
    """Normalize chat text so action names and similes can be matched as phrases.

    - Lowercase.
    - Underscores and hyphens become spaces (`DEPLOY_COLLECTION` -> `deploy collection`).
    - Other punctuation becomes spaces.
    - Whitespace is collapsed.
    """

    value = (text or "").strip().lower()
    value = value.replace("_", " ").replace("-", " ")
    value = value.replace("—", " ").replace("–", " ")

    value = _NON_WORD_RE.sub(" ", value)
    value = _MULTISPACE_RE.sub(" ", value).strip()
    return value


def contains_phrase(text: str, phrase: str) -> bool:
    """Whether every word of `phrase` occurs in normalized `text`, in order.

    Words in between are allowed, so "create collection" matches
    "create an nft collection called cats".
    """

    needle = normalize_text(phrase).split()
    if not needle:
        return False

    tokens = iter(text.split())
    return all(word in tokens for word in needle)
