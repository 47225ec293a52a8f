import re
import unicodedata
from typing import Iterable


def lower_lay_string(s: str) -> str:
    """
    Normalize a string (NFKD) and drop combining marks, so "Çello" -> "Cello".
    """
    normalized = unicodedata.normalize('NFKD', s)
    return ''.join(c for c in normalized if not unicodedata.combining(c))


def collapse(s: str) -> str:
    """
    Collapse runs of whitespace into one space and trim both ends.
    """
    return re.sub(r'\s+', ' ', s).strip()


def collation_key(s: str) -> tuple[str, str]:
    """
    Sort key for song names: accent and case insensitive first,
    raw string as tie-breaker so the order stays total.
    """
    s = s or ""
    return (collapse(lower_lay_string(s)).casefold(), s)


def parse_tags(value) -> list[str]:
    """
    Comma separated text -> trimmed, non-empty tags.
    A list/tuple passes through; anything else means "no tags".
    """
    if isinstance(value, str):
        return [tag.strip() for tag in value.split(",") if tag.strip()]
    if isinstance(value, (list, tuple)):
        return [tag if isinstance(tag, str) else str(tag) for tag in value if tag is not None]
    return []


def contains_folded(haystack: str, needle: str) -> bool:
    return needle.casefold() in (haystack or "").casefold()


def any_contains_folded(values: Iterable[str], needle: str) -> bool:
    return any(contains_folded(v, needle) for v in values)
