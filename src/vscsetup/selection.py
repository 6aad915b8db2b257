"""Turn free-form selection input ("all", "1,3,5-7") into a list of extensions."""

from __future__ import annotations

from typing import Sequence

ALL_KEYWORDS = frozenset({"all", "a"})
NONE_KEYWORDS = frozenset({"", "none"})


def _is_valid_index(value: int | None, size: int) -> bool:
    """Check a 1-based index against a candidate list of *size* entries."""
    return value is not None and 1 <= value <= size


def _to_int(value: str, size: int) -> int | None:
    value = value.strip()
    if not value.isdecimal():
        return None
    digits = value.lstrip("0") or "0"
    # longer than any valid index; also keeps int() under the digit limit
    if len(digits) > len(str(size)):
        return None
    return int(digits)


def _token_indices(token: str, size: int) -> list[int]:
    """Return the 1-based indices selected by *token*, or nothing if it is invalid."""
    if "-" in token:
        start_text, end_text = token.split("-", 1)
        start, end = _to_int(start_text, size), _to_int(end_text, size)
        if not (_is_valid_index(start, size) and _is_valid_index(end, size)):
            return []
        if start > end:
            return []
        return list(range(start, end + 1))

    index = _to_int(token, size)
    return [index] if _is_valid_index(index, size) else []


def parse_selection(expression: str, candidates: Sequence[str]) -> list[str]:
    """Select extensions from *candidates* using a selection expression.

    Accepts ``all`` (or ``a``), ``none`` or an empty string, or a comma-separated
    list of 1-based indices and inclusive ``a-b`` ranges. Invalid tokens are
    dropped instead of raising; the result keeps first-occurrence order without
    duplicates.
    """
    text = expression.strip().lower()
    if text in NONE_KEYWORDS:
        return []
    if text in ALL_KEYWORDS:
        return list(candidates)

    size = len(candidates)
    tokens = [token.strip() for token in text.split(",") if token.strip()]
    indices = [index for token in tokens for index in _token_indices(token, size)]

    selected: list[str] = []
    seen: set[str] = set()
    for index in indices:
        extension_id = candidates[index - 1]
        if extension_id.lower() in seen:
            continue
        seen.add(extension_id.lower())
        selected.append(extension_id)
    return selected
