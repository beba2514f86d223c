"""Splitting model output into list items."""

import re

_NUMBER_MARKER = re.compile(r"\d+\.")


def split_numbered_list(text: str) -> list[str]:
    """Split "1. foo 2. bar" style output into ["foo", "bar"].

    Splits on every `<digits>.` marker, so numbers followed by a period
    inside an item also start a new item. Empty fragments are dropped.
    """
    return [item.strip() for item in _NUMBER_MARKER.split(text) if item.strip()]
