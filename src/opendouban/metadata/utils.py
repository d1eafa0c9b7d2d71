"""Utility functions for metadata processing.

This module provides helpers for normalizing Douban fields and cleaning media
names before they are sent to the partial search endpoint.

- split_delimited turns ``"剧情 / 爱情"`` style strings into clean lists.
- clean_name strips release noise (resolutions, codecs, bracketed tags) that
  would otherwise defeat the remote search.
"""

import re

DEFAULT_DELIMITER = "/"


def split_delimited(value: str | None, sep: str = DEFAULT_DELIMITER) -> list[str]:
    """Split a delimiter-joined string into trimmed, non-empty segments.

    Args:
        value: The raw string, e.g. ``"China / USA"``. ``None`` is allowed.
        sep: The delimiter to split on.

    Returns:
        The list of segments, e.g. ``["China", "USA"]``.
    """
    if not value:
        return []
    return [part.strip() for part in value.split(sep) if part.strip()]


def clean_name(name: str, pattern: str | None) -> str:
    """Remove every match of *pattern* from *name* and collapse whitespace.

    Args:
        name: The raw media name, usually derived from a file or folder name.
        pattern: Regular expression of noise tokens. Blank means no cleaning.

    Returns:
        The cleaned name.

    Raises:
        re.error: If *pattern* is not a valid regular expression.
    """
    if pattern:
        name = re.sub(pattern, " ", name)
    return " ".join(name.split())
