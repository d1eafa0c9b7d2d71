"""Tests for delimiter splitting and name cleaning helpers."""

import re

import pytest

from opendouban.metadata.settings import DEFAULT_NAME_PATTERN
from opendouban.metadata.utils import clean_name, split_delimited


def test_split_delimited_trims_segments() -> None:
    assert split_delimited("China / USA") == ["China", "USA"]
    assert split_delimited("Drama/Romance") == ["Drama", "Romance"]


@pytest.mark.parametrize("value", [None, "", "  ", " / / "])
def test_split_delimited_empty_inputs(value: str | None) -> None:
    """Edge: blank input or separators only produce no segments."""
    assert split_delimited(value) == []


def test_split_delimited_drops_blank_segments() -> None:
    parts = split_delimited("剧情 //  爱情 / ")
    assert parts == ["剧情", "爱情"]
    assert all(part.strip() == part and part for part in parts)


def test_split_delimited_custom_separator() -> None:
    assert split_delimited("a, b,c", sep=",") == ["a", "b", "c"]


def test_clean_name_removes_pattern_matches() -> None:
    pattern = r"\d{3,4}p|\[.*?\]"
    cleaned = clean_name("[Group] 让子弹飞 1080p", pattern)
    assert cleaned == "让子弹飞"
    assert re.search(pattern, cleaned) is None


def test_clean_name_without_pattern_only_collapses_whitespace() -> None:
    assert clean_name("  Movie   A ", None) == "Movie A"
    assert clean_name("Movie A", "") == "Movie A"


def test_clean_name_default_pattern() -> None:
    """Expected: the default pattern strips typical release noise."""
    cleaned = clean_name("Breaking.Bad S01E02 1080p WEB-DL (2008)", DEFAULT_NAME_PATTERN)
    assert "1080p" not in cleaned
    assert "S01E02" not in cleaned
    assert "2008" not in cleaned
    assert cleaned.startswith("Breaking.Bad")


def test_clean_name_invalid_pattern_raises() -> None:
    with pytest.raises(re.error):
        clean_name("Movie", "(unclosed")
