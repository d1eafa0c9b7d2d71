"""Tests for the Douban role label classification table."""

import pytest

from opendouban.metadata.roles import ROLE_TYPES, PersonType, classify_role


@pytest.mark.parametrize(
    ("label", "expected"),
    [
        ("导演", PersonType.DIRECTOR),
        ("演员", PersonType.ACTOR),
        ("配音", PersonType.ACTOR),
        ("编剧", PersonType.WRITER),
        ("制片人", PersonType.PRODUCER),
        ("作曲", PersonType.COMPOSER),
    ],
)
def test_known_labels(label: str, expected: PersonType) -> None:
    """Expected: every label in the table maps to its person type."""
    assert classify_role(label) is expected


def test_unknown_label_defaults_to_actor() -> None:
    """Edge: a lighting technician is not in the table and counts as an actor."""
    assert classify_role("灯光师") is PersonType.ACTOR


@pytest.mark.parametrize("label", [None, "", "   "])
def test_missing_label_defaults_to_actor(label: str | None) -> None:
    assert classify_role(label) is PersonType.ACTOR


def test_label_whitespace_is_ignored() -> None:
    assert classify_role(" 导演 ") is PersonType.DIRECTOR


def test_table_only_uses_known_types() -> None:
    assert set(ROLE_TYPES.values()) <= set(PersonType)
