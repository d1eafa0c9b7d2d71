"""Classification of Douban cast/crew role labels."""

from enum import Enum


class PersonType(str, Enum):
    """Fixed set of person roles understood by media servers."""

    DIRECTOR = "Director"
    ACTOR = "Actor"
    WRITER = "Writer"
    PRODUCER = "Producer"
    COMPOSER = "Composer"


ROLE_TYPES: dict[str, PersonType] = {
    "导演": PersonType.DIRECTOR,
    "演员": PersonType.ACTOR,
    "配音": PersonType.ACTOR,
    "编剧": PersonType.WRITER,
    "制片人": PersonType.PRODUCER,
    "作曲": PersonType.COMPOSER,
}
"""Raw Douban role label -> PersonType. Unlisted labels are actors."""


def classify_role(label: str | None) -> PersonType:
    """Map a raw role label to a PersonType, defaulting to ACTOR."""
    if not label:
        return PersonType.ACTOR
    return ROLE_TYPES.get(label.strip(), PersonType.ACTOR)
