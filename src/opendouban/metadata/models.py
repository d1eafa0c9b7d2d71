"""Data models for Douban subjects and media-server metadata.

This module defines two groups of pydantic models:
- Remote records (Subject, Person, Photo) parsed from the Douban API. Field
  aliases match the JSON keys returned by the API server.
- Host-facing shapes (SearchCandidate, ImageDescriptor, MetadataItem,
  MetadataResult) that the resolvers build from the remote records.

Design:
- Remote records are plain value objects except Subject.celebrities, which stays
  empty until the crew fetch for that subject completes.
- SearchQuery is a tagged union (ByExternalId | ByName) so resolvers branch on
  the query kind instead of inspecting optional fields.
"""

import re
from datetime import date
from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from opendouban.metadata.roles import PersonType, classify_role
from opendouban.metadata.utils import split_delimited

PROVIDER_NAME = "OpenDouban"
"""Display name of this metadata provider."""
PROVIDER_ID = "Douban"
"""Key of the Douban subject id in provider id maps."""
IMDB_PROVIDER_ID = "Imdb"
"""Key of the IMDb cross-reference id in provider id maps."""
IMAGE_LANGUAGE = "zh"

_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}")


class MediaKind(str, Enum):
    """Media item kinds the providers can be registered for."""

    MOVIE = "movie"
    SERIES = "series"
    SEASON = "season"


class ImageType(str, Enum):
    """Image slots an image descriptor can fill."""

    PRIMARY = "primary"
    BACKDROP = "backdrop"


class _RemoteModel(BaseModel):
    model_config = ConfigDict(
        populate_by_name=True, extra="ignore", coerce_numbers_to_str=True
    )


class Person(_RemoteModel):
    """A cast or crew member credited on a subject.

    ``role`` is the raw label from the API (e.g. ``"导演"``); ``person_type``
    classifies it into the fixed PersonType taxonomy.
    """

    id: str
    name: str
    role: str | None = None
    role_name: str | None = Field(default=None, alias="rolename")
    img: str | None = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def person_type(self) -> PersonType:
        """Classified role of this person."""
        return classify_role(self.role)

    @property
    def provider_ids(self) -> dict[str, str]:
        return {PROVIDER_ID: self.id}


class Photo(_RemoteModel):
    """A single photo from a subject's photo list."""

    width: int = Field(gt=0)
    height: int = Field(gt=0)
    large: str
    id: str | None = None
    small: str | None = None
    medium: str | None = None


class Subject(_RemoteModel):
    """A movie, series or season record from the Douban API.

    ``genre`` and ``country`` hold the raw ``/``-joined strings as returned by
    the API; use ``genres`` and ``countries`` for the normalized lists.
    """

    sid: str
    name: str | None = None
    original_name: str | None = Field(default=None, alias="originalName")
    rating: float | None = None
    intro: str | None = None
    year: int | None = None
    site: str | None = None
    genre: str | None = None
    country: str | None = None
    screen_time: date | None = Field(default=None, alias="screenTime")
    imdb: str | None = None
    img: str | None = None
    celebrities: list[Person] = Field(default_factory=list)

    @field_validator("rating", "year", mode="before")
    @classmethod
    def _blank_to_none(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("screen_time", mode="before")
    @classmethod
    def _parse_screen_time(cls, value: object) -> object:
        # The API may append a region, e.g. "2021-07-30(中国大陆)".
        if isinstance(value, str):
            match = _DATE_RE.search(value)
            return match.group(0) if match else None
        return value

    @property
    def genres(self) -> list[str]:
        return split_delimited(self.genre)

    @property
    def countries(self) -> list[str]:
        return split_delimited(self.country)


class SearchCandidate(BaseModel):
    """Reduced projection of a Subject used for disambiguation lists."""

    provider_ids: dict[str, str]
    name: str | None = None
    image_url: str | None = None
    production_year: int | None = None

    @classmethod
    def from_subject(cls, subject: Subject) -> "SearchCandidate":
        return cls(
            provider_ids={PROVIDER_ID: subject.sid},
            name=subject.name,
            image_url=subject.img,
            production_year=subject.year,
        )


class ImageDescriptor(BaseModel):
    """A remote image offered to the media server."""

    type: ImageType
    url: str
    language: str = IMAGE_LANGUAGE
    provider_name: str = PROVIDER_ID


class MetadataItem(BaseModel):
    """Metadata fields of a resolved movie, series or season."""

    provider_ids: dict[str, str] = Field(default_factory=dict)
    name: str | None = None
    original_title: str | None = None
    community_rating: float | None = None
    overview: str | None = None
    production_year: int | None = None
    homepage_url: str | None = None
    genres: list[str] = Field(default_factory=list)
    production_locations: list[str] = Field(default_factory=list)
    premiere_date: date | None = None

    @classmethod
    def from_subject(cls, subject: Subject) -> "MetadataItem":
        return cls(
            provider_ids={PROVIDER_ID: subject.sid},
            name=subject.name,
            original_title=subject.original_name,
            community_rating=subject.rating,
            overview=subject.intro,
            production_year=subject.year,
            homepage_url=subject.site,
            genres=subject.genres,
            production_locations=subject.countries,
            premiere_date=subject.screen_time,
        )


class MetadataResult(BaseModel):
    """Outcome of a metadata resolution.

    An empty result (``has_metadata=False``, ``item=None``) is the normal
    outcome when nothing matched the query.
    """

    kind: MediaKind = MediaKind.SERIES
    item: MetadataItem | None = None
    people: list[Person] = Field(default_factory=list)
    provider_ids: dict[str, str] = Field(default_factory=dict)
    queried_by_id: bool = False
    has_metadata: bool = False

    def add_person(self, person: Person) -> None:
        self.people.append(person)


class ByExternalId(BaseModel):
    """Query a subject directly by its Douban id."""

    kind: Literal["id"] = "id"
    subject_id: str


class ByName(BaseModel):
    """Query a subject by free-text title."""

    kind: Literal["name"] = "name"
    name: str


SearchQuery = Annotated[Union[ByExternalId, ByName], Field(discriminator="kind")]


def build_query(
    subject_id: str | None = None, name: str | None = None
) -> ByExternalId | ByName | None:
    """Build a query from whatever the caller knows about an item.

    A non-blank subject id wins over the name. Returns None when both are blank.
    """
    if subject_id and subject_id.strip():
        return ByExternalId(subject_id=subject_id.strip())
    if name and name.strip():
        return ByName(name=name)
    return None
