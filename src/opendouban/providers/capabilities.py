"""Capability registry advertised to the media server.

Each media kind gets an "images" capability (served by ImageResolver) and a
"metadata" capability (served by MetadataResolver).
"""

from enum import Enum

from pydantic import BaseModel, Field

from opendouban.metadata.models import PROVIDER_NAME, ImageType, MediaKind
from opendouban.providers.images import SUPPORTED_IMAGES, SUPPORTED_KINDS


class CapabilityName(str, Enum):
    IMAGES = "images"
    METADATA = "metadata"


class Capability(BaseModel):
    """A single provider registration entry."""

    name: CapabilityName
    kind: MediaKind
    provider_name: str = PROVIDER_NAME
    image_types: list[ImageType] = Field(default_factory=list)


def capabilities() -> list[Capability]:
    """Return every capability, grouped by media kind."""
    entries: list[Capability] = []
    for kind in SUPPORTED_KINDS:
        entries.append(
            Capability(
                name=CapabilityName.IMAGES, kind=kind, image_types=list(SUPPORTED_IMAGES)
            )
        )
        entries.append(Capability(name=CapabilityName.METADATA, kind=kind))
    return entries


def get_capability(name: CapabilityName | str, kind: MediaKind | str) -> Capability:
    """Look up the capability registered for *name* and *kind*.

    Raises:
        KeyError: If no such capability is registered.
    """
    try:
        wanted = (CapabilityName(name), MediaKind(kind))
    except ValueError as exc:
        raise KeyError(f"No {name} capability for {kind}") from exc
    for entry in capabilities():
        if (entry.name, entry.kind) == wanted:
            return entry
    raise KeyError(f"No {name} capability for {kind}")
