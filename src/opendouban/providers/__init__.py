"""Image and metadata providers built on a SubjectApiClient."""

from opendouban.providers.capabilities import Capability, capabilities, get_capability
from opendouban.providers.images import ImageResolver, fetch_image
from opendouban.providers.metadata import MetadataResolver

__all__ = [
    "Capability",
    "capabilities",
    "get_capability",
    "ImageResolver",
    "MetadataResolver",
    "fetch_image",
]
