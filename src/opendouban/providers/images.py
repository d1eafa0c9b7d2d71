"""Image provider: poster and backdrop lookup for Douban subjects."""

from collections.abc import Callable

import httpx

from opendouban.metadata.base import SubjectApiClient
from opendouban.metadata.errors import EmptyIdentifierError, RemoteFetchError
from opendouban.metadata.models import ImageDescriptor, ImageType, MediaKind, Photo
from opendouban.metadata.settings import Settings, load_settings
from opendouban.utils.debug import info, warn

BACKDROP_MIN_RATIO = 1.3
"""A photo is a backdrop candidate only if width > height * BACKDROP_MIN_RATIO."""

SUPPORTED_KINDS = (MediaKind.MOVIE, MediaKind.SERIES, MediaKind.SEASON)
SUPPORTED_IMAGES = (ImageType.PRIMARY, ImageType.BACKDROP)


async def fetch_image(url: str, timeout: float = 30.0) -> bytes:
    """Download the raw bytes behind an image URL.

    Args:
        url: The image URL, usually taken from an ImageDescriptor.
        timeout: Request timeout in seconds.

    Returns:
        The response body.

    Raises:
        RemoteFetchError: If the server answers with a non-success status (the
            status code is kept on the error) or the request fails.
    """
    info(f"GetImageResponse url: {url}")
    async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as client:
        try:
            resp = await client.get(url)
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise RemoteFetchError(url, exc.response.status_code) from exc
        except httpx.HTTPError as exc:
            raise RemoteFetchError(url, reason=str(exc)) from exc
        return resp.content


def is_backdrop(photo: Photo) -> bool:
    return photo.width > photo.height * BACKDROP_MIN_RATIO


class ImageResolver:
    """Resolves the primary poster and backdrops of a Douban subject."""

    def __init__(
        self,
        client: SubjectApiClient,
        settings_factory: Callable[[], Settings] = load_settings,
    ) -> None:
        self.client = client
        self._settings_factory = settings_factory

    @staticmethod
    def supports(kind: MediaKind) -> bool:
        return kind in SUPPORTED_KINDS

    @staticmethod
    def supported_images(kind: MediaKind) -> list[ImageType]:
        return list(SUPPORTED_IMAGES) if kind in SUPPORTED_KINDS else []

    async def resolve_images(self, subject_id: str | None) -> list[ImageDescriptor]:
        """Return the primary poster followed by every backdrop of a subject.

        A blank id is logged and yields an empty list without any request.
        """
        info(f"GetImages for sid: {subject_id!r}")
        if not subject_id or not subject_id.strip():
            warn(f"Got images failed: {EmptyIdentifierError()}")
            return []
        sid = subject_id.strip()

        settings = self._settings_factory()
        images: list[ImageDescriptor] = []
        primary = await self.client.lookup_by_id(sid, {"s": settings.poster_size})
        if primary is not None and primary.img:
            images.append(ImageDescriptor(type=ImageType.PRIMARY, url=primary.img))
        else:
            warn(f"No primary image for sid {sid}")

        images.extend(await self.get_backdrops(sid))
        return images

    async def get_backdrops(self, subject_id: str) -> list[ImageDescriptor]:
        """Return wide-format photos of a subject as backdrops, in source order."""
        info(f"GetBackdrop of sid: {subject_id}")
        photos = await self.client.photos_by_id(subject_id)
        if photos is None:
            return []
        return [
            ImageDescriptor(type=ImageType.BACKDROP, url=photo.large)
            for photo in photos
            if is_backdrop(photo)
        ]

    async def fetch_image(self, url: str) -> bytes:
        return await fetch_image(url, timeout=self._settings_factory().timeout)
