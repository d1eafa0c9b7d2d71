"""Douban API client.

Implements the SubjectApiClient interface against a self-hosted open Douban
API server (``/movies``, ``/movies/{sid}``, ``/movies/{sid}/celebrities`` and
``/photo/{sid}``). The base URL comes from settings on every call.
"""

from collections.abc import Callable, Mapping
from http import HTTPStatus
from typing import Any

import httpx
from pydantic import ValidationError

from opendouban.metadata.base import SubjectApiClient
from opendouban.metadata.cache import cache
from opendouban.metadata.errors import RemoteFetchError
from opendouban.metadata.models import Person, Photo, Subject
from opendouban.metadata.settings import Settings, load_settings
from opendouban.utils.debug import debug, error


def _cache_ttl() -> int:
    return load_settings().cache_ttl


@cache(ttl=_cache_ttl)
async def fetch_json(
    url: str, params: dict[str, str] | None = None, timeout: float = 10.0
) -> Any:
    """GET *url* and return the decoded JSON body.

    Args:
        url: Absolute URL to fetch.
        params: Optional query parameters.
        timeout: Request timeout in seconds.

    Returns:
        The decoded JSON, or None when the server answers 404.

    Raises:
        RemoteFetchError: On any other non-success status or a transport error.
    """
    debug(f"GET {url} params={params}")
    async with httpx.AsyncClient(timeout=timeout) as client:
        try:
            resp = await client.get(url, params=params)
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            if exc.response.status_code == HTTPStatus.NOT_FOUND:
                return None
            error(f"GET {url} failed with status {exc.response.status_code}")
            raise RemoteFetchError(url, exc.response.status_code) from exc
        except httpx.HTTPError as exc:
            error(f"GET {url} failed: {exc}")
            raise RemoteFetchError(url, reason=str(exc)) from exc
        return resp.json()


class DoubanApiClient(SubjectApiClient):
    """Async client for an open Douban API server.

    Stateless apart from the settings factory, so one instance can serve many
    concurrent requests.
    """

    def __init__(self, settings_factory: Callable[[], Settings] = load_settings) -> None:
        """Initialize the client.

        Args:
            settings_factory: Called on every request to obtain current settings.
        """
        self._settings_factory = settings_factory

    async def _get(self, path: str, params: Mapping[str, str] | None = None) -> Any:
        settings = self._settings_factory()
        return await fetch_json(
            f"{settings.api_base_url}{path}",
            dict(params) if params else None,
            settings.timeout,
        )

    async def lookup_by_id(
        self, sid: str, params: Mapping[str, str] | None = None
    ) -> Subject | None:
        """Fetch a subject via ``GET /movies/{sid}``."""
        data = await self._get(f"/movies/{sid}", params)
        if not data:
            return None
        return Subject.model_validate(data)

    async def search_by_name(self, text: str) -> list[Subject]:
        """Partial search via ``GET /movies?q=...&type=partial``."""
        data = await self._get("/movies", {"q": text, "type": "partial"})
        return [Subject.model_validate(item) for item in data or []]

    async def photos_by_id(self, sid: str) -> list[Photo] | None:
        """Fetch photos via ``GET /photo/{sid}``; None when the list is absent."""
        data = await self._get(f"/photo/{sid}")
        if data is None:
            return None
        photos = []
        for item in data:
            try:
                photos.append(Photo.model_validate(item))
            except ValidationError:
                debug(f"Skipping photo without usable size for sid {sid}: {item}")
        return photos

    async def persons_by_id(self, sid: str) -> list[Person]:
        """Fetch cast and crew via ``GET /movies/{sid}/celebrities``."""
        data = await self._get(f"/movies/{sid}/celebrities")
        people = []
        for item in data or []:
            try:
                people.append(Person.model_validate(item))
            except ValidationError:
                debug(f"Skipping malformed celebrity for sid {sid}: {item}")
        return people
