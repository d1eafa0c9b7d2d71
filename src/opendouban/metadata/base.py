"""Base abstraction for Douban subject API clients.

The resolvers depend only on this interface, so tests and alternative API
servers can supply their own implementation. All methods are coroutines;
cancelling the awaiting task aborts the underlying request.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping

from opendouban.metadata.models import Person, Photo, Subject


class SubjectApiClient(ABC):
    """Abstract base class for Douban subject API clients."""

    @abstractmethod
    async def lookup_by_id(
        self, sid: str, params: Mapping[str, str] | None = None
    ) -> Subject | None:
        """Fetch a single subject by its Douban id.

        Args:
            sid: The Douban subject id.
            params: Extra query parameters, e.g. ``{"s": "l"}`` for poster size.

        Returns:
            The subject, or None if the API has no such subject.

        Raises:
            RemoteFetchError: On a non-success response or transport failure.
        """
        raise NotImplementedError

    @abstractmethod
    async def search_by_name(self, text: str) -> list[Subject]:
        """Run a partial-text search.

        Args:
            text: The (already cleaned) search text.

        Returns:
            Candidate subjects in the order the API ranks them.
        """
        raise NotImplementedError

    @abstractmethod
    async def photos_by_id(self, sid: str) -> list[Photo] | None:
        """Fetch the photo list of a subject.

        Returns:
            The photos, an empty list if the subject has none, or None if the
            photo list could not be obtained.
        """
        raise NotImplementedError

    @abstractmethod
    async def persons_by_id(self, sid: str) -> list[Person]:
        """Fetch the cast and crew credited on a subject."""
        raise NotImplementedError
