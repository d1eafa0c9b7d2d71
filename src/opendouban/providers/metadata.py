"""Metadata provider: search and resolve Douban subjects into media metadata.

A query is either a Douban id (direct lookup) or a free-text name. Names are
cleaned with the configured pattern, searched, and the first candidate the API
returns is taken as the match. No secondary ranking is applied, so the choice
is only as stable as the remote search ordering.

Cast and crew are fetched in a second request once the subject is known. If
that request fails the metadata is still returned, without people.
"""

from collections.abc import Callable

from opendouban.metadata.base import SubjectApiClient
from opendouban.metadata.errors import (
    EmptyIdentifierError,
    NoMatchError,
    RemoteFetchError,
)
from opendouban.metadata.models import (
    IMDB_PROVIDER_ID,
    PROVIDER_ID,
    ByExternalId,
    ByName,
    MediaKind,
    MetadataItem,
    MetadataResult,
    SearchCandidate,
    Subject,
)
from opendouban.metadata.settings import Settings, load_settings
from opendouban.metadata.utils import clean_name
from opendouban.providers.images import SUPPORTED_KINDS, fetch_image
from opendouban.utils.debug import info, warn


class MetadataResolver:
    """Search and metadata provider for one media kind."""

    def __init__(
        self,
        client: SubjectApiClient,
        kind: MediaKind = MediaKind.SERIES,
        settings_factory: Callable[[], Settings] = load_settings,
    ) -> None:
        """Initialize the resolver.

        Args:
            client: The Douban API client used for every request.
            kind: The media kind this resolver is registered for.
            settings_factory: Called on every operation to read current settings.
        """
        self.client = client
        self.kind = kind
        self._settings_factory = settings_factory

    @staticmethod
    def supports(kind: MediaKind) -> bool:
        return kind in SUPPORTED_KINDS

    async def search(self, query: ByExternalId | ByName | None) -> list[SearchCandidate]:
        """Return candidates for a disambiguation list.

        Args:
            query: A direct id query or a name query. The name is sent as given.

        Returns:
            One candidate for an id that exists, every search hit for a name, or
            an empty list.
        """
        subjects: list[Subject] = []
        if isinstance(query, ByExternalId) and query.subject_id.strip():
            sid = query.subject_id.strip()
            info(f"{self.kind.value} GetSearchResults of [sid]: {sid!r}")
            subject = await self.client.lookup_by_id(sid)
            if subject is not None:
                subjects.append(subject)
        elif isinstance(query, ByName) and query.name.strip():
            info(f"{self.kind.value} GetSearchResults of [name]: {query.name!r}")
            subjects = await self.client.search_by_name(query.name)

        if not subjects:
            info(f"{self.kind.value} GetSearchResults found nothing")
        return [SearchCandidate.from_subject(subject) for subject in subjects]

    async def resolve(self, query: ByExternalId | ByName | None) -> MetadataResult:
        """Resolve a query into a populated MetadataResult.

        Returns an empty result (``has_metadata=False``) when the query is blank
        or nothing matches.

        Raises:
            RemoteFetchError: If the subject lookup or search fails.
        """
        result = MetadataResult(kind=self.kind)
        try:
            subject = await self._find_subject(query)
        except (EmptyIdentifierError, NoMatchError) as exc:
            info(f"{self.kind.value} GetMetadata: {exc}")
            return result
        if subject is None:
            info(f"{self.kind.value} GetMetadata: subject not found")
            return result

        result.item = MetadataItem.from_subject(subject)
        result.provider_ids[PROVIDER_ID] = subject.sid
        if subject.imdb:
            result.provider_ids[IMDB_PROVIDER_ID] = subject.imdb
        result.queried_by_id = True
        result.has_metadata = True

        await self._attach_people(subject, result)
        return result

    async def _find_subject(self, query: ByExternalId | ByName | None) -> Subject | None:
        if isinstance(query, ByExternalId) and query.subject_id.strip():
            sid = query.subject_id.strip()
            info(f"{self.kind.value} GetMetadata of [sid]: {sid!r}")
            return await self.client.lookup_by_id(sid)

        if isinstance(query, ByName) and query.name.strip():
            name = clean_name(query.name, self._settings_factory().name_pattern)
            info(f"{self.kind.value} GetMetadata of [name]: {name!r}")
            if not name:
                raise EmptyIdentifierError("cleaned name")
            candidates = await self.client.search_by_name(name)
            if not candidates:
                raise NoMatchError(name)
            return await self.client.lookup_by_id(candidates[0].sid)

        raise EmptyIdentifierError("subject id and name")

    async def _attach_people(self, subject: Subject, result: MetadataResult) -> None:
        try:
            people = await self.client.persons_by_id(subject.sid)
        except RemoteFetchError as exc:
            warn(f"Celebrities of sid {subject.sid} unavailable: {exc}")
            return
        subject.celebrities = people
        for person in people:
            result.add_person(person)

    async def fetch_image(self, url: str) -> bytes:
        return await fetch_image(url, timeout=self._settings_factory().timeout)
