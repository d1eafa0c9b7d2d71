"""Shared fixtures for the opendouban test suite.

Every test runs with the response cache bypassed, an empty temporary config
directory and no OPENDOUBAN_* environment variables, so results never depend
on the developer's machine.
"""

import os
from collections.abc import Mapping
from pathlib import Path

import pytest

from opendouban.metadata import cache as response_cache
from opendouban.metadata.base import SubjectApiClient
from opendouban.metadata.errors import RemoteFetchError
from opendouban.metadata.models import Person, Photo, Subject
from opendouban.metadata.settings import Settings
from opendouban.utils import config as cfg


class FakeDoubanClient(SubjectApiClient):
    """In-memory SubjectApiClient recording every call it receives."""

    def __init__(self) -> None:
        self.subjects: dict[str, Subject] = {}
        self.search_results: dict[str, list[Subject]] = {}
        self.photos: dict[str, list[Photo] | None] = {}
        self.persons: dict[str, list[Person]] = {}
        self.persons_error: RemoteFetchError | None = None
        self.calls: list[tuple[str, object]] = []

    def add_subject(self, subject: Subject) -> Subject:
        self.subjects[subject.sid] = subject
        return subject

    async def lookup_by_id(
        self, sid: str, params: Mapping[str, str] | None = None
    ) -> Subject | None:
        self.calls.append(("lookup_by_id", (sid, dict(params or {}))))
        return self.subjects.get(sid)

    async def search_by_name(self, text: str) -> list[Subject]:
        self.calls.append(("search_by_name", text))
        return list(self.search_results.get(text, []))

    async def photos_by_id(self, sid: str) -> list[Photo] | None:
        self.calls.append(("photos_by_id", sid))
        return self.photos.get(sid)

    async def persons_by_id(self, sid: str) -> list[Person]:
        self.calls.append(("persons_by_id", sid))
        if self.persons_error is not None:
            raise self.persons_error
        return list(self.persons.get(sid, []))

    def called(self, method: str) -> list[object]:
        return [args for name, args in self.calls if name == method]


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point config.toml at a temp dir, drop OPENDOUBAN_* vars, bypass the cache."""
    for key in list(os.environ):
        if key.startswith("OPENDOUBAN_"):
            monkeypatch.delenv(key, raising=False)
    config_dir = tmp_path / "config" / "opendouban"
    monkeypatch.setattr(cfg, "CONFIG_DIR", config_dir)
    monkeypatch.setattr(cfg, "CONFIG_FILE", config_dir / "config.toml")
    monkeypatch.setattr(response_cache, "BYPASS_CACHE", True)
    monkeypatch.chdir(tmp_path)
    response_cache.clear_memory_cache()
    return config_dir


@pytest.fixture
def fake_client() -> FakeDoubanClient:
    return FakeDoubanClient()


@pytest.fixture
def settings() -> Settings:
    return Settings(api_base_url="http://douban.test", poster_size="l")


@pytest.fixture
def movie_a() -> Subject:
    """The subject used in most resolver scenarios."""
    return Subject(
        sid="12345",
        name="Movie A",
        original_name="Original A",
        rating=8.1,
        intro="A story.",
        year=2020,
        site="https://movie-a.example",
        genre="Drama/Romance",
        country="China / USA",
        screen_time="2020-05-01",
        imdb="tt0000001",
        img="https://img.example/poster-12345.jpg",
    )
