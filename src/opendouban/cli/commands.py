"""CLI commands for opendouban.

This module implements the user-facing commands: search, info, images,
providers, config-set and config-show.
- Uses Typer for declarative CLI structure and option parsing.
- All output is routed through the shared Rich console.
- Each command builds its own DoubanApiClient; ``--api-url`` overrides the
  configured server for that invocation only.
"""

import asyncio
import json
from enum import Enum
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.markup import escape

from opendouban.cli import app, console
from opendouban.cli.renderer import (
    render_candidates,
    render_capabilities,
    render_images,
    render_metadata,
)
from opendouban.metadata.clients.douban import DoubanApiClient
from opendouban.metadata.errors import RemoteFetchError
from opendouban.metadata.models import ImageType, MediaKind, build_query
from opendouban.metadata.settings import InvalidSettingError, Settings, load_settings
from opendouban.providers.capabilities import capabilities
from opendouban.providers.images import ImageResolver
from opendouban.providers.metadata import MetadataResolver
from opendouban.utils import config


class ExitCode(int, Enum):
    """Exit codes for CLI commands."""

    SUCCESS = 0
    ERROR = 1
    NOT_FOUND = 2


CONFIG_KEYS = frozenset(Settings.model_fields) | {"cache.bypass"}

NAME = Annotated[
    Optional[str],
    typer.Argument(help="Title to search for (ignored when --id is given)"),
]

SUBJECT_ID = Annotated[
    Optional[str],
    typer.Option("--id", help="Douban subject id"),
]

API_URL = Annotated[
    Optional[str],
    typer.Option("--api-url", help="Base URL of the Douban API server"),
]

KIND = Annotated[
    MediaKind,
    typer.Option("--kind", "-k", case_sensitive=False, help="Media kind to resolve"),
]

JSON_OUTPUT = Annotated[
    bool,
    typer.Option("--json", help="Output results in JSON format"),
]


def _settings_factory(api_url: Optional[str]):
    def factory() -> Settings:
        return load_settings(api_base_url=api_url)

    return factory


def _client(api_url: Optional[str]) -> DoubanApiClient:
    return DoubanApiClient(settings_factory=_settings_factory(api_url))


def _fail(message: str) -> typer.Exit:
    console.print(f"[red]Error: {escape(message)}[/red]")
    return typer.Exit(ExitCode.ERROR)


@app.command()
def search(
    name: NAME = None,
    subject_id: SUBJECT_ID = None,
    api_url: API_URL = None,
    json_output: JSON_OUTPUT = False,
) -> None:
    """Search Douban by title, or look up a single subject by --id."""
    query = build_query(subject_id, name)
    if query is None:
        raise _fail("Provide a title or --id.")
    resolver = MetadataResolver(_client(api_url), settings_factory=_settings_factory(api_url))
    try:
        candidates = asyncio.run(resolver.search(query))
    except (RemoteFetchError, InvalidSettingError) as exc:
        raise _fail(str(exc))
    if json_output:
        typer.echo(
            json.dumps(
                [c.model_dump(mode="json") for c in candidates], ensure_ascii=False, indent=2
            )
        )
    else:
        render_candidates(candidates, console)
    if not candidates:
        raise typer.Exit(ExitCode.NOT_FOUND)


@app.command()
def info(
    name: NAME = None,
    subject_id: SUBJECT_ID = None,
    kind: KIND = MediaKind.SERIES,
    api_url: API_URL = None,
    json_output: JSON_OUTPUT = False,
) -> None:
    """Resolve full metadata, including cast and crew."""
    query = build_query(subject_id, name)
    if query is None:
        raise _fail("Provide a title or --id.")
    resolver = MetadataResolver(
        _client(api_url), kind=kind, settings_factory=_settings_factory(api_url)
    )
    try:
        result = asyncio.run(resolver.resolve(query))
    except (RemoteFetchError, InvalidSettingError) as exc:
        raise _fail(str(exc))
    if json_output:
        typer.echo(result.model_dump_json(indent=2))
    else:
        render_metadata(result, console)
    if not result.has_metadata:
        raise typer.Exit(ExitCode.NOT_FOUND)


async def _download(
    resolver: ImageResolver, urls: list[tuple[str, str]], save_dir: Path
) -> list[Path]:
    save_dir.mkdir(parents=True, exist_ok=True)
    written = []
    for filename, url in urls:
        target = save_dir / filename
        target.write_bytes(await resolver.fetch_image(url))
        written.append(target)
    return written


@app.command()
def images(
    subject_id: Annotated[str, typer.Argument(help="Douban subject id")],
    save_dir: Annotated[
        Optional[Path],
        typer.Option("--save-dir", help="Download the images into this directory"),
    ] = None,
    api_url: API_URL = None,
) -> None:
    """List the poster and backdrops of a subject, optionally downloading them."""
    resolver = ImageResolver(_client(api_url), settings_factory=_settings_factory(api_url))
    try:
        found = asyncio.run(resolver.resolve_images(subject_id))
    except (RemoteFetchError, InvalidSettingError) as exc:
        raise _fail(str(exc))
    render_images(found, console)
    if not found:
        raise typer.Exit(ExitCode.NOT_FOUND)
    if save_dir is None:
        return

    names = []
    backdrop_index = 0
    for image in found:
        suffix = Path(image.url.split("?")[0]).suffix or ".jpg"
        if image.type == ImageType.PRIMARY:
            names.append((f"poster{suffix}", image.url))
        else:
            backdrop_index += 1
            names.append((f"backdrop-{backdrop_index}{suffix}", image.url))
    try:
        written = asyncio.run(_download(resolver, names, save_dir))
    except (RemoteFetchError, InvalidSettingError) as exc:
        raise _fail(str(exc))
    console.print(f"[green]Saved {len(written)} image(s) to {save_dir}[/green]")


@app.command()
def providers() -> None:
    """List the capabilities registered with the media server."""
    render_capabilities(capabilities(), console)


@app.command("config-set")
def config_set(
    key: Annotated[str, typer.Argument(help="Setting name, e.g. poster_size")],
    value: Annotated[str, typer.Argument(help="New value")],
) -> None:
    """Persist a setting in config.toml."""
    if key not in CONFIG_KEYS:
        raise _fail(f"Unknown setting {key!r}. Valid keys: {', '.join(sorted(CONFIG_KEYS))}")
    if key in Settings.model_fields:
        try:
            load_settings(**{key: value})
        except (InvalidSettingError, ValueError) as exc:
            raise _fail(str(exc))
    config.set_config_value(key, value)
    console.print(f"[green]{key} saved to {config.CONFIG_FILE}[/green]")


@app.command("config-show")
def config_show() -> None:
    """Show the settings currently in effect."""
    try:
        settings = load_settings()
    except InvalidSettingError as exc:
        raise _fail(str(exc))
    typer.echo(settings.model_dump_json(indent=2))
