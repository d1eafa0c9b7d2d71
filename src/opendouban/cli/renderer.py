"""Renderer for CLI output.

This module renders search candidates, metadata results, image lists and the
capability registry as rich tables.
"""

from rich.console import Console
from rich.table import Table

from opendouban.metadata.models import (
    PROVIDER_ID,
    ImageDescriptor,
    MetadataResult,
    SearchCandidate,
)
from opendouban.metadata.roles import PersonType
from opendouban.providers.capabilities import Capability

PERSON_STYLES = {
    PersonType.DIRECTOR: "magenta bold",
    PersonType.WRITER: "cyan",
    PersonType.PRODUCER: "yellow",
    PersonType.COMPOSER: "blue",
    PersonType.ACTOR: "green",
}


def _text(value: object) -> str:
    return "" if value is None else str(value)


def render_candidates(
    candidates: list[SearchCandidate], console: Console | None = None
) -> None:
    """Render search candidates as a table, in the order given."""
    console = console or Console()
    table = Table(title="Douban search results")
    table.add_column("#", style="bold")
    table.add_column("Douban ID", style="cyan")
    table.add_column("Name", style="magenta")
    table.add_column("Year", style="green")
    table.add_column("Poster", style="yellow")
    for index, candidate in enumerate(candidates, start=1):
        table.add_row(
            str(index),
            candidate.provider_ids.get(PROVIDER_ID, ""),
            _text(candidate.name),
            _text(candidate.production_year),
            _text(candidate.image_url),
        )
    console.print(table)


def render_metadata(result: MetadataResult, console: Console | None = None) -> None:
    """Render a resolved item followed by its cast and crew.

    Args:
        result: A result with ``has_metadata`` set; empty results print a notice.
        console: Optional Console instance to use for rendering.
    """
    console = console or Console()
    if not result.has_metadata or result.item is None:
        console.print("[yellow]No metadata found.[/yellow]")
        return

    item = result.item
    table = Table(title=_text(item.name), show_header=False)
    table.add_column("Field", style="bold cyan")
    table.add_column("Value")
    table.add_row("Original title", _text(item.original_title))
    table.add_row("Year", _text(item.production_year))
    table.add_row("Rating", _text(item.community_rating))
    table.add_row("Genres", ", ".join(item.genres))
    table.add_row("Countries", ", ".join(item.production_locations))
    table.add_row("Premiere", _text(item.premiere_date))
    table.add_row("Homepage", _text(item.homepage_url))
    table.add_row(
        "Provider IDs",
        ", ".join(f"{key}={value}" for key, value in result.provider_ids.items()),
    )
    table.add_row("Overview", _text(item.overview))
    console.print(table)

    if result.people:
        people = Table(title="Cast & Crew")
        people.add_column("Type", style="bold")
        people.add_column("Name")
        people.add_column("Role")
        for person in result.people:
            people.add_row(
                f"[{PERSON_STYLES[person.person_type]}]{person.person_type.value}[/]",
                person.name,
                _text(person.role_name),
            )
        console.print(people)


def render_images(images: list[ImageDescriptor], console: Console | None = None) -> None:
    console = console or Console()
    table = Table(title="Douban images")
    table.add_column("Type", style="bold")
    table.add_column("Language", style="green")
    table.add_column("URL", style="cyan")
    for image in images:
        table.add_row(image.type.value, image.language, image.url)
    console.print(table)


def render_capabilities(
    entries: list[Capability], console: Console | None = None
) -> None:
    console = console or Console()
    table = Table(title="Registered capabilities")
    table.add_column("Capability", style="bold")
    table.add_column("Media kind", style="cyan")
    table.add_column("Image types", style="green")
    for entry in entries:
        table.add_row(
            entry.name.value,
            entry.kind.value,
            ", ".join(t.value for t in entry.image_types),
        )
    console.print(table)
