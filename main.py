"""Review CLI for the unresolved queue.

Usage:
    betnorm queue list [--type TYPE] [--sport SPORT]
    betnorm queue map GROUP_KEY CANONICAL
    betnorm queue create GROUP_KEY CANONICAL [--sport S] [--alias A]... [--abbr X]...
    betnorm queue ignore GROUP_KEY
    betnorm resolve TYPE RAW [--sport S] [--team T]
"""

import sys
from pathlib import Path
from typing import Optional, Tuple

# --- Settings/Logging ---
from betnorm.logging.setup import setup_logging
from betnorm.config.settings import settings

setup_logging()

from loguru import logger

# --- End Settings/Logging ---

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from betnorm.models.enums import EntityType
from betnorm.models.queue import GroupedQueueItem
from betnorm.models.resolution import ResolutionContext
from betnorm.normalization.reference_store import ReferenceDataError
from betnorm.normalization.registry import NormalizationRegistry
from betnorm.resolution.resolver import Resolver
from betnorm.review.actions import QueueReviewService, ReviewActionError
from betnorm.review.queue import UnresolvedQueue
from betnorm.storage.base_store import CollectionStore, StorageError
from betnorm.storage.json_store import JsonFileStore
from betnorm.storage.persistence import load_reference_store

ENTITY_TYPES = [t.value for t in EntityType]
RESOLVABLE_TYPES = [EntityType.TEAM.value, EntityType.PLAYER.value, EntityType.STAT.value]


def _build_service(store: CollectionStore) -> QueueReviewService:
    reference = load_reference_store(store)
    resolver = Resolver(NormalizationRegistry(reference.snapshot()))
    queue = UnresolvedQueue(store=store)
    return QueueReviewService(reference, queue, resolver, persistence=store)


def _find_group(service: QueueReviewService, group_key: str) -> GroupedQueueItem:
    group = service.queue.find_group(group_key)
    if group is None:
        raise click.ClickException(f"No queued group with key '{group_key}'.")
    return group


@click.group()
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory holding the JSON collections (defaults to BETNORM_DATA_DIR).",
)
@click.pass_context
def cli(ctx: click.Context, data_dir: Optional[Path]):
    """Normalization review tools: inspect and drain the unresolved queue."""
    directory = data_dir or settings.data_dir
    logger.debug(f"Using collection directory {directory}")
    ctx.obj = {"store": JsonFileStore(directory), "console": Console()}


@cli.group(name="queue")
def queue_group():
    """Unresolved queue review commands."""
    pass


@queue_group.command(name="list")
@click.option("--type", "entity_type", type=click.Choice(ENTITY_TYPES), default=None, help="Filter by entity type")
@click.option("--sport", default=None, help="Filter by sport")
@click.pass_obj
def list_groups(obj: dict, entity_type: Optional[str], sport: Optional[str]):
    """List grouped unresolved items, most recently seen first."""
    console: Console = obj["console"]
    try:
        queue = UnresolvedQueue(store=obj["store"])
    except StorageError as e:
        raise click.ClickException(str(e))

    groups = queue.grouped(EntityType(entity_type) if entity_type else None, sport)
    if not groups:
        console.print("[green]Unresolved queue is empty.[/green]")
        return

    table = Table(title=f"Unresolved Queue ({queue.count()} items)")
    table.add_column("Group Key", style="cyan", overflow="fold")
    table.add_column("Raw Value", style="bold")
    table.add_column("Type")
    table.add_column("Sport")
    table.add_column("Count", justify="right")
    table.add_column("Last Seen")
    table.add_column("Samples")
    for group in groups:
        samples = ", ".join(
            f"{s.book}/{s.market}" if s.market else s.book for s in group.sample_contexts
        )
        table.add_row(
            escape(group.group_key),
            escape(group.raw_value),
            group.entity_type.value,
            escape(group.sport or "-"),
            str(group.count),
            group.last_seen_at.strftime("%Y-%m-%d %H:%M"),
            escape(samples),
        )
    console.print(table)
    console.print(f"{len(groups)} group(s)")


@queue_group.command(name="map")
@click.argument("group_key")
@click.argument("canonical")
@click.pass_obj
def map_group(obj: dict, group_key: str, canonical: str):
    """Map a group onto an existing canonical entity as a new alias."""
    console: Console = obj["console"]
    try:
        service = _build_service(obj["store"])
        group = _find_group(service, group_key)
        drained = service.map_to_existing(group, canonical)
    except (ReviewActionError, ReferenceDataError, StorageError) as e:
        raise click.ClickException(str(e))
    console.print(
        f"[green]Mapped[/green] '{escape(group.raw_value)}' -> '{escape(canonical)}' ({drained} item(s) resolved)"
    )


@queue_group.command(name="create")
@click.argument("group_key")
@click.argument("canonical")
@click.option("--sport", default=None, help="Sport for the new entity (defaults to the group's sport)")
@click.option("--alias", "aliases", multiple=True, help="Additional alias (repeatable)")
@click.option("--abbr", "abbreviations", multiple=True, help="Team abbreviation (repeatable)")
@click.option("--team", default=None, help="Team of a new player")
@click.option("--description", default=None, help="Description of a new bet type")
@click.pass_obj
def create_entity(
    obj: dict,
    group_key: str,
    canonical: str,
    sport: Optional[str],
    aliases: Tuple[str, ...],
    abbreviations: Tuple[str, ...],
    team: Optional[str],
    description: Optional[str],
):
    """Create a new canonical entity from a group."""
    console: Console = obj["console"]
    try:
        service = _build_service(obj["store"])
        group = _find_group(service, group_key)
        drained = service.create_canonical(
            group,
            canonical,
            sport=sport,
            additional_aliases=aliases,
            abbreviations=abbreviations,
            team=team,
            description=description,
        )
    except (ReviewActionError, ReferenceDataError, StorageError) as e:
        raise click.ClickException(str(e))
    console.print(
        f"[green]Created[/green] {group.entity_type.value} '{escape(canonical)}' ({drained} item(s) resolved)"
    )


@queue_group.command(name="ignore")
@click.argument("group_key")
@click.pass_obj
def ignore_group(obj: dict, group_key: str):
    """Drop a group from the queue without changing reference data."""
    console: Console = obj["console"]
    try:
        service = _build_service(obj["store"])
        group = _find_group(service, group_key)
        drained = service.ignore(group)
    except StorageError as e:
        raise click.ClickException(str(e))
    console.print(f"[yellow]Ignored[/yellow] '{escape(group.raw_value)}' ({drained} item(s) removed)")


@cli.command(name="resolve")
@click.argument("entity_type", type=click.Choice(RESOLVABLE_TYPES))
@click.argument("raw")
@click.option("--sport", default=None, help="Sport context")
@click.option("--team", default=None, help="Team context (players only)")
@click.pass_obj
def resolve_value(obj: dict, entity_type: str, raw: str, sport: Optional[str], team: Optional[str]):
    """Resolve a raw value against the current reference data."""
    console: Console = obj["console"]
    try:
        reference = load_reference_store(obj["store"])
    except StorageError as e:
        raise click.ClickException(str(e))

    resolver = Resolver(NormalizationRegistry(reference.snapshot()))
    result = resolver.resolve(EntityType(entity_type), raw, ResolutionContext(sport=sport, team=team))

    colors = {"resolved": "green", "unresolved": "red", "ambiguous": "yellow"}
    lines = [
        f"Status: [{colors[result.status.value]}]{result.status.value}[/]",
        f"Canonical: {escape(result.canonical)}",
    ]
    if result.is_ambiguous:
        lines.append(f"Candidates: {escape(', '.join(result.candidates))}")
    lines.append(
        f"Aggregation key: {escape(resolver.get_aggregation_key(EntityType(entity_type), raw, sport=sport, team=team))}"
    )
    console.print(Panel("\n".join(lines), title=escape(raw), expand=False))


if __name__ == "__main__":
    try:
        cli()
    except KeyboardInterrupt:
        logger.info("Execution interrupted by user (KeyboardInterrupt).")
        sys.exit(0)
