"""CLI for fermentradar: add, feed, move and check on ferments."""

from datetime import datetime, timedelta, timezone

import click

from fermentradar.locations import KNOWN_LOCATIONS, COUNTER, other_location
from fermentradar.store import (
    DEFAULT_FEED_INTERVAL_HOURS,
    DEFAULT_TYPE,
    FERMENT_TYPES,
    FermentStore,
)

LABEL_COLOURS = {
    "happy": "green",
    "due_soon": "yellow",
    "needs_feed": "red",
}


def _now(at: datetime | None = None) -> datetime:
    """Reference time for one invocation: --at if given, else the clock."""
    if at is None:
        return datetime.now(timezone.utc)
    if at.tzinfo is None:
        return at.replace(tzinfo=timezone.utc)
    return at


def _lookup(store: FermentStore, ferment_id: str):
    try:
        return store.get(ferment_id)
    except KeyError:
        raise click.ClickException(f"No single ferment matches id '{ferment_id}'.")


@click.group()
@click.option(
    "--store", "store_dir",
    envvar="FERMENTRADAR_STORE",
    default=None,
    type=click.Path(file_okay=False),
    help="Store directory (default: ./data, or $FERMENTRADAR_STORE).",
)
@click.pass_context
def main(ctx: click.Context, store_dir: str | None) -> None:
    """fermentradar — keep your starters fed."""
    ctx.obj = FermentStore(store_dir)


@main.command()
@click.argument("name")
@click.option("--type", "-t", "ferment_type", type=click.Choice(FERMENT_TYPES),
              default=DEFAULT_TYPE, help="What kind of ferment.")
@click.option("--location", "-l", type=click.Choice(KNOWN_LOCATIONS), default=COUNTER,
              help="Where it is stored.")
@click.option("--interval", "-i", default=DEFAULT_FEED_INTERVAL_HOURS,
              help="Hours between feeds at room temperature.")
@click.option("--started", default=None, type=click.DateTime(),
              help="When the ferment was started (default: now).")
@click.pass_obj
def add(store: FermentStore, name: str, ferment_type: str, location: str,
        interval: float, started: datetime | None) -> None:
    """Add a new ferment (counted as fed now)."""
    try:
        ferment = store.add(
            name,
            _now(),
            type=ferment_type,
            storage_location=location,
            base_feed_interval_hours=interval,
            started_at=started,
        )
    except ValueError as e:
        raise click.ClickException(str(e))
    click.echo(f"Added {ferment.name} ({ferment.id[:8]}) on the {ferment.storage_location}.")


@main.command()
@click.argument("ferment_id")
@click.pass_obj
def feed(store: FermentStore, ferment_id: str) -> None:
    """Feed a ferment now."""
    ferment = _lookup(store, ferment_id)
    store.feed(ferment.id, _now())
    click.echo(f"Fed {ferment.name}.")


@main.command()
@click.argument("ferment_id")
@click.option("--to", "to", type=click.Choice(KNOWN_LOCATIONS), default=None,
              help="Destination (default: toggle counter/fridge).")
@click.pass_obj
def move(store: FermentStore, ferment_id: str, to: str | None) -> None:
    """Move a ferment between the counter and the fridge."""
    ferment = _lookup(store, ferment_id)
    target = to or other_location(ferment.storage_location)
    store.move(ferment.id, target, _now())
    click.echo(f"Moved {ferment.name} to the {target}.")


@main.command()
@click.option("--at", default=None, type=click.DateTime(),
              help="Evaluate at this time instead of now (UTC).")
@click.option("--json", "as_json", is_flag=True, help="Print the board as JSON.")
@click.pass_obj
def status(store: FermentStore, at: datetime | None, as_json: bool) -> None:
    """Show every ferment with its feeding status."""
    import json

    from fermentradar.board import build_board

    board = build_board(store.list_ferments(), store.events(), _now(at))

    if as_json:
        click.echo(json.dumps([row.to_dict() for row in board], indent=2))
        return

    if not board:
        click.echo("No ferments yet.")
        return

    for row in board:
        badge = click.style(
            f" {row.label} ({row.percent}%) ",
            fg=LABEL_COLOURS.get(row.label),
            bold=True,
        )
        click.echo(f"{row.name}  [{row.id[:8]}]  {badge}")
        click.echo(f"  {row.type} · {row.storage_location}")
        if row.age_days is not None:
            click.echo(f"  Age: {row.age_days:.1f} days")
        if row.hours_since_feed is not None:
            click.echo(f"  Last fed: {row.last_fed_at} (~{row.hours_since_feed:.1f}h ago)")
        else:
            click.echo(f"  Last fed: {row.last_fed_at or '?'}")
        click.echo(f"  Base interval: {row.base_feed_interval_hours:g}h (room temp)")
        click.echo(f"  Next move: {row.move_to}")


@main.command()
@click.argument("ferment_id")
@click.option("--hours", "span", default=48.0, help="How far past the last feed to chart.")
@click.option("--step", "-s", default=4.0, help="Hours between samples.")
@click.pass_obj
def timeline(store: FermentStore, ferment_id: str, span: float, step: float) -> None:
    """Chart how stress built up since the last feed."""
    import numpy as np

    from fermentradar.analytics.classifier import classify_ratio, stress_ratio
    from fermentradar.analytics.stress import stress_curve
    from fermentradar.events import moves_by_ferment
    from fermentradar.models import parse_timestamp

    if step <= 0 or span <= 0:
        raise click.ClickException("--hours and --step must be positive.")

    ferment = _lookup(store, ferment_id)
    fed_at = parse_timestamp(ferment.last_fed_at)
    if fed_at is None:
        raise click.ClickException(f"{ferment.name} has an unreadable last-fed time.")

    record = ferment.feeding_record()
    moves = moves_by_ferment(store.events(), [ferment.id])[ferment.id]
    offsets = np.arange(0.0, span + step / 2, step)
    times = [fed_at + timedelta(hours=float(h)) for h in offsets]
    curve = stress_curve(record.last_fed_at, record.storage_location, moves, times)

    click.echo(f"{ferment.name}: fed {ferment.last_fed_at}, "
               f"every {ferment.base_feed_interval_hours:g}h")
    for h, stress in zip(offsets, curve):
        ratio = stress_ratio(stress, ferment.base_feed_interval_hours)
        label = classify_ratio(ratio).value
        bar = "#" * int(min(max(ratio, 0.0), 1.5) * 20) if np.isfinite(ratio) else ""
        click.echo(f"  +{h:5.1f}h  {stress:6.2f}  {label:<10} {bar}")


if __name__ == "__main__":
    main()
