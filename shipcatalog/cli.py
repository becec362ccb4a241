"""Ship catalogue CLI.

Commands:
  init-db  — create database tables
  seed     — load ships from a YAML file (validated like POST /ships)
  list     — filter, sort and page through ships
  count    — count ships matching filters
  serve    — run the HTTP API
"""
from __future__ import annotations

from datetime import date, datetime
from pathlib import Path
from typing import Any, Optional

import typer
import yaml
from rich.console import Console
from rich.table import Table

from shipcatalog.models.base import ShipTypeEnum
from shipcatalog.modules.ship_query import ShipCriteria, ShipOrder
from shipcatalog.utils.epoch import from_epoch_ms


app = typer.Typer(
    name="shipcatalog",
    help="Manage the ship catalogue.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)
console = Console()

# YAML/JSON key → model field
_SEED_KEYS = {
    "name": "name",
    "planet": "planet",
    "shipType": "ship_type",
    "prodDate": "prod_date",
    "isUsed": "is_used",
    "speed": "speed",
    "crewSize": "crew_size",
}


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command("init-db")
def init_db_command():
    """Create the ships table if it does not exist."""
    from shipcatalog.database import init_db

    try:
        with console.status("[bold]Creating database..."):
            init_db()
    except Exception as e:
        console.print(f"[red]Database setup failed:[/red] {e}")
        raise typer.Exit(1)
    console.print("[green]Database ready.[/green]")


@app.command("seed")
def seed(
    file: Optional[Path] = typer.Option(None, "--file", "-f", help="YAML file with a top-level 'ships' list"),
):
    """Load ships from YAML. Entries failing validation are reported and skipped."""
    from shipcatalog.config import settings
    from shipcatalog.database import SessionLocal, init_db
    from shipcatalog.modules.ship_service import create_ship
    from shipcatalog.modules.ship_validation import ValidationRejected
    from shipcatalog.repository import ShipRepository

    path = file or Path(settings.SEED_FILE)
    if not path.exists():
        console.print(f"[red]Seed file not found:[/red] {path}")
        raise typer.Exit(1)

    entries = _load_seed_entries(path)
    init_db()
    db = SessionLocal()
    created = 0
    try:
        repo = ShipRepository(db)
        for index, entry in enumerate(entries):
            try:
                values = _entry_to_values(entry)
            except ValueError as e:
                console.print(f"  [yellow]skipped[/yellow] #{index}: {e}")
                continue
            result = create_ship(repo, values)
            if isinstance(result, ValidationRejected):
                console.print(f"  [yellow]skipped[/yellow] #{index} ({entry.get('name')!r}): {result}")
                continue
            created += 1
    finally:
        db.close()

    console.print(f"[green]Seeded {created} of {len(entries)} ships[/green] from {path}")


@app.command("list")
def list_command(
    name: Optional[str] = typer.Option(None, "--name", help="Name contains (case-sensitive)"),
    planet: Optional[str] = typer.Option(None, "--planet", help="Planet contains (case-sensitive)"),
    ship_type: Optional[ShipTypeEnum] = typer.Option(None, "--ship-type", case_sensitive=False),
    used: Optional[bool] = typer.Option(None, "--used/--new"),
    min_speed: Optional[float] = typer.Option(None, "--min-speed"),
    max_speed: Optional[float] = typer.Option(None, "--max-speed"),
    min_rating: Optional[float] = typer.Option(None, "--min-rating"),
    max_rating: Optional[float] = typer.Option(None, "--max-rating"),
    order: ShipOrder = typer.Option(ShipOrder.ID, "--order", case_sensitive=False),
    page: int = typer.Option(0, "--page", min=0),
    page_size: int = typer.Option(3, "--page-size", min=1),
):
    """Show one page of ships matching the filters."""
    from shipcatalog.database import SessionLocal
    from shipcatalog.modules.ship_service import count_matching_ships, list_ships_page
    from shipcatalog.repository import ShipRepository

    criteria = ShipCriteria(
        name=name, planet=planet, ship_type=ship_type, is_used=used,
        min_speed=min_speed, max_speed=max_speed,
        min_rating=min_rating, max_rating=max_rating,
    )
    db = SessionLocal()
    try:
        repo = ShipRepository(db)
        ships = list_ships_page(repo, criteria, order, page, page_size)
        total = count_matching_ships(repo, criteria)
    finally:
        db.close()

    if not ships:
        console.print("[yellow]No ships found[/yellow]")
        return

    table = Table(title=f"Ships — page {page} ({len(ships)} of {total})")
    for column in ("ID", "Name", "Planet", "Type", "Year", "Used", "Speed", "Crew", "Rating"):
        table.add_column(column)
    for s in ships:
        table.add_row(
            str(s.id), s.name, s.planet, s.ship_type.value, str(s.prod_date.year),
            "yes" if s.is_used else "no", f"{s.speed:.2f}", str(s.crew_size), f"{s.rating:.2f}",
        )
    console.print(table)


@app.command("count")
def count_command(
    name: Optional[str] = typer.Option(None, "--name"),
    planet: Optional[str] = typer.Option(None, "--planet"),
    ship_type: Optional[ShipTypeEnum] = typer.Option(None, "--ship-type", case_sensitive=False),
    used: Optional[bool] = typer.Option(None, "--used/--new"),
):
    """Print the number of ships matching the filters."""
    from shipcatalog.database import SessionLocal
    from shipcatalog.modules.ship_service import count_matching_ships
    from shipcatalog.repository import ShipRepository

    criteria = ShipCriteria(name=name, planet=planet, ship_type=ship_type, is_used=used)
    db = SessionLocal()
    try:
        total = count_matching_ships(ShipRepository(db), criteria)
    finally:
        db.close()
    console.print(total)


@app.command("serve")
def serve(
    host: str = typer.Option("127.0.0.1", "--host"),
    port: int = typer.Option(8000, "--port"),
):
    """Run the HTTP API with uvicorn."""
    import uvicorn

    console.print(f"API running at [cyan]http://{host}:{port}/api/v1/ships[/cyan] — press Ctrl+C to stop")
    uvicorn.run("shipcatalog.main:app", host=host, port=port)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _load_seed_entries(path: Path) -> list[dict[str, Any]]:
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    entries = data.get("ships", []) if isinstance(data, dict) else data
    return [e for e in entries if isinstance(e, dict)]


def _entry_to_values(entry: dict[str, Any]) -> dict[str, Any]:
    """Map a seed entry to model field names; prodDate may be a date or epoch ms."""
    values = {field: entry.get(key) for key, field in _SEED_KEYS.items()}
    prod = values["prod_date"]
    if isinstance(prod, datetime):
        pass
    elif isinstance(prod, date):
        values["prod_date"] = datetime(prod.year, prod.month, prod.day)
    elif isinstance(prod, int) and not isinstance(prod, bool):
        values["prod_date"] = from_epoch_ms(prod)
    elif prod is not None:
        raise ValueError(f"Unrecognised prodDate: {prod!r}")
    return values


def main() -> None:
    app()


if __name__ == "__main__":
    main()
