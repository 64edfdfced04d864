import time
import asyncio
import datetime
import typer
from rich.table import Table
from dev.utils import console, print_header, print_success, print_error, print_info, print_warning

from app.config import get_settings
from app.services.stats.errors import StatsError
from app.services.stats.local_backend import LocalBackend
from app.services.stats.snapshot_cache import SnapshotCacheStore

app = typer.Typer(help="Local snapshot cache maintenance")


def _store() -> SnapshotCacheStore:
    settings = get_settings()
    return SnapshotCacheStore(settings.snapshot_cache_path, enabled=settings.snapshot_cache_enabled)


@app.command("status")
def status_cmd():
    """Show the cached snapshot's size and age"""
    settings = get_settings()
    print_header("Snapshot Cache")

    store = _store()
    try:
        entry = store.get()
    finally:
        store.close()

    if not settings.snapshot_cache_enabled:
        print_warning("Cache store is disabled (SNAPSHOT_CACHE_ENABLED=false).")
        return
    if entry is None:
        print_info("No snapshot cached.")
        return

    age_seconds = time.time() - entry.timestamp / 1000
    written = datetime.datetime.fromtimestamp(entry.timestamp / 1000, tz=datetime.timezone.utc)

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Property", style="dim")
    table.add_column("Value")
    table.add_row("File", settings.snapshot_cache_path)
    table.add_row("Source", settings.snapshot_url)
    table.add_row("Size", f"{len(entry.snapshot) // 1024} KiB")
    table.add_row("Written", written.isoformat())
    table.add_row("Age", f"{age_seconds / 3600:.2f} h")
    table.add_row("Fresh", "yes" if age_seconds < settings.snapshot_ttl_seconds else "no (refresh on next query)")
    console.print(table)


@app.command("clear")
def clear_cmd():
    """Drop the cached snapshot; the next query downloads a new one"""
    store = _store()
    try:
        if store.clear():
            print_success("Cached snapshot removed.")
        else:
            print_info("Nothing to clear.")
    finally:
        store.close()


@app.command("refresh")
def refresh_cmd():
    """Download the snapshot now and store it"""
    settings = get_settings()
    print_header(f"Refreshing from {settings.snapshot_url}")

    backend = LocalBackend(settings)
    try:
        snapshot = asyncio.run(backend.refresh_snapshot())
    except StatsError as e:
        print_error(e.message)
        raise typer.Exit(code=1)
    finally:
        backend.close()

    print_success(f"Snapshot refreshed ({len(snapshot) // 1024} KiB).")
