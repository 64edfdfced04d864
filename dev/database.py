import typer
import sys
import os

# Add parent directory to sys.path to allow imports from project root when running standalone
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from database.seeder import create_statistics_schema, run_snapshot_seeder, DEFAULT_TARGET
from dev.utils import print_header, print_success, print_error, print_info, update_env_variable

app = typer.Typer(help="Statistics database commands")

@app.command("seed")
def seed_cmd(
    target: str = typer.Argument(DEFAULT_TARGET, help="Snapshot file to create"),
    overwrite: bool = typer.Option(False, "--overwrite", help="Replace an existing file"),
):
    """Build a sample snapshot file (ranked stats + Hall of Fame)"""
    print_header(f"Seeding {target}")
    if run_snapshot_seeder(target, overwrite=overwrite):
        print_success("Done.")
    else:
        print_error("Nothing written.")
        raise typer.Exit(code=1)

@app.command("schema")
def schema_cmd(
    target: str = typer.Argument(None, help="SQLite file to initialize (default: configured remote database)"),
):
    """Create the statistics tables if they are missing"""
    print_header(f"Statistics Schema: {target or 'remote database'}")
    if create_statistics_schema(target):
        print_success("Database initialized.")
    else:
        print_error("Initialization failed.")
        raise typer.Exit(code=1)

@app.command("backend")
def backend_cmd(kind: str = typer.Argument(..., help="local or remote")):
    """Choose the statistics backend (takes effect on next start)"""
    kind = kind.lower()
    if kind not in ("local", "remote"):
        print_error("Backend must be 'local' or 'remote'.")
        raise typer.Exit(code=1)

    update_env_variable("USE_REMOTE_DB", "true" if kind == "remote" else "false")
    print_info(f"Statistics will be served from the {kind} backend.")

@app.command("check")
def check_cmd():
    """Run a cheap query against the configured backend"""
    from dev.utils import run_query

    print_header("Backend Check")
    result = run_query(lambda s: s.get_server_stats())
    if result.success:
        print_success(f"{result.data.server_name}: {result.data.stats.player_count} players")
    else:
        print_error(f"{result.error} ({result.error_kind})")
        raise typer.Exit(code=1)
