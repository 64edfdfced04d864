import typer
from rich.table import Table
from dev.utils import console, print_header, print_error, print_info, run_query, strip_format_codes

app = typer.Typer(help="Query player statistics through the configured backend")


def _check(result) -> bool:
    if not result.success:
        print_error(f"{result.error} ({result.error_kind})")
        return False
    return True


@app.command("players")
def players_cmd():
    """List every known player"""
    print_header("Players")
    result = run_query(lambda s: s.list_players())
    if not _check(result):
        raise typer.Exit(code=1)

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("ID", justify="right", style="dim")
    table.add_column("Nick", style="cyan")
    table.add_column("UUID")
    table.add_column("Last online")
    for p in result.players:
        table.add_row(str(p.id), p.nick or "-", p.uuid, p.last_online.isoformat() if p.last_online else "-")
    console.print(table)


@app.command("player")
def player_cmd(
    key: str = typer.Argument(..., help="Player UUID, or numeric ID with --id"),
    by_id: bool = typer.Option(False, "--id", help="Treat KEY as the numeric player ID"),
):
    """Show one player's stats by UUID or ID"""
    if by_id:
        result = run_query(lambda s: s.get_player_by_id(int(key)))
    else:
        result = run_query(lambda s: s.get_player_by_uuid(key))
    if not _check(result):
        raise typer.Exit(code=1)

    player = result.player
    print_header(f"{player.nick} (#{player.id})")
    print_info(f"UUID: {player.uuid}")
    print_info(f"Hall of Fame score: {player.hof}")

    if not player.stats:
        print_info("No statistics recorded.")
        return

    for category, entries in player.stats.items():
        table = Table(title=category, show_header=True, header_style="bold magenta")
        table.add_column("Stat", style="cyan")
        table.add_column("Value", justify="right")
        table.add_column("Position", justify="right", style="dim")
        for entry in entries:
            table.add_row(entry.name, f"{entry.value:,}", str(entry.position) if entry.position else "-")
        console.print(table)


@app.command("hof")
def hall_of_fame_cmd():
    """Show the Hall of Fame (top 15)"""
    print_header("Hall of Fame")
    result = run_query(lambda s: s.get_hall_of_fame())
    if not _check(result):
        raise typer.Exit(code=1)

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Nick", style="cyan")
    table.add_column("Score", justify="right")
    for place, entry in enumerate(result.data, start=1):
        table.add_row(str(place), entry.nick or entry.uuid, str(entry.score))
    console.print(table)


@app.command("server")
def server_cmd():
    """Show server metadata from the last sync"""
    result = run_query(lambda s: s.get_server_metadata())
    if not _check(result):
        raise typer.Exit(code=1)

    data = result.data
    print_header("Server")
    console.print(strip_format_codes(data.desc))
    print_info(f"URL: {data.url}")
    print_info(f"Last update: {data.last_update.isoformat() if data.last_update else 'never'}")
    print_info(f"Icon: {data.icon if not data.icon.startswith('data:') else 'embedded PNG'}")


@app.command("totals")
def totals_cmd():
    """Show server-wide totals"""
    result = run_query(lambda s: s.get_server_stats())
    if not _check(result):
        raise typer.Exit(code=1)

    print_header(f"{result.data.server_name} totals")
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Counter", style="cyan")
    table.add_column("Value", justify="right")
    for name, value in result.data.stats.model_dump().items():
        table.add_row(name, f"{value:,}")
    console.print(table)


@app.command("leaderboard")
def leaderboard_cmd(
    category: str = typer.Argument(..., help="Stat category, e.g. mined, custom, killed"),
    stat_name: str = typer.Argument(..., help="Stat name, e.g. stone, play_time"),
):
    """Rank all players on a single stat"""
    print_header(f"{category} / {stat_name}")
    result = run_query(lambda s: s.get_stat_leaderboard(category, stat_name))
    if not _check(result):
        raise typer.Exit(code=1)

    if not result.data:
        print_info("Nobody has this stat yet.")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Rank", justify="right", style="dim")
    table.add_column("Nick", style="cyan")
    table.add_column("Score", justify="right")
    for row in result.data:
        table.add_row(str(row.rank) if row.rank else "-", row.player_nick or row.player_uuid, f"{row.score:,}")
    console.print(table)
