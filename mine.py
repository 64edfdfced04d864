import typer
import sys
import os
import logging
import importlib.util
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

# Setup Logging
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# Initialize Typer and Console
app = typer.Typer(help="Player Statistics CLI Tool")
console = Console()

# --- Dynamic Loader ---
def load_commands():
    """
    Dynamically load commands from the 'dev' directory.
    """
    dev_dir = os.path.join(os.path.dirname(os.path.abspath(__file__)), "dev")
    if not os.path.exists(dev_dir):
        return

    for filename in sorted(os.listdir(dev_dir)):
        if filename.endswith(".py") and filename != "__init__.py" and filename != "utils.py":
            module_name = filename[:-3]
            file_path = os.path.join(dev_dir, filename)

            try:
                spec = importlib.util.spec_from_file_location(f"dev.{module_name}", file_path)
                if spec and spec.loader:
                    module = importlib.util.module_from_spec(spec)
                    sys.modules[f"dev.{module_name}"] = module
                    spec.loader.exec_module(module)

                    if hasattr(module, "app"):
                        # Add the module's Typer app as a sub-command group
                        app.add_typer(module.app, name=module_name)
            except Exception as e:
                console.print(f"[red]Failed to load module {module_name}: {e}[/red]")

# Load commands immediately
load_commands()

# --- Interactive Menu ---

@app.callback(invoke_without_command=True)
def main_interactive(ctx: typer.Context):
    """
    Main entry point. Launches interactive menu if no command is provided.
    """
    if ctx.invoked_subcommand is None:
        show_menu()

def show_menu():
    while True:
        console.clear()

        console.print(Panel.fit(
            "[bold white]Player Statistics CLI[/bold white]\n[cyan]Query stats, manage the snapshot cache and fixtures.[/cyan]",
            title="Welcome",
            border_style="blue"
        ))

        table = Table(show_header=True, header_style="bold magenta", expand=True)
        table.add_column("No.", style="dim", width=4, justify="center")
        table.add_column("Category", style="cyan", width=12)
        table.add_column("Action", style="white")
        table.add_column("Description", style="dim")

        table.add_row("1", "Stats", "Players", "List all players")
        table.add_row("2", "Stats", "Player", "Show one player by UUID")
        table.add_row("3", "Stats", "Hall of Fame", "Top 15 players")
        table.add_row("4", "Stats", "Leaderboard", "Rank players on one stat")
        table.add_row("5", "Stats", "Server", "Server info and totals")
        table.add_row("6", "Cache", "Status", "Cached snapshot age and size")
        table.add_row("7", "Cache", "Refresh", "Download the snapshot now")
        table.add_row("8", "Database", "Seed", "Build a sample snapshot file")
        table.add_row("0", "Exit", "Quit", "Close the CLI")

        console.print(table)
        console.print("\n")

        choice = Prompt.ask("Select an option", choices=["1", "2", "3", "4", "5", "6", "7", "8", "0"], default="1")

        cmd_prefix = f"{sys.executable} mine.py"

        if choice == "1":
            os.system(f"{cmd_prefix} stats players")
        elif choice == "2":
            uuid = Prompt.ask("Player UUID")
            os.system(f"{cmd_prefix} stats player \"{uuid}\"")
        elif choice == "3":
            os.system(f"{cmd_prefix} stats hof")
        elif choice == "4":
            category = Prompt.ask("Category", default="mined")
            stat_name = Prompt.ask("Stat", default="stone")
            os.system(f"{cmd_prefix} stats leaderboard {category} {stat_name}")
        elif choice == "5":
            os.system(f"{cmd_prefix} stats server")
            os.system(f"{cmd_prefix} stats totals")
        elif choice == "6":
            os.system(f"{cmd_prefix} cache status")
        elif choice == "7":
            os.system(f"{cmd_prefix} cache refresh")
        elif choice == "8":
            os.system(f"{cmd_prefix} database seed")
        elif choice == "0":
            console.print("[bold]Goodbye![/bold]")
            sys.exit(0)

        input("\nPress Enter to continue...")

if __name__ == "__main__":
    app()
