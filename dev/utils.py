import os
import re
import asyncio
from rich.console import Console
from rich.panel import Panel
from rich.theme import Theme

# Custom theme for the CLI
custom_theme = Theme({
    "info": "dim cyan",
    "warning": "magenta",
    "error": "bold red",
    "success": "bold green",
    "header": "bold white on blue",
})

console = Console(theme=custom_theme)

# Minecraft § formatting codes, stripped for terminal output
FORMAT_CODE = re.compile(r"§[0-9a-fk-or]", re.IGNORECASE)

def print_header(text: str):
    """Prints a styled header panel."""
    console.print(Panel(f"[bold white]{text}[/bold white]", style="blue", expand=False))

def print_success(text: str):
    """Prints a success message."""
    console.print(f"[success]✔ {text}[/success]")

def print_error(text: str):
    """Prints an error message."""
    console.print(f"[error]✖ {text}[/error]")

def print_info(text: str):
    """Prints an info message."""
    console.print(f"[info]ℹ {text}[/info]")

def print_warning(text: str):
    """Prints a warning message."""
    console.print(f"[warning]⚠ {text}[/warning]")

def strip_format_codes(text: str) -> str:
    return FORMAT_CODE.sub("", text or "")

def run_query(coro_fn, *args):
    """
    Runs one statistics operation on a fresh event loop and shuts the
    service down afterwards so pooled connections are released.
    """
    from app.services.stats.selector import get_stats_service, shutdown_stats_service

    async def _call():
        service = get_stats_service()
        return await coro_fn(service, *args)

    try:
        return asyncio.run(_call())
    finally:
        shutdown_stats_service()

def update_env_variable(key: str, value: str):
    """
    Updates or adds a key-value pair in the .env file.
    Preserves existing comments and structure.
    """
    env_path = os.path.join(os.getcwd(), ".env")

    if not os.path.exists(env_path):
        # Create if not exists
        with open(env_path, "w") as f:
            f.write(f"{key}={value}\n")
        return

    with open(env_path, "r") as f:
        content = f.read()

    # Matches "KEY=value" or "KEY = value"
    pattern = re.compile(rf"^{key}\s*=\s*.*$", re.MULTILINE)

    if pattern.search(content):
        new_content = pattern.sub(f"{key}={value}", content)
    else:
        if content and not content.endswith("\n"):
            content += "\n"
        new_content = content + f"{key}={value}\n"

    with open(env_path, "w") as f:
        f.write(new_content)

    print_success(f"Updated .env: {key}={value}")
