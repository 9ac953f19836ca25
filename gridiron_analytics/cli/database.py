"""CLI commands for the local database."""

import asyncio

import typer
from rich.console import Console

from ..config.settings import settings
from ..database.init_db import create_database, reset_database

app = typer.Typer(help="Database setup commands")
console = Console()


@app.command("init")
def init(
    reset: bool = typer.Option(False, "--reset", help="Drop all tables first (destroys data)"),
) -> None:
    """Create the analytics tables."""
    if reset:
        asyncio.run(reset_database())
        console.print("♻️  Database reset", style="yellow")
    else:
        asyncio.run(create_database())
    console.print(f"✅ Tables ready at {settings.database_url}", style="green")
