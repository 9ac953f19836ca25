"""CLI interface for the film analytics engine."""

import logging

import typer
import uvicorn

from ..config.settings import settings
from .analytics import stats_app, tier_app
from .database import app as db_app

logging.basicConfig(level=settings.log_level.upper())

main = typer.Typer(help="Gridiron film analytics CLI")

# Add sub-applications
main.add_typer(tier_app, name="tier", help="Analytics tier commands")
main.add_typer(stats_app, name="stats", help="Team statistics commands")
main.add_typer(db_app, name="db", help="Database setup commands")


@main.command("serve")
def serve(
    host: str = typer.Option(settings.api_host, "--host", help="Interface to bind"),
    port: int = typer.Option(settings.api_port, "--port", help="Port to listen on"),
) -> None:
    """Run the HTTP API (docs at /docs)."""
    uvicorn.run(
        "gridiron_analytics.api.main:app",
        host=host,
        port=port,
        reload=settings.api_reload,
        log_level=settings.log_level.lower(),
    )
