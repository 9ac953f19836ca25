"""CLI commands for tier management and team statistics."""

import asyncio
import json
import logging

import typer
from rich.console import Console
from rich.table import Table

from ..analytics.service import AdvancedAnalyticsService
from ..core.exceptions import AnalyticsError, TierFeatureDisabledError
from ..database.connection import SessionLocal
from ..database.store import SqlAlchemyAnalyticsStore

# Create CLI apps and console for rich output
tier_app = typer.Typer(help="Show or change a team's analytics tier")
stats_app = typer.Typer(help="Print team statistics")
console = Console()

logger = logging.getLogger(__name__)


def build_service() -> AdvancedAnalyticsService:
    """Service over the configured database (replaced in tests)."""
    return AdvancedAnalyticsService(SqlAlchemyAnalyticsStore(SessionLocal))


def _run(call):
    """Run one service call to completion, turning engine errors into exit code 1."""
    try:
        return asyncio.run(call(build_service()))
    except TierFeatureDisabledError as e:
        console.print(f"🔒 {e}", style="yellow")
        console.print(f"Upgrade the team tier to unlock '{e.feature}'.")
        raise typer.Exit(1) from e
    except AnalyticsError as e:
        console.print(f"❌ {e}", style="red")
        raise typer.Exit(1) from e


def _print_record(title: str, record: dict) -> None:
    table = Table(title=title)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    for key, value in record.items():
        table.add_row(key, _fmt(value))
    console.print(table)


def _print_rows(title: str, rows: list[dict]) -> None:
    if not rows:
        console.print(f"No {title.lower()} for this selection.", style="yellow")
        return
    # Nested categories (unified stats) are summarized, not expanded
    columns = [k for k, v in rows[0].items() if not isinstance(v, (dict, list)) and k != "playerId"]
    table = Table(title=title)
    for column in columns:
        table.add_column(column, justify="left" if column in ("playerName", "situation", "position") else "right")
    for row in rows:
        table.add_row(*(_fmt(row.get(c)) for c in columns))
    console.print(table)


def _fmt(value) -> str:
    if value is None:
        return "-"
    if isinstance(value, float):
        return f"{value:.1f}"
    return str(value)


def _emit(title: str, payload, output_format: str) -> None:
    if output_format.lower() == "json":
        # Plain stdout so the output can be piped into other tools
        typer.echo(json.dumps(payload, indent=2, default=str))
    elif isinstance(payload, dict):
        _print_record(title, payload)
    else:
        _print_rows(title, payload)


OutputFormat = typer.Option("table", "--format", help="Output format (table, json)")
GameId = typer.Option(None, "--game-id", help="Restrict to one game's film")


# ========== TIER ==========


@tier_app.command("show")
def show_tier(
    team_id: str = typer.Argument(..., help="Team ID"),
    output_format: str = OutputFormat,
) -> None:
    """Show a team's tier and which statistics it unlocks."""
    config = _run(lambda s: s.get_team_tier(team_id))
    _emit(f"Analytics config for {team_id}", config.to_dict(), output_format)


@tier_app.command("set")
def set_tier(
    team_id: str = typer.Argument(..., help="Team ID"),
    tier: str = typer.Argument(..., help="basic, plus, premium, ai_powered"),
    user: str = typer.Option(..., "--user", help="ID of the user making the change"),
    tagging_mode: str | None = typer.Option(None, "--tagging-mode", help="quick, standard, advanced"),
) -> None:
    """Change a team's tier. Feature flags follow the tier."""
    changes = {"tier": tier}
    if tagging_mode:
        changes["default_tagging_mode"] = tagging_mode
    config = _run(lambda s: s.update_team_tier(team_id, changes, caller_id=user))
    console.print(f"✅ Team {team_id} is now on the {config.tier.value} tier", style="green")


# ========== STATS ==========


@stats_app.command("drives")
def drive_stats(
    team_id: str = typer.Argument(..., help="Team ID"),
    game_id: str | None = GameId,
    defense: bool = typer.Option(False, "--defense", help="Opponent drives instead of own"),
    output_format: str = OutputFormat,
) -> None:
    """Drive efficiency (points per drive, three-and-outs, red zone)."""
    if defense:
        stats = _run(lambda s: s.get_defensive_drive_analytics(team_id, game_id))
        _emit("Defensive drive analytics", stats.to_dict(), output_format)
    else:
        stats = _run(lambda s: s.get_drive_analytics(team_id, game_id))
        _emit("Drive analytics", stats.to_dict(), output_format)


@stats_app.command("players")
def player_stats(
    team_id: str = typer.Argument(..., help="Team ID"),
    game_id: str | None = GameId,
    output_format: str = OutputFormat,
) -> None:
    """Ball carrier, QB and target attribution."""
    stats = _run(lambda s: s.get_player_attribution_stats(team_id, game_id))
    _emit("Player attribution", [p.to_dict() for p in stats], output_format)


@stats_app.command("offensive-line")
def offensive_line_stats(
    team_id: str = typer.Argument(..., help="Team ID"),
    game_id: str | None = GameId,
    output_format: str = OutputFormat,
) -> None:
    """Block win rate and penalties per lineman."""
    stats = _run(lambda s: s.get_offensive_line_stats(team_id, game_id))
    _emit("Offensive line", [p.to_dict() for p in stats], output_format)


@stats_app.command("defense")
def defensive_stats(
    team_id: str = typer.Argument(..., help="Team ID"),
    game_id: str | None = GameId,
    output_format: str = OutputFormat,
) -> None:
    """Tackles, pressure and coverage per defender."""
    stats = _run(lambda s: s.get_defensive_stats(team_id, game_id))
    _emit("Defense", [p.to_dict() for p in stats], output_format)


@stats_app.command("situational")
def situational_stats(
    team_id: str = typer.Argument(..., help="Team ID"),
    game_id: str | None = GameId,
    output_format: str = OutputFormat,
) -> None:
    """Efficiency with motion, on play action and against the blitz."""
    stats = _run(lambda s: s.get_situational_splits(team_id, game_id))
    _emit("Situational splits", [p.to_dict() for p in stats], output_format)


@stats_app.command("unified")
def unified_stats(
    team_id: str = typer.Argument(..., help="Team ID"),
    game_id: str | None = GameId,
    output_format: str = OutputFormat,
) -> None:
    """One row per player across every enabled category."""
    stats = _run(lambda s: s.get_unified_player_stats(team_id, game_id))
    _emit("Unified player stats", [p.to_dict() for p in stats], output_format)
