"""
adapters.cli.main - CLI adapter for the Inventory AI Assistant.

Mirrors src/adapters/rest/ but for terminal use. Uses the same
ServiceFactory and AgentExecutor as the REST API so the agent behaves
identically. There is no login here: the user id is passed explicitly,
as the operator of a trusted terminal.

Commands
--------
  init       Create the database schema
  seed       Insert demo products, customers and sales for a user
  ask        One-shot question to the agent
  chat       Interactive chat session (/reset clears the conversation)
  report     Print an inventory report without the agent

Usage
-----
  python src/adapters/cli/main.py init
  python src/adapters/cli/main.py seed 3f2b...-uuid
  python src/adapters/cli/main.py ask 3f2b...-uuid "which products are low on stock?"
  python src/adapters/cli/main.py chat 3f2b...-uuid
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

# ── Ensure src/ is on the path ──
_SRC = Path(__file__).resolve().parent.parent.parent
sys.path.insert(0, str(_SRC))

import typer
from rich import box
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from application.context import SessionContext
from application.dto import ReportRequest, TurnResult
from domain.entities import DEFAULT_MIN_STOCK_LEVEL
from domain.exceptions import DomainError
from domain.identifiers import is_valid_uuid
from domain.models import (
    CategorySummaryReport,
    LowStockReport,
    MovementSummaryReport,
    ReportType,
)
from factory import ServiceFactory
from infrastructure.config import Settings
from infrastructure.persistence.seed import seed_demo_data

__version__ = "0.1.0"

console = Console()
app = typer.Typer(
    help="Inventory AI Assistant CLI",
    add_completion=False,
    no_args_is_help=True,
)


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------

async def _make_factory() -> ServiceFactory:
    """Create and initialise a ServiceFactory (runs DB migrations)."""
    factory = ServiceFactory(Settings.from_env())
    await factory.initialize()
    return factory


def _require_user_id(user_id: str) -> str:
    if not is_valid_uuid(user_id):
        raise typer.BadParameter(f'"{user_id}" is not a valid UUID.', param_hint="USER_ID")
    return user_id


def _print_turn(result: TurnResult) -> None:
    style = "green" if result.succeeded else "red"
    console.print(Panel(Markdown(result.text), title="Assistant", border_style=style))
    if not result.succeeded and result.error_detail:
        console.print(f"[dim]{result.error_detail}[/dim]")


def _print_report(report) -> None:
    if isinstance(report, LowStockReport):
        t = Table(title="Low stock", box=box.SIMPLE)
        for column in ("Product", "Category", "Stock", "Minimum"):
            t.add_column(column)
        for p in report.products:
            t.add_row(p.name, p.category or "[dim]—[/dim]", str(p.stock_quantity),
                      str(p.min_stock_level if p.min_stock_level is not None else DEFAULT_MIN_STOCK_LEVEL))
        if not report.products:
            console.print("[green]No products are at or below their minimum stock level.[/green]")
            return
        console.print(t)

    elif isinstance(report, MovementSummaryReport):
        t = Table(title=f"Movements, last {report.period_days} days", box=box.SIMPLE)
        t.add_column("Type")
        t.add_column("Count", justify="right")
        t.add_column("Units", justify="right")
        for movement_type, stats in report.summary.items():
            t.add_row(movement_type, str(stats.count), str(stats.total_quantity))
        console.print(t)
        console.print(f"Total movements: [bold]{report.total_movements}[/bold]")

    elif isinstance(report, CategorySummaryReport):
        t = Table(title="Categories", box=box.SIMPLE)
        for column in ("Category", "Products", "Total stock", "Avg price"):
            t.add_column(column)
        for c in report.categories:
            t.add_row(c.category, str(c.product_count), str(c.total_stock),
                      str(c.average_price))
        console.print(t)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"inventory-ai v{__version__}")
        raise typer.Exit()


# ---------------------------------------------------------------------------
# Commands: Setup
# ---------------------------------------------------------------------------

@app.command()
def init() -> None:
    """Create the database schema (safe to run more than once)."""
    async def _run() -> None:
        factory = await _make_factory()
        console.print(Panel(
            f"[bold green]Database ready[/bold green] at {factory.config.db_path}",
            border_style="green",
        ))

    asyncio.run(_run())


@app.command()
def seed(
    user_id: str = typer.Argument(..., help="UUID that will own the demo records."),
) -> None:
    """Insert demo products, customers and sales."""
    _require_user_id(user_id)

    async def _run() -> None:
        factory = await _make_factory()
        summary = await seed_demo_data(factory.connection, user_id)
        console.print(Panel(
            f"[bold green]Seeded[/bold green] {summary.products} products, "
            f"{summary.customers} customers, {summary.sales} sales "
            f"({summary.movements} stock movements).",
            border_style="green",
        ))

    asyncio.run(_run())


# ---------------------------------------------------------------------------
# Commands: Agent
# ---------------------------------------------------------------------------

@app.command()
def ask(
    user_id: str = typer.Argument(..., help="Your user UUID."),
    message: str = typer.Argument(..., help="Your inventory question or instruction."),
) -> None:
    """Ask the agent a one-shot question."""
    _require_user_id(user_id)

    async def _run() -> None:
        factory = await _make_factory()
        agent = factory.create_agent()
        ctx = SessionContext(user_id=user_id)
        with console.status("[bold cyan]Thinking…", spinner="dots"):
            result = await agent.submit_message(ctx, message)
        _print_turn(result)
        if not result.succeeded:
            raise typer.Exit(code=1)

    asyncio.run(_run())


@app.command()
def chat(
    user_id: str = typer.Argument(..., help="Your user UUID."),
) -> None:
    """Start an interactive chat session."""
    _require_user_id(user_id)

    async def _run() -> None:
        factory = await _make_factory()
        agent = factory.create_agent()
        ctx = SessionContext(user_id=user_id)

        console.print(Panel(
            "[bold]Inventory AI Chat[/bold]\n"
            f"User [bold]{user_id}[/bold]\n"
            "Type your request, [bold]/reset[/bold] to forget the conversation, "
            "or [bold]exit[/bold] / [bold]quit[/bold] to stop.",
            border_style="cyan",
        ))

        while True:
            try:
                user_input = Prompt.ask("\n[bold cyan]You[/bold cyan]")
            except (KeyboardInterrupt, EOFError):
                console.print("\n[dim]Goodbye![/dim]")
                break

            text = user_input.strip()
            if text.lower() in ("exit", "quit", "q", "bye"):
                console.print("[dim]Goodbye![/dim]")
                break
            if not text:
                continue
            if text == "/reset":
                factory.memory.clear(ctx.session_id)
                console.print("[dim]Conversation cleared.[/dim]")
                continue

            with console.status("[bold cyan]Thinking…", spinner="dots"):
                result = await agent.submit_message(ctx, text)
            console.print()
            _print_turn(result)

    asyncio.run(_run())


# ---------------------------------------------------------------------------
# Commands: Reports (no LLM required)
# ---------------------------------------------------------------------------

@app.command()
def report(
    report_type: ReportType = typer.Argument(..., help="low_stock, movement_summary or category_summary."),
    days: int = typer.Option(30, "--days", "-d", help="Window for movement_summary."),
) -> None:
    """Print an inventory report."""
    async def _run() -> None:
        factory = await _make_factory()
        try:
            result = await factory.create_report_service().inventory_report(
                ReportRequest(type=report_type.value, days=days),
            )
        except DomainError as exc:
            console.print(f"[bold red]{exc}[/bold red]")
            raise typer.Exit(code=1)
        _print_report(result)

    asyncio.run(_run())


# ---------------------------------------------------------------------------
# Global version option
# ---------------------------------------------------------------------------

@app.callback()
def _callback(
    version: bool = typer.Option(
        False, "--version", "-v",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """Inventory AI Assistant CLI"""


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    app()
