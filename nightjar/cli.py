"""
Command-line interface for Nightjar.

Runs the MCP server and offers a few direct inspection commands that use the
same session code as the server tools.
"""

import asyncio
from typing import Optional

import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from launch_extraction.variables import variable_family
from nightjar.config import Settings, get_settings
from nightjar.mcp_server import run_server
from nightjar.session import NightjarSession
from nightjar.utils.errors import NightjarException
from nightjar.utils.logging import setup_logging

app = typer.Typer(
    name="nightjar",
    help="Adobe Launch implementation analyzer with an MCP server",
    add_completion=False,
)
console = Console()


def build_session(settings: Optional[Settings] = None) -> NightjarSession:
    """Create a fresh session for one command."""
    return NightjarSession.from_settings(settings or get_settings())


async def _parse_with_progress(session: NightjarSession, embed_url: str):
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        progress.add_task("Parsing Launch library...", total=None)
        return await session.parse_embed(embed_url)


@app.command()
def serve(
    openai_api_key: Optional[str] = typer.Option(
        None,
        "--openai-api-key",
        help="OpenAI API key for AI analysis (defaults to OPENAI_API_KEY)",
    ),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
):
    """Start the MCP server on stdio."""
    settings = get_settings()
    overrides = {}
    if openai_api_key:
        overrides["openai_api_key"] = openai_api_key
    if debug:
        overrides["debug"] = True
    if overrides:
        settings = settings.model_copy(update=overrides)

    if debug:
        setup_logging(log_level="DEBUG")

    run_server(settings)


@app.command()
def inspect(
    embed_url: str = typer.Argument(..., help="Adobe Launch library URL"),
):
    """Parse a Launch library and show its rules, data elements and variables."""

    async def _inspect():
        try:
            session = build_session()
            model = await _parse_with_progress(session, embed_url)
        except NightjarException as e:
            console.print(f"[red]Error:[/red] {e.message}")
            raise typer.Exit(1)

        console.print(
            f"[green]✓[/green] Parsed {embed_url}\n"
            f"  Data elements: {len(model.data_elements)}\n"
            f"  Rules: {len(model.rules)}\n"
            f"  Variables: {len(model.variables)}"
        )

        if len(model.rules):
            table = Table(title=f"Rules ({len(model.rules)})")
            table.add_column("Name", style="cyan")
            table.add_column("Event")
            table.add_column("Tracker Properties", justify="center")
            table.add_column("Custom Code", justify="center")
            for index in range(len(model.rules)):
                record = model.rules.record(index)
                table.add_row(
                    record.name,
                    record.event,
                    "✓" if record.tracker_property else "",
                    "✓" if record.custom_code else "",
                )
            console.print(table)

        if model.data_elements:
            table = Table(title=f"Data Elements ({len(model.data_elements)})")
            table.add_column("Name", style="cyan")
            for name in model.data_elements:
                table.add_row(name)
            console.print(table)

        if model.variables:
            table = Table(title=f"Variables ({len(model.variables)})")
            table.add_column("Variable", style="cyan")
            table.add_column("Type", style="dim")
            table.add_column("Rules")
            for name, rules in model.variables.items():
                table.add_row(name, variable_family(name), ", ".join(rules))
            console.print(table)

    asyncio.run(_inspect())


@app.command()
def rule(
    embed_url: str = typer.Argument(..., help="Adobe Launch library URL"),
    rule_name: str = typer.Argument(..., help="Exact rule name"),
    ai: bool = typer.Option(False, "--ai", help="Use the OpenAI backend for the analysis"),
):
    """Analyze one rule of a Launch library."""

    async def _rule():
        try:
            session = build_session()
            await _parse_with_progress(session, embed_url)

            if ai and not session.ai_available:
                console.print("[yellow]No OpenAI API key configured; using the templated analysis[/yellow]")

            report = await session.analyze_rule(rule_name, use_ai=ai)
        except NightjarException as e:
            console.print(f"[red]Error:[/red] {e.message}")
            raise typer.Exit(1)

        console.print(report, markup=False, highlight=False)

    asyncio.run(_rule())


@app.command("find-embed")
def find_embed(
    page_url: str = typer.Argument(..., help="Web page to scan"),
):
    """Find the Adobe Launch library referenced by a web page."""

    async def _find():
        try:
            embed_url = await build_session().extract_embed_from_url(page_url)
        except NightjarException as e:
            console.print(f"[red]Error:[/red] {e.message}")
            raise typer.Exit(1)

        console.print(f"[green]✓[/green] Found embed code: {embed_url}")

    asyncio.run(_find())


@app.callback()
def main(
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
):
    """Nightjar - inspect Adobe Launch implementations."""
    log_level = "DEBUG" if debug else None
    setup_logging(log_level=log_level)


if __name__ == "__main__":
    app()
