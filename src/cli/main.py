"""CLI principal (Typer).

Comandos:
- subscribe / unsubscribe: un request por topic, en paralelo.
- unsubscribe-all: desuscribe los tokens de todos sus topics.
- instance: lookup de la metadata de un token.
- doctor: diagnóstico de configuración.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Awaitable, Callable, Mapping

import typer
from rich.console import Console

from adapters.instance_api import InstanceApiClient
from adapters.json_exporter import dumps, export_json, instance_to_jsonable, outcomes_to_jsonable
from cli import doctor
from cli.ui_components import build_instance_panel, build_outcomes_table
from core.config import AppSettings
from core.domain.errors import MessagingError
from core.domain.results import Outcome
from core.logging_config import setup_logging
from core.services.topic_management import TopicManager

app = typer.Typer(no_args_is_help=True, help="Topic subscriptions and instance lookups for FCM registration tokens.")
app.add_typer(doctor.app, name="doctor")

_console = Console()


def build_api_client(settings: AppSettings) -> InstanceApiClient:
    return InstanceApiClient(settings)


def _run_with_manager(call: Callable[[TopicManager], Awaitable[Any]]) -> Any:
    settings = AppSettings()

    async def runner() -> Any:
        async with build_api_client(settings) as client:
            return await call(TopicManager(client))

    try:
        return asyncio.run(runner())
    except (MessagingError, ValueError) as exc:
        _console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(code=1) from exc


def _report(outcomes: Mapping[str, Outcome[Any]], *, title: str, as_json: bool, output: Path | None) -> None:
    payload = outcomes_to_jsonable(outcomes)
    if output is not None:
        export_json(payload=payload, output_path=output)
    if as_json:
        typer.echo(dumps(payload))
    else:
        _console.print(build_outcomes_table(outcomes, title=title))
    if any(not outcome.ok for outcome in outcomes.values()):
        raise typer.Exit(code=1)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log HTTP requests (DEBUG)."),
) -> None:
    settings = AppSettings()
    if verbose:
        settings = settings.model_copy(update={"log_level": "DEBUG"})
    setup_logging(settings)


@app.command()
def subscribe(
    topics: list[str] = typer.Argument(..., help="Topic names."),
    tokens: list[str] = typer.Option(..., "--token", "-t", help="Registration token (repeatable)."),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of a table."),
    output: Path | None = typer.Option(None, "--output", "-o", help="Also write the JSON result to a file."),
) -> None:
    """Subscribe the tokens to every topic."""

    outcomes = _run_with_manager(lambda m: m.subscribe_to_topics(topics, tokens))
    _report(outcomes, title="Subscribe", as_json=as_json, output=output)


@app.command()
def unsubscribe(
    topics: list[str] = typer.Argument(..., help="Topic names."),
    tokens: list[str] = typer.Option(..., "--token", "-t", help="Registration token (repeatable)."),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of a table."),
    output: Path | None = typer.Option(None, "--output", "-o", help="Also write the JSON result to a file."),
) -> None:
    """Unsubscribe the tokens from every topic."""

    outcomes = _run_with_manager(lambda m: m.unsubscribe_from_topics(topics, tokens))
    _report(outcomes, title="Unsubscribe", as_json=as_json, output=output)


@app.command(name="unsubscribe-all")
def unsubscribe_all(
    tokens: list[str] = typer.Option(..., "--token", "-t", help="Registration token (repeatable)."),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of a table."),
) -> None:
    """Unsubscribe the tokens from all the topics they are subscribed to."""

    outcomes = _run_with_manager(lambda m: m.unsubscribe_from_all_topics(tokens))
    if not outcomes and not as_json:
        _console.print("[yellow]No topic subscriptions found.[/yellow]")
        return
    _report(outcomes, title="Unsubscribe from all topics", as_json=as_json, output=None)


@app.command()
def instance(
    token: str = typer.Argument(..., help="Registration token."),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of a panel."),
) -> None:
    """Show the instance details of a registration token."""

    app_instance = _run_with_manager(lambda m: m.get_app_instance(token))
    if as_json:
        typer.echo(dumps(instance_to_jsonable(app_instance)))
    else:
        _console.print(build_instance_panel(app_instance))


def run() -> None:
    app()
