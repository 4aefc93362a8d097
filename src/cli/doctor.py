"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import httpx
import typer
from rich.console import Console
from rich.table import Table

from adapters.http_client import build_async_client
from core.config import AppSettings, get_user_env_file, write_user_env_vars

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_http(settings: AppSettings) -> tuple[bool, str]:
    try:
        async with build_async_client(settings) as client:
            response = await client.get("/")
        return True, f"HTTP {response.status_code}"
    except httpx.HTTPError as exc:
        return False, str(exc) or type(exc).__name__


@app.command()
def run() -> None:
    """Show the effective configuration and check API connectivity."""

    settings = AppSettings()

    table = Table(title="fcm-iid Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    table.add_row("Base URL", "OK", settings.base_url)
    if settings.access_token:
        table.add_row("Access token", "OK", "Bearer token configured")
    else:
        table.add_row("Access token", "MISSING", "Requests will be rejected with 401")
    table.add_row("HTTP timeout", "OK", f"{settings.http_timeout_seconds:g}s")
    table.add_row("User config", "OK", str(get_user_env_file()))

    # Connectivity (best-effort)
    ok_http, detail_http = asyncio.run(_check_http(settings))
    table.add_row("HTTP connectivity", "OK" if ok_http else "FAIL", detail_http)

    _console.print(table)


@app.command(name="setup")
def setup() -> None:
    """Store the API access token in the user config .env."""

    base_url = typer.prompt("API base URL", default=AppSettings().base_url, show_default=True).strip()
    access_token = typer.prompt("Access token", hide_input=True, confirmation_prompt=False).strip()

    if not base_url or not access_token:
        raise typer.BadParameter("base_url and access token are required")

    env_path = write_user_env_vars(
        {
            "FCM_IID_BASE_URL": base_url,
            "FCM_IID_ACCESS_TOKEN": access_token,
        }
    )

    _console.print(f"[green]Saved API config to:[/green] {env_path}")
