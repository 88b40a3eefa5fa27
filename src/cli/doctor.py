"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from adapters.http_client import create_requester
from core.config import AppSettings, ClientConfig, Environment, write_user_env_vars
from core.domain.errors import ApiError, ConfigurationError, HttpStatusError

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_http(config: ClientConfig) -> tuple[bool, str]:
    """Cualquier respuesta HTTP cuenta como conectividad; solo falla sin respuesta."""

    try:
        async with create_requester(config) as api:
            await api.request(config.base_url, "get", parse_as="text")
    except HttpStatusError as exc:
        return True, f"HTTP {exc.status}"
    except ApiError as exc:
        return False, exc.message
    except ConfigurationError as exc:
        return False, str(exc)
    return True, "HTTP 2xx"


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()
    config = ClientConfig.from_settings(settings)

    table = Table(title="CRM-CORE Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    if config.base_url:
        table.add_row("API base URL", "OK", config.base_url)
    else:
        table.add_row("API base URL", "MISSING", "Set API_BASE_URL or run `doctor setup`")
    table.add_row("Timeout", "OK", f"{config.timeout_seconds:g}s")
    table.add_row(
        "Environment",
        "OK",
        f"{config.environment.value} ({'no debug logs' if config.is_production else 'debug logs on'})",
    )
    table.add_row("Language", "OK", config.language.label())

    # Conectividad (best-effort)
    ok_http = False
    if config.base_url:
        ok_http, detail_http = asyncio.run(_check_http(config))
        table.add_row("HTTP connectivity", "OK" if ok_http else "FAIL", detail_http)

    _console.print(table)

    if not ok_http:
        raise typer.Exit(code=1)


@app.command(name="setup")
def setup() -> None:
    """Interactive API setup (stores config in the user config .env)."""

    settings = AppSettings()

    base_url = typer.prompt("API base URL", default=settings.api_base_url, show_default=True).strip()
    timeout = typer.prompt("Timeout (seconds)", default=settings.timeout_seconds, type=float)
    environment = typer.prompt(
        "Environment",
        default=settings.environment.value,
        show_default=True,
    ).strip().lower()

    if not base_url.startswith(("http://", "https://")):
        raise typer.BadParameter("base URL must start with http:// or https://")
    if timeout <= 0:
        raise typer.BadParameter("timeout must be greater than zero")
    try:
        Environment(environment)
    except ValueError as exc:
        raise typer.BadParameter(
            f"environment must be one of: {', '.join(e.value for e in Environment)}"
        ) from exc

    env_path = write_user_env_vars(
        {
            "API_BASE_URL": base_url.rstrip("/"),
            "API_TIMEOUT_SECONDS": f"{timeout:g}",
            "APP_ENV": environment,
        }
    )

    _console.print(f"[green]Saved API config to:[/green] {env_path}")
