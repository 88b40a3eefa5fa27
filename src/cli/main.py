"""CLI principal (Typer).

Comandos:
- `request`: ejecuta una llamada al backend con el motor tipado.
- `cnpj`: valida/formatea CNPJs.
- `doctor`: diagnóstico de configuración.
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from adapters.http_client import create_requester
from adapters.json_exporter import export_response
from cli import doctor
from cli.ui_components import build_error_panel, build_tax_id_table, print_banner, render_payload
from core.config import AppSettings, ClientConfig
from core.domain.errors import ApiError, ConfigurationError
from core.domain.models import HttpMethod, ParseMode
from core.validators import clean_tax_id, format_tax_id, is_valid_tax_id

app = typer.Typer(no_args_is_help=True, help="CRM REST client and CNPJ utilities.")
app.add_typer(doctor.app, name="doctor")

_console = Console()


def _configure_logging(verbose: bool) -> None:
    if not verbose:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _parse_pairs(values: list[str] | None, option: str) -> dict[str, Any]:
    """Convierte `k=v` repetidos en mapping; claves repetidas -> lista."""

    out: dict[str, Any] = {}
    for raw in values or []:
        if "=" not in raw:
            raise typer.BadParameter(f"expected key=value, got {raw!r}", param_hint=option)
        key, value = raw.split("=", 1)
        key = key.strip()
        if not key:
            raise typer.BadParameter(f"empty key in {raw!r}", param_hint=option)
        if key in out:
            current = out[key]
            out[key] = [*current, value] if isinstance(current, list) else [current, value]
        else:
            out[key] = value
    return out


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log requests/responses."),
    banner: bool = typer.Option(False, "--banner", help="Show the welcome banner."),
) -> None:
    _configure_logging(verbose)
    if banner:
        print_banner(_console)


@app.command()
def request(
    path: str = typer.Argument(..., help="Path template, e.g. 'clients/{id}'."),
    method: HttpMethod = typer.Option(HttpMethod.GET, "--method", "-X", case_sensitive=False),
    param: Optional[list[str]] = typer.Option(None, "--param", "-p", help="Path param key=value."),
    query: Optional[list[str]] = typer.Option(None, "--query", "-q", help="Query key=value (repeatable)."),
    header: Optional[list[str]] = typer.Option(None, "--header", "-H", help="Header key=value."),
    body: Optional[str] = typer.Option(None, "--json", help="JSON request body."),
    parse_as: ParseMode = typer.Option(ParseMode.JSON, "--parse-as", case_sensitive=False),
    base_url: Optional[str] = typer.Option(None, "--base-url", help="Override API_BASE_URL."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Save the response to a file."),
) -> None:
    """Perform one request against the configured backend."""

    settings = AppSettings()
    config = ClientConfig.from_settings(settings)
    if base_url:
        config = config.model_copy(update={"base_url": base_url.rstrip("/")})

    json_body: Any = None
    if body is not None:
        try:
            json_body = json.loads(body)
        except json.JSONDecodeError as exc:
            raise typer.BadParameter(f"invalid JSON: {exc}", param_hint="--json") from exc

    headers = {k: str(v) for k, v in _parse_pairs(header, "--header").items()}

    async def _run() -> Any:
        async with create_requester(config) as api:
            return await api.request(
                path,
                method,
                path_params=_parse_pairs(param, "--param"),
                query=_parse_pairs(query, "--query"),
                body=json_body,
                parse_as=parse_as,
                headers=headers or None,
            )

    try:
        payload = asyncio.run(_run())
    except ConfigurationError as exc:
        _console.print(build_error_panel(exc))
        raise typer.Exit(code=2) from exc
    except ApiError as exc:
        _console.print(build_error_panel(exc, show_payload=not config.is_production))
        raise typer.Exit(code=1) from exc

    if output is not None:
        export_response(payload=payload, output_path=output)
        _console.print(f"[green]Saved response to:[/green] {output}")
        return
    _console.print(render_payload(payload))


@app.command()
def cnpj(values: list[str] = typer.Argument(..., help="One or more CNPJs.")) -> None:
    """Validate and format CNPJs (exit code 1 if any is invalid)."""

    table = build_tax_id_table()
    all_valid = True
    for value in values:
        valid = is_valid_tax_id(value)
        all_valid = all_valid and valid
        table.add_row(
            value,
            clean_tax_id(value),
            format_tax_id(value) or "-",
            "[green]sim[/green]" if valid else "[red]não[/red]",
        )
    _console.print(table)
    if not all_valid:
        raise typer.Exit(code=1)


def run() -> None:
    app()


if __name__ == "__main__":
    run()
