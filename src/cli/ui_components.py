"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles en múltiples comandos.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic_core import to_jsonable_python
from rich.align import Align
from rich.console import Console, RenderableType
from rich.json import JSON
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.errors import ApiError, HttpStatusError
from core.domain.models import Blob
from core.messages import get_api_error_message, get_api_error_payload


def print_banner(console: Console) -> None:
    """Imprime el banner de bienvenida.

    Por qué aquí:
    - Evita dependencias circulares (main <-> doctor).
    - Permite desactivar banner en modos no interactivos (JSON/pipelines).
    """

    title = Text("CRM-CORE", style="bold cyan")
    subtitle = Text("Cliente REST • Validação de CNPJ", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_tax_id_table() -> Table:
    table = Table(title="CNPJ")
    table.add_column("Entrada", style="white")
    table.add_column("Dígitos", style="cyan", no_wrap=True)
    table.add_column("Formatado", style="magenta", no_wrap=True)
    table.add_column("Válido", style="green")
    return table


def render_payload(payload: Any) -> RenderableType:
    """Representación Rich de una respuesta parseada."""

    if payload is None:
        return Text("(sem conteúdo)", style="dim")
    if isinstance(payload, Blob):
        return Text(f"<blob {payload.content_type or '?'} · {payload.size} bytes>", style="dim")
    if isinstance(payload, (bytes, bytearray)):
        return Text(f"<{len(payload)} bytes>", style="dim")
    if isinstance(payload, str):
        return Text(payload)
    return JSON(json.dumps(to_jsonable_python(payload), ensure_ascii=False))


def build_error_panel(error: BaseException, *, show_payload: bool = False) -> Panel:
    """Panel con el mensaje amigable de un error (y el payload fuera de producción)."""

    body = Text()
    body.append(get_api_error_message(error) + "\n", style="bold")

    if isinstance(error, ApiError):
        if error.status is not None:
            body.append(f"\nStatus: {error.status}", style="dim")
        if error.method and error.url:
            body.append(f"\n{error.method} {error.url}", style="dim")

    payload = get_api_error_payload(error)
    if show_payload and payload:
        body.append("\n\nPayload:\n", style="bold")
        body.append(
            payload if isinstance(payload, str) else json.dumps(payload, ensure_ascii=False, indent=2)
        )

    title = "Erro HTTP" if isinstance(error, HttpStatusError) else "Erro"
    return Panel(body, title=Text(title, style="bold red"), border_style="red")
