"""Contrato del motor de requests.

Por qué Protocol:
- Los módulos de recursos (clients, contracts, invoices...) dependen de este
  contrato estructural, no de httpx.
- En tests se puede sustituir por un stub sin herencia.
"""

from __future__ import annotations

import asyncio
from typing import Any, Mapping, Protocol, runtime_checkable

from core.domain.models import ApiOperation, HttpMethod, ParseMode, ResponseT


@runtime_checkable
class Requester(Protocol):
    """Contrato mínimo del motor.

    Reglas de diseño:
    - `request` es asíncrono: la llamada HTTP es el único punto de suspensión.
    - Exactamente un request físico por llamada; sin reintentos internos.
    - Falla con `ApiError` (o `ConfigurationError` antes de cualquier I/O).
    """

    async def request(
        self,
        path: str,
        method: HttpMethod | str = HttpMethod.GET,
        *,
        path_params: Mapping[str, Any] | None = None,
        query: Mapping[str, Any] | None = None,
        body: Any = None,
        parse_as: ParseMode | str = ParseMode.JSON,
        headers: Mapping[str, str] | None = None,
        timeout: float | None = None,
        cancel: asyncio.Event | None = None,
    ) -> Any:
        """Ejecuta la llamada y devuelve el cuerpo parseado."""

        ...

    async def call(
        self,
        operation: ApiOperation[ResponseT],
        *,
        path_params: Mapping[str, Any] | None = None,
        query: Mapping[str, Any] | None = None,
        body: Any = None,
        headers: Mapping[str, str] | None = None,
        timeout: float | None = None,
        cancel: asyncio.Event | None = None,
    ) -> ResponseT:
        """Ejecuta una operación tipada y valida la respuesta."""

        ...
