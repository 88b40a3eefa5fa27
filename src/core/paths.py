"""Construcción de rutas y query strings (funciones puras).

Separado del adaptador HTTP para poder verificar la sustitución de
parámetros sin red: un `ConfigurationError` aquí garantiza que no se
emitió ningún request.
"""

from __future__ import annotations

import re
from typing import Any, Mapping
from urllib.parse import quote, urlencode

from core.domain.errors import ConfigurationError

_PLACEHOLDER_RE = re.compile(r"\{(.*?)\}")

# Mismo conjunto que encodeURIComponent deja sin escapar.
_URI_COMPONENT_SAFE = "-_.!~*'()"


def _to_text(value: Any) -> str:
    # Coerción estilo JS: True -> "true".
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def placeholders(template: str) -> list[str]:
    """Nombres de los placeholders de un template, en orden de aparición."""

    return _PLACEHOLDER_RE.findall(template)


def build_path(template: str, params: Mapping[str, Any] | None = None) -> str:
    """Sustituye `{name}` por el valor percent-encoded de `params[name]`.

    Raises:
        ConfigurationError: si falta un placeholder o su valor es `None`.
    """

    params = params or {}

    def _replace(match: re.Match[str]) -> str:
        key = match.group(1)
        if key not in params:
            raise ConfigurationError(
                f'Parâmetro de rota "{key}" ausente para o path {template}'
            )
        value = params[key]
        if value is None:
            raise ConfigurationError(
                f'Valor inválido para o parâmetro de rota "{key}" no path {template}'
            )
        return quote(_to_text(value), safe=_URI_COMPONENT_SAFE)

    return _PLACEHOLDER_RE.sub(_replace, template)


def build_query(query: Mapping[str, Any] | None) -> list[tuple[str, str]]:
    """Serializa un mapping como lista ordenada de pares `(clave, valor)`.

    - `None` (escalar o elemento de lista) se omite.
    - Listas/tuplas se expanden en claves repetidas, respetando el orden.
    """

    if not query:
        return []

    pairs: list[tuple[str, str]] = []
    for key, raw_value in query.items():
        if raw_value is None:
            continue
        if isinstance(raw_value, (list, tuple)):
            for item in raw_value:
                if item is not None:
                    pairs.append((key, _to_text(item)))
            continue
        pairs.append((key, _to_text(raw_value)))
    return pairs


def encode_query(query: Mapping[str, Any] | None) -> str:
    """Query string lista para la URL (`a=1&c=x&c=y`)."""

    return urlencode(build_query(query))


def join_url(base_url: str, path: str) -> str:
    """Une base URL (sin barras finales) y path relativo.

    Un path absoluto (`http(s)://...`) se respeta tal cual.
    """

    if path.startswith(("http://", "https://")):
        return path
    base = (base_url or "").rstrip("/")
    if not base:
        return path
    return f"{base}/{path.lstrip('/')}"
