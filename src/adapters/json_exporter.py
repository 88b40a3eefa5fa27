"""Exportación de respuestas a disco.

Por qué JSON:
- Interoperabilidad con otras herramientas y pipelines (jq, planillas).
- Permite guardar la respuesta (o el payload de un error) para auditoría.

Respuestas binarias (`bytes` / `Blob`) se escriben tal cual.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic_core import to_jsonable_python

from core.domain.models import Blob


def export_json(*, payload: Any, output_path: Path) -> Path:
    """Exporta `payload` a JSON UTF-8 con formato estable."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(
        json.dumps(to_jsonable_python(payload), ensure_ascii=False, indent=2, sort_keys=True) + "\n",
        encoding="utf-8",
    )
    return output_path


def export_response(*, payload: Any, output_path: Path) -> Path:
    """Guarda una respuesta parseada según su tipo."""

    if isinstance(payload, Blob):
        payload = payload.content
    if isinstance(payload, (bytes, bytearray)):
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_bytes(bytes(payload))
        return output_path
    if isinstance(payload, str):
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(payload, encoding="utf-8")
        return output_path
    return export_json(payload=payload, output_path=output_path)
