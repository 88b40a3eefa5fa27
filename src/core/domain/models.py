"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Nos da validación estricta y documentación autocontenida (Field) sin acoplar
  el Core a librerías de I/O.
- El descriptor de una llamada se valida una sola vez, antes de tocar la red.

Nota:
- Estos modelos describen *qué* se pide, no *cómo* se envía (eso es httpx,
  en `adapters.http_client`).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, Mapping, TypeVar, Union

from pydantic import BaseModel, Field, field_validator
from pydantic.config import ConfigDict

ResponseT = TypeVar("ResponseT")


class HttpMethod(str, Enum):
    GET = "get"
    POST = "post"
    PUT = "put"
    PATCH = "patch"
    DELETE = "delete"
    OPTIONS = "options"
    HEAD = "head"

    @classmethod
    def parse(cls, value: "str | HttpMethod") -> "HttpMethod":
        """Acepta `GET`, `get` o el propio enum."""

        if isinstance(value, cls):
            return value
        return cls(str(value).strip().lower())


class ParseMode(str, Enum):
    """Cómo transformar el cuerpo de una respuesta exitosa.

    - `json`: automático; JSON si el `content-type` lo declara, si no texto.
    - `text`: siempre `str`.
    - `blob`: `Blob` (bytes + content-type).
    - `binary`: `bytes` crudos.
    """

    JSON = "json"
    TEXT = "text"
    BLOB = "blob"
    BINARY = "binary"


class UrlEncodedForm(BaseModel):
    """Cuerpo `application/x-www-form-urlencoded` enviado tal cual."""

    model_config = ConfigDict(frozen=True)

    fields: dict[str, Union[str, list[str]]] = Field(
        default_factory=dict,
        description="Campos del formulario; listas = claves repetidas.",
    )


class FormFile(BaseModel):
    model_config = ConfigDict(frozen=True)

    filename: str = Field(..., min_length=1)
    content: bytes
    content_type: str = Field(default="application/octet-stream")


class MultipartForm(BaseModel):
    """Cuerpo `multipart/form-data` (campos de texto + archivos)."""

    model_config = ConfigDict(frozen=True)

    fields: dict[str, str] = Field(default_factory=dict)
    files: dict[str, FormFile] = Field(default_factory=dict)


class Blob(BaseModel):
    """Respuesta binaria con su `content-type` (equivalente a un Blob web)."""

    model_config = ConfigDict(frozen=True)

    content: bytes
    content_type: str | None = None

    @property
    def size(self) -> int:
        return len(self.content)


class RequestDescriptor(BaseModel):
    """Descripción completa de una llamada, construida y descartada por request."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    path: str = Field(
        ...,
        description="Template de ruta con placeholders `{param}` (p.ej. 'clients/{id}').",
    )
    method: HttpMethod = Field(default=HttpMethod.GET)
    path_params: Mapping[str, Any] | None = Field(
        default=None,
        description="Valores para cada placeholder del template.",
    )
    query: Mapping[str, Any] | None = Field(
        default=None,
        description="Query string; `None` se omite y las listas repiten la clave.",
    )
    body: Any = Field(
        default=None,
        description="Estructura (-> JSON) o cuerpo crudo (bytes/str/form).",
    )
    parse_as: ParseMode = Field(default=ParseMode.JSON)
    headers: Mapping[str, str] | None = Field(
        default=None,
        description="Headers por llamada; tienen prioridad sobre los defaults.",
    )
    timeout: float | None = Field(
        default=None,
        gt=0,
        description="Timeout específico de esta llamada (segundos).",
    )

    @field_validator("method", mode="before")
    @classmethod
    def normalize_method(cls, value: Any) -> HttpMethod:
        return HttpMethod.parse(value)


@dataclass(frozen=True)
class ApiOperation(Generic[ResponseT]):
    """Operación lógica tipada de un recurso.

    Cada módulo de recurso declara sus operaciones (path, método, tipo de
    respuesta) y el motor valida la respuesta con `response_type`.

    Ejemplo::

        GET_CLIENT = ApiOperation("clients/{id}", HttpMethod.GET, ClientOut)
        client = await api.call(GET_CLIENT, path_params={"id": "42"})
    """

    path: str
    method: HttpMethod
    response_type: Any = None
    parse_as: ParseMode = ParseMode.JSON
