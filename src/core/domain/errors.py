"""Taxonomía de errores del motor de requests.

Por qué una jerarquía propia:
- Los consumidores (módulos de recursos, CLI) capturan `ApiError` sin
  conocer httpx.
- Cada error lleva un `message` listo para el usuario: el tono es
  consistente sin importar qué recurso falló.

Jerarquía:
- `ConfigurationError`: error del programador (parámetro de ruta ausente).
  No deriva de `ApiError` porque no es un fallo de comunicación.
- `ApiError`
  - `NetworkError`: no hubo respuesta utilizable (DNS, conexión, timeout,
    bucle de redirects, cuerpo con encoding corrupto).
  - `RequestCancelledError`: la llamada fue abortada por el caller.
  - `HttpStatusError`: respuesta no-2xx.
"""

from __future__ import annotations

from typing import Any


class ConfigurationError(ValueError):
    """Uso incorrecto del motor detectado antes de cualquier I/O."""


class ApiError(Exception):
    """Error normalizado: status (si hubo respuesta), payload crudo y mensaje."""

    def __init__(
        self,
        message: str,
        *,
        status: int | None = None,
        payload: Any = None,
        method: str | None = None,
        url: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.payload = payload
        self.method = method
        self.url = url

    @property
    def friendly_message(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(status={self.status!r}, "
            f"message={self.message!r}, url={self.url!r})"
        )


class NetworkError(ApiError):
    """No se recibió respuesta del servidor."""


class RequestCancelledError(ApiError):
    """La llamada se canceló antes de completarse."""


class HttpStatusError(ApiError):
    """El servidor respondió con un status fuera de 2xx."""
