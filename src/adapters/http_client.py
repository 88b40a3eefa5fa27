"""Motor de requests REST sobre httpx.

Por qué un wrapper:
- Estandariza timeouts, headers, logging y normalización de errores para
  todos los módulos de recursos (clients, contracts, invoices...).
- Facilita testeo: se puede inyectar un `httpx.AsyncClient` con
  `MockTransport` y contar las llamadas.

Reglas:
- Un request físico por llamada, sin reintentos (la política de reintentos
  es del caller).
- Errores de configuración (`ConfigurationError`) se lanzan antes de tocar
  la red.
- Toda respuesta no-2xx se convierte en `HttpStatusError`; la ausencia de
  respuesta en `NetworkError`; la cancelación explícita en
  `RequestCancelledError`.
"""

from __future__ import annotations

import asyncio
import logging
from functools import lru_cache
from typing import Any, Mapping

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError
from pydantic_core import to_jsonable_python

from core.config import ClientConfig
from core.domain.errors import (
    ConfigurationError,
    HttpStatusError,
    NetworkError,
    RequestCancelledError,
)
from core.domain.models import (
    ApiOperation,
    Blob,
    HttpMethod,
    MultipartForm,
    ParseMode,
    RequestDescriptor,
    ResponseT,
    UrlEncodedForm,
)
from core.messages import (
    build_friendly_message,
    cancelled_message,
    extract_message,
    unreachable_message,
)
from core.paths import build_path, build_query, join_url

logger = logging.getLogger(__name__)

NO_BODY_STATUSES = frozenset({204, 205, 304})


def build_async_client(
    config: ClientConfig | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Crea un `httpx.AsyncClient` con los defaults de `config`.

    Por qué un builder:
    - Centraliza timeouts/headers para que todos los recursos se comporten igual.
    - `transport` permite inyectar `httpx.MockTransport` en tests.
    """

    config = config or ClientConfig.from_settings()
    headers: dict[str, str] = dict(config.default_headers)
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        timeout=httpx.Timeout(config.timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )


def has_body(response: httpx.Response) -> bool:
    if response.status_code in NO_BODY_STATUSES:
        return False
    if response.headers.get("content-length") == "0":
        return False
    if response.request.method == "HEAD":
        return False
    return True


def read_error_payload(response: httpx.Response) -> Any:
    """Extrae el payload de un error: JSON -> texto -> None, sin lanzar."""

    try:
        return response.json()
    except ValueError:
        pass
    try:
        return response.text
    except (UnicodeDecodeError, LookupError):
        return None


def parse_response(response: httpx.Response, parse_as: ParseMode) -> Any:
    """Transforma el cuerpo de una respuesta 2xx según `parse_as`."""

    if not has_body(response):
        return None

    if parse_as is ParseMode.TEXT:
        return response.text
    if parse_as is ParseMode.BLOB:
        return Blob(content=response.content, content_type=response.headers.get("content-type"))
    if parse_as is ParseMode.BINARY:
        return response.content

    content_type = response.headers.get("content-type", "")
    if "application/json" in content_type:
        try:
            return response.json()
        except ValueError:
            logger.warning("[API] JSON inválido en %s; devolviendo texto", response.request.url)
    return response.text


def _body_kwargs(body: Any) -> dict[str, Any]:
    if body is None:
        return {}
    if isinstance(body, (bytes, bytearray, memoryview)):
        return {"content": bytes(body)}
    if isinstance(body, str):
        return {"content": body}
    if isinstance(body, UrlEncodedForm):
        return {"data": dict(body.fields)}
    if isinstance(body, MultipartForm):
        # httpx solo codifica multipart si `files` no está vacío.
        files: list[tuple[str, Any]] = [
            (name, (None, value)) for name, value in body.fields.items()
        ]
        files.extend(
            (name, (f.filename, f.content, f.content_type)) for name, f in body.files.items()
        )
        return {"files": files}
    if isinstance(body, BaseModel):
        return {"json": body.model_dump(mode="json", by_alias=True)}
    return {"json": to_jsonable_python(body, by_alias=True)}


@lru_cache(maxsize=128)
def _type_adapter(response_type: Any) -> TypeAdapter[Any]:
    return TypeAdapter(response_type)


class ApiClient:
    """Motor de requests tipado.

    Uso::

        async with create_requester(ClientConfig(base_url="https://api.example.com")) as api:
            client = await api.request("clients/{id}", "get", path_params={"id": "42"})

    Cada instancia captura su `ClientConfig`; varias instancias pueden
    convivir sin interferencia. Un `httpx.AsyncClient` externo nunca se
    cierra desde aquí.
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        client: httpx.AsyncClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config or ClientConfig.from_settings()
        self._owns_client = client is None
        self._client = client or build_async_client(self._config, transport=transport)

    @property
    def config(self) -> ClientConfig:
        return self._config

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def _log(self, level: int, msg: str, *args: object) -> None:
        if self._config.is_production:
            return
        logger.log(level, msg, *args)

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
        """Ejecuta una llamada y devuelve el cuerpo parseado (o `None`)."""

        try:
            descriptor = RequestDescriptor(
                path=path,
                method=method,
                path_params=path_params,
                query=query,
                body=body,
                parse_as=parse_as,
                headers=headers,
                timeout=timeout,
            )
        except ValidationError as exc:
            raise ConfigurationError(f"Request inválido para {path}: {exc}") from exc
        return await self.send(descriptor, cancel=cancel)

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
        """Ejecuta una `ApiOperation` y valida la respuesta con su `response_type`."""

        data = await self.request(
            operation.path,
            operation.method,
            path_params=path_params,
            query=query,
            body=body,
            parse_as=operation.parse_as,
            headers=headers,
            timeout=timeout,
            cancel=cancel,
        )
        if operation.response_type is None:
            return data
        return _type_adapter(operation.response_type).validate_python(data)

    def build_request(self, descriptor: RequestDescriptor) -> httpx.Request:
        """Construye el `httpx.Request` sin enviarlo."""

        resolved = build_path(descriptor.path, descriptor.path_params)
        url = join_url(self._config.base_url, resolved)
        if not url.startswith(("http://", "https://")):
            raise ConfigurationError(
                f"URL base não configurada para o path {descriptor.path} (defina API_BASE_URL)"
            )

        merged_headers = {**self._config.default_headers, **(descriptor.headers or {})}
        params = build_query(descriptor.query)
        timeout = descriptor.timeout or self._config.timeout_seconds

        return self._client.build_request(
            descriptor.method.value.upper(),
            url,
            params=params or None,
            headers=merged_headers,
            timeout=httpx.Timeout(timeout),
            **_body_kwargs(descriptor.body),
        )

    async def send(
        self,
        descriptor: RequestDescriptor,
        *,
        cancel: asyncio.Event | None = None,
    ) -> Any:
        request = self.build_request(descriptor)
        method = request.method
        url = str(request.url)
        language = self._config.language

        self._log(logging.DEBUG, "[API] %s %s", method, url)

        timeout = descriptor.timeout or self._config.timeout_seconds
        try:
            response = await self._dispatch(request, cancel=cancel, timeout=timeout)
        except _Cancelled as exc:
            self._log(logging.WARNING, "[API] cancelado %s %s", method, url)
            raise RequestCancelledError(
                cancelled_message(language), method=method, url=url
            ) from exc
        except (httpx.RequestError, asyncio.TimeoutError) as exc:
            self._log(logging.ERROR, "[API] sin respuesta %s %s: %r", method, url, exc)
            raise NetworkError(
                unreachable_message(language), method=method, url=url
            ) from exc

        self._log(logging.DEBUG, "[API] %s %s %s", response.status_code, method, url)

        if not response.is_success and response.status_code not in NO_BODY_STATUSES:
            payload = read_error_payload(response)
            message = build_friendly_message(
                response.status_code, extract_message(payload), language
            )
            self._log(logging.ERROR, "[API] %s %s %r", response.status_code, url, payload)
            raise HttpStatusError(
                message,
                status=response.status_code,
                payload=payload,
                method=method,
                url=url,
            )

        return parse_response(response, descriptor.parse_as)

    async def _dispatch(
        self,
        request: httpx.Request,
        *,
        cancel: asyncio.Event | None,
        timeout: float,
    ) -> httpx.Response:
        if cancel is not None and cancel.is_set():
            raise _Cancelled()

        sending = asyncio.ensure_future(self._client.send(request))
        waiters: set[asyncio.Future[Any]] = {sending}
        watcher: asyncio.Future[Any] | None = None
        if cancel is not None:
            watcher = asyncio.ensure_future(cancel.wait())
            waiters.add(watcher)

        try:
            done, _ = await asyncio.wait(
                waiters, timeout=timeout, return_when=asyncio.FIRST_COMPLETED
            )
        finally:
            pending = [f for f in waiters if not f.done()]
            for fut in pending:
                fut.cancel()
            if pending:
                await asyncio.wait(pending)

        if sending in done:
            return sending.result()
        if watcher is not None and watcher in done:
            raise _Cancelled()
        raise asyncio.TimeoutError()


class _Cancelled(Exception):
    """Señal interna: el evento `cancel` se activó antes de la respuesta."""


def create_requester(
    config: ClientConfig | None = None,
    *,
    client: httpx.AsyncClient | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> ApiClient:
    """Factory: devuelve un motor nuevo e independiente (sin singleton global)."""

    return ApiClient(config, client=client, transport=transport)
