"""Mensajes para el usuario derivados de errores HTTP.

Centraliza el mapping status -> frase y la extracción de mensajes del
payload, para que ningún módulo de recurso repita ese boilerplate.

Prioridad del mensaje:
1. Campo `message` / `error` / `detail` / `title` del payload JSON.
2. Payload de texto crudo.
3. Mapping por status (400, 401, 403, 404, 422, 429).
4. Frase genérica de inestabilidad para 5xx.
5. Frase genérica de fallback.
Sin status (no hubo respuesta): frase de "servidor inalcanzable".
"""

from __future__ import annotations

from typing import Any

from core.domain.errors import ApiError
from core.domain.language import Language

MESSAGE_KEYS = ("message", "error", "detail", "title")

FRIENDLY_MESSAGES: dict[Language, dict[int, str]] = {
    Language.PORTUGUESE: {
        400: "Verifique os dados informados e tente novamente.",
        401: "Sua sessão expirou. Faça login novamente.",
        403: "Você não tem permissão para realizar esta ação.",
        404: "O recurso solicitado não foi encontrado.",
        422: "Existem dados inválidos. Revise o formulário e tente novamente.",
        429: "Muitas requisições em sequência. Aguarde alguns instantes.",
    },
    Language.ENGLISH: {
        400: "Check the information provided and try again.",
        401: "Your session has expired. Please sign in again.",
        403: "You do not have permission to perform this action.",
        404: "The requested resource was not found.",
        422: "Some data is invalid. Review the form and try again.",
        429: "Too many requests in a row. Please wait a moment.",
    },
}

SERVER_ERROR_MESSAGES: dict[Language, str] = {
    Language.PORTUGUESE: "Estamos enfrentando instabilidades. Tente novamente em instantes.",
    Language.ENGLISH: "We are experiencing instability. Please try again shortly.",
}

FALLBACK_MESSAGES: dict[Language, str] = {
    Language.PORTUGUESE: "Não foi possível concluir sua solicitação.",
    Language.ENGLISH: "Your request could not be completed.",
}

UNREACHABLE_MESSAGES: dict[Language, str] = {
    Language.PORTUGUESE: "Não foi possível se comunicar com o servidor.",
    Language.ENGLISH: "Could not reach the server.",
}

CANCELLED_MESSAGES: dict[Language, str] = {
    Language.PORTUGUESE: "A requisição foi cancelada.",
    Language.ENGLISH: "The request was cancelled.",
}


def unreachable_message(language: Language = Language.PORTUGUESE) -> str:
    return UNREACHABLE_MESSAGES[language]


def cancelled_message(language: Language = Language.PORTUGUESE) -> str:
    return CANCELLED_MESSAGES[language]


def extract_message(payload: Any) -> str | None:
    """Busca un mensaje legible dentro del payload de error."""

    if not payload:
        return None

    if isinstance(payload, str):
        return payload if payload.strip() else None

    if isinstance(payload, dict):
        for key in MESSAGE_KEYS:
            value = payload.get(key)
            if isinstance(value, str) and value.strip():
                return value

    return None


def build_friendly_message(
    status: int | None = None,
    extracted: str | None = None,
    language: Language = Language.PORTUGUESE,
) -> str:
    """Deriva el mensaje final; nunca devuelve una cadena vacía."""

    if extracted:
        return extracted

    if not status:
        return UNREACHABLE_MESSAGES[language]

    mapped = FRIENDLY_MESSAGES[language].get(status)
    if mapped:
        return mapped

    if status >= 500:
        return SERVER_ERROR_MESSAGES[language]

    return FALLBACK_MESSAGES[language]


def is_api_error(error: object) -> bool:
    return isinstance(error, ApiError)


def get_api_error_message(
    error: object,
    fallback: str | None = None,
    language: Language = Language.PORTUGUESE,
) -> str:
    """Mensaje a mostrar para cualquier error capturado por la UI/CLI."""

    if isinstance(error, ApiError) and error.message:
        return error.message

    if isinstance(error, BaseException) and str(error):
        return str(error)

    if isinstance(error, str) and error:
        return error

    return fallback or FALLBACK_MESSAGES[language]


def get_api_error_payload(error: object) -> Any:
    return error.payload if isinstance(error, ApiError) else None
