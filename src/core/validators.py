"""Validación y formato de CNPJ.

Implementa el algoritmo de dígitos verificadores de la Receita Federal:
dos pasadas de suma ponderada módulo 11, con la regla "resto < 2 -> 0".

Funciones puras: no lanzan excepciones ante entradas inválidas.
"""

from __future__ import annotations

import re
from typing import Annotated

from pydantic import AfterValidator

CNPJ_LENGTH = 14

FIRST_WEIGHTS = (5, 4, 3, 2, 9, 8, 7, 6, 5, 4, 3, 2)
SECOND_WEIGHTS = (6, 5, 4, 3, 2, 9, 8, 7, 6, 5, 4, 3, 2)

_NON_DIGIT_RE = re.compile(r"[^0-9]")


def clean_tax_id(value: str) -> str:
    """Remove todo carácter que no sea dígito ASCII."""

    return _NON_DIGIT_RE.sub("", value)


def _check_digit(digits: str, weights: tuple[int, ...]) -> int:
    total = sum(int(d) * w for d, w in zip(digits, weights))
    remainder = total % 11
    return 0 if remainder < 2 else 11 - remainder


def compute_check_digits(base: str) -> str:
    """Calcula los dos dígitos verificadores para una base de 12 dígitos."""

    if len(base) != 12 or not base.isascii() or not base.isdigit():
        raise ValueError(f"Base de CNPJ inválida: {base!r}")
    first = _check_digit(base, FIRST_WEIGHTS)
    second = _check_digit(base + str(first), SECOND_WEIGHTS)
    return f"{first}{second}"


def is_valid_tax_id(value: str) -> bool:
    """Valida un CNPJ (con o sin puntuación).

    Rechaza longitudes distintas de 14, secuencias repetidas
    (`00000000000000`) y dígitos verificadores incorrectos.
    """

    if not isinstance(value, str):
        return False

    digits = clean_tax_id(value)
    if len(digits) != CNPJ_LENGTH:
        return False

    if digits == digits[0] * CNPJ_LENGTH:
        return False

    base = digits[:12]
    return digits == base + compute_check_digits(base)


def format_tax_id(value: str) -> str:
    """Formatea como `XX.XXX.XXX/XXXX-XX`; cadena vacía si no tiene 14 dígitos."""

    digits = clean_tax_id(value)
    if len(digits) != CNPJ_LENGTH:
        return ""
    return f"{digits[:2]}.{digits[2:5]}.{digits[5:8]}/{digits[8:12]}-{digits[12:]}"


def _validate_tax_id(value: str) -> str:
    if not is_valid_tax_id(value):
        raise ValueError("CNPJ inválido")
    return clean_tax_id(value)


# Para modelos de formulario: `cnpj: TaxId` valida y guarda solo dígitos.
TaxId = Annotated[str, AfterValidator(_validate_tax_id)]
