# tests/test_validators.py
import pytest
from pydantic import BaseModel, ValidationError

from core.validators import (
    TaxId,
    clean_tax_id,
    compute_check_digits,
    format_tax_id,
    is_valid_tax_id,
)


@pytest.mark.parametrize(
    "value",
    [
        "11222333000181",
        "11.222.333/0001-81",
        "34.926.770/0420-03",
        " 34926770042003 ",
    ],
)
def test_valid_cnpjs(value):
    assert is_valid_tax_id(value) is True


@pytest.mark.parametrize(
    "value",
    [
        "11222333000182",  # último dígito alterado
        "11222333000191",  # primeiro dígito verificador alterado
        "00000000000000",
        "11111111111111",
        "1122233300018",
        "112223330001811",
        "",
        "abc",
        "１１２２２３３３０００１８１",  # dígitos full-width não contam
    ],
)
def test_invalid_cnpjs(value):
    assert is_valid_tax_id(value) is False


def test_non_string_input_is_invalid():
    assert is_valid_tax_id(None) is False  # type: ignore[arg-type]
    assert is_valid_tax_id(11222333000181) is False  # type: ignore[arg-type]


def test_validator_is_pure():
    value = "11.222.333/0001-81"
    assert is_valid_tax_id(value) == is_valid_tax_id(value)
    assert value == "11.222.333/0001-81"


def test_clean_tax_id():
    assert clean_tax_id("34.926.770/0420-03") == "34926770042003"
    assert clean_tax_id("") == ""
    assert clean_tax_id("sem dígitos") == ""


def test_compute_check_digits_including_zero_rule():
    assert compute_check_digits("112223330001") == "81"
    # resto 1 na primeira passada -> dígito 0
    assert compute_check_digits("349267700420") == "03"


def test_compute_check_digits_rejects_bad_base():
    with pytest.raises(ValueError):
        compute_check_digits("123")


def test_format_tax_id():
    assert format_tax_id("11222333000181") == "11.222.333/0001-81"
    assert format_tax_id("11.222.333/0001-81") == "11.222.333/0001-81"
    assert format_tax_id("123") == ""


class ClientForm(BaseModel):
    company_name: str
    cnpj: TaxId


def test_tax_id_field_cleans_valid_value():
    form = ClientForm(company_name="Acme", cnpj="34.926.770/0420-03")
    assert form.cnpj == "34926770042003"


def test_tax_id_field_rejects_invalid_value():
    with pytest.raises(ValidationError) as exc_info:
        ClientForm(company_name="Acme", cnpj="11.222.333/0001-82")

    assert "CNPJ inválido" in str(exc_info.value)
