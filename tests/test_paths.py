# tests/test_paths.py
import pytest

from core.domain.errors import ConfigurationError
from core.paths import build_path, build_query, encode_query, join_url, placeholders


@pytest.mark.parametrize(
    "template, params, expected",
    [
        ("clients/{id}", {"id": "42"}, "clients/42"),
        ("clients/{clientId}/contracts/{id}", {"clientId": 7, "id": "c-1"}, "clients/7/contracts/c-1"),
        ("files/{name}", {"name": "a b/c?d"}, "files/a%20b%2Fc%3Fd"),
        ("search/{term}", {"term": "ação"}, "search/a%C3%A7%C3%A3o"),
        ("flags/{on}", {"on": True}, "flags/true"),
        ("clients", None, "clients"),
    ],
)
def test_build_path_substitutes_and_encodes(template, params, expected):
    result = build_path(template, params)

    assert result == expected
    assert "{" not in result and "}" not in result


def test_build_path_missing_param_names_key_and_template():
    with pytest.raises(ConfigurationError) as exc_info:
        build_path("clients/{clientId}/meetings/{meetingId}", {"clientId": "1"})

    message = str(exc_info.value)
    assert '"meetingId"' in message
    assert "clients/{clientId}/meetings/{meetingId}" in message


def test_build_path_without_mapping_fails_for_placeholders():
    with pytest.raises(ConfigurationError):
        build_path("clients/{id}")


def test_build_path_rejects_none_value():
    with pytest.raises(ConfigurationError):
        build_path("clients/{id}", {"id": None})


def test_placeholders_in_order():
    assert placeholders("a/{x}/b/{y}/{x}") == ["x", "y", "x"]


def test_query_serialization_is_order_stable():
    assert encode_query({"a": 1, "b": None, "c": ["x", "y"]}) == "a=1&c=x&c=y"


def test_query_drops_none_list_items_and_coerces_scalars():
    pairs = build_query({"tags": ["vip", None, "new"], "page": 2, "active": False, "ratio": 0.5})

    assert pairs == [
        ("tags", "vip"),
        ("tags", "new"),
        ("page", "2"),
        ("active", "false"),
        ("ratio", "0.5"),
    ]


def test_empty_query():
    assert build_query(None) == []
    assert build_query({}) == []
    assert encode_query({"a": None}) == ""


@pytest.mark.parametrize(
    "base, path, expected",
    [
        ("https://api.example.com", "clients", "https://api.example.com/clients"),
        ("https://api.example.com/", "/clients", "https://api.example.com/clients"),
        ("https://api.example.com/v1", "clients/1", "https://api.example.com/v1/clients/1"),
        ("https://api.example.com", "https://other.example.com/x", "https://other.example.com/x"),
        ("", "clients", "clients"),
    ],
)
def test_join_url(base, path, expected):
    assert join_url(base, path) == expected
