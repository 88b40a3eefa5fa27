# tests/test_cli.py
import json

import httpx
import pytest
from typer.testing import CliRunner

from adapters.http_client import ApiClient
from cli import main as cli_main

runner = CliRunner()


@pytest.fixture
def fake_backend(monkeypatch):
    """Redirige `create_requester` de la CLI a un MockTransport."""

    seen: list[httpx.Request] = []

    def install(handler):
        def _handle(request):
            seen.append(request)
            return handler(request)

        monkeypatch.setattr(
            cli_main,
            "create_requester",
            lambda config: ApiClient(config, transport=httpx.MockTransport(_handle)),
        )
        return seen

    monkeypatch.setenv("API_BASE_URL", "https://api.example.com")
    monkeypatch.setenv("APP_ENV", "test")
    return install


def test_cnpj_command_valid():
    result = runner.invoke(cli_main.app, ["cnpj", "11222333000181"])

    assert result.exit_code == 0
    assert "11.222.333/0001-81" in result.output
    assert "sim" in result.output


def test_cnpj_command_with_invalid_value_exits_1():
    result = runner.invoke(cli_main.app, ["cnpj", "11222333000181", "00000000000000"])

    assert result.exit_code == 1
    assert "não" in result.output


def test_request_command_prints_json(fake_backend):
    seen = fake_backend(lambda r: httpx.Response(200, json={"id": "42", "companyName": "Acme"}))

    result = runner.invoke(
        cli_main.app,
        ["request", "clients/{id}", "--param", "id=42", "--query", "tags=a", "--query", "tags=b"],
    )

    assert result.exit_code == 0, result.output
    assert "Acme" in result.output
    assert str(seen[0].url) == "https://api.example.com/clients/42?tags=a&tags=b"


def test_request_command_sends_json_body(fake_backend):
    seen = fake_backend(lambda r: httpx.Response(201, json={"id": "1"}))

    result = runner.invoke(
        cli_main.app,
        ["request", "clients", "-X", "post", "--json", '{"companyName": "Acme"}'],
    )

    assert result.exit_code == 0, result.output
    assert seen[0].method == "POST"
    assert json.loads(seen[0].content) == {"companyName": "Acme"}


def test_request_command_shows_friendly_error(fake_backend):
    fake_backend(lambda r: httpx.Response(404))

    result = runner.invoke(cli_main.app, ["request", "clients/{id}", "--param", "id=9"])

    assert result.exit_code == 1
    assert "O recurso solicitado não foi encontrado." in result.output


def test_request_command_missing_param_exits_2(fake_backend):
    seen = fake_backend(lambda r: httpx.Response(200))

    result = runner.invoke(cli_main.app, ["request", "clients/{id}"])

    assert result.exit_code == 2
    assert seen == []


def test_request_command_saves_output(fake_backend, tmp_path):
    fake_backend(lambda r: httpx.Response(200, json={"total": 3}))
    out = tmp_path / "reports" / "dashboard.json"

    result = runner.invoke(cli_main.app, ["request", "dashboard/summary", "--output", str(out)])

    assert result.exit_code == 0, result.output
    assert json.loads(out.read_text(encoding="utf-8")) == {"total": 3}
