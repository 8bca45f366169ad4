"""Tests for the command line interface."""
import httpx
from typer.testing import CliRunner

from hostd_pin.cli.main import app

runner = CliRunner()


def test_prices_with_explicit_rate(write_config):
    path = write_config({'prices': {'storage': 1.0, 'ingress': 0.1, 'egress': 10}})

    result = runner.invoke(app, ["prices", "--config", path, "--rate", "0.004"])

    assert result.exit_code == 0, result.output
    assert "storage: 57870370370 H/byte/block" in result.output
    assert "ingress: 25000000000000 H/byte" in result.output
    assert "egress:  2500000000000000 H/byte" in result.output


def test_prices_rejects_zero_rate(write_config):
    path = write_config({})
    result = runner.invoke(app, ["prices", "--config", path, "--rate", "0"])
    assert result.exit_code == 1


def test_prices_rejects_malformed_rate(write_config):
    path = write_config({})
    result = runner.invoke(app, ["prices", "--config", path, "--rate", "cheap"])
    assert result.exit_code == 2


def test_run_with_missing_config():
    result = runner.invoke(app, ["run", "--config", "does-not-exist.yml"])
    assert result.exit_code == 2


class DummyResponse:
    def __init__(self, data, status_code=200):
        self._data = data
        self.status_code = status_code

    def json(self):
        return self._data

    def raise_for_status(self):
        if self.status_code >= 400:
            raise httpx.HTTPStatusError("error", request=None, response=None)


class DummyClient:
    def __init__(self, data, status_code=200):
        self._data = data
        self._status_code = status_code

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False

    async def get(self, url, params=None):
        return DummyResponse(self._data, status_code=self._status_code)


def test_quote_prints_rate(monkeypatch):
    client = DummyClient({"type": "success", "rates": {"usd": "0.004216"}})
    monkeypatch.setattr(httpx, "AsyncClient", lambda timeout=None: client)

    result = runner.invoke(app, ["quote", "--currency", "usd"])

    assert result.exit_code == 0, result.output
    assert "1 SC = 0.004216 USD" in result.output


def test_quote_fails_when_api_errors(monkeypatch):
    client = DummyClient({}, status_code=503)
    monkeypatch.setattr(httpx, "AsyncClient", lambda timeout=None: client)

    result = runner.invoke(app, ["quote"])

    assert result.exit_code == 1


def test_quote_fails_on_non_finite_rate(monkeypatch):
    client = DummyClient({"type": "success", "rates": {"usd": "NaN"}})
    monkeypatch.setattr(httpx, "AsyncClient", lambda timeout=None: client)

    result = runner.invoke(app, ["quote"])

    assert result.exit_code == 1


def test_prices_rejects_rate_that_overflows(write_config):
    path = write_config({})
    result = runner.invoke(app, ["prices", "--config", path, "--rate", "1E-999999"])
    assert result.exit_code == 1
