"""Pytest configuration and fixtures."""
import pytest
from decimal import Decimal
from pathlib import Path
import tempfile
import yaml

from hostd_pin.hosts.client import Host, HostUpdater
from hostd_pin.providers.base import BaseQuoteProvider
from hostd_pin.utils.errors import EndpointUpdateFailure, QuoteUnavailable


class FakeProvider(BaseQuoteProvider):
    """Quote provider that replays a fixed sequence of rates.

    Entries that are exceptions are raised instead of returned.
    """

    NAME = "fake"

    def __init__(self, rates=()):
        self.rates = list(rates)
        self.calls = 0

    async def get_quote(self, currency: str) -> Decimal:
        self.calls += 1
        if not self.rates:
            raise QuoteUnavailable("no more rates")
        value = self.rates.pop(0)
        if isinstance(value, Exception):
            raise value
        return Decimal(str(value))


class FakeUpdater(HostUpdater):
    """Host updater that records calls and fails for selected addresses."""

    def __init__(self, failing=()):
        self.failing = set(failing)
        self.calls = []

    async def push_price_settings(self, host, prices) -> None:
        self.calls.append((host.address, prices))
        if host.address in self.failing:
            raise EndpointUpdateFailure(host.address, "connection refused")


@pytest.fixture
def fake_provider():
    return FakeProvider()


@pytest.fixture
def fake_updater():
    return FakeUpdater()


@pytest.fixture
def make_updater():
    """Build a FakeUpdater that fails for the given addresses."""
    return FakeUpdater


@pytest.fixture
def hosts():
    return (
        Host(address="http://host-a:9980/api", password="a"),
        Host(address="http://host-b:9980/api", password="b"),
        Host(address="http://host-c:9980/api", password="c"),
    )


@pytest.fixture
def temp_config_file():
    """Create a temporary config file for testing."""
    config_data = {
        'currency': 'eur',
        'frequency': '10m',
        'window': '24h',
        'update_interval': '1h',
        'threshold': 0.05,
        'prices': {
            'storage': 2.5,
            'ingress': 0.2,
            'egress': 5,
        },
        'hosts': [
            {'address': 'http://localhost:9980/api', 'password': 'secret'},
            {'address': 'http://10.0.0.2:9980/api', 'password': 'other'},
        ],
        'logging': {
            'level': 'DEBUG',
            'format': 'text'
        }
    }

    with tempfile.NamedTemporaryFile(mode='w', suffix='.yml', delete=False) as f:
        yaml.dump(config_data, f)
        config_path = f.name

    yield config_path

    # Cleanup
    Path(config_path).unlink()


@pytest.fixture
def write_config(tmp_path):
    """Write a config mapping to a temporary YAML file and return its path."""
    def _write(data) -> str:
        path = tmp_path / "config.yml"
        path.write_text(yaml.dump(data))
        return str(path)
    return _write


@pytest.fixture(autouse=True)
def clear_env(monkeypatch):
    """Keep developer environment variables out of config tests."""
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.delenv("HOSTD_PIN_CONFIG", raising=False)
