"""Tests for configuration module."""
from datetime import timedelta
from decimal import Decimal

import pytest

from hostd_pin.config import PinConfig, load_config
from hostd_pin.hosts.client import Host
from hostd_pin.pricing.conversion import TargetPrices
from hostd_pin.utils.errors import ConfigurationError


def test_config_load(temp_config_file):
    """Test basic config loading."""
    config = load_config(temp_config_file)
    assert config.currency == 'eur'
    assert config.frequency == timedelta(minutes=10)
    assert config.window == timedelta(hours=24)
    assert config.update_interval == timedelta(hours=1)
    assert config.threshold == Decimal('0.05')
    assert config.prices == TargetPrices(
        storage=Decimal('2.5'), ingress=Decimal('0.2'), egress=Decimal('5')
    )
    assert config.hosts == (
        Host('http://localhost:9980/api', 'secret'),
        Host('http://10.0.0.2:9980/api', 'other'),
    )
    assert config.logging.level == 'DEBUG'


def test_config_defaults(write_config):
    """Test default values for an empty file."""
    config = load_config(write_config({}))
    assert config.currency == 'usd'
    assert config.frequency == timedelta(minutes=5)
    assert config.window == timedelta(hours=48)
    assert config.update_interval == timedelta(minutes=5)
    assert config.threshold == Decimal('0.1')
    assert config.prices == TargetPrices(
        storage=Decimal('1.00'), ingress=Decimal('0.10'), egress=Decimal('10')
    )
    assert config.hosts == ()
    assert config.quote.base_url == 'https://api.siacentral.com/v2'


def test_config_is_immutable(write_config):
    config = load_config(write_config({}))
    with pytest.raises(AttributeError):
        config.currency = 'eur'


def test_config_missing_file():
    """Test error on missing config file."""
    with pytest.raises(ConfigurationError):
        load_config('nonexistent.yml')


def test_config_path_from_env(monkeypatch, temp_config_file):
    monkeypatch.setenv('HOSTD_PIN_CONFIG', temp_config_file)
    assert load_config().currency == 'eur'


def test_log_level_env_override(monkeypatch, temp_config_file):
    monkeypatch.setenv('LOG_LEVEL', 'warning')
    assert load_config(temp_config_file).logging.level == 'WARNING'


def test_config_rejects_unknown_keys(write_config):
    with pytest.raises(ConfigurationError, match='frequncy'):
        load_config(write_config({'frequncy': '5m'}))


def test_config_invalid_yaml(tmp_path):
    path = tmp_path / 'config.yml'
    path.write_text('hosts: [unclosed')
    with pytest.raises(ConfigurationError):
        load_config(str(path))


@pytest.mark.parametrize(
    'data',
    [
        {'threshold': -0.1},
        {'threshold': 2},
        {'frequency': 'soon'},
        {'frequency': '0s'},
        {'window': '1m', 'frequency': '5m'},
        {'prices': {'storage': -1}},
        {'prices': 'cheap'},
        {'hosts': {'address': 'x'}},
        {'hosts': [{'password': 'no address'}]},
        {'hosts': [{'address': 'http://a/api'}, {'address': 'http://a/api'}]},
        {'currency': 'us-d'},
        {'quote': {'timeout': 'fast'}},
        {'logging': {'format': 'xml'}},
    ],
)
def test_config_validation_errors(write_config, data):
    with pytest.raises(ConfigurationError):
        load_config(write_config(data))


def test_pin_config_validate_directly():
    config = PinConfig(window=timedelta(minutes=1), frequency=timedelta(minutes=5))
    with pytest.raises(ConfigurationError):
        config.validate()
