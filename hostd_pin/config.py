"""Configuration management for hostd-pin."""
import os
from dataclasses import dataclass, field
from datetime import timedelta
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml
from dotenv import load_dotenv

from hostd_pin.decision.decider import DEFAULT_THRESHOLD, DEFAULT_UPDATE_INTERVAL
from hostd_pin.hosts.client import Host
from hostd_pin.pricing.conversion import TargetPrices
from hostd_pin.rate.averager import (
    DEFAULT_CURRENCY,
    DEFAULT_SAMPLE_INTERVAL,
    DEFAULT_WINDOW,
)
from hostd_pin.utils.errors import ConfigurationError
from hostd_pin.utils.validation import (
    parse_decimal,
    parse_duration,
    validate_currency_code,
    validate_threshold,
)

DEFAULT_CONFIG_PATH = "config.yml"
CONFIG_ENV_VAR = "HOSTD_PIN_CONFIG"

KNOWN_KEYS = frozenset({
    "currency",
    "frequency",
    "window",
    "update_interval",
    "threshold",
    "prices",
    "hosts",
    "quote",
    "hostd",
    "logging",
})


@dataclass(frozen=True)
class QuoteConfig:
    provider: str = "siacentral"
    base_url: str = "https://api.siacentral.com/v2"
    timeout: float = 10.0


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "INFO"
    format: str = "text"  # json | text
    file: Optional[str] = None
    enabled: bool = True


@dataclass(frozen=True)
class PinConfig:
    """Validated, immutable application configuration."""

    currency: str = DEFAULT_CURRENCY
    frequency: timedelta = DEFAULT_SAMPLE_INTERVAL  # rate sample interval
    window: timedelta = DEFAULT_WINDOW
    update_interval: timedelta = DEFAULT_UPDATE_INTERVAL
    threshold: Decimal = DEFAULT_THRESHOLD
    prices: TargetPrices = field(default_factory=TargetPrices)
    hosts: Tuple[Host, ...] = ()
    quote: QuoteConfig = field(default_factory=QuoteConfig)
    hostd_timeout: float = 30.0
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def validate(self) -> None:
        """Validate cross-field constraints."""
        if self.window < self.frequency:
            raise ConfigurationError(
                f"window ({self.window}) must be at least one sample interval ({self.frequency})"
            )
        if self.quote.timeout <= 0:
            raise ConfigurationError("quote.timeout must be positive")
        if self.hostd_timeout <= 0:
            raise ConfigurationError("hostd.timeout must be positive")
        if self.logging.format not in ("json", "text"):
            raise ConfigurationError(
                f"logging.format must be 'json' or 'text', got: {self.logging.format!r}"
            )
        seen = set()
        for host in self.hosts:
            if host.address in seen:
                raise ConfigurationError(f"duplicate host address: {host.address}")
            seen.add(host.address)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PinConfig":
        """Build a configuration from parsed YAML, applying defaults."""
        if not isinstance(data, dict):
            raise ConfigurationError("configuration must be a mapping")

        unknown = set(data) - KNOWN_KEYS
        if unknown:
            raise ConfigurationError(f"unknown configuration keys: {sorted(unknown)}")

        try:
            cfg = cls._build(data)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"invalid configuration: {e}") from e
        cfg.validate()
        return cfg

    @classmethod
    def _build(cls, data: Dict[str, Any]) -> "PinConfig":
        defaults = TargetPrices()
        p_src = _section(data, "prices")
        prices = TargetPrices(
            storage=parse_decimal(p_src.get("storage", defaults.storage), "prices.storage"),
            ingress=parse_decimal(p_src.get("ingress", defaults.ingress), "prices.ingress"),
            egress=parse_decimal(p_src.get("egress", defaults.egress), "prices.egress"),
        )

        q_src = _section(data, "quote")
        quote = QuoteConfig(
            provider=str(q_src.get("provider", QuoteConfig.provider)),
            base_url=str(q_src.get("base_url", QuoteConfig.base_url)),
            timeout=float(q_src.get("timeout", QuoteConfig.timeout)),
        )

        h_src = _section(data, "hostd")
        l_src = _section(data, "logging")
        log_cfg = LoggingConfig(
            level=str(os.getenv("LOG_LEVEL", l_src.get("level", LoggingConfig.level))).upper(),
            format=str(l_src.get("format", LoggingConfig.format)),
            file=l_src.get("file"),
            enabled=bool(l_src.get("enabled", True)),
        )

        return cls(
            currency=validate_currency_code(data.get("currency", DEFAULT_CURRENCY)),
            frequency=parse_duration(data.get("frequency", DEFAULT_SAMPLE_INTERVAL)),
            window=parse_duration(data.get("window", DEFAULT_WINDOW)),
            update_interval=parse_duration(
                data.get("update_interval", DEFAULT_UPDATE_INTERVAL)
            ),
            threshold=validate_threshold(data.get("threshold", DEFAULT_THRESHOLD)),
            prices=prices,
            hosts=_parse_hosts(data.get("hosts") or []),
            quote=quote,
            hostd_timeout=float(h_src.get("timeout", 30.0)),
            logging=log_cfg,
        )


def _section(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = data.get(key) or {}
    if not isinstance(value, dict):
        raise ConfigurationError(f"{key} must be a mapping")
    return value


def _parse_hosts(raw: Any) -> Tuple[Host, ...]:
    if not isinstance(raw, list):
        raise ConfigurationError("hosts must be a list")
    hosts = []
    for i, entry in enumerate(raw):
        if not isinstance(entry, dict):
            raise ConfigurationError(f"hosts[{i}] must be a mapping")
        address = entry.get("address")
        if not address:
            raise ConfigurationError(f"hosts[{i}].address is required")
        hosts.append(Host(address=str(address), password=str(entry.get("password", ""))))
    return tuple(hosts)


def resolve_config_path(config_path: Optional[str] = None) -> Path:
    """Resolve the config path from the argument, the environment, or the default."""
    if config_path:
        return Path(config_path).expanduser()
    env_cfg = os.getenv(CONFIG_ENV_VAR)
    return Path(env_cfg).expanduser() if env_cfg else Path(DEFAULT_CONFIG_PATH)


def load_config(config_path: Optional[str] = None) -> PinConfig:
    """
    Load and validate configuration from a YAML file.

    Args:
        config_path: Path to YAML configuration file

    Raises:
        ConfigurationError: If the file is missing, malformed or invalid
    """
    # Load environment variables from .env
    load_dotenv()

    path = resolve_config_path(config_path)
    if not path.exists():
        raise ConfigurationError(f"Config file not found: {path}")

    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e

    return PinConfig.from_dict(data or {})
