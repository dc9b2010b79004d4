"""YAML config loader with environment overlay and dotted-key lookup."""

import hashlib
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from dcabot.config.schema import BotConfig

# Environment variable -> (section, field)
ENV_OVERRIDES: dict[str, tuple[str, str]] = {
    "KRAKEN_API_KEY": ("credentials", "api_key"),
    "KRAKEN_PRIVATE_KEY": ("credentials", "api_secret"),
    "BITCOIN_AMOUNT": ("purchase", "quantity_to_buy"),
    "PRICE_THRESHOLD": ("purchase", "price_threshold"),
    "PAYMENT_CURRENCY": ("purchase", "quote_currency"),
    "DCABOT_MODE": ("execution", "mode"),
}


class ConfigurationError(Exception):
    """Raised when configuration is missing or invalid. No network I/O has happened yet."""


def load_config(
    path: str | Path | None = None,
    env: Mapping[str, str] | None = None,
) -> BotConfig:
    """Load and validate config from an optional YAML file plus environment.

    Environment variables take precedence over the file. Empty variables
    are ignored.
    """
    raw: dict[str, Any] = {}
    if path is not None:
        path = Path(path)
        try:
            with open(path) as f:
                raw = yaml.safe_load(f) or {}
        except OSError as e:
            raise ConfigurationError(f"Cannot read config file {path}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e
        if not isinstance(raw, dict):
            raise ConfigurationError(f"Config file {path} must contain a mapping")

    env = os.environ if env is None else env
    for var, (section, key) in ENV_OVERRIDES.items():
        value = env.get(var, "").strip()
        if not value:
            continue
        current = raw.get(section)
        if current is not None and not isinstance(current, dict):
            raise ConfigurationError(f"config section {section!r} must be a mapping")
        raw[section] = {**(current or {}), key: value}

    if "purchase" not in raw:
        raise ConfigurationError(
            "purchase settings missing: set PRICE_THRESHOLD and BITCOIN_AMOUNT"
        )

    try:
        return BotConfig(**raw)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e


def config_hash(config: BotConfig) -> str:
    """Compute a deterministic SHA256 hash of the config.

    SecretStr fields serialize masked, so credentials do not feed the hash.
    """
    data = config.model_dump_json(indent=None)
    return hashlib.sha256(data.encode()).hexdigest()[:16]


def redacted_dump(config: BotConfig) -> str:
    """JSON rendering safe for logs and terminals."""
    return config.model_dump_json(indent=2)


def get_config_value(config: BotConfig, dotted_key: str) -> Any:
    """Get a config value by dotted key path. E.g. 'purchase.price_threshold'."""
    parts = dotted_key.split(".")
    obj: Any = config
    for part in parts:
        if hasattr(obj, part):
            obj = getattr(obj, part)
        elif isinstance(obj, dict):
            obj = obj[part]
        else:
            raise KeyError(f"Config key not found: {dotted_key}")
    return obj
