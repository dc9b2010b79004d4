"""Shared test fixtures."""

from decimal import Decimal
from pathlib import Path

import httpx
import pytest
import yaml

from dcabot.config.schema import BotConfig, ExecutionMode
from dcabot.tests.kraken_fixtures import BASE_URL, TEST_API_KEY, TEST_SECRET


@pytest.fixture
def http_client():
    with httpx.Client() as client:
        yield client


@pytest.fixture
def live_config() -> BotConfig:
    return BotConfig(
        exchange={"base_url": BASE_URL, "timeout_seconds": 5.0},
        purchase={
            "quote_currency": "EUR",
            "quantity_to_buy": "0.001",
            "price_threshold": "50000",
        },
        credentials={"api_key": TEST_API_KEY, "api_secret": TEST_SECRET},
        execution={"mode": "live"},
    )


@pytest.fixture
def dry_run_config(live_config: BotConfig) -> BotConfig:
    return live_config.model_copy(
        update={"execution": live_config.execution.model_copy(update={"mode": ExecutionMode.DRY_RUN})}
    )


@pytest.fixture
def config_yaml_path(tmp_path: Path) -> Path:
    """Write a minimal valid config YAML and return its path."""
    data = {
        "exchange": {"base_url": BASE_URL},
        "purchase": {"quantity_to_buy": 0.001, "price_threshold": 50000},
        "execution": {"mode": "dry-run"},
    }
    path = tmp_path / "test_config.yaml"
    with open(path, "w") as f:
        yaml.dump(data, f)
    return path


@pytest.fixture
def threshold() -> Decimal:
    return Decimal("50000")
