"""Pydantic v2 configuration schema with strict validation."""

from decimal import Decimal
from enum import StrEnum

from pydantic import BaseModel, Field, SecretStr, field_validator, model_validator


class ExecutionMode(StrEnum):
    DRY_RUN = "dry-run"
    LIVE = "live"


class ExchangeConfig(BaseModel):
    model_config = {"extra": "forbid"}

    base_url: str = "https://api.kraken.com"
    timeout_seconds: float = Field(default=30.0, gt=0.0)


class PurchaseConfig(BaseModel):
    model_config = {"extra": "forbid"}

    base_asset: str = Field(default="XBT", pattern=r"^[A-Z0-9]{2,6}$")
    quote_currency: str = Field(default="EUR", pattern=r"^[A-Z0-9]{2,6}$")
    quantity_to_buy: Decimal = Field(gt=0)
    price_threshold: Decimal = Field(gt=0)

    @field_validator("base_asset", "quote_currency", mode="before")
    @classmethod
    def _upper(cls, v):
        return v.strip().upper() if isinstance(v, str) else v

    @field_validator("quantity_to_buy", "price_threshold", mode="before")
    @classmethod
    def _float_via_str(cls, v):
        # YAML hands us floats; go through repr so 0.001 stays 0.001
        if isinstance(v, float):
            return str(v)
        return v.strip() if isinstance(v, str) else v

    @field_validator("quantity_to_buy", "price_threshold")
    @classmethod
    def _finite(cls, v: Decimal) -> Decimal:
        if not v.is_finite():
            raise ValueError("must be a finite number")
        return v


class CredentialsConfig(BaseModel):
    model_config = {"extra": "forbid"}

    api_key: SecretStr = SecretStr("")
    api_secret: SecretStr = SecretStr("")


class ExecutionConfig(BaseModel):
    model_config = {"extra": "forbid"}

    mode: ExecutionMode = ExecutionMode.DRY_RUN


class BotConfig(BaseModel):
    model_config = {"extra": "forbid"}

    exchange: ExchangeConfig = ExchangeConfig()
    purchase: PurchaseConfig
    credentials: CredentialsConfig = CredentialsConfig()
    execution: ExecutionConfig = ExecutionConfig()

    @model_validator(mode="after")
    def _live_needs_credentials(self) -> "BotConfig":
        if self.execution.mode == ExecutionMode.LIVE:
            if not self.credentials.api_key.get_secret_value():
                raise ValueError("live mode requires credentials.api_key (KRAKEN_API_KEY)")
            if not self.credentials.api_secret.get_secret_value():
                raise ValueError("live mode requires credentials.api_secret (KRAKEN_PRIVATE_KEY)")
        return self
