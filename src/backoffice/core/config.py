from __future__ import annotations

from decimal import Decimal
from enum import StrEnum
from functools import lru_cache

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

from backoffice.core.constants import (
    DEFAULT_CURRENCY,
    DEFAULT_ENV_FILE,
    SECRETS_DIR,
)


class Environment(StrEnum):
    """Deployment environments supported by the backoffice."""

    DEVELOPMENT = "development"
    TEST = "test"
    STAGING = "staging"
    PRODUCTION = "production"


class OrderSettings(BaseModel):
    """Defaults applied when reconciling orders with their payments."""

    model_config = ConfigDict(extra="ignore")

    default_currency: str = Field(
        default=DEFAULT_CURRENCY,
        min_length=3,
        max_length=3,
        validation_alias=AliasChoices(
            "ORDERS__DEFAULT_CURRENCY",
            "orders__default_currency",
            "default_currency",
        ),
    )
    manual_payment_amount: Decimal = Field(
        default=Decimal("6990"),
        ge=Decimal("0"),
        validation_alias=AliasChoices(
            "ORDERS__MANUAL_PAYMENT_AMOUNT",
            "orders__manual_payment_amount",
            "manual_payment_amount",
        ),
    )
    manual_payment_currency: str = Field(
        default="CLP",
        min_length=3,
        max_length=3,
        validation_alias=AliasChoices(
            "ORDERS__MANUAL_PAYMENT_CURRENCY",
            "orders__manual_payment_currency",
            "manual_payment_currency",
        ),
    )
    payment_reference_prefix: str = Field(default="STK", min_length=1, max_length=16)

    @model_validator(mode="after")
    def _normalise(self) -> OrderSettings:
        self.default_currency = self.default_currency.upper()
        self.manual_payment_currency = self.manual_payment_currency.upper()
        return self


def _default_currency_symbols() -> dict[str, str]:
    return {
        "CLP": "$",
        "EUR": "€",
        "USD": "US$",
    }


class DisplaySettings(BaseModel):
    """Presentation conventions for amounts shown to operators."""

    model_config = ConfigDict(extra="ignore")

    grouping_separator: str = Field(default=".", max_length=1)
    currency_symbols: dict[str, str] = Field(default_factory=_default_currency_symbols)

    @model_validator(mode="after")
    def _normalise(self) -> DisplaySettings:
        self.currency_symbols = {
            code.strip().upper(): symbol
            for code, symbol in self.currency_symbols.items()
        }
        return self

    def symbol_for(self, currency: str) -> str | None:
        return self.currency_symbols.get(currency.strip().upper())


class Settings(BaseSettings):
    """Backoffice settings loaded from the environment or secret stores."""

    model_config = SettingsConfigDict(
        env_file=DEFAULT_ENV_FILE,
        env_nested_delimiter="__",
        secrets_dir=SECRETS_DIR,
        extra="ignore",
        validate_default=True,
        case_sensitive=False,
    )

    environment: Environment = Environment.DEVELOPMENT
    debug: bool = False
    log_level: str = "INFO"

    orders: OrderSettings = Field(default_factory=OrderSettings)
    display: DisplaySettings = Field(default_factory=DisplaySettings)

    @model_validator(mode="after")
    def _normalize(self) -> Settings:
        self.log_level = self.log_level.upper()

        if self.environment in {Environment.DEVELOPMENT, Environment.TEST}:
            self.debug = True

        return self


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached instance of the backoffice settings."""

    return Settings()
