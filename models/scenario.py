"""Scenario and security models."""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Security(BaseModel):
    """One tradable security: its available stock and one price per day."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    stock_available: int = Field(ge=0)
    prices: tuple[Decimal, ...]

    @model_validator(mode="after")
    def _check_prices(self) -> Security:
        for day, price in enumerate(self.prices):
            if price < 0:
                raise ValueError(f"Price of {self.name} on day {day} is negative: {price}")
        return self

    def price_on(self, day: int) -> Decimal:
        if not 0 <= day < len(self.prices):
            raise ValueError(
                f"Day {day} is outside the {len(self.prices)}-day horizon of {self.name}"
            )
        return self.prices[day]

    @property
    def final_price(self) -> Decimal:
        """Price on the last trading day of the scenario."""
        return self.prices[-1]


class Scenario(BaseModel):
    """Immutable market definition the submission is replayed against.

    ``securities`` keeps declaration order, which is also the order used for
    portfolio snapshots and valuation.
    """

    model_config = ConfigDict(frozen=True)

    number_of_securities: int = Field(gt=0)
    number_of_days: int = Field(gt=0)
    start_capital: Decimal = Field(ge=0)
    securities: dict[str, Security]

    @model_validator(mode="after")
    def _check_consistency(self) -> Scenario:
        if len(self.securities) != self.number_of_securities:
            raise ValueError(
                f"Declared {self.number_of_securities} securities, "
                f"got {len(self.securities)}."
            )
        for key, security in self.securities.items():
            if key != security.name:
                raise ValueError(f"Security keyed as '{key}' is named '{security.name}'.")
            if len(security.prices) != self.number_of_days:
                raise ValueError(
                    f"Security {security.name} has {len(security.prices)} prices, "
                    f"expected {self.number_of_days}."
                )
        return self

    @property
    def security_names(self) -> list[str]:
        return list(self.securities.keys())

    def price(self, security: str, day: int) -> Decimal:
        return self.securities[security].price_on(day)
