"""Portfolio state models."""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from models.scenario import Scenario


class SecurityPosition(BaseModel):
    """Shares of one security, split between the portfolio and the stock pool.

    Shares only move between ``available`` and ``held``; their sum stays equal
    to the security's initial stock.
    """

    held: int = Field(default=0, ge=0)
    available: int = Field(ge=0)

    @property
    def total(self) -> int:
        return self.held + self.available


class PortfolioState(BaseModel):
    """Mutable ledger owned by a single replay: cash plus one position per security.

    Only ``Broker`` mutates it. Everything else reads ``snapshot()``.
    """

    cash: Decimal
    positions: dict[str, SecurityPosition]

    @classmethod
    def from_scenario(cls, scenario: Scenario) -> PortfolioState:
        return cls(
            cash=scenario.start_capital,
            positions={
                name: SecurityPosition(held=0, available=security.stock_available)
                for name, security in scenario.securities.items()
            },
        )

    def snapshot(self) -> PortfolioSnapshot:
        return PortfolioSnapshot(
            cash=self.cash,
            holdings={name: pos.held for name, pos in self.positions.items()},
            available={name: pos.available for name, pos in self.positions.items()},
        )


class PortfolioSnapshot(BaseModel):
    """Cash, held shares and remaining stock (security -> shares) at one point of a replay."""

    model_config = ConfigDict(frozen=True)

    cash: Decimal
    holdings: dict[str, int]
    available: dict[str, int]
