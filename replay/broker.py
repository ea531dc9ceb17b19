"""In-process broker: portfolio state and single-trade execution.

The broker validates each trade against the scenario and the current
portfolio, and only then applies it. A rejected trade leaves the state exactly
as it was. Trade history is kept for the whole replay.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from models.portfolio import PortfolioSnapshot, PortfolioState
from models.result import ErrorKind, ExecutedTrade, TradeOutcome
from models.scenario import Scenario
from models.submission import TradeAction

logger = logging.getLogger(__name__)


class Broker:
    """Stateful broker that validates, executes, and records trades for one replay.

    Instantiate one ``Broker`` per evaluation. The broker owns the canonical
    ``PortfolioState``; it starts with the scenario's capital, no holdings and
    every security's full stock available to buy.
    """

    def __init__(self, scenario: Scenario) -> None:
        self._scenario = scenario
        self._state = PortfolioState.from_scenario(scenario)
        self._trade_history: list[ExecutedTrade] = []

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------

    @property
    def cash(self) -> Decimal:
        return self._state.cash

    def get_portfolio(self) -> PortfolioSnapshot:
        """Return a snapshot of the current portfolio state."""
        return self._state.snapshot()

    def get_trade_history(self) -> list[ExecutedTrade]:
        """Return the full list of executed trades so far."""
        return list(self._trade_history)

    def portfolio_value(self) -> Decimal:
        """Value of all held shares at final-day prices."""
        total = Decimal(0)
        for name, position in self._state.positions.items():
            total += position.held * self._scenario.securities[name].final_price
        return total

    def execute(
        self,
        day: int,
        security: str,
        action: TradeAction | str,
        amount: int,
    ) -> TradeOutcome:
        """Validate and apply one trade on *day*.

        Checks run in a fixed order and the first failure is returned:
        unknown security, non-positive amount, then the action-specific
        feasibility checks. ``action`` may be a plain string; a token other
        than BUY or SELL is rejected after the security and amount checks.
        A *day* outside the scenario horizon raises ``ValueError``.
        """
        if security not in self._scenario.securities:
            return TradeOutcome.reject(
                ErrorKind.UNKNOWN_SECURITY, f"Unknown security name: {security}"
            )

        if amount <= 0:
            return TradeOutcome.reject(
                ErrorKind.INVALID_AMOUNT, f"Invalid trade amount: {amount}"
            )

        position = self._state.positions[security]
        price = self._scenario.price(security, day)

        try:
            action = TradeAction(action)
        except ValueError:
            return TradeOutcome.reject(
                ErrorKind.UNKNOWN_ACTION, f"Unknown trade action: {action}"
            )

        if action is TradeAction.BUY:
            capital_needed = amount * price
            if self._state.cash < capital_needed:
                return TradeOutcome.reject(
                    ErrorKind.INSUFFICIENT_CAPITAL,
                    f"Not enough capital to buy {amount} of {security}",
                )
            if amount > position.available:
                return TradeOutcome.reject(
                    ErrorKind.INSUFFICIENT_STOCK,
                    f"Not enough {security} in stock to buy {amount}",
                )

            position.available -= amount
            position.held += amount
            self._state.cash -= capital_needed

        elif action is TradeAction.SELL:
            if amount > position.held:
                return TradeOutcome.reject(
                    ErrorKind.INSUFFICIENT_HOLDINGS,
                    f"Not enough {security} in portfolio to sell {amount}",
                )

            position.available += amount
            position.held -= amount
            self._state.cash += amount * price

        trade = ExecutedTrade(
            day=day,
            security=security,
            action=action,
            amount=amount,
            price=price,
            cash_after=self._state.cash,
        )
        self._trade_history.append(trade)
        logger.debug(
            "Day %d: %s %d %s @ %s, cash now %s.",
            day,
            action.value,
            amount,
            security,
            price,
            self._state.cash,
        )
        return TradeOutcome(status="accepted", trade=trade)
