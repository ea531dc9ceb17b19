"""Execution and evaluation outcome models: ErrorKind, ExecutedTrade, TradeOutcome, EvaluationResult."""

from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from models.portfolio import PortfolioSnapshot
from models.submission import TradeAction


class ErrorKind(str, Enum):
    """Every way an evaluation can be rejected."""

    SCENARIO_FORMAT = "scenario_format"
    MALFORMED_INPUT = "malformed_input"
    INVALID_DAY = "invalid_day"
    OUT_OF_ORDER_DAY = "out_of_order_day"
    TOO_MANY_TRADES = "too_many_trades"
    UNKNOWN_SECURITY = "unknown_security"
    INVALID_AMOUNT = "invalid_amount"
    INSUFFICIENT_CAPITAL = "insufficient_capital"
    INSUFFICIENT_STOCK = "insufficient_stock"
    INSUFFICIENT_HOLDINGS = "insufficient_holdings"
    UNKNOWN_ACTION = "unknown_action"
    DUPLICATE_SECURITY_IN_DAY = "duplicate_security_in_day"


class ExecutedTrade(BaseModel):
    """Single accepted trade, as recorded by the broker."""

    model_config = ConfigDict(frozen=True)

    day: int
    security: str
    action: TradeAction
    amount: int
    price: Decimal
    cash_after: Decimal

    @property
    def value(self) -> Decimal:
        return self.amount * self.price


class TradeOutcome(BaseModel):
    """Broker response to one trade.

    ``trade`` is set only when accepted; ``kind`` and ``message`` only when
    rejected.
    """

    status: Literal["accepted", "rejected"]
    trade: ExecutedTrade | None = None
    kind: ErrorKind | None = None
    message: str = ""

    @property
    def accepted(self) -> bool:
        return self.status == "accepted"

    @classmethod
    def reject(cls, kind: ErrorKind, message: str) -> TradeOutcome:
        return cls(status="rejected", kind=kind, message=message)


class EvaluationSuccess(BaseModel):
    """Every section replayed cleanly."""

    status: Literal["success"] = "success"
    score: Decimal
    portfolio: PortfolioSnapshot

    @property
    def message(self) -> str:
        return f"Final score: {self.score}"


class EvaluationFailure(BaseModel):
    """Replay stopped at the first violation.

    ``portfolio`` is the state at the moment of failure; trades that already
    executed are not undone.
    """

    status: Literal["failure"] = "failure"
    line: int
    kind: ErrorKind
    reason: str
    portfolio: PortfolioSnapshot

    @property
    def message(self) -> str:
        return f"Line {self.line}: {self.reason}"


EvaluationResult = Annotated[
    Union[EvaluationSuccess, EvaluationFailure],
    Field(discriminator="status"),
]
