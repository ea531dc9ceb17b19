"""Data models for trading schedule evaluation.

Loaders, the broker and the replayer all import from models.
"""

from models.config import EvaluationConfig
from models.portfolio import PortfolioSnapshot, PortfolioState, SecurityPosition
from models.result import (
    ErrorKind,
    EvaluationFailure,
    EvaluationResult,
    EvaluationSuccess,
    ExecutedTrade,
    TradeOutcome,
)
from models.scenario import Scenario, Security
from models.submission import (
    DaySection,
    MalformedLine,
    SectionCount,
    SectionHeader,
    Submission,
    SubmissionRecord,
    TradeAction,
    TradeInstruction,
)

__all__ = [
    # config
    "EvaluationConfig",
    # portfolio
    "PortfolioSnapshot",
    "PortfolioState",
    "SecurityPosition",
    # result
    "ErrorKind",
    "EvaluationFailure",
    "EvaluationResult",
    "EvaluationSuccess",
    "ExecutedTrade",
    "TradeOutcome",
    # scenario
    "Scenario",
    "Security",
    # submission
    "DaySection",
    "MalformedLine",
    "SectionCount",
    "SectionHeader",
    "Submission",
    "SubmissionRecord",
    "TradeAction",
    "TradeInstruction",
]
