"""Day-by-day replay of a submission against a scenario.

Lifecycle:
    1. Read the section count.
    2. For each day section:
        a. Reject days outside the scenario horizon.
        b. Reject days earlier than the previous section's day.
        c. Enforce the per-day trade ceiling, if configured.
        d. Execute each trade through the broker; with duplicate detection
           on, reject a security traded twice in the section (after the
           second trade has already executed).
    3. Score the final portfolio.

The first violation ends the replay; no further records are pulled from the
stream and nothing already executed is undone.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from pathlib import Path
from typing import Iterable, Iterator

from models.config import EvaluationConfig
from models.result import ErrorKind, EvaluationFailure, EvaluationResult, EvaluationSuccess
from models.scenario import Scenario
from models.submission import (
    MalformedLine,
    SectionCount,
    SectionHeader,
    Submission,
    SubmissionRecord,
    TradeInstruction,
)
from replay.broker import Broker
from replay.submission_reader import iter_submission_file

logger = logging.getLogger(__name__)


class _ReplayFailed(Exception):
    """Internal signal carrying the failing line; never escapes ``Replayer``."""

    def __init__(self, line: int, kind: ErrorKind, reason: str) -> None:
        super().__init__(reason)
        self.line = line
        self.kind = kind
        self.reason = reason


class Replayer:
    """Replays one submission; instantiate one per evaluation."""

    def __init__(self, scenario: Scenario, config: EvaluationConfig | None = None) -> None:
        self._scenario = scenario
        self._config = config or EvaluationConfig.base()
        self._broker = Broker(scenario)
        self._previous_day = 0
        self._replayed = False

    @property
    def broker(self) -> Broker:
        return self._broker

    def replay(self, records: Iterable[SubmissionRecord]) -> EvaluationResult:
        """Run every record in *records* and return the evaluation result.

        A ``Replayer`` runs once; a second call raises ``RuntimeError``.
        """
        if self._replayed:
            raise RuntimeError("Replayer has already run; create a new one per evaluation.")
        self._replayed = True

        stream = iter(records)
        try:
            self._run(stream)
        except _ReplayFailed as failure:
            result = EvaluationFailure(
                line=failure.line,
                kind=failure.kind,
                reason=failure.reason,
                portfolio=self._broker.get_portfolio(),
            )
            logger.warning("Submission rejected (%s): %s", failure.kind.value, result.message)
            return result
        finally:
            close = getattr(stream, "close", None)
            if close is not None:
                close()

        result = EvaluationSuccess(score=self.score(), portfolio=self._broker.get_portfolio())
        logger.info(
            "Submission accepted: %d trade(s) executed, score %s.",
            len(self._broker.get_trade_history()),
            result.score,
        )
        return result

    def replay_submission(self, submission: Submission) -> EvaluationResult:
        """Replay an already parsed ``Submission``."""
        return self.replay(submission.iter_records())

    def score(self) -> Decimal:
        """Cash, plus held shares at final-day prices when valuation is enabled."""
        score = self._broker.cash
        if self._config.include_portfolio_valuation:
            score += self._broker.portfolio_value()
        return score

    # ------------------------------------------------------------------
    # State machine
    # ------------------------------------------------------------------

    def _run(self, stream: Iterator[SubmissionRecord]) -> None:
        count = self._expect(stream, SectionCount, line=1)
        last_line = count.line
        for _ in range(count.count):
            header = self._expect(stream, SectionHeader, line=last_line + 1)
            last_line = header.line
            self._open_section(header)

            traded: set[str] = set()
            for _ in range(header.trade_count):
                trade = self._expect(stream, TradeInstruction, line=last_line + 1)
                last_line = trade.line
                self._execute(header.day, trade, traded)

    def _open_section(self, header: SectionHeader) -> None:
        day = header.day
        if day < 0 or day >= self._scenario.number_of_days:
            raise _ReplayFailed(header.line, ErrorKind.INVALID_DAY, f"Can't trade on day {day}")

        if day < self._previous_day:
            raise _ReplayFailed(
                header.line,
                ErrorKind.OUT_OF_ORDER_DAY,
                f"Executed trades for day {self._previous_day} earlier, which is after day {day}",
            )
        self._previous_day = day

        limit = self._config.max_trades_per_day
        if limit is not None and header.trade_count > limit:
            raise _ReplayFailed(
                header.line,
                ErrorKind.TOO_MANY_TRADES,
                f"Too many trades on day {day}: {header.trade_count} exceeds the limit of {limit}",
            )

    def _execute(self, day: int, trade: TradeInstruction, traded: set[str]) -> None:
        outcome = self._broker.execute(day, trade.security, trade.action, trade.amount)
        if not outcome.accepted:
            raise _ReplayFailed(trade.line, outcome.kind, outcome.message)

        if self._config.reject_duplicate_security_per_day and trade.security in traded:
            raise _ReplayFailed(
                trade.line,
                ErrorKind.DUPLICATE_SECURITY_IN_DAY,
                f"Security {trade.security} was already traded on day {day}",
            )
        traded.add(trade.security)

    @staticmethod
    def _expect(stream: Iterator[SubmissionRecord], kind: type, line: int):
        """Pull the next record, failing on malformed input or a truncated stream."""
        record = next(stream, None)
        if record is None:
            raise _ReplayFailed(
                line, ErrorKind.MALFORMED_INPUT, "Output data was invalid (unexpected end of input)"
            )
        if isinstance(record, MalformedLine):
            raise _ReplayFailed(
                record.line, ErrorKind.MALFORMED_INPUT, f"Output data was invalid ({record.reason})"
            )
        if not isinstance(record, kind):
            raise _ReplayFailed(
                record.line,
                ErrorKind.MALFORMED_INPUT,
                f"Output data was invalid (expected {kind.__name__}, got {type(record).__name__})",
            )
        return record


def evaluate(
    scenario: Scenario,
    submission_path: str | Path,
    config: EvaluationConfig | None = None,
) -> EvaluationResult:
    """Replay the submission file at *submission_path* against *scenario*."""
    return Replayer(scenario, config).replay(iter_submission_file(submission_path))
