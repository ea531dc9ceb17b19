"""Tests for scenario, portfolio, submission, result and config models."""

from decimal import Decimal

import pytest
from pydantic import TypeAdapter, ValidationError

from models.config import EvaluationConfig
from models.portfolio import PortfolioState
from models.result import (
    ErrorKind,
    EvaluationFailure,
    EvaluationResult,
    EvaluationSuccess,
    TradeOutcome,
)
from models.scenario import Scenario, Security
from models.submission import (
    DaySection,
    SectionCount,
    SectionHeader,
    Submission,
    TradeAction,
    TradeInstruction,
)


# ---------------------------------------------------------------------------
# Scenario
# ---------------------------------------------------------------------------


class TestScenario:

    def test_price_lookup(self, scenario):
        assert scenario.price("A", 1) == Decimal("12")
        assert scenario.securities["B"].final_price == Decimal("22")
        assert scenario.security_names == ["A", "B"]

    @pytest.mark.parametrize("day", [-1, 3, 10])
    def test_price_outside_horizon(self, scenario, day):
        with pytest.raises(ValueError, match=f"Day {day} is outside"):
            scenario.price("A", day)

    def test_price_count_must_match_days(self):
        with pytest.raises(ValidationError, match="has 2 prices, expected 3"):
            Scenario(
                number_of_securities=1,
                number_of_days=3,
                start_capital=Decimal("100"),
                securities={"A": Security(name="A", stock_available=1, prices=[1, 2])},
            )

    def test_keys_must_match_names(self):
        with pytest.raises(ValidationError, match="keyed as 'X'"):
            Scenario(
                number_of_securities=1,
                number_of_days=1,
                start_capital=Decimal("100"),
                securities={"X": Security(name="A", stock_available=1, prices=[1])},
            )

    def test_security_count_must_match(self):
        with pytest.raises(ValidationError, match="Declared 2 securities"):
            Scenario(
                number_of_securities=2,
                number_of_days=1,
                start_capital=Decimal("100"),
                securities={"A": Security(name="A", stock_available=1, prices=[1])},
            )

    def test_negative_price_rejected(self):
        with pytest.raises(ValidationError, match="negative"):
            Security(name="A", stock_available=1, prices=[Decimal("-1")])

    def test_scenario_is_frozen(self, scenario):
        with pytest.raises(ValidationError):
            scenario.start_capital = Decimal("5")


# ---------------------------------------------------------------------------
# Portfolio
# ---------------------------------------------------------------------------


class TestPortfolioState:

    def test_from_scenario(self, scenario):
        state = PortfolioState.from_scenario(scenario)
        assert state.cash == Decimal("1000")
        assert state.positions["A"].held == 0
        assert state.positions["A"].available == 10
        assert state.positions["B"].total == 5

    def test_snapshot_is_detached(self, scenario):
        state = PortfolioState.from_scenario(scenario)
        snapshot = state.snapshot()
        state.positions["A"].held = 3
        state.positions["A"].available = 7
        assert snapshot.holdings == {"A": 0, "B": 0}
        assert snapshot.available == {"A": 10, "B": 5}


# ---------------------------------------------------------------------------
# Submission
# ---------------------------------------------------------------------------


class TestSubmission:

    def test_action_parsed_to_enum(self):
        trade = TradeInstruction(line=3, security="A", action="BUY", amount=1)
        assert trade.action is TradeAction.BUY

    def test_unknown_action_kept_verbatim(self):
        trade = TradeInstruction(line=3, security="A", action="HOLD", amount=1)
        assert trade.action == "HOLD"
        assert not isinstance(trade.action, TradeAction)

    def test_lowercase_action_not_recognised(self):
        trade = TradeInstruction(line=3, security="A", action="buy", amount=1)
        assert not isinstance(trade.action, TradeAction)

    def test_iter_records_flattens_sections(self):
        header = SectionHeader(line=2, day=0, trade_count=1)
        trade = TradeInstruction(line=3, security="A", action="BUY", amount=5)
        submission = Submission(sections=[DaySection(header=header, trades=[trade])])

        records = list(submission.iter_records())

        assert records == [SectionCount(line=1, count=1), header, trade]
        assert submission.trade_count == 1

    def test_section_trades_must_match_declared_count(self):
        header = SectionHeader(line=2, day=0, trade_count=2)
        trade = TradeInstruction(line=3, security="A", action="BUY", amount=5)

        with pytest.raises(ValidationError, match=r"declares 2 trade\(s\), got 1"):
            DaySection(header=header, trades=[trade])
        with pytest.raises(ValidationError, match=r"declares 2 trade\(s\), got 0"):
            DaySection(header=header)

    def test_negative_count_section_holds_no_trades(self):
        header = SectionHeader(line=2, day=0, trade_count=-1)
        assert DaySection(header=header).trades == []


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


class TestResults:

    def test_success_message(self, scenario):
        portfolio = PortfolioState.from_scenario(scenario).snapshot()
        result = EvaluationSuccess(score=Decimal("947.50"), portfolio=portfolio)
        assert result.message == "Final score: 947.50"

    def test_failure_message(self, scenario):
        portfolio = PortfolioState.from_scenario(scenario).snapshot()
        result = EvaluationFailure(
            line=4,
            kind=ErrorKind.INSUFFICIENT_STOCK,
            reason="Not enough A in stock to buy 20",
            portfolio=portfolio,
        )
        assert result.message == "Line 4: Not enough A in stock to buy 20"

    def test_result_union_discriminates_on_status(self, scenario):
        portfolio = PortfolioState.from_scenario(scenario).snapshot()
        adapter = TypeAdapter(EvaluationResult)
        failure = EvaluationFailure(
            line=2, kind=ErrorKind.INVALID_DAY, reason="Can't trade on day 9", portfolio=portfolio
        )

        restored = adapter.validate_json(adapter.dump_json(failure))

        assert isinstance(restored, EvaluationFailure)
        assert restored.kind is ErrorKind.INVALID_DAY

    def test_rejected_outcome(self):
        outcome = TradeOutcome.reject(ErrorKind.INVALID_AMOUNT, "Invalid trade amount: 0")
        assert not outcome.accepted
        assert outcome.trade is None


# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------


class TestEvaluationConfig:

    def test_base_profile(self):
        config = EvaluationConfig.base()
        assert not config.include_portfolio_valuation
        assert not config.reject_duplicate_security_per_day
        assert config.max_trades_per_day is None

    def test_strict_profile(self):
        config = EvaluationConfig.for_variant("strict")
        assert config.include_portfolio_valuation
        assert config.reject_duplicate_security_per_day
        assert config.max_trades_per_day == 20

    def test_unknown_variant(self):
        with pytest.raises(ValueError, match="Unknown variant 'lenient'"):
            EvaluationConfig.for_variant("lenient")

    def test_max_trades_must_be_positive(self):
        with pytest.raises(ValidationError):
            EvaluationConfig(max_trades_per_day=0)

    def test_from_yaml(self, write_text):
        path = write_text(
            "cfg.yaml",
            "include_portfolio_valuation: true\nmax_trades_per_day: 5\n",
        )
        config = EvaluationConfig.from_yaml(path)
        assert config.include_portfolio_valuation
        assert not config.reject_duplicate_security_per_day
        assert config.max_trades_per_day == 5

    def test_from_yaml_empty_file_is_base(self, write_text):
        assert EvaluationConfig.from_yaml(write_text("cfg.yaml", "")) == EvaluationConfig.base()

    def test_from_yaml_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="Config file not found"):
            EvaluationConfig.from_yaml(tmp_path / "missing.yaml")

    def test_from_yaml_rejects_non_mapping(self, write_text):
        with pytest.raises(ValueError, match="Expected a YAML mapping"):
            EvaluationConfig.from_yaml(write_text("cfg.yaml", "- 1\n- 2\n"))
