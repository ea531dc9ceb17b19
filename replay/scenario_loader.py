"""Scenario loading from the plain-text market definition.

Format
------
::

    <NumSecurities> <NumDays> <StartCapital>
    <SecurityName> <StockAvailable>          # repeated NumSecurities times,
    <Price_day0> ... <Price_day{NumDays-1}>  # two lines per security

Any structural problem raises ``ScenarioFormatError`` with the 1-based line
number it was found on. The replayer never re-validates a loaded scenario.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Iterator

from pydantic import ValidationError

from models.scenario import Scenario, Security
from replay.tokens import parse_decimal, parse_int

logger = logging.getLogger(__name__)


class ScenarioFormatError(ValueError):
    """The scenario text does not describe a valid market."""

    def __init__(self, line: int, message: str) -> None:
        super().__init__(f"Scenario line {line}: {message}")
        self.line = line
        self.message = message


def load_scenario(path: str | Path) -> Scenario:
    """Load a scenario from *path*.

    Raises ``FileNotFoundError`` if the file does not exist.
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Scenario file not found: {path}")

    with path.open(encoding="utf-8") as fh:
        scenario = parse_scenario(fh)

    logger.info(
        "Loaded scenario from '%s': %d securities, %d days, start capital %s.",
        path,
        scenario.number_of_securities,
        scenario.number_of_days,
        scenario.start_capital,
    )
    return scenario


def parse_scenario(lines: Iterable[str]) -> Scenario:
    """Build a ``Scenario`` from an iterable of text lines."""
    numbered = enumerate(lines, start=1)

    line_no, tokens = _next_tokens(numbered, 0, "header")
    if len(tokens) < 3:
        raise ScenarioFormatError(
            line_no, "expected '<NumSecurities> <NumDays> <StartCapital>'"
        )
    number_of_securities = _require_int(tokens[0], line_no, "number of securities")
    number_of_days = _require_int(tokens[1], line_no, "number of days")
    start_capital = parse_decimal(tokens[2])
    if start_capital is None:
        raise ScenarioFormatError(line_no, f"start capital '{tokens[2]}' is not a number")
    if number_of_securities <= 0 or number_of_days <= 0:
        raise ScenarioFormatError(
            line_no, "number of securities and number of days must be positive"
        )

    securities: dict[str, Security] = {}
    for _ in range(number_of_securities):
        line_no, tokens = _next_tokens(numbered, line_no, "security line")
        if len(tokens) < 2:
            raise ScenarioFormatError(line_no, "expected '<SecurityName> <StockAvailable>'")
        name = tokens[0]
        stock = _require_int(tokens[1], line_no, f"stock of {name}")
        if stock < 0:
            raise ScenarioFormatError(line_no, f"stock of {name} must not be negative")
        if name in securities:
            raise ScenarioFormatError(line_no, f"duplicate security name '{name}'")

        line_no, tokens = _next_tokens(numbered, line_no, f"prices of {name}")
        prices = []
        for token in tokens:
            price = parse_decimal(token)
            if price is None:
                raise ScenarioFormatError(line_no, f"price '{token}' of {name} is not a number")
            prices.append(price)
        if len(prices) != number_of_days:
            raise ScenarioFormatError(
                line_no,
                f"expected {number_of_days} prices for {name}, got {len(prices)}",
            )

        try:
            securities[name] = Security(name=name, stock_available=stock, prices=prices)
        except ValidationError as exc:
            raise ScenarioFormatError(line_no, _first_error(exc)) from exc

    try:
        return Scenario(
            number_of_securities=number_of_securities,
            number_of_days=number_of_days,
            start_capital=start_capital,
            securities=securities,
        )
    except ValidationError as exc:
        raise ScenarioFormatError(1, _first_error(exc)) from exc


# ------------------------------------------------------------------
# Internal helpers
# ------------------------------------------------------------------

def _next_tokens(
    numbered: Iterator[tuple[int, str]],
    previous_line: int,
    what: str,
) -> tuple[int, list[str]]:
    """Return the next line number and its whitespace-separated tokens."""
    try:
        line_no, raw = next(numbered)
    except StopIteration:
        raise ScenarioFormatError(
            previous_line + 1, f"unexpected end of file, expected {what}"
        ) from None
    return line_no, raw.split()


def _require_int(token: str, line_no: int, what: str) -> int:
    value = parse_int(token)
    if value is None:
        raise ScenarioFormatError(line_no, f"{what} '{token}' is not an integer")
    return value


def _first_error(exc: ValidationError) -> str:
    """Condense a pydantic ``ValidationError`` into its first message."""
    errors = exc.errors()
    if not errors:
        return str(exc)
    return errors[0]["msg"]
