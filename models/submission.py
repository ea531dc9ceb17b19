"""Submission models: the day sections and trades a schedule is made of.

The replayer consumes a flat stream of records (``SubmissionRecord``) rather
than a fully materialised ``Submission``, so that a file is only read as far as
the first failure. ``Submission.iter_records`` turns an in-memory submission
into the same stream.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterator, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


class TradeAction(str, Enum):
    BUY = "BUY"
    SELL = "SELL"


class SectionCount(BaseModel):
    """First line of a submission: how many day sections follow."""

    model_config = ConfigDict(frozen=True)

    line: int
    count: int


class SectionHeader(BaseModel):
    """``<Day> <NumberOfTrades>`` line opening a day section."""

    model_config = ConfigDict(frozen=True)

    line: int
    day: int
    trade_count: int


class TradeInstruction(BaseModel):
    """A single ``<Security> <Action> <Amount>`` line.

    ``action`` holds the raw token when it is not BUY or SELL; the broker
    rejects it only after the security and amount checks.
    """

    model_config = ConfigDict(frozen=True)

    line: int
    security: str
    action: Union[TradeAction, str] = Field(union_mode="left_to_right")
    amount: int


class MalformedLine(BaseModel):
    """Stands in for a line that could not be parsed. Always last in a stream."""

    model_config = ConfigDict(frozen=True)

    line: int
    reason: str


SubmissionRecord = Union[SectionCount, SectionHeader, TradeInstruction, MalformedLine]


class DaySection(BaseModel):
    """Trades submitted for one trading day, in listed order."""

    header: SectionHeader
    trades: list[TradeInstruction] = []

    @model_validator(mode="after")
    def _check_trade_count(self) -> DaySection:
        expected = max(self.header.trade_count, 0)
        if len(self.trades) != expected:
            raise ValueError(
                f"Section for day {self.header.day} declares {self.header.trade_count} "
                f"trade(s), got {len(self.trades)}."
            )
        return self

    @property
    def day(self) -> int:
        return self.header.day


class Submission(BaseModel):
    """A fully parsed submission."""

    sections: list[DaySection] = []

    @property
    def trade_count(self) -> int:
        return sum(len(section.trades) for section in self.sections)

    def iter_records(self) -> Iterator[SubmissionRecord]:
        """Yield the record stream a reader would produce for this submission."""
        yield SectionCount(line=1, count=len(self.sections))
        for section in self.sections:
            yield section.header
            yield from section.trades
