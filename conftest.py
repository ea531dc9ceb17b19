"""Shared pytest fixtures: the two-security reference scenario and submission helpers."""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path

import pytest

from models.scenario import Scenario, Security

REFERENCE_SCENARIO_TEXT = """2 3 1000
A 10
10 12 15
B 5
20 18 22
"""


@pytest.fixture
def scenario() -> Scenario:
    """A: stock 10, prices 10/12/15. B: stock 5, prices 20/18/22. Capital 1000."""
    return Scenario(
        number_of_securities=2,
        number_of_days=3,
        start_capital=Decimal("1000"),
        securities={
            "A": Security(
                name="A",
                stock_available=10,
                prices=[Decimal("10"), Decimal("12"), Decimal("15")],
            ),
            "B": Security(
                name="B",
                stock_available=5,
                prices=[Decimal("20"), Decimal("18"), Decimal("22")],
            ),
        },
    )


@pytest.fixture
def scenario_text() -> str:
    """The reference scenario in its on-disk text form."""
    return REFERENCE_SCENARIO_TEXT


@pytest.fixture
def write_text(tmp_path: Path):
    """Write *content* to ``tmp_path / name`` and return the path."""

    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path

    return _write
