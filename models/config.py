"""Evaluation configuration models, loaded from YAML.

The two named profiles mirror the variants the evaluator is run with:

* ``base``: score is final cash only, no extra per-day rules.
* ``strict``: score includes holdings at final-day prices, a security may be
  traded once per day section, and at most 20 trades are allowed per section.
"""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, Field

DEFAULT_STRICT_MAX_TRADES_PER_DAY = 20


class EvaluationConfig(BaseModel):
    """Options controlling scoring and per-day validation rules."""

    include_portfolio_valuation: bool = Field(
        default=False,
        description="Add held shares valued at final-day prices to the score.",
    )
    reject_duplicate_security_per_day: bool = Field(
        default=False,
        description="Reject a trade whose security already appeared in the same day section.",
    )
    max_trades_per_day: int | None = Field(
        default=None,
        ge=1,
        description="Upper bound on the declared number of trades in a day section.",
    )

    @classmethod
    def base(cls) -> EvaluationConfig:
        return cls()

    @classmethod
    def strict(
        cls,
        max_trades_per_day: int | None = DEFAULT_STRICT_MAX_TRADES_PER_DAY,
    ) -> EvaluationConfig:
        return cls(
            include_portfolio_valuation=True,
            reject_duplicate_security_per_day=True,
            max_trades_per_day=max_trades_per_day,
        )

    @classmethod
    def for_variant(cls, variant: str) -> EvaluationConfig:
        """Return the named profile (``base`` or ``strict``)."""
        if variant == "base":
            return cls.base()
        if variant == "strict":
            return cls.strict()
        raise ValueError(f"Unknown variant '{variant}'. Expected 'base' or 'strict'.")

    @classmethod
    def from_yaml(cls, path: str | Path) -> EvaluationConfig:
        """Load and validate an ``EvaluationConfig`` from a YAML file.

        Raises ``FileNotFoundError`` if the file does not exist and
        ``ValueError`` if the content is not a valid YAML mapping.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with path.open(encoding="utf-8") as fh:
            raw = yaml.safe_load(fh)

        if raw is None:
            raw = {}
        if not isinstance(raw, dict):
            raise ValueError(
                f"Expected a YAML mapping in {path}, got {type(raw).__name__}."
            )

        return cls(**raw)
