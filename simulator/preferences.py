"""
simulator/preferences.py
------------------------
Investor preferences, the single input of the allocation engine.

``Preferences`` is immutable; callers that collect values piecemeal (the
CLI questionnaire) build a new record with ``dataclasses.replace`` or
``Preferences.clamped``.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, fields
from typing import Tuple

from simulator import config
from simulator.enums import Currency, RebalanceFrequency, RiskProfile
from simulator.errors import InvalidInputError


def clamp(low: float, value: float, high: float) -> float:
    """Clamp *value* into ``[low, high]``."""
    return max(low, min(high, value))


@dataclass(frozen=True)
class Preferences:
    """
    One set of allocation preferences.

    ``currency`` and ``rebalance_frequency`` are display-only; the engine
    never reads them.
    """
    budget: float = 25_000.0
    horizon: int = 7
    risk_profile: RiskProfile = RiskProfile.MODERATE
    region_split: Tuple[float, float] = (60.0, 40.0)   # (USA %, India %)
    include_gold: bool = True
    include_crypto: bool = False
    crypto_cap_pct: float = 3.0
    currency: Currency = Currency.USD
    rebalance_frequency: RebalanceFrequency = RebalanceFrequency.ANNUAL

    @property
    def usa_pct(self) -> float:
        return float(self.region_split[0])

    @property
    def india_pct(self) -> float:
        return float(self.region_split[1])

    # ------------------------------------------------------------------ #
    #  Construction helpers
    # ------------------------------------------------------------------ #

    @classmethod
    def clamped(cls, **values) -> "Preferences":
        """
        Build a record the way the input form does: numeric fields are
        clamped into their allowed ranges instead of being rejected.

        Unknown keyword arguments raise ``TypeError`` like the dataclass
        constructor would. Region split and enum fields are passed through
        unchanged and still validated by :meth:`validate`.
        """
        if "budget" in values:
            values["budget"] = clamp(
                config.BUDGET_MIN, float(values["budget"]), config.BUDGET_MAX
            )
        if "horizon" in values:
            values["horizon"] = int(clamp(
                config.HORIZON_MIN, round(float(values["horizon"])), config.HORIZON_MAX
            ))
        if "crypto_cap_pct" in values:
            values["crypto_cap_pct"] = clamp(
                config.CRYPTO_CAP_MIN, float(values["crypto_cap_pct"]),
                config.CRYPTO_CAP_MAX,
            )
        if "region_split" in values and isinstance(values["region_split"], str):
            values["region_split"] = parse_region_split(values["region_split"])
        return cls(**values)

    # ------------------------------------------------------------------ #
    #  Validation
    # ------------------------------------------------------------------ #

    def validate(self) -> "Preferences":
        """
        Check every field against its allowed range.

        Returns *self* so the call can be chained. Raises
        :class:`InvalidInputError` naming the first offending field.
        """
        _check_number("budget", self.budget, config.BUDGET_MIN, config.BUDGET_MAX)

        if isinstance(self.horizon, bool) or not isinstance(self.horizon, int):
            raise InvalidInputError(
                f"horizon must be a whole number of years (got {self.horizon!r}).",
                field="horizon",
            )
        _check_number("horizon", self.horizon, config.HORIZON_MIN, config.HORIZON_MAX)

        if not isinstance(self.risk_profile, RiskProfile):
            raise InvalidInputError(
                f"Unknown risk profile: {self.risk_profile!r}.", field="risk_profile"
            )

        if not isinstance(self.region_split, (tuple, list)) or len(self.region_split) != 2:
            raise InvalidInputError(
                "region_split must be a (usa_pct, india_pct) pair.", field="region_split"
            )
        usa, india = self.region_split
        _check_number("region_split", usa, 0.0, 100.0)
        _check_number("region_split", india, 0.0, 100.0)
        if abs(usa + india - 100.0) > config.SUM_TOLERANCE:
            raise InvalidInputError(
                f"Region split must sum to 100 (got {usa} + {india}).",
                field="region_split",
            )

        for name in ("include_gold", "include_crypto"):
            if not isinstance(getattr(self, name), bool):
                raise InvalidInputError(f"{name} must be True or False.", field=name)

        _check_number(
            "crypto_cap_pct", self.crypto_cap_pct,
            config.CRYPTO_CAP_MIN, config.CRYPTO_CAP_MAX,
        )

        if not isinstance(self.currency, Currency):
            raise InvalidInputError(f"Unknown currency: {self.currency!r}.", field="currency")
        if not isinstance(self.rebalance_frequency, RebalanceFrequency):
            raise InvalidInputError(
                f"Unknown rebalancing frequency: {self.rebalance_frequency!r}.",
                field="rebalance_frequency",
            )
        return self

    def as_dict(self) -> dict:
        """Plain-value view (enum values unwrapped) for display and logging."""
        out = {}
        for f in fields(self):
            value = getattr(self, f.name)
            out[f.name] = value.value if hasattr(value, "value") else value
        return out


def _check_number(name: str, value, low: float, high: float) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidInputError(f"{name} must be a number (got {value!r}).", field=name)
    if not math.isfinite(value) or value < low or value > high:
        raise InvalidInputError(
            f"{name} must be between {low:g} and {high:g} (got {value!r}).", field=name
        )


_SPLIT_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*%?\s*(?:[|/:,]\s*(\d+(?:\.\d+)?)\s*%?)?\s*$")


def parse_region_split(text: str) -> Tuple[float, float]:
    """
    Parse a USA|India split such as ``"60|40"``, ``"70/30"`` or ``"80"``.

    A single number is taken as the USA share; India receives the rest.
    Raises :class:`InvalidInputError` when the text is not a valid split.
    """
    match = _SPLIT_RE.match(text or "")
    if not match:
        raise InvalidInputError(
            f"Could not read region split {text!r}; use e.g. '60|40'.",
            field="region_split",
        )
    usa = float(match.group(1))
    india = float(match.group(2)) if match.group(2) is not None else 100.0 - usa
    if usa > 100.0 or india < 0.0 or abs(usa + india - 100.0) > config.SUM_TOLERANCE:
        raise InvalidInputError(
            f"Region split must sum to 100 (got {usa:g} + {india:g}).",
            field="region_split",
        )
    return (usa, india)
