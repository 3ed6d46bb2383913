"""
simulator/allocation_engine.py
------------------------------
Pure transformation engine: investor preferences → allocation line items.

Design contract:
  - No market data, no I/O, no caching between calls
  - Fixed rule tables (simulator/constants.py) drive every number
  - Each adjustment step takes a weights snapshot and returns a new one
  - Fully deterministic and stateless (all methods are @staticmethod)

Steps run in this order::

    base weights → horizon tilt → gold opt-out → crypto opt-out
      → crypto cap → normalise → regional split → sector tilts
      → non-equity lines → consolidate tiny slices → sort
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Tuple

import numpy as np

from simulator import config
from simulator.constants import (
    CATEGORIES,
    CONSOLIDATED_LINE,
    CRYPTO_LINE,
    INDIA_SECTOR_TILTS,
    NON_EQUITY_LINES,
    PROFILE_WEIGHTS,
    USA_SECTOR_TILTS,
)
from simulator.enums import AssetClass, Country, RiskProfile, RiskTier
from simulator.errors import DegenerateWeightsError, InvalidInputError
from simulator.preferences import Preferences

logger = logging.getLogger(__name__)

# category → weight (percent)
Weights = Dict[str, float]


@dataclass(frozen=True)
class AllocationLineItem:
    """One row of the allocation: a single instrument in a single country."""
    asset_class: AssetClass
    instrument: str
    country: Country
    pct: float
    expected_cagr: Tuple[float, float]
    risk_tier: RiskTier
    rationale: str

    def as_row(self) -> dict:
        """Flat, display-ready dict (enum values unwrapped)."""
        return {
            "asset_class": self.asset_class.value,
            "instrument":  self.instrument,
            "country":     self.country.value,
            "pct":         self.pct,
            "cagr_low":    self.expected_cagr[0],
            "cagr_high":   self.expected_cagr[1],
            "risk":        self.risk_tier.value,
            "rationale":   self.rationale,
        }


def allocate(preferences: Preferences) -> List[AllocationLineItem]:
    """Module-level shortcut for :meth:`AllocationEngine.allocate`."""
    return AllocationEngine.allocate(preferences)


class AllocationEngine:
    """
    Convert a :class:`Preferences` record into an ordered list of
    :class:`AllocationLineItem` whose percentages sum to 100.

    The individual steps are public so each one can be exercised on its
    own; :meth:`allocate` is the only entry point callers need.
    """

    # ------------------------------------------------------------------ #
    #  Public entry point
    # ------------------------------------------------------------------ #

    @staticmethod
    def allocate(preferences: Preferences) -> List[AllocationLineItem]:
        """
        Run the full pipeline for *preferences*.

        Raises
        ------
        InvalidInputError
            If *preferences* fails validation.
        DegenerateWeightsError
            If the adjusted category weights sum to zero or less.
        """
        if not isinstance(preferences, Preferences):
            raise InvalidInputError(
                f"Expected Preferences, got {type(preferences).__name__}."
            )
        p = preferences.validate()

        weights = AllocationEngine.base_weights(p.risk_profile)
        weights = AllocationEngine.apply_horizon_tilt(weights, p.horizon)
        weights = AllocationEngine.apply_gold_opt_out(weights, p.include_gold)
        weights = AllocationEngine.apply_crypto_opt_out(weights, p.include_crypto)
        weights = AllocationEngine.apply_crypto_cap(
            weights, p.include_crypto, p.crypto_cap_pct
        )
        weights = AllocationEngine.normalize(weights)
        logger.debug("Normalised weights for %s/%sy: %s",
                     p.risk_profile.value, p.horizon, weights)

        regional = AllocationEngine.split_by_region(weights, p.usa_pct, p.india_pct)

        rows = AllocationEngine.equity_lines(*regional["equity"])
        rows += AllocationEngine.non_equity_lines(regional)
        rows += AllocationEngine.crypto_lines(weights, p.include_crypto)

        rows = AllocationEngine.consolidate(rows)
        rows = AllocationEngine.order(rows)
        logger.debug("Allocation produced %d line items", len(rows))
        return rows

    # ------------------------------------------------------------------ #
    #  Category-weight steps
    # ------------------------------------------------------------------ #

    @staticmethod
    def base_weights(risk_profile: RiskProfile) -> Weights:
        """Fresh copy of the base weights for *risk_profile*."""
        try:
            table = PROFILE_WEIGHTS[risk_profile]
        except KeyError:
            raise InvalidInputError(
                f"Unknown risk profile: {risk_profile!r}.", field="risk_profile"
            ) from None
        return {k: float(table[k]) for k in CATEGORIES}

    @staticmethod
    def apply_horizon_tilt(weights: Weights, horizon: int) -> Weights:
        """
        Long horizons move weight from fixed income into equity, short
        horizons move it back. No clamping happens here.
        """
        if horizon >= config.LONG_HORIZON_YEARS:
            delta = config.LONG_HORIZON_EQUITY_DELTA
        elif horizon <= config.SHORT_HORIZON_YEARS:
            delta = config.SHORT_HORIZON_EQUITY_DELTA
        else:
            return dict(weights)

        w = dict(weights)
        w["equity"] += delta
        w["fixed"]  -= delta
        return w

    @staticmethod
    def apply_gold_opt_out(weights: Weights, include_gold: bool) -> Weights:
        """Excluded gold is folded into fixed income (not equity)."""
        w = dict(weights)
        if not include_gold:
            w["fixed"] += w["gold"]
            w["gold"] = 0.0
        return w

    @staticmethod
    def apply_crypto_opt_out(weights: Weights, include_crypto: bool) -> Weights:
        """Excluded crypto is folded into equity."""
        w = dict(weights)
        if not include_crypto:
            w["equity"] += w["crypto"]
            w["crypto"] = 0.0
        return w

    @staticmethod
    def apply_crypto_cap(
        weights: Weights,
        include_crypto: bool,
        cap_pct: float,
    ) -> Weights:
        """Clamp crypto to *cap_pct*; the excess moves to equity."""
        w = dict(weights)
        if include_crypto and w["crypto"] > cap_pct:
            w["equity"] += w["crypto"] - cap_pct
            w["crypto"] = float(cap_pct)
        return w

    @staticmethod
    def normalize(weights: Weights) -> Weights:
        """
        Rescale *weights* so they sum to exactly 100.

        Negative categories are clamped to zero first; the rule tables
        never produce one, but a modified table could.

        Raises
        ------
        DegenerateWeightsError
            If the (clamped) total is zero, negative, or not finite.
        """
        keys = list(weights)
        values = np.array([weights[k] for k in keys], dtype=float)

        if not np.all(np.isfinite(values)):
            raise DegenerateWeightsError(f"Non-finite category weight in {weights}.")

        negative = [k for k, v in zip(keys, values) if v < 0.0]
        if negative:
            logger.warning("Clamping negative category weights to 0: %s",
                           {k: weights[k] for k in negative})
            values = np.clip(values, 0.0, None)

        total = float(values.sum())
        if total <= 0.0:
            raise DegenerateWeightsError(
                f"Category weights sum to {total:g}; cannot build a portfolio."
            )

        scaled = values / total * 100.0
        return {k: float(v) for k, v in zip(keys, scaled)}

    # ------------------------------------------------------------------ #
    #  Line-item generation
    # ------------------------------------------------------------------ #

    @staticmethod
    def split_by_region(
        weights: Weights,
        usa_pct: float,
        india_pct: float,
    ) -> Dict[str, Tuple[float, float]]:
        """category → (USA share, India share), each share in percent."""
        return {
            k: (v * usa_pct / 100.0, v * india_pct / 100.0)
            for k, v in weights.items()
        }

    @staticmethod
    def equity_lines(equity_usa: float, equity_india: float) -> List[AllocationLineItem]:
        """Expand each regional equity share into its five sector tilts."""
        rows: List[AllocationLineItem] = []
        for share, tilts, country in (
            (equity_usa,   USA_SECTOR_TILTS,   Country.USA),
            (equity_india, INDIA_SECTOR_TILTS, Country.INDIA),
        ):
            for sector in tilts:
                rows.append(AllocationLineItem(
                    asset_class=AssetClass.EQUITY,
                    instrument=sector["instrument"],
                    country=country,
                    pct=share * sector["pct"] / 100.0,
                    expected_cagr=sector["cagr"],
                    risk_tier=sector["risk"],
                    rationale=f"Sector tilt: {sector['name']}",
                ))
        return rows

    @staticmethod
    def non_equity_lines(
        regional: Dict[str, Tuple[float, float]],
    ) -> List[AllocationLineItem]:
        """One row per strictly positive regional share of each non-equity category."""
        rows: List[AllocationLineItem] = []
        for category, lines in NON_EQUITY_LINES.items():
            usa_share, india_share = regional[category]
            for side, share in (("usa", usa_share), ("india", india_share)):
                if share > 0:
                    rows.append(AllocationEngine._line(lines[side], share))
        return rows

    @staticmethod
    def crypto_lines(weights: Weights, include_crypto: bool) -> List[AllocationLineItem]:
        """Crypto is never split by region: a single Global row or nothing."""
        if include_crypto and weights["crypto"] > 0:
            return [AllocationEngine._line(CRYPTO_LINE, weights["crypto"])]
        return []

    # ------------------------------------------------------------------ #
    #  Cleanup
    # ------------------------------------------------------------------ #

    @staticmethod
    def consolidate(
        rows: List[AllocationLineItem],
        threshold: float = config.CONSOLIDATION_THRESHOLD_PCT,
    ) -> List[AllocationLineItem]:
        """
        Fold every row below *threshold* percent into one trailing
        "Consolidated" row. The total is preserved; no row is added when
        nothing (or only zero) was folded.
        """
        kept: List[AllocationLineItem] = []
        tiny = 0.0
        for row in rows:
            if row.pct < threshold:
                tiny += row.pct
            else:
                kept.append(row)
        if tiny > 0:
            kept.append(AllocationEngine._line(CONSOLIDATED_LINE, tiny))
        return kept

    @staticmethod
    def order(rows: List[AllocationLineItem]) -> List[AllocationLineItem]:
        """Descending by pct; ties keep generation order (stable sort)."""
        return sorted(rows, key=lambda r: r.pct, reverse=True)

    # ------------------------------------------------------------------ #
    #  Private helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def _line(entry: dict, pct: float) -> AllocationLineItem:
        return AllocationLineItem(
            asset_class=entry["asset_class"],
            instrument=entry["instrument"],
            country=entry["country"],
            pct=pct,
            expected_cagr=entry["cagr"],
            risk_tier=entry["risk"],
            rationale=entry["rationale"],
        )
