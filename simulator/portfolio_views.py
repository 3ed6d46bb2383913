"""
simulator/portfolio_views.py
----------------------------
Read-only views over an allocation: aggregations, capital split, CSV.

Design contract:
  - Consumes ``AllocationEngine.allocate`` output, never mutates it
  - No allocation logic — only reductions and formatting
  - Fully stateless (module-level functions)
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Sequence, Tuple

import numpy as np
import pandas as pd

from simulator import config
from simulator.allocation_engine import AllocationLineItem
from simulator.constants import CSV_HEADERS

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# DataFrame view
# ---------------------------------------------------------------------------

def to_frame(rows: Sequence[AllocationLineItem]) -> pd.DataFrame:
    """One DataFrame row per line item, columns named like the CSV header."""
    records = [
        {
            "Asset Class":   r.asset_class.value,
            "Instrument":    r.instrument,
            "Country":       r.country.value,
            "Allocation %":  r.pct,
            "Exp CAGR Low":  r.expected_cagr[0],
            "Exp CAGR High": r.expected_cagr[1],
            "Risk":          r.risk_tier.value,
            "Rationale":     r.rationale,
        }
        for r in rows
    ]
    return pd.DataFrame.from_records(records, columns=CSV_HEADERS)


# ---------------------------------------------------------------------------
# Aggregations (pie charts)
# ---------------------------------------------------------------------------

def by_asset_class(rows: Sequence[AllocationLineItem]) -> Dict[str, float]:
    """Total pct per asset class, in first-seen order."""
    return _sum_by(rows, "Asset Class")


def by_country(rows: Sequence[AllocationLineItem]) -> Dict[str, float]:
    """Total pct per country, in first-seen order."""
    return _sum_by(rows, "Country")


def _sum_by(rows: Sequence[AllocationLineItem], column: str) -> Dict[str, float]:
    if not rows:
        return {}
    grouped = to_frame(rows).groupby(column, sort=False)["Allocation %"].sum()
    return {str(k): float(v) for k, v in grouped.items()}


# ---------------------------------------------------------------------------
# Expected-return comparison (bar chart)
# ---------------------------------------------------------------------------

def top_cagr_ranges(
    rows: Sequence[AllocationLineItem],
    n: int = config.TOP_CAGR_ROWS,
) -> List[dict]:
    """
    CAGR bands of the first *n* rows (rows are already sorted by pct).

    Long instrument names are shortened to fit a chart axis label.
    """
    limit = config.CAGR_LABEL_MAX_CHARS
    out = []
    for r in list(rows)[:n]:
        name = r.instrument
        if len(name) > limit:
            name = name[:limit] + "…"
        out.append({"name": name, "low": r.expected_cagr[0], "high": r.expected_cagr[1]})
    return out


def expected_cagr_band(rows: Sequence[AllocationLineItem]) -> Tuple[float, float]:
    """
    Allocation-weighted (low, high) CAGR band in percent.

    Heuristic only: it averages the fixed per-instrument bands and ignores
    correlation and compounding.
    """
    if not rows:
        return (0.0, 0.0)
    weights = np.array([r.pct for r in rows], dtype=float)
    lows    = np.array([r.expected_cagr[0] for r in rows], dtype=float)
    highs   = np.array([r.expected_cagr[1] for r in rows], dtype=float)
    total = weights.sum()
    if total <= 0:
        return (0.0, 0.0)
    return (float(np.dot(weights, lows) / total), float(np.dot(weights, highs) / total))


# ---------------------------------------------------------------------------
# Capital split
# ---------------------------------------------------------------------------

def allocate_capital(
    rows: Sequence[AllocationLineItem],
    budget: float,
) -> List[dict]:
    """
    Translate percentages into amounts of *budget*.

    Uses **remainder absorption** — every row except the last is rounded to
    2 dp; the last row receives ``budget - sum_of_rest`` so the amounts
    always add up exactly to *budget*.
    """
    if not rows:
        return []

    pct_total = sum(r.pct for r in rows)
    if abs(pct_total - 100.0) > config.SUM_TOLERANCE:
        raise ValueError(
            f"Allocations must sum to 100 before distributing capital (got {pct_total})."
        )

    out = []
    distributed = 0.0
    for r in rows[:-1]:
        amount = round(budget * r.pct / 100.0, 2)
        distributed += amount
        out.append({**r.as_row(), "amount": amount})

    out.append({**rows[-1].as_row(), "amount": round(budget - distributed, 2)})
    return out


# ---------------------------------------------------------------------------
# CSV export
# ---------------------------------------------------------------------------

def to_csv(rows: Sequence[AllocationLineItem]) -> str:
    """
    Render *rows* as CSV text.

    The header line is plain; every data field is double-quoted with
    embedded quotes escaped as ``\\"``. Allocation % has two decimals.
    """
    header = ",".join(CSV_HEADERS)
    if not rows:
        return header

    frame = to_frame(rows).astype(object)
    frame["Allocation %"] = frame["Allocation %"].map(lambda v: f"{v:.2f}")
    for col in ("Exp CAGR Low", "Exp CAGR High"):
        frame[col] = frame[col].map(lambda v: f"{v:g}")

    # Only the quote character is escaped; backslashes pass through as-is.
    quoted = frame.astype(str).apply(
        lambda col: '"' + col.str.replace('"', '\\"', regex=False) + '"'
    )
    body = quoted.apply(",".join, axis=1)
    return "\n".join([header, *body])


def write_csv(
    rows: Sequence[AllocationLineItem],
    path: str | Path = config.DEFAULT_CSV_FILENAME,
) -> Path:
    """Write :func:`to_csv` output to *path* (UTF-8) and return the path."""
    target = Path(path)
    target.write_text(to_csv(rows), encoding="utf-8")
    logger.info("Wrote %d allocation rows to %s", len(rows), target)
    return target
