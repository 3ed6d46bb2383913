"""
simulator/constants.py
----------------------
Fixed rule tables for the allocation engine.

Everything here is hand-authored policy: the four risk-profile weight
tuples, the equity sector tilts, and the instrument metadata attached to
every generated line item. Tables are frozen on import: mappings become
``MappingProxyType`` and lists become tuples, so a write raises ``TypeError``.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Mapping

from simulator.enums import AssetClass, Country, RiskProfile, RiskTier


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------
# Iteration order of this tuple is the order line items are generated in
# (and therefore the tie-break order of the final sort).

CATEGORIES: tuple = ("equity", "fixed", "gold", "reits", "cash", "crypto")


def _freeze(value: Any) -> Any:
    """Recursively turn dicts into read-only mappings and lists into tuples."""
    if isinstance(value, dict):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, list):
        return tuple(_freeze(v) for v in value)
    return value


# ---------------------------------------------------------------------------
# Risk profile → base category weights (each row sums to 100)
# ---------------------------------------------------------------------------

PROFILE_WEIGHTS: Mapping[RiskProfile, Mapping[str, float]] = _freeze({
    RiskProfile.CONSERVATIVE: {
        "equity": 35, "fixed": 45, "gold": 12, "reits": 4, "cash": 4, "crypto": 0,
    },
    RiskProfile.MODERATE: {
        "equity": 60, "fixed": 25, "gold": 8, "reits": 5, "cash": 2, "crypto": 0,
    },
    RiskProfile.MODERATE_AGGRESSIVE: {
        "equity": 70, "fixed": 15, "gold": 7, "reits": 5, "cash": 1, "crypto": 2,
    },
    RiskProfile.AGGRESSIVE: {
        "equity": 80, "fixed": 8, "gold": 5, "reits": 5, "cash": 0, "crypto": 2,
    },
})


# ---------------------------------------------------------------------------
# Equity sector tilts
# ---------------------------------------------------------------------------
# ``pct`` is the share of the regional equity weight (each list sums to 100).

USA_SECTOR_TILTS: tuple = _freeze([
    {"name": "Broad Market",  "pct": 55, "instrument": "S&P 500 ETF (VOO)",
     "cagr": (7, 10), "risk": RiskTier.MEDIUM},
    {"name": "Technology/AI", "pct": 20, "instrument": "Nasdaq 100 (QQQ)",
     "cagr": (9, 12), "risk": RiskTier.HIGH},
    {"name": "Healthcare",    "pct": 10, "instrument": "Healthcare ETF (XLV)",
     "cagr": (7, 10), "risk": RiskTier.MEDIUM},
    {"name": "Energy",        "pct": 8,  "instrument": "Energy ETF (XLE)",
     "cagr": (7, 10), "risk": RiskTier.MEDIUM},
    {"name": "Industrials",   "pct": 7,  "instrument": "Industrials ETF (XLI)",
     "cagr": (7, 10), "risk": RiskTier.MEDIUM},
])

INDIA_SECTOR_TILTS: tuple = _freeze([
    {"name": "Broad Market",        "pct": 55, "instrument": "Nifty 50 ETF",
     "cagr": (8, 12), "risk": RiskTier.MEDIUM},
    {"name": "Midcap Growth",       "pct": 20, "instrument": "Nifty Midcap 150",
     "cagr": (11, 14), "risk": RiskTier.HIGH},
    {"name": "Financials",          "pct": 10, "instrument": "Bank Nifty ETF",
     "cagr": (8, 12), "risk": RiskTier.MEDIUM},
    {"name": "Manufacturing/Infra", "pct": 10, "instrument": "CPSE/Infra ETF",
     "cagr": (8, 12), "risk": RiskTier.MEDIUM},
    {"name": "Export-Tech",         "pct": 5,  "instrument": "IT Services ETF",
     "cagr": (8, 12), "risk": RiskTier.MEDIUM},
])


# ---------------------------------------------------------------------------
# Non-equity instruments
# ---------------------------------------------------------------------------
# One entry per (category, regional share). The USA share of gold is held
# through a globally listed ETF, hence ``Country.GLOBAL``.

NON_EQUITY_LINES: Mapping[str, Mapping[str, Mapping]] = _freeze({
    "fixed": {
        "usa": {
            "asset_class": AssetClass.FIXED_INCOME,
            "instrument":  "UST Bills/Notes Ladder (T-Bills, 2-5y Notes)",
            "country":     Country.USA,
            "cagr":        (3.5, 5),
            "risk":        RiskTier.LOW,
            "rationale":   "Income & drawdown buffer",
        },
        "india": {
            "asset_class": AssetClass.FIXED_INCOME,
            "instrument":  "India G-Secs/SDL Ladder (T-Bills, 5-10y)",
            "country":     Country.INDIA,
            "cagr":        (6, 7.5),
            "risk":        RiskTier.LOW,
            "rationale":   "Carry + rate diversification",
        },
    },
    "gold": {
        "usa": {
            "asset_class": AssetClass.COMMODITY,
            "instrument":  "Gold ETF (GLD/IAU)",
            "country":     Country.GLOBAL,
            "cagr":        (4.5, 6),
            "risk":        RiskTier.LOW,
            "rationale":   "Inflation & crisis hedge",
        },
        "india": {
            "asset_class": AssetClass.COMMODITY,
            "instrument":  "India Gold ETF/SGB",
            "country":     Country.INDIA,
            "cagr":        (4.5, 6),
            "risk":        RiskTier.LOW,
            "rationale":   "Local currency hedge",
        },
    },
    "reits": {
        "usa": {
            "asset_class": AssetClass.REITS,
            "instrument":  "U.S. REIT ETF (VNQ)",
            "country":     Country.USA,
            "cagr":        (5, 7),
            "risk":        RiskTier.MEDIUM,
            "rationale":   "Income + diversification",
        },
        "india": {
            "asset_class": AssetClass.REITS,
            "instrument":  "India REIT/InvIT",
            "country":     Country.INDIA,
            "cagr":        (6, 8),
            "risk":        RiskTier.MEDIUM,
            "rationale":   "Infra & real-asset exposure",
        },
    },
    "cash": {
        "usa": {
            "asset_class": AssetClass.CASH,
            "instrument":  "USD MMF / T-Bill ETF (BIL/SGOV)",
            "country":     Country.USA,
            "cagr":        (3, 4),
            "risk":        RiskTier.LOW,
            "rationale":   "Dry powder for dips",
        },
        "india": {
            "asset_class": AssetClass.CASH,
            "instrument":  "INR Liquid Fund / T-Bill",
            "country":     Country.INDIA,
            "cagr":        (5, 6),
            "risk":        RiskTier.LOW,
            "rationale":   "Liquidity buffer",
        },
    },
})

CRYPTO_LINE: Mapping = _freeze({
    "asset_class": AssetClass.CRYPTO,
    "instrument":  "BTC/ETH Spot ETF Blend",
    "country":     Country.GLOBAL,
    "cagr":        (12, 20),
    "risk":        RiskTier.VERY_HIGH,
    "rationale":   "Speculative convexity with cap",
})

CONSOLIDATED_LINE: Mapping = _freeze({
    "asset_class": AssetClass.CASH,
    "instrument":  "Consolidated",
    "country":     Country.GLOBAL,
    "cagr":        (0, 0),
    "risk":        RiskTier.LOW,
    "rationale":   "Rounded tiny slices",
})


# ---------------------------------------------------------------------------
# CSV export
# ---------------------------------------------------------------------------

CSV_HEADERS: list[str] = [
    "Asset Class", "Instrument", "Country", "Allocation %",
    "Exp CAGR Low", "Exp CAGR High", "Risk", "Rationale",
]


# ---------------------------------------------------------------------------
# Stress-test notes shown beside the allocation
# ---------------------------------------------------------------------------

STRESS_SCENARIOS: tuple = _freeze([
    {
        "title":  "Recession",
        "impact": "EPS declines; equities -15% to -35%; rates down → bonds rise.",
        "adjust": "Shift 10–15% to T-Bills + Gold; tilt to Healthcare/Staples.",
    },
    {
        "title":  "High Inflation",
        "impact": "Long-duration bonds pressured; commodities rally.",
        "adjust": "+10% commodities; shorten duration; maintain quality value.",
    },
    {
        "title":  "USD Strength",
        "impact": "INR assets face FX drag; USD assets outperform in USD terms.",
        "adjust": "Raise U.S. ETF weight; hedge INR exposure; prefer exporters.",
    },
])


# Currency display symbols
CURRENCY_SYMBOLS: Mapping[str, str] = _freeze({
    "USD": "$",
    "INR": "₹",
})
