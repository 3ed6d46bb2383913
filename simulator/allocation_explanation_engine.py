"""
simulator/allocation_explanation_engine.py
------------------------------------------
Deterministic, formatting-aware explanation engine for allocations.

Design contract:
  - Does NOT compute allocations
  - Does NOT mutate line items
  - Only interprets and explains AllocationEngine output
  - Fully stateless (all methods are @staticmethod)
"""

from typing import Dict, List

from simulator.allocation_engine import AllocationLineItem
from simulator.constants import CURRENCY_SYMBOLS, STRESS_SCENARIOS
from simulator.enums import RiskProfile, RiskTier
from simulator.portfolio_views import (
    allocate_capital,
    by_asset_class,
    by_country,
    expected_cagr_band,
    top_cagr_ranges,
)
from simulator.preferences import Preferences


class AllocationExplanationEngine:
    """
    Produce structured, human-readable explanations for an allocation.

    Entry point::

        explanation = AllocationExplanationEngine.explain(rows, preferences)

        Returns a dict with string sections:
        ``summary``              – one-line overview
        ``allocation_table``     – ASCII breakdown table
        ``breakdown``            – totals by asset class and by region
        ``risk_distribution``    – growth-risk share + risk-profile note
        ``capital_distribution`` – amount of the budget per line item
        ``settings``             – investment, risk, horizon, rebalancing
        ``expected_return``      – heuristic CAGR band + top holdings
        ``stress_tests``         – three scenario cards
        ``final_statement``      – closing interpretation sentence
    """

    # ------------------------------------------------------------------ #
    #  Public entry point
    # ------------------------------------------------------------------ #

    @staticmethod
    def explain(
        rows: List[AllocationLineItem],
        preferences: Preferences,
    ) -> Dict[str, str]:
        """
        Build the full explanation for *rows*.

        Parameters
        ----------
        rows:
            Output from ``AllocationEngine.allocate(preferences)``.
        preferences:
            The preferences the rows were computed from (used for the
            settings panel, capital amounts and profile-specific notes).
        """
        if not rows:
            return AllocationExplanationEngine._empty_response()

        aee = AllocationExplanationEngine
        return {
            "summary":              aee._summary(rows),
            "allocation_table":     aee._allocation_table(rows),
            "breakdown":            aee._breakdown(rows),
            "risk_distribution":    aee._risk_distribution(rows, preferences.risk_profile),
            "capital_distribution": aee._capital_distribution(rows, preferences),
            "settings":             aee._settings(preferences),
            "expected_return":      aee._expected_return(rows),
            "stress_tests":         aee._stress_tests(),
            "final_statement":      aee._final_statement(rows, preferences.risk_profile),
        }

    # ------------------------------------------------------------------ #
    #  Section builders
    # ------------------------------------------------------------------ #

    @staticmethod
    def _summary(rows: List[AllocationLineItem]) -> str:
        """One-sentence overview: row count, asset classes, largest holding."""
        top = rows[0]
        count = len(rows)
        classes = len({r.asset_class for r in rows})
        return (
            f"Portfolio built from {count} line item{'s' if count != 1 else ''} "
            f"across {classes} asset class{'es' if classes != 1 else ''}. "
            f"Largest allocation: {top.instrument} ({top.pct:.1f}%)."
        )

    @staticmethod
    def _allocation_table(rows: List[AllocationLineItem]) -> str:
        """Fixed-width table: Asset Class | Instrument | Country | Alloc | CAGR | Risk."""
        lines = [
            f"{'Asset Class':<13} {'Instrument':<46} {'Country':<8} "
            f"{'Alloc':>6}  {'Exp CAGR':<10} Risk"
        ]
        for r in rows:
            cagr = f"{r.expected_cagr[0]:g}–{r.expected_cagr[1]:g}%"
            lines.append(
                f"{r.asset_class.value:<13} {r.instrument:<46} {r.country.value:<8} "
                f"{r.pct:>5.1f}%  {cagr:<10} {r.risk_tier.value}"
            )
        return "\n".join(lines)

    @staticmethod
    def _breakdown(rows: List[AllocationLineItem]) -> str:
        """Totals by asset class, by region, then the top CAGR ranges."""
        lines = ["By asset class:"]
        for name, pct in by_asset_class(rows).items():
            lines.append(f"  {name:<13} {pct:>6.1f}%")
        lines.append("By region:")
        for name, pct in by_country(rows).items():
            lines.append(f"  {name:<13} {pct:>6.1f}%")
        lines.append("Expected CAGR ranges (largest holdings):")
        for item in top_cagr_ranges(rows):
            lines.append(f"  {item['name']:<20} {item['low']:g}–{item['high']:g}%")
        return "\n".join(lines)

    @staticmethod
    def _risk_distribution(
        rows: List[AllocationLineItem],
        risk_profile: RiskProfile,
    ) -> str:
        """
        Describe how much of the portfolio sits in High / Very High risk
        instruments and add a risk-profile note.

          > 25%  → Growth-heavy
          > 10%  → Balanced growth tilt
          ≤ 10%  → Defensive
        """
        growth = sum(
            r.pct for r in rows if r.risk_tier in (RiskTier.HIGH, RiskTier.VERY_HIGH)
        )
        if growth > 25:
            label = "Growth-heavy"
        elif growth > 10:
            label = "Balanced growth tilt"
        else:
            label = "Defensive"

        if risk_profile == RiskProfile.CONSERVATIVE:
            note = " Income and hedging sleeves dominate, consistent with a conservative strategy."
        elif risk_profile in (RiskProfile.AGGRESSIVE, RiskProfile.MODERATE_AGGRESSIVE):
            note = " Equity sector tilts carry most of the weight, reflecting an aggressive strategy."
        else:
            note = ""

        return f"{label} structure ({growth:.1f}% in high-risk instruments).{note}"

    @staticmethod
    def _capital_distribution(
        rows: List[AllocationLineItem],
        preferences: Preferences,
    ) -> str:
        """Amount of the budget that goes into each line item."""
        symbol = CURRENCY_SYMBOLS.get(preferences.currency.value, "")
        lines = [f"{'Instrument':<46} Amount ({symbol})"]
        for a in allocate_capital(rows, preferences.budget):
            lines.append(f"{a['instrument']:<46} {a['amount']:>14,.2f}")
        return "\n".join(lines)

    @staticmethod
    def _settings(preferences: Preferences) -> str:
        symbol = CURRENCY_SYMBOLS.get(preferences.currency.value, "")
        return "\n".join([
            f"Total Investment : {symbol}{preferences.budget:,.0f}",
            f"Risk Profile     : {preferences.risk_profile.value}",
            f"Horizon          : {preferences.horizon} yrs",
            f"Region Split     : {preferences.usa_pct:g}% USA | {preferences.india_pct:g}% India",
            f"Rebalancing      : {preferences.rebalance_frequency.value}",
        ])

    @staticmethod
    def _expected_return(rows: List[AllocationLineItem]) -> str:
        """Weighted CAGR band plus the top holdings' individual bands."""
        low, high = expected_cagr_band(rows)
        lines = [f"Expected portfolio CAGR: {low:.1f}–{high:.1f}% (heuristic only)."]
        for item in top_cagr_ranges(rows):
            lines.append(f"  {item['name']:<20} {item['low']:g}–{item['high']:g}%")
        return "\n".join(lines)

    @staticmethod
    def _stress_tests() -> str:
        blocks = []
        for s in STRESS_SCENARIOS:
            blocks.append(
                f"Stress Test: {s['title']}\n"
                f"  • Impact: {s['impact']}\n"
                f"  • Adjust: {s['adjust']}"
            )
        return "\n\n".join(blocks)

    @staticmethod
    def _final_statement(
        rows: List[AllocationLineItem],
        risk_profile: RiskProfile,
    ) -> str:
        """Closing interpretation tailored to risk profile."""
        top = rows[0]
        if risk_profile == RiskProfile.CONSERVATIVE:
            return (
                f"The allocation prioritises capital stability while keeping "
                f"growth exposure via {top.instrument}."
            )
        if risk_profile in (RiskProfile.AGGRESSIVE, RiskProfile.MODERATE_AGGRESSIVE):
            return (
                f"The allocation leans into equity growth, with {top.instrument} "
                f"leading the portfolio."
            )
        return (
            f"The allocation balances growth and income with {top.instrument} "
            f"as the core holding."
        )

    # ------------------------------------------------------------------ #
    #  Edge-case response
    # ------------------------------------------------------------------ #

    @staticmethod
    def _empty_response() -> Dict[str, str]:
        return {
            "summary":              "No allocation available.",
            "allocation_table":     "",
            "breakdown":            "",
            "risk_distribution":    "",
            "capital_distribution": "",
            "settings":             "",
            "expected_return":      "",
            "stress_tests":         "",
            "final_statement":      "",
        }

    # ------------------------------------------------------------------ #
    #  CLI formatter
    # ------------------------------------------------------------------ #

    @staticmethod
    def format_for_cli(explanation: Dict[str, str]) -> str:
        """
        Render the core sections as a single printable CLI string.

        The stress-test cards are left out; they are shown on request.
        """
        sections = [
            "=== Portfolio Allocation ===",
            explanation["summary"],
            "",
            explanation["allocation_table"],
            "",
            explanation["risk_distribution"],
            "",
            "--- Capital Distribution ---",
            explanation["capital_distribution"],
            "",
            "--- Settings ---",
            explanation["settings"],
            "",
            explanation["expected_return"],
            "",
            explanation["final_statement"],
            "",
            "Educational tool only — not financial advice.",
        ]
        return "\n".join(sections)
