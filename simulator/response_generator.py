from __future__ import annotations

from pathlib import Path
from typing import List

from simulator import config
from simulator.allocation_engine import AllocationLineItem
from simulator.allocation_explanation_engine import AllocationExplanationEngine
from simulator.constants import CURRENCY_SYMBOLS
from simulator.preferences import Preferences


class ResponseGenerator:
    """
    Builds human-readable bot messages.

    **Formatting-only** — allocation is delegated to
    :class:`AllocationEngine` and explanation to
    :class:`AllocationExplanationEngine`.
    """

    # ------------------------------------------------------------------ #
    #  Conversational prompts
    # ------------------------------------------------------------------ #

    def greeting(self) -> str:
        return (
            "👋 Welcome to the **Global Investment Simulator**!\n\n"
            "Answer a few questions and I'll build a USA/India multi-asset "
            "allocation from a fixed rule table.\n"
            "Type 'default' at any step to keep the suggested value.\n\n"
            + self.ask_budget()
        )

    def ask_budget(self) -> str:
        return (
            "What is your **investment budget**? "
            f"(e.g. '25000', '50k', '1.5m'; {config.BUDGET_MIN:,.0f} to "
            f"{config.BUDGET_MAX:,.0f})"
        )

    def ask_horizon(self) -> str:
        return (
            "What is your **time horizon** in years? "
            f"({config.HORIZON_MIN}–{config.HORIZON_MAX})"
        )

    def ask_risk(self) -> str:
        return (
            "What is your **risk profile**?\n"
            "  1. Conservative\n"
            "  2. Moderate\n"
            "  3. Moderate-Aggressive\n"
            "  4. Aggressive"
        )

    def ask_region(self) -> str:
        return (
            "How should the portfolio be split between **USA | India**? "
            "(e.g. '60|40', '80/20')"
        )

    def ask_currency(self) -> str:
        return "Display **currency**: USD or INR?"

    def ask_gold(self) -> str:
        return "Include **gold**? (yes/no)"

    def ask_crypto(self) -> str:
        return "Include **crypto**? (yes/no)"

    def ask_crypto_cap(self) -> str:
        return (
            "Maximum **crypto allocation** in percent? "
            f"({config.CRYPTO_CAP_MIN:g}–{config.CRYPTO_CAP_MAX:g})"
        )

    def ask_rebalance(self) -> str:
        return "**Rebalancing** frequency: Quarterly or Annual?"

    def confirm(self, label: str, value: str, clamped: bool = False) -> str:
        note = " (adjusted to the allowed range)" if clamped else ""
        return f"✅ {label}: **{value}**{note}."

    def format_budget(self, preferences: Preferences) -> str:
        symbol = CURRENCY_SYMBOLS.get(preferences.currency.value, "")
        return f"{symbol}{preferences.budget:,.0f}"

    def unknown(self) -> str:
        return (
            "🤔 I didn't quite understand that. "
            "Please try again, or type 'help' for guidance."
        )

    def quit_message(self) -> str:
        return "👋 Thanks for using the Global Investment Simulator. Goodbye!"

    def restart_message(self) -> str:
        return "🔄 Preferences reset to defaults. Let's begin again.\n\n" + self.greeting()

    def show_help(self) -> str:
        return (
            "Commands (work at any time):\n"
            "  • default / skip  — keep the suggested value for this question\n"
            "  • restart         — start over with default preferences\n"
            "  • exit            — quit\n\n"
            "After the allocation is shown:\n"
            "  • breakdown              — totals by asset class and region\n"
            "  • stress                 — stress-test scenarios\n"
            "  • export [file.csv]      — save the allocation as CSV\n"
            "  • set <field> <value>    — change one answer and recompute\n"
            "    fields: budget, horizon, risk, region, currency, gold, crypto,\n"
            "            crypto cap, rebalance"
        )

    def follow_up(self) -> str:
        return (
            "\nWhat next?\n"
            "  • 'breakdown' / 'stress' — more detail\n"
            "  • 'export [file.csv]'    — save as CSV\n"
            "  • 'set horizon 12'       — tweak an answer\n"
            "  • 'restart' / 'exit'"
        )

    def results_only(self) -> str:
        return "That command is available once the allocation has been computed."

    # ------------------------------------------------------------------ #
    #  Allocation output
    # ------------------------------------------------------------------ #

    def allocation(self, rows: List[AllocationLineItem], preferences: Preferences) -> str:
        """Full CLI rendering of an allocation."""
        exp = AllocationExplanationEngine.explain(rows, preferences)
        return AllocationExplanationEngine.format_for_cli(exp)

    def breakdown(self, rows: List[AllocationLineItem], preferences: Preferences) -> str:
        exp = AllocationExplanationEngine.explain(rows, preferences)
        return exp["breakdown"]

    def stress_tests(self, rows: List[AllocationLineItem], preferences: Preferences) -> str:
        exp = AllocationExplanationEngine.explain(rows, preferences)
        return exp["stress_tests"]

    def export_done(self, path: Path) -> str:
        return f"💾 Allocation saved to **{path}**."

    def export_failed(self, path: str, detail: str) -> str:
        return f"⚠️  Could not write '{path}': {detail}"

    def invalid_input(self, detail: str) -> str:
        return f"⚠️  {detail}"

    def computation_failed(self, detail: str) -> str:
        return (
            f"❌ The allocation could not be computed: {detail}\n"
            "Type 'restart' to start over."
        )
