import os
import tempfile
import unittest
from unittest.mock import patch

from simulator.conversation_manager import ConversationManager
from simulator.enums import (
    AssetClass,
    ConversationState,
    Currency,
    RebalanceFrequency,
    RiskProfile,
)


_HAPPY_PATH = ["25000", "7", "moderate", "60|40", "usd", "yes", "no", "annual"]


class TestConversationManager(unittest.TestCase):
    """Drives the questionnaire end-to-end through handle_message()."""

    def _drive(self, answers=None):
        """Helper: walk through the questionnaire and return the manager."""
        m = ConversationManager()
        m.start()
        for text in (answers or _HAPPY_PATH):
            m.handle_message(text)
        return m

    # -- Greeting / start --------------------------------------------------

    def test_start_returns_greeting(self):
        m = ConversationManager()
        msg = m.start()
        self.assertIn("Global Investment Simulator", msg)
        self.assertIn("investment budget", msg)
        self.assertEqual(m.context.state, ConversationState.COLLECT_BUDGET)

    def test_greeting_state_without_start(self):
        m = ConversationManager()
        m.handle_message("hi")
        self.assertEqual(m.context.state, ConversationState.COLLECT_BUDGET)

    def test_empty_input(self):
        m = ConversationManager()
        m.start()
        self.assertIn("listening", m.handle_message("   "))
        self.assertEqual(m.context.state, ConversationState.COLLECT_BUDGET)

    # -- Step by step ------------------------------------------------------

    def test_budget_step(self):
        m = ConversationManager()
        m.start()
        resp = m.handle_message("50k")
        self.assertEqual(m.context.preferences.budget, 50_000)
        self.assertIn("$50,000", resp)
        self.assertEqual(m.context.state, ConversationState.COLLECT_HORIZON)

    def test_budget_clamped_with_note(self):
        m = ConversationManager()
        m.start()
        resp = m.handle_message("50")
        self.assertEqual(m.context.preferences.budget, 100)
        self.assertIn("adjusted to the allowed range", resp)

    def test_invalid_budget_reprompts(self):
        m = ConversationManager()
        m.start()
        resp = m.handle_message("abc")
        self.assertIn("valid budget", resp)
        self.assertEqual(m.context.state, ConversationState.COLLECT_BUDGET)

    def test_horizon_clamped(self):
        m = self._drive(["25000", "45"])
        self.assertEqual(m.context.preferences.horizon, 30)
        self.assertEqual(m.context.state, ConversationState.COLLECT_RISK)

    def test_invalid_region_reprompts(self):
        m = self._drive(["25000", "7", "moderate", "60|30"])
        self.assertEqual(m.context.state, ConversationState.COLLECT_REGION)
        self.assertEqual(m.context.preferences.region_split, (60.0, 40.0))

    def test_results_command_before_results(self):
        m = ConversationManager()
        m.start()
        resp = m.handle_message("breakdown")
        self.assertIn("once the allocation has been computed", resp)
        self.assertEqual(m.context.state, ConversationState.COLLECT_BUDGET)

    # -- Full paths --------------------------------------------------------

    def test_happy_path_reaches_results(self):
        m = self._drive()
        self.assertEqual(m.context.state, ConversationState.SHOW_RESULTS)
        self.assertEqual(len(m.context.rows), 18)
        self.assertEqual(m.context.rows[0].instrument, "S&P 500 ETF (VOO)")

    def test_results_message_rendered(self):
        m = self._drive(_HAPPY_PATH[:-1])
        resp = m.handle_message("annual")
        self.assertIn("=== Portfolio Allocation ===", resp)
        self.assertIn("What next?", resp)

    def test_crypto_path_asks_for_cap(self):
        m = self._drive(["10000", "15", "aggressive", "70/30", "inr", "no", "yes"])
        self.assertEqual(m.context.state, ConversationState.COLLECT_CRYPTO_CAP)
        m.handle_message("2")
        m.handle_message("quarterly")
        prefs = m.context.preferences
        self.assertEqual(m.context.state, ConversationState.SHOW_RESULTS)
        self.assertEqual(prefs.risk_profile, RiskProfile.AGGRESSIVE)
        self.assertEqual(prefs.currency, Currency.INR)
        self.assertFalse(prefs.include_gold)
        self.assertEqual(prefs.crypto_cap_pct, 2.0)
        self.assertEqual(prefs.rebalance_frequency, RebalanceFrequency.QUARTERLY)
        crypto = [r for r in m.context.rows if r.asset_class == AssetClass.CRYPTO]
        self.assertEqual(len(crypto), 1)
        self.assertAlmostEqual(crypto[0].pct, 2.0, places=6)

    def test_all_defaults(self):
        m = self._drive(["default"] * 8)
        self.assertEqual(m.context.state, ConversationState.SHOW_RESULTS)
        self.assertEqual(len(m.context.rows), 18)

    # -- Follow-up commands ------------------------------------------------

    def test_breakdown_and_stress(self):
        m = self._drive()
        self.assertIn("By asset class:", m.handle_message("breakdown"))
        self.assertIn("Stress Test: Recession", m.handle_message("stress"))

    def test_set_horizon_recomputes(self):
        m = self._drive()
        resp = m.handle_message("set horizon 12")
        self.assertEqual(m.context.preferences.horizon, 12)
        self.assertEqual(m.context.state, ConversationState.SHOW_RESULTS)
        self.assertIn("12 yrs", resp)
        equity = sum(r.pct for r in m.context.rows if r.asset_class == AssetClass.EQUITY)
        self.assertAlmostEqual(equity, 65.0, places=6)

    def test_set_unreadable_value(self):
        m = self._drive()
        resp = m.handle_message("set risk whatever")
        self.assertIn("Could not read", resp)
        self.assertEqual(m.context.preferences.risk_profile, RiskProfile.MODERATE)

    def test_export_writes_file(self):
        m = self._drive()
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "plan.csv")
            resp = m.handle_message(f"export {path}")
            self.assertIn("saved", resp)
            self.assertTrue(os.path.exists(path))

    def test_export_failure_reported(self):
        m = self._drive()
        with patch("simulator.conversation_manager.write_csv",
                   side_effect=OSError("disk full")):
            resp = m.handle_message("export plan.csv")
        self.assertIn("Could not write", resp)
        self.assertIn("disk full", resp)

    # -- Global commands ---------------------------------------------------

    def test_restart_resets_preferences(self):
        m = self._drive()
        m.handle_message("restart")
        self.assertEqual(m.context.state, ConversationState.COLLECT_BUDGET)
        self.assertIsNone(m.context.rows)
        self.assertEqual(m.context.preferences.budget, 25_000)

    def test_help_keeps_state(self):
        m = self._drive(["25000"])
        resp = m.handle_message("help")
        self.assertIn("set <field> <value>", resp)
        self.assertEqual(m.context.state, ConversationState.COLLECT_HORIZON)

    def test_quit(self):
        m = self._drive()
        m.handle_message("bye")
        self.assertTrue(m.context.is_complete())


if __name__ == "__main__":
    unittest.main()
