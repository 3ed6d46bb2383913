import unittest
from simulator.intent_parser import IntentParser
from simulator.enums import Currency, Intent, RebalanceFrequency, RiskProfile


class TestIntentParser(unittest.TestCase):
    def setUp(self):
        self.parser = IntentParser()

    def test_quit_intent(self):
        self.assertEqual(self.parser.parse_intent("exit"), Intent.QUIT)
        self.assertEqual(self.parser.parse_intent("quit"), Intent.QUIT)
        self.assertEqual(self.parser.parse_intent("q"), Intent.QUIT)

    def test_quarterly_is_not_quit(self):
        self.assertEqual(self.parser.parse_intent("quarterly"), Intent.PROVIDE_VALUE)

    def test_restart_beats_greeting(self):
        self.assertEqual(self.parser.parse_intent("start over"), Intent.RESTART)
        self.assertEqual(self.parser.parse_intent("hello"), Intent.GREET)

    def test_result_commands(self):
        self.assertEqual(self.parser.parse_intent("breakdown"), Intent.SHOW_BREAKDOWN)
        self.assertEqual(self.parser.parse_intent("stress test"), Intent.SHOW_STRESS)
        self.assertEqual(self.parser.parse_intent("export /tmp/plan.csv"), Intent.EXPORT_CSV)
        self.assertEqual(self.parser.parse_intent("set horizon 12"), Intent.SET_FIELD)

    def test_default_keywords(self):
        self.assertEqual(self.parser.parse_intent("default"), Intent.USE_DEFAULT)
        self.assertEqual(self.parser.parse_intent("Skip"), Intent.USE_DEFAULT)

    def test_answers_are_values(self):
        for text in ("yes", "no", "25000", "moderate", "60|40", "usd"):
            self.assertEqual(self.parser.parse_intent(text), Intent.PROVIDE_VALUE, text)

    def test_gibberish_unknown(self):
        self.assertEqual(self.parser.parse_intent("abc"), Intent.UNKNOWN)

    def test_budget_extraction(self):
        self.assertAlmostEqual(self.parser.extract_budget("50k"), 50000)
        self.assertAlmostEqual(self.parser.extract_budget("1.5m"), 1500000)
        self.assertAlmostEqual(self.parser.extract_budget("$1,500"), 1500)
        self.assertAlmostEqual(self.parser.extract_budget("2 lakh"), 200000)
        self.assertIsNone(self.parser.extract_budget("lots"))

    def test_horizon_extraction(self):
        self.assertEqual(self.parser.extract_horizon("7"), 7)
        self.assertEqual(self.parser.extract_horizon("12 years"), 12)
        self.assertEqual(self.parser.extract_horizon("a decade"), 10)
        self.assertIsNone(self.parser.extract_horizon("long"))

    def test_risk_extraction(self):
        self.assertEqual(self.parser.extract_risk("I prefer low risk"), RiskProfile.CONSERVATIVE)
        self.assertEqual(self.parser.extract_risk("balanced"), RiskProfile.MODERATE)
        self.assertEqual(self.parser.extract_risk("moderate-aggressive"),
                         RiskProfile.MODERATE_AGGRESSIVE)
        self.assertEqual(self.parser.extract_risk("aggressive"), RiskProfile.AGGRESSIVE)
        self.assertEqual(self.parser.extract_risk("3"), RiskProfile.MODERATE_AGGRESSIVE)
        self.assertIsNone(self.parser.extract_risk("xyz"))

    def test_region_split_extraction(self):
        self.assertEqual(self.parser.extract_region_split("70/30"), (70.0, 30.0))
        self.assertEqual(self.parser.extract_region_split("80"), (80.0, 20.0))
        self.assertIsNone(self.parser.extract_region_split("60|30"))
        self.assertIsNone(self.parser.extract_region_split("1 2 3"))

    def test_yes_no_extraction(self):
        self.assertTrue(self.parser.extract_yes_no("yes please"))
        self.assertFalse(self.parser.extract_yes_no("no thanks"))
        self.assertIsNone(self.parser.extract_yes_no("maybe"))

    def test_currency_and_rebalance(self):
        self.assertEqual(self.parser.extract_currency("inr"), Currency.INR)
        self.assertEqual(self.parser.extract_currency("dollars"), Currency.USD)
        self.assertEqual(self.parser.extract_rebalance("every quarter"),
                         RebalanceFrequency.QUARTERLY)
        self.assertEqual(self.parser.extract_rebalance("yearly"), RebalanceFrequency.ANNUAL)

    def test_export_path(self):
        self.assertEqual(self.parser.extract_export_path("export my_plan.csv"), "my_plan.csv")
        self.assertIsNone(self.parser.extract_export_path("export"))

    def test_set_command(self):
        self.assertEqual(self.parser.extract_set_command("set crypto cap 2"),
                         ("crypto_cap_pct", "2"))
        self.assertEqual(self.parser.extract_set_command("set crypto yes"),
                         ("include_crypto", "yes"))
        self.assertEqual(self.parser.extract_set_command("set horizon to 12"),
                         ("horizon", "12"))
        self.assertIsNone(self.parser.extract_set_command("set horizon"))
        self.assertIsNone(self.parser.extract_set_command("set leverage 2"))


if __name__ == "__main__":
    unittest.main()
