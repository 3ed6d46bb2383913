"""
tests/test_portfolio_views.py
-----------------------------
Unit tests for the read-only allocation views.

Coverage:
    to_frame            – columns and row count
    by_asset_class / by_country – sum-by-key reductions
    top_cagr_ranges     – top-N selection and label truncation
    expected_cagr_band  – weighted band bounds
    allocate_capital    – remainder absorption, sum guard
    to_csv / write_csv  – header, quoting, escaping, formatting
"""

import os
import tempfile
import unittest

from simulator.allocation_engine import AllocationLineItem, allocate
from simulator.constants import CSV_HEADERS
from simulator.enums import AssetClass, Country, RiskProfile, RiskTier
from simulator.portfolio_views import (
    allocate_capital,
    by_asset_class,
    by_country,
    expected_cagr_band,
    to_csv,
    to_frame,
    top_cagr_ranges,
    write_csv,
)
from simulator.preferences import Preferences


# ---------------------------------------------------------------------------
# Shared fixtures
# ---------------------------------------------------------------------------

_MODERATE = allocate(Preferences())       # Moderate, 7y, 60|40, gold, no crypto
_AGGRESSIVE = allocate(Preferences(risk_profile=RiskProfile.AGGRESSIVE,
                                   include_crypto=True, crypto_cap_pct=1))


def _item(instrument: str, pct: float, cagr=(1, 2)) -> AllocationLineItem:
    return AllocationLineItem(
        asset_class=AssetClass.EQUITY,
        instrument=instrument,
        country=Country.USA,
        pct=pct,
        expected_cagr=cagr,
        risk_tier=RiskTier.MEDIUM,
        rationale="r",
    )


# ===========================================================================
# 1. DataFrame view
# ===========================================================================

class TestToFrame(unittest.TestCase):

    def test_columns_match_csv_header(self):
        self.assertEqual(list(to_frame(_MODERATE).columns), CSV_HEADERS)

    def test_one_row_per_item(self):
        self.assertEqual(len(to_frame(_MODERATE)), len(_MODERATE))

    def test_enum_values_unwrapped(self):
        frame = to_frame(_MODERATE)
        self.assertEqual(frame.iloc[0]["Asset Class"], "Equity")
        self.assertEqual(frame.iloc[0]["Country"], "USA")


# ===========================================================================
# 2. Aggregations
# ===========================================================================

class TestAggregations(unittest.TestCase):

    def test_by_asset_class_totals(self):
        totals = by_asset_class(_MODERATE)
        self.assertEqual(set(totals), {"Equity", "Fixed Income", "Commodity", "REITs", "Cash"})
        self.assertAlmostEqual(totals["Equity"], 60.0, places=6)
        self.assertAlmostEqual(totals["Fixed Income"], 25.0, places=6)
        self.assertAlmostEqual(totals["Commodity"], 8.0, places=6)
        self.assertAlmostEqual(totals["REITs"], 5.0, places=6)
        self.assertAlmostEqual(totals["Cash"], 2.0, places=6)

    def test_by_asset_class_first_seen_order(self):
        self.assertEqual(list(by_asset_class(_MODERATE))[:2], ["Equity", "Fixed Income"])

    def test_by_country_totals(self):
        totals = by_country(_MODERATE)
        self.assertAlmostEqual(totals["India"], 40.0, places=6)
        # USA gold is held via a global ETF
        self.assertAlmostEqual(totals["Global"], 4.8, places=6)
        self.assertAlmostEqual(totals["USA"], 55.2, places=6)

    def test_crypto_counts_as_global(self):
        totals = by_country(_AGGRESSIVE)
        self.assertAlmostEqual(totals["Global"], 3.0 + 1.0, places=6)

    def test_totals_sum_to_100(self):
        self.assertAlmostEqual(sum(by_asset_class(_AGGRESSIVE).values()), 100.0, places=6)
        self.assertAlmostEqual(sum(by_country(_AGGRESSIVE).values()), 100.0, places=6)

    def test_empty(self):
        self.assertEqual(by_asset_class([]), {})
        self.assertEqual(by_country([]), {})


# ===========================================================================
# 3. Expected-return views
# ===========================================================================

class TestCagrViews(unittest.TestCase):

    def test_top_eight(self):
        top = top_cagr_ranges(_MODERATE)
        self.assertEqual(len(top), 8)
        self.assertEqual(top[0], {"name": "S&P 500 ETF (VOO)", "low": 7, "high": 10})

    def test_long_names_truncated(self):
        top = top_cagr_ranges(_MODERATE)
        self.assertEqual(top[1]["name"], "UST Bills/Notes La…")

    def test_fewer_rows_than_n(self):
        self.assertEqual(len(top_cagr_ranges([_item("A", 100.0)])), 1)

    def test_band_is_weighted_average(self):
        rows = [_item("A", 75.0, (4, 8)), _item("B", 25.0, (8, 12))]
        self.assertEqual(expected_cagr_band(rows), (5.0, 9.0))

    def test_band_within_instrument_bounds(self):
        low, high = expected_cagr_band(_MODERATE)
        self.assertGreater(low, 3.0)
        self.assertLess(high, 14.0)
        self.assertLess(low, high)

    def test_band_empty(self):
        self.assertEqual(expected_cagr_band([]), (0.0, 0.0))


# ===========================================================================
# 4. Capital split
# ===========================================================================

class TestAllocateCapital(unittest.TestCase):

    def test_amounts_sum_to_budget(self):
        out = allocate_capital(_MODERATE, 25_000)
        self.assertAlmostEqual(sum(a["amount"] for a in out), 25_000, places=2)

    def test_first_amount(self):
        out = allocate_capital(_MODERATE, 25_000)
        self.assertEqual(out[0]["instrument"], "S&P 500 ETF (VOO)")
        self.assertAlmostEqual(out[0]["amount"], 4_950.0, places=2)

    def test_awkward_budget_still_exact(self):
        out = allocate_capital(_AGGRESSIVE, 12_345.67)
        self.assertAlmostEqual(sum(a["amount"] for a in out), 12_345.67, places=2)

    def test_rows_not_summing_to_100_rejected(self):
        with self.assertRaises(ValueError):
            allocate_capital([_item("A", 50.0)], 1000)

    def test_empty(self):
        self.assertEqual(allocate_capital([], 1000), [])


# ===========================================================================
# 5. CSV
# ===========================================================================

class TestCsv(unittest.TestCase):

    def test_header_line(self):
        first = to_csv(_MODERATE).split("\n")[0]
        self.assertEqual(
            first,
            "Asset Class,Instrument,Country,Allocation %,"
            "Exp CAGR Low,Exp CAGR High,Risk,Rationale",
        )

    def test_one_line_per_row(self):
        self.assertEqual(len(to_csv(_MODERATE).split("\n")), 1 + len(_MODERATE))

    def test_first_data_line(self):
        line = to_csv(_MODERATE).split("\n")[1]
        self.assertEqual(
            line,
            '"Equity","S&P 500 ETF (VOO)","USA","19.80","7","10","Medium",'
            '"Sector tilt: Broad Market"',
        )

    def test_fractional_cagr_kept(self):
        csv_text = to_csv(_MODERATE)
        self.assertIn('"3.5","5"', csv_text)

    def test_quotes_escaped(self):
        line = to_csv([_item('Fund "Alpha"', 100.0)]).split("\n")[1]
        self.assertIn('"Fund \\"Alpha\\""', line)

    def test_backslashes_not_doubled(self):
        line = to_csv([_item('A\\B "x"', 100.0)]).split("\n")[1]
        self.assertTrue(line.startswith('"Equity","A\\B \\"x\\"","USA","100.00"'))

    def test_empty_rows_header_only(self):
        self.assertEqual(to_csv([]), ",".join(CSV_HEADERS))

    def test_write_csv_round_trip(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "plan.csv")
            written = write_csv(_MODERATE, path)
            with open(written, encoding="utf-8") as fh:
                self.assertEqual(fh.read(), to_csv(_MODERATE))


if __name__ == "__main__":
    unittest.main()
