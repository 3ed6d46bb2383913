import re
from typing import Optional, Tuple

from simulator.enums import Currency, Intent, RebalanceFrequency, RiskProfile
from simulator.errors import InvalidInputError
from simulator.preferences import parse_region_split


# ---------------------------------------------------------------------------
# COMMAND_MAP — single source of truth for all keyword → intent mappings.
# Single words match whole tokens only ("q" must not fire on "quarterly");
# multi-word phrases match anywhere in the text.
# ---------------------------------------------------------------------------
COMMAND_MAP: dict[Intent, list[str]] = {
    Intent.QUIT:           ["exit", "quit", "bye", "goodbye", "q"],
    Intent.RESTART:        ["restart", "reset", "start over", "new session"],
    Intent.SHOW_HELP:      ["help", "commands", "what can you do"],
    Intent.EXPORT_CSV:     ["export", "csv", "download"],
    Intent.SHOW_BREAKDOWN: ["breakdown", "by region", "by asset", "charts", "chart"],
    Intent.SHOW_STRESS:    ["stress", "scenarios", "stress test"],
}

_GREET_PHRASES = {"hi", "hello", "hey", "start"}
_DEFAULT_PHRASES = {"default", "defaults", "skip", "keep", "same"}

_YES = {"yes", "y", "yeah", "yep", "sure", "include", "true", "on", "ok"}
_NO = {"no", "n", "nope", "exclude", "false", "off", "none", "without"}

# 'set <field> <value>' edits one preference after results are shown.
_SET_RE = re.compile(r"^\s*set\s+\S", re.IGNORECASE)

# User-facing field names → Preferences attribute
FIELD_ALIASES: dict[str, str] = {
    "budget":     "budget",
    "amount":     "budget",
    "horizon":    "horizon",
    "years":      "horizon",
    "risk":       "risk_profile",
    "profile":    "risk_profile",
    "region":     "region_split",
    "split":      "region_split",
    "currency":   "currency",
    "gold":       "include_gold",
    "crypto":     "include_crypto",
    "cap":        "crypto_cap_pct",
    "crypto cap": "crypto_cap_pct",
    "rebalance":  "rebalance_frequency",
    "rebalancing": "rebalance_frequency",
}

_NUMBER_RE = re.compile(r"(\d[\d,]*\.?\d*)")


class IntentParser:
    """
    Parses raw user input into intents and extracted preference values.

    Detection priority (checked in order):
    1. COMMAND_MAP (global commands — quit, restart, help, export …)
    2. ``set <field> <value>``
    3. Default / skip keywords, greetings
    4. Any value extractor that recognises the text
    5. UNKNOWN fallback
    """

    # ------------------------------------------------------------------ #
    #  Public interface
    # ------------------------------------------------------------------ #

    def parse_intent(self, text: str) -> Intent:
        """Return the most likely Intent for *text*."""
        normalized = text.strip().lower()
        tokens = {t.strip(".,!?;:'\"") for t in normalized.split()}

        if _SET_RE.match(normalized):
            return Intent.SET_FIELD

        for intent, phrases in COMMAND_MAP.items():
            if any(self._phrase_in(p, normalized, tokens) for p in phrases):
                return intent

        if tokens and tokens <= _DEFAULT_PHRASES:
            return Intent.USE_DEFAULT

        if normalized in _GREET_PHRASES:
            return Intent.GREET

        if (
            self.extract_number(text) is not None
            or self.extract_risk(text) is not None
            or self.extract_yes_no(text) is not None
            or self.extract_currency(text) is not None
            or self.extract_rebalance(text) is not None
        ):
            return Intent.PROVIDE_VALUE

        return Intent.UNKNOWN

    # ------------------------------------------------------------------ #
    #  Value extractors
    # ------------------------------------------------------------------ #

    def extract_number(self, text: str) -> Optional[float]:
        """First plain number in *text* (commas allowed), or None."""
        match = _NUMBER_RE.search(text)
        if not match:
            return None
        try:
            return float(match.group(1).replace(",", ""))
        except ValueError:
            return None

    def extract_budget(self, text: str) -> Optional[float]:
        """Extract a budget amount (supports k/m/lakh/crore suffixes)."""
        pattern = r"[\$₹]?\s*(\d[\d,]*\.?\d*)\s*(k|m|lakh|lac|cr|crore)?\b"
        match = re.search(pattern, text, re.IGNORECASE)
        if not match:
            return None
        raw = float(match.group(1).replace(",", ""))
        suffix = (match.group(2) or "").lower()
        if suffix == "k":
            raw *= 1_000
        elif suffix == "m":
            raw *= 1_000_000
        elif suffix in ("lakh", "lac"):
            raw *= 100_000
        elif suffix in ("cr", "crore"):
            raw *= 10_000_000
        return raw

    def extract_horizon(self, text: str) -> Optional[int]:
        """Extract a horizon in whole years ('7', '12 years', 'a decade')."""
        lower = text.lower()
        match = re.search(r"(\d+(?:\.\d+)?)\s*(?:y|yr|yrs|year|years)?\b", lower)
        if match:
            return int(round(float(match.group(1))))
        if "decade" in lower:
            return 10
        return None

    def extract_risk(self, text: str) -> Optional[RiskProfile]:
        """
        Extract a risk profile. Menu numbers 1–4 are accepted too.
        The compound profile is checked first so 'moderate-aggressive'
        is not read as plain 'moderate'.
        """
        lower = text.strip().lower()
        menu = {
            "1": RiskProfile.CONSERVATIVE,
            "2": RiskProfile.MODERATE,
            "3": RiskProfile.MODERATE_AGGRESSIVE,
            "4": RiskProfile.AGGRESSIVE,
        }
        if lower in menu:
            return menu[lower]
        if re.search(r"moderate(ly)?[\s\-_]*aggressive|growth", lower):
            return RiskProfile.MODERATE_AGGRESSIVE
        if any(w in lower for w in ("aggressive", "high", "risky")):
            return RiskProfile.AGGRESSIVE
        if any(w in lower for w in ("conservative", "low", "safe", "cautious")):
            return RiskProfile.CONSERVATIVE
        if any(w in lower for w in ("moderate", "medium", "balanced")):
            return RiskProfile.MODERATE
        return None

    def extract_region_split(self, text: str) -> Optional[Tuple[float, float]]:
        """Extract a USA|India split such as '60|40', '70/30 usa india' or '80'."""
        numbers = re.findall(r"\d+(?:\.\d+)?", text)
        if not numbers or len(numbers) > 2:
            return None
        try:
            return parse_region_split("|".join(numbers))
        except InvalidInputError:
            return None

    def extract_yes_no(self, text: str) -> Optional[bool]:
        tokens = set(re.findall(r"[a-z]+", text.lower()))
        if tokens & _NO:
            return False
        if tokens & _YES:
            return True
        return None

    def extract_currency(self, text: str) -> Optional[Currency]:
        lower = text.lower()
        if "usd" in lower or "$" in lower or "dollar" in lower:
            return Currency.USD
        if "inr" in lower or "₹" in lower or "rupee" in lower:
            return Currency.INR
        return None

    def extract_rebalance(self, text: str) -> Optional[RebalanceFrequency]:
        lower = text.lower()
        if "quarter" in lower:
            return RebalanceFrequency.QUARTERLY
        if "annual" in lower or "year" in lower:
            return RebalanceFrequency.ANNUAL
        return None

    def extract_export_path(self, text: str) -> Optional[str]:
        """'export my_plan.csv' → 'my_plan.csv'; bare 'export' → None."""
        parts = text.strip().split(maxsplit=1)
        if len(parts) == 2 and parts[0].lower() in ("export", "download", "csv"):
            path = parts[1].strip().strip("\"'")
            return path or None
        return None

    def extract_set_command(self, text: str) -> Optional[Tuple[str, str]]:
        """
        Parse 'set <field> <value>' into ``(preferences_attribute, raw_value)``.

        Returns None when the field name is not recognised or no value
        follows it. Longer aliases win ('crypto cap' before 'crypto').
        """
        if not _SET_RE.match(text):
            return None
        rest = text.strip()[3:].strip()
        lower = rest.lower()
        for alias in sorted(FIELD_ALIASES, key=len, reverse=True):
            if not lower.startswith(alias):
                continue
            if len(lower) > len(alias) and lower[len(alias)].isalpha():
                continue
            value = rest[len(alias):].strip().lstrip("=").strip()
            if value.lower().startswith("to "):
                value = value[3:].strip()
            return (FIELD_ALIASES[alias], value) if value else None
        return None

    # ------------------------------------------------------------------ #
    #  Helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def _phrase_in(phrase: str, normalized: str, tokens: set) -> bool:
        if " " in phrase:
            return phrase in normalized
        return phrase in tokens
