from simulator import config
from simulator.allocation_engine import AllocationEngine
from simulator.enums import ConversationState, Intent
from simulator.errors import DegenerateWeightsError, InvalidInputError
from simulator.intent_parser import IntentParser
from simulator.logging_config import get_logger
from simulator.portfolio_views import write_csv
from simulator.response_generator import ResponseGenerator
from simulator.session_context import SessionContext

logger = get_logger(__name__)


class ConversationManager:
    """
    Orchestrates the questionnaire via a finite-state machine::

        GREETING
          → COLLECT_BUDGET
          → COLLECT_HORIZON
          → COLLECT_RISK
          → COLLECT_REGION
          → COLLECT_CURRENCY
          → COLLECT_GOLD
          → COLLECT_CRYPTO
          → COLLECT_CRYPTO_CAP   (only when crypto is included)
          → COLLECT_REBALANCE
          → SHOW_RESULTS  (loop: breakdown / stress / export / set)
          → DONE
    """

    def __init__(self):
        self.context = SessionContext()
        self.parser = IntentParser()
        self.generator = ResponseGenerator()

    # ------------------------------------------------------------------ #
    #  Public entry point (called by main.py)
    # ------------------------------------------------------------------ #

    def handle_message(self, user_input: str) -> str:
        """Process one turn of user text and return the bot's reply."""
        text = user_input.strip()
        if not text:
            return "Please type something — I'm listening!"

        intent = self.parser.parse_intent(text)

        # ---- Global overrides — work in ANY conversation state ----------

        if intent == Intent.QUIT:
            self.context.state = ConversationState.DONE
            return self.generator.quit_message()

        if intent == Intent.RESTART:
            self.context.reset()
            self.context.state = ConversationState.COLLECT_BUDGET
            return self.generator.restart_message()

        if intent == Intent.SHOW_HELP:
            return self.generator.show_help()

        return self._dispatch(text, intent)

    def start(self) -> str:
        """Return the opening greeting without requiring user input."""
        self.context.state = ConversationState.COLLECT_BUDGET
        return self.generator.greeting()

    # ------------------------------------------------------------------ #
    #  State dispatcher
    # ------------------------------------------------------------------ #

    def _dispatch(self, text: str, intent: Intent) -> str:
        state = self.context.state

        handlers = {
            ConversationState.GREETING:           self._handle_greeting,
            ConversationState.COLLECT_BUDGET:     self._handle_budget,
            ConversationState.COLLECT_HORIZON:    self._handle_horizon,
            ConversationState.COLLECT_RISK:       self._handle_risk,
            ConversationState.COLLECT_REGION:     self._handle_region,
            ConversationState.COLLECT_CURRENCY:   self._handle_currency,
            ConversationState.COLLECT_GOLD:       self._handle_gold,
            ConversationState.COLLECT_CRYPTO:     self._handle_crypto,
            ConversationState.COLLECT_CRYPTO_CAP: self._handle_crypto_cap,
            ConversationState.COLLECT_REBALANCE:  self._handle_rebalance,
            ConversationState.SHOW_RESULTS:       self._handle_follow_up,
            ConversationState.DONE:               lambda t, i: self.generator.quit_message(),
        }

        if state != ConversationState.SHOW_RESULTS and intent in (
            Intent.EXPORT_CSV, Intent.SHOW_BREAKDOWN, Intent.SHOW_STRESS, Intent.SET_FIELD,
        ):
            return self.generator.results_only()

        handler = handlers.get(state)
        return handler(text, intent) if handler else self.generator.unknown()

    # ------------------------------------------------------------------ #
    #  Per-state handlers
    # ------------------------------------------------------------------ #

    def _handle_greeting(self, text: str, intent: Intent) -> str:
        self.context.state = ConversationState.COLLECT_BUDGET
        return self.generator.greeting()

    def _handle_budget(self, text: str, intent: Intent) -> str:
        if intent != Intent.USE_DEFAULT:
            budget = self.parser.extract_budget(text)
            if budget is None or budget <= 0:
                return "Please enter a valid budget amount (e.g. '25000' or '50k')."
            prefs = self.context.update(budget=budget)
            clamped = prefs.budget != budget
        else:
            prefs, clamped = self.context.preferences, False
        self.context.state = ConversationState.COLLECT_HORIZON
        return (
            self.generator.confirm("Budget", self.generator.format_budget(prefs), clamped)
            + " " + self.generator.ask_horizon()
        )

    def _handle_horizon(self, text: str, intent: Intent) -> str:
        if intent != Intent.USE_DEFAULT:
            horizon = self.parser.extract_horizon(text)
            if horizon is None:
                return "Please enter your horizon as a number of years (e.g. '7')."
            prefs = self.context.update(horizon=horizon)
            clamped = prefs.horizon != horizon
        else:
            prefs, clamped = self.context.preferences, False
        self.context.state = ConversationState.COLLECT_RISK
        return (
            self.generator.confirm("Horizon", f"{prefs.horizon} yrs", clamped)
            + "\n" + self.generator.ask_risk()
        )

    def _handle_risk(self, text: str, intent: Intent) -> str:
        if intent != Intent.USE_DEFAULT:
            risk = self.parser.extract_risk(text)
            if risk is None:
                return (
                    "Please choose **Conservative**, **Moderate**, "
                    "**Moderate-Aggressive** or **Aggressive** (or 1–4)."
                )
            self.context.update(risk_profile=risk)
        self.context.state = ConversationState.COLLECT_REGION
        return (
            self.generator.confirm("Risk profile", self.context.preferences.risk_profile.value)
            + "\n" + self.generator.ask_region()
        )

    def _handle_region(self, text: str, intent: Intent) -> str:
        if intent != Intent.USE_DEFAULT:
            split = self.parser.extract_region_split(text)
            if split is None:
                return "Please enter a split that sums to 100, e.g. '60|40'."
            self.context.update(region_split=split)
        prefs = self.context.preferences
        self.context.state = ConversationState.COLLECT_CURRENCY
        return (
            self.generator.confirm(
                "Region split", f"{prefs.usa_pct:g}% USA | {prefs.india_pct:g}% India"
            )
            + " " + self.generator.ask_currency()
        )

    def _handle_currency(self, text: str, intent: Intent) -> str:
        if intent != Intent.USE_DEFAULT:
            currency = self.parser.extract_currency(text)
            if currency is None:
                return self.generator.ask_currency()
            self.context.update(currency=currency)
        self.context.state = ConversationState.COLLECT_GOLD
        return (
            self.generator.confirm("Currency", self.context.preferences.currency.value)
            + " " + self.generator.ask_gold()
        )

    def _handle_gold(self, text: str, intent: Intent) -> str:
        if intent != Intent.USE_DEFAULT:
            include = self.parser.extract_yes_no(text)
            if include is None:
                return self.generator.ask_gold()
            self.context.update(include_gold=include)
        self.context.state = ConversationState.COLLECT_CRYPTO
        return (
            self.generator.confirm("Gold", _yes_no(self.context.preferences.include_gold))
            + " " + self.generator.ask_crypto()
        )

    def _handle_crypto(self, text: str, intent: Intent) -> str:
        if intent != Intent.USE_DEFAULT:
            include = self.parser.extract_yes_no(text)
            if include is None:
                return self.generator.ask_crypto()
            self.context.update(include_crypto=include)
        confirmation = self.generator.confirm(
            "Crypto", _yes_no(self.context.preferences.include_crypto)
        )
        if self.context.preferences.include_crypto:
            self.context.state = ConversationState.COLLECT_CRYPTO_CAP
            return confirmation + " " + self.generator.ask_crypto_cap()
        self.context.state = ConversationState.COLLECT_REBALANCE
        return confirmation + " " + self.generator.ask_rebalance()

    def _handle_crypto_cap(self, text: str, intent: Intent) -> str:
        if intent != Intent.USE_DEFAULT:
            cap = self.parser.extract_number(text)
            if cap is None:
                return self.generator.ask_crypto_cap()
            prefs = self.context.update(crypto_cap_pct=cap)
            clamped = prefs.crypto_cap_pct != cap
        else:
            prefs, clamped = self.context.preferences, False
        self.context.state = ConversationState.COLLECT_REBALANCE
        return (
            self.generator.confirm("Crypto cap", f"{prefs.crypto_cap_pct:g}%", clamped)
            + " " + self.generator.ask_rebalance()
        )

    def _handle_rebalance(self, text: str, intent: Intent) -> str:
        if intent != Intent.USE_DEFAULT:
            freq = self.parser.extract_rebalance(text)
            if freq is None:
                return self.generator.ask_rebalance()
            self.context.update(rebalance_frequency=freq)
        return self._show_results()

    def _handle_follow_up(self, text: str, intent: Intent) -> str:
        rows = self.context.rows
        prefs = self.context.preferences

        if intent == Intent.EXPORT_CSV:
            path = self.parser.extract_export_path(text) or config.DEFAULT_CSV_FILENAME
            try:
                written = write_csv(rows, path)
            except OSError as e:
                logger.error("CSV export to %s failed: %s", path, e)
                return self.generator.export_failed(path, str(e))
            return self.generator.export_done(written)

        if intent == Intent.SHOW_BREAKDOWN:
            return self.generator.breakdown(rows, prefs)

        if intent == Intent.SHOW_STRESS:
            return self.generator.stress_tests(rows, prefs)

        if intent == Intent.SET_FIELD:
            return self._handle_set(text)

        return (
            "Type 'breakdown', 'stress', 'export', 'set <field> <value>', "
            "'restart' or 'exit'."
        )

    # ------------------------------------------------------------------ #
    #  'set <field> <value>'
    # ------------------------------------------------------------------ #

    def _handle_set(self, text: str) -> str:
        parsed = self.parser.extract_set_command(text)
        if parsed is None:
            return "Usage: set <field> <value>, e.g. 'set horizon 12'. Type 'help' for fields."
        attr, raw = parsed

        extractors = {
            "budget":              self.parser.extract_budget,
            "horizon":             self.parser.extract_horizon,
            "risk_profile":        self.parser.extract_risk,
            "region_split":        self.parser.extract_region_split,
            "currency":            self.parser.extract_currency,
            "include_gold":        self.parser.extract_yes_no,
            "include_crypto":      self.parser.extract_yes_no,
            "crypto_cap_pct":      self.parser.extract_number,
            "rebalance_frequency": self.parser.extract_rebalance,
        }
        value = extractors[attr](raw)
        if value is None:
            return self.generator.invalid_input(f"Could not read {raw!r} for {attr}.")

        self.context.update(**{attr: value})
        return self._show_results()

    # ------------------------------------------------------------------ #
    #  Allocation
    # ------------------------------------------------------------------ #

    def _show_results(self) -> str:
        prefs = self.context.preferences
        try:
            rows = AllocationEngine.allocate(prefs)
        except InvalidInputError as e:
            logger.warning("Rejected preferences (%s): %s", e.field, e)
            return self.generator.invalid_input(str(e))
        except DegenerateWeightsError as e:
            logger.error("Allocation failed for %s: %s", prefs.as_dict(), e)
            return self.generator.computation_failed(str(e))

        self.context.rows = rows
        self.context.state = ConversationState.SHOW_RESULTS
        logger.info("Computed %d-row allocation for %s", len(rows), prefs.as_dict())
        return self.generator.allocation(rows, prefs) + "\n" + self.generator.follow_up()


def _yes_no(flag: bool) -> str:
    return "included" if flag else "excluded"
