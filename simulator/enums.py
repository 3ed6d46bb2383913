from enum import Enum, auto


class ConversationState(Enum):
    """Tracks the current stage of the questionnaire."""
    GREETING = auto()
    COLLECT_BUDGET = auto()
    COLLECT_HORIZON = auto()
    COLLECT_RISK = auto()
    COLLECT_REGION = auto()
    COLLECT_CURRENCY = auto()
    COLLECT_GOLD = auto()
    COLLECT_CRYPTO = auto()
    COLLECT_CRYPTO_CAP = auto()   # only visited when crypto is included
    COLLECT_REBALANCE = auto()
    SHOW_RESULTS = auto()
    DONE = auto()


class Intent(Enum):
    """User intent categories detected from input."""
    GREET = auto()
    PROVIDE_VALUE = auto()
    USE_DEFAULT = auto()
    EXPORT_CSV = auto()
    SHOW_BREAKDOWN = auto()
    SHOW_STRESS = auto()
    SET_FIELD = auto()
    SHOW_HELP = auto()
    RESTART = auto()
    QUIT = auto()
    UNKNOWN = auto()


class RiskProfile(Enum):
    """Investor risk tolerance levels."""
    CONSERVATIVE = "Conservative"
    MODERATE = "Moderate"
    MODERATE_AGGRESSIVE = "Moderate-Aggressive"
    AGGRESSIVE = "Aggressive"


class AssetClass(Enum):
    EQUITY = "Equity"
    FIXED_INCOME = "Fixed Income"
    COMMODITY = "Commodity"
    REITS = "REITs"
    CASH = "Cash"
    CRYPTO = "Crypto"


class Country(Enum):
    USA = "USA"
    INDIA = "India"
    GLOBAL = "Global"


class RiskTier(Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    VERY_HIGH = "Very High"


class Currency(Enum):
    """Display currency — not consumed by the allocation engine."""
    USD = "USD"
    INR = "INR"


class RebalanceFrequency(Enum):
    """Display-only rebalancing cadence."""
    QUARTERLY = "Quarterly"
    ANNUAL = "Annual"
