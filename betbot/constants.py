"""Centralized reference data for the BetBot proxy."""

# ---- Sports configuration (short code -> The Odds API key / display name) ----
SPORTS_CONFIG = {
    "nfl": {"providerKey": "americanfootball_nfl", "displayName": "NFL"},
    "nba": {"providerKey": "basketball_nba", "displayName": "NBA"},
    "mlb": {"providerKey": "baseball_mlb", "displayName": "MLB"},
    "nhl": {"providerKey": "icehockey_nhl", "displayName": "NHL"},
    "soccer": {"providerKey": "soccer_usa_mls", "displayName": "MLS Soccer"},
    "tennis": {"providerKey": "tennis_atp_aus_open", "displayName": "ATP Tennis"},
    "mma": {"providerKey": "mma_mixed_martial_arts", "displayName": "MMA"},
}

# Cache Duration (seconds)
CACHE_DURATIONS = {
    "odds": 2 * 60,
    "stats": 10 * 60,
    "ai_parsing": 60 * 60,
    "market_data": 5 * 60,
    "historical_context": 24 * 60 * 60,
    "comprehensive_analysis": 10 * 60,
}

# Fallback parser
FALLBACK_CONFIDENCE = 0.7  # Static weight, not derived from the text
MAX_DESCRIPTION_LENGTH = 500

# Sport detection, checked in order; first sport with a keyword hit wins.
# Each sport carries (keyword, specificBetType) pairs scanned in order, and a
# later hit overwrites an earlier one.
SPORT_KEYWORDS = (
    (
        "nfl",
        ("nfl", "football", "chiefs", "mahomes", "touchdown"),
        (("touchdown", "touchdown_pass"), ("rushing yards", "rushing_yards")),
    ),
    (
        "nba",
        ("nba", "basketball", "lakers", "lebron", "points"),
        (("points", "points"), ("assists", "assists"), ("rebounds", "rebounds")),
    ),
    (
        "mlb",
        ("mlb", "baseball", "yankees", "home run"),
        (("home run", "home_run"), ("hits", "hits"), ("strikeouts", "strikeouts")),
    ),
    (
        "nhl",
        ("nhl", "hockey", "oilers", "goals"),
        (("goals", "goals"), ("saves", "saves")),
    ),
    (
        "soccer",
        ("soccer", "manchester", "arsenal"),
        (("goals", "goals"),),
    ),
)

# Known players, first hit in this order wins.
PLAYER_ROSTER = (
    ("lebron", "LeBron James"),
    ("mahomes", "Patrick Mahomes"),
    ("curry", "Stephen Curry"),
    ("judge", "Aaron Judge"),
    ("mcdavid", "Connor McDavid"),
    ("allen", "Josh Allen"),
    ("burrow", "Joe Burrow"),
)

# Words that end a team name when they follow the first team word
# ("chiefs vs bills spread -3.5" -> "bills").
BET_VOCABULARY = (
    "spread", "over", "under", "total", "moneyline", "ml", "to", "win",
    "points", "assists", "rebounds", "goals", "saves", "hits", "strikeouts",
    "touchdown", "touchdowns", "yards", "home", "run", "runs", "by", "at",
    "vs", "and", "tonight", "game",
)

SUSPICIOUS_PLAYER_NAMES = ("test", "example", "sample", "fake")

# Payload source labels shared with the web client
NO_LIVE_ODDS_SOURCE = "Calculated (No Live Odds)"
ODDS_API_SOURCE = "The Odds API"
PROFESSIONAL_STATS_SOURCE = "Sportradar Professional Data"
DERIVED_STATS_SOURCE = "Derived/Enhanced Stats"
NO_DATA_SOURCE = "No Data Available"

# Key factors
MIN_KEY_FACTORS = 3
MAX_KEY_FACTORS = 5
KEY_FACTOR_FILLER = "Additional general betting factors considered"

# Typical lines when live odds are unavailable (American odds)
TYPICAL_LINES = {
    "nba": {"spread": -3.5, "moneyline": -150, "total": 215.5, "overOdds": -110, "underOdds": -110},
    "nfl": {"spread": -2.5, "moneyline": -125, "total": 47.5, "overOdds": -110, "underOdds": -110},
    "mlb": {"spread": -1.5, "moneyline": -130, "total": 8.5, "overOdds": -110, "underOdds": -110},
    "nhl": {"spread": -1.5, "moneyline": -140, "total": 6.5, "overOdds": -110, "underOdds": -110},
}
GENERIC_LINES = {"spread": 0, "moneyline": 100, "total": 220, "overOdds": -110, "underOdds": -110}

# Odds API request shape
ODDS_REGIONS = "us"
ODDS_MARKETS = "h2h,spreads,totals"
ODDS_FORMAT = "american"

DEV_SERVER_HOST = "0.0.0.0"  # Bind to all interfaces
DEV_SERVER_PORT = 5000  # Standard development port

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
