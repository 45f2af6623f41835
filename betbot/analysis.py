"""Request-level orchestration: parse, gather odds/stats, explain."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .ai_parser import PrimaryParser, resolve_parsed_bet
from .bet_parser import detect_bet_type, validate_parsed_bet
from .cache import TTLCache
from .config import setup_logger
from .derived_stats import StatsService
from .key_factors import summarize, validate_api_data
from .models import ParsedBet
from .odds_client import OddsService

logger = setup_logger(__name__)


@dataclass
class BetAnalyzer:
    """Holds the shared cache and the upstream services one app instance uses."""

    cache: TTLCache
    odds: OddsService
    stats: StatsService
    primary_parser: Optional[PrimaryParser] = None

    @classmethod
    def build(cls, cache: TTLCache, primary_parser: Optional[PrimaryParser] = None, **odds_kwargs: Any) -> "BetAnalyzer":
        return cls(
            cache=cache,
            odds=OddsService(cache, **odds_kwargs),
            stats=StatsService(cache),
            primary_parser=primary_parser,
        )

    def parse(self, description: str) -> ParsedBet:
        return resolve_parsed_bet(description, self.cache, self.primary_parser)

    def analyze(self, description: str) -> Dict[str, Any]:
        parsed = self.parse(description)
        odds = self.odds.get_odds(description, parsed)
        stats = self.stats.get_stats(description, parsed)
        factors = summarize(parsed, odds, stats)
        logger.info(
            "Analyzed %r: sport=%s type=%s factors=%d",
            description,
            parsed.sport,
            parsed.type,
            len(factors),
        )
        return {
            "betDescription": description,
            "parsedBet": parsed.to_dict(),
            "betType": detect_bet_type(parsed),
            "parseWarnings": validate_parsed_bet(parsed, description),
            "odds": odds,
            "stats": stats,
            "keyFactors": factors,
            "dataValidation": validate_api_data(odds, stats),
        }
