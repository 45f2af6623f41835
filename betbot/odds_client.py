import random
import re
import time
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple

import requests

from . import config as config_module
from . import settings
from .cache import TTLCache
from .config import API_TIMEOUT, setup_logger
from .constants import (
    GENERIC_LINES,
    NO_LIVE_ODDS_SOURCE,
    ODDS_API_SOURCE,
    ODDS_FORMAT,
    ODDS_MARKETS,
    ODDS_REGIONS,
    SPORTS_CONFIG,
    TYPICAL_LINES,
)
from .errors import APIError, normalize_api_error
from .logging_utils import UpstreamFailureLog
from .models import ParsedBet, _as_number
from .utils import sanitize_error_message

logger = setup_logger(__name__)
failure_log = UpstreamFailureLog(logger)

MAX_RETRY_AFTER = 10.0

TRANSIENT_STATUS_CODES = {408, 429, 500, 502, 503, 504}


def _retry_after(response: Optional[requests.Response]) -> Optional[float]:
    """Seconds the server asked us to wait (delta or HTTP date), capped at MAX_RETRY_AFTER."""
    headers = getattr(response, "headers", None) or {}
    header = headers.get("Retry-After")
    if not isinstance(header, str) or not header.strip():
        return None
    header = header.strip()

    if header.replace(".", "", 1).isdigit():
        seconds = float(header)
    else:
        try:
            when = parsedate_to_datetime(header)
        except (TypeError, ValueError):
            return None
        if when.tzinfo is None:
            when = when.replace(tzinfo=timezone.utc)
        seconds = (when - datetime.now(timezone.utc)).total_seconds()
    return min(max(seconds, 0.0), MAX_RETRY_AFTER)


def _next_delay(attempt: int, response: Optional[requests.Response] = None) -> float:
    requested = _retry_after(response)
    if requested is not None:
        return requested
    backoff = config_module.ODDS_BASE_DELAY * 2 ** (attempt - 1)
    return min(backoff + random.uniform(0, config_module.ODDS_JITTER), MAX_RETRY_AFTER)


def _exhausted(last_error: Optional[Exception], last_status: Optional[int]) -> APIError:
    if last_error is None:
        return APIError(
            ODDS_API_SOURCE,
            "HTTP_ERROR",
            f"Odds API retry limit exceeded: {last_status}",
            status_code=last_status,
        )
    code = "TIMEOUT" if isinstance(last_error, requests.Timeout) else "NETWORK_ERROR"
    return APIError(
        ODDS_API_SOURCE,
        code,
        "Odds API retry limit exceeded",
        sanitize_error_message(str(last_error)),
    )


def fetch_with_backoff(
    url: str,
    *,
    params: Optional[dict] = None,
    timeout: Optional[float] = None,
    max_attempts: Optional[int] = None,
    request_callable: Optional[Callable[..., requests.Response]] = None,
) -> Tuple[requests.Response, int]:
    """GET ``url`` retrying transient statuses and transport errors.

    Returns the successful response and the attempt it succeeded on. Raises
    :class:`APIError` on a non-transient status or once attempts run out; the
    last failure decides the error code.
    """
    attempts = max_attempts or config_module.ODDS_MAX_ATTEMPTS
    timeout = timeout or API_TIMEOUT
    request_fn = request_callable or requests.get

    last_error: Optional[Exception] = None
    last_status: Optional[int] = None

    for attempt in range(1, attempts + 1):
        response = None
        try:
            response = request_fn(url, params=params, timeout=timeout)
        except requests.RequestException as exc:
            last_error, last_status = exc, None
            reason = sanitize_error_message(repr(exc))
        else:
            status = response.status_code
            if status == 200:
                return response, attempt
            if status not in TRANSIENT_STATUS_CODES:
                raise APIError(
                    ODDS_API_SOURCE,
                    "AUTH_ERROR" if status == 401 else "HTTP_ERROR",
                    f"Odds API error: {status}",
                    status_code=status,
                )
            last_error, last_status = None, status
            reason = f"status {status}"

        if attempt == attempts:
            break
        delay = _next_delay(attempt, response)
        logger.warning("Odds API %s, retrying in %.1fs (attempt %d/%d)", reason, delay, attempt, attempts)
        time.sleep(delay)

    error = _exhausted(last_error, last_status)
    if last_error is not None:
        raise error from last_error
    raise error


def _normalize_bookmaker(key: Any) -> str:
    return re.sub(r"[_-]", "", str(key or ""))


def _mappings(value: Any) -> List[Mapping[str, Any]]:
    """Keep only the dict items of a list; anything else in a payload is skipped."""
    if not isinstance(value, (list, tuple)):
        return []
    return [item for item in value if isinstance(item, Mapping)]


def _find_outcome(outcomes: Iterable[Mapping[str, Any]], name: Optional[str]) -> Mapping[str, Any]:
    for outcome in outcomes:
        if outcome.get("name") == name:
            return outcome
    return {}


def _spread_lines(outcomes: List[Mapping[str, Any]], home: Any, away: Any) -> Dict[str, Any]:
    home_outcome = _find_outcome(outcomes, home)
    away_outcome = _find_outcome(outcomes, away)
    home_point = _as_number(home_outcome.get("point"))
    away_point = _as_number(away_outcome.get("point"))
    if home_point is not None:
        spread = home_point
    elif away_point is not None:
        spread = -away_point
    else:
        spread = None
    return {
        "spread": spread,
        "homeSpreadOdds": _as_number(home_outcome.get("price")),
        "awaySpreadOdds": _as_number(away_outcome.get("price")),
    }


def _total_lines(outcomes: List[Mapping[str, Any]]) -> Dict[str, Any]:
    lines: Dict[str, Any] = {"total": _as_number(outcomes[0].get("point")) if outcomes else None}
    for outcome in outcomes:
        side = str(outcome.get("name", "")).lower()
        if side in ("over", "under"):
            lines[f"{side}Odds"] = _as_number(outcome.get("price"))
    return lines


def transform_odds_data(game: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Flatten an Odds API event into per-bookmaker spread/total/moneyline lines.

    Malformed bookmakers, markets and outcomes are skipped and unreadable
    numbers come back as None.
    """
    if not game or not isinstance(game, Mapping):
        return {}

    home, away = game.get("home_team"), game.get("away_team")
    result: Dict[str, Any] = {"source": ODDS_API_SOURCE}

    for bookmaker in _mappings(game.get("bookmakers")):
        lines: Dict[str, Any] = {}
        result[_normalize_bookmaker(bookmaker.get("key"))] = lines

        for market in _mappings(bookmaker.get("markets")):
            outcomes = _mappings(market.get("outcomes"))
            key = market.get("key")
            if key == "spreads":
                lines.update(_spread_lines(outcomes, home, away))
            elif key == "totals":
                lines.update(_total_lines(outcomes))
            elif key == "h2h":
                lines["moneylineHome"] = _as_number(_find_outcome(outcomes, home).get("price"))
                lines["moneylineAway"] = _as_number(_find_outcome(outcomes, away).get("price"))

    return result


def match_game(events: Any, parsed: ParsedBet) -> Optional[Mapping[str, Any]]:
    """First event whose "home vs away" string mentions one of the parsed teams."""
    if not parsed.teams or len(parsed.teams) < 2:
        return None
    for event in _mappings(events):
        label = f"{event.get('home_team') or ''} vs {event.get('away_team') or ''}".lower()
        if any(team.lower() in label for team in parsed.teams):
            return event
    return None


def intelligent_odds_fallback(parsed: ParsedBet) -> Dict[str, Any]:
    """Sport-typical lines used when live odds cannot be fetched."""
    sport = (parsed.sport or "").lower()
    lines = dict(TYPICAL_LINES.get(sport, GENERIC_LINES))
    label = sport.upper() or "GENERIC"

    return {
        "source": f"Intelligent Fallback ({label} Typical Lines)",
        "message": f"Live odds temporarily unavailable. Using {label} statistical averages.",
        "sport": parsed.sport,
        "teams": list(parsed.teams) if parsed.teams else None,
        "player": parsed.player,
        "betType": parsed.type,
        "intelligentFallback": True,
        "draftkings": lines,
        "fanduel": {**lines, "spread": lines["spread"] + 0.5},
        "betmgm": {**lines, "total": lines["total"] + 0.5},
    }


def calculated_odds_placeholder() -> Dict[str, Any]:
    return {
        "source": NO_LIVE_ODDS_SOURCE,
        "message": "Could not identify a game to price. Analysis uses statistical models.",
    }


class OddsService:
    """Odds lookup for a parsed bet: cache first, then The Odds API, then fallbacks."""

    def __init__(
        self,
        cache: TTLCache,
        api_key: Optional[str] = None,
        *,
        base_url: Optional[str] = None,
        request_callable: Optional[Callable[..., requests.Response]] = None,
    ) -> None:
        self.cache = cache
        self.api_key = api_key if api_key is not None else settings.ODDS_API_KEY
        self.base_url = (base_url or settings.ODDS_API_BASE).rstrip("/")
        self.request_callable = request_callable

    def _fetch_events(self, provider_key: str) -> List[dict]:
        response, attempts = fetch_with_backoff(
            f"{self.base_url}/sports/{provider_key}/odds",
            params={
                "apiKey": self.api_key,
                "regions": ODDS_REGIONS,
                "markets": ODDS_MARKETS,
                "oddsFormat": ODDS_FORMAT,
            },
            request_callable=self.request_callable,
        )
        if attempts > 1:
            logger.info("Odds API backoff done for %s after %d attempts", provider_key, attempts)
        try:
            data = response.json()
        except ValueError as exc:
            raise APIError(ODDS_API_SOURCE, "PARSE_ERROR", "Failed to parse API response.", str(exc)) from exc
        return data if isinstance(data, list) else []

    def get_odds(self, description: str, parsed: ParsedBet) -> Dict[str, Any]:
        cache_key = f"odds-{description}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        sport_config = SPORTS_CONFIG.get(parsed.sport or "")
        if sport_config is None or not parsed.teams:
            logger.info("No sport/teams to price for %r; using calculated odds", description)
            return calculated_odds_placeholder()

        if not self.api_key:
            logger.warning("ODDS_API_KEY not configured; using %s typical lines", parsed.sport)
            odds = intelligent_odds_fallback(parsed)
        else:
            try:
                events = self._fetch_events(sport_config["providerKey"])
                game = match_game(events, parsed)
                odds = transform_odds_data(game) if game else intelligent_odds_fallback(parsed)
                if not game:
                    logger.info("No matching %s game for %s", parsed.sport, parsed.teams)
            except APIError as exc:
                failure_log.warning(exc.source, exc.code, "%s", normalize_api_error(exc, "Live Odds"))
                odds = intelligent_odds_fallback(parsed)

        self.cache.set(cache_key, odds, "odds")
        return odds
