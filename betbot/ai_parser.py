"""Language-model bet parsing with validation and heuristic fallback."""

from __future__ import annotations

import json
import re
from typing import Callable, Optional

import requests

from . import settings
from .bet_parser import parse_bet_description
from .cache import TTLCache
from .config import AI_PARSE_TIMEOUT, setup_logger
from .errors import APIError, normalize_api_error
from .logging_utils import warn_once
from .models import ParsedBet
from .utils import all_numbers

logger = setup_logger(__name__)

PrimaryParser = Callable[[str], ParsedBet]

_CONTROL_CHARS_RE = re.compile(r"[\x00-\x1F\x7F-\x9F]")
_FENCE_START_RE = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
_FENCE_END_RE = re.compile(r"\s*```$")
_NON_ALNUM_RE = re.compile(r"[^a-z0-9\s]")

PROMPT_TEMPLATE = """You are a precise sports betting parser. Extract EXACT information from this bet.

BET TO PARSE: "{description}"

Rules:
- Use the exact player and team names written in the bet; never substitute names.
- The line must be a number that appears in the bet.
- Sport must match the player/teams mentioned.

Examples:
"Aaron Judge over 1.5 home runs vs Orioles" -> MLB, Aaron Judge, [Yankees, Orioles], 1.5, over, home_runs
"LeBron James over 25 points" -> NBA, LeBron James, null, 25, over, points
"Lakers -7.5 vs Warriors" -> NBA, null, [Lakers, Warriors], 7.5, spread, team

Return ONLY this JSON:
{{
  "sport": "nba|nfl|mlb|nhl|soccer",
  "type": "team|player",
  "teams": ["Team1", "Team2"] or null,
  "player": "Full Name" or null,
  "line": number or null,
  "betOn": "over|under|spread|moneyline",
  "confidence": 0.1-1.0,
  "specificBetType": "points|home_runs|touchdowns|..."
}}"""


def clean_model_json(content: str) -> str:
    """Strip a markdown fence and control characters from a model reply."""

    text = content.strip()
    text = _FENCE_START_RE.sub("", text)
    text = _FENCE_END_RE.sub("", text)
    return _CONTROL_CHARS_RE.sub("", text).strip()


class OpenAIBetParser:
    """Primary parser backed by the OpenAI chat-completions endpoint."""

    source = "OpenAI"

    def __init__(
        self,
        api_key: str,
        *,
        endpoint: Optional[str] = None,
        model: Optional[str] = None,
        timeout: float = AI_PARSE_TIMEOUT,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.api_key = api_key
        self.endpoint = endpoint or settings.OPENAI_ENDPOINT
        self.model = model or settings.OPENAI_MODEL
        self.timeout = timeout
        self.session = session or requests.Session()

    def _post(self, description: str) -> requests.Response:
        body = {
            "model": self.model,
            "messages": [{"role": "user", "content": PROMPT_TEMPLATE.format(description=description)}],
            "max_tokens": 500,
            "temperature": 0.05,
        }
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        try:
            return self.session.post(self.endpoint, json=body, headers=headers, timeout=self.timeout)
        except requests.Timeout as exc:
            raise APIError(self.source, "TIMEOUT", f"Request timed out after {self.timeout}s") from exc
        except requests.RequestException as exc:
            raise APIError(self.source, "NETWORK_ERROR", "A network error occurred.", str(exc)) from exc

    def parse(self, description: str) -> ParsedBet:
        response = self._post(description)
        if response.status_code != 200:
            raise APIError(
                self.source,
                "HTTP_ERROR",
                f"OpenAI API error: {response.status_code}",
                status_code=response.status_code,
            )

        try:
            content = response.json()["choices"][0]["message"]["content"]
            if not isinstance(content, str):
                raise TypeError(f"message content is {type(content).__name__}, expected str")
            payload = json.loads(clean_model_json(content))
            if not isinstance(payload, dict):
                raise TypeError(f"reply JSON is {type(payload).__name__}, expected object")
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            raise APIError(self.source, "PARSE_ERROR", "Failed to parse OpenAI response.", str(exc)) from exc

        return ParsedBet.from_dict(payload)

    __call__ = parse


def _normalize_text(text: str) -> str:
    return _NON_ALNUM_RE.sub("", text.lower())


def entities_match_description(parsed: ParsedBet, description: str) -> bool:
    """Check that the parsed player, teams and line come from the text itself."""

    original = _normalize_text(description)

    if parsed.player:
        words = _normalize_text(parsed.player).split()
        if words and words[-1] not in original:
            logger.warning("AI parse player %r not found in description", parsed.player)
            return False

    if parsed.teams:
        def _team_present(team: str) -> bool:
            words = _normalize_text(team).split()
            if not words:
                return False
            return (
                words[0] in original
                or " ".join(words) in original
                or (len(words) > 1 and words[-1] in original)
            )

        if not any(_team_present(team) for team in parsed.teams):
            logger.warning("AI parse teams %r not found in description", parsed.teams)
            return False

    if parsed.line is not None:
        numbers = all_numbers(description)
        if abs(parsed.line) not in numbers:
            logger.warning(
                "Line number mismatch: AI parsed %s, not found in original numbers %s",
                parsed.line,
                numbers,
            )
            return False

    return True


def default_primary_parser() -> Optional[PrimaryParser]:
    """Return the configured language-model parser, or None without a usable key."""

    key = settings.OPENAI_API_KEY
    if not key or len(key) < 10:
        return None
    return OpenAIBetParser(key)


def resolve_parsed_bet(
    description: str,
    cache: TTLCache,
    primary: Optional[PrimaryParser] = None,
) -> ParsedBet:
    """Parse ``description`` with the primary parser, falling back to heuristics.

    Only validated primary results are cached; the heuristic result is cheap
    and always recomputed.
    """

    cache_key = f"ai-parse-{description}"
    cached = cache.get(cache_key)
    if cached is not None:
        return cached

    fallback = parse_bet_description(description)

    if primary is None:
        warn_once(
            "openai-missing",
            "OpenAI API key not configured, using fallback parsing",
            logger=logger,
        )
        return fallback

    try:
        result = primary(description)
    except (APIError, requests.RequestException) as exc:
        message = normalize_api_error(exc, "AI Parsing")
        logger.warning("AI parsing failed, using fallback: %s", message)
        return fallback

    if not entities_match_description(result, description):
        logger.warning("AI parse failed validation, using fallback for %r", description)
        return fallback

    logger.info("AI parsing successful: %s", result)
    cache.set(cache_key, result, "ai_parsing")
    return result
