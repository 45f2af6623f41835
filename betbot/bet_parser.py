"""Keyword/regex interpreter for free-text bet descriptions.

Used whenever the language-model parser is unavailable or its answer fails
validation. The pipeline is deterministic and never raises: text without any
recognisable signal comes back as a mostly-empty ``ParsedBet``.
"""

from __future__ import annotations

import re
from typing import List, Optional, Tuple

from . import config
from .config import setup_logger
from .constants import (
    BET_VOCABULARY,
    FALLBACK_CONFIDENCE,
    PLAYER_ROSTER,
    SPORT_KEYWORDS,
    SUSPICIOUS_PLAYER_NAMES,
)
from .models import PLAYER_BET_TYPES, ParsedBet
from .utils import all_numbers, first_number, format_number

logger = setup_logger(__name__)

_STOP_WORDS = "|".join(re.escape(word) for word in BET_VOCABULARY)
# One or two words; the second may not be a number or bet vocabulary.
_TEAM = rf"(\w+(?:\s+(?!(?:{_STOP_WORDS})\b)(?!\d)\w+)?)"
_TEAM_PAIR_RE = re.compile(rf"{_TEAM}\s+(?:vs\.?|@)\s+{_TEAM}", re.ASCII)
_SINGLE_TEAM_RE = re.compile(rf"^(?:the\s+)?{_TEAM}\s+(?:to\s+win|moneyline|ml)", re.ASCII)

_MONEYLINE_SIGNALS = ("moneyline", "ml", "to win")
_SIDES = ("over", "under")


def _detect_sport(lower: str) -> Tuple[Optional[str], Optional[str]]:
    for sport, keywords, bet_types in SPORT_KEYWORDS:
        if not any(keyword in lower for keyword in keywords):
            continue
        specific = None
        for keyword, bet_type in bet_types:
            if keyword in lower:
                specific = bet_type
        return sport, specific
    return None, None


def _detect_player(lower: str) -> Optional[str]:
    for needle, display_name in PLAYER_ROSTER:
        if needle in lower:
            return display_name
    return None


def _detect_teams(lower: str) -> Optional[Tuple[str, ...]]:
    match = _TEAM_PAIR_RE.search(lower)
    if match:
        return match.group(1).strip(), match.group(2).strip()
    match = _SINGLE_TEAM_RE.search(lower)
    if match:
        return (match.group(1).strip(),)
    return None


def _detect_side(lower: str) -> Optional[str]:
    for side in _SIDES:
        if side in lower:
            return side
    return None


def _default_side(lower: str) -> str:
    return "over" if "over" in lower else "under"


def _has_spread_signal(lower: str) -> bool:
    return "spread" in lower or "-" in lower or "+" in lower


def parse_bet_description(description: Optional[str], *, default_sport: Optional[str] = None) -> ParsedBet:
    """Heuristically extract sport, market, participants, line and side.

    Steps run in a fixed order and later steps overwrite earlier ones: the
    spread check runs after the moneyline check, and the last matching
    secondary keyword sets ``specific_bet_type``.
    """

    lower = (description or "").lower()

    sport, specific_bet_type = _detect_sport(lower)

    player = _detect_player(lower)
    bet_type = "player" if player else "team"

    teams = _detect_teams(lower)
    bet_on = _detect_side(lower)

    if teams and any(signal in lower for signal in _MONEYLINE_SIGNALS):
        bet_on = f"{teams[0]}_win"
        bet_type = "team"

    spread_signal = _has_spread_signal(lower)
    if spread_signal:
        bet_on = "spread"
        bet_type = "team"

    line = None
    number = first_number(lower)
    if number is not None:
        if bet_type == "player" and player:
            line = number
            bet_on = bet_on or _default_side(lower)
        elif bet_type == "team" and ("total" in lower or "over" in lower or "under" in lower):
            line = number
            bet_on = bet_on or _default_side(lower)
        elif bet_type == "team" and spread_signal:
            line = -number if "-" in lower else number
            bet_on = "spread"

    if bet_on in _SIDES:
        if player:
            bet_type = "prop"
        elif teams:
            bet_type = "total"
    elif bet_on == "spread" or (bet_on and bet_on.endswith("_win")):
        bet_type = "straight"

    # A named player keeps the bet a player market even when a spread or
    # moneyline signal demoted it above.
    if player and bet_type not in PLAYER_BET_TYPES:
        bet_type = "prop" if bet_on in _SIDES else "player"

    if not sport and (teams or player):
        sport = default_sport or config.DEFAULT_SPORT

    result = ParsedBet(
        sport=sport,
        type=bet_type,
        teams=teams,
        player=player,
        line=line,
        bet_on=bet_on,
        confidence=FALLBACK_CONFIDENCE,
        specific_bet_type=specific_bet_type,
    )
    logger.debug("Fallback parsing result: %s", result)
    return result


def validate_parsed_bet(parsed: ParsedBet, original: Optional[str]) -> List[str]:
    """Return human-readable warnings for implausible parse results."""

    errors: List[str] = []

    if parsed.is_player_bet and parsed.line:
        sport = (parsed.sport or "").lower()
        bet_type = (parsed.specific_bet_type or "").lower()
        line = parsed.line
        shown = format_number(line)

        if sport == "nba" and bet_type == "points":
            if line > 60:
                errors.append(f"NBA points line {shown} is unrealistic (max ~60 in modern NBA)")
            if line < 5:
                errors.append(f"NBA points line {shown} is unrealistic (min ~5)")

        if sport == "nfl":
            if bet_type == "touchdown_pass" and line > 6:
                errors.append(f"NFL touchdown passes line {shown} is unrealistic (max ~5-6 in a game)")
            if bet_type == "rushing_yards" and line > 300:
                errors.append(f"NFL rushing yards line {shown} is unrealistic (max ~250-300)")

        if sport == "mlb" and bet_type == "home_run" and line > 4:
            errors.append(f"MLB home runs line {shown} is unrealistic (max ~3-4 in a game)")

    if parsed.player:
        name = parsed.player.lower()
        if any(word in name for word in SUSPICIOUS_PLAYER_NAMES):
            errors.append(f'Player name "{parsed.player}" appears to be a test/fake name')

    if parsed.line:
        numbers = all_numbers(original)
        # Spread lines carry their sign separately from the digits
        if numbers and abs(parsed.line) not in numbers:
            errors.append(
                f"Parsed line {format_number(parsed.line)} doesn't match any number "
                f'in original bet "{original}"'
            )

    return errors


def detect_bet_type(parsed: Optional[ParsedBet]) -> str:
    """Collapse a parse result into the analysis record's bet category."""

    if parsed is None:
        return "straight"
    if parsed.is_player_bet:
        return "prop"
    if parsed.bet_on in _SIDES:
        return "total"
    if parsed.bet_on and ("win" in parsed.bet_on or parsed.bet_on == "moneyline"):
        return "moneyline"
    return "straight"
