"""Typed views over parsed bets and the loosely-shaped odds/stats payloads.

Upstream payloads arrive as nested dicts whose fields may be missing or
malformed. Each ``from_dict`` reads what it can and leaves the rest as None,
so downstream code only ever checks for None.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple, Union

Number = Union[int, float]

BET_TYPES = ("team", "player", "prop", "total", "straight")
PLAYER_BET_TYPES = ("player", "prop")
TEAM_BET_TYPES = ("team", "total", "straight")


def _as_mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _as_number(value: Any) -> Optional[Number]:
    """Finite int/float, or a numeric string; anything else (nan, inf, bools) is None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and math.isfinite(value):
        return value
    return None


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value
    return None


@dataclass(frozen=True)
class ParsedBet:
    sport: Optional[str] = None
    type: str = "team"
    teams: Optional[Tuple[str, ...]] = None
    player: Optional[str] = None
    line: Optional[float] = None
    bet_on: Optional[str] = None
    confidence: float = 0.0
    specific_bet_type: Optional[str] = None

    @property
    def is_player_bet(self) -> bool:
        return self.type in PLAYER_BET_TYPES

    @property
    def is_team_bet(self) -> bool:
        return self.type in TEAM_BET_TYPES

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sport": self.sport,
            "type": self.type,
            "teams": list(self.teams) if self.teams else None,
            "player": self.player,
            "line": self.line,
            "betOn": self.bet_on,
            "confidence": self.confidence,
            "specificBetType": self.specific_bet_type,
        }

    @classmethod
    def from_dict(cls, data: Any) -> "ParsedBet":
        """Build from a camelCase payload such as a language-model reply."""

        raw = _as_mapping(data)
        teams_raw = raw.get("teams")
        teams = None
        if isinstance(teams_raw, (list, tuple)):
            teams = tuple(str(t).strip() for t in teams_raw if _as_str(t)) or None
        sport = _as_str(raw.get("sport"))
        bet_type = _as_str(raw.get("type"))
        line = _as_number(raw.get("line"))
        confidence = _as_number(raw.get("confidence"))
        return cls(
            sport=sport.lower() if sport else None,
            type=bet_type.lower() if bet_type else "team",
            teams=teams,
            player=_as_str(raw.get("player")),
            line=float(line) if line is not None else None,
            bet_on=_as_str(raw.get("betOn")),
            confidence=float(confidence) if confidence is not None else 0.0,
            specific_bet_type=_as_str(raw.get("specificBetType")),
        )


@dataclass(frozen=True)
class BookmakerLines:
    spread: Optional[Number] = None
    total: Optional[Number] = None
    moneyline: Optional[Number] = None
    moneyline_home: Optional[Number] = None
    moneyline_away: Optional[Number] = None
    over_odds: Optional[Number] = None
    under_odds: Optional[Number] = None
    home_spread_odds: Optional[Number] = None
    away_spread_odds: Optional[Number] = None

    @classmethod
    def from_dict(cls, data: Any) -> "BookmakerLines":
        raw = _as_mapping(data)
        return cls(
            spread=_as_number(raw.get("spread")),
            total=_as_number(raw.get("total")),
            moneyline=_as_number(raw.get("moneyline")),
            moneyline_home=_as_number(raw.get("moneylineHome")),
            moneyline_away=_as_number(raw.get("moneylineAway")),
            over_odds=_as_number(raw.get("overOdds")),
            under_odds=_as_number(raw.get("underOdds")),
            home_spread_odds=_as_number(raw.get("homeSpreadOdds")),
            away_spread_odds=_as_number(raw.get("awaySpreadOdds")),
        )


# Top-level odds keys that are metadata rather than bookmakers
_ODDS_META_KEYS = {
    "source", "message", "error", "sport", "teams", "player", "betType", "intelligentFallback",
}


@dataclass(frozen=True)
class OddsSnapshot:
    source: Optional[str] = None
    message: Optional[str] = None
    error: Optional[str] = None
    intelligent_fallback: bool = False
    bookmakers: Dict[str, BookmakerLines] = field(default_factory=dict)

    @property
    def draftkings(self) -> Optional[BookmakerLines]:
        return self.bookmakers.get("draftkings")

    @classmethod
    def from_dict(cls, data: Any) -> "OddsSnapshot":
        if isinstance(data, OddsSnapshot):
            return data
        raw = _as_mapping(data)
        bookmakers = {
            key: BookmakerLines.from_dict(value)
            for key, value in raw.items()
            if key not in _ODDS_META_KEYS and isinstance(value, Mapping)
        }
        return cls(
            source=_as_str(raw.get("source")),
            message=_as_str(raw.get("message")),
            error=_as_str(raw.get("error")),
            intelligent_fallback=raw.get("intelligentFallback") is True,
            bookmakers=bookmakers,
        )


@dataclass(frozen=True)
class PlayerStats:
    name: Optional[str] = None
    team: Optional[str] = None
    position: Optional[str] = None
    season_average_points: Optional[Number] = None
    recent_form_points: Optional[Number] = None
    usage_rate: Optional[Number] = None
    minutes_played: Optional[Number] = None
    home_runs_this_season: Optional[Number] = None
    batting_average: Optional[Number] = None
    home_runs_last_10_games: Optional[Number] = None
    touchdown_passes_this_season: Optional[Number] = None
    passing_yards_per_game: Optional[Number] = None

    @classmethod
    def from_dict(cls, data: Any) -> "PlayerStats":
        raw = _as_mapping(data)
        return cls(
            name=_as_str(raw.get("name")),
            team=_as_str(raw.get("team")),
            position=_as_str(raw.get("position")),
            season_average_points=_as_number(raw.get("seasonAveragePoints")),
            recent_form_points=_as_number(raw.get("recentFormPoints")),
            usage_rate=_as_number(raw.get("usageRate")),
            minutes_played=_as_number(raw.get("minutesPlayed")),
            home_runs_this_season=_as_number(raw.get("homeRunsThisSeason")),
            batting_average=_as_number(raw.get("battingAverage")),
            home_runs_last_10_games=_as_number(raw.get("homeRunsLast10Games")),
            touchdown_passes_this_season=_as_number(raw.get("touchdownPassesThisSeason")),
            passing_yards_per_game=_as_number(raw.get("passingYardsPerGame")),
        )


@dataclass(frozen=True)
class TeamStats:
    name: Optional[str] = None
    offense_rating: Optional[Number] = None
    defense_rating: Optional[Number] = None
    home_record: Optional[str] = None
    injuries: Optional[Tuple[Any, ...]] = None

    @classmethod
    def from_dict(cls, data: Any) -> "TeamStats":
        raw = _as_mapping(data)
        injuries = raw.get("injuries")
        return cls(
            name=_as_str(raw.get("name")),
            offense_rating=_as_number(raw.get("offenseRating")),
            defense_rating=_as_number(raw.get("defenseRating")),
            home_record=_as_str(raw.get("homeRecord")),
            injuries=tuple(injuries) if isinstance(injuries, (list, tuple)) else None,
        )


@dataclass(frozen=True)
class StatsSnapshot:
    source: Optional[str] = None
    error: Optional[str] = None
    player: Optional[PlayerStats] = None
    team1: Optional[TeamStats] = None
    team2: Optional[TeamStats] = None

    @classmethod
    def from_dict(cls, data: Any) -> "StatsSnapshot":
        if isinstance(data, StatsSnapshot):
            return data
        raw = _as_mapping(data)

        def _section(key, builder):
            value = raw.get(key)
            return builder(value) if isinstance(value, Mapping) else None

        return cls(
            source=_as_str(raw.get("source")),
            error=_as_str(raw.get("error")),
            player=_section("player", PlayerStats.from_dict),
            team1=_section("team1", TeamStats.from_dict),
            team2=_section("team2", TeamStats.from_dict),
        )
