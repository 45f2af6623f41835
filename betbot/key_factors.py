"""Human-readable justification lines shown next to a bet recommendation."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from .constants import (
    DERIVED_STATS_SOURCE,
    KEY_FACTOR_FILLER,
    MAX_KEY_FACTORS,
    MIN_KEY_FACTORS,
    NO_LIVE_ODDS_SOURCE,
    PROFESSIONAL_STATS_SOURCE,
)
from .models import OddsSnapshot, ParsedBet, PlayerStats, StatsSnapshot, TeamStats
from .utils import format_number, format_percent


def _odds_factors(odds: OddsSnapshot) -> List[str]:
    if not odds.source or odds.source == NO_LIVE_ODDS_SOURCE:
        return ["No live odds - analysis based on statistical models"]

    factors = [f"Live odds available from {odds.source}"]
    lines = odds.draftkings
    if lines is None:
        return factors
    if lines.spread:
        sign = "+" if lines.spread > 0 else ""
        factors.append(f"Current spread: {sign}{format_number(lines.spread)}")
    if lines.total:
        factors.append(f"Total line: {format_number(lines.total)}")
    if lines.moneyline_home and lines.moneyline_away:
        factors.append(
            f"Moneyline for Home: {format_number(lines.moneyline_home)}, "
            f"Away: {format_number(lines.moneyline_away)}"
        )
    return factors


def _professional_player(player: PlayerStats) -> List[str]:
    factors = []
    if player.season_average_points:
        factors.append(f"Sportradar Season Average: {format_number(player.season_average_points)} points")
    if player.usage_rate and player.usage_rate > 0.25:
        factors.append(f"Sportradar High Usage Rate: {format_percent(player.usage_rate)}")
    if player.minutes_played and player.minutes_played > 20:
        factors.append(f"Sportradar Minutes Played: {format_number(player.minutes_played)} per game")
    if player.team:
        factors.append(f"Player team: {player.team}")
    if player.position:
        factors.append(f"Player position: {player.position}")
    return factors


def _professional_teams(team1: TeamStats, team2: TeamStats) -> List[str]:
    factors = []
    name1 = team1.name or "Team 1"
    name2 = team2.name or "Team 2"
    if team1.offense_rating and team1.offense_rating > 0.7:
        factors.append(
            f"Sportradar {name1} has elite offense ({format_percent(team1.offense_rating)} rating)"
        )
    if team2.defense_rating and team2.defense_rating > 0.7:
        factors.append(
            f"Sportradar {name2} has strong defense ({format_percent(team2.defense_rating)} rating)"
        )
    if team1.home_record and "0-0" not in team1.home_record:
        factors.append(f"Sportradar {name1} home record: {team1.home_record}")
    if team1.injuries:
        factors.append(f"Sportradar {name1} has {len(team1.injuries)} reported injuries")
    return factors


def _derived_player(sport: Optional[str], player: PlayerStats) -> List[str]:
    factors = []
    if sport == "mlb":
        if player.home_runs_this_season:
            factors.append(f"Player home runs this season: {format_number(player.home_runs_this_season)}")
        if player.batting_average:
            factors.append(f"Player batting average: {player.batting_average:.3f}")
        if player.home_runs_last_10_games is not None:
            factors.append(f"Player home runs last 10 games: {format_number(player.home_runs_last_10_games)}")
    elif sport == "nfl":
        if player.touchdown_passes_this_season:
            factors.append(f"Player TD passes this season: {format_number(player.touchdown_passes_this_season)}")
        if player.passing_yards_per_game:
            factors.append(f"Player passing yards per game: {format_number(player.passing_yards_per_game)}")
    elif sport == "nba":
        if player.season_average_points:
            factors.append(f"Player average points: {format_number(player.season_average_points)}")
        if player.usage_rate:
            factors.append(f"Player usage rate: {format_percent(player.usage_rate)}")
    return factors


def _derived_teams(team1: TeamStats, team2: TeamStats) -> List[str]:
    factors = []
    if team1.offense_rating:
        factors.append(f"Team 1 offense rating: {format_percent(team1.offense_rating)}")
    if team2.defense_rating:
        factors.append(f"Team 2 defense rating: {format_percent(team2.defense_rating)}")
    return factors


def _stats_factors(parsed: ParsedBet, stats: StatsSnapshot) -> List[str]:
    has_teams = stats.team1 is not None and stats.team2 is not None

    if stats.source == PROFESSIONAL_STATS_SOURCE:
        if parsed.is_player_bet and stats.player is not None:
            return _professional_player(stats.player)
        if parsed.is_team_bet and has_teams:
            return _professional_teams(stats.team1, stats.team2)
        return []

    if stats.source == DERIVED_STATS_SOURCE:
        factors = ["Analysis leverages dynamically generated statistical estimates"]
        if parsed.is_team_bet and has_teams:
            factors.extend(_derived_teams(stats.team1, stats.team2))
        elif parsed.is_player_bet and stats.player is not None:
            factors.extend(_derived_player(parsed.sport, stats.player))
        return factors

    return ["Analysis based on general statistical trends"]


def summarize(parsed: ParsedBet, odds: Any, stats: Any) -> List[str]:
    """Return between three and five key factors for a bet.

    ``odds`` and ``stats`` may be raw payload dicts or their snapshot
    dataclasses; missing or malformed fields simply contribute nothing.
    """

    parsed = parsed or ParsedBet()
    odds_view = OddsSnapshot.from_dict(odds)
    stats_view = StatsSnapshot.from_dict(stats)

    factors = _odds_factors(odds_view) + _stats_factors(parsed, stats_view)
    while len(factors) < MIN_KEY_FACTORS:
        factors.append(KEY_FACTOR_FILLER)
    return factors[:MAX_KEY_FACTORS]


def validate_api_data(odds: Any, stats: Any) -> Dict[str, Any]:
    """Summarise how trustworthy the gathered odds/stats are."""

    odds_view = OddsSnapshot.from_dict(odds)
    stats_view = StatsSnapshot.from_dict(stats)
    warnings: List[str] = []
    status = "Valid"

    if odds_view.source == NO_LIVE_ODDS_SOURCE:
        warnings.append("No live odds available - using fallback calculations")
        status = "Limited Data"

    if stats_view.source == DERIVED_STATS_SOURCE:
        warnings.append("Using derived statistics - not real player/team data")
        status = "Limited Data"

    if stats_view.error or odds_view.error:
        warnings.append("API errors detected - data may be incomplete")
        status = "Data Issues"

    return {"status": status, "warnings": warnings}
