import pytest

from betbot.models import BookmakerLines, OddsSnapshot, ParsedBet, StatsSnapshot


def test_parsed_bet_to_dict_uses_camel_case():
    parsed = ParsedBet(sport="nfl", type="straight", teams=("chiefs", "bills"), line=-3.5, bet_on="spread", confidence=0.7)
    data = parsed.to_dict()
    assert data["teams"] == ["chiefs", "bills"]
    assert data["betOn"] == "spread"
    assert data["specificBetType"] is None


def test_parsed_bet_from_model_reply():
    parsed = ParsedBet.from_dict(
        {
            "sport": "NBA",
            "type": "Prop",
            "teams": None,
            "player": "LeBron James",
            "line": "25.5",
            "betOn": "over",
            "confidence": 0.92,
            "specificBetType": "points",
        }
    )
    assert parsed.sport == "nba"
    assert parsed.type == "prop"
    assert parsed.line == 25.5
    assert parsed.is_player_bet
    assert not parsed.is_team_bet


def test_parsed_bet_from_garbage():
    parsed = ParsedBet.from_dict("not a dict")
    assert parsed == ParsedBet()
    assert parsed.is_team_bet


def test_bookmaker_lines_tolerate_bad_values():
    lines = BookmakerLines.from_dict({"spread": "abc", "total": "47.5", "moneylineHome": True})
    assert lines.spread is None
    assert lines.total == 47.5
    assert lines.moneyline_home is None


def test_odds_snapshot_separates_meta_keys():
    snapshot = OddsSnapshot.from_dict(
        {
            "source": "The Odds API",
            "intelligentFallback": True,
            "draftkings": {"spread": -3.5},
            "fanduel": {"spread": -3.0},
        }
    )
    assert set(snapshot.bookmakers) == {"draftkings", "fanduel"}
    assert snapshot.draftkings.spread == -3.5
    assert snapshot.intelligent_fallback is True
    assert OddsSnapshot.from_dict(snapshot) is snapshot


def test_stats_snapshot_ignores_non_mapping_sections():
    snapshot = StatsSnapshot.from_dict({"source": "x", "player": "oops", "team1": {"name": "Lakers"}})
    assert snapshot.player is None
    assert snapshot.team1.name == "Lakers"
    assert snapshot.team2 is None


@pytest.mark.parametrize("value", ["nan", "inf", "-Infinity", float("nan"), float("inf")])
def test_non_finite_numbers_are_dropped(value):
    lines = BookmakerLines.from_dict({"spread": value, "total": 47.5})
    assert lines.spread is None
    assert lines.total == 47.5
    assert ParsedBet.from_dict({"line": value}).line is None
