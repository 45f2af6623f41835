import json

import pytest
import requests

from betbot.ai_parser import (
    OpenAIBetParser,
    clean_model_json,
    entities_match_description,
    resolve_parsed_bet,
)
from betbot.cache import TTLCache
from betbot.errors import APIError
from betbot.logging_utils import reset_warn_once_cache
from betbot.models import ParsedBet


class FakeResponse:
    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self._payload = payload

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


class FakeSession:
    def __init__(self, response=None, exc=None):
        self.response = response
        self.exc = exc
        self.calls = []

    def post(self, url, json=None, headers=None, timeout=None):
        self.calls.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        if self.exc is not None:
            raise self.exc
        return self.response


def _completion(content):
    return {"choices": [{"message": {"content": content}}]}


@pytest.fixture(autouse=True)
def _reset_warnings():
    reset_warn_once_cache()
    yield
    reset_warn_once_cache()


def test_clean_model_json_strips_fence():
    raw = '```json\n{"sport": "nba"}\n```'
    assert json.loads(clean_model_json(raw)) == {"sport": "nba"}


def test_clean_model_json_drops_control_chars():
    assert clean_model_json('{"a":\x07 1}') == '{"a": 1}'


def test_openai_parser_reads_fenced_reply():
    content = '```json\n{"sport": "NBA", "type": "player", "player": "LeBron James", "line": 25.5, "betOn": "over", "confidence": 0.9}\n```'
    session = FakeSession(FakeResponse(200, _completion(content)))
    parser = OpenAIBetParser("sk-test-key-123", endpoint="https://example.test/v1", session=session)

    parsed = parser("LeBron James over 25.5 points")

    assert parsed.sport == "nba"
    assert parsed.player == "LeBron James"
    assert parsed.line == 25.5
    call = session.calls[0]
    assert call["url"] == "https://example.test/v1"
    assert call["headers"]["Authorization"] == "Bearer sk-test-key-123"
    assert "LeBron James over 25.5 points" in call["json"]["messages"][0]["content"]


def test_openai_parser_http_error():
    parser = OpenAIBetParser("sk-test-key-123", session=FakeSession(FakeResponse(429)))
    with pytest.raises(APIError) as excinfo:
        parser.parse("anything")
    assert excinfo.value.code == "HTTP_ERROR"
    assert excinfo.value.status_code == 429


def test_openai_parser_bad_json():
    session = FakeSession(FakeResponse(200, _completion("not json at all")))
    with pytest.raises(APIError) as excinfo:
        OpenAIBetParser("sk-test-key-123", session=session).parse("x")
    assert excinfo.value.code == "PARSE_ERROR"


def test_openai_parser_timeout():
    session = FakeSession(exc=requests.Timeout("slow"))
    with pytest.raises(APIError) as excinfo:
        OpenAIBetParser("sk-test-key-123", session=session, timeout=3).parse("x")
    assert excinfo.value.code == "TIMEOUT"


def test_entities_match_rejects_invented_player():
    parsed = ParsedBet(type="player", player="Stephen Curry", line=25.5)
    assert not entities_match_description(parsed, "LeBron James over 25.5 points")


def test_entities_match_rejects_invented_line():
    parsed = ParsedBet(type="player", player="LeBron James", line=27.5)
    assert not entities_match_description(parsed, "LeBron James over 25.5 points")


def test_entities_match_accepts_team_last_word_and_signed_line():
    parsed = ParsedBet(type="team", teams=("Kansas City Chiefs", "Buffalo Bills"), line=-3.5)
    assert entities_match_description(parsed, "Chiefs vs Bills spread -3.5")


def test_resolve_without_primary_uses_fallback():
    cache = TTLCache()
    parsed = resolve_parsed_bet("LeBron James over 25.5 points", cache)
    assert parsed.confidence == 0.7
    assert parsed.player == "LeBron James"
    assert len(cache) == 0


def test_resolve_caches_validated_primary_result():
    cache = TTLCache()
    calls = []
    answer = ParsedBet(sport="nba", type="player", player="LeBron James", line=25.5, bet_on="over", confidence=0.95)

    def primary(description):
        calls.append(description)
        return answer

    first = resolve_parsed_bet("LeBron James over 25.5 points", cache, primary)
    second = resolve_parsed_bet("LeBron James over 25.5 points", cache, primary)

    assert first is answer
    assert second is answer
    assert calls == ["LeBron James over 25.5 points"]


def test_resolve_rejects_hallucinated_result():
    cache = TTLCache()

    def primary(_description):
        return ParsedBet(sport="nba", type="player", player="Stephen Curry", line=30.0, confidence=0.99)

    parsed = resolve_parsed_bet("LeBron James over 25.5 points", cache, primary)
    assert parsed.player == "LeBron James"
    assert parsed.confidence == 0.7
    assert len(cache) == 0


@pytest.mark.parametrize(
    "exc",
    [
        APIError("OpenAI", "HTTP_ERROR", "OpenAI API error: 500", status_code=500),
        requests.ConnectionError("down"),
    ],
)
def test_resolve_falls_back_on_primary_failure(exc):
    def primary(_description):
        raise exc

    parsed = resolve_parsed_bet("Chiefs vs Bills spread -3.5", TTLCache(), primary)
    assert parsed.teams == ("chiefs", "bills")
    assert parsed.confidence == 0.7


@pytest.mark.parametrize("content", [None, "[]", '"just a string"', "42"])
def test_openai_parser_rejects_non_object_reply(content):
    session = FakeSession(FakeResponse(200, _completion(content)))
    with pytest.raises(APIError) as excinfo:
        OpenAIBetParser("sk-test-key-123", session=session).parse("Lakers to win")
    assert excinfo.value.code == "PARSE_ERROR"


@pytest.mark.parametrize("content", [None, "[]"])
def test_resolve_falls_back_on_unusable_model_reply(content):
    cache = TTLCache()
    session = FakeSession(FakeResponse(200, _completion(content)))
    primary = OpenAIBetParser("sk-test-key-123", session=session)

    parsed = resolve_parsed_bet("Chiefs vs Bills spread -3.5", cache, primary)

    assert parsed.teams == ("chiefs", "bills")
    assert parsed.confidence == 0.7
    assert len(cache) == 0
