import unittest

import requests

from betbot.app import create_app
from betbot.cache import TTLCache


class FakeSportradarResponse:
    def __init__(self, status_code=200, payload=None, reason="OK", text=""):
        self.status_code = status_code
        self.ok = status_code < 400
        self.reason = reason
        self.text = text
        self._payload = payload

    def json(self):
        return self._payload


class FakeSportradarSession:
    def __init__(self, response=None, exc=None):
        self.response = response
        self.exc = exc
        self.urls = []

    def get(self, url, timeout=None):
        self.urls.append(url)
        if self.exc is not None:
            raise self.exc
        return self.response


def _build_client(**config):
    base = {"TESTING": True, "ODDS_API_KEY": "", "SPORTRADAR_API_KEY": "sr-key"}
    base.update(config)
    app = create_app(base, cache=TTLCache(), primary_parser=None)
    return app, app.test_client()


class TestSportradarProxy(unittest.TestCase):
    def test_non_get_is_rejected(self):
        _, client = _build_client()
        response = client.post("/api/sportradar-proxy?endpoint=nba/x.json")
        self.assertEqual(response.status_code, 405)
        self.assertEqual(response.get_json(), {"error": "Method Not Allowed"})

    def test_missing_key(self):
        _, client = _build_client(SPORTRADAR_API_KEY=None)
        response = client.get("/api/sportradar-proxy?endpoint=nba/x.json")
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.get_json(), {"error": "Server configuration error (missing API key)"})

    def test_missing_endpoint(self):
        _, client = _build_client()
        response = client.get("/api/sportradar-proxy")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json(), {"error": "Missing endpoint parameter"})

    def test_success_passes_json_through(self):
        session = FakeSportradarSession(FakeSportradarResponse(payload={"games": []}))
        _, client = _build_client(SPORTRADAR_SESSION=session, SPORTRADAR_BASE="https://sr.test")
        response = client.get("/api/sportradar-proxy?endpoint=nba/trial/v8/en/games/2024/REG/schedule.json")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json(), {"games": []})
        self.assertEqual(
            session.urls,
            ["https://sr.test/nba/trial/v8/en/games/2024/REG/schedule.json?api_key=sr-key"],
        )

    def test_upstream_status_is_forwarded(self):
        session = FakeSportradarSession(FakeSportradarResponse(403, reason="Forbidden", text="Developer Inactive"))
        _, client = _build_client(SPORTRADAR_SESSION=session)
        response = client.get("/api/sportradar-proxy?endpoint=nba/x.json")
        self.assertEqual(response.status_code, 403)
        self.assertEqual(
            response.get_json(),
            {"error": "Sportradar API error: Forbidden", "details": "Developer Inactive"},
        )

    def test_transport_failure_is_500(self):
        session = FakeSportradarSession(exc=requests.ConnectionError("refused"))
        _, client = _build_client(SPORTRADAR_SESSION=session)
        response = client.get("/api/sportradar-proxy?endpoint=nba/x.json")
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.get_json(), {"error": "Server fetch error"})


class TestBetEndpoints(unittest.TestCase):
    def setUp(self):
        self.app, self.client = _build_client()

    def test_sports_listing(self):
        payload = self.client.get("/sports").get_json()
        self.assertIn("nba", payload["data"])
        one = self.client.get("/sports?sport=NBA").get_json()
        self.assertEqual(list(one["data"]), ["nba"])
        missing = self.client.get("/sports?sport=curling")
        self.assertEqual(missing.status_code, 404)

    def test_parse_player_prop(self):
        response = self.client.post("/api/parse", json={"betDescription": "LeBron James over 25.5 points"})
        self.assertEqual(response.status_code, 200)
        data = response.get_json()["data"]
        self.assertEqual(data["parsedBet"]["player"], "LeBron James")
        self.assertEqual(data["parsedBet"]["betOn"], "over")
        self.assertEqual(data["parsedBet"]["confidence"], 0.7)
        self.assertEqual(data["warnings"], [])

    def test_parse_accepts_form_data(self):
        response = self.client.post("/api/parse", data={"betDescription": "Chiefs vs Bills spread -3.5"})
        self.assertEqual(response.get_json()["data"]["parsedBet"]["teams"], ["chiefs", "bills"])

    def test_parse_rejects_missing_description(self):
        response = self.client.post("/api/parse", json={})
        self.assertEqual(response.status_code, 400)
        payload = response.get_json()
        self.assertEqual(payload["status"], "error")
        self.assertEqual(payload["error"], ["description_missing"])

    def test_analyze_team_total(self):
        response = self.client.post("/api/analyze", json={"betDescription": "Lakers vs Celtics over 220.5"})
        self.assertEqual(response.status_code, 200)
        data = response.get_json()["data"]
        self.assertEqual(data["betType"], "total")
        self.assertTrue(data["odds"]["intelligentFallback"])
        self.assertEqual(data["stats"]["source"], "Derived/Enhanced Stats")
        self.assertEqual(data["stats"]["team1"]["name"], "lakers")
        self.assertTrue(3 <= len(data["keyFactors"]) <= 5)
        self.assertEqual(data["keyFactors"][0], "Live odds available from Intelligent Fallback (NBA Typical Lines)")
        self.assertEqual(data["dataValidation"]["status"], "Limited Data")

    def test_analyze_player_prop_without_game(self):
        response = self.client.post("/api/analyze", json={"betDescription": "LeBron James over 25.5 points"})
        data = response.get_json()["data"]
        self.assertEqual(data["betType"], "prop")
        self.assertEqual(data["odds"]["source"], "Calculated (No Live Odds)")
        self.assertEqual(data["keyFactors"][0], "No live odds - analysis based on statistical models")
        self.assertEqual(data["keyFactors"][1], "Analysis leverages dynamically generated statistical estimates")

    def test_analyze_without_signal_reports_data_issues(self):
        response = self.client.post("/api/analyze", json={"betDescription": "hello there"})
        data = response.get_json()["data"]
        self.assertEqual(data["stats"]["source"], "No Data Available")
        self.assertEqual(data["dataValidation"]["status"], "Data Issues")
        self.assertEqual(
            data["keyFactors"],
            [
                "No live odds - analysis based on statistical models",
                "Analysis based on general statistical trends",
                "Additional general betting factors considered",
            ],
        )

    def test_each_app_has_its_own_cache(self):
        other_app, _ = _build_client()
        self.assertIsNot(self.app.extensions["betbot_cache"], other_app.extensions["betbot_cache"])

    def test_injected_empty_cache_is_used(self):
        cache = TTLCache()
        app = create_app({"TESTING": True, "ODDS_API_KEY": ""}, cache=cache, primary_parser=None)
        self.assertIs(app.extensions["betbot_cache"], cache)
        app.test_client().post("/api/analyze", json={"betDescription": "Lakers vs Celtics over 220.5"})
        self.assertIsNotNone(cache.get("odds-Lakers vs Celtics over 220.5"))


if __name__ == "__main__":
    unittest.main()
