from __future__ import annotations

from datetime import datetime, timezone

from flask import Blueprint, current_app, jsonify, request

from .analysis import BetAnalyzer
from .app_utils import make_error, make_ok, proxy_error
from .bet_parser import validate_parsed_bet
from .config import setup_logger
from .constants import SPORTS_CONFIG
from .errors import APIError, normalize_api_error
from .sportradar import fetch_sportradar
from .validators import validate_description, validate_sport

logger = setup_logger(__name__)

bp = Blueprint("betbot_api", __name__)


def _analyzer() -> BetAnalyzer:
    return current_app.extensions["betbot"]


def _description_from_request():
    payload = request.get_json(silent=True) or {}
    raw = payload.get("betDescription") if isinstance(payload, dict) else None
    if raw is None:
        raw = request.form.get("betDescription")
    return validate_description(raw)


@bp.get("/health")
def health():
    return make_ok(
        {"ok": True, "ts": datetime.now(timezone.utc).isoformat()},
        "OK",
        status_code=200,
    )


@bp.get("/sports")
def sports():
    """List supported sports, or one sport with ?sport=<code>."""
    if "sport" not in request.args:
        return make_ok(SPORTS_CONFIG)
    code, warnings = validate_sport(request.args.get("sport"))
    if code is None:
        return make_error(error=list(warnings), message="Unknown sport", status_code=404)
    return make_ok({code: SPORTS_CONFIG[code]})


@bp.route("/api/sportradar-proxy", methods=["GET", "POST", "PUT", "PATCH", "DELETE"])
def sportradar_proxy():
    """Forward ?endpoint=<path> to Sportradar with the server-side key."""
    if request.method != "GET":
        return proxy_error("Method Not Allowed", 405)

    endpoint = request.args.get("endpoint")
    api_key = current_app.config.get("SPORTRADAR_API_KEY")
    if not api_key:
        logger.error("Missing SPORTRADAR_API_KEY environment variable.")
        return proxy_error("Server configuration error (missing API key)", 500)

    if not endpoint:
        return proxy_error("Missing endpoint parameter", 400)

    try:
        data = fetch_sportradar(
            endpoint,
            api_key=api_key,
            base_url=current_app.config.get("SPORTRADAR_BASE"),
            session=current_app.config.get("SPORTRADAR_SESSION"),
        )
    except APIError as exc:
        if exc.code == "HTTP_ERROR" and exc.status_code:
            return proxy_error(exc.message, exc.status_code, exc.details or "")
        logger.warning("Sportradar proxy failed: %s", normalize_api_error(exc, "Sportradar"))
        return proxy_error("Server fetch error", 500)

    return jsonify(data), 200


@bp.post("/api/parse")
def parse_bet():
    description, warnings = _description_from_request()
    if description is None:
        return make_error(error=list(warnings), message="Invalid bet description", status_code=400)

    parsed = _analyzer().parse(description)
    return make_ok(
        {
            "parsedBet": parsed.to_dict(),
            "warnings": validate_parsed_bet(parsed, description),
        }
    )


@bp.post("/api/analyze")
def analyze_bet():
    description, warnings = _description_from_request()
    if description is None:
        return make_error(error=list(warnings), message="Invalid bet description", status_code=400)

    try:
        result = _analyzer().analyze(description)
    except APIError as exc:
        return make_error(
            error=exc.code,
            message=normalize_api_error(exc, "Bet Analysis"),
            status_code=502,
        )
    return make_ok(result)
