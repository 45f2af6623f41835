from __future__ import annotations

from typing import Any, Mapping, Optional

from flask import Flask

from . import settings
from .ai_parser import PrimaryParser, default_primary_parser
from .analysis import BetAnalyzer
from .cache import TTLCache
from .config import setup_logger
from .constants import DEV_SERVER_HOST, DEV_SERVER_PORT
from .routes import bp as api_bp

logger = setup_logger(__name__)

_UNSET: Any = object()


def create_app(
    config: Optional[Mapping[str, Any]] = None,
    *,
    cache: Optional[TTLCache] = None,
    primary_parser: Optional[PrimaryParser] = _UNSET,
) -> Flask:
    """Build the proxy app with its own cache and upstream services.

    Each app owns one :class:`TTLCache`; tests pass their own to stay isolated.
    """
    app = Flask(__name__)
    app.config.update(
        SPORTRADAR_API_KEY=settings.SPORTRADAR_API_KEY,
        SPORTRADAR_BASE=settings.SPORTRADAR_BASE,
        ODDS_API_KEY=settings.ODDS_API_KEY,
        ODDS_API_BASE=settings.ODDS_API_BASE,
    )
    if config:
        app.config.update(config)

    if primary_parser is _UNSET:
        primary_parser = default_primary_parser()

    app.extensions["betbot_cache"] = cache if cache is not None else TTLCache()
    app.extensions["betbot"] = BetAnalyzer.build(
        app.extensions["betbot_cache"],
        primary_parser=primary_parser,
        api_key=app.config.get("ODDS_API_KEY"),
        base_url=app.config.get("ODDS_API_BASE"),
        request_callable=app.config.get("ODDS_REQUEST_CALLABLE"),
    )
    app.register_blueprint(api_bp)

    logger.info(
        "betbot app created (ai_parser=%s, odds_key=%s, sportradar_key=%s)",
        "on" if primary_parser else "off",
        "set" if app.config.get("ODDS_API_KEY") else "missing",
        "set" if app.config.get("SPORTRADAR_API_KEY") else "missing",
    )
    return app


if __name__ == "__main__":
    create_app().run(debug=True, host=DEV_SERVER_HOST, port=DEV_SERVER_PORT)
