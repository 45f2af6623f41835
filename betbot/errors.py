import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional, Tuple

import requests

logger = logging.getLogger(__name__)


class APIError(Exception):
    """Unified error class for all external API clients."""

    def __init__(
        self,
        source: str,
        code: str,
        message: str,
        details: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.source = source
        self.code = code
        self.message = message
        self.details = details
        self.status_code = status_code

    def to_dict(self) -> dict:
        return {
            "source": self.source,
            "code": self.code,
            "message": self.message,
            **({"details": self.details} if self.details else {}),
            **({"status_code": self.status_code} if self.status_code else {}),
        }


def _error_text(error: Any) -> str:
    """Lower-cased text the classification rules look at."""

    if not isinstance(error, BaseException):
        return ""
    parts = [str(error)]
    if isinstance(error, APIError):
        parts.extend(str(p) for p in (error.source, error.code, error.details, error.status_code) if p)
    return " ".join(parts).lower()


def _mentions(*needles: str) -> Callable[[Any, str], bool]:
    lowered = tuple(n.lower() for n in needles)

    def predicate(_error: Any, text: str) -> bool:
        return any(n in text for n in lowered)

    return predicate


def _is_timeout(error: Any, _text: str) -> bool:
    if isinstance(error, (requests.Timeout, TimeoutError)):
        return True
    return isinstance(error, APIError) and error.code == "TIMEOUT"


def _is_connectivity(error: Any, text: str) -> bool:
    if isinstance(error, requests.ConnectionError):
        return True
    return _mentions("failed to fetch", "network")(error, text)


@dataclass(frozen=True)
class ErrorRule:
    name: str
    predicate: Callable[[Any, str], bool]
    template: str

    def matches(self, error: Any, text: str) -> bool:
        return self.predicate(error, text)

    def render(self, context: str) -> str:
        return self.template.format(context=context)


# Checked top to bottom, first match wins.
ERROR_RULES: Tuple[ErrorRule, ...] = (
    ErrorRule("timeout", _is_timeout, "⏳ {context} request timed out. Please try again."),
    ErrorRule(
        "rate_limited",
        _mentions("rate limit", "429"),
        "⏳ {context} is temporarily busy. Please try again in a moment.",
    ),
    ErrorRule(
        "unauthorized",
        _mentions("unauthorized", "401"),
        "🔐 {context} access denied. Please check your API key or subscription.",
    ),
    ErrorRule(
        "ai_unavailable",
        _mentions("openai"),
        "🤖 AI analysis temporarily unavailable. Using fallback analysis.",
    ),
    ErrorRule(
        "connectivity",
        _is_connectivity,
        "⚠️ Connection issue for {context}. Please check your internet and try again.",
    ),
    ErrorRule(
        "not_found",
        _mentions("not found", "404"),
        "⚠️ Data for {context} not found. The game/player might not be active or recognizable.",
    ),
)

GENERIC_ERROR_TEMPLATE = "⚠️ {context} encountered an issue. Our team has been notified."


def classify_error(error: Any) -> Optional[ErrorRule]:
    """Return the first rule matching ``error`` or None for the generic case."""

    text = _error_text(error)
    for rule in ERROR_RULES:
        if rule.matches(error, text):
            return rule
    return None


def normalize_api_error(error: Any, context: str) -> str:
    """Map an upstream failure to a user-safe message mentioning ``context``."""

    rule = classify_error(error)
    if rule is None:
        logger.error("%s error: %r", context, error)
        return GENERIC_ERROR_TEMPLATE.format(context=context)

    logger.warning("%s error (%s): %r", context, rule.name, error)
    return rule.render(context)
