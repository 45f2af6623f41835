"""JSON response helpers shared by the API blueprint."""

from typing import Any, Dict, Optional

from flask import jsonify

from .errors import APIError


def _envelope(status: str, message: str, **body: Any) -> Dict[str, Any]:
    return {"status": status, "message": message, **body}


def make_ok(data: Optional[Any] = None, message: str = "success", status_code: int = 200):
    """Wrap ``data`` in the ``{status, message, data}`` envelope."""
    return jsonify(_envelope("ok", message, data=data)), status_code


def make_error(error: Any, message: str = "An error occurred", status_code: int = 400):
    """Wrap ``error`` in the envelope; an APIError keeps its source and code."""
    if isinstance(error, APIError):
        error = error.to_dict()
    return jsonify(_envelope("error", message, error=error)), status_code


def proxy_error(error: str, status_code: int, details: Optional[str] = None):
    """Bare ``{"error": ...}`` body returned by the Sportradar passthrough."""
    body = {"error": error}
    if details is not None:
        body["details"] = details
    return jsonify(body), status_code
