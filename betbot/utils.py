"""
Utility functions for the BetBot proxy
Number formatting shared by the parser warnings and key-factor text
"""

import math
import re
from typing import List, Optional, Union

Number = Union[int, float]

_NUMBER_RE = re.compile(r"(\d+\.?\d*)")


def format_number(value: Number) -> str:
    """Render a number the way the web client prints it (``3`` not ``3.0``)."""

    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def format_percent(ratio: Number) -> str:
    """``0.284`` -> ``"28%"``."""

    return f"{round_half_up(float(ratio) * 100)}%"


def first_number(text: Optional[str]) -> Optional[float]:
    match = _NUMBER_RE.search(text or "")
    return float(match.group(1)) if match else None


def all_numbers(text: Optional[str]) -> List[float]:
    return [float(n) for n in _NUMBER_RE.findall(text or "")]


# apiKey=... (The Odds API) and api_key=... (Sportradar) query values
_API_KEY_PARAM_RE = re.compile(r"(apiKey|api_key)=[^&\s]+")


def sanitize_error_message(message, mask: str = "***"):
    """Mask API keys in query strings before they reach logs or responses."""
    if not message:
        return message
    return _API_KEY_PARAM_RE.sub(lambda m: f"{m.group(1)}={mask}", str(message))
