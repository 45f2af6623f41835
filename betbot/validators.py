from typing import Any, List, Optional, Tuple

from .config import MAX_DESCRIPTION_LENGTH, setup_logger
from .constants import SPORTS_CONFIG

logger = setup_logger(__name__)


class ValidationWarning(str):
    """Lightweight tag for soft validation warnings."""
    pass


def validate_description(raw: Any) -> Tuple[Optional[str], List[ValidationWarning]]:
    """Collapse whitespace; return (description_or_None, warnings). None means reject."""
    if not isinstance(raw, str):
        return None, [ValidationWarning("description_missing")]
    text = " ".join(raw.split())
    if not text:
        return None, [ValidationWarning("description_empty")]
    if len(text) > MAX_DESCRIPTION_LENGTH:
        logger.warning("description_too_long: %d chars", len(text))
        return None, [ValidationWarning("description_too_long")]
    return text, []


def validate_sport(code: Optional[str]) -> Tuple[Optional[str], List[ValidationWarning]]:
    """Return (normalized_sport_code_or_None, warnings). Soft-fails on unknown/missing."""
    if not code:
        return None, [ValidationWarning("sport_missing")]
    c = str(code).strip().lower()
    if c in SPORTS_CONFIG:
        return c, []
    logger.warning("sport_unknown: %s", c)
    return None, [ValidationWarning(f"sport_unknown:{c}")]
