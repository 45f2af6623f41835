"""Logging helpers for noisy upstream failures and one-shot config warnings."""
from __future__ import annotations

import logging
import threading
import time
from typing import Any, Callable, Dict, Hashable, List, Optional, Set

_log = logging.getLogger(__name__)


class UpstreamFailureLog:
    """Log repeated upstream failures at most once per window per (source, code).

    Every suppressed occurrence is counted and reported with the next emitted
    line, so a flapping provider shows up as one warning a minute instead of
    one per request.
    """

    def __init__(
        self,
        target: logging.Logger,
        window_seconds: float = 60.0,
        *,
        now_fn: Callable[[], float] = time.monotonic,
    ) -> None:
        self.target = target
        self.window_seconds = max(float(window_seconds), 0.0)
        self._clock = now_fn
        # (source, code) -> [last emitted at, suppressed since then]
        self._state: Dict[Hashable, List[float]] = {}
        self._guard = threading.Lock()

    def _should_emit(self, key: Hashable) -> int:
        """Return -1 to suppress, else the number of lines suppressed before this one."""
        now = self._clock()
        with self._guard:
            state = self._state.get(key)
            if state is not None and now - state[0] < self.window_seconds:
                state[1] += 1
                return -1
            suppressed = int(state[1]) if state is not None else 0
            self._state[key] = [now, 0]
        return suppressed

    def warning(self, source: str, code: str, msg: str, *args: Any) -> bool:
        suppressed = self._should_emit((source, code))
        if suppressed < 0:
            return False
        if suppressed:
            msg += " (+%d similar suppressed)"
            args += (suppressed,)
        self.target.warning("[%s:%s] " + msg, source, code, *args)
        return True


_seen_keys: Set[Hashable] = set()
_seen_guard = threading.Lock()


def warn_once(key: Hashable, msg: str, *args: Any, logger: Optional[logging.Logger] = None) -> bool:
    """Log ``msg`` at WARNING the first time ``key`` is seen in this process."""

    with _seen_guard:
        first = key not in _seen_keys
        _seen_keys.add(key)
    if first:
        (logger or _log).warning(msg, *args)
    return first


def reset_warn_once_cache() -> None:
    with _seen_guard:
        _seen_keys.clear()
