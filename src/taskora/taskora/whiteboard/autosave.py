from __future__ import annotations

import logging
import threading
from typing import Callable, Dict, Hashable, Tuple

from ..core.constants import DEFAULT_AUTOSAVE_DELAY_SECONDS
from ..core.exceptions import DomainError

logger = logging.getLogger(__name__)


class AutosaveDebouncer:
    """One timer per document; a new stroke restarts the delay.

    ``timer_factory`` has the ``threading.Timer`` signature. Saves still
    pending at shutdown are dropped.
    """

    def __init__(
        self,
        *,
        delay: float = DEFAULT_AUTOSAVE_DELAY_SECONDS,
        timer_factory: Callable[..., threading.Timer] = threading.Timer,
    ):
        self._delay = float(delay)
        self._timer_factory = timer_factory
        self._lock = threading.Lock()
        self._pending: Dict[Hashable, Tuple[object, Callable[[], None], object]] = {}

    def schedule(self, key: Hashable, action: Callable[[], None]) -> None:
        with self._lock:
            previous = self._pending.pop(key, None)
            if previous:
                previous[0].cancel()
            token = object()
            timer = self._timer_factory(self._delay, self._fire, args=(key, token))
            timer.daemon = True
            self._pending[key] = (timer, action, token)
            timer.start()

    def _fire(self, key: Hashable, token: object) -> None:
        with self._lock:
            entry = self._pending.get(key)
            # a timer replaced after it started firing must not run the newer save
            if entry is None or entry[2] is not token:
                return
            del self._pending[key]
        self._run(key, entry[1])

    @staticmethod
    def _run(key: Hashable, action: Callable[[], None]) -> None:
        try:
            action()
            logger.debug("autosave flushed for %s", key)
        except DomainError:
            logger.exception("autosave failed for %s", key)

    def cancel(self, key: Hashable) -> bool:
        with self._lock:
            entry = self._pending.pop(key, None)
        if entry is None:
            return False
        entry[0].cancel()
        return True

    def flush(self, key: Hashable) -> bool:
        """Run the pending save now instead of waiting for the timer."""
        with self._lock:
            entry = self._pending.pop(key, None)
        if entry is None:
            return False
        entry[0].cancel()
        self._run(key, entry[1])
        return True

    def is_pending(self, key: Hashable) -> bool:
        with self._lock:
            return key in self._pending

    def shutdown(self) -> None:
        with self._lock:
            entries = list(self._pending.values())
            self._pending.clear()
        for timer, _, _ in entries:
            timer.cancel()
