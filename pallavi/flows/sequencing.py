from __future__ import annotations

import threading
from typing import Dict, Hashable


class RequestSequencer:
    """
    Hands out increasing request ids per key so a caller can tell whether a
    response still belongs to the newest request it issued for that key.
    """

    def __init__(self):
        self._latest: Dict[Hashable, int] = {}
        self._counter = 0
        self._lock = threading.Lock()

    def begin(self, key: Hashable) -> int:
        with self._lock:
            self._counter += 1
            self._latest[key] = self._counter
            return self._counter

    def is_current(self, key: Hashable, request_id: int) -> bool:
        with self._lock:
            return self._latest.get(key) == request_id

    def latest(self, key: Hashable) -> int | None:
        with self._lock:
            return self._latest.get(key)
