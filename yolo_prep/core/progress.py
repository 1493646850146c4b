from __future__ import annotations
import threading
from dataclasses import dataclass, field
from typing import Callable, Optional


@dataclass
class Progress:
    total: int
    value: int = 0
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    @property
    def fraction(self) -> float:
        if self.total <= 0:
            return 1.0
        return min(1.0, self.value / self.total)

    def step(self, n: int = 1, callback: Optional[Callable[["Progress"], None]] = None) -> None:
        # the callback runs under the lock so reported values never go backwards
        with self._lock:
            self.value += n
            if callback:
                callback(self)


ProgressCallback = Callable[[Progress], None]


class CancelToken:
    '''Shared flag checked by workers between pipeline steps.'''

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    def is_cancelled(self) -> bool:
        return self._event.is_set()
