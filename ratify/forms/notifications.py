"""Process-wide toast slot shared by every editor session."""
import logging
import threading
from dataclasses import asdict, dataclass
from typing import Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Toast:
    message: str
    is_error: bool = False
    link: Optional[str] = None
    show: bool = True

    def to_dict(self) -> dict:
        return asdict(self)


class NotificationChannel:
    """Single-slot broadcast.

    ``publish`` overwrites any toast nobody has consumed yet (no queue). ``consume``
    hands the pending toast to the display side; ``displayed`` stays put until the
    next consume or ``dismiss`` so "on screen" and "last requested" are tracked apart.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._pending: Optional[Toast] = None
        self._displayed: Optional[Toast] = None
        self._sequence = 0

    def publish(self, toast: Toast) -> int:
        with self._lock:
            if self._pending is not None:
                logger.info("Dropping unconsumed toast: %s", self._pending.message)
            self._pending = toast
            self._sequence += 1
            return self._sequence

    @property
    def pending(self) -> Optional[Toast]:
        with self._lock:
            return self._pending

    @property
    def displayed(self) -> Optional[Toast]:
        with self._lock:
            return self._displayed

    @property
    def sequence(self) -> int:
        return self._sequence

    def consume(self) -> Optional[Toast]:
        with self._lock:
            toast = self._pending
            if toast is not None:
                self._displayed = toast
                self._pending = None
            return toast

    def dismiss(self) -> None:
        with self._lock:
            self._displayed = None
