"""
Completion reporting and input-mode transition.

``summarize`` counts populated fields of a bound form. The
``InputModeController`` models the consuming layer's two-state machine
(scanning -> reviewing): the transition is one-way, idempotent, and may be
scheduled after a configurable delay.
"""
import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompletionSummary:
    """How many declared fields ended up populated."""
    filled_count: int
    total_count: int

    @property
    def fill_rate(self) -> float:
        return self.filled_count / self.total_count if self.total_count else 0.0

    @property
    def message(self) -> str:
        return (
            f"{self.filled_count} champs ont été remplis automatiquement "
            f"sur {self.total_count}."
        )


def is_filled(value: Any) -> bool:
    """Non-empty strings, True, and non-empty sequences count as filled."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip() != ""
    if isinstance(value, (list, tuple)):
        return len(value) > 0
    return value is not None


def summarize(bound) -> CompletionSummary:
    """
    Count the populated fields of a bound form.

    Args:
        bound: BoundFormData, or a plain mapping of field name to value

    Returns:
        CompletionSummary over the declared fields only
    """
    values: Iterable[Any] = (bound.fields if hasattr(bound, 'fields') else bound).values()
    values = list(values)
    return CompletionSummary(
        filled_count=sum(1 for v in values if is_filled(v)),
        total_count=len(values),
    )


class InputMode(str, Enum):
    SCANNING = "scanning"
    REVIEWING = "reviewing"


class InputModeController:
    """
    Two-state input mode machine.

    The only transition is scanning -> reviewing, triggered by an
    "extraction complete" signal. Repeated signals (two rapid OCR
    deliveries) are no-ops once reviewing.
    """

    def __init__(
        self,
        delay_ms: int = 500,
        on_transition: Optional[Callable[[InputMode], None]] = None,
    ):
        """
        Args:
            delay_ms: Delay before a scheduled transition fires
            on_transition: Called once when the mode becomes reviewing
        """
        if delay_ms < 0:
            raise ValueError("delay_ms must be >= 0")
        self.delay_ms = delay_ms
        self.on_transition = on_transition
        self._mode = InputMode.SCANNING
        self._lock = threading.Lock()

    @property
    def mode(self) -> InputMode:
        return self._mode

    def complete(self) -> bool:
        """
        Switch to reviewing now.

        Returns:
            True if this call performed the transition, False if already reviewing
        """
        with self._lock:
            if self._mode is InputMode.REVIEWING:
                return False
            self._mode = InputMode.REVIEWING

        logger.info("Input mode switched to reviewing")
        if self.on_transition:
            self.on_transition(InputMode.REVIEWING)
        return True

    def schedule_complete(self) -> threading.Timer:
        """
        Fire-and-forget transition after ``delay_ms``.

        Scheduling twice is tolerated; the second firing is a no-op.
        """
        timer = threading.Timer(self.delay_ms / 1000.0, self.complete)
        timer.daemon = True
        timer.start()
        return timer

    def reset(self):
        """Back to scanning (a new document is being scanned)."""
        with self._lock:
            self._mode = InputMode.SCANNING
