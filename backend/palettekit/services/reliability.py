"""
Palettekit Cancellation
Cooperative cancellation tokens polled at extraction checkpoints.
"""
import threading
from typing import Optional

from loguru import logger

from palettekit.errors import ExtractionCancelled


class CancellationToken:
    """
    Cooperative cancellation flag.

    The engine never interrupts a running clustering pass; it only polls
    the token between decode and clustering and between clustering and
    post-processing.
    """

    def __init__(self, label: Optional[str] = None):
        self.label = label
        self._event = threading.Event()

    def cancel(self) -> None:
        """Request cancellation. Idempotent."""
        if not self._event.is_set():
            logger.debug(f"Cancellation requested for {self.label or 'extraction'}")
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self, stage: str = "") -> None:
        """Raise ExtractionCancelled if cancel() has been called."""
        if self._event.is_set():
            where = f" before {stage}" if stage else ""
            raise ExtractionCancelled(f"Extraction '{self.label or 'request'}' cancelled{where}")


def checkpoint(token: Optional[CancellationToken], stage: str) -> None:
    """Poll ``token`` if one was supplied."""
    if token is not None:
        token.raise_if_cancelled(stage)
