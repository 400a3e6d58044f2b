"""
Palettekit Extraction Orchestrator
Per-caller extraction sessions: cache lookup, supersede-on-new-request
cancellation, and an async boundary for event-loop callers.
"""
import asyncio
import threading
import time
from dataclasses import replace
from typing import Callable, Dict, Optional, Union

import numpy as np

from palettekit.services.cache import ResultCache, cache_key
from palettekit.services.colors.extraction import OptionsInput, extract, resolve_options
from palettekit.services.colors.models import ExtractionResult, PixelBuffer
from palettekit.services.colors.postprocess import select_dominant
from palettekit.services.reliability import CancellationToken
from palettekit.utils.logging import get_logger

BufferSource = Union[PixelBuffer, Callable[[], PixelBuffer]]


def _fit_to_count(result: ExtractionResult, color_count: int) -> ExtractionResult:
    """Trim a cached result to the requested palette size."""
    if len(result.colors) <= color_count:
        return result
    colors = result.colors[:color_count]
    return replace(result, colors=colors, dominant_color=select_dominant(colors))


class PaletteOrchestrator:
    """
    Runs extractions on behalf of logical callers (a screen, a user, a job).

    Only the most recent request per caller is authoritative: starting a
    new one cancels the caller's previous token, and a cancelled request
    neither returns a palette nor writes to the cache. Requests from
    different callers are independent and may run concurrently.
    """

    def __init__(self,
                 cache: Optional[ResultCache] = None,
                 rng_factory: Optional[Callable[[], np.random.Generator]] = None):
        self.cache = cache if cache is not None else ResultCache()
        self._rng_factory = rng_factory or np.random.default_rng
        self._inflight: Dict[str, CancellationToken] = {}
        self._lock = threading.Lock()

    def _begin(self, caller_id: str) -> CancellationToken:
        token = CancellationToken(label=caller_id)
        with self._lock:
            previous = self._inflight.get(caller_id)
            self._inflight[caller_id] = token
        if previous is not None:
            previous.cancel()
        return token

    def _finish(self, caller_id: str, token: CancellationToken) -> None:
        with self._lock:
            if self._inflight.get(caller_id) is token:
                del self._inflight[caller_id]

    def extract(self,
                caller_id: str,
                identity: str,
                source: BufferSource,
                options: OptionsInput = None) -> ExtractionResult:
        """
        Extract a palette for ``identity`` on behalf of ``caller_id``.

        The cache is keyed by identity only. A cached palette built with a
        larger ``color_count`` is cut down to the requested size on a hit,
        with the dominant color re-selected from what remains; a smaller
        cached palette is returned as is.

        Args:
            caller_id: Logical caller; a newer request from the same caller
                supersedes this one
            identity: Image identity (usually its URI), hashed into the
                cache key
            source: A PixelBuffer, or a zero-argument callable that decodes
                one (called only on a cache miss)
            options: ExtractionOptions or an equivalent mapping

        Returns:
            Cached or freshly computed ExtractionResult

        Raises:
            ExtractionCancelled: The request was superseded or cancelled
            InvalidInputError / InvalidImageError: Bad options or buffer
            ExtractionFailure: Unexpected internal fault
        """
        opts = resolve_options(options)
        key = cache_key(identity)
        token = self._begin(caller_id)
        start_time = time.time()
        log = get_logger().bind(caller_id=caller_id, cache_key=key)

        try:
            cached = self.cache.get(key)
            if cached is not None:
                log.debug("Returning cached palette")
                return _fit_to_count(cached, opts.color_count)

            buffer = source() if callable(source) else source
            result = extract(buffer, opts, rng=self._rng_factory(), token=token)

            # Superseded while post-processing: drop the result
            token.raise_if_cancelled("caching")
            self.cache.put(key, result)

            log.info("Palette extracted", extra={
                "color_count": len(result.colors),
                "duration_ms": round((time.time() - start_time) * 1000, 1),
            })
            return result
        finally:
            self._finish(caller_id, token)

    async def extract_async(self,
                            caller_id: str,
                            identity: str,
                            source: BufferSource,
                            options: OptionsInput = None) -> ExtractionResult:
        """Run :meth:`extract` in a worker thread so the event loop stays free."""
        return await asyncio.to_thread(self.extract, caller_id, identity, source, options)

    def cancel(self, caller_id: str) -> bool:
        """Cancel the caller's in-flight request; True if there was one."""
        with self._lock:
            token = self._inflight.get(caller_id)
        if token is None:
            return False
        token.cancel()
        return True

    def invalidate(self, identity: str) -> bool:
        """Drop the cached palette for ``identity``."""
        return self.cache.invalidate(cache_key(identity))

    def clear_cache(self) -> None:
        self.cache.clear()
