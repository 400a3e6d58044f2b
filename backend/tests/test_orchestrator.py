"""
Tests for per-caller extraction orchestration.
"""
import threading

import numpy as np
import pytest

from palettekit.errors import ExtractionCancelled, InvalidInputError
from palettekit.services import orchestrator as orchestrator_module
from palettekit.services.cache import ResultCache, cache_key
from palettekit.services.orchestrator import PaletteOrchestrator


@pytest.fixture
def orchestrator(clock):
    return PaletteOrchestrator(
        cache=ResultCache(clock=clock),
        rng_factory=lambda: np.random.default_rng(42),
    )


def run_in_thread(fn, *args):
    """Start ``fn`` in a thread; the returned dict receives its result or error."""
    outcome = {}

    def target():
        try:
            outcome["result"] = fn(*args)
        except Exception as e:
            outcome["error"] = e

    thread = threading.Thread(target=target)
    thread.start()
    return thread, outcome


class TestCaching:
    """Cache interaction"""

    def test_second_request_served_from_cache(self, orchestrator, solid_buffer):
        loads = []

        def load():
            loads.append(1)
            return solid_buffer((200, 30, 30))

        first = orchestrator.extract("screen", "file:///a.jpg", load, {"color_count": 3})
        second = orchestrator.extract("screen", "file:///a.jpg", load, {"color_count": 3})

        assert first == second
        assert len(loads) == 1

    def test_result_stored_under_identity_hash(self, orchestrator, solid_buffer):
        orchestrator.extract("screen", "file:///a.jpg", solid_buffer((0, 0, 0)))
        assert cache_key("file:///a.jpg") in orchestrator.cache

    def test_invalidate_forces_recompute(self, orchestrator, solid_buffer):
        loads = []

        def load():
            loads.append(1)
            return solid_buffer((10, 120, 200))

        orchestrator.extract("screen", "uri", load)
        assert orchestrator.invalidate("uri") is True
        orchestrator.extract("screen", "uri", load)

        assert len(loads) == 2

    def test_clear_cache(self, orchestrator, solid_buffer):
        orchestrator.extract("screen", "uri", solid_buffer((0, 0, 0)))
        orchestrator.clear_cache()
        assert len(orchestrator.cache) == 0

    def test_invalid_options_rejected_before_loading(self, orchestrator):
        def load():
            raise AssertionError("loader should not run")

        with pytest.raises(InvalidInputError):
            orchestrator.extract("screen", "uri", load, {"color_count": 42})

    def test_cached_palette_cut_to_requested_count(self, orchestrator, quadrant_buffer):
        full = orchestrator.extract("screen", "uri", quadrant_buffer, {"color_count": 4})
        trimmed = orchestrator.extract("screen", "uri", quadrant_buffer, {"color_count": 3})

        assert len(full.colors) == 4
        assert trimmed.colors == full.colors[:3]
        assert trimmed.dominant_color in trimmed.colors
        # The cached entry keeps the full palette
        assert orchestrator.cache.get(cache_key("uri")) == full

    def test_smaller_cached_palette_returned_as_is(self, orchestrator, solid_buffer):
        first = orchestrator.extract("screen", "uri", solid_buffer((0, 0, 0)), {"color_count": 3})
        second = orchestrator.extract("screen", "uri", solid_buffer((0, 0, 0)), {"color_count": 8})
        assert second is first

    def test_rng_factory_called_per_extraction(self, clock, solid_buffer):
        seeds = []

        def factory():
            seeds.append(len(seeds))
            return np.random.default_rng(len(seeds))

        orch = PaletteOrchestrator(cache=ResultCache(clock=clock), rng_factory=factory)
        orch.extract("screen", "a", solid_buffer((0, 0, 0)))
        orch.extract("screen", "b", solid_buffer((0, 0, 0)))
        orch.extract("screen", "a", solid_buffer((0, 0, 0)))

        assert seeds == [0, 1]


class TestCancellation:
    """Supersede-on-new-request semantics"""

    def test_newer_request_supersedes_older(self, orchestrator, solid_buffer):
        started = threading.Event()
        release = threading.Event()

        def slow_load():
            started.set()
            release.wait(5)
            return solid_buffer((255, 0, 0))

        thread, outcome = run_in_thread(orchestrator.extract, "screen", "uri-1", slow_load)
        assert started.wait(5)

        latest = orchestrator.extract("screen", "uri-2", solid_buffer((0, 0, 255)))
        release.set()
        thread.join(5)

        assert isinstance(outcome.get("error"), ExtractionCancelled)
        assert cache_key("uri-1") not in orchestrator.cache
        assert latest.colors[0].hex == "#0000FF"

    def test_different_callers_are_independent(self, orchestrator, solid_buffer):
        started = threading.Event()
        release = threading.Event()

        def slow_load():
            started.set()
            release.wait(5)
            return solid_buffer((255, 0, 0))

        thread, outcome = run_in_thread(orchestrator.extract, "screen-a", "uri-1", slow_load)
        assert started.wait(5)

        orchestrator.extract("screen-b", "uri-2", solid_buffer((0, 0, 255)))
        release.set()
        thread.join(5)

        assert "error" not in outcome
        assert outcome["result"].colors[0].hex == "#FF0000"

    def test_cancelled_after_extraction_is_not_cached(self, orchestrator, make_result, monkeypatch):
        def extract_then_cancel(buffer, opts, rng=None, token=None):
            assert orchestrator.cancel("screen") is True
            return make_result()

        monkeypatch.setattr(orchestrator_module, "extract", extract_then_cancel)

        with pytest.raises(ExtractionCancelled):
            orchestrator.extract("screen", "uri", object())

        assert cache_key("uri") not in orchestrator.cache

    def test_cancel_without_inflight_request(self, orchestrator):
        assert orchestrator.cancel("nobody") is False

    def test_finished_request_releases_caller(self, orchestrator, solid_buffer):
        orchestrator.extract("screen", "uri", solid_buffer((0, 0, 0)))
        assert orchestrator.cancel("screen") is False


class TestAsync:
    """Event-loop boundary"""

    @pytest.mark.asyncio
    async def test_extract_async(self, orchestrator, solid_buffer):
        result = await orchestrator.extract_async("screen", "uri", solid_buffer((0, 128, 0)), {"color_count": 3})

        assert len(result.colors) == 3
        assert result.dominant_color.hex == "#008000"
