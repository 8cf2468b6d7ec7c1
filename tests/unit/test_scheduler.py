"""Unit tests for fixed-rate scheduling."""

from __future__ import annotations

from typing import Any, Mapping

import pytest

from lightbox.codec.schema import GridGeometry, SchemaVersion
from lightbox.codec.symbols import BLACK, WHITE
from lightbox.config import FeedConfig, FrameRate
from lightbox.render.driver import GridRenderer
from lightbox.render.state import GridSnapshot, RenderState
from lightbox.scheduler import FrameScheduler, StaticSampleProvider


class RecordingRenderer(GridRenderer):
    """Renderer that keeps every snapshot it was shown."""

    def __init__(self) -> None:
        self.snapshots: list[GridSnapshot] = []

    def present(self, snapshot: GridSnapshot) -> None:
        self.snapshots.append(snapshot)


class FailingProvider:
    """Provider whose state source is unavailable."""

    def sample(self) -> Mapping[str, Any]:
        raise RuntimeError("unit frames not loaded")


class TestAccumulator:
    """Test drift-free pacing."""

    def test_fires_once_interval_accumulates(self, compact: SchemaVersion) -> None:
        """Test 20 Hz fires on the second 30 ms tick and keeps the 10 ms remainder."""
        scheduler = FrameScheduler(StaticSampleProvider(), compact)

        assert scheduler.tick(0.03) is False
        assert scheduler.frames_emitted == 0

        assert scheduler.tick(0.03) is True
        assert scheduler.frames_emitted == 1
        assert scheduler.accumulator == pytest.approx(0.01)

    def test_at_most_one_cycle_per_tick(self, compact: SchemaVersion) -> None:
        scheduler = FrameScheduler(StaticSampleProvider(), compact)

        assert scheduler.tick(0.25) is True
        assert scheduler.frames_emitted == 1
        assert scheduler.accumulator == pytest.approx(0.2)

        # Backlog drains one frame per tick
        assert scheduler.tick(0.0) is True
        assert scheduler.frames_emitted == 2

    def test_no_drift_over_many_ticks(self, compact: SchemaVersion) -> None:
        """Test 60 Hz ticks drive a 20 Hz feed at exactly one frame in three."""
        scheduler = FrameScheduler(StaticSampleProvider(), compact)

        for _ in range(600):
            scheduler.tick(1 / 60)

        assert scheduler.frames_emitted == 200

    def test_negative_elapsed_ignored(self, compact: SchemaVersion) -> None:
        scheduler = FrameScheduler(StaticSampleProvider(), compact)

        assert scheduler.tick(-1.0) is False
        assert scheduler.accumulator == 0.0


class TestLifecycle:
    """Test start/stop and rate changes."""

    def test_stop_and_start(self, compact: SchemaVersion) -> None:
        scheduler = FrameScheduler(StaticSampleProvider(), compact)
        scheduler.tick(0.04)
        scheduler.stop()

        assert scheduler.running is False
        assert scheduler.tick(1.0) is False

        scheduler.start()
        assert scheduler.running is True
        assert scheduler.accumulator == 0.0

    def test_set_rate(self, compact: SchemaVersion) -> None:
        scheduler = FrameScheduler(StaticSampleProvider(), compact)
        scheduler.set_rate(10)

        assert scheduler.config.rate is FrameRate.HZ_10
        assert scheduler.interval == pytest.approx(0.1)
        assert scheduler.tick(0.06) is False

    def test_set_unsupported_rate(self, compact: SchemaVersion) -> None:
        scheduler = FrameScheduler(StaticSampleProvider(), compact)

        with pytest.raises(ValueError):
            scheduler.set_rate(7)

    def test_from_config(self) -> None:
        scheduler = FrameScheduler.from_config(
            StaticSampleProvider(), FeedConfig(schema_name="tactical-v3")
        )

        assert scheduler.schema.id == 3

    def test_render_state_must_match_grid(self, compact: SchemaVersion) -> None:
        with pytest.raises(ValueError, match="doesn't match"):
            FrameScheduler(
                StaticSampleProvider(),
                compact,
                render_state=RenderState(GridGeometry(cols=3, rows=3)),
            )


class TestCycle:
    """Test one sample-encode-map-render cycle."""

    def test_cycle_publishes_frame(self, compact: SchemaVersion) -> None:
        renderer = RecordingRenderer()
        scheduler = FrameScheduler(
            StaticSampleProvider({"player_level": 17}), compact, renderers=[renderer]
        )

        frame = scheduler.run_cycle()

        assert frame is not None
        assert scheduler.last_frame is frame
        assert scheduler.render_state.cells[0] == WHITE  # sync bit
        assert scheduler.render_state.frame_number == 1
        assert renderer.snapshots == [scheduler.render_state.snapshot()]

    def test_sample_read_once_per_cycle(self, compact: SchemaVersion) -> None:
        calls: list[int] = []

        class CountingProvider:
            def sample(self) -> Mapping[str, Any]:
                calls.append(1)
                return {}

        scheduler = FrameScheduler(CountingProvider(), compact)
        scheduler.run_cycle()

        assert len(calls) == 1

    def test_provider_failure_keeps_previous_frame(self, compact: SchemaVersion) -> None:
        """Test a failed sample leaves the stale grid on screen."""
        provider = StaticSampleProvider({"player_level": 17})
        scheduler = FrameScheduler(provider, compact)
        scheduler.run_cycle()
        published = scheduler.render_state.snapshot()

        scheduler.provider = FailingProvider()
        assert scheduler.run_cycle() is None

        assert scheduler.render_state.snapshot() is published
        assert scheduler.frames_emitted == 1

    def test_provider_failure_is_logged(
        self, compact: SchemaVersion, log_messages: list[str]
    ) -> None:
        scheduler = FrameScheduler(FailingProvider(), compact)
        scheduler.tick(0.05)

        assert any("Sample provider failed" in message for message in log_messages)
        assert scheduler.render_state.cells == (BLACK,) * compact.geometry.cells

    def test_debug_mirror(self, compact: SchemaVersion) -> None:
        scheduler = FrameScheduler(
            StaticSampleProvider({"player_level": 17}),
            compact,
            FeedConfig(show_debug=True),
        )
        scheduler.run_cycle()

        assert scheduler.render_state.debug_text is not None
        assert "player_level=17" in scheduler.render_state.debug_text

    def test_debug_mirror_off_by_default(self, compact: SchemaVersion) -> None:
        scheduler = FrameScheduler(StaticSampleProvider(), compact)
        scheduler.run_cycle()

        assert scheduler.render_state.debug_text is None

    def test_updated_sample_changes_next_frame(self, compact: SchemaVersion) -> None:
        provider = StaticSampleProvider({"in_combat": False})
        scheduler = FrameScheduler(provider, compact)

        first = scheduler.run_cycle()
        provider.update(in_combat=True)
        second = scheduler.run_cycle()

        assert first != second
