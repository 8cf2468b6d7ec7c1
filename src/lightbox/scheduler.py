"""Fixed-rate frame scheduling.

The host calls :meth:`FrameScheduler.tick` from its per-frame update callback
with the wall time elapsed since the previous call. Elapsed time accumulates;
whenever a full frame interval has built up, one sample-encode-map-render
cycle runs and the interval is subtracted, so fractional time carries over
instead of drifting.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional, Protocol, Union

from loguru import logger

from .codec.assembler import Frame, FrameAssembler
from .codec.schema import SchemaVersion
from .codec.symbols import SymbolMapper
from .config import FeedConfig, FrameRate
from .render.driver import GridRenderer
from .render.state import RenderState
from .schemas.registry import get_schema

# Slack for float error when elapsed times sum to exactly one interval.
_TICK_EPSILON = 1e-9


class SampleProvider(Protocol):
    """Source of live application state.

    ``sample()`` is called exactly once per cycle and must return every value
    for that frame, so a frame never mixes state from two instants.
    """

    def sample(self) -> Mapping[str, Any]: ...


class StaticSampleProvider:
    """Provider that returns a fixed, updatable mapping.

    Example:
        >>> provider = StaticSampleProvider({"player_level": 17})
        >>> provider.update(in_combat=True)
        >>> provider.sample()["in_combat"]
        True
    """

    def __init__(self, values: Optional[Mapping[str, Any]] = None) -> None:
        self.values: dict[str, Any] = dict(values or {})

    def update(self, **values: Any) -> None:
        self.values.update(values)

    def sample(self) -> Mapping[str, Any]:
        return dict(self.values)


class FrameScheduler:
    """Drives the encode half of the pipeline at a fixed rate.

    Attributes:
        provider: Sample source, read once per cycle
        config: Feed settings (rate, debug mirror)
        assembler: Frame assembler for the active schema
        mapper: Symbol mapper for the active schema
        render_state: Published grid
        renderers: Renderers notified after each swap
        frames_emitted: Number of frames published
        last_frame: Most recently assembled frame

    Example:
        >>> scheduler = FrameScheduler(StaticSampleProvider(), get_schema("compact-v1"))
        >>> scheduler.tick(0.03)
        False
        >>> scheduler.tick(0.03)
        True
    """

    def __init__(
        self,
        provider: SampleProvider,
        schema: SchemaVersion,
        config: Optional[FeedConfig] = None,
        *,
        render_state: Optional[RenderState] = None,
        renderers: Iterable[GridRenderer] = (),
    ) -> None:
        self.provider = provider
        self.schema = schema
        self.config = config if config is not None else FeedConfig()
        self.assembler = FrameAssembler(schema)
        self.mapper = SymbolMapper.for_schema(schema)
        if render_state is None:
            render_state = RenderState(schema.geometry)
        self.render_state = render_state
        if self.render_state.geometry != schema.geometry:
            raise ValueError(
                f"Render state grid {self.render_state.geometry} doesn't match "
                f"schema {schema.name} grid {schema.geometry}"
            )
        self.renderers = list(renderers)
        self.frames_emitted = 0
        self.last_frame: Optional[Frame] = None
        self._accumulator = 0.0
        self._running = True

    @classmethod
    def from_config(
        cls,
        provider: SampleProvider,
        config: FeedConfig,
        *,
        renderers: Iterable[GridRenderer] = (),
    ) -> FrameScheduler:
        """Build a scheduler for the schema named in ``config``.

        Raises:
            KeyError: If the schema isn't registered
        """
        return cls(provider, get_schema(config.schema_name), config, renderers=renderers)

    @property
    def interval(self) -> float:
        """Seconds between frames at the configured rate."""
        return self.config.frame_interval

    @property
    def accumulator(self) -> float:
        """Elapsed time not yet consumed by a frame."""
        return self._accumulator

    @property
    def running(self) -> bool:
        return self._running

    def set_rate(self, rate: Union[int, FrameRate]) -> None:
        """Switch to another supported rate, keeping the accumulated time.

        Raises:
            ValueError: If ``rate`` isn't supported
        """
        self.config = self.config.with_rate(rate)
        logger.info("Frame rate set to {} Hz", self.config.rate.value)

    def start(self) -> None:
        """Resume ticking with an empty accumulator."""
        if self._running:
            return
        self._accumulator = 0.0
        self._running = True
        logger.info(
            "Scheduler started for schema {} at {} Hz", self.schema.name, self.config.rate.value
        )

    def stop(self) -> None:
        """Halt the scheduler; later ticks do nothing until :meth:`start`."""
        if not self._running:
            return
        self._running = False
        logger.info("Scheduler stopped after {} frames", self.frames_emitted)

    def tick(self, elapsed: float) -> bool:
        """Account for elapsed wall time and run at most one cycle.

        Args:
            elapsed: Seconds since the previous tick; non-positive values are ignored

        Returns:
            True if a cycle fired on this tick
        """
        if not self._running:
            return False
        if elapsed > 0:
            self._accumulator += elapsed

        if self._accumulator < self.interval - _TICK_EPSILON:
            return False

        self._accumulator -= self.interval
        self.run_cycle()
        return True

    def run_cycle(self) -> Optional[Frame]:
        """Sample, encode, map and publish one frame immediately.

        A provider failure is logged and leaves the previous frame on screen.

        Returns:
            The published frame, or None if sampling failed
        """
        try:
            sample = self.provider.sample()
        except Exception:
            logger.exception("Sample provider failed, keeping previous frame")
            return None

        frame = self.assembler.assemble(sample)
        colors = self.mapper.to_colors(frame.bits)
        debug_text = frame.describe() if self.config.show_debug else None

        self.render_state.swap(colors, debug_text)
        self.frames_emitted += 1
        self.last_frame = frame

        snapshot = self.render_state.snapshot()
        for renderer in self.renderers:
            renderer.present(snapshot)
        return frame
