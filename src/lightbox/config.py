"""Feed configuration.

The settings record is a small JSON object (update rate, debug mirror flag,
schema name, cell layout). Keys that are absent or hold a value of the wrong
type fall back to their defaults one by one, so a half-broken settings file
still yields a working feed.
"""

from __future__ import annotations

import enum
import json
from pathlib import Path
from typing import Any, Mapping, Union

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .exceptions import ConfigError
from .render.image import CellLayout
from .schemas.registry import get_schema


class FrameRate(enum.IntEnum):
    """Supported update rates in Hz."""

    HZ_5 = 5
    HZ_10 = 10
    HZ_15 = 15
    HZ_20 = 20
    HZ_30 = 30

    @property
    def interval(self) -> float:
        """Seconds between frames."""
        return 1.0 / self.value


class FeedConfig(BaseModel):
    """Runtime settings passed to the scheduler at construction.

    Attributes:
        rate: Update rate, one of :class:`FrameRate`
        show_debug: Publish a human-readable mirror of each payload
        schema_name: Registered schema the deployment transmits
        cell_size: Cell edge in pixels
        gap_x: Horizontal gap between cells in pixels
        gap_y: Vertical gap between cells in pixels
        offset_x: Grid offset from the screen's left edge
        offset_y: Grid offset from the screen's top edge

    Example:
        >>> FeedConfig.from_record({"rate": 10, "show_debug": "yes"})
        FeedConfig(rate=<FrameRate.HZ_10: 10>, show_debug=False, ...)
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    rate: FrameRate = FrameRate.HZ_20
    show_debug: bool = False
    schema_name: str = "extended-v2"
    cell_size: int = Field(default=5, ge=1)
    gap_x: int = Field(default=0, ge=0)
    gap_y: int = Field(default=0, ge=0)
    offset_x: int = Field(default=0, ge=0)
    offset_y: int = Field(default=0, ge=0)

    @field_validator("schema_name")
    @classmethod
    def check_registered(cls, value: str) -> str:
        try:
            get_schema(value)
        except KeyError:
            raise ValueError(f"Unknown schema {value!r}") from None
        return value

    @property
    def frame_interval(self) -> float:
        return self.rate.interval

    def cell_layout(self) -> CellLayout:
        return CellLayout(
            cell_size=self.cell_size,
            gap_x=self.gap_x,
            gap_y=self.gap_y,
            offset_x=self.offset_x,
            offset_y=self.offset_y,
        )

    def with_rate(self, rate: Union[int, FrameRate]) -> FeedConfig:
        """Copy of this config at another supported rate.

        Raises:
            ValueError: If ``rate`` isn't a supported rate
        """
        return FeedConfig(**{**self.model_dump(), "rate": FrameRate(rate)})

    @classmethod
    def from_record(cls, record: Any) -> FeedConfig:
        """Build a config from a loosely-typed settings record.

        Each key is checked on its own: missing keys, values of the wrong type
        (``"20"`` for the rate, ``1`` for the debug flag), values outside the
        allowed set and unregistered schema names are replaced by the default.
        """
        if not isinstance(record, Mapping):
            logger.warning("Settings record is {}, using defaults", type(record).__name__)
            return cls()

        accepted: dict[str, Any] = {}
        for name, info in cls.model_fields.items():
            if name not in record:
                continue
            value = record[name]
            if not _matches_type(value, info.annotation):
                logger.warning("Setting {}={!r} has the wrong type, using default", name, value)
                continue
            try:
                cls.model_validate({name: value})
            except ValidationError:
                logger.warning("Setting {}={!r} is invalid, using default", name, value)
                continue
            accepted[name] = value

        return cls.model_validate(accepted)


def _matches_type(value: Any, annotation: Any) -> bool:
    if annotation is bool:
        return isinstance(value, bool)
    if isinstance(annotation, type) and issubclass(annotation, int):
        return isinstance(value, int) and not isinstance(value, bool)
    if annotation is str:
        return isinstance(value, str)
    return False


def load_config(path: Union[str, Path], *, strict: bool = False) -> FeedConfig:
    """Load a settings record from JSON.

    A missing file yields defaults. An unreadable file yields defaults unless
    ``strict`` is set.

    Raises:
        ConfigError: In strict mode, if the file isn't a JSON object
    """
    path = Path(path)
    if not path.exists():
        logger.info("No settings at {}, using defaults", path)
        return FeedConfig()

    try:
        record = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as err:
        if strict:
            raise ConfigError(f"Cannot read settings from {path}: {err}") from err
        logger.warning("Cannot read settings from {}: {}, using defaults", path, err)
        return FeedConfig()

    if strict and not isinstance(record, dict):
        raise ConfigError(f"Settings in {path} must be a JSON object")
    return FeedConfig.from_record(record)


def save_config(config: FeedConfig, path: Union[str, Path]) -> None:
    """Write a settings record as JSON."""
    Path(path).write_text(json.dumps(config.model_dump(mode="json"), indent=2), encoding="utf-8")
