"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from typing import Any, Iterator

import pytest
from loguru import logger

from lightbox.codec.fields import Ratio
from lightbox.codec.schema import SchemaVersion
from lightbox.schemas import SCHEMA_REGISTRY, get_schema


@pytest.fixture
def compact() -> SchemaVersion:
    """Schema 1: 1-bit cells, sync bit, no padding."""
    return get_schema("compact-v1")


@pytest.fixture
def extended() -> SchemaVersion:
    """Schema 2: 1-bit cells, sync bit, categorical fields."""
    return get_schema("extended-v2")


@pytest.fixture
def tactical() -> SchemaVersion:
    """Schema 3: 8-color cells with parity and one bit of padding."""
    return get_schema("tactical-v3")


@pytest.fixture
def text_schema() -> SchemaVersion:
    """Schema 4: fixed-length comma-separated text frame."""
    return get_schema("text-v4")


@pytest.fixture
def combat_sample() -> dict[str, Any]:
    """A busy snapshot touching every field kind."""
    return {
        "player_hp": Ratio(50, 100),
        "target_hp": Ratio(1, 4),
        "player_resource": Ratio(100, 100),
        "target_distance": 12,
        "in_combat": True,
        "has_target": True,
        "player_level": 17,
        "target_level": 19,
        "facing": 3.3,
        "player_class": "MAGE",
        "target_class": "WARRIOR",
        "player_buffs": 3,
        "target_debuffs": 2,
        "is_casting": True,
        "has_aggro": False,
        "in_cc": False,
        "in_stealth": False,
        "pvp_flagged": True,
        "target_classification": "ELITE",
        "movement_state": "RUNNING",
        "map_id": 1453,
        "map_x": 0.25,
        "map_y": (3, 4),
    }


@pytest.fixture
def registry_snapshot() -> Iterator[None]:
    """Restore the schema registry after a test registers its own schemas."""
    saved = dict(SCHEMA_REGISTRY)
    yield
    SCHEMA_REGISTRY.clear()
    SCHEMA_REGISTRY.update(saved)


@pytest.fixture
def log_messages() -> Iterator[list[str]]:
    """Collect lightbox log messages at DEBUG and above."""
    messages: list[str] = []
    logger.enable("lightbox")
    handler_id = logger.add(lambda message: messages.append(message.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)
    logger.disable("lightbox")
