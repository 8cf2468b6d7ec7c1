"""Closed categorical lookup tables.

Every table reserves ``UNKNOWN = 0``. Labels that aren't listed encode as 0, so
a decoder can't tell an unmapped label from an explicit unknown. Member names
match the tokens the host reports (``"DEATHKNIGHT"``, ``"RAREELITE"``).
"""

from __future__ import annotations

import enum


class UnitClass(enum.IntEnum):
    """Character class, 4 bits."""

    UNKNOWN = 0
    WARRIOR = 1
    PALADIN = 2
    HUNTER = 3
    ROGUE = 4
    PRIEST = 5
    DEATHKNIGHT = 6
    SHAMAN = 7
    MAGE = 8
    WARLOCK = 9
    MONK = 10
    DRUID = 11
    DEMONHUNTER = 12


class ClassificationTier(enum.IntEnum):
    """Target classification, 3 bits."""

    UNKNOWN = 0
    NORMAL = 1
    ELITE = 2
    RAREELITE = 3
    RARE = 4
    WORLDBOSS = 5
    TRIVIAL = 6
    MINUS = 7


class MovementState(enum.IntEnum):
    """Coarse locomotion state, 3 bits."""

    UNKNOWN = 0
    IDLE = 1
    WALKING = 2
    RUNNING = 3
    SWIMMING = 4
    FLYING = 5
    MOUNTED = 6
    DEAD = 7


class CompassOctant(enum.IntEnum):
    """Facing octants. Facing 0 is north and angles grow counter-clockwise."""

    N = 0
    NW = 1
    W = 2
    SW = 3
    S = 4
    SE = 5
    E = 6
    NE = 7


def enum_table(enum_type: type[enum.IntEnum]) -> dict[str, int]:
    """Build a schema lookup table from an ``IntEnum``."""
    return {member.name: int(member.value) for member in enum_type}
