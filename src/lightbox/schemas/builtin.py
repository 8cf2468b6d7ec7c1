"""Shipped schema generations.

Each generation is a closed table. Field order is the wire order; changing
anything here means publishing a new schema id.

==========  ===========  =============  ======  =======  =====  ==  ==========
id          name         marker         layout  payload  grid   k   total bits
==========  ===========  =============  ======  =======  =====  ==  ==========
1           compact-v1   sync bit       bits    39       20x2   1   40
2           extended-v2  sync bit       bits    59       20x3   1   60
3           tactical-v3  sync bit       bits    60 + 1   7x3    3   63
4           text-v4      version field  text    <= 600   25x8   3   600
==========  ===========  =============  ======  =======  =====  ==  ==========
"""

from __future__ import annotations

from ..codec.schema import (
    ClampPolicy,
    EncodingRule,
    FieldSpec,
    FrameLayout,
    GridGeometry,
    MarkerStrategy,
    SchemaVersion,
)
from .categories import ClassificationTier, MovementState, UnitClass, enum_table


def _ratio(name: str, bits: int, description: str) -> FieldSpec:
    return FieldSpec(name=name, bit_width=bits, rule=EncodingRule.RATIO, description=description)


def _uint(name: str, bits: int, description: str) -> FieldSpec:
    return FieldSpec(name=name, bit_width=bits, description=description)


def _flag(name: str, description: str) -> FieldSpec:
    return FieldSpec(name=name, bit_width=1, rule=EncodingRule.BOOLEAN, description=description)


def _category(name: str, bits: int, table: dict[str, int], description: str) -> FieldSpec:
    return FieldSpec(
        name=name,
        bit_width=bits,
        rule=EncodingRule.CATEGORICAL,
        policy=ClampPolicy.DEFAULT,
        categories=table,
        description=description,
    )


def _facing(bits: int = 3) -> FieldSpec:
    return FieldSpec(
        name="facing",
        bit_width=bits,
        rule=EncodingRule.OCTANT,
        description="Player facing as compass octant (radians in)",
    )


CLASS_TABLE = enum_table(UnitClass)
CLASSIFICATION_TABLE = enum_table(ClassificationTier)
MOVEMENT_TABLE = enum_table(MovementState)

PLAYER_HP = _ratio("player_hp", 7, "Player health, (current, max)")
TARGET_HP = _ratio("target_hp", 7, "Target health, (current, max)")
PLAYER_RESOURCE = _ratio("player_resource", 7, "Mana/energy/rage/focus, (current, max)")
TARGET_DISTANCE = _uint("target_distance", 5, "Distance to target in yards")
IN_COMBAT = _flag("in_combat", "Player is in combat")
HAS_TARGET = _flag("has_target", "A target is selected")
PLAYER_LEVEL = _uint("player_level", 5, "Player level")
TARGET_LEVEL = _uint("target_level", 5, "Target level")
IS_CASTING = _flag("is_casting", "Player is casting")
PLAYER_CLASS = _category("player_class", 4, CLASS_TABLE, "Player class")
TARGET_CLASS = _category("target_class", 4, CLASS_TABLE, "Target class")
PLAYER_BUFFS = _uint("player_buffs", 4, "Number of buffs on the player")
TARGET_DEBUFFS = _uint("target_debuffs", 4, "Number of debuffs on the target")


COMPACT_V1 = SchemaVersion(
    id=1,
    name="compact-v1",
    description="Compact vitals with leading sync bit",
    geometry=GridGeometry(cols=20, rows=2),
    symbol_depth=1,
    marker=MarkerStrategy.SYNC_BIT,
    fields=(
        PLAYER_HP,
        TARGET_HP,
        PLAYER_RESOURCE,
        TARGET_DISTANCE,
        IN_COMBAT,
        HAS_TARGET,
        PLAYER_LEVEL,
        TARGET_LEVEL,
        IS_CASTING,
    ),
)

EXTENDED_V2 = SchemaVersion(
    id=2,
    name="extended-v2",
    description="Combat, threat and class state with leading sync bit",
    geometry=GridGeometry(cols=20, rows=3),
    symbol_depth=1,
    marker=MarkerStrategy.SYNC_BIT,
    fields=(
        PLAYER_HP,
        TARGET_HP,
        PLAYER_RESOURCE,
        TARGET_DISTANCE,
        IN_COMBAT,
        HAS_TARGET,
        PLAYER_LEVEL,
        TARGET_LEVEL,
        _facing(),
        PLAYER_CLASS,
        TARGET_CLASS,
        PLAYER_BUFFS,
        TARGET_DEBUFFS,
        IS_CASTING,
        _flag("has_aggro", "Target is attacking the player"),
    ),
)

TACTICAL_V3 = SchemaVersion(
    id=3,
    name="tactical-v3",
    description="Stealth, crowd-control and PvP flags on an 8-color grid, with parity",
    geometry=GridGeometry(cols=7, rows=3),
    symbol_depth=3,
    marker=MarkerStrategy.SYNC_BIT,
    parity=True,
    fields=(
        PLAYER_HP,
        TARGET_HP,
        PLAYER_RESOURCE,
        TARGET_DISTANCE,
        IN_COMBAT,
        HAS_TARGET,
        PLAYER_LEVEL,
        TARGET_LEVEL,
        _facing(),
        PLAYER_CLASS,
        TARGET_CLASS,
        PLAYER_BUFFS,
        IS_CASTING,
        _flag("in_cc", "Player is stunned, feared, charmed or rooted"),
        _flag("in_stealth", "Player is stealthed"),
        _flag("pvp_flagged", "Player is flagged for PvP"),
        _category(
            "target_classification", 3, CLASSIFICATION_TABLE, "Target classification tier"
        ),
    ),
)

TEXT_V4 = SchemaVersion(
    id=4,
    name="text-v4",
    description="Comma-separated decimal array with version discriminator and map position",
    geometry=GridGeometry(cols=25, rows=8),
    symbol_depth=3,
    marker=MarkerStrategy.VERSION_FIELD,
    layout=FrameLayout.TEXT,
    fields=(
        FieldSpec(
            name="version", bit_width=8, rule=EncodingRule.VERSION, description="Schema id"
        ),
        PLAYER_HP,
        TARGET_HP,
        PLAYER_RESOURCE,
        _uint("player_level", 7, "Player level"),
        _uint("target_level", 7, "Target level"),
        IN_COMBAT,
        HAS_TARGET,
        PLAYER_CLASS,
        TARGET_CLASS,
        _category(
            "target_classification", 3, CLASSIFICATION_TABLE, "Target classification tier"
        ),
        _category("movement_state", 3, MOVEMENT_TABLE, "Player locomotion"),
        _facing(),
        _uint("map_id", 16, "Current map id"),
        _ratio("map_x", 10, "Map X position, fraction 0-1 or (x, width)"),
        _ratio("map_y", 10, "Map Y position, fraction 0-1 or (y, height)"),
    ),
)

BUILTIN_SCHEMAS: tuple[SchemaVersion, ...] = (COMPACT_V1, EXTENDED_V2, TACTICAL_V3, TEXT_V4)
