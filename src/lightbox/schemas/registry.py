"""Schema registry.

Version selection is deployment-time configuration: a deployment names its
schema, and decoders either know it out of band or read the leading version
field of version-field schemas via :func:`decode_by_version`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence, Union

from ..codec.bitpack import BitUnpacker, bits_to_bytes
from ..codec.schema import FrameLayout, MarkerStrategy, SchemaVersion
from ..exceptions import DecodeError
from .builtin import BUILTIN_SCHEMAS

if TYPE_CHECKING:
    from ..codec.decoder import DecodedFrame

# Global registry: schema id -> schema version
SCHEMA_REGISTRY: dict[int, SchemaVersion] = {}


def register_schema(schema: SchemaVersion) -> None:
    """Register a schema version for lookup by id or name.

    Args:
        schema: Schema version to register

    Raises:
        ValueError: If the id or name already belongs to a different schema

    Example:
        >>> register_schema(my_schema)
        >>> get_schema(my_schema.id) is my_schema
        True
    """
    existing = SCHEMA_REGISTRY.get(schema.id)
    if existing is not None:
        if existing is schema or existing == schema:
            return
        raise ValueError(
            f"Schema id {schema.id} already registered to {existing.name}. "
            f"Cannot register {schema.name} with the same id."
        )

    for other in SCHEMA_REGISTRY.values():
        if other.name == schema.name:
            raise ValueError(
                f"Schema name {schema.name!r} already registered with id {other.id}"
            )

    SCHEMA_REGISTRY[schema.id] = schema


def get_schema(key: Union[int, str]) -> SchemaVersion:
    """Look up a registered schema by id or name.

    Raises:
        KeyError: If no schema matches
    """
    if isinstance(key, int):
        if key in SCHEMA_REGISTRY:
            return SCHEMA_REGISTRY[key]
    else:
        for schema in SCHEMA_REGISTRY.values():
            if schema.name == key:
                return schema
        if key.isdigit() and int(key) in SCHEMA_REGISTRY:
            return SCHEMA_REGISTRY[int(key)]

    known = ", ".join(f"{s.id}:{s.name}" for s in list_schemas())
    raise KeyError(f"Unknown schema {key!r}. Registered: {known}")


def list_schemas() -> list[SchemaVersion]:
    """Registered schemas ordered by id."""
    return [SCHEMA_REGISTRY[key] for key in sorted(SCHEMA_REGISTRY)]


def peek_version(bits: Sequence[int]) -> int:
    """Read the leading version discriminator without knowing the schema.

    Text frames start with the decimal version before the first separator.
    Bit frames are tried against every registered version-field schema's
    version width; the first width whose value names a schema of that width wins.

    Raises:
        DecodeError: If no registered version-field schema matches
    """
    if not bits:
        raise DecodeError("Cannot read version from empty frame")

    text = bits_to_bytes(bits).split(b",", 1)[0]
    if text.isdigit():
        candidate = SCHEMA_REGISTRY.get(int(text))
        if candidate is not None and candidate.layout is FrameLayout.TEXT:
            return candidate.id

    for schema in list_schemas():
        if schema.marker is not MarkerStrategy.VERSION_FIELD or schema.layout is FrameLayout.TEXT:
            continue
        width = schema.fields[0].bit_width
        if len(bits) < width:
            continue
        if BitUnpacker(bits).read_uint(width) == schema.id:
            return schema.id

    raise DecodeError("No registered version-field schema matches the frame's discriminator")


def decode_by_version(bits: Sequence[int]) -> DecodedFrame:
    """Decode a frame whose schema is identified by its leading version field.

    Raises:
        DecodeError: If the version is unknown or the frame is malformed
    """
    # Import here to avoid circular dependency
    from ..codec.decoder import FrameDecoder

    schema = SCHEMA_REGISTRY[peek_version(bits)]
    return FrameDecoder(schema).decode_bits(bits)


for _schema in BUILTIN_SCHEMAS:
    register_schema(_schema)
