"""Unit tests for schema definitions."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from lightbox.codec.schema import (
    EncodingRule,
    FieldSpec,
    FrameLayout,
    GridGeometry,
    MarkerStrategy,
    SchemaVersion,
)
from lightbox.exceptions import SchemaError
from lightbox.schemas import BUILTIN_SCHEMAS, get_schema


def _version_field(bits: int = 8) -> FieldSpec:
    return FieldSpec(name="version", bit_width=bits, rule=EncodingRule.VERSION)


def _level() -> FieldSpec:
    return FieldSpec(name="level", bit_width=5)


class TestFieldSpec:
    """Test FieldSpec validation."""

    def test_defaults(self) -> None:
        spec = FieldSpec(name="level", bit_width=5)

        assert spec.rule is EncodingRule.UNSIGNED
        assert spec.max_value == 31
        assert spec.value_domain == range(0, 32)

    def test_width_bounds(self) -> None:
        with pytest.raises(ValidationError):
            FieldSpec(name="level", bit_width=0)
        with pytest.raises(ValidationError):
            FieldSpec(name="level", bit_width=33)

    def test_boolean_must_be_one_bit(self) -> None:
        with pytest.raises(SchemaError, match="boolean"):
            FieldSpec(name="flag", bit_width=2, rule=EncodingRule.BOOLEAN)

    def test_categorical_needs_table(self) -> None:
        with pytest.raises(SchemaError, match="lookup table"):
            FieldSpec(name="kind", bit_width=2, rule=EncodingRule.CATEGORICAL)

    def test_categorical_reserves_zero(self) -> None:
        with pytest.raises(SchemaError, match="index 0"):
            FieldSpec(
                name="kind", bit_width=2, rule=EncodingRule.CATEGORICAL, categories={"A": 1}
            )

    def test_categorical_index_must_fit(self) -> None:
        with pytest.raises(SchemaError, match="doesn't fit"):
            FieldSpec(
                name="kind",
                bit_width=2,
                rule=EncodingRule.CATEGORICAL,
                categories={"UNKNOWN": 0, "BIG": 4},
            )

    def test_table_only_for_categorical(self) -> None:
        with pytest.raises(SchemaError, match="only categorical"):
            FieldSpec(name="level", bit_width=5, categories={"UNKNOWN": 0})

    def test_label_for(self) -> None:
        spec = get_schema("extended-v2").field("player_class")

        assert spec.label_for(8) == "MAGE"
        assert spec.label_for(15) is None
        assert "WARRIOR" in spec.value_domain

    def test_frozen(self) -> None:
        spec = FieldSpec(name="level", bit_width=5)
        with pytest.raises(ValidationError):
            spec.bit_width = 6  # type: ignore[misc]


class TestSchemaVersion:
    """Test SchemaVersion invariants."""

    def test_total_bits_is_grid_times_depth(self) -> None:
        for schema in BUILTIN_SCHEMAS:
            assert schema.total_bits == schema.geometry.cells * schema.symbol_depth

    def test_builtin_layouts(self) -> None:
        """Test the shipped generations' frame sizes."""
        compact = get_schema(1)
        assert (compact.total_bits, compact.payload_bits, compact.slack_bits) == (40, 39, 0)

        extended = get_schema(2)
        assert (extended.total_bits, extended.payload_bits, extended.slack_bits) == (60, 59, 0)

        tactical = get_schema(3)
        assert (tactical.total_bits, tactical.payload_bits, tactical.slack_bits) == (63, 61, 1)
        assert tactical.palette_size == 8

        text = get_schema(4)
        assert text.total_bits == 600
        assert text.text_length == 75
        assert text.marker_bits == 0

    def test_duplicate_field_names(self) -> None:
        with pytest.raises(SchemaError, match="duplicate"):
            SchemaVersion(
                id=10,
                name="dup",
                fields=(_level(), _level()),
                geometry=GridGeometry(cols=4, rows=3),
                symbol_depth=1,
            )

    def test_version_field_schema_must_lead_with_version(self) -> None:
        with pytest.raises(SchemaError, match="start with a version field"):
            SchemaVersion(
                id=10,
                name="no-version",
                fields=(_level(),),
                geometry=GridGeometry(cols=8, rows=1),
                symbol_depth=1,
                marker=MarkerStrategy.VERSION_FIELD,
            )

    def test_version_field_only_first(self) -> None:
        with pytest.raises(SchemaError, match="first field"):
            SchemaVersion(
                id=10,
                name="late-version",
                fields=(_level(), _version_field()),
                geometry=GridGeometry(cols=8, rows=2),
                symbol_depth=1,
            )

    def test_id_must_fit_version_field(self) -> None:
        with pytest.raises(SchemaError, match="doesn't fit"):
            SchemaVersion(
                id=20,
                name="wide-id",
                fields=(_version_field(4), _level()),
                geometry=GridGeometry(cols=9, rows=1),
                symbol_depth=1,
                marker=MarkerStrategy.VERSION_FIELD,
            )

    def test_text_layout_needs_whole_bytes(self) -> None:
        with pytest.raises(SchemaError, match="whole number of bytes"):
            SchemaVersion(
                id=10,
                name="odd-text",
                fields=(_version_field(),),
                geometry=GridGeometry(cols=3, rows=1),
                symbol_depth=1,
                marker=MarkerStrategy.VERSION_FIELD,
                layout=FrameLayout.TEXT,
            )

    def test_text_layout_needs_version_marker(self) -> None:
        with pytest.raises(SchemaError, match="version field"):
            SchemaVersion(
                id=10,
                name="sync-text",
                fields=(_level(),),
                geometry=GridGeometry(cols=8, rows=1),
                symbol_depth=1,
                layout=FrameLayout.TEXT,
            )

    def test_palette_size_must_match_depth(self) -> None:
        with pytest.raises(SchemaError, match="palette needs 4 colors"):
            SchemaVersion(
                id=10,
                name="short-palette",
                fields=(_level(),),
                geometry=GridGeometry(cols=3, rows=1),
                symbol_depth=2,
                palette=((0, 0, 0), (255, 255, 255)),
            )

    def test_palette_colors_distinct(self) -> None:
        with pytest.raises(SchemaError, match="distinct"):
            SchemaVersion(
                id=10,
                name="dup-palette",
                fields=(_level(),),
                geometry=GridGeometry(cols=6, rows=1),
                symbol_depth=1,
                palette=((0, 0, 0), (0, 0, 0)),
            )

    def test_overflow_is_not_an_error(self) -> None:
        """Test over-capacity schemas construct and report negative slack."""
        schema = SchemaVersion(
            id=10,
            name="tight",
            fields=(FieldSpec(name="a", bit_width=8), FieldSpec(name="b", bit_width=8)),
            geometry=GridGeometry(cols=4, rows=3),
            symbol_depth=1,
        )

        assert schema.slack_bits == 12 - 17

    def test_field_lookup(self) -> None:
        schema = get_schema("compact-v1")

        assert schema.field("player_level").bit_width == 5
        with pytest.raises(KeyError):
            schema.field("nope")

    def test_json_round_trip(self) -> None:
        """Test schemas can be shipped as JSON next to a decoder."""
        schema = get_schema("tactical-v3")
        restored = SchemaVersion.model_validate_json(schema.model_dump_json())

        assert restored == schema

    def test_summary(self) -> None:
        info = get_schema("tactical-v3").summary()

        assert info["id"] == 3
        assert info["total_bits"] == 63
