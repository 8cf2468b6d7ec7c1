"""Exception hierarchy for lightbox.

This module defines all custom exceptions used throughout the package.
All exceptions inherit from LightboxError for easy catching of any lightbox-specific error.

The encode path never raises for sample content: bad or missing values degrade
to documented defaults. Exceptions are reserved for invalid definitions
(schemas, palettes, configuration) and for the reference decoder.
"""

from __future__ import annotations


class LightboxError(Exception):
    """Base exception for all lightbox errors."""

    pass


class SchemaError(LightboxError):
    """Raised when a schema version or palette definition is invalid.

    Examples:
        - Palette size doesn't match 2**symbol_depth
        - Duplicate field names
        - Categorical table without a reserved 0 entry
        - Version-field schema whose first field isn't the version field
    """

    pass


class DecodeError(LightboxError):
    """Raised when the reference decoder cannot reconstruct a frame.

    Examples:
        - Wrong number of bits or cells for the schema
        - Missing sync bit
        - Version discriminator mismatch
        - Parity check failure
        - Observed color not in the palette
    """

    pass


class ConfigError(LightboxError):
    """Raised when a settings record cannot be read in strict mode.

    Examples:
        - Settings file isn't valid JSON
        - Settings file doesn't contain a JSON object
    """

    pass
