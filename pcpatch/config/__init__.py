"""Configuration loading utilities for pcpatch."""

from .schema import (
    DimensionConfig,
    PatchConfig,
    SchemaConfig,
    load_config,
)

__all__ = ["DimensionConfig", "PatchConfig", "SchemaConfig", "load_config"]
