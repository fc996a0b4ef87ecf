from __future__ import annotations

from pathlib import Path
from typing import List, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..core.schema import MAX_PCID, CompressionKind, Dimension, Schema


Interpretation = Literal[
    "int8_t", "uint8_t", "int16_t", "uint16_t", "int32_t",
    "uint32_t", "int64_t", "uint64_t", "float", "double",
]


class DimensionConfig(BaseModel):
    name: str
    interpretation: Interpretation = "double"
    scale: float = 1.0
    offset: float = 0.0

    @model_validator(mode="after")
    def _validate_scale(self) -> "DimensionConfig":
        if self.scale == 0:
            raise ValueError(f"dimension '{self.name}' has zero scale")
        return self


class SchemaConfig(BaseModel):
    pcid: int = Field(ge=0, le=MAX_PCID)
    compression: Literal["none", "dimensional", "ght"] = "none"
    dimensions: List[DimensionConfig]

    @model_validator(mode="after")
    def _validate_dimensions(self) -> "SchemaConfig":
        if not self.dimensions:
            raise ValueError("schema requires at least one dimension")
        names = [d.name for d in self.dimensions]
        if len(set(names)) != len(names):
            raise ValueError(f"duplicate dimension names: {names}")
        return self

    def build(self) -> Schema:
        dims = tuple(
            Dimension(d.name, d.interpretation, scale=d.scale, offset=d.offset)
            for d in self.dimensions
        )
        return Schema(
            pcid=self.pcid,
            dimensions=dims,
            compression=CompressionKind.from_name(self.compression),
        )


class PatchOptions(BaseModel):
    default_maxpoints: int = Field(64, gt=0)


class PatchConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    point_schema: SchemaConfig = Field(alias="schema")
    patch: PatchOptions = PatchOptions()


def load_config(path: str | Path) -> PatchConfig:
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if not isinstance(data, dict):
        raise ValueError("Configuration root must be a mapping.")
    return PatchConfig.model_validate(data)
