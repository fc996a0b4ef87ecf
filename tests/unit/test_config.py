from pathlib import Path

import pytest
import yaml

from pcpatch.config import load_config
from pcpatch.core.schema import CompressionKind


def _write(path: Path, data) -> Path:
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(data, f)
    return path


def test_load_config_builds_schema(tmp_path: Path) -> None:
    cfg_path = _write(
        tmp_path / "patch.yaml",
        {
            "schema": {
                "pcid": 9,
                "compression": "none",
                "dimensions": [
                    {"name": "X", "interpretation": "int32_t", "scale": 0.01},
                    {"name": "Y", "interpretation": "int32_t", "scale": 0.01},
                    {"name": "Z"},
                ],
            },
            "patch": {"default_maxpoints": 8},
        },
    )
    cfg = load_config(cfg_path)
    assert cfg.patch.default_maxpoints == 8
    schema = cfg.point_schema.build()
    assert schema.pcid == 9
    assert schema.compression is CompressionKind.NONE
    assert schema.point_size == 16
    assert schema.dimensions[0].scale == 0.01
    assert schema.dimensions[2].interpretation == "double"


def test_load_config_defaults(tmp_path: Path) -> None:
    cfg_path = _write(
        tmp_path / "patch.yaml",
        {"schema": {"pcid": 1, "compression": "ght", "dimensions": [{"name": "X"}, {"name": "Y"}]}},
    )
    cfg = load_config(cfg_path)
    assert cfg.patch.default_maxpoints == 64
    assert cfg.point_schema.build().compression is CompressionKind.GHT


@pytest.mark.parametrize(
    "schema",
    [
        {"pcid": 1, "dimensions": []},
        {"pcid": 1, "dimensions": [{"name": "X"}, {"name": "X"}]},
        {"pcid": -1, "dimensions": [{"name": "X"}]},
        {"pcid": 2**32, "dimensions": [{"name": "X"}]},
        {"pcid": 1, "dimensions": [{"name": "X", "interpretation": "int128_t"}]},
        {"pcid": 1, "dimensions": [{"name": "X", "scale": 0}]},
        {"pcid": 1, "compression": "zstd", "dimensions": [{"name": "X"}]},
    ],
)
def test_load_config_rejects_invalid_schema(tmp_path: Path, schema) -> None:
    cfg_path = _write(tmp_path / "bad.yaml", {"schema": schema})
    with pytest.raises(ValueError):
        load_config(cfg_path)


def test_load_config_requires_mapping(tmp_path: Path) -> None:
    cfg_path = _write(tmp_path / "list.yaml", [1, 2, 3])
    with pytest.raises(ValueError):
        load_config(cfg_path)


def test_load_config_accepts_largest_pcid(tmp_path: Path) -> None:
    cfg_path = _write(tmp_path / "max.yaml", {"schema": {"pcid": 2**32 - 1, "dimensions": [{"name": "X"}]}})
    assert load_config(cfg_path).point_schema.build().pcid == 2**32 - 1
