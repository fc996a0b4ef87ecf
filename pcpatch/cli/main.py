from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import numpy as np
import typer

from ..config import PatchConfig, load_config
from ..core.errors import PatchError
from ..core.patch import Patch
from ..core.point import Point
from ..core.schema import Schema
from ..core.wire import decode, encode, from_hex

app = typer.Typer(help="pcpatch point-cloud patch utilities")


def _configure_logging(level: str) -> None:
    numeric = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(level=numeric, format="[%(levelname)s] %(message)s")
    logging.getLogger("pcpatch").setLevel(numeric)


def _load_points(path: Path, schema: Schema) -> np.ndarray:
    """Stack the per-dimension arrays of an .npz into an (N, ndims) array."""
    with np.load(path) as data:
        missing = [d.name for d in schema.dimensions if d.name not in data.files]
        if missing:
            raise typer.BadParameter(
                f"{path.name} lacks arrays for dimensions {missing} (has {sorted(data.files)})",
                param_hint="POINTS",
            )
        columns = [np.asarray(data[d.name], dtype=np.float64).ravel() for d in schema.dimensions]
    lengths = {len(c) for c in columns}
    if len(lengths) != 1:
        raise typer.BadParameter(f"dimension arrays in {path.name} differ in length: {sorted(lengths)}", param_hint="POINTS")
    return np.column_stack(columns)


def _build_patch(cfg: PatchConfig, schema: Schema, values: np.ndarray) -> Patch:
    patch = Patch.make_empty(schema, maxpoints=cfg.patch.default_maxpoints)
    for row in values:
        patch.add_point(Point.from_values(schema, row))
    return patch


@app.command("pack")
def pack(
    points: Path = typer.Argument(..., exists=True, readable=True, help="Input .npz with one array per schema dimension."),
    config: Path = typer.Option(..., "--config", "-c", exists=True, readable=True, help="Path to YAML configuration file."),
    output: Path = typer.Option(..., "--output", "-o", help="Output path for the encoded patch."),
    hex_output: bool = typer.Option(False, "--hex", help="Write hex text instead of raw bytes."),
    byteorder: Optional[str] = typer.Option(None, "--byteorder", help="Payload byte order: little or big (default: host)."),
    log_level: str = typer.Option("INFO", "--log-level", help="Logging level (e.g. INFO, DEBUG)."),
) -> None:
    """Pack points into a single patch and write its wire encoding."""

    if byteorder is not None and byteorder not in {"little", "big"}:
        raise typer.BadParameter("byteorder must be 'little' or 'big'.", param_hint="--byteorder")
    _configure_logging(log_level)
    cfg = load_config(config)
    schema = cfg.point_schema.build()
    values = _load_points(points, schema)

    try:
        patch = _build_patch(cfg, schema, values)
        wire = encode(patch.compress(), byteorder=byteorder)
    except PatchError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1)

    output = output.resolve()
    output.parent.mkdir(parents=True, exist_ok=True)
    if hex_output:
        output.write_text(wire.hex().upper() + "\n", encoding="utf-8")
    else:
        output.write_bytes(wire)
    typer.echo(f"Packed {patch.npoints} points (pcid={patch.schema.pcid}, {len(wire)} bytes) → {output}")


@app.command("inspect")
def inspect(
    wire: Path = typer.Argument(..., exists=True, readable=True, help="Encoded patch file."),
    config: Path = typer.Option(..., "--config", "-c", exists=True, readable=True, help="Path to YAML configuration file."),
    hex_input: bool = typer.Option(False, "--hex", help="Input holds hex text instead of raw bytes."),
    log_level: str = typer.Option("INFO", "--log-level", help="Logging level (e.g. INFO, DEBUG)."),
) -> None:
    """Decode a patch and print its summary and points."""

    _configure_logging(log_level)
    cfg = load_config(config)
    schema = cfg.point_schema.build()
    raw = wire.read_bytes()
    try:
        patch = from_hex(schema, raw.decode("ascii")) if hex_input else decode(schema, raw)
        text = patch.to_string()
    except (PatchError, ValueError) as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1)

    typer.echo(f"pcid: {schema.pcid}")
    typer.echo(f"points: {patch.npoints}")
    typer.echo(f"compression: {schema.compression.name.lower()} (compressed={patch.compressed})")
    if patch.bounds.is_empty:
        typer.echo("bounds: empty")
    else:
        typer.echo(f"bounds: {patch.xmin:g} {patch.ymin:g} {patch.xmax:g} {patch.ymax:g}")
    typer.echo(text)


def main() -> None:
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
