from __future__ import annotations
from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from .patch import Patch


def to_display_string(patch: "Patch") -> str:
    """Render ``[ <pcid> : (<d0>,<d1>,...), (...) ]`` for humans; not a storage format."""
    groups = []
    for pt in patch.to_points():
        groups.append("(" + ",".join(f"{v:g}" for v in pt.values()) + ")")
    return f"[ {patch.schema.pcid} : {', '.join(groups)} ]"
