from __future__ import annotations

import json
import math
from pathlib import Path
from typing import Any

import yaml

from task_frontier.core.errors import GraphLoadError


CANVAS_SCHEMA_VERSION = "canvas"


def load_graph(path: str) -> dict[str, Any]:
    """Load a YAML/JSON task graph snapshot.

    Returns a dict with keys: schema_version, nodes, edges.
    Canvas exports (nodes carrying a `data` object, edges with source/target)
    are rewritten into the native shape; otherwise types are left alone and
    the validator owns shape checking.
    """

    p = Path(path)
    if not p.exists():
        raise GraphLoadError(
            code="E_FILE_NOT_FOUND",
            message="file does not exist",
            file=str(p),
        )

    suffix = p.suffix.lower()
    try:
        raw_text = p.read_text(encoding="utf-8")
    except Exception as e:  # pragma: no cover
        raise GraphLoadError(code="E_FILE_READ", message=str(e), file=str(p)) from e

    try:
        if suffix in {".yaml", ".yml"}:
            data = yaml.safe_load(raw_text)
        elif suffix == ".json":
            data = json.loads(raw_text)
        else:
            raise GraphLoadError(
                code="E_UNSUPPORTED_FORMAT",
                message="supported formats are .yaml/.yml and .json",
                file=str(p),
            )
    except GraphLoadError:
        raise
    except Exception as e:
        code = "E_YAML_PARSE" if suffix in {".yaml", ".yml"} else "E_JSON_PARSE"
        raise GraphLoadError(code=code, message=str(e), file=str(p)) from e

    if not isinstance(data, dict):
        raise GraphLoadError(
            code="E_INVALID_TOP_LEVEL",
            message="top-level document must be a mapping/object",
            file=str(p),
        )

    normalized = normalize_graph(data)
    normalized["__file__"] = str(p)
    return normalized


def normalize_graph(data: dict[str, Any]) -> dict[str, Any]:
    """Keep only the expected keys, translating the canvas shape when present."""
    nodes = data.get("nodes")
    edges = data.get("edges", [])

    if _is_canvas(nodes, edges):
        return {
            "schema_version": data.get("schema_version") or CANVAS_SCHEMA_VERSION,
            "nodes": [_canvas_node(n) for n in nodes],
            "edges": [_canvas_edge(e) for e in edges] if isinstance(edges, list) else edges,
        }

    return {
        "schema_version": data.get("schema_version"),
        "nodes": nodes,
        "edges": edges,
    }


def _is_canvas(nodes: Any, edges: Any) -> bool:
    if isinstance(nodes, list) and any(isinstance(n, dict) and isinstance(n.get("data"), dict) for n in nodes):
        return True
    if isinstance(edges, list) and any(isinstance(e, dict) and "source" in e and "target" in e for e in edges):
        return True
    return False


def _canvas_node(raw: Any) -> Any:
    if not isinstance(raw, dict) or not isinstance(raw.get("data"), dict):
        return raw
    d = raw["data"]

    out: dict[str, Any] = {"id": raw.get("id")}
    if "title" in d:
        out["title"] = d.get("title")
    if "status" in d:
        out["status"] = d.get("status")

    # The canvas form stores the estimate as free text; anything that is not a
    # positive number means unknown.
    value = d.get("estimatedTime")
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            value = None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        value = None
    elif math.isnan(value) or math.isinf(value) or value <= 0:
        value = None
    if value is not None:
        out["estimate"] = {"value": value, "unit": d.get("estimatedTimeUnit") or "days"}
    return out


def _canvas_edge(raw: Any) -> Any:
    if not isinstance(raw, dict) or "source" not in raw:
        return raw
    return {"from": raw.get("source"), "to": raw.get("target")}
