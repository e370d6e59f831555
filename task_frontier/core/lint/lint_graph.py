from __future__ import annotations

from collections import Counter
from typing import Any, Optional

from task_frontier.core.errors import GraphValidationError


# Lint rules report data conditions the engine survives but a user should fix:
# - L_DANGLING_EDGE: edge endpoint references an unknown task id
# - L_SELF_DEPENDENCY: task depends on itself
# - L_DUPLICATE_EDGE: the same prerequisite -> dependent edge appears twice
# - L_CYCLE_DETECTED: dependency cycle exists (metrics inside it are meaningless)
# - L_MISSING_ESTIMATE: active task without an estimate (shows as "needs estimate")


def lint_graph(graph: dict[str, Any]) -> list[GraphValidationError]:
    """Lint a graph snapshot.

    Lint runs *in addition to* schema validation. It works on partially-invalid
    inputs (best effort) and skips whatever it cannot read.
    """

    file = _cast_optional_str(graph.get("__file__"))

    nodes = graph.get("nodes")
    if not isinstance(nodes, list):
        # Let validator handle shape.
        return []

    id_to_index: dict[str, int] = {}
    id_to_raw: dict[str, dict[str, Any]] = {}
    for i, raw in enumerate(nodes):
        if not isinstance(raw, dict):
            continue
        nid = raw.get("id")
        if not isinstance(nid, str):
            continue
        id_to_index.setdefault(nid, i)
        id_to_raw.setdefault(nid, raw)

    errors: list[GraphValidationError] = []

    # Rule: active tasks need an estimate
    for nid, raw in id_to_raw.items():
        if raw.get("status", "todo") in {"done", "someday"}:
            continue
        if raw.get("estimate") is None:
            errors.append(
                GraphValidationError(
                    code="L_MISSING_ESTIMATE",
                    message=f"active task {nid} has no estimate; downstream times show as unknown",
                    file=file,
                    path=f"nodes[{id_to_index[nid]}].estimate",
                )
            )

    raw_edges = graph.get("edges")
    if not isinstance(raw_edges, list):
        return _sorted(errors)

    # dependent -> prerequisites, known ids only
    prerequisites: dict[str, list[str]] = {nid: [] for nid in id_to_raw}
    pairs: Counter[tuple[str, str]] = Counter()

    for i, raw in enumerate(raw_edges):
        if not isinstance(raw, dict):
            continue
        src, dst = raw.get("from"), raw.get("to")
        if not isinstance(src, str) or not isinstance(dst, str):
            continue

        missing = [x for x in (src, dst) if x not in id_to_raw]
        if missing:
            errors.append(
                GraphValidationError(
                    code="L_DANGLING_EDGE",
                    message=f"edge references unknown id: {', '.join(missing)}",
                    file=file,
                    path=f"edges[{i}]",
                )
            )
            continue

        if src == dst:
            errors.append(
                GraphValidationError(
                    code="L_SELF_DEPENDENCY",
                    message=f"task {src} depends on itself",
                    file=file,
                    path=f"edges[{i}]",
                )
            )
            continue

        pairs[(src, dst)] += 1
        if pairs[(src, dst)] == 2:
            errors.append(
                GraphValidationError(
                    code="L_DUPLICATE_EDGE",
                    message=f"duplicate edge: {src} -> {dst}",
                    file=file,
                    path=f"edges[{i}]",
                )
            )
            continue
        if pairs[(src, dst)] == 1:
            prerequisites[dst].append(src)

    # Rule: cycle detection
    for nid, msg in _detect_cycles(prerequisites):
        errors.append(
            GraphValidationError(
                code="L_CYCLE_DETECTED",
                message=msg,
                file=file,
                path=f"nodes[{id_to_index.get(nid, 0)}].id",
            )
        )

    return _sorted(errors)


def _detect_cycles(prerequisites: dict[str, list[str]]) -> list[tuple[str, str]]:
    """Report each distinct cycle once, walking prerequisite edges iteratively."""
    WHITE, GRAY, BLACK = 0, 1, 2
    state: dict[str, int] = {nid: WHITE for nid in prerequisites}
    emitted: set[frozenset[str]] = set()
    out: list[tuple[str, str]] = []

    for start in prerequisites:
        if state[start] != WHITE:
            continue
        path: list[str] = [start]
        iters = [iter(prerequisites[start])]
        state[start] = GRAY
        while iters:
            u = path[-1]
            v = next(iters[-1], None)
            if v is None:
                state[u] = BLACK
                path.pop()
                iters.pop()
                continue
            if state[v] == GRAY:
                cycle = path[path.index(v) :]
                key = frozenset(cycle)
                if key not in emitted:
                    emitted.add(key)
                    # path runs dependent -> prerequisite; print in work order
                    order = list(reversed(cycle)) + [cycle[-1]]
                    out.append((v, "dependency cycle detected: " + " -> ".join(order)))
            elif state[v] == WHITE:
                state[v] = GRAY
                path.append(v)
                iters.append(iter(prerequisites[v]))

    return out


def _sorted(errors: list[GraphValidationError]) -> list[GraphValidationError]:
    return sorted(errors, key=lambda e: (e.file or "", e.path or "", e.code))


def _cast_optional_str(v: Any) -> Optional[str]:
    return v if isinstance(v, str) else None
