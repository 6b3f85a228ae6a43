"""Static inspection and visualization of action trees."""
from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any, Iterator

import networkx as nx
import pydot

from ..constants import ACTION_COLORS, IO_ACTIONS
from .core import Action, Bind, Print, Pure, Sequence


def _stable_id(path: str) -> str:
    return hashlib.blake2s(path.encode("utf-8"), digest_size=6).hexdigest()


def _label(action: Action) -> str:
    if isinstance(action, Print):
        return f"Print {action.text!r}"
    if isinstance(action, Pure):
        return f"Pure {action.value!r}"
    if isinstance(action, (Bind, Sequence)) and action.discard:
        return f"{action.kind}_"
    return action.kind


def iter_actions(action: Action, path: str = "root") -> Iterator[tuple[str, Action]]:
    """Yield ``(path, action)`` for the statically known tree, depth-first.

    An opaque Bind continuation is only known once run, so just ``first``
    is visited; a ``then`` continuation contributes its fixed second action.
    """
    yield path, action
    for index, child in enumerate(action.children()):
        yield from iter_actions(child, f"{path}.{index}")


def print_action(action: Action, indent: int = 0) -> None:
    pad = "  " * indent
    print(f"{pad}{_label(action)}")
    for child in action.children():
        print_action(child, indent + 1)
    if isinstance(action, Bind) and action.opaque:
        print(f"{pad}  -> λ")


def action_to_dict(action: Action, path: str = "root") -> dict[str, Any]:
    """Recursively convert an action tree to a JSON-safe dict."""
    data: dict[str, Any] = {"id": _stable_id(path), "kind": action.kind}
    if isinstance(action, Print):
        data["text"] = action.text
    elif isinstance(action, Pure):
        data["value"] = repr(action.value)
    elif isinstance(action, Bind):
        data["discard"] = action.discard
        if action.opaque:
            data["continuation"] = getattr(
                action.continuation, "__qualname__", type(action.continuation).__name__
            )
        else:
            data["continuation"] = "then"
    elif isinstance(action, Sequence):
        data["discard"] = action.discard
    data["children"] = [
        action_to_dict(child, f"{path}.{index}")
        for index, child in enumerate(action.children())
    ]
    return data


def hash_action(action: Action) -> str:
    """SHA-256 of the canonical JSON form of an action tree."""
    doc = action_to_dict(action)
    data = json.dumps(doc, sort_keys=True, separators=(",", ":")).encode("utf-8")
    return hashlib.sha256(data).hexdigest()


def static_grade(action: Action) -> str:
    """``io`` if any statically visible node touches the console.

    A Bind with an opaque continuation is assumed to be ``io`` since its
    continuation may be.
    """
    for _, node in iter_actions(action):
        if node.kind in IO_ACTIONS or (isinstance(node, Bind) and node.opaque):
            return "io"
    return "pure"


def build_action_graph(action: Action) -> nx.DiGraph:
    graph = nx.DiGraph()
    for path, node in iter_actions(action):
        node_id = _stable_id(path)
        graph.add_node(node_id, label=_label(node), kind=node.kind, path=path)
        if "." in path:
            parent = _stable_id(path.rsplit(".", 1)[0])
            order = int(path.rsplit(".", 1)[1])
            graph.add_edge(parent, node_id, order=order)
        if isinstance(node, Bind) and node.opaque:
            cont_id = _stable_id(f"{path}.k")
            graph.add_node(cont_id, label="λ", kind="Continuation", path=f"{path}.k")
            graph.add_edge(node_id, cont_id, order=1, dashed=True)
    return graph


def build_graphviz(action: Action) -> pydot.Dot:
    graph = build_action_graph(action)
    dot = pydot.Dot(
        "ioaction",
        graph_type="digraph",
        rankdir="TB",
        fontname="Helvetica",
    )
    for node_id, attrs in graph.nodes(data=True):
        dot.add_node(
            pydot.Node(
                node_id,
                label=attrs["label"],
                shape="ellipse" if attrs["kind"] == "Continuation" else "box",
                style="filled",
                fillcolor=ACTION_COLORS.get(attrs["kind"], "#B0BEC5"),
                color="#34495e",
                fontname="Helvetica",
            )
        )
    for src, dst, attrs in graph.edges(data=True):
        dot.add_edge(
            pydot.Edge(
                src,
                dst,
                label=str(attrs["order"]),
                style="dashed" if attrs.get("dashed") else "solid",
                color="#7f8c8d",
            )
        )
    return dot


def export_graphviz(action: Action, output_path) -> Path:
    """Write the action tree as Graphviz; ``.dot`` is written raw, anything else as SVG."""
    dot = build_graphviz(action)
    output_path = Path(output_path)
    if output_path.parent and not output_path.parent.exists():
        output_path.parent.mkdir(parents=True, exist_ok=True)

    if output_path.suffix == ".dot":
        output_path.write_text(dot.to_string(), encoding="utf-8")
    else:
        dot.write_svg(str(output_path))
    print(f"  ✓ Graphviz visualization exported → {output_path}")
    return output_path


def visualize_graph(action: Action):  # pragma: no cover
    """Draw the action tree with matplotlib."""
    import matplotlib.pyplot as plt

    graph = build_action_graph(action)
    positions: dict[str, tuple[float, float]] = {}
    depth_counts: dict[int, int] = {}
    for node_id, attrs in graph.nodes(data=True):
        depth = attrs["path"].count(".")
        column = depth_counts.get(depth, 0)
        depth_counts[depth] = column + 1
        positions[node_id] = (column, -depth)

    colors = [
        ACTION_COLORS.get(attrs["kind"], "#B0BEC5")
        for _, attrs in graph.nodes(data=True)
    ]
    labels = {node_id: attrs["label"] for node_id, attrs in graph.nodes(data=True)}
    solid = [(u, v) for u, v, d in graph.edges(data=True) if not d.get("dashed")]
    dashed = [(u, v) for u, v, d in graph.edges(data=True) if d.get("dashed")]

    plt.figure()
    nx.draw_networkx_nodes(graph, positions, node_color=colors, node_size=1200)
    nx.draw_networkx_labels(graph, positions, labels=labels, font_size=8)
    nx.draw_networkx_edges(graph, positions, edgelist=solid)
    if dashed:
        nx.draw_networkx_edges(graph, positions, edgelist=dashed, style="dashed")
    plt.title("Action tree")
    plt.axis("off")
    plt.tight_layout()
    plt.show()


__all__ = [
    "action_to_dict",
    "build_action_graph",
    "build_graphviz",
    "export_graphviz",
    "hash_action",
    "iter_actions",
    "print_action",
    "static_grade",
    "visualize_graph",
]
