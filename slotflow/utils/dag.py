from __future__ import annotations

"""Graph inspection helpers (no side-effects except ``show_graph_tree``).

iter_modules(graph) yields (depth, module) depth-first, from each end point
up through its parents.
build_rich_tree(graph) returns a Rich *Tree* ready for printing.
"""
from typing import TYPE_CHECKING, Iterator, List, Set, Tuple

from slotflow.core.graph import ModuleGraph
from slotflow.core.module import Module

if TYPE_CHECKING:  # pragma: no cover
    from rich.tree import Tree

__all__ = [
    "iter_modules",
    "build_rich_tree",
    "show_graph_tree",
]


def _parents(graph: ModuleGraph, module: Module) -> Iterator[Tuple[str, str, Module]]:
    """Yield *(input name, upstream output name, upstream module)* per linked input."""
    for slot in module.inputs:
        if graph.is_linked(slot):
            output = graph.linked_output_for(slot)
            yield slot.name, output.name, output.module


# --------------------------------------------------------------------------- #
# Core traverser
# --------------------------------------------------------------------------- #

def iter_modules(graph: ModuleGraph) -> Iterator[Tuple[int, Module]]:  # noqa: D401
    """Yield *(depth, module)* for every module reachable from the end points.

    End points have depth 0, their parents depth 1 and so on. A module
    reached twice (shared parent or cycle) is yielded once only, at the
    position a depth-first walk first reaches it.
    """
    seen: Set[Module] = set()
    stack: List[Tuple[int, Module]] = [(0, m) for m in reversed(graph.end_points)]
    while stack:
        depth, module = stack.pop()
        if module in seen:
            continue
        seen.add(module)
        yield depth, module
        parents = [upstream for _, _, upstream in _parents(graph, module)]
        stack.extend((depth + 1, parent) for parent in reversed(parents))


# --------------------------------------------------------------------------- #
# Rich-aware tree builder
# --------------------------------------------------------------------------- #

def build_rich_tree(graph: ModuleGraph) -> "Tree":  # noqa: D401
    """Return a *rich.tree.Tree* of *graph* as seen from its end points."""
    from rich.markup import escape
    from rich.tree import Tree

    tree = Tree("[bold]Module graph[/]")
    if not graph.end_points:
        tree.add("[dim]empty[/]")
        return tree

    shown: Set[Module] = set()
    # (node to attach to, module, edge label)
    stack: List[Tuple["Tree", Module, str]] = [(tree, m, "") for m in reversed(graph.end_points)]
    while stack:
        parent, module, label = stack.pop()
        name = escape(type(module).__qualname__)
        if module in shown:
            parent.add(f"{label}[dim]{name} (see above)[/]")
            continue
        shown.add(module)
        node = parent.add(f"{label}[cyan]{name}[/] [dim]{escape(module.description)}[/]")
        edges = [
            (node, upstream, f"[green]{escape(input_name)}[/] ← [yellow]{escape(output_name)}[/] ")
            for input_name, output_name, upstream in _parents(graph, module)
        ]
        stack.extend(reversed(edges))
    return tree


def show_graph_tree(graph: ModuleGraph) -> None:
    """Print :func:`build_rich_tree` on the shared Rich console."""
    from slotflow.utils.logging import console

    console.print(build_rich_tree(graph))
