from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Set


@dataclass(frozen=True)
class ScheduleResult:
    order: List[str] = field(default_factory=list)
    cycles: List[List[str]] = field(default_factory=list)


def declaration_schedule(nodes: Sequence[str], graph: Dict[str, Set[str]]) -> ScheduleResult:
    """Order ``nodes`` so every node follows its dependencies.

    Ties are broken by position in ``nodes``: a node is emitted as early as
    its declaration allows. Dependencies outside ``nodes`` are ignored.
    """
    position = {node: index for index, node in enumerate(nodes)}
    incoming: Dict[str, Set[str]] = {
        node: {dep for dep in graph.get(node, set()) if dep in position}
        for node in nodes
    }
    outgoing: Dict[str, Set[str]] = {node: set() for node in nodes}
    for node, deps in incoming.items():
        for dep in deps:
            outgoing[dep].add(node)

    ready = sorted((node for node, deps in incoming.items() if not deps), key=position.__getitem__)
    order: List[str] = []
    while ready:
        node = ready.pop(0)
        order.append(node)
        for follower in outgoing[node]:
            incoming[follower].discard(node)
            if not incoming[follower] and follower not in order and follower not in ready:
                ready.append(follower)
        ready.sort(key=position.__getitem__)

    remaining = [node for node in nodes if node not in order]
    cycles: List[List[str]] = []
    if remaining:
        subgraph = {
            node: {dep for dep in graph.get(node, set()) if dep in remaining}
            for node in remaining
        }
        for component in _strongly_connected_components(remaining, subgraph):
            if len(component) > 1 or component[0] in subgraph[component[0]]:
                cycles.append(sorted(component, key=position.__getitem__))
    return ScheduleResult(order=order, cycles=cycles)


def _strongly_connected_components(
    nodes: Sequence[str], graph: Dict[str, Set[str]]
) -> List[List[str]]:
    index = 0
    indices: Dict[str, int] = {}
    lowlinks: Dict[str, int] = {}
    stack: List[str] = []
    on_stack: Set[str] = set()
    components: List[List[str]] = []

    def visit(node: str) -> None:
        nonlocal index
        indices[node] = index
        lowlinks[node] = index
        index += 1
        stack.append(node)
        on_stack.add(node)
        for neighbor in sorted(graph.get(node, set())):
            if neighbor not in indices:
                visit(neighbor)
                lowlinks[node] = min(lowlinks[node], lowlinks[neighbor])
            elif neighbor in on_stack:
                lowlinks[node] = min(lowlinks[node], indices[neighbor])
        if lowlinks[node] == indices[node]:
            component: List[str] = []
            while True:
                popped = stack.pop()
                on_stack.discard(popped)
                component.append(popped)
                if popped == node:
                    break
            components.append(component)

    for node in nodes:
        if node not in indices:
            visit(node)
    return components
