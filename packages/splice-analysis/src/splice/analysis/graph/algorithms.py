from collections import deque
from dataclasses import dataclass, field
from typing import (
    Callable,
    Generic,
    Hashable,
    Iterable,
    Iterator,
    List,
    Optional,
    Set,
    Tuple,
    TypeVar,
)

import networkx as nx

N = TypeVar("N", bound=Hashable)


@dataclass
class TraversalResult(Generic[N]):
    # Nodes in first-discovery order, roots included.
    discovered: List[N] = field(default_factory=list)
    # Every edge seen, in traversal order.
    edges: List[Tuple[N, N]] = field(default_factory=list)
    # Each cycle runs from the repeated node's first occurrence on the stack
    # through the closing repeat, e.g. [a, b, c, a].
    cycles: List[List[N]] = field(default_factory=list)


def traverse_with_cycles(
    roots: Iterable[N],
    successors: Callable[[N], Iterable[N]],
    on_discover: Optional[Callable[[N, N], None]] = None,
) -> TraversalResult[N]:
    """
    Depth-first traversal that tells genuine cycles apart from re-visits.

    A node is "visiting" while it is on the current path and "visited" once
    it has been reached at all. An edge into a visiting node is a back-edge
    and yields a cycle; an edge into a node that was already resolved along
    another branch is simply skipped. `successors` is called once per node,
    when the node is entered, so lazily-queried relations stay sequential.

    `on_discover(parent, child)` fires for every tree edge, before the child
    is entered.
    """
    result: TraversalResult[N] = TraversalResult()
    visited: Set[N] = set()

    for root in roots:
        if root in visited:
            continue

        visited.add(root)
        result.discovered.append(root)
        path: List[N] = [root]
        visiting: Set[N] = {root}
        stack: List[Tuple[N, Iterator[N]]] = [(root, iter(successors(root)))]

        while stack:
            node, children = stack[-1]
            child = next(children, None)
            if child is None:
                stack.pop()
                path.pop()
                visiting.discard(node)
                continue

            result.edges.append((node, child))

            if child in visiting:
                start = path.index(child)
                result.cycles.append(path[start:] + [child])
                continue

            if child in visited:
                continue

            visited.add(child)
            result.discovered.append(child)
            if on_discover:
                on_discover(node, child)
            path.append(child)
            visiting.add(child)
            stack.append((child, iter(successors(child))))

    return result


def find_first_cycle(
    roots: Iterable[N], successors: Callable[[N], Iterable[N]]
) -> List[N]:
    cycles = traverse_with_cycles(roots, successors).cycles
    return cycles[0] if cycles else []


def build_graph(nodes: Iterable[N], edges: Iterable[Tuple[N, N]]) -> nx.DiGraph:
    graph = nx.DiGraph()
    graph.add_nodes_from(nodes)
    for source, target in edges:
        if source in graph and target in graph:
            graph.add_edge(source, target)
    return graph


def kahn_order(graph: nx.DiGraph) -> Tuple[List[N], List[N]]:
    """
    Topological order by repeated removal of zero in-degree nodes.

    Returns `(ordered, leftover)`. Nodes that could not be linearized
    (members of, or downstream of, a cycle) end up in `leftover`, in the
    graph's node insertion order.
    """
    in_degree = {node: degree for node, degree in graph.in_degree()}
    queue = deque(node for node in graph.nodes if in_degree[node] == 0)
    ordered: List[N] = []

    while queue:
        current = queue.popleft()
        ordered.append(current)
        for dependent in graph.successors(current):
            in_degree[dependent] -= 1
            if in_degree[dependent] == 0:
                queue.append(dependent)

    placed = set(ordered)
    leftover = [node for node in graph.nodes if node not in placed]
    return ordered, leftover
