"""Reference graph of custom declarations."""

import heapq
from collections import defaultdict
from typing import Dict, List, Optional, Sequence, Set

from .catalog import Bucket, FoundationCatalog
from .errors import CycleDetectedError, UnresolvedReferenceError
from .schema import MoleculeSchema


class TypeGraph:
    """Dependency graph over custom declarations.

    An edge A -> B means A's layout embeds B (field type or item), so B's codec
    must be defined before A's. Foundation types are leaves provided by the
    runtime and are not nodes.
    """

    def __init__(self, schema: MoleculeSchema, catalog: FoundationCatalog):
        self.schema = schema
        self.catalog = catalog
        self.nodes: List[str] = []  # custom declarations, schema order
        self.edges: Dict[str, Set[str]] = defaultdict(set)  # node -> set of dependencies
        self.reverse_edges: Dict[str, Set[str]] = defaultdict(set)  # dependency -> set of dependents
        self._build()

    def _build(self):
        """Build the graph, then reject dangling references and cycles."""
        declared = set(self.schema.names())

        for decl in self.schema.declarations:
            if self.catalog.classify(decl.name) == Bucket.CUSTOM and decl.name not in self.nodes:
                self.nodes.append(decl.name)

        missing: Dict[str, Set[str]] = defaultdict(set)
        for decl in self.schema.declarations:
            for ref in decl.references():
                if ref not in declared and self.catalog.get(ref) is None:
                    missing[ref].add(decl.name)
                    continue
                if decl.name in self.nodes and self.catalog.classify(ref) == Bucket.CUSTOM:
                    self.edges[decl.name].add(ref)
                    self.reverse_edges[ref].add(decl.name)

        if missing:
            raise UnresolvedReferenceError(dict(missing))

        cycle = self._detect_cycle()
        if cycle:
            raise CycleDetectedError(cycle)

    def _detect_cycle(self) -> Optional[List[str]]:
        """Find one cycle using DFS, or None.

        Returns the cycle as a node list closed on its first node.
        """
        WHITE = 0  # Unvisited
        GRAY = 1   # Currently being visited (in recursion stack)
        BLACK = 2  # Fully visited

        color = {node: WHITE for node in self.nodes}
        found: List[List[str]] = []

        def dfs(node: str, path: List[str]) -> None:
            color[node] = GRAY
            path.append(node)

            for dep in sorted(self.get_dependencies(node)):  # Sort for deterministic order
                if color[dep] == WHITE:
                    dfs(dep, path)
                    if found:
                        return
                elif color[dep] == GRAY:
                    cycle_start = path.index(dep)
                    found.append(path[cycle_start:] + [dep])
                    return

            color[node] = BLACK
            path.pop()

        for node in sorted(self.nodes):  # Sort for deterministic order
            if color[node] == WHITE:
                dfs(node, [])
                if found:
                    return found[0]
        return None

    def get_dependencies(self, node: str) -> Set[str]:
        """Get direct custom dependencies of a node."""
        return self.edges.get(node, set())

    def get_dependents(self, node: str) -> Set[str]:
        """Get nodes that embed this node (reverse edges)."""
        return self.reverse_edges.get(node, set())

    def topological_order(self, early_types: Sequence[str] = ()) -> List[str]:
        """Order custom nodes so every dependency precedes its dependents.

        Among nodes whose dependencies are all emitted, those listed in
        ``early_types`` go first (in list order), then the rest in schema
        order. Early types never jump ahead of their own dependencies.
        """
        early_rank = {name: i for i, name in enumerate(early_types)}
        position = {name: i for i, name in enumerate(self.nodes)}

        def priority(name: str) -> tuple[int, int]:
            return (early_rank.get(name, len(early_rank)), position[name])

        remaining = {node: len(self.get_dependencies(node)) for node in self.nodes}
        ready = [(priority(node), node) for node, count in remaining.items() if count == 0]
        heapq.heapify(ready)

        order: List[str] = []
        while ready:
            _, node = heapq.heappop(ready)
            order.append(node)
            for dependent in self.get_dependents(node):
                remaining[dependent] -= 1
                if remaining[dependent] == 0:
                    heapq.heappush(ready, (priority(dependent), dependent))

        # Cycles are rejected in _build, so every node is reached
        return order
