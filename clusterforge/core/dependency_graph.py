"""Static view of the dependency DAG declared by a registry.

The resolver finds cycles on its live walk; this graph answers questions
about the registry as a whole without resolving anything:

- Is the declared graph acyclic, and does every edge point at a
  registered producer?
- In which order could the assets be resolved?
- Which assets does one asset pull in, and which consume it?
"""

from __future__ import annotations

from collections import deque

from clusterforge.core.asset import AssetIdentity
from clusterforge.core.registry import AssetRegistry
from clusterforge.core.resolver import CyclicDependencyError


class DependencyGraph:
    """Directed acyclic graph of asset dependencies.

    Built from every registered producer's ``dependencies()``.
    """

    def __init__(self, registry: AssetRegistry) -> None:
        self._registry = registry
        self._order: dict[str, int] = {aid: i for i, aid in enumerate(registry.ids())}
        # Forward edges: asset_id -> declared dependency ids
        self._dependencies: dict[str, list[str]] = {}
        for asset_type in registry:
            deps = [registry.lookup(d).asset_id for d in asset_type().dependencies()]
            self._dependencies[asset_type.asset_id] = deps
        # Reverse edges: asset_id -> ids that declare it
        self._dependents: dict[str, list[str]] = {aid: [] for aid in self._dependencies}
        for aid, deps in self._dependencies.items():
            for dep in deps:
                self._dependents[dep].append(aid)

        self._validate_no_cycles()

    def _validate_no_cycles(self) -> None:
        """Verify the graph is a DAG using topological sort (Kahn's algorithm)."""
        in_degree = {aid: len(set(deps)) for aid, deps in self._dependencies.items()}
        queue = deque(aid for aid, deg in in_degree.items() if deg == 0)
        visited = 0

        while queue:
            node = queue.popleft()
            visited += 1
            for dependent in set(self._dependents.get(node, [])):
                in_degree[dependent] -= 1
                if in_degree[dependent] == 0:
                    queue.append(dependent)

        if visited != len(self._dependencies):
            stuck = {aid for aid, deg in in_degree.items() if deg > 0}
            cycle = self._find_cycle(min(stuck, key=self._order.__getitem__), stuck)
            raise CyclicDependencyError(cycle[0], cycle)

    def _find_cycle(self, start: str, stuck: set[str]) -> list[str]:
        """Walk dependency edges inside *stuck* from *start* until a node repeats.

        Every node Kahn's algorithm leaves behind still has an unvisited
        dependency, so the walk cannot dead-end and always closes a loop.
        Nodes that merely consume the loop are left out of the result.
        """
        path: list[str] = []
        position: dict[str, int] = {}
        node = start
        while node not in position:
            position[node] = len(path)
            path.append(node)
            node = next(dep for dep in self._dependencies[node] if dep in stuck)
        return path[position[node]:] + [node]

    # ------------------------------------------------------------------
    # Query methods
    # ------------------------------------------------------------------

    def get_dependencies(self, identity: AssetIdentity) -> list[str]:
        """Return the direct dependency ids of an asset, in declared order."""
        return list(self._dependencies[self._id(identity)])

    def get_dependents(self, identity: AssetIdentity) -> list[str]:
        """Return all transitive dependent ids (BFS)."""
        result = []
        queue = deque(self._dependents.get(self._id(identity), []))
        visited: set[str] = set()
        while queue:
            node = queue.popleft()
            if node in visited:
                continue
            visited.add(node)
            result.append(node)
            queue.extend(self._dependents.get(node, []))
        return result

    def closure(self, identity: AssetIdentity) -> list[str]:
        """Return every id *identity* pulls in, dependencies first (DFS post-order)."""
        result: list[str] = []
        seen: set[str] = set()

        def visit(aid: str) -> None:
            if aid in seen:
                return
            seen.add(aid)
            for dep in self._dependencies[aid]:
                visit(dep)
            result.append(aid)

        visit(self._id(identity))
        return result

    @property
    def topological_order(self) -> list[str]:
        """Return all ids in topological order, ties broken by registration order."""
        in_degree = {aid: len(set(deps)) for aid, deps in self._dependencies.items()}
        ready = sorted(
            (aid for aid, deg in in_degree.items() if deg == 0),
            key=self._order.__getitem__,
        )
        result = []
        while ready:
            node = ready.pop(0)
            result.append(node)
            for dependent in sorted(set(self._dependents.get(node, [])), key=self._order.__getitem__):
                in_degree[dependent] -= 1
                if in_degree[dependent] == 0:
                    ready.append(dependent)
            ready.sort(key=self._order.__getitem__)
        return result

    def _id(self, identity: AssetIdentity) -> str:
        return self._registry.lookup(identity).asset_id
