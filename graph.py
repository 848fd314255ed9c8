from collections import deque
import logging

log = logging.getLogger(__name__)


class PreconditionViolation(ValueError):
    """The graph does not have the shape an algorithm relies on."""


class Graph(object):
    """An undirected graph on the vertices 0, ..., num_vertices - 1.

    Parallel edges are kept: every call to add_edge appends to self.edges and
    to both neighbor lists, even if the vertices are already adjacent."""

    def __init__(self, num_vertices):
        self.num_vertices = num_vertices
        self.vertices = range(num_vertices)
        self.neighbors = {}
        for v in self.vertices:
            self.neighbors[v] = []
        self.edges = []

    def __str__(self):
        return f"V = {set(self.vertices)}\nE = {str(self.edges)}"

    def __eq__(self, other):
        if isinstance(other, self.__class__):
            return self.__dict__ == other.__dict__
        return NotImplemented

    def add_edge(self, x, y):
        assert x in self.vertices
        assert y in self.vertices
        self.edges.append((x, y))
        self.neighbors[x].append(y)
        self.neighbors[y].append(x)

    def num_edges(self):
        return len(self.edges)

    def simple_edges(self):
        """Return the set of edges with parallel edges merged."""
        return {frozenset(e) for e in self.edges}

    def reachable(self, start=0):
        """Return the set of vertices reachable from start."""
        seen = {start}
        queue = deque([start])
        while queue:
            v = queue.popleft()
            for w in self.neighbors[v]:
                if w not in seen:
                    seen.add(w)
                    queue.append(w)
        return seen

    def check_tree(self):
        """Raise PreconditionViolation unless the graph is a tree.

        Parallel edges count as one edge."""
        if self.num_vertices == 0:
            raise PreconditionViolation("Graph has no vertices")

        for (x, y) in self.edges:
            if x == y:
                raise PreconditionViolation(f"Self loop at vertex {x}")

        reached = self.reachable(0)
        if len(reached) < self.num_vertices:
            unreached = min(v for v in self.vertices if v not in reached)
            raise PreconditionViolation(
                    f"Graph is not connected: vertex {unreached} is not "
                    f"reachable from vertex 0")

        num_simple = len(self.simple_edges())
        if num_simple != self.num_vertices - 1:
            raise PreconditionViolation(
                    f"Graph contains a cycle: {num_simple} distinct edges on "
                    f"{self.num_vertices} vertices")
        log.debug(f"Graph with {self.num_vertices} vertices is a tree")
