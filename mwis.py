#!/usr/bin/env python

import argparse
from collections import namedtuple
import logging
from signal import signal, SIGPIPE, SIG_DFL
import sys

from graph import PreconditionViolation
from spparser import ParseError, read_tree, read_weights

log = logging.getLogger(__name__)

EXCLUDE = 0
INCLUDE = 1

Solution = namedtuple("Solution", "value vertices")


class Solver(object):
    """Dynamic programming for maximum weight independent sets on trees.

    The graph must be a tree. It is rooted at self.root by a depth-first
    search. For each vertex v, self.dp[v][EXCLUDE] and self.dp[v][INCLUDE]
    hold the best weight of an independent set in the subtree of v that does
    not contain or does contain v, respectively.

    self.choice[v][EXCLUDE] is always True since leaving out v is always
    possible. self.choice[v][INCLUDE] is True iff including v is at least as
    good as excluding it; this is the branch taken for v whenever its parent
    is excluded (or v is the root)."""

    def __init__(self, graph, weights, root=0):
        if len(weights) != graph.num_vertices:
            raise ValueError(f"Got {len(weights)} weights for "
                             f"{graph.num_vertices} vertices")
        self.graph = graph
        self.weights = weights
        self.root = root

        n = graph.num_vertices
        self.dp = [[0, 0] for _ in range(n)]
        self.choice = [[False, False] for _ in range(n)]
        self.visited = [False] * n
        self.children = [[] for _ in range(n)]
        self.computed = False

    def __str__(self):
        return self.to_str()

    def to_str(self):
        lines = []
        for v in self.graph.vertices:
            if not self.visited[v]:
                continue
            best = "include" if self.choice[v][INCLUDE] else "exclude"
            lines.append(f"{v}: exclude={self.dp[v][EXCLUDE]} "
                         f"include={self.dp[v][INCLUDE]} ({best})")
        return '\n'.join(lines)

    def dfs_order(self):
        """Root the tree and return its vertices in depth-first pre-order.

        Every vertex is marked visited when it is discovered; the neighbors
        that are not visited yet become its children. Parallel edges to the
        parent are thereby skipped."""
        order = []
        self.visited[self.root] = True
        stack = [self.root]
        while stack:
            v = stack.pop()
            order.append(v)
            for u in self.graph.neighbors[v]:
                if not self.visited[u]:
                    self.visited[u] = True
                    self.children[v].append(u)
                    stack.append(u)
        return order

    def compute(self, check=True):
        """Fill the DP table and return the weight of an optimal solution.

        Unless check is False, first make sure the graph is a tree; otherwise
        the result is meaningless."""
        if check:
            self.graph.check_tree()

        # Children come after their parent in pre-order, so going backwards
        # every vertex is handled after all of its children
        for v in reversed(self.dfs_order()):
            exclude = 0
            include = self.weights[v]
            for u in self.children[v]:
                exclude += max(self.dp[u])
                include += self.dp[u][EXCLUDE]
            self.dp[v][EXCLUDE] = exclude
            self.dp[v][INCLUDE] = include
            self.choice[v][EXCLUDE] = True
            self.choice[v][INCLUDE] = include >= exclude
            log.debug(f"Vertex {v}: exclude={exclude}, include={include}")

        self.computed = True
        return self.value()

    def value(self):
        assert self.computed
        return max(self.dp[self.root])

    def backtrack(self):
        """Return a sorted list of vertices of an optimal solution."""
        assert self.computed
        result = []
        # (vertex, whether its parent is in the solution)
        stack = [(self.root, False)]
        while stack:
            v, parent_included = stack.pop()
            if not parent_included and self.choice[v][INCLUDE]:
                result.append(v)
                stack.extend((u, True) for u in self.children[v])
            else:
                assert self.choice[v][EXCLUDE]
                stack.extend((u, False) for u in self.children[v])
        return sorted(result)


def solve(tree, weights, num_vertices=None, check=True):
    """Return a maximum weight independent set of the graph given by tree."""
    tree = tree.normalize()
    g = tree.graph(num_vertices)
    solver = Solver(g, weights)
    log.info("Solving...")
    value = solver.compute(check=check)
    log.debug(f"DP table:\n{solver}")
    vertices = solver.backtrack()
    log.info(f"Found solution of weight {value} with {len(vertices)} "
             f"vertices")
    return Solution(value=value, vertices=vertices)


def main(argv=None):
    parser = argparse.ArgumentParser(
            description="Maximum weight independent set of a graph given by "
                        "a series-parallel composition tree")
    parser.add_argument("tree_file")
    parser.add_argument("weights_file")
    parser.add_argument("--log", default="warning")
    parser.add_argument("--no-check", action="store_true",
                        help="do not check that the graph is a tree")
    args = parser.parse_args(argv)

    log_level_number = getattr(logging, args.log.upper(), None)
    if not isinstance(log_level_number, int):
        parser.error(f"Invalid log level: {args.log}")
    logging.basicConfig(level=log_level_number)

    try:
        path = args.tree_file
        with open(path, encoding="utf-8") as f:
            log.info("Parsing...")
            tree, num_vertices = read_tree(f)
        path = args.weights_file
        with open(path, encoding="utf-8") as f:
            weights = read_weights(f, num_vertices)
    except OSError as e:
        print(f"Error opening file {path}: {e.strerror}", file=sys.stderr)
        return 1
    except UnicodeDecodeError as e:
        print(f"Error reading file {path}: {e}", file=sys.stderr)
        return 1
    except ParseError as e:
        print(f"Error parsing {path}: {e}", file=sys.stderr)
        return 1

    try:
        solution = solve(tree, weights, num_vertices,
                         check=not args.no_check)
    except PreconditionViolation as e:
        print(f"Graph is not a tree: {e}", file=sys.stderr)
        return 1

    print("Vertices in the Maximum Weighted Independent Set: "
          + ' '.join(str(v) for v in solution.vertices))
    print(f"Maximum Weighted Independent Set: {solution.value}")
    return 0


if __name__ == "__main__":
    signal(SIGPIPE, SIG_DFL)
    sys.exit(main())
