#!/usr/bin/env python

import argparse
import logging
from signal import signal, SIGPIPE, SIG_DFL

from graph import Graph

log = logging.getLogger(__name__)

LEAF = 'L'
PARALLEL = 'P'
SERIES = 'S'

# Number of terminal vertex ids carried by each kind of node
ARITY = {LEAF: 2, PARALLEL: 2, SERIES: 3}


class SPTree(object):
    """A series-parallel composition tree.

    Each node is tagged with its kind (LEAF, PARALLEL or SERIES) and carries
    its terminal vertex ids as given in the input. A leaf stands for a single
    edge. Parallel and series nodes own exactly two subtrees in
    self.children."""

    def __init__(self, kind, terminals, children=()):
        assert kind in ARITY, f"Unknown node kind {kind!r}"
        assert len(terminals) == ARITY[kind]
        assert len(children) == (0 if kind == LEAF else 2)
        self.kind = kind
        self.terminals = tuple(terminals)
        self.children = list(children)

    @classmethod
    def leaf(cls, x, y):
        return cls(LEAF, (x, y))

    @classmethod
    def parallel(cls, a, b, left, right):
        return cls(PARALLEL, (a, b), (left, right))

    @classmethod
    def series(cls, a, b, c, left, right):
        return cls(SERIES, (a, b, c), (left, right))

    def to_str(self, depth=0):
        lines = []
        stack = [(self, depth)]
        while stack:
            node, d = stack.pop()
            lines.append(d * "  " + node.kind + ' '
                         + ' '.join(str(v) for v in node.terminals))
            stack.extend((c, d + 1) for c in reversed(node.children))
        return '\n'.join(lines)

    def __str__(self):
        return self.to_str()

    def __repr__(self):
        return f"SPTree({self.expression()!r})"

    def __eq__(self, other):
        if not isinstance(other, self.__class__):
            return NotImplemented
        # Compare node by node so that deep trees do not hit the recursion
        # limit
        stack = [(self, other)]
        while stack:
            x, y = stack.pop()
            if (x.kind != y.kind or x.terminals != y.terminals
                    or len(x.children) != len(y.children)):
                return False
            stack.extend(zip(x.children, y.children))
        return True

    def source(self):
        # Every kind has its source first
        return self.terminals[0]

    def sink(self):
        if self.kind == SERIES:
            return self.terminals[2]
        return self.terminals[1]

    def nodes(self):
        """Iterate over all nodes in pre-order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def leaves(self):
        """Return the leaf nodes from left to right."""
        return [n for n in self.nodes() if n.kind == LEAF]

    def max_vertex(self):
        """Return the largest vertex id occurring anywhere in the tree."""
        return max(max(n.terminals) for n in self.nodes())

    def num_vertices(self):
        return self.max_vertex() + 1

    def expression(self):
        """Return the tree in the '(S 0 1 2 (L 0 1) (L 1 2))' syntax."""
        parts = []
        # Items are either nodes still to be written or closing parentheses
        stack = [self]
        while stack:
            item = stack.pop()
            if isinstance(item, str):
                parts.append(')')
                continue
            parts.append('(' + item.kind + ' '
                         + ' '.join(str(v) for v in item.terminals))
            stack.append(')')
            stack.extend(reversed(item.children))
        return ''.join(p if p == ')' else ' ' + p for p in parts).lstrip()

    def normalize(self):
        """Normalize the decomposition and return the new root.

        Nodes are visited bottom-up and each node is replaced by the
        normalized version of itself. So far every kind of node is kept as it
        is, so the result is equal to the original tree. This is the place to
        turn an SP decomposition into a nice tree decomposition with
        introduce, forget and join nodes."""
        order = list(self.nodes())
        normalized = {}
        for node in reversed(order):
            node.children = [normalized[id(c)] for c in node.children]
            normalized[id(node)] = _NORMALIZERS[node.kind](node)
        return normalized[id(self)]

    def graph(self, num_vertices=None):
        """Return the graph consisting of one edge per leaf."""
        if num_vertices is None:
            num_vertices = self.num_vertices()
        g = Graph(num_vertices)
        for node in self.nodes():
            # Parallel and series nodes only combine their children
            if node.kind == LEAF:
                g.add_edge(*node.terminals)
        log.debug(f"Built graph with {g.num_vertices} vertices and "
                  f"{g.num_edges()} edges")
        return g


def _normalize_leaf(node):
    return node


def _normalize_parallel(node):
    return node


def _normalize_series(node):
    return node


_NORMALIZERS = {
        LEAF: _normalize_leaf,
        PARALLEL: _normalize_parallel,
        SERIES: _normalize_series,
        }


if __name__ == "__main__":
    from spparser import read_tree

    signal(SIGPIPE, SIG_DFL)

    parser = argparse.ArgumentParser(
            description="Print an SP composition tree and its graph")
    parser.add_argument("file")
    args = parser.parse_args()

    with open(args.file) as f:
        tree, num_vertices = read_tree(f)
    print(f"Tree ({len(tree.leaves())} leaves):\n{tree}")
    print()
    print(f"Graph:\n{tree.normalize().graph(num_vertices)}")
