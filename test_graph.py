#!/usr/bin/env python

import unittest

from graph import Graph, PreconditionViolation

class TestGraph(unittest.TestCase):
    def setUp(self):
        # 0 - 1 - 2
        #     |
        #     3
        self.tree = Graph(4)
        self.tree.add_edge(0, 1)
        self.tree.add_edge(1, 2)
        self.tree.add_edge(3, 1)

    def test_add_edge(self):
        self.assertEqual(self.tree.num_edges(), 3)
        self.assertEqual(self.tree.neighbors[1], [0, 2, 3])
        self.assertEqual(self.tree.neighbors[3], [1])

    def test_reachable(self):
        self.assertEqual(self.tree.reachable(2), {0, 1, 2, 3})
        g = Graph(3)
        g.add_edge(1, 2)
        self.assertEqual(g.reachable(0), {0})
        self.assertEqual(g.reachable(1), {1, 2})

    def test_check_tree(self):
        self.tree.check_tree()

        single = Graph(1)
        single.check_tree()

    def test_parallel_edges_are_a_tree(self):
        g = Graph(2)
        g.add_edge(0, 1)
        g.add_edge(0, 1)
        g.add_edge(1, 0)
        g.check_tree()

    def test_cycle(self):
        self.tree.add_edge(2, 3)
        with self.assertRaises(PreconditionViolation) as cm:
            self.tree.check_tree()
        self.assertIn("cycle", str(cm.exception))

    def test_disconnected(self):
        g = Graph(4)
        g.add_edge(0, 1)
        g.add_edge(2, 3)
        with self.assertRaises(PreconditionViolation) as cm:
            g.check_tree()
        self.assertIn("vertex 2", str(cm.exception))

    def test_self_loop(self):
        g = Graph(2)
        g.add_edge(0, 1)
        g.add_edge(1, 1)
        with self.assertRaises(PreconditionViolation) as cm:
            g.check_tree()
        self.assertIn("Self loop", str(cm.exception))

    def test_empty(self):
        with self.assertRaises(PreconditionViolation):
            Graph(0).check_tree()


if __name__ == "__main__":
    unittest.main()
