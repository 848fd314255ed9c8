#!/usr/bin/env python

import argparse
import logging
import re
from signal import signal, SIGPIPE, SIG_DFL

from sptree import SPTree, ARITY, LEAF

log = logging.getLogger(__name__)

# Parentheses are tokens of their own, everything else is separated by
# whitespace
TOKEN = re.compile(r"[()]|[^\s()]+")
VERTEX = re.compile(r"[0-9]+")
WEIGHT = re.compile(r"-?[0-9]+")


class ParseError(ValueError):
    def __init__(self, message, text, offset):
        self.offset = offset
        self.line = text.count('\n', 0, offset) + 1
        self.column = offset - (text.rfind('\n', 0, offset) + 1) + 1
        super().__init__(f"{message} (line {self.line}, column {self.column})")


class Parser(object):
    """Parser for SP composition trees.

    The grammar is
        TREE := '(' NODE ')'
        NODE := 'L' INT INT | 'P' INT INT TREE TREE | 'S' INT INT INT TREE TREE

    self.num_vertices is one more than the largest vertex id seen so far."""

    def __init__(self, text):
        self.text = text
        self.tokens = [(m.group(), m.start()) for m in TOKEN.finditer(text)]
        self.pos = 0
        self.num_vertices = 0

    def error(self, message, offset=None):
        if offset is None:
            offset = self.offset()
        return ParseError(message, self.text, offset)

    def offset(self):
        """Return the character offset of the current token."""
        if self.pos < len(self.tokens):
            return self.tokens[self.pos][1]
        return len(self.text)

    def next_token(self):
        if self.pos >= len(self.tokens):
            raise self.error("Unexpected end of input")
        token = self.tokens[self.pos]
        self.pos += 1
        return token

    def expect(self, expected):
        token, offset = self.next_token()
        if token != expected:
            raise self.error(f"Expected '{expected}' but found '{token}'",
                             offset)

    def vertex(self):
        token, offset = self.next_token()
        if not VERTEX.fullmatch(token):
            raise self.error(f"Expected a vertex id but found '{token}'",
                             offset)
        return int(token)

    def saw(self, terminals):
        self.num_vertices = max(self.num_vertices, max(terminals) + 1)

    def tree(self):
        """Parse a TREE and return it.

        Instead of recursing into subtrees, the parser keeps a stack of
        parallel and series nodes whose subtrees are not complete yet."""
        # Each frame is (kind, terminals, list of parsed children)
        frames = []
        while True:
            self.expect('(')
            kind, offset = self.next_token()
            if kind not in ARITY:
                raise self.error(f"Unknown node kind '{kind}'", offset)
            terminals = tuple(self.vertex() for _ in range(ARITY[kind]))
            if kind != LEAF:
                frames.append((kind, terminals, []))
                continue

            self.expect(')')
            self.saw(terminals)
            node = SPTree.leaf(*terminals)
            log.debug(f"Parsed leaf {terminals}")

            # Attach the finished node to its parent; if that completes the
            # parent, close it as well and continue upwards
            while frames:
                kind, terminals, children = frames[-1]
                children.append(node)
                if len(children) < 2:
                    break
                frames.pop()
                self.expect(')')
                self.saw(terminals)
                node = SPTree(kind, terminals, children)
                log.debug(f"Parsed {kind} node {terminals}")
            else:
                return node

    def parse(self):
        """Parse the whole input, which must consist of exactly one TREE."""
        tree = self.tree()
        if self.pos < len(self.tokens):
            token, offset = self.tokens[self.pos]
            raise self.error(f"Unexpected '{token}' after end of tree",
                             offset)
        log.info(f"Parsed tree with {len(tree.leaves())} leaves and "
                 f"{self.num_vertices} vertices")
        return tree


def parse_tree(text):
    """Return the tree described by text and its number of vertices."""
    parser = Parser(text)
    tree = parser.parse()
    return tree, parser.num_vertices


def read_tree(f):
    return parse_tree(f.read())


def read_weights(f, num_vertices):
    """Read the weights of vertices 0, ..., num_vertices - 1 from f."""
    text = f.read()
    tokens = [(m.group(), m.start()) for m in re.finditer(r"\S+", text)]
    if len(tokens) < num_vertices:
        raise ParseError(f"Expected {num_vertices} weights but found only "
                         f"{len(tokens)}", text, len(text))
    if len(tokens) > num_vertices:
        log.warning(f"Read {len(tokens)} weights, but the tree only has "
                    f"{num_vertices} vertices; ignoring the rest")

    weights = []
    for token, offset in tokens[:num_vertices]:
        if not WEIGHT.fullmatch(token):
            raise ParseError(f"Expected an integer weight but found "
                             f"'{token}'", text, offset)
        weights.append(int(token))
    return weights


if __name__ == "__main__":
    signal(SIGPIPE, SIG_DFL)

    parser = argparse.ArgumentParser(
            description="Parse an SP composition tree and print it again")
    parser.add_argument("file")
    args = parser.parse_args()

    with open(args.file) as f:
        tree, num_vertices = read_tree(f)
    print(tree.expression())
    print(f"{num_vertices} vertices")
