#!/usr/bin/env python
# vim:fileencoding=utf-8
# License: GPLv3 Copyright: 2019, Kovid Goyal <kovid at kovidgoyal.net>

from collections import defaultdict
from itertools import chain


def halve(value, N):
    ' Solve 2*x == value (mod N), returns None when there is no solution '
    if N % 2:
        return value * ((N + 1) // 2) % N
    if value % 2 == 0:
        return value // 2
    return None


class Graph:
    '''
    Implements a graph with 'N' vertices.  First, you connect the graph with
    edges, which have a desired value associated.  Then the vertex values
    are assigned, which will fail if the graph is cyclic.  The vertex values
    are assigned such that the two values corresponding to an edge add up to
    the desired edge value (mod N).

    A self loop (an edge from a vertex to itself) holds when twice the
    vertex value is the edge value, it does not make the graph cyclic as
    long as that equation can be satisfied.

    A graph is used for exactly one assignment. When it fails the graph is
    thrown away together with the hash functions that built it.
    '''

    def __init__(self, N):
        self.N = N  # number of vertices

        # maps a vertex number to the list of tuples (vertex, edge value)
        # to which it is connected by edges.
        self.adjacent = defaultdict(list)
        self.vertex_values = None
        self.assigned = False

    def connect(self, vertex1, vertex2, edge_value):
        '''
        Connect 'vertex1' and 'vertex2' with an edge, with associated
        value 'edge_value'
        '''
        # Add vertices to each other's adjacent list, a self loop ends up
        # twice in the same list
        self.adjacent[vertex1].append((vertex2, edge_value))
        self.adjacent[vertex2].append((vertex1, edge_value))

    def self_loops(self):
        return sorted(v for v, adj in self.adjacent.items() if any(n == v for n, e in adj))

    def assign_vertex_values(self):
        '''
        Try to assign the vertex values, such that, for each edge, you can
        add the values for the two vertices involved and get the desired
        value for that edge, i.e. the desired hash key.
        This will fail when the graph is cyclic.

        This is done by a Depth-First Search of the graph.  If the search
        finds a vertex that was visited before, there's a loop and False is
        returned immediately, i.e. the assignment is terminated.
        On success (when the graph is acyclic) True is returned and
        vertex_values holds the table.
        '''
        if self.assigned:
            raise RuntimeError('Vertex values can only be assigned once per graph')
        self.assigned = True
        N = self.N
        values = N * [0]
        visited = N * [False]

        # Loop over all vertices, taking unvisited ones as roots. Vertices
        # with a self loop come first, so that the loop can choose the
        # value of the root of its tree.
        for root in chain(self.self_loops(), range(N)):
            if visited[root]:
                continue

            # explore tree starting at 'root', its value is zero unless it
            # has a self loop
            visited[root] = True
            for neighbor, edge_value in self.adjacent[root]:
                if neighbor == root:
                    value = halve(edge_value, N)
                    if value is None:
                        return False
                    values[root] = value
                    break

            # Stack of vertices to visit, a list of tuples (parent, vertex)
            tovisit = [(None, root)]
            while tovisit:
                parent, vertex = tovisit.pop()

                # Loop over adjacent vertices, but skip the vertex we arrived
                # here from the first time it is encountered.
                skip = True
                for neighbor, edge_value in self.adjacent[vertex]:
                    if neighbor == vertex:
                        if 2 * values[vertex] % N != edge_value:
                            return False
                        continue

                    if skip and neighbor == parent:
                        skip = False
                        continue

                    if visited[neighbor]:
                        # We visited here before, so the graph is cyclic.
                        return False

                    # Set new vertex's value to the desired edge value,
                    # minus the value of the vertex we came here from.
                    values[neighbor] = (edge_value - values[vertex]) % N
                    visited[neighbor] = True
                    tovisit.append((vertex, neighbor))

        # We got though, so the graph is acyclic,
        # and all values are now assigned.
        self.vertex_values = values
        return True
