"""Skewcausal graph representation."""

# License: GNU General Public License v3.0

import threading
import numpy as np

# Link types as seen from the first node of a pair (i, j)
NO_EDGE = ""
UNDIRECTED = "o-o"
DIRECTED = "-->"
REVERSED = "<--"
TWO_CYCLE = "<->"

LINK_TYPES = [NO_EDGE, UNDIRECTED, DIRECTED, REVERSED, TWO_CYCLE]

# Edge tags
KNOWLEDGE = "knowledge"
SIGN_DISAGREEMENT = "sign_disagreement"
STRONG_ASYMMETRY = "strong_asymmetry"


def reverse_link(link):
    """Reverse a given link, replacing > with < and vice versa."""
    if link == "":
        return ""
    if link[2] == ">":
        left_mark = "<"
    else:
        left_mark = link[2]
    if link[0] == "<":
        right_mark = ">"
    else:
        right_mark = link[0]
    return left_mark + link[1] + right_mark


class Graph():
    r"""Graph over a fixed set of variables.

    At most one edge record exists per unordered pair {i, j}. The record is
    stored under the key (min(i, j), max(i, j)) and holds the link type as
    seen from the smaller index, which encodes zero, one or two directed
    arcs:

    * ``'o-o'``: undirected edge,
    * ``'-->'``: i --> j,
    * ``'<--'``: j --> i,
    * ``'<->'``: both i --> j and j --> i (two-cycle).

    Each edge may carry a tag, e.g., 'knowledge' for edges oriented by
    background knowledge or 'sign_disagreement' / 'strong_asymmetry' for
    the two kinds of feedback candidates. All mutations are guarded by a
    lock so that concurrent workers cannot corrupt the edge store.

    Parameters
    ----------
    var_names : list of str
        Variable names, defines the number of nodes N.
    """

    def __init__(self, var_names):
        self.var_names = [str(name) for name in var_names]
        if len(set(self.var_names)) != len(self.var_names):
            raise ValueError("Variable names must be unique, got %s."
                             % self.var_names)
        self.N = len(self.var_names)
        self._edges = {}
        self._tags = {}
        self._lock = threading.Lock()

    @classmethod
    def complete(cls, var_names):
        """Return the complete undirected graph over var_names."""
        graph = cls(var_names)
        for i in range(graph.N):
            for j in range(i + 1, graph.N):
                graph._edges[(i, j)] = UNDIRECTED
        return graph

    def __getstate__(self):
        state = self.__dict__.copy()
        del state['_lock']
        return state

    def __setstate__(self, state):
        self.__dict__.update(state)
        self._lock = threading.Lock()

    def __eq__(self, other):
        if not isinstance(other, Graph):
            return NotImplemented
        return (self.var_names == other.var_names
                and self._edges == other._edges)

    def __repr__(self):
        edges = ["%s %s %s" % (self.var_names[i], link, self.var_names[j])
                 for (i, j), link in sorted(self._edges.items())]
        return "Graph(%s)" % ", ".join(edges)

    def _key(self, i, j):
        if i == j:
            raise ValueError("Self-loops are not allowed (node %d)." % i)
        if not (0 <= i < self.N and 0 <= j < self.N):
            raise IndexError("Node index out of range for N = %d." % self.N)
        if i < j:
            return (i, j), False
        return (j, i), True

    def index(self, name):
        return self.var_names.index(str(name))

    def set_link(self, i, j, link, tag=None):
        """Set the link type of pair (i, j) as seen from i."""
        if link not in LINK_TYPES:
            raise ValueError("link must be one of %s" % LINK_TYPES)
        key, flipped = self._key(i, j)
        if flipped:
            link = reverse_link(link)
        with self._lock:
            if link == NO_EDGE:
                self._edges.pop(key, None)
                self._tags.pop(key, None)
            else:
                self._edges[key] = link
                if tag is None:
                    self._tags.pop(key, None)
                else:
                    self._tags[key] = tag

    def get_link(self, i, j):
        """Return the link type of pair (i, j) as seen from i."""
        key, flipped = self._key(i, j)
        link = self._edges.get(key, NO_EDGE)
        if flipped:
            return reverse_link(link)
        return link

    def get_tag(self, i, j):
        key, _ = self._key(i, j)
        return self._tags.get(key)

    def add_undirected_edge(self, i, j):
        self.set_link(i, j, UNDIRECTED)

    def add_directed_edge(self, i, j, tag=None):
        """Add i --> j, replacing any existing record for the pair."""
        self.set_link(i, j, DIRECTED, tag=tag)

    def add_two_cycle(self, i, j, tag=None):
        """Add both i --> j and j --> i."""
        self.set_link(i, j, TWO_CYCLE, tag=tag)

    def remove_edge(self, i, j):
        self.set_link(i, j, NO_EDGE)

    def is_adjacent(self, i, j):
        return self.get_link(i, j) != NO_EDGE

    def has_arc(self, i, j):
        """Return True if the graph contains the directed arc i --> j."""
        return self.get_link(i, j) in (DIRECTED, TWO_CYCLE)

    def is_undirected(self, i, j):
        return self.get_link(i, j) == UNDIRECTED

    def neighbors(self, i):
        """Return sorted list of nodes adjacent to i."""
        return [j for j in range(self.N) if j != i and self.is_adjacent(i, j)]

    def edges(self):
        """Return sorted list of (i, j, link) with i < j."""
        return [(i, j, link) for (i, j), link in sorted(self._edges.items())]

    def num_edges(self):
        return len(self._edges)

    def adjacency_snapshot(self):
        """Return frozen adjacency of the current graph.

        Returns
        -------
        adj : dict
            Dictionary of form {i: (j, k, ...), ...} with sorted tuples.
        """
        with self._lock:
            keys = list(self._edges)
        adj = dict((i, []) for i in range(self.N))
        for (i, j) in keys:
            adj[i].append(j)
            adj[j].append(i)
        return dict((i, tuple(sorted(nbrs))) for i, nbrs in adj.items())

    def copy(self):
        graph = Graph(self.var_names)
        with self._lock:
            graph._edges = dict(self._edges)
            graph._tags = dict(self._tags)
        return graph

    def to_array(self):
        """Return graph as string array of shape (N, N).

        graph[i, j] = '-->' implies graph[j, i] = '<--', empty strings
        denote absent edges.
        """
        graph = np.zeros((self.N, self.N), dtype='<U3')
        for (i, j), link in self._edges.items():
            graph[i, j] = link
            graph[j, i] = reverse_link(link)
        return graph

    @classmethod
    def from_array(cls, graph, var_names=None):
        """Construct graph from a string array of shape (N, N)."""
        graph = np.asarray(graph)
        if graph.ndim != 2 or graph.shape[0] != graph.shape[1]:
            raise ValueError("graph must be of shape (N, N), got %s."
                             % str(graph.shape))
        N = graph.shape[0]
        if var_names is None:
            var_names = ["X%d" % i for i in range(N)]
        new_graph = cls(var_names)
        for i in range(N):
            if graph[i, i] != "":
                raise ValueError("Self-loops are not allowed (node %d)." % i)
            for j in range(i + 1, N):
                if graph[j, i] != reverse_link(graph[i, j]):
                    raise ValueError("Inconsistent links graph[%d, %d] = %s "
                                     "and graph[%d, %d] = %s."
                                     % (i, j, graph[i, j], j, i, graph[j, i]))
                if graph[i, j] != "":
                    new_graph.set_link(i, j, str(graph[i, j]))
        return new_graph

    def to_dict(self):
        """Return dictionary of form {name: {name: link, ...}, ...} listing
        every link from both ends."""
        links = dict((name, {}) for name in self.var_names)
        for (i, j), link in sorted(self._edges.items()):
            links[self.var_names[i]][self.var_names[j]] = link
            links[self.var_names[j]][self.var_names[i]] = reverse_link(link)
        return links
