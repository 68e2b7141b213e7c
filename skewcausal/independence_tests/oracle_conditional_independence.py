"""Skewcausal causal discovery for non-Gaussian data."""

# License: GNU General Public License v3.0

import numpy as np


class OracleCI:
    r"""Oracle of conditional independence test X _|_ Y | Z given a graph.

    X _|_ Y | Z is based on assessing whether X and Y are d-separated given
    Z in a directed acyclic graph. d-separation is checked on the moralized
    ancestral graph of X, Y and Z with the nodes Z removed.

    Class can be used just like a Skewcausal conditional independence class
    (e.g., ParCorr). The main use is for unit testing of search methods.

    Parameters
    ----------
    links : dict, optional (default: None)
        Dictionary of form {0: [], 1: [0], 2: [0, 1], ...} listing the
        parents of every variable.
    graph : array of shape [N, N], optional (default: None)
        Alternative to links. String array where graph[i, j] = '-->'
        denotes i --> j.
    verbosity : int, optional (default: 0)
        Level of verbosity.
    """

    # documentation
    @property
    def measure(self):
        """
        Concrete property to return the measure of the independence test
        """
        return self._measure

    def __init__(self,
                 links=None,
                 graph=None,
                 verbosity=0):

        if links is None:
            if graph is None:
                raise ValueError("Either links or graph must be specified!")
            links = self.get_links_from_graph(graph)

        self.verbosity = verbosity
        self._measure = 'oracle_ci'
        self.links = dict((j, list(parents)) for j, parents in links.items())
        self.N = len(self.links)
        for j, parents in self.links.items():
            for i in parents:
                if i not in self.links:
                    raise ValueError("Parent %s of %s not in links." % (i, j))
                if i == j:
                    raise ValueError("Self-loop at %s in links." % j)
        self.dataframe = None
        self.dsepsets = dict()

    def set_dataframe(self, dataframe):
        """Dummy function, the oracle does not need data."""
        self.dataframe = dataframe

    @staticmethod
    def get_links_from_graph(graph):
        """Return parents dictionary from string array of shape (N, N)."""
        graph = np.asarray(graph)
        N = graph.shape[0]
        links = dict((j, []) for j in range(N))
        for i in range(N):
            for j in range(N):
                if graph[i, j] == '-->':
                    links[j].append(i)
                elif graph[i, j] not in ['', '<--']:
                    raise ValueError("OracleCI only supports DAGs, found "
                                     "graph[%d, %d] = %s" % (i, j, graph[i, j]))
        return links

    def _get_ancestors(self, W):
        """Return the set of ancestors of the nodes W, including W."""
        ancestors = set(W)
        fringe = list(W)
        while fringe:
            node = fringe.pop()
            for parent in self.links[node]:
                if parent not in ancestors:
                    ancestors.add(parent)
                    fringe.append(parent)
        return ancestors

    def _is_dsep(self, X, Y, Z):
        """Returns whether X and Y are d-separated given Z in the graph.

        Parameters
        ----------
        X, Y, Z : list of ints
            Variable indices.

        Returns
        -------
        is_dsep : bool
        """
        ancestors = self._get_ancestors(list(X) + list(Y) + list(Z))

        # Moralize the ancestral graph
        neighbors = dict((node, set()) for node in ancestors)
        for child in ancestors:
            parents = [p for p in self.links[child] if p in ancestors]
            for parent in parents:
                neighbors[child].add(parent)
                neighbors[parent].add(child)
            for a in parents:
                for b in parents:
                    if a != b:
                        neighbors[a].add(b)

        # Search for a path from X to Y avoiding Z
        blocked = set(Z)
        visited = set(X)
        fringe = list(X)
        targets = set(Y)
        while fringe:
            node = fringe.pop()
            if node in targets:
                return False
            for nbr in neighbors[node]:
                if nbr not in visited and nbr not in blocked:
                    visited.add(nbr)
                    fringe.append(nbr)
        return True

    def run_test(self, X, Y, Z=None, alpha_or_thres=None):
        """Perform oracle conditional independence test.

        Calls the d-separation function.

        Parameters
        ----------
        X, Y, Z : list of ints
            Variable indices.
        alpha_or_thres : float
            Not used here except for the return signature.

        Returns
        -------
        val, pval, [dependent] : Tuple of floats and bool
            The test statistic value and the p-value.
        """

        if Z is None:
            Z = []

        key = (tuple(X), tuple(Y), tuple(sorted(Z)))
        if key not in self.dsepsets:
            self.dsepsets[key] = self._is_dsep(X, Y, Z)

        if self.dsepsets[key]:
            val = 0.
            pval = 1.
            dependent = False
        else:
            val = 1.
            pval = 0.
            dependent = True

        if self.verbosity > 1:
            print("        val = % .3f | pval = %.5f" % (val, pval))

        if alpha_or_thres is None:
            return val, pval
        return val, pval, dependent
