"""Skewcausal fast adjacency search."""

# License: GNU General Public License v3.0

import itertools
from copy import deepcopy
import numpy as np
from joblib import Parallel, delayed

from .exceptions import DegenerateInputError
from .graphs import Graph, KNOWLEDGE
from .knowledge import Knowledge


def orient_background_knowledge(graph, knowledge):
    """Orient adjacent pairs according to background knowledge.

    For every adjacent pair (X, Y) with forbidden(Y, X) or required(X, Y)
    the edge is oriented X --> Y and tagged 'knowledge'. If knowledge
    orients both directions (both required), a two-cycle is added.

    Parameters
    ----------
    graph : Graph
        Graph to orient in place.
    knowledge : Knowledge
        Background knowledge keyed by variable name.

    Returns
    -------
    graph : Graph
    """
    names = graph.var_names
    for i, j, _ in graph.edges():
        x_to_y = knowledge.orients(names[i], names[j])
        y_to_x = knowledge.orients(names[j], names[i])
        if x_to_y and y_to_x:
            graph.add_two_cycle(i, j, tag=KNOWLEDGE)
        elif x_to_y:
            graph.add_directed_edge(i, j, tag=KNOWLEDGE)
        elif y_to_x:
            graph.add_directed_edge(j, i, tag=KNOWLEDGE)
    return graph


class FAS():
    r"""Fast adjacency search (PC-stable skeleton discovery).

    Starting from the complete undirected graph, edges X - Y are removed
    if X and Y are found conditionally independent given some subset S of
    the adjacencies of X (or of Y) with cardinality p = 0, 1, 2, ... The
    adjacencies used to draw conditioning sets are frozen at the start of
    every round p, and all removals of a round are applied at its end. The
    result therefore does not depend on the order in which pairs are tested
    and pairs can be tested in parallel.

    Background knowledge is respected: pairs with a required edge in either
    direction are never tested and never removed, pairs forbidden in both
    directions are removed before testing.

    Parameters
    ----------
    dataframe : data object
        Skewcausal DataFrame. The independence test is run on its data.
    cond_ind_test : conditional independence test object
        Instantiated test such as ParCorr(), ScoreBIC() or OracleCI(). A
        DegenerateInputError raised by the test is read as dependence.
    knowledge : Knowledge, optional (default: None)
        Background knowledge keyed by variable names.
    verbosity : int, optional (default: 0)
        Verbose levels 0, 1, ...

    Attributes
    ----------
    N : int
        Number of variables.
    var_names : list of str
        Variable names.
    """

    def __init__(self, dataframe,
                 cond_ind_test,
                 knowledge=None,
                 verbosity=0):
        self.dataframe = dataframe
        self.cond_ind_test = deepcopy(cond_ind_test)
        if isinstance(self.cond_ind_test, type):
            raise ValueError("FAS requires that cond_ind_test "
                             "is instantiated, e.g. cond_ind_test =  "
                             "ParCorr().")
        self.cond_ind_test.set_dataframe(self.dataframe)
        if knowledge is None:
            knowledge = Knowledge()
        self.knowledge = knowledge
        self.verbosity = verbosity
        self.var_names = list(self.dataframe.var_names)
        self.N = self.dataframe.N

    def _print_cond_info(self, X, Y, Z, val, pval, dependent):
        var_name_z = ", ".join(self.var_names[k] for k in Z)
        print("    Subset: (%s _|_ %s | %s): val = %s | pval = %s | "
              "dependent = %s" % (self.var_names[X], self.var_names[Y],
                                  var_name_z, val, pval, dependent))

    def _remaining_pairs(self, adjt, p):
        """Helper function returning the adjacent pairs i < j for which a
        conditioning set of cardinality p can still be drawn. Pairs with a
        required edge are skipped."""
        names = self.var_names
        pairs = []
        for i in range(self.N):
            for j in adjt[i]:
                if j <= i or not self.knowledge.no_edge_required(names[i],
                                                                 names[j]):
                    continue
                if (len(adjt[i]) - 1 >= p) or (len(adjt[j]) - 1 >= p):
                    pairs.append((i, j))
        return pairs

    def _test_pair(self, i, j, adjt, p, pc_alpha):
        """Test pair (i, j) against all conditioning sets of cardinality p.

        Subsets of adj(i) without j are tested first, then subsets of adj(j)
        without i. Returns the first separating set found, if any, and the
        maximum p-value with its test statistic.
        """
        results = {'sepset': None, 'pval': 0., 'val': 0.,
                   'n_tests': 0}
        for (x, y) in [(i, j), (j, i)]:
            conditions = list(itertools.combinations(
                [k for k in adjt[x] if k != y], p))
            for S in conditions:
                results['n_tests'] += 1
                try:
                    val, pval, dependent = self.cond_ind_test.run_test(
                        X=[x], Y=[y], Z=list(S), alpha_or_thres=pc_alpha)
                except DegenerateInputError:
                    if self.verbosity > 1:
                        print("    Subset %s: degenerate test, kept as "
                              "dependent" % str(S))
                    continue

                if pval >= results['pval']:
                    results['pval'] = pval
                    results['val'] = val

                if self.verbosity > 1:
                    self._print_cond_info(x, y, S, val, pval, dependent)

                if not dependent:
                    results['sepset'] = tuple(S)
                    return results
        return results

    def run_fas(self, depth=-1, pc_alpha=0.01, n_jobs=1):
        """Runs the fast adjacency search.

        Parameters
        ----------
        depth : int, optional (default: -1)
            Maximum cardinality of conditioning sets. -1 means unrestricted,
            the search then stops once no pair has enough adjacencies left.
        pc_alpha : float, optional (default: 0.01)
            Significance level passed to the independence test. Tests that
            decide by score ignore it.
        n_jobs : int, optional (default: 1)
            Number of threads testing pairs within one round. Results do not
            depend on n_jobs.

        Returns
        -------
        graph : Graph
            Undirected skeleton.
        sepsets : dictionary
            Dictionary of form {(i, j): (k, ...), ...} with separating sets
            stored for both orders of removed pairs.
        p_matrix : array of shape [N, N]
            Maximum p-value found per pair.
        val_matrix : array of shape [N, N]
            Test statistic value belonging to the maximum p-value.
        max_depth : int
            Largest conditioning set cardinality tested, -1 if no test ran.
        """
        if (isinstance(depth, bool) or not isinstance(depth, (int, np.integer))
                or depth < -1):
            raise ValueError("depth must be an integer >= -1, got %s" % depth)
        if pc_alpha is None or not 0. < pc_alpha < 1.:
            raise ValueError("pc_alpha must be in (0, 1), got %s" % pc_alpha)

        N = self.N
        names = self.var_names

        graph = Graph.complete(self.var_names)
        for i in range(N):
            for j in range(i + 1, N):
                if self.knowledge.is_forbidden_edge(names[i], names[j]):
                    graph.remove_edge(i, j)

        p_matrix = np.zeros((N, N))
        val_matrix = np.zeros((N, N))
        for i in range(N):
            for j in range(N):
                if i != j and not graph.is_adjacent(i, j):
                    p_matrix[i, j] = 1.
        sepsets = dict()
        max_depth = -1

        if self.verbosity > 0:
            print("\n##\n## Step 1: Fast adjacency search\n##"
                  "\n\nParameters:\ndepth = %s\npc_alpha = %s\nn_jobs = %s"
                  % (depth, pc_alpha, n_jobs))

        p = 0
        while depth == -1 or p <= depth:
            # Freeze adjacencies for this round
            adjt = graph.adjacency_snapshot()
            remaining_pairs = self._remaining_pairs(adjt, p)
            if len(remaining_pairs) == 0:
                break

            if self.verbosity > 1:
                print("\nTesting condition sets of dimension %d: " % p)

            pair_results = Parallel(n_jobs=n_jobs, prefer="threads")(
                delayed(self._test_pair)(i, j, adjt, p, pc_alpha)
                for (i, j) in remaining_pairs)

            # Apply removals in pair order
            n_removed = 0
            for (i, j), results in zip(remaining_pairs, pair_results):
                if results['n_tests'] > 0:
                    max_depth = p
                if results['pval'] >= p_matrix[i, j]:
                    p_matrix[i, j] = p_matrix[j, i] = results['pval']
                    val_matrix[i, j] = val_matrix[j, i] = results['val']
                if results['sepset'] is not None:
                    graph.remove_edge(i, j)
                    sepsets[(i, j)] = sepsets[(j, i)] = results['sepset']
                    n_removed += 1

            if self.verbosity > 0:
                print("\nDepth %d: tested %d pair(s), removed %d edge(s), "
                      "%d edge(s) remaining." % (p, len(remaining_pairs),
                                                 n_removed, graph.num_edges()))
            p += 1

        if self.verbosity > 0:
            print("\nAdjacency search finished at depth %d with %d edge(s)."
                  % (max_depth, graph.num_edges()))

        return {'graph': graph,
                'sepsets': sepsets,
                'p_matrix': p_matrix,
                'val_matrix': val_matrix,
                'max_depth': max_depth,
                }
