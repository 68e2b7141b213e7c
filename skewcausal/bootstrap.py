"""Skewcausal bootstrap ensembles of Fang searches."""

# License: GNU General Public License v3.0

import time
from copy import deepcopy
from enum import IntEnum
import numpy as np
from joblib import Parallel, delayed

from .fang import Fang
from .graphs import Graph, NO_EDGE, UNDIRECTED
from .knowledge import Knowledge


class EdgeEnsemble(IntEnum):
    """Policies to merge the graphs of bootstrap runs."""
    PRESERVED = 0
    HIGHEST = 1
    MAJORITY = 2


# Preferred order in case of ties, keeping the least assertive claim
PREFERRED_ORDER = [NO_EDGE, UNDIRECTED]


def _choose_link(links, counts):
    """Return the most frequent link, breaking ties by PREFERRED_ORDER and
    then by order of appearance. links are in order of first appearance."""
    max_count = max(counts)
    list_of_most_freq = [link for link, count in zip(links, counts)
                         if count == max_count]
    if len(list_of_most_freq) == 1:
        return list_of_most_freq[0]
    ordered_list = [link for link in PREFERRED_ORDER
                    if link in list_of_most_freq]
    if len(ordered_list) > 0:
        return ordered_list[0]
    return list_of_most_freq[0]


def _count_links(graphs, i, j):
    links = []
    counts = []
    for graph in graphs:
        link = graph.get_link(i, j)
        if link in links:
            counts[links.index(link)] += 1
        else:
            links.append(link)
            counts.append(1)
    return links, counts


def ensemble_graphs(graphs, ensemble=EdgeEnsemble.HIGHEST):
    """Merge graphs from bootstrap runs into one graph.

    Per pair, the link (as seen from the smaller index) is chosen by

    * PRESERVED: the link of the first graph,
    * HIGHEST: the most frequent link, counting 'no edge' as a link,
    * MAJORITY: 'no edge' unless the pair is adjacent in more than half of
      the graphs, then the most frequent of the adjacent links.

    Ties are broken in favor of no edge, then the undirected edge, then the
    link seen first. The tag of the chosen link is taken from the first
    graph containing it.

    Parameters
    ----------
    graphs : list of Graph
        Graphs over the same variables.
    ensemble : EdgeEnsemble or int, optional (default: EdgeEnsemble.HIGHEST)
        Merging policy.

    Returns
    -------
    graph : Graph
        Merged graph.
    link_frequency : array of shape [N, N]
        Fraction of graphs containing the chosen link of every pair.
    """
    if len(graphs) == 0:
        raise ValueError("graphs must contain at least one graph.")
    ensemble = EdgeEnsemble(ensemble)
    var_names = graphs[0].var_names
    for graph in graphs[1:]:
        if graph.var_names != var_names:
            raise ValueError("All graphs must share the same variables.")

    n_results = float(len(graphs))
    N = len(var_names)
    merged = Graph(var_names)
    link_frequency = np.zeros((N, N), dtype='float')

    for i in range(N):
        for j in range(i + 1, N):
            links, counts = _count_links(graphs, i, j)

            if ensemble == EdgeEnsemble.PRESERVED:
                choice = graphs[0].get_link(i, j)
            elif ensemble == EdgeEnsemble.HIGHEST:
                choice = _choose_link(links, counts)
            else:
                freq_of_no_edge = 0
                if NO_EDGE in links:
                    freq_of_no_edge = counts[links.index(NO_EDGE)]
                freq_of_adjacency = len(graphs) - freq_of_no_edge
                if freq_of_adjacency > len(graphs) / 2.:
                    adja = [(link, count) for link, count in zip(links, counts)
                            if link != NO_EDGE]
                    choice = _choose_link([a[0] for a in adja],
                                          [a[1] for a in adja])
                else:
                    choice = NO_EDGE

            link_frequency[i, j] = link_frequency[j, i] = \
                counts[links.index(choice)] / n_results

            if choice != NO_EDGE:
                tag = None
                for graph in graphs:
                    if graph.get_link(i, j) == choice:
                        tag = graph.get_tag(i, j)
                        break
                merged.set_link(i, j, choice, tag=tag)

    return merged, link_frequency


class BootstrapFang():
    r"""Runs the Fang search on bootstrap resamples and merges the graphs.

    Every resample draws the rows of each dataset with replacement. Each run
    works on a fresh DataFrame with its own copies of the knowledge and of
    the independence test, and draws from its own random generator spawned
    from a numpy SeedSequence. Results are therefore reproducible for a
    given seed and independent of n_jobs.

    Parameters
    ----------
    dataframe : data object
        Skewcausal DataFrame with one or multiple datasets.
    cond_ind_test : conditional independence test object, optional
        Passed on to Fang.
    knowledge : Knowledge, optional (default: None)
        Background knowledge keyed by variable names.
    penalty_discount : float, optional (default: 1.)
        Passed on to Fang.
    verbosity : int, optional (default: 0)
        Verbose levels 0, 1, ...
    """

    def __init__(self, dataframe,
                 cond_ind_test=None,
                 knowledge=None,
                 penalty_discount=1.,
                 verbosity=0):
        self.dataframe = dataframe
        self.cond_ind_test = cond_ind_test
        if knowledge is None:
            knowledge = Knowledge()
        self.knowledge = knowledge
        self.penalty_discount = penalty_discount
        self.verbosity = verbosity

    def _run_single_bootstrap(self, boot_seed, depth, pc_alpha):
        boot_random_state = np.random.default_rng(boot_seed)
        boot_dataframe = self.dataframe.bootstrap_sample(boot_random_state)
        fang = Fang(boot_dataframe,
                    cond_ind_test=deepcopy(self.cond_ind_test),
                    knowledge=self.knowledge.copy(),
                    penalty_discount=self.penalty_discount,
                    verbosity=0)
        return fang.run_fang(depth=depth, pc_alpha=pc_alpha,
                             n_jobs=1)['graph']

    def run_bootstrap(self, boot_samples=100,
                      ensemble=EdgeEnsemble.HIGHEST,
                      depth=-1,
                      pc_alpha=0.01,
                      seed=None,
                      n_jobs=1):
        """Runs Fang on bootstrap samples and merges the graphs.

        Parameters
        ----------
        boot_samples : int, optional (default: 100)
            Number of bootstrap samples to draw.
        ensemble : EdgeEnsemble or int, optional
            Merging policy, see ensemble_graphs().
        depth : int, optional (default: -1)
            Depth of the adjacency search.
        pc_alpha : float, optional (default: 0.01)
            Significance level of the independence test.
        seed : int, optional (default: None)
            Seed for the SeedSequence of the resamples.
        n_jobs : int, optional (default: 1)
            Number of joblib workers running resamples.

        Returns
        -------
        graph : Graph
            Merged graph.
        link_frequency : array of shape [N, N]
            Frequency of the chosen link of every pair.
        boot_graphs : list of Graph
            Graph of every bootstrap run.
        elapsed : float
            Wall-clock time in seconds.
        """
        if boot_samples < 1:
            raise ValueError("boot_samples must be at least 1, got %s"
                             % boot_samples)
        ensemble = EdgeEnsemble(ensemble)
        start = time.time()

        if self.verbosity > 0:
            print("\n##\n## Running Bootstrap of Fang" +
                  "\n##\n" +
                  "\nboot_samples = %s \n" % boot_samples +
                  "\nensemble = %s \n" % ensemble.name)

        seed_sequence = np.random.SeedSequence(seed)
        child_seeds = seed_sequence.spawn(boot_samples)

        boot_graphs = Parallel(n_jobs=n_jobs)(
            delayed(self._run_single_bootstrap)(child_seeds[b], depth,
                                                pc_alpha)
            for b in range(boot_samples))

        graph, link_frequency = ensemble_graphs(boot_graphs, ensemble)
        elapsed = time.time() - start

        if self.verbosity > 0:
            print("\n## Merged graph (%s)\n" % ensemble.name)
            for i, j, link in graph.edges():
                print("    %s %s %s (frequency %.2f)" % (
                    graph.var_names[i], link, graph.var_names[j],
                    link_frequency[i, j]))

        return {'graph': graph,
                'link_frequency': link_frequency,
                'boot_graphs': boot_graphs,
                'elapsed': elapsed,
                }
