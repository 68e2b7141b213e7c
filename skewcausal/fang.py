"""Skewcausal Fang search: adjacency search plus skew-based orientation."""

# License: GNU General Public License v3.0

import time
from copy import deepcopy
import numpy as np

from .data_processing import DataFrame
from .fas import FAS, orient_background_knowledge
from .independence_tests import ScoreBIC
from .knowledge import Knowledge
from .orientation import orient_skeleton


class Fang():
    r"""Fang search for causal structure in non-Gaussian data.

    The search proceeds in three steps:

    1. Every dataset is standardized and all datasets are concatenated.
    2. A fast adjacency search (FAS) finds the undirected skeleton, and
       background knowledge orients the adjacent pairs it constrains.
    3. Every pair that is adjacent, or whose asymmetric moment ratios make it
       a candidate, is oriented from sign-partitioned partial moments of the
       standardized data. Besides single directed edges the output may
       contain two-cycles flagging possible feedback.

    By default the adjacency search uses the SEM BIC score difference
    (ScoreBIC) as independence test, evaluated on the concatenated data with
    negative entries set to 0. A custom test is evaluated on the
    standardized, concatenated data without truncation.

    Parameters
    ----------
    dataframe : data object
        Skewcausal DataFrame with one or multiple datasets.
    cond_ind_test : conditional independence test object, optional
        Instantiated test, e.g. ParCorr(). If None, ScoreBIC with
        penalty_discount is used on the truncated data.
    knowledge : Knowledge, optional (default: None)
        Background knowledge keyed by variable names.
    penalty_discount : float, optional (default: 1.)
        Penalty discount of the default ScoreBIC test. Higher values give
        sparser skeletons.
    verbosity : int, optional (default: 0)
        Verbose levels 0, 1, ...

    Attributes
    ----------
    results : dictionary
        Result of the last call to run_fang.
    elapsed : float
        Wall-clock time of the last search in seconds.
    """

    def __init__(self, dataframe,
                 cond_ind_test=None,
                 knowledge=None,
                 penalty_discount=1.,
                 verbosity=0):
        self.dataframe = dataframe
        if isinstance(cond_ind_test, type):
            raise ValueError("Fang requires that cond_ind_test "
                             "is instantiated, e.g. cond_ind_test =  "
                             "ParCorr().")
        self.cond_ind_test = deepcopy(cond_ind_test)
        if knowledge is None:
            knowledge = Knowledge()
        if not isinstance(knowledge, Knowledge):
            raise TypeError("knowledge must be a Knowledge instance, got %s."
                            % type(knowledge).__name__)
        self.knowledge = knowledge
        if penalty_discount <= 0:
            raise ValueError("penalty_discount must be positive, got %s"
                             % penalty_discount)
        self.penalty_discount = penalty_discount
        self.verbosity = verbosity
        self.var_names = list(self.dataframe.var_names)
        self.N = self.dataframe.N
        self.results = None
        self.elapsed = None

    def _get_test_dataframe(self, data):
        """Return the data object and test used by the adjacency search."""
        if self.cond_ind_test is None:
            truncated = np.where(data > 0., data, 0.)
            return (DataFrame(truncated, var_names=self.var_names),
                    ScoreBIC(penalty_discount=self.penalty_discount,
                             verbosity=self.verbosity))
        return (DataFrame(data, var_names=self.var_names),
                self.cond_ind_test)

    def run_fang(self, depth=-1, pc_alpha=0.01, n_jobs=1):
        """Runs the Fang search.

        Parameters
        ----------
        depth : int, optional (default: -1)
            Maximum conditioning set cardinality of the adjacency search, -1
            is unrestricted.
        pc_alpha : float, optional (default: 0.01)
            Significance level of the independence test. Ignored by ScoreBIC.
        n_jobs : int, optional (default: 1)
            Number of threads for the adjacency search and the orientation.

        Returns
        -------
        graph : Graph
            Oriented output graph.
        skeleton : Graph
            Skeleton after knowledge orientation.
        sepsets : dictionary
            Separating sets of removed pairs.
        elapsed : float
            Wall-clock time in seconds.
        """
        start = time.time()

        if self.verbosity > 0:
            print("\n##\n## Running Fang search\n##\n"
                  "\nParameters:\ndepth = %s\npenalty_discount = %s"
                  "\ndatasets = %d\nvariables = %s"
                  % (depth, self.penalty_discount, self.dataframe.M,
                     self.var_names))

        data = self.dataframe.concatenate(standardize_data=True)
        test_dataframe, cond_ind_test = self._get_test_dataframe(data)

        fas = FAS(dataframe=test_dataframe,
                  cond_ind_test=cond_ind_test,
                  knowledge=self.knowledge,
                  verbosity=self.verbosity)
        fas_results = fas.run_fas(depth=depth, pc_alpha=pc_alpha,
                                  n_jobs=n_jobs)
        skeleton = orient_background_knowledge(fas_results['graph'],
                                               self.knowledge)

        graph = orient_skeleton(data, skeleton, self.knowledge,
                                n_jobs=n_jobs, verbosity=self.verbosity)

        self.elapsed = time.time() - start

        if self.verbosity > 0:
            print("\n## Resulting graph\n")
            for i, j, link in graph.edges():
                print("    %s %s %s" % (self.var_names[i], link,
                                        self.var_names[j]))
            print("\nElapsed time: %.3f seconds" % self.elapsed)

        self.results = {'graph': graph,
                        'skeleton': skeleton,
                        'sepsets': fas_results['sepsets'],
                        'elapsed': self.elapsed,
                        }
        return self.results
