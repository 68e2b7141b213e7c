"""Skewcausal causal discovery for non-Gaussian data."""

# License: GNU General Public License v3.0

import abc
import warnings
import numpy as np

from ..exceptions import DegenerateInputError


class CondIndTest(metaclass=abc.ABCMeta):
    """Base class of conditional independence tests.

    Provides the general test procedure: construction of the data array
    from the dataframe, checks for degenerate input, caching of results, and
    the test decision. Concrete classes implement get_dependence_measure and
    get_analytic_significance.

    Tests are deterministic: the same dataframe and the same (X, Y, Z) always
    yield the same result. The cache is keyed by ordered X and Y and the
    unordered conditioning set Z, so asymmetric measures stay well defined
    when tests run concurrently.

    Parameters
    ----------
    verbosity : int, optional (default: 0)
        Level of verbosity.
    """
    @abc.abstractmethod
    def get_dependence_measure(self, array, xyz):
        """
        Abstract function that all concrete classes must instantiate.
        """
        pass

    @property
    @abc.abstractmethod
    def measure(self):
        """
        Abstract property to store the type of independence test.
        """
        pass

    def __init__(self, verbosity=0):
        # Set the dataframe to None for now, will be reset during search call
        self.dataframe = None
        self.verbosity = verbosity
        self.cached_ci_results = {}

        if self.verbosity > 0:
            self.print_info()

    def print_info(self):
        """
        Print information about the conditional independence test parameters
        """
        info_str = "\n# Initialize conditional independence test\n\nParameters:"
        info_str += "\nindependence test = %s" % self.measure
        print(info_str)

    def set_dataframe(self, dataframe):
        """Initialize the dataframe and reset the cache.

        Parameters
        ----------
        dataframe : data object
            Skewcausal dataframe object. It must provide construct_array and
            the attribute N.
        """
        self.dataframe = dataframe
        self.cached_ci_results = {}

    def get_analytic_significance(self, value, T, dim):
        """
        Base class assumption that this is not implemented.  Concrete classes
        should override when possible.
        """
        raise NotImplementedError("Analytic significance not"+\
                                  " implemented for %s" % self.measure)

    def _get_array(self, X, Y, Z):
        """Convenience wrapper around construct_array."""

        if len(X) > 1 or len(Y) > 1:
            raise ValueError("X and Y for %s must be univariate." %
                             self.measure)

        if self.dataframe is None:
            raise ValueError("Call set_dataframe first when using CI test "
                             "outside causal discovery classes.")

        array, xyz = self.dataframe.construct_array(X=X, Y=Y, Z=Z,
                                                    verbosity=self.verbosity)

        # Ensure it is a valid array
        if np.any(np.isnan(array)):
            raise DegenerateInputError("nans in the array!")

        # Constant X or Y make every dependence measure undefined
        std = array.std(axis=1)
        if np.any(std[xyz != 2] == 0.):
            raise DegenerateInputError("Constant X or Y array for %s." %
                                       self.measure)
        return array, xyz

    def _test_decision(self, val, pval, alpha_or_thres):
        """Return the test decision dependent=True/False."""
        return bool(pval <= alpha_or_thres)

    def run_test(self, X, Y, Z=None, alpha_or_thres=None):
        """Perform conditional independence test.

        Calls the dependence measure and significance test functions. The
        child classes must specify get_dependence_measure and
        get_analytic_significance.

        Parameters
        ----------
        X, Y, Z : list of ints
            Variable indices, X and Y must be univariate.
        alpha_or_thres : float (optional)
            Significance level. If given, run_test returns the test decision
            dependent=True/False.

        Returns
        -------
        val, pval, [dependent] : Tuple of floats and bool
            The test statistic value and the p-value. If alpha_or_thres is
            given, run_test also returns the test decision
            dependent=True/False.

        Raises
        ------
        DegenerateInputError
            If the test statistic is undefined for the given variables.
        """
        if Z is None:
            Z = []
        X, Y, Z = list(X), list(Y), list(Z)

        key = (tuple(X), tuple(Y), tuple(sorted(Z)))

        # Get test statistic value and p-value [cached if possible]
        if key in self.cached_ci_results:
            cached = True
            val, pval = self.cached_ci_results[key]
        else:
            cached = False
            array, xyz = self._get_array(X, Y, Z)
            val = self.get_dependence_measure(array, xyz)
            if val is None or np.isnan(val):
                raise DegenerateInputError("Undefined test statistic for "
                                           "X = %s, Y = %s, Z = %s."
                                           % (X, Y, Z))
            dim, T = array.shape
            pval = self.get_analytic_significance(value=val, T=T, dim=dim)
            if pval is None or np.isnan(pval):
                raise DegenerateInputError("Undefined p-value for X = %s, "
                                           "Y = %s, Z = %s." % (X, Y, Z))
            self.cached_ci_results[key] = (val, pval)

        if alpha_or_thres is None:
            dependent = None
        else:
            dependent = self._test_decision(val, pval, alpha_or_thres)

        if self.verbosity > 1:
            self._print_cond_ind_results(val=val, pval=pval, cached=cached,
                                         dependent=dependent)

        if alpha_or_thres is None:
            return val, pval
        return val, pval, dependent

    def _standardize_rows(self, array):
        """Standardize the rows of array in place."""
        dim, T = array.shape
        array -= array.mean(axis=1).reshape(dim, 1)
        std = array.std(axis=1)
        for i in range(dim):
            if std[i] != 0.:
                array[i] /= std[i]
        if np.any(std == 0.) and self.verbosity > 0:
            warnings.warn("Possibly constant array!")
        return array

    def _print_cond_ind_results(self, val, pval=None, cached=None,
                                dependent=None):
        """Print results from conditional independence test.

        Parameters
        ----------
        val : float
            Test stastistic value.
        pval : float, optional (default: None)
            p-value
        cached : bool, optional (default: None)
            Whether the result was taken from the cache.
        dependent : bool
            Test decision.
        """
        printstr = "        val = % .3f" % (val)
        if pval is not None:
            printstr += " | pval = %.5f" % (pval)
        if dependent is not None:
            printstr += " | dependent = %s" % (dependent)
        if cached is not None:
            printstr += " %s" % ({0: "", 1: "[cached]"}[cached])

        print(printstr)
