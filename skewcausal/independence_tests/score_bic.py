"""Skewcausal causal discovery for non-Gaussian data."""

# License: GNU General Public License v3.0

import numpy as np

from .independence_tests_base import CondIndTest
from ..exceptions import DegenerateInputError


class ScoreBIC(CondIndTest):
    r"""Independence test based on the linear Gaussian SEM BIC score.

    The test statistic is the BIC score difference of adding X as a parent
    of Y to a model in which Y has the parents Z:

    .. math:: \Delta = -T \log\frac{\hat\sigma^2_{Y|Z \cup X}}
                                   {\hat\sigma^2_{Y|Z}} - c \log T

    where :math:`\hat\sigma^2` are OLS residual variances (with intercept)
    and :math:`c` is the penalty discount. X and Y are judged dependent if
    :math:`\Delta > 0`, i.e., the score prefers the larger model. Higher
    penalty discounts yield sparser graphs.

    The measure is not symmetric in X and Y. No p-value is computed; pval is
    0 for dependence and 1 for independence and alpha_or_thres is ignored
    in the decision.

    Parameters
    ----------
    penalty_discount : float, optional (default: 1.)
        Multiplier of the BIC complexity penalty, must be positive.
    **kwargs :
        Arguments passed on to Parent class CondIndTest.
    """
    @property
    def measure(self):
        """
        Concrete property to return the measure of the independence test
        """
        return self._measure

    def __init__(self, penalty_discount=1., **kwargs):
        self._measure = 'sem_bic'
        if penalty_discount <= 0:
            raise ValueError("penalty_discount must be positive, got %s"
                             % penalty_discount)
        self.penalty_discount = float(penalty_discount)
        CondIndTest.__init__(self, **kwargs)

    def print_info(self):
        CondIndTest.print_info(self)
        print("penalty_discount = %s" % self.penalty_discount)

    @staticmethod
    def _residual_variance(target, predictors):
        """Return OLS residual variance of target on predictors plus an
        intercept, together with the rank of the design matrix."""
        T = target.shape[0]
        design = np.column_stack([np.ones(T)] + list(predictors))
        beta_hat, _, rank, _ = np.linalg.lstsq(design, target, rcond=None)
        resid = target - np.dot(design, beta_hat)
        return np.dot(resid, resid) / T, rank, design.shape[1]

    def get_dependence_measure(self, array, xyz):
        """Return the BIC score difference of adding X to the parents of Y.

        Parameters
        ----------
        array : array-like
            data array with X, Y, Z in rows and observations in columns
        xyz : array of ints
            XYZ identifier array of shape (dim,).

        Returns
        -------
        val : float
            Score difference.
        """
        dim, T = array.shape
        x = array[0]
        y = array[1]
        z = [array[k] for k in range(2, dim)]

        s2_reduced, rank, n_cols = self._residual_variance(y, z)
        if rank < n_cols:
            raise DegenerateInputError("Singular conditioning set in %s."
                                       % self.measure)
        s2_full, rank, n_cols = self._residual_variance(y, z + [x])
        if rank < n_cols:
            raise DegenerateInputError("X is collinear with Z in %s."
                                       % self.measure)
        if s2_reduced <= 0. or s2_full <= 0.:
            raise DegenerateInputError("Zero residual variance in %s."
                                       % self.measure)

        return (-T * np.log(s2_full / s2_reduced)
                - self.penalty_discount * np.log(T))

    def get_analytic_significance(self, value, T, dim):
        """Return pseudo p-value 0 (dependent) or 1 (independent)."""
        if value > 0.:
            return 0.
        return 1.

    def _test_decision(self, val, pval, alpha_or_thres):
        return bool(val > 0.)
