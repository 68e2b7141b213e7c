"""Skewcausal causal discovery for non-Gaussian data."""

# License: GNU General Public License v3.0

from scipy import stats
import numpy as np

from .independence_tests_base import CondIndTest
from ..exceptions import DegenerateInputError


class ParCorr(CondIndTest):
    r"""Partial correlation test.

    X and Y are each regressed on Z (with intercept) by least squares and
    the Pearson correlation of the two residual series is the test
    statistic:

    .. math:: \rho = \mathrm{corr}(X - \hat X(Z),\; Y - \hat Y(Z))

    Two analytic null distributions are available. 'student_t' uses
    :math:`t = \rho \sqrt{(T - D_Z - 2) / (1 - \rho^2)}` with
    :math:`T - D_Z - 2` degrees of freedom, 'fisher_z' uses
    :math:`z = \sqrt{T - D_Z - 3}\, \mathrm{artanh}(\rho)` against the
    standard normal.

    Parameters
    ----------
    null_dist : {'student_t', 'fisher_z'}, optional (default: 'student_t')
        Null distribution of the analytic p-value.
    **kwargs :
        Arguments passed on to Parent class CondIndTest.
    """
    @property
    def measure(self):
        """
        Concrete property to return the measure of the independence test
        """
        return self._measure

    def __init__(self, null_dist='student_t', **kwargs):
        self._measure = 'par_corr'
        if null_dist not in ['student_t', 'fisher_z']:
            raise ValueError("null_dist must be 'student_t' or 'fisher_z', "
                             "got %s" % null_dist)
        self.null_dist = null_dist
        CondIndTest.__init__(self, **kwargs)

    def print_info(self):
        CondIndTest.print_info(self)
        print("null_dist = %s" % self.null_dist)

    def _get_single_residuals(self, array, target_var):
        """Return residuals of the row target_var regressed on rows 2, ...

        Raises DegenerateInputError if the conditions are linearly
        dependent.
        """
        dim, T = array.shape
        target = array[target_var]
        design = np.column_stack([np.ones(T)] + [array[k]
                                                 for k in range(2, dim)])
        beta_hat, _, rank, _ = np.linalg.lstsq(design, target, rcond=None)
        if rank < design.shape[1]:
            raise DegenerateInputError("Singular conditioning set in %s."
                                       % self.measure)
        return target - np.dot(design, beta_hat)

    def get_dependence_measure(self, array, xyz):
        """Return the partial correlation of rows 0 and 1 given the others.

        Parameters
        ----------
        array : array-like
            data array with X, Y, Z in rows and observations in columns
        xyz : array of ints
            XYZ identifier array of shape (dim,).

        Returns
        -------
        val : float
            Partial correlation coefficient.
        """
        array = self._standardize_rows(array)
        x_resid = self._get_single_residuals(array, target_var=0)
        y_resid = self._get_single_residuals(array, target_var=1)
        # X or Y fully explained by Z
        if (np.allclose(x_resid, 0., atol=1e-12)
                or np.allclose(y_resid, 0., atol=1e-12)):
            raise DegenerateInputError("Residuals without variance in %s."
                                       % self.measure)
        val, _ = stats.pearsonr(x_resid, y_resid)
        return val

    def get_analytic_significance(self, value, T, dim):
        """Return the two-sided analytic p-value of the partial correlation.

        Parameters
        ----------
        value : float
            Test statistic value.
        T : int
            Sample length
        dim : int
            Dimensionality, ie, number of features.

        Returns
        -------
        pval : float or numpy.nan
            P-value, numpy.nan if there are too few samples.
        """
        dim_z = dim - 2
        if abs(value) >= 1.:
            return 0.

        if self.null_dist == 'fisher_z':
            deg_f = T - dim_z - 3
            if deg_f < 1:
                return np.nan
            z_val = np.sqrt(deg_f) * np.arctanh(value)
            return 2. * stats.norm.sf(np.abs(z_val))

        deg_f = T - dim_z - 2
        if deg_f < 1:
            return np.nan
        t_val = value * np.sqrt(deg_f / (1. - value * value))
        return 2. * stats.t.sf(np.abs(t_val), deg_f)
