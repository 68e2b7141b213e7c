"""Skewcausal sign-partitioned moment statistics."""

# License: GNU General Public License v3.0

import numpy as np

from .exceptions import DegenerateInputError

# Row selections (q, s) of covariance_of_part
_PARTS = {(0, 0): None,
          (1, 0): (0, 1.),
          (0, 1): (1, 1.),
          (-1, 0): (0, -1.),
          (0, -1): (1, -1.)}


def _check_pair(x, y):
    x = np.asarray(x, dtype='float')
    y = np.asarray(y, dtype='float')
    if x.ndim != 1 or x.shape != y.shape:
        raise ValueError("x and y must be 1D arrays of equal length, got "
                         "shapes %s and %s." % (str(x.shape), str(y.shape)))
    return x, y


def _safe_mean(values):
    """Mean that yields 0 for an empty selection."""
    if len(values) == 0:
        return 0.
    return values.mean()


def _safe_ratio(num, denom):
    if denom == 0.:
        return 0.
    return num / denom


def covariance(x, y):
    """Return the population covariance of x and y.

    Divides by the number of observations n. An empty sample yields 0.

    Parameters
    ----------
    x, y : array-like
        1D arrays of equal length.

    Returns
    -------
    cov : float
    """
    x, y = _check_pair(x, y)
    if len(x) == 0:
        return 0.
    return float(np.mean((x - x.mean()) * (y - y.mean())))


def covariance_of_part(x, y, q, s):
    """Return the covariance of x and y restricted to a sign-selected part.

    The selection is made on one variable only:

    * (0, 0): all rows,
    * (1, 0): rows with x > 0,
    * (0, 1): rows with y > 0,
    * (-1, 0): rows with x < 0,
    * (0, -1): rows with y < 0.

    Means and the division are taken over the selected rows. An empty
    selection yields 0.

    Parameters
    ----------
    x, y : array-like
        1D arrays of equal length.
    q, s : int
        Selection code, see above.

    Returns
    -------
    cov : float
    """
    x, y = _check_pair(x, y)
    if (q, s) not in _PARTS:
        raise ValueError("(q, s) must be one of %s, got %s."
                         % (sorted(_PARTS), str((q, s))))
    part = _PARTS[(q, s)]
    if part is None:
        return covariance(x, y)
    var, sign = part
    selector = [x, y][var] * sign > 0.
    return covariance(x[selector], y[selector])


def positive_moments(x, y):
    """Return the positive-part second moments and asymmetric ratios.

    With P_x = {x > 0} and P_y = {y > 0} these are

    * sxyxp = mean(x*y) over P_x, sxxxp = mean(x**2) over P_x,
    * sxyyp = mean(x*y) over P_y, syyyp = mean(y**2) over P_y,
    * q1 = sxyxp / sxxxp and q2 = sxyyp / syyyp.

    Empty selections and zero denominators yield 0.

    Parameters
    ----------
    x, y : array-like
        1D arrays of equal length, assumed standardized.

    Returns
    -------
    moments : dictionary
        Dictionary with keys 'sxyxp', 'sxyyp', 'sxxxp', 'syyyp', 'q1', 'q2'.
    """
    x, y = _check_pair(x, y)
    xy = x * y
    x_pos = x > 0.
    y_pos = y > 0.

    sxyxp = _safe_mean(xy[x_pos])
    sxxxp = _safe_mean(x[x_pos] ** 2)
    sxyyp = _safe_mean(xy[y_pos])
    syyyp = _safe_mean(y[y_pos] ** 2)

    return {'sxyxp': float(sxyxp),
            'sxyyp': float(sxyyp),
            'sxxxp': float(sxxxp),
            'syyyp': float(syyyp),
            'q1': float(_safe_ratio(sxyxp, sxxxp)),
            'q2': float(_safe_ratio(sxyyp, syyyp)),
            }


def pair_statistics(x, y):
    """Return all statistics needed to orient the pair (x, y).

    Parameters
    ----------
    x, y : array-like
        1D arrays of equal length.

    Returns
    -------
    stats : dictionary
        Positive moments as in positive_moments() plus 'cov' (all rows),
        'c1' (x > 0), 'c2' (y > 0), 'c3' (x < 0) and 'c4' (y < 0).

    Raises
    ------
    DegenerateInputError
        If any statistic is not finite.
    """
    x, y = _check_pair(x, y)
    stats = positive_moments(x, y)
    stats['cov'] = covariance_of_part(x, y, 0, 0)
    stats['c1'] = covariance_of_part(x, y, 1, 0)
    stats['c2'] = covariance_of_part(x, y, 0, 1)
    stats['c3'] = covariance_of_part(x, y, -1, 0)
    stats['c4'] = covariance_of_part(x, y, 0, -1)

    for key, value in stats.items():
        if not np.isfinite(value):
            raise DegenerateInputError("Statistic %s is not finite (%s)."
                                       % (key, value))
    return stats
