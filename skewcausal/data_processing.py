"""Skewcausal data processing functions."""

# License: GNU General Public License v3.0

import warnings
import numpy as np

from .exceptions import MismatchedVariableSetError


def standardize(data):
    """Return data with zero mean and unit variance per column.

    Uses the population standard deviation. Constant columns are only
    centered.

    Parameters
    ----------
    data : array-like
        Array of shape (observations T, variables N).

    Returns
    -------
    standardized : array of shape (T, N)
    """
    data = np.array(data, dtype='float')
    if data.ndim != 2:
        raise ValueError("data must be of shape (T, N), got %s."
                         % str(data.shape))
    data -= data.mean(axis=0)
    std = data.std(axis=0)
    for i in range(data.shape[1]):
        if std[i] != 0.:
            data[:, i] /= std[i]
    if np.any(std == 0.):
        warnings.warn("Possibly constant array!")
    return data


class DataFrame():
    """Data object containing one or multiple datasets over the same
    variables.

    Parameters
    ----------
    data : array-like, list or dict
        if analysis_mode == 'single':
         Numpy array of shape (observations T, variables N)
         OR
         Dictionary with a single entry whose value is a numpy array of
         shape (observations T, variables N)
        if analysis_mode == 'multiple':
         Numpy array of shape (multiple datasets M, observations T,
         variables N)
         OR
         List or dictionary whose values are numpy arrays of shape
         (observations T_i, variables N), where the number of observations
         T_i may vary across the multiple datasets but the variables must not.
    var_names : list of str or dict/list of lists, optional (default: None)
        Names of variables, must match the number of variables. If None is
        passed, variables are named ['X0', 'X1', ...]. In analysis mode
        'multiple' a separate list per dataset can be given (as a dict with
        the same keys as data or as a list of lists); these lists must be
        identical.
    analysis_mode : string, optional (default: 'single')
        Must be 'single' or 'multiple'.

    Attributes
    ----------
    values : dictionary
        Dictionary {key(m): array of shape (T_m, N), ...}.
    datasets : list
        List of dataset keys, i.e., list(self.values.keys()).
    M : int
        Number of datasets.
    N : int
        Number of variables (constant across datasets).
    T : dictionary
        Dictionary {key(m): T(m), ...} of sample sizes.
    var_names : list of str
        Ordered variable names.

    Raises
    ------
    MismatchedVariableSetError
        If datasets have a different number of variables or different
        variable lists.
    """

    def __init__(self, data, var_names=None, analysis_mode='single'):

        if analysis_mode in ['single', 'multiple']:
            self.analysis_mode = analysis_mode
        else:
            raise ValueError("'analysis_mode' is '{}', must be 'single' or "
                             "'multiple'.".format(analysis_mode))

        if self.analysis_mode == 'single':
            if isinstance(data, dict):
                if len(data) != 1:
                    raise ValueError("In analysis mode 'single', 'data' given "
                        "as dictionary. There are {} entries in 'data', there "
                        "must be exactly one entry.".format(len(data)))
                data = next(iter(data.values()))
            _data = np.asarray(data)
            if _data.ndim == 3 and _data.shape[0] == 1:
                _data = _data[0]
            if _data.ndim != 2:
                raise TypeError("In analysis mode 'single', 'data' is of "
                    "shape {}, must be of shape (T, N) or (1, T, N).".format(
                        _data.shape))
            self.values = {0: np.array(_data, dtype='float')}

        else:
            if isinstance(data, dict):
                _values = dict((key, np.asarray(value))
                               for key, value in data.items())
            elif isinstance(data, (list, tuple)):
                _values = dict((m, np.asarray(value))
                               for m, value in enumerate(data))
            else:
                _data = np.asarray(data)
                if _data.ndim != 3:
                    raise TypeError("In analysis mode 'multiple', 'data' "
                        "given as np.ndarray. 'data' is of shape {}, must be "
                        "of shape (M, T, N).".format(_data.shape))
                _values = dict((m, _data[m]) for m in range(_data.shape[0]))

            if len(_values) == 0:
                raise ValueError("In analysis mode 'multiple', 'data' "
                                 "contains no datasets.")
            _N_list = set()
            for dataset_key, dataset_data in _values.items():
                if dataset_data.ndim != 2:
                    raise TypeError("In analysis mode 'multiple', "
                        "'data'[{}] is of shape {}, must be of shape "
                        "(T_i, N).".format(dataset_key, dataset_data.shape))
                _N_list.add(dataset_data.shape[1])
            if len(_N_list) != 1:
                raise MismatchedVariableSetError("In analysis mode "
                    "'multiple', all datasets must have the same number of "
                    "variables N, found {}.".format(sorted(_N_list)))
            self.values = dict((key, np.array(value, dtype='float'))
                               for key, value in _values.items())

        self.datasets = list(self.values.keys())
        self.M = len(self.values)

        self.T = dict()
        for dataset_key, dataset_data in self.values.items():
            if np.isnan(dataset_data).sum() != 0:
                raise ValueError("NaNs in the data.")
            self.T[dataset_key] = dataset_data.shape[0]
            self.N = dataset_data.shape[1]

        if self.analysis_mode == 'single' and self.N > self.T[0]:
            warnings.warn("In analysis mode 'single', 'data'.shape = ({}, {});"
                " is it of shape (observations, variables)?".format(
                    self.T[0], self.N))

        if self.analysis_mode == 'multiple' and self.M == 1:
            warnings.warn("In analysis mode 'multiple'. There is just a "
                "single dataset, is this as intended?'")

        self.var_names = self._check_var_names(var_names)

    def _check_var_names(self, var_names):
        """Return a single list of variable names, checking that per-dataset
        lists agree."""
        if var_names is None:
            return ["X%d" % i for i in range(self.N)]

        if isinstance(var_names, dict):
            name_lists = [list(var_names[key]) for key in self.datasets
                          if key in var_names]
            if len(name_lists) != self.M:
                raise MismatchedVariableSetError("'var_names' given as "
                    "dictionary must have the same keys as 'data'.")
        elif (len(var_names) > 0
              and all(isinstance(names, (list, tuple))
                      for names in var_names)):
            name_lists = [list(names) for names in var_names]
            if len(name_lists) != self.M:
                raise MismatchedVariableSetError("{} variable lists given "
                    "for {} datasets.".format(len(name_lists), self.M))
        else:
            name_lists = [list(var_names)]

        first = [str(name) for name in name_lists[0]]
        for names in name_lists[1:]:
            if [str(name) for name in names] != first:
                raise MismatchedVariableSetError("Datasets must share the "
                    "same ordered variables, found {} and {}.".format(
                        first, list(names)))
        if len(first) != self.N:
            raise MismatchedVariableSetError("{} variable names given for "
                "{} variables.".format(len(first), self.N))
        if len(set(first)) != len(first):
            raise ValueError("Variable names must be unique, got %s." % first)
        return first

    def concatenate(self, standardize_data=True):
        """Return all datasets stacked row-wise.

        Each dataset is standardized on its own before concatenation so that
        later statistics are free of per-dataset scale.

        Parameters
        ----------
        standardize_data : bool, optional (default: True)
            Whether to standardize every dataset before concatenation.

        Returns
        -------
        data : array of shape (sum_m T_m, N)
        """
        arrays = []
        for key in self.datasets:
            if standardize_data:
                arrays.append(standardize(self.values[key]))
            else:
                arrays.append(np.copy(self.values[key]))
        return np.vstack(arrays)

    def construct_array(self, X, Y, Z, verbosity=0):
        """Constructs array from variables X, Y, Z.

        The datasets are stacked row-wise without further processing.

        Parameters
        ----------
        X, Y, Z : list of ints
            Variable indices.
        verbosity : int, optional (default: 0)
            Level of verbosity.

        Returns
        -------
        array, xyz : Tuple of data array of shape (dim, T) and xyz
            identifier array of shape (dim,) identifying which row in array
            corresponds to X, Y, and Z. For example:: X = [0], Y = [1],
            Z = [2, 3] yields an array of shape (4, T) and
            xyz = [0, 1, 2, 2].
        """
        X, Y, Z = list(X), list(Y), list(Z)
        XYZ = X + Y + Z
        if len(X) == 0 or len(Y) == 0:
            raise ValueError("X and Y must be non-empty, got X = %s, Y = %s."
                             % (X, Y))
        for node in XYZ:
            if not (0 <= node < self.N):
                raise ValueError("Variable index %s out of range for N = %d."
                                 % (node, self.N))
        if len(set(XYZ)) != len(XYZ):
            raise ValueError("X, Y, and Z must not overlap, got X = %s, "
                             "Y = %s, Z = %s." % (X, Y, Z))

        data = np.vstack([self.values[key] for key in self.datasets])
        array = data[:, XYZ].T.copy()
        xyz = np.array([0 for i in X] + [1 for i in Y] + [2 for i in Z])

        if verbosity > 2:
            self.print_array_info(array, X, Y, Z)
        return array, xyz

    def bootstrap_sample(self, random_state):
        """Return a new DataFrame with rows drawn with replacement.

        Every dataset is resampled on its own, keeping its sample size.

        Parameters
        ----------
        random_state : numpy.random.Generator
            Random source for the draw.

        Returns
        -------
        dataframe : DataFrame
        """
        values = {}
        for key in self.datasets:
            T = self.T[key]
            draw = random_state.integers(0, T, T)
            values[key] = self.values[key][draw]
        if self.analysis_mode == 'single':
            return DataFrame(values[self.datasets[0]],
                             var_names=list(self.var_names))
        return DataFrame(values, var_names=list(self.var_names),
                         analysis_mode='multiple')

    def print_array_info(self, array, X, Y, Z):
        indt = " " * 12
        print(indt + "Constructed array of shape %s from" % str(array.shape) +
              "\n" + indt + "X = %s" % str(X) +
              "\n" + indt + "Y = %s" % str(Y) +
              "\n" + indt + "Z = %s" % str(Z))
