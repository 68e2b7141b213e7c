"""
Tests for data_processing.py, single and multiple dataset handling.
"""
import numpy as np
from numpy.testing import assert_allclose, assert_equal
import pytest

from skewcausal.data_processing import DataFrame, standardize
from skewcausal.exceptions import MismatchedVariableSetError

# Pylint settings
# pylint: disable=redefined-outer-name


@pytest.fixture()
def two_datasets():
    rng = np.random.default_rng(7)
    return {'a': rng.normal(3., 2., size=(50, 3)),
            'b': rng.exponential(5., size=(80, 3))}


# TEST STANDARDIZATION #########################################################
def test_standardize():
    rng = np.random.default_rng(1)
    data = rng.normal(5., 3., size=(200, 2))
    result = standardize(data)
    assert_allclose(result.mean(axis=0), 0., atol=1e-12)
    assert_allclose(result.std(axis=0), 1., atol=1e-12)
    # Input is not modified
    assert data.mean() > 1.


def test_standardize_constant_column():
    data = np.column_stack([np.ones(10), np.arange(10.)])
    with pytest.warns(UserWarning):
        result = standardize(data)
    assert_equal(result[:, 0], 0.)


# TEST CONSTRUCTION ############################################################
def test_single_mode():
    data = np.arange(12.).reshape(4, 3)
    dataframe = DataFrame(data, var_names=['A', 'B', 'C'])
    assert dataframe.M == 1
    assert dataframe.N == 3
    assert dataframe.T == {0: 4}
    assert dataframe.var_names == ['A', 'B', 'C']


def test_default_names():
    dataframe = DataFrame(np.zeros((5, 2)))
    assert dataframe.var_names == ['X0', 'X1']


def test_nans_rejected():
    data = np.ones((5, 2))
    data[2, 1] = np.nan
    with pytest.raises(ValueError):
        DataFrame(data)


def test_multiple_mode(two_datasets):
    dataframe = DataFrame(two_datasets, analysis_mode='multiple')
    assert dataframe.M == 2
    assert dataframe.T == {'a': 50, 'b': 80}
    assert dataframe.N == 3


def test_mismatched_number_of_variables():
    data = [np.zeros((10, 3)), np.zeros((10, 2))]
    with pytest.raises(MismatchedVariableSetError):
        DataFrame(data, analysis_mode='multiple')


def test_mismatched_variable_names(two_datasets):
    with pytest.raises(MismatchedVariableSetError):
        DataFrame(two_datasets, analysis_mode='multiple',
                  var_names={'a': ['X', 'Y', 'Z'], 'b': ['X', 'Z', 'Y']})
    # Identical lists are accepted
    dataframe = DataFrame(two_datasets, analysis_mode='multiple',
                          var_names=[['X', 'Y', 'Z'], ['X', 'Y', 'Z']])
    assert dataframe.var_names == ['X', 'Y', 'Z']


def test_wrong_number_of_names():
    with pytest.raises(MismatchedVariableSetError):
        DataFrame(np.zeros((5, 2)), var_names=['A', 'B', 'C'])


# TEST ARRAYS ##################################################################
def test_concatenate(two_datasets):
    dataframe = DataFrame(two_datasets, analysis_mode='multiple')
    data = dataframe.concatenate()
    assert data.shape == (130, 3)
    # Each dataset is standardized on its own
    assert_allclose(data[:50].mean(axis=0), 0., atol=1e-12)
    assert_allclose(data[50:].std(axis=0), 1., atol=1e-12)
    raw = dataframe.concatenate(standardize_data=False)
    assert_equal(raw[:50], two_datasets['a'])


def test_construct_array():
    data = np.arange(20.).reshape(5, 4)
    dataframe = DataFrame(data)
    array, xyz = dataframe.construct_array(X=[2], Y=[0], Z=[3, 1])
    assert_equal(array, data[:, [2, 0, 3, 1]].T)
    assert_equal(xyz, np.array([0, 1, 2, 2]))


@pytest.mark.parametrize("X, Y, Z", [
    ([], [1], []),
    ([0], [0], []),
    ([0], [1], [1]),
    ([0], [4], [])])
def test_construct_array_invalid(X, Y, Z):
    dataframe = DataFrame(np.arange(20.).reshape(5, 4))
    with pytest.raises(ValueError):
        dataframe.construct_array(X=X, Y=Y, Z=Z)


def test_bootstrap_sample(two_datasets):
    dataframe = DataFrame(two_datasets, analysis_mode='multiple',
                          var_names=['X', 'Y', 'Z'])
    sample = dataframe.bootstrap_sample(np.random.default_rng(3))
    assert sample.T == dataframe.T
    assert sample.var_names == ['X', 'Y', 'Z']
    # Rows are drawn from the matching dataset
    original_rows = set(map(tuple, two_datasets['a']))
    assert all(tuple(row) in original_rows for row in sample.values['a'])
    # Same random state gives the same draw
    again = dataframe.bootstrap_sample(np.random.default_rng(3))
    assert_equal(again.values['b'], sample.values['b'])
