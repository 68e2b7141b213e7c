"""
Tests for algorithms.py, the parameter dictionary interface.
"""
import numpy as np
import pytest

from skewcausal.algorithms import FangAlgorithm
from skewcausal.data_processing import DataFrame
from skewcausal.fang import Fang
from skewcausal.knowledge import Knowledge

# Pylint settings
# pylint: disable=redefined-outer-name


@pytest.fixture()
def a_dataframe():
    rng = np.random.default_rng(23)
    T = 300
    data = rng.exponential(size=(T, 3))
    data[:, 1] += 0.9 * data[:, 0]
    data[:, 2] += 0.8 * data[:, 1]
    return DataFrame(data, var_names=['X', 'Y', 'Z'])


def test_parameters():
    assert FangAlgorithm.get_parameters() == [
        'depth', 'penaltyDiscount', 'bootstrapSampleSize',
        'bootstrapEnsemble', 'verbose']
    params = FangAlgorithm.check_parameters({'depth': 2})
    assert params == {'depth': 2, 'penaltyDiscount': 1.,
                      'bootstrapSampleSize': 0, 'bootstrapEnsemble': 1,
                      'verbose': False}
    assert "FAS" in FangAlgorithm.get_description()
    assert FangAlgorithm.get_data_type() == "continuous"


@pytest.mark.parametrize("parameters", [
    {'alpha': 0.05},
    {'depth': -2},
    {'depth': 1.5},
    {'penaltyDiscount': 0.},
    {'penaltyDiscount': 'high'},
    {'bootstrapSampleSize': 2.},
    {'bootstrapEnsemble': 3},
    {'verbose': 1}])
def test_invalid_parameters(parameters):
    with pytest.raises(ValueError):
        FangAlgorithm.check_parameters(parameters)


def test_plain_search_matches_fang(a_dataframe):
    knowledge = Knowledge(forbidden=[('Z', 'Y')])
    algorithm = FangAlgorithm(knowledge=knowledge)
    results = algorithm.search(a_dataframe, {'depth': -1,
                                             'penaltyDiscount': 2.})
    expected = Fang(a_dataframe, knowledge=knowledge,
                    penalty_discount=2.).run_fang(depth=-1)
    assert results['graph'] == expected['graph']
    assert results['elapsed'] >= 0.
    assert not results['graph'].has_arc(2, 1)


def test_bootstrap_search(a_dataframe):
    algorithm = FangAlgorithm()
    parameters = {'bootstrapSampleSize': 3, 'bootstrapEnsemble': 2}
    first = algorithm.search(a_dataframe, parameters, seed=2)
    second = algorithm.search(a_dataframe, parameters, seed=2)
    assert first['graph'] == second['graph']
    assert set(first) == {'graph', 'elapsed'}


def test_verbose_search(a_dataframe, capsys):
    FangAlgorithm().search(a_dataframe, {'verbose': True, 'depth': 0})
    captured = capsys.readouterr()
    assert "Fang" in captured.out
