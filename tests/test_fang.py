"""
Tests for fang.py, the full adjacency search plus orientation.
"""
import numpy as np
import pytest

from skewcausal.data_processing import DataFrame
from skewcausal.fang import Fang
from skewcausal.graphs import KNOWLEDGE
from skewcausal.independence_tests.parcorr import ParCorr
from skewcausal.independence_tests.score_bic import ScoreBIC
from skewcausal.independence_tests.oracle_conditional_independence import \
    OracleCI
from skewcausal.knowledge import Knowledge

# Pylint settings
# pylint: disable=redefined-outer-name

# Define the verbosity at the global scope
VERBOSITY = 0


@pytest.fixture()
def skewed_dataframe():
    # X0 --> X1 --> X2, X3 --> X2 with skewed noise
    rng = np.random.default_rng(17)
    T = 800
    data = rng.exponential(size=(T, 4))
    data[:, 1] += 0.8 * data[:, 0]
    data[:, 2] += 0.7 * data[:, 1] + 0.6 * data[:, 3]
    return DataFrame(data, var_names=['A', 'B', 'C', 'D'])


def _adjacent_oracle():
    return OracleCI(links={0: [], 1: [0]})


# TEST ORIENTATION RULES THROUGH THE SEARCH ####################################
def test_sign_disagreement_two_cycle():
    # Zero mean data; standardization keeps all covariance signs
    data = np.array([[1., 1.], [2., 0.5], [-1., -1.], [-2., -0.5]])
    fang = Fang(DataFrame(data, var_names=['X', 'Y']),
                cond_ind_test=_adjacent_oracle(), verbosity=VERBOSITY)
    graph = fang.run_fang()['graph']
    assert graph.get_link(0, 1) == '<->'
    assert graph.get_tag(0, 1) == 'sign_disagreement'
    assert graph.has_arc(0, 1) and graph.has_arc(1, 0)


def test_sign_disagreement_overridden_by_knowledge():
    data = np.array([[1., 1.], [2., 0.5], [-1., -1.], [-2., -0.5]])
    knowledge = Knowledge(required=[('X', 'Y')])
    fang = Fang(DataFrame(data, var_names=['X', 'Y']),
                cond_ind_test=_adjacent_oracle(), knowledge=knowledge)
    graph = fang.run_fang()['graph']
    assert graph.get_link(0, 1) == '-->'
    assert graph.get_tag(0, 1) == KNOWLEDGE


def test_strong_asymmetry_two_cycle():
    x = np.array([-2., -1., 1., 2.])
    fang = Fang(DataFrame(np.column_stack([x, x])),
                cond_ind_test=_adjacent_oracle())
    graph = fang.run_fang()['graph']
    assert graph.get_link(0, 1) == '<->'
    assert graph.get_tag(0, 1) == 'strong_asymmetry'


def test_symmetric_tie_undirected():
    data = np.array([[1., 1.], [-1., 1.], [1., -1.], [-1., -1.]])
    fang = Fang(DataFrame(data), cond_ind_test=_adjacent_oracle())
    graph = fang.run_fang()['graph']
    assert graph.get_link(0, 1) == 'o-o'


# TEST DEFAULT SCORE TEST #######################################################
def test_default_test_uses_truncated_data(skewed_dataframe):
    fang = Fang(skewed_dataframe, penalty_discount=2.)
    data = skewed_dataframe.concatenate()
    test_dataframe, cond_ind_test = fang._get_test_dataframe(data)
    assert isinstance(cond_ind_test, ScoreBIC)
    assert cond_ind_test.penalty_discount == 2.
    assert np.all(test_dataframe.values[0] >= 0.)
    assert np.all((test_dataframe.values[0] == 0.) == (data <= 0.))
    # A custom test works on the untruncated data
    fang = Fang(skewed_dataframe, cond_ind_test=ParCorr())
    test_dataframe, cond_ind_test = fang._get_test_dataframe(data)
    assert isinstance(cond_ind_test, ParCorr)
    assert np.any(test_dataframe.values[0] < 0.)


def test_default_search(skewed_dataframe):
    fang = Fang(skewed_dataframe, penalty_discount=2., verbosity=VERBOSITY)
    results = fang.run_fang()
    skeleton = results['skeleton']
    assert skeleton.is_adjacent(0, 1)
    assert skeleton.is_adjacent(1, 2)
    assert results['elapsed'] >= 0.
    assert fang.elapsed == results['elapsed']
    # Every skeleton adjacency is oriented
    for i, j, _ in skeleton.edges():
        assert results['graph'].is_adjacent(i, j)


def test_independent_data_empty_graph():
    rng = np.random.default_rng(4)
    data = rng.normal(size=(500, 2))
    fang = Fang(DataFrame(data), penalty_discount=4.)
    results = fang.run_fang()
    assert results['skeleton'].num_edges() == 0
    assert results['graph'].num_edges() == 0


# TEST PROPERTIES ###############################################################
def test_knowledge_absolutism(skewed_dataframe):
    knowledge = Knowledge(forbidden=[('B', 'A'), ('C', 'D')],
                          required=[('D', 'A')])
    fang = Fang(skewed_dataframe, knowledge=knowledge, penalty_discount=2.)
    graph = fang.run_fang()['graph']
    # required(D, A)
    assert graph.has_arc(3, 0)
    # forbidden(B, A) and forbidden(C, D)
    assert not graph.has_arc(1, 0)
    assert not graph.has_arc(2, 3)


def test_no_self_loops_and_exclusivity(skewed_dataframe):
    graph = Fang(skewed_dataframe).run_fang()['graph']
    array = graph.to_array()
    assert all(array[i, i] == '' for i in range(4))
    for i, j, link in graph.edges():
        assert link in ['o-o', '-->', '<--', '<->']


def test_parallel_equals_sequential(skewed_dataframe):
    sequential = Fang(skewed_dataframe).run_fang(n_jobs=1)
    parallel = Fang(skewed_dataframe).run_fang(n_jobs=2)
    assert sequential['graph'] == parallel['graph']
    for i, j, _ in sequential['graph'].edges():
        assert (sequential['graph'].get_tag(i, j)
                == parallel['graph'].get_tag(i, j))
    assert sequential['sepsets'] == parallel['sepsets']


def test_multiple_datasets():
    rng = np.random.default_rng(9)
    datasets = []
    for scale in [1., 10.]:
        x = rng.exponential(size=400)
        y = 0.9 * x + rng.exponential(size=400)
        datasets.append(scale * np.column_stack([x, y]) + scale)
    dataframe = DataFrame(datasets, analysis_mode='multiple')
    results = Fang(dataframe).run_fang()
    assert results['skeleton'].is_adjacent(0, 1)


# TEST INPUT CHECKS #############################################################
def test_invalid_arguments(skewed_dataframe):
    with pytest.raises(ValueError):
        Fang(skewed_dataframe, cond_ind_test=ParCorr)
    with pytest.raises(ValueError):
        Fang(skewed_dataframe, penalty_discount=0.)
    with pytest.raises(TypeError):
        Fang(skewed_dataframe, knowledge={'required': []})
