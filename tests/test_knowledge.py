"""
Tests for knowledge.py, the store of forbidden and required edges.
"""
import pytest

from skewcausal.knowledge import Knowledge
from skewcausal.exceptions import ContradictoryKnowledgeError

# Pylint settings
# pylint: disable=redefined-outer-name


@pytest.fixture()
def a_knowledge():
    return Knowledge(forbidden=[('Y', 'X'), ('Z', 'X')],
                     required=[('X', 'Z')])


# TEST CONSTRUCTION ############################################################
def test_contradiction_at_construction():
    with pytest.raises(ContradictoryKnowledgeError):
        Knowledge(forbidden=[('X', 'Y')], required=[('X', 'Y')])


def test_contradiction_on_add(a_knowledge):
    with pytest.raises(ContradictoryKnowledgeError):
        a_knowledge.add_required('Y', 'X')
    with pytest.raises(ContradictoryKnowledgeError):
        a_knowledge.add_forbidden('X', 'Z')
    # Contradictory knowledge is a ValueError
    with pytest.raises(ValueError):
        a_knowledge.add_forbidden('X', 'Z')


def test_self_pair_rejected():
    with pytest.raises(ValueError):
        Knowledge(required=[('X', 'X')])


# TEST QUERIES #################################################################
def test_queries(a_knowledge):
    assert a_knowledge.is_forbidden('Y', 'X')
    assert not a_knowledge.is_forbidden('X', 'Y')
    assert a_knowledge.is_required('X', 'Z')
    assert not a_knowledge.is_required('Z', 'X')
    assert len(a_knowledge) == 3


def test_orients(a_knowledge):
    # forbidden(Y, X) implies X --> Y
    assert a_knowledge.orients('X', 'Y')
    assert not a_knowledge.orients('Y', 'X')
    # required(X, Z) implies X --> Z
    assert a_knowledge.orients('X', 'Z')


def test_forbidden_edge_and_removable():
    knowledge = Knowledge(forbidden=[('A', 'B'), ('B', 'A')],
                          required=[('C', 'D')])
    assert knowledge.is_forbidden_edge('A', 'B')
    assert knowledge.is_forbidden_edge('B', 'A')
    assert not knowledge.is_forbidden_edge('C', 'D')
    assert knowledge.no_edge_required('A', 'B')
    assert not knowledge.no_edge_required('D', 'C')


def test_remove(a_knowledge):
    a_knowledge.remove_required('X', 'Z')
    assert not a_knowledge.is_required('X', 'Z')
    # Now allowed since the requirement is gone
    a_knowledge.add_forbidden('X', 'Z')
    assert a_knowledge.is_forbidden('X', 'Z')
    a_knowledge.remove_forbidden('X', 'Z')
    assert not a_knowledge.is_forbidden('X', 'Z')


# TEST SERIALIZATION ###########################################################
def test_dict_and_json(a_knowledge):
    as_dict = a_knowledge.to_dict()
    assert as_dict == {'forbidden': [['Y', 'X'], ['Z', 'X']],
                       'required': [['X', 'Z']]}
    assert Knowledge.from_dict(as_dict) == a_knowledge
    assert Knowledge.from_json(a_knowledge.to_json()) == a_knowledge


def test_from_dict_unknown_key():
    with pytest.raises(ValueError):
        Knowledge.from_dict({'forbidden': [], 'tiers': []})


def test_copy_is_independent(a_knowledge):
    knowledge_copy = a_knowledge.copy()
    knowledge_copy.add_forbidden('A', 'B')
    assert not a_knowledge.is_forbidden('A', 'B')
    assert knowledge_copy != a_knowledge
