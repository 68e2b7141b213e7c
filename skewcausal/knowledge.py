"""Skewcausal background knowledge of forbidden and required edges."""

# License: GNU General Public License v3.0

import json
from copy import deepcopy

from .exceptions import ContradictoryKnowledgeError


class Knowledge():
    r"""Forbidden and required directed edges keyed by variable name.

    Knowledge is stored as two sets of ordered name pairs and is never bound
    to a particular dataset. Searches look pairs up by variable name, so the
    same object can be reused across bootstrap resamples that create new
    data arrays.

    Parameters
    ----------
    forbidden : iterable of tuples, optional (default: None)
        Ordered pairs (from, to) of variable names. An edge from --> to may
        not appear in the output.
    required : iterable of tuples, optional (default: None)
        Ordered pairs (from, to) of variable names. An edge from --> to must
        appear in the output.

    Raises
    ------
    ContradictoryKnowledgeError
        If an ordered pair is both forbidden and required.
    """

    def __init__(self, forbidden=None, required=None):
        self.forbidden = set()
        self.required = set()
        if forbidden is not None:
            for var_from, var_to in forbidden:
                self.add_forbidden(var_from, var_to)
        if required is not None:
            for var_from, var_to in required:
                self.add_required(var_from, var_to)

    def __repr__(self):
        return "Knowledge(forbidden=%s, required=%s)" % (
            sorted(self.forbidden), sorted(self.required))

    def __eq__(self, other):
        if not isinstance(other, Knowledge):
            return NotImplemented
        return (self.forbidden == other.forbidden
                and self.required == other.required)

    def __len__(self):
        return len(self.forbidden) + len(self.required)

    @staticmethod
    def _check_pair(var_from, var_to):
        if var_from == var_to:
            raise ValueError("Knowledge pair (%s, %s) is a self-loop."
                             % (var_from, var_to))
        return (str(var_from), str(var_to))

    def add_forbidden(self, var_from, var_to):
        """Forbid the edge var_from --> var_to."""
        pair = self._check_pair(var_from, var_to)
        if pair in self.required:
            raise ContradictoryKnowledgeError(*pair)
        self.forbidden.add(pair)

    def add_required(self, var_from, var_to):
        """Require the edge var_from --> var_to."""
        pair = self._check_pair(var_from, var_to)
        if pair in self.forbidden:
            raise ContradictoryKnowledgeError(*pair)
        self.required.add(pair)

    def remove_forbidden(self, var_from, var_to):
        self.forbidden.discard((str(var_from), str(var_to)))

    def remove_required(self, var_from, var_to):
        self.required.discard((str(var_from), str(var_to)))

    def is_forbidden(self, var_from, var_to):
        return (str(var_from), str(var_to)) in self.forbidden

    def is_required(self, var_from, var_to):
        return (str(var_from), str(var_to)) in self.required

    def is_forbidden_edge(self, var_a, var_b):
        """Return True if both directions between var_a and var_b are
        forbidden, i.e., no edge at all may exist."""
        return (self.is_forbidden(var_a, var_b)
                and self.is_forbidden(var_b, var_a))

    def no_edge_required(self, var_a, var_b):
        """Return True if neither direction between var_a and var_b is
        required, i.e., the adjacency may be removed."""
        return not (self.is_required(var_a, var_b)
                    or self.is_required(var_b, var_a))

    def orients(self, var_from, var_to):
        """Return True if knowledge implies var_from --> var_to.

        This is the case if var_to --> var_from is forbidden or
        var_from --> var_to is required.
        """
        return (self.is_forbidden(var_to, var_from)
                or self.is_required(var_from, var_to))

    def copy(self):
        return deepcopy(self)

    def to_dict(self):
        """Return a plain dictionary with sorted lists of name pairs."""
        return {'forbidden': [list(pair) for pair in sorted(self.forbidden)],
                'required': [list(pair) for pair in sorted(self.required)]}

    @classmethod
    def from_dict(cls, knowledge_dict):
        unknown = set(knowledge_dict) - set(['forbidden', 'required'])
        if unknown:
            raise ValueError("Unknown knowledge keys %s, must be 'forbidden'"
                             " or 'required'." % sorted(unknown))
        return cls(forbidden=[tuple(p) for p in
                              knowledge_dict.get('forbidden', [])],
                   required=[tuple(p) for p in
                             knowledge_dict.get('required', [])])

    def to_json(self):
        return json.dumps(self.to_dict(), sort_keys=True)

    @classmethod
    def from_json(cls, json_str):
        return cls.from_dict(json.loads(json_str))
