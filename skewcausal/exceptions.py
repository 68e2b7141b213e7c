"""Skewcausal error types."""

# License: GNU General Public License v3.0


class DegenerateInputError(ValueError):
    """Raised when a test statistic is undefined for the given variables.

    Typical causes are constant columns, a singular conditioning system or a
    statistic that evaluates to NaN. The adjacency search treats the tested
    pair as dependent and keeps the edge.
    """


class ContradictoryKnowledgeError(ValueError):
    """Raised when the same ordered pair is both required and forbidden."""

    def __init__(self, var_from, var_to):
        self.var_from = var_from
        self.var_to = var_to
        super().__init__("Edge %s --> %s is both required and forbidden."
                         % (var_from, var_to))


class MismatchedVariableSetError(ValueError):
    """Raised when datasets do not share the same ordered variable list."""
