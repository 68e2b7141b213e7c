"""Skewcausal orientation by sign-partitioned moments."""

# License: GNU General Public License v3.0

import numpy as np
from joblib import Parallel, delayed

from .exceptions import DegenerateInputError
from .graphs import (Graph, UNDIRECTED, DIRECTED, REVERSED, TWO_CYCLE,
                     KNOWLEDGE, SIGN_DISAGREEMENT, STRONG_ASYMMETRY)
from .partial_moments import pair_statistics

# Thresholds on the asymmetric ratios q1, q2
CANDIDATE_THRESHOLD = 0.2
ASYMMETRY_THRESHOLD = 0.5


def is_candidate(q1, q2):
    """Return True if a non-adjacent pair is added back for orientation."""
    return ((abs(q1) < CANDIDATE_THRESHOLD or abs(q2) < CANDIDATE_THRESHOLD)
            and abs(q1 - q2) > CANDIDATE_THRESHOLD)


def orient_pair(x, y, adjacent,
                x_to_y_known=False,
                y_to_x_known=False,
                both_forbidden=False):
    r"""Decide the edge between X and Y.

    Pairs that are adjacent in the skeleton or pass the candidate heuristic
    are oriented by the first matching rule:

    1. Knowledge implies X --> Y (or Y --> X).
    2. The full covariance c disagrees in sign with the x-partitioned
       covariances (c1 on x > 0, c3 on x < 0) and with the y-partitioned
       ones (c2 on y > 0, c4 on y < 0): two-cycle tagged
       'sign_disagreement'.
    3. :math:`|q_1| > 0.5` and :math:`|q_2| > 0.5`: two-cycle tagged
       'strong_asymmetry'.
    4. :math:`R = c (s_{xy|x>0} - s_{xy|y>0})`: X --> Y if R > 0,
       Y --> X if R < 0, undirected otherwise.

    Parameters
    ----------
    x, y : array-like
        Standardized data columns of X and Y.
    adjacent : bool
        Whether X and Y are adjacent in the skeleton.
    x_to_y_known, y_to_x_known : bool, optional (default: False)
        Whether knowledge implies X --> Y or Y --> X.
    both_forbidden : bool, optional (default: False)
        Whether both directions are forbidden. Then no edge is returned.

    Returns
    -------
    result : tuple or None
        (link, tag) as seen from X, or None if the pair gets no edge. If the
        statistics are degenerate, adjacent pairs stay undirected and
        non-adjacent pairs get no edge.
    """
    if both_forbidden:
        return None

    try:
        stats = pair_statistics(x, y)
    except DegenerateInputError:
        if not adjacent:
            return None
        stats = None

    if not adjacent and not is_candidate(stats['q1'], stats['q2']):
        return None

    if x_to_y_known and y_to_x_known:
        return (TWO_CYCLE, KNOWLEDGE)
    if x_to_y_known:
        return (DIRECTED, KNOWLEDGE)
    if y_to_x_known:
        return (REVERSED, KNOWLEDGE)

    if stats is None:
        return (UNDIRECTED, None)

    sign = np.sign(stats['cov'])
    x_consistent = (sign == np.sign(stats['c1'])
                    and sign == np.sign(stats['c3']))
    y_consistent = (sign == np.sign(stats['c2'])
                    and sign == np.sign(stats['c4']))
    if not x_consistent and not y_consistent:
        return (TWO_CYCLE, SIGN_DISAGREEMENT)

    if (abs(stats['q1']) > ASYMMETRY_THRESHOLD
            and abs(stats['q2']) > ASYMMETRY_THRESHOLD):
        return (TWO_CYCLE, STRONG_ASYMMETRY)

    R = stats['cov'] * (stats['sxyxp'] - stats['sxyyp'])
    if R > 0:
        return (DIRECTED, None)
    elif R < 0:
        return (REVERSED, None)
    return (UNDIRECTED, None)


def orient_skeleton(data, skeleton, knowledge, n_jobs=1, verbosity=0):
    """Orient all pairs of a skeleton into a new graph.

    Every pair i < j is evaluated with orient_pair(). Pairs are processed in
    parallel threads and the results are written in pair order, hence the
    output does not depend on n_jobs. Edges of the skeleton that are tagged
    'knowledge' are kept as they are.

    Parameters
    ----------
    data : array-like
        Standardized data of shape (T, N) with columns in the order of
        skeleton.var_names.
    skeleton : Graph
        Output of the adjacency search.
    knowledge : Knowledge
        Background knowledge keyed by variable name.
    n_jobs : int, optional (default: 1)
        Number of threads.
    verbosity : int, optional (default: 0)
        Level of verbosity.

    Returns
    -------
    graph : Graph
    """
    data = np.asarray(data, dtype='float')
    names = skeleton.var_names
    N = skeleton.N
    if data.ndim != 2 or data.shape[1] != N:
        raise ValueError("data must be of shape (T, %d), got %s."
                         % (N, str(data.shape)))

    if verbosity > 0:
        print("\n##\n## Step 2: Orientation by partial moments\n##")

    pairs = [(i, j) for i in range(N) for j in range(i + 1, N)]

    def _orient(i, j):
        if skeleton.get_tag(i, j) == KNOWLEDGE:
            return (skeleton.get_link(i, j), KNOWLEDGE)
        return orient_pair(data[:, i], data[:, j],
                           adjacent=skeleton.is_adjacent(i, j),
                           x_to_y_known=knowledge.orients(names[i], names[j]),
                           y_to_x_known=knowledge.orients(names[j], names[i]),
                           both_forbidden=knowledge.is_forbidden_edge(
                               names[i], names[j]))

    results = Parallel(n_jobs=n_jobs, prefer="threads")(
        delayed(_orient)(i, j) for (i, j) in pairs)

    graph = Graph(names)
    for (i, j), result in zip(pairs, results):
        if result is None:
            continue
        link, tag = result
        graph.set_link(i, j, link, tag=tag)
        if verbosity > 1:
            if tag is None:
                print("    %s %s %s" % (names[i], link, names[j]))
            else:
                print("    %s %s %s (%s)" % (names[i], link, names[j], tag))

    if verbosity > 0:
        print("\nOriented graph has %d edge(s)." % graph.num_edges())
    return graph
