"""Skewcausal parameter-bundle entry point for the Fang search."""

# License: GNU General Public License v3.0

import numbers

from .bootstrap import BootstrapFang, EdgeEnsemble
from .fang import Fang
from .knowledge import Knowledge

DEFAULT_PARAMETERS = {'depth': -1,
                      'penaltyDiscount': 1.,
                      'bootstrapSampleSize': 0,
                      'bootstrapEnsemble': int(EdgeEnsemble.HIGHEST),
                      'verbose': False,
                      }


def _is_int(value):
    return (isinstance(value, numbers.Integral)
            and not isinstance(value, bool))


class FangAlgorithm():
    """Fang search configured by a parameter dictionary.

    With bootstrapSampleSize < 1 a single search on the given data is run,
    otherwise bootstrapSampleSize resamples are searched and merged with the
    policy bootstrapEnsemble (0: Preserved, 1: Highest, 2: Majority).

    Parameters
    ----------
    knowledge : Knowledge, optional (default: None)
        Background knowledge keyed by variable names.
    """

    def __init__(self, knowledge=None):
        if knowledge is None:
            knowledge = Knowledge()
        self.knowledge = knowledge

    @staticmethod
    def get_description():
        return "FAS followed by the Fang skew orientation rule"

    @staticmethod
    def get_data_type():
        return "continuous"

    @staticmethod
    def get_parameters():
        """Return the names of the recognized parameters."""
        return list(DEFAULT_PARAMETERS)

    @staticmethod
    def check_parameters(parameters):
        """Return parameters completed by defaults, after validation.

        Raises
        ------
        ValueError
            For unknown keys or values of the wrong type or range.
        """
        if parameters is None:
            parameters = {}
        unknown = set(parameters) - set(DEFAULT_PARAMETERS)
        if unknown:
            raise ValueError("Unknown parameters %s, must be among %s."
                             % (sorted(unknown), list(DEFAULT_PARAMETERS)))
        _params = dict(DEFAULT_PARAMETERS)
        _params.update(parameters)

        if not _is_int(_params['depth']) or _params['depth'] < -1:
            raise ValueError("depth must be an integer >= -1, got %s"
                             % str(_params['depth']))
        penalty = _params['penaltyDiscount']
        if (not isinstance(penalty, numbers.Real) or isinstance(penalty, bool)
                or penalty <= 0):
            raise ValueError("penaltyDiscount must be a positive number, got"
                             " %s" % str(penalty))
        if not _is_int(_params['bootstrapSampleSize']):
            raise ValueError("bootstrapSampleSize must be an integer, got %s"
                             % str(_params['bootstrapSampleSize']))
        if (not _is_int(_params['bootstrapEnsemble'])
                or _params['bootstrapEnsemble'] not in [0, 1, 2]):
            raise ValueError("bootstrapEnsemble must be 0, 1 or 2, got %s"
                             % str(_params['bootstrapEnsemble']))
        if not isinstance(_params['verbose'], bool):
            raise ValueError("verbose must be True or False, got %s"
                             % str(_params['verbose']))
        return _params

    def search(self, dataframe, parameters=None, seed=None, n_jobs=1):
        """Runs the search.

        Parameters
        ----------
        dataframe : data object
            Skewcausal DataFrame with one or multiple datasets.
        parameters : dict, optional (default: None)
            Parameter dictionary, see get_parameters(). Missing keys take
            their defaults.
        seed : int, optional (default: None)
            Seed of the bootstrap resampling.
        n_jobs : int, optional (default: 1)
            Number of workers.

        Returns
        -------
        graph : Graph
            Output graph.
        elapsed : float
            Wall-clock time in seconds.
        """
        params = self.check_parameters(parameters)
        verbosity = 1 if params['verbose'] else 0

        if params['bootstrapSampleSize'] < 1:
            fang = Fang(dataframe,
                        knowledge=self.knowledge,
                        penalty_discount=params['penaltyDiscount'],
                        verbosity=verbosity)
            results = fang.run_fang(depth=params['depth'], n_jobs=n_jobs)
        else:
            bootstrap = BootstrapFang(dataframe,
                                      knowledge=self.knowledge,
                                      penalty_discount=params['penaltyDiscount'],
                                      verbosity=verbosity)
            results = bootstrap.run_bootstrap(
                boot_samples=params['bootstrapSampleSize'],
                ensemble=params['bootstrapEnsemble'],
                depth=params['depth'],
                seed=seed,
                n_jobs=n_jobs)

        return {'graph': results['graph'],
                'elapsed': results['elapsed'],
                }
