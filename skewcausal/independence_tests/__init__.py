from .independence_tests_base import CondIndTest
from .parcorr import ParCorr
from .score_bic import ScoreBIC
from .oracle_conditional_independence import OracleCI
