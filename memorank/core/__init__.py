"""
Core rating engine: records, the Elo update and the sampling policies.
"""

from .errors import InsufficientPopulation, InvalidJudgment, RankerError, StoreUnavailable
from .population import INITIAL_RATING, Item, Population
from .elo_rating import K_FACTOR, apply_result, expected_score, rate_pair, round_rating, update_elo
from .sampling import bias_factor, median_rating, next_group, next_pair, selection_weights, weighted_sample
