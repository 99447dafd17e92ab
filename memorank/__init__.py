"""
Memorank - rank a fixed set of items by memorability from pairwise and
recognition judgments.
"""

from .core import (
    INITIAL_RATING,
    K_FACTOR,
    InsufficientPopulation,
    InvalidJudgment,
    Item,
    Population,
    RankerError,
    StoreUnavailable,
    apply_result,
    bias_factor,
    expected_score,
    next_group,
    next_pair,
)
from .session import GroupJudgment, Mode, PairJudgment, RankingSession, SessionState
from .store import CatalogLoader, DurableStore, JsonFileStore, MemoryStore, StaticCatalog
from .rankings import RankingSummary, bias_stage, ranking_summary, search_items, sort_items

__all__ = [
    "INITIAL_RATING",
    "K_FACTOR",
    "InsufficientPopulation",
    "InvalidJudgment",
    "Item",
    "Population",
    "RankerError",
    "StoreUnavailable",
    "apply_result",
    "bias_factor",
    "expected_score",
    "next_group",
    "next_pair",
    "GroupJudgment",
    "Mode",
    "PairJudgment",
    "RankingSession",
    "SessionState",
    "CatalogLoader",
    "DurableStore",
    "JsonFileStore",
    "MemoryStore",
    "StaticCatalog",
    "RankingSummary",
    "bias_stage",
    "ranking_summary",
    "search_items",
    "sort_items",
]
