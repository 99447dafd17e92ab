"""
Read-only views over a rated population: ordering, search and summary stats.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional

from .core.population import Item
from .core.sampling import bias_factor

# key -> (sort key, descending)
SORT_KEYS = {
    "rating": (lambda item: item.rating, True),
    "wins": (lambda item: item.wins, True),
    "losses": (lambda item: item.losses, True),
    "matches": (lambda item: item.matches, True),
    "name": (lambda item: item.display_name.lower(), False),
    "ordinal": (lambda item: (item.ordinal is None, item.ordinal or 0), False),
}


@dataclass
class RankingSummary:
    """Headline numbers for a population."""

    item_count: int
    total_judgments: int
    least_memorable: Optional[Item]
    lowest_rating: int
    highest_rating: int

    @property
    def rating_spread(self) -> int:
        return self.highest_rating - self.lowest_rating


def sort_items(items: Iterable[Item], sort_by: str = "rating") -> List[Item]:
    """
    Order items for a ranking table.
    
    Counters and rating sort highest first, name and ordinal lowest first.
    Ties keep their incoming order.
    
    Raises:
        ValueError: If `sort_by` is not a known key
    """
    try:
        key, descending = SORT_KEYS[sort_by]
    except KeyError:
        raise ValueError(f"Unknown sort key: {sort_by!r}") from None
    return sorted(items, key=key, reverse=descending)


def search_items(items: Iterable[Item], term: str) -> List[Item]:
    """Items whose name contains `term` (any case) or whose ordinal contains it."""
    if not term:
        return list(items)
    needle = term.lower()
    return [
        item for item in items
        if needle in item.display_name.lower()
        or (item.ordinal is not None and term in str(item.ordinal))
    ]


def ranking_summary(items: Iterable[Item], total_judgments: int) -> RankingSummary:
    """
    Summarize a population.
    
    The least memorable item is only reported once at least one judgment
    has been made, since every rating is equal before that.
    """
    ordered = sorted(items, key=lambda item: item.rating)
    if not ordered:
        raise ValueError("Cannot summarize an empty population")
    
    return RankingSummary(
        item_count=len(ordered),
        total_judgments=total_judgments,
        least_memorable=ordered[0] if total_judgments > 0 else None,
        lowest_rating=ordered[0].rating,
        highest_rating=ordered[-1].rating,
    )


def bias_stage(total_judgments: int) -> str:
    """Name the current phase of the group sampler's bias schedule."""
    bias = bias_factor(total_judgments)
    if bias < 0.2:
        return "random"
    elif bias < 0.5:
        return "slight"
    elif bias < 0.8:
        return "focused"
    return "hunting"
