"""
Sampling policies that choose which items to offer for judgment.

Pairs are always drawn uniformly. Groups start uniform and drift towards
low-rated items as judgments accumulate: the bias factor ramps linearly
from 0 to 1 over the first BIAS_RAMP_JUDGMENTS judgments.

All functions take a numpy Generator so that callers control seeding.
"""

from typing import Iterable, List, Sequence, Tuple

import numpy as np

from .errors import InsufficientPopulation
from .population import Item

BIAS_RAMP_JUDGMENTS = 500
UNIFORM_BIAS_THRESHOLD = 0.2
DEFAULT_GROUP_SIZE = 5

# Minimum bias weight, so far-above-median items are never excluded outright
MIN_BIAS_WEIGHT = 0.1
RATING_SPREAD = 200.0
BIAS_STRENGTH = 3.0


def bias_factor(total_judgments: int, ramp: int = BIAS_RAMP_JUDGMENTS) -> float:
    """
    Strength of the low-rating bias for a given amount of evidence.
    
    Args:
        total_judgments: Judgments collected so far
        ramp: Number of judgments after which the bias is at full strength
        
    Returns:
        A value between 0 and 1
    """
    if total_judgments < 0:
        raise ValueError("total_judgments must be non-negative")
    return min(total_judgments / float(ramp), 1.0)


def median_rating(items: Sequence[Item]) -> int:
    """
    Rating of the middle item when sorted ascending by rating.
    
    The sort is stable, and for an even number of items the upper-middle
    element (index len // 2) is used.
    """
    if not items:
        raise InsufficientPopulation(1, 0)
    ordered = sorted(items, key=lambda item: item.rating)
    return ordered[len(ordered) // 2].rating


def selection_weights(items: Sequence[Item], bias: float) -> np.ndarray:
    """
    Compute the draw weight of every item for a biased group sample.
    
    Args:
        items: Candidate items
        bias: Current bias factor (0 to 1)
        
    Returns:
        Array of positive weights aligned with `items`
    """
    median = median_rating(items)
    ratings = np.array([item.rating for item in items], dtype=float)
    rating_diff = median - ratings
    bias_weight = np.maximum(MIN_BIAS_WEIGHT, 1.0 + (rating_diff / RATING_SPREAD) * bias)
    return 1.0 + bias_weight * bias * BIAS_STRENGTH


def weighted_sample(
    items: Sequence[Item],
    weights: Iterable[float],
    count: int,
    rng: np.random.Generator,
) -> List[Item]:
    """
    Draw `count` distinct items, each draw proportional to weight.
    
    Each draw picks a point on the cumulative weight of the remaining pool,
    then removes the chosen item and its weight before the next draw.
    
    Args:
        items: Candidate items
        weights: Positive weight per item
        count: Number of items to draw
        rng: Random source
        
    Returns:
        The drawn items, in draw order
    """
    pool = list(items)
    remaining = np.asarray(list(weights), dtype=float)
    if len(remaining) != len(pool):
        raise ValueError("weights must have one entry per item")
    if count > len(pool):
        raise InsufficientPopulation(count, len(pool))
    
    selected = []
    for _ in range(count):
        cumulative = np.cumsum(remaining)
        point = rng.random() * cumulative[-1]
        index = int(np.searchsorted(cumulative, point, side="right"))
        # Guard against point landing exactly on the total
        index = min(index, len(pool) - 1)
        
        selected.append(pool.pop(index))
        remaining = np.delete(remaining, index)
    
    return selected


def next_pair(population: Iterable[Item], rng: np.random.Generator) -> Tuple[Item, Item]:
    """
    Pick two distinct items uniformly at random.
    
    Args:
        population: Items to choose from
        rng: Random source
        
    Returns:
        A (left, right) pair of distinct items
        
    Raises:
        InsufficientPopulation: If fewer than two items are available
    """
    items = list(population)
    if len(items) < 2:
        raise InsufficientPopulation(2, len(items))
    
    left, right = rng.choice(len(items), size=2, replace=False)
    return items[int(left)], items[int(right)]


def next_group(
    population: Iterable[Item],
    total_judgments: int,
    count: int,
    rng: np.random.Generator,
) -> List[Item]:
    """
    Pick `count` distinct items for a recognition round.
    
    Below UNIFORM_BIAS_THRESHOLD the draw is uniform. Above it, items rated
    below the median get proportionally more weight, scaled by the bias factor.
    
    Args:
        population: Items to choose from
        total_judgments: Judgments collected so far, drives the bias factor
        count: Group size
        rng: Random source
        
    Returns:
        List of `count` distinct items
        
    Raises:
        InsufficientPopulation: If count exceeds the population size
    """
    if count < 1:
        raise ValueError("count must be at least 1")
    
    items = list(population)
    if count > len(items):
        raise InsufficientPopulation(count, len(items))
    
    bias = bias_factor(total_judgments)
    if bias < UNIFORM_BIAS_THRESHOLD:
        indices = rng.choice(len(items), size=count, replace=False)
        return [items[int(i)] for i in indices]
    
    return weighted_sample(items, selection_weights(items, bias), count, rng)
