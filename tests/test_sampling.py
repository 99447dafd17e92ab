"""
Tests for the pair and group sampling policies.
"""

from collections import Counter

import numpy as np
import pytest

from memorank.core.errors import InsufficientPopulation
from memorank.core.population import Item, Population
from memorank.core.sampling import (
    bias_factor,
    median_rating,
    next_group,
    next_pair,
    selection_weights,
    weighted_sample,
)


def make_items(ratings):
    return [Item(id=i, display_name=f"item{i}", rating=r) for i, r in enumerate(ratings)]


def test_bias_factor_ramp():
    """Test the bias schedule."""
    assert bias_factor(0) == 0.0
    assert bias_factor(100) == 0.2
    assert bias_factor(250) == 0.5
    assert bias_factor(500) == 1.0
    assert bias_factor(5000) == 1.0


def test_bias_factor_rejects_negative():
    """Test that a negative judgment count is an error."""
    with pytest.raises(ValueError):
        bias_factor(-1)


def test_median_rating_odd():
    """Test the median of an odd-sized population."""
    assert median_rating(make_items([1600, 1400, 1500])) == 1500


def test_median_rating_even_uses_upper_middle():
    """Test that an even-sized population uses the upper-middle element."""
    assert median_rating(make_items([1700, 1400, 1600, 1500])) == 1600


def test_median_rating_empty():
    """Test that the median of nothing is an error."""
    with pytest.raises(InsufficientPopulation):
        median_rating([])


def test_selection_weights():
    """Test weights for a population split around the median."""
    items = make_items([1300, 1700, 1700])
    
    weights = selection_weights(items, bias=1.0)
    
    # Median is 1700: the low item has diff 400 -> bias weight 3 -> weight 10
    assert weights.tolist() == pytest.approx([10.0, 4.0, 4.0])


def test_selection_weights_floor():
    """Test that far-above-median items keep a minimum weight."""
    items = make_items([1500, 1500, 2500])
    
    weights = selection_weights(items, bias=1.0)
    
    # diff -1000 -> 1 - 5 = -4 -> floored at 0.1 -> weight 1.3
    assert weights[2] == pytest.approx(1.3)


def test_weighted_sample_respects_zero_weights(rng):
    """Test that only the weighted item is ever drawn first."""
    items = make_items([1500, 1500, 1500])
    
    for _ in range(50):
        drawn = weighted_sample(items, [0.0, 0.0, 1.0], 1, rng)
        assert drawn[0].id == 2


def test_weighted_sample_without_replacement(rng):
    """Test that a full draw returns every item exactly once."""
    items = make_items([1500] * 6)
    
    drawn = weighted_sample(items, [1, 2, 3, 4, 5, 6], 6, rng)
    
    assert sorted(item.id for item in drawn) == list(range(6))


def test_weighted_sample_rejects_mismatched_weights(rng):
    """Test that weights must align with items."""
    with pytest.raises(ValueError):
        weighted_sample(make_items([1500, 1500]), [1.0], 1, rng)


def test_next_pair_distinct(population, rng):
    """Test that a pair never repeats an item."""
    for _ in range(200):
        left, right = next_pair(population, rng)
        assert left.id != right.id


def test_next_pair_covers_population(population, rng):
    """Test that every item is offered over many pairs."""
    seen = Counter()
    for _ in range(600):
        for item in next_pair(population, rng):
            seen[item.id] += 1
    
    assert set(seen) == set(population.ids)
    # Each item is expected 200 times
    assert all(150 < count < 250 for count in seen.values())


def test_next_pair_insufficient_population(rng):
    """Test that a single item cannot form a pair."""
    with pytest.raises(InsufficientPopulation) as excinfo:
        next_pair(Population(make_items([1500])), rng)
    
    assert excinfo.value.required == 2
    assert excinfo.value.available == 1


def test_next_group_distinct_ids(rng):
    """Test that a group has the requested number of distinct items."""
    items = make_items([1500] * 10)
    
    group = next_group(items, total_judgments=0, count=5, rng=rng)
    
    assert len(group) == 5
    assert len({item.id for item in group}) == 5


def test_next_group_uniform_early(rng):
    """Test that early groups favor no item."""
    # Ratings are skewed, but with no evidence the draw ignores them
    items = make_items([1000, 1200, 1400, 1500, 1500, 1600, 1700, 1800, 1900, 2000])
    
    counts = Counter()
    for _ in range(4000):
        for item in next_group(items, total_judgments=0, count=5, rng=rng):
            counts[item.id] += 1
    
    # Each item is expected 2000 times
    assert all(1800 < count < 2200 for count in counts.values())


def test_next_group_favors_low_ratings_with_evidence(rng):
    """Test that with full bias below-median items are offered more often."""
    items = make_items([1300] * 5 + [1700] * 5)
    
    counts = Counter()
    for _ in range(3000):
        for item in next_group(items, total_judgments=500, count=2, rng=rng):
            counts[item.rating] += 1
    
    assert counts[1300] > 1.5 * counts[1700]


def test_next_group_insufficient_population(rng):
    """Test that a group larger than the population is an error."""
    with pytest.raises(InsufficientPopulation):
        next_group(make_items([1500] * 3), total_judgments=0, count=5, rng=rng)
    
    with pytest.raises(InsufficientPopulation):
        next_group(make_items([1500] * 3), total_judgments=500, count=5, rng=rng)


def test_next_group_rejects_empty_group(rng):
    """Test that a group must contain at least one item."""
    with pytest.raises(ValueError):
        next_group(make_items([1500] * 3), total_judgments=0, count=0, rng=rng)


def test_sampling_is_reproducible():
    """Test that the same seed gives the same samples."""
    items = make_items([1300, 1400, 1500, 1600, 1700, 1800])
    
    first = [item.id for item in next_group(items, 400, 3, np.random.default_rng(7))]
    second = [item.id for item in next_group(items, 400, 3, np.random.default_rng(7))]
    
    assert first == second
