"""
Tests for rating records and the population.
"""

import pytest

from memorank.core.population import INITIAL_RATING, Item, Population


def test_from_catalog_initializes_records(population, catalog_entries):
    """Test that catalog entries become fresh records."""
    assert len(population) == len(catalog_entries)
    
    for item, (item_id, name, ordinal, image_ref) in zip(population, catalog_entries):
        assert item.id == item_id
        assert item.display_name == name
        assert item.ordinal == ordinal
        assert item.image_ref == image_ref
        assert item.rating == INITIAL_RATING
        assert (item.wins, item.losses, item.matches) == (0, 0, 0)


def test_custom_initial_rating(catalog_entries):
    """Test that the initial rating can be overridden."""
    population = Population.from_catalog(catalog_entries, initial_rating=1000)
    assert all(item.rating == 1000 for item in population)


def test_duplicate_ids_rejected():
    """Test that ids must be unique."""
    with pytest.raises(ValueError, match="Duplicate"):
        Population.from_catalog([(1, "a", 1, None), (1, "b", 2, None)])


def test_empty_population_rejected():
    """Test that an empty catalog is an error."""
    with pytest.raises(ValueError):
        Population([])


def test_lookup(population):
    """Test lookup by id."""
    assert population.get(3).display_name == "venusaur"
    assert 3 in population
    assert 99 not in population
    
    with pytest.raises(KeyError):
        population.get(99)


def test_ids_and_items_are_copies(population):
    """Test that the id set cannot be changed through the accessors."""
    ids = population.ids
    ids.append(99)
    
    assert 99 not in population
    assert isinstance(population.items, tuple)


def test_records_roundtrip(population):
    """Test that serialized records rebuild the same population."""
    population.get(1).rating = 1532
    population.get(1).wins = 2
    population.get(1).matches = 2
    
    restored = Population.from_records(population.to_records())
    
    assert restored.ids == population.ids
    assert restored.get(1) == population.get(1)


def test_check_invariants_passes_on_consistent_records(population):
    """Test that fresh records are consistent."""
    population.check_invariants()


def test_check_invariants_detects_mismatch(population):
    """Test that matches must equal wins plus losses."""
    population.get(2).matches = 1
    
    with pytest.raises(ValueError, match="matches"):
        population.check_invariants()


def test_check_invariants_detects_negative_counter(population):
    """Test that counters cannot be negative."""
    item = population.get(2)
    item.wins = -1
    item.losses = 1
    
    with pytest.raises(ValueError, match="negative"):
        population.check_invariants()


def test_item_from_dict_defaults():
    """Test that optional metadata may be missing from a record."""
    item = Item.from_dict({
        "id": "x",
        "display_name": "X",
        "rating": 1490,
        "wins": 0,
        "losses": 1,
        "matches": 1,
    })
    
    assert item.ordinal is None
    assert item.image_ref is None
    assert item.rating == 1490
