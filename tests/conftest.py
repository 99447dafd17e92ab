"""
Shared fixtures for the memorank tests.
"""

import numpy as np
import pytest

from memorank import MemoryStore, Population, StaticCatalog

NAMES = ["bulbasaur", "ivysaur", "venusaur", "charmander", "charmeleon", "charizard"]


@pytest.fixture
def catalog_entries():
    """Six catalog entries with integer ids."""
    return [
        (i + 1, name, i + 1, f"https://img.example/{i + 1}.png")
        for i, name in enumerate(NAMES)
    ]


@pytest.fixture
def catalog(catalog_entries):
    """A static catalog over the six entries."""
    return StaticCatalog(catalog_entries)


@pytest.fixture
def population(catalog_entries):
    """A fresh population at the initial rating."""
    return Population.from_catalog(catalog_entries)


@pytest.fixture
def store():
    """An empty in-memory snapshot store."""
    return MemoryStore()


@pytest.fixture
def rng():
    """A seeded random source."""
    return np.random.default_rng(1234)
