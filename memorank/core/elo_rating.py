"""
Core implementation of the Elo rating update.
"""

import math
from typing import Tuple

from .population import Item

K_FACTOR = 32


def expected_score(rating_a: float, rating_b: float) -> float:
    """
    Calculate the expected score for item A against item B.
    
    Args:
        rating_a: Elo rating of item A
        rating_b: Elo rating of item B
        
    Returns:
        Expected score for item A (between 0 and 1)
    """
    return 1.0 / (1.0 + math.pow(10, (rating_b - rating_a) / 400.0))


def update_elo(rating: float, expected: float, actual: float, k_factor: float = K_FACTOR) -> float:
    """
    Update an Elo rating based on the expected and actual outcomes.
    
    Args:
        rating: Current Elo rating
        expected: Expected outcome (between 0 and 1)
        actual: Actual outcome (0 for loss, 1 for win)
        k_factor: K-factor for Elo calculation (determines how much ratings change)
        
    Returns:
        Updated (unrounded) Elo rating
    """
    return rating + k_factor * (actual - expected)


def round_rating(value: float) -> int:
    """
    Round a rating to an integer, halves away from zero.

    The builtin round() rounds halves to even, which gives different
    trajectories over many updates, so it is not used here.
    """
    magnitude = math.floor(abs(value) + 0.5)
    return int(magnitude) if value >= 0 else -int(magnitude)


def rate_pair(winner_rating: int, loser_rating: int, k_factor: float = K_FACTOR) -> Tuple[int, int]:
    """
    Compute the new ratings of a winner and a loser.
    
    Args:
        winner_rating: Current rating of the winner
        loser_rating: Current rating of the loser
        k_factor: K-factor for Elo calculation
        
    Returns:
        Tuple of (new winner rating, new loser rating), both rounded
    """
    expected_winner = expected_score(winner_rating, loser_rating)
    expected_loser = expected_score(loser_rating, winner_rating)
    
    new_winner = round_rating(update_elo(winner_rating, expected_winner, 1.0, k_factor))
    new_loser = round_rating(update_elo(loser_rating, expected_loser, 0.0, k_factor))
    
    return new_winner, new_loser


def apply_result(winner: Item, loser: Item, k_factor: float = K_FACTOR) -> None:
    """
    Record that `winner` beat `loser`, mutating both items in place.
    
    Both ratings are computed from the pre-match values before either item
    is touched, so the two records change together or not at all.
    
    Args:
        winner: Item judged more memorable
        loser: Item judged less memorable
        k_factor: K-factor for Elo calculation
        
    Raises:
        ValueError: If winner and loser are the same item
    """
    if winner is loser or winner.id == loser.id:
        raise ValueError(f"Item {winner.id!r} cannot be matched against itself")
    
    new_winner, new_loser = rate_pair(winner.rating, loser.rating, k_factor)
    
    winner.rating = new_winner
    loser.rating = new_loser
    
    winner.wins += 1
    winner.matches += 1
    loser.losses += 1
    loser.matches += 1
