"""
Session controller that drives ranking rounds.

A session owns the population and a SessionState value. Each round it
offers a pair or a group, takes the judgment, applies the implied rating
updates, advances the judgment counter and saves a full snapshot.
"""

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, FrozenSet, Hashable, Iterable, List, Optional, Tuple, Union

import numpy as np

from .core.elo_rating import K_FACTOR, apply_result
from .core.errors import InvalidJudgment, RankerError, StoreUnavailable
from .core.population import INITIAL_RATING, Item, Population
from .core.sampling import DEFAULT_GROUP_SIZE, next_group, next_pair
from .store import CatalogLoader, DurableStore, SerializedState

logger = logging.getLogger(__name__)


class Mode(str, Enum):
    """Kind of judgment the session is collecting."""
    PAIRWISE = "pairwise"
    GROUP = "group"


@dataclass
class SessionState:
    """Mutable state of one ranking run, persisted alongside the population."""

    mode: Mode = Mode.PAIRWISE
    total_judgments: int = 0
    pending: Optional[Tuple[Hashable, ...]] = None


@dataclass(frozen=True)
class PairJudgment:
    """The judge picked `winner_id` over `loser_id`."""

    winner_id: Hashable
    loser_id: Hashable


@dataclass(frozen=True)
class GroupJudgment:
    """The judge recognized `selected_ids` out of the pending group."""

    selected_ids: FrozenSet[Hashable] = field(default_factory=frozenset)


Judgment = Union[PairJudgment, GroupJudgment]


class RankingSession:
    """
    Collects judgments over a fixed population and keeps ratings current.
    """
    
    def __init__(
        self,
        catalog: CatalogLoader,
        store: Optional[DurableStore] = None,
        *,
        mode: Union[Mode, str] = Mode.PAIRWISE,
        group_size: int = DEFAULT_GROUP_SIZE,
        initial_rating: int = INITIAL_RATING,
        k_factor: float = K_FACTOR,
        seed: Optional[int] = None,
        rng: Optional[np.random.Generator] = None,
    ):
        """
        Initialize a ranking session.
        
        Args:
            catalog: Supplies the population on first run and on reset
            store: Durable snapshot store, or None to keep state in memory only
            mode: Initial judgment mode, overridden by a restored snapshot
            group_size: Number of items offered per recognition round
            initial_rating: Rating every item starts with
            k_factor: K-factor for Elo calculation
            seed: Seed for the random source, ignored if `rng` is given
            rng: Random source to draw samples from
        """
        if group_size < 1:
            raise ValueError("group_size must be at least 1")
        
        if k_factor <= 0:
            raise ValueError("k_factor must be positive")
        
        self.catalog = catalog
        self.store = store
        self.group_size = group_size
        self.initial_rating = initial_rating
        self.k_factor = k_factor
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        
        self.population: Optional[Population] = None
        self.state = SessionState(mode=Mode(mode))
        
        self._lock = threading.RLock()
    
    @property
    def mode(self) -> Mode:
        with self._lock:
            return self.state.mode
    
    @property
    def total_judgments(self) -> int:
        with self._lock:
            return self.state.total_judgments

    @property
    def pending_items(self) -> List[Item]:
        """Items currently offered for judgment."""
        with self._lock:
            if self.population is None or self.state.pending is None:
                return []
            return [self.population.get(item_id) for item_id in self.state.pending]
    
    def start(self) -> List[Item]:
        """
        Restore the last snapshot, or load the catalog on first run.
        
        Returns:
            The items offered for the first judgment
        """
        with self._lock:
            snapshot = self.store.load() if self.store is not None else None
            
            if snapshot is None:
                self._load_catalog()
                self.state.total_judgments = 0
                self.state.pending = None
            else:
                self._restore(snapshot)
            
            if self.state.pending is None:
                self.state.pending = self._draw(self.state.mode)
            
            self._save()
            return self.pending_items
    
    def submit_pair_judgment(self, winner_id: Hashable, loser_id: Hashable) -> List[Item]:
        """
        Record the outcome of a pairwise round.
        
        Args:
            winner_id: Id of the item judged more memorable
            loser_id: Id of the other pending item
            
        Returns:
            The items offered for the next round
            
        Raises:
            InvalidJudgment: If the session is not in pairwise mode or the ids
                do not name the pending pair
        """
        with self._lock:
            pending = self._require_pending(Mode.PAIRWISE)
            
            if winner_id == loser_id:
                raise InvalidJudgment(f"Item {winner_id!r} cannot beat itself")
            
            if {winner_id, loser_id} != set(pending):
                raise InvalidJudgment(
                    f"Judgment ({winner_id!r}, {loser_id!r}) does not match pending pair {pending!r}"
                )
            
            winner = self.population.get(winner_id)
            loser = self.population.get(loser_id)
            apply_result(winner, loser, self.k_factor)
            self.state.total_judgments += 1
            
            logger.debug(
                "Pair %r beat %r, ratings now %d / %d",
                winner_id, loser_id, winner.rating, loser.rating,
            )
            return self._advance()
    
    def submit_group_judgment(self, selected_ids: Iterable[Hashable]) -> List[Item]:
        """
        Record the outcome of a recognition round.
        
        Every selected item beats every unselected item of the group. The
        judgment counter advances by the group size even when nothing or
        everything was selected.
        
        Args:
            selected_ids: Ids of the items the judge recognized
            
        Returns:
            The items offered for the next round
            
        Raises:
            InvalidJudgment: If the session is not in group mode or a selected
                id is not part of the pending group
        """
        with self._lock:
            pending = self._require_pending(Mode.GROUP)
            
            selected = set(selected_ids)
            unknown = selected.difference(pending)
            if unknown:
                raise InvalidJudgment(
                    f"Selected ids {sorted(map(repr, unknown))} are not in the pending group"
                )
            
            group = [self.population.get(item_id) for item_id in pending]
            winners = [item for item in group if item.id in selected]
            losers = [item for item in group if item.id not in selected]
            
            for winner in winners:
                for loser in losers:
                    apply_result(winner, loser, self.k_factor)
            self.state.total_judgments += len(group)
            
            logger.debug(
                "Group round: %d of %d recognized, %d rating updates",
                len(winners), len(group), len(winners) * len(losers),
            )
            return self._advance()
    
    def submit_judgment(self, judgment: Judgment) -> List[Item]:
        """Record a pairwise or group judgment, whichever `judgment` is."""
        if isinstance(judgment, PairJudgment):
            return self.submit_pair_judgment(judgment.winner_id, judgment.loser_id)
        if isinstance(judgment, GroupJudgment):
            return self.submit_group_judgment(judgment.selected_ids)
        raise InvalidJudgment(f"Unsupported judgment type: {type(judgment).__name__}")
    
    def switch_mode(self, mode: Union[Mode, str]) -> List[Item]:
        """
        Change the judgment mode and offer a fresh sample for it.
        
        Ratings and counters are left untouched.
        """
        with self._lock:
            self._require_started()
            mode = Mode(mode)
            pending = self._draw(mode)
            
            self.state.mode = mode
            self.state.pending = pending
            logger.info("Switched to %s mode", mode.value)
            
            self._save()
            return self.pending_items
    
    def reset(self) -> List[Item]:
        """
        Discard all ratings and reload the population from the catalog.
        
        Returns:
            The items offered for the first judgment after the reset
        """
        with self._lock:
            if self.store is not None:
                self.store.clear()
            
            self._load_catalog()
            self.state.total_judgments = 0
            self.state.pending = self._draw(self.state.mode)
            logger.info("Reset ratings for %d items", len(self.population))
            
            self._save()
            return self.pending_items
    
    def snapshot(self) -> SerializedState:
        """Serialize the population and session state as one snapshot."""
        with self._lock:
            self._require_started()
            return {
                "items": self.population.to_records(),
                "total_judgments": self.state.total_judgments,
                "last_updated": datetime.now(timezone.utc).isoformat(),
                "mode": self.state.mode.value,
                "pending": list(self.state.pending) if self.state.pending is not None else None,
            }
    
    def _load_catalog(self) -> None:
        entries = self.catalog.load_catalog()
        self.population = Population.from_catalog(entries, self.initial_rating)
        logger.info("Loaded %d items from catalog", len(self.population))
    
    def _restore(self, snapshot: SerializedState) -> None:
        try:
            population = Population.from_records(snapshot["items"])
            population.check_invariants()
            mode = Mode(snapshot.get("mode", Mode.PAIRWISE.value))
            total = snapshot.get("total_judgments")
            if total is None:
                logger.warning("Snapshot has no judgment counter, starting from 0")
                total = 0
            if isinstance(total, bool) or not isinstance(total, int):
                raise ValueError(f"total_judgments must be an integer, got {total!r}")
            if total < 0:
                raise ValueError("total_judgments must be non-negative")
        except (KeyError, TypeError, ValueError) as exc:
            raise StoreUnavailable(f"Malformed snapshot: {exc}") from exc

        pending = snapshot.get("pending")
        if pending is not None and not self._is_valid_pending(population, mode, pending):
            logger.warning("Discarding stale pending sample %r", pending)
            pending = None
        
        self.population = population
        self.state = SessionState(
            mode=mode,
            total_judgments=total,
            pending=tuple(pending) if pending is not None else None,
        )
        logger.info(
            "Restored %d items after %d judgments", len(population), self.state.total_judgments
        )
    
    def _is_valid_pending(self, population: Population, mode: Mode, pending: Any) -> bool:
        if not isinstance(pending, (list, tuple)):
            return False
        try:
            distinct = set(pending)
        except TypeError:
            # Unhashable entries cannot be item ids
            return False
        expected_size = 2 if mode is Mode.PAIRWISE else self.group_size
        return (
            len(pending) == expected_size
            and len(distinct) == len(pending)
            and all(item_id in population for item_id in pending)
        )
    
    def _draw(self, mode: Mode) -> Tuple[Hashable, ...]:
        if mode is Mode.PAIRWISE:
            sample = next_pair(self.population, self.rng)
        else:
            sample = next_group(self.population, self.state.total_judgments, self.group_size, self.rng)
        
        pending = tuple(item.id for item in sample)
        logger.debug("Offering %s sample %r", mode.value, pending)
        return pending
    
    def _advance(self) -> List[Item]:
        self.state.pending = self._draw(self.state.mode)
        self._save()
        return self.pending_items
    
    def _save(self) -> None:
        if self.store is not None:
            self.store.save(self.snapshot())
    
    def _require_started(self) -> None:
        if self.population is None:
            raise RankerError("Session has not been started")
    
    def _require_pending(self, mode: Mode) -> Tuple[Hashable, ...]:
        self._require_started()
        if self.state.mode is not mode:
            raise InvalidJudgment(
                f"Session is in {self.state.mode.value} mode, not {mode.value} mode"
            )
        if self.state.pending is None:
            raise InvalidJudgment("No sample is pending")
        return self.state.pending
