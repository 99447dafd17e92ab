"""
Rating records for a fixed population of items.
"""

from dataclasses import dataclass
from typing import Any, Dict, Hashable, Iterable, Iterator, List, Optional, Sequence, Tuple

INITIAL_RATING = 1500

# (id, display_name, ordinal, image_ref) as supplied by a catalog loader
CatalogEntry = Tuple[Hashable, str, Optional[int], Optional[str]]


@dataclass
class Item:
    """
    One member of the population and its rating record.
    
    The descriptive fields are opaque to the engine. Only the rating
    updater changes rating, wins, losses and matches.
    """

    id: Hashable
    display_name: str
    ordinal: Optional[int] = None
    image_ref: Optional[str] = None
    rating: int = INITIAL_RATING
    wins: int = 0
    losses: int = 0
    matches: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "display_name": self.display_name,
            "ordinal": self.ordinal,
            "image_ref": self.image_ref,
            "rating": self.rating,
            "wins": self.wins,
            "losses": self.losses,
            "matches": self.matches,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Item":
        """Rebuild an item from its serialized form."""
        return cls(
            id=data["id"],
            display_name=data["display_name"],
            ordinal=data.get("ordinal"),
            image_ref=data.get("image_ref"),
            rating=int(data["rating"]),
            wins=int(data["wins"]),
            losses=int(data["losses"]),
            matches=int(data["matches"]),
        )


class Population:
    """
    The fixed set of items being ranked.
    
    The id set is frozen at construction: items can be looked up and
    mutated, but never added or removed.
    """
    
    def __init__(self, items: Iterable[Item]):
        """
        Initialize a population.
        
        Args:
            items: The items, in catalog order
            
        Raises:
            ValueError: If the population is empty or ids are not unique
        """
        self._items: List[Item] = list(items)
        if not self._items:
            raise ValueError("Population must contain at least one item")
        
        self._by_id: Dict[Hashable, Item] = {}
        for item in self._items:
            if item.id in self._by_id:
                raise ValueError(f"Duplicate item id: {item.id!r}")
            self._by_id[item.id] = item
    
    @classmethod
    def from_catalog(cls, entries: Iterable[CatalogEntry], initial_rating: int = INITIAL_RATING) -> "Population":
        """
        Create fresh rating records from catalog entries.
        
        Args:
            entries: (id, display_name, ordinal, image_ref) tuples
            initial_rating: Starting rating for every item
            
        Returns:
            A population with every counter at zero
        """
        return cls(
            Item(
                id=item_id,
                display_name=display_name,
                ordinal=ordinal,
                image_ref=image_ref,
                rating=initial_rating,
            )
            for item_id, display_name, ordinal, image_ref in entries
        )
    
    @classmethod
    def from_records(cls, records: Iterable[Dict[str, Any]]) -> "Population":
        """Rebuild a population from serialized item records."""
        return cls(Item.from_dict(record) for record in records)
    
    def to_records(self) -> List[Dict[str, Any]]:
        """Serialize every item, in population order."""
        return [item.to_dict() for item in self._items]
    
    def __len__(self) -> int:
        return len(self._items)
    
    def __iter__(self) -> Iterator[Item]:
        return iter(self._items)
    
    def __contains__(self, item_id: Hashable) -> bool:
        return item_id in self._by_id
    
    @property
    def items(self) -> Sequence[Item]:
        return tuple(self._items)
    
    @property
    def ids(self) -> List[Hashable]:
        return [item.id for item in self._items]
    
    def get(self, item_id: Hashable) -> Item:
        """
        Look up an item by id.
        
        Raises:
            KeyError: If no item has this id
        """
        return self._by_id[item_id]
    
    def check_invariants(self) -> None:
        """
        Verify that every record is internally consistent.
        
        Raises:
            ValueError: If a counter is negative or matches != wins + losses
        """
        for item in self._items:
            if item.wins < 0 or item.losses < 0 or item.matches < 0:
                raise ValueError(f"Item {item.id!r} has a negative counter")
            if item.matches != item.wins + item.losses:
                raise ValueError(
                    f"Item {item.id!r} has {item.matches} matches but "
                    f"{item.wins} wins and {item.losses} losses"
                )
