"""
Collaborators the ranking session depends on: a catalog loader that supplies
the population once, and a durable store that keeps whole-state snapshots.
"""

import copy
import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from .core.errors import StoreUnavailable
from .core.population import CatalogEntry

logger = logging.getLogger(__name__)

SerializedState = Dict[str, Any]


class CatalogLoader(ABC):
    """Supplies the initial population as (id, display_name, ordinal, image_ref) tuples."""

    @abstractmethod
    def load_catalog(self) -> List[CatalogEntry]:
        """Return a non-empty, id-unique list of catalog entries."""
        pass


class StaticCatalog(CatalogLoader):
    """A catalog held in memory, e.g. read from a bundled file."""

    def __init__(self, entries: Iterable[CatalogEntry]):
        self.entries = [tuple(entry) for entry in entries]

    def load_catalog(self) -> List[CatalogEntry]:
        return list(self.entries)


class DurableStore(ABC):
    """Keeps a single snapshot of the whole engine state."""

    @abstractmethod
    def load(self) -> Optional[SerializedState]:
        """Return the last saved snapshot, or None if nothing was saved."""
        pass

    @abstractmethod
    def save(self, state: SerializedState) -> None:
        """Replace the stored snapshot with `state`."""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Discard the stored snapshot. Clearing an empty store is a no-op."""
        pass


class MemoryStore(DurableStore):
    """Snapshot store that lives only as long as the process."""

    def __init__(self, state: Optional[SerializedState] = None):
        self._state = copy.deepcopy(state)
        self.save_count = 0

    def load(self) -> Optional[SerializedState]:
        return copy.deepcopy(self._state)

    def save(self, state: SerializedState) -> None:
        self._state = copy.deepcopy(state)
        self.save_count += 1

    def clear(self) -> None:
        self._state = None


class JsonFileStore(DurableStore):
    """
    Snapshot store backed by a single JSON file.
    
    Saves write a temporary file next to the target and move it into place,
    so a reader never sees a half-written snapshot.
    """

    def __init__(self, path: Union[str, Path] = "data/rankings.json"):
        self.path = Path(path)

    def load(self) -> Optional[SerializedState]:
        if not self.path.exists():
            return None
        try:
            with open(self.path, encoding="utf-8") as f:
                state = json.load(f)
        except (OSError, ValueError) as exc:
            raise StoreUnavailable(f"Cannot read snapshot from {self.path}: {exc}") from exc
        if not isinstance(state, dict):
            raise StoreUnavailable(f"Snapshot in {self.path} is not a JSON object")
        return state

    def save(self, state: SerializedState) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=str(self.path.parent), prefix=self.path.name, suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(state, f)
                os.replace(tmp_path, self.path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise
        except (OSError, TypeError, ValueError) as exc:
            raise StoreUnavailable(f"Cannot write snapshot to {self.path}: {exc}") from exc
        logger.debug("Saved snapshot to %s", self.path)

    def clear(self) -> None:
        try:
            if self.path.exists():
                self.path.unlink()
        except OSError as exc:
            raise StoreUnavailable(f"Cannot remove snapshot {self.path}: {exc}") from exc
        logger.info("Cleared snapshot %s", self.path)
