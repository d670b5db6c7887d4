"""In-process cache of recipe detail payloads keyed by recipe id."""

import logging
import threading
from typing import Any, Dict, Iterable, List, Optional

logger = logging.getLogger("plateplan.recipe_cache")


class RecipeCache:
    """Holds provider recipe payloads for the lifetime of the owning app.

    Entries are never evicted; ``clear`` empties the cache. Access is
    guarded by a lock because sync routes run in a thread pool.
    """

    def __init__(self):
        self._entries: Dict[int, Dict[str, Any]] = {}
        self._lock = threading.Lock()

    def get(self, recipe_id: int) -> Optional[Dict[str, Any]]:
        with self._lock:
            return self._entries.get(int(recipe_id))

    def get_many(self, recipe_ids: Iterable[int]) -> Dict[int, Dict[str, Any]]:
        with self._lock:
            return {
                int(rid): self._entries[int(rid)]
                for rid in recipe_ids
                if int(rid) in self._entries
            }

    def set(self, recipe_id: int, recipe: Dict[str, Any]) -> None:
        with self._lock:
            self._entries[int(recipe_id)] = recipe

    def set_many(self, recipes: List[Dict[str, Any]]) -> None:
        with self._lock:
            for recipe in recipes:
                if recipe.get("id") is not None:
                    self._entries[int(recipe["id"])] = recipe

    def clear(self) -> None:
        with self._lock:
            size = len(self._entries)
            self._entries.clear()
        logger.info("Recipe cache cleared (%d entries)", size)

    def __contains__(self, recipe_id) -> bool:
        with self._lock:
            return int(recipe_id) in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
