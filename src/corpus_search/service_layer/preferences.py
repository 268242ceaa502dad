"""Saved filter presets and recent-search history.

Both persist through an injected ``AbstractKeyValueStore`` as plain JSON, so a
preset saved by one process can be loaded by another.
"""

import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError

from corpus_search.adapters.key_value_store import AbstractKeyValueStore
from corpus_search.domain.search import FilterState


logger = logging.getLogger(__name__)

PRESETS_KEY = "searchPresets"
HISTORY_KEY = "search-history"
DEFAULT_HISTORY_LIMIT = 10


class SearchPreset(BaseModel):
    """A named filter state."""

    model_config = ConfigDict(frozen=True)

    name: str
    filters: FilterState


class SearchPresetService:
    def __init__(self, store: AbstractKeyValueStore) -> None:
        self.store = store

    async def list_presets(self) -> list[SearchPreset]:
        """Stored presets in save order; entries that no longer validate are skipped."""
        raw = await self.store.get(PRESETS_KEY, [])
        if not isinstance(raw, list):
            logger.warning("Ignoring malformed %s value of type %s", PRESETS_KEY, type(raw).__name__)
            return []
        presets: list[SearchPreset] = []
        for entry in raw:
            try:
                presets.append(SearchPreset.model_validate(entry))
            except ValidationError as exc:
                logger.warning("Skipping unreadable preset: %s", exc)
        return presets

    async def save_preset(self, name: str, filters: FilterState) -> SearchPreset:
        """Store ``filters`` under ``name``, replacing a preset of the same name in place."""
        name = name.strip()
        if not name:
            raise ValueError("Preset name must not be blank")

        preset = SearchPreset(name=name, filters=filters)
        presets = await self.list_presets()
        for index, existing in enumerate(presets):
            if existing.name == name:
                presets[index] = preset
                break
        else:
            presets.append(preset)
        await self._write(presets)
        logger.info("Saved search preset %r", name)
        return preset

    async def load_preset(self, name: str) -> FilterState | None:
        for preset in await self.list_presets():
            if preset.name == name:
                return preset.filters
        return None

    async def delete_preset(self, name: str) -> bool:
        presets = await self.list_presets()
        remaining = [preset for preset in presets if preset.name != name]
        if len(remaining) == len(presets):
            return False
        await self._write(remaining)
        return True

    async def _write(self, presets: list[SearchPreset]) -> None:
        payload: list[dict[str, Any]] = [preset.model_dump(mode="json") for preset in presets]
        await self.store.set(PRESETS_KEY, payload)


class SearchHistoryService:
    """Most-recent-first list of submitted queries, without duplicates."""

    def __init__(self, store: AbstractKeyValueStore, limit: int = DEFAULT_HISTORY_LIMIT) -> None:
        self.store = store
        self.limit = limit

    async def recent(self) -> list[str]:
        raw = await self.store.get(HISTORY_KEY, [])
        if not isinstance(raw, list):
            return []
        return [entry for entry in raw if isinstance(entry, str)][: self.limit]

    async def record(self, query: str) -> list[str]:
        """Move ``query`` to the front of the history; blank queries are ignored."""
        query = query.strip()
        history = await self.recent()
        if not query:
            return history
        history = [query, *(entry for entry in history if entry != query)][: self.limit]
        await self.store.set(HISTORY_KEY, history)
        return history

    async def clear(self) -> None:
        await self.store.delete(HISTORY_KEY)
