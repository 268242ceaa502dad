"""Corpus read interface and its implementations.

Following Cosmic Python Chapter 2: Repository Pattern. The search service only ever
reads through ``AbstractCorpusRepository``; hints are advisory and the filter engine
re-applies the full predicate set to whatever comes back.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
import logging
from pathlib import Path
from typing import Any

import anyio
import orjson
from pydantic import ValidationError

from corpus_search.domain.model import RECORD_TYPES, CorpusType, FactRecord, NarrationRecord, VerseRecord
from corpus_search.domain.search import FilterState


logger = logging.getLogger(__name__)

CORPUS_FILE_NAMES: dict[CorpusType, str] = {
    CorpusType.FACT: "facts.json",
    CorpusType.VERSE: "verses.json",
    CorpusType.NARRATION: "narrations.json",
}


class CorpusReadError(Exception):
    """Raised by adapters when a corpus snapshot cannot be read or decoded."""


class AbstractCorpusRepository(ABC):
    """Read-only access to the three corpus snapshots."""

    @abstractmethod
    async def fetch(self, corpus_type: CorpusType, hints: FilterState | None = None) -> list[Any]:
        """Return the records of one corpus.

        Args:
            corpus_type: Corpus to read
            hints: Current filter state; implementations may use it to pre-filter

        Returns:
            Records of the matching record type, possibly pre-filtered
        """
        raise NotImplementedError

    async def fetch_facts(self, hints: FilterState | None = None) -> list[FactRecord]:
        return await self.fetch(CorpusType.FACT, hints)

    async def fetch_verses(self, hints: FilterState | None = None) -> list[VerseRecord]:
        return await self.fetch(CorpusType.VERSE, hints)

    async def fetch_narrations(self, hints: FilterState | None = None) -> list[NarrationRecord]:
        return await self.fetch(CorpusType.NARRATION, hints)

    async def count(self, corpus_type: CorpusType) -> int:
        """Total records in a corpus, ignoring any hints."""
        return len(await self.fetch(corpus_type))

    def invalidate_cache(self, corpus_type: CorpusType | None = None) -> None:
        """Optional hook for dropping cached snapshots for one corpus or all of them."""


def apply_hints(corpus_type: CorpusType, records: Sequence[Any], hints: FilterState | None) -> list[Any]:
    """Coarse pre-filtering a backing store can do cheaply.

    Facts narrow by category and verses by chapter; everything else passes.
    """
    if hints is None:
        return list(records)
    if corpus_type is CorpusType.FACT and hints.types:
        return [record for record in records if record.category in hints.types]
    if corpus_type is CorpusType.VERSE and hints.verse_chapters:
        return [record for record in records if str(record.chapter_number) in hints.verse_chapters]
    return list(records)


class InMemoryCorpusRepository(AbstractCorpusRepository):
    """Repository over preloaded record lists, recording how often each corpus is read."""

    def __init__(
        self,
        facts: Iterable[FactRecord] = (),
        verses: Iterable[VerseRecord] = (),
        narrations: Iterable[NarrationRecord] = (),
        *,
        use_hints: bool = False,
    ) -> None:
        self._records: dict[CorpusType, list[Any]] = {
            CorpusType.FACT: list(facts),
            CorpusType.VERSE: list(verses),
            CorpusType.NARRATION: list(narrations),
        }
        self.use_hints = use_hints
        self.fetch_calls: dict[CorpusType, int] = dict.fromkeys(CorpusType, 0)
        self.count_calls: dict[CorpusType, int] = dict.fromkeys(CorpusType, 0)

    @property
    def total_fetch_calls(self) -> int:
        return sum(self.fetch_calls.values())

    async def fetch(self, corpus_type: CorpusType, hints: FilterState | None = None) -> list[Any]:
        self.fetch_calls[corpus_type] += 1
        records = self._records[corpus_type]
        return apply_hints(corpus_type, records, hints) if self.use_hints else list(records)

    async def count(self, corpus_type: CorpusType) -> int:
        self.count_calls[corpus_type] += 1
        return len(self._records[corpus_type])


class JsonCorpusRepository(AbstractCorpusRepository):
    """Corpus snapshots stored as JSON files in one directory.

    Each file holds either a bare list of records or a ``{"data": [...]}`` envelope.
    Records are validated against their record type on first read and cached until
    ``invalidate_cache`` is called. Entries that are not objects are skipped with a
    warning; malformed fields inside an object degrade during validation.
    """

    def __init__(self, data_dir: Path, *, use_hints: bool = True) -> None:
        self.data_dir = Path(data_dir)
        self.use_hints = use_hints
        self._cache: dict[CorpusType, list[Any]] = {}

    def path_for(self, corpus_type: CorpusType) -> Path:
        return self.data_dir / CORPUS_FILE_NAMES[corpus_type]

    async def fetch(self, corpus_type: CorpusType, hints: FilterState | None = None) -> list[Any]:
        records = await self._load(corpus_type)
        return apply_hints(corpus_type, records, hints) if self.use_hints else list(records)

    async def count(self, corpus_type: CorpusType) -> int:
        return len(await self._load(corpus_type))

    def invalidate_cache(self, corpus_type: CorpusType | None = None) -> None:
        if corpus_type is None:
            self._cache.clear()
        else:
            self._cache.pop(corpus_type, None)

    async def _load(self, corpus_type: CorpusType) -> list[Any]:
        cached = self._cache.get(corpus_type)
        if cached is not None:
            return cached

        path = self.path_for(corpus_type)
        try:
            async with await anyio.open_file(path, "rb") as f:
                payload = orjson.loads(await f.read())
        except (OSError, orjson.JSONDecodeError) as exc:
            raise CorpusReadError(f"Cannot read {corpus_type.value} corpus from {path}: {exc}") from exc

        records = self._parse(corpus_type, payload, path)
        self._cache[corpus_type] = records
        logger.info("Loaded %d %s records from %s", len(records), corpus_type.value, path)
        return records

    def _parse(self, corpus_type: CorpusType, payload: Any, path: Path) -> list[Any]:
        if isinstance(payload, dict) and isinstance(payload.get("data"), list):
            payload = payload["data"]
        if not isinstance(payload, list):
            raise CorpusReadError(f"Expected a list of records in {path}, got {type(payload).__name__}")

        record_type = RECORD_TYPES[corpus_type]
        records: list[Any] = []
        skipped = 0
        for raw in payload:
            if not isinstance(raw, dict):
                skipped += 1
                continue
            try:
                records.append(record_type.model_validate({**raw, "corpus_type": corpus_type}))
            except ValidationError as exc:
                skipped += 1
                logger.warning("Skipping invalid %s record in %s: %s", corpus_type.value, path, exc)
        if skipped:
            logger.warning("Skipped %d malformed entries in %s", skipped, path)
        return records
