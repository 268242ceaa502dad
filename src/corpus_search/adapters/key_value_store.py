"""Small key-value stores for persisted user preferences (presets, history)."""

from abc import ABC, abstractmethod
import logging
from pathlib import Path
import shutil
from typing import Any

import anyio
import orjson


logger = logging.getLogger(__name__)


class AbstractKeyValueStore(ABC):
    """JSON-compatible values keyed by string."""

    @abstractmethod
    async def get(self, key: str, default: Any = None) -> Any:
        raise NotImplementedError

    @abstractmethod
    async def set(self, key: str, value: Any) -> None:
        raise NotImplementedError

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Remove ``key``; returns False when it was absent."""
        raise NotImplementedError


class InMemoryKeyValueStore(AbstractKeyValueStore):
    """In-memory store for testing and for sessions without a preferences file."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._values: dict[str, Any] = dict(initial or {})

    async def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)

    async def set(self, key: str, value: Any) -> None:
        self._values[key] = value

    async def delete(self, key: str) -> bool:
        if key not in self._values:
            return False
        del self._values[key]
        return True


class JsonFileKeyValueStore(AbstractKeyValueStore):
    """All keys persisted together in a single JSON object on disk.

    A missing file reads as empty. A file that cannot be decoded is logged and
    treated as empty; the next write replaces it. Writes go to a ``.tmp`` sibling
    that is then moved over the file, so a crash mid-write leaves the old file.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._lock = anyio.Lock()

    async def get(self, key: str, default: Any = None) -> Any:
        values = await self._read()
        return values.get(key, default)

    async def set(self, key: str, value: Any) -> None:
        async with self._lock:
            values = await self._read()
            values[key] = value
            await self._write(values)

    async def delete(self, key: str) -> bool:
        async with self._lock:
            values = await self._read()
            if key not in values:
                return False
            del values[key]
            await self._write(values)
            return True

    async def _read(self) -> dict[str, Any]:
        if not await anyio.Path(self.path).exists():
            return {}
        async with await anyio.open_file(self.path, "rb") as f:
            raw = await f.read()
        if not raw.strip():
            return {}
        try:
            values = orjson.loads(raw)
        except orjson.JSONDecodeError as exc:
            logger.warning("Ignoring unreadable preferences file %s: %s", self.path, exc)
            return {}
        if not isinstance(values, dict):
            logger.warning("Ignoring preferences file %s: expected a JSON object", self.path)
            return {}
        return values

    async def _write(self, values: dict[str, Any]) -> None:
        await anyio.Path(self.path.parent).mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        async with await anyio.open_file(tmp_path, "wb") as f:
            await f.write(orjson.dumps(values, option=orjson.OPT_INDENT_2))
        await anyio.to_thread.run_sync(shutil.move, str(tmp_path), str(self.path))
