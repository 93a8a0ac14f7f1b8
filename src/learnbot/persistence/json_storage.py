"""
JsonFileStorage: statement store persisted as a JSON snapshot.

File format:
```
{
  "statements": [
    {"text": ..., "in_response_to": ..., "conversation": ...,
     "timestamp": ..., "intent": ..., "entities": [...]},
    ...
  ]
}
```

Every update rewrites the whole snapshot. Reads are served from the
in-memory cache populated by the first load.
"""

import asyncio
import logging
from pathlib import Path
from typing import Dict, List, Optional

from learnbot.conversation.statement import Statement, normalize_key
from learnbot.persistence.in_memory import InMemoryStorage
from learnbot.persistence.serialization import JsonSerializer

logger = logging.getLogger(__name__)


class JsonFileStorage(InMemoryStorage):
    """
    JSON-file-backed statement store.

    Failure handling:
    - Missing file: created empty on first load
    - Unreadable or corrupt file: logged, store starts empty (the file is
      overwritten by the next successful update)
    - Failed write: logged, the in-memory state keeps the change

    Concurrency (single process, single event loop):
    - First load runs once; concurrent callers await it
    - Updates are serialized, so concurrent upserts can't drop each other

    Attributes:
        database_path: Path of the JSON snapshot
        _loaded: Whether the cache has been populated

    Example:
        >>> storage = JsonFileStorage(Path("./data/statements.json"))
        >>> await storage.update(Statement("hi", in_response_to="hello"))
        >>> await storage.count()
        1
    """

    def __init__(self, database_path: Path):
        super().__init__()
        self.database_path = Path(database_path)
        self._loaded = False
        self._load_lock = asyncio.Lock()
        self._write_lock = asyncio.Lock()

    async def _records_view(self) -> Dict[str, Statement]:
        if not self._loaded:
            await self._load()
        return self._records

    async def _load(self) -> None:
        async with self._load_lock:
            if self._loaded:
                return
            try:
                data = await asyncio.to_thread(JsonSerializer.load, self.database_path)
            except FileNotFoundError:
                logger.info("Database file %s not found. Creating new one.", self.database_path)
                self._records = {}
                self._loaded = True
                await self._save()
                return
            except (OSError, ValueError) as exc:
                # json.JSONDecodeError and UnicodeDecodeError are ValueErrors
                logger.error("Error loading database file %s: %s", self.database_path, exc)
                self._records = {}
                self._loaded = True
                return

            self._records = self._parse(data)
            self._loaded = True
            logger.info("Loaded %d statements from %s", len(self._records), self.database_path)

    def _parse(self, data: object) -> Dict[str, Statement]:
        entries = data.get("statements") if isinstance(data, dict) else None
        if not isinstance(entries, list):
            logger.warning(
                "Database file %s has invalid format. Resetting statements.", self.database_path
            )
            return {}

        records: Dict[str, Statement] = {}
        for entry in entries:
            try:
                statement = Statement.deserialize(entry)
            except ValueError as exc:
                logger.warning("Skipping invalid stored statement: %s", exc)
                continue
            key = normalize_key(statement.text)
            if key is None:
                logger.warning("Skipping stored statement with blank text")
                continue
            if key in records:
                records[key] = records[key].merged_with(statement)
            else:
                records[key] = statement
        return records

    async def update(self, statement: Statement) -> Optional[Statement]:
        async with self._write_lock:
            stored = await super().update(statement)
            if stored is not None:
                await self._save()
            return stored

    async def _save(self) -> None:
        snapshot = {"statements": self._snapshot()}
        try:
            await asyncio.to_thread(JsonSerializer.save, snapshot, self.database_path)
        except (OSError, TypeError, ValueError) as exc:
            logger.error("Error saving database %s: %s", self.database_path, exc)

    def _snapshot(self) -> List[dict]:
        return [statement.serialize() for statement in self._records.values()]

    def __repr__(self) -> str:
        return f"JsonFileStorage({str(self.database_path)!r}, statements={len(self._records)})"
