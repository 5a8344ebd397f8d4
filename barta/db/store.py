import asyncio
import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional

from barta.core.clock import now_ms
from barta.core.config import settings
from barta.core.exceptions import StorageError

logger = logging.getLogger(__name__)

Record = Dict[str, Any]

COLLECTIONS = ("users", "sessions", "typing", "messages", "calls")


class RecordCollection(ABC):
    """Именованная коллекция JSON-записей, читаемая и перезаписываемая целиком"""

    def __init__(self, name: str):
        self.name = name
        # Все циклы чтение-изменение-запись коллекции идут под этой блокировкой
        self._lock = asyncio.Lock()

    @abstractmethod
    def _read(self) -> List[Record]:
        ...

    @abstractmethod
    def _write(self, records: List[Record]) -> None:
        ...

    async def load(self) -> List[Record]:
        """Чтение всей коллекции"""
        async with self._lock:
            return self._read()

    async def save(self, records: List[Record]) -> None:
        """Перезапись всей коллекции"""
        async with self._lock:
            self._write(records)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[List[Record]]:
        """
        Загружает коллекцию, отдает список для изменения на месте и
        записывает его обратно. Если блок завершился исключением,
        на диске остается прежнее состояние.
        """
        async with self._lock:
            records = self._read()
            yield records
            self._write(records)


class MemoryCollection(RecordCollection):
    """Коллекция в памяти, для тестов"""

    def __init__(self, name: str, records: Optional[List[Record]] = None):
        super().__init__(name)
        self._data = json.dumps(records or [])

    def _read(self) -> List[Record]:
        return json.loads(self._data)

    def _write(self, records: List[Record]) -> None:
        self._data = json.dumps(records)


class JsonFileCollection(RecordCollection):
    """Коллекция, хранимая в файле `<data_dir>/<name>.json`"""

    def __init__(self, name: str, data_dir: str):
        super().__init__(name)
        self.data_dir = data_dir
        self.path = os.path.join(data_dir, f"{name}.json")

    def _read(self) -> List[Record]:
        if not os.path.exists(self.path):
            return self._initialize()

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                records = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Collection {self.name} is unreadable ({e}), resetting to empty")
            return self._reset()

        if not isinstance(records, list):
            logger.warning(f"Collection {self.name} does not hold a JSON array, resetting to empty")
            return self._reset()

        return records

    def _reset(self) -> List[Record]:
        """Откладывает испорченный файл в сторону и начинает коллекцию заново"""
        backup = f"{self.path}.corrupt-{now_ms()}"
        try:
            os.replace(self.path, backup)
            logger.warning(f"Corrupt collection {self.name} moved to {backup}")
        except OSError as e:
            logger.error(f"Could not move corrupt collection {self.name} aside: {e}")
        return self._initialize()

    def _initialize(self) -> List[Record]:
        """Создает пустую коллекцию; ошибка записи не мешает чтению"""
        try:
            self._write([])
        except StorageError as e:
            logger.error(f"Could not initialize collection {self.name}: {e.message}")
        return []

    def _write(self, records: List[Record]) -> None:
        tmp_path = None
        try:
            os.makedirs(self.data_dir, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(prefix=f".{self.name}.", suffix=".tmp", dir=self.data_dir)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(records, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except (OSError, TypeError, ValueError) as e:
            if tmp_path and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise StorageError(f"Failed to write collection {self.name}: {e}") from e


class Database:
    """Набор коллекций приложения"""

    def __init__(self, collections: Dict[str, RecordCollection]):
        missing = set(COLLECTIONS) - set(collections)
        if missing:
            raise ValueError(f"Missing collections: {', '.join(sorted(missing))}")
        self.users = collections["users"]
        self.sessions = collections["sessions"]
        self.typing = collections["typing"]
        self.messages = collections["messages"]
        self.calls = collections["calls"]

    @classmethod
    def from_directory(cls, data_dir: str) -> "Database":
        return cls({name: JsonFileCollection(name, data_dir) for name in COLLECTIONS})

    @classmethod
    def in_memory(cls) -> "Database":
        return cls({name: MemoryCollection(name) for name in COLLECTIONS})

    async def initialize(self) -> None:
        """Создает отсутствующие файлы коллекций"""
        for name in COLLECTIONS:
            await getattr(self, name).load()
        logger.info("Collections initialized")


_database: Optional[Database] = None


def get_database() -> Database:
    global _database
    if _database is None:
        _database = Database.from_directory(settings.data_dir)
    return _database


# Функция для dependency injection в FastAPI
async def get_db() -> Database:
    return get_database()
