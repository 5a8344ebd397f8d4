import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Generic, Iterable, List, Type, TypeVar

from barta.db.store import Record, RecordCollection

logger = logging.getLogger(__name__)

E = TypeVar("E")


def next_id(existing_ids: Iterable[str], now: int) -> str:
    """
    Идентификатор на основе времени: не меньше текущего времени в мс и
    строго больше любого числового идентификатора коллекции.
    """
    latest = 0
    for value in existing_ids:
        try:
            latest = max(latest, int(value))
        except (TypeError, ValueError):
            continue
    return str(max(now, latest + 1))


class Repository(Generic[E]):
    """Базовый репозиторий: преобразует записи коллекции в доменные сущности"""

    entity: Type[E]

    def __init__(self, collection: RecordCollection):
        self.collection = collection

    async def get_all(self) -> List[E]:
        return self._to_domain(await self.collection.load())

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[List[E]]:
        """Список сущностей для изменения на месте; по выходу коллекция перезаписывается"""
        async with self.collection.transaction() as records:
            entities = self._to_domain(records)
            yield entities
            records[:] = [self._to_record(entity) for entity in entities]

    def _to_domain(self, records: List[Record]) -> List[E]:
        entities = []
        for record in records:
            try:
                entities.append(self.entity.from_dict(record))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping malformed record in {self.collection.name}: {e!r}")
        return entities

    def _to_record(self, entity: E) -> Record:
        return entity.to_dict()
