import json
import logging
from typing import Any

from sqlalchemy import delete
from sqlalchemy.future import select

from infrastructure.persistence.database import Database
from infrastructure.persistence.models.key_value import KeyValueDB

logger = logging.getLogger(__name__)


class KeyValueStore:
	"""Durable key/value map mirrored in memory.

	Every row is loaded once by :meth:`create`, so reads never touch the
	database. Writes are committed first and only then applied to the mirror.
	"""

	def __init__(self, database: Database, values: dict[str, Any] | None = None):
		self.database = database
		self._values: dict[str, Any] = dict(values or {})

	@classmethod
	async def create(cls, database: Database) -> 'KeyValueStore':
		async with database.session() as session:
			result = await session.execute(select(KeyValueDB))
			rows = result.scalars().all()

		values: dict[str, Any] = {}
		for row in rows:
			try:
				values[row.key] = json.loads(row.value)
			except ValueError:
				logger.warning(f'Skipping undecodable value for key {row.key}')
		logger.info(f'Loaded {len(values)} keys from local store')
		return cls(database, values)

	def get(self, key: str, default: Any = None) -> Any:
		return self._values.get(key, default)

	def contains(self, key: str) -> bool:
		return key in self._values

	def keys(self) -> list[str]:
		return list(self._values)

	async def set(self, key: str, value: Any) -> None:
		await self.set_many({key: value})

	async def set_many(self, items: dict[str, Any]) -> None:
		"""Write several keys in one transaction; the mirror changes only once it commits."""
		encoded = {key: json.dumps(value) for key, value in items.items()}
		async with self.database.session() as session:
			for key, payload in encoded.items():
				await session.merge(KeyValueDB(key=key, value=payload))
		for key, payload in encoded.items():
			self._values[key] = json.loads(payload)

	async def remove(self, *keys: str) -> None:
		if not keys:
			return
		async with self.database.session() as session:
			await session.execute(delete(KeyValueDB).where(KeyValueDB.key.in_(keys)))
		for key in keys:
			self._values.pop(key, None)

	async def clear(self) -> None:
		async with self.database.session() as session:
			await session.execute(delete(KeyValueDB))
		self._values.clear()
