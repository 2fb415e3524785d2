from datetime import datetime

from sqlalchemy import DateTime, String, Text, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
	pass


class KeyValueDB(Base):
	__tablename__ = 'key_value'

	key: Mapped[str] = mapped_column(String(128), primary_key=True)
	# JSON-encoded payload
	value: Mapped[str] = mapped_column(Text, nullable=False)
	updated_at: Mapped[datetime] = mapped_column(
		DateTime, nullable=False, server_default=func.now(), onupdate=func.now()
	)
