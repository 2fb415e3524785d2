from .database import Database
from .repositories.key_value import KeyValueStore

__all__ = ['Database', 'KeyValueStore']
