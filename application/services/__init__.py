from .converter import ConverterController, ConverterState
from .favorites import FavoritesService
from .rates_repository import RatesRepository

__all__ = ['ConverterController', 'ConverterState', 'FavoritesService', 'RatesRepository']
