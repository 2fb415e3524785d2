from .base import RateSource
from .frankfurter import FrankfurterProvider

__all__ = ['RateSource', 'FrankfurterProvider']
