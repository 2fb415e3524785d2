from asyncio import CancelledError

__all__ = [
    "CancelledError",
    "RatesError",
    "NetworkError",
    "RateLimitError",
    "ServerError",
    "ParseError",
    "CacheError",
    "UnknownError",
]


class RatesError(Exception):
    default_message = "Unknown error occurred"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NetworkError(RatesError):
    default_message = "Network error occurred"


class RateLimitError(RatesError):
    default_message = "Rate limit exceeded"


class ServerError(RatesError):
    def __init__(self, status_code: int, message: str | None = None):
        self.status_code = status_code
        super().__init__(message or f"Server error: {status_code}")


class ParseError(RatesError):
    default_message = "Failed to parse data"


class CacheError(RatesError):
    default_message = "Cache error"


class UnknownError(RatesError):
    pass
