"""Exception types raised inside the search pipeline."""


class SearchEngineError(Exception):
    """Base class for errors raised by the record search engine."""

    pass


class StrategyTimeoutError(SearchEngineError):
    """
    Raised when a strategy exceeds its matching time budget.

    The engine catches it, drops the strategy's hits for the call and
    reports the message in the response diagnostics.
    """

    def __init__(self, method: str, message: str) -> None:
        super().__init__(message)
        self.method = method


class InvalidOptionsError(SearchEngineError):
    """Raised when search options fail validation at call entry."""

    pass


__all__ = [
    "SearchEngineError",
    "StrategyTimeoutError",
    "InvalidOptionsError",
]
