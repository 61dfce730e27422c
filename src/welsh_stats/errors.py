"""Exception hierarchy shared by the model, parsers, and importer."""


class StatsError(Exception):
    """Base class for every error raised by welsh-stats."""


class NotFoundError(StatsError, KeyError):
    """Raised when a lookup by year, language, measure, or area code misses."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the message readable.
        return str(self.args[0]) if self.args else ""


class InvalidArgumentError(StatsError, ValueError):
    """Raised for malformed arguments such as a bad language code."""


class ParseError(StatsError, ValueError):
    """Raised when a source stream cannot be read or has a malformed structure."""


class ConfigurationError(StatsError, RuntimeError):
    """Raised for unusable configuration: unknown source types, datasets, or mappings."""


__all__ = [
    "ConfigurationError",
    "InvalidArgumentError",
    "NotFoundError",
    "ParseError",
    "StatsError",
]
