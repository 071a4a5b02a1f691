class HistoryError(Exception):
    """Base class for every error raised by navhistory."""


class InvalidArgument(HistoryError, TypeError):
    """A listener, block or navigation target of the wrong type was passed."""


class ConfigError(HistoryError, ValueError):
    """A configuration value could not be parsed."""
