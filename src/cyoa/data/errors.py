"""Custom exceptions for story loading and parsing."""


class DataError(Exception):
    """Base exception for the data layer."""


class DataLoadError(DataError):
    """Raised when story or manifest files are missing or unreadable."""


class ParseError(DataLoadError):
    """Raised when text is not valid JSON."""


class SchemaError(DataError):
    """Raised when JSON content does not have the expected shape."""
