class ParseError(ValueError):
    """Raised when client-supplied text (filter JSON, CSV) cannot be decoded."""


class FilterParseError(ParseError):
    """Raised when a search filter is malformed."""
