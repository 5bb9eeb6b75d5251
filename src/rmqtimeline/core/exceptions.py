class RmqTimelineError(Exception):
    """Base class for all rmqtimeline errors."""


class ParseError(RmqTimelineError):
    """Raised when a line cannot be turned into or attached to an entry."""


class MalformedContinuationError(ParseError):
    """A continuation line appeared before any header line of its source."""

    def __init__(self, source_id: int, line_number: int, line: str):
        self.source_id = source_id
        self.line_number = line_number
        self.line = line
        super().__init__(
            f"Continuation line {line_number} of source {source_id} has no preceding header: {line[:80]!r}"
        )


class SourceValidationError(RmqTimelineError):
    """Raised when an input source is missing or cannot be read."""
