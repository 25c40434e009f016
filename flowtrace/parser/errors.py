"""Exceptions for the structural text parser."""


class BlockParseError(Exception):
    """Raised when input cannot be read as text."""

    def __init__(self, reason: str) -> None:
        """Initialize the parse error.

        Args:
            reason: Human-readable description of the failure.
        """
        self.reason = reason
        super().__init__(f"Cannot parse blocks: {reason}")
