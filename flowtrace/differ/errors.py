"""Exceptions for the block diff engine."""


class DiffComputationFailure(Exception):
    """Raised when a diff cannot be computed from the given content.

    The engine absorbs this error and falls back to a whole-content
    replacement diff; it only escapes through ``BlockDiffEngine.compute_diff_strict``.
    """

    def __init__(self, reason: str) -> None:
        """Initialize the failure.

        Args:
            reason: Human-readable description of the failure.
        """
        self.reason = reason
        super().__init__(f"Diff computation failed: {reason}")
