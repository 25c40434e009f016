"""Content hashing for capture collaborators.

The controller never hashes content itself: a capture without a hash is
always stored as a new state. Collaborators that have no hash of their
own can use this helper before submitting a capture.
"""

import hashlib


def compute_content_hash(content: str, location_pattern: str | None = None) -> str:
    """Compute a deterministic hash of captured content.

    Args:
        content: Captured text content.
        location_pattern: Optional normalized location to include.

    Returns:
        First 16 characters of the SHA-256 hex digest.
    """
    parts = [f"content:{content}"]
    if location_pattern:
        parts.append(f"location:{location_pattern}")
    return hashlib.sha256("\n".join(parts).encode("utf-8")).hexdigest()[:16]
