"""Location normalization for grouping captured states."""

import re
from urllib.parse import urlparse


UUID_SEGMENT_PATTERN = re.compile(
    r"/[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}(?=/|$)",
    re.IGNORECASE,
)
NUMERIC_SEGMENT_PATTERN = re.compile(r"/\d+(?=/|$)")


def normalize_location(url: str) -> str:
    """Reduce a URL to a pattern shared by pages of the same kind.

    Keeps scheme, host and path; drops query and fragment; replaces UUID
    path segments with ``{uuid}`` and numeric segments with ``{id}``.

    Args:
        url: Captured location.

    Returns:
        Normalized pattern, or the input unchanged if it is not an
        absolute URL.

    Examples:
        >>> normalize_location("https://Example.com/clients/123/files?page=2")
        'https://example.com/clients/{id}/files'
    """
    if not url:
        return url

    parsed = urlparse(url)
    if not parsed.scheme or not parsed.netloc:
        return url

    path = UUID_SEGMENT_PATTERN.sub("/{uuid}", parsed.path)
    path = NUMERIC_SEGMENT_PATTERN.sub("/{id}", path)
    return f"{parsed.scheme.lower()}://{parsed.netloc.lower()}{path}"
