"""Character-level edit distance and normalized similarity."""


def levenshtein_distance(first: str, second: str) -> int:
    """Compute the Levenshtein edit distance between two strings.

    Uses two rolling rows, so memory is linear in the shorter string.

    Args:
        first: First string.
        second: Second string.

    Returns:
        Minimum number of single-character insertions, deletions and
        substitutions turning ``first`` into ``second``.
    """
    if first == second:
        return 0
    if len(first) < len(second):
        first, second = second, first
    if not second:
        return len(first)

    previous = list(range(len(second) + 1))
    for i, char_a in enumerate(first, start=1):
        current = [i]
        for j, char_b in enumerate(second, start=1):
            cost = 0 if char_a == char_b else 1
            current.append(
                min(
                    previous[j] + 1,
                    current[j - 1] + 1,
                    previous[j - 1] + cost,
                )
            )
        previous = current
    return previous[-1]


def similarity(first: str, second: str) -> float:
    """Normalized similarity in [0, 1].

    ``1 - distance / max(len(first), len(second))``; identical strings,
    including two empty strings, score 1.0.
    """
    if first == second:
        return 1.0
    longest = max(len(first), len(second))
    if longest == 0:
        return 1.0
    return 1.0 - levenshtein_distance(first, second) / longest


def similarity_upper_bound(first: str, second: str) -> float:
    """Highest similarity two strings of these lengths can reach.

    The edit distance is at least the length difference.
    """
    longest = max(len(first), len(second))
    if longest == 0:
        return 1.0
    return 1.0 - abs(len(first) - len(second)) / longest
