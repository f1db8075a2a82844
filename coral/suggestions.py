"""Edit distance used to suggest commands for mistyped names."""

from __future__ import annotations


def levenshtein(first: str, second: str, ignore_case: bool = False) -> int:
    """Return the Levenshtein distance between two strings."""
    if ignore_case:
        first = first.lower()
        second = second.lower()
    previous = list(range(len(second) + 1))
    for i, a in enumerate(first, start=1):
        current = [i]
        for j, b in enumerate(second, start=1):
            if a == b:
                current.append(previous[j - 1])
            else:
                current.append(min(previous[j], current[j - 1], previous[j - 1]) + 1)
        previous = current
    return previous[-1]