"""
Keelson suggestion ranker: "did you mean" candidates for mistyped names.

A candidate is kept when its Levenshtein distance to the query is within the
threshold (a third of the query length, never less than 1) or when it contains
a non-empty query verbatim. Results are ordered by distance; equal distances
keep the candidates' own order.
"""
from .utils import *


def distance(a, b, /):
    """
    Levenshtein edit distance (insertions, deletions and substitutions cost 1).
    """
    if not isinstance(a, str) or not isinstance(b, str):
        raise TypeError("distance() arguments must be strings")
    if len(a) < len(b):
        a, b = b, a
    if not b:
        return len(a)

    previous = list(range(len(b) + 1))
    for i, x in enumerate(a, 1):
        current = [i]
        for j, y in enumerate(b, 1):
            current.append(min(
                previous[j] + 1,
                current[j - 1] + 1,
                previous[j - 1] + (x != y),
            ))
        previous = current
    return previous[-1]


def suggest(query, candidates, /, threshold=Unset, limit=5):
    """
    Rank `candidates` close to `query`.

    Parameters
    - query: str
    - candidates: Iterable[str]; duplicates are dropped (first one wins).
    - threshold: maximum distance; max(len(query), 3) / 3 when Unset.
    - limit: maximum number of results, None for no limit.

    Returns
    - tuple[str, ...] sorted by ascending distance.
    """
    if not isinstance(query, str):
        raise TypeError("suggest() first argument must be a string")
    if limit is not None and (not isinstance(limit, int) or limit < 0):
        raise ValueError("suggest() 'limit' must be a non-negative integer or None")

    threshold = coalesce(threshold, max(len(query), 3) / 3)

    ranked = []
    for candidate in dict.fromkeys(candidates):
        score = distance(query, candidate)
        if score <= threshold or (query and query in candidate):
            ranked.append((score, candidate))

    ranked.sort(key=lambda pair: pair[0])
    names = tuple(candidate for _, candidate in ranked)
    return names if limit is None else names[:limit]


__all__ = (
    "distance",
    "suggest",
)
