"""Edit-distance string similarity used by the fuzzy suggestion paths."""


def distance(a: str, b: str) -> int:
    """Levenshtein distance with unit cost for insert, delete and substitute.

    Case-sensitive; callers lower-case both sides when they want otherwise.
    """
    rows = len(a) + 1
    cols = len(b) + 1
    table = [[0] * cols for _ in range(rows)]

    for i in range(rows):
        table[i][0] = i
    for j in range(cols):
        table[0][j] = j

    for i in range(1, rows):
        for j in range(1, cols):
            cost = 0 if a[i - 1] == b[j - 1] else 1
            table[i][j] = min(
                table[i - 1][j] + 1,
                table[i][j - 1] + 1,
                table[i - 1][j - 1] + cost,
            )

    return table[-1][-1]


def similarity(a: str, b: str) -> float:
    """``1 - distance / longest length``, always within [0, 1]."""
    if a == b:
        return 1.0
    if not a or not b:
        return 0.0
    return 1.0 - distance(a, b) / max(len(a), len(b))


def overlap_similarity(source: str, query: str) -> float:
    """Containment-or-character-overlap score used by ``fuzzy_search``.

    A query contained in the source scores 1.0; otherwise the number of
    distinct characters the two share, over the longer length.
    """
    if query in source:
        return 1.0
    longest = max(len(source), len(query))
    if longest == 0:
        return 0.0
    return len(set(source) & set(query)) / longest
