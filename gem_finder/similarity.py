"""
Edit-distance similarity between two tokens.

Inputs are expected to be lowercased by the caller; no case folding or
unicode normalization happens here.
"""


def levenshtein_distance(a: str, b: str) -> int:
    """
    Classic edit distance (insert, delete, substitute each cost 1).
    Rows follow `b`, columns follow `a`: the matrix is (len(b)+1) x (len(a)+1).
    """
    matrix = [[0] * (len(a) + 1) for _ in range(len(b) + 1)]
    for i in range(len(b) + 1):
        matrix[i][0] = i
    for j in range(len(a) + 1):
        matrix[0][j] = j

    for i in range(1, len(b) + 1):
        for j in range(1, len(a) + 1):
            if b[i - 1] == a[j - 1]:
                matrix[i][j] = matrix[i - 1][j - 1]
            else:
                matrix[i][j] = min(
                    matrix[i - 1][j - 1] + 1,  # substitution
                    matrix[i][j - 1] + 1,      # insertion
                    matrix[i - 1][j] + 1,      # deletion
                )
    return matrix[len(b)][len(a)]


def similarity(a: str, b: str) -> float:
    """Normalized inverse edit distance in [0, 1]; two empty strings -> 1.0."""
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return (longest - levenshtein_distance(a, b)) / longest
