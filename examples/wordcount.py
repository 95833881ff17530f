"""
Classic MapReduce word count reduce function.
Values are the per-occurrence counts emitted by the map side, as strings.
"""


def reduce_function(key, values):
    """
    Reduce function: sum all counts for a word.

    Args:
        key: Word
        values: List of counts as strings (all "1"s from map)

    Returns:
        Total count as a string
    """
    return str(sum(int(v) for v in values))
