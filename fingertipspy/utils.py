"""
Utility functions for fingertipspy package
"""

from numbers import Integral
from typing import FrozenSet, Iterable, List, Union

from .exceptions import FingertipsValidationError


def format_id_list(ids: Union[int, str, Iterable[Union[int, str]]]) -> str:
    """
    Format a list of IDs into a comma-separated string.

    Accepts single values, lists, tuples, sets, ranges, or already-formatted
    strings. Sets are sorted so repeated calls build identical URLs.

    Args:
        ids: Single ID, comma-separated string, or collection of IDs

    Returns:
        Comma-separated string of IDs

    Examples:
        >>> format_id_list([90362, 90366])
        '90362,90366'
        >>> format_id_list('90362,90366')
        '90362,90366'
        >>> format_id_list(19)
        '19'
        >>> format_id_list({8, 19})
        '8,19'
    """
    if isinstance(ids, (Integral, str)):
        return str(ids)
    elif isinstance(ids, (set, frozenset)):
        return ','.join(str(i) for i in sorted(ids))
    elif isinstance(ids, (list, tuple, range)):
        return ','.join(str(i) for i in ids)
    else:
        raise ValueError(
            f"Invalid type for IDs: {type(ids)}. "
            f"Expected int, str, list, tuple, set, or range"
        )


def as_id_set(ids, label: str = 'ID') -> FrozenSet[int]:
    """
    Normalise a user-supplied ID or collection of IDs to a frozenset of ints.

    Args:
        ids: A single integer or an iterable of integers (numpy integers
             and pandas Series are accepted)
        label: Name of the identifier, used in error messages

    Returns:
        Frozenset of ints; empty if an empty collection was given

    Raises:
        FingertipsValidationError: If any value is not an integer
    """
    values = [ids] if _is_scalar(ids) else _iterate(ids, label)
    invalid = [v for v in values if isinstance(v, bool) or not isinstance(v, Integral)]
    if invalid:
        raise FingertipsValidationError(
            f"{label} values must be integers, got: {', '.join(repr(v) for v in invalid)}"
        )
    return frozenset(int(v) for v in values)


def as_name_set(names, label: str = 'name') -> FrozenSet[str]:
    """
    Normalise a user-supplied name or collection of names to a frozenset of str.

    A bare string is one name, not a sequence of characters.
    """
    values = [names] if _is_scalar(names) else _iterate(names, label)
    invalid = [v for v in values if not isinstance(v, str)]
    if invalid:
        raise FingertipsValidationError(
            f"{label} values must be strings, got: {', '.join(repr(v) for v in invalid)}"
        )
    return frozenset(values)


def _is_scalar(value) -> bool:
    return isinstance(value, (str, bytes, Integral)) or not hasattr(value, '__iter__')


def _iterate(values, label: str) -> List:
    if isinstance(values, dict):
        raise FingertipsValidationError(f"{label} values cannot be given as a dict")
    return list(values)


def chunk_list(lst: List, chunk_size: int) -> List[List]:
    """
    Split a list into chunks of specified size.

    Args:
        lst: List to chunk
        chunk_size: Size of each chunk

    Returns:
        List of chunks

    Example:
        >>> chunk_list([1, 2, 3, 4, 5], 2)
        [[1, 2], [3, 4], [5]]
    """
    return [lst[i:i + chunk_size] for i in range(0, len(lst), chunk_size)]


def build_filter_dict(**kwargs) -> dict:
    """
    Build a filter dictionary from keyword arguments, excluding None values.

    Args:
        **kwargs: Filter parameters

    Returns:
        Dictionary with non-None values
    """
    return {k: v for k, v in kwargs.items() if v is not None}
