"""
Resolution of user-supplied IDs and names against a metadata snapshot

The functions here are pure: they take records already fetched from the API
and return the matching subset, or raise FingertipsLookupError naming every
value that has no match.
"""

from dataclasses import dataclass
from typing import List, Sequence, Tuple, TypeVar

from .exceptions import FingertipsLookupError
from .models import All, ById, ByName, Selector
from .utils import as_id_set, as_name_set

T = TypeVar('T')

RERUN_HINT = "Re-run the function without any inputs to see all possible {}."


@dataclass(frozen=True)
class LookupRule:
    """
    Which record attributes hold the identifier and name for an entity, and
    how to describe unmatched values of each.
    """

    id_attr: str
    name_attr: str
    id_label: str
    name_label: str
    id_message: str
    name_message: str


PROFILE_RULE = LookupRule(
    id_attr='profile_id',
    name_attr='profile_name',
    id_label='ProfileID',
    name_label='ProfileName',
    id_message="ProfileID(s) are not in the list of profile IDs",
    name_message="Profile names are not in the list of profile names",
)

DOMAIN_RULE = LookupRule(
    id_attr='domain_id',
    name_attr='domain_name',
    id_label='DomainID',
    name_label='DomainName',
    id_message="DomainID(s) are not in the list of domain IDs",
    name_message="Domain names are not in the list of domain names",
)

INDICATOR_RULE = LookupRule(
    id_attr='indicator_id',
    name_attr='indicator_name',
    id_label='IndicatorID',
    name_label='IndicatorName',
    id_message="IndicatorID(s) are not in the list of indicator IDs",
    name_message="Indicator names are not in the list of indicator names",
)

AREA_TYPE_RULE = LookupRule(
    id_attr='area_type_id',
    name_attr='area_type_name',
    id_label='AreaTypeID',
    name_label='AreaTypeName',
    id_message="AreaTypeID(s) are not in the list of area type IDs",
    name_message="Area type names are not in the list of area type names",
)


def selectors_from(rule: LookupRule, ids=None, names=None) -> Tuple[Selector, ...]:
    """
    Build selectors from optional user arguments.

    ``None`` contributes nothing; anything else becomes a ById or ByName.
    With neither argument given the result is ``(All(),)``.

    Example:
        >>> selectors_from(PROFILE_RULE, ids=[19, 8])
        (ById(ids=frozenset({8, 19})),)
    """
    selectors = []
    if ids is not None:
        selectors.append(ById(as_id_set(ids, rule.id_label)))
    if names is not None:
        selectors.append(ByName(as_name_set(names, rule.name_label)))
    return tuple(selectors) or (All(),)


def resolve(
    records: Sequence[T],
    selectors: Sequence[Selector],
    rule: LookupRule
) -> List[T]:
    """
    Filter a snapshot down to the records matched by any of the selectors.

    Every selector is validated before filtering, so a partially valid
    selector fails the whole call. Matching records are returned once each,
    in snapshot order.

    Args:
        records: Full metadata snapshot for one entity
        selectors: Selectors to apply; an empty sequence selects everything
        rule: Attribute names and messages for the entity

    Returns:
        List of matching records

    Raises:
        FingertipsLookupError: If a ById or ByName selector holds values
            that are not in the snapshot
    """
    select_all = not selectors
    ids = set()
    names = set()

    for selector in selectors:
        if isinstance(selector, All):
            select_all = True
        elif isinstance(selector, ById):
            _check_known(
                selector.ids,
                {getattr(r, rule.id_attr) for r in records},
                rule.id_message,
                'IDs'
            )
            ids |= selector.ids
        elif isinstance(selector, ByName):
            _check_known(
                selector.names,
                {getattr(r, rule.name_attr) for r in records},
                rule.name_message,
                'names'
            )
            names |= selector.names
        else:
            raise TypeError(f"Unsupported selector: {selector!r}")

    if select_all:
        return list(records)

    return [
        r for r in records
        if getattr(r, rule.id_attr) in ids
        or (names and getattr(r, rule.name_attr) in names)
    ]


def _check_known(requested, known, message: str, kind: str) -> None:
    missing = sorted(requested - known)
    if missing:
        raise FingertipsLookupError(
            f"{message}. {RERUN_HINT.format(kind)} "
            f"Invalid: {', '.join(str(m) for m in missing)}",
            invalid=missing
        )
