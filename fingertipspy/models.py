"""
Typed records for Fingertips metadata and the selectors used to filter them
"""

from dataclasses import dataclass, field
from typing import ClassVar, Dict, FrozenSet, Tuple, Union


@dataclass(frozen=True)
class Profile:
    """A top-level thematic grouping of health domains."""

    profile_id: int
    profile_name: str
    group_ids: Tuple[int, ...] = field(default=(), compare=False)

    TABLE_COLUMNS: ClassVar[Dict[str, str]] = {
        'profile_id': 'ProfileID',
        'profile_name': 'ProfileName',
    }

    @classmethod
    def from_api(cls, record: Dict) -> 'Profile':
        return cls(
            profile_id=int(record['Id']),
            profile_name=record.get('Name'),
            group_ids=tuple(int(g) for g in record.get('GroupIds') or ()),
        )


@dataclass(frozen=True)
class Domain:
    """A grouping of related indicators within a profile."""

    domain_id: int
    domain_name: str
    profile_id: int
    profile_name: str

    TABLE_COLUMNS: ClassVar[Dict[str, str]] = {
        'domain_id': 'DomainID',
        'domain_name': 'DomainName',
        'profile_id': 'ProfileID',
        'profile_name': 'ProfileName',
    }


@dataclass(frozen=True)
class Indicator:
    """
    A measured statistic as listed under one domain.

    The same indicator appears once for every domain that lists it.
    """

    indicator_id: int
    indicator_name: str
    domain_id: int
    domain_name: str
    profile_id: int
    profile_name: str

    TABLE_COLUMNS: ClassVar[Dict[str, str]] = {
        'indicator_id': 'IndicatorID',
        'indicator_name': 'IndicatorName',
        'domain_id': 'DomainID',
        'domain_name': 'DomainName',
        'profile_id': 'ProfileID',
        'profile_name': 'ProfileName',
    }

    @classmethod
    def from_api(cls, record: Dict, domain: Domain) -> 'Indicator':
        descriptive = record.get('Descriptive') or {}
        return cls(
            indicator_id=int(record['IID']),
            indicator_name=descriptive.get('Name'),
            domain_id=domain.domain_id,
            domain_name=domain.domain_name,
            profile_id=domain.profile_id,
            profile_name=domain.profile_name,
        )


@dataclass(frozen=True)
class IndicatorSummary:
    """An indicator independent of the domains that list it."""

    indicator_id: int
    indicator_name: str

    TABLE_COLUMNS: ClassVar[Dict[str, str]] = {
        'indicator_id': 'IndicatorID',
        'indicator_name': 'IndicatorName',
    }

    @classmethod
    def from_api(cls, record: Dict) -> 'IndicatorSummary':
        descriptive = record.get('Descriptive') or {}
        return cls(
            indicator_id=int(record['IID']),
            indicator_name=descriptive.get('Name'),
        )


@dataclass(frozen=True)
class AreaType:
    """A category of geography indicators can be reported against."""

    area_type_id: int
    area_type_name: str
    short_name: str = None

    TABLE_COLUMNS: ClassVar[Dict[str, str]] = {
        'area_type_id': 'AreaTypeID',
        'area_type_name': 'AreaTypeName',
        'short_name': 'AreaTypeShortName',
    }

    @classmethod
    def from_api(cls, record: Dict) -> 'AreaType':
        return cls(
            area_type_id=int(record['Id']),
            area_type_name=record.get('Name'),
            short_name=record.get('Short'),
        )


@dataclass(frozen=True)
class IndicatorAreaType:
    indicator_id: int
    area_type_id: int

    TABLE_COLUMNS: ClassVar[Dict[str, str]] = {
        'indicator_id': 'IndicatorID',
        'area_type_id': 'AreaTypeID',
    }

    @classmethod
    def from_api(cls, record: Dict) -> 'IndicatorAreaType':
        return cls(
            indicator_id=int(record['IndicatorId']),
            area_type_id=int(record['AreaTypeId']),
        )


# ===== Selectors =====

@dataclass(frozen=True)
class All:
    """Select every record in a snapshot."""


@dataclass(frozen=True)
class ById:
    """Select records whose identifier is in ``ids``."""

    ids: FrozenSet[int]


@dataclass(frozen=True)
class ByName:
    """Select records whose name is in ``names``."""

    names: FrozenSet[str]


Selector = Union[All, ById, ByName]
