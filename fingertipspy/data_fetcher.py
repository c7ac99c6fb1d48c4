"""
Data fetcher and processor for converting API responses to records and pandas DataFrames
"""

import io
import logging
from typing import Callable, Iterable, List, Optional, Sequence

import pandas as pd

from .exceptions import FingertipsTransportError
from .models import (
    AreaType,
    Domain,
    Indicator,
    IndicatorAreaType,
    IndicatorSummary,
    Profile
)
from .utils import chunk_list

logger = logging.getLogger(__name__)


class DataFetcher:
    """
    Helper class for fetching metadata snapshots and shaping them into tables.

    Snapshots are fetched fresh on each call; nothing is kept between calls.
    """

    def __init__(self, client):
        """
        Initialize the DataFetcher.

        Args:
            client: FingertipsClient instance
        """
        self.client = client

    # ===== Metadata snapshots =====

    def fetch_profiles(self) -> List[Profile]:
        """Fetch every profile the API knows about."""
        profiles = _parse_records(
            self.client.get_profiles_metadata(), list, Profile.from_api, 'profiles'
        )
        logger.info(f"Fetched {len(profiles)} profiles")
        return profiles

    def fetch_domains(self, profiles: Sequence[Profile]) -> List[Domain]:
        """
        Fetch the domains listed by the given profiles.

        Each domain carries the ID and name of the profile that lists it.
        Group IDs missing from the group metadata response are skipped.

        Args:
            profiles: Profiles whose domains to fetch

        Returns:
            List of Domain records, ordered by profile then by the profile's
            own domain order
        """
        group_ids = list(dict.fromkeys(g for p in profiles for g in p.group_ids))
        if not group_ids:
            return []

        groups = {}
        for chunk in chunk_list(group_ids, self.client.GROUP_CHUNK_SIZE):
            records = _parse_records(
                self.client.get_group_metadata(chunk),
                list,
                lambda r: (int(r['Id']), r.get('Name')),
                'group metadata'
            )
            groups.update(records)

        domains = []
        for profile in profiles:
            for group_id in profile.group_ids:
                if group_id not in groups:
                    logger.warning(
                        f"No group metadata for DomainID {group_id} "
                        f"(profile {profile.profile_id})"
                    )
                    continue
                domains.append(Domain(
                    domain_id=group_id,
                    domain_name=groups[group_id],
                    profile_id=profile.profile_id,
                    profile_name=profile.profile_name,
                ))

        logger.info(f"Fetched {len(domains)} domains across {len(profiles)} profiles")
        return domains

    def fetch_indicators(self, domains: Sequence[Domain]) -> List[Indicator]:
        """
        Fetch the indicators listed under each of the given domains.

        One request is made per domain so every indicator row can carry the
        domain it was listed under.

        Args:
            domains: Domains whose indicators to fetch

        Returns:
            List of Indicator records, one per indicator-per-domain pair
        """
        if domains:
            logger.info(f"Fetching indicator metadata for {len(domains)} domains")

        indicators = []
        for domain in domains:
            domain_indicators = _parse_records(
                self.client.get_indicator_metadata(domain.domain_id),
                dict,
                lambda r, domain=domain: Indicator.from_api(r, domain),
                f"indicator metadata for domain {domain.domain_id}"
            )
            logger.debug(
                f"Domain {domain.domain_id}: {len(domain_indicators)} indicators"
            )
            indicators.extend(domain_indicators)

        return indicators

    def fetch_all_indicators(self) -> List[IndicatorSummary]:
        """Fetch every indicator in a single request, without domain information."""
        return _parse_records(
            self.client.get_all_indicator_metadata(),
            dict,
            IndicatorSummary.from_api,
            'indicator metadata'
        )

    def fetch_area_types(self) -> List[AreaType]:
        return _parse_records(
            self.client.get_area_types_metadata(), list, AreaType.from_api, 'area types'
        )

    def fetch_indicator_area_types(self) -> List[IndicatorAreaType]:
        return _parse_records(
            self.client.get_available_data(), list, IndicatorAreaType.from_api, 'available data'
        )

    # ===== Tables =====

    @staticmethod
    def to_table(records: Iterable, record_type) -> pd.DataFrame:
        """
        Convert records to a DataFrame using the record type's table columns.

        The columns are present even when there are no records.

        Args:
            records: Records of a single type
            record_type: The record class, providing TABLE_COLUMNS

        Returns:
            pandas.DataFrame with one row per record
        """
        columns = record_type.TABLE_COLUMNS
        rows = [
            {column: getattr(record, attr) for attr, column in columns.items()}
            for record in records
        ]
        return pd.DataFrame(rows, columns=list(columns.values()))

    # ===== Observation data =====

    def get_data_as_dataframe(
        self,
        indicator_ids,
        area_type_id: int,
        parent_area_type_id: int,
        profile_id: Optional[int] = None,
        time_periods: Optional[Iterable[str]] = None,
        area_codes: Optional[Iterable[str]] = None
    ) -> pd.DataFrame:
        """
        Get observation data as a pandas DataFrame.

        Column names are those of the API's CSV with spaces removed, e.g.
        'Indicator ID' becomes 'IndicatorID' and 'Time period' becomes
        'Timeperiod'.

        Args:
            indicator_ids: Indicator IDs to fetch
            area_type_id: Area type of the returned rows
            parent_area_type_id: Area type the rows are grouped under
            profile_id: Optional profile to take indicator options from
            time_periods: Optional time periods to keep (e.g. '2019/20')
            area_codes: Optional area codes to keep

        Returns:
            pandas.DataFrame with the results
        """
        text = self.client.get_data_csv(
            indicator_ids=indicator_ids,
            area_type_id=area_type_id,
            parent_area_type_id=parent_area_type_id,
            profile_id=profile_id
        )

        if not text or not text.strip():
            logger.warning("No data returned from API")
            return pd.DataFrame()

        try:
            df = pd.read_csv(io.StringIO(text))
        except (pd.errors.ParserError, pd.errors.EmptyDataError) as e:
            raise FingertipsTransportError(f"Malformed CSV data response: {e}") from e
        df.columns = [clean_column_name(c) for c in df.columns]

        if time_periods is not None:
            df = self._filter_column(df, 'Timeperiod', time_periods)
        if area_codes is not None:
            df = self._filter_column(df, 'AreaCode', area_codes)

        if df.empty:
            logger.warning("No data left after filtering")

        df.attrs['indicator_ids'] = sorted(indicator_ids)
        df.attrs['area_type_id'] = area_type_id
        df.attrs['parent_area_type_id'] = parent_area_type_id

        return df

    @staticmethod
    def _filter_column(df: pd.DataFrame, column: str, values) -> pd.DataFrame:
        if isinstance(values, str):
            values = [values]
        if column not in df.columns:
            logger.warning(f"Cannot filter on missing column '{column}'")
            return df
        return df[df[column].astype(str).isin([str(v) for v in values])].reset_index(drop=True)


def clean_column_name(name: str) -> str:
    """
    Remove spaces from a CSV column heading.

    Example:
        >>> clean_column_name('Indicator ID')
        'IndicatorID'
    """
    return str(name).replace(' ', '')


def _parse_records(payload, expected: type, parse: Callable, what: str) -> List:
    """
    Parse each record of an API payload, checking the payload's shape first.

    A dict payload is parsed by its values, since the API keys some
    responses by ID. ``None``, ``[]`` and ``{}`` all count as empty.

    Raises:
        FingertipsTransportError: If the payload is not of the expected type
            or a record lacks the fields ``parse`` needs
    """
    if payload is None or payload == [] or payload == {}:
        return []
    if not isinstance(payload, expected):
        raise FingertipsTransportError(
            f"Unexpected {what} response: expected a JSON {expected.__name__}, "
            f"got {type(payload).__name__}: {str(payload)[:200]}"
        )

    records = payload.values() if isinstance(payload, dict) else payload
    try:
        return [parse(r) for r in records]
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise FingertipsTransportError(
            f"Malformed record in {what} response: {e!r}"
        ) from e
