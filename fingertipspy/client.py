"""
Main client for interacting with the Fingertips public health API
"""

import requests
from typing import Dict, Iterable, List, Optional, Union, Any
import logging
import pandas as pd

from .exceptions import (
    FingertipsTransportError,
    FingertipsValidationError,
    FingertipsRateLimitError,
    FingertipsNotFoundError
)
from .data_fetcher import DataFetcher
from .models import AreaType, Domain, Indicator, IndicatorAreaType, Profile
from .resolver import (
    AREA_TYPE_RULE,
    DOMAIN_RULE,
    INDICATOR_RULE,
    PROFILE_RULE,
    resolve,
    selectors_from
)
from .utils import as_id_set, build_filter_dict, format_id_list

logger = logging.getLogger(__name__)

IdArg = Optional[Union[int, Iterable[int]]]
NameArg = Optional[Union[str, Iterable[str]]]


class FingertipsClient:
    """
    Main client for interacting with the Fingertips public health API.

    This client provides methods to:
    - List profiles, domains, indicators and area types
    - Validate IDs and names against the API's current metadata
    - Fetch indicator data for an area type
    - Convert results to pandas DataFrames

    Every call fetches fresh metadata; nothing is cached between calls.

    Attributes:
        base_url (str): Base URL for the API
        timeout (int): Request timeout in seconds
        session (requests.Session): HTTP session for making requests

    Example:
        >>> client = FingertipsClient()
        >>> profiles = client.list_profiles()
        >>> indicators = client.list_indicators(profile_ids=19)
        >>> data = client.get_data(90362, area_type_id=102)
    """

    BASE_URL = "https://fingertips.phe.org.uk/api"
    DEFAULT_TIMEOUT = 30  # seconds
    DEFAULT_AREA_TYPE_ID = 102  # Counties and unitary authorities
    DEFAULT_PARENT_AREA_TYPE_ID = 15  # England
    GROUP_CHUNK_SIZE = 100

    def __init__(
        self,
        base_url: str = None,
        timeout: int = None
    ):
        """
        Initialize the Fingertips API client.

        Args:
            base_url: API root URL (default: the public Fingertips API)
            timeout: Request timeout in seconds (default: 30)
        """
        self.base_url = (base_url or self.BASE_URL).rstrip('/')
        self.timeout = timeout or self.DEFAULT_TIMEOUT

        self.session = requests.Session()
        self.session.headers.update({
            'User-Agent': 'fingertipspy/0.1.0',
            'Accept': 'application/json'
        })

        # Initialize data fetcher
        self.data_fetcher = DataFetcher(self)

    def _build_url(self, *parts: str) -> str:
        """
        Build a complete URL from path components.

        Args:
            *parts: URL path components

        Returns:
            Complete URL string
        """
        filtered_parts = [str(p).strip('/') for p in parts if p]
        if not filtered_parts:
            return self.base_url

        return self.base_url + '/' + '/'.join(filtered_parts)

    def _make_request(
        self,
        endpoint: str,
        method: str = 'GET',
        params: Optional[Dict] = None,
        parse_json: bool = True,
        **kwargs
    ) -> Any:
        """
        Make a single HTTP request to the API.

        Args:
            endpoint: Complete URL built by the caller
            method: HTTP method (default: 'GET')
            params: Query parameters
            parse_json: Decode the body as JSON (default: True); otherwise
                        return the body as text
            **kwargs: Additional arguments for requests

        Returns:
            Decoded JSON payload, or response text

        Raises:
            FingertipsTransportError: If the request fails or the body is not valid JSON
            FingertipsNotFoundError: If resource not found (404)
            FingertipsRateLimitError: If rate limit exceeded (429)
        """
        url = endpoint
        logger.debug(f"{method} {url} params={params}")

        try:
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                timeout=self.timeout,
                **kwargs
            )
        except requests.exceptions.Timeout as e:
            raise FingertipsTransportError(f"Request timeout after {self.timeout}s: {url}") from e
        except requests.exceptions.RequestException as e:
            raise FingertipsTransportError(f"Request failed: {e}") from e

        # Handle different status codes
        if response.status_code == 404:
            raise FingertipsNotFoundError(
                f"Resource not found: {url}"
            )
        elif response.status_code == 429:
            raise FingertipsRateLimitError(
                "API rate limit exceeded. Please wait before making more requests."
            )
        elif response.status_code >= 400:
            raise FingertipsTransportError(
                f"API request failed with status {response.status_code}: {response.text}"
            )

        if not parse_json:
            return response.text

        try:
            return response.json()
        except ValueError as e:
            raise FingertipsTransportError(f"Malformed JSON response from {url}: {e}") from e

    # ===== Raw Metadata Methods =====

    def get_profiles_metadata(self) -> List[Dict]:
        """
        Get the raw profile records.

        Returns:
            List of profile dictionaries with 'Id', 'Name', 'Key' and 'GroupIds' keys
        """
        return self._make_request(self._build_url('profiles'))

    def get_group_metadata(self, group_ids: Iterable[int]) -> List[Dict]:
        """
        Get the raw records for the given domains (groups).

        Args:
            group_ids: Domain IDs to describe

        Returns:
            List of group dictionaries with 'Id' and 'Name' keys
        """
        endpoint = self._build_url('group_metadata')
        return self._make_request(endpoint, params={'group_ids': format_id_list(list(group_ids))})

    def get_indicator_metadata(self, group_id: int) -> Dict[str, Dict]:
        """
        Get the raw indicator metadata listed under one domain.

        Args:
            group_id: Domain ID

        Returns:
            Dictionary mapping indicator IDs to metadata with 'IID' and
            'Descriptive' keys
        """
        endpoint = self._build_url('indicator_metadata', 'by_group_id')
        return self._make_request(endpoint, params={'group_ids': group_id})

    def get_all_indicator_metadata(self) -> Dict[str, Dict]:
        """
        Get the raw metadata of every indicator in one request.

        Returns:
            Dictionary mapping indicator IDs to metadata with 'IID' and
            'Descriptive' keys
        """
        return self._make_request(self._build_url('indicator_metadata', 'all'))

    def get_area_types_metadata(self) -> List[Dict]:
        """Get the raw area type records ('Id', 'Name', 'Short')."""
        return self._make_request(self._build_url('area_types'))

    def get_available_data(self) -> List[Dict]:
        """Get the raw indicator/area type pairs that have data ('IndicatorId', 'AreaTypeId')."""
        return self._make_request(self._build_url('available_data'))

    def get_data_csv(
        self,
        indicator_ids: Union[int, Iterable[int]],
        area_type_id: int,
        parent_area_type_id: int,
        profile_id: Optional[int] = None
    ) -> str:
        """
        Get observation data for indicators as CSV text.

        Args:
            indicator_ids: Indicator IDs to fetch
            area_type_id: Area type of the returned rows
            parent_area_type_id: Area type the rows are grouped under
            profile_id: Optional profile to take indicator options from

        Returns:
            CSV text as returned by the API
        """
        endpoint = self._build_url('all_data', 'csv', 'by_indicator_id')
        params = build_filter_dict(
            indicator_ids=format_id_list(indicator_ids),
            child_area_type_id=area_type_id,
            parent_area_type_id=parent_area_type_id,
            profile_id=profile_id
        )
        return self._make_request(endpoint, params=params, parse_json=False)

    # ===== Lookup Methods =====

    def list_profiles(
        self,
        profile_ids: IdArg = None,
        profile_names: NameArg = None
    ) -> pd.DataFrame:
        """
        List profiles, optionally restricted to some IDs and/or names.

        Rows matching either the IDs or the names are returned, once each.

        Args:
            profile_ids: Profile ID or IDs (e.g. 19 or [19, 8])
            profile_names: Full profile name or names

        Returns:
            pandas.DataFrame with 'ProfileID' and 'ProfileName' columns

        Raises:
            FingertipsLookupError: If any ID or name is not a known profile

        Example:
            >>> client.list_profiles(profile_ids=[19, 8])
            >>> client.list_profiles(profile_names='Public Health Outcomes Framework')
        """
        selectors = selectors_from(PROFILE_RULE, profile_ids, profile_names)
        profiles = resolve(self.data_fetcher.fetch_profiles(), selectors, PROFILE_RULE)
        return self.data_fetcher.to_table(profiles, Profile)

    def list_domains(
        self,
        profile_ids: IdArg = None,
        domain_ids: IdArg = None
    ) -> pd.DataFrame:
        """
        List domains, optionally restricted to some profiles and/or domain IDs.

        The filters intersect: a domain must belong to one of the profiles
        and be one of the domains.

        Args:
            profile_ids: Profile ID or IDs
            domain_ids: Domain ID or IDs

        Returns:
            pandas.DataFrame with 'DomainID', 'DomainName', 'ProfileID' and
            'ProfileName' columns

        Raises:
            FingertipsLookupError: If any profile or domain ID is unknown
        """
        domains = self._resolve_domains(profile_ids, domain_ids)
        return self.data_fetcher.to_table(domains, Domain)

    def list_indicators(
        self,
        indicator_ids: IdArg = None,
        domain_ids: IdArg = None,
        profile_ids: IdArg = None
    ) -> pd.DataFrame:
        """
        List indicators with the domain and profile they are listed under.

        An indicator listed under several domains appears once per domain.
        Filters intersect. Indicator IDs are checked against every indicator
        the API knows, so a valid indicator outside the selected domains
        gives an empty table rather than an error.

        The domain of each indicator is only available per domain, so this
        makes one request per selected domain on top of the metadata
        requests. Without profile or domain filters every domain is queried,
        which can mean several hundred requests; pass profile_ids or
        domain_ids to keep the call small.

        Args:
            indicator_ids: Indicator ID or IDs
            domain_ids: Domain ID or IDs
            profile_ids: Profile ID or IDs

        Returns:
            pandas.DataFrame with 'IndicatorID', 'IndicatorName', 'DomainID',
            'DomainName', 'ProfileID' and 'ProfileName' columns

        Raises:
            FingertipsLookupError: If any indicator, domain or profile ID is unknown

        Example:
            >>> client.list_indicators(domain_ids=1938132767)
            >>> client.list_indicators(profile_ids=19)
        """
        indicators = self._resolve_indicators(indicator_ids, domain_ids, profile_ids)
        return self.data_fetcher.to_table(indicators, Indicator)

    def list_indicators_unique(
        self,
        indicator_ids: IdArg = None,
        domain_ids: IdArg = None,
        profile_ids: IdArg = None
    ) -> pd.DataFrame:
        """
        List indicators once each, without domain or profile columns.

        Takes the same filters as list_indicators.

        Returns:
            pandas.DataFrame with 'IndicatorID' and 'IndicatorName' columns,
            one row per distinct pair
        """
        df = self.list_indicators(indicator_ids, domain_ids, profile_ids)
        return (
            df[['IndicatorID', 'IndicatorName']]
            .drop_duplicates()
            .reset_index(drop=True)
        )

    def list_area_types(self, area_type_ids: IdArg = None) -> pd.DataFrame:
        """
        List area types, optionally restricted to some IDs.

        Args:
            area_type_ids: Area type ID or IDs

        Returns:
            pandas.DataFrame with 'AreaTypeID', 'AreaTypeName' and
            'AreaTypeShortName' columns

        Raises:
            FingertipsLookupError: If any area type ID is unknown
        """
        selectors = selectors_from(AREA_TYPE_RULE, area_type_ids)
        area_types = resolve(self.data_fetcher.fetch_area_types(), selectors, AREA_TYPE_RULE)
        return self.data_fetcher.to_table(area_types, AreaType)

    def list_indicator_area_types(
        self,
        indicator_ids: IdArg = None,
        area_type_ids: IdArg = None
    ) -> pd.DataFrame:
        """
        List which area types each indicator has data for.

        Args:
            indicator_ids: Indicator ID or IDs
            area_type_ids: Area type ID or IDs

        Returns:
            pandas.DataFrame with 'IndicatorID' and 'AreaTypeID' columns

        Raises:
            FingertipsLookupError: If an ID does not occur in the association table
        """
        indicator_selectors = selectors_from(INDICATOR_RULE, indicator_ids)
        area_type_selectors = selectors_from(AREA_TYPE_RULE, area_type_ids)

        pairs = self.data_fetcher.fetch_indicator_area_types()
        # Both filters are checked against the full table before intersecting
        keep = set(resolve(pairs, indicator_selectors, INDICATOR_RULE))
        keep &= set(resolve(pairs, area_type_selectors, AREA_TYPE_RULE))
        pairs = [p for p in pairs if p in keep]
        return self.data_fetcher.to_table(pairs, IndicatorAreaType)

    # ===== Data Fetching Methods =====

    def get_data(
        self,
        indicator_ids: Union[int, Iterable[int]],
        area_type_id: int = None,
        parent_area_type_id: int = None,
        profile_id: Optional[int] = None,
        time_periods: Optional[Union[str, Iterable[str]]] = None,
        area_codes: Optional[Union[str, Iterable[str]]] = None
    ) -> pd.DataFrame:
        """
        Get indicator data as a pandas DataFrame.

        Args:
            indicator_ids: Indicator ID or IDs (e.g. from list_indicators)
            area_type_id: Area type of the rows (default: 102)
            parent_area_type_id: Parent area type (default: 15, England)
            profile_id: Optional profile to take indicator options from
            time_periods: Optional time period or periods to keep
            area_codes: Optional area code or codes to keep

        Returns:
            pandas.DataFrame with the results

        Raises:
            FingertipsValidationError: If no indicator IDs are given

        Example:
            >>> df = client.get_data([90362, 90366], area_type_id=102)
            >>> print(df[['IndicatorID', 'AreaCode', 'Timeperiod', 'Value']].head())
        """
        ids = as_id_set(indicator_ids, 'IndicatorID')
        if not ids:
            raise FingertipsValidationError("At least one IndicatorID is required")

        return self.data_fetcher.get_data_as_dataframe(
            indicator_ids=ids,
            area_type_id=self.DEFAULT_AREA_TYPE_ID if area_type_id is None else area_type_id,
            parent_area_type_id=(
                self.DEFAULT_PARENT_AREA_TYPE_ID if parent_area_type_id is None
                else parent_area_type_id
            ),
            profile_id=profile_id,
            time_periods=time_periods,
            area_codes=area_codes
        )

    # ===== Resolution helpers =====

    def _resolve_domains(self, profile_ids: IdArg, domain_ids: IdArg) -> List[Domain]:
        profile_selectors = selectors_from(PROFILE_RULE, profile_ids)
        domain_selectors = selectors_from(DOMAIN_RULE, domain_ids)

        profiles = self.data_fetcher.fetch_profiles()
        selected_profiles = resolve(profiles, profile_selectors, PROFILE_RULE)

        if domain_ids is None:
            return self.data_fetcher.fetch_domains(selected_profiles)

        # Domain IDs are checked against every profile's domains
        domains = resolve(self.data_fetcher.fetch_domains(profiles), domain_selectors, DOMAIN_RULE)
        wanted = {p.profile_id for p in selected_profiles}
        return [d for d in domains if d.profile_id in wanted]

    def _resolve_indicators(
        self,
        indicator_ids: IdArg,
        domain_ids: IdArg,
        profile_ids: IdArg
    ) -> List[Indicator]:
        indicator_selectors = selectors_from(INDICATOR_RULE, indicator_ids)
        domains = self._resolve_domains(profile_ids, domain_ids)

        if indicator_ids is None:
            return self.data_fetcher.fetch_indicators(domains)

        # Indicator IDs are checked against every indicator, not only the selected domains
        known = resolve(self.data_fetcher.fetch_all_indicators(), indicator_selectors, INDICATOR_RULE)
        wanted = {i.indicator_id for i in known}
        if not wanted:
            return []
        return [i for i in self.data_fetcher.fetch_indicators(domains) if i.indicator_id in wanted]
