"""
fingertipspy - A Python wrapper for the Fingertips public health data API

This package provides a convenient interface to the public health profiles,
indicators and data published through the Fingertips API.

Main Classes:
    FingertipsClient: Main client for interacting with the API
    DataFetcher: Helper class for fetching metadata and shaping tables

Example:
    >>> from fingertipspy import FingertipsClient
    >>> client = FingertipsClient()
    >>> profiles = client.list_profiles(profile_ids=[19, 8])
    >>> indicators = client.list_indicators_unique(profile_ids=19)
    >>> data = client.get_data(90362, area_type_id=102)
"""

from .client import FingertipsClient
from .data_fetcher import DataFetcher
from .exceptions import (
    FingertipsError,
    FingertipsTransportError,
    FingertipsLookupError,
    FingertipsValidationError,
    FingertipsRateLimitError,
    FingertipsNotFoundError
)
from .models import AreaType, Domain, Indicator, IndicatorAreaType, Profile

__version__ = '0.1.0'
__author__ = 'fingertipspy'
__all__ = [
    'FingertipsClient',
    'DataFetcher',
    'FingertipsError',
    'FingertipsTransportError',
    'FingertipsLookupError',
    'FingertipsValidationError',
    'FingertipsRateLimitError',
    'FingertipsNotFoundError',
    'Profile',
    'Domain',
    'Indicator',
    'AreaType',
    'IndicatorAreaType'
]
