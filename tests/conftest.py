"""
Shared test fixtures
"""

import pytest
from unittest.mock import Mock, patch
from fingertipspy.client import FingertipsClient


PROFILES = [
    {
        'Id': 19,
        'Name': 'Public Health Outcomes Framework',
        'Key': 'public-health-outcomes-framework',
        'GroupIds': [1000049, 1938132767]
    },
    {
        'Id': 8,
        'Name': 'Adult Social Care',
        'Key': 'adult-social-care',
        'GroupIds': [1938132768]
    },
    {
        'Id': 20,
        'Name': 'Wider Determinants of Health',
        'Key': 'wider-determinants',
        'GroupIds': [1938132767]
    }
]

GROUPS = [
    {'Id': 1000049, 'Name': 'Overarching indicators', 'ProfileId': 19},
    {'Id': 1938132767, 'Name': 'Wider determinants of health', 'ProfileId': 19},
    {'Id': 1938132768, 'Name': 'Enhancing quality of life', 'ProfileId': 8}
]


def _indicator(iid, name):
    return {'IID': iid, 'Descriptive': {'Name': name}}


INDICATORS_BY_GROUP = {
    1000049: {
        '90362': _indicator(90362, 'Healthy life expectancy at birth'),
        '90366': _indicator(90366, 'Life expectancy at birth')
    },
    1938132767: {
        '10101': _indicator(10101, 'Children in low income families'),
        '90366': _indicator(90366, 'Life expectancy at birth')
    },
    1938132768: {
        '90282': _indicator(90282, 'Social care-related quality of life')
    }
}

ALL_INDICATORS = {
    key: value
    for group in INDICATORS_BY_GROUP.values()
    for key, value in group.items()
}

AREA_TYPES = [
    {'Id': 102, 'Name': 'Counties and Unitary Authorities', 'Short': 'CTUA'},
    {'Id': 15, 'Name': 'England', 'Short': 'England'},
    {'Id': 6, 'Name': 'Government Office Region', 'Short': 'Region'}
]

AVAILABLE_DATA = [
    {'IndicatorId': 90362, 'AreaTypeId': 102},
    {'IndicatorId': 90362, 'AreaTypeId': 15},
    {'IndicatorId': 90366, 'AreaTypeId': 102},
    {'IndicatorId': 10101, 'AreaTypeId': 6}
]

DATA_CSV = (
    "Indicator ID,Indicator Name,Parent Code,Area Code,Area Name,Area Type,"
    "Sex,Age,Time period,Value\n"
    "90362,Healthy life expectancy at birth,E92000001,E06000001,Hartlepool,"
    "Counties & UAs,Male,All ages,2017 - 19,58.9\n"
    "90362,Healthy life expectancy at birth,E92000001,E06000002,Middlesbrough,"
    "Counties & UAs,Male,All ages,2017 - 19,58.0\n"
    "90362,Healthy life expectancy at birth,E92000001,E06000001,Hartlepool,"
    "Counties & UAs,Male,All ages,2018 - 20,59.1\n"
)


def _group_ids(params):
    return [int(g) for g in str(params['group_ids']).split(',')]


def fake_api(method=None, url=None, params=None, timeout=None, **kwargs):
    """Route a mocked Session.request call to canned API payloads"""
    params = params or {}

    if url.endswith('/profiles'):
        payload = PROFILES
    elif url.endswith('/group_metadata'):
        wanted = _group_ids(params)
        payload = [g for g in GROUPS if g['Id'] in wanted]
    elif url.endswith('/indicator_metadata/by_group_id'):
        payload = INDICATORS_BY_GROUP.get(_group_ids(params)[0], {})
    elif url.endswith('/indicator_metadata/all'):
        payload = ALL_INDICATORS
    elif url.endswith('/area_types'):
        payload = AREA_TYPES
    elif url.endswith('/available_data'):
        payload = AVAILABLE_DATA
    elif url.endswith('/all_data/csv/by_indicator_id'):
        return Mock(status_code=200, text=DATA_CSV)
    else:
        return Mock(status_code=404, text='Not found')

    return Mock(status_code=200, json=lambda: payload)


@pytest.fixture
def api():
    """Patch the HTTP session so requests are answered by fake_api"""
    with patch('requests.Session.request', side_effect=fake_api) as mock_request:
        yield mock_request


@pytest.fixture
def client(api):
    """Client whose requests go to the fake API"""
    return FingertipsClient()


@pytest.fixture
def mock_client():
    """Mocked client for testing"""
    mock = Mock(spec=FingertipsClient)
    mock.GROUP_CHUNK_SIZE = FingertipsClient.GROUP_CHUNK_SIZE
    return mock
