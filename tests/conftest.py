"""
Pytest configuration and fixtures for the Salesforce opportunity feed tests
"""

import pytest
import sys
import os
from unittest.mock import Mock

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from shared.auth_manager import Credentials


# ============================================================================
# CREDENTIALS
# ============================================================================

@pytest.fixture
def credentials():
    """Complete set of connected-app credentials"""
    return Credentials(
        client_id="3MVG9test-client-id",
        client_secret="test-client-secret",
        refresh_token="5Aep861test-refresh-token",
        instance_url="https://example.my.salesforce.com"
    )


# ============================================================================
# SAMPLE API RESPONSE FIXTURES
# ============================================================================

@pytest.fixture
def sample_opportunity():
    """Sample opportunity record as returned by the query endpoint"""
    return {
        "attributes": {
            "type": "Opportunity",
            "url": "/services/data/v59.0/sobjects/Opportunity/0065e00000AbCdEAAV"
        },
        "Id": "0065e00000AbCdEAAV",
        "Amount": 12500.0,
        "CloseDate": "2023-07-20",
        "Quote_sent_TImestamp_2__c": "2023-08-28T12:07:00.000+0000",
        "StageName": "Proposal/Price Quote",
        "Owner": {
            "attributes": {"type": "User", "url": "/services/data/v59.0/sobjects/User/0055e000001XyZAAA0"},
            "Name": "Dana Whitfield"
        }
    }


@pytest.fixture
def sample_opportunity_with_null_values():
    """Opportunity with every field null except Id"""
    return {
        "Id": "0065e00000NuLlSAAV",
        "Amount": None,
        "CloseDate": None,
        "Quote_sent_TImestamp_2__c": None,
        "StageName": None,
        "Owner": None
    }


def make_opportunities(prefix, count):
    """Minimal opportunity records with predictable Ids"""
    return [
        {
            "Id": f"{prefix}{i}",
            "Amount": 1000 * (i + 1),
            "CloseDate": "2024-03-05",
            "Quote_sent_TImestamp_2__c": "2024-03-01T15:00:00.000+0000",
            "StageName": "Negotiation/Review",
            "Owner": {"Name": "Sam Ortiz"}
        }
        for i in range(count)
    ]


# ============================================================================
# MOCK HTTP RESPONSES
# ============================================================================

def make_response(status_code=200, json_body=None, invalid_json=False):
    """Mock requests.Response with status, ok flag and JSON body"""
    response = Mock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    if invalid_json:
        response.json = Mock(side_effect=ValueError("Expecting value: line 1 column 1 (char 0)"))
        response.text = "<html>Service Unavailable</html>"
    else:
        response.json = Mock(return_value=json_body)
    return response


@pytest.fixture
def token_response():
    """Successful OAuth token response"""
    return make_response(200, {
        "access_token": "00D5e000000TEST!ARsAQtest-access-token",
        "instance_url": "https://example.my.salesforce.com",
        "token_type": "Bearer",
        "issued_at": "1693224420000"
    })


@pytest.fixture
def paged_responses():
    """Three query pages of sizes 2, 2 and 1"""
    return [
        make_response(200, {
            "totalSize": 5,
            "done": False,
            "nextRecordsUrl": "/services/data/v59.0/query/01gD0000002HU6KIAW-2000",
            "records": make_opportunities("A", 2)
        }),
        make_response(200, {
            "totalSize": 5,
            "done": False,
            "nextRecordsUrl": "/services/data/v59.0/query/01gD0000002HU6KIAW-4000",
            "records": make_opportunities("B", 2)
        }),
        make_response(200, {
            "totalSize": 5,
            "done": True,
            "records": make_opportunities("C", 1)
        })
    ]


@pytest.fixture
def fake_response():
    """Factory for mock responses in individual tests"""
    return make_response
