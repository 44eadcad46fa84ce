"""
Paginated extraction from the Salesforce query endpoint

Runs the fixed opportunity query and follows nextRecordsUrl until the
server stops returning one. Salesforce returns at most 2000 records per
page. There is no page cap and no retry: the loop ends only when a page
omits the continuation path, and any failed page fails the whole fetch.
"""

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import requests

from etl.config import API_CONFIG, QUERY_CONFIG
from shared.exceptions import ConfigError, QueryError

logger = logging.getLogger(__name__)


def build_query_url(instance_url: str) -> str:
    """Initial query URL with the SOQL text URL-encoded in the q parameter"""
    base_url = instance_url.rstrip('/')
    # Same unreserved set as JavaScript's encodeURIComponent
    encoded_query = quote(QUERY_CONFIG['query'], safe="!~*'()")
    return f"{base_url}{QUERY_CONFIG['query_path']}?q={encoded_query}"


def fetch_all_records(
    access_token: str,
    instance_url: str,
    timeout: Optional[float] = None,
    stats: Optional[Dict[str, int]] = None
) -> List[Dict[str, Any]]:
    """
    Fetch every record of the opportunity query, in API order.

    Args:
        access_token: Bearer token from the authenticator
        instance_url: Salesforce instance base URL
        timeout: Request timeout in seconds
        stats: Optional counter dict; 'api_calls' is incremented per page

    Returns:
        List of raw opportunity records

    Raises:
        ConfigError: If instance_url is missing
        QueryError: If any page request fails
    """
    if not instance_url:
        raise ConfigError("Missing SF_INSTANCE_URL in environment variables")

    base_url = instance_url.rstrip('/')
    headers = {
        "Authorization": f"Bearer {access_token}",
        "Content-Type": "application/json"
    }

    all_records = []
    next_url = build_query_url(base_url)
    page = 1

    while next_url:
        logger.debug(f"Fetching page {page}")

        response = requests.get(
            next_url,
            headers=headers,
            timeout=timeout or API_CONFIG['timeout']
        )
        if stats is not None:
            stats['api_calls'] = stats.get('api_calls', 0) + 1

        if not response.ok:
            message = _error_message(response) or "Failed to query Salesforce"
            logger.error(f"Query failed on page {page}: {response.status_code} - {message}")
            raise QueryError(message, status_code=response.status_code)

        try:
            data = response.json()
        except ValueError:
            data = None
        if not isinstance(data, dict):
            raise QueryError("Salesforce query response was not a JSON object", status_code=502)

        records = data.get(QUERY_CONFIG['records_key']) or []
        all_records.extend(records)
        logger.debug(f"Page {page}: {len(records)} records")

        next_path = data.get(QUERY_CONFIG['next_page_key'])
        next_url = f"{base_url}{next_path}" if next_path else None
        page += 1

    logger.info(f"Fetched {len(all_records)} records in {page - 1} page(s)")
    return all_records


def _error_message(response: requests.Response) -> Optional[str]:
    """First message from a Salesforce error body ([{"message": ..., "errorCode": ...}])"""
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, list) and body and isinstance(body[0], dict):
        return body[0].get("message")
    return None
