"""
Opportunity pipeline for the Salesforce dashboard feed
Authenticate -> extract (paginated) -> transform, one independent run per call
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from etl.config import API_CONFIG, TOKEN_URL
from etl.extract import fetch_all_records
from etl.transform import transform
from shared.auth_manager import Credentials, acquire_access_token


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with milliseconds and a Z suffix"""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec='milliseconds').replace('+00:00', 'Z')


class OpportunityPipeline:
    """
    Runs the three pipeline stages for one request

    Features:
    - Fresh token exchange per run (no caching)
    - Pagination until the server omits nextRecordsUrl
    - Total, order-preserving transformation
    - Run statistics and logging

    A pipeline object holds no state shared with other instances, so
    concurrent requests each build their own.
    """

    def __init__(self, credentials: Credentials, timeout: Optional[float] = None):
        """
        Initialize pipeline

        Args:
            credentials: Salesforce connected-app credentials
            timeout: Outbound request timeout in seconds
        """
        self.credentials = credentials
        self.timeout = timeout or API_CONFIG['timeout']

        self.logger = logging.getLogger("ETL.opportunities")

        self.stats = {
            'api_calls': 0,
            'records_fetched': 0,
            'records_transformed': 0,
            'duration': 0.0
        }

    def run(self) -> Dict[str, Any]:
        """
        Execute the complete pipeline

        Returns:
            Success envelope: success, data, recordCount, fetchedAt

        Raises:
            PipelineError: From authentication or extraction; no partial results
        """
        start_time = datetime.now()

        try:
            self.logger.info("Fetching opportunities from Salesforce...")

            access_token = acquire_access_token(
                self.credentials,
                token_url=TOKEN_URL,
                timeout=self.timeout
            )
            self.stats['api_calls'] += 1

            records = fetch_all_records(
                access_token,
                self.credentials.instance_url,
                timeout=self.timeout,
                stats=self.stats
            )
            self.stats['records_fetched'] = len(records)

            rows = transform(records)
            self.stats['records_transformed'] = len(rows)

            self.stats['duration'] = (datetime.now() - start_time).total_seconds()
            self.logger.info(
                f"Pipeline complete: {len(rows)} records, "
                f"{self.stats['api_calls']} API calls, {self.stats['duration']:.1f} seconds"
            )

            return {
                'success': True,
                'data': rows,
                'recordCount': len(rows),
                'fetchedAt': utc_timestamp()
            }

        except Exception as e:
            self.stats['duration'] = (datetime.now() - start_time).total_seconds()
            self.logger.error(f"Pipeline failed: {e}")
            raise
