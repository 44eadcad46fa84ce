"""
Configuration module for the Salesforce opportunity pipeline
Centralized API constants, the fixed SOQL query and the output schema
"""

import os
from typing import Optional

from dotenv import dotenv_values

from shared.auth_manager import Credentials


def load_env_files(root: str) -> dict:
    """Merge .env and .env.local from root; .env.local wins"""
    return {
        **dotenv_values(os.path.join(root, ".env")),
        **dotenv_values(os.path.join(root, ".env.local"))
    }


# Load environment from the repo root
envs = load_env_files(os.path.join(os.path.dirname(__file__), ".."))


def get_setting(name: str, default: Optional[str] = None) -> Optional[str]:
    """Read a setting from the .env files, falling back to the process environment"""
    value = envs.get(name)
    if value:
        return value.strip()
    return os.getenv(name, default)


# ============================================================================
# API CONFIGURATION
# ============================================================================

API_CONFIG = {
    'login_url': get_setting('SF_LOGIN_URL', 'https://login.salesforce.com'),
    'token_path': '/services/oauth2/token',
    'api_version': get_setting('SF_API_VERSION', 'v59.0'),
    'timeout': float(get_setting('SF_REQUEST_TIMEOUT', '30'))
}

TOKEN_URL = f"{API_CONFIG['login_url'].rstrip('/')}{API_CONFIG['token_path']}"

# ============================================================================
# QUERY CONFIGURATION
# ============================================================================

QUOTE_SENT_FIELD = 'Quote_sent_TImestamp_2__c'

SOQL_QUERY = " ".join(f"""
    SELECT Id, Amount, CloseDate, {QUOTE_SENT_FIELD}, StageName, Owner.Name
    FROM Opportunity
    WHERE {QUOTE_SENT_FIELD} != null
""".split())

QUERY_CONFIG = {
    'query': SOQL_QUERY,
    'query_path': f"/services/data/{API_CONFIG['api_version']}/query",
    'records_key': 'records',
    'next_page_key': 'nextRecordsUrl'
}

# ============================================================================
# OUTPUT CONFIGURATION
# ============================================================================

# Column order matches the dashboard's CSV export
OUTPUT_COLUMNS = [
    'Amount',
    'Close Date',
    'Quote sent TImestamp 2',
    'Stage',
    'Opportunity Owner',
    'Close Month'
]

# Timestamps are always rendered in this zone, never the host's local zone
DISPLAY_TIMEZONE = get_setting('SF_DISPLAY_TIMEZONE', 'America/New_York')

# ============================================================================
# LOGGING CONFIGURATION
# ============================================================================

LOGGING_CONFIG = {
    'level': 'INFO',
    'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    'date_format': '%Y-%m-%d %H:%M:%S'
}

# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

def load_credentials() -> Credentials:
    """
    Read the four Salesforce credentials from configuration.

    Missing values come back empty; the authenticator decides whether
    that is an error, so nothing fails at import time.
    """
    return Credentials(
        client_id=get_setting('SF_CLIENT_ID', '') or '',
        client_secret=get_setting('SF_CLIENT_SECRET', '') or '',
        refresh_token=get_setting('SF_REFRESH_TOKEN', '') or '',
        instance_url=get_setting('SF_INSTANCE_URL', '') or ''
    )
