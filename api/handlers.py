"""
Request handlers for the Salesforce opportunity endpoint
"""

import logging
from typing import Any, Dict, Tuple

from etl.config import load_credentials
from etl.pipeline import OpportunityPipeline
from shared.exceptions import PipelineError

logger = logging.getLogger(__name__)


def error_envelope(message: str, code: str) -> Dict[str, Any]:
    """JSON body for every error response"""
    return {"success": False, "error": message, "code": code}


def fetch_opportunities() -> Tuple[int, Dict[str, Any]]:
    """
    Run one pipeline and map the outcome to a response

    Credentials are read per request, so missing configuration surfaces
    as a CONFIG_ERROR response rather than a startup failure.

    Returns:
        (status_code, body)
    """
    try:
        pipeline = OpportunityPipeline(load_credentials())
        return 200, pipeline.run()

    except PipelineError as e:
        logger.error(f"Salesforce API error ({e.code}): {e.message}")
        return e.status_code, e.to_dict()

    except Exception as e:
        logger.error(f"Unexpected error fetching opportunities: {e}", exc_info=True)
        return 500, error_envelope(str(e) or "An unexpected error occurred", "UNKNOWN_ERROR")
