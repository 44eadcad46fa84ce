"""
Configuration for the Salesforce Opportunity Feed server
"""

import os

from etl.config import get_setting

# Server config
HOST = get_setting("HOST", "0.0.0.0")
PORT = int(get_setting("PORT", "3001"))

SERVICE_NAME = "salesforce-opportunity-feed"

# Dashboard files served at / when the directory exists
STATIC_DIR = get_setting(
    "STATIC_DIR",
    os.path.join(os.path.dirname(__file__), "..", "public")
)

# CORS headers sent with every /api/salesforce response
CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type"
}
