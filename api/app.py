"""
Salesforce Opportunity Feed - FastAPI Application

Serves the dashboard's data endpoint:
- /api/salesforce: fresh opportunity rows from Salesforce (GET, OPTIONS)
- /health: liveness check
"""

import logging
import os
from datetime import datetime

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse, Response
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from etl.config import LOGGING_CONFIG
from .config import CORS_HEADERS, HOST, PORT, SERVICE_NAME, STATIC_DIR
from .handlers import error_envelope, fetch_opportunities

# Configure logging
logging.basicConfig(
    level=getattr(logging, LOGGING_CONFIG['level']),
    format=LOGGING_CONFIG['format'],
    datefmt=LOGGING_CONFIG['date_format']
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Salesforce Opportunity Feed",
    description="Fetches Salesforce opportunities and reshapes them for the dashboard",
    version="1.0.0"
)


API_PATH = "/api/salesforce"


def method_not_allowed() -> JSONResponse:
    """405 envelope for anything other than GET and OPTIONS"""
    return JSONResponse(
        content=error_envelope("Method not allowed", "METHOD_NOT_ALLOWED"),
        status_code=405,
        headers={**CORS_HEADERS, "Allow": "GET, OPTIONS"}
    )


@app.exception_handler(StarletteHTTPException)
async def http_error(request: Request, exc: StarletteHTTPException):
    """Methods the route does not list still get the JSON envelope"""
    if exc.status_code == 405 and request.url.path == API_PATH:
        return method_not_allowed()
    return await http_exception_handler(request, exc)


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "service": SERVICE_NAME,
        "timestamp": datetime.now().isoformat()
    }


@app.api_route(
    API_PATH,
    methods=["GET", "OPTIONS", "HEAD", "POST", "PUT", "PATCH", "DELETE"]
)
def salesforce_opportunities(request: Request):
    """
    Fetch all quoted opportunities and return them as dashboard rows

    Runs in the worker threadpool; the whole result set is assembled
    before the response is sent.
    """
    if request.method == "OPTIONS":
        return Response(status_code=200, headers=CORS_HEADERS)

    if request.method != "GET":
        return method_not_allowed()

    logger.info("[API] Fetching from Salesforce...")
    status_code, body = fetch_opportunities()
    return JSONResponse(content=body, status_code=status_code, headers=CORS_HEADERS)


# Static dashboard files, registered last so API routes take precedence
if os.path.isdir(STATIC_DIR):
    app.mount("/", StaticFiles(directory=STATIC_DIR, html=True), name="static")


# Entry point for running directly
if __name__ == "__main__":
    import uvicorn
    logger.info(f"Starting Salesforce Opportunity Feed on {HOST}:{PORT}")
    uvicorn.run(app, host=HOST, port=PORT)
