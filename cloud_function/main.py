"""
Google Cloud Function entry point for the greeter.

Responds to any HTTP method with a JSON greeting:

    GET /?name=Alice -> {"message": "Hello, Alice! From GCP Cloud Function",
                         "time": "2024-01-01T12:00:00+00:00",
                         "method": "GET"}
"""

import logging
from datetime import datetime, timezone

import functions_framework
from flask import Request, Response, jsonify

# Configure logging for Cloud Functions (JSON structured logging)
logging.basicConfig(
    level=logging.INFO,
    format='{"severity": "%(levelname)s", "message": "%(message)s", "timestamp": "%(asctime)s"}',
)
logger = logging.getLogger(__name__)

DEFAULT_NAME = "World"


@functions_framework.http
def handle_request(request: Request) -> Response:
    """Return a greeting for the `name` query parameter."""
    name = request.args.get("name") or DEFAULT_NAME
    logger.debug(f"{request.method} greeting for {name}")

    response = jsonify(
        message=f"Hello, {name}! From GCP Cloud Function",
        time=datetime.now(timezone.utc).isoformat(timespec="seconds"),
        method=request.method,
    )
    response.status_code = 200
    return response
