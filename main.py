#!/usr/bin/env python3
"""
Content Safety Service - HTTP entry point
Exposes the HTML sanitizer to rendering call sites that are not written in Python
"""

from dataclasses import asdict
from datetime import datetime

import functions_framework
import structlog
from pydantic import ValidationError

from content_safety import get_configured_policy, render_safe_html, sanitize_with_report
from content_safety.logging_utils import setup_logging
from content_safety.models import SanitizeReportModel, SanitizeRequest, SanitizeResponse
from content_safety.settings import SERVICE_NAME

setup_logging()
logger = structlog.get_logger(__name__)


# Main Cloud Function endpoint with routing
@functions_framework.http
def main_handler(request):
    """Main HTTP endpoint that routes to different functions based on path"""

    path = request.path.rstrip("/")
    method = request.method

    logger.info("http_request", method=method, path=path, timestamp=datetime.now().isoformat())

    if path == "" or path == "/":
        # Health check
        if method == "GET":
            return {
                "status": "healthy",
                "service": SERVICE_NAME,
                "timestamp": datetime.now().isoformat(),
            }, 200
        else:
            return {"error": "Method not allowed"}, 405

    elif path == "/sanitize":
        if method == "POST":
            return handle_sanitize(request)
        else:
            return {"error": "Method not allowed"}, 405
    else:
        return {"error": "Not found"}, 404


def handle_sanitize(request):
    """Sanitize the submitted markup and return it with the removal report"""
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        return {"error": "Request body must be a JSON object"}, 400

    try:
        body = SanitizeRequest.model_validate(payload)
    except ValidationError as exc:
        logger.info("sanitize_request_invalid", errors=exc.error_count())
        detail = [
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in exc.errors()
        ]
        return {"error": "Invalid request", "detail": detail}, 400

    policy = get_configured_policy()
    clean, report = sanitize_with_report(body.html, policy)
    if body.wrap:
        clean = str(render_safe_html(clean, body.class_name or "", policy))

    response = SanitizeResponse(html=clean, report=SanitizeReportModel(**asdict(report)))

    logger.info(
        "sanitize_request_completed",
        input_length=len(body.html or ""),
        output_length=len(clean),
        modified=report.modified,
    )
    return response.model_dump(), 200
