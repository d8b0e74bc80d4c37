"""AWS Lambda handler serving the feed renderer behind API Gateway."""

import os
from typing import Any

from .app import HTML_MIMETYPE, SECURITY_HEADERS
from .errors import CompositionFailure
from .logging_config import create_request_logger, setup_structured_logging
from .renderer import build_renderer

setup_structured_logging(os.getenv("LOG_LEVEL", "INFO"))

# Built once per Lambda container and reused across invocations
RENDERER = build_renderer()


def _response(status_code: int, body: str, content_type: str) -> dict[str, Any]:
    return {
        "statusCode": status_code,
        "headers": {"Content-Type": content_type, **SECURITY_HEADERS},
        "body": body,
    }


def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """
    Render the feed named by the ``url`` query parameter.

    Accepts both REST (``path``) and HTTP API (``rawPath``) proxy events.

    Args:
        event: API Gateway proxy event
        context: Lambda context object

    Returns:
        API Gateway proxy response with the HTML page
    """
    request_id = getattr(context, "aws_request_id", None)
    logger = create_request_logger("lambda", request_id)

    path = event.get("rawPath") or event.get("path") or "/"
    logger.log_request_start(path=path)

    if path == "/health":
        logger.log_request_end(success=True, status_code=200)
        return _response(200, ".", "text/plain; charset=utf-8")

    query = event.get("queryStringParameters") or {}
    url = query.get("url") or ""

    try:
        body = RENDERER.render_http_request(url, request_id=logger.request_id)
    except CompositionFailure as e:
        logger.exception(f"Page composition failed: {e}", error_code=e.error_code)
        logger.log_request_end(success=False, status_code=500)
        return _response(500, "Internal Server Error", "text/plain; charset=utf-8")

    logger.log_request_end(success=True, status_code=200)
    return _response(200, body.decode("utf-8"), f"{HTML_MIMETYPE}; charset=utf-8")
