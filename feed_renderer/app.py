"""HTTP layer for the feed renderer."""

from flask import Flask, Response, g, request

from .config import Config
from .errors import CompositionFailure
from .logging_config import create_request_logger
from .renderer import FeedRenderer, build_renderer

SECURITY_HEADERS = {
    "Content-Security-Policy": "default-src 'self'; img-src *; form-action 'self';",
    "X-Frame-Options": "SAMEORIGIN",
}

HTML_MIMETYPE = "text/html"


def create_app(
    renderer: FeedRenderer | None = None, config: Config | None = None
) -> Flask:
    """Create the Flask application.

    Args:
        renderer: Shared renderer; built from ``config`` when omitted
        config: Configuration, read from the environment when omitted

    Returns:
        Configured Flask app
    """
    config = config or Config()
    server_config = config.get_server_config()
    renderer = renderer or build_renderer(config)

    app = Flask(
        __name__,
        static_folder=str(server_config.static_dir.resolve()),
        static_url_path="/static",
    )
    app.config["FEED_RENDERER"] = renderer

    @app.before_request
    def start_request_log():
        g.request_logger = create_request_logger("app")
        g.request_logger.log_request_start(method=request.method, path=request.path)

    @app.after_request
    def add_security_headers(response: Response) -> Response:
        for name, value in SECURITY_HEADERS.items():
            response.headers[name] = value
        logger = g.get("request_logger")
        if logger is not None:
            logger.log_request_end(
                success=response.status_code < 500,
                status_code=response.status_code,
            )
        return response

    @app.errorhandler(CompositionFailure)
    def composition_failure(error: CompositionFailure):
        logger = g.get("request_logger") or create_request_logger("app")
        logger.exception(
            f"Page composition failed: {error}", error_code=error.error_code
        )
        return Response("Internal Server Error", status=500, mimetype="text/plain")

    @app.get("/health")
    def health():
        return Response(".", status=200, mimetype="text/plain")

    @app.get("/")
    def render_feed():
        url = request.args.get("url", "")
        logger = g.get("request_logger")
        request_id = logger.request_id if logger is not None else None
        body = app.config["FEED_RENDERER"].render_http_request(url, request_id=request_id)
        return Response(body, status=200, mimetype=HTML_MIMETYPE)

    return app
