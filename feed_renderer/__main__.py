"""Run the feed renderer HTTP server."""

from .app import create_app
from .config import Config
from .logging_config import create_request_logger, setup_structured_logging


def main() -> None:
    config = Config()
    setup_structured_logging(config.log_level)
    server_config = config.get_server_config()

    app = create_app(config=config)
    create_request_logger("app", "startup").info(
        f"Listening on {server_config.host}:{server_config.port}"
    )
    app.run(host=server_config.host, port=server_config.port, threaded=True)


if __name__ == "__main__":
    main()
