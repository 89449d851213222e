import argparse


def main():
    import uvicorn
    from mcp.server.fastmcp.utilities.logging import configure_logging

    from devtools_mcp.config import LOG_LEVELS, ServerSettings
    from devtools_mcp.server import create_app

    settings = ServerSettings.from_env()

    parser = argparse.ArgumentParser(description="devtools_mcp SSE server")
    parser.add_argument(
        "--host",
        type=str,
        default=settings.host,
        help="Host address to bind",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=settings.port,
        help="Port to bind",
    )
    parser.add_argument(
        "--idle-timeout",
        type=float,
        default=settings.session_idle_timeout,
        help=(
            "Seconds without traffic before a session is closed. "
            "Use 0 to keep idle sessions open indefinitely."
        ),
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=settings.log_level,
        help="Logging verbosity",
    )
    args = parser.parse_args()
    if args.idle_timeout < 0:
        parser.error("--idle-timeout must not be negative")

    settings.host = args.host
    settings.port = args.port
    settings.session_idle_timeout = args.idle_timeout
    settings.log_level = args.log_level

    configure_logging(settings.log_level)
    uvicorn.run(
        create_app(settings=settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
