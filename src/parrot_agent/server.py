"""
Parrot Agent server entry point.

Usage:
    parrot-agent --port 8080 --service-url https://parrot.example.com/

    # Or from a checkout:
    python -m parrot_agent.server

Flags default to the environment (PORT, HOST, SERVICE_URL, SPEAKER_URI,
CORS_ALLOWED_ORIGIN, LOG_LEVEL), which may be set in a `.env` file.
"""

import argparse
import asyncio
from dataclasses import replace

from dotenv import load_dotenv

from parrot_agent.config import AgentConfig, configure_logging
from parrot_agent.service import run_server


def parse_args(argv: list[str] | None = None, defaults: AgentConfig | None = None) -> argparse.Namespace:
    defaults = defaults or AgentConfig()
    parser = argparse.ArgumentParser(description="Run the Open Floor parrot agent.")
    parser.add_argument(
        "--host",
        type=str,
        default=defaults.host,
        help="Host to bind the server"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=defaults.port,
        help="Port to bind the server"
    )
    parser.add_argument(
        "--service-url",
        type=str,
        default=defaults.service_url,
        help="URL advertised in the manifest and matched against event addressing"
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=defaults.log_level,
        help="Log level (DEBUG, INFO, WARNING, ...)"
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """Start the parrot agent server."""
    load_dotenv()

    config = AgentConfig.from_env()
    args = parse_args(argv, defaults=config)
    config = replace(
        config,
        host=args.host,
        port=args.port,
        service_url=args.service_url,
        log_level=args.log_level.upper(),
    )

    configure_logging(config.log_level)

    print(f"Parrot Agent server running on port {config.port}")
    print(f"Health check: http://localhost:{config.port}/health")

    try:
        asyncio.run(run_server(config))
    except KeyboardInterrupt:
        pass


if __name__ == '__main__':
    main()
