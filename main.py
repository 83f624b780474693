#!/usr/bin/env python3
"""Main entry point for the Unface age detection service."""

import os
import sys
import signal
import argparse
import logging

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'src'))

from unface_age import __version__
from unface_age.web.app import create_app, run_server
from unface_age.utils.config_loader import ConfigurationError, load_config
from unface_age.utils.logging_config import setup_logging

logger = logging.getLogger(__name__)


def main():
    """Main application entry point."""
    parser = argparse.ArgumentParser(description='Unface age detection API')
    parser.add_argument(
        '--config',
        type=str,
        default=None,
        help='Path to a YAML or JSON configuration file'
    )
    parser.add_argument(
        '--host',
        type=str,
        default=None,
        help='Host to bind to'
    )
    parser.add_argument(
        '--port',
        type=int,
        default=None,
        help='Port to bind to (defaults to $PORT or 3001)'
    )
    parser.add_argument(
        '--debug',
        action='store_true',
        help='Enable debug mode'
    )
    parser.add_argument(
        '--log-level',
        type=str,
        default=None,
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        help='Set logging level'
    )
    parser.add_argument(
        '--log-format',
        type=str,
        default=None,
        choices=['json', 'text'],
        help='Set logging format'
    )
    args = parser.parse_args()

    # Command line flags override both the environment and the config file
    if args.log_level:
        os.environ['LOG_LEVEL'] = args.log_level
    if args.log_format:
        os.environ['LOG_FORMAT'] = args.log_format

    setup_logging()

    # Fail fast on missing credentials instead of at the first request
    try:
        config = load_config(args.config)
    except ConfigurationError as e:
        logger.critical(f"Invalid configuration: {e}")
        sys.exit(1)

    setup_logging(config['logging'])

    if args.host:
        config['server']['host'] = args.host
    if args.port:
        config['server']['port'] = args.port
    if args.debug:
        config['server']['debug'] = True

    logger.info(
        "Starting Unface age detection service",
        extra={
            "version": __version__,
            "python_version": f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}",
            "host": config['server']['host'],
            "port": config['server']['port'],
            "aws_region": config['aws']['region'],
            "debug": config['server'].get('debug', False)
        }
    )

    def signal_handler(signum, frame):
        logger.info(f"Received signal {signum}, initiating graceful shutdown...")
        sys.exit(0)

    signal.signal(signal.SIGTERM, signal_handler)
    signal.signal(signal.SIGINT, signal_handler)

    try:
        app = create_app(app_config=config)

        logger.info("Application initialized successfully")

        run_server(
            app,
            host=config['server']['host'],
            port=config['server']['port'],
            debug=config['server']['debug']
        )
    except KeyboardInterrupt:
        logger.info("Shutdown initiated by user")
    except Exception as e:
        logger.error(
            "Failed to start application",
            extra={"error": str(e)},
            exc_info=True
        )
        sys.exit(1)
    finally:
        logger.info("Unface age detection service shutdown complete")


if __name__ == '__main__':
    main()
