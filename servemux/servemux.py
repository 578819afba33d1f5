#!/usr/bin/env python
import sys
import argparse
import logging
import signal

from pydantic import ValidationError

from servemux.constants import LISTENER_MUX, LOG_LEVEL
from servemux.daemon.controller import ListenerController
from servemux.daemon.daemon import listener_loop
from servemux.daemon.http_server import start_http_server
from servemux.library.config_utils import load_yaml_file, listener_section
from servemux.library.exceptions import ListenerBindError, RouteConfigurationError
from servemux.logging_setup import setup_logging
from servemux.daemon.routes import LISTENERS, build_listener_router
from servemux.settings import LOG_LEVELS, get_settings

logger = logging.getLogger(__name__)

SETTING_KEYS = ('host', 'port', 'log_level')


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="servemux HTTP listeners")
    parser.add_argument("listener", nargs="?", default=LISTENER_MUX,
                        choices=sorted(LISTENERS),
                        help="Listener to run: 'mux' (port 8080) or 'simple' (port 3000)")

    parser.add_argument("--host", type=str, default=None,
                        help="Address to bind")

    parser.add_argument("--port", type=int, default=None,
                        help="TCP port to bind")

    parser.add_argument("-c", "--config", type=str, default=None,
                        help="Path to a YAML configuration file")

    parser.add_argument(
        "-l", "--log_level",
        type=str,
        choices=LOG_LEVELS,
        default=None,
        help=f"Logging output level (default {LOG_LEVEL})"
    )

    return parser.parse_args(argv)


def cleanup(msg: str = None, code: int = 0):
    if msg:
        print(msg, file=sys.stderr)

    sys.exit(code)


def main(argv=None):
    args = parse_args(argv)
    setup_logging()

    file_values = {}
    if args.config:
        try:
            file_values = listener_section(load_yaml_file(args.config), args.listener, SETTING_KEYS)
        except (ValueError, FileNotFoundError) as e:
            cleanup(f'Failed to load configuration: {e}', 1)

    overrides = dict(file_values)
    overrides.update({k: getattr(args, k) for k in SETTING_KEYS if getattr(args, k) is not None})

    try:
        settings = get_settings(args.listener, **overrides)
    except ValidationError as e:
        cleanup(f'Invalid configuration: {e}', 1)

    logging.getLogger().setLevel(settings.numeric_log_level)
    logger.debug(f'Settings for {args.listener}: {settings}')

    try:
        router = build_listener_router(args.listener)
        httpd = start_http_server(router, port=settings.port, host=settings.host)
    except RouteConfigurationError as e:
        logger.critical(f'Invalid route table: {e}')
        cleanup(code=1)
    except ListenerBindError as e:
        logger.critical(str(e))
        cleanup(code=1)

    controller = ListenerController(args.listener)

    # Register our signal handlers
    signal.signal(signal.SIGINT, lambda s, f: controller.stop())
    signal.signal(signal.SIGTERM, lambda s, f: controller.stop())

    listener_loop(controller, httpd)

    logger.info('Cleaning up...')


if __name__ == "__main__":
    main()
