import logging
import select

from servemux.daemon.controller import ListenerController
from servemux.daemon.http_server import MuxHTTPServer

logger = logging.getLogger(__name__)


def listener_loop(controller: ListenerController, httpd: MuxHTTPServer, poll_interval: float = 1.0) -> None:
    """
    Serve requests until controller.running is False.

    Each accepted request is handed to its own thread by the server, so a
    slow handler never blocks the loop.
    """
    logger.info("Starting listener loop for %s", controller.name)
    controller.running = True

    try:
        while controller.running:
            rlist, _, _ = select.select([httpd.socket], [], [], poll_interval)
            if rlist:
                httpd.handle_request()
    finally:
        httpd.server_close()

    logger.info("Listener loop stopped")
