import errno
import logging
from http.server import ThreadingHTTPServer

from servemux.constants import DEFAULT_HOST
from servemux.daemon.http_handler import MuxHandler
from servemux.library.exceptions import ListenerBindError
from servemux.library.router import PathRouter

logger = logging.getLogger(__name__)


class MuxHTTPServer(ThreadingHTTPServer):
    """Threaded HTTP server carrying the PathRouter used by MuxHandler."""

    daemon_threads = True
    # a second listener on a busy port must fail to bind
    allow_reuse_port = False

    def __init__(self, server_address, router: PathRouter, handler_class=MuxHandler):
        self.router = router
        super().__init__(server_address, handler_class)


def start_http_server(router: PathRouter, port: int, host: str = DEFAULT_HOST) -> MuxHTTPServer:
    """
    Bind a listener for `router`.

    The router is frozen here, so every route must be registered before the
    listener exists.

    Raises:
        ListenerBindError: the address cannot be bound (e.g. port already in use)
    """
    if not router.frozen:
        router.freeze()

    server_address = (host, port)
    logger.debug(f'Starting listener at: {server_address}')
    try:
        httpd = MuxHTTPServer(server_address, router)
    except OSError as e:
        reason = errno.errorcode.get(e.errno, str(e)) if e.errno else str(e)
        raise ListenerBindError(host, port, f"{reason} ({e.strerror or e})") from e

    logger.info(f"[{router.name}] HTTP server running on {host}:{httpd.server_address[1]}")
    return httpd
