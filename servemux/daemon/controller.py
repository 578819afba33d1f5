import logging

logger = logging.getLogger(__name__)


class ListenerController:
    """
    Tracks the lifecycle of a running listener.

    Signal handlers call `stop()`; the serving loop checks `running`
    between requests.
    """

    def __init__(self, name: str = 'default'):
        self.name = name
        self.running = False

    def stop(self):
        """Signal the listener to shut down."""
        logger.info("Stopping listener %s...", self.name)
        self.running = False
