"""
Process entry point.

Runs uvicorn with a fail-fast policy: an asynchronous error nobody handled
(a task that died with an exception, a callback that raised) stops the
server from accepting connections and the process exits with status 1.
Restarting is left to the process supervisor (systemd, Docker, k8s).
"""

import asyncio
import logging
import sys

import uvicorn

from internhub.core.config import get_settings

logger = logging.getLogger(__name__)


class FailFastServer(uvicorn.Server):

    def __init__(self, config: uvicorn.Config):
        super().__init__(config)
        self.crashed = False

    async def serve(self, sockets=None):
        asyncio.get_running_loop().set_exception_handler(self.handle_unhandled_error)
        await super().serve(sockets=sockets)

    def handle_unhandled_error(self, loop, context: dict) -> None:
        error = context.get("exception") or context.get("message")
        logger.critical("Unhandled error: %s - shutting down", error)
        self.crashed = True
        self.should_exit = True


def main():
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    config = uvicorn.Config(
        "internhub.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
    server = FailFastServer(config)
    logger.info("Server running in %s on port %d", settings.environment, settings.port)
    server.run()
    if server.crashed:
        sys.exit(1)


if __name__ == "__main__":
    main()
