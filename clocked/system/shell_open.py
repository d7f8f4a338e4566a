"""Opening URLs with the desktop's default handler."""

import asyncio
import logging
import webbrowser

logger = logging.getLogger(__name__)


class OpenUrlError(Exception):
    """The default handler refused or failed to open a URL."""


class UrlOpener:
    """Opens URLs through the ``webbrowser`` module, off the event loop."""

    async def open(self, url: str) -> None:
        try:
            opened = await asyncio.to_thread(webbrowser.open, url)
        except webbrowser.Error as e:
            raise OpenUrlError(f"Could not open {url}: {e}") from e
        if not opened:
            raise OpenUrlError(f"No handler accepted {url}")
        logger.info(f"Opened URL: {url}")
