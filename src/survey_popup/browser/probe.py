"""
Host context probes - report the URL of the active browser tab.

The session reads the active tab URL once, before any network call, to
decide whether the survey may be offered on the current page.

Two probes are provided:
- StaticHostContext: a fixed URL (CLI flag, tests, embedding shells)
- BrowserHostContext: attaches to a running Chromium over the DevTools
  protocol with Playwright and reads the visible page's URL

Example Usage:
    >>> from survey_popup.browser.probe import BrowserHostContext
    >>>
    >>> probe = BrowserHostContext("http://localhost:9222")
    >>> url = await probe.active_tab_url()
"""
from __future__ import annotations

import logging
from typing import Optional, Protocol, runtime_checkable

from playwright.async_api import (
    Browser,
    Error as PlaywrightError,
    Page,
    Playwright,
    async_playwright,
)


__all__ = [
    "HostContext",
    "StaticHostContext",
    "BrowserHostContext",
    "HostContextError",
]

logger = logging.getLogger(__name__)


class HostContextError(Exception):
    """The active tab could not be determined."""


@runtime_checkable
class HostContext(Protocol):
    """Anything that can report the active tab URL."""

    async def active_tab_url(self) -> Optional[str]:
        """Return the active tab URL, or None if the tab has no URL."""
        ...


class StaticHostContext:
    """Host context with a fixed, known tab URL."""

    def __init__(self, url: Optional[str] = None) -> None:
        self.url = url

    async def active_tab_url(self) -> Optional[str]:
        return self.url

    def __repr__(self) -> str:
        return f"StaticHostContext(url={self.url!r})"


class BrowserHostContext:
    """
    Reads the active tab of an already running Chromium.

    The browser must have been started with ``--remote-debugging-port``.
    The first page whose document is visible is taken as the active tab;
    if none reports visible, the most recently opened page is used.

    Attributes:
        cdp_endpoint: DevTools endpoint, e.g. http://localhost:9222.
        timeout: Connection timeout in milliseconds.
    """

    def __init__(self, cdp_endpoint: str, timeout: int = 10000) -> None:
        self.cdp_endpoint = cdp_endpoint
        self.timeout = timeout

    async def active_tab_url(self) -> Optional[str]:
        """
        Connect, find the active page and return its URL.

        Raises:
            HostContextError: If the browser cannot be reached or has no pages.
        """
        logger.debug(f"Probing active tab via {self.cdp_endpoint}")
        playwright: Optional[Playwright] = None
        browser: Optional[Browser] = None

        try:
            playwright = await async_playwright().start()
            browser = await playwright.chromium.connect_over_cdp(
                self.cdp_endpoint, timeout=self.timeout
            )
            pages = [page for context in browser.contexts for page in context.pages]
            if not pages:
                raise HostContextError("Browser has no open tabs")

            page = await self._find_active_page(pages)
            url = page.url or None
            logger.info(f"Active tab URL: {url}")
            return url

        except PlaywrightError as e:
            logger.error(f"Could not read active tab: {e}")
            raise HostContextError(f"Could not read active tab: {e}") from e

        finally:
            if browser is not None:
                await browser.close()
            if playwright is not None:
                await playwright.stop()

    @staticmethod
    async def _find_active_page(pages: list[Page]) -> Page:
        """Pick the visible page, falling back to the newest one."""
        for page in pages:
            try:
                state = await page.evaluate("document.visibilityState")
            except PlaywrightError:
                continue
            if state == "visible":
                return page
        return pages[-1]
