"""
mlbstats.mlbsession.

Browser session handle built on Playwright's asyncio API.

A :class:`Session` owns exactly one browser connection and one page opened
on the configured target URL. It exposes the small set of primitives the
page layer needs and converts Playwright failures into the categories from
:mod:`mlbstats.mlberrors`.

Helpers
-------
- open_session(cfg): async context manager that opens a session and
    guarantees :meth:`Session.close` on every exit path.
- poll_until(attempt, wait): await ``attempt`` repeatedly until it returns a
    truthy value or the wait budget is spent.
- Wait: a ``(timeout_s, poll_s)`` query polling policy.
"""

import asyncio
import contextlib
import json
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from dataclasses import dataclass
from time import monotonic
from typing import TypeVar

from playwright.async_api import (
    Browser,
    BrowserContext,
    ElementHandle,
    Page,
    Playwright,
    async_playwright,
)
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from .mlbconfig import Config
from .mlberrors import (
    ClickableTimeoutError,
    ElementNotFoundError,
    ElementQueryError,
    ElementReadError,
    NavigationError,
    NotClickableError,
    ScrapeError,
    SessionConnectionError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

LAUNCH_OPTIONS_HEADER = "x-playwright-launch-options"


@dataclass(frozen=True)
class Wait:
    """Bounded polling policy for element queries."""

    timeout_s: float
    poll_s: float = 0.25


async def poll_until(attempt: Callable[[], Awaitable[T]], wait: Wait) -> T | None:
    """
    Await ``attempt`` until it returns a truthy value or ``wait`` expires.

    The attempt always runs at least once. A :class:`ScrapeError` raised by
    the attempt is logged at the debug level and treated as no result, so a
    transient failure (document still hydrating) does not end the poll.
    Returns the last result, or None when the last attempt raised.
    """
    deadline = monotonic() + wait.timeout_s
    while True:
        try:
            result = await attempt()
        except ScrapeError as exc:
            logger.debug("poll_until: attempt raised: %s", exc)
            result = None
        if result or monotonic() >= deadline:
            return result
        await asyncio.sleep(min(wait.poll_s, max(0.0, deadline - monotonic())))


async def _connect(play: Playwright, cfg: Config) -> Browser:
    browser_type = getattr(play, cfg.browser)
    endpoint = cfg.endpoint
    if not endpoint:
        return await browser_type.launch(headless=cfg.headless)
    if endpoint.startswith(("ws://", "wss://")):
        # Playwright servers accept launch options through this header
        headers = {LAUNCH_OPTIONS_HEADER: json.dumps({"headless": cfg.headless})}
        return await browser_type.connect(endpoint, headers=headers)
    logger.debug("CDP endpoint %s: headless is decided by the remote browser", endpoint)
    return await browser_type.connect_over_cdp(endpoint)


class Session:
    """
    Exclusive owner of one browser connection and its page.

    A session must not be shared by concurrent extraction runs; the page
    state (document, selected table variant) is global to it.
    """

    def __init__(
        self,
        cfg: Config,
        play: Playwright,
        browser: Browser,
        context: BrowserContext,
        page: Page,
    ) -> None:
        self.cfg = cfg
        self.endpoint = cfg.endpoint
        self.headless = cfg.headless
        self.base_url = cfg.base_url
        self._play = play
        self._browser = browser
        self._context = context
        self.page = page
        self._closed = False

    @classmethod
    async def open(cls, cfg: Config) -> "Session":
        """
        Connect to the browser and navigate to ``cfg.base_url``.

        Raises :class:`SessionConnectionError` when no browser can be
        obtained and :class:`NavigationError` when the page fails to load.
        Resources acquired before the failure are released.
        """
        play = await async_playwright().start()
        try:
            browser = await _connect(play, cfg)
        except PlaywrightError as exc:
            await play.stop()
            msg = f"Could not reach browser endpoint {cfg.endpoint or '<local launch>'}: {exc}"
            raise SessionConnectionError(msg) from exc

        try:
            context = await browser.new_context()
            page = await context.new_page()
        except PlaywrightError as exc:
            with contextlib.suppress(PlaywrightError):
                await browser.close()
            await play.stop()
            msg = f"Could not initialise a browser page: {exc}"
            raise SessionConnectionError(msg) from exc

        session = cls(cfg, play, browser, context, page)
        try:
            await session.goto(cfg.base_url)
        except NavigationError:
            await session.close()
            raise
        return session

    @property
    def url(self) -> str:
        return self.page.url

    async def goto(self, url: str) -> None:
        try:
            response = await self.page.goto(
                url,
                wait_until="domcontentloaded",
                timeout=self.cfg.navigation_timeout_ms,
            )
        except PlaywrightError as exc:
            msg = f"Failed to load {url!r}: {exc}"
            raise NavigationError(msg) from exc
        if response is not None and response.status >= 400:
            msg = f"Failed to load {url!r}: HTTP {response.status}"
            raise NavigationError(msg)
        logger.debug("Navigated to %s", url)

    async def query(
        self,
        selector: str,
        scope: ElementHandle | None = None,
        wait: Wait | None = None,
    ) -> list[ElementHandle]:
        """
        Return every element matching ``selector`` under ``scope``.

        Without ``wait`` this is a single attempt and a failing query raises
        :class:`ElementQueryError`. With ``wait`` the query is retried every
        ``wait.poll_s`` seconds until something matches; failed attempts
        count as no match and an empty list is returned on timeout.
        """
        root = scope if scope is not None else self.page

        async def attempt() -> list[ElementHandle]:
            try:
                return await root.query_selector_all(selector)
            except PlaywrightError as exc:
                msg = f"Query {selector!r} failed: {exc}"
                raise ElementQueryError(msg) from exc

        if wait is None:
            return await attempt()
        found = await poll_until(attempt, wait) or []
        if not found:
            logger.debug("query %r: nothing after %.1fs", selector, wait.timeout_s)
        return found

    async def first(
        self,
        selector: str,
        scope: ElementHandle | None = None,
        wait: Wait | None = None,
    ) -> ElementHandle:
        found = await self.query(selector, scope=scope, wait=wait)
        if not found:
            msg = f"No element matches {selector!r}"
            raise ElementNotFoundError(msg)
        return found[0]

    async def text(self, element: ElementHandle) -> str:
        try:
            return await element.inner_text()
        except PlaywrightError as exc:
            msg = f"Could not read element text: {exc}"
            raise ElementReadError(msg) from exc

    async def attribute(self, element: ElementHandle, name: str) -> str:
        """Return attribute ``name`` of ``element``; ``""`` when it is absent."""
        try:
            value = await element.get_attribute(name)
        except PlaywrightError as exc:
            msg = f"Could not read attribute {name!r}: {exc}"
            raise ElementReadError(msg) from exc
        return value or ""

    async def click(self, element: ElementHandle) -> None:
        try:
            await element.click()
        except PlaywrightError as exc:
            msg = f"Element is not clickable: {exc}"
            raise NotClickableError(msg) from exc

    async def wait_clickable(self, element: ElementHandle, timeout_s: float) -> None:
        """
        Wait until ``element`` is visible, enabled and stable.

        All three checks share one ``timeout_s`` budget. Raises
        :class:`ClickableTimeoutError` when the budget runs out.
        """
        deadline = monotonic() + timeout_s
        for state in ("visible", "enabled", "stable"):
            # timeout=0 means "wait forever" to Playwright
            left_ms = max(1.0, (deadline - monotonic()) * 1000)
            try:
                await element.wait_for_element_state(state, timeout=left_ms)
            except PlaywrightTimeoutError as exc:
                msg = f"Element not {state} within {timeout_s}s"
                raise ClickableTimeoutError(msg) from exc
            except PlaywrightError as exc:
                msg = f"Element cannot become clickable: {exc}"
                raise NotClickableError(msg) from exc

    async def close(self) -> None:
        """Release the browser connection and stop Playwright (idempotent)."""
        if self._closed:
            return
        self._closed = True
        try:
            with contextlib.suppress(PlaywrightError):
                await self._context.close()
            with contextlib.suppress(PlaywrightError):
                await self._browser.close()
        finally:
            await self._play.stop()
        logger.debug("Session closed")


@contextlib.asynccontextmanager
async def open_session(cfg: Config) -> AsyncIterator[Session]:
    """Open a :class:`Session` for ``cfg`` and close it on every exit path."""
    session = await Session.open(cfg)
    try:
        yield session
    finally:
        await session.close()
