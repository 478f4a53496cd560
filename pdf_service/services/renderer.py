"""
PDF Renderer Service.

Drives one isolated Chromium session per render job:
1. Launches a fresh browser (sessions are never pooled or reused)
2. Blocks image, media and font requests
3. Navigates and waits for DOM content loaded and network idle
4. Waits a short settle delay for late JavaScript/animations
5. Prints the page to PDF

The page, browser and Playwright driver are closed on every exit path.
"""

import asyncio
import logging
import time
from contextlib import AsyncExitStack
from typing import Awaitable, Callable, Iterable, List, Optional

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page, Route
from playwright.async_api import TimeoutError as PlaywrightTimeout
from playwright.async_api import async_playwright

from ..errors import (
    EngineLaunchError,
    NavigationError,
    NavigationTimeout,
    PdfServiceError,
    RenderError,
    RenderTimeout,
)
from ..models import RenderOptions
from .target_resolver import RenderTarget

logger = logging.getLogger("pdf_service.renderer")


def build_pdf_options(options: RenderOptions) -> dict:
    """Translate render options into keyword arguments for ``Page.pdf``."""
    return {
        "format": options.format,
        "landscape": options.landscape,
        "margin": options.margin.model_dump(),
        "scale": options.scale,
        "print_background": options.print_background,
        "display_header_footer": options.display_header_footer,
        "prefer_css_page_size": options.prefer_css_page_size,
        "tagged": options.tagged,
        "outline": options.outline,
    }


async def _close_quietly(name: str, close: Callable[[], Awaitable[None]]) -> None:
    try:
        await close()
    except Exception as e:
        logger.warning(f"Error closing {name}: {e}")


class PdfRenderer:
    """Renders a target URL to PDF bytes in its own browser session."""

    def __init__(
        self,
        headless: bool = True,
        browser_args: Optional[Iterable[str]] = None,
        blocked_resource_types: Iterable[str] = ("image", "media", "font"),
        settle_delay_ms: int = 750,
    ):
        self.headless = headless
        self.browser_args: List[str] = list(browser_args or [])
        self.blocked_resource_types = frozenset(blocked_resource_types)
        self.settle_delay_ms = settle_delay_ms

    @classmethod
    def from_settings(cls, settings) -> "PdfRenderer":
        return cls(
            headless=settings.browser_headless,
            browser_args=settings.browser_args,
            blocked_resource_types=settings.blocked_resource_types,
            settle_delay_ms=settings.settle_delay_ms,
        )

    async def _route_request(self, route: Route) -> None:
        if route.request.resource_type in self.blocked_resource_types:
            await route.abort()
        else:
            await route.continue_()

    async def render(
        self,
        target: RenderTarget,
        options: RenderOptions,
        request_id: Optional[str] = None,
    ) -> bytes:
        """
        Render ``target`` to PDF.

        Args:
            target: Resolved, allow-listed URL
            options: Normalized render options
            request_id: Correlation ID used to tag log lines

        Returns:
            PDF bytes

        Raises:
            EngineLaunchError: Chromium could not be started
            NavigationTimeout / NavigationError: The page did not load
            RenderTimeout / RenderError: PDF generation failed
        """
        tag = f"[{request_id}] " if request_id else ""
        timeout_ms = options.timeout_ms

        async with AsyncExitStack() as stack:
            try:
                playwright = await async_playwright().start()
                stack.push_async_callback(_close_quietly, "playwright", playwright.stop)

                logger.info(f"{tag}Launching Chromium (headless={self.headless})")
                browser = await playwright.chromium.launch(
                    headless=self.headless,
                    args=self.browser_args,
                    timeout=timeout_ms,
                )
                stack.push_async_callback(_close_quietly, "browser", browser.close)

                page: Page = await browser.new_page()
                stack.push_async_callback(_close_quietly, "page", page.close)
            except Exception as e:
                logger.error(f"{tag}Browser launch failed: {e}")
                raise EngineLaunchError(f"Failed to launch browser: {e}")

            try:
                await page.route("**/*", self._route_request)
                await self._navigate(page, target, timeout_ms, tag)

                if self.settle_delay_ms > 0:
                    await asyncio.sleep(self.settle_delay_ms / 1000)

                pdf_bytes = await self._print(page, options, tag)
            except PdfServiceError:
                raise
            except Exception as e:
                logger.exception(f"{tag}Unexpected error rendering {target}")
                raise RenderError(f"Failed to render {target}: {e}")

        logger.info(f"{tag}Generated PDF for {target}: {len(pdf_bytes)} bytes")
        return pdf_bytes

    async def _navigate(self, page: Page, target: RenderTarget, timeout_ms: int, tag: str) -> None:
        # goto and the network-idle wait share one timeout budget
        logger.info(f"{tag}Navigating to {target}")
        deadline = time.monotonic() + timeout_ms / 1000
        try:
            await page.goto(target.url, wait_until="domcontentloaded", timeout=timeout_ms)
            remaining_ms = 0
            if timeout_ms > 0:
                remaining_ms = int((deadline - time.monotonic()) * 1000)
                if remaining_ms <= 0:
                    raise NavigationTimeout(f"Navigation timeout of {timeout_ms} ms exceeded: {target}")
            await page.wait_for_load_state("networkidle", timeout=remaining_ms)
        except PlaywrightTimeout:
            raise NavigationTimeout(f"Navigation timeout of {timeout_ms} ms exceeded: {target}")
        except PlaywrightError as e:
            raise NavigationError(f"Navigation to {target} failed: {e.message}")

    async def _print(self, page: Page, options: RenderOptions, tag: str) -> bytes:
        logger.debug(f"{tag}Printing PDF ({options.format}, {options.orientation}, scale={options.scale})")
        timeout = options.timeout_ms / 1000 if options.timeout_ms > 0 else None
        try:
            return await asyncio.wait_for(page.pdf(**build_pdf_options(options)), timeout=timeout)
        except (asyncio.TimeoutError, PlaywrightTimeout):
            raise RenderTimeout(f"PDF generation timeout of {options.timeout_ms} ms exceeded")
        except PlaywrightError as e:
            raise RenderError(f"PDF generation failed: {e.message}")
