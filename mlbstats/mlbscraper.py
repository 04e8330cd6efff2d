"""mlbstats.mlbscraper.

Page affordances and table extraction for the MLB stats page.

- :class:`StatsPage` knows the page: the optional banner, the variant
    toggle in the secondary navigation group, the header and body markup.
- :class:`TableExtractor` guarantees the requested variant is active
    before scraping and composes headers and rows into a
    :class:`TableSnapshot`.

The public contract:

- ``await TableExtractor(StatsPage(session)).snapshot_for(TableVariant.STANDARD)``
    -> :class:`TableSnapshot`
"""

from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

import pandas as pd

from .mlberrors import (
    ClickableTimeoutError,
    HeaderLayoutError,
    NotClickableError,
    RowExtractionError,
    ScrapeError,
    SnapshotShapeError,
    UnknownVariantError,
    VariantSwitchError,
)
from .mlbsession import Session, Wait

if TYPE_CHECKING:
    from playwright.async_api import ElementHandle

logger = logging.getLogger(__name__)


class TableVariant(Enum):
    STANDARD = "standard"
    EXPANDED = "expanded"


class FetchStrategy(Enum):
    SEQUENTIAL = "sequential"
    CONCURRENT = "concurrent"


def parse_variant(label: str) -> TableVariant:
    """
    Map a navigation button label to a :class:`TableVariant`.

    This is the only place that compares raw label text; matching is
    case-insensitive and ignores surrounding whitespace.
    """
    key = (label or "").strip().lower()
    for variant in TableVariant:
        if key == variant.value:
            return variant
    msg = f"Unrecognised table variant label: {label!r}"
    raise UnknownVariantError(msg)


@dataclass
class TableSnapshot:
    """Columns and rows captured while one table variant was active."""

    variant: TableVariant
    columns: list[str]
    rows: list[list[str]] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "variant": self.variant.value,
            "columns": list(self.columns),
            "rows": [list(r) for r in self.rows],
        }

    def to_dataframe(self) -> pd.DataFrame:
        dframe = pd.DataFrame(self.rows, columns=self.columns)
        dframe.attrs["variant"] = self.variant.value
        return dframe


# ----------------------------
# Page affordances
# ----------------------------


class StatsPage:
    """
    Page-specific operations on top of a :class:`Session`.

    All selectors come from ``session.cfg.selectors`` so markup drift is
    fixed in configuration rather than here.
    """

    def __init__(self, session: Session) -> None:
        self.session = session
        self.cfg = session.cfg
        self.sel = session.cfg.selectors

    async def dismiss_banner(self) -> bool:
        """
        Close the banner if it shows up within the banner wait budget.

        Returns True when the banner was clicked away. A banner that never
        appears, or that goes away before it can be clicked, is normal and
        returns False without raising.
        """
        banner = self.cfg.banner
        if not banner.enabled:
            return False
        found = await self.session.query(
            self.sel.banner_close,
            wait=Wait(banner.timeout_s, banner.poll_s),
        )
        if not found:
            logger.info("Banner not found")
            return False
        try:
            await self.session.wait_clickable(found[0], self.cfg.clickable_timeout_s)
            await self.session.click(found[0])
        except (NotClickableError, ClickableTimeoutError) as exc:
            logger.info("Banner not closed: %s", exc)
            return False
        logger.info("Banner closed")
        return True

    async def active_variant(self) -> TableVariant:
        selected = await self.session.first(self.sel.variant_selected)
        return parse_variant(await self.session.text(selected))

    async def switch_variant(self) -> TableVariant:
        """Click the inactive variant button and return the variant it names."""
        button = await self.session.first(self.sel.variant_other)
        label = await self.session.text(button)
        await self.session.wait_clickable(button, self.cfg.clickable_timeout_s)
        await self.session.click(button)
        logger.info("Switched to: %s", label.strip())
        return parse_variant(label)

    async def column_headers(self) -> list[str]:
        """
        Read the header labels, lowercased, with the position header added.

        The page renders no header cell for the position column although
        every row carries one, so ``pos_header`` is inserted right after
        ``pos_anchor``.
        """
        cells = await self.session.query(self.sel.header_cells)
        headers = [(await self.session.text(c)).strip().lower() for c in cells]
        try:
            anchor = headers.index(self.sel.pos_anchor)
        except ValueError:
            msg = f"Header {self.sel.pos_anchor!r} not found in {headers}"
            raise HeaderLayoutError(msg) from None
        headers.insert(anchor + 1, self.sel.pos_header)
        return headers

    async def rows(self, fetch: FetchStrategy | None = None) -> list[list[str]]:
        """
        Read every body row in document order.

        Each row is ``[player, position, cell...]``. Any failure while
        reading a row aborts the extraction with :class:`RowExtractionError`
        so no short row is ever returned.
        """
        if fetch is None:
            fetch = FetchStrategy(self.cfg.rows.fetch)
        row_elems = await self.session.query(self.sel.body_rows)
        rows: list[list[str]] = []
        for i, row in enumerate(row_elems):
            try:
                rows.append(await self._read_row(row, fetch))
            except ScrapeError as exc:
                raise RowExtractionError(i, str(exc)) from exc
        logger.debug("Read %d rows (%s fetch)", len(rows), fetch.value)
        return rows

    async def _read_row(self, row: ElementHandle, fetch: FetchStrategy) -> list[str]:
        s = self.session
        link = await s.first(self.sel.player_link, scope=row)
        player = await s.attribute(link, self.sel.player_label_attr)
        position = await s.text(await s.first(self.sel.position, scope=row))

        cells = await s.query(self.sel.data_cells, scope=row)
        if fetch is FetchStrategy.CONCURRENT:
            results = await asyncio.gather(
                *(s.text(c) for c in cells),
                return_exceptions=True,
            )
            failed = [r for r in results if isinstance(r, BaseException)]
            if failed:
                raise failed[0]
            stats = list(results)
        else:
            stats = [await s.text(c) for c in cells]
        return [self._norm(v) for v in [player, position, *stats]]

    def _norm(self, s: str) -> str:
        s = s or ""
        norm = self.cfg.rows
        if norm.trim_whitespace:
            s = s.strip()
        if norm.collapse_spaces:
            s = re.sub(r"\s+", " ", s)
        return s


# ----------------------------
# Table extraction
# ----------------------------


class TableExtractor:
    """
    Produce headers and rows for a requested :class:`TableVariant`.

    The page toggles between exactly two variants, so reaching the
    requested one takes at most one switch. If the page still shows the
    wrong variant after that, :class:`VariantSwitchError` is raised instead
    of switching again.
    """

    def __init__(self, page: StatsPage) -> None:
        self.page = page
        self.last_variant: TableVariant | None = None
        self.switch_count = 0

    async def ensure_variant(self, variant: TableVariant) -> None:
        active = await self.page.active_variant()
        self.last_variant = active
        if active is variant:
            return
        await self.page.switch_variant()
        self.switch_count += 1
        active = await self.page.active_variant()
        self.last_variant = active
        if active is not variant:
            msg = f"Requested {variant.value} table but {active.value} is still active"
            raise VariantSwitchError(msg)

    async def columns_for(self, variant: TableVariant) -> list[str]:
        await self.ensure_variant(variant)
        return await self.page.column_headers()

    async def rows_for(
        self,
        variant: TableVariant,
        fetch: FetchStrategy | None = None,
    ) -> list[list[str]]:
        await self.ensure_variant(variant)
        return await self.page.rows(fetch)

    async def snapshot_for(
        self,
        variant: TableVariant,
        fetch: FetchStrategy | None = None,
    ) -> TableSnapshot:
        await self.ensure_variant(variant)
        columns = await self.page.column_headers()
        rows = await self.page.rows(fetch)

        bad = [i for i, r in enumerate(rows) if len(r) != len(columns)]
        if bad:
            msg = (
                f"{len(bad)} of {len(rows)} rows do not have {len(columns)} cells "
                f"(first: row {bad[0]} has {len(rows[bad[0]])})"
            )
            raise SnapshotShapeError(msg)

        logger.info(
            "Snapshot %s | Rows: %s | Cols: %s",
            variant.value,
            len(rows),
            len(columns),
        )
        return TableSnapshot(variant, columns, rows)
