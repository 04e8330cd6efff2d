# tests/helpers.py
"""
In-memory stand-in for :class:`mlbstats.Session`.

``FakeStatsSession`` models the same page as ``test-site/stats.html``: a
two-button variant toggle, a header row and three player rows per variant.
It answers the selectors from :class:`mlbstats.PageSelectors` so
:class:`mlbstats.StatsPage` can run against it unchanged.
"""

import asyncio
from dataclasses import dataclass, field

from mlbstats import (
    Config,
    ElementNotFoundError,
    ElementQueryError,
    ElementReadError,
    NotClickableError,
)
from mlbstats.mlbconfig import BannerConfig

STANDARD_HEADERS = [
    "PLAYER", "TEAM", "G", "AB", "R", "H", "2B", "3B", "HR", "RBI",
    "BB", "SO", "SB", "CS", "AVG", "OBP", "SLG", "OPS",
]
EXPANDED_HEADERS = [
    "PLAYER", "TEAM", "PA", "HBP", "SAC", "SF", "GIDP", "GO/AO", "XBH", "TB",
    "IBB", "BABIP", "ISO", "AB/HR", "BB/K", "BB%", "SO%",
]

STANDARD_ROWS = [
    ("Aaron Judge", "RF", ["NYY", "158", "559", "137", "180", "36", "1", "58", "144",
                           "133", "171", "10", "0", ".322", ".458", ".701", "1.159"]),
    ("Shohei Ohtani", "DH", ["LAD", "159", "636", "134", "197", "38", "7", "54", "130",
                             "81", "162", "59", "4", ".310", ".390", ".646", "1.036"]),
    ("Bobby Witt Jr.", "SS", ["KC", "161", "636", "125", "211", "45", "11", "32", "109",
                              "57", "106", "31", "11", ".332", ".389", ".588", ".977"]),
]
EXPANDED_ROWS = [
    ("Aaron Judge", "RF", ["NYY", "704", "9", "0", "3", "22", "0.72", "95", "392",
                           "20", ".367", ".379", "9.64", "0.78", ".189", ".243"]),
    ("Shohei Ohtani", "DH", ["LAD", "731", "6", "0", "5", "7", "0.90", "99", "411",
                             "10", ".336", ".336", "11.78", "0.50", ".111", ".222"]),
    ("Bobby Witt Jr.", "SS", ["KC", "709", "6", "0", "10", "11", "0.81", "88", "374",
                              "3", ".354", ".256", "19.88", "0.54", ".080", ".150"]),
]

TABLES = {
    "standard": (STANDARD_HEADERS, STANDARD_ROWS),
    "expanded": (EXPANDED_HEADERS, EXPANDED_ROWS),
}


@dataclass(eq=False)
class FakeElement:
    name: str
    text: str = ""
    attrs: dict = field(default_factory=dict)
    children: dict = field(default_factory=dict)
    fail_read: bool = False
    fail_query: bool = False
    fail_click: bool = False
    delay: float = 0.0


def fast_config() -> Config:
    cfg = Config()
    cfg.banner = BannerConfig(timeout_s=0.05, poll_s=0.01)
    cfg.clickable_timeout_s = 0.1
    return cfg


class FakeStatsSession:
    """
    Answers :class:`StatsPage` queries from the in-memory page model.

    ``sticky_toggle`` makes clicks on the variant buttons do nothing, to
    model a page that ignores the switch. ``query_failures`` maps a
    selector to how many times querying it raises before it answers.
    """

    def __init__(
        self,
        cfg: Config | None = None,
        variant: str = "standard",
        banner: bool = False,
        sticky_toggle: bool = False,
    ) -> None:
        self.cfg = cfg or fast_config()
        self.url = self.cfg.base_url
        self.variant = variant
        self.banner = FakeElement("banner") if banner else None
        self.sticky_toggle = sticky_toggle
        self.variant_clicks = 0
        self.waited: list[FakeElement] = []
        self.text_calls: list[str] = []
        self.waits: dict = {}
        self.query_failures: dict[str, int] = {}
        self.headers = {k: list(h) for k, (h, _) in TABLES.items()}
        self.rows = {k: self._build_rows(r) for k, (_, r) in TABLES.items()}
        self.buttons = {
            "standard": FakeElement("btn-standard", text="Standard"),
            "expanded": FakeElement("btn-expanded", text="Expanded"),
        }

    def _build_rows(self, rows) -> list[FakeElement]:
        sel = self.cfg.selectors
        built = []
        for player, pos, stats in rows:
            n = len(stats)
            cells = [
                # later cells finish first when read concurrently
                FakeElement(f"{player}:td{i}", text=s, delay=0.001 * (n - i))
                for i, s in enumerate(stats)
            ]
            built.append(
                FakeElement(
                    f"row:{player}",
                    children={
                        sel.player_link: [
                            FakeElement("link", text=f"  {player}",
                                        attrs={sel.player_label_attr: player}),
                        ],
                        sel.position: [FakeElement("pos", text=pos)],
                        sel.data_cells: cells,
                    },
                ),
            )
        return built

    # Session surface used by StatsPage

    async def query(self, selector, scope=None, wait=None):
        self.waits[selector] = wait
        if self.query_failures.get(selector):
            self.query_failures[selector] -= 1
            msg = f"Query {selector!r} failed: Execution context was destroyed"
            raise ElementQueryError(msg)
        if scope is not None:
            if scope.fail_query:
                msg = f"Query {selector!r} failed: Element is not attached to the DOM"
                raise ElementQueryError(msg)
            return list(scope.children.get(selector, []))
        sel = self.cfg.selectors
        if selector == sel.banner_close:
            return [self.banner] if self.banner else []
        if selector == sel.variant_selected:
            return [self.buttons[self.variant]]
        if selector == sel.variant_other:
            return [b for k, b in self.buttons.items() if k != self.variant]
        if selector == sel.header_cells:
            return [FakeElement("abbr", text=h) for h in self.headers[self.variant]]
        if selector == sel.body_rows:
            return list(self.rows[self.variant])
        return []

    async def first(self, selector, scope=None, wait=None):
        found = await self.query(selector, scope=scope, wait=wait)
        if not found:
            msg = f"No element matches {selector!r}"
            raise ElementNotFoundError(msg)
        return found[0]

    async def text(self, element):
        if element.delay:
            await asyncio.sleep(element.delay)
        if element.fail_read:
            msg = f"Could not read element text: {element.name}"
            raise ElementReadError(msg)
        self.text_calls.append(element.name)
        return element.text

    async def attribute(self, element, name):
        return element.attrs.get(name) or ""

    async def wait_clickable(self, element, timeout_s):
        self.waited.append(element)

    async def click(self, element):
        if element is self.banner:
            if element.fail_click:
                msg = "Element is not clickable: detached"
                raise NotClickableError(msg)
            self.banner = None
            return
        for key, button in self.buttons.items():
            if element is button:
                self.variant_clicks += 1
                if not self.sticky_toggle:
                    self.variant = key
                return
