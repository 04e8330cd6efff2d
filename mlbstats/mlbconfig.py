"""
mlbstats.mlbconfig
=================================

Configuration dataclasses and helpers used to coerce a JSON configuration
into Python objects consumed by the stats extraction runtime.

The primary public surface is :class:`Config`. Every field has a default
that targets the live MLB stats page, so an empty JSON object (or no file
at all) is a valid configuration. :func:`load_config` reads a JSON file and
returns a typed :class:`Config` instance.
"""

import json
from dataclasses import MISSING, dataclass, field, fields, is_dataclass
from pathlib import Path
from typing import Any, Literal, get_args, get_origin

DEFAULT_BASE_URL = "https://www.mlb.com/stats/"


@dataclass
class BannerConfig:
    """
    Polling policy for the optional banner close control.

    The banner may never appear, so the poll gives up quietly after
    ``timeout_s`` seconds.
    """

    enabled: bool = True
    timeout_s: float = 8.0
    poll_s: float = 1.0


@dataclass
class PageSelectors:
    """
    CSS selectors describing the stats page markup.

    Fields
    ------
    banner_close: the cookie/promo banner close button.
    variant_selected: the navigation button of the active table variant.
    variant_other: the navigation button of the inactive table variant.
    header_cells: label elements of the table header, in document order.
    body_rows: rows of the table body.
    player_link: anchor carrying the player label (scoped to a row).
    player_label_attr: attribute of ``player_link`` holding the label.
    position: element holding the position label (scoped to a row).
    data_cells: stat cells (scoped to a row).
    pos_header: synthetic header emitted for the position column.
    pos_anchor: header after which ``pos_header`` is inserted.
    """

    banner_close: str = ".banner-close-button"
    variant_selected: str = ".stats-navigation div.group-secondary button.selected"
    variant_other: str = ".stats-navigation div.group-secondary button:not(.selected)"
    header_cells: str = "table thead tr th button abbr"
    body_rows: str = "table tbody tr"
    player_link: str = "a.bui-link"
    player_label_attr: str = "aria-label"
    position: str = "div[class^='position']"
    data_cells: str = "td"
    pos_header: str = "pos"
    pos_anchor: str = "player"


@dataclass
class RowConfig:
    """
    Row extraction settings.

    ``fetch`` picks the cell read strategy; ``concurrent`` reads all cells
    of a row at once. The normalisation switches apply to every cell.
    """

    fetch: Literal["sequential", "concurrent"] = "concurrent"
    trim_whitespace: bool = True
    collapse_spaces: bool = True


@dataclass
class Config:
    """
    Top-level runtime configuration.

    ``endpoint`` selects how the browser is obtained: empty launches a
    local browser, ``ws://`` connects to a Playwright server and
    ``http://`` attaches to a running Chromium over CDP.
    """

    browser: Literal["chromium", "firefox", "webkit"] = "chromium"
    headless: bool = True
    endpoint: str = ""
    base_url: str = DEFAULT_BASE_URL
    navigation_timeout_ms: int = 30000
    clickable_timeout_s: float = 10.0

    banner: BannerConfig = field(default_factory=BannerConfig)
    selectors: PageSelectors = field(default_factory=PageSelectors)
    rows: RowConfig = field(default_factory=RowConfig)


def coerce_value(val: Any, target_type: type[Any]) -> Any:
    # Dataclass instance from dict
    if is_dataclass(target_type) and isinstance(val, dict):
        return coerce_nested(val, target_type)

    # Literal[...] choices are checked here so a typo fails at load time
    if get_origin(target_type) is Literal and val not in get_args(target_type):
        msg = f"Invalid value {val!r}; expected one of {list(get_args(target_type))}"
        raise ValueError(msg)

    # Pass through untouched
    return val


def coerce_nested(obj: dict, cls: type[Any]) -> Any:
    if not is_dataclass(cls):
        return obj

    kwargs = {}
    for f in fields(cls):
        if f.name not in obj:
            continue
        val = obj[f.name]
        if val is MISSING:
            continue
        try:
            kwargs[f.name] = coerce_value(val, f.type)
        except ValueError as exc:
            msg = f"{cls.__name__}.{f.name}: {exc}"
            raise ValueError(msg) from None

    return cls(**kwargs)


def load_config(path: str | Path | None = None) -> Config:
    """Read ``path`` as JSON into a :class:`Config`; defaults when ``path`` is None."""
    if path is None:
        return Config()
    raw = json.loads(Path(path).read_text(encoding="utf-8"))
    return coerce_nested(raw, Config)
