"""
mlbstats.mlberrors.

Exception hierarchy for the extraction runtime. Every error raised on
purpose by :mod:`mlbstats` derives from :class:`ScrapeError`, so callers
can catch one type and still branch on the category.
"""


class ScrapeError(RuntimeError):
    """Base class for all extraction failures."""


# Browser session


class SessionConnectionError(ScrapeError, ConnectionError):
    """The browser endpoint could not be reached or initialised."""


class NavigationError(ScrapeError):
    """The target page failed to load."""


class ElementNotFoundError(ScrapeError, LookupError):
    """A required element did not match within its query policy."""


class ElementQueryError(ScrapeError):
    """A selector query could not be evaluated against the document."""


class ElementReadError(ScrapeError):
    """Reading text or an attribute from an element failed."""


class NotClickableError(ScrapeError):
    """An element exists but could not be clicked."""


class ClickableTimeoutError(ScrapeError, TimeoutError):
    """An element did not become clickable within its wait budget."""


# Page and table


class UnknownVariantError(ScrapeError, ValueError):
    """The active table variant label matches no known variant."""


class VariantSwitchError(ScrapeError):
    """The requested variant is still inactive after one switch."""


class HeaderLayoutError(ScrapeError):
    """The header row does not have the expected shape."""


class RowExtractionError(ScrapeError):
    """A body row could not be read completely."""

    def __init__(self, index: int, reason: str) -> None:
        self.index = index
        super().__init__(f"row {index}: {reason}")


class SnapshotShapeError(ScrapeError):
    """Row lengths disagree with the header count of a snapshot."""
