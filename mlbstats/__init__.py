from .mlbconfig import (
    BannerConfig as BannerConfig,
)
from .mlbconfig import (
    Config as Config,
)
from .mlbconfig import (
    PageSelectors as PageSelectors,
)
from .mlbconfig import (
    RowConfig as RowConfig,
)
from .mlbconfig import (
    coerce_nested as coerce_nested,
)
from .mlbconfig import (
    load_config as load_config,
)
from .mlberrors import (
    ClickableTimeoutError as ClickableTimeoutError,
)
from .mlberrors import (
    ElementNotFoundError as ElementNotFoundError,
)
from .mlberrors import (
    ElementQueryError as ElementQueryError,
)
from .mlberrors import (
    ElementReadError as ElementReadError,
)
from .mlberrors import (
    HeaderLayoutError as HeaderLayoutError,
)
from .mlberrors import (
    NavigationError as NavigationError,
)
from .mlberrors import (
    NotClickableError as NotClickableError,
)
from .mlberrors import (
    RowExtractionError as RowExtractionError,
)
from .mlberrors import (
    ScrapeError as ScrapeError,
)
from .mlberrors import (
    SessionConnectionError as SessionConnectionError,
)
from .mlberrors import (
    SnapshotShapeError as SnapshotShapeError,
)
from .mlberrors import (
    UnknownVariantError as UnknownVariantError,
)
from .mlberrors import (
    VariantSwitchError as VariantSwitchError,
)
from .mlbscraper import (
    FetchStrategy as FetchStrategy,
)
from .mlbscraper import (
    StatsPage as StatsPage,
)
from .mlbscraper import (
    TableExtractor as TableExtractor,
)
from .mlbscraper import (
    TableSnapshot as TableSnapshot,
)
from .mlbscraper import (
    TableVariant as TableVariant,
)
from .mlbscraper import (
    parse_variant as parse_variant,
)
from .mlbsession import (
    Session as Session,
)
from .mlbsession import (
    Wait as Wait,
)
from .mlbsession import (
    open_session as open_session,
)
