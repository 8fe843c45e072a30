"""Data models shared by the finder, the strategies and the image fetcher"""

from enum import Enum
from typing import Optional, Self

from PIL import Image as PILImage
from pydantic import BaseModel, ConfigDict, Field, model_validator

from favicon_finder.configs import settings


class StrategyKind(Enum):
    """Discovery methods. Declaration order is the default fallback order."""

    HTML = "html"
    ICO = "ico"
    WEB_APPLICATION_MANIFEST_FILE = "webApplicationManifestFile"


DEFAULT_STRATEGY_ORDER: tuple[StrategyKind, ...] = tuple(StrategyKind)


class FaviconType(Enum):
    """The flavour of icon a strategy located."""

    SHORTCUT_ICON = "shortcut icon"
    ICON = "icon"
    APPLE_TOUCH_ICON = "apple-touch-icon"
    APPLE_TOUCH_ICON_PRECOMPOSED = "apple-touch-icon-precomposed"
    ICO = "ico"
    MANIFEST = "manifest"

    @property
    def strategy_kind(self) -> StrategyKind:
        """Return the strategy that produces this type of icon."""
        match self:
            case FaviconType.ICO:
                return StrategyKind.ICO
            case FaviconType.MANIFEST:
                return StrategyKind.WEB_APPLICATION_MANIFEST_FILE
            case _:
                return StrategyKind.HTML


# Link relations tried by the HTML strategy, most preferred first.
HTML_FAVICON_TYPES: tuple[FaviconType, ...] = (
    FaviconType.SHORTCUT_ICON,
    FaviconType.ICON,
    FaviconType.APPLE_TOUCH_ICON,
    FaviconType.APPLE_TOUCH_ICON_PRECOMPOSED,
)


class SearchState(Enum):
    """States a single favicon search moves through."""

    IDLE = "idle"
    SEARCHING = "searching"
    LOCATED = "located"
    FETCHING = "fetching"
    DONE = "done"
    FAILED = "failed"


class SearchConfig(BaseModel):
    """Options for a single `FaviconFinder.find` call."""

    model_config = ConfigDict(frozen=True)

    preferred_strategy: StrategyKind = StrategyKind.HTML
    per_strategy_hint: dict[StrategyKind, str] = Field(
        default_factory=dict,
        description="Overrides a strategy's default lookup, e.g. a link rel for `html` "
        "or a file name for `ico`",
    )
    follow_meta_refresh_redirect: bool = False
    fetch_image_bytes: bool = True

    @classmethod
    def from_settings(cls, **overrides) -> "SearchConfig":
        """Build a config from the `[search]` settings table, applying any overrides."""
        values = {
            "preferred_strategy": StrategyKind(settings.search.preferred_strategy),
            "follow_meta_refresh_redirect": settings.search.follow_meta_refresh_redirect,
            "fetch_image_bytes": settings.search.fetch_image_bytes,
        }
        values.update(overrides)
        return cls(**values)

    def hint_for(self, kind: StrategyKind) -> Optional[str]:
        """Return the hint configured for `kind`, if any."""
        return self.per_strategy_hint.get(kind)


class CandidateURL(BaseModel):
    """A URL a strategy believes points at a favicon.

    `content` and `content_type` are set when the strategy already downloaded the
    icon while probing for it, so the image fetcher does not request it again.
    """

    model_config = ConfigDict(frozen=True)

    url: str
    kind: StrategyKind
    icon_type: Optional[FaviconType] = None
    content: Optional[bytes] = Field(default=None, repr=False)
    content_type: Optional[str] = None


class Favicon(BaseModel):
    """A located favicon, with its decoded image unless only the URL was requested."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    decoded_image: Optional[PILImage.Image] = None
    raw_bytes: Optional[bytes] = None
    content_type: Optional[str] = None
    source_url: str
    kind: StrategyKind
    strategy_used: StrategyKind
    icon_type: Optional[FaviconType] = None

    @model_validator(mode="after")
    def check_image_and_bytes(self) -> Self:
        """Bytes and decoded image travel together; never one without the other."""
        if (self.decoded_image is None) != (self.raw_bytes is None):
            raise ValueError("decoded_image and raw_bytes must be both set or both absent")
        return self

    @property
    def has_image(self) -> bool:
        """Whether the favicon was downloaded and decoded."""
        return self.decoded_image is not None

    @classmethod
    def url_only(cls, candidate: CandidateURL, strategy_used: StrategyKind) -> "Favicon":
        """Create a favicon carrying only the located URL, without any image data."""
        return cls(
            source_url=candidate.url,
            kind=candidate.kind,
            strategy_used=strategy_used,
            icon_type=candidate.icon_type,
        )
