"""Data structures shared by the episode and memo extraction engines."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, FrozenSet, Generic, List, Optional, Set, TypeVar, Union

from bs4 import BeautifulSoup, Comment


S = TypeVar('S')

NON_VISIBLE_TAGS = ('script', 'style', 'noscript', 'template')


class EpisodeField(str, Enum):
    """Fields recoverable from an episode page."""
    PUBLISH_DATE = "publishDate"
    TITLE = "title"
    SEASON = "season"
    SHOW_NOTES = "showNotes"
    # Not part of an "all" request
    TRANSCRIPT = "transcript"
    # Reported alongside the core fields of an "all" request; never required
    EPISODE_NUMBER = "episodeNumber"
    YOUTUBE_URL = "youtubeUrl"
    APPLE_PODCASTS_URL = "applePodcastsUrl"
    SPOTIFY_URL = "spotifyUrl"


ALL_EPISODE_FIELDS = (
    EpisodeField.PUBLISH_DATE,
    EpisodeField.TITLE,
    EpisodeField.SEASON,
    EpisodeField.SHOW_NOTES,
)

ANCILLARY_EPISODE_FIELDS = (
    EpisodeField.EPISODE_NUMBER,
    EpisodeField.YOUTUBE_URL,
    EpisodeField.APPLE_PODCASTS_URL,
    EpisodeField.SPOTIFY_URL,
)

# Selector values accepted on the boundary ("extract=...")
EXTRACT_MODES: Dict[str, tuple] = {
    'date': (EpisodeField.PUBLISH_DATE,),
    'title': (EpisodeField.TITLE,),
    'season': (EpisodeField.SEASON,),
    'shownotes': (EpisodeField.SHOW_NOTES,),
    'transcript': (EpisodeField.TRANSCRIPT,),
    'all': ALL_EPISODE_FIELDS + ANCILLARY_EPISODE_FIELDS,
    'both': (EpisodeField.PUBLISH_DATE, EpisodeField.TRANSCRIPT),
}

# Fields a mode reports when found but does not need for success
OPTIONAL_FIELDS_BY_MODE: Dict[str, tuple] = {
    'all': ANCILLARY_EPISODE_FIELDS,
    'both': (EpisodeField.TRANSCRIPT,),
}


class MemoField(str, Enum):
    """Closed set of fields the QuickPaste parser attempts, in form order."""
    NAME = "name"
    SLUG = "slug"
    INVESTMENT_DATE = "investment_date"
    INVESTMENT_AMOUNT = "investment_amount"
    INSTRUMENT = "instrument"
    ROUND_SIZE_USD = "round_size_usd"
    STAGE_AT_INVESTMENT = "stage_at_investment"
    CONVERSION_CAP_USD = "conversion_cap_usd"
    DISCOUNT_PERCENT = "discount_percent"
    POST_MONEY_VALUATION = "post_money_valuation"
    HAS_PRO_RATA_RIGHTS = "has_pro_rata_rights"
    COUNTRY_OF_INCORP = "country_of_incorp"
    INCORPORATION_TYPE = "incorporation_type"
    REASON_FOR_INVESTING = "reason_for_investing"
    CO_INVESTORS = "co_investors"
    FOUNDER_NAME = "founder_name"
    FOUNDER_ROLE = "founder_role"
    DESCRIPTION_RAW = "description_raw"


class ErrorKind(str, Enum):
    """Caller-visible failure classes."""
    INPUT_REJECTED = "input_rejected"
    RETRIEVAL_FAILURE = "retrieval_failure"
    PARSE_FAILURE = "parse_failure"
    FIELD_ABSENT = "field_absent"


@dataclass(frozen=True)
class PageRequest:
    """Extract fields from one episode page.

    ``markup`` is fetched by the caller; ``None`` means retrieval failed.
    """
    locator: str
    fields: FrozenSet[EpisodeField]
    markup: Optional[str] = None
    optional: FrozenSet[EpisodeField] = frozenset()
    kind: str = field(default="page", init=False)

    @classmethod
    def for_mode(cls, locator: str, mode: str, markup: Optional[str] = None) -> 'PageRequest':
        """Build a request from a boundary selector such as ``all`` or ``date``.

        Raises KeyError for an unknown selector.
        """
        return cls(
            locator=locator,
            fields=frozenset(EXTRACT_MODES[mode]),
            markup=markup,
            optional=frozenset(OPTIONAL_FIELDS_BY_MODE.get(mode, ())),
        )


@dataclass(frozen=True)
class MemoRequest:
    """Parse one pasted investment memo."""
    text: str
    kind: str = field(default="memo", init=False)


ExtractionRequest = Union[PageRequest, MemoRequest]


@dataclass(frozen=True)
class Strategy(Generic[S]):
    """One attempt at recovering a raw field value from a source.

    ``extract`` returns the raw text it found, or None.
    """
    name: str
    priority: int
    extract: Callable[[S], Optional[str]]


@dataclass
class ExtractedField:
    """Outcome of one field pipeline."""
    field_id: Any
    value: Any = None
    method_used: Optional[str] = None
    raw_value: Optional[str] = None

    @property
    def found(self) -> bool:
        return self.value is not None


@dataclass
class ExtractionResult:
    """Aggregate over one episode request."""
    fields: List[ExtractedField] = field(default_factory=list)
    succeeded: Set[EpisodeField] = field(default_factory=set)
    failed: Set[EpisodeField] = field(default_factory=set)
    success: bool = False
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None

    def get(self, field_id: EpisodeField) -> Optional[ExtractedField]:
        for extracted in self.fields:
            if extracted.field_id == field_id:
                return extracted
        return None

    @classmethod
    def failure(cls, error: str, error_kind: ErrorKind) -> 'ExtractionResult':
        return cls(success=False, error=error, error_kind=error_kind)


@dataclass
class MemoParseResult:
    """QuickPaste output: values for successful fields plus the field partition."""
    extracted_data: Dict[str, Any] = field(default_factory=dict)
    successfully_parsed: Set[MemoField] = field(default_factory=set)
    failed_to_parse: Set[MemoField] = field(default_factory=set)

    def record(self, field_id: MemoField, value: Any) -> None:
        """Store a coerced value, or mark the field failed when it is None."""
        if value is None:
            self.failed_to_parse.add(field_id)
        else:
            self.extracted_data[field_id.value] = value
            self.successfully_parsed.add(field_id)

    def to_dict(self) -> Dict[str, Any]:
        order = list(MemoField)
        return {
            'extractedData': dict(self.extracted_data),
            'successfullyParsed': [f.value for f in order if f in self.successfully_parsed],
            'failedToParse': [f.value for f in order if f in self.failed_to_parse],
        }


@dataclass
class EpisodePage:
    """Parsed episode page handed to every episode strategy."""
    url: str
    soup: BeautifulSoup

    def body_text(self) -> str:
        """Visible text of the page body, without script/style content."""
        body = self.soup.body or self.soup
        chunks = [
            text for text in body.find_all(string=True)
            if not isinstance(text, Comment) and text.parent.name not in NON_VISIBLE_TAGS
        ]
        return ' '.join(chunks)
