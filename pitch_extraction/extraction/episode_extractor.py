"""Episode metadata extractor - runs one strategy pipeline per requested field."""

import logging
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from .date_extractor import DateExtractor
from .episode_number_extractor import EpisodeNumberExtractor
from .extraction_logger import ExtractionTrace
from .html_processor import HTMLProcessor
from .metadata_extractor import MetadataExtractor
from .models import (
    ALL_EPISODE_FIELDS,
    EpisodeField,
    EpisodePage,
    ErrorKind,
    ExtractionResult,
    Strategy,
)
from .platform_extractor import PLATFORMS, PlatformLinkExtractor
from .season_extractor import SeasonExtractor
from .strategies import run_strategies
from .transcript_extractor import TranscriptExtractor

logger = logging.getLogger(__name__)

Pipeline = Tuple[List[Strategy[EpisodePage]], Callable[[str], Any]]

NOT_FOUND_MESSAGES = {
    EpisodeField.PUBLISH_DATE: 'No publish date found on this page',
    EpisodeField.TITLE: 'No episode title found on this page',
    EpisodeField.SEASON: 'No season number found on this page',
    EpisodeField.SHOW_NOTES: 'No show notes content found on this page',
    EpisodeField.TRANSCRIPT: 'No transcript content found on the page',
    EpisodeField.EPISODE_NUMBER: 'No episode number found on this page',
    EpisodeField.YOUTUBE_URL: 'No YouTube link found on this page',
    EpisodeField.APPLE_PODCASTS_URL: 'No Apple Podcasts link found on this page',
    EpisodeField.SPOTIFY_URL: 'No Spotify link found on this page',
}


class EpisodeExtractor:
    """
    Recover episode fields from one page's markup.

    Every field has its own ordered strategy list; fields are independent,
    so a miss in one pipeline never stops the others.
    """

    def __init__(self, html_processor: Optional[HTMLProcessor] = None):
        self.html_processor = html_processor or HTMLProcessor()
        self.date_extractor = DateExtractor(self.html_processor)
        self.metadata_extractor = MetadataExtractor(self.html_processor)
        self.season_extractor = SeasonExtractor()
        self.transcript_extractor = TranscriptExtractor(self.html_processor)
        self.episode_number_extractor = EpisodeNumberExtractor(self.html_processor)
        self.platform_extractors = {
            field_id: PlatformLinkExtractor(self.html_processor, platform)
            for field_id, platform in PLATFORMS.items()
        }

    def pipelines(self) -> Dict[EpisodeField, Pipeline]:
        pipelines = {
            EpisodeField.PUBLISH_DATE: (self.date_extractor.strategies(), self.date_extractor.coerce),
            EpisodeField.TITLE: (self.metadata_extractor.title_strategies(), self.metadata_extractor.coerce_title),
            EpisodeField.SEASON: (self.season_extractor.strategies(), self.season_extractor.coerce),
            EpisodeField.SHOW_NOTES: (
                self.metadata_extractor.show_notes_strategies(),
                self.metadata_extractor.coerce_show_notes,
            ),
            EpisodeField.TRANSCRIPT: (self.transcript_extractor.strategies(), self.transcript_extractor.coerce),
            EpisodeField.EPISODE_NUMBER: (
                self.episode_number_extractor.strategies(),
                self.episode_number_extractor.coerce,
            ),
        }
        for field_id, extractor in self.platform_extractors.items():
            pipelines[field_id] = (extractor.strategies(), extractor.coerce)
        return pipelines

    def extract(self, markup: Optional[str], url: str,
                fields: Iterable[EpisodeField] = ALL_EPISODE_FIELDS,
                optional: Iterable[EpisodeField] = ()) -> ExtractionResult:
        """
        Run the pipelines for the requested fields.

        Args:
            markup: Page HTML already retrieved by the caller
            url: Locator the markup came from (used by URL-based strategies)
            fields: Fields to extract
            optional: Requested fields that are reported when found but
                never decide success on their own

        Returns:
            ExtractionResult; ``success`` is True when at least one required
            field was recovered (for a single field: when that field was)
        """
        requested = [f for f in EpisodeField if f in set(fields)]
        if not requested:
            return ExtractionResult.failure('No fields requested', ErrorKind.INPUT_REJECTED)

        optional = set(optional)
        required = [f for f in requested if f not in optional] or requested

        page = self.html_processor.parse(markup, url)
        if page is None:
            logger.warning(f"Episode page could not be parsed: {url[:80]}")
            return ExtractionResult.failure('Failed to parse webpage content', ErrorKind.PARSE_FAILURE)

        trace = ExtractionTrace(source=url)
        pipelines = self.pipelines()
        result = ExtractionResult()

        for field_id in requested:
            strategies, coerce = pipelines[field_id]
            extracted = run_strategies(field_id, strategies, page, coerce, trace)
            result.fields.append(extracted)
            if extracted.found:
                result.succeeded.add(field_id)
            else:
                result.failed.add(field_id)

        trace.complete(
            succeeded=[f.value for f in requested if f in result.succeeded],
            failed=[f.value for f in requested if f in result.failed],
        )

        result.success = any(f in result.succeeded for f in required)
        if not result.success:
            if len(required) == 1:
                result.error = NOT_FOUND_MESSAGES[required[0]]
            else:
                result.error = 'No episode data found on this page'
            result.error_kind = ErrorKind.FIELD_ABSENT

        return result
