"""Structured-data extraction for episode pages and pasted investment memos."""

import logging
from typing import Any, Dict, Optional
from urllib.parse import urlparse

from .diligence_parser import DiligenceResult, parse_diligence_blob
from .episode_extractor import NOT_FOUND_MESSAGES, EpisodeExtractor
from .memo_parser import MemoParser, parse_quick_paste
from .models import (
    ALL_EPISODE_FIELDS,
    EXTRACT_MODES,
    EpisodeField,
    ErrorKind,
    ExtractedField,
    ExtractionRequest,
    ExtractionResult,
    MemoField,
    MemoParseResult,
    MemoRequest,
    PageRequest,
    Strategy,
)
from .text_normalizer import collapse_whitespace, normalize_date, truncate_at_ellipsis

logger = logging.getLogger(__name__)

# Envelope property per episode field
ENVELOPE_KEYS = {
    EpisodeField.PUBLISH_DATE: 'publishDate',
    EpisodeField.TITLE: 'episodeTitle',
    EpisodeField.SEASON: 'episodeSeason',
    EpisodeField.SHOW_NOTES: 'episodeShowNotes',
    EpisodeField.TRANSCRIPT: 'transcript',
    EpisodeField.EPISODE_NUMBER: 'episodeNumber',
    EpisodeField.YOUTUBE_URL: 'youtubeUrl',
    EpisodeField.APPLE_PODCASTS_URL: 'applePodcastsUrl',
    EpisodeField.SPOTIFY_URL: 'spotifyUrl',
}

# Optional fields whose miss is reported instead of silently left null
OPTIONAL_ERROR_KEYS = {
    EpisodeField.TRANSCRIPT: 'transcriptError',
}

STATUS_BY_ERROR_KIND = {
    ErrorKind.INPUT_REJECTED.value: 400,
    ErrorKind.FIELD_ABSENT.value: 404,
    ErrorKind.RETRIEVAL_FAILURE.value: 500,
    ErrorKind.PARSE_FAILURE.value: 500,
}


def validate_locator(url: Optional[str], allowed_domain: str) -> Optional[str]:
    """
    Check that a locator is an http(s) URL on the allowed domain.

    Returns an error message, or None when the locator is acceptable.
    """
    if not url or not url.strip():
        return 'URL parameter is required'

    parsed = urlparse(url.strip())
    if parsed.scheme not in ('http', 'https') or not parsed.hostname:
        return 'Invalid URL format'

    host = parsed.hostname.lower()
    domain = allowed_domain.lower()
    if host != domain and not host.endswith('.' + domain):
        return f'URL must be from {allowed_domain}'

    return None


def status_for(envelope: Dict[str, Any]) -> int:
    """Map an envelope to an HTTP-style status code."""
    if envelope.get('success', True):
        return 200
    return STATUS_BY_ERROR_KIND.get(envelope.get('errorKind'), 500)


class ExtractionFacade:
    """
    Single entry point for both engines.

    Stateless: engines are built per call, and every outcome (including
    failures) comes back as a plain JSON-serializable dict.
    """

    def extract(self, request: ExtractionRequest) -> Dict[str, Any]:
        if isinstance(request, MemoRequest):
            return self.extract_memo(request.text)
        if isinstance(request, PageRequest):
            return self.extract_page(request)
        return self._error_envelope(None, 'Unsupported extraction request', ErrorKind.INPUT_REJECTED)

    def extract_memo(self, text: Optional[str]) -> Dict[str, Any]:
        return MemoParser().parse(text).to_dict()

    def extract_diligence(self, text: Optional[str]) -> Dict[str, Any]:
        return parse_diligence_blob(text).to_dict()

    def extract_page(self, request: PageRequest) -> Dict[str, Any]:
        if not request.fields or not all(isinstance(f, EpisodeField) for f in request.fields):
            return self._error_envelope(request.locator, 'Unknown extraction type', ErrorKind.INPUT_REJECTED)

        if request.markup is None:
            return self._error_envelope(request.locator, 'Failed to fetch webpage', ErrorKind.RETRIEVAL_FAILURE)

        try:
            result = EpisodeExtractor().extract(
                request.markup, request.locator, request.fields, optional=request.optional
            )
        except Exception as e:
            logger.exception(f"Unexpected error extracting {request.locator[:80]}")
            return self._error_envelope(request.locator, f'Internal extraction error: {e}', ErrorKind.PARSE_FAILURE)

        return self.build_envelope(request, result)

    def build_envelope(self, request: PageRequest, result: ExtractionResult) -> Dict[str, Any]:
        if not result.success:
            return self._error_envelope(request.locator, result.error, result.error_kind)

        envelope: Dict[str, Any] = {'url': request.locator, 'success': True}
        methods: Dict[str, Optional[str]] = {}

        for extracted in result.fields:
            key = ENVELOPE_KEYS[extracted.field_id]
            envelope[key] = extracted.value
            if extracted.field_id == EpisodeField.PUBLISH_DATE:
                envelope['originalDate'] = extracted.raw_value
            methods[extracted.field_id.value] = extracted.method_used

        if len(result.fields) == 1:
            envelope['extractionMethod'] = result.fields[0].method_used
        else:
            envelope['extractionMethod'] = methods
            order = [f for f in EpisodeField if f in request.fields]
            envelope['succeeded'] = [f.value for f in order if f in result.succeeded]
            envelope['failed'] = [f.value for f in order if f in result.failed]

        for field_id, key in OPTIONAL_ERROR_KEYS.items():
            if field_id in request.optional and field_id in result.failed:
                envelope[key] = NOT_FOUND_MESSAGES[field_id]

        return envelope

    @staticmethod
    def _error_envelope(url: Optional[str], error: Optional[str], kind: Optional[ErrorKind]) -> Dict[str, Any]:
        return {
            'url': url,
            'success': False,
            'error': error or 'Unknown error occurred',
            'errorKind': (kind or ErrorKind.PARSE_FAILURE).value,
        }


__all__ = [
    'ALL_EPISODE_FIELDS',
    'EXTRACT_MODES',
    'DiligenceResult',
    'EpisodeExtractor',
    'EpisodeField',
    'ErrorKind',
    'ExtractedField',
    'ExtractionFacade',
    'ExtractionRequest',
    'ExtractionResult',
    'MemoField',
    'MemoParseResult',
    'MemoParser',
    'MemoRequest',
    'PageRequest',
    'Strategy',
    'collapse_whitespace',
    'normalize_date',
    'parse_diligence_blob',
    'parse_quick_paste',
    'status_for',
    'truncate_at_ellipsis',
    'validate_locator',
]
