"""Transcript strategies for episode pages."""

from typing import List, Optional

from .html_processor import HTMLProcessor
from .models import EpisodePage, Strategy
from .text_normalizer import collapse_whitespace

MIN_TRANSCRIPT_LENGTH = 100
MIN_PATTERN_LENGTH = 500


class TranscriptExtractor:
    """Extract the episode transcript rendered on the show page."""

    TRANSCRIPT_SELECTORS = [
        '#transcript',
        '.transcript',
        '[id*="transcript"]',
        '[class*="transcript"]',
        'section[aria-label*="transcript" i]',
        'div[data-transcript]',
        '.episode-transcript',
        '.pitch-transcript',
    ]

    TRANSCRIPT_KEYWORDS = ['transcript', 'welcome to the pitch', 'josh muccio', 'today we have']

    def __init__(self, html_processor: HTMLProcessor):
        self.html_processor = html_processor

    def strategies(self) -> List[Strategy[EpisodePage]]:
        return [
            Strategy('transcript_selector', 1, self.from_selectors),
            Strategy('transcript_content_pattern', 2, self.from_content_pattern),
        ]

    @staticmethod
    def coerce(raw: str) -> Optional[str]:
        text = collapse_whitespace(raw)
        return text if len(text) >= MIN_TRANSCRIPT_LENGTH else None

    def from_selectors(self, page: EpisodePage) -> Optional[str]:
        for selector in self.TRANSCRIPT_SELECTORS:
            element = page.soup.select_one(selector)
            text = self.html_processor.element_text(element)
            if len(text) > MIN_TRANSCRIPT_LENGTH:
                return text
        return None

    def from_content_pattern(self, page: EpisodePage) -> Optional[str]:
        """Longest block that reads like a conversation and mentions the show."""
        longest = ""
        for element in page.soup.find_all(['div', 'section', 'article', 'main']):
            text = self.html_processor.element_text(element)
            if len(text) <= MIN_PATTERN_LENGTH or len(text) <= len(longest):
                continue
            lowered = text.lower()
            has_keyword = any(keyword in lowered for keyword in self.TRANSCRIPT_KEYWORDS)
            has_dialogue = text.count(':') > 5
            if has_keyword and has_dialogue:
                longest = text
        return longest or None
