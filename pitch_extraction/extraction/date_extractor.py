"""Publish date strategies for episode pages."""

import re
from typing import List, Optional

from .html_processor import HTMLProcessor
from .models import EpisodePage, Strategy
from .text_normalizer import looks_like_date, normalize_date


class DateExtractor:
    """Extract and normalize the publish date of an episode page."""

    # schema.org types that carry datePublished for an episode
    JSON_LD_TYPES = {'Article', 'BlogPosting', 'NewsArticle', 'Episode', 'PodcastEpisode', 'WebPage'}

    META_SELECTORS = [
        'meta[property="article:published_time"]',
        'meta[name="article:published_time"]',
        'meta[property="datePublished"]',
        'meta[name="datePublished"]',
        'meta[property="og:article:published_time"]',
        'meta[name="publishdate"]',
        'meta[name="publish_date"]',
        'meta[property="article:published"]',
        'meta[name="date"]',
    ]

    TEXT_PATTERNS = [
        re.compile(r'([A-Za-z]+\.?\s+\d{1,2},\s+\d{4})'),  # "June 18, 2025" or "Jun. 18, 2025"
        re.compile(r'(\d{1,2}/\d{1,2}/\d{4})'),            # "6/18/2025"
        re.compile(r'(\d{4}-\d{2}-\d{2})'),                # "2025-06-18"
        re.compile(r'(\d{1,2}-\d{1,2}-\d{4})'),            # "18-06-2025"
    ]

    def __init__(self, html_processor: HTMLProcessor):
        self.html_processor = html_processor

    def strategies(self) -> List[Strategy[EpisodePage]]:
        return [
            Strategy('json_ld_date_published', 1, self.from_json_ld),
            Strategy('meta_tag', 2, self.from_meta_tags),
            Strategy('time_element', 3, self.from_time_element),
            Strategy('text_pattern', 4, self.from_text_patterns),
        ]

    @staticmethod
    def coerce(raw: str) -> Optional[str]:
        return normalize_date(raw)

    def from_json_ld(self, page: EpisodePage) -> Optional[str]:
        for item in self.html_processor.iter_json_ld(page.soup):
            if not self.html_processor.item_types(item) & self.JSON_LD_TYPES:
                continue
            date_value = item.get('datePublished')
            if date_value:
                return str(date_value)
        return None

    def from_meta_tags(self, page: EpisodePage) -> Optional[str]:
        for selector in self.META_SELECTORS:
            content = self.html_processor.meta_content(page.soup, selector)
            if content:
                return content
        return None

    def from_time_element(self, page: EpisodePage) -> Optional[str]:
        element = page.soup.select_one('time[datetime]')
        if element is None:
            return None
        return element.get('datetime') or None

    def from_text_patterns(self, page: EpisodePage) -> Optional[str]:
        """Scan visible text; the first date-shaped match of the earliest pattern wins."""
        text_content = page.body_text()
        for pattern in self.TEXT_PATTERNS:
            for match in pattern.finditer(text_content):
                candidate = match.group(1)
                if looks_like_date(candidate) and normalize_date(candidate):
                    return candidate
        return None
