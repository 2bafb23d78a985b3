"""Episode number strategies for episode pages."""

import re
from typing import List, Optional
from urllib.parse import urlparse

from .html_processor import HTMLProcessor
from .models import EpisodePage, Strategy

MIN_EPISODE = 1
MAX_EPISODE = 9999

# "#142 Sundae", "Episode 142: Sundae", "Ep. 142"
TITLE_NUMBER_RE = re.compile(r'(?:#|\bEp(?:isode)?\.?\s*#?)\s*(\d+)\b', re.IGNORECASE)
EPISODE_TEXT_RE = re.compile(r'\bEpisode\s*#?\s*(\d+)\b', re.IGNORECASE)

# "/episodes/142-sundae/", "/142-sundae", "/episode-3/"; never a season segment
EPISODE_PATH_RE = re.compile(r'(?<!season)(?<!seasons)/(?:episodes?[-_/])?(\d+)(?=-[a-z]|/?$)', re.IGNORECASE)


class EpisodeNumberExtractor:
    """Extract the running episode number."""

    EPISODE_TYPES = {'Episode', 'PodcastEpisode', 'RadioEpisode', 'TVEpisode'}

    def __init__(self, html_processor: HTMLProcessor):
        self.html_processor = html_processor

    def strategies(self) -> List[Strategy[EpisodePage]]:
        return [
            Strategy('json_ld_episode_number', 1, self.from_json_ld),
            Strategy('title_number', 2, self.from_title),
            Strategy('page_url', 3, self.from_page_url),
            Strategy('text_mention', 4, self.from_text_mention),
        ]

    @staticmethod
    def coerce(raw: str) -> Optional[int]:
        text = str(raw).strip().lstrip('#')
        if not text.isdigit():
            return None
        number = int(text)
        if MIN_EPISODE <= number <= MAX_EPISODE:
            return number
        return None

    def from_json_ld(self, page: EpisodePage) -> Optional[str]:
        for item in self.html_processor.iter_json_ld(page.soup):
            if not self.html_processor.item_types(item) & self.EPISODE_TYPES:
                continue
            number = item.get('episodeNumber')
            if number is not None and str(number).strip():
                return str(number)
        return None

    def from_title(self, page: EpisodePage) -> Optional[str]:
        """Numbering in the heading, document title or og:title, in that order."""
        h1 = page.soup.find('h1')
        title_tag = page.soup.find('title')
        candidates = [
            self.html_processor.element_text(h1),
            title_tag.get_text() if title_tag else '',
            self.html_processor.meta_content(page.soup, 'meta[property="og:title"]') or '',
        ]
        for text in candidates:
            match = TITLE_NUMBER_RE.search(text)
            if match:
                return match.group(1)
        return None

    def from_page_url(self, page: EpisodePage) -> Optional[str]:
        match = EPISODE_PATH_RE.search(urlparse(page.url).path)
        return match.group(1) if match else None

    def from_text_mention(self, page: EpisodePage) -> Optional[str]:
        match = EPISODE_TEXT_RE.search(page.body_text())
        return match.group(1) if match else None
