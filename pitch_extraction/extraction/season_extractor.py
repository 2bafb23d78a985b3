"""Season number strategies for episode pages."""

import re
from typing import List, Optional
from urllib.parse import urlparse

from .models import EpisodePage, Strategy

MIN_SEASON = 1
MAX_SEASON = 50

# "/season-5", "/seasons/5", "/season_5"; "/season-finale" is not a season
SEASON_PATH_RE = re.compile(r'/seasons?(?:[-_/]|(?=\d))(\d+)(?=$|[/?#\-_])', re.IGNORECASE)
SEASON_TEXT_RE = re.compile(r'\bseason\s*#?\s*(\d+)\b', re.IGNORECASE)

LINK_SCOPES = (
    '.breadcrumb a[href], .breadcrumbs a[href], [aria-label="breadcrumb"] a[href], '
    'article a[href], main a[href]'
)


class SeasonExtractor:
    """Extract the season number an episode belongs to."""

    def strategies(self) -> List[Strategy[EpisodePage]]:
        return [
            Strategy('season_link', 1, self.from_season_link),
            Strategy('page_url', 2, self.from_page_url),
            Strategy('text_mention', 3, self.from_text_mention),
        ]

    @staticmethod
    def coerce(raw: str) -> Optional[int]:
        """Accept whole numbers between 1 and 50 only."""
        text = str(raw).strip()
        if not text.isdigit():
            return None
        season = int(text)
        if MIN_SEASON <= season <= MAX_SEASON:
            return season
        return None

    def from_season_link(self, page: EpisodePage) -> Optional[str]:
        """First numbered season link, preferring breadcrumbs and the episode body over site navigation."""
        links = page.soup.select(LINK_SCOPES) + page.soup.find_all('a', href=True)
        for link in links:
            path = urlparse(link['href']).path
            match = SEASON_PATH_RE.search(path)
            if match:
                return match.group(1)
        return None

    def from_page_url(self, page: EpisodePage) -> Optional[str]:
        match = SEASON_PATH_RE.search(urlparse(page.url).path)
        return match.group(1) if match else None

    def from_text_mention(self, page: EpisodePage) -> Optional[str]:
        match = SEASON_TEXT_RE.search(page.body_text())
        return match.group(1) if match else None
