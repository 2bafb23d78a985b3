"""Title and show-notes strategies for episode pages."""

from typing import List, Optional

from .html_processor import HTMLProcessor
from .models import EpisodePage, Strategy
from .text_normalizer import clean_text, truncate_at_ellipsis


class MetadataExtractor:
    """Extract episode title and show notes."""

    EPISODE_TYPES = {'Episode', 'PodcastEpisode', 'Article', 'BlogPosting', 'WebPage'}

    SHOW_NOTES_SELECTOR = '.show-notes'

    # Tried in order after the primary container
    ALT_SHOW_NOTES_SELECTORS = [
        '#show-notes',
        '.episode-show-notes',
        '[data-show-notes]',
        '.episode-description',
        '.episode-notes',
        '.episode-content',
        '.entry-content',
        '[itemprop="description"]',
    ]

    def __init__(self, html_processor: HTMLProcessor):
        self.html_processor = html_processor

    # ------------------------------------------------------------------
    # Title
    # ------------------------------------------------------------------

    def title_strategies(self) -> List[Strategy[EpisodePage]]:
        return [
            Strategy('heading_h1', 1, self.title_from_heading),
            Strategy('document_title', 2, self.title_from_document),
            Strategy('json_ld_episode_title', 3, self.title_from_json_ld),
            Strategy('og_title', 4, self.title_from_open_graph),
        ]

    @staticmethod
    def coerce_title(raw: str) -> Optional[str]:
        # Episode numbering such as "#123 " is part of the title
        return clean_text(raw) or None

    def title_from_heading(self, page: EpisodePage) -> Optional[str]:
        h1 = page.soup.find('h1')
        return self.html_processor.element_text(h1) or None

    def title_from_document(self, page: EpisodePage) -> Optional[str]:
        title_tag = page.soup.find('title')
        if title_tag and title_tag.get_text():
            return title_tag.get_text()
        return None

    def title_from_json_ld(self, page: EpisodePage) -> Optional[str]:
        for item in self.html_processor.iter_json_ld(page.soup):
            if not self.html_processor.item_types(item) & self.EPISODE_TYPES:
                continue
            for key in ('name', 'headline'):
                value = item.get(key)
                if isinstance(value, str) and value.strip():
                    return value
        return None

    def title_from_open_graph(self, page: EpisodePage) -> Optional[str]:
        return self.html_processor.meta_content(page.soup, 'meta[property="og:title"]')

    # ------------------------------------------------------------------
    # Show notes
    # ------------------------------------------------------------------

    def show_notes_strategies(self) -> List[Strategy[EpisodePage]]:
        return [
            Strategy('show_notes_container', 1, self.show_notes_from_container),
            Strategy('alternative_container', 2, self.show_notes_from_alternatives),
            Strategy('json_ld_description', 3, self.show_notes_from_json_ld),
        ]

    @staticmethod
    def coerce_show_notes(raw: str) -> Optional[str]:
        """Truncate at the first ellipsis; nothing left is a miss."""
        return truncate_at_ellipsis(clean_text(raw)) or None

    def show_notes_from_container(self, page: EpisodePage) -> Optional[str]:
        element = page.soup.select_one(self.SHOW_NOTES_SELECTOR)
        return self.html_processor.element_text(element) or None

    def show_notes_from_alternatives(self, page: EpisodePage) -> Optional[str]:
        for selector in self.ALT_SHOW_NOTES_SELECTORS:
            for element in page.soup.select(selector):
                text = self.html_processor.element_text(element)
                if text:
                    return text
        return None

    def show_notes_from_json_ld(self, page: EpisodePage) -> Optional[str]:
        for item in self.html_processor.iter_json_ld(page.soup):
            if not self.html_processor.item_types(item) & self.EPISODE_TYPES:
                continue
            description = item.get('description')
            if isinstance(description, str) and description.strip():
                return description
        return None
