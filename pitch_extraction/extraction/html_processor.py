"""HTML parsing and DOM helpers for episode pages."""

import json
import logging
from typing import Any, Dict, Iterator, Optional

from bs4 import BeautifulSoup, Comment
from bs4.element import Tag

from .models import EpisodePage, NON_VISIBLE_TAGS
from .text_normalizer import clean_text

logger = logging.getLogger(__name__)


class HTMLProcessor:
    """Parse page markup and pull text out of DOM elements."""

    parser = 'html.parser'

    def parse(self, markup: Optional[str], url: str) -> Optional[EpisodePage]:
        """
        Build an EpisodePage from raw markup.

        Returns None when the markup is blank or the parser rejects it.
        """
        if not markup or not markup.strip():
            return None

        try:
            soup = BeautifulSoup(markup, self.parser)
        except Exception as e:
            logger.warning(f"Markup could not be parsed for {url[:80]}: {e}")
            return None

        if soup.find() is None:
            # Plain text with no elements at all is not a page
            return None

        return EpisodePage(url=url, soup=soup)

    def iter_json_ld(self, soup: BeautifulSoup) -> Iterator[Dict[str, Any]]:
        """Yield every object found in JSON-LD blocks, flattening arrays and @graph."""
        scripts = soup.find_all('script', type='application/ld+json')

        for script in scripts:
            raw = script.string or script.get_text()
            if not raw or not raw.strip():
                continue

            try:
                data = json.loads(raw)
            except ValueError:
                logger.debug("Skipping malformed JSON-LD block")
                continue

            items = data if isinstance(data, list) else [data]
            for item in items:
                if not isinstance(item, dict):
                    continue
                graph = item.get('@graph')
                if isinstance(graph, list):
                    for node in graph:
                        if isinstance(node, dict):
                            yield node
                else:
                    yield item

    @staticmethod
    def item_types(item: Dict[str, Any]) -> set:
        """Return the schema.org types of a JSON-LD object as a set."""
        item_type = item.get('@type', '')
        if isinstance(item_type, list):
            return {str(t) for t in item_type}
        return {str(item_type)}

    def element_text(self, element: Optional[Tag]) -> str:
        """Visible text of an element with whitespace collapsed."""
        if element is None:
            return ""

        chunks = [
            text for text in element.find_all(string=True)
            if not isinstance(text, Comment) and text.parent.name not in NON_VISIBLE_TAGS
        ]
        return clean_text(' '.join(chunks))

    def meta_content(self, soup: BeautifulSoup, selector: str) -> Optional[str]:
        """Content attribute of the first element matching a selector."""
        element = soup.select_one(selector)
        if element is None:
            return None
        content = element.get('content')
        if content and content.strip():
            return content.strip()
        return None
