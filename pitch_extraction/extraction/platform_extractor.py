"""Listening-platform links (YouTube, Apple Podcasts, Spotify) for episode pages.

Only links to a single episode count. Show pages, channel pages and
profile links in headers and footers are skipped so the next candidate
can be tried.
"""

import re
from dataclasses import dataclass
from typing import Any, Callable, Iterator, List, Optional
from urllib.parse import parse_qs, urlparse

from .html_processor import HTMLProcessor
from .models import EpisodeField, EpisodePage, Strategy

YOUTUBE_ID_RE = re.compile(r'^[\w-]{6,20}$')
YOUTUBE_PATH_RE = re.compile(r'^/(?:embed|live|shorts|v)/([\w-]+)')
SPOTIFY_PATH_RE = re.compile(r'^/(?:embed(?:-podcast)?/)?episode/([A-Za-z0-9]+)')

LINK_SCOPES = 'article a[href], main a[href], .show-notes a[href], .entry-content a[href]'


def _host(url: str) -> str:
    parsed = urlparse(url.strip())
    if parsed.scheme not in ('http', 'https', ''):
        return ''
    return (parsed.hostname or '').lower()


def _on_domain(host: str, domain: str) -> bool:
    return host == domain or host.endswith('.' + domain)


def youtube_episode_url(url: str) -> Optional[str]:
    """Canonical watch URL for a YouTube video link, embed or short link."""
    host = _host(url)
    parsed = urlparse(url.strip())
    if host == 'youtu.be':
        video_id = parsed.path.strip('/').split('/')[0]
    elif _on_domain(host, 'youtube.com') or _on_domain(host, 'youtube-nocookie.com'):
        if parsed.path.rstrip('/') == '/watch':
            video_id = parse_qs(parsed.query).get('v', [''])[0]
        else:
            match = YOUTUBE_PATH_RE.match(parsed.path)
            video_id = match.group(1) if match else ''
    else:
        return None
    if not YOUTUBE_ID_RE.match(video_id):
        return None
    return f'https://www.youtube.com/watch?v={video_id}'


def apple_podcasts_episode_url(url: str) -> Optional[str]:
    """Apple Podcasts links name an episode with the ``i`` query parameter."""
    host = _host(url)
    if host not in ('podcasts.apple.com', 'embed.podcasts.apple.com', 'itunes.apple.com'):
        return None
    parsed = urlparse(url.strip())
    episode_id = parse_qs(parsed.query).get('i', [''])[0]
    if not episode_id.isdigit() or '/podcast/' not in parsed.path:
        return None
    return f'https://podcasts.apple.com{parsed.path}?i={episode_id}'


def spotify_episode_url(url: str) -> Optional[str]:
    if _host(url) != 'open.spotify.com':
        return None
    match = SPOTIFY_PATH_RE.match(urlparse(url.strip()).path)
    if not match:
        return None
    return f'https://open.spotify.com/episode/{match.group(1)}'


@dataclass(frozen=True)
class Platform:
    """A listening platform and how to recognise one of its episode links."""
    name: str
    episode_url: Callable[[str], Optional[str]]


PLATFORMS = {
    EpisodeField.YOUTUBE_URL: Platform('youtube', youtube_episode_url),
    EpisodeField.APPLE_PODCASTS_URL: Platform('apple_podcasts', apple_podcasts_episode_url),
    EpisodeField.SPOTIFY_URL: Platform('spotify', spotify_episode_url),
}


class PlatformLinkExtractor:
    """Find the episode's link on one listening platform."""

    EPISODE_TYPES = {'Episode', 'PodcastEpisode', 'VideoObject', 'Article', 'WebPage'}

    def __init__(self, html_processor: HTMLProcessor, platform: Platform):
        self.html_processor = html_processor
        self.platform = platform

    def strategies(self) -> List[Strategy[EpisodePage]]:
        return [
            Strategy('platform_link', 1, self.from_links),
            Strategy('embed_iframe', 2, self.from_embeds),
            Strategy('json_ld_same_as', 3, self.from_json_ld),
        ]

    def coerce(self, raw: str) -> Optional[str]:
        return self.platform.episode_url(str(raw))

    def _first_episode_link(self, candidates) -> Optional[str]:
        for candidate in candidates:
            if not isinstance(candidate, str):
                continue
            try:
                if self.platform.episode_url(candidate):
                    return candidate
            except ValueError:
                # urlparse rejects malformed hosts such as "http://["
                continue
        return None

    def from_links(self, page: EpisodePage) -> Optional[str]:
        """Links in the episode body first, then anywhere on the page."""
        links = page.soup.select(LINK_SCOPES) + page.soup.find_all('a', href=True)
        return self._first_episode_link(link['href'] for link in links)

    def from_embeds(self, page: EpisodePage) -> Optional[str]:
        frames = page.soup.find_all('iframe', src=True)
        return self._first_episode_link(frame['src'] for frame in frames)

    def from_json_ld(self, page: EpisodePage) -> Optional[str]:
        def candidates() -> Iterator[Any]:
            for item in self.html_processor.iter_json_ld(page.soup):
                if not self.html_processor.item_types(item) & self.EPISODE_TYPES:
                    continue
                same_as = item.get('sameAs')
                yield from (same_as if isinstance(same_as, list) else [same_as])
                yield item.get('url')
                media = item.get('associatedMedia')
                for entry in (media if isinstance(media, list) else [media]):
                    if isinstance(entry, dict):
                        yield entry.get('embedUrl')
                        yield entry.get('contentUrl')

        return self._first_episode_link(candidates())
