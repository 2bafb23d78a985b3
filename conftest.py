import json

import pytest


EPISODE_URL = "https://www.thepitch.show/episodes/142-sundae/"


def build_page(head: str = "", body: str = "", json_ld=None) -> str:
    """Assemble a minimal episode page."""
    ld_block = ""
    if json_ld is not None:
        ld_block = f'<script type="application/ld+json">{json.dumps(json_ld)}</script>'
    return f"<html><head>{head}{ld_block}</head><body>{body}</body></html>"


@pytest.fixture
def episode_url():
    return EPISODE_URL


@pytest.fixture
def full_episode_page():
    return build_page(
        head=(
            '<title>#142 Sundae | The Pitch</title>'
            '<meta property="og:title" content="Sundae - The Pitch">'
            '<meta property="article:published_time" content="2025-06-18T00:00:00Z">'
        ),
        body=(
            '<nav><a href="/season-1/">Season 1</a></nav>'
            '<article>'
            '<a href="/season-12/">Season 12</a>'
            '<h1>#142 Sundae: Selling Homes As-Is</h1>'
            '<div class="show-notes"><p>Sundae is building a platform... Read more.</p></div>'
            '<a href="https://www.youtube.com/watch?v=dQw4w9WgXcQ&amp;t=30s">Watch on YouTube</a>'
            '<a href="https://podcasts.apple.com/us/podcast/the-pitch/id1008765234?i=1000712345678">Apple Podcasts</a>'
            '<iframe src="https://open.spotify.com/embed/episode/4rOoJ6Egrf8K2IrywzwOMk"></iframe>'
            '</article>'
            '<footer>'
            '<a href="https://www.youtube.com/@thepitchshow">YouTube</a>'
            '<a href="https://open.spotify.com/show/5FQ0Uf2uDcd3OBBkvmH5z1">Spotify</a>'
            '</footer>'
        ),
    )


@pytest.fixture
def sample_memo():
    return (
        "Investment in Acme Robotics\n"
        "Completed on Jun 27, 2025.\n"
        "\n"
        "Investment Amount: $250,000\n"
        "Investing in SAFE (post-money)\n"
        "Round Size: $2,000,000\n"
        "Round: Pre-Seed\n"
        "Conversion Cap: $12,000,000\n"
        "Discount: 20%\n"
        "Post-Money Valuation: $15M\n"
        "Pro-rata rights included? Yes\n"
        "Country of Incorporation: United States\n"
        "Type of Incorporation: Delaware C Corporation\n"
        "Founders: Jane Doe, John Roe\n"
        "Founder Role: Co-Founder\n"
        "Notable Co-Investors: Precursor Ventures, Hustle Fund\n"
        "\n"
        "Reason for Investing\n"
        "Strong team with prior exits.\n"
        "Large market.\n"
        "\n"
        "Description\n"
        "Acme builds warehouse robots.\n"
    )
