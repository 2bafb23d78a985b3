"""Deterministic text transforms shared by the episode and memo engines."""

import html
import re
import unicodedata
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Optional, Union

import dateutil.parser


# Invisible characters that break pattern matching
INVISIBLE_CHARS = [
    '\u200B',  # Zero Width Space
    '\u200C',  # Zero Width Non-Joiner
    '\u200D',  # Zero Width Joiner
    '\u2060',  # Word Joiner
    '\uFEFF',  # Zero Width No-Break Space (BOM)
]

WHITESPACE_RE = re.compile(r'\s+')

# One combined alternation so the earliest marker of any kind wins
ELLIPSIS_RE = re.compile(r'\.\.\.|\u2026|\. \. \.')

ISO_DATE_RE = re.compile(r'^(\d{4})-(\d{2})-(\d{2})(?=$|[T\s])')

# Shapes that carry a day and a four-digit year
DATE_SHAPES = [
    re.compile(r'[A-Za-z]+\.?\s+\d{1,2}(?:st|nd|rd|th)?,?\s+\d{4}'),  # June 18, 2025
    re.compile(r'\d{1,2}(?:st|nd|rd|th)?\s+[A-Za-z]+\.?,?\s+\d{4}'),  # 18 June 2025
    re.compile(r'\d{4}[/-]\d{1,2}[/-]\d{1,2}'),                        # 2025/06/18
    re.compile(r'\d{1,2}[/-]\d{1,2}[/-]\d{4}'),                        # 6/18/2025
]

MONTH_DOT_RE = re.compile(r'\b([A-Za-z]{3,4})\.')

# Base date for dateutil; only used to fill time fields
DATE_DEFAULT = datetime(1900, 1, 1)

AMOUNT_RE = re.compile(
    r'^\s*(?:USD|US\$|\$)?\s*(\d[\d,]*(?:\.\d+)?)'
    r'(?:\s*(thousand|million|billion|mm|bn|k|m|b)(?![a-z]))?',
    re.IGNORECASE
)

AMOUNT_MULTIPLIERS = {
    'k': 1_000,
    'thousand': 1_000,
    'm': 1_000_000,
    'mm': 1_000_000,
    'million': 1_000_000,
    'b': 1_000_000_000,
    'bn': 1_000_000_000,
    'billion': 1_000_000_000,
}


def collapse_whitespace(raw: Optional[str]) -> str:
    """Fold every whitespace run to a single space and trim both ends."""
    if not raw:
        return ""
    return WHITESPACE_RE.sub(' ', raw).strip()


def clean_text(raw: Optional[str]) -> str:
    """Decode HTML entities, drop invisible characters, collapse whitespace."""
    if not raw:
        return ""

    text = html.unescape(raw)
    for char in INVISIBLE_CHARS:
        text = text.replace(char, '')
    text = text.replace('\u00A0', ' ')
    text = unicodedata.normalize('NFKC', text)

    return collapse_whitespace(text)


def truncate_at_ellipsis(raw: Optional[str]) -> str:
    """
    Cut text at the first ellipsis marker.

    Markers are ``...``, the Unicode horizontal ellipsis and ``. . .``.
    Whitespace is collapsed first, so text without a marker comes back
    exactly as ``collapse_whitespace`` would return it.
    """
    text = collapse_whitespace(raw)
    match = ELLIPSIS_RE.search(text)
    if not match:
        return text
    return text[:match.start()].rstrip()


def looks_like_date(text: str) -> bool:
    """Check if string has a date shape with both a day and a year."""
    if not text or len(text) < 8:
        return False
    return any(shape.search(text) for shape in DATE_SHAPES)


def normalize_date(raw: Optional[str]) -> Optional[str]:
    """
    Normalize a date string to ``YYYY-MM-DD``.

    ISO-8601 input keeps its own calendar date (any time part is ignored).
    Human dates are parsed with dateutil. Returns None when the input has
    no recognizable date; never raises.
    """
    if not raw or not isinstance(raw, str):
        return None

    text = collapse_whitespace(raw)

    iso = ISO_DATE_RE.match(text)
    if iso:
        try:
            year, month, day = (int(part) for part in iso.groups())
            return date(year, month, day).isoformat()
        except ValueError:
            return None

    if not looks_like_date(text):
        return None

    # "Jun. 18, 2025" -> "Jun 18, 2025"
    text = MONTH_DOT_RE.sub(r'\1', text)

    try:
        parsed = dateutil.parser.parse(text, default=DATE_DEFAULT)
    except (ValueError, OverflowError, TypeError):
        return None

    return parsed.date().isoformat()


def parse_amount(raw: Optional[str]) -> Optional[Union[int, float]]:
    """
    Parse a currency amount such as ``$250,000`` or ``$1.5M``.

    Returns an int when the amount is whole, a float otherwise, and None
    for anything that is not a positive number.
    """
    if not raw:
        return None

    match = AMOUNT_RE.match(raw)
    if not match:
        return None

    number, suffix = match.groups()
    try:
        amount = Decimal(number.replace(',', ''))
    except InvalidOperation:
        return None

    if suffix:
        amount *= AMOUNT_MULTIPLIERS[suffix.lower()]

    if amount <= 0:
        return None
    if amount == amount.to_integral_value():
        return int(amount)
    return float(amount)


def slugify(name: str) -> str:
    """Build a URL slug from a company name."""
    slug = name.lower()
    slug = re.sub(r'[^a-z0-9\s-]', '', slug)
    slug = re.sub(r'\s+', '-', slug)
    slug = re.sub(r'-+', '-', slug)
    return slug.strip('-')
