"""Founder diligence parser - company and founder details from a pasted diligence page."""

import logging
import re
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from .text_normalizer import collapse_whitespace

logger = logging.getLogger(__name__)

LEGAL_NAME_RE = re.compile(r'Company Legal Name\s+([^\n]*)\n', re.IGNORECASE)
HQ_LOCATION_RE = re.compile(r'Company headquarters location\s+([^\n]*)\n', re.IGNORECASE)

# Founder blocks come as "Current Founder <N>: ..."
FOUNDER_BLOCK_RE = re.compile(r'Current Founder\s+\d+:[\s\S]+?(?=Current Founder|\nLog in|$)')

FIRST_NAME_RE = re.compile(r'First name\s+([^\n]+)', re.IGNORECASE)
LAST_NAME_RE = re.compile(r'Last name\s+([^\n]+)', re.IGNORECASE)
ROLE_RE = re.compile(r'Role\s+([^\n]+)', re.IGNORECASE)

# "1401 21ST STE R SACRAMENTO, CA 95811"
US_ADDRESS_RE = re.compile(r'^(.+?)\s+([A-Z ]+),\s*([A-Z]{2})\s+(\d{5})(?:\s+([A-Z]{2}))?$', re.IGNORECASE)


@dataclass
class FounderRecord:
    first_name: str
    last_name: str
    title: str
    role: str


@dataclass
class DiligenceResult:
    """Fields recovered from a diligence blob; absent fields stay None."""
    legal_name: Optional[str] = None
    hq_address_line_1: Optional[str] = None
    hq_city: Optional[str] = None
    hq_state: Optional[str] = None
    hq_zip_code: Optional[str] = None
    hq_country: Optional[str] = None
    founders: List[FounderRecord] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        return {key: value for key, value in data.items() if value not in (None, [])}


def _title_case(text: str) -> str:
    return re.sub(r'\b\w', lambda m: m.group(0).upper(), text.lower())


def _parse_hq(hq: str, result: DiligenceResult) -> None:
    line = re.sub(r'\s{2,}', ' ', hq.replace('\u00A0', ' '))
    line = re.sub(r',\s*([A-Z]{2})\s+', r', \1 ', line).strip()

    match = US_ADDRESS_RE.match(line)
    if match:
        result.hq_address_line_1 = match.group(1)
        result.hq_city = _title_case(match.group(2).strip())
        result.hq_state = match.group(3).upper()
        result.hq_zip_code = match.group(4)
        result.hq_country = 'US'
    else:
        # Not a US street address: keep the whole line
        result.hq_address_line_1 = hq


def _parse_founder(block: str) -> Optional[Dict[str, str]]:
    first = FIRST_NAME_RE.search(block)
    last = LAST_NAME_RE.search(block)
    role = ROLE_RE.search(block)

    if not first and not last:
        return None

    return {
        'first_name': first.group(1).strip() if first else '',
        'last_name': last.group(1).strip() if last else '',
        'title': role.group(1).strip() if role else '',
    }


def parse_diligence_blob(text: Optional[str]) -> DiligenceResult:
    """
    Parse a founder diligence page.

    Founder role is ``founder`` for a single founder and ``cofounder`` when
    several founder blocks are present. Never raises on malformed input.
    """
    result = DiligenceResult()
    if not isinstance(text, str) or not text.strip():
        return result

    text = text.replace('\r\n', '\n')

    legal = LEGAL_NAME_RE.search(text)
    if legal and legal.group(1).strip():
        result.legal_name = collapse_whitespace(legal.group(1))

    hq = HQ_LOCATION_RE.search(text)
    if hq and hq.group(1).strip():
        _parse_hq(hq.group(1).strip(), result)

    founders = [f for f in (_parse_founder(block) for block in FOUNDER_BLOCK_RE.findall(text)) if f]
    role = 'cofounder' if len(founders) > 1 else 'founder'
    result.founders = [FounderRecord(role=role, **founder) for founder in founders]

    logger.debug(f"parse_diligence: legal_name={result.legal_name!r} founders={len(result.founders)}")
    return result
