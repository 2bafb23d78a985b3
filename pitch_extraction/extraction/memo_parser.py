"""QuickPaste parser - turn a pasted investment memo into form fields."""

import logging
import re
from typing import Any, Callable, Dict, List, Optional

import pycountry

from ..utils.logging_config import log_operation
from .models import MemoField, MemoParseResult
from .text_normalizer import collapse_whitespace, normalize_date, parse_amount, slugify

logger = logging.getLogger(__name__)


# Label cues, matched at the start of a line (optionally after a bullet)
LABELS: Dict[MemoField, str] = {
    MemoField.INVESTMENT_DATE: r'Investment\s+Date|Date\s+of\s+Investment|Closing\s+Date',
    MemoField.INVESTMENT_AMOUNT: r'Investment\s+Amount|Amount\s+Invested|Check\s+Size',
    MemoField.INSTRUMENT: r'Investing\s+in|(?:Investment\s+)?Instrument(?:\s+Type)?',
    MemoField.ROUND_SIZE_USD: r'Round\s+Size',
    MemoField.STAGE_AT_INVESTMENT: r'(?:Investment\s+)?Round(?!\s*Size)|Stage(?:\s+at\s+Investment)?',
    MemoField.CONVERSION_CAP_USD: r'(?:Conversion|(?:Post[-\s]?Money\s+)?Valuation)\s+Cap',
    MemoField.DISCOUNT_PERCENT: r'Discount(?:\s+Rate)?',
    MemoField.POST_MONEY_VALUATION: r'Post[-\s]?Money(?:\s+Valuation)?(?!\s*Cap)',
    MemoField.HAS_PRO_RATA_RIGHTS: r'Pro[-\s]?rata(?:\s+rights)?',
    MemoField.COUNTRY_OF_INCORP: r'Country\s+of\s+Incorporation|Incorporation\s+Country',
    MemoField.INCORPORATION_TYPE: r'Type\s+of\s+Incorporation|Incorporation\s+Type|Entity\s+Type',
    MemoField.REASON_FOR_INVESTING: r'Reason\s+for\s+Investing',
    MemoField.CO_INVESTORS: r'(?:Notable\s+)?Co[-\s]?Investors',
    MemoField.FOUNDER_NAME: r'Founders?(?:\s+Names?)?(?!\s*Role)',
    MemoField.FOUNDER_ROLE: r'Founder\s+Role',
    MemoField.DESCRIPTION_RAW: r'(?:Company\s+)?Description',
}

COMPANY_LABEL = r'Company\s+Name'
COMPANY_TITLE_RE = re.compile(r'Investment\s+in\s+(.+)', re.IGNORECASE)
COMPLETED_ON_RE = re.compile(r'Completed\s+on\s+(.+?)\.?\s*$', re.IGNORECASE | re.MULTILINE)

LINE_START = r'^[ \t]*(?:[-*\u2022][ \t]*)?'

# A label followed by a separator, or a label alone on its line
LABEL_END = r'(?:[ \t]*[?:\-\u2013\u2014]|[ \t]*$)'

# Fields that keep whatever text follows their label; without a coercer to
# reject prose, their label must end in a separator or stand alone
FREE_TEXT_FIELDS = {
    MemoField.REASON_FOR_INVESTING,
    MemoField.CO_INVESTORS,
    MemoField.FOUNDER_NAME,
    MemoField.DESCRIPTION_RAW,
}

# A known label line ends a multi-line block and is never taken as a value
BLOCK_END_RE = re.compile(
    LINE_START + r'(?:' + '|'.join(list(LABELS.values()) + [COMPANY_LABEL, r'Company\s+Details']) + r')' + LABEL_END,
    re.IGNORECASE | re.MULTILINE
)

INSTRUMENTS = [
    # (test, value) - checked in order
    (lambda v: 'safe' in v and 'post' in v, 'safe_post'),
    (lambda v: 'safe' in v and 'pre' in v, 'safe_pre'),
    (lambda v: 'convertible' in v or re.search(r'\bnote\b', v) is not None, 'convertible_note'),
    (lambda v: 'equity' in v or 'priced' in v or 'preferred' in v, 'equity'),
]

INCORPORATION_TYPES = [
    (re.compile(r'\bc[\s-]*corp(?:oration)?\b', re.I), 'c_corp'),
    (re.compile(r'\bs[\s-]*corp(?:oration)?\b', re.I), 's_corp'),
    (re.compile(r'\bllc\b', re.I), 'llc'),
    (re.compile(r'benefit|\bb[\s-]*corp|\bpbc\b', re.I), 'bcorp'),
    (re.compile(r'\bgmbh\b', re.I), 'gmbh'),
    (re.compile(r'\bltd\b|limited', re.I), 'ltd'),
    (re.compile(r'\bplc\b', re.I), 'plc'),
]

STAGES = [
    (re.compile(r'pre[\s_-]*seed', re.I), 'pre_seed'),
    (re.compile(r'\bseed\b', re.I), 'seed'),
    (re.compile(r'series[\s_-]*a\b', re.I), 'series_a'),
    (re.compile(r'series[\s_-]*b\b', re.I), 'series_b'),
]

FOUNDER_ROLES = {
    'founder': 'founder',
    'solofounder': 'founder',
    'solefounder': 'founder',
    'cofounder': 'cofounder',
}

COUNTRY_ALIASES = {
    'uk': 'GB',
    'england': 'GB',
    'great britain': 'GB',
    'usa': 'US',
    'u.s.': 'US',
    'u.s.a.': 'US',
    'united states of america': 'US',
}

BOOL_CUE_RE = re.compile(r'\b(not\s+included|yes|true|included|no|false|none)\b', re.IGNORECASE)

EMPTY_PLACEHOLDERS = {'', '-', '\u2014', '\u2013', 'none', 'n/a', 'na', 'tbd'}


class MemoParser:
    """Independent pattern rule per memo field; partial success is normal."""

    def rules(self) -> Dict[MemoField, Callable[[str], Any]]:
        return {
            MemoField.INVESTMENT_DATE: self.parse_investment_date,
            MemoField.INVESTMENT_AMOUNT: lambda text: self.labeled(text, MemoField.INVESTMENT_AMOUNT, parse_amount),
            MemoField.INSTRUMENT: lambda text: self.labeled(text, MemoField.INSTRUMENT, self.coerce_instrument),
            MemoField.ROUND_SIZE_USD: lambda text: self.labeled(text, MemoField.ROUND_SIZE_USD, parse_amount),
            MemoField.STAGE_AT_INVESTMENT: lambda text: self.labeled(text, MemoField.STAGE_AT_INVESTMENT, self.coerce_stage),
            MemoField.CONVERSION_CAP_USD: lambda text: self.labeled(text, MemoField.CONVERSION_CAP_USD, parse_amount),
            MemoField.DISCOUNT_PERCENT: lambda text: self.labeled(text, MemoField.DISCOUNT_PERCENT, self.coerce_percent),
            MemoField.POST_MONEY_VALUATION: lambda text: self.labeled(text, MemoField.POST_MONEY_VALUATION, parse_amount),
            MemoField.HAS_PRO_RATA_RIGHTS: lambda text: self.labeled(text, MemoField.HAS_PRO_RATA_RIGHTS, self.coerce_bool),
            MemoField.COUNTRY_OF_INCORP: lambda text: self.labeled(text, MemoField.COUNTRY_OF_INCORP, self.coerce_country),
            MemoField.INCORPORATION_TYPE: lambda text: self.labeled(text, MemoField.INCORPORATION_TYPE, self.coerce_incorporation),
            MemoField.REASON_FOR_INVESTING: lambda text: self.labeled_block(text, MemoField.REASON_FOR_INVESTING),
            MemoField.CO_INVESTORS: self.parse_co_investors,
            MemoField.FOUNDER_NAME: lambda text: self.labeled(text, MemoField.FOUNDER_NAME, self.coerce_first_founder),
            MemoField.FOUNDER_ROLE: lambda text: self.labeled(text, MemoField.FOUNDER_ROLE, self.coerce_founder_role),
            MemoField.DESCRIPTION_RAW: lambda text: self.labeled_block(text, MemoField.DESCRIPTION_RAW),
        }

    def parse(self, raw: Optional[str]) -> MemoParseResult:
        """
        Parse a pasted memo.

        Every field ends up in exactly one of ``successfully_parsed`` and
        ``failed_to_parse``; malformed input never raises.
        """
        text = raw.replace('\r\n', '\n').replace('\r', '\n') if isinstance(raw, str) else ''
        logger.debug(f"parse_memo: starting with text length {len(text)}")

        result = MemoParseResult()

        name = self._guarded(MemoField.NAME, self.parse_company_name, text)
        slug = slugify(name) if name else None
        if not slug:
            name = None
        result.record(MemoField.NAME, name)
        result.record(MemoField.SLUG, slug or None)

        for field_id, rule in self.rules().items():
            result.record(field_id, self._guarded(field_id, rule, text))

        log_operation(
            logger, 'parse_memo', 'completed',
            parsed=len(result.successfully_parsed),
            failed=len(result.failed_to_parse)
        )
        return result

    def _guarded(self, field_id: MemoField, rule: Callable[[str], Any], text: str) -> Any:
        try:
            value = rule(text)
        except Exception as e:
            logger.warning(f"parse_memo: rule for {field_id.value} raised {type(e).__name__}: {e}")
            return None
        logger.debug(f"parse_memo: {field_id.value} -> {value!r}")
        return value

    # ------------------------------------------------------------------
    # Label matching
    # ------------------------------------------------------------------

    @staticmethod
    def _label_re(label: str, strict: bool = False) -> re.Pattern:
        tail = LABEL_END if strict else r'\b[ \t]*[:\-\u2013\u2014]?'
        return re.compile(
            LINE_START + r'(?:' + label + r')' + tail + r'[ \t]*(.*)$',
            re.IGNORECASE | re.MULTILINE
        )

    def _field_re(self, field_id: MemoField) -> re.Pattern:
        return self._label_re(LABELS[field_id], strict=field_id in FREE_TEXT_FIELDS)

    @staticmethod
    def _value_after(text: str, match: re.Match) -> str:
        """Same-line value, or the next non-empty line when the label stands alone."""
        value = match.group(1).strip()
        if value:
            return value
        for line in text[match.end():].split('\n'):
            if not line.strip():
                continue
            # The next label's line belongs to that label
            if BLOCK_END_RE.match(line):
                return ''
            return line.strip()
        return ''

    def labeled(self, text: str, field_id: MemoField, coerce: Callable[[str], Any]) -> Any:
        """First labeled value for the field that survives coercion."""
        for match in self._field_re(field_id).finditer(text):
            value = coerce(self._value_after(text, match))
            if value is not None:
                return value
        return None

    def _block_lines(self, text: str, match: re.Match) -> List[str]:
        """Lines from a label up to a blank line or the next known label."""
        lines = []
        first = match.group(1).strip()
        if first:
            lines.append(first)

        rest = text[match.end():].split('\n')[1:]
        for line in rest:
            if not line.strip():
                if lines:
                    break
                continue
            if BLOCK_END_RE.match(line):
                break
            lines.append(line.strip())
        return lines

    def labeled_block(self, text: str, field_id: MemoField) -> Optional[str]:
        match = self._field_re(field_id).search(text)
        if not match:
            return None
        block = '\n'.join(self._block_lines(text, match)).strip()
        return block or None

    # ------------------------------------------------------------------
    # Field rules
    # ------------------------------------------------------------------

    def parse_company_name(self, text: str) -> Optional[str]:
        """Memo title "Investment in <Company>", else a "Company Name" label."""
        match = COMPANY_TITLE_RE.search(text)
        if match:
            name = match.group(1).strip().rstrip('.,;:')
            if name:
                return name
        for match in self._label_re(COMPANY_LABEL, strict=True).finditer(text):
            name = self._value_after(text, match).rstrip('.,;:')
            if name:
                return name
        return None

    def parse_investment_date(self, text: str) -> Optional[str]:
        for match in COMPLETED_ON_RE.finditer(text):
            normalized = normalize_date(match.group(1))
            if normalized:
                return normalized
        return self.labeled(text, MemoField.INVESTMENT_DATE, lambda v: normalize_date(v.rstrip('.')))

    def parse_co_investors(self, text: str) -> Optional[List[str]]:
        match = self._field_re(MemoField.CO_INVESTORS).search(text)
        if not match:
            return None
        entries = []
        for line in self._block_lines(text, match):
            for entry in line.split(','):
                entry = collapse_whitespace(entry).strip(' .;')
                if entry.lower() not in EMPTY_PLACEHOLDERS:
                    entries.append(entry)
        return entries or None

    # ------------------------------------------------------------------
    # Coercion
    # ------------------------------------------------------------------

    @staticmethod
    def coerce_instrument(value: str) -> Optional[str]:
        lowered = value.lower()
        for test, instrument in INSTRUMENTS:
            if test(lowered):
                return instrument
        return None

    @staticmethod
    def coerce_stage(value: str) -> Optional[str]:
        for pattern, stage in STAGES:
            if pattern.search(value):
                return stage
        return None

    @staticmethod
    def coerce_incorporation(value: str) -> Optional[str]:
        for pattern, incorporation_type in INCORPORATION_TYPES:
            if pattern.search(value):
                return incorporation_type
        return None

    @staticmethod
    def coerce_percent(value: str) -> Optional[float]:
        match = re.match(r'(\d+(?:\.\d+)?)\s*%?', value)
        if not match:
            return None
        percent = float(match.group(1))
        if 0 < percent <= 100:
            return int(percent) if percent.is_integer() else percent
        return None

    @staticmethod
    def coerce_bool(value: str) -> Optional[bool]:
        """Explicit yes/no only; the first answer word wins."""
        match = BOOL_CUE_RE.search(value)
        if not match:
            return None
        return match.group(1).lower() in ('yes', 'true', 'included')

    @staticmethod
    def coerce_country(value: str) -> Optional[str]:
        name = value.strip().rstrip('.,;')
        if not name:
            return None
        alias = COUNTRY_ALIASES.get(name.lower())
        if alias:
            return alias
        try:
            return pycountry.countries.lookup(name).alpha_2
        except LookupError:
            return None

    @staticmethod
    def coerce_first_founder(value: str) -> Optional[str]:
        for founder in re.split(r',|&|\band\b', value):
            founder = collapse_whitespace(founder)
            if founder and founder.lower() not in EMPTY_PLACEHOLDERS:
                return founder
        return None

    @staticmethod
    def coerce_founder_role(value: str) -> Optional[str]:
        key = re.sub(r'[\s_-]+', '', value.lower())
        return FOUNDER_ROLES.get(key)


def parse_quick_paste(raw: Optional[str]) -> MemoParseResult:
    """Parse a pasted memo with a fresh parser."""
    return MemoParser().parse(raw)
