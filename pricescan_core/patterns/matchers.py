"""
Text Pattern Matchers - heuristics over raw text

Each matcher is a pure function returning zero or more PatternMatch
candidates with a fixed confidence per recognized shape:

    split components   "449€" + "00"            0.8 - 0.95
    contextual phrase  "from $20", "under €50"  0.88 - 0.9
    large numbers      "$1,234,567.89"          0.8 - 0.9
    standard format    "$19.99"                 0.85
    space variations   "19,99 €", "€ 19"        0.75 - 0.85
    locale pattern     settings-driven regex    0.86 - 0.9

select_best_pattern() runs them in that priority order and keeps the
most confident candidate.
"""

import math
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from ..constants import MATCHER_SYMBOLS
from ..locale_format import detect_format_from_text
from ..diagnostics import get_logger, sample
from ..models import PriceMatch, PriceSettings, is_valid_amount
from .builder import PatternCache, find_prices, normalize_amount, resolve_separator_styles

logger = get_logger(__name__)

SYM = MATCHER_SYMBOLS

SPACE_BEFORE_CURRENCY = re.compile(rf"(\d+(?:[.,]\d{{2,3}})?)\s+([{SYM}])")
NO_SPACE_AFTER_NUMBER = re.compile(r"(\d+(?:[.,]\d{2,3})?)(€|£|¥|\$)")
CURRENCY_THEN_NUMBER = re.compile(rf"([{SYM}])\s*(\d+(?:[.,]\d{{2,3}})?)")

FROM_PHRASE = re.compile(rf"from\s+([{SYM}])\s*(\d+(?:\.\d{{2}})?)", re.IGNORECASE)
UNDER_PHRASE = re.compile(rf"under\s+([{SYM}])\s*(\d+(?:\.\d{{2}})?)", re.IGNORECASE)
STARTING_AT_PHRASE = re.compile(rf"starting\s+at\s+([{SYM}])\s*(\d+(?:\.\d{{2}})?)", re.IGNORECASE)

COMMA_THOUSANDS = re.compile(rf"([{SYM}])(\d{{1,3}}(?:,\d{{3}})+(?:\.\d{{2}})?)")
DOT_THOUSANDS = re.compile(rf"([{SYM}])(\d{{1,3}}(?:\.\d{{3}})+)")
SPACE_THOUSANDS = re.compile(rf"([{SYM}])(\d{{1,3}}(?:\s\d{{3}})+)")

STANDARD_FORMAT = re.compile(rf"([{SYM}])(\d+(?:\.\d{{2}})?)")

INLINE_SPLIT = re.compile(r"(\d+€)\s+(\d{2})")

AMOUNT_WITH_SYMBOL = re.compile(r"(\d+)(€|£|¥|\$)")
CENTS = re.compile(r"^(\d{2})$")
LONE_SYMBOL = re.compile(rf"^([{SYM}])$")
PLAIN_AMOUNT = re.compile(r"^(\d+(?:\.\d{2})?)$")
LONE_CODE = re.compile(r"^(USD|EUR|GBP|JPY)$", re.IGNORECASE)
DIGITS = re.compile(r"^\d+$")


@dataclass
class PatternMatch:
    """Candidate produced by a text matcher"""
    value: str
    currency: str
    confidence: float
    pattern: str
    family: str
    original: str
    context: Optional[str] = None
    position: int = 0
    parts: Optional[List[str]] = None
    reconstructed: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_price_match(self, pass_name: Optional[str] = None, **metadata: Any) -> Optional[PriceMatch]:
        meta: Dict[str, Any] = {"pattern": self.pattern, "source": "text-pattern"}
        if self.context:
            meta["context"] = self.context
        if self.parts:
            meta["parts"] = list(self.parts)
            meta["source"] = "split-pattern"
        if pass_name:
            meta["pass"] = pass_name
        meta.update(self.extra)
        meta.update(metadata)
        return PriceMatch.build(
            text=self.original or f"{self.currency}{self.value}",
            value=self.value,
            currency=self.currency,
            confidence=self.confidence,
            strategy=self.family,
            metadata=meta,
        )


def _normalize_decimal(value: str) -> str:
    return value.replace(",", ".", 1)


def match_space_variations(text) -> List[PatternMatch]:
    """Symbol and amount with or without a separating space, either order."""
    if not text or not isinstance(text, str):
        return []

    matches: List[PatternMatch] = []
    seen = set()

    for m in SPACE_BEFORE_CURRENCY.finditer(text):
        matches.append(PatternMatch(
            value=_normalize_decimal(m.group(1)),
            currency=m.group(2),
            confidence=0.85,
            pattern="space-before-currency",
            family="space-variation",
            original=m.group(0),
            position=m.start(),
        ))
        seen.add(m.group(0))

    for m in NO_SPACE_AFTER_NUMBER.finditer(text):
        if m.group(0) in seen:
            continue
        matches.append(PatternMatch(
            value=_normalize_decimal(m.group(1)),
            currency=m.group(2),
            confidence=0.8,
            pattern="no-space-after-currency",
            family="space-variation",
            original=m.group(0),
            position=m.start(),
        ))
        seen.add(m.group(0))

    for m in CURRENCY_THEN_NUMBER.finditer(text):
        if m.group(0) in seen:
            continue
        has_space = bool(re.search(r"\s", m.group(0)))
        matches.append(PatternMatch(
            value=_normalize_decimal(m.group(2)),
            currency=m.group(1),
            confidence=0.85 if has_space else 0.75,
            pattern="space-after-currency" if has_space else "no-space-after-currency",
            family="space-variation",
            original=m.group(0),
            position=m.start(),
        ))
        seen.add(m.group(0))

    return matches


def _split_amount_then_cents(parts: List[str]) -> Optional[PatternMatch]:
    first, second = parts
    amount = AMOUNT_WITH_SYMBOL.search(first)
    cents = CENTS.match(second)
    if not (amount and cents):
        return None
    reconstructed = f"{first} {second}"
    return PatternMatch(
        value=f"{amount.group(1)}.{cents.group(1)}",
        currency=amount.group(2),
        confidence=0.95,
        pattern="amount-symbol-cents-split",
        family="split",
        original=reconstructed,
        parts=list(parts),
        reconstructed=reconstructed,
    )


def _split_symbol_then_amount(parts: List[str]) -> Optional[PatternMatch]:
    symbol = LONE_SYMBOL.match(parts[0])
    if not symbol:
        return None
    amount = PLAIN_AMOUNT.match("".join(parts[1:]))
    if not amount:
        return None
    reconstructed = "".join(parts)
    return PatternMatch(
        value=amount.group(1),
        currency=symbol.group(1),
        confidence=0.8,
        pattern="multi-part-split",
        family="split",
        original=reconstructed,
        parts=list(parts),
        reconstructed=reconstructed,
    )


def _split_code_then_amount(parts: List[str]) -> Optional[PatternMatch]:
    first, second = parts
    code = LONE_CODE.match(first)
    amount = PLAIN_AMOUNT.match(second)
    if not (code and amount):
        return None
    reconstructed = f"{first} {second}"
    return PatternMatch(
        value=amount.group(1),
        currency=code.group(1).upper(),
        confidence=0.85,
        pattern="currency-code-split",
        family="split",
        original=reconstructed,
        parts=list(parts),
        reconstructed=reconstructed,
    )


def _split_amount_symbol_cents(parts: List[str]) -> Optional[PatternMatch]:
    first, second, third = parts
    if not (DIGITS.match(first) and LONE_SYMBOL.match(second) and CENTS.match(third)):
        return None
    reconstructed = f"{first}{second} {third}"
    return PatternMatch(
        value=f"{first}.{third}",
        currency=second,
        confidence=0.9,
        pattern="ambiguous-split",
        family="split",
        original=reconstructed,
        parts=list(parts),
        reconstructed=reconstructed,
    )


def match_split_components(parts) -> List[PatternMatch]:
    """
    Reassemble a price rendered across sibling fragments.

    >>> match_split_components(["449€", "00"])[0].value
    '449.00'
    """
    if not isinstance(parts, (list, tuple)) or len(parts) < 2:
        return []
    parts = [str(p).strip() for p in parts]

    candidates = []
    if len(parts) == 2:
        candidates.append(_split_amount_then_cents(parts))
    if len(parts) >= 3:
        candidates.append(_split_symbol_then_amount(parts))
    if len(parts) == 2:
        candidates.append(_split_code_then_amount(parts))
    if len(parts) == 3:
        candidates.append(_split_amount_symbol_cents(parts))

    return [c for c in candidates if c is not None]


_CONTEXTUAL = (
    (FROM_PHRASE, 0.9, "from-minimum", "from"),
    (UNDER_PHRASE, 0.9, "under-maximum", "under"),
    (STARTING_AT_PHRASE, 0.88, "starting-at-minimum", "starting-at"),
)


def match_contextual_phrases(text) -> List[PatternMatch]:
    """Phrases like "from $20" or "under €50", ordered by position."""
    if not text or not isinstance(text, str):
        return []

    matches = []
    for regex, confidence, name, context in _CONTEXTUAL:
        for m in regex.finditer(text):
            matches.append(PatternMatch(
                value=m.group(2),
                currency=m.group(1),
                confidence=confidence,
                pattern=name,
                family="contextual",
                original=m.group(0),
                context=context,
                position=m.start(),
            ))

    matches.sort(key=lambda m: m.position)
    return matches


_LARGE_NUMBERS = (
    (COMMA_THOUSANDS, 0.9, "comma-thousands", r","),
    (DOT_THOUSANDS, 0.85, "dot-thousands", r"\."),
    (SPACE_THOUSANDS, 0.8, "space-thousands", r"\s"),
)


def match_large_numbers(text) -> List[PatternMatch]:
    """Symbol-prefixed amounts of at least 1000 with grouped thousands."""
    if not text or not isinstance(text, str):
        return []

    matches = []
    for regex, confidence, name, separator in _LARGE_NUMBERS:
        for m in regex.finditer(text):
            normalized = re.sub(separator, "", m.group(2))
            if float(normalized) < 1000:
                continue
            matches.append(PatternMatch(
                value=normalized,
                currency=m.group(1),
                confidence=confidence,
                pattern=name,
                family="large-number",
                original=m.group(0),
                position=m.start(),
            ))
    return matches


def match_basic_patterns(text) -> List[PatternMatch]:
    if not text or not isinstance(text, str):
        return []
    return [
        PatternMatch(
            value=m.group(2),
            currency=m.group(1),
            confidence=0.85,
            pattern="standard-format",
            family="standard",
            original=m.group(0),
            position=m.start(),
        )
        for m in STANDARD_FORMAT.finditer(text)
    ]


def _detected_settings(text: str) -> Optional[PriceSettings]:
    detected = detect_format_from_text(text)
    if detected is None:
        return None
    symbol = next((s for s in detected.currency_symbols if s in text), None)
    code = next((c for c in detected.currency_codes if c in text), detected.currency_codes[0])
    return PriceSettings(currency_code=code, currency_symbol=symbol)


def match_locale_prices(
    text,
    settings: Optional[PriceSettings],
    cache: Optional[PatternCache] = None,
) -> List[PatternMatch]:
    """
    Apply the settings-driven locale pattern.

    Missing separator styles fall back to auto-detection, then US style;
    those guesses carry a lower confidence. Without settings the currency
    itself is detected from the text.
    """
    if not text or not isinstance(text, str):
        return []
    if settings is None:
        settings = _detected_settings(text)
        if settings is None:
            return []

    found = find_prices(text, settings, cache=cache)
    if found is None:
        return []
    _, _, explicit = resolve_separator_styles(text, settings)
    confidence = 0.9 if explicit else 0.86

    matches = []
    for m in found.pattern.finditer(text):
        original = m.group(0)
        value = normalize_amount(original, found.thousands_style, found.decimal_style)
        if value is None:
            continue
        symbol = found.currency_symbol
        currency = symbol if symbol and symbol in original else (found.currency_code or symbol)
        matches.append(PatternMatch(
            value=value,
            currency=currency,
            confidence=confidence,
            pattern=f"locale-{found.locale_format.locale_id}",
            family="locale",
            original=original.strip(),
            position=m.start(),
        ))
    return matches


def _split_context(context: Mapping[str, Any]):
    flag = context.get("split_components", context.get("splitComponents"))
    parts = context.get("parts")
    return bool(flag) or parts is not None, parts


def select_best_pattern(text, context: Optional[Mapping[str, Any]] = None) -> Optional[PatternMatch]:
    """
    Most confident candidate across all text matchers, or None.

    Ties keep matcher priority order: split, contextual, large number,
    standard, space variation.
    """
    if not text or not isinstance(text, str):
        return None
    context = context or {}

    candidates: List[PatternMatch] = []
    is_split, parts = _split_context(context)
    if is_split and isinstance(parts, (list, tuple)):
        candidates.extend(match_split_components(parts))
    elif is_split:
        inline = INLINE_SPLIT.search(text)
        if inline:
            candidates.extend(match_split_components([inline.group(1), inline.group(2)]))

    candidates.extend(match_contextual_phrases(text))
    candidates.extend(match_large_numbers(text))
    candidates.extend(match_basic_patterns(text))
    candidates.extend(match_space_variations(text))

    unique = []
    seen = set()
    for candidate in candidates:
        key = (candidate.original, candidate.pattern)
        if key in seen:
            continue
        seen.add(key)
        unique.append(candidate)

    if not unique:
        return None
    unique.sort(key=lambda c: c.confidence, reverse=True)
    best = unique[0]
    logger.debug(f"Best pattern {best.pattern} ({best.confidence}) of {len(unique)} for: {sample(text)}")
    return best


def validate_pattern_match(match: Optional[PatternMatch], original_text) -> bool:
    """A match must come from the text and carry a usable amount."""
    if match is None or not original_text:
        return False
    if match.original and match.original not in original_text and not match.parts:
        return False
    if not match.currency or not match.value:
        return False
    return is_valid_amount(match.value)


def detect_price_format(text: str) -> str:
    if re.search(r"\d+\s\d{3}", text):
        return "french"
    if re.search(r",\d{1,2}$", text) and text.rfind(".") < text.rfind(","):
        return "european"
    return "us"


def normalize_price(raw, fmt: str = "auto") -> Optional[str]:
    """
    Convert a bare amount to dot-decimal form.

    Formats: "european" (1.234,56), "french" (1 234,56), "us" (1,234.56),
    or "auto" to guess.
    """
    if not raw or not isinstance(raw, str):
        return None
    normalized = raw.strip()
    if not normalized or not re.search(r"\d", normalized):
        return None

    if fmt == "auto":
        fmt = detect_price_format(normalized)

    if fmt == "european":
        normalized = normalized.replace(".", "").replace(",", ".", 1)
    elif fmt == "french":
        normalized = re.sub(r"\s", "", normalized).replace(",", ".", 1)
    else:
        normalized = normalized.replace(",", "")

    try:
        number = float(normalized)
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    return normalized
