"""
Price data model

Records shared by the matchers, the DOM analyzer, site handlers and the
extraction pipeline.
"""

import math
from dataclasses import dataclass, field, fields, replace
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from .config import config
from .constants import DECIMAL_STYLES, THOUSANDS_STYLES
from .exceptions import InvalidSettingsError


def clamp_confidence(value: float) -> float:
    """Clamp a heuristic score into [0, 1]."""
    return min(1.0, max(0.0, float(value)))


def is_valid_amount(value: Any) -> bool:
    """True when value parses as a finite, non-negative number."""
    if value is None or isinstance(value, bool):
        return False
    try:
        number = float(str(value).strip())
    except ValueError:
        return False
    return math.isfinite(number) and number >= 0


@dataclass(frozen=True)
class PriceMatch:
    """
    A recognized monetary occurrence.

    ``strategy`` names the most specific producer (e.g. "contextual",
    "attribute", "site-specific"); ``metadata["pass"]`` names the pipeline
    strategy that ran it.
    """
    text: str
    value: str
    currency: str
    confidence: float
    strategy: str
    metadata: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        if not is_valid_amount(self.value):
            raise ValueError(f"Price value must be a finite non-negative number: {self.value!r}")
        object.__setattr__(self, "value", str(self.value).strip())
        object.__setattr__(self, "confidence", clamp_confidence(self.confidence))
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata or {})))

    @classmethod
    def build(
        cls,
        text: str,
        value: Any,
        currency: str,
        confidence: float,
        strategy: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Optional["PriceMatch"]:
        """Create a match, or None when the value is not a usable amount."""
        if not currency or not is_valid_amount(value):
            return None
        return cls(
            text=text or "",
            value=str(value),
            currency=currency,
            confidence=confidence,
            strategy=strategy,
            metadata=metadata or {},
        )

    @property
    def key(self) -> Tuple[str, str]:
        """Deduplication key"""
        return (self.value, self.currency)

    def with_confidence(self, confidence: float) -> "PriceMatch":
        return replace(self, confidence=confidence)

    def with_metadata(self, **extra: Any) -> "PriceMatch":
        merged = dict(self.metadata)
        merged.update(extra)
        return replace(self, metadata=merged)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "text": self.text,
            "value": self.value,
            "currency": self.currency,
            "confidence": round(self.confidence, 4),
            "strategy": self.strategy,
            "metadata": dict(self.metadata),
        }


@dataclass(frozen=True)
class LocaleFormat:
    """Separator and symbol-position conventions of a currency region"""
    locale_id: str
    thousands_separator_style: str
    decimal_separator_style: str
    symbols_before_amount: bool
    currency_symbols: Tuple[str, ...]
    currency_codes: Tuple[str, ...]

    @classmethod
    def from_table(cls, entry: Dict[str, Any]) -> "LocaleFormat":
        return cls(
            locale_id=entry["locale_id"],
            thousands_separator_style=entry["thousands"],
            decimal_separator_style=entry["decimal"],
            symbols_before_amount=entry["symbols_before_amount"],
            currency_symbols=tuple(entry["currency_symbols"]),
            currency_codes=tuple(entry["currency_codes"]),
        )


def _lookup(data: Mapping[str, Any], snake: str, camel: str, default: Any = None) -> Any:
    if snake in data:
        return data[snake]
    return data.get(camel, default)


def _as_float(name: str, value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be a number: {value!r}") from None


@dataclass(frozen=True)
class PriceSettings:
    """Caller-resolved currency settings"""
    currency_code: str = "USD"
    currency_symbol: Optional[str] = None
    thousands_separator_style: Optional[str] = None
    decimal_separator_style: Optional[str] = None
    debug_mode: bool = False

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "PriceSettings":
        """
        Build settings from a snake_case or camelCase mapping.

        Raises:
            InvalidSettingsError: unknown separator style or wrong value types
        """
        if data is None:
            return cls()
        if isinstance(data, PriceSettings):
            return data
        if not isinstance(data, Mapping):
            raise InvalidSettingsError(f"Settings must be a mapping, got {type(data).__name__}")

        code = _lookup(data, "currency_code", "currencyCode", config.default_currency_code)
        symbol = _lookup(data, "currency_symbol", "currencySymbol")
        thousands = _lookup(data, "thousands_separator_style", "thousandsSeparatorStyle")
        if thousands is None:
            thousands = data.get("thousands")
        decimal = _lookup(data, "decimal_separator_style", "decimalSeparatorStyle")
        if decimal is None:
            decimal = data.get("decimal")
        debug = _lookup(data, "debug_mode", "debugMode", False)

        if code is not None and not isinstance(code, str):
            raise InvalidSettingsError(f"currency_code must be a string: {code!r}")
        if symbol is not None and not isinstance(symbol, str):
            raise InvalidSettingsError(f"currency_symbol must be a string: {symbol!r}")
        if thousands is not None and thousands not in THOUSANDS_STYLES:
            raise InvalidSettingsError(f"Unknown thousands separator style: {thousands!r}")
        if decimal is not None and decimal not in DECIMAL_STYLES:
            raise InvalidSettingsError(f"Unknown decimal separator style: {decimal!r}")

        return cls(
            currency_code=(code or config.default_currency_code).upper(),
            currency_symbol=symbol or None,
            thousands_separator_style=thousands,
            decimal_separator_style=decimal,
            debug_mode=bool(debug),
        )

    @property
    def has_separator_styles(self) -> bool:
        return bool(self.thousands_separator_style and self.decimal_separator_style)


@dataclass(frozen=True)
class ExtractionOptions:
    """Per-call pipeline controls"""
    return_multiple: bool = False
    min_confidence: float = 0.0
    exhaustive: bool = False
    exclude_strategies: Tuple[str, ...] = ()
    only_pass: Optional[str] = None
    multi_pass_mode: bool = False
    early_exit_confidence: Optional[float] = None
    allow_multiple_results: bool = False
    pattern_context: Mapping[str, Any] = field(default_factory=dict, hash=False)

    _ALIASES = {
        "returnMultiple": "return_multiple",
        "minConfidence": "min_confidence",
        "excludeStrategies": "exclude_strategies",
        "onlyPass": "only_pass",
        "multiPassMode": "multi_pass_mode",
        "earlyExitConfidence": "early_exit_confidence",
        "allowMultipleResults": "allow_multiple_results",
        "patternContext": "pattern_context",
    }

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "ExtractionOptions":
        if data is None:
            return cls()
        if isinstance(data, ExtractionOptions):
            return data
        if not isinstance(data, Mapping):
            raise TypeError(f"Options must be a mapping, got {type(data).__name__}")
        known = {f.name for f in fields(cls)}
        kwargs: Dict[str, Any] = {}
        for key, value in data.items():
            name = cls._ALIASES.get(key, key)
            if name in known:
                kwargs[name] = value

        for name in ("min_confidence", "early_exit_confidence"):
            if kwargs.get(name) is None:
                kwargs.pop(name, None)
            else:
                kwargs[name] = _as_float(name, kwargs[name])

        excluded = kwargs.get("exclude_strategies")
        if isinstance(excluded, str):
            kwargs["exclude_strategies"] = (excluded,)
        elif "exclude_strategies" in kwargs:
            kwargs["exclude_strategies"] = tuple(excluded or ())

        if kwargs.get("only_pass") is not None and not isinstance(kwargs["only_pass"], str):
            raise ValueError(f"only_pass must be a strategy name: {kwargs['only_pass']!r}")
        if kwargs.get("pattern_context") is None:
            kwargs.pop("pattern_context", None)
        elif not isinstance(kwargs["pattern_context"], Mapping):
            raise ValueError(f"pattern_context must be a mapping: {kwargs['pattern_context']!r}")
        return cls(**kwargs)

    @staticmethod
    def wants_multiple_in(data: Any) -> bool:
        """True when raw options ask for a list, even if they fail to parse."""
        if isinstance(data, ExtractionOptions):
            return data.return_multiple
        if isinstance(data, Mapping):
            return bool(data.get("return_multiple", data.get("returnMultiple", False)))
        return False

    @property
    def wants_multiple(self) -> bool:
        return self.return_multiple or self.allow_multiple_results


@dataclass
class ExtractionInput:
    """One unit of work for the pipeline"""
    element: Any = None
    text: Optional[str] = None
    domain: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return self.element is None and not self.text

