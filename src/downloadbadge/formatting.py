"""Download count formatting.

Counts are shown either with a thousands delimiter (``1,234,567``) or
abbreviated with metric suffixes (``1.2M``), chosen by the ``metric``
query parameter.
"""

from __future__ import annotations

import math
from collections.abc import Callable
from decimal import Decimal, InvalidOperation
from typing import TypeAlias

from downloadbadge._internal.multimap import MultiValueMapping

Count: TypeAlias = int | float | Decimal | str | None
CountFormatter: TypeAlias = Callable[[Count, MultiValueMapping], str]

# Shown in place of the count when none could be resolved
INVALID_COUNT = "invalid"

DEFAULT_DELIMITER = ","
METRIC_SUFFIXES = ("", "k", "M", "G", "T")

# Counts at or above this magnitude are rejected
MAX_COUNT = 10**18


def coerce_count(count: Count) -> int | None:
    """Return *count* as a whole number, or None if it is absent or not numeric.

    Fractions are truncated toward zero. Strings are accepted since
    upstream APIs sometimes report counts as text. Values at or beyond
    ``MAX_COUNT`` in magnitude are rejected.
    """
    if count is None or isinstance(count, bool):
        return None
    if isinstance(count, int):
        return count if abs(count) < MAX_COUNT else None
    if isinstance(count, str):
        count = count.strip().replace(",", "")
        if not count:
            return None
        try:
            count = Decimal(count)
        except InvalidOperation:
            return None
    if isinstance(count, float) and not math.isfinite(count):
        return None
    if isinstance(count, Decimal) and (not count.is_finite() or count.adjusted() >= 18):
        return None
    value = int(count)
    return value if abs(value) < MAX_COUNT else None


def is_blank_count(count: Count) -> bool:
    return coerce_count(count) is None


class NumberFormatter:
    """Formats a download count according to the request parameters.

    Reads ``metric`` (truthy → abbreviate) and ``thousands_separator``
    (grouping delimiter, ``,`` by default) from *params*.

    Usage::

        NumberFormatter(1234567, QueryParams(b"metric=true")).formatted_display()
        # "1.2M"
    """

    __slots__ = ("delimiter", "metric", "number")

    def __init__(self, number: Count, params: MultiValueMapping) -> None:
        value = coerce_count(number)
        if value is None:
            msg = f"not a download count: {number!r}"
            raise ValueError(msg)
        self.number = value
        self.metric = bool(params.get_bool("metric", False))
        self.delimiter = params.get("thousands_separator") or DEFAULT_DELIMITER

    def __str__(self) -> str:
        return self.formatted_display()

    def formatted_display(self) -> str:
        if self.metric:
            return self.number_to_metric()
        return self.number_with_delimiter()

    def number_with_delimiter(self) -> str:
        return f"{self.number:,}".replace(",", self.delimiter)

    def number_to_metric(self) -> str:
        """Abbreviate with one decimal place, dropping a trailing ``.0``."""
        sign = "-" if self.number < 0 else ""
        value = abs(self.number)
        if value < 1000:
            return f"{sign}{value}"
        exponent = min(int(math.log10(value) // 3), len(METRIC_SUFFIXES) - 1)
        scaled = round(value / 1000**exponent, 1)
        # 999_950 rounds to 1000.0k; carry into the next unit
        if scaled >= 1000 and exponent < len(METRIC_SUFFIXES) - 1:
            exponent += 1
            scaled = round(value / 1000**exponent, 1)
        digits = f"{scaled:.1f}".rstrip("0").rstrip(".")
        return f"{sign}{digits}{METRIC_SUFFIXES[exponent]}"


def format_count(count: Count, params: MultiValueMapping) -> str:
    """Default count formatter: ``NumberFormatter`` applied to *count*."""
    return NumberFormatter(count, params).formatted_display()


def format_number_of_downloads(
    count: Count,
    params: MultiValueMapping,
    *,
    formatter: CountFormatter | None = None,
) -> str:
    """``"invalid"`` for an absent count, otherwise the formatted count."""
    if is_blank_count(count):
        return INVALID_COUNT
    return (formatter or format_count)(count, params)
