# -*- coding: utf-8 -*-
"""Identifier utilities for inverter and table labels.

The cable length table and the two GeoJSON layers spell the same physical
object differently (``"INV 07"``, ``"INV07"``, ``"INV 7"``). Normalized
identifiers are the only join key between these sources.
"""

import re
from collections.abc import Mapping
from re import Pattern
from typing import Any

# Whitespace directly in front of a digit ("INV 07" -> "INV07")
SPACE_BEFORE_DIGIT_PATTERN: Pattern[str] = re.compile(r"\s+(?=[0-9])")

# Maximal run of ASCII digits
DIGIT_RUN_PATTERN: Pattern[str] = re.compile(r"[0-9]+")

# Properties holding a feature's identifier, in priority order
FEATURE_ID_PROPERTIES: tuple[str, ...] = ("name", "text", "id")


def _strip_leading_zeros(match: re.Match[str]) -> str:
    return str(int(match.group()))


def normalize_id(raw: Any) -> str:
    """Canonicalize a human-entered identifier.

    Steps:
    - trim outer whitespace
    - remove whitespace immediately before a digit
    - replace every digit run with its value without leading zeros

    Normalization is total and idempotent:
    ``normalize_id(normalize_id(x)) == normalize_id(x)``.

    Args:
        raw: Identifier as found in the source data

    Returns:
        Normalized identifier, or an empty string for non-string or blank
        input (callers treat the empty string as "no match")
    """
    if not isinstance(raw, str):
        return ""
    trimmed = raw.strip()
    if not trimmed:
        return ""
    collapsed = SPACE_BEFORE_DIGIT_PATTERN.sub("", trimmed)
    return DIGIT_RUN_PATTERN.sub(_strip_leading_zeros, collapsed)


def get_feature_id(feature: Mapping[str, Any] | None) -> str | None:
    """Return the raw identifier of a GeoJSON feature.

    The first truthy value among ``properties.name``, ``properties.text``
    and ``properties.id`` wins.

    Args:
        feature: GeoJSON feature mapping

    Returns:
        Identifier as a string, or None if the feature has none
    """
    if not feature:
        return None
    properties = feature.get("properties") or {}
    for key in FEATURE_ID_PROPERTIES:
        if value := properties.get(key):
            return value if isinstance(value, str) else str(value)
    return None
