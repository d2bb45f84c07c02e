"""Normalization helpers — names, phones, tags.

Pure Python, no I/O. Used by:
  - services/matching.py (name/phone comparison inside the reconcile loop)
  - services/enrichment.py, services/reconciliation.py (untyped external fields)
  - utils/json_types.py and schemas/crm.py (tag cleanup on write and read)
"""

import re

_NON_DIGIT = re.compile(r"\D")


def clean_str(raw) -> str:
    """Stripped text for a scalar from external JSON.

    Numbers are rendered as text (19901 → "19901"); None, booleans and
    containers become "".
    """
    if isinstance(raw, str):
        return raw.strip()
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return str(raw)
    return ""


def normalize_text(raw) -> str:
    """Lowercase and trim. None and containers become ""."""
    return clean_str(raw).lower()


def normalize_phone_digits(raw) -> str:
    """Reduce a phone number to its last 10 digits.

    Drops formatting and any country-code prefix so domestic and
    international spellings of the same line compare equal.

    Examples:
        "(302) 555-1212"    → "3025551212"
        "+1 302-555-1212"   → "3025551212"
        ""                  → ""
    """
    if raw is None:
        return ""
    digits = _NON_DIGIT.sub("", str(raw))
    return digits[-10:]


def normalize_tags(raw) -> set[str]:
    """Turn a tag iterable into a clean set: stripped, non-empty strings only."""
    if not raw or isinstance(raw, (str, bytes, dict)):
        return set()
    tags = set()
    for t in raw:
        if isinstance(t, str) and t.strip():
            tags.add(t.strip())
    return tags
