"""
Spec Normalizer - Turn noisy specification strings into comparable values.

Every function here is total: bad input yields None (or an empty key),
never an exception.
"""
import re
from typing import Optional

_DIGIT_RUN = re.compile(r'\d[\d,]*')
_RAM = re.compile(r'(\d+(?:\.\d+)?)\s*GB\s*RAM', re.IGNORECASE)
_STORAGE = re.compile(r'(\d+(?:\.\d+)?)\s*(GB|TB)\s*(?:ROM|storage|internal)', re.IGNORECASE)


def parse_price(text) -> Optional[int]:
    """
    Parse a price string into whole rupees.

    Examples:
    - "₹1,234" -> 1234
    - "N/A" -> None
    - "" -> None
    """
    if text is None:
        return None
    digits = re.sub(r'[^0-9]', '', str(text))
    if not digits:
        return None
    return int(digits)


def extract_battery_capacity(text) -> Optional[int]:
    """
    Extract battery capacity in mAh from free text.

    The first run of digits wins; grouping commas are dropped.
    "5,000 mAh" -> 5000, "Li-Po" -> None
    """
    if not text:
        return None
    match = _DIGIT_RUN.search(str(text))
    if not match:
        return None
    return int(match.group(0).replace(',', ''))


def normalize_key(text) -> str:
    """Lower-cased, trimmed matching key."""
    if text is None:
        return ''
    return str(text).strip().lower()


def extract_ram(memory_and_storage) -> Optional[str]:
    """'8 GB RAM | 128 GB ROM' -> '8GB'"""
    if not memory_and_storage:
        return None
    match = _RAM.search(str(memory_and_storage))
    return f"{match.group(1)}GB" if match else None


def extract_storage(memory_and_storage) -> Optional[str]:
    """'8 GB RAM | 128 GB ROM' -> '128GB'"""
    if not memory_and_storage:
        return None
    match = _STORAGE.search(str(memory_and_storage))
    return f"{match.group(1)}{match.group(2).upper()}" if match else None


def format_price(value) -> str:
    """
    Format rupees with Indian digit grouping.

    Examples:
    - 54000 -> "₹54,000"
    - 123456 -> "₹1,23,456"
    """
    amount = int(round(float(value)))
    sign = '-' if amount < 0 else ''
    digits = str(abs(amount))
    if len(digits) > 3:
        head, tail = digits[:-3], digits[-3:]
        groups = []
        while len(head) > 2:
            groups.insert(0, head[-2:])
            head = head[:-2]
        if head:
            groups.insert(0, head)
        digits = ','.join(groups + [tail])
    return f"{sign}₹{digits}"
