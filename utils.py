"""
Utility functions for the application.
"""
import re
from datetime import datetime
from typing import Optional

# Cities picked out of free-text addresses for the list view
CITY_PATTERN = re.compile(
    r'(Hyderabad|Vijayawada|Visakhapatnam|Bangalore|Chennai|Mumbai|Delhi|Pune|Kolkata)',
    re.IGNORECASE,
)


def digits_only(value: Optional[str]) -> str:
    """
    Strip every non-digit character.

    Examples:
        >>> digits_only('987-654-3210')
        '9876543210'
        >>> digits_only(None)
        ''
    """
    if not value:
        return ''
    return re.sub(r'\D', '', value)


def extract_city(address: Optional[str]) -> str:
    """
    Return the first known city mentioned in an address, or ''.

    Examples:
        >>> extract_city('12-3, Ameerpet, hyderabad 500016')
        'hyderabad'
        >>> extract_city('Guntur')
        ''
    """
    if not address:
        return ''
    match = CITY_PATTERN.search(address)
    return match.group(0) if match else ''


def format_timestamp(ms: Optional[int], fmt: str = '%d.%m.%Y %H:%M') -> str:
    """Format epoch milliseconds for display; '' for missing values."""
    if ms is None:
        return ''
    return datetime.fromtimestamp(ms / 1000).strftime(fmt)


def safe_filename(value: Optional[str], default: str) -> str:
    """
    Turn a registration number into a download filename stem.

    Examples:
        >>> safe_filename('REG/001', 'profile')
        'REG-001'
        >>> safe_filename('  ', 'profile')
        'profile'
    """
    value = (value or '').strip()
    if not value:
        return default
    return re.sub(r'[\\/:*?"<>|\s]+', '-', value)
