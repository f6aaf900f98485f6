import re

# =============================================================================
# INPUT VALIDATORS
# =============================================================================

_XSS_PATTERNS = [
    r"<\s*script[^>]*>",  # <script> tags
    r"<\s*iframe[^>]*>",  # <iframe> tags
    r"javascript\s*:",  # javascript: protocol
    r"on\w+\s*=",  # event handlers (onclick, onload, etc.)
]


def normalize_whitespace(value: str) -> str:
    """
    Collapses runs of whitespace into single spaces and trims the ends.

    Example:
        >>> normalize_whitespace('  Order   managers ')
        'Order managers'
    """
    return re.sub(r"\s+", " ", value).strip()


def is_valid_name(value: str) -> bool:
    """
    Checks that a display name only uses letters, digits, spaces,
    underscores and hyphens.

    Example:
        >>> is_valid_name('Payment editors')
        True
        >>> is_valid_name('<b>admins</b>')
        False
    """
    return bool(re.fullmatch(r"[A-Za-z0-9 _-]+", value))


def validate_length_range(value: str, min_len: int, max_len: int) -> bool:
    return min_len <= len(value) <= max_len


def contains_xss(content: str) -> bool:
    """
    Detects potential XSS (Cross-Site Scripting) attempts in free text.

    Example:
        >>> contains_xss('<script>alert("hack")</script>')
        True
        >>> contains_xss('Pay by invoice')
        False
    """
    content_lower = content.lower()
    return any(re.search(pattern, content_lower) for pattern in _XSS_PATTERNS)
