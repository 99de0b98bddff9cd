"""
Input Sanitization Module

Cleans text read from imported recipe files before it reaches the
database: control characters are removed, single-line fields have their
whitespace collapsed, and oversized free-text fields are truncated.

Values are stored as plain text; escaping happens at render time.
"""

import re

from constants import MAX_LENGTHS

# Control characters except tab and newline
_CONTROL_CHARS = re.compile(r'[\x00-\x08\x0b-\x1f\x7f-\x9f]')


def sanitize_line(text):
    """
    Sanitize a single-line field (name, tags, ingredient line).

    Args:
        text: The text to sanitize (can be None)

    Returns:
        Stripped string with control characters removed and runs of
        whitespace collapsed to one space
    """
    if text is None:
        return ''

    if not isinstance(text, str):
        text = str(text)

    # Remove control characters and null bytes
    text = _CONTROL_CHARS.sub('', text)

    # Collapse multiple spaces
    return re.sub(r'\s+', ' ', text).strip()


def sanitize_multiline(text, max_length=MAX_LENGTHS['instructions']):
    """
    Sanitize a multi-line field (instructions, notes).

    Preserves newlines for formatting.

    Args:
        text: The text to sanitize
        max_length: Maximum allowed length (default 50000)

    Returns:
        Sanitized text
    """
    if not text:
        return ''

    if not isinstance(text, str):
        text = str(text)

    text = text.replace('\r\n', '\n').replace('\r', '\n')
    text = _CONTROL_CHARS.sub('', text).strip()

    # Truncate if too long
    if len(text) > max_length:
        text = text[:max_length] + '\n...(truncated)'

    return text


def sanitize_ingredient_text(text, max_length=MAX_LENGTHS['ingredient_text']):
    """
    Sanitize an ingredient line before parsing.

    Args:
        text: Single ingredient line
        max_length: Maximum length (default 500)

    Returns:
        Sanitized ingredient text
    """
    text = sanitize_line(text)

    # Truncate
    if len(text) > max_length:
        text = text[:max_length]

    return text
