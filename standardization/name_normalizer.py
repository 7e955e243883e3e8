"""
Name Normalizer

Turns product display names into the forms used by matching.

Key functions:
1. tokenize_name: lower-cased whitespace-delimited parts (index + substring metric)
2. strip_whitespace: name with all whitespace removed (LCS + edit distance)
3. make_file_safe_key: sanitized identifier for output files

Example:
    >>> tokenize_name("Jablka Gala 1kg")
    ('jablka', 'gala', '1kg')
    >>> make_file_safe_key("Rohlík tukový 43 g")
    'rohlik_tukovy_43_g'
"""

import re
import unicodedata
from typing import Tuple


FILE_KEY_MAX_LENGTH = 100

# Anything outside of this set is replaced in file keys
_UNSAFE_CHARS = re.compile(r'[^a-z0-9_-]+')
# ASCII whitespace only, a non-breaking space stays inside the token
_WHITESPACE = re.compile(r'\s+', re.ASCII)


def tokenize_name(name: str) -> Tuple[str, ...]:
    """
    Split a product name into lower-cased tokens.

    Splits on ASCII whitespace only. No stemming, punctuation is kept as part
    of the token ("1kg," stays "1kg,").
    """
    return tuple(part.lower() for part in _WHITESPACE.split(name) if part)


def strip_whitespace(name: str) -> str:
    """Remove all ASCII whitespace from a name."""
    return _WHITESPACE.sub('', name)


def strip_diacritics(text: str) -> str:
    """Drop combining marks: 'Žluťoučký' -> 'Zlutoucky'."""
    decomposed = unicodedata.normalize('NFKD', text)
    return ''.join(ch for ch in decomposed if not unicodedata.combining(ch))


def make_file_safe_key(name: str, max_length: int = FILE_KEY_MAX_LENGTH) -> str:
    """
    Build a file-system friendly key from a product name.

    Only used to name output artifacts, never for matching.
    """
    key = strip_diacritics(name).lower()
    key = _UNSAFE_CHARS.sub('_', key).strip('_')
    key = key[:max_length].rstrip('_')
    return key or 'product'
