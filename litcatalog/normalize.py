"""Text normalization for name matching and search queries."""
import re
import unicodedata
from typing import Optional

WHITESPACE_PATTERN = re.compile(r"\s+")
# Anything that is not a letter, digit or whitespace (underscore counts as punctuation)
NON_WORD_PATTERN = re.compile(r"[^\w\s]|_")


def normalize(text: Optional[str]) -> str:
    """
    Canonicalize free text for comparison.
    
    Lower-cases, strips diacritical marks, trims and collapses
    whitespace runs to a single space.
    
    Args:
        text: Arbitrary text (may be None or empty)
        
    Returns:
        Normalized text ("" for absent input)
    """
    if not text:
        return ""
    
    # Lower-case first: some upper-case letters lower into base + combining mark
    lowered = text.lower()
    decomposed = unicodedata.normalize("NFD", lowered)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    
    return WHITESPACE_PATTERN.sub(" ", stripped).strip()


def normalize_for_query(text: Optional[str]) -> str:
    """
    Build the text sent to the search service.
    
    Same as normalize(), but punctuation is dropped entirely
    before whitespace is collapsed.
    
    Args:
        text: Raw user input
        
    Returns:
        Query-safe text
    """
    cleaned = NON_WORD_PATTERN.sub("", normalize(text))
    return WHITESPACE_PATTERN.sub(" ", cleaned).strip()


def contains_normalized(haystack: Optional[str], needle: Optional[str]) -> bool:
    """Case and diacritic insensitive substring test."""
    return normalize(needle) in normalize(haystack)
