"""Tokenizer — normalizes text into keyword tokens for relevance scoring.

Pipeline:
1. Lowercase
2. Strip everything outside ``[a-z0-9]`` and whitespace
3. Split on whitespace runs
4. Drop tokens shorter than ``MIN_TOKEN_LENGTH``
5. Drop stop words

``tokenize_raw`` keeps every occurrence (term frequency needs counts);
``tokenize`` collapses duplicates, keeping first-seen order.
"""

import re

# Common English function words excluded from scoring.
STOP_WORDS = frozenset([
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for",
    "of", "with", "by", "from", "is", "it", "as", "be", "was", "are",
    "been", "has", "had", "do", "did", "not", "no", "can", "will", "just",
    "so", "than", "too", "very", "that", "this", "its", "if", "then",
    "into", "also", "about", "up", "out", "what", "which", "who", "how",
    "when", "where", "why", "all", "each", "every", "both", "few", "more",
    "most", "other", "some", "such", "only", "own", "same", "my", "your",
    "his", "her", "our", "they", "them", "their", "me", "him", "she", "he",
    "we", "you",
])

MIN_TOKEN_LENGTH = 3

_NON_ALNUM_RE = re.compile(r"[^a-z0-9\s]")


def tokenize_raw(text: str) -> list[str]:
    """Tokenize *text* into lowercase keyword tokens, preserving duplicates.

    Args:
        text: Arbitrary input text.

    Returns:
        Tokens in order of appearance. Empty for empty or
        punctuation-only input.

    Examples:
        >>> tokenize_raw("Neural networks, neural nets!")
        ['neural', 'networks', 'neural', 'nets']
    """
    if not text:
        return []
    cleaned = _NON_ALNUM_RE.sub("", text.lower())
    return [
        word
        for word in cleaned.split()
        if len(word) >= MIN_TOKEN_LENGTH and word not in STOP_WORDS
    ]


def tokenize(text: str) -> list[str]:
    """Tokenize *text* into deduplicated keyword tokens (first-seen order)."""
    return list(dict.fromkeys(tokenize_raw(text)))
