"""TF-IDF scoring — rare-term boosting over the current fragment pool.

Formula:
    tf(t, d)  = count(t in d) / len(d)
    idf(t)    = log(N / df(t))
    score(d)  = Σ tf(k, d) × idf(k)   for each distinct query keyword k

Where:
    N     = number of fragments in the corpus at build time
    df(t) = number of fragments containing t at least once

A term present in every fragment gets ``idf = log(1) = 0``: it neither
helps nor hurts. Keywords absent from the IDF map contribute nothing.
"""

import logging
import math
from collections import Counter
from collections.abc import Mapping, Sequence

logger = logging.getLogger(__name__)


def compute_tf(tokens: Sequence[str], term: str) -> float:
    """Return the share of *tokens* equal to *term* (0 for an empty sequence)."""
    if not tokens:
        return 0.0
    return tokens.count(term) / len(tokens)


def compute_idf(total_docs: int, doc_freq: int) -> float:
    """Return ``log(total_docs / doc_freq)``, or 0 when either count is zero."""
    if total_docs == 0 or doc_freq == 0:
        return 0.0
    return math.log(total_docs / doc_freq)


def build_corpus_idf(corpus: Sequence[Sequence[str]]) -> dict[str, float]:
    """Build the inverse document frequency map for a tokenized corpus.

    Args:
        corpus: One raw token sequence per fragment. Repeated tokens
            within a fragment count once towards document frequency.

    Returns:
        Mapping of every distinct token to its IDF. Empty for an
        empty corpus.
    """
    doc_freq: Counter[str] = Counter()
    for tokens in corpus:
        doc_freq.update(set(tokens))

    total = len(corpus)
    idf = {term: compute_idf(total, df) for term, df in doc_freq.items()}
    logger.debug("Built IDF map: %d terms over %d fragments", len(idf), total)
    return idf


def tfidf_score(
    fragment_tokens: Sequence[str],
    keywords: Sequence[str],
    idf: Mapping[str, float],
) -> float:
    """Score one fragment's raw tokens against the query keywords.

    Args:
        fragment_tokens: Raw (repeat-preserving) tokens of the fragment.
        keywords: Query keywords; duplicates are scored once.
        idf: IDF map built over the pool the fragment belongs to.

    Returns:
        Sum of ``tf × idf`` for each keyword that occurs in the fragment.
    """
    if not fragment_tokens or not keywords:
        return 0.0

    counts = Counter(fragment_tokens)
    length = len(fragment_tokens)
    score = 0.0
    for keyword in dict.fromkeys(keywords):
        count = counts.get(keyword, 0)
        if count == 0:
            continue
        score += (count / length) * idf.get(keyword, 0.0)
    return score
