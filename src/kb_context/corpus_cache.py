"""Corpus cache — memoizes the tokenized pool and its IDF map.

Only keyword/TF-IDF *scoring* depends on the prompt; the corpus statistics
depend on the pool alone. The cache keeps a single slot keyed by a content
fingerprint of the pool, so re-ranking an unchanged pool with a new prompt
skips tokenization and IDF computation.

The slot is an immutable ``CacheEntry`` swapped as a whole on rebuild, so a
reader never sees a corpus paired with an IDF map from another pool.
"""

import logging
from collections.abc import Sequence

from kb_context.config import ScoringConfig
from kb_context.models import CacheEntry, CorpusData, Fragment, ScoredFragment
from kb_context.relevance import build_corpus, fragment_to_text, score_entries
from kb_context.tokenizer import tokenize

logger = logging.getLogger(__name__)

_FNV_OFFSET_BASIS = 0x811C9DC5
_FNV_PRIME = 0x01000193


def fnv1a(text: str) -> int:
    """32-bit FNV-1a hash of the UTF-8 encoding of *text*."""
    h = _FNV_OFFSET_BASIS
    for byte in text.encode("utf-8"):
        h ^= byte
        h = (h * _FNV_PRIME) & 0xFFFFFFFF
    return h


def build_fingerprint(fragments: Sequence[Fragment]) -> str:
    """Fingerprint a pool by id and hashed indexed text, in input order.

    Any change to membership, order, or the text a fragment contributes to
    the corpus yields a different fingerprint.
    """
    return "|".join(f"{f.id}:{fnv1a(fragment_to_text(f)):08x}" for f in fragments)


class CorpusCache:
    """Single-slot cache of corpus data for the most recently seen pool."""

    def __init__(self, config: ScoringConfig | None = None) -> None:
        self._config = config or ScoringConfig()
        self._entry: CacheEntry | None = None

    @property
    def fingerprint(self) -> str | None:
        entry = self._entry
        return entry.fingerprint if entry else None

    def clear(self) -> None:
        self._entry = None

    def get_corpus_data(self, fragments: Sequence[Fragment]) -> CorpusData:
        """Return cached corpus data for *fragments*, rebuilding on mismatch.

        Args:
            fragments: The candidate pool.

        Returns:
            The CorpusData for this pool. The same object is returned for
            repeated calls with a structurally identical pool.
        """
        fingerprint = build_fingerprint(fragments)
        entry = self._entry
        if entry is not None and entry.fingerprint == fingerprint:
            logger.debug("Corpus cache hit (%d fragments)", len(fragments))
            return entry.data

        data = build_corpus(fragments)
        self._entry = CacheEntry(fingerprint=fingerprint, data=data)
        logger.debug(
            "Corpus cache rebuilt: %d fragments, %d terms",
            len(fragments),
            len(data.idf),
        )
        return data

    def score_entries(
        self,
        fragments: Sequence[Fragment],
        prompt: str,
        config: ScoringConfig | None = None,
    ) -> list[ScoredFragment]:
        """Score and order *fragments* for *prompt* using the cached corpus.

        With no prompt keywords every fragment scores 0 and keeps its
        input position. *config* overrides the cache's field weights for
        this call; the corpus data does not depend on weights.
        """
        if not fragments:
            return []

        keywords = tokenize(prompt)
        if not keywords:
            return [
                ScoredFragment(fragment=f, score=0.0, index=i)
                for i, f in enumerate(fragments)
            ]

        data = self.get_corpus_data(fragments)
        return score_entries(fragments, keywords, data, config or self._config)

    def rank_entries(
        self,
        fragments: Sequence[Fragment],
        prompt: str,
        config: ScoringConfig | None = None,
    ) -> list[Fragment]:
        """Rank *fragments* by relevance to *prompt*, reusing the cached corpus."""
        return [s.fragment for s in self.score_entries(fragments, prompt, config)]
