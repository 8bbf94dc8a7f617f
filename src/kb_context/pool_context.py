"""Pool context — AI Memory block built from a pool of canvas-card fragments.

1. Drops excluded fragments (the card being generated and its upstream chain)
2. Caps large pools with a cheap keyword-only pre-filter
3. Ranks with a shared, memoized TF-IDF corpus
4. Packs the result into the generation type's budget
"""

import logging
from collections.abc import Collection, Sequence

from kb_context.config import GenerationType, PoolBudgetConfig, ScoringConfig
from kb_context.context_builder import MEMORY_STYLE, build_context_block
from kb_context.corpus_cache import CorpusCache
from kb_context.models import Fragment, ScoredFragment
from kb_context.relevance import score_entry, sort_scored
from kb_context.tokenizer import tokenize

logger = logging.getLogger(__name__)

# Module-level cache shared by every pool context build in this process.
_shared_cache = CorpusCache()


def get_shared_cache() -> CorpusCache:
    """Return the process-wide corpus cache used by ``build_pool_context``."""
    return _shared_cache


def prefilter_candidates(
    fragments: Sequence[Fragment],
    prompt: str,
    config: ScoringConfig | None = None,
) -> list[Fragment]:
    """Reduce an oversized pool before the expensive TF-IDF ranking.

    Pools at or below ``max_entries_for_ranking`` are returned unchanged.
    Larger pools keep the top entries by Boolean keyword score (ties by
    input order), or simply the first entries when the prompt has no
    keywords.

    Args:
        fragments: The candidate pool.
        prompt: The user prompt.
        config: Scoring weights and the pool ceiling. Uses defaults if not
            provided.

    Returns:
        At most ``max_entries_for_ranking`` fragments.
    """
    cfg = config or ScoringConfig()
    limit = cfg.max_entries_for_ranking
    if len(fragments) <= limit:
        return list(fragments)

    logger.debug("Pre-filtering pool of %d fragments down to %d", len(fragments), limit)
    keywords = tokenize(prompt)
    if not keywords:
        return list(fragments[:limit])

    scored = [
        ScoredFragment(fragment=f, score=score_entry(f, keywords, cfg), index=i)
        for i, f in enumerate(fragments)
    ]
    return [s.fragment for s in sort_scored(scored)[:limit]]


def build_pool_context(
    fragments: Sequence[Fragment],
    prompt: str,
    generation_type: GenerationType,
    exclude_ids: Collection[str] = (),
    cache: CorpusCache | None = None,
    budget: PoolBudgetConfig | None = None,
    config: ScoringConfig | None = None,
) -> str:
    """Build the AI Memory context block for prompt injection.

    Args:
        fragments: Pooled fragments in canvas order.
        prompt: The user prompt used for ranking.
        generation_type: Selects the token budget.
        exclude_ids: Fragment ids that must not appear in the block.
        cache: Corpus cache to rank with. Uses the shared cache if not
            provided.
        budget: Token budgets. Uses defaults if not provided.
        config: Scoring weights and pool ceiling. Uses defaults if not
            provided.

    Returns:
        The wrapped AI Memory block, or ``""`` when nothing qualifies or fits.
    """
    excluded = set(exclude_ids)
    pooled = [f for f in fragments if f.id not in excluded]
    if not pooled:
        return ""

    candidates = prefilter_candidates(pooled, prompt, config)
    ranked = (cache or _shared_cache).rank_entries(candidates, prompt, config)

    cfg = budget or PoolBudgetConfig()
    return build_context_block(ranked, cfg.max_chars(generation_type), MEMORY_STYLE)
