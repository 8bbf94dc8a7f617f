"""Document-level relevance scoring for multi-chunk documents.

Formula (default weights):

    score = 3 × titleScore(parent)
          + 2 × summaryScore(parent)
          + 1 × max(chunkScores)
          + 0.5 × mean(top3(chunkScores))

``titleScore`` and ``summaryScore`` count the query keywords present in
that single field of the parent. ``chunkScores`` are the field-weighted
keyword scores of the child chunks. A parent without a summary contributes
0 for the summary term; content is not substituted.
"""

import heapq
import logging
from collections.abc import Sequence

from kb_context.config import DocumentScoringConfig, ScoringConfig
from kb_context.models import DocumentGroup
from kb_context.relevance import score_entry
from kb_context.tokenizer import tokenize

logger = logging.getLogger(__name__)


def _field_score(text: str | None, keywords: Sequence[str]) -> int:
    """Count the keywords present in a single field."""
    if not text:
        return 0
    tokens = set(tokenize(text))
    return sum(1 for kw in keywords if kw in tokens)


def score_document_group(
    group: DocumentGroup,
    keywords: Sequence[str],
    config: DocumentScoringConfig | None = None,
    scoring: ScoringConfig | None = None,
) -> float:
    """Score a parent document and its chunks as a single unit.

    Args:
        group: The document group to score.
        keywords: Deduplicated query keywords.
        config: Signal weights and top-K size. Uses defaults if not provided.
        scoring: Field weights for chunk scores. Uses defaults if not provided.

    Returns:
        The combined group score; 0 when *keywords* is empty.
    """
    if not keywords:
        return 0.0

    cfg = config or DocumentScoringConfig()
    field_cfg = scoring or ScoringConfig()

    title_score = _field_score(group.parent.title, keywords)
    summary_score = _field_score(group.parent.summary, keywords)

    chunk_scores = [score_entry(child, keywords, field_cfg) for child in group.children]
    max_chunk = max(chunk_scores, default=0.0)
    top = heapq.nlargest(cfg.top_k, chunk_scores)
    top_mean = sum(top) / len(top) if top else 0.0

    return (
        cfg.title_weight * title_score
        + cfg.summary_weight * summary_score
        + cfg.max_chunk_weight * max_chunk
        + cfg.top_chunks_weight * top_mean
    )


def rank_document_groups(
    groups: Sequence[DocumentGroup],
    prompt: str | None = None,
    config: DocumentScoringConfig | None = None,
    scoring: ScoringConfig | None = None,
) -> list[DocumentGroup]:
    """Rank document groups by relevance to *prompt*.

    Groups with equal scores keep their input order. Without a prompt, or
    with a prompt that has no keywords, the input order is returned.

    Args:
        groups: Document groups to rank.
        prompt: The user prompt, optional.
        config: Signal weights. Uses defaults if not provided.
        scoring: Field weights for chunk scores. Uses defaults if not provided.

    Returns:
        A new list holding the same groups, best first.
    """
    keywords = tokenize(prompt) if prompt else []
    if not keywords:
        return list(groups)

    cfg = config or DocumentScoringConfig()
    field_cfg = scoring or ScoringConfig()
    scored = [
        (score_document_group(group, keywords, cfg, field_cfg), index, group)
        for index, group in enumerate(groups)
    ]
    scored.sort(key=lambda item: (-item[0], item[1]))
    logger.debug("Ranked %d document groups for %d keywords", len(groups), len(keywords))
    return [group for _, _, group in scored]
