"""Relevance scorer — field-weighted keyword matching plus TF-IDF boosting.

Keyword score (Boolean per field, not frequency based):

    score = Σ over keywords of
            title_weight   if keyword in title
          + tag_weight     if keyword in tags
          + content_weight if keyword in content
          + content_weight if keyword in summary

A keyword repeated many times in a long body still counts once, so a title
match always outweighs any amount of body repetition.
"""

from collections.abc import Sequence

from kb_context.config import ScoringConfig
from kb_context.models import CorpusData, Fragment, ScoredFragment
from kb_context.tfidf import build_corpus_idf, tfidf_score
from kb_context.tokenizer import tokenize, tokenize_raw


def score_entry(
    fragment: Fragment,
    keywords: Sequence[str],
    config: ScoringConfig | None = None,
) -> float:
    """Score a single fragment against a list of keyword tokens.

    Args:
        fragment: The fragment to score.
        keywords: Deduplicated query keywords (see ``tokenize``).
        config: Field weights. Uses defaults if not provided.

    Returns:
        Sum of the weights of every field containing each keyword.
        0 when *keywords* is empty.
    """
    if not keywords:
        return 0.0

    cfg = config or ScoringConfig()
    title_tokens = set(tokenize(fragment.title))
    content_tokens = set(tokenize(fragment.content))
    summary_tokens = set(tokenize(fragment.summary)) if fragment.summary else set()
    tag_tokens = set(tokenize(" ".join(fragment.tags))) if fragment.tags else set()

    score = 0.0
    for kw in keywords:
        if kw in title_tokens:
            score += cfg.title_weight
        if kw in tag_tokens:
            score += cfg.tag_weight
        if kw in content_tokens:
            score += cfg.content_weight
        if kw in summary_tokens:
            score += cfg.content_weight
    return score


def fragment_to_text(fragment: Fragment) -> str:
    """Concatenate every scorable field of a fragment for corpus tokenization."""
    parts = [fragment.title, fragment.content]
    if fragment.summary:
        parts.append(fragment.summary)
    if fragment.tags:
        parts.append(" ".join(fragment.tags))
    return " ".join(parts)


def build_corpus(fragments: Sequence[Fragment]) -> CorpusData:
    """Tokenize every fragment and compute the IDF map over the pool."""
    corpus = tuple(tuple(tokenize_raw(fragment_to_text(f))) for f in fragments)
    return CorpusData(corpus=corpus, idf=build_corpus_idf(corpus))


def sort_scored(scored: list[ScoredFragment]) -> list[ScoredFragment]:
    """Order by descending score, breaking ties by ascending input index."""
    return sorted(scored, key=lambda s: (-s.score, s.index))


def score_entries(
    fragments: Sequence[Fragment],
    keywords: Sequence[str],
    data: CorpusData,
    config: ScoringConfig | None = None,
) -> list[ScoredFragment]:
    """Combine keyword and TF-IDF scores for a pool and return them ranked.

    Args:
        fragments: The candidate pool, in caller order.
        keywords: Query keywords; must be non-empty for meaningful scores.
        data: Corpus built from exactly *fragments* (same order).
        config: Field weights. Uses defaults if not provided.

    Returns:
        One ScoredFragment per input fragment, best first.
    """
    cfg = config or ScoringConfig()
    scored = [
        ScoredFragment(
            fragment=fragment,
            score=score_entry(fragment, keywords, cfg)
            + tfidf_score(data.corpus[index], keywords, data.idf),
            index=index,
        )
        for index, fragment in enumerate(fragments)
    ]
    return sort_scored(scored)


def rank_entries(
    fragments: Sequence[Fragment],
    prompt: str,
    config: ScoringConfig | None = None,
) -> list[Fragment]:
    """Rank fragments by relevance to *prompt* without caching the corpus.

    Entries with equal scores keep their input order. When the prompt has
    no meaningful keywords the input order is returned unchanged.

    Args:
        fragments: Candidate fragments.
        prompt: The user prompt.
        config: Field weights. Uses defaults if not provided.

    Returns:
        A new list holding the same fragments, best first.
    """
    keywords = tokenize(prompt)
    if not keywords:
        return list(fragments)

    data = build_corpus(fragments)
    return [s.fragment for s in score_entries(fragments, keywords, data, config)]
