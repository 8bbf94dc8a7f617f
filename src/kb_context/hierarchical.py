"""Hierarchical context builder — four-level Knowledge Bank context.

Levels, each packed within its own share of the character budget:

1. Catalog: every document with its section count
2. Document summaries
3. Chapter summaries: per-chunk summaries
4. Raw content: parent text followed by chunk text

The shares depend on how many documents compete for the budget: few
documents get deep raw detail, many documents get broader summaries.
Standalone fragments fall back to the flat Knowledge Bank format.
"""

import logging
import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from kb_context.config import (
    BudgetConfig,
    DocumentScoringConfig,
    GenerationType,
    ScoringConfig,
)
from kb_context.context_builder import KNOWLEDGE_STYLE, order_pinned_first, pack_blocks
from kb_context.document_grouper import get_display_title, group_fragments_by_document
from kb_context.document_scorer import rank_document_groups
from kb_context.models import DocumentGroup, Fragment

logger = logging.getLogger(__name__)

CATALOG_HEADER = "=== DOCUMENT CATALOG ==="
DOC_SUMMARIES_HEADER = "=== DOCUMENT SUMMARIES ==="
CHAPTER_SUMMARIES_HEADER = "=== CHAPTER SUMMARIES ==="
RAW_CONTENT_HEADER = "=== RAW CONTENT ==="

# Standalone fragments are only appended when more than this many chars remain.
_MIN_STANDALONE_BUDGET = 100


@dataclass(frozen=True)
class BudgetTier:
    """Fraction of the character budget given to each context level."""

    catalog: float
    doc_summaries: float
    chapter_summaries: float
    raw_content: float


DEEP_TIER = BudgetTier(catalog=0.02, doc_summaries=0.15, chapter_summaries=0.33, raw_content=0.50)
BALANCED_TIER = BudgetTier(catalog=0.05, doc_summaries=0.25, chapter_summaries=0.35, raw_content=0.35)
BROAD_TIER = BudgetTier(catalog=0.08, doc_summaries=0.35, chapter_summaries=0.35, raw_content=0.22)


def select_tier(doc_count: int) -> BudgetTier:
    if doc_count <= 2:
        return DEEP_TIER
    if doc_count <= 5:
        return BALANCED_TIER
    return BROAD_TIER


def _pack_items(items: Iterable[str], budget: int) -> str:
    """Join whole items with newlines until the next one would overflow."""
    parts: list[str] = []
    used = 0
    for item in items:
        cost = len(item) + (1 if parts else 0)
        if used + cost > budget:
            break
        parts.append(item)
        used += cost
    return "\n".join(parts)


def build_catalog(groups: Sequence[DocumentGroup], budget: int) -> str:
    """List each document's display title and section count."""
    return _pack_items(
        (f"- {get_display_title(g.parent)} ({g.total_parts} sections)" for g in groups),
        budget,
    )


def build_doc_summaries(groups: Sequence[DocumentGroup], budget: int) -> str:
    """Document-level summaries; groups whose parent has no summary are skipped."""
    return _pack_items(
        (
            f"[Document: {get_display_title(g.parent)}]\n{g.parent.summary}"
            for g in groups
            if g.parent.summary
        ),
        budget,
    )


def build_chapter_summaries(groups: Sequence[DocumentGroup], budget: int) -> str:
    """Per-chunk summaries, documents in rank order."""
    return _pack_items(
        (
            f"[{child.title}]\n{child.summary}"
            for g in groups
            for child in g.children
            if child.summary
        ),
        budget,
    )


def build_raw_content(groups: Sequence[DocumentGroup], budget: int) -> str:
    """Full text of each document: the parent first, then its chunks."""
    return _pack_items(
        (
            f"[{fragment.title}]\n{fragment.content}"
            for g in groups
            for fragment in (g.parent, *g.children)
            if fragment.content
        ),
        budget,
    )


def build_hierarchical_context(
    fragments: Sequence[Fragment],
    prompt: str | None = None,
    generation_type: GenerationType | None = None,
    budget: BudgetConfig | None = None,
    scoring: ScoringConfig | None = None,
    document_scoring: DocumentScoringConfig | None = None,
) -> str:
    """Build the Knowledge Bank context, grouping chunks into documents.

    Args:
        fragments: Enabled Knowledge Bank fragments.
        prompt: User prompt used to rank documents and standalone entries.
        generation_type: Selects the token budget; the default budget
            applies when omitted.
        budget: Token budgets. Uses defaults if not provided.
        scoring: Field weights. Uses defaults if not provided.
        document_scoring: Document signal weights. Uses defaults if not
            provided.

    Returns:
        The wrapped Knowledge Bank block, or ``""`` when nothing fits.
    """
    if not fragments:
        return ""

    max_chars = (budget or BudgetConfig()).max_chars(generation_type)
    grouped = group_fragments_by_document(fragments)

    if not grouped.documents:
        body = pack_blocks(
            order_pinned_first(grouped.standalone, prompt, scoring),
            max_chars,
            KNOWLEDGE_STYLE.label,
        )
        if not body:
            return ""
        return f"{KNOWLEDGE_STYLE.header}\n{body}\n{KNOWLEDGE_STYLE.footer}"

    ranked = rank_document_groups(grouped.documents, prompt, document_scoring, scoring)
    tier = select_tier(len(ranked))
    logger.debug("Hierarchical context: %d documents, tier %s", len(ranked), tier)

    sections: list[str] = []
    levels = (
        (CATALOG_HEADER, build_catalog, tier.catalog),
        (DOC_SUMMARIES_HEADER, build_doc_summaries, tier.doc_summaries),
        (CHAPTER_SUMMARIES_HEADER, build_chapter_summaries, tier.chapter_summaries),
        (RAW_CONTENT_HEADER, build_raw_content, tier.raw_content),
    )
    for header, builder, share in levels:
        text = builder(ranked, math.floor(max_chars * share))
        if text:
            sections.append(f"{header}\n{text}")

    if grouped.standalone:
        remaining = max_chars - len("\n\n".join(sections))
        if remaining > _MIN_STANDALONE_BUDGET:
            flat = pack_blocks(
                order_pinned_first(grouped.standalone, prompt, scoring),
                remaining,
                KNOWLEDGE_STYLE.label,
            )
            if flat:
                sections.append(flat)

    if not sections:
        return ""
    return f"{KNOWLEDGE_STYLE.header}\n" + "\n\n".join(sections) + f"\n{KNOWLEDGE_STYLE.footer}"
