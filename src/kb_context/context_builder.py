"""Context builder — packs ranked fragments into a character budget.

Packing is greedy in rank order: fragments are added whole until the next
block would overflow the budget, then packing stops even if a later, shorter
block would still fit. The budget counts block characters only; the
separators and the header/footer wrapper are not charged against it.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from kb_context.config import BudgetConfig, GenerationType, ScoringConfig
from kb_context.models import Fragment
from kb_context.relevance import rank_entries

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ContextStyle:
    """Label and wrapper strings for one kind of context block."""

    label: str
    header: str
    footer: str


KNOWLEDGE_STYLE = ContextStyle(
    label="Knowledge",
    header="--- Workspace Knowledge Bank ---",
    footer="--- End Knowledge Bank ---",
)

MEMORY_STYLE = ContextStyle(
    label="Memory",
    header="--- AI Memory ---",
    footer="--- End AI Memory ---",
)


def render_block(fragment: Fragment, label: str = KNOWLEDGE_STYLE.label) -> str:
    """Render one fragment as ``[Label: title]`` followed by its body.

    The summary is preferred over the content when present.
    """
    body = fragment.summary if fragment.summary else fragment.content
    return f"[{label}: {fragment.title}]\n{body}"


def pack_blocks(
    ranked: Sequence[Fragment],
    char_budget: int,
    label: str = KNOWLEDGE_STYLE.label,
) -> str:
    """Greedily pack rendered blocks within *char_budget*, without a wrapper.

    Args:
        ranked: Fragments in the order they should be considered.
        char_budget: Maximum total characters of the included blocks.
        label: Label used in each block's first line.

    Returns:
        Included blocks joined by blank lines, or an empty string when
        not even the first block fits.
    """
    remaining = char_budget
    parts: list[str] = []

    for fragment in ranked:
        block = render_block(fragment, label)
        if len(block) > remaining:
            logger.debug(
                "Budget exhausted after %d of %d fragments (%d chars left)",
                len(parts),
                len(ranked),
                remaining,
            )
            break
        parts.append(block)
        remaining -= len(block)

    return "\n\n".join(parts)


def build_context_block(
    ranked: Sequence[Fragment],
    char_budget: int,
    style: ContextStyle = KNOWLEDGE_STYLE,
) -> str:
    """Format ranked fragments into a wrapped, budget-limited context block.

    Args:
        ranked: Already-ranked fragments, best first.
        char_budget: Maximum total characters of the fragment blocks.
        style: Label and header/footer strings.

    Returns:
        ``header\\n<blocks>\\nfooter``, or ``""`` when no fragment fits.
    """
    body = pack_blocks(ranked, char_budget, style.label)
    if not body:
        return ""
    return f"{style.header}\n{body}\n{style.footer}"


def order_pinned_first(
    fragments: Sequence[Fragment],
    prompt: str | None = None,
    config: ScoringConfig | None = None,
) -> list[Fragment]:
    """Place pinned fragments first, then the rest ranked by *prompt*."""
    pinned = [f for f in fragments if f.pinned]
    unpinned = [f for f in fragments if not f.pinned]
    ranked = rank_entries(unpinned, prompt, config) if prompt else unpinned
    return pinned + ranked


def build_knowledge_context(
    fragments: Sequence[Fragment],
    prompt: str | None = None,
    generation_type: GenerationType | None = None,
    budget: BudgetConfig | None = None,
    config: ScoringConfig | None = None,
) -> str:
    """Build the flat Knowledge Bank block for prompt injection.

    Pinned fragments lead; the others are ranked by the prompt when one is
    given. The character budget follows the generation type.
    """
    if not fragments:
        return ""

    cfg = budget or BudgetConfig()
    ordered = order_pinned_first(fragments, prompt, config)
    return build_context_block(ordered, cfg.max_chars(generation_type), KNOWLEDGE_STYLE)
