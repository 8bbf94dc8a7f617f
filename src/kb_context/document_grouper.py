"""Document grouper — splits fragments into standalone entries and documents."""

import re
from collections.abc import Sequence

from kb_context.models import DocumentGroup, Fragment, GroupedFragments

_PART_SUFFIX_RE = re.compile(r"\s+-\s+Part\s+\d+\s*$", re.IGNORECASE)


def group_fragments_by_document(fragments: Sequence[Fragment]) -> GroupedFragments:
    """Group chunk fragments under their parent document fragment.

    A fragment becomes a document parent when it has no ``parent_id`` of
    its own and at least one other fragment points at it. Children keep
    their input order. Orphaned chunks (parent not present) and parents
    without children are returned as standalone. Fragment objects are
    referenced, never copied.

    Args:
        fragments: Fragments in caller order.

    Returns:
        GroupedFragments with standalone fragments and document groups,
        both in input order.
    """
    parent_ids = {f.id for f in fragments if f.parent_id is None}
    children_by_parent: dict[str, list[Fragment]] = {}
    for fragment in fragments:
        if fragment.parent_id is not None and fragment.parent_id in parent_ids:
            children_by_parent.setdefault(fragment.parent_id, []).append(fragment)

    standalone: list[Fragment] = []
    documents: list[DocumentGroup] = []
    for fragment in fragments:
        if fragment.parent_id is None and fragment.id in children_by_parent:
            children = tuple(children_by_parent[fragment.id])
            documents.append(
                DocumentGroup(
                    parent=fragment,
                    children=children,
                    total_parts=1 + len(children),
                )
            )
        elif fragment.parent_id is None or fragment.parent_id not in parent_ids:
            standalone.append(fragment)

    return GroupedFragments(standalone=tuple(standalone), documents=tuple(documents))


def get_display_title(parent: Fragment) -> str:
    """Return the parent's title without its trailing `` - Part N`` suffix."""
    return _PART_SUFFIX_RE.sub("", parent.title, count=1)
