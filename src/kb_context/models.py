"""Domain models for knowledge context assembly."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Fragment:
    """A single scorable unit of knowledge: a note, a document chunk or a card memory.

    ``parent_id`` links a document chunk to the fragment that heads its
    document. ``pinned`` fragments are placed ahead of ranked ones when a
    Knowledge Bank block is formatted.
    """

    id: str
    title: str
    content: str
    summary: str | None = None
    tags: tuple[str, ...] = ()
    parent_id: str | None = None
    pinned: bool = False


@dataclass(frozen=True)
class DocumentGroup:
    """A parent document fragment together with its child chunks."""

    parent: Fragment
    children: tuple[Fragment, ...] = ()
    total_parts: int = 1


@dataclass(frozen=True)
class GroupedFragments:
    """Fragments split into standalone entries and multi-chunk documents."""

    standalone: tuple[Fragment, ...] = ()
    documents: tuple[DocumentGroup, ...] = ()


@dataclass(frozen=True)
class ScoredFragment:
    """A fragment with the score and input position used to order it."""

    fragment: Fragment
    score: float
    index: int


@dataclass(frozen=True)
class CorpusData:
    """Tokenized fragment pool plus the IDF map computed over it.

    ``corpus[i]`` holds the raw (repeat-preserving) tokens of the i-th
    fragment the data was built from.
    """

    corpus: tuple[tuple[str, ...], ...] = ()
    idf: dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class CacheEntry:
    """The single slot of a corpus cache: a fingerprint and the data built for it."""

    fingerprint: str
    data: CorpusData
