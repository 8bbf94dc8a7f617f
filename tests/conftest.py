"""Shared fixtures for the test suite."""

import tempfile
from pathlib import Path

import pytest

from kb_context.models import DocumentGroup, Fragment


@pytest.fixture
def sample_pool() -> list[Fragment]:
    return [
        Fragment(id="f1", title="Cooking Recipes", content="pasta and bread"),
        Fragment(id="f2", title="Machine Learning", content="neural networks"),
        Fragment(id="f3", title="Budget Report", content="financial data"),
    ]


@pytest.fixture
def marketing_pool() -> list[Fragment]:
    return [
        Fragment(id="n1", title="Marketing Plan", content="Social media strategy and ads"),
        Fragment(id="n2", title="Engineering", content="Backend architecture and APIs"),
        Fragment(id="n3", title="Marketing Budget", content="Budget allocation for marketing"),
    ]


@pytest.fixture
def make_group():
    """Build a DocumentGroup whose children hold the given contents."""

    def _make(
        title: str = "Test Entry",
        child_contents: tuple[str, ...] = (),
        summary: str | None = None,
        parent_id: str = "p1",
        content: str = "generic content",
    ) -> DocumentGroup:
        parent = Fragment(id=parent_id, title=title, content=content, summary=summary)
        children = tuple(
            Fragment(
                id=f"{parent_id}-c{i}",
                title=f"Section {i + 2}",
                content=text,
                parent_id=parent_id,
            )
            for i, text in enumerate(child_contents)
        )
        return DocumentGroup(parent=parent, children=children, total_parts=1 + len(children))

    return _make


@pytest.fixture
def tmp_notes_dir() -> Path:
    """Create a temporary directory with sample notes and fragment records."""
    with tempfile.TemporaryDirectory() as tmpdir:
        d = Path(tmpdir)

        (d / "pasta.txt").write_text(
            "Boil the pasta in salted water for nine minutes.",
            encoding="utf-8",
        )
        (d / "networks.md").write_text(
            "# Neural Networks\n\nNeural networks learn **weights** by gradient descent.",
            encoding="utf-8",
        )
        (d / "records.json").write_text(
            '[{"id": "r1", "title": "Budget Report", "content": "financial data",'
            ' "tags": ["finance"], "summary": "quarterly numbers"}]',
            encoding="utf-8",
        )
        # Unsupported file, should be skipped.
        (d / "image.png").write_bytes(b"\x89PNG\r\n")

        yield d


@pytest.fixture
def empty_notes_dir() -> Path:
    """Create an empty temporary directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)
