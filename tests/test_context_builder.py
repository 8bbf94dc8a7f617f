"""Tests for the context_builder module."""

from kb_context.config import BudgetConfig
from kb_context.context_builder import (
    KNOWLEDGE_STYLE,
    MEMORY_STYLE,
    build_context_block,
    build_knowledge_context,
    order_pinned_first,
    pack_blocks,
    render_block,
)
from kb_context.models import Fragment


class TestRenderBlock:
    def test_label_and_content(self) -> None:
        fragment = Fragment(id="a", title="Solo Note", content="just a note")
        assert render_block(fragment) == "[Knowledge: Solo Note]\njust a note"

    def test_prefers_summary(self) -> None:
        fragment = Fragment(id="a", title="T", content="long content", summary="short")
        assert render_block(fragment) == "[Knowledge: T]\nshort"

    def test_empty_summary_falls_back_to_content(self) -> None:
        fragment = Fragment(id="a", title="T", content="content", summary="")
        assert render_block(fragment).endswith("\ncontent")

    def test_custom_label(self) -> None:
        fragment = Fragment(id="a", title="Strategy", content="We need a plan")
        assert render_block(fragment, "Memory").startswith("[Memory: Strategy]")


class TestPackBlocks:
    def test_joins_with_blank_lines(self) -> None:
        frags = [Fragment(id="a", title="A", content="one"), Fragment(id="b", title="B", content="two")]
        assert pack_blocks(frags, 1000) == "[Knowledge: A]\none\n\n[Knowledge: B]\ntwo"

    def test_exact_fit(self) -> None:
        fragment = Fragment(id="a", title="A", content="one")
        block = render_block(fragment)
        assert pack_blocks([fragment], len(block)) == block
        assert pack_blocks([fragment], len(block) - 1) == ""

    def test_greedy_stops_at_first_overflow(self) -> None:
        frags = [
            Fragment(id="a", title="A", content="x" * 50),
            Fragment(id="b", title="B", content="y" * 500),
            Fragment(id="c", title="C", content="z"),
        ]
        result = pack_blocks(frags, 100)
        assert "[Knowledge: A]" in result
        assert "[Knowledge: B]" not in result
        assert "[Knowledge: C]" not in result

    def test_empty_input(self) -> None:
        assert pack_blocks([], 100) == ""


class TestBuildContextBlock:
    def test_wraps_in_header_and_footer(self) -> None:
        result = build_context_block([Fragment(id="a", title="A", content="one")], 1000)
        assert result == (
            "--- Workspace Knowledge Bank ---\n[Knowledge: A]\none\n--- End Knowledge Bank ---"
        )

    def test_memory_style(self) -> None:
        result = build_context_block(
            [Fragment(id="a", title="Strategy", content="plan")], 1000, MEMORY_STYLE
        )
        assert result.startswith("--- AI Memory ---\n[Memory: Strategy]")
        assert result.endswith("--- End AI Memory ---")

    def test_first_block_fits_second_excluded(self) -> None:
        first = Fragment(id="big", title="Big Document", content="x" * 31_950)
        second = Fragment(id="next", title="Second Note", content="y" * 100)
        result = build_context_block([first, second], 32_000)
        assert "[Knowledge: Big Document]" in result
        assert "Second Note" not in result
        assert "y" * 100 not in result

    def test_top_fragment_over_budget_returns_empty(self) -> None:
        huge = Fragment(id="huge", title="Huge", content="x" * 33_000)
        small = Fragment(id="small", title="Small", content="tiny")
        assert build_context_block([huge, small], 32_000) == ""

    def test_block_content_within_budget(self) -> None:
        frags = [Fragment(id=str(i), title=f"Idea {i}", content="A" * 1000) for i in range(100)]
        budget = 12_000
        result = build_context_block(frags, budget)
        body = result.removeprefix(KNOWLEDGE_STYLE.header + "\n").removesuffix(
            "\n" + KNOWLEDGE_STYLE.footer
        )
        blocks = body.split("\n\n")
        assert sum(len(b) for b in blocks) <= budget
        assert len(blocks) == 11

    def test_empty_input(self) -> None:
        assert build_context_block([], 1000) == ""

    def test_zero_budget(self) -> None:
        assert build_context_block([Fragment(id="a", title="A", content="b")], 0) == ""


class TestOrderPinnedFirst:
    def test_pinned_lead_ranked_rest(self) -> None:
        pinned = Fragment(id="p", title="Pinned", content="unrelated", pinned=True)
        cooking = Fragment(id="c", title="Cooking tips", content="bake at 350")
        security = Fragment(id="s", title="Security protocols", content="physical security")
        ordered = order_pinned_first([cooking, pinned, security], "security")
        assert [f.id for f in ordered] == ["p", "s", "c"]

    def test_no_prompt_keeps_order(self) -> None:
        a = Fragment(id="a", title="A", content="x")
        b = Fragment(id="b", title="B", content="y", pinned=True)
        assert [f.id for f in order_pinned_first([a, b])] == ["b", "a"]


class TestBuildKnowledgeContext:
    def test_empty(self) -> None:
        assert build_knowledge_context([]) == ""

    def test_ranks_by_prompt(self) -> None:
        cooking = Fragment(id="c", title="Cooking tips", content="bake at 350")
        security = Fragment(id="s", title="Security protocols", content="physical security")
        result = build_knowledge_context([cooking, security], "security")
        assert result.index("Security protocols") < result.index("Cooking tips")

    def test_uses_summary(self) -> None:
        fragment = Fragment(id="a", title="Report", content="full text", summary="summary text")
        result = build_knowledge_context([fragment])
        assert "summary text" in result
        assert "full text" not in result

    def test_generation_type_budget(self) -> None:
        budget = BudgetConfig(transform=10)
        fragment = Fragment(id="a", title="Title", content="x" * 100)
        assert build_knowledge_context([fragment], generation_type="transform", budget=budget) == ""
        assert build_knowledge_context([fragment], generation_type="single", budget=budget) != ""
