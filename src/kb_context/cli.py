"""CLI interface for building knowledge context blocks."""

import argparse
import logging
import sys

from kb_context.config import AppConfig
from kb_context.context_builder import build_knowledge_context
from kb_context.corpus_cache import CorpusCache
from kb_context.document_loader import load_fragments
from kb_context.hierarchical import build_hierarchical_context
from kb_context.pool_context import build_pool_context

_GENERATION_TYPES = ("single", "chain", "transform")
_MODES = ("knowledge", "hierarchical", "memory")


def _setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def context(
    folder_path: str,
    prompt: str,
    mode: str = "knowledge",
    generation_type: str | None = None,
    config: AppConfig | None = None,
) -> None:
    """Print the context block built from the fragments in a folder.

    Args:
        folder_path: Directory with notes and fragment record files.
        prompt: The user prompt to rank against.
        mode: ``knowledge`` (flat), ``hierarchical`` (documents grouped)
            or ``memory`` (AI Memory pool).
        generation_type: Budget selector; the default budget applies
            when omitted (``memory`` mode falls back to ``single``).
        config: Application configuration. Uses defaults if not provided.
    """
    cfg = config or AppConfig()
    fragments = load_fragments(folder_path)

    if not fragments:
        print("No supported files found (.txt, .md, .pdf, .json)")
        return

    if mode == "hierarchical":
        block = build_hierarchical_context(
            fragments,
            prompt,
            generation_type,
            budget=cfg.kb_budget,
            scoring=cfg.scoring,
            document_scoring=cfg.document_scoring,
        )
    elif mode == "memory":
        block = build_pool_context(
            fragments,
            prompt,
            generation_type or "single",
            cache=CorpusCache(cfg.scoring),
            budget=cfg.pool_budget,
            config=cfg.scoring,
        )
    else:
        block = build_knowledge_context(
            fragments, prompt, generation_type, budget=cfg.kb_budget, config=cfg.scoring
        )

    if not block:
        print("No context fits the budget.")
        return
    print(block)


def rank(folder_path: str, prompt: str, top: int = 10, config: AppConfig | None = None) -> None:
    """Print the fragments of a folder ranked by relevance, with scores."""
    cfg = config or AppConfig()
    fragments = load_fragments(folder_path)

    if not fragments:
        print("No supported files found (.txt, .md, .pdf, .json)")
        return

    scored = CorpusCache(cfg.scoring).score_entries(fragments, prompt)
    for position, item in enumerate(scored[:top], start=1):
        print(f"{position:>3}. {item.score:8.3f}  {item.fragment.title}")


def main() -> None:
    """CLI entry point — parse arguments and dispatch to context or rank."""
    parser = argparse.ArgumentParser(
        description="Knowledge context — rank and pack fragments for LLM prompts",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # context
    context_p = subparsers.add_parser("context", help="Print a context block")
    context_p.add_argument(
        "--folder", type=str, default="./knowledge", help="Fragments folder path"
    )
    context_p.add_argument("--prompt", type=str, default="", help="User prompt")
    context_p.add_argument("--mode", choices=_MODES, default="knowledge")
    context_p.add_argument(
        "--generation-type", choices=_GENERATION_TYPES, default=None
    )

    # rank
    rank_p = subparsers.add_parser("rank", help="Print fragments ranked by relevance")
    rank_p.add_argument(
        "--folder", type=str, default="./knowledge", help="Fragments folder path"
    )
    rank_p.add_argument("--prompt", type=str, default="", help="User prompt")
    rank_p.add_argument("--top", type=int, default=10, help="Number of results")

    args = parser.parse_args()
    _setup_logging(args.verbose)

    if args.command == "context":
        context(args.folder, args.prompt, args.mode, args.generation_type)
    elif args.command == "rank":
        rank(args.folder, args.prompt, args.top)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
