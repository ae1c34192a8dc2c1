"""CLI interface for the question-answering service."""

import argparse
import logging
import sys

from fontes_qa import rag_engine
from fontes_qa.config import AppConfig, CorpusConfig, LLMConfig
from fontes_qa.corpus import CorpusCache
from fontes_qa.embeddings import EmbeddingProvider, get_embedding_provider
from fontes_qa.errors import InputError, ProviderError
from fontes_qa.models import Answer


def _setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _build_cache(cfg: AppConfig) -> tuple[CorpusCache, EmbeddingProvider]:
    embedder = get_embedding_provider(cfg.embedding)
    cache = CorpusCache(
        cfg.corpus.documents_dir,
        embedder,
        min_dimensions=cfg.corpus.min_embedding_dim,
    )
    return cache, embedder


def _print_answer(response: Answer) -> None:
    print(f"\nAssistant:\n{response.answer}\n")
    for source in response.sources:
        print(f"  - {source.title} <{source.url}>")
    if response.sources:
        print()


def warm(config: AppConfig | None = None) -> int:
    """Load the corpus, embed what is missing and print the report.

    Args:
        config: Application configuration. Uses defaults if not provided.

    Returns:
        Number of documents usable for retrieval.
    """
    cfg = config or AppConfig()
    cache, _ = _build_cache(cfg)

    print(f"\n📂 Loading documents from: {cfg.corpus.documents_dir}")
    cache.warm()
    report = cache.report

    for skipped in report.skipped:
        print(f"  ⚠️  skipped {skipped.filename}: {skipped.reason}")
    for failure in report.failed:
        print(f"  ❌ embedding failed for {failure.doc_id}: {failure.error}")

    print(
        f"\n✅ {report.loaded} document(s) loaded, {len(report.embedded)} embedded, "
        f"{report.usable} usable"
    )
    return report.usable


def ask_once(question: str, config: AppConfig | None = None) -> int:
    """Answer a single question and print it with its sources.

    Returns:
        Process exit code: 0 on success, 1 on failure.
    """
    cfg = config or AppConfig()
    cache, embedder = _build_cache(cfg)
    try:
        response = rag_engine.ask(question, cache, embedder, config=cfg)
    except InputError as exc:
        print(f"Error: {exc}")
        return 1
    except ProviderError as exc:
        print(f"Provider error: {exc}")
        return 1
    except (ValueError, NotADirectoryError) as exc:
        print(f"Corpus error: {exc}")
        return 1
    _print_answer(response)
    return 0


def chat(config: AppConfig | None = None) -> None:
    """Start an interactive chat session.

    Warms the corpus once and enters a REPL loop where the user can ask
    questions. Exits on 'quit', 'exit', 'q', EOF, or KeyboardInterrupt.

    Args:
        config: Application configuration. Uses defaults if not provided.
    """
    cfg = config or AppConfig()
    cache, embedder = _build_cache(cfg)

    try:
        documents = cache.warm()
    except NotADirectoryError as exc:
        print(f"Corpus error: {exc}")
        return
    if not documents:
        print(f"No documents found in {cfg.corpus.documents_dir}.")
        print("Add JSON records with {id, title, url, text} and try again.")
        return

    print(f"\n📚 Fontes QA ({len(cache.usable_documents())} documents indexed)")
    print(f"🤖 Using Ollama model: {cfg.llm.model}")
    print("\nType your question (or 'quit' to exit):\n")

    while True:
        try:
            question = input("You: ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nGoodbye!")
            break

        if not question:
            continue
        if question.lower() in ("quit", "exit", "q"):
            print("Goodbye!")
            break

        try:
            response = rag_engine.ask(question, cache, embedder, config=cfg)
        except ProviderError as exc:
            print(f"\nProvider error: {exc}\n")
            continue
        except ValueError as exc:
            print(f"\nCorpus error: {exc}\n")
            continue
        _print_answer(response)


def main() -> None:
    """CLI entry point — parse arguments and dispatch to a command."""
    parser = argparse.ArgumentParser(
        description="Fontes QA — grounded answers from official sources",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    parser.add_argument(
        "--folder", type=str, default=None, help="Documents folder path"
    )
    parser.add_argument("--model", type=str, default=None, help="Ollama model name")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("warm", help="Load and embed the corpus")

    ask_p = subparsers.add_parser("ask", help="Answer a single question")
    ask_p.add_argument("question", type=str, help="Question to answer")

    subparsers.add_parser("chat", help="Start interactive chat")

    args = parser.parse_args()
    _setup_logging(args.verbose)

    overrides = {}
    if args.folder:
        overrides["corpus"] = CorpusConfig(documents_dir=args.folder)
    if args.model:
        overrides["llm"] = LLMConfig(model=args.model)
    cfg = AppConfig(**overrides)

    if args.command == "warm":
        usable = warm(cfg)
        sys.exit(0 if usable else 1)
    elif args.command == "ask":
        sys.exit(ask_once(args.question, cfg))
    elif args.command == "chat":
        chat(cfg)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
