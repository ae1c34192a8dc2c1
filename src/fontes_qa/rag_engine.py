"""RAG engine — ranks the cached corpus against a question and
generates a grounded answer via Ollama."""

import logging
from collections.abc import Callable

import ollama

from fontes_qa.config import AppConfig, LLMConfig
from fontes_qa.corpus import CorpusCache
from fontes_qa.embeddings import EmbeddingProvider
from fontes_qa.errors import InputError, ProviderError
from fontes_qa.models import Answer, ScoredDocument, Source
from fontes_qa.retriever import retrieve

logger = logging.getLogger(__name__)

REFUSAL_ANSWER = "Não encontrei resposta nas fontes oficiais indexadas."

_CONTEXT_SEPARATOR = "\n\n----\n\n"

SYSTEM_PROMPT = (
    "És um assistente que responde exclusivamente em Português de Portugal.\n"
    "Só podes usar as informações textuais fornecidas nos excertos abaixo "
    "— não inventes.\n"
    "Se a resposta não estiver nos excertos, responde exactamente: "
    f'"{REFUSAL_ANSWER}"\n'
    'No fim da resposta inclui uma secção "Fontes:" com as URLs utilizadas.\n'
    "Mantém linguagem clara, concisa e sem jargão desnecessário."
)

CompletionFn = Callable[[str, str, LLMConfig | None], str]


def build_context_string(results: list[ScoredDocument]) -> str:
    """Format retrieved documents into a prompt-ready string.

    Each document contributes its URL, title and full text, in ranking
    order, separated by a horizontal rule.

    Args:
        results: Ranked documents to include.

    Returns:
        A single string ready to be injected into the user prompt.
    """
    parts = [
        f"URL: {r.document.url}\nTITLE: {r.document.title}\nEXCERPT: {r.document.text}"
        for r in results
    ]
    return _CONTEXT_SEPARATOR.join(parts)


def build_user_prompt(question: str, context: str) -> str:
    return f"Pergunta: {question}\n\nContexto:\n{context}\n\nResponde em pt-PT."


def generate_answer(
    system_prompt: str,
    user_prompt: str,
    config: LLMConfig | None = None,
) -> str:
    """Generate an answer using the Ollama LLM.

    Args:
        system_prompt: Instructions fixing the assistant's behaviour.
        user_prompt: The question plus the retrieved context.
        config: LLM settings (model, temperature, max_tokens).
            Uses defaults if not provided.

    Returns:
        The model's generated answer as a string.

    Raises:
        ProviderError: If the Ollama call fails.
    """
    cfg = config or LLMConfig()
    try:
        response = ollama.chat(
            model=cfg.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            options={"temperature": cfg.temperature, "num_predict": cfg.max_tokens},
        )
    except Exception as exc:
        raise ProviderError("ollama", str(exc) or type(exc).__name__) from exc
    return response["message"]["content"]


def synthesize(
    question: str,
    results: list[ScoredDocument],
    config: LLMConfig | None = None,
    complete: CompletionFn | None = None,
) -> Answer:
    """Compose a grounded answer from the retrieved documents.

    With no results the fixed refusal is returned and the model is not
    called. Otherwise the sources are every document placed in the
    context, whether or not the model ends up citing it.

    Args:
        question: The user's question.
        results: Ranked documents from the retriever.
        config: LLM settings. Uses defaults if not provided.
        complete: Completion function. Uses ``generate_answer`` if not
            provided.

    Returns:
        An Answer with the model's raw text and the offered sources.
    """
    if not results:
        return Answer(answer=REFUSAL_ANSWER, sources=[])

    context = build_context_string(results)
    user_prompt = build_user_prompt(question, context)
    answer = (complete or generate_answer)(SYSTEM_PROMPT, user_prompt, config)

    sources = [Source(title=r.document.title, url=r.document.url) for r in results]
    return Answer(answer=answer, sources=sources)


def ask(
    question: str,
    cache: CorpusCache,
    embedder: EmbeddingProvider,
    config: AppConfig | None = None,
) -> Answer:
    """Full RAG pipeline: warm, embed the question, rank, synthesize.

    If the corpus has no document with a usable embedding the refusal
    is returned without calling either provider.

    Args:
        question: The user's natural-language question.
        cache: Corpus cache, warmed on first use.
        embedder: Provider for the question embedding.
        config: Application settings. Uses defaults if not provided.

    Returns:
        An Answer with the generated text and its sources.

    Raises:
        InputError: If the question is empty or whitespace.
        ProviderError: If the question embedding or completion fails.
    """
    if not isinstance(question, str) or not question.strip():
        raise InputError("Pergunta vazia")

    cfg = config or AppConfig()
    cache.warm()
    corpus = cache.usable_documents()
    if not corpus:
        logger.warning("No documents with usable embeddings; refusing.")
        return Answer(answer=REFUSAL_ANSWER, sources=[])

    question_embedding = embedder.embed(question)
    results = retrieve(
        question_embedding,
        corpus,
        max_results=cfg.retrieval.max_results,
        min_score=cfg.retrieval.min_score,
        min_dimensions=cache.min_dimensions,
    )
    logger.info("Retrieved %d document(s) for question", len(results))
    return synthesize(question, results, cfg.llm)
