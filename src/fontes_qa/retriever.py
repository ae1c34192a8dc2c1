"""Retriever — ranks corpus documents against a question embedding."""

import logging
from collections.abc import Sequence

from fontes_qa.corpus import DEFAULT_MIN_DIMENSIONS, is_usable
from fontes_qa.models import Document, ScoredDocument
from fontes_qa.similarity import cosine_similarity

logger = logging.getLogger(__name__)

DEFAULT_MAX_RESULTS = 4
# Empirical relevance floor for cosine scores, not a probability.
DEFAULT_MIN_SCORE = 0.12


def retrieve(
    question_embedding: Sequence[float],
    corpus: Sequence[Document],
    max_results: int = DEFAULT_MAX_RESULTS,
    min_score: float = DEFAULT_MIN_SCORE,
    min_dimensions: int = DEFAULT_MIN_DIMENSIONS,
) -> list[ScoredDocument]:
    """Return the best-matching documents for a question.

    Documents without a usable embedding are left out rather than
    scored as zero. The ranking is a stable descending sort, so equal
    scores keep corpus order. The top ``max_results`` are kept and
    then anything scoring ``<= min_score`` is dropped.

    Args:
        question_embedding: Embedding of the question.
        corpus: Documents to rank, in corpus order.
        max_results: Maximum number of results.
        min_score: Exclusive lower bound on the similarity score.
        min_dimensions: Minimum embedding length treated as valid.

    Returns:
        Scored documents, highest score first. May be empty.

    Raises:
        ValueError: If a document embedding differs in length from the
            question embedding.
    """
    candidates = [d for d in corpus if is_usable(d, min_dimensions)]
    if not candidates:
        logger.debug("No documents with usable embeddings to rank.")
        return []

    scored = [
        ScoredDocument(document=d, score=cosine_similarity(question_embedding, d.embedding))
        for d in candidates
    ]
    scored.sort(key=lambda s: s.score, reverse=True)

    top = [s for s in scored[:max_results] if s.score > min_score]
    logger.debug(
        "Ranked %d document(s); %d above %.2f in the top %d",
        len(scored),
        len(top),
        min_score,
        max_results,
    )
    return top
