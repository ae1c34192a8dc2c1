"""Corpus cache — loads the documents once per process and backfills
their embeddings."""

import enum
import logging
import threading
from pathlib import Path

from fontes_qa.document_loader import load_documents
from fontes_qa.embeddings import EmbeddingProvider
from fontes_qa.errors import CorpusUnavailable, ProviderError
from fontes_qa.models import Document, EmbeddingFailure, WarmReport

logger = logging.getLogger(__name__)

DEFAULT_MIN_DIMENSIONS = 10


class CorpusState(enum.Enum):
    UNINITIALIZED = "uninitialized"
    WARMING = "warming"
    READY = "ready"


def is_usable(doc: Document, min_dimensions: int = DEFAULT_MIN_DIMENSIONS) -> bool:
    """Return True if the document has an embedding long enough to rank."""
    return isinstance(doc.embedding, list) and len(doc.embedding) >= min_dimensions


class CorpusCache:
    """In-memory corpus shared by every request of a process.

    The cache is filled by the first call to :meth:`warm` that finds
    any documents and then reused as-is: it is never invalidated and nothing is written back
    to the record files. Concurrent first callers wait for the single
    in-flight warm instead of starting their own, so each document is
    embedded at most once per cache.

    Args:
        folder: Directory holding the JSON document records.
        embedder: Provider used for documents without a usable embedding.
        min_dimensions: Minimum embedding length treated as valid.
    """

    def __init__(
        self,
        folder: str | Path,
        embedder: EmbeddingProvider,
        min_dimensions: int = DEFAULT_MIN_DIMENSIONS,
    ) -> None:
        self.folder = Path(folder)
        self.min_dimensions = min_dimensions
        self._embedder = embedder
        self._lock = threading.Lock()
        self._state = CorpusState.UNINITIALIZED
        self._documents: list[Document] = []
        self._report = WarmReport()

    @property
    def state(self) -> CorpusState:
        return self._state

    @property
    def documents(self) -> list[Document]:
        return self._documents

    @property
    def report(self) -> WarmReport:
        return self._report

    def usable_documents(self) -> list[Document]:
        return [d for d in self._documents if is_usable(d, self.min_dimensions)]

    def warm(self) -> list[Document]:
        """Populate the cache on first use and return the documents.

        Once at least one document has loaded, later calls return the
        cached list without touching the disk or the embedding provider.
        A missing or empty folder yields an empty corpus rather than an
        error, and the cache stays cold so the next call reads it again.
        """
        if self._state is CorpusState.READY:
            return self._documents

        with self._lock:
            # Another caller may have finished while we waited.
            if self._state is CorpusState.READY:
                return self._documents

            self._state = CorpusState.WARMING
            try:
                self._documents, self._report = self._load_and_embed()
            except Exception:
                self._state = CorpusState.UNINITIALIZED
                raise

            if not self._documents:
                self._state = CorpusState.UNINITIALIZED
                logger.warning("No documents loaded from %s", self.folder)
                return self._documents
            self._state = CorpusState.READY

        logger.info(
            "Corpus ready: %d document(s), %d usable, %d embedded, %d failed",
            self._report.loaded,
            self._report.usable,
            len(self._report.embedded),
            len(self._report.failed),
        )
        return self._documents

    def require_documents(self) -> list[Document]:
        """Warm the cache and fail if it holds no documents at all.

        Raises:
            CorpusUnavailable: If the folder is missing or empty.
        """
        documents = self.warm()
        if not documents:
            raise CorpusUnavailable(f"Sem documentos indexados em {self.folder}")
        return documents

    def _load_and_embed(self) -> tuple[list[Document], WarmReport]:
        loaded = load_documents(self.folder)
        documents = loaded.documents

        needing = [d for d in documents if not is_usable(d, self.min_dimensions)]
        embedded: list[str] = []
        failed: list[EmbeddingFailure] = []

        for doc in needing:
            try:
                doc.embedding = self._embedder.embed(doc.text)
            except ProviderError as exc:
                logger.error("Failed to embed document %s: %s", doc.id, exc)
                doc.embedding = None
                failed.append(EmbeddingFailure(doc_id=doc.id, error=str(exc)))
                continue
            embedded.append(doc.id)

        report = WarmReport(
            loaded=len(documents),
            usable=sum(1 for d in documents if is_usable(d, self.min_dimensions)),
            skipped=loaded.skipped,
            embedded=embedded,
            failed=failed,
        )
        return documents, report
