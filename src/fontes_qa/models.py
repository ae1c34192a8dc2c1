"""Domain models for the question-answering pipeline."""

from dataclasses import dataclass, field


@dataclass
class Document:
    """A corpus document.

    Only ``embedding`` changes after loading: it is filled in the first
    time the corpus cache is warmed, or set to ``None`` when the
    embedding provider fails for this document.
    """

    id: str
    title: str
    url: str
    text: str
    embedding: list[float] | None = None


@dataclass(frozen=True)
class ScoredDocument:
    """A document paired with its similarity to the question."""

    document: Document
    score: float


@dataclass(frozen=True)
class Source:
    """A source offered to the model, reported back to the caller."""

    title: str
    url: str


@dataclass(frozen=True)
class Answer:
    """The final response from the pipeline."""

    answer: str
    sources: list[Source] = field(default_factory=list)


@dataclass(frozen=True)
class SkippedRecord:
    """A corpus file that did not produce a document."""

    filename: str
    reason: str
    missing_field: str | None = None


@dataclass(frozen=True)
class RecordValidation:
    """Outcome of validating one parsed record.

    Exactly one of ``document`` and ``reason`` is set.
    """

    document: Document | None = None
    missing_field: str | None = None
    reason: str | None = None

    @property
    def is_valid(self) -> bool:
        return self.document is not None


@dataclass(frozen=True)
class LoadReport:
    """Documents parsed from a corpus directory plus the files skipped."""

    documents: list[Document] = field(default_factory=list)
    skipped: list[SkippedRecord] = field(default_factory=list)
    folder_exists: bool = True


@dataclass(frozen=True)
class EmbeddingFailure:
    """A document whose embedding could not be generated."""

    doc_id: str
    error: str


@dataclass(frozen=True)
class WarmReport:
    """Summary of one corpus warm-up."""

    loaded: int = 0
    usable: int = 0
    skipped: list[SkippedRecord] = field(default_factory=list)
    embedded: list[str] = field(default_factory=list)
    failed: list[EmbeddingFailure] = field(default_factory=list)
