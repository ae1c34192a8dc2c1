"""FastAPI web interface for the question-answering service."""

import logging
from contextlib import asynccontextmanager

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from fontes_qa import rag_engine
from fontes_qa.config import AppConfig
from fontes_qa.corpus import CorpusCache
from fontes_qa.embeddings import get_embedding_provider
from fontes_qa.errors import CorpusUnavailable, InputError, ProviderError

logger = logging.getLogger(__name__)

_config = AppConfig()


@asynccontextmanager
async def lifespan(application: FastAPI):
    """Build the embedding provider and the (cold) corpus cache on startup."""
    embedder = get_embedding_provider(_config.embedding)
    application.state.embedder = embedder
    application.state.corpus = CorpusCache(
        _config.corpus.documents_dir,
        embedder,
        min_dimensions=_config.corpus.min_embedding_dim,
    )
    logger.info("Corpus cache created for %s", _config.corpus.documents_dir)
    yield


app = FastAPI(
    title="Fontes QA",
    lifespan=lifespan,
    docs_url="/api/docs",
    openapi_url="/api/openapi.json",
)

router = APIRouter(prefix="/api")


@app.exception_handler(RequestValidationError)
async def _invalid_body(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"detail": "Pergunta vazia"})


def get_corpus(request: Request) -> CorpusCache | None:
    """FastAPI dependency — return the corpus cache from app state."""
    return getattr(request.app.state, "corpus", None)


def get_embedder(request: Request):
    """FastAPI dependency — return the embedding provider from app state."""
    return getattr(request.app.state, "embedder", None)


class AskRequest(BaseModel):
    question: str | None = None


class SourceResponse(BaseModel):
    title: str
    url: str


class AskResponse(BaseModel):
    answer: str
    sources: list[SourceResponse]


class HealthResponse(BaseModel):
    status: str
    ollama_connected: bool
    documents: int
    usable: int


class StatusResponse(BaseModel):
    corpus_state: str
    documents_dir: str
    documents: int
    usable: int
    skipped: int
    embedded: int
    failed: int
    model: str
    embedding_provider: str


def _ollama_connected() -> bool:
    try:
        import ollama

        ollama.list()
    except Exception:
        return False
    return True


@router.get("/health", response_model=HealthResponse)
async def api_health(corpus=Depends(get_corpus)):
    connected = _ollama_connected()
    return HealthResponse(
        status="healthy" if connected else "degraded",
        ollama_connected=connected,
        documents=len(corpus.documents) if corpus else 0,
        usable=len(corpus.usable_documents()) if corpus else 0,
    )


@router.get("/status", response_model=StatusResponse)
async def api_status(corpus=Depends(get_corpus)):
    report = corpus.report if corpus else None
    return StatusResponse(
        corpus_state=corpus.state.value if corpus else "uninitialized",
        documents_dir=_config.corpus.documents_dir,
        documents=len(corpus.documents) if corpus else 0,
        usable=len(corpus.usable_documents()) if corpus else 0,
        skipped=len(report.skipped) if report else 0,
        embedded=len(report.embedded) if report else 0,
        failed=len(report.failed) if report else 0,
        model=_config.llm.model,
        embedding_provider=_config.embedding.provider,
    )


@router.post("/ask", response_model=AskResponse)
def api_ask(
    body: AskRequest,
    corpus=Depends(get_corpus),
    embedder=Depends(get_embedder),
):
    question = body.question or ""
    if not question.strip():
        raise HTTPException(status_code=400, detail="Pergunta vazia")

    if corpus is None or embedder is None:
        raise HTTPException(status_code=500, detail="Corpus not initialized.")

    try:
        corpus.require_documents()
        response = rag_engine.ask(question, corpus, embedder, config=_config)
    except InputError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except CorpusUnavailable as exc:
        logger.error("No corpus: %s", exc)
        raise HTTPException(status_code=500, detail=str(exc))
    except ProviderError as exc:
        logger.error("Provider failure on /api/ask: %s", exc)
        raise HTTPException(status_code=500, detail=str(exc))
    except (ValueError, NotADirectoryError) as exc:
        logger.error("Corpus error on /api/ask: %s", exc)
        raise HTTPException(status_code=500, detail=str(exc))

    sources = [SourceResponse(title=s.title, url=s.url) for s in response.sources]
    return AskResponse(answer=response.answer, sources=sources)


app.include_router(router)
