"""Shared fixtures for the test suite."""

from pathlib import Path

import pytest

from fontes_qa.models import Document

from helpers import StubEmbedder, one_hot, write_record


@pytest.fixture
def stub_embedder() -> StubEmbedder:
    return StubEmbedder(
        {
            "Prazo de entrega do IRS": one_hot(0),
            "Renovação do cartão de cidadão": one_hot(1),
            "Quando entrego o IRS?": one_hot(0),
        }
    )


@pytest.fixture
def docs_dir(tmp_path: Path) -> Path:
    """Create a corpus directory with two records lacking embeddings."""
    d = tmp_path / "data"
    d.mkdir()
    write_record(
        d,
        "irs.json",
        id="irs",
        title="IRS 2024",
        url="https://example.gov.pt/irs",
        text="Prazo de entrega do IRS",
        embedding=None,
    )
    write_record(
        d,
        "cc.json",
        id="cc",
        title="Cartão de Cidadão",
        url="https://example.gov.pt/cc",
        text="Renovação do cartão de cidadão",
    )
    return d


@pytest.fixture
def sample_documents() -> list[Document]:
    return [
        Document(id="a", title="A", url="https://a", text="alpha", embedding=one_hot(0)),
        Document(id="b", title="B", url="https://b", text="beta", embedding=one_hot(1)),
        Document(id="c", title="C", url="https://c", text="gamma", embedding=None),
    ]
