"""Test doubles and record builders shared across the suite."""

import json
from pathlib import Path

from fontes_qa.errors import ProviderError

DIM = 10


def one_hot(index: int, dim: int = DIM) -> list[float]:
    vec = [0.0] * dim
    vec[index] = 1.0
    return vec


class StubEmbedder:
    """Embedding provider double: fixed vectors per text, records calls."""

    def __init__(self, vectors: dict[str, list[float]] | None = None, fail_on=()):
        self.vectors = vectors or {}
        self.fail_on = set(fail_on)
        self.calls: list[str] = []

    def embed(self, text: str) -> list[float]:
        self.calls.append(text)
        if text in self.fail_on:
            raise ProviderError("stub", f"cannot embed {text!r}")
        return list(self.vectors.get(text, one_hot(DIM - 1)))


def write_record(folder: Path, filename: str, **fields) -> Path:
    path = folder / filename
    path.write_text(json.dumps(fields, ensure_ascii=False), encoding="utf-8")
    return path
